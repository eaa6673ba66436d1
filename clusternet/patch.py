"""Patch documents for labels, annotations and JSON patch operations."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any


def _dumps(value: Any) -> str:
    """Compact JSON with HTML-sensitive characters escaped."""
    text = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return (
        text.replace("<", "\\u003c")
        .replace(">", "\\u003e")
        .replace("&", "\\u0026")
        .replace("\u2028", "\\u2028")
        .replace("\u2029", "\\u2029")
    )


@dataclass
class MetaOption:
    """A merge patch touching only metadata labels and annotations.

    A value of None for a key removes that label or annotation.
    """

    labels: dict[str, str | None] | None = None
    annotations: dict[str, str | None] | None = None

    def to_json(self) -> str:
        metadata: dict[str, Any] = {}
        if self.labels:
            metadata["labels"] = dict(sorted(self.labels.items()))
        if self.annotations:
            metadata["annotations"] = dict(sorted(self.annotations.items()))
        return _dumps({"metadata": metadata})


@dataclass
class JsonPatchOption:
    """One operation of a JSON patch document."""

    op: str
    path: str
    value: Any = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"op": self.op, "path": self.path}
        if self.value is not None:
            result["value"] = self.value
        return result


def labels_and_annotations_patch(
    labels: dict[str, str | None] | None,
    annotations: dict[str, str | None] | None,
) -> bytes | None:
    """Build the merge patch body for labels and annotations.

    Returns None when neither labels nor annotations are given.
    """
    if labels is None and annotations is None:
        return None
    return MetaOption(labels=labels, annotations=annotations).to_json().encode("utf-8")