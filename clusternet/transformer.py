"""Turning stored Manifests back into the objects they hold."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from . import known
from .unstructured import remove_nested_field, set_nested_field


@dataclass
class Manifest:
    """A stored template object together with the metadata of its Manifest."""

    name: str = ""
    namespace: str = ""
    template: bytes | str = b""
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    generation: int = 0
    creation_timestamp: datetime | None = None
    resource_version: str = ""
    uid: str = ""
    deletion_grace_period_seconds: int | None = None
    deletion_timestamp: datetime | None = None
    finalizers: list[str] | None = None


def _format_time(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


def _set_or_remove(obj: dict[str, Any], key: str, value: Any, empty: bool) -> None:
    if empty:
        remove_nested_field(obj, "metadata", key)
    else:
        set_nested_field(obj, value, "metadata", key)


def transform_manifest(manifest: Manifest) -> dict[str, Any]:
    """Decode a Manifest's template and give it the Manifest's own metadata.

    Raises ValueError when the template is not a JSON object.
    """
    try:
        result = json.loads(manifest.template)
    except (json.JSONDecodeError, UnicodeDecodeError) as err:
        raise ValueError(f"Internal error occurred: {err}") from err
    if not isinstance(result, dict):
        raise ValueError(
            f"Internal error occurred: template is a {type(result).__name__}, not an object"
        )
    metadata = result.get("metadata")
    if metadata is not None and not isinstance(metadata, dict):
        raise ValueError("Internal error occurred: template metadata is not an object")

    _set_or_remove(result, "generation", manifest.generation, manifest.generation == 0)
    ts = manifest.creation_timestamp
    _set_or_remove(result, "creationTimestamp", ts and _format_time(ts), ts is None)
    _set_or_remove(
        result, "resourceVersion", manifest.resource_version, not manifest.resource_version
    )
    _set_or_remove(result, "uid", manifest.uid, not manifest.uid)
    _set_or_remove(
        result,
        "deletionGracePeriodSeconds",
        manifest.deletion_grace_period_seconds,
        manifest.deletion_grace_period_seconds is None,
    )
    ts = manifest.deletion_timestamp
    _set_or_remove(result, "deletionTimestamp", ts and _format_time(ts), ts is None)
    _set_or_remove(
        result,
        "finalizers",
        list(manifest.finalizers or []),
        manifest.finalizers is None,
    )

    annotations = result.get("metadata", {}).get("annotations")
    annotations = dict(annotations) if isinstance(annotations, dict) else None
    if known.FEED_PROTECTION_ANNOTATION in manifest.annotations:
        annotations = annotations if annotations is not None else {}
        annotations[known.FEED_PROTECTION_ANNOTATION] = manifest.annotations[
            known.FEED_PROTECTION_ANNOTATION
        ]
    _set_or_remove(result, "annotations", annotations, annotations is None)
    return result