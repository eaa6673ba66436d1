"""Applying Helm, JSON-patch and merge-patch overrides to documents."""

from __future__ import annotations

import copy
import enum
import json
import logging
from dataclasses import dataclass
from typing import Any, Iterable

import yaml

logger = logging.getLogger(__name__)

MAX_JSON_PATCH_OPERATIONS = 10000
"""Maximum number of operations a single JSON patch may contain."""


class OverrideType(str, enum.Enum):
    HELM = "Helm"
    JSON_PATCH = "JSONPatch"
    MERGE_PATCH = "MergePatch"


@dataclass
class OverrideConfig:
    """One named override of a given type, written in YAML or JSON."""

    name: str = ""
    value: str = ""
    type: OverrideType | str = OverrideType.HELM


class OverrideError(Exception):
    """An override could not be parsed or applied."""


class _Loader(yaml.SafeLoader):
    """Safe YAML loading that leaves timestamps as plain strings."""


_Loader.yaml_implicit_resolvers = {
    key: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:timestamp"]
    for key, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _yaml_to_json(text: str) -> bytes:
    return _dump(yaml.load(text, Loader=_Loader))


def _load(data: bytes | str, what: str) -> Any:
    try:
        return json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as err:
        raise OverrideError(f"invalid JSON {what}: {err}") from err


def _dump(value: Any) -> bytes:
    return json.dumps(value, separators=(",", ":"), sort_keys=True, ensure_ascii=False).encode(
        "utf-8"
    )


def _is_blank(data: bytes | str) -> bool:
    if isinstance(data, bytes):
        return not data.strip()
    return not data.strip()


def apply_overrides(original: bytes | str, overrides: Iterable[OverrideConfig]) -> bytes | str:
    """Apply overrides in order; blank overrides are skipped.

    While the document is still blank, the first non-blank override becomes it.
    """
    result: bytes | str = original
    for override in overrides:
        if _is_blank(override.value):
            continue
        try:
            override_bytes = _yaml_to_json(override.value)
        except (yaml.YAMLError, TypeError, ValueError) as err:
            raise OverrideError(f"failed to convert patch {override.value} to JSON: {err}") from err

        if _is_blank(result):
            result = override_bytes
            continue

        try:
            override_type = OverrideType(override.type)
        except ValueError:
            raise OverrideError(f"unsupported OverrideType {override.type}") from None

        appliers = {
            OverrideType.HELM: apply_helm_override,
            OverrideType.JSON_PATCH: apply_json_patch,
            OverrideType.MERGE_PATCH: merge_patch,
        }
        try:
            result = appliers[override_type](result, override_bytes)
        except OverrideError as err:
            raise OverrideError(f"failed to apply OverrideConfig {override.name}: {err}") from err
    return result


def _parse_pointer(path: Any) -> list[str]:
    if not isinstance(path, str):
        raise OverrideError(f"invalid JSON pointer {path!r}")
    if path == "":
        return []
    if not path.startswith("/"):
        raise OverrideError(f"invalid JSON pointer {path!r}")
    return [token.replace("~1", "/").replace("~0", "~") for token in path[1:].split("/")]


def _index(token: str, length: int, allow_end: bool = False) -> int:
    if allow_end and token == "-":
        return length
    if not token.isdigit():
        raise OverrideError(f"invalid array index {token!r}")
    index = int(token)
    limit = length if allow_end else length - 1
    if index > limit:
        raise OverrideError(f"array index {index} out of bounds")
    return index


def _get(doc: Any, tokens: list[str]) -> Any:
    node = doc
    for token in tokens:
        if isinstance(node, dict):
            if token not in node:
                raise OverrideError(f"doc is missing key {token!r}")
            node = node[token]
        elif isinstance(node, list):
            node = node[_index(token, len(node))]
        else:
            raise OverrideError(f"cannot descend into {token!r}")
    return node


def _add(doc: Any, tokens: list[str], value: Any) -> Any:
    if not tokens:
        return value
    parent = _get(doc, tokens[:-1])
    key = tokens[-1]
    if isinstance(parent, dict):
        parent[key] = value
    elif isinstance(parent, list):
        parent.insert(_index(key, len(parent), allow_end=True), value)
    else:
        raise OverrideError(f"add operation does not apply: cannot add {key!r}")
    return doc


def _remove(doc: Any, tokens: list[str]) -> tuple[Any, Any]:
    if not tokens:
        raise OverrideError("remove operation does not apply to the whole document")
    parent = _get(doc, tokens[:-1])
    key = tokens[-1]
    if isinstance(parent, dict):
        if key not in parent:
            raise OverrideError(f"remove operation does not apply: doc is missing key {key!r}")
        return doc, parent.pop(key)
    if isinstance(parent, list):
        return doc, parent.pop(_index(key, len(parent)))
    raise OverrideError(f"remove operation does not apply: cannot remove {key!r}")


def _replace(doc: Any, tokens: list[str], value: Any) -> Any:
    if not tokens:
        return value
    parent = _get(doc, tokens[:-1])
    key = tokens[-1]
    if isinstance(parent, dict):
        if key not in parent:
            raise OverrideError(f"replace operation does not apply: doc is missing key {key!r}")
        parent[key] = value
    elif isinstance(parent, list):
        parent[_index(key, len(parent))] = value
    else:
        raise OverrideError(f"replace operation does not apply: cannot replace {key!r}")
    return doc


def _value(operation: dict[str, Any]) -> Any:
    if "value" not in operation:
        raise OverrideError(f"operation {operation.get('op')!r} is missing a value")
    return operation["value"]


def _apply_operation(doc: Any, operation: Any) -> Any:
    if not isinstance(operation, dict):
        raise OverrideError(f"invalid JSON patch operation {operation!r}")
    op = operation.get("op")
    tokens = _parse_pointer(operation.get("path"))
    if op == "add":
        return _add(doc, tokens, _value(operation))
    if op == "remove":
        return _remove(doc, tokens)[0]
    if op == "replace":
        return _replace(doc, tokens, _value(operation))
    if op == "move":
        doc, moved = _remove(doc, _parse_pointer(operation.get("from")))
        return _add(doc, tokens, moved)
    if op == "copy":
        copied = copy.deepcopy(_get(doc, _parse_pointer(operation.get("from"))))
        return _add(doc, tokens, copied)
    if op == "test":
        if _get(doc, tokens) != _value(operation):
            raise OverrideError(f"testing value {operation.get('path')} failed")
        return doc
    raise OverrideError(f"unexpected operation {op!r}")


def apply_json_patch(current: bytes | str, patch: bytes | str) -> bytes:
    """Apply an RFC 6902 JSON patch to a JSON document."""
    operations = _load(patch, "patch")
    if not isinstance(operations, list):
        raise OverrideError("a JSON patch must be an array of operations")
    if len(operations) > MAX_JSON_PATCH_OPERATIONS:
        raise OverrideError(
            f"the allowed maximum operations in a JSON patch is {MAX_JSON_PATCH_OPERATIONS}, "
            f"got {len(operations)}"
        )
    doc = _load(current, "document")
    for operation in operations:
        doc = _apply_operation(doc, operation)
    return _dump(doc)


def _merge(target: Any, patch: Any) -> Any:
    if not isinstance(patch, dict):
        return patch
    result = dict(target) if isinstance(target, dict) else {}
    for key, value in patch.items():
        if value is None:
            result.pop(key, None)
        else:
            result[key] = _merge(result.get(key), value)
    return result


def merge_patch(original: bytes | str, patch: bytes | str) -> bytes:
    """Apply an RFC 7386 JSON merge patch to a JSON document."""
    return _dump(_merge(_load(original, "document"), _load(patch, "patch")))


def coalesce_tables(dst: dict[str, Any] | None, src: dict[str, Any] | None) -> dict[str, Any] | None:
    """Merge ``src`` into ``dst``; values already in ``dst`` win.

    A key set to None in ``dst`` is deleted. ``dst`` is changed in place.
    """
    if dst is None or src is None:
        return src
    for key, value in src.items():
        if key in dst and dst[key] is None:
            del dst[key]
        elif key not in dst:
            dst[key] = value
        elif isinstance(value, dict):
            if isinstance(dst[key], dict):
                coalesce_tables(dst[key], value)
            else:
                logger.warning("cannot overwrite table with non table for %s (%s)", key, value)
        elif isinstance(dst[key], dict):
            logger.warning("destination for %s is a table. Ignoring non-table value %s", key, value)
    return dst


def apply_helm_override(current: bytes | str, override: bytes | str) -> bytes:
    """Coalesce Helm values: the override takes precedence over the current values."""
    current_obj = _load(current, "document")
    override_values = _load(override, "override")
    for value in (current_obj, override_values):
        if value is not None and not isinstance(value, dict):
            raise OverrideError(f"helm values must be an object, got {type(value).__name__}")
    return _dump(coalesce_tables(override_values, current_obj))