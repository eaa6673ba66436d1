"""Reading and writing nested fields of JSON-like objects."""

from __future__ import annotations

import copy
from typing import Any


def _json_path(fields: tuple[str, ...]) -> str:
    return "." + ".".join(fields)


def nested_field(obj: dict[str, Any], *fields: str) -> tuple[Any, bool]:
    """Return ``(value, found)`` for the field at the given path.

    The value is returned as stored, not copied. Raises TypeError when a
    step of the path runs into something that is not a mapping.
    """
    node: Any = obj
    for index, field in enumerate(fields):
        if not isinstance(node, dict):
            raise TypeError(
                f"{_json_path(fields[: index + 1])} accessor error: {node!r} is of the type "
                f"{type(node).__name__}, expected a mapping"
            )
        if field not in node:
            return None, False
        node = node[field]
    return node, True


def nested_string(obj: dict[str, Any], *fields: str) -> str:
    """Return the string at the given path, or "" if it is missing or not a string."""
    try:
        value, found = nested_field(obj, *fields)
    except TypeError:
        return ""
    if not found or not isinstance(value, str):
        return ""
    return value


def nested_slice(obj: dict[str, Any], *fields: str) -> tuple[list[Any] | None, bool]:
    """Return ``(copy_of_list, found)`` for the list at the given path.

    Raises TypeError when the path cannot be followed or the value is not a list.
    """
    value, found = nested_field(obj, *fields)
    if not found:
        return None, False
    if not isinstance(value, list):
        raise TypeError(
            f"{_json_path(fields)} accessor error: {value!r} is of the type "
            f"{type(value).__name__}, expected a list"
        )
    return copy.deepcopy(value), True


def set_nested_field(obj: dict[str, Any], value: Any, *fields: str) -> None:
    """Store a copy of ``value`` at the given path, creating mappings on the way.

    Raises TypeError when an existing step of the path is not a mapping.
    """
    if not fields:
        raise ValueError("at least one field is required")
    node = obj
    for index, field in enumerate(fields[:-1]):
        if field in node:
            child = node[field]
            if not isinstance(child, dict):
                raise TypeError(
                    f"value cannot be set because {_json_path(fields[: index + 1])} is not a mapping"
                )
            node = child
        else:
            child = {}
            node[field] = child
            node = child
    node[fields[-1]] = copy.deepcopy(value)


def remove_nested_field(obj: dict[str, Any], *fields: str) -> None:
    """Delete the field at the given path; a path that cannot be followed is ignored."""
    if not fields:
        raise ValueError("at least one field is required")
    node: Any = obj
    for field in fields[:-1]:
        if not isinstance(node, dict):
            return
        node = node.get(field)
    if isinstance(node, dict):
        node.pop(fields[-1], None)