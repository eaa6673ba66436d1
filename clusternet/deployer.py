"""Deciding who deploys an application and preparing what gets deployed."""

from __future__ import annotations

import copy
import enum
import json
import logging
from dataclasses import dataclass
from typing import Any, Iterable

from .unstructured import nested_string, set_nested_field

logger = logging.getLogger(__name__)

CAUSE_TYPE_FIELD_VALUE_INVALID = "FieldValueInvalid"
"""Cause type reported for a field whose new value was rejected, e.g. an immutable one."""


class SyncMode(str, enum.Enum):
    """How a child cluster receives its applications."""

    PUSH = "Push"
    PULL = "Pull"
    DUAL = "Dual"


@dataclass(frozen=True)
class StatusCause:
    """One reason an API request was rejected."""

    type: str = ""
    field: str = ""
    message: str = ""


def deployable_by_agent(sync_mode: SyncMode | str, app_pusher_enabled: bool) -> bool:
    """Tell whether the agent in the child cluster deploys the applications.

    Unknown sync modes are logged and treated as not deployable.
    """
    try:
        mode = SyncMode(sync_mode)
    except ValueError:
        logger.error("unknown syncMode %s", sync_mode)
        return False
    if mode is SyncMode.PUSH:
        return False
    if mode is SyncMode.PULL:
        return True
    return not app_pusher_enabled


def generate_helm_release_name(desc_name: str, chart_namespace: str, chart_name: str) -> str:
    """Name of the HelmRelease created for one chart of a Description."""
    return f"{desc_name}-{chart_namespace}-{chart_name}"


def parse_override_values(raw: bytes | str | None) -> dict[str, Any] | None:
    """Decode Helm override values; blank input gives None.

    Raises ValueError when the input is not a JSON object.
    """
    if raw is None:
        return None
    text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
    if not text.strip():
        return None
    try:
        values = json.loads(text)
    except json.JSONDecodeError as err:
        raise ValueError(f"invalid override values: {err}") from err
    if values is None:
        return None
    if not isinstance(values, dict):
        raise ValueError(
            f"override values must be a JSON object, got {type(values).__name__}"
        )
    return values


def apply_immutable_fields(
    resource: dict[str, Any],
    current: dict[str, Any],
    causes: Iterable[StatusCause],
) -> dict[str, Any]:
    """Return a copy of ``resource`` carrying the live values of rejected fields.

    For every cause of type FieldValueInvalid, the dotted field path is read
    from ``current`` as a string ("" when missing) and written into the copy.
    """
    result = copy.deepcopy(resource) if resource is not None else {}
    for cause in causes:
        if cause.type != CAUSE_TYPE_FIELD_VALUE_INVALID:
            continue
        fields = cause.field.split(".")
        try:
            set_nested_field(result, nested_string(current, *fields), *fields)
        except (TypeError, ValueError) as err:
            logger.warning("failed to set nested field: %s", err)
    return result