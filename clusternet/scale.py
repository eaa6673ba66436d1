"""The scale subresource of shadow objects."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Any, Mapping

from .unstructured import nested_field, set_nested_field

logger = logging.getLogger(__name__)

SCALE_KIND = "Scale"

_SCALE_GROUP_VERSIONS = frozenset({"extensions/v1beta1", "apps/v1beta1", "apps/v1beta2"})
_DEFAULT_SCALE_GROUP_VERSION = "autoscaling/v1"

SUPPORTED_SUBRESOURCES = frozenset({"scale"})
"""Subresources of shadow objects that may be updated."""


@dataclass
class Scale:
    """The desired and observed replica counts of an object, with its identity."""

    name: str = ""
    namespace: str = ""
    uid: str = ""
    resource_version: str = ""
    creation_timestamp: str | None = None
    spec_replicas: int = 0
    status_replicas: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Return the object in its autoscaling/v1 wire layout."""
        metadata: dict[str, Any] = {"name": self.name}
        if self.namespace:
            metadata["namespace"] = self.namespace
        if self.uid:
            metadata["uid"] = self.uid
        if self.resource_version:
            metadata["resourceVersion"] = self.resource_version
        metadata["creationTimestamp"] = self.creation_timestamp
        return {
            "apiVersion": _DEFAULT_SCALE_GROUP_VERSION,
            "kind": SCALE_KIND,
            "metadata": metadata,
            "spec": {"replicas": self.spec_replicas} if self.spec_replicas else {},
            "status": {"replicas": self.status_replicas},
        }


def _split_group_version(group_version: str | tuple[str, str]) -> tuple[str, str]:
    if isinstance(group_version, tuple):
        return group_version
    if "/" in group_version:
        group, _, version = group_version.partition("/")
        return group, version
    return "", group_version


def scale_group_version_kind(containing_group_version: str | tuple[str, str]) -> tuple[str, str, str]:
    """The (group, version, kind) of Scale served within the given group version.

    Legacy extensions and apps versions have their own Scale; any other
    group version gets autoscaling/v1.
    """
    group, version = _split_group_version(containing_group_version)
    joined = f"{group}/{version}" if group else version
    if joined in _SCALE_GROUP_VERSIONS:
        return group, version, SCALE_KIND
    default_group, default_version = _split_group_version(_DEFAULT_SCALE_GROUP_VERSION)
    return default_group, default_version, SCALE_KIND


def _to_int32(value: int) -> int:
    return ((value + 2**31) % 2**32) - 2**31


def _replicas(obj: Mapping[str, Any], *fields: str) -> int:
    path = ".".join(fields)
    try:
        value, found = nested_field(dict(obj), *fields)
    except TypeError as err:
        logger.error("failed to get %s: %s", path, err)
        return 0
    if not found:
        logger.warning("unable to get %s", path)
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        logger.error(
            "failed to get %s: %r is of the type %s, expected int64",
            path,
            value,
            type(value).__name__,
        )
        return 0
    return _to_int32(value)


def scale_from_object(obj: Mapping[str, Any]) -> Scale:
    """Build a Scale from an object's metadata and its spec and status replicas.

    Missing or malformed replica counts are logged and read as 0.
    """
    metadata = obj.get("metadata")
    metadata = metadata if isinstance(metadata, Mapping) else {}

    def text(key: str) -> str:
        value = metadata.get(key)
        return value if isinstance(value, str) else ""

    created = metadata.get("creationTimestamp")
    return Scale(
        name=text("name"),
        namespace=text("namespace"),
        uid=text("uid"),
        resource_version=text("resourceVersion"),
        creation_timestamp=created if isinstance(created, str) else None,
        spec_replicas=_replicas(obj, "spec", "replicas"),
        status_replicas=_replicas(obj, "status", "replicas"),
    )


def apply_scale(obj: Mapping[str, Any], scale: Scale | None) -> dict[str, Any]:
    """Return a copy of ``obj`` with spec.replicas taken from ``scale``.

    Raises ValueError for a missing scale, TypeError for one that is not a
    Scale or when spec is not a mapping.
    """
    if scale is None:
        raise ValueError("nil update passed to Scale")
    if not isinstance(scale, Scale):
        raise TypeError(f"expected input object type to be Scale, but {type(scale).__name__}")
    result = copy.deepcopy(dict(obj))
    set_nested_field(result, int(scale.spec_replicas), "spec", "replicas")
    return result


def check_subresource_update(resource_name: str) -> tuple[str, str]:
    """Split ``resource_name`` and refuse updates to unsupported subresources.

    Shadow objects are templates, so only the scale subresource may be
    updated. Returns (resource, subresource); raises ValueError otherwise.
    """
    if "/" in resource_name:
        parts = resource_name.split("/")
        resource, subresource = parts[0], parts[1]
    else:
        resource, subresource = resource_name, ""
    if subresource and subresource not in SUPPORTED_SUBRESOURCES:
        raise ValueError(
            f"{resource} are considered as templates, which make no sense to update "
            f"templates' {subresource}"
        )
    return resource, subresource