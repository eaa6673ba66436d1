"""Shadow API resources: templates stored as Manifests in the hub."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from . import known

CORE_GROUP_PREFIX = "api"
NAMED_GROUP_PREFIX = "apis"

DEFAULT_DELETE_COLLECTION_WORKERS = 2
"""Default number of parallel deletions in a single collection delete."""

SCALE_KIND = "Scale"


@dataclass
class ShadowResource:
    """One resource served through the shadow API, backed by Manifests.

    ``name`` is the plural resource name, possibly with a subresource
    ("deployments/scale"). ``manifest_exists`` tells whether a Manifest of
    a given name is already stored; it is used to keep legacy names working.
    """

    name: str
    kind: str
    group: str = ""
    version: str = ""
    namespaced: bool = True
    short_names: list[str] = field(default_factory=list)
    manifest_exists: Callable[[str], bool] | None = None
    delete_collection_workers: int = DEFAULT_DELETE_COLLECTION_WORKERS

    @property
    def categories(self) -> list[str]:
        return [known.CATEGORY]

    def resource_name(self) -> tuple[str, str]:
        """Split the name into (resource, subresource); subresource is "" if absent."""
        if "/" in self.name:
            parts = self.name.split("/")
            return parts[0], parts[1]
        return self.name, ""

    def list_kind(self) -> str:
        """The kind of a list of these objects; subresources keep the plain kind."""
        if "/" in self.name:
            return self.kind
        return f"{self.kind}List"

    def manifest_name(self, namespace: str, name: str) -> str:
        """Name of the Manifest holding an object.

        A Manifest stored under the legacy name is still used when it exists.
        """
        legacy = self.legacy_manifest_name(namespace, name)
        if self.manifest_exists is not None and self.manifest_exists(legacy):
            return legacy
        resource, _ = self.resource_name()
        # resource and namespace never contain ".", so it is a safe separator
        if self.namespaced:
            return f"{resource}.{namespace}.{name}"
        return f"{resource}.{name}"

    def legacy_manifest_name(self, namespace: str, name: str) -> str:
        """The older hyphen-joined Manifest name, which can collide between objects."""
        resource, _ = self.resource_name()
        if self.namespaced:
            return f"{resource}-{namespace}-{name}"
        return f"{resource}-{name}"

    def group_version_kind(self) -> tuple[str, str, str]:
        """The original (group, version, kind) of the resource."""
        return self.group, self.version, self.kind

    def manifest_labels(self, obj: Mapping[str, Any]) -> dict[str, str]:
        """Labels for the Manifest storing ``obj``: its own labels plus source labels.

        The kind label is left out for Scale subresources.
        """
        metadata = obj.get("metadata") if isinstance(obj.get("metadata"), Mapping) else {}
        own_labels = metadata.get("labels") if isinstance(metadata.get("labels"), Mapping) else {}
        labels = dict(own_labels)
        labels[known.CONFIG_GROUP_LABEL] = self.group
        labels[known.CONFIG_VERSION_LABEL] = self.version
        if self.kind != SCALE_KIND:
            labels[known.CONFIG_KIND_LABEL] = self.kind
        labels[known.CONFIG_NAME_LABEL] = metadata.get("name", "") or ""
        labels[known.CONFIG_NAMESPACE_LABEL] = metadata.get("namespace", "") or ""
        return labels