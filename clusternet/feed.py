"""Feeds: references to the objects a subscription distributes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

from . import known
from .patch import JsonPatchOption

FEED_PATCH_PATH = "/spec/feeds"


@dataclass(frozen=True)
class Feed:
    """A reference to an object by kind, API version, namespace and name."""

    kind: str = ""
    api_version: str = ""
    namespace: str = ""
    name: str = ""


def parse_group_version(api_version: str) -> tuple[str, str]:
    """Split an API version such as "apps/v1" into (group, version).

    Raises ValueError when the string holds more than one slash.
    """
    if not api_version or api_version == "/":
        return "", ""
    slashes = api_version.count("/")
    if slashes == 0:
        return "", api_version
    if slashes == 1:
        group, version = api_version.split("/")
        return group, version
    raise ValueError(f"unexpected GroupVersion string: {api_version}")


def labels_from_feed(feed: Feed) -> dict[str, str]:
    """Return the labels that identify the source object of a feed."""
    group, version = parse_group_version(feed.api_version)
    labels = {
        known.CONFIG_GROUP_LABEL: group,
        known.CONFIG_VERSION_LABEL: version,
        known.CONFIG_KIND_LABEL: feed.kind,
        known.CONFIG_NAME_LABEL: feed.name,
    }
    if feed.namespace:
        labels[known.CONFIG_NAMESPACE_LABEL] = feed.namespace
    return labels


def feed_matches(feed: Feed, labels: Mapping[str, str]) -> bool:
    """Tell whether ``labels`` carry every label that selects this feed."""
    return all(key in labels and labels[key] == value for key, value in labels_from_feed(feed).items())


def format_feed(feed: Feed) -> str:
    """Render a feed as "Kind namespace/name", or "Kind name" without a namespace."""
    namespaced_name = f"{feed.namespace}/{feed.name}" if feed.namespace else feed.name
    return f"{feed.kind} {namespaced_name}"


def find_obsoleted_feeds(old_feeds: Iterable[Feed], new_feeds: Iterable[Feed]) -> list[Feed]:
    """Return the old feeds that no longer appear among the new ones."""
    desired = {format_feed(feed) for feed in new_feeds}
    return [feed for feed in old_feeds if format_feed(feed) not in desired]


def has_feed(feed: Feed, feeds: Iterable[Feed]) -> bool:
    """Tell whether a feed with the same kind, namespace and name is present."""
    return any(
        f.kind == feed.kind and f.namespace == feed.namespace and f.name == feed.name for f in feeds
    )


def feed_removal_patch(feeds: Iterable[Feed], source_labels: Mapping[str, str]) -> list[JsonPatchOption]:
    """Build JSON patch operations removing every feed that selects ``source_labels``."""
    return [
        JsonPatchOption(op="remove", path=f"{FEED_PATCH_PATH}/{index}")
        for index, feed in enumerate(feeds)
        if feed_matches(feed, source_labels)
    ]