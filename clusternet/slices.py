"""Helpers for lists of strings."""

from __future__ import annotations


def copy_strings(s: list[str] | None) -> list[str] | None:
    """Return a new list with the same items, or None when given None."""
    if s is None:
        return None
    return list(s)


def sort_strings(s: list[str]) -> list[str]:
    """Sort the list in place and return that same list."""
    s.sort()
    return s


def contains_string(items: list[str] | None, s: str) -> bool:
    """Tell whether ``s`` is among ``items``."""
    return s in (items or ())


def remove_string(items: list[str] | None, s: str) -> list[str] | None:
    """Return a new list without any item equal to ``s``; None if nothing is left."""
    remaining = [item for item in items or () if item != s]
    return remaining or None