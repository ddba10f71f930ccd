"""Dot-path access over nested cache documents.

A document is a ``dict`` whose values are either nodes (further dicts) or
leaves (scalars, lists, tuples). Keys such as ``"user.profile.name"`` are
split on ``.`` and walked from the root. Nothing here touches storage.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Any

from dotcache.exceptions import InvalidKeyError

SEPARATOR = "."


class _Missing:
    """Marker for a path that resolves to nothing."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


class NodeKind(Enum):
    """Structural role of a value inside a document."""

    NODE = auto()
    LEAF = auto()


def kind_of(value: Any) -> NodeKind:
    """Classify a value. Only dicts are traversable; lists are leaves."""
    if isinstance(value, dict):
        return NodeKind.NODE
    return NodeKind.LEAF


def is_truthy(value: Any) -> bool:
    """Truthiness used by :func:`remove`.

    ``None``, ``False``, zero, NaN and ``""`` are falsy. Empty dicts and
    lists count as truthy, unlike Python's own ``bool()``.
    """
    if value is None or value is False:
        return False
    if isinstance(value, str):
        return value != ""
    if isinstance(value, (int, float)):
        return not (value == 0 or value != value)
    return True


def split_path(key: str | None) -> list[str]:
    """Split a dot key into segments, stopping at the first empty one.

    ``None`` and ``""`` give ``[]`` (the root). ``"a..b"`` and ``"a."`` both
    give ``["a"]``.
    """
    if key is None:
        return []
    if not isinstance(key, str):
        raise TypeError(f"Cache key must be a string, not {type(key).__name__}")

    segments = []
    for segment in key.split(SEPARATOR):
        if not segment:
            break
        segments.append(segment)
    return segments


def read(doc: Any, key: str | None = None) -> Any:
    """Return the value at ``key``, or ``MISSING`` if the path does not resolve."""
    node = doc
    for segment in split_path(key):
        if kind_of(node) is not NodeKind.NODE or segment not in node:
            return MISSING
        node = node[segment]
    return node


def write(doc: Any, key: str | None, value: Any) -> Any:
    """Put ``value`` at ``key`` and return the resulting root.

    Intermediate segments holding a leaf (including lists and ``None``) are
    replaced with empty dicts. The original containers are mutated in place.
    An empty key makes ``value`` the new root.
    """
    segments = split_path(key)
    if not segments:
        return value

    root = doc if kind_of(doc) is NodeKind.NODE else {}
    node = root
    for segment in segments[:-1]:
        child = node.get(segment)
        if kind_of(child) is not NodeKind.NODE:
            child = node[segment] = {}
        node = child

    node[segments[-1]] = value
    return root


def _resolve_parent(doc: Any, key: str) -> tuple[Any, str]:
    if not isinstance(key, str):
        raise TypeError(f"Cache key must be a string, not {type(key).__name__}")
    parent_key, _, last = key.rpartition(SEPARATOR)
    return read(doc, parent_key), last


def remove(doc: Any, key: str | None) -> bool:
    """Delete the value at ``key``. Returns whether anything was deleted.

    Values that are falsy per :func:`is_truthy` are left in place, so
    ``remove`` on a key holding ``0``, ``""``, ``False`` or ``None`` is a
    no-op. A missing key is also a no-op.
    """
    if key is None or key == "":
        return False

    parent, last = _resolve_parent(doc, key)
    if kind_of(parent) is NodeKind.NODE and last in parent and is_truthy(parent[last]):
        del parent[last]
        return True
    return False


def check(doc: Any, key: str) -> bool:
    """Return whether ``key`` is present, whatever its value."""
    if key is None or key == "":
        raise InvalidKeyError("check() requires a non-empty key")

    parent, last = _resolve_parent(doc, key)
    return kind_of(parent) is NodeKind.NODE and last in parent
