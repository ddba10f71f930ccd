"""Core cache types: path access over documents and the cache provider."""

from dotcache.core.paths import (
    MISSING,
    NodeKind,
    check,
    is_truthy,
    kind_of,
    read,
    remove,
    split_path,
    write,
)
from dotcache.core.provider import DEFAULT_NAME, CacheProvider

__all__ = [
    "DEFAULT_NAME",
    "MISSING",
    "CacheProvider",
    "NodeKind",
    "check",
    "is_truthy",
    "kind_of",
    "read",
    "remove",
    "split_path",
    "write",
]
