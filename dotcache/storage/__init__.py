"""Persistence layer for cache documents.

- **Backends**: filesystem, SQLite, user-data XML, memory and null stores
- **Chain**: ordered fallback across backends for load and save
- **Codec**: JSON encoding of documents
- **Events**: typed notifications for cache changes
"""

from dotcache.storage.backends import (
    FileSystemBackend,
    MemoryBackend,
    NullBackend,
    SQLiteBackend,
    StorageBackend,
    UserDataBackend,
)
from dotcache.storage.chain import BackendChain, build_chain, create_backend
from dotcache.storage.events import Event, EventBus, EventPublisher, EventType

__all__ = [
    # Backends
    "StorageBackend",
    "FileSystemBackend",
    "MemoryBackend",
    "NullBackend",
    "SQLiteBackend",
    "UserDataBackend",
    # Chain
    "BackendChain",
    "build_chain",
    "create_backend",
    # Events
    "Event",
    "EventBus",
    "EventPublisher",
    "EventType",
]
