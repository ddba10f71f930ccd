"""Pluggable storage backends.

Provides a unified interface for the storage mechanisms a cache can fall
back through:

- **FileSystemBackend**: primary store, JSON files with atomic writes
- **SQLiteBackend**: legacy store partitioned by domain
- **UserDataBackend**: XML user-data emulation, the last real resort
- **MemoryBackend**: in-memory storage for testing
- **NullBackend**: always unavailable
"""

from .base import StorageBackend
from .filesystem import FileSystemBackend
from .memory import MemoryBackend, NullBackend
from .sqlite import SQLiteBackend
from .userdata import UserDataBackend

__all__ = [
    "FileSystemBackend",
    "MemoryBackend",
    "NullBackend",
    "SQLiteBackend",
    "StorageBackend",
    "UserDataBackend",
]
