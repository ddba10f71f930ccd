"""In-memory and null storage backends."""

from dotcache.exceptions import BackendUnavailableError

from .base import StorageBackend


class MemoryBackend(StorageBackend):
    """In-memory storage backend for testing purposes."""

    name = "memory"

    def __init__(self):
        self._data: dict[str, str] = {}

    def initialize(self) -> None:
        """Initialize the backend (no-op for memory)."""
        pass

    def read(self, namespace: str) -> str | None:
        return self._data.get(namespace)

    def write(self, namespace: str, payload: str) -> None:
        self._data[namespace] = payload

    def delete(self, namespace: str) -> bool:
        if namespace in self._data:
            del self._data[namespace]
            return True
        return False

    def exists(self, namespace: str) -> bool:
        return namespace in self._data

    def keys(self) -> list[str]:
        return list(self._data.keys())

    def clear(self) -> None:
        self._data.clear()

    def close(self) -> None:
        """Close backend (no-op for memory)."""
        pass


class NullBackend(StorageBackend):
    """Backend for hosts with no usable storage. Every call fails."""

    name = "null"

    def _unavailable(self) -> BackendUnavailableError:
        return BackendUnavailableError(self.name, "no storage configured")

    def initialize(self) -> None:
        pass

    def read(self, namespace: str) -> str | None:
        raise self._unavailable()

    def write(self, namespace: str, payload: str) -> None:
        raise self._unavailable()

    def delete(self, namespace: str) -> bool:
        raise self._unavailable()

    def exists(self, namespace: str) -> bool:
        raise self._unavailable()

    def keys(self) -> list[str]:
        raise self._unavailable()

    def clear(self) -> None:
        raise self._unavailable()

    def close(self) -> None:
        pass
