"""Base storage backend interface."""

from abc import ABC, abstractmethod


class StorageBackend(ABC):
    """Abstract base class for storage backends.

    Backends store serialized documents under a namespace string. Any
    failure of the underlying mechanism is raised as
    :class:`~dotcache.exceptions.BackendUnavailableError` so callers can
    fall through to the next backend.
    """

    name: str = "base"

    @abstractmethod
    def initialize(self) -> None:
        """Initialize the backend."""
        pass

    @abstractmethod
    def read(self, namespace: str) -> str | None:
        """Read the payload stored for a namespace."""
        pass

    @abstractmethod
    def write(self, namespace: str, payload: str) -> None:
        """Write the payload for a namespace."""
        pass

    @abstractmethod
    def delete(self, namespace: str) -> bool:
        """Delete a namespace."""
        pass

    @abstractmethod
    def exists(self, namespace: str) -> bool:
        """Check if a namespace is stored."""
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """Get all stored namespaces."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Clear all data."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Release any resources."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
