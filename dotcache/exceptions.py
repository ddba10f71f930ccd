"""Exception hierarchy for dotcache."""


class CacheError(Exception):
    """Base exception for cache errors."""

    pass


class InvalidKeyError(CacheError, ValueError):
    """A key is missing or empty where a path is required."""

    pass


class StorageError(CacheError):
    """Base exception for storage errors."""

    pass


class BackendUnavailableError(StorageError):
    """The storage mechanism behind a backend cannot be used."""

    def __init__(self, backend: str, reason: str):
        super().__init__(f"{backend} backend unavailable: {reason}")
        self.backend = backend
        self.reason = reason


class CodecError(StorageError):
    """A document could not be encoded or decoded."""

    pass


class ConfigurationError(CacheError):
    """Configuration is invalid."""

    pass
