"""Ordered fallback across storage backends.

Hosts differ in which storage mechanisms actually work, and the only way
to find out is to try. :class:`BackendChain` therefore tries every backend
in priority order on every call and never remembers which one succeeded
last time.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from dotcache.config import StorageSettings, load_settings
from dotcache.exceptions import BackendUnavailableError, CodecError
from dotcache.storage import codec
from dotcache.storage.backends import (
    FileSystemBackend,
    MemoryBackend,
    NullBackend,
    SQLiteBackend,
    StorageBackend,
    UserDataBackend,
)

logger = logging.getLogger(__name__)


class BackendChain:
    """Load and save whole documents through a prioritized list of backends."""

    def __init__(self, backends: Sequence[StorageBackend]):
        self.backends = list(backends)

    def __repr__(self) -> str:
        return f"BackendChain({self.backends!r})"

    def load(self, namespace: str) -> dict[str, Any]:
        """Return the stored document for ``namespace``.

        Backends that fail, hold nothing, or hold an undecodable payload are
        skipped. Returns an empty document when no backend yields one.
        """
        for backend in self.backends:
            try:
                payload = backend.read(namespace)
            except BackendUnavailableError as e:
                logger.debug(f"Load of {namespace!r} skipped {backend.name}: {e}")
                continue

            if not payload:
                continue

            try:
                document = codec.decode(payload)
            except CodecError as e:
                logger.debug(f"Load of {namespace!r} from {backend.name} failed: {e}")
                continue

            logger.debug(f"Loaded {namespace!r} from {backend.name}")
            return document

        return {}

    def save(self, namespace: str, document: Any) -> bool:
        """Persist ``document`` to the first backend that accepts it.

        Returns False only if the document cannot be encoded or every
        backend fails.
        """
        try:
            payload = codec.encode(document)
        except CodecError as e:
            logger.warning(f"Cannot save {namespace!r}: {e}")
            return False

        for backend in self.backends:
            try:
                backend.write(namespace, payload)
            except BackendUnavailableError as e:
                logger.debug(f"Save of {namespace!r} skipped {backend.name}: {e}")
                continue

            logger.debug(f"Saved {namespace!r} to {backend.name}")
            return True

        return False

    def close(self) -> None:
        """Close every backend in the chain."""
        for backend in self.backends:
            backend.close()


def create_backend(name: str, settings: StorageSettings) -> StorageBackend:
    """Instantiate a backend by configuration name."""
    data_path = settings.data_path
    if name == "filesystem":
        return FileSystemBackend(data_path)
    if name == "sqlite":
        return SQLiteBackend(data_path / "legacy.db", domain=settings.domain)
    if name == "userdata":
        return UserDataBackend(data_path, domain=settings.domain)
    if name == "memory":
        return MemoryBackend()
    if name == "null":
        return NullBackend()
    raise ValueError(f"Unknown backend: {name}")


def build_chain(settings: StorageSettings | None = None) -> BackendChain:
    """Build the backend chain described by ``settings``."""
    if settings is None:
        settings = load_settings()
    return BackendChain([create_backend(name, settings) for name in settings.backends])
