"""Named, persistent cache documents addressed by dot paths."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from dotcache.core import paths
from dotcache.core.paths import MISSING
from dotcache.storage.chain import BackendChain, build_chain
from dotcache.storage.events import EventBus, EventPublisher, EventType

logger = logging.getLogger(__name__)

DEFAULT_NAME = "CacheProvider"

Observer = Callable[[dict[str, Any]], Any]


def _constant(value: Any) -> Observer:
    def observer(document: dict[str, Any]) -> Any:
        return value

    return observer


class CacheProvider(EventPublisher):
    """A cache document persisted under ``name``.

    Keys are dot paths into a nested document, so ``set("user.name", "Ana")``
    creates ``{"user": {"name": "Ana"}}``. Every mutation ends with
    :meth:`sync`, which saves the whole document through the backend chain
    and then calls the bound observers with it.

    Persistence is best-effort: with no working backend the provider still
    works as an in-memory cache and :attr:`last_sync_ok` is False.
    """

    def __init__(
        self,
        name: str | None = None,
        *,
        chain: BackendChain | None = None,
        event_bus: EventBus | None = None,
    ):
        super().__init__(event_bus)
        self.name = name or DEFAULT_NAME
        self.chain = chain if chain is not None else build_chain()
        self._document: dict[str, Any] = self.chain.load(self.name)
        self._observers: list[Observer] = []
        self.last_sync_ok: bool | None = None

    def __repr__(self) -> str:
        return f"CacheProvider({self.name!r})"

    def __contains__(self, key: str) -> bool:
        return self.check(key)

    @property
    def document(self) -> dict[str, Any]:
        """The live document. Do not hold on to sub-dicts across mutations."""
        return self._document

    @property
    def observers(self) -> list[Observer]:
        return list(self._observers)

    def get(self, key: str | None = None, default: Any = None) -> Any:
        """Return the value at ``key``, or the whole document if no key."""
        value = paths.read(self._document, key)
        return default if value is MISSING else value

    def read(self, key: str | None = None, default: Any = None) -> Any:
        """Alias for :meth:`get`."""
        return self.get(key, default)

    def set(self, key: str | None, value: Any) -> CacheProvider:
        """Put ``value`` at ``key`` and sync.

        An empty key addresses the root, which ``set`` never replaces: the
        document is left as it is and only synced. Use :meth:`clear` to
        start over.
        """
        if paths.split_path(key):
            self._document = paths.write(self._document, key, value)
            self._publish_event(EventType.KEY_SET, namespace=self.name, key=key)
        return self.sync()

    def write(self, key: str | None, value: Any) -> CacheProvider:
        """Alias for :meth:`set`."""
        return self.set(key, value)

    def remove(self, key: str | None = None) -> CacheProvider:
        """Remove ``key`` and sync.

        Keys holding ``0``, ``""``, ``False`` or ``None`` are kept: removal
        only deletes truthy values. The sync happens either way.
        """
        if paths.remove(self._document, key):
            self._publish_event(EventType.KEY_REMOVED, namespace=self.name, key=key)
        return self.sync()

    def delete(self, key: str | None = None) -> CacheProvider:
        """Alias for :meth:`remove`."""
        return self.remove(key)

    def clear(self) -> CacheProvider:
        """Empty the document and sync."""
        self._document = {}
        self._publish_event(EventType.CACHE_CLEARED, namespace=self.name)
        return self.sync()

    def check(self, key: str) -> bool:
        """Return whether ``key`` is set, even to a falsy value."""
        return paths.check(self._document, key)

    def sync(self) -> CacheProvider:
        """Save the document, then notify every observer in bind order.

        Every observer runs even if an earlier one raises; the first error
        is then re-raised to the caller.
        """
        self.last_sync_ok = self.chain.save(self.name, self._document)
        if self.last_sync_ok:
            self._publish_event(EventType.CACHE_SYNCED, namespace=self.name)
        else:
            logger.warning(f"No storage backend accepted {self.name!r}; kept in memory")
            self._publish_event(EventType.SYNC_FAILED, namespace=self.name)

        error: Exception | None = None
        for observer in self._observers:
            try:
                observer(self._document)
            except Exception as e:
                logger.exception(f"Observer {observer!r} failed for {self.name!r}")
                if error is None:
                    error = e

        if error is not None:
            raise error
        return self

    def bind(self, callback: Observer | Any) -> CacheProvider:
        """Call ``callback`` with the document after every sync.

        A non-callable is wrapped in an observer that just returns it.
        """
        if not callable(callback):
            callback = _constant(callback)
        self._observers.append(callback)
        return self
