"""Namespaced dot-path cache with pluggable storage backends.

Provides a document-per-namespace cache addressed by dot-separated keys:

- **CacheProvider**: get/set/remove/clear/check with sync and observers
- **Path accessor**: pure read/write/remove over nested mappings
- **Backend chain**: filesystem, SQLite and XML user-data stores tried in order
- **Events**: optional typed notifications for every mutation and sync
"""

from dotcache.core.paths import MISSING
from dotcache.core.provider import CacheProvider
from dotcache.storage.chain import BackendChain, build_chain

__version__ = "0.1.0"

__all__ = [
    "MISSING",
    "BackendChain",
    "CacheProvider",
    "build_chain",
    "__version__",
]
