"""File system storage backend."""

import fcntl
import hashlib
import json
import logging
import tempfile
import threading
from pathlib import Path

from dotcache.exceptions import BackendUnavailableError

from .base import StorageBackend

logger = logging.getLogger(__name__)


class FileSystemBackend(StorageBackend):
    """One JSON file per namespace under ``<data_dir>/local``.

    This is the primary store. Writes go through a temporary file that is
    renamed into place, so a namespace file is never partially written.
    """

    name = "filesystem"

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)
        self.entries_dir = self.data_dir / "local"
        self.index_file = self.entries_dir / "index.json"
        self._index: dict[str, str] = {}
        self._index_lock = threading.RLock()
        self._initialized = False

    def __repr__(self) -> str:
        return f"FileSystemBackend({str(self.data_dir)!r})"

    def initialize(self) -> None:
        """Create directory structure and load index."""
        try:
            self.entries_dir.mkdir(parents=True, exist_ok=True)
            self._load_index()
            if not self.index_file.exists():
                self._save_index()
        except OSError as e:
            raise BackendUnavailableError(self.name, str(e)) from e
        self._initialized = True

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            self.initialize()

    def _load_index(self) -> None:
        """Load the index mapping namespaces to filenames."""
        if not self.index_file.exists():
            return
        try:
            with open(self.index_file, encoding="utf-8") as f:
                index = json.load(f)
        except (OSError, ValueError):
            index = None

        if isinstance(index, dict) and all(
            isinstance(name, str) for name in index.values()
        ):
            self._index = index
        else:
            logger.warning(f"Discarding unreadable index {self.index_file}")
            self._index = {}

    def _save_index(self) -> None:
        """Save the index atomically."""
        temp_fd, temp_path = tempfile.mkstemp(dir=self.entries_dir, suffix=".tmp")
        try:
            with open(temp_fd, "w") as f:
                json.dump(self._index, f, indent=2, sort_keys=True)

            Path(temp_path).rename(self.index_file)
        except Exception:
            Path(temp_path).unlink(missing_ok=True)
            raise

    def _namespace_to_filename(self, namespace: str) -> str:
        """Convert namespace to a safe, collision-free filename."""
        safe = "".join(c if c.isalnum() or c in "-_" else "_" for c in namespace)
        digest = hashlib.sha1(namespace.encode("utf-8")).hexdigest()[:8]
        return f"{safe}-{digest}.json"

    def _get_path(self, namespace: str) -> Path:
        """Get file path for namespace."""
        with self._index_lock:
            if namespace not in self._index:
                self._index[namespace] = self._namespace_to_filename(namespace)
            return self.entries_dir / self._index[namespace]

    def read(self, namespace: str) -> str | None:
        """Read payload from file."""
        self._ensure_initialized()
        with self._index_lock:
            if namespace not in self._index:
                return None

        path = self._get_path(namespace)
        if not path.exists():
            return None

        try:
            with open(path, encoding="utf-8") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                try:
                    return f.read()
                finally:
                    fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except (OSError, UnicodeDecodeError) as e:
            raise BackendUnavailableError(self.name, str(e)) from e

    def write(self, namespace: str, payload: str) -> None:
        """Write payload to file atomically."""
        self._ensure_initialized()
        path = self._get_path(namespace)

        try:
            temp_fd, temp_path = tempfile.mkstemp(dir=self.entries_dir, suffix=".tmp")
        except OSError as e:
            raise BackendUnavailableError(self.name, str(e)) from e

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(payload)

            Path(temp_path).rename(path)

            with self._index_lock:
                self._index[namespace] = path.name
                self._save_index()

        except OSError as e:
            Path(temp_path).unlink(missing_ok=True)
            raise BackendUnavailableError(self.name, str(e)) from e

    def delete(self, namespace: str) -> bool:
        """Delete a namespace file."""
        self._ensure_initialized()
        with self._index_lock:
            if namespace not in self._index:
                return False

            path = self._get_path(namespace)
            try:
                path.unlink(missing_ok=True)
                del self._index[namespace]
                self._save_index()
                return True
            except OSError as e:
                raise BackendUnavailableError(self.name, str(e)) from e

    def exists(self, namespace: str) -> bool:
        self._ensure_initialized()
        with self._index_lock:
            return namespace in self._index and self._get_path(namespace).exists()

    def keys(self) -> list[str]:
        self._ensure_initialized()
        with self._index_lock:
            index_keys = list(self._index.keys())

        return [key for key in index_keys if self._get_path(key).exists()]

    def clear(self) -> None:
        """Remove all namespace files."""
        self._ensure_initialized()
        with self._index_lock:
            for filename in self._index.values():
                (self.entries_dir / filename).unlink(missing_ok=True)
            self._index.clear()
            self._save_index()

    def close(self) -> None:
        """No resources to close for filesystem backend."""
        pass
