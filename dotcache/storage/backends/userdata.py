"""User-data emulation backend.

Emulates the per-domain "userData" persistence behavior: a hidden XML
document per domain that holds one ``<item key=".." value=".."/>`` element
per stored namespace::

    <userdata domain="localhost">
      <item key="CacheProvider" value="{&quot;a&quot;: 1}"/>
    </userdata>

Lookups scan the items in document order. The document is reloaded before
every operation and saved whole after every change.
"""

import logging
import tempfile
import xml.etree.ElementTree as ET
from pathlib import Path

from dotcache.exceptions import BackendUnavailableError

from .base import StorageBackend

logger = logging.getLogger(__name__)

ROOT_TAG = "userdata"
ITEM_TAG = "item"


class UserDataBackend(StorageBackend):
    """Behavior-emulation store used when the other backends fail."""

    name = "userdata"

    def __init__(self, data_dir: Path, domain: str = "localhost"):
        self.data_dir = Path(data_dir)
        self.domain = domain
        self.store_file = self.data_dir / f".{domain}.userdata.xml"

    def __repr__(self) -> str:
        return f"UserDataBackend({str(self.data_dir)!r}, domain={self.domain!r})"

    def initialize(self) -> None:
        """Create the store file if it does not exist."""
        if not self.store_file.exists():
            self._save(ET.Element(ROOT_TAG, {"domain": self.domain}))

    def _load(self) -> ET.Element:
        """Load the store document, or an empty one if none exists yet."""
        if not self.store_file.exists():
            return ET.Element(ROOT_TAG, {"domain": self.domain})
        try:
            return ET.parse(self.store_file).getroot()
        except (OSError, ET.ParseError) as e:
            raise BackendUnavailableError(self.name, str(e)) from e

    def _save(self, root: ET.Element) -> None:
        """Write the store document atomically."""
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            temp_fd, temp_path = tempfile.mkstemp(dir=self.data_dir, suffix=".tmp")
        except OSError as e:
            raise BackendUnavailableError(self.name, str(e)) from e

        try:
            with open(temp_fd, "wb") as f:
                ET.ElementTree(root).write(f, encoding="utf-8", xml_declaration=True)
            Path(temp_path).rename(self.store_file)
        except OSError as e:
            Path(temp_path).unlink(missing_ok=True)
            raise BackendUnavailableError(self.name, str(e)) from e

    @staticmethod
    def _find_item(root: ET.Element, namespace: str) -> ET.Element | None:
        for node in root:
            if node.get("key") == namespace:
                return node
        return None

    def read(self, namespace: str) -> str | None:
        node = self._find_item(self._load(), namespace)
        if node is None:
            return None
        return node.get("value") or None

    def write(self, namespace: str, payload: str) -> None:
        root = self._load()
        node = self._find_item(root, namespace)

        if node is None:
            ET.SubElement(root, ITEM_TAG, {"key": namespace, "value": payload})
        else:
            node.set("value", payload)

        self._save(root)
        logger.debug(f"Stored {namespace!r} in {self.store_file}")

    def delete(self, namespace: str) -> bool:
        root = self._load()
        node = self._find_item(root, namespace)
        if node is None:
            return False
        root.remove(node)
        self._save(root)
        return True

    def exists(self, namespace: str) -> bool:
        return self._find_item(self._load(), namespace) is not None

    def keys(self) -> list[str]:
        return [node.get("key", "") for node in self._load() if node.tag == ITEM_TAG]

    def clear(self) -> None:
        self._save(ET.Element(ROOT_TAG, {"domain": self.domain}))

    def close(self) -> None:
        """Nothing is held open between calls."""
        pass
