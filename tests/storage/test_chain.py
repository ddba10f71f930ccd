"""Tests for the backend fallback chain."""

from unittest.mock import Mock

import pytest

from dotcache.config import StorageSettings
from dotcache.storage.backends import (
    FileSystemBackend,
    MemoryBackend,
    NullBackend,
    SQLiteBackend,
    UserDataBackend,
)
from dotcache.storage.chain import BackendChain, build_chain, create_backend


class TestLoad:
    """Test document loading with fallback."""

    def test_primary_wins(self):
        primary, legacy = MemoryBackend(), MemoryBackend()
        primary.write("ns", '{"from":"primary"}')
        legacy.write("ns", '{"from":"legacy"}')

        assert BackendChain([primary, legacy]).load("ns") == {"from": "primary"}

    def test_falls_through_unavailable_backend(self):
        legacy = MemoryBackend()
        legacy.write("ns", '{"from":"legacy"}')

        assert BackendChain([NullBackend(), legacy]).load("ns") == {"from": "legacy"}

    def test_falls_through_missing_entry(self):
        legacy = MemoryBackend()
        legacy.write("ns", '{"from":"legacy"}')

        assert BackendChain([MemoryBackend(), legacy]).load("ns") == {"from": "legacy"}

    def test_falls_through_corrupt_payload(self):
        primary, fallback = MemoryBackend(), MemoryBackend()
        primary.write("ns", "not json{")
        fallback.write("ns", '{"ok":true}')

        assert BackendChain([primary, fallback]).load("ns") == {"ok": True}

    def test_non_object_payload_is_skipped(self):
        primary = MemoryBackend()
        primary.write("ns", "[1, 2, 3]")

        assert BackendChain([primary]).load("ns") == {}

    def test_everything_fails_gives_empty_document(self):
        assert BackendChain([NullBackend(), NullBackend(), NullBackend()]).load("ns") == {}

    def test_empty_chain(self):
        assert BackendChain([]).load("ns") == {}

    def test_falls_through_undecodable_file(self, temp_dir):
        primary, fallback = FileSystemBackend(temp_dir), MemoryBackend()
        primary.write("ns", '{"from":"primary"}')
        primary._get_path("ns").write_bytes(b'{"a":"\xff\xfe"}')
        fallback.write("ns", '{"from":"fallback"}')

        assert BackendChain([primary, fallback]).load("ns") == {"from": "fallback"}

    def test_userdata_is_last_resort(self, temp_dir):
        userdata = UserDataBackend(temp_dir)
        userdata.write("ns", '{"from":"userdata"}')

        chain = BackendChain([NullBackend(), NullBackend(), userdata])

        assert chain.load("ns") == {"from": "userdata"}


class TestSave:
    """Test document saving with fallback."""

    def test_saves_to_primary_only(self):
        primary, legacy = MemoryBackend(), MemoryBackend()

        assert BackendChain([primary, legacy]).save("ns", {"a": 1}) is True

        assert primary.read("ns") == '{"a":1}'
        assert legacy.read("ns") is None

    def test_falls_back_when_primary_fails(self):
        legacy = MemoryBackend()

        assert BackendChain([NullBackend(), legacy]).save("ns", {"a": 1}) is True
        assert legacy.read("ns") == '{"a":1}'

    def test_all_backends_fail(self):
        assert BackendChain([NullBackend(), NullBackend()]).save("ns", {"a": 1}) is False

    def test_unencodable_document(self):
        backend = MemoryBackend()

        assert BackendChain([backend]).save("ns", {"a": object()}) is False
        assert backend.read("ns") is None

    def test_encodes_once(self, monkeypatch):
        from dotcache.storage import codec

        encode = Mock(wraps=codec.encode)
        monkeypatch.setattr(codec, "encode", encode)

        BackendChain([NullBackend(), NullBackend(), MemoryBackend()]).save("ns", {})

        encode.assert_called_once_with({})

    def test_backend_choice_is_not_cached(self):
        """A primary that recovers is used again on the next save."""
        primary = MemoryBackend()
        fallback = MemoryBackend()
        chain = BackendChain([primary, fallback])

        original_write = primary.write
        primary.write = Mock(side_effect=NullBackend().write)
        chain.save("ns", {"v": 1})
        primary.write = original_write
        chain.save("ns", {"v": 2})

        assert fallback.read("ns") == '{"v":1}'
        assert primary.read("ns") == '{"v":2}'

    @pytest.mark.parametrize("content", [b"[]", b'{"ns":"\xff"}'])
    def test_corrupt_index_does_not_break_save(self, temp_dir, content):
        index = temp_dir / "local" / "index.json"
        index.parent.mkdir(parents=True)
        index.write_bytes(content)
        primary, fallback = FileSystemBackend(temp_dir), MemoryBackend()
        chain = BackendChain([primary, fallback])

        assert chain.load("ns") == {}
        assert chain.save("ns", {"a": 1}) is True
        assert chain.load("ns") == {"a": 1}
        assert primary.exists("ns") is True

    def test_round_trip_through_disk_backends(self, temp_dir):
        chain = BackendChain(
            [FileSystemBackend(temp_dir), SQLiteBackend(temp_dir / "legacy.db")]
        )
        document = {"user": {"tags": ["a", "b"], "age": 3, "ok": False, "none": None}}

        chain.save("ns", document)

        assert chain.load("ns") == document
        chain.close()


class TestBuildChain:
    """Test chain construction from settings."""

    def test_default_order(self, temp_dir):
        settings = StorageSettings(data_dir=str(temp_dir), domain="example.org")

        chain = build_chain(settings)

        assert [type(b) for b in chain.backends] == [
            FileSystemBackend,
            SQLiteBackend,
            UserDataBackend,
        ]
        assert chain.backends[1].domain == "example.org"
        assert chain.backends[1].db_path == temp_dir / "legacy.db"
        assert chain.backends[2].domain == "example.org"

    def test_custom_order(self, temp_dir):
        settings = StorageSettings(data_dir=str(temp_dir), backends=["memory", "null"])

        chain = build_chain(settings)

        assert [b.name for b in chain.backends] == ["memory", "null"]

    def test_uses_loaded_settings(self, monkeypatch, temp_dir):
        monkeypatch.setenv("DOTCACHE_DATA_DIR", str(temp_dir))
        monkeypatch.setenv("DOTCACHE_BACKENDS", "userdata")

        chain = build_chain()

        assert len(chain.backends) == 1
        assert chain.backends[0].data_dir == temp_dir

    def test_unknown_backend_name(self, temp_dir):
        with pytest.raises(ValueError):
            create_backend("cloud", StorageSettings(data_dir=str(temp_dir)))

    def test_creating_backends_touches_nothing(self, temp_dir):
        build_chain(StorageSettings(data_dir=str(temp_dir / "fresh")))

        assert not (temp_dir / "fresh").exists()
