"""Tests for source metadata caches."""

from __future__ import annotations

import sqlite3
import time
from pathlib import Path

import pytest

from respimage.models.metadata import SourceMetadata
from respimage.thumbnails.cache import (
    DiskMetadataCache,
    MemoryMetadataCache,
    NullMetadataCache,
    make_key,
)


@pytest.fixture
def record() -> SourceMetadata:
    return SourceMetadata(
        width=200,
        height=100,
        image_type="PNG",
        mime="image/png",
        modified=1700000000,
        dirname="/srv/web/img",
        basename="photo.png",
        ext="png",
        filename="photo",
    )


class TestMakeKey:
    """Tests for cache key derivation."""

    def test_stable(self) -> None:
        assert make_key("/a/b.png") == make_key(Path("/a/b.png"))

    def test_distinct_paths(self) -> None:
        assert make_key("/a/b.png") != make_key("/a/c.png")

    def test_namespaced(self) -> None:
        """Test that the raw path is never used as the key."""
        assert make_key("/a/b.png") != "/a/b.png"
        assert len(make_key("/a/b.png")) == 32


class TestMemoryMetadataCache:
    """Tests for in-memory metadata cache."""

    def test_set_and_get(self, record: SourceMetadata) -> None:
        cache = MemoryMetadataCache()
        cache.set("/srv/web/img/photo.png", record, ttl=3600)

        assert cache.get("/srv/web/img/photo.png") == record

    def test_get_missing(self) -> None:
        assert MemoryMetadataCache().get("/nope.png") is None

    def test_ttl_expiration(self, record: SourceMetadata) -> None:
        cache = MemoryMetadataCache()
        cache.set("/a.png", record, ttl=0)

        time.sleep(0.01)
        assert cache.get("/a.png") is None

    def test_size_bound(self, record: SourceMetadata) -> None:
        cache = MemoryMetadataCache(max_size=2)
        cache.set("/1.png", record, ttl=60)
        cache.set("/2.png", record, ttl=60)
        cache.get("/1.png")
        cache.set("/3.png", record, ttl=60)

        assert cache.get("/1.png") is not None
        assert cache.get("/2.png") is None
        assert cache.get("/3.png") is not None
        assert cache.stats["evictions"] == 1

    def test_delete_and_clear(self, record: SourceMetadata) -> None:
        cache = MemoryMetadataCache()
        cache.set("/1.png", record, ttl=60)
        cache.set("/2.png", record, ttl=60)

        assert cache.delete("/1.png") is True
        assert cache.delete("/1.png") is False
        assert cache.clear() == 1
        assert cache.get("/2.png") is None

    def test_stats(self, record: SourceMetadata) -> None:
        cache = MemoryMetadataCache()
        cache.set("/a.png", record, ttl=60)
        cache.get("/a.png")
        cache.get("/b.png")

        assert cache.stats["hits"] == 1
        assert cache.stats["misses"] == 1


class TestDiskMetadataCache:
    """Tests for SQLite metadata cache."""

    def test_set_and_get(self, tmp_path: Path, record: SourceMetadata) -> None:
        cache = DiskMetadataCache(tmp_path)
        cache.set("/a.png", record, ttl=3600)

        assert cache.get("/a.png") == record
        assert (tmp_path / "metadata_cache.db").exists()

    def test_persists_across_instances(self, tmp_path: Path, record: SourceMetadata) -> None:
        DiskMetadataCache(tmp_path).set("/a.png", record, ttl=3600)

        assert DiskMetadataCache(tmp_path).get("/a.png") == record

    def test_ttl_expiration(self, tmp_path: Path, record: SourceMetadata) -> None:
        cache = DiskMetadataCache(tmp_path)
        cache.set("/a.png", record, ttl=0)

        time.sleep(0.01)
        assert cache.get("/a.png") is None

    def test_replace(self, tmp_path: Path, record: SourceMetadata) -> None:
        cache = DiskMetadataCache(tmp_path)
        cache.set("/a.png", record, ttl=60)
        cache.set("/a.png", record.model_copy(update={"modified": 1}), ttl=60)

        assert cache.get("/a.png").modified == 1

    def test_delete_and_clear(self, tmp_path: Path, record: SourceMetadata) -> None:
        cache = DiskMetadataCache(tmp_path)
        cache.set("/1.png", record, ttl=60)
        cache.set("/2.png", record, ttl=60)

        assert cache.delete("/1.png") is True
        assert cache.delete("/1.png") is False
        assert cache.clear() == 1

    @pytest.mark.parametrize("value", ["{\"width\": 1}", "not json"])
    def test_unreadable_row_is_a_miss(self, tmp_path: Path, record: SourceMetadata, value: str) -> None:
        """Test that a corrupt or outdated row is dropped instead of raising."""
        cache = DiskMetadataCache(tmp_path)
        cache.set("/a.png", record, ttl=3600)
        with sqlite3.connect(str(cache.db_path)) as conn:
            conn.execute("UPDATE file_info SET value = ?", (value,))

        assert cache.get("/a.png") is None
        assert cache.delete("/a.png") is False


class TestNullMetadataCache:
    """Tests for the disabled cache."""

    def test_never_stores(self, record: SourceMetadata) -> None:
        cache = NullMetadataCache()
        cache.set("/a.png", record, ttl=60)

        assert cache.get("/a.png") is None
        assert cache.delete("/a.png") is False
        assert cache.clear() == 0
