"""Metadata caches for source images.

Features:
- Memory cache with TTL expiry and optional LRU bound
- SQLite disk cache that survives restarts
- Null cache for when caching is disabled

The cache only saves re-reading image headers. Losing it is always safe.
"""

from __future__ import annotations

import hashlib
import json
import sqlite3
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from respimage.models.metadata import SourceMetadata

NAMESPACE = "file_info"


def make_key(file_path: str | Path) -> str:
    """Cache key for a source file, namespaced to avoid unrelated collisions."""
    hash_input = f"{NAMESPACE}:{file_path}"
    return hashlib.sha256(hash_input.encode()).hexdigest()[:32]


class MetadataCache(Protocol):
    """Interface shared by all metadata caches."""

    def get(self, file_path: str | Path) -> SourceMetadata | None: ...

    def set(self, file_path: str | Path, record: SourceMetadata, ttl: int) -> None: ...

    def delete(self, file_path: str | Path) -> bool: ...

    def clear(self) -> int: ...


@dataclass
class CacheEntry:
    """A cached record with expiry."""
    record: SourceMetadata
    expires_at: float

    @property
    def is_expired(self) -> bool:
        return time.time() > self.expires_at


class NullMetadataCache:
    """Cache used when caching is disabled: nothing is ever stored."""

    def get(self, file_path: str | Path) -> SourceMetadata | None:
        return None

    def set(self, file_path: str | Path, record: SourceMetadata, ttl: int) -> None:
        pass

    def delete(self, file_path: str | Path) -> bool:
        return False

    def clear(self) -> int:
        return 0


class MemoryMetadataCache:
    """In-memory metadata cache with TTL support."""

    def __init__(self, max_size: int | None = None) -> None:
        self._cache: OrderedDict[str, CacheEntry] = OrderedDict()
        self._max_size = max_size
        self._lock = threading.RLock()
        self._stats = {"hits": 0, "misses": 0, "evictions": 0}

    def get(self, file_path: str | Path) -> SourceMetadata | None:
        """Get a record, returns None if not found or expired."""
        key = make_key(file_path)
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                self._stats["misses"] += 1
                return None

            if entry.is_expired:
                del self._cache[key]
                self._stats["misses"] += 1
                return None

            self._cache.move_to_end(key)
            self._stats["hits"] += 1
            return entry.record

    def set(self, file_path: str | Path, record: SourceMetadata, ttl: int) -> None:
        """Store a record for ``ttl`` seconds."""
        key = make_key(file_path)
        with self._lock:
            now = time.time()
            self._cache[key] = CacheEntry(record=record, expires_at=now + ttl)
            self._cache.move_to_end(key)

            if self._max_size is not None:
                while len(self._cache) > self._max_size:
                    self._cache.popitem(last=False)
                    self._stats["evictions"] += 1

    def delete(self, file_path: str | Path) -> bool:
        key = make_key(file_path)
        with self._lock:
            if key in self._cache:
                del self._cache[key]
                return True
            return False

    def clear(self) -> int:
        with self._lock:
            count = len(self._cache)
            self._cache.clear()
            return count

    @property
    def stats(self) -> dict[str, int]:
        """Get cache statistics."""
        with self._lock:
            return {**self._stats, "size": len(self._cache)}


class DiskMetadataCache:
    """SQLite-based persistent metadata cache."""

    def __init__(self, cache_dir: Path) -> None:
        self.db_path = cache_dir / "metadata_cache.db"
        self._init_db()

    def _init_db(self) -> None:
        """Initialize the database schema."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with sqlite3.connect(str(self.db_path)) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS file_info (
                    key TEXT PRIMARY KEY,
                    path TEXT NOT NULL,
                    value TEXT NOT NULL,
                    created_at REAL NOT NULL,
                    expires_at REAL NOT NULL
                )
            """)
            conn.execute("CREATE INDEX IF NOT EXISTS idx_expires ON file_info(expires_at)")
            conn.commit()

    def get(self, file_path: str | Path) -> SourceMetadata | None:
        """Get a record from disk, returns None if not found or expired."""
        key = make_key(file_path)
        with sqlite3.connect(str(self.db_path)) as conn:
            conn.row_factory = sqlite3.Row
            row = conn.execute(
                "SELECT value, expires_at FROM file_info WHERE key = ?", (key,)
            ).fetchone()

            if row is None:
                return None

            if time.time() > row["expires_at"]:
                conn.execute("DELETE FROM file_info WHERE key = ?", (key,))
                conn.commit()
                return None

            try:
                return SourceMetadata.model_validate(json.loads(row["value"]))
            except (ValueError, ValidationError):
                # Unreadable rows are dropped and recomputed
                conn.execute("DELETE FROM file_info WHERE key = ?", (key,))
                conn.commit()
                return None

    def set(self, file_path: str | Path, record: SourceMetadata, ttl: int) -> None:
        """Store a record for ``ttl`` seconds."""
        now = time.time()
        with sqlite3.connect(str(self.db_path)) as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO file_info (key, path, value, created_at, expires_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (make_key(file_path), str(file_path), record.model_dump_json(), now, now + ttl),
            )
            conn.commit()

    def delete(self, file_path: str | Path) -> bool:
        with sqlite3.connect(str(self.db_path)) as conn:
            cursor = conn.execute("DELETE FROM file_info WHERE key = ?", (make_key(file_path),))
            conn.commit()
            return cursor.rowcount > 0

    def clear(self) -> int:
        with sqlite3.connect(str(self.db_path)) as conn:
            cursor = conn.execute("DELETE FROM file_info")
            conn.commit()
            return cursor.rowcount
