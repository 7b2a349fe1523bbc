"""Key-value persistence with freshness and retention windows."""

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Optional

import aiosqlite

from ..config import settings

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def _as_utc(timestamp: datetime) -> datetime:
    """Treat naive timestamps as UTC and convert aware ones to UTC."""
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc)


class KeyValueStore(ABC):
    """
    Storage for JSON-serializable values stamped with a write time.

    get() hides entries older than the freshness window; sweep_expired()
    deletes entries older than a retention window.
    """

    def __init__(self, freshness: Optional[timedelta] = None):
        self.freshness = freshness or timedelta(hours=settings.session_freshness_hours)

    def _is_fresh(self, timestamp: datetime, now: Optional[datetime] = None) -> bool:
        now = now or _utc_now()
        return now - _as_utc(timestamp) <= self.freshness

    @abstractmethod
    async def put(self, key: str, value: Any, timestamp: Optional[datetime] = None):
        """Store a value under a key."""
        pass

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Get a fresh value, or None if missing or expired."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete a key; True if it existed."""
        pass

    @abstractmethod
    async def sweep_expired(self, retention: Optional[timedelta] = None) -> int:
        """Delete entries older than the retention window; return the count."""
        pass

    async def initialize(self):
        """Prepare the backend."""
        pass

    async def close(self):
        """Release backend resources."""
        pass


class MemoryKeyValueStore(KeyValueStore):
    """In-process store, mostly for tests and single-run tools."""

    def __init__(self, freshness: Optional[timedelta] = None):
        super().__init__(freshness)
        self._entries: dict[str, tuple[Any, datetime]] = {}

    async def put(self, key: str, value: Any, timestamp: Optional[datetime] = None):
        self._entries[key] = (value, _as_utc(timestamp or _utc_now()))

    async def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, timestamp = entry
        if not self._is_fresh(timestamp):
            return None
        return value

    async def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    async def sweep_expired(self, retention: Optional[timedelta] = None) -> int:
        retention = retention or timedelta(days=settings.session_retention_days)
        cutoff = _utc_now() - retention
        expired = [key for key, (_, ts) in self._entries.items() if ts < cutoff]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def size(self) -> int:
        return len(self._entries)


class SQLiteKeyValueStore(KeyValueStore):
    """Manages database storage for key-value entries."""

    def __init__(self, db_path: Optional[Path] = None, freshness: Optional[timedelta] = None):
        super().__init__(freshness)
        self.db_path = Path(db_path) if db_path else settings.database_path
        self._connection: Optional[aiosqlite.Connection] = None

    async def initialize(self):
        """Initialize the database and create tables if they don't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._connection = await aiosqlite.connect(str(self.db_path))

        await self._connection.executescript(
            """
            CREATE TABLE IF NOT EXISTS kv_entries (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                timestamp TEXT NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_kv_entries_timestamp ON kv_entries(timestamp);
            """
        )
        await self._connection.commit()
        logger.info(f"SQLiteKeyValueStore initialized at {self.db_path}")

    async def close(self):
        """Close the database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    async def put(self, key: str, value: Any, timestamp: Optional[datetime] = None):
        timestamp = _as_utc(timestamp or _utc_now())
        await self._connection.execute(
            """
            INSERT OR REPLACE INTO kv_entries (key, value, timestamp)
            VALUES (?, ?, ?)
            """,
            (key, json.dumps(value), timestamp.isoformat()),
        )
        await self._connection.commit()
        logger.debug(f"Stored entry {key}")

    async def get(self, key: str) -> Optional[Any]:
        async with self._connection.execute(
            "SELECT value, timestamp FROM kv_entries WHERE key = ?", (key,)
        ) as cursor:
            row = await cursor.fetchone()

        if row is None:
            return None
        if not self._is_fresh(datetime.fromisoformat(row[1])):
            logger.debug(f"Entry {key} is stale")
            return None
        return json.loads(row[0])

    async def delete(self, key: str) -> bool:
        cursor = await self._connection.execute("DELETE FROM kv_entries WHERE key = ?", (key,))
        await self._connection.commit()
        return cursor.rowcount > 0

    async def sweep_expired(self, retention: Optional[timedelta] = None) -> int:
        retention = retention or timedelta(days=settings.session_retention_days)
        cutoff = _utc_now() - retention
        cursor = await self._connection.execute(
            "DELETE FROM kv_entries WHERE timestamp < ?", (cutoff.isoformat(),)
        )
        await self._connection.commit()
        count = cursor.rowcount
        if count:
            logger.info(f"Swept {count} expired entries")
        return count
