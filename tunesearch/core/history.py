"""
Search History.

A small, ordered, most-recent-first list of past queries kept in a local
key-value store. Queries are unique ignoring case, and the list never grows
past its configured limit.
"""

import asyncio
import json
import sqlite3
from typing import Any, Optional, Sequence

from tunesearch.storage.base import KeyValueStore
from tunesearch.utils.exceptions import StorageError
from tunesearch.utils.logging import get_logger


logger = get_logger(__name__)

HISTORY_KEY = "tunesearch_search_history"
LIMIT_KEY = "tunesearch_search_history_limit"

DEFAULT_LIMIT = 5
MIN_LIMIT = 1
MAX_LIMIT = 50

# Anything the backend can raise that means "storage is not usable right now"
_STORAGE_FAILURES = (StorageError, sqlite3.Error, OSError)


def clamp_limit(value: int) -> int:
    return max(MIN_LIMIT, min(MAX_LIMIT, int(value)))


def serialize_history(entries: Sequence[str]) -> str:
    return json.dumps(list(entries))


def deserialize_history(raw: Optional[str]) -> list[str]:
    """Decode stored history. Missing or malformed data reads as empty."""
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Stored search history is not valid JSON, starting empty")
        return []
    if not isinstance(data, list):
        logger.warning("Stored search history is not a list, starting empty")
        return []
    return [item for item in data if isinstance(item, str)]


def serialize_limit(limit: int) -> str:
    return str(limit)


def deserialize_limit(raw: Optional[str], default: int = DEFAULT_LIMIT) -> int:
    if raw is None:
        return default
    try:
        return clamp_limit(int(raw.strip()))
    except (AttributeError, ValueError):
        return default


def _same_query(a: str, b: str) -> bool:
    return a.lower() == b.lower()


class HistoryStore:
    """
    Persistent, size-bounded, case-insensitively deduplicated query list.

    Every mutation writes the full state back to the store before
    returning. If the store fails, the mutation is dropped, a warning is
    logged and the last good in-memory list is returned; no storage error
    ever reaches the caller.

    Usage:
        history = HistoryStore(SQLiteKeyValueStore("data/history.db"))
        await history.load()
        await history.add("lofi beats")
    """

    def __init__(self, store: KeyValueStore, default_limit: int = DEFAULT_LIMIT):
        self._store = store
        self._default_limit = clamp_limit(default_limit)
        self._entries: list[str] = []
        self._limit = self._default_limit
        self._lock = asyncio.Lock()

    async def load(self) -> list[str]:
        """Read entries and limit from the store, replacing in-memory state."""
        async with self._lock:
            try:
                raw_limit = await self._store.get(LIMIT_KEY)
                raw_entries = await self._store.get(HISTORY_KEY)
            except _STORAGE_FAILURES as e:
                logger.warning(f"Could not load search history: {e}")
                self._entries = []
                self._limit = self._default_limit
                return []

            self._limit = deserialize_limit(raw_limit, self._default_limit)
            self._entries = deserialize_history(raw_entries)[: self._limit]
            logger.debug(f"Loaded {len(self._entries)} history entries (limit={self._limit})")
            return list(self._entries)

    def get_all(self) -> list[str]:
        """Current entries, most recent first."""
        return list(self._entries)

    def get_limit(self) -> int:
        return self._limit

    async def _persist_entries(self, entries: list[str]) -> bool:
        try:
            await self._store.set(HISTORY_KEY, serialize_history(entries))
        except _STORAGE_FAILURES as e:
            logger.warning(f"Could not save search history: {e}")
            return False
        self._entries = entries
        return True

    async def add(self, query: Any) -> list[str]:
        """
        Put ``query`` at the front of the history.

        Blank and non-string input is ignored. An existing entry equal
        ignoring case is replaced by the new casing.
        """
        if not isinstance(query, str):
            return self.get_all()
        trimmed = query.strip()
        if not trimmed:
            return self.get_all()

        async with self._lock:
            entries = [item for item in self._entries if not _same_query(item, trimmed)]
            entries.insert(0, trimmed)
            await self._persist_entries(entries[: self._limit])
            return self.get_all()

    async def remove(self, query: Any) -> list[str]:
        """Drop the entry matching ``query`` ignoring case; absent is a no-op."""
        if not isinstance(query, str) or not query.strip():
            return self.get_all()
        trimmed = query.strip()

        async with self._lock:
            if not any(_same_query(item, trimmed) for item in self._entries):
                return self.get_all()
            entries = [item for item in self._entries if not _same_query(item, trimmed)]
            await self._persist_entries(entries)
            return self.get_all()

    async def reorder(self, new_order: Any) -> list[str]:
        """
        Replace the history with a caller-arranged order.

        The sequence is taken as given (no dedup) and truncated to the limit.
        """
        if not isinstance(new_order, (list, tuple)):
            return self.get_all()
        if not all(isinstance(item, str) for item in new_order):
            return self.get_all()

        async with self._lock:
            await self._persist_entries(list(new_order)[: self._limit])
            return self.get_all()

    async def set_limit(self, new_limit: int) -> list[str]:
        """Change the limit (clamped to 1..50), truncating entries if needed."""
        limit = clamp_limit(new_limit)

        async with self._lock:
            entries = self._entries[:limit]
            try:
                await self._store.set(LIMIT_KEY, serialize_limit(limit))
            except _STORAGE_FAILURES as e:
                logger.warning(f"Could not save search history limit: {e}")
                return self.get_all()

            if len(entries) < len(self._entries):
                try:
                    await self._store.set(HISTORY_KEY, serialize_history(entries))
                except _STORAGE_FAILURES as e:
                    logger.warning(f"Could not save truncated search history: {e}")
                    await self._restore_limit()
                    return self.get_all()

            self._limit = limit
            self._entries = entries
            return self.get_all()

    async def _restore_limit(self) -> None:
        try:
            await self._store.set(LIMIT_KEY, serialize_limit(self._limit))
        except _STORAGE_FAILURES as e:
            logger.warning(f"Could not restore search history limit: {e}")

    async def clear(self) -> list[str]:
        async with self._lock:
            await self._persist_entries([])
            return self.get_all()
