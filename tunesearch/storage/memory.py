"""
In-memory key-value store.

Used when history persistence is disabled and as the test double for
HistoryStore.
"""

from tunesearch.storage.base import KeyValueStore


class InMemoryStore(KeyValueStore):
    """Dict-backed store; contents are lost with the process."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)
