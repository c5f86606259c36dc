"""
Storage Package.

Provides the local key-value persistence layer used by the search history.
"""

from tunesearch.storage.base import KeyValueStore
from tunesearch.storage.memory import InMemoryStore
from tunesearch.storage.sqlite import SQLiteKeyValueStore


def create_store(config=None) -> KeyValueStore:
    """Build the store selected by ``settings.history.provider``."""
    if config is None:
        from tunesearch.config import get_settings
        config = get_settings().history
    if config.provider == "memory":
        return InMemoryStore()
    return SQLiteKeyValueStore(config.database)


__all__ = [
    "KeyValueStore",
    "InMemoryStore",
    "SQLiteKeyValueStore",
    "create_store",
]
