"""
Storage Base Interfaces.

Abstract base class for the local key-value store the search history
lives in.
"""

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """
    Abstract string-keyed, string-valued store.

    Implementations raise :class:`~tunesearch.utils.exceptions.StorageError`
    when the backend is unavailable or full.
    """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """
        Get a value by key.

        Args:
            key: The key to retrieve

        Returns:
            The stored string if found, None otherwise
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """
        Store a value under key, replacing any previous value.

        Args:
            key: The key to set
            value: The string to store
        """
        pass

    @abstractmethod
    async def remove(self, key: str) -> None:
        """
        Remove a key. Removing an absent key is not an error.

        Args:
            key: The key to remove
        """
        pass
