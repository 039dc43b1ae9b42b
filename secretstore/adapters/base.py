"""Base adapter interface for key-value storage backends."""
from abc import ABC, abstractmethod


class KeyValueBackend(ABC):
    """Abstract interface for the storage engine holding secret envelopes."""

    @abstractmethod
    async def put(self, key: str, value: bytes) -> None:
        """
        Store a value, replacing any existing one atomically.

        Args:
            key: Record key
            value: Encoded envelope
        """
        pass

    @abstractmethod
    async def get(self, key: str) -> bytes | None:
        """
        Fetch a value.

        Args:
            key: Record key

        Returns:
            Stored bytes, or None if the key is absent
        """
        pass

    @abstractmethod
    async def delete(self, key: str, expected: bytes | None = None) -> bool:
        """
        Delete a value.

        Args:
            key: Record key
            expected: If given, delete only when the stored value still equals it

        Returns:
            True if a record was deleted
        """
        pass

    @abstractmethod
    async def items(self) -> list[tuple[str, bytes]]:
        """
        Enumerate every stored record.

        Returns:
            List of (key, value) pairs in no particular order
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if the backend is healthy and accessible.

        Returns:
            True if backend is healthy, False otherwise
        """
        pass
