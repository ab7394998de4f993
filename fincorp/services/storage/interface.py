"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract key-value interface for storage.
This allows us to:
1. Keep every collection as one independently keyed JSON document
2. Use in-memory storage for testing
3. Swap the local directory for another backend later
4. Keep the ledger logic decoupled from where bytes end up

The interface is intentionally tiny: get, set and remove a document.
Typed (de)serialization lives one layer up, in LedgerStore.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStoreInterface(ABC):
    """
    Abstract interface for durable key-value document storage.

    Writes are fire-and-forget from the caller's point of view: there
    is no acknowledgement, retry or rollback. A failing write raises
    StorageError and nothing upstream recovers from it.
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """
        Read a document.

        Args:
            key: Document key

        Returns:
            The stored text, or None if the key has never been written

        Raises:
            CorruptDocumentError: If the stored bytes are not valid text
            StorageError: If the read fails
        """
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Replace a document.

        Args:
            key: Document key
            value: Full document text

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """
        Remove a document. Removing a missing key is a no-op.

        Raises:
            StorageError: If the removal fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class CorruptDocumentError(StorageError):
    """A stored document exists but cannot be decoded as text."""
    pass
