"""
Storage Services Package

Provides the abstract key-value interface, a local JSON directory
implementation, an in-memory implementation for tests, and the typed
LedgerStore that maps ledger collections onto documents.
"""

from fincorp.services.storage.interface import (
    CorruptDocumentError,
    KeyValueStoreInterface,
    StorageError,
)
from fincorp.services.storage.json_store import JsonFileStore
from fincorp.services.storage.memory import InMemoryStore
from fincorp.services.storage.ledger_store import LedgerSnapshot, LedgerStore

__all__ = [
    # Interfaces
    "KeyValueStoreInterface",
    # Exceptions
    "CorruptDocumentError",
    "StorageError",
    # Implementations
    "InMemoryStore",
    "JsonFileStore",
    # Typed collections
    "LedgerSnapshot",
    "LedgerStore",
]
