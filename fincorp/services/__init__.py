"""Services package."""

from fincorp.services.storage import (
    InMemoryStore,
    JsonFileStore,
    KeyValueStoreInterface,
    LedgerSnapshot,
    LedgerStore,
    StorageError,
)

__all__ = [
    # Storage services
    "InMemoryStore",
    "JsonFileStore",
    "KeyValueStoreInterface",
    "LedgerSnapshot",
    "LedgerStore",
    "StorageError",
]
