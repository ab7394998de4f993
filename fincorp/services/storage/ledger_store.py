"""
Typed Ledger Storage

Maps the four ledger collections onto four documents of a key-value store.

DESIGN DECISION: Loading FAILS CLOSED.
Each document is validated through a pydantic TypeAdapter. If a document
is missing, cannot be decoded, is not JSON, or does not match the entity
schema, that one
collection falls back to its seed data and a warning is logged. A bad
audit log never takes the staff roster down with it.

Saving has no failure path of its own: a StorageError from the
underlying store propagates to the caller.
"""

from collections.abc import Callable
from typing import Optional, TypeVar

import structlog
from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from fincorp.config import StorageSettings, get_settings
from fincorp.models.audit import AuditLogEntry
from fincorp.models.ledger import Account, StaffUser, Transaction
from fincorp.services.storage import seed
from fincorp.services.storage.interface import CorruptDocumentError, KeyValueStoreInterface

logger = structlog.get_logger(__name__)

T = TypeVar("T")

STAFF_ADAPTER = TypeAdapter(list[StaffUser])
TRANSACTIONS_ADAPTER = TypeAdapter(list[Transaction])
ACCOUNTS_ADAPTER = TypeAdapter(list[Account])
AUDIT_ADAPTER = TypeAdapter(list[AuditLogEntry])


class LedgerSnapshot(BaseModel):
    """
    The four independent top-level collections.

    No collection owns another; links are by id only.
    """

    staff: list[StaffUser] = Field(default_factory=list)
    transactions: list[Transaction] = Field(default_factory=list)
    accounts: list[Account] = Field(default_factory=list)
    audit_log: list[AuditLogEntry] = Field(default_factory=list)


class LedgerStore:
    """Loads and persists the ledger collections."""

    def __init__(
        self,
        store: KeyValueStoreInterface,
        settings: Optional[StorageSettings] = None,
    ):
        self._store = store
        self._settings = settings or get_settings().storage

    def _load_collection(
        self,
        key: str,
        adapter: TypeAdapter,
        default: Callable[[], list[T]],
    ) -> list[T]:
        try:
            raw = self._store.get_item(key)
        except CorruptDocumentError as e:
            logger.warning("collection_seeded", key=key, reason="undecodable", error=str(e))
            return default()

        if raw is None:
            logger.info("collection_seeded", key=key, reason="missing")
            return default()

        try:
            return adapter.validate_json(raw)
        except ValidationError as e:
            logger.warning(
                "collection_seeded",
                key=key,
                reason="invalid",
                error_count=e.error_count(),
                first_error=e.errors()[0]["msg"] if e.errors() else None,
            )
            return default()

    def _save_collection(self, key: str, adapter: TypeAdapter, items: list) -> None:
        payload = adapter.dump_json(items, by_alias=True, indent=2).decode("utf-8")
        self._store.set_item(key, payload)

    def load(self) -> LedgerSnapshot:
        """Load every collection, seeding the ones that are absent or malformed."""
        return LedgerSnapshot(
            staff=self.load_staff(),
            transactions=self.load_transactions(),
            accounts=self.load_accounts(),
            audit_log=self.load_audit_log(),
        )

    def load_staff(self) -> list[StaffUser]:
        return self._load_collection(self._settings.staff_key, STAFF_ADAPTER, seed.seed_staff)

    def load_transactions(self) -> list[Transaction]:
        return self._load_collection(
            self._settings.transactions_key,
            TRANSACTIONS_ADAPTER,
            seed.seed_transactions,
        )

    def load_accounts(self) -> list[Account]:
        return self._load_collection(
            self._settings.accounts_key,
            ACCOUNTS_ADAPTER,
            seed.seed_accounts,
        )

    def load_audit_log(self) -> list[AuditLogEntry]:
        return self._load_collection(
            self._settings.audit_key,
            AUDIT_ADAPTER,
            seed.seed_audit_log,
        )

    def save_staff(self, staff: list[StaffUser]) -> None:
        self._save_collection(self._settings.staff_key, STAFF_ADAPTER, staff)

    def save_transactions(self, transactions: list[Transaction]) -> None:
        self._save_collection(self._settings.transactions_key, TRANSACTIONS_ADAPTER, transactions)

    def save_accounts(self, accounts: list[Account]) -> None:
        self._save_collection(self._settings.accounts_key, ACCOUNTS_ADAPTER, accounts)

    def save_audit_log(self, entries: list[AuditLogEntry]) -> None:
        self._save_collection(self._settings.audit_key, AUDIT_ADAPTER, entries)
