"""
Data Models Package

This package contains all Pydantic models used in FinCorp Ledger.
Everything that is stored, derived or passed to a mutation handler
conforms to one of these schemas.
"""

from fincorp.models.ledger import (
    Account,
    AccountBalance,
    AccountDraft,
    AccountType,
    AccountUpdate,
    CsvReport,
    DeletionIntent,
    EntityKind,
    LedgerTotals,
    LoginResult,
    Role,
    StaffDraft,
    StaffUser,
    TabMode,
    Transaction,
    TransactionDraft,
    TransactionFilter,
    TransactionUpdate,
)
from fincorp.models.audit import (
    AuditAction,
    AuditEntryBuilder,
    AuditLogEntry,
)

__all__ = [
    # Ledger models
    "Account",
    "AccountBalance",
    "AccountDraft",
    "AccountType",
    "AccountUpdate",
    "CsvReport",
    "DeletionIntent",
    "EntityKind",
    "LedgerTotals",
    "LoginResult",
    "Role",
    "StaffDraft",
    "StaffUser",
    "TabMode",
    "Transaction",
    "TransactionDraft",
    "TransactionFilter",
    "TransactionUpdate",
    # Audit models
    "AuditAction",
    "AuditEntryBuilder",
    "AuditLogEntry",
]
