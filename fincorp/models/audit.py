"""
Audit Models for FinCorp Ledger

Every mutating action in the ledger is logged for audit purposes.
This provides:
1. Traceability of who changed what and when
2. A visible activity feed for administrators
3. Debugging information when balances look wrong

DESIGN DECISION: Audit entries are immutable and append-only.
The collection is kept newest-first by insertion position; nothing
ever re-sorts it.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from fincorp.formatting import format_currency
from fincorp.models.ledger import Account, Role, StaffUser, Transaction


class AuditAction(str, Enum):
    """Kinds of audited action."""
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    LOGIN = "LOGIN"


class AuditLogEntry(BaseModel):
    """
    A single audit entry.

    This is the core unit of the audit trail.
    Every logical mutation creates exactly one of these.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    # Identity
    id: str = Field(
        default_factory=lambda: f"log-{uuid4().hex}",
        description="Unique entry identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now().astimezone(),
        description="When the action happened"
    )

    # Actor (name is a snapshot)
    user_id: str
    user_name: str

    # What happened
    action: AuditAction
    details: str = Field(
        ...,
        description="Human-readable description of what happened"
    )
    target_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this entry is about"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "entry_id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "user_id": self.user_id,
            "user_name": self.user_name,
            "action": self.action.value,
            "details": self.details,
            "target_id": self.target_id,
        }


class AuditEntryBuilder:
    """
    Builds the (action, details, target_id) triple for each kind of mutation.

    Usage:
        action, details, target = AuditEntryBuilder.transaction_created(trx)
        recorder.record(action, details, target)
    """

    @staticmethod
    def user_logged_in(user: StaffUser) -> tuple[AuditAction, str, Optional[str]]:
        return AuditAction.LOGIN, f"User @{user.username} logged in", None

    @staticmethod
    def user_logged_out(user: StaffUser) -> tuple[AuditAction, str, Optional[str]]:
        return AuditAction.LOGIN, f"User @{user.username} logged out", None

    @staticmethod
    def transaction_created(trx: Transaction) -> tuple[AuditAction, str, Optional[str]]:
        return (
            AuditAction.CREATE,
            f"Recorded new transaction {trx.code} worth {format_currency(trx.amount)}",
            trx.id,
        )

    @staticmethod
    def transaction_updated(trx: Transaction) -> tuple[AuditAction, str, Optional[str]]:
        return (
            AuditAction.UPDATE,
            f"Edited transaction {trx.code} (Customer: {trx.customer_name})",
            trx.id,
        )

    @staticmethod
    def transaction_deleted(trx: Transaction) -> tuple[AuditAction, str, Optional[str]]:
        return AuditAction.DELETE, f"Deleted transaction {trx.code}", trx.id

    @staticmethod
    def staff_added(staff: StaffUser) -> tuple[AuditAction, str, Optional[str]]:
        return (
            AuditAction.CREATE,
            f"Registered new staff: {staff.name} ({staff.role.value})",
            staff.id,
        )

    @staticmethod
    def staff_role_changed(
        staff: StaffUser,
        role: Role,
    ) -> tuple[AuditAction, str, Optional[str]]:
        return (
            AuditAction.UPDATE,
            f"Changed access of staff {staff.name} to {role.value}",
            staff.id,
        )

    @staticmethod
    def staff_deleted(staff: StaffUser) -> tuple[AuditAction, str, Optional[str]]:
        return AuditAction.DELETE, f"Deactivated staff: {staff.name}", staff.id

    @staticmethod
    def account_added(account: Account) -> tuple[AuditAction, str, Optional[str]]:
        return (
            AuditAction.CREATE,
            f"Added new account: {account.name} ({account.id})",
            account.id,
        )

    @staticmethod
    def account_updated(account: Account) -> tuple[AuditAction, str, Optional[str]]:
        return AuditAction.UPDATE, f"Updated details of account {account.id}", account.id

    @staticmethod
    def account_deleted(account: Account) -> tuple[AuditAction, str, Optional[str]]:
        return AuditAction.DELETE, f"Deleted account {account.id}", account.id

    @staticmethod
    def report_exported(row_count: int) -> tuple[AuditAction, str, Optional[str]]:
        return (
            AuditAction.CREATE,
            f"Downloaded report ({row_count} rows) as CSV",
            None,
        )
