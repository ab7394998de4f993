"""
Core Data Models for FinCorp Ledger

These models define the schemas for everything the ledger stores or derives.
They are designed to:
1. Enforce type safety at runtime
2. Round-trip through the persisted JSON documents unchanged
3. Keep monetary values exact (Decimal, never float)

DESIGN DECISION: Persisted documents use camelCase keys (accountId,
finalBalance, ...) while Python code uses snake_case. The alias generator
bridges the two; populate_by_name lets code construct models either way.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


STORED_MODEL_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Role(str, Enum):
    """Staff role. Only administrators manage staff and accounts."""
    ADMIN = "Administrator"
    STAFF = "Staff"


class AccountType(str, Enum):
    """Account category."""
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


class TabMode(str, Enum):
    """
    Which derived view is rendered.

    Only RECENT truncates the transaction list.
    """
    RECENT = "RECENT"
    ALL = "ALL"
    ACCOUNTS = "ACCOUNTS"
    LOGS = "LOGS"


class EntityKind(str, Enum):
    """Kinds of entity a deletion can target."""
    TRANSACTION = "transaction"
    STAFF = "staff"
    ACCOUNT = "account"


# =============================================================================
# STORED ENTITIES
# =============================================================================

class StaffUser(BaseModel):
    """A member of staff who can log in."""
    model_config = STORED_MODEL_CONFIG

    id: str
    name: str
    username: str
    role: Role = Role.STAFF

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class Account(BaseModel):
    """
    A named bucket that transactions reference.

    CRITICAL: There is no balance field. Balances are always derived
    from the transaction log by the ledger engine.
    """
    model_config = STORED_MODEL_CONFIG

    id: str
    name: str
    account_type: AccountType = Field(
        default=AccountType.DEBIT,
        alias="type",
    )


class Transaction(BaseModel):
    """
    One cash-in (positive amount) or cash-out (negative amount) entry.

    final_balance is the company total balance right after this entry was
    created. It is a point-in-time snapshot and is never recalculated,
    even when older transactions are later edited or deleted.
    """
    model_config = STORED_MODEL_CONFIG

    id: str
    code: str = Field(
        ...,
        description="Human-entered transaction number (uniqueness not enforced)"
    )
    date: datetime = Field(
        ...,
        description="When the transaction happened; naive values are local time"
    )
    amount: Decimal = Field(
        ...,
        description="Signed amount: + inflow, - outflow"
    )
    final_balance: Decimal = Decimal("0")

    # Who recorded it (name is a snapshot)
    staff_id: str
    staff_name: str

    customer_name: str
    customer_user: str = Field(
        default="",
        description="Customer handle"
    )
    description: str = ""
    account_id: str


# =============================================================================
# INPUT MODELS - what the mutation handlers accept
# =============================================================================

class TransactionDraft(BaseModel):
    """
    Fields entered for a new transaction.

    Everything is optional here so that an incomplete form can be
    detected and skipped instead of raising.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    code: Optional[str] = None
    customer_name: Optional[str] = None
    customer_user: Optional[str] = None
    amount: Optional[Decimal] = None
    description: str = ""
    account_id: Optional[str] = None
    date: Optional[datetime] = None

    def missing_fields(self) -> list[str]:
        """Names of required fields that are absent or blank."""
        missing = [
            name
            for name in ("code", "customer_name", "customer_user", "account_id")
            if not getattr(self, name)
        ]
        if self.amount is None:
            missing.append("amount")
        return missing


class TransactionUpdate(BaseModel):
    """
    Partial changes to an existing transaction.

    Only fields explicitly set are merged. The staff snapshot, the date
    and final_balance cannot be edited.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    code: Optional[str] = None
    customer_name: Optional[str] = None
    customer_user: Optional[str] = None
    amount: Optional[Decimal] = None
    description: Optional[str] = None
    account_id: Optional[str] = None


class StaffDraft(BaseModel):
    """Fields entered for a new staff member."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = None
    username: Optional[str] = None
    role: Role = Role.STAFF


class AccountDraft(BaseModel):
    """Fields entered for a new account. The caller chooses the id."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[str] = None
    name: Optional[str] = None
    account_type: AccountType = AccountType.DEBIT


class AccountUpdate(BaseModel):
    """Partial changes to an existing account."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = None
    account_type: Optional[AccountType] = None


# =============================================================================
# DERIVED / VIEW MODELS
# =============================================================================

class AccountBalance(BaseModel):
    """An account together with its derived balance."""

    account: Account
    balance: Decimal


class LedgerTotals(BaseModel):
    """
    Aggregates over the whole transaction log.

    These ignore every view filter.
    """

    total_balance: Decimal = Decimal("0")
    total_income: Decimal = Decimal("0")
    total_expense: Decimal = Decimal("0")


class TransactionFilter(BaseModel):
    """
    Parameters of the displayed transaction view.

    Dates are calendar days; the filter expands them to the start and
    end of the day in local time.
    """

    account_id: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    search_query: str = ""
    tab: TabMode = TabMode.RECENT

    @property
    def has_active_filter(self) -> bool:
        """True when any of scope, dates or query is set."""
        return bool(
            self.account_id
            or self.start_date
            or self.end_date
            or self.search_query
        )


class DeletionIntent(BaseModel):
    """
    First half of the two-step delete protocol.

    The caller shows `prompt` to the user, then passes `intent_id`
    to confirm_deletion or cancel_deletion.
    """
    model_config = ConfigDict(frozen=True)

    intent_id: UUID = Field(default_factory=uuid4)
    entity: EntityKind
    target_id: str
    prompt: str


class LoginResult(BaseModel):
    """Outcome of a login attempt."""

    success: bool
    user: Optional[StaffUser] = None
    error_message: Optional[str] = None


class CsvReport(BaseModel):
    """
    An exported report ready to be offered for download.

    `criteria` is the view the rows were taken from; once the view
    changes the report no longer matches what is displayed.
    """

    filename: str
    content: bytes
    row_count: int = Field(ge=0)
    criteria: TransactionFilter
