"""
Main Orchestrator for FinCorp Ledger

This module ties together all the components and defines the
end-to-end flows for:
1. Session (login → work → logout)
2. Transactions, staff and accounts (create / update / two-step delete)
3. Derived views (totals, balances, filtered transactions, audit feed)
4. Report export

DESIGN DECISION: One LedgerController owns ALL mutable state.
The current user, the view filters and the four collections live on the
controller and nowhere else, and every mutation goes through it:
- Each handler runs to completion synchronously
- Each handler replaces one collection and persists it
- Each handler records exactly one audit entry
- Refusals (validation, not-found, authorization) return None/False
  and are logged; they never raise

Deletes are a two-step protocol. request_*_deletion returns a
DeletionIntent; nothing changes until confirm_deletion is called with
its id. cancel_deletion (or simply never confirming) leaves state intact.
"""

import logging
from collections.abc import Callable
from datetime import date, datetime
from typing import Optional
from uuid import UUID, uuid4

import structlog
from pydantic import BaseModel, Field

from fincorp.audit import AuditRecorder
from fincorp.config import LedgerSettings, get_settings
from fincorp.ledger import account_balances, compute_totals
from fincorp.models.audit import AuditEntryBuilder, AuditLogEntry
from fincorp.models.ledger import (
    Account,
    AccountBalance,
    AccountDraft,
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
from fincorp.queries import filter_transactions
from fincorp.reports import build_csv, suggest_filename
from fincorp.services.storage import JsonFileStore, LedgerStore

logger = structlog.get_logger(__name__)

LOGIN_ERROR_MESSAGE = "Username not found. Try: admin, siti, budi, ..."

# Fields a transaction cannot be saved without
REQUIRED_TRANSACTION_TEXT = ("code", "customer_name", "customer_user", "account_id")


def _now() -> datetime:
    return datetime.now().astimezone()


# =============================================================================
# AUTHORIZATION - decides which actions are offered at all
# =============================================================================

def is_admin(user: Optional[StaffUser]) -> bool:
    return user is not None and user.role == Role.ADMIN


def can_delete_transaction(user: Optional[StaffUser], trx: Transaction) -> bool:
    """Administrators, or the staff member who recorded the transaction."""
    if user is None:
        return False
    return user.role == Role.ADMIN or trx.staff_id == user.id


def can_delete_staff(
    user: Optional[StaffUser],
    target: StaffUser,
    reserved_username: str,
) -> bool:
    """Administrators only, and never the reserved admin username."""
    return is_admin(user) and target.username != reserved_username


class ViewState(BaseModel):
    """Who is logged in and what the transaction view is showing."""

    current_user: Optional[StaffUser] = None
    criteria: TransactionFilter = Field(default_factory=TransactionFilter)


class LedgerController:
    """
    Single owner of the ledger state.

    Usage:
        controller = create_app_components()
        controller.login("admin", "")
        controller.create_transaction(TransactionDraft(...))
        rows = controller.displayed_transactions()
    """

    def __init__(
        self,
        store: LedgerStore,
        settings: Optional[LedgerSettings] = None,
        clock: Callable[[], datetime] = _now,
    ):
        self._store = store
        self._settings = settings or get_settings().ledger
        self._clock = clock
        self._state = store.load()
        self._view = ViewState()
        self._pending: dict[UUID, DeletionIntent] = {}
        self._recorder = AuditRecorder(
            state=self._state,
            store=store,
            current_actor=lambda: self._view.current_user,
            settings=self._settings,
            clock=clock,
        )

    # -------------------------------------------------------------------------
    # Read side
    # -------------------------------------------------------------------------

    @property
    def current_user(self) -> Optional[StaffUser]:
        return self._view.current_user

    @property
    def criteria(self) -> TransactionFilter:
        return self._view.criteria

    @property
    def staff(self) -> list[StaffUser]:
        return list(self._state.staff)

    @property
    def transactions(self) -> list[Transaction]:
        return list(self._state.transactions)

    @property
    def accounts(self) -> list[Account]:
        return list(self._state.accounts)

    @property
    def audit_log(self) -> list[AuditLogEntry]:
        """Newest first."""
        return list(self._state.audit_log)

    def totals(self) -> LedgerTotals:
        """Company-wide totals; ignores the view filters."""
        return compute_totals(self._state.transactions)

    def account_balances(self) -> list[AccountBalance]:
        return account_balances(self._state.accounts, self._state.transactions)

    def displayed_transactions(self) -> list[Transaction]:
        return filter_transactions(
            self._state.transactions,
            self._view.criteria,
            recent_limit=self._settings.recent_limit,
        )

    def find_account(self, account_id: str) -> Optional[Account]:
        """The account with this id, or None for an orphaned reference."""
        return next((a for a in self._state.accounts if a.id == account_id), None)

    def find_transaction(self, transaction_id: str) -> Optional[Transaction]:
        return next((t for t in self._state.transactions if t.id == transaction_id), None)

    def find_staff(self, staff_id: str) -> Optional[StaffUser]:
        return next((s for s in self._state.staff if s.id == staff_id), None)

    def can_delete(self, trx: Transaction) -> bool:
        return can_delete_transaction(self._view.current_user, trx)

    def can_manage(self) -> bool:
        """Whether staff and account administration is available."""
        return is_admin(self._view.current_user)

    # -------------------------------------------------------------------------
    # View state
    # -------------------------------------------------------------------------

    def _update_criteria(self, **changes) -> TransactionFilter:
        self._view.criteria = self._view.criteria.model_copy(update=changes)
        return self._view.criteria

    def set_tab(self, tab: TabMode) -> TransactionFilter:
        """Switch tab. Every tab except Accounts drops the account scope."""
        if tab == TabMode.ACCOUNTS:
            return self._update_criteria(tab=tab)
        return self._update_criteria(tab=tab, account_id=None)

    def select_account(self, account_id: str) -> TransactionFilter:
        """
        Scope the view to one account.

        Moves to the All tab so the Recent truncation can never hide
        scoped rows.
        """
        return self._update_criteria(account_id=account_id, tab=TabMode.ALL)

    def set_search(self, query: str) -> TransactionFilter:
        return self._update_criteria(search_query=query)

    def set_date_range(
        self,
        start_date: Optional[date],
        end_date: Optional[date],
    ) -> TransactionFilter:
        return self._update_criteria(start_date=start_date, end_date=end_date)

    def reset_view(self) -> TransactionFilter:
        """Clear scope, dates and query and return to the Recent tab."""
        self._view.criteria = TransactionFilter()
        return self._view.criteria

    # -------------------------------------------------------------------------
    # Session
    # -------------------------------------------------------------------------

    def login(self, username: str, password: str = "") -> LoginResult:
        """
        Log in by username (case-insensitive exact match).

        The password is accepted and not checked.
        """
        wanted = username.strip().lower()
        user = next((s for s in self._state.staff if s.username.lower() == wanted), None)

        if user is None:
            logger.info("login_failed", username=username)
            return LoginResult(success=False, error_message=LOGIN_ERROR_MESSAGE)

        self._view.current_user = user
        self._recorder.record_event(AuditEntryBuilder.user_logged_in(user))
        logger.info("login_succeeded", user_id=user.id)
        return LoginResult(success=True, user=user)

    def logout(self) -> None:
        user = self._view.current_user
        if user is None:
            return
        self._recorder.record_event(AuditEntryBuilder.user_logged_out(user))
        self._view.current_user = None
        self._pending.clear()

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    def create_transaction(self, draft: TransactionDraft) -> Optional[Transaction]:
        """
        Record a new transaction for the current user.

        final_balance = total balance before insertion + amount.
        Returns None (and changes nothing) when nobody is logged in or a
        required field is missing.
        """
        user = self._view.current_user
        if user is None:
            logger.info("transaction_refused", reason="not_logged_in")
            return None

        missing = draft.missing_fields()
        if missing:
            logger.info("transaction_refused", reason="missing_fields", fields=missing)
            return None

        total_before = compute_totals(self._state.transactions).total_balance
        trx = Transaction(
            id=f"trx-{uuid4().hex}",
            code=draft.code,
            date=draft.date or self._clock(),
            amount=draft.amount,
            final_balance=total_before + draft.amount,
            staff_id=user.id,
            staff_name=user.name,
            customer_name=draft.customer_name,
            customer_user=draft.customer_user,
            description=draft.description,
            account_id=draft.account_id,
        )

        self._state.transactions = [trx, *self._state.transactions]
        self._store.save_transactions(self._state.transactions)
        self._recorder.record_event(AuditEntryBuilder.transaction_created(trx))

        logger.info("transaction_created", transaction_id=trx.id, amount=str(trx.amount))
        return trx

    def update_transaction(
        self,
        transaction_id: str,
        changes: TransactionUpdate,
    ) -> Optional[Transaction]:
        """
        Merge the fields set on `changes` into an existing transaction.

        final_balance is left as it was.
        """
        if self._view.current_user is None:
            logger.info("transaction_update_refused", reason="not_logged_in")
            return None

        existing = self.find_transaction(transaction_id)
        if existing is None:
            logger.info("transaction_update_refused", reason="not_found", transaction_id=transaction_id)
            return None

        fields = changes.model_dump(exclude_unset=True, exclude_none=True)
        blanked = [name for name in REQUIRED_TRANSACTION_TEXT if name in fields and not fields[name]]
        if blanked:
            logger.info("transaction_update_refused", reason="missing_fields", fields=blanked)
            return None

        # Edit forms resubmit every field; only real differences count
        fields = {name: value for name, value in fields.items() if getattr(existing, name) != value}
        if not fields:
            return existing

        updated = existing.model_copy(update=fields)
        self._state.transactions = [
            updated if t.id == transaction_id else t for t in self._state.transactions
        ]
        self._store.save_transactions(self._state.transactions)
        self._recorder.record_event(AuditEntryBuilder.transaction_updated(updated))

        logger.info("transaction_updated", transaction_id=transaction_id, fields=sorted(fields))
        return updated

    def request_transaction_deletion(self, transaction_id: str) -> Optional[DeletionIntent]:
        trx = self.find_transaction(transaction_id)
        if trx is None or not can_delete_transaction(self._view.current_user, trx):
            logger.info("deletion_refused", entity="transaction", target_id=transaction_id)
            return None
        return self._open_intent(
            EntityKind.TRANSACTION,
            trx.id,
            f"Are you sure you want to delete transaction {trx.code}?",
        )

    def _delete_transaction(self, transaction_id: str) -> bool:
        trx = self.find_transaction(transaction_id)
        if trx is None or not can_delete_transaction(self._view.current_user, trx):
            return False

        self._state.transactions = [t for t in self._state.transactions if t.id != transaction_id]
        self._store.save_transactions(self._state.transactions)
        self._recorder.record_event(AuditEntryBuilder.transaction_deleted(trx))
        return True

    # -------------------------------------------------------------------------
    # Staff (administrators only)
    # -------------------------------------------------------------------------

    def add_staff(self, draft: StaffDraft) -> Optional[StaffUser]:
        if not self.can_manage():
            logger.info("staff_refused", reason="not_admin")
            return None
        if not draft.name or not draft.username:
            logger.info("staff_refused", reason="missing_fields")
            return None

        wanted = draft.username.lower()
        if any(s.username.lower() == wanted for s in self._state.staff):
            logger.info("staff_refused", reason="duplicate_username", username=draft.username)
            return None

        member = StaffUser(
            id=f"staff-{uuid4().hex}",
            name=draft.name,
            username=draft.username,
            role=draft.role,
        )
        self._state.staff = [*self._state.staff, member]
        self._store.save_staff(self._state.staff)
        self._recorder.record_event(AuditEntryBuilder.staff_added(member))
        return member

    def update_staff_role(self, staff_id: str, role: Role) -> Optional[StaffUser]:
        """Change only the role of a staff member."""
        if not self.can_manage():
            logger.info("staff_role_refused", reason="not_admin")
            return None

        target = self.find_staff(staff_id)
        if target is None:
            logger.info("staff_role_refused", reason="not_found", staff_id=staff_id)
            return None

        updated = target.model_copy(update={"role": role})
        self._state.staff = [updated if s.id == staff_id else s for s in self._state.staff]
        self._store.save_staff(self._state.staff)
        self._recorder.record_event(AuditEntryBuilder.staff_role_changed(target, role))

        current = self._view.current_user
        if current is not None and current.id == staff_id:
            self._view.current_user = updated
        return updated

    def request_staff_deletion(self, staff_id: str) -> Optional[DeletionIntent]:
        target = self.find_staff(staff_id)
        reserved = self._settings.reserved_admin_username
        if target is None or not can_delete_staff(self._view.current_user, target, reserved):
            logger.info("deletion_refused", entity="staff", target_id=staff_id)
            return None
        return self._open_intent(
            EntityKind.STAFF,
            target.id,
            f"Delete staff {target.name}?",
        )

    def _delete_staff(self, staff_id: str) -> bool:
        target = self.find_staff(staff_id)
        reserved = self._settings.reserved_admin_username
        if target is None or not can_delete_staff(self._view.current_user, target, reserved):
            return False

        self._state.staff = [s for s in self._state.staff if s.id != staff_id]
        self._store.save_staff(self._state.staff)
        self._recorder.record_event(AuditEntryBuilder.staff_deleted(target))
        return True

    # -------------------------------------------------------------------------
    # Accounts (administrators only)
    # -------------------------------------------------------------------------

    def add_account(self, draft: AccountDraft) -> Optional[Account]:
        """Add an account. Duplicate ids are accepted."""
        if not self.can_manage():
            logger.info("account_refused", reason="not_admin")
            return None
        if not draft.id or not draft.name:
            logger.info("account_refused", reason="missing_fields")
            return None

        account = Account(id=draft.id, name=draft.name, account_type=draft.account_type)
        self._state.accounts = [*self._state.accounts, account]
        self._store.save_accounts(self._state.accounts)
        self._recorder.record_event(AuditEntryBuilder.account_added(account))
        return account

    def update_account(self, account_id: str, changes: AccountUpdate) -> Optional[Account]:
        if not self.can_manage():
            logger.info("account_update_refused", reason="not_admin")
            return None

        existing = self.find_account(account_id)
        if existing is None:
            logger.info("account_update_refused", reason="not_found", account_id=account_id)
            return None

        fields = changes.model_dump(exclude_unset=True, exclude_none=True)
        if "name" in fields and not fields["name"]:
            logger.info("account_update_refused", reason="missing_fields", fields=["name"])
            return None

        fields = {name: value for name, value in fields.items() if getattr(existing, name) != value}
        if not fields:
            return existing

        self._state.accounts = [
            a.model_copy(update=fields) if a.id == account_id else a
            for a in self._state.accounts
        ]
        self._store.save_accounts(self._state.accounts)
        updated = self.find_account(account_id)
        self._recorder.record_event(AuditEntryBuilder.account_updated(updated))
        return updated

    def request_account_deletion(self, account_id: str) -> Optional[DeletionIntent]:
        account = self.find_account(account_id)
        if account is None or not self.can_manage():
            logger.info("deletion_refused", entity="account", target_id=account_id)
            return None
        return self._open_intent(
            EntityKind.ACCOUNT,
            account.id,
            f"Delete account {account.name} ({account.id})? "
            "Its transactions are kept.",
        )

    def _delete_account(self, account_id: str) -> bool:
        """Remove the account only; referencing transactions stay as they are."""
        account = self.find_account(account_id)
        if account is None or not self.can_manage():
            return False

        self._state.accounts = [a for a in self._state.accounts if a.id != account_id]
        self._store.save_accounts(self._state.accounts)
        self._recorder.record_event(AuditEntryBuilder.account_deleted(account))

        if self._view.criteria.account_id == account_id:
            logger.info("scope_orphaned", account_id=account_id)
        return True

    # -------------------------------------------------------------------------
    # Two-step deletion
    # -------------------------------------------------------------------------

    def _open_intent(self, entity: EntityKind, target_id: str, prompt: str) -> DeletionIntent:
        intent = DeletionIntent(entity=entity, target_id=target_id, prompt=prompt)
        self._pending[intent.intent_id] = intent
        return intent

    def confirm_deletion(self, intent_id: UUID) -> bool:
        """
        Carry out a previously requested deletion.

        Existence and permission are checked again, since state may have
        changed since the request. Unknown or used intents are a no-op.
        """
        intent = self._pending.pop(intent_id, None)
        if intent is None:
            logger.info("deletion_not_pending", intent_id=str(intent_id))
            return False

        handlers: dict[EntityKind, Callable[[str], bool]] = {
            EntityKind.TRANSACTION: self._delete_transaction,
            EntityKind.STAFF: self._delete_staff,
            EntityKind.ACCOUNT: self._delete_account,
        }
        deleted = handlers[intent.entity](intent.target_id)
        logger.info(
            "deletion_confirmed" if deleted else "deletion_refused",
            entity=intent.entity.value,
            target_id=intent.target_id,
        )
        return deleted

    def cancel_deletion(self, intent_id: UUID) -> bool:
        """Drop a pending deletion. State is untouched either way."""
        return self._pending.pop(intent_id, None) is not None

    # -------------------------------------------------------------------------
    # Reports
    # -------------------------------------------------------------------------

    def export_report(self, today: Optional[date] = None) -> Optional[CsvReport]:
        """
        Export the currently displayed transactions as CSV.

        The export itself is audited as a CREATE.
        """
        if self._view.current_user is None:
            logger.info("export_refused", reason="not_logged_in")
            return None

        rows = self.displayed_transactions()
        criteria = self._view.criteria
        report = CsvReport(
            filename=suggest_filename(
                today or self._clock().date(),
                account_id=criteria.account_id,
                search_query=criteria.search_query,
                prefix=self._settings.report_filename_prefix,
                search_chars=self._settings.search_filename_chars,
            ),
            content=build_csv(rows),
            row_count=len(rows),
            criteria=criteria,
        )
        self._recorder.record_event(AuditEntryBuilder.report_exported(report.row_count))
        return report

    def report_is_current(self, report: Optional[CsvReport]) -> bool:
        """Whether the report was built from the view as it is now."""
        return report is not None and report.criteria == self._view.criteria


def create_app_components(
    store: Optional[LedgerStore] = None,
) -> LedgerController:
    """
    Factory function to create the application controller.

    Args:
        store: Ledger storage to use. Defaults to the JSON directory
               configured in settings.

    Returns:
        A LedgerController with collections loaded (or seeded)
    """
    settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.app.log_level),
        format="%(message)s",
    )

    if store is None:
        store = LedgerStore(JsonFileStore(settings.storage.data_dir), settings.storage)

    return LedgerController(store=store, settings=settings.ledger)
