"""
Built-in seed dataset.

Used for any collection whose stored document is missing or unreadable:
the initial staff roster, the initial chart of accounts, a few sample
transactions and an empty audit log.

Factories return fresh lists so callers can never mutate the seed itself.
"""

from datetime import datetime
from decimal import Decimal

from fincorp.models.audit import AuditLogEntry
from fincorp.models.ledger import Account, AccountType, Role, StaffUser, Transaction

SEED_ACCOUNT_COUNT = 15


def seed_staff() -> list[StaffUser]:
    return [
        StaffUser(id="1", name="Siti Nurhaliza", username="siti", role=Role.STAFF),
        StaffUser(id="2", name="Budi Santoso", username="budi", role=Role.STAFF),
        StaffUser(id="3", name="Andi Wijaya", username="andi", role=Role.STAFF),
        StaffUser(id="4", name="Rahmat Hidayat", username="rahmat", role=Role.STAFF),
        StaffUser(id="admin-1", name="Administrator", username="admin", role=Role.ADMIN),
    ]


def seed_accounts() -> list[Account]:
    """ACC-1 .. ACC-15; every third account, starting with the first, is CREDIT."""
    return [
        Account(
            id=f"ACC-{i + 1}",
            name=f"Rekening Operasional {i + 1}",
            account_type=AccountType.CREDIT if i % 3 == 0 else AccountType.DEBIT,
        )
        for i in range(SEED_ACCOUNT_COUNT)
    ]


def seed_transactions() -> list[Transaction]:
    return [
        Transaction(
            id="trx-1",
            code="TRX20260211-01026",
            date=datetime(2026, 2, 11, 14, 13),
            staff_id="1",
            staff_name="Siti Nurhaliza",
            customer_name="PT Indo Gemilang",
            customer_user="indogemilang_admin",
            amount=Decimal("-24295627"),
            final_balance=Decimal("245000000"),
            description="Refund pelanggan",
            account_id="ACC-1",
        ),
        Transaction(
            id="trx-2",
            code="TRX20260211-01027",
            date=datetime(2026, 2, 11, 14, 11),
            staff_id="2",
            staff_name="Budi Santoso",
            customer_name="UD Cahaya Baru",
            customer_user="cahaya_owner",
            amount=Decimal("32165282"),
            final_balance=Decimal("269295627"),
            description="Penarikan tunai",
            account_id="ACC-1",
        ),
        Transaction(
            id="trx-3",
            code="TRX20260211-01028",
            date=datetime(2026, 2, 11, 14, 11),
            staff_id="3",
            staff_name="Andi Wijaya",
            customer_name="UD Cahaya Baru",
            customer_user="cahaya_owner",
            amount=Decimal("-15201798"),
            final_balance=Decimal("237130345"),
            description="Pembelian perlengkapan",
            account_id="ACC-2",
        ),
    ]


def seed_audit_log() -> list[AuditLogEntry]:
    return []
