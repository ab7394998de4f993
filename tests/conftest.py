"""Shared fixtures: every test runs against in-memory storage."""

from datetime import datetime
from decimal import Decimal

import pytest

from fincorp.config import LedgerSettings, StorageSettings
from fincorp.models.ledger import Transaction
from fincorp.orchestrator import LedgerController
from fincorp.services.storage import InMemoryStore, LedgerStore


def make_transaction(
    trx_id: str,
    amount: str,
    when: datetime = datetime(2026, 2, 11, 9, 0),
    account_id: str = "ACC-1",
    staff_id: str = "1",
    staff_name: str = "Siti Nurhaliza",
    customer_name: str = "PT Maju Jaya",
    **extra,
) -> Transaction:
    return Transaction(
        id=trx_id,
        code=extra.pop("code", f"TRX-{trx_id}"),
        date=when,
        amount=Decimal(amount),
        final_balance=Decimal("0"),
        staff_id=staff_id,
        staff_name=staff_name,
        customer_name=customer_name,
        customer_user=extra.pop("customer_user", "majujaya"),
        description=extra.pop("description", ""),
        account_id=account_id,
    )


@pytest.fixture
def make_trx():
    """Factory for transactions with sensible defaults."""
    return make_transaction


@pytest.fixture
def memory_store():
    return InMemoryStore()


@pytest.fixture
def ledger_store(memory_store):
    return LedgerStore(memory_store, StorageSettings())


@pytest.fixture
def ledger_settings():
    return LedgerSettings()


@pytest.fixture
def controller(ledger_store, ledger_settings):
    """Controller over the seed data, nobody logged in."""
    return LedgerController(store=ledger_store, settings=ledger_settings)


@pytest.fixture
def admin(controller):
    """Controller logged in as the administrator."""
    controller.login("admin")
    return controller


@pytest.fixture
def siti(controller):
    """Controller logged in as staff member Siti (id "1")."""
    controller.login("siti")
    return controller
