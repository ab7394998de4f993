"""Tests for key-value stores and typed collection loading."""

import json

import pytest
from pydantic import ValidationError

from fincorp.config import StorageSettings
from fincorp.models.ledger import Account, AccountType
from fincorp.services.storage import (
    CorruptDocumentError,
    InMemoryStore,
    JsonFileStore,
    LedgerStore,
    StorageError,
)


class TestSeeding:
    """Missing or unreadable documents fall back to the seed."""

    def test_empty_store_loads_seed(self, ledger_store):
        """Test first launch."""
        snapshot = ledger_store.load()
        assert len(snapshot.staff) == 5
        assert len(snapshot.accounts) == 15
        assert len(snapshot.transactions) == 3
        assert snapshot.audit_log == []

    def test_seed_accounts(self, ledger_store):
        """Test the seeded chart of accounts."""
        accounts = ledger_store.load_accounts()
        assert accounts[0].id == "ACC-1"
        assert accounts[14].id == "ACC-15"
        assert accounts[0].account_type == AccountType.CREDIT
        assert accounts[1].account_type == AccountType.DEBIT
        assert accounts[3].account_type == AccountType.CREDIT

    def test_seed_has_reserved_admin(self, ledger_store):
        """Test the seeded administrator."""
        usernames = [s.username for s in ledger_store.load_staff()]
        assert "admin" in usernames

    @pytest.mark.parametrize(
        "document",
        ["not json at all", '{"id": "x"}', '[{"id": 1}]', '[{"id": "ACC-1", "type": "SAVINGS"}]'],
    )
    def test_invalid_document_is_seeded(self, document):
        """Test that a malformed accounts document is replaced by the seed."""
        store = LedgerStore(InMemoryStore({"company_accounts": document}), StorageSettings())
        assert len(store.load_accounts()) == 15

    def test_collections_fail_independently(self):
        """Test that one bad document does not affect the others."""
        store = LedgerStore(
            InMemoryStore({"company_staff": "{broken", "company_trxs": "[]"}),
            StorageSettings(),
        )
        snapshot = store.load()
        assert len(snapshot.staff) == 5
        assert snapshot.transactions == []

    def test_undecodable_file_is_seeded(self, tmp_path):
        """Test that a document with invalid UTF-8 bytes falls back to the seed."""
        (tmp_path / "company_staff.json").write_bytes(b"\xff\xfe[broken")
        store = LedgerStore(JsonFileStore(tmp_path), StorageSettings())
        snapshot = store.load()
        assert len(snapshot.staff) == 5
        assert len(snapshot.accounts) == 15

    def test_loading_does_not_write(self, memory_store, ledger_store):
        """Test that seeding happens in memory only."""
        ledger_store.load()
        assert memory_store.write_count == 0


class TestPersistence:
    """Saving and reloading collections."""

    def test_save_uses_camel_case_keys(self, memory_store, ledger_store):
        """Test the persisted document format."""
        ledger_store.save_transactions(ledger_store.load_transactions())
        document = json.loads(memory_store.get_item("company_trxs"))
        assert document[0]["finalBalance"] == "245000000"
        assert document[0]["accountId"] == "ACC-1"

    def test_account_type_persists_as_type(self, memory_store, ledger_store):
        """Test the account type key."""
        ledger_store.save_accounts([Account(id="X", name="Kas", account_type=AccountType.CREDIT)])
        document = json.loads(memory_store.get_item("company_accounts"))
        assert document == [{"id": "X", "name": "Kas", "type": "CREDIT"}]

    def test_round_trip_through_files(self, tmp_path):
        """Test that a saved ledger reloads unchanged from disk."""
        settings = StorageSettings()
        first = LedgerStore(JsonFileStore(tmp_path), settings)
        snapshot = first.load()
        first.save_staff(snapshot.staff)
        first.save_transactions(snapshot.transactions)
        first.save_accounts(snapshot.accounts[:2])

        second = LedgerStore(JsonFileStore(tmp_path), settings)
        assert second.load_staff() == snapshot.staff
        assert second.load_transactions() == snapshot.transactions
        assert [a.id for a in second.load_accounts()] == ["ACC-1", "ACC-2"]

    def test_numeric_amounts_are_accepted(self):
        """Test documents that store amounts as JSON numbers."""
        document = json.dumps([{
            "id": "t1", "code": "TRX-1", "date": "2026-02-11T14:13:00",
            "amount": -1500, "finalBalance": 0, "staffId": "1", "staffName": "Siti",
            "customerName": "PT A", "customerUser": "pta", "description": "",
            "accountId": "ACC-1",
        }])
        store = LedgerStore(InMemoryStore({"company_trxs": document}), StorageSettings())
        assert store.load_transactions()[0].amount == -1500


class TestJsonFileStore:
    """Tests for the directory-backed store."""

    def test_missing_key(self, tmp_path):
        """Test that an unwritten key reads as None."""
        assert JsonFileStore(tmp_path).get_item("nothing") is None

    def test_set_get_remove(self, tmp_path):
        """Test the basic document lifecycle."""
        store = JsonFileStore(tmp_path / "data")
        store.set_item("company_staff", "[]")
        assert (tmp_path / "data" / "company_staff.json").read_text(encoding="utf-8") == "[]"
        assert store.get_item("company_staff") == "[]"
        store.remove_item("company_staff")
        assert store.get_item("company_staff") is None
        store.remove_item("company_staff")

    def test_overwrite_leaves_no_temp_files(self, tmp_path):
        """Test that replaced documents leave only the final file."""
        store = JsonFileStore(tmp_path)
        store.set_item("k", "one")
        store.set_item("k", "two")
        assert store.get_item("k") == "two"
        assert [p.name for p in tmp_path.iterdir()] == ["k.json"]

    def test_invalid_utf8_raises_corrupt_document(self, tmp_path):
        """Test that undecodable bytes surface as CorruptDocumentError."""
        (tmp_path / "k.json").write_bytes(b"\xff\xfe")
        with pytest.raises(CorruptDocumentError):
            JsonFileStore(tmp_path).get_item("k")

    def test_write_failure_raises_storage_error(self, tmp_path):
        """Test that OS errors surface as StorageError."""
        not_a_dir = tmp_path / "occupied"
        not_a_dir.write_text("file", encoding="utf-8")
        with pytest.raises(StorageError):
            JsonFileStore(not_a_dir).set_item("k", "v")


class TestStorageSettings:
    """Tests for storage configuration."""

    def test_default_keys(self):
        """Test the default document keys."""
        settings = StorageSettings()
        assert settings.staff_key == "company_staff"
        assert settings.transactions_key == "company_trxs"
        assert settings.accounts_key == "company_accounts"
        assert settings.audit_key == "company_audit_logs"

    def test_key_with_separator_rejected(self):
        """Test that keys cannot escape the data directory."""
        with pytest.raises(ValidationError):
            StorageSettings(staff_key="../staff")
