"""Tests for the displayed transaction view."""

import pytest
from datetime import date, datetime, timedelta, timezone

from fincorp.models.ledger import TabMode, TransactionFilter
from fincorp.queries import (
    describe_filter,
    end_of_day,
    filter_transactions,
    matches_search,
    start_of_day,
)
from fincorp.services.storage.seed import seed_transactions


@pytest.fixture
def fifteen(make_trx):
    """Fifteen transactions, one per hour, oldest first."""
    base = datetime(2026, 3, 1, 8, 0)
    return [
        make_trx(f"t{i}", str(i * 1000), when=base + timedelta(hours=i))
        for i in range(15)
    ]


class TestTruncation:
    """Only the unfiltered Recent tab truncates."""

    def test_recent_shows_ten_newest(self, fifteen):
        """Test the Recent tab with no filter."""
        result = filter_transactions(fifteen, TransactionFilter(tab=TabMode.RECENT))
        assert len(result) == 10
        assert result[0].id == "t14"
        assert result[-1].id == "t5"

    def test_all_shows_everything(self, fifteen):
        """Test the All tab."""
        result = filter_transactions(fifteen, TransactionFilter(tab=TabMode.ALL))
        assert len(result) == 15

    def test_filter_disables_truncation(self, fifteen):
        """Test that an active filter on Recent returns every match."""
        criteria = TransactionFilter(tab=TabMode.RECENT, account_id="ACC-1")
        assert len(filter_transactions(fifteen, criteria)) == 15

    def test_whitespace_query_disables_truncation_without_filtering(self, fifteen):
        """Test that a blank query matches all but still counts as a filter."""
        criteria = TransactionFilter(tab=TabMode.RECENT, search_query="   ")
        assert len(filter_transactions(fifteen, criteria)) == 15

    def test_custom_limit(self, fifteen):
        """Test a configured Recent limit."""
        result = filter_transactions(fifteen, TransactionFilter(), recent_limit=3)
        assert [t.id for t in result] == ["t14", "t13", "t12"]


class TestFiltering:
    """Scope, date range and search."""

    def test_account_scope(self, make_trx):
        """Test that only the scoped account's rows remain."""
        transactions = [
            make_trx("a", "1", account_id="ACC-1"),
            make_trx("b", "1", account_id="ACC-2"),
        ]
        result = filter_transactions(transactions, TransactionFilter(account_id="ACC-2"))
        assert [t.id for t in result] == ["b"]

    def test_search_is_case_insensitive(self):
        """Test that "indo" finds PT Indo Gemilang."""
        result = filter_transactions(seed_transactions(), TransactionFilter(search_query="indo"))
        assert [t.id for t in result] == ["trx-1"]

    @pytest.mark.parametrize(
        "query",
        ["TRX-t1", "maju jaya", "MAJUJAYA", "siti", "gaji", "acc-7"],
    )
    def test_searchable_fields(self, make_trx, query):
        """Test each of the six searchable fields."""
        trx = make_trx("t1", "1", account_id="ACC-7", description="Gaji Maret")
        assert matches_search(trx, query)

    def test_amount_is_not_searchable(self, make_trx):
        """Test that amounts are not part of the search."""
        trx = make_trx("t1", "123456")
        assert not matches_search(trx, "123456")

    def test_date_range_is_inclusive(self, make_trx):
        """Test both ends of a single-day range."""
        day = date(2026, 2, 11)
        transactions = [
            make_trx("early", "1", when=datetime(2026, 2, 11, 0, 0)),
            make_trx("late", "1", when=datetime(2026, 2, 11, 23, 59, 59)),
            make_trx("before", "1", when=datetime(2026, 2, 10, 23, 59)),
            make_trx("after", "1", when=datetime(2026, 2, 12, 0, 0)),
        ]
        criteria = TransactionFilter(start_date=day, end_date=day)
        assert {t.id for t in filter_transactions(transactions, criteria)} == {"early", "late"}

    def test_empty_range(self):
        """Test that a range with no transactions yields nothing, without error."""
        criteria = TransactionFilter(start_date=date(2030, 1, 1), end_date=date(2030, 1, 31))
        assert filter_transactions(seed_transactions(), criteria) == []

    def test_inverted_range_is_empty(self):
        """Test a start date after the end date."""
        criteria = TransactionFilter(start_date=date(2026, 2, 12), end_date=date(2026, 2, 10))
        assert filter_transactions(seed_transactions(), criteria) == []

    def test_aware_timestamps_compare_in_local_time(self, make_trx):
        """Test that offset-carrying and naive timestamps sort together."""
        local_noon = datetime(2026, 2, 11, 12, 0)
        aware = local_noon.astimezone().astimezone(timezone.utc) + timedelta(minutes=1)
        transactions = [
            make_trx("naive", "1", when=local_noon),
            make_trx("aware", "1", when=aware),
        ]
        result = filter_transactions(transactions, TransactionFilter(tab=TabMode.ALL))
        assert [t.id for t in result] == ["aware", "naive"]

    def test_day_bounds(self):
        """Test the expanded start and end of a day."""
        day = date(2026, 2, 11)
        assert start_of_day(day) == datetime(2026, 2, 11, 0, 0)
        assert end_of_day(day) == datetime(2026, 2, 11, 23, 59, 59, 999000)


class TestOrdering:
    """Display order."""

    def test_newest_first_and_stable(self):
        """Test that equal timestamps keep their log order."""
        result = filter_transactions(seed_transactions(), TransactionFilter(tab=TabMode.ALL))
        # trx-2 and trx-3 share a timestamp; trx-2 comes first in the log
        assert [t.id for t in result] == ["trx-1", "trx-2", "trx-3"]

    def test_filtering_is_idempotent(self, fifteen):
        """Test that filtering twice gives the same sequence."""
        criteria = TransactionFilter(tab=TabMode.ALL, search_query="siti")
        once = filter_transactions(fifteen, criteria)
        assert filter_transactions(once, criteria) == once

    def test_input_is_not_modified(self, fifteen):
        """Test that the source log is left in its order."""
        original = list(fifteen)
        filter_transactions(fifteen, TransactionFilter())
        assert fifteen == original


class TestDescribeFilter:
    """View headings."""

    def test_default_heading(self):
        """Test the unfiltered heading."""
        assert describe_filter(TransactionFilter()) == "Transaction History"

    def test_scoped_heading_with_query(self):
        """Test a heading for an account scope and a search."""
        criteria = TransactionFilter(account_id="ACC-3", search_query=" indo ")
        assert describe_filter(criteria) == 'Account: ACC-3 | matching "indo"'

    def test_single_day_heading(self):
        """Test a one-day range."""
        day = date(2026, 2, 11)
        criteria = TransactionFilter(start_date=day, end_date=day)
        assert describe_filter(criteria) == "Transaction History | on 11 Feb 2026"
