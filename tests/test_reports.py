"""Tests for CSV report export."""

from datetime import date, datetime

from fincorp.reports import REPORT_HEADERS, build_csv, suggest_filename
from fincorp.services.storage.seed import seed_transactions


class TestBuildCsv:
    """CSV content."""

    def test_starts_with_bom(self):
        """Test the UTF-8 byte-order mark."""
        assert build_csv([]).startswith(b"\xef\xbb\xbf")

    def test_header_only_when_empty(self):
        """Test an empty export."""
        text = build_csv([]).decode("utf-8-sig")
        assert text == ",".join(REPORT_HEADERS) + "\n"

    def test_header_is_not_quoted(self):
        """Test that the header row is written bare while data rows are quoted."""
        lines = build_csv(seed_transactions()[:1]).decode("utf-8-sig").split("\n")
        assert lines[0].startswith("Transaction No.,Date,")
        assert lines[1].startswith('"TRX20260211-01026",')

    def test_row_quoting(self):
        """Test that text is quoted and the amount is bare."""
        text = build_csv(seed_transactions()[:1]).decode("utf-8-sig")
        row = text.split("\n")[1]
        assert row == (
            '"TRX20260211-01026","11 Feb 2026 14:13","PT Indo Gemilang",'
            '"indogemilang_admin","ACC-1",-24295627,"Siti Nurhaliza","Refund pelanggan"'
        )

    def test_embedded_quotes_are_doubled(self, make_trx):
        """Test escaping of quotes inside a field."""
        trx = make_trx("t1", "5", customer_name='PT "Maju"', when=datetime(2026, 1, 2, 3, 4))
        text = build_csv([trx]).decode("utf-8-sig")
        assert '"PT ""Maju"""' in text

    def test_empty_description_is_dash(self, make_trx):
        """Test the placeholder for a missing description."""
        text = build_csv([make_trx("t1", "5")]).decode("utf-8-sig")
        assert text.rstrip("\n").endswith(',"-"')

    def test_rows_keep_given_order(self):
        """Test that rows appear in the order they are passed."""
        rows = list(reversed(seed_transactions()))
        lines = build_csv(rows).decode("utf-8-sig").strip("\n").split("\n")
        assert len(lines) == 4
        assert lines[1].startswith('"TRX20260211-01028"')


class TestSuggestFilename:
    """Report file names."""

    def test_plain(self):
        """Test the name without scope or search."""
        assert suggest_filename(date(2026, 2, 11)) == "Financial_Report_2026-02-11.csv"

    def test_account_and_search(self):
        """Test that the search is cut to ten characters."""
        name = suggest_filename(date(2026, 2, 11), account_id="ACC-1", search_query="PT Indo Gemilang")
        assert name == "Financial_Report_2026-02-11_Account_ACC-1_Search_PT Indo Ge.csv"

    def test_custom_prefix(self):
        """Test a configured prefix."""
        assert suggest_filename(date(2026, 2, 11), prefix="Laporan") == "Laporan_2026-02-11.csv"
