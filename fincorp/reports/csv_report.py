"""
CSV report export.

Exports exactly what the transaction view currently displays, in display
order, as a spreadsheet-friendly UTF-8 CSV document.

Format:
- Leading byte-order mark so spreadsheet programs detect UTF-8
- Plain header row; in data rows every field is quoted (internal quotes
  doubled) except the numeric amount
- "\\n" line endings
"""

import csv
import io
from collections.abc import Sequence
from datetime import date
from typing import Optional

from fincorp.formatting import format_date
from fincorp.models.ledger import Transaction

BOM = "\ufeff"

REPORT_HEADERS = [
    "Transaction No.",
    "Date",
    "Customer",
    "Customer User",
    "Account",
    "Amount (IDR)",
    "Recorded By",
    "Description",
]


def _row(trx: Transaction) -> list:
    return [
        trx.code,
        format_date(trx.date),
        trx.customer_name,
        trx.customer_user,
        trx.account_id,
        trx.amount,  # Decimal is numeric, so QUOTE_NONNUMERIC leaves it bare
        trx.staff_name,
        trx.description or "-",
    ]


def build_csv(transactions: Sequence[Transaction]) -> bytes:
    """Render the transactions as CSV bytes (UTF-8 with BOM)."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    # Header names never need quoting
    buffer.write(",".join(REPORT_HEADERS) + "\n")
    for trx in transactions:
        writer.writerow(_row(trx))
    return (BOM + buffer.getvalue()).encode("utf-8")


def suggest_filename(
    today: date,
    account_id: Optional[str] = None,
    search_query: Optional[str] = None,
    prefix: str = "Financial_Report",
    search_chars: int = 10,
) -> str:
    """
    File name for a report, e.g. Financial_Report_2026-02-11_Account_ACC-1.csv.

    The account scope and the first `search_chars` characters of the
    search query are included when they are set.
    """
    name = f"{prefix}_{today.isoformat()}"
    if account_id:
        name += f"_Account_{account_id}"
    if search_query:
        name += f"_Search_{search_query[:search_chars]}"
    return f"{name}.csv"
