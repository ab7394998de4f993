"""
Transaction View Filter

DESIGN DECISION: Filtering is DETERMINISTIC and stateless.
The displayed sequence is rebuilt from the full transaction log on every
call; there is no cached or incremental result to go stale.

Order of operations:
1. Account scope
2. Start date (inclusive, from 00:00:00.000 local time)
3. End date (inclusive, up to 23:59:59.999 local time)
4. Free-text search across six fields
5. Newest first
6. Recent-tab truncation, only when nothing else narrows the view
"""

from collections.abc import Sequence
from datetime import date, datetime, time

from fincorp.formatting import to_local
from fincorp.models.ledger import TabMode, Transaction, TransactionFilter

DEFAULT_RECENT_LIMIT = 10

END_OF_DAY = time(23, 59, 59, 999000)


def start_of_day(day: date) -> datetime:
    """00:00:00.000 local time on the given day."""
    return datetime.combine(day, time.min)


def end_of_day(day: date) -> datetime:
    """23:59:59.999 local time on the given day."""
    return datetime.combine(day, END_OF_DAY)


def matches_search(transaction: Transaction, query: str) -> bool:
    """
    Case-insensitive substring match against the searchable fields:
    code, customer name, customer handle, staff name, description
    and account id.
    """
    needle = query.lower()
    haystack = (
        transaction.code,
        transaction.customer_name,
        transaction.customer_user,
        transaction.staff_name,
        transaction.description,
        transaction.account_id,
    )
    return any(needle in field.lower() for field in haystack)


def filter_transactions(
    transactions: Sequence[Transaction],
    criteria: TransactionFilter,
    recent_limit: int = DEFAULT_RECENT_LIMIT,
) -> list[Transaction]:
    """
    Build the displayed transaction sequence.

    Never raises for an empty result; a range that excludes everything
    simply yields an empty list.
    """
    filtered = list(transactions)

    if criteria.account_id:
        filtered = [t for t in filtered if t.account_id == criteria.account_id]

    if criteria.start_date:
        lower = start_of_day(criteria.start_date)
        filtered = [t for t in filtered if to_local(t.date) >= lower]

    if criteria.end_date:
        upper = end_of_day(criteria.end_date)
        filtered = [t for t in filtered if to_local(t.date) <= upper]

    if criteria.search_query.strip():
        filtered = [t for t in filtered if matches_search(t, criteria.search_query)]

    # sorted() is stable, so equal timestamps keep their log order
    ordered = sorted(filtered, key=lambda t: to_local(t.date), reverse=True)

    if criteria.tab == TabMode.RECENT and not criteria.has_active_filter:
        return ordered[:recent_limit]

    return ordered


def describe_filter(criteria: TransactionFilter) -> str:
    """Heading for the transaction view."""
    parts = [f"Account: {criteria.account_id}" if criteria.account_id else "Transaction History"]

    if criteria.start_date and criteria.end_date:
        if criteria.start_date == criteria.end_date:
            parts.append(f"on {criteria.start_date.strftime('%d %b %Y')}")
        else:
            parts.append(
                f"from {criteria.start_date.strftime('%d %b %Y')} "
                f"to {criteria.end_date.strftime('%d %b %Y')}"
            )
    elif criteria.start_date:
        parts.append(f"from {criteria.start_date.strftime('%d %b %Y')}")
    elif criteria.end_date:
        parts.append(f"until {criteria.end_date.strftime('%d %b %Y')}")

    if criteria.search_query.strip():
        parts.append(f'matching "{criteria.search_query.strip()}"')

    return " | ".join(parts)
