"""
Display formatting for amounts and timestamps.

Amounts are Indonesian Rupiah: "." groups thousands, "," separates
decimals, and decimals are only shown when the amount has any.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

CURRENCY_SYMBOL = "Rp"

_SWAP_SEPARATORS = str.maketrans(",.", ".,")


def to_local(moment: datetime) -> datetime:
    """
    Express a timestamp as naive local wall-clock time.

    Stored timestamps may be naive (already local) or carry an offset;
    converting both to naive local time makes them comparable.
    """
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


def _format_magnitude(amount: Decimal) -> str:
    magnitude = abs(amount)
    if magnitude == magnitude.to_integral_value():
        text = f"{magnitude:,.0f}"
    else:
        text = f"{magnitude:,.2f}"
    return f"{CURRENCY_SYMBOL} {text.translate(_SWAP_SEPARATORS)}"


def format_currency(amount: Decimal) -> str:
    """Signed amount for transaction rows, e.g. "+Rp 1.500" or "-Rp 20.000"."""
    sign = "-" if amount < 0 else "+"
    return f"{sign}{_format_magnitude(amount)}"


def format_full_currency(amount: Decimal) -> str:
    """Amount for balances; only negative values carry a sign."""
    sign = "-" if amount < 0 else ""
    return f"{sign}{_format_magnitude(amount)}"


def format_date(moment: datetime) -> str:
    """Day, short month, year and time, e.g. "11 Feb 2026 14:13"."""
    return to_local(moment).strftime("%d %b %Y %H:%M")


def parse_amount(text: str) -> Optional[Decimal]:
    """
    Read an amount typed in display notation ("-1.500.000" or "1.234,5").

    Returns None for anything that is not a finite number.
    """
    try:
        value = Decimal(text.replace(".", "").replace(",", ".").strip())
    except InvalidOperation:
        return None
    return value if value.is_finite() else None
