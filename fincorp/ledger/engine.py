"""
Ledger Engine

DESIGN DECISION: Balances are DERIVED, never stored.
Every figure here is recomputed from the transaction log on each call,
so it can never disagree with the log, no matter which mutation just ran.

All sums use Decimal with a Decimal start value; a float never enters
the arithmetic.
"""

from collections.abc import Iterable, Sequence
from decimal import Decimal

from fincorp.models.ledger import Account, AccountBalance, LedgerTotals, Transaction

ZERO = Decimal("0")


def account_balance(transactions: Iterable[Transaction], account_id: str) -> Decimal:
    """Sum of the amounts of every transaction referencing the account."""
    return sum(
        (t.amount for t in transactions if t.account_id == account_id),
        ZERO,
    )


def account_balances(
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
) -> list[AccountBalance]:
    """One derived balance per account, in account order."""
    return [
        AccountBalance(account=account, balance=account_balance(transactions, account.id))
        for account in accounts
    ]


def compute_totals(transactions: Sequence[Transaction]) -> LedgerTotals:
    """
    Company-wide aggregates over the entire transaction log.

    The three figures are computed independently of each other and of
    any view filter:
    - total_balance: sum of all signed amounts
    - total_income: sum of strictly positive amounts
    - total_expense: absolute value of the sum of strictly negative amounts
    """
    total_balance = sum((t.amount for t in transactions), ZERO)
    total_income = sum((t.amount for t in transactions if t.amount > 0), ZERO)
    total_expense = abs(sum((t.amount for t in transactions if t.amount < 0), ZERO))

    return LedgerTotals(
        total_balance=total_balance,
        total_income=total_income,
        total_expense=total_expense,
    )
