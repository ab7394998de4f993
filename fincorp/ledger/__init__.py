"""Ledger derivation package."""

from fincorp.ledger.engine import account_balance, account_balances, compute_totals

__all__ = ["account_balance", "account_balances", "compute_totals"]
