"""
FinCorp Ledger - Source Package

A back-office bookkeeping ledger for a small company: staff record
cash-in/cash-out transactions against named accounts, administrators
manage staff roles and the chart of accounts.

DESIGN PRINCIPLES:
1. Balances and totals are derived, never stored
2. Every mutation leaves exactly one audit entry
3. Deletes are two-step: request, then confirm
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "FinCorp Back Office Team"
