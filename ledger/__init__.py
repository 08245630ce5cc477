"""
Monthly Ledger - Source Package

A personal finance ledger that groups income and expense transactions
by calendar month and derives realized and projected balances.

DESIGN PRINCIPLES:
1. The ledger state is owned by the caller, never a hidden global
2. Aggregates are recomputed from state on every read
3. Lookups that miss fail loudly
4. Every mutation is persisted as a full snapshot
5. Storage, credentials and narrative advice are swappable collaborators
"""

__version__ = "1.0.0"
__author__ = "Monthly Ledger Team"
