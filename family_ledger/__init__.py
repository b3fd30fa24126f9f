"""
Family Ledger - Source Package

A household finance tracker for checking, savings and credit accounts
and the transactions and transfers that move their balances.

DESIGN PRINCIPLES:
1. The remote store is the source of truth
2. Write remotely first, reconcile locally second
3. Fail early, fail visibly
4. One sign convention, owned by the balance engine
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Family Ledger Team"
