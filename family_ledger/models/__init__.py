"""
Data Models Package

This package contains all Pydantic models used in the Family Ledger system.
All data flowing through the system must conform to these schemas.
"""

from family_ledger.models.account import (
    Account,
    AccountType,
    Transaction,
)
from family_ledger.models.store import (
    AccountRow,
    BalanceEntry,
    TransactionRow,
)
from family_ledger.models.result import (
    LedgerErrorCode,
    LedgerSummary,
    OperationResult,
    format_currency,
)
from family_ledger.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivityEventType,
    ActivitySeverity,
)

__all__ = [
    # Ledger entities
    "Account",
    "AccountType",
    "Transaction",
    # Store rows
    "AccountRow",
    "BalanceEntry",
    "TransactionRow",
    # Results
    "LedgerErrorCode",
    "LedgerSummary",
    "OperationResult",
    "format_currency",
    # Activity models
    "ActivityEvent",
    "ActivityEventBuilder",
    "ActivityEventType",
    "ActivitySeverity",
]
