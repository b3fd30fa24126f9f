"""Aggregate query package."""

from family_ledger.queries.aggregates import (
    accounts_by_type,
    goal_remaining,
    net_worth,
    raises_balance,
    summarize,
    total_balance,
    total_credit_debt,
)

__all__ = [
    "accounts_by_type",
    "goal_remaining",
    "net_worth",
    "raises_balance",
    "summarize",
    "total_balance",
    "total_credit_debt",
]
