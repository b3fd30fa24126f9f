"""
Aggregate Queries

Derived totals over the current in-memory account list.

DESIGN DECISION: Nothing here is cached. Every call recomputes from the
list it is given, so totals always match the latest reconciled state.
Each account counts toward exactly one of total_balance and
total_credit_debt, decided by its type.
"""

from decimal import Decimal
from typing import Iterable, Optional

from family_ledger.ledger.balance import signed_delta
from family_ledger.models.account import Account, AccountType, Transaction
from family_ledger.models.result import LedgerSummary


ZERO = Decimal("0")


def total_balance(accounts: Iterable[Account]) -> Decimal:
    """Money held: sum of checking and savings balances."""
    return sum((a.balance for a in accounts if not a.is_credit), ZERO)


def total_credit_debt(accounts: Iterable[Account]) -> Decimal:
    """Money owed: sum of credit balances."""
    return sum((a.balance for a in accounts if a.is_credit), ZERO)


def net_worth(accounts: Iterable[Account]) -> Decimal:
    accounts = list(accounts)
    return total_balance(accounts) - total_credit_debt(accounts)


def accounts_by_type(accounts: Iterable[Account]) -> dict[AccountType, list[Account]]:
    """
    Group accounts for the dashboard sections.

    Every type is present (possibly empty), in checking/savings/credit
    order, and list order within a group is preserved.
    """
    groups: dict[AccountType, list[Account]] = {t: [] for t in AccountType}
    for account in accounts:
        groups[account.type].append(account)
    return groups


def goal_remaining(account: Account) -> Optional[Decimal]:
    """
    Debt still above the payoff goal, floored at zero.

    None for asset accounts and credit accounts without a goal.
    """
    if not account.is_credit or account.goal is None:
        return None
    return max(account.balance - account.goal, ZERO)


def raises_balance(account: Account, transaction: Transaction) -> bool:
    """
    Whether a transaction moved the account's balance up.

    Drives the up/down arrow in transaction lists: a deposit raises an
    asset balance, a purchase raises a credit card's debt.
    """
    return signed_delta(account.type, transaction.amount) > 0


def summarize(accounts: Iterable[Account]) -> LedgerSummary:
    accounts = list(accounts)
    cash = total_balance(accounts)
    debt = total_credit_debt(accounts)
    return LedgerSummary(
        total_balance=cash,
        total_credit_debt=debt,
        net_worth=cash - debt,
        account_count=len(accounts),
    )
