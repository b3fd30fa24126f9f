"""
Balance Engine

Pure functions that own the ledger's sign convention. Nothing else in the
codebase decides whether an amount raises or lowers a balance.

THE RULE: the balance change caused by a stored transaction amount is
signed_delta(account_type, amount):
- asset accounts (checking, savings): +amount
- credit accounts: -amount (a positive amount is a payment; debt goes down)

Every operation's deltas are derived from that one function, which is why
balance == opening + sum(signed_delta(tx.amount)) holds for every account.
"""

from decimal import Decimal
from typing import Iterable

from family_ledger.models.account import Account, AccountType


def signed_delta(account_type: AccountType, raw_amount: Decimal) -> Decimal:
    """Balance change produced by a transaction amount on this account type."""
    return -raw_amount if account_type.is_credit else raw_amount


def apply_amount(account: Account, raw_amount: Decimal) -> Decimal:
    """Balance the account would have after recording raw_amount."""
    return account.balance + signed_delta(account.type, raw_amount)


def adjustment_amount(old_balance: Decimal, new_balance: Decimal) -> Decimal:
    """
    Transaction amount that explains overwriting old_balance with new_balance
    on a credit account.

    signed_delta(CREDIT, old - new) == new - old, so recording this amount
    keeps the history consistent with the overwritten balance.
    """
    return old_balance - new_balance


def transfer_amounts(amount: Decimal) -> tuple[Decimal, Decimal]:
    """Stored (from, to) transaction amounts for a transfer of `amount`."""
    return -amount, amount


def transfer_deltas(
    from_type: AccountType,
    to_type: AccountType,
    amount: Decimal,
) -> tuple[Decimal, Decimal]:
    """
    Balance changes for both sides of a transfer.

    Moving money out of a credit account borrows more (debt up); moving
    money into one pays it down (debt down).
    """
    from_amount, to_amount = transfer_amounts(amount)
    return signed_delta(from_type, from_amount), signed_delta(to_type, to_amount)


def replay_balance(
    opening_balance: Decimal,
    account_type: AccountType,
    amounts: Iterable[Decimal],
) -> Decimal:
    """Recompute a balance from an opening balance and recorded amounts."""
    return opening_balance + sum(
        (signed_delta(account_type, amount) for amount in amounts),
        Decimal("0"),
    )
