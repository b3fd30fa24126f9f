"""
Core Ledger Entities for Family Ledger

These models are the in-memory shape of accounts and transactions.
They are designed to:
1. Enforce type safety at runtime
2. Stay immutable, so every reconciliation is a full replacement
3. Keep the credit-only goal rule in one place

DESIGN DECISION: Entities are frozen. The ledger never edits an account
in place; it builds a new one with model_copy and swaps it into a new list.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)


# Column limits shared by the entities, the store rows and the validator
NAME_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 500
CATEGORY_MAX_LENGTH = 100


class AccountType(str, Enum):
    """
    Supported account types.

    Checking and savings are asset accounts: balance is money held.
    Credit is a liability: balance is debt owed, and the sign
    convention for transactions is inverted.
    """
    CHECKING = "checking"
    SAVINGS = "savings"
    CREDIT = "credit"

    @property
    def is_credit(self) -> bool:
        return self is AccountType.CREDIT

    @property
    def label(self) -> str:
        """Display label used by account cards."""
        return {
            AccountType.CHECKING: "Checking Account",
            AccountType.SAVINGS: "Savings Account",
            AccountType.CREDIT: "Credit Card",
        }[self]


class Transaction(BaseModel):
    """
    A single recorded movement on one account.

    The amount is stored exactly as the caller meant it. How it moved
    the balance depends on the owning account's type.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: UUID = Field(
        ...,
        description="Store-assigned transaction ID"
    )
    date: datetime = Field(
        ...,
        description="When the transaction happened"
    )
    amount: Decimal = Field(
        ...,
        description="Signed amount as recorded"
    )
    description: str = Field(
        ...,
        min_length=1,
        max_length=DESCRIPTION_MAX_LENGTH,
    )
    account_id: UUID = Field(
        ...,
        description="Owning account"
    )
    category: Optional[str] = Field(
        default=None,
        max_length=CATEGORY_MAX_LENGTH,
    )


class Account(BaseModel):
    """
    A bank account and its transaction history (newest first).

    CRITICAL: balance is maintained incrementally. Any code path that
    changes it must also prepend the transaction that explains it.
    Use with_transaction() rather than copying balance by hand.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: UUID
    name: str = Field(
        ...,
        min_length=1,
        max_length=NAME_MAX_LENGTH,
        description="Display name"
    )
    type: AccountType
    balance: Decimal = Field(
        ...,
        description="Asset value, or debt owed for credit accounts"
    )
    goal: Optional[Decimal] = Field(
        default=None,
        description="Payoff target (credit accounts only)"
    )
    transactions: tuple[Transaction, ...] = Field(default_factory=tuple)

    @model_validator(mode='after')
    def validate_goal(self) -> 'Account':
        """A goal only means something on a credit account."""
        if self.goal is not None and not self.type.is_credit:
            raise ValueError("Only credit accounts can have a payoff goal")
        return self

    @property
    def is_credit(self) -> bool:
        return self.type.is_credit

    def with_transaction(self, transaction: Transaction, new_balance: Decimal) -> 'Account':
        """Return a copy with the transaction prepended and the balance replaced."""
        if transaction.account_id != self.id:
            raise ValueError(
                f"Transaction {transaction.id} belongs to account {transaction.account_id}, not {self.id}"
            )
        return self.model_copy(update={
            "balance": new_balance,
            "transactions": (transaction,) + self.transactions,
        })

    def renamed(self, name: str) -> 'Account':
        """Return a copy with a new display name."""
        return self.model_copy(update={"name": name.strip()})
