"""
Store Row Models

The logical shape of the two remote tables, plus the write unit the
ledger hands to the store when a balance changes.

These mirror the external schema (snake_case, owner id, nullable goal),
not the in-memory entities. The account repository maps between them.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from family_ledger.models.account import (
    CATEGORY_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
    AccountType,
)


def utc_now() -> datetime:
    """Timezone-aware current time; every stored timestamp is UTC."""
    return datetime.now(timezone.utc)


class AccountRow(BaseModel):
    """A row of the accounts table."""
    model_config = ConfigDict(frozen=True)

    id: UUID
    user_id: str
    name: str
    type: AccountType
    balance: Decimal
    goal: Optional[Decimal] = None
    created_at: datetime


class TransactionRow(BaseModel):
    """A row of the transactions table."""
    model_config = ConfigDict(frozen=True)

    id: UUID
    account_id: UUID
    date: datetime
    amount: Decimal
    description: str
    category: Optional[str] = None
    created_at: datetime


class BalanceEntry(BaseModel):
    """
    One transaction insert and the balance overwrite it implies.

    The store applies a list of these as a single unit: either every
    transaction row and every balance lands, or none do.
    """
    model_config = ConfigDict(frozen=True)

    account_id: UUID
    amount: Decimal
    description: str = Field(..., min_length=1, max_length=DESCRIPTION_MAX_LENGTH)
    category: Optional[str] = Field(default=None, max_length=CATEGORY_MAX_LENGTH)
    date: datetime = Field(default_factory=utc_now)
    new_balance: Decimal
