"""
Operation Result Models

Every ledger operation returns an OperationResult instead of raising or
popping a notification. The presentation layer decides how to show it.

The title/message pair is what a user would see in a toast.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from family_ledger.models.store import utc_now


class LedgerErrorCode(str, Enum):
    """Machine-readable failure reasons."""
    # Validation - detected before any store call
    UNAUTHORIZED = "unauthorized"
    ACCOUNT_NOT_FOUND = "account_not_found"
    INVALID_AMOUNT = "invalid_amount"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    INVALID_NAME = "invalid_name"
    INVALID_DESCRIPTION = "invalid_description"
    INVALID_ACCOUNT_TYPE = "invalid_account_type"
    INVALID_TRANSFER = "invalid_transfer"

    # Store failures - one per operation
    STORE_UNAVAILABLE = "store_unavailable"
    TRANSACTION_FAILED = "transaction_failed"
    TRANSFER_FAILED = "transfer_failed"
    UPDATE_FAILED = "update_failed"
    DELETION_FAILED = "deletion_failed"
    CREATION_FAILED = "creation_failed"


class OperationResult(BaseModel):
    """
    Outcome of a ledger operation.

    On success, account_ids lists the accounts that were reconciled.
    On failure, error_code says why and local state is unchanged.
    """

    success: bool
    title: str
    message: str
    error_code: Optional[LedgerErrorCode] = None
    account_ids: list[UUID] = Field(default_factory=list)
    correlation_id: Optional[UUID] = None
    completed_at: datetime = Field(default_factory=utc_now)

    @classmethod
    def ok(
        cls,
        title: str,
        message: str,
        account_ids: Optional[list[UUID]] = None,
        correlation_id: Optional[UUID] = None,
    ) -> 'OperationResult':
        return cls(
            success=True,
            title=title,
            message=message,
            account_ids=account_ids or [],
            correlation_id=correlation_id,
        )

    @classmethod
    def failed(
        cls,
        title: str,
        message: str,
        error_code: LedgerErrorCode,
        correlation_id: Optional[UUID] = None,
    ) -> 'OperationResult':
        return cls(
            success=False,
            title=title,
            message=message,
            error_code=error_code,
            correlation_id=correlation_id,
        )


class LedgerSummary(BaseModel):
    """Dashboard totals, recomputed on demand."""

    total_balance: Decimal
    total_credit_debt: Decimal
    net_worth: Decimal
    account_count: int = Field(ge=0)


def format_currency(amount: Decimal, symbol: str = "$") -> str:
    """Format an amount for messages, e.g. $1,500.00 or -$40.00."""
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"
