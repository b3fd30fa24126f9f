"""
Ledger Input Validation

DESIGN DECISION: Every check that can reject an operation runs before
the first store call. A rejected operation therefore has no side effects,
remote or local.

Checks fall into three groups:
- Session: is there an owner, and is it the owner whose accounts are loaded?
- Values: amounts, names, descriptions and categories
- Ledger rules: account exists, right account type, enough funds

IMPORTANT: Validation NEVER silently fixes input beyond trimming text fields.
It raises a typed LedgerValidationError for the orchestrator to report.
"""

from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional, Union
from uuid import UUID

from family_ledger.ledger.errors import (
    AccountNotFoundError,
    InsufficientFundsError,
    InvalidAccountTypeError,
    InvalidAmountError,
    InvalidDescriptionError,
    InvalidNameError,
    InvalidTransferError,
    UnauthorizedError,
)
from family_ledger.models.account import (
    CATEGORY_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
    NAME_MAX_LENGTH,
    Account,
    AccountType,
)


AmountLike = Union[Decimal, int, float, str]


class LedgerValidator:
    """Stateless validation helpers for ledger operations."""

    # -- session -------------------------------------------------------------

    def require_owner(
        self,
        owner_id: Optional[str],
        loaded_owner_id: Optional[str] = None,
    ) -> str:
        """
        Ensure the caller is authenticated and acting on their own ledger.

        Raises:
            UnauthorizedError: No owner, or not the owner whose accounts are loaded
        """
        if not owner_id or not str(owner_id).strip():
            raise UnauthorizedError()
        if loaded_owner_id is not None and owner_id != loaded_owner_id:
            raise UnauthorizedError("These accounts belong to a different session")
        return owner_id

    # -- values --------------------------------------------------------------

    def parse_amount(self, value: AmountLike, field: str = "amount") -> Decimal:
        """
        Coerce user input to a finite Decimal.

        Floats go through str() so 0.1 stays 0.1.
        """
        if isinstance(value, bool):
            raise InvalidAmountError(f"{field} must be a number")
        try:
            amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            raise InvalidAmountError(f"{field} must be a number, got {value!r}")
        if not amount.is_finite():
            raise InvalidAmountError(f"{field} must be a finite number")
        return amount

    def require_positive(self, value: AmountLike, message: str) -> Decimal:
        amount = self.parse_amount(value)
        if amount <= 0:
            raise InvalidAmountError(message)
        return amount

    def require_non_negative(self, value: AmountLike, message: str) -> Decimal:
        amount = self.parse_amount(value)
        if amount < 0:
            raise InvalidAmountError(message)
        return amount

    def require_nonzero(self, value: AmountLike) -> Decimal:
        amount = self.parse_amount(value)
        if amount == 0:
            raise InvalidAmountError("Transaction amount cannot be zero")
        return amount

    def require_name(self, name: Optional[str]) -> str:
        """
        Trimmed, non-empty account name.

        Raises:
            InvalidNameError: Empty, whitespace-only or longer than the name column
        """
        cleaned = (name or "").strip()
        if not cleaned:
            raise InvalidNameError("Account name cannot be empty")
        if len(cleaned) > NAME_MAX_LENGTH:
            raise InvalidNameError(f"Account name is too long ({NAME_MAX_LENGTH} characters max)")
        return cleaned

    def require_description(self, description: Optional[str]) -> str:
        """
        Trimmed, non-empty transaction description that fits its column.

        Raises:
            InvalidDescriptionError: Empty or too long
        """
        cleaned = (description or "").strip()
        if not cleaned:
            raise InvalidDescriptionError("Description cannot be empty")
        if len(cleaned) > DESCRIPTION_MAX_LENGTH:
            raise InvalidDescriptionError(
                f"Description is too long ({DESCRIPTION_MAX_LENGTH} characters max)"
            )
        return cleaned

    def require_category(self, category: Optional[str]) -> Optional[str]:
        """Trimmed category, or None when blank."""
        cleaned = (category or "").strip()
        if len(cleaned) > CATEGORY_MAX_LENGTH:
            raise InvalidDescriptionError(
                f"Category is too long ({CATEGORY_MAX_LENGTH} characters max)"
            )
        return cleaned or None

    def check_statement_balance(self, value: AmountLike) -> Decimal:
        """
        Caller-side check for a credit statement balance.

        update_credit_card_balance itself accepts any balance; forms
        should run this first, as the statement dialog does.
        """
        return self.require_non_negative(value, "Balance cannot be negative")

    # -- ledger rules --------------------------------------------------------

    def require_account(self, accounts: Iterable[Account], account_id: UUID) -> Account:
        for account in accounts:
            if account.id == account_id:
                return account
        raise AccountNotFoundError(f"Account not found: {account_id}")

    def require_credit_account(self, account: Account) -> Account:
        if not account.is_credit:
            raise InvalidAccountTypeError(
                f"{account.name} is a {account.type.value} account, not a credit card"
            )
        return account

    def require_distinct_accounts(self, from_id: UUID, to_id: UUID) -> None:
        if from_id == to_id:
            raise InvalidTransferError("Cannot transfer to the same account")

    def require_sufficient_funds(self, account: Account, amount: Decimal) -> None:
        """
        Asset accounts cannot go below zero through a transfer.

        Credit accounts have no floor: transferring out of one borrows more.
        """
        if not account.is_credit and account.balance < amount:
            raise InsufficientFundsError("Insufficient funds for transfer")


def transaction_kind(account_type: AccountType, amount: Decimal) -> str:
    """What a signed amount means on this account type, for messages."""
    if account_type.is_credit:
        return "payment" if amount > 0 else "purchase"
    return "deposit" if amount > 0 else "withdrawal"


def default_description(account_type: AccountType, amount: Decimal) -> str:
    """Description used when the caller leaves it blank."""
    return f"{transaction_kind(account_type, amount)} transaction"
