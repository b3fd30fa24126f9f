"""Ledger core: balance engine, repository and error taxonomy."""

from family_ledger.ledger.balance import (
    adjustment_amount,
    apply_amount,
    replay_balance,
    signed_delta,
    transfer_amounts,
    transfer_deltas,
)
from family_ledger.ledger.errors import (
    AccountNotFoundError,
    CreationFailedError,
    DeletionFailedError,
    InsufficientFundsError,
    InvalidAccountTypeError,
    InvalidAmountError,
    InvalidDescriptionError,
    InvalidNameError,
    InvalidTransferError,
    LedgerError,
    LedgerStoreError,
    LedgerValidationError,
    StoreUnavailableError,
    TransactionFailedError,
    TransferFailedError,
    UnauthorizedError,
    UpdateFailedError,
)
from family_ledger.ledger.repository import DEFAULT_ACCOUNTS, AccountRepository

__all__ = [
    # Balance engine
    "adjustment_amount",
    "apply_amount",
    "replay_balance",
    "signed_delta",
    "transfer_amounts",
    "transfer_deltas",
    # Errors
    "AccountNotFoundError",
    "CreationFailedError",
    "DeletionFailedError",
    "InsufficientFundsError",
    "InvalidAccountTypeError",
    "InvalidAmountError",
    "InvalidDescriptionError",
    "InvalidNameError",
    "InvalidTransferError",
    "LedgerError",
    "LedgerStoreError",
    "LedgerValidationError",
    "StoreUnavailableError",
    "TransactionFailedError",
    "TransferFailedError",
    "UnauthorizedError",
    "UpdateFailedError",
    # Repository
    "DEFAULT_ACCOUNTS",
    "AccountRepository",
]
