"""
Ledger Error Taxonomy

Two families:
- LedgerValidationError: detected before any store call, no side effects
- LedgerStoreError: a store call failed; local state was left untouched

Each class carries its LedgerErrorCode, so the orchestrator can turn
any of them into an OperationResult uniformly.
"""

from family_ledger.models.result import LedgerErrorCode


class LedgerError(Exception):
    """Base exception for ledger operations."""

    code: LedgerErrorCode

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class LedgerValidationError(LedgerError):
    """Input rejected before any remote write."""
    pass


class UnauthorizedError(LedgerValidationError):
    code = LedgerErrorCode.UNAUTHORIZED

    def __init__(self, message: str = "Please log in to perform this action"):
        super().__init__(message)


class AccountNotFoundError(LedgerValidationError):
    code = LedgerErrorCode.ACCOUNT_NOT_FOUND


class InvalidAmountError(LedgerValidationError):
    code = LedgerErrorCode.INVALID_AMOUNT


class InsufficientFundsError(LedgerValidationError):
    code = LedgerErrorCode.INSUFFICIENT_FUNDS


class InvalidNameError(LedgerValidationError):
    code = LedgerErrorCode.INVALID_NAME


class InvalidDescriptionError(LedgerValidationError):
    code = LedgerErrorCode.INVALID_DESCRIPTION


class InvalidAccountTypeError(LedgerValidationError):
    code = LedgerErrorCode.INVALID_ACCOUNT_TYPE


class InvalidTransferError(LedgerValidationError):
    code = LedgerErrorCode.INVALID_TRANSFER


class LedgerStoreError(LedgerError):
    """A remote read or write failed. The storage exception is chained."""
    pass


class StoreUnavailableError(LedgerStoreError):
    code = LedgerErrorCode.STORE_UNAVAILABLE


class TransactionFailedError(LedgerStoreError):
    code = LedgerErrorCode.TRANSACTION_FAILED


class TransferFailedError(LedgerStoreError):
    code = LedgerErrorCode.TRANSFER_FAILED


class UpdateFailedError(LedgerStoreError):
    code = LedgerErrorCode.UPDATE_FAILED


class DeletionFailedError(LedgerStoreError):
    code = LedgerErrorCode.DELETION_FAILED


class CreationFailedError(LedgerStoreError):
    code = LedgerErrorCode.CREATION_FAILED
