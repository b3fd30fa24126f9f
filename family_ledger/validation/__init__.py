"""Input validation package."""

from family_ledger.validation.validator import (
    LedgerValidator,
    default_description,
    transaction_kind,
)

__all__ = ["LedgerValidator", "default_description", "transaction_kind"]
