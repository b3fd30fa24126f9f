"""
Abstract Ledger Store Interface

DESIGN DECISION: We define an abstract interface for the remote tables.
This allows us to:
1. Swap Google Sheets for a real database later
2. Use in-memory storage for testing
3. Keep ledger logic decoupled from storage implementation

The interface is intentionally small - it is the read/write contract
the ledger issues against two tables (accounts, transactions), nothing more.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from family_ledger.models.account import AccountType
from family_ledger.models.store import AccountRow, BalanceEntry, TransactionRow


class LedgerStoreInterface(ABC):
    """
    Abstract interface for the accounts and transactions tables.

    Identifiers are generated by the store, never by the caller.
    Any implementation (Google Sheets, PostgreSQL, etc.)
    must implement these methods.
    """

    @abstractmethod
    async def select_accounts_by_owner(self, owner_id: str) -> list[AccountRow]:
        """
        List an owner's accounts, newest created first.

        Raises:
            StorageError: If the read fails
        """
        pass

    @abstractmethod
    async def select_transactions_by_account_ids(
        self,
        account_ids: list[UUID],
    ) -> list[TransactionRow]:
        """
        List transactions belonging to any of the given accounts,
        newest dated first.

        Raises:
            StorageError: If the read fails
        """
        pass

    @abstractmethod
    async def insert_account(
        self,
        owner_id: str,
        name: str,
        account_type: AccountType,
        balance: Decimal,
        goal: Optional[Decimal] = None,
    ) -> AccountRow:
        """
        Insert an account and return the stored row (with its new ID).

        Raises:
            StorageError: If the insert fails
        """
        pass

    @abstractmethod
    async def insert_transaction(
        self,
        account_id: UUID,
        amount: Decimal,
        description: str,
        category: Optional[str],
        date: datetime,
    ) -> TransactionRow:
        """
        Insert a transaction and return the stored row (with its new ID).

        Raises:
            StorageError: If the insert fails
            NotFoundError: If the account doesn't exist
        """
        pass

    @abstractmethod
    async def update_account(self, account_id: UUID, changes: dict[str, Any]) -> None:
        """
        Update columns of one account row.

        Args:
            account_id: The account to update
            changes: Column name to new value ('name', 'balance', 'goal')

        Raises:
            StorageError: If the update fails
            NotFoundError: If the account doesn't exist
        """
        pass

    @abstractmethod
    async def delete_account(self, account_id: UUID) -> None:
        """
        Delete an account and, in cascade, all of its transactions.

        Raises:
            StorageError: If the delete fails
            NotFoundError: If the account doesn't exist
        """
        pass

    @abstractmethod
    async def apply_entries(self, entries: list[BalanceEntry]) -> list[TransactionRow]:
        """
        Insert one transaction per entry and overwrite each entry's
        account balance, as a single unit.

        CRITICAL: Either every row and balance is written or none is.
        A transfer depends on this to never leave one side applied.

        Returns:
            The inserted transaction rows, in entry order

        Raises:
            StorageError: If any write fails (after rolling back)
            NotFoundError: If any entry's account doesn't exist
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
