"""
In-Memory Ledger Store

Dictionary-backed implementation of the ledger store contract.
Used by the test suite and for local runs without Google credentials.

Rows are kept in insertion order; a sequence number breaks timestamp
ties so "newest first" stays deterministic.
"""

from datetime import datetime
from decimal import Decimal
from itertools import count
from typing import Any, Optional
from uuid import UUID, uuid4

from family_ledger.models.account import AccountType
from family_ledger.models.store import AccountRow, BalanceEntry, TransactionRow, utc_now
from family_ledger.services.storage.interface import (
    LedgerStoreInterface,
    NotFoundError,
    StorageError,
)


UPDATABLE_ACCOUNT_COLUMNS = {"name", "balance", "goal"}


class InMemoryLedgerStore(LedgerStoreInterface):
    """In-memory implementation of the accounts and transactions tables."""

    def __init__(self):
        self._accounts: dict[UUID, AccountRow] = {}
        self._transactions: dict[UUID, TransactionRow] = {}
        self._sequence: dict[UUID, int] = {}
        self._counter = count()

    def _next_id(self) -> UUID:
        row_id = uuid4()
        self._sequence[row_id] = next(self._counter)
        return row_id

    def _require_account(self, account_id: UUID) -> AccountRow:
        try:
            return self._accounts[account_id]
        except KeyError:
            raise NotFoundError(f"Account not found: {account_id}")

    async def select_accounts_by_owner(self, owner_id: str) -> list[AccountRow]:
        rows = [row for row in self._accounts.values() if row.user_id == owner_id]
        rows.sort(key=lambda r: (r.created_at, self._sequence[r.id]), reverse=True)
        return rows

    async def select_transactions_by_account_ids(
        self,
        account_ids: list[UUID],
    ) -> list[TransactionRow]:
        wanted = set(account_ids)
        rows = [row for row in self._transactions.values() if row.account_id in wanted]
        rows.sort(key=lambda r: (r.date, self._sequence[r.id]), reverse=True)
        return rows

    async def insert_account(
        self,
        owner_id: str,
        name: str,
        account_type: AccountType,
        balance: Decimal,
        goal: Optional[Decimal] = None,
    ) -> AccountRow:
        row = AccountRow(
            id=self._next_id(),
            user_id=owner_id,
            name=name,
            type=account_type,
            balance=balance,
            goal=goal,
            created_at=utc_now(),
        )
        self._accounts[row.id] = row
        return row

    async def insert_transaction(
        self,
        account_id: UUID,
        amount: Decimal,
        description: str,
        category: Optional[str],
        date: datetime,
    ) -> TransactionRow:
        self._require_account(account_id)
        row = TransactionRow(
            id=self._next_id(),
            account_id=account_id,
            date=date,
            amount=amount,
            description=description,
            category=category,
            created_at=utc_now(),
        )
        self._transactions[row.id] = row
        return row

    async def update_account(self, account_id: UUID, changes: dict[str, Any]) -> None:
        row = self._require_account(account_id)
        unknown = set(changes) - UPDATABLE_ACCOUNT_COLUMNS
        if unknown:
            raise StorageError(f"Cannot update columns: {sorted(unknown)}")
        self._accounts[account_id] = row.model_copy(update=changes)

    async def delete_account(self, account_id: UUID) -> None:
        self._require_account(account_id)
        del self._accounts[account_id]
        # Cascade
        for tx_id in [t.id for t in self._transactions.values() if t.account_id == account_id]:
            del self._transactions[tx_id]

    async def apply_entries(self, entries: list[BalanceEntry]) -> list[TransactionRow]:
        # Validate everything before touching any table
        for entry in entries:
            self._require_account(entry.account_id)

        created = []
        for entry in entries:
            created.append(TransactionRow(
                id=self._next_id(),
                account_id=entry.account_id,
                date=entry.date,
                amount=entry.amount,
                description=entry.description,
                category=entry.category,
                created_at=utc_now(),
            ))

        for row in created:
            self._transactions[row.id] = row
        for entry in entries:
            self._accounts[entry.account_id] = self._accounts[entry.account_id].model_copy(
                update={"balance": entry.new_balance}
            )
        return created
