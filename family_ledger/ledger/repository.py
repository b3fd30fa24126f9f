"""
Account Repository

Translates between store rows and ledger entities and performs the
underlying create/read/update/delete calls.

Write-through: every method here is one store call (or one atomic batch).
Callers reconcile their in-memory state only after it returns.
"""

from collections import defaultdict
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import ValidationError

from family_ledger.activity import ActivityLogger
from family_ledger.ledger.errors import StoreUnavailableError
from family_ledger.models.account import Account, AccountType, Transaction
from family_ledger.models.activity import ActivityEventBuilder
from family_ledger.models.store import AccountRow, BalanceEntry, TransactionRow, utc_now
from family_ledger.services.storage import LedgerStoreInterface, StorageError


# Accounts every new owner starts with: (name, type, balance, goal)
DEFAULT_ACCOUNTS = [
    ("Primary Checking", AccountType.CHECKING, Decimal("2500"), None),
    ("Family Savings", AccountType.SAVINGS, Decimal("10000"), None),
    ("Credit Card", AccountType.CREDIT, Decimal("1500"), Decimal("0")),
]


def row_to_transaction(row: TransactionRow) -> Transaction:
    return Transaction(
        id=row.id,
        date=row.date,
        amount=row.amount,
        description=row.description,
        account_id=row.account_id,
        category=row.category or None,
    )


def row_to_account(row: AccountRow, transactions: Optional[list[Transaction]] = None) -> Account:
    # A goal stored on an asset row is meaningless; drop it rather than fail the load
    goal = row.goal if row.type.is_credit else None
    return Account(
        id=row.id,
        name=row.name,
        type=row.type,
        balance=row.balance,
        goal=goal,
        transactions=tuple(transactions or ()),
    )


class AccountRepository:
    """
    Loads and persists accounts and their transactions.

    Store exceptions propagate as StorageError, except from
    load_accounts, which raises StoreUnavailableError.
    """

    def __init__(
        self,
        store: LedgerStoreInterface,
        activity_logger: Optional[ActivityLogger] = None,
        seed_defaults: bool = True,
    ):
        self._store = store
        self._activity_logger = activity_logger
        self._seed_defaults = seed_defaults

    async def load_accounts(self, owner_id: str) -> list[Account]:
        """
        Load an owner's accounts (newest first) with their transactions
        (newest first). An owner with no accounts gets the defaults.

        Raises:
            StoreUnavailableError: If either read fails, or a stored row
                does not map to a valid account or transaction
        """
        try:
            account_rows = await self._store.select_accounts_by_owner(owner_id)
            if not account_rows:
                if self._seed_defaults:
                    return await self.seed_defaults(owner_id)
                return []

            transaction_rows = await self._store.select_transactions_by_account_ids(
                [row.id for row in account_rows]
            )

            # Store order is newest first; grouping keeps it
            grouped: dict[UUID, list[Transaction]] = defaultdict(list)
            for row in transaction_rows:
                grouped[row.account_id].append(row_to_transaction(row))

            return [row_to_account(row, grouped.get(row.id)) for row in account_rows]
        except StorageError as e:
            raise StoreUnavailableError(str(e) or "Failed to load account data") from e
        except ValidationError as e:
            raise StoreUnavailableError(f"Stored ledger data is malformed: {e}") from e

    async def seed_defaults(self, owner_id: str) -> list[Account]:
        """
        Create the default accounts, one insert each.

        Best effort: a failed insert is reported and skipped, and the
        remaining defaults are still created.
        """
        created = []
        for name, account_type, balance, goal in DEFAULT_ACCOUNTS:
            try:
                row = await self._store.insert_account(
                    owner_id=owner_id,
                    name=name,
                    account_type=account_type,
                    balance=balance,
                    goal=goal,
                )
            except StorageError as e:
                if self._activity_logger:
                    self._activity_logger.log(
                        ActivityEventBuilder.default_account_failed(
                            owner_id=owner_id,
                            name=name,
                            error_message=str(e),
                        )
                    )
                continue

            created.append(row_to_account(row))
            if self._activity_logger:
                self._activity_logger.log(
                    ActivityEventBuilder.default_account_created(
                        owner_id=owner_id,
                        account_id=row.id,
                        name=name,
                    )
                )
        return created

    async def insert_account(
        self,
        owner_id: str,
        name: str,
        account_type: AccountType,
        initial_balance: Decimal,
    ) -> Account:
        """Create an account. Credit accounts start with a payoff goal of 0."""
        row = await self._store.insert_account(
            owner_id=owner_id,
            name=name,
            account_type=account_type,
            balance=initial_balance,
            goal=Decimal("0") if account_type.is_credit else None,
        )
        return row_to_account(row)

    async def update_account_name(self, account_id: UUID, name: str) -> None:
        await self._store.update_account(account_id, {"name": name})

    async def update_account_balance(self, account_id: UUID, balance: Decimal) -> None:
        await self._store.update_account(account_id, {"balance": balance})

    async def delete_account(self, account_id: UUID) -> None:
        """Delete an account; the store removes its transactions too."""
        await self._store.delete_account(account_id)

    async def insert_transaction(
        self,
        account_id: UUID,
        amount: Decimal,
        description: str,
        category: Optional[str] = None,
        date: Optional[datetime] = None,
    ) -> Transaction:
        """Record a transaction. The store assigns its ID."""
        row = await self._store.insert_transaction(
            account_id=account_id,
            amount=amount,
            description=description,
            category=category,
            date=date or utc_now(),
        )
        return row_to_transaction(row)

    async def apply_entries(self, entries: list[BalanceEntry]) -> list[Transaction]:
        """
        Record transactions and their balance overwrites as one unit.

        Returns the new transactions in the same order as entries.
        """
        rows = await self._store.apply_entries(entries)
        return [row_to_transaction(row) for row in rows]
