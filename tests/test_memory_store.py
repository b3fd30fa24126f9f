"""Tests for the in-memory ledger store."""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

from family_ledger.models import AccountType, BalanceEntry
from family_ledger.services.storage import InMemoryLedgerStore, NotFoundError, StorageError


@pytest.fixture
def memory_store():
    return InMemoryLedgerStore()


class TestInMemoryLedgerStore:
    """Tests for the dictionary-backed store contract."""

    async def test_accounts_newest_first(self, memory_store):
        """Test that accounts are listed newest created first."""
        for name in ("one", "two", "three"):
            await memory_store.insert_account("owner-1", name, AccountType.CHECKING, Decimal("0"))

        rows = await memory_store.select_accounts_by_owner("owner-1")

        assert [r.name for r in rows] == ["three", "two", "one"]

    async def test_transactions_newest_dated_first(self, memory_store):
        """Test that transactions are ordered by date, not insertion."""
        account = await memory_store.insert_account("owner-1", "A", AccountType.CHECKING, Decimal("0"))
        now = datetime(2024, 5, 1)
        await memory_store.insert_transaction(account.id, Decimal("1"), "old", None, now - timedelta(days=2))
        await memory_store.insert_transaction(account.id, Decimal("2"), "new", None, now)
        await memory_store.insert_transaction(account.id, Decimal("3"), "middle", None, now - timedelta(days=1))

        rows = await memory_store.select_transactions_by_account_ids([account.id])

        assert [r.description for r in rows] == ["new", "middle", "old"]

    async def test_timestamps_are_utc(self, memory_store):
        """Test that stored creation times are timezone-aware UTC."""
        account = await memory_store.insert_account("owner-1", "A", AccountType.CHECKING, Decimal("0"))
        transaction = await memory_store.insert_transaction(
            account.id, Decimal("1"), "x", None, datetime.now(timezone.utc)
        )

        assert account.created_at.utcoffset() == timedelta(0)
        assert transaction.created_at.utcoffset() == timedelta(0)

    async def test_update_unknown_column(self, memory_store):
        """Test that only name, balance and goal can be updated."""
        account = await memory_store.insert_account("owner-1", "A", AccountType.CHECKING, Decimal("0"))
        with pytest.raises(StorageError):
            await memory_store.update_account(account.id, {"type": "credit"})

    async def test_update_unknown_account(self, memory_store):
        """Test that updating a missing account raises NotFoundError."""
        with pytest.raises(NotFoundError):
            await memory_store.update_account(uuid4(), {"name": "x"})

    async def test_delete_cascades(self, memory_store):
        """Test that deleting an account deletes its transactions only."""
        doomed = await memory_store.insert_account("owner-1", "A", AccountType.CHECKING, Decimal("0"))
        kept = await memory_store.insert_account("owner-1", "B", AccountType.CHECKING, Decimal("0"))
        await memory_store.insert_transaction(doomed.id, Decimal("1"), "x", None, datetime.now(timezone.utc))
        await memory_store.insert_transaction(kept.id, Decimal("1"), "y", None, datetime.now(timezone.utc))

        await memory_store.delete_account(doomed.id)

        rows = await memory_store.select_transactions_by_account_ids([doomed.id, kept.id])
        assert [r.description for r in rows] == ["y"]
        with pytest.raises(NotFoundError):
            await memory_store.delete_account(doomed.id)

    async def test_apply_entries_is_all_or_nothing(self, memory_store):
        """Test that one unknown account aborts the whole batch."""
        account = await memory_store.insert_account("owner-1", "A", AccountType.CHECKING, Decimal("10"))

        with pytest.raises(NotFoundError):
            await memory_store.apply_entries([
                BalanceEntry(account_id=account.id, amount=Decimal("-5"), description="out", new_balance=Decimal("5")),
                BalanceEntry(account_id=uuid4(), amount=Decimal("5"), description="in", new_balance=Decimal("5")),
            ])

        [row] = await memory_store.select_accounts_by_owner("owner-1")
        assert row.balance == Decimal("10")
        assert await memory_store.select_transactions_by_account_ids([account.id]) == []

    async def test_apply_entries_writes_rows_and_balances(self, memory_store):
        """Test a successful batch."""
        account = await memory_store.insert_account("owner-1", "A", AccountType.CREDIT, Decimal("230"), Decimal("0"))

        [created] = await memory_store.apply_entries([
            BalanceEntry(
                account_id=account.id,
                amount=Decimal("50"),
                description="Weekly balance adjustment",
                new_balance=Decimal("180"),
            ),
        ])

        [row] = await memory_store.select_accounts_by_owner("owner-1")
        assert row.balance == Decimal("180")
        assert row.goal == Decimal("0")
        assert created.amount == Decimal("50")
        assert await memory_store.select_transactions_by_account_ids([account.id]) == [created]
