"""Tests for the account repository (row mapping, seeding, write-through)."""

import pytest
from datetime import datetime
from decimal import Decimal
from uuid import uuid4

from pydantic import ValidationError

from family_ledger.ledger import DEFAULT_ACCOUNTS, AccountRepository, StoreUnavailableError
from family_ledger.ledger.repository import row_to_account, row_to_transaction
from family_ledger.models import AccountRow, AccountType, BalanceEntry, TransactionRow
from family_ledger.services.storage import InMemoryLedgerStore, NotFoundError, StorageError


class TestRowMapping:
    """Tests for store row to entity mapping."""

    def test_row_to_transaction_blank_category(self):
        """Test that an empty category becomes None."""
        row = TransactionRow(
            id=uuid4(),
            account_id=uuid4(),
            date=datetime(2024, 1, 2),
            amount=Decimal("-12.5"),
            description="Coffee",
            category="",
            created_at=datetime(2024, 1, 2),
        )
        transaction = row_to_transaction(row)
        assert transaction.category is None
        assert transaction.amount == Decimal("-12.5")

    def test_row_to_account_drops_goal_on_asset_rows(self):
        """Test that a stray goal on a checking row does not fail the load."""
        row = AccountRow(
            id=uuid4(),
            user_id="owner-1",
            name="Checking",
            type=AccountType.CHECKING,
            balance=Decimal("10"),
            goal=Decimal("0"),
            created_at=datetime(2024, 1, 1),
        )
        assert row_to_account(row).goal is None

    def test_row_to_account_keeps_credit_goal(self):
        """Test that credit rows keep their payoff goal."""
        row = AccountRow(
            id=uuid4(),
            user_id="owner-1",
            name="Card",
            type=AccountType.CREDIT,
            balance=Decimal("10"),
            goal=Decimal("5"),
            created_at=datetime(2024, 1, 1),
        )
        assert row_to_account(row).goal == Decimal("5")


class TestLoadAccounts:
    """Tests for loading and seeding."""

    async def test_seed_defaults_values(self, repository, owner_id):
        """Test the three default accounts."""
        accounts = await repository.load_accounts(owner_id)

        assert [(a.name, a.type, a.balance) for a in accounts] == [
            (name, account_type, balance) for name, account_type, balance, _ in DEFAULT_ACCOUNTS
        ]

    async def test_existing_owner_is_not_seeded(self, repository, store, owner_id):
        """Test that seeding only happens for an owner with no accounts."""
        await repository.insert_account(owner_id, "Checking", AccountType.CHECKING, Decimal("1"))
        store.calls.clear()

        accounts = await repository.load_accounts(owner_id)

        assert [a.name for a in accounts] == ["Checking"]
        assert store.writes == []

    async def test_owners_are_isolated(self, repository, owner_id):
        """Test that one owner's accounts are not loaded for another."""
        await repository.insert_account("owner-2", "Theirs", AccountType.CHECKING, Decimal("1"))
        await repository.insert_account(owner_id, "Mine", AccountType.CHECKING, Decimal("1"))

        accounts = await repository.load_accounts(owner_id)

        assert [a.name for a in accounts] == ["Mine"]

    async def test_no_seeding_when_disabled(self, store, owner_id):
        """Test that seeding can be turned off."""
        repository = AccountRepository(store, seed_defaults=False)
        assert await repository.load_accounts(owner_id) == []
        assert store.writes == []

    async def test_account_read_failure(self, repository, store, owner_id):
        """Test that a failed read raises StoreUnavailableError."""
        store.fail_on.add("select_accounts_by_owner")

        with pytest.raises(StoreUnavailableError) as exc_info:
            await repository.load_accounts(owner_id)
        assert isinstance(exc_info.value.__cause__, StorageError)

    async def test_malformed_account_row(self, repository, store, owner_id):
        """Test that a stored row that fails entity validation raises StoreUnavailableError."""
        await InMemoryLedgerStore.insert_account(store, owner_id, "n" * 250, AccountType.CHECKING, Decimal("1"))

        with pytest.raises(StoreUnavailableError) as exc_info:
            await repository.load_accounts(owner_id)
        assert isinstance(exc_info.value.__cause__, ValidationError)

    async def test_seed_failures_are_skipped(self, repository, store, owner_id, events):
        """Test that failed default inserts are reported, not raised."""
        store.fail_on.add("insert_account")

        accounts = await repository.load_accounts(owner_id)

        assert accounts == []
        assert len(events) == len(DEFAULT_ACCOUNTS)
        assert all(e.description == "Error creating default account" for e in events)


class TestWrites:
    """Tests for write-through methods."""

    async def test_insert_account_credit_goal(self, repository, owner_id):
        """Test that credit accounts are created with a zero goal."""
        card = await repository.insert_account(owner_id, "Card", AccountType.CREDIT, Decimal("50"))
        checking = await repository.insert_account(owner_id, "Checking", AccountType.CHECKING, Decimal("50"))
        assert card.goal == Decimal("0")
        assert checking.goal is None

    async def test_insert_transaction(self, repository, owner_id):
        """Test that the store assigns transaction IDs."""
        account = await repository.insert_account(owner_id, "Checking", AccountType.CHECKING, Decimal("0"))

        transaction = await repository.insert_transaction(account.id, Decimal("5"), "Allowance", "Kids")

        assert transaction.account_id == account.id
        assert transaction.category == "Kids"
        assert transaction.id is not None

    async def test_insert_transaction_unknown_account(self, repository):
        """Test that a transaction needs an existing account."""
        with pytest.raises(NotFoundError):
            await repository.insert_transaction(uuid4(), Decimal("5"), "x")

    async def test_update_name_and_balance(self, repository, owner_id):
        """Test single-column updates."""
        account = await repository.insert_account(owner_id, "Checking", AccountType.CHECKING, Decimal("0"))

        await repository.update_account_name(account.id, "Bills")
        await repository.update_account_balance(account.id, Decimal("42"))

        [reloaded] = await repository.load_accounts(owner_id)
        assert reloaded.name == "Bills"
        assert reloaded.balance == Decimal("42")

    async def test_apply_entries_returns_entry_order(self, repository, owner_id):
        """Test that created transactions come back in entry order."""
        first = await repository.insert_account(owner_id, "A", AccountType.CHECKING, Decimal("10"))
        second = await repository.insert_account(owner_id, "B", AccountType.SAVINGS, Decimal("0"))

        transactions = await repository.apply_entries([
            BalanceEntry(account_id=first.id, amount=Decimal("-5"), description="Transfer to B", new_balance=Decimal("5")),
            BalanceEntry(account_id=second.id, amount=Decimal("5"), description="Transfer from A", new_balance=Decimal("5")),
        ])

        assert [t.account_id for t in transactions] == [first.id, second.id]

    async def test_delete_account(self, repository, owner_id):
        """Test that deletion removes the account."""
        account = await repository.insert_account(owner_id, "Checking", AccountType.CHECKING, Decimal("0"))
        await repository.insert_account(owner_id, "Savings", AccountType.SAVINGS, Decimal("0"))

        await repository.delete_account(account.id)

        assert [a.name for a in await repository.load_accounts(owner_id)] == ["Savings"]
