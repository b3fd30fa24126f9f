"""
Shared fixtures for the Family Ledger test suite.

No test touches the network: the ledger runs against an in-memory store
that records every call and can be told to fail specific ones.
"""

import asyncio
from decimal import Decimal

import pytest

from family_ledger.activity import ActivityLogger
from family_ledger.ledger import AccountRepository
from family_ledger.models import AccountType
from family_ledger.orchestrator import LedgerOperations
from family_ledger.services.storage import InMemoryLedgerStore, StorageError


OWNER_ID = "owner-1"

READS = {"select_accounts_by_owner", "select_transactions_by_account_ids"}


class RecordingLedgerStore(InMemoryLedgerStore):
    """
    In-memory store that records calls and fails the ones named in fail_on.

    Every call yields to the event loop first, like a real remote call,
    so concurrent operations interleave.
    """

    def __init__(self):
        super().__init__()
        self.calls: list[str] = []
        self.fail_on: set[str] = set()

    async def _enter(self, name: str) -> None:
        self.calls.append(name)
        await asyncio.sleep(0)
        if name in self.fail_on:
            raise StorageError(f"{name} unavailable")

    @property
    def writes(self) -> list[str]:
        return [name for name in self.calls if name not in READS]

    async def select_accounts_by_owner(self, owner_id):
        await self._enter("select_accounts_by_owner")
        return await super().select_accounts_by_owner(owner_id)

    async def select_transactions_by_account_ids(self, account_ids):
        await self._enter("select_transactions_by_account_ids")
        return await super().select_transactions_by_account_ids(account_ids)

    async def insert_account(self, owner_id, name, account_type, balance, goal=None):
        await self._enter("insert_account")
        return await super().insert_account(owner_id, name, account_type, balance, goal)

    async def insert_transaction(self, account_id, amount, description, category, date):
        await self._enter("insert_transaction")
        return await super().insert_transaction(account_id, amount, description, category, date)

    async def update_account(self, account_id, changes):
        await self._enter("update_account")
        return await super().update_account(account_id, changes)

    async def delete_account(self, account_id):
        await self._enter("delete_account")
        return await super().delete_account(account_id)

    async def apply_entries(self, entries):
        await self._enter("apply_entries")
        return await super().apply_entries(entries)


@pytest.fixture
def owner_id():
    return OWNER_ID


@pytest.fixture
def store():
    return RecordingLedgerStore()


@pytest.fixture
def events():
    """Every activity event emitted during the test, in order."""
    return []


@pytest.fixture
def activity_logger(events):
    return ActivityLogger(listener=events.append)


@pytest.fixture
def repository(store, activity_logger):
    return AccountRepository(store, activity_logger=activity_logger)


@pytest.fixture
async def ledger(store, activity_logger, owner_id):
    """A ledger loaded for OWNER_ID with no accounts yet."""
    repository = AccountRepository(store, activity_logger=activity_logger, seed_defaults=False)
    ops = LedgerOperations(repository, activity_logger=activity_logger)
    await ops.load(owner_id)
    store.calls.clear()
    return ops


@pytest.fixture
def open_account(ledger, store, owner_id):
    """Create an account through the ledger and return it; store calls are reset."""

    async def _open(name, account_type=AccountType.CHECKING, balance="0"):
        result = await ledger.add_account(owner_id, name, account_type, Decimal(balance))
        assert result.success, result.message
        store.calls.clear()
        return ledger.get_account(result.account_ids[0])

    return _open
