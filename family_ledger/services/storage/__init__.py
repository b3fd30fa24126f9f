"""
Storage Services Package

Provides the abstract ledger store interface and concrete implementations.
Google Sheets is the remote backend; the in-memory store serves tests and
local runs.
"""

from family_ledger.services.storage.interface import (
    ConnectionError,
    LedgerStoreInterface,
    NotFoundError,
    StorageError,
)
from family_ledger.services.storage.memory import InMemoryLedgerStore
from family_ledger.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsLedgerStore,
)

__all__ = [
    # Interface
    "LedgerStoreInterface",
    # Exceptions
    "ConnectionError",
    "NotFoundError",
    "StorageError",
    # Implementations
    "InMemoryLedgerStore",
    "GoogleSheetsClient",
    "GoogleSheetsLedgerStore",
]
