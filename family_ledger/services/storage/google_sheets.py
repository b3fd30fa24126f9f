"""
Google Sheets Ledger Store

DESIGN DECISION: Google Sheets is used as the remote table store because:
1. A household can view its ledger directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)
4. Easy to export/migrate later

TRADEOFFS:
- Not suitable for high-volume data (we're fine for household use)
- No transactions (apply_entries compensates on failure instead)
- Limited query capabilities (we filter and sort in Python)

The implementation follows the abstract interface, so we can swap
to PostgreSQL/SQLite later without changing ledger logic.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID, uuid4

import gspread
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from family_ledger.config import GoogleSheetsSettings, get_settings
from family_ledger.models.account import AccountType
from family_ledger.models.store import AccountRow, BalanceEntry, TransactionRow, utc_now
from family_ledger.services.storage.interface import (
    ConnectionError,
    LedgerStoreInterface,
    NotFoundError,
    StorageError,
)


# Column mappings for Accounts sheet
ACCOUNT_COLUMNS = [
    "id",
    "user_id",
    "name",
    "type",
    "balance",
    "goal",
    "created_at",
]

# Column mappings for Transactions sheet
TRANSACTION_COLUMNS = [
    "id",
    "account_id",
    "date",
    "amount",
    "description",
    "category",
    "created_at",
]

# 1-based sheet column for each updatable account field
ACCOUNT_COLUMN_INDEX = {
    name: ACCOUNT_COLUMNS.index(name) + 1
    for name in ("name", "balance", "goal")
}


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for the connection.
    Only the handshake is retried; writes never are.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def _get_or_create_sheet(self, title: str, columns: list[str], rows: int) -> gspread.Worksheet:
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=rows,
                cols=len(columns),
            )
            sheet.append_row(columns)
        return sheet

    def get_accounts_sheet(self) -> gspread.Worksheet:
        """Get or create the Accounts worksheet."""
        return self._get_or_create_sheet(
            self._settings.accounts_sheet_name, ACCOUNT_COLUMNS, rows=200
        )

    def get_transactions_sheet(self) -> gspread.Worksheet:
        """Get or create the Transactions worksheet."""
        return self._get_or_create_sheet(
            self._settings.transactions_sheet_name, TRANSACTION_COLUMNS, rows=5000
        )


def parse_timestamp(value: str) -> datetime:
    """Read an ISO cell; cells written without an offset are UTC."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


class GoogleSheetsLedgerStore(LedgerStoreInterface):
    """
    Google Sheets implementation of the ledger store.

    One row per account in the Accounts sheet, one row per transaction
    in the Transactions sheet. Row 1 of each sheet is the header.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    # -- row mapping ---------------------------------------------------------

    def _account_to_row(self, account: AccountRow) -> list:
        """Convert an AccountRow to a spreadsheet row."""
        return [
            str(account.id),
            account.user_id,
            account.name,
            account.type.value,
            str(account.balance),
            str(account.goal) if account.goal is not None else "",
            account.created_at.isoformat(),
        ]

    def _row_to_account(self, row: list) -> AccountRow:
        """Convert a spreadsheet row to an AccountRow."""
        # Handle missing columns gracefully
        def safe_get(index: int, default: str = "") -> str:
            try:
                return row[index] if row[index] else default
            except IndexError:
                return default

        return AccountRow(
            id=UUID(safe_get(0)),
            user_id=safe_get(1),
            name=safe_get(2),
            type=AccountType(safe_get(3)),
            balance=Decimal(safe_get(4, "0")),
            goal=Decimal(safe_get(5)) if safe_get(5) else None,
            created_at=parse_timestamp(safe_get(6)),
        )

    def _transaction_to_row(self, transaction: TransactionRow) -> list:
        """Convert a TransactionRow to a spreadsheet row."""
        return [
            str(transaction.id),
            str(transaction.account_id),
            transaction.date.isoformat(),
            str(transaction.amount),
            transaction.description,
            transaction.category or "",
            transaction.created_at.isoformat(),
        ]

    def _row_to_transaction(self, row: list) -> TransactionRow:
        """Convert a spreadsheet row to a TransactionRow."""
        def safe_get(index: int, default: str = "") -> str:
            try:
                return row[index] if row[index] else default
            except IndexError:
                return default

        return TransactionRow(
            id=UUID(safe_get(0)),
            account_id=UUID(safe_get(1)),
            date=parse_timestamp(safe_get(2)),
            amount=Decimal(safe_get(3, "0")),
            description=safe_get(4),
            category=safe_get(5) or None,
            created_at=parse_timestamp(safe_get(6)),
        )

    def _index_rows(self, all_rows: list[list]) -> dict[str, int]:
        """Map row ID to 1-based sheet row number (row 1 is the header)."""
        return {
            row[0]: idx
            for idx, row in enumerate(all_rows[1:], start=2)
            if row and row[0]
        }

    # -- reads ---------------------------------------------------------------

    async def select_accounts_by_owner(self, owner_id: str) -> list[AccountRow]:
        """List an owner's accounts, newest first."""
        try:
            sheet = self._client.get_accounts_sheet()
            all_rows = sheet.get_all_values()[1:]  # Skip header

            accounts = []
            for position, row in enumerate(all_rows):
                if not row or not row[0]:  # Skip empty rows
                    continue
                if len(row) > 1 and row[1] == owner_id:
                    accounts.append((position, self._row_to_account(row)))

            # Later rows were appended later, so they win timestamp ties
            accounts.sort(key=lambda pair: (pair[1].created_at, pair[0]), reverse=True)
            return [account for _, account in accounts]
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to list accounts: {e}")

    async def select_transactions_by_account_ids(
        self,
        account_ids: list[UUID],
    ) -> list[TransactionRow]:
        """List transactions for the given accounts, newest dated first."""
        wanted = {str(account_id) for account_id in account_ids}
        if not wanted:
            return []
        try:
            sheet = self._client.get_transactions_sheet()
            all_rows = sheet.get_all_values()[1:]

            transactions = []
            for position, row in enumerate(all_rows):
                if not row or not row[0]:
                    continue
                if len(row) > 1 and row[1] in wanted:
                    transactions.append((position, self._row_to_transaction(row)))

            transactions.sort(key=lambda pair: (pair[1].date, pair[0]), reverse=True)
            return [transaction for _, transaction in transactions]
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to list transactions: {e}")

    # -- writes --------------------------------------------------------------

    async def insert_account(
        self,
        owner_id: str,
        name: str,
        account_type: AccountType,
        balance: Decimal,
        goal: Optional[Decimal] = None,
    ) -> AccountRow:
        """Append an account row."""
        account = AccountRow(
            id=uuid4(),
            user_id=owner_id,
            name=name,
            type=account_type,
            balance=balance,
            goal=goal,
            created_at=utc_now(),
        )
        try:
            sheet = self._client.get_accounts_sheet()
            sheet.append_row(self._account_to_row(account), value_input_option="RAW")
            return account
        except Exception as e:
            raise StorageError(f"Failed to save account: {e}")

    async def insert_transaction(
        self,
        account_id: UUID,
        amount: Decimal,
        description: str,
        category: Optional[str],
        date: datetime,
    ) -> TransactionRow:
        """Append a transaction row for an existing account."""
        try:
            accounts = self._index_rows(self._client.get_accounts_sheet().get_all_values())
            if str(account_id) not in accounts:
                raise NotFoundError(f"Account not found: {account_id}")

            transaction = TransactionRow(
                id=uuid4(),
                account_id=account_id,
                date=date,
                amount=amount,
                description=description,
                category=category,
                created_at=utc_now(),
            )
            sheet = self._client.get_transactions_sheet()
            sheet.append_row(self._transaction_to_row(transaction), value_input_option="RAW")
            return transaction
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to save transaction: {e}")

    async def update_account(self, account_id: UUID, changes: dict[str, Any]) -> None:
        """Update the given columns of one account row."""
        unknown = set(changes) - set(ACCOUNT_COLUMN_INDEX)
        if unknown:
            raise StorageError(f"Cannot update columns: {sorted(unknown)}")
        try:
            sheet = self._client.get_accounts_sheet()
            rows = self._index_rows(sheet.get_all_values())
            row_number = rows.get(str(account_id))
            if row_number is None:
                raise NotFoundError(f"Account not found: {account_id}")

            for column, value in changes.items():
                sheet.update_cell(
                    row_number,
                    ACCOUNT_COLUMN_INDEX[column],
                    "" if value is None else str(value),
                )
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to update account: {e}")

    async def delete_account(self, account_id: UUID) -> None:
        """Delete an account row and all of its transaction rows."""
        try:
            accounts_sheet = self._client.get_accounts_sheet()
            rows = self._index_rows(accounts_sheet.get_all_values())
            row_number = rows.get(str(account_id))
            if row_number is None:
                raise NotFoundError(f"Account not found: {account_id}")

            # Cascade first, so a failure never leaves orphaned transactions
            tx_sheet = self._client.get_transactions_sheet()
            tx_rows = tx_sheet.get_all_values()
            doomed = [
                idx for idx, row in enumerate(tx_rows[1:], start=2)
                if len(row) > 1 and row[1] == str(account_id)
            ]
            # Bottom-up so earlier deletions don't shift later indices
            for idx in reversed(doomed):
                tx_sheet.delete_rows(idx)

            accounts_sheet.delete_rows(row_number)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to delete account: {e}")

    async def apply_entries(self, entries: list[BalanceEntry]) -> list[TransactionRow]:
        """
        Append all transaction rows, then write all balances.

        Sheets has no multi-row transaction, so on a failed balance write
        the balances already written are restored and the appended rows
        are removed before the error is raised.
        """
        if not entries:
            return []
        try:
            accounts_sheet = self._client.get_accounts_sheet()
            account_values = accounts_sheet.get_all_values()
            rows = self._index_rows(account_values)
            for entry in entries:
                if str(entry.account_id) not in rows:
                    raise NotFoundError(f"Account not found: {entry.account_id}")
            previous_balances = {
                row[0]: row[ACCOUNT_COLUMNS.index("balance")]
                for row in account_values[1:]
                if row and row[0] in {str(e.account_id) for e in entries}
            }

            created = [
                TransactionRow(
                    id=uuid4(),
                    account_id=entry.account_id,
                    date=entry.date,
                    amount=entry.amount,
                    description=entry.description,
                    category=entry.category,
                    created_at=utc_now(),
                )
                for entry in entries
            ]
            tx_sheet = self._client.get_transactions_sheet()
            tx_sheet.append_rows(
                [self._transaction_to_row(t) for t in created],
                value_input_option="RAW",
            )
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to save transactions: {e}")

        balance_column = ACCOUNT_COLUMN_INDEX["balance"]
        written: list[str] = []
        try:
            for entry in entries:
                key = str(entry.account_id)
                accounts_sheet.update_cell(rows[key], balance_column, str(entry.new_balance))
                written.append(key)
        except Exception as e:
            self._roll_back(accounts_sheet, tx_sheet, rows, previous_balances, written, created)
            raise StorageError(f"Failed to update balances: {e}")

        return created

    def _roll_back(
        self,
        accounts_sheet: gspread.Worksheet,
        tx_sheet: gspread.Worksheet,
        rows: dict[str, int],
        previous_balances: dict[str, str],
        written: list[str],
        created: list[TransactionRow],
    ) -> None:
        """Undo a partially applied batch. Raises StorageError if undo fails."""
        balance_column = ACCOUNT_COLUMN_INDEX["balance"]
        try:
            for key in reversed(written):
                accounts_sheet.update_cell(rows[key], balance_column, previous_balances[key])

            created_ids = {str(t.id) for t in created}
            tx_rows = tx_sheet.get_all_values()
            appended = [
                idx for idx, row in enumerate(tx_rows[1:], start=2)
                if row and row[0] in created_ids
            ]
            for idx in reversed(appended):
                tx_sheet.delete_rows(idx)
        except Exception as e:
            raise StorageError(f"Rollback failed, ledger sheets need manual repair: {e}")
