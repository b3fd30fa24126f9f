"""
Ledger Orchestrator for Family Ledger

This module ties together the balance engine, the account repository
and the validator, and defines the ledger operations a dashboard calls:
1. Load (owner → accounts with transactions, seeding defaults)
2. Record transaction / transfer / credit statement update
3. Add / rename / delete account
4. Totals for the dashboard summary

DESIGN DECISION: Every operation is remote-first, local-second:
- Validate everything before the first store call
- Write to the store (one atomic batch when balances move)
- Only then replace the in-memory account list

Operations return an OperationResult and never raise for domain
failures. The same outcome is sent to the activity logger so a
presentation layer can turn it into a notification.
"""

import logging
from decimal import Decimal
from typing import Callable, Optional, Union
from uuid import UUID

from family_ledger.activity import ActivityListener, ActivityLogger, create_correlation_id
from family_ledger.config import get_settings
from family_ledger.ledger import (
    AccountRepository,
    CreationFailedError,
    DeletionFailedError,
    InvalidAccountTypeError,
    LedgerError,
    LedgerStoreError,
    StoreUnavailableError,
    TransactionFailedError,
    TransferFailedError,
    UnauthorizedError,
    UpdateFailedError,
    adjustment_amount,
    apply_amount,
    transfer_amounts,
    transfer_deltas,
)
from family_ledger.models.account import Account, AccountType
from family_ledger.models.activity import ActivityEventBuilder
from family_ledger.models.result import LedgerSummary, OperationResult, format_currency
from family_ledger.models.store import BalanceEntry
from family_ledger.queries import summarize, total_balance, total_credit_debt
from family_ledger.services.storage import (
    GoogleSheetsLedgerStore,
    InMemoryLedgerStore,
    LedgerStoreInterface,
    StorageError,
)
from family_ledger.validation import LedgerValidator, default_description, transaction_kind


AmountLike = Union[Decimal, int, float, str]
AccountUpdate = Callable[[Account], Account]


class LedgerOperations:
    """
    Owns the canonical in-memory account list for one owner.

    Flow of every mutating operation:
    1. Guard → owner present and matches the loaded owner
    2. Validate → amounts, names, descriptions, accounts, funds (no side effects)
    3. Write → repository / store
    4. Reconcile → replace the account list functionally
    5. Report → OperationResult + activity event

    There are no locks. Each call reads the list as it is when it starts;
    two calls racing on one account resolve as last write wins.
    """

    def __init__(
        self,
        repository: AccountRepository,
        activity_logger: Optional[ActivityLogger] = None,
        validator: Optional[LedgerValidator] = None,
        adjustment_description: str = "Weekly balance adjustment",
        currency_symbol: str = "$",
    ):
        self._repository = repository
        self._activity_logger = activity_logger or ActivityLogger()
        self._validator = validator or LedgerValidator()
        self._adjustment_description = adjustment_description
        self._currency_symbol = currency_symbol

        self._accounts: list[Account] = []
        self._owner_id: Optional[str] = None
        self._is_loading = False

    # ------------------------------------------------------------------
    # State exposed to the presentation layer
    # ------------------------------------------------------------------

    @property
    def accounts(self) -> list[Account]:
        return list(self._accounts)

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def owner_id(self) -> Optional[str]:
        return self._owner_id

    def get_account(self, account_id: UUID) -> Optional[Account]:
        return next((a for a in self._accounts if a.id == account_id), None)

    def get_total_balance(self) -> Decimal:
        return total_balance(self._accounts)

    def get_total_credit_debt(self) -> Decimal:
        return total_credit_debt(self._accounts)

    def get_net_worth(self) -> Decimal:
        return self.get_total_balance() - self.get_total_credit_debt()

    def get_summary(self) -> LedgerSummary:
        return summarize(self._accounts)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self, owner_id: Optional[str]) -> OperationResult:
        """
        Load the owner's accounts, replacing whatever was loaded before.

        Without an owner the list is cleared. If the store is unreachable
        the list falls back to empty and the failure is reported.
        """
        correlation_id = create_correlation_id()

        if not owner_id:
            self._accounts = []
            self._owner_id = None
            return self._report_error("Load accounts", UnauthorizedError(), None, correlation_id)

        self._is_loading = True
        try:
            accounts = await self._repository.load_accounts(owner_id)
        except StoreUnavailableError as e:
            self._accounts = []
            self._owner_id = owner_id
            self._activity_logger.log(
                ActivityEventBuilder.accounts_load_failed(owner_id, e.message, correlation_id)
            )
            return OperationResult.failed(
                title="Error fetching data",
                message=e.message,
                error_code=e.code,
                correlation_id=correlation_id,
            )
        finally:
            self._is_loading = False

        self._accounts = accounts
        self._owner_id = owner_id

        self._activity_logger.log(
            ActivityEventBuilder.accounts_loaded(
                owner_id=owner_id,
                account_count=len(accounts),
                transaction_count=sum(len(a.transactions) for a in accounts),
                correlation_id=correlation_id,
            )
        )
        return OperationResult.ok(
            title="Accounts loaded",
            message=f"{len(accounts)} accounts loaded",
            account_ids=[a.id for a in accounts],
            correlation_id=correlation_id,
        )

    # ------------------------------------------------------------------
    # Balance-changing operations
    # ------------------------------------------------------------------

    async def record_transaction(
        self,
        owner_id: Optional[str],
        account_id: UUID,
        amount: AmountLike,
        description: Optional[str] = None,
        category: Optional[str] = None,
    ) -> OperationResult:
        """
        Record a deposit/withdrawal (assets) or payment/purchase (credit).

        The raw amount is stored on the transaction. The balance moves by
        signed_delta, so a positive amount lowers a credit card's debt.
        """
        operation = "Transaction"
        correlation_id = create_correlation_id()
        try:
            self._validator.require_owner(owner_id, self._owner_id)
            account = self._validator.require_account(self._accounts, account_id)
            amount = self._validator.require_nonzero(amount)
            description = self._validator.require_description(
                (description or "").strip() or default_description(account.type, amount)
            )
            category = self._validator.require_category(category)

            new_balance = apply_amount(account, amount)
            entry = BalanceEntry(
                account_id=account.id,
                amount=amount,
                description=description,
                category=category,
                new_balance=new_balance,
            )
            try:
                [transaction] = await self._repository.apply_entries([entry])
            except StorageError as e:
                raise TransactionFailedError(
                    str(e) or "An error occurred while processing your transaction"
                ) from e
        except LedgerError as e:
            return self._report_error(operation, e, owner_id, correlation_id)

        self._reconcile({
            account.id: lambda acc: acc.with_transaction(transaction, new_balance),
        })

        self._activity_logger.log(
            ActivityEventBuilder.transaction_recorded(
                owner_id=owner_id,
                account_id=account.id,
                transaction_id=transaction.id,
                amount=str(amount),
                new_balance=str(new_balance),
                correlation_id=correlation_id,
            )
        )
        kind = transaction_kind(account.type, amount).capitalize()
        return OperationResult.ok(
            title="Transaction complete",
            message=f"{kind} of {self._money(abs(amount))} - {description}",
            account_ids=[account.id],
            correlation_id=correlation_id,
        )

    async def transfer_money(
        self,
        owner_id: Optional[str],
        from_account_id: UUID,
        to_account_id: UUID,
        amount: AmountLike,
        description: Optional[str] = None,
    ) -> OperationResult:
        """
        Move money between two of the owner's accounts.

        Asset sources need enough funds; credit sources have no floor.
        All four writes (two transactions, two balances) are one store
        batch, so a failure never leaves one side applied.
        """
        operation = "Transfer"
        correlation_id = create_correlation_id()
        try:
            self._validator.require_owner(owner_id, self._owner_id)
            amount = self._validator.require_positive(
                amount, "Transfer amount must be greater than zero"
            )
            self._validator.require_distinct_accounts(from_account_id, to_account_id)
            from_account = self._validator.require_account(self._accounts, from_account_id)
            to_account = self._validator.require_account(self._accounts, to_account_id)
            self._validator.require_sufficient_funds(from_account, amount)

            from_amount, to_amount = transfer_amounts(amount)
            from_delta, to_delta = transfer_deltas(from_account.type, to_account.type, amount)
            new_from_balance = from_account.balance + from_delta
            new_to_balance = to_account.balance + to_delta

            description = (description or "").strip()
            from_description = self._validator.require_description(
                f"Transfer to {description or to_account.name}"
            )
            to_description = self._validator.require_description(
                f"Transfer from {description or from_account.name}"
            )
            entries = [
                BalanceEntry(
                    account_id=from_account.id,
                    amount=from_amount,
                    description=from_description,
                    new_balance=new_from_balance,
                ),
                BalanceEntry(
                    account_id=to_account.id,
                    amount=to_amount,
                    description=to_description,
                    new_balance=new_to_balance,
                ),
            ]
            try:
                from_transaction, to_transaction = await self._repository.apply_entries(entries)
            except StorageError as e:
                raise TransferFailedError(
                    str(e) or "An error occurred during the transfer"
                ) from e
        except LedgerError as e:
            return self._report_error(operation, e, owner_id, correlation_id)

        self._reconcile({
            from_account.id: lambda acc: acc.with_transaction(from_transaction, new_from_balance),
            to_account.id: lambda acc: acc.with_transaction(to_transaction, new_to_balance),
        })

        self._activity_logger.log(
            ActivityEventBuilder.transfer_completed(
                owner_id=owner_id,
                from_account_id=from_account.id,
                to_account_id=to_account.id,
                amount=str(amount),
                correlation_id=correlation_id,
            )
        )
        label = description or f"{from_account.name} to {to_account.name}"
        return OperationResult.ok(
            title="Transfer complete",
            message=f"{self._money(amount)} transferred - {label}",
            account_ids=[from_account.id, to_account.id],
            correlation_id=correlation_id,
        )

    async def update_credit_card_balance(
        self,
        owner_id: Optional[str],
        account_id: UUID,
        new_balance: AmountLike,
    ) -> OperationResult:
        """
        Overwrite a credit card's balance with its statement balance.

        An adjustment transaction of (old - new) is recorded alongside, so
        the history still explains the balance. Negative balances are not
        rejected here; see LedgerValidator.check_statement_balance.
        """
        operation = "Update"
        correlation_id = create_correlation_id()
        try:
            self._validator.require_owner(owner_id, self._owner_id)
            account = self._validator.require_account(self._accounts, account_id)
            self._validator.require_credit_account(account)
            new_balance = self._validator.parse_amount(new_balance, "balance")
            description = self._validator.require_description(self._adjustment_description)

            old_balance = account.balance
            entry = BalanceEntry(
                account_id=account.id,
                amount=adjustment_amount(old_balance, new_balance),
                description=description,
                new_balance=new_balance,
            )
            try:
                [transaction] = await self._repository.apply_entries([entry])
            except StorageError as e:
                raise UpdateFailedError(
                    str(e) or "An error occurred while updating the balance"
                ) from e
        except LedgerError as e:
            return self._report_error(operation, e, owner_id, correlation_id)

        self._reconcile({
            account.id: lambda acc: acc.with_transaction(transaction, new_balance),
        })

        self._activity_logger.log(
            ActivityEventBuilder.credit_balance_updated(
                owner_id=owner_id,
                account_id=account.id,
                old_balance=str(old_balance),
                new_balance=str(new_balance),
                correlation_id=correlation_id,
            )
        )
        return OperationResult.ok(
            title="Credit card balance updated",
            message=f"New balance: {self._money(new_balance)}",
            account_ids=[account.id],
            correlation_id=correlation_id,
        )

    # ------------------------------------------------------------------
    # Account lifecycle
    # ------------------------------------------------------------------

    async def add_account(
        self,
        owner_id: Optional[str],
        name: str,
        account_type: Union[AccountType, str],
        initial_balance: AmountLike = Decimal("0"),
    ) -> OperationResult:
        """
        Create an account and append it to the list.

        For a credit account the initial balance is the current debt.
        """
        operation = "Account creation"
        correlation_id = create_correlation_id()
        try:
            self._validator.require_owner(owner_id, self._owner_id)
            name = self._validator.require_name(name)
            try:
                account_type = AccountType(account_type)
            except ValueError:
                raise InvalidAccountTypeError(f"Unknown account type: {account_type}")
            initial_balance = self._validator.require_non_negative(
                initial_balance, "Initial balance cannot be negative"
            )
            try:
                account = await self._repository.insert_account(
                    owner_id, name, account_type, initial_balance
                )
            except StorageError as e:
                raise CreationFailedError(
                    str(e) or "An error occurred while creating the account"
                ) from e
        except LedgerError as e:
            return self._report_error(operation, e, owner_id, correlation_id)

        self._accounts = self._accounts + [account]
        if self._owner_id is None:
            self._owner_id = owner_id

        self._activity_logger.log(
            ActivityEventBuilder.account_created(
                owner_id=owner_id,
                account_id=account.id,
                name=name,
                account_type=account_type.value,
                correlation_id=correlation_id,
            )
        )
        return OperationResult.ok(
            title="Account created",
            message=f'New {account_type.value} account "{name}" has been added',
            account_ids=[account.id],
            correlation_id=correlation_id,
        )

    async def rename_account(
        self,
        owner_id: Optional[str],
        account_id: UUID,
        new_name: str,
    ) -> OperationResult:
        """Rename an account. Renaming to the current name is harmless."""
        operation = "Rename"
        correlation_id = create_correlation_id()
        try:
            self._validator.require_owner(owner_id, self._owner_id)
            new_name = self._validator.require_name(new_name)
            account = self._validator.require_account(self._accounts, account_id)
            try:
                await self._repository.update_account_name(account.id, new_name)
            except StorageError as e:
                raise UpdateFailedError(
                    str(e) or "An error occurred while renaming the account"
                ) from e
        except LedgerError as e:
            return self._report_error(operation, e, owner_id, correlation_id)

        self._reconcile({account.id: lambda acc: acc.renamed(new_name)})

        self._activity_logger.log(
            ActivityEventBuilder.account_renamed(
                owner_id=owner_id,
                account_id=account.id,
                old_name=account.name,
                new_name=new_name,
                correlation_id=correlation_id,
            )
        )
        return OperationResult.ok(
            title="Account renamed",
            message=f'"{account.name}" is now "{new_name}"',
            account_ids=[account.id],
            correlation_id=correlation_id,
        )

    async def delete_account(
        self,
        owner_id: Optional[str],
        account_id: UUID,
    ) -> OperationResult:
        """Delete an account; the store removes its transactions with it."""
        operation = "Deletion"
        correlation_id = create_correlation_id()
        try:
            self._validator.require_owner(owner_id, self._owner_id)
            account = self._validator.require_account(self._accounts, account_id)
            try:
                await self._repository.delete_account(account.id)
            except StorageError as e:
                raise DeletionFailedError(
                    str(e) or "An error occurred while deleting the account"
                ) from e
        except LedgerError as e:
            return self._report_error(operation, e, owner_id, correlation_id)

        self._accounts = [a for a in self._accounts if a.id != account.id]

        self._activity_logger.log(
            ActivityEventBuilder.account_deleted(
                owner_id=owner_id,
                account_id=account.id,
                name=account.name,
                transaction_count=len(account.transactions),
                correlation_id=correlation_id,
            )
        )
        return OperationResult.ok(
            title="Account deleted",
            message=f"{account.name} has been removed",
            account_ids=[account.id],
            correlation_id=correlation_id,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _reconcile(self, updates: dict[UUID, AccountUpdate]) -> None:
        """
        Replace the account list, applying each update to its account.

        Maps over the list as it is now, not as it was when the
        operation started, so a concurrent reconcile is not discarded.
        """
        self._accounts = [
            updates[account.id](account) if account.id in updates else account
            for account in self._accounts
        ]

    def _report_error(
        self,
        operation: str,
        error: LedgerError,
        owner_id: Optional[str],
        correlation_id: UUID,
    ) -> OperationResult:
        if isinstance(error, UnauthorizedError):
            title = "Authentication required"
        else:
            title = f"{operation} failed"

        if isinstance(error, LedgerStoreError):
            event = ActivityEventBuilder.operation_failed
        else:
            event = ActivityEventBuilder.operation_rejected
        self._activity_logger.log(
            event(
                operation=operation,
                error_code=error.code.value,
                error_message=error.message,
                owner_id=owner_id,
                correlation_id=correlation_id,
            )
        )
        return OperationResult.failed(
            title=title,
            message=error.message,
            error_code=error.code,
            correlation_id=correlation_id,
        )

    def _money(self, amount: Decimal) -> str:
        return format_currency(amount, self._currency_symbol)


def create_app_components(
    store: Optional[LedgerStoreInterface] = None,
    listener: Optional[ActivityListener] = None,
) -> LedgerOperations:
    """
    Factory function to create the ledger and its collaborators.

    Args:
        store: Ledger store to use. If None, the backend named by
               LEDGER_STORAGE_BACKEND is built.
        listener: Receives every activity event (notification hook).

    Returns:
        LedgerOperations, not yet loaded
    """
    settings = get_settings()
    ledger_settings = settings.ledger
    logging.getLogger("family_ledger").setLevel(settings.app.log_level)

    if store is None:
        if ledger_settings.storage_backend == "google_sheets":
            store = GoogleSheetsLedgerStore()
        else:
            store = InMemoryLedgerStore()

    activity_logger = ActivityLogger(listener)
    repository = AccountRepository(
        store,
        activity_logger=activity_logger,
        seed_defaults=ledger_settings.seed_default_accounts,
    )
    return LedgerOperations(
        repository,
        activity_logger=activity_logger,
        adjustment_description=ledger_settings.adjustment_description,
        currency_symbol=ledger_settings.currency_symbol,
    )
