"""
Activity Event Models for Family Ledger

Every ledger operation emits structured events describing what happened.
They go to the local structured log and to an optional listener (the
presentation layer's notification hook).

DESIGN DECISION: Events are not persisted. The transaction list is the
only history the ledger keeps.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from family_ledger.models.store import utc_now


class ActivityEventType(str, Enum):
    """Types of events the ledger emits."""
    # Loading
    ACCOUNTS_LOADED = "accounts_loaded"
    ACCOUNTS_LOAD_FAILED = "accounts_load_failed"
    DEFAULT_ACCOUNT_CREATED = "default_account_created"
    DEFAULT_ACCOUNT_FAILED = "default_account_failed"

    # Balance-changing operations
    TRANSACTION_RECORDED = "transaction_recorded"
    TRANSFER_COMPLETED = "transfer_completed"
    CREDIT_BALANCE_UPDATED = "credit_balance_updated"

    # Account lifecycle
    ACCOUNT_CREATED = "account_created"
    ACCOUNT_RENAMED = "account_renamed"
    ACCOUNT_DELETED = "account_deleted"

    # Failures
    OPERATION_REJECTED = "operation_rejected"
    OPERATION_FAILED = "operation_failed"


class ActivitySeverity(str, Enum):
    """Severity level for activity events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ActivityEvent(BaseModel):
    """
    A single activity event.

    Validation rejections are warnings; store failures are errors.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: ActivityEventType
    severity: ActivitySeverity = Field(default=ActivitySeverity.INFO)

    # Context
    owner_id: Optional[str] = None
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'account', 'transaction')"
    )
    entity_id: Optional[UUID] = None
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="Ties together the events of one operation"
    )

    # Event details
    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "owner_id": self.owner_id,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
        }


class ActivityEventBuilder:
    """
    Helper class to build activity events with common patterns.

    Usage:
        event = ActivityEventBuilder.account_created(owner_id, account_id, name, "credit", correlation_id)
        event = ActivityEventBuilder.operation_failed("transfer", "transfer_failed", str(e), correlation_id)
    """

    @staticmethod
    def accounts_loaded(
        owner_id: str,
        account_count: int,
        transaction_count: int,
        correlation_id: UUID
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.ACCOUNTS_LOADED,
            owner_id=owner_id,
            correlation_id=correlation_id,
            description=f"Loaded {account_count} accounts",
            details={
                "account_count": account_count,
                "transaction_count": transaction_count,
            },
        )

    @staticmethod
    def accounts_load_failed(
        owner_id: str,
        error_message: str,
        correlation_id: UUID
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.ACCOUNTS_LOAD_FAILED,
            severity=ActivitySeverity.ERROR,
            owner_id=owner_id,
            correlation_id=correlation_id,
            description="Error fetching data",
            error_code="store_unavailable",
            error_message=error_message,
        )

    @staticmethod
    def default_account_created(
        owner_id: str,
        account_id: UUID,
        name: str,
        correlation_id: Optional[UUID] = None
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.DEFAULT_ACCOUNT_CREATED,
            owner_id=owner_id,
            entity_type="account",
            entity_id=account_id,
            correlation_id=correlation_id,
            description=f"Default account created: {name}",
        )

    @staticmethod
    def default_account_failed(
        owner_id: str,
        name: str,
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.DEFAULT_ACCOUNT_FAILED,
            severity=ActivitySeverity.ERROR,
            owner_id=owner_id,
            entity_type="account",
            correlation_id=correlation_id,
            description="Error creating default account",
            details={"name": name},
            error_code="creation_failed",
            error_message=error_message,
        )

    @staticmethod
    def transaction_recorded(
        owner_id: str,
        account_id: UUID,
        transaction_id: UUID,
        amount: str,
        new_balance: str,
        correlation_id: UUID
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.TRANSACTION_RECORDED,
            owner_id=owner_id,
            entity_type="account",
            entity_id=account_id,
            correlation_id=correlation_id,
            description=f"Transaction recorded: {amount}",
            details={
                "transaction_id": str(transaction_id),
                "amount": amount,
                "new_balance": new_balance,
            },
        )

    @staticmethod
    def transfer_completed(
        owner_id: str,
        from_account_id: UUID,
        to_account_id: UUID,
        amount: str,
        correlation_id: UUID
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.TRANSFER_COMPLETED,
            owner_id=owner_id,
            entity_type="account",
            entity_id=from_account_id,
            correlation_id=correlation_id,
            description=f"Transfer of {amount} completed",
            details={
                "from_account_id": str(from_account_id),
                "to_account_id": str(to_account_id),
                "amount": amount,
            },
        )

    @staticmethod
    def credit_balance_updated(
        owner_id: str,
        account_id: UUID,
        old_balance: str,
        new_balance: str,
        correlation_id: UUID
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.CREDIT_BALANCE_UPDATED,
            owner_id=owner_id,
            entity_type="account",
            entity_id=account_id,
            correlation_id=correlation_id,
            description=f"Credit balance updated from {old_balance} to {new_balance}",
            details={
                "old_balance": old_balance,
                "new_balance": new_balance,
            },
        )

    @staticmethod
    def account_created(
        owner_id: str,
        account_id: UUID,
        name: str,
        account_type: str,
        correlation_id: UUID
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.ACCOUNT_CREATED,
            owner_id=owner_id,
            entity_type="account",
            entity_id=account_id,
            correlation_id=correlation_id,
            description=f"Account created: {name}",
            details={"account_type": account_type},
        )

    @staticmethod
    def account_renamed(
        owner_id: str,
        account_id: UUID,
        old_name: str,
        new_name: str,
        correlation_id: UUID
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.ACCOUNT_RENAMED,
            owner_id=owner_id,
            entity_type="account",
            entity_id=account_id,
            correlation_id=correlation_id,
            description=f"Account renamed to {new_name}",
            details={
                "old_name": old_name,
                "new_name": new_name,
            },
        )

    @staticmethod
    def account_deleted(
        owner_id: str,
        account_id: UUID,
        name: str,
        transaction_count: int,
        correlation_id: UUID
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.ACCOUNT_DELETED,
            owner_id=owner_id,
            entity_type="account",
            entity_id=account_id,
            correlation_id=correlation_id,
            description=f"Account deleted: {name}",
            details={"transactions_removed": transaction_count},
        )

    @staticmethod
    def operation_rejected(
        operation: str,
        error_code: str,
        error_message: str,
        owner_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.OPERATION_REJECTED,
            severity=ActivitySeverity.WARNING,
            owner_id=owner_id,
            correlation_id=correlation_id,
            description=f"{operation} rejected",
            details={"operation": operation},
            error_code=error_code,
            error_message=error_message,
        )

    @staticmethod
    def operation_failed(
        operation: str,
        error_code: str,
        error_message: str,
        owner_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.OPERATION_FAILED,
            severity=ActivitySeverity.ERROR,
            owner_id=owner_id,
            correlation_id=correlation_id,
            description=f"{operation} failed",
            details={"operation": operation},
            error_code=error_code,
            error_message=error_message,
        )
