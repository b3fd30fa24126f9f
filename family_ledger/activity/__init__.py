"""Activity logging package."""

from family_ledger.activity.logger import ActivityListener, ActivityLogger, create_correlation_id

__all__ = ["ActivityListener", "ActivityLogger", "create_correlation_id"]
