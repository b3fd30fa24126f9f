"""
Activity Logger

DESIGN DECISION: Every ledger operation reports what happened.
This provides:
1. Structured local logs for debugging
2. A single hook the presentation layer can subscribe to for
   notifications, instead of operations showing toasts themselves

The activity logger:
- Never persists events (the transaction list is the only history)
- Gracefully handles listener failures (a broken notifier must not
  break a ledger operation that already committed)
- Supports correlation IDs to trace the events of one operation
"""

from typing import Callable, Optional
from uuid import UUID, uuid4

import structlog

from family_ledger.models.activity import ActivityEvent, ActivitySeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


ActivityListener = Callable[[ActivityEvent], None]


class ActivityLogger:
    """
    Central activity logging service.

    Sends each event to:
    1. Structured local log
    2. The listener, if one is registered
    """

    def __init__(self, listener: Optional[ActivityListener] = None):
        """
        Initialize activity logger.

        Args:
            listener: Called with every event (e.g. to raise a toast).
                     If None, events are only logged locally.
        """
        self._listener = listener
        self._logger = structlog.get_logger("family_ledger.activity")

    def set_listener(self, listener: Optional[ActivityListener]) -> None:
        self._listener = listener

    def log(self, event: ActivityEvent) -> None:
        """Log an event locally and forward it to the listener."""
        log_dict = event.to_log_dict()

        if event.severity == ActivitySeverity.ERROR:
            self._logger.error("activity_event", **log_dict)
        elif event.severity == ActivitySeverity.WARNING:
            self._logger.warning("activity_event", **log_dict)
        elif event.severity == ActivitySeverity.DEBUG:
            self._logger.debug("activity_event", **log_dict)
        else:
            self._logger.info("activity_event", **log_dict)

        if self._listener is None:
            return
        try:
            self._listener(event)
        except Exception as e:
            # Log failure but don't raise
            self._logger.error(
                "activity_listener_failed",
                error=str(e),
                event_id=str(event.event_id),
            )


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of each ledger operation and pass it
    through every event the operation emits.
    """
    return uuid4()
