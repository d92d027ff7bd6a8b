"""
Audit Logger

DESIGN DECISION: Every change to the expense log, budget or stored state
is logged. This provides:
1. Traceability of what the user did
2. A visible record of failures the core recovered from silently
3. A history the UI can show

The audit logger:
- Is synchronous, like everything else in the core
- Never raises (logging a failure must not cause another one)
- Optionally keeps a bounded in-memory history
"""

from collections import deque
from typing import Optional

import structlog

from expense_tracker.models.audit import AuditEvent, AuditEventBuilder


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


class AuditLogger:
    """
    Central audit logging service.

    Logs every event through structlog and keeps the most recent
    `history_size` events for display.
    """

    def __init__(self, history_size: int = 200):
        self._logger = structlog.get_logger("expense_tracker.audit")
        self._history: deque[AuditEvent] = deque(maxlen=history_size or None)
        self._keep_history = history_size > 0

    @property
    def history(self) -> list[AuditEvent]:
        """Recent events, oldest first."""
        return list(self._history)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the event was logged, False if logging itself failed.
        """
        try:
            log_dict = event.to_log_dict()
            if event.severity.value in ("error", "critical"):
                self._logger.error("audit_event", **log_dict)
            elif event.severity.value == "warning":
                self._logger.warning("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Log failure but don't raise
            self._logger.error(
                "audit_log_failed",
                error=str(e),
                event_id=str(event.event_id),
            )
            return False
        finally:
            if self._keep_history:
                self._history.append(event)

        return True

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
        ))
