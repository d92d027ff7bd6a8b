"""
Audit Models for the Expense Tracker

Every change to the expense log, the budget or the stored state is
recorded as an AuditEvent. Failures that the core recovers from locally
(storage quota, corrupt JSON, unparseable voice input) still leave a
trace here, so they are visible without ever blocking the user.

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Expense log
    EXPENSE_ADDED = "expense_added"
    EXPENSE_REJECTED = "expense_rejected"
    EXPENSE_DELETED = "expense_deleted"
    EXPENSES_LOADED = "expenses_loaded"

    # Budget and preferences
    BUDGET_UPDATED = "budget_updated"
    PREFERENCE_UPDATED = "preference_updated"

    # Voice entry
    VOICE_COMMAND_PARSED = "voice_command_parsed"
    VOICE_COMMAND_NO_MATCH = "voice_command_no_match"
    SPEECH_UNAVAILABLE = "speech_unavailable"

    # Receipts and reports
    RECEIPT_CAPTURED = "receipt_captured"
    REPORT_EXPORTED = "report_exported"

    # Storage
    STORAGE_READ_FAILED = "storage_read_failed"
    STORAGE_WRITE_FAILED = "storage_write_failed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """A single audit event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # What entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'expense', 'budget', 'storage')"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_added(expense_id, "Food", "12.50")
        event = AuditEventBuilder.storage_write_failed("expenses", str(exc))
    """

    @staticmethod
    def expense_added(
        expense_id: UUID,
        category: str,
        amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            entity_type="expense",
            entity_id=expense_id,
            description=f"Expense added: {category} - ${amount}",
            details={
                "category": category,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_rejected(issues: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="draft",
            description=f"Draft expense not added: {len(issues)} issues",
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def expense_deleted(expense_id: UUID, found: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_type="expense",
            entity_id=expense_id,
            description=(
                "Expense deleted" if found else "Delete requested for unknown expense"
            ),
            details={"found": found},
            is_user_action=True,
        )

    @staticmethod
    def expenses_loaded(count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSES_LOADED,
            entity_type="expense_log",
            description=f"Loaded {count} expenses from storage",
            details={"count": count},
        )

    @staticmethod
    def budget_updated(old_budget: str, new_budget: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_UPDATED,
            entity_type="budget",
            description=f"Budget changed from ${old_budget} to ${new_budget}",
            details={
                "old_budget": old_budget,
                "new_budget": new_budget,
            },
            is_user_action=True,
        )

    @staticmethod
    def preference_updated(name: str, value: Any) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PREFERENCE_UPDATED,
            entity_type="preference",
            description=f"Preference {name} set to {value}",
            details={"name": name, "value": value},
            is_user_action=True,
        )

    @staticmethod
    def voice_command_parsed(
        transcript: str,
        amount: str,
        category: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VOICE_COMMAND_PARSED,
            entity_type="transcript",
            description=f"Voice command understood: {category} - ${amount}",
            details={
                "transcript": transcript,
                "amount": amount,
                "category": category,
            },
            is_user_action=True,
        )

    @staticmethod
    def voice_command_no_match(transcript: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VOICE_COMMAND_NO_MATCH,
            entity_type="transcript",
            description="Voice command ignored: no amount found",
            details={"transcript": transcript},
            is_user_action=True,
        )

    @staticmethod
    def speech_unavailable(reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SPEECH_UNAVAILABLE,
            severity=AuditSeverity.WARNING,
            entity_type="speech",
            description="Speech recognition is not available",
            error_message=reason,
        )

    @staticmethod
    def receipt_captured(filename: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECEIPT_CAPTURED,
            entity_type="receipt",
            description=f"Receipt captured: {filename}",
            details={"filename": filename},
            is_user_action=True,
        )

    @staticmethod
    def report_exported(expense_count: int, total: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPORT_EXPORTED,
            entity_type="report",
            description=f"Report exported with {expense_count} expenses",
            details={
                "expense_count": expense_count,
                "total": total,
            },
            is_user_action=True,
        )

    @staticmethod
    def storage_read_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_READ_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="storage",
            description=f"Could not read '{key}', using default",
            error_message=error_message,
            details={"key": key},
        )

    @staticmethod
    def expense_record_dropped(index: int, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_READ_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="storage",
            description=f"Skipped unreadable stored expense #{index}",
            error_message=error_message,
            details={"key": "expenses", "index": index},
        )

    @staticmethod
    def storage_write_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_WRITE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="storage",
            description=f"Could not save '{key}'",
            error_message=error_message,
            details={"key": key},
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
        )
