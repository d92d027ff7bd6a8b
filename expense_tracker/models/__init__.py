"""
Data Models Package

This package contains all Pydantic models used in the Expense Tracker.
All data flowing through the system must conform to these schemas.
"""

from expense_tracker.models.expense import (
    BudgetStatus,
    BudgetSummary,
    CategoryTotal,
    DraftExpense,
    Expense,
    ExpenseCategory,
    MonthTotal,
    Preferences,
    ReportData,
    ValidationIssue,
    ValidationResult,
)
from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Expense models
    "BudgetStatus",
    "BudgetSummary",
    "CategoryTotal",
    "DraftExpense",
    "Expense",
    "ExpenseCategory",
    "MonthTotal",
    "Preferences",
    "ReportData",
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
