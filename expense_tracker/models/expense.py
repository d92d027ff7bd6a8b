"""
Core Data Models for the Expense Tracker

These models define the schemas for everything that flows between the
parser, the expense store, the aggregation engine and the renderers.

DESIGN DECISION: A spoken or typed entry starts life as a DraftExpense
(plain strings, possibly incomplete). Only an explicit confirmation turns
it into an Expense, which is the only thing ever written to the log.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


# =============================================================================
# ENUMS
# =============================================================================

class ExpenseCategory(str, Enum):
    """
    Supported expense categories.

    Member order is the keyword scan order: when free text mentions more
    than one category, the earliest member here wins, regardless of where
    the words appear in the text.
    """
    FOOD = "Food"
    GROCERIES = "Groceries"
    TRANSPORT = "Transport"
    ENTERTAINMENT = "Entertainment"
    SHOPPING = "Shopping"
    BILLS = "Bills"
    HEALTH = "Health"
    OTHER = "Other"

    @property
    def keyword(self) -> str:
        return self.value.lower()

    @classmethod
    def match_keyword(cls, text: str) -> Optional["ExpenseCategory"]:
        """Return the first category whose keyword occurs in text, if any."""
        lowered = text.lower()
        for category in cls:
            if category.keyword in lowered:
                return category
        return None

    @classmethod
    def coerce(cls, value: Any) -> "ExpenseCategory":
        """
        Coerce free text into one of the fixed categories.

        Exact names match case-insensitively; anything else goes through
        the keyword scan and falls back to OTHER.
        """
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        if not text:
            raise ValueError("Category is required")
        for category in cls:
            if category.keyword == text.lower():
                return category
        return cls.match_keyword(text) or cls.OTHER


class BudgetStatus(str, Enum):
    """How much of the budget has been used."""
    OK = "ok"            # at or below the alert threshold
    WARNING = "warning"  # above the alert threshold
    OVER = "over"        # more than 100% used


# =============================================================================
# DRAFTS AND RECORDS
# =============================================================================

class DraftExpense(BaseModel):
    """
    An unconfirmed expense candidate.

    Produced by the add-expense form or by the voice command parser.
    All fields are strings and may be empty; nothing here is trusted
    until the user confirms it.
    """
    amount: str = ""
    category: str = ""
    description: str = ""


class Expense(BaseModel):
    """
    A finalized expense record.

    CRITICAL: Expenses are never edited in place. The log only ever
    gains a record or loses one.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Opaque unique identifier"
    )
    amount: Decimal = Field(
        ...,
        allow_inf_nan=False,
        description="Amount spent (currency agnostic)"
    )
    category: ExpenseCategory = Field(
        ...,
        description="Expense category"
    )
    description: str = Field(
        default="",
        description="Free text label, defaults to the category name"
    )
    date: dt.date = Field(
        default_factory=dt.date.today,
        description="Day the expense was recorded"
    )

    @model_validator(mode="before")
    @classmethod
    def default_description(cls, data: Any) -> Any:
        """An empty description falls back to the category name."""
        if isinstance(data, dict) and not str(data.get("description") or "").strip():
            category = data.get("category")
            if category is not None and str(category).strip():
                data = {**data, "description": ExpenseCategory.coerce(category).value}
        return data

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, v: Any) -> ExpenseCategory:
        return ExpenseCategory.coerce(v)


class Preferences(BaseModel):
    """Display preferences handed to the renderers."""
    dark_mode: bool = False


# =============================================================================
# DERIVED VALUES
# =============================================================================

class CategoryTotal(BaseModel):
    """Sum of amounts for one category."""
    name: str
    value: Decimal


class MonthTotal(BaseModel):
    """Sum of amounts for one short month name (e.g. "Jan")."""
    month: str
    amount: Decimal


class BudgetSummary(BaseModel):
    """
    Everything the dashboard shows about the budget.

    Recomputed from the log on every request; never cached.
    """
    budget: Decimal
    total: Decimal
    remaining: Decimal
    percent_used: float = Field(
        ...,
        description="Non-finite when the budget is zero"
    )
    progress: float = Field(
        ...,
        ge=0.0,
        le=1.0,
        description="Percent used clamped to [0, 1] for progress bars"
    )
    status: BudgetStatus
    alert: bool
    by_category: list[CategoryTotal] = Field(default_factory=list)
    by_month: list[MonthTotal] = Field(default_factory=list)
    recent: list[Expense] = Field(default_factory=list)
    expense_count: int = Field(ge=0)


class ReportData(BaseModel):
    """The four values a report renderer needs."""
    expenses: list[Expense] = Field(default_factory=list)
    budget: Decimal
    total: Decimal
    remaining: Decimal
    generated_at: dt.datetime = Field(
        default_factory=lambda: dt.datetime.now(dt.timezone.utc)
    )


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single problem found in a draft."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'suspicious_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """Result of validating a draft before it becomes an Expense."""

    is_valid: bool
    amount: Optional[Decimal] = Field(
        default=None,
        description="Numeric amount parsed from the draft, when there is one"
    )
    category: Optional[ExpenseCategory] = None
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == "warning"]
