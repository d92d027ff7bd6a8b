"""
Draft Validation

Checks a DraftExpense before it is allowed to become an Expense.

ERRORS block the add (the form simply stays open):
- missing amount
- missing category
- an amount that does not start with a number

WARNINGS never block. Zero and negative amounts are accepted, exactly as
typed; they are reported so the UI can point them out.

The amount is read the way a browser's parseFloat reads a form field: the
longest leading numeric prefix counts and anything after it is ignored
("12.5abc" is 12.5).
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional

from expense_tracker.models.expense import (
    DraftExpense,
    ExpenseCategory,
    ValidationIssue,
    ValidationResult,
)


NUMERIC_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_amount(text: str) -> Optional[Decimal]:
    """Leading numeric prefix of text as a Decimal, or None."""
    match = NUMERIC_PREFIX.match(text or "")
    if not match:
        return None
    try:
        value = Decimal(match.group(1))
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


class DraftValidator:
    """Validates drafts from the form or the voice parser."""

    def validate(self, draft: DraftExpense) -> ValidationResult:
        issues: list[ValidationIssue] = []

        amount = None
        if not draft.amount.strip():
            issues.append(ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Amount is required",
                severity="error",
            ))
        else:
            amount = parse_amount(draft.amount)
            if amount is None:
                issues.append(ValidationIssue(
                    field="amount",
                    issue_type="invalid_format",
                    message=f"'{draft.amount}' is not a number",
                    severity="error",
                ))
            elif amount < 0:
                issues.append(ValidationIssue(
                    field="amount",
                    issue_type="suspicious_value",
                    message="Amount is negative",
                    severity="warning",
                ))
            elif amount == 0:
                issues.append(ValidationIssue(
                    field="amount",
                    issue_type="suspicious_value",
                    message="Amount is zero",
                    severity="warning",
                ))

        category = None
        if not draft.category.strip():
            issues.append(ValidationIssue(
                field="category",
                issue_type="missing",
                message="Category is required",
                severity="error",
            ))
        else:
            category = ExpenseCategory.coerce(draft.category)

        has_errors = any(issue.severity == "error" for issue in issues)
        return ValidationResult(
            is_valid=not has_errors,
            amount=amount,
            category=category,
            issues=issues,
        )
