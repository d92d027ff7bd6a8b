"""Validation package."""

from expense_tracker.validation.validator import DraftValidator, parse_amount

__all__ = ["DraftValidator", "parse_amount"]
