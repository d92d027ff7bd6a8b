"""Aggregation package."""

from expense_tracker.queries.aggregation import (
    budget_status,
    by_category,
    by_month,
    percent_used,
    progress_fraction,
    recent,
    remaining,
    summarize,
    total,
)

__all__ = [
    "budget_status",
    "by_category",
    "by_month",
    "percent_used",
    "progress_fraction",
    "recent",
    "remaining",
    "summarize",
    "total",
]
