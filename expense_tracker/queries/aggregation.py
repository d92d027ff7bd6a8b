"""
Aggregation Engine

DESIGN DECISION: Every summary is computed from scratch from the full
expense log on every call. There is no cached or incremental state, so a
summary can never disagree with the log it was computed from.

Grouped results keep the order in which each group FIRST APPEARS in the
log, not alphabetical order, so charts keep a stable layout as the user
adds expenses.

Known limitation kept on purpose: months are keyed by short month name
only, so January 2024 and January 2025 share one bucket.
"""

import math
from decimal import Decimal
from typing import Iterable, Sequence

from expense_tracker.models.expense import (
    BudgetStatus,
    BudgetSummary,
    CategoryTotal,
    Expense,
    MonthTotal,
)


DEFAULT_ALERT_PERCENT = 80.0
DEFAULT_RECENT_LIMIT = 10


def total(log: Iterable[Expense]) -> Decimal:
    """Sum of all amounts. Zero for an empty log."""
    return sum((expense.amount for expense in log), Decimal("0"))


def remaining(budget: Decimal, log: Iterable[Expense]) -> Decimal:
    return budget - total(log)


def percent_used(budget: Decimal, log: Iterable[Expense]) -> float:
    """
    Share of the budget spent, in percent.

    NOT GUARDED: a zero budget gives inf (or nan when nothing is spent).
    Callers decide how to display that.
    """
    spent = total(log)
    if budget == 0:
        if spent == 0:
            return math.nan
        return math.copysign(math.inf, spent)
    return float(spent * 100 / budget)


def by_category(log: Iterable[Expense]) -> list[CategoryTotal]:
    """Amounts summed per category, in order of first appearance."""
    groups: dict[str, Decimal] = {}
    for expense in log:
        key = expense.category.value
        groups[key] = groups.get(key, Decimal("0")) + expense.amount
    return [CategoryTotal(name=name, value=value) for name, value in groups.items()]


def by_month(log: Iterable[Expense]) -> list[MonthTotal]:
    """Amounts summed per short month name, in order of first appearance."""
    groups: dict[str, Decimal] = {}
    for expense in log:
        key = expense.date.strftime("%b")
        groups[key] = groups.get(key, Decimal("0")) + expense.amount
    return [MonthTotal(month=month, amount=amount) for month, amount in groups.items()]


def budget_status(
    percent: float,
    alert_percent: float = DEFAULT_ALERT_PERCENT,
) -> BudgetStatus:
    if math.isnan(percent):
        return BudgetStatus.OK
    if percent > 100:
        return BudgetStatus.OVER
    if percent > alert_percent:
        return BudgetStatus.WARNING
    return BudgetStatus.OK


def progress_fraction(percent: float) -> float:
    """Percent used as a 0..1 fraction for progress bars."""
    if math.isnan(percent):
        return 0.0
    return min(max(percent, 0.0), 100.0) / 100.0


def recent(log: Sequence[Expense], limit: int = DEFAULT_RECENT_LIMIT) -> list[Expense]:
    """The last `limit` expenses, newest first."""
    if limit <= 0:
        return []
    return list(reversed(log[-limit:]))


def summarize(
    budget: Decimal,
    log: Sequence[Expense],
    alert_percent: float = DEFAULT_ALERT_PERCENT,
    recent_limit: int = DEFAULT_RECENT_LIMIT,
) -> BudgetSummary:
    """Everything the dashboard needs, in one pass over the current log."""
    spent = total(log)
    percent = percent_used(budget, log)
    status = budget_status(percent, alert_percent)

    return BudgetSummary(
        budget=budget,
        total=spent,
        remaining=budget - spent,
        percent_used=percent,
        progress=progress_fraction(percent),
        status=status,
        alert=status != BudgetStatus.OK,
        by_category=by_category(log),
        by_month=by_month(log),
        recent=recent(log, recent_limit),
        expense_count=len(log),
    )
