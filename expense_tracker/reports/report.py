"""
Expense Report

Renders ReportData as a plain-text report the user can download and
print. Layout:

    Expense Report

    Total Expenses: $60.00
    Budget: $100
    Remaining: $40.00

    Expenses:
    2024-03-02 - Food: $30 (lunch)
    ...
"""

from decimal import Decimal
from typing import Sequence

from expense_tracker.models.expense import Expense, ReportData
from expense_tracker.queries import aggregation


def build_report_data(budget: Decimal, expenses: Sequence[Expense]) -> ReportData:
    """Collect the four values a report needs from the current log."""
    return ReportData(
        expenses=list(expenses),
        budget=budget,
        total=aggregation.total(expenses),
        remaining=aggregation.remaining(budget, expenses),
    )


def format_money(value: Decimal) -> str:
    """Two decimal places, e.g. 60 -> 60.00."""
    return f"{value:.2f}"


def format_plain(value: Decimal) -> str:
    """Shortest form without exponent, e.g. 30.00 -> 30, 12.50 -> 12.5."""
    normalized = value.normalize()
    text = format(normalized, "f")
    return "0" if text in ("-0", "") else text


def format_expense_line(expense: Expense) -> str:
    return (
        f"{expense.date.isoformat()} - {expense.category.value}: "
        f"${format_plain(expense.amount)} ({expense.description})"
    )


def render_text_report(data: ReportData) -> str:
    lines = [
        "Expense Report",
        "",
        f"Total Expenses: ${format_money(data.total)}",
        f"Budget: ${format_plain(data.budget)}",
        f"Remaining: ${format_money(data.remaining)}",
        "",
        "Expenses:",
    ]
    lines.extend(format_expense_line(expense) for expense in data.expenses)
    return "\n".join(lines) + "\n"
