"""Report export package."""

from expense_tracker.reports.report import (
    build_report_data,
    format_expense_line,
    format_money,
    format_plain,
    render_text_report,
)

__all__ = [
    "build_report_data",
    "format_expense_line",
    "format_money",
    "format_plain",
    "render_text_report",
]
