"""Tests for report data and the text report."""

import datetime as dt
from decimal import Decimal

import pytest

from expense_tracker.reports import (
    build_report_data,
    format_expense_line,
    format_money,
    format_plain,
    render_text_report,
)


class TestFormatting:

    @pytest.mark.parametrize("value, expected", [
        ("60", "60.00"),
        ("12.5", "12.50"),
        ("-10", "-10.00"),
    ])
    def test_format_money(self, value, expected):
        assert format_money(Decimal(value)) == expected

    @pytest.mark.parametrize("value, expected", [
        ("1000", "1000"),
        ("30.00", "30"),
        ("12.50", "12.5"),
        ("0.00", "0"),
        ("-0", "0"),
    ])
    def test_format_plain(self, value, expected):
        assert format_plain(Decimal(value)) == expected

    def test_expense_line(self, make_expense):
        expense = make_expense("30", "Food", "lunch", date=dt.date(2024, 3, 2))
        assert format_expense_line(expense) == "2024-03-02 - Food: $30 (lunch)"


class TestReport:

    def test_report_data(self, make_expense):
        log = [make_expense("30"), make_expense("20"), make_expense("10", "Bills")]
        data = build_report_data(Decimal("100"), log)
        assert data.total == Decimal("60")
        assert data.remaining == Decimal("40")
        assert data.expenses == log

    def test_empty_report(self):
        text = render_text_report(build_report_data(Decimal("1000"), []))
        assert text == (
            "Expense Report\n"
            "\n"
            "Total Expenses: $0.00\n"
            "Budget: $1000\n"
            "Remaining: $1000.00\n"
            "\n"
            "Expenses:\n"
        )

    def test_expenses_listed_in_log_order(self, make_expense):
        log = [
            make_expense("5", "Transport", "bus", date=dt.date(2024, 1, 2)),
            make_expense("12.50", "Food", "pizza", date=dt.date(2024, 1, 1)),
        ]
        lines = render_text_report(build_report_data(Decimal("50"), log)).splitlines()
        assert lines[2:5] == [
            "Total Expenses: $17.50",
            "Budget: $50",
            "Remaining: $32.50",
        ]
        assert lines[-2:] == [
            "2024-01-02 - Transport: $5 (bus)",
            "2024-01-01 - Food: $12.5 (pizza)",
        ]

    def test_overspent_report(self, make_expense):
        lines = render_text_report(
            build_report_data(Decimal("10"), [make_expense("25")])
        ).splitlines()
        assert lines[4] == "Remaining: $-15.00"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
