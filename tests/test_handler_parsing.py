"""Tests for command argument parsing and reply rendering."""

from datetime import date

from handlers.dashboard_handler import render_periods
from handlers.expense_handler import parse_add_args, parse_edit_args, parse_list_filters
from handlers.export_handler import export_filename
from services.dashboard_service import DashboardService, DashboardState
from tests.helpers import make_expense


class TestAddArgs:

    def test_amount_and_category_only(self):
        assert parse_add_args(["12.5", "Food"]) == {
            "amount": "12.5", "category": "Food", "on": None, "description": None,
        }

    def test_date_and_note(self):
        parsed = parse_add_args(["8", "transport", "2025-10-21", "bus", "home"])
        assert parsed["on"] == "2025-10-21"
        assert parsed["description"] == "bus home"

    def test_note_without_date(self):
        parsed = parse_add_args(["8", "Food", "late", "snack"])
        assert parsed["on"] is None
        assert parsed["description"] == "late snack"

    def test_too_few_arguments(self):
        assert parse_add_args(["8"]) is None


class TestEditArgs:

    def test_all_fields(self):
        assert parse_edit_args("amount=75 category=Bills desc=power bill") == {
            "amount": "75", "category": "Bills", "description": "power bill",
        }

    def test_description_in_the_middle(self):
        assert parse_edit_args("desc=taxi home amount=12") == {"description": "taxi home", "amount": "12"}

    def test_nothing_recognized(self):
        assert parse_edit_args("hello") == {}


def test_list_filters():
    assert parse_list_filters([]) == (None, None)
    assert parse_list_filters(["oct", "2025"]) == ("Oct", "2025")
    assert parse_list_filters(["2024"]) == (None, "2024")


def test_export_filename():
    assert export_filename("Oct", "2025", "csv") == "expenses_2025_Oct.csv"
    assert export_filename(None, None, "xlsx") == "expenses.xlsx"


class TestRenderPeriods:

    def test_lists_the_labels_period_accepts(self):
        records = [
            make_expense(5, on=date(2025, 10, 21)),
            make_expense(3, on=date(2025, 3, 3)),
            make_expense(9, on=date(2024, 12, 31)),
        ]
        view = DashboardService().build(records, DashboardState(view_mode="month"), date(2025, 10, 24))
        text = render_periods(view)
        assert "<b>Years:</b> 2024, 2025" in text
        assert "<b>Months in 2025:</b> Mar 2025, Oct 2025" in text
        assert "<b>Weeks in 2025:</b>\n• Mar 3 – Mar 9, 2025\n• Oct 20 – Oct 26, 2025" in text
        assert "Dec 30 – Jan 5, 2024" not in text
        for label in ["Mar 2025", "Oct 20 – Oct 26, 2025", "2024"]:
            assert DashboardState().with_period(label)

    def test_no_records(self):
        view = DashboardService().build([], DashboardState(view_mode="week"), date(2025, 10, 24))
        assert render_periods(view) == "📭 No expenses recorded yet."
