"""Tests for chart rendering."""

from datetime import date

from services.chart_service import ChartService
from services.dashboard_service import DashboardService, DashboardState, DashboardView
from tests.helpers import make_expense

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


def build_view(records, **state):
    return DashboardService().build(records, DashboardState(**state), date(2025, 10, 24))


def test_category_pie_renders_png():
    view = build_view(
        [make_expense(50, "Food", date(2025, 10, 20)), make_expense(20, "Bills", date(2025, 10, 21))],
        view_mode="week",
    )
    buf = ChartService().category_pie(view)
    assert buf is not None
    assert buf.read(8) == PNG_MAGIC


def test_trend_line_renders_png():
    view = build_view([make_expense(50, "Food", date(2025, 10, 20))], view_mode="month")
    buf = ChartService().trend_line(view)
    assert buf.getvalue().startswith(PNG_MAGIC)


def test_nothing_to_draw():
    view = DashboardView(state=DashboardState())
    assert ChartService().category_pie(view) is None
    assert ChartService().trend_line(view) is None


def test_zero_amounts_are_not_drawn():
    view = build_view([make_expense(0, "Food", date(2025, 10, 20))], view_mode="week")
    assert ChartService().category_pie(view) is None
    assert ChartService().trend_line(view) is None
