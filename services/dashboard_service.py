"""
services/dashboard_service.py
------------------------------
Runs the analytics pipeline for one user's view of the dashboard.

The handler layer owns the mutable view state (`DashboardState`, kept in
`context.user_data`); this service turns a record snapshot plus that state
into a `DashboardView` from scratch on every call.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Optional, Sequence

from analytics.aggregator import bucket_totals, category_totals, filter_for_line, filter_for_pie
from analytics.axis import sort_axis_keys
from analytics.buckets import (
    available_months_in_year,
    available_weeks,
    available_years,
    month_label,
    parse_month_label,
    parse_week_label,
    week_label,
    weeks_by_year,
    year_key,
)
from analytics.insights import build_insights
from config import DEFAULT_CURRENCY, DEFAULT_VIEW_MODE
from models.expense import VIEW_MODES
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class DashboardState:
    """
    The user's current selection.

    Attributes:
        view_mode: 'week', 'month' or 'year'.
        selected_week: Week label, e.g. 'Oct 20 – Oct 26, 2025'.
        selected_month: Month label, e.g. 'Oct 2025'.
        selected_year: Year shown in year mode.
        selected_month_year: Year whose months are plotted in month mode.
    """
    view_mode: str = DEFAULT_VIEW_MODE
    selected_week: str = ""
    selected_month: str = ""
    selected_year: str = ""
    selected_month_year: str = ""

    def resolve(self, records: Sequence[Any], today: Optional[date] = None) -> "DashboardState":
        """
        Fill empty or stale selections with sensible defaults.

        - week: latest week that has records
        - month-year: this year if it has records, else the latest year
          with records, else this year
        - month (month mode): latest month with records in the month-year
          when the selection is empty or from another year
        - year: this year
        """
        today = today or date.today()
        this_year = year_key(today)
        years = available_years(records)

        view_mode = self.view_mode if self.view_mode in VIEW_MODES else "month"

        selected_week = self.selected_week
        if not selected_week:
            weeks = available_weeks(records)
            selected_week = weeks[-1] if weeks else ""

        month_year = self.selected_month_year
        if not month_year:
            if this_year in years:
                month_year = this_year
            else:
                month_year = years[-1] if years else this_year

        selected_month = self.selected_month
        if view_mode == "month":
            months = available_months_in_year(records, month_year)
            if not months:
                selected_month = ""
            elif not selected_month or selected_month.split(" ")[-1] != month_year:
                selected_month = months[-1]

        return replace(
            self,
            view_mode=view_mode,
            selected_week=selected_week,
            selected_month=selected_month,
            selected_year=self.selected_year or this_year,
            selected_month_year=month_year,
        )

    def with_period(self, label: str) -> "DashboardState":
        """
        Select a period by its label, inferring which selector it belongs to.

        Labels are stored in canonical form so they match the bucket keys
        produced from records.

        Raises:
            ValueError: If `label` is not a week label, 'Mon YYYY' or 'YYYY'.
        """
        label = label.strip()
        start = parse_week_label(label)
        if start is not None:
            return replace(self, selected_week=week_label(start))
        month = parse_month_label(label)
        if month is not None:
            return replace(self, selected_month=month_label(month), selected_month_year=year_key(month))
        if label.isdigit() and len(label) == 4:
            return replace(self, selected_year=label, selected_month_year=label)
        raise ValueError(f"Unrecognized period: {label!r}")


def step_week(state: DashboardState, records: Sequence[Any], offset: int) -> DashboardState:
    """Move the selected week `offset` steps through the available weeks, clamped."""
    weeks = available_weeks(records)
    if not weeks:
        return state
    if state.selected_week in weeks:
        idx = weeks.index(state.selected_week) + offset
    else:
        idx = len(weeks) - 1
    idx = max(0, min(idx, len(weeks) - 1))
    return replace(state, selected_week=weeks[idx])


@dataclass
class DashboardView:
    """Everything one dashboard render needs."""
    state: DashboardState
    pie_totals: dict[str, float] = field(default_factory=dict)
    line_keys: list[str] = field(default_factory=list)
    line_values: list[float] = field(default_factory=list)
    insights: list[str] = field(default_factory=list)
    years: list[str] = field(default_factory=list)
    weeks_by_year: dict[str, list[str]] = field(default_factory=dict)
    months_in_year: list[str] = field(default_factory=list)
    has_data: bool = False

    @property
    def period_label(self) -> str:
        return {
            "week": self.state.selected_week,
            "month": self.state.selected_month,
            "year": self.state.selected_year,
        }.get(self.state.view_mode, "")


class DashboardService:
    """Builds dashboard views from record snapshots."""

    def __init__(self, currency: str = DEFAULT_CURRENCY):
        self.currency = currency

    def build(self, records: Sequence[Any], state: DashboardState,
              today: Optional[date] = None) -> DashboardView:
        """
        Run the full pipeline for `state` over `records`.

        The pie and line series use different filters, so they need not
        cover the same records.
        """
        state = state.resolve(records, today)
        mode = state.view_mode

        pie_records = filter_for_pie(
            records, mode, state.selected_week, state.selected_month, state.selected_year
        )
        line_records = filter_for_line(
            records, mode, state.selected_week, state.selected_month_year
        )

        line_totals = bucket_totals(line_records, mode)
        line_keys = sort_axis_keys(mode, line_totals)

        view = DashboardView(
            state=state,
            pie_totals=category_totals(pie_records),
            line_keys=line_keys,
            line_values=[line_totals[k] for k in line_keys],
            insights=build_insights(
                records,
                mode,
                selected_week=state.selected_week,
                selected_month=state.selected_month,
                selected_year=state.selected_year,
                currency=self.currency,
            ),
            years=available_years(records),
            weeks_by_year=weeks_by_year(records),
            months_in_year=available_months_in_year(records, state.selected_month_year),
            has_data=bool(pie_records or line_records),
        )
        logger.debug(
            f"Dashboard {mode} '{view.period_label}': "
            f"{len(pie_records)} pie / {len(line_records)} line records"
        )
        return view
