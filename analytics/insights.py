"""
analytics/insights.py
---------------------
Builds the narrative "Insights" statements for one selected period.

Statements use Telegram's HTML subset (<b>) and always render amounts
with two decimals. Everything is recomputed from the snapshot on every call.
"""

import html
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional, Sequence

from analytics.aggregator import category_of, coerce_amount, filter_for_pie, total_amount
from analytics.buckets import previous_week_label
from analytics.dates import WEEKDAY_NAMES, expense_date, record_field, weekday_name
from utils.logger import get_logger

logger = get_logger(__name__)

NO_DATA = "No data yet to analyze your spending."
SELECT_WEEK = "Select a week to see insights."

_SNAPSHOT_TITLES = {
    "week": "📅 Weekly snapshot for",
    "month": "🗓️ Monthly snapshot for",
    "year": "📊 Yearly snapshot for",
}


@dataclass
class PeriodStats:
    """Aggregates over the records of one selected period."""
    total: float = 0.0
    by_day: dict[date, float] = field(default_factory=dict)
    by_category: dict[str, float] = field(default_factory=dict)
    by_weekday: dict[str, float] = field(default_factory=dict)

    @property
    def average_per_day(self) -> float:
        return self.total / (len(self.by_day) or 1)

    @property
    def top_category(self) -> Optional[tuple[str, float]]:
        return _top(self.by_category)

    @property
    def top_weekday(self) -> Optional[tuple[str, float]]:
        return _top(self.by_weekday)

    @property
    def no_spend_weekdays(self) -> list[str]:
        return [name for name in WEEKDAY_NAMES if name not in self.by_weekday]


def _top(totals: dict[str, float]) -> Optional[tuple[str, float]]:
    # max() keeps the first of equal entries, so ties go to insertion order.
    if not totals:
        return None
    return max(totals.items(), key=lambda item: item[1])


def period_stats(records: Sequence[Any]) -> PeriodStats:
    """Total, per-day, per-category and per-weekday spend for `records`."""
    stats = PeriodStats()
    for record in records:
        d = expense_date(record)
        if d is None:
            continue
        amount = coerce_amount(record_field(record, "amount"))
        category = category_of(record)
        weekday = weekday_name(d)

        stats.by_day[d] = stats.by_day.get(d, 0.0) + amount
        stats.by_category[category] = stats.by_category.get(category, 0.0) + amount
        stats.by_weekday[weekday] = stats.by_weekday.get(weekday, 0.0) + amount
    stats.total = sum(stats.by_day.values())
    return stats


def week_over_week(current_total: float, previous_total: float) -> str:
    """Compare a week's total with the week before it."""
    if previous_total == 0:
        if current_total > 0:
            return "🆕 You started spending this week (no spend last week)."
        return "🟰 Spending is steady compared to last week."

    pct = (current_total - previous_total) / previous_total * 100
    if pct > 0:
        return f"📈 Up {pct:.1f}% vs last week."
    if pct < 0:
        return f"📉 Down {abs(pct):.1f}% vs last week."
    return "🟰 Same as last week."


def build_insights(
    records: Sequence[Any],
    view_mode: str,
    selected_week: str = "",
    selected_month: str = "",
    selected_year: str = "",
    currency: str = "RM",
) -> list[str]:
    """
    Ordered insight statements for the selected period.

    Args:
        records: The full snapshot of the user's records.
        view_mode: 'week', 'month' or 'year'.
        selected_week: Week label (week mode).
        selected_month: Month label such as 'Oct 2025' (month mode).
        selected_year: Four-digit year (year mode).
        currency: Prefix printed before every amount.

    Returns:
        A single informational statement when there is nothing to analyze,
        otherwise snapshot, top category, busiest day, total, daily
        average and (week mode) the week-over-week and no-spend lines.
    """
    if not records:
        return [NO_DATA]

    if view_mode == "week" and not selected_week:
        return [SELECT_WEEK]

    selected = {
        "week": selected_week,
        "month": selected_month,
        "year": selected_year,
    }.get(view_mode, "")

    filtered = filter_for_pie(records, view_mode, selected_week, selected_month, selected_year) if selected else []
    if not filtered:
        return [f"No {view_mode} data available for the selected period."]

    stats = period_stats(filtered)
    logger.debug(f"Insights for {view_mode} '{selected}': {len(filtered)} records, total {stats.total:.2f}")

    lines = [f"{_SNAPSHOT_TITLES[view_mode]} <b>{html.escape(selected)}</b>"]

    top_category = stats.top_category
    if top_category:
        name, amount = top_category
        lines.append(f"🏆 Top category: <b>{html.escape(name)}</b> ({currency} {amount:.2f}).")

    top_day = stats.top_weekday
    if top_day:
        name, amount = top_day
        lines.append(f"📌 Busiest day: <b>{name}</b> ({currency} {amount:.2f}).")

    lines.append(f"💰 Total spent: <b>{currency} {stats.total:.2f}</b>.")
    lines.append(f"📉 Average per day: <b>{currency} {stats.average_per_day:.2f}</b>.")

    if view_mode == "week":
        previous_label = previous_week_label(selected_week)
        previous = filter_for_pie(records, "week", selected_week=previous_label) if previous_label else []
        previous_total = total_amount(previous)
        lines.append(week_over_week(stats.total, previous_total))

        no_spend = stats.no_spend_weekdays
        if no_spend:
            lines.append(f"🧘 No-spend days: <b>{', '.join(no_spend)}</b>.")

    return lines
