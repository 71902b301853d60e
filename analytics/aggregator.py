"""
analytics/aggregator.py
-----------------------
Period filters and single-pass reductions over a record snapshot.

Records whose date cannot be resolved are skipped by every function here.
Amounts that are not numbers count as zero. Input records are never modified.
"""

import math
from decimal import Decimal
from typing import Any, Iterable, Optional

from analytics.buckets import period_key, week_label, year_key
from analytics.dates import MONTH_ABBRS, expense_date, month_abbr, record_field
from models.expense import UNCATEGORIZED


def coerce_amount(value: Any) -> float:
    """
    Numeric value of a raw amount; anything unusable becomes 0.0.

    Accepts ints, floats, Decimals (as returned for NUMERIC columns) and
    numeric strings. Booleans, NaN, infinities and ints too large for a
    float count as zero.
    """
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float, Decimal)):
        try:
            number = float(value)
        except OverflowError:
            return 0.0
    elif isinstance(value, str):
        try:
            number = float(value.strip()) if value.strip() else 0.0
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def category_of(record: Any) -> str:
    """Stored category, or 'Uncategorized' when empty/absent."""
    category = record_field(record, "category")
    if not category or not isinstance(category, str):
        return UNCATEGORIZED
    return category


# ── Filtering ────────────────────────────────────────────


def filter_for_pie(
    records: Iterable[Any],
    view_mode: str,
    selected_week: str = "",
    selected_month: str = "",
    selected_year: str = "",
) -> list[Any]:
    """Records falling exactly in the selected week, month or year."""
    selected = {"week": selected_week, "month": selected_month, "year": selected_year}.get(view_mode)
    out = []
    for record in records:
        d = expense_date(record)
        if d is None:
            continue
        # Unknown view modes do not filter.
        if selected is None or period_key(d, view_mode) == selected:
            out.append(record)
    return out


def filter_for_line(
    records: Iterable[Any],
    view_mode: str,
    selected_week: str = "",
    selected_month_year: str = "",
) -> list[Any]:
    """
    Records feeding the time-series chart.

    week  -> the selected week only
    month -> every record of the selected year (one point per month)
    year  -> every dated record (one point per year)
    """
    out = []
    for record in records:
        d = expense_date(record)
        if d is None:
            continue
        if view_mode == "week":
            keep = week_label(d) == selected_week
        elif view_mode == "month":
            keep = year_key(d) == selected_month_year
        else:
            keep = True
        if keep:
            out.append(record)
    return out


# ── Aggregations ─────────────────────────────────────────


def category_totals(records: Iterable[Any]) -> dict[str, float]:
    """Sum of amounts per category, in first-seen order."""
    out: dict[str, float] = {}
    for record in records:
        if expense_date(record) is None:
            continue
        category = category_of(record)
        out[category] = out.get(category, 0.0) + coerce_amount(record_field(record, "amount"))
    return out


def bucket_key(record: Any, view_mode: str) -> Optional[str]:
    """
    Time-series key of a record for `view_mode`.

    week -> ISO day ('2025-10-21'), month -> short month ('Oct'),
    year -> 'YYYY'.
    """
    d = expense_date(record)
    if d is None:
        return None
    if view_mode == "week":
        return d.isoformat()
    if view_mode == "month":
        return month_abbr(d)
    if view_mode == "year":
        return year_key(d)
    return None


def bucket_totals(records: Iterable[Any], view_mode: str) -> dict[str, float]:
    """
    Sum of amounts per time bucket.

    Month view always carries all twelve months so the chart axis has no
    gaps; week and year views only contain buckets with records.
    """
    out: dict[str, float] = {}
    for record in records:
        key = bucket_key(record, view_mode)
        if key is None:
            continue
        out[key] = out.get(key, 0.0) + coerce_amount(record_field(record, "amount"))

    if view_mode == "month":
        for abbr in MONTH_ABBRS:
            out.setdefault(abbr, 0.0)
    return out


def total_amount(records: Iterable[Any]) -> float:
    """Sum of amounts over records with a usable date."""
    return sum(
        coerce_amount(record_field(r, "amount"))
        for r in records
        if expense_date(r) is not None
    )
