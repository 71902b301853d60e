"""
analytics/axis.py
-----------------
Orders time-bucket keys for chart x-axes.
"""

from datetime import date
from typing import Mapping

from analytics.dates import MONTH_ABBRS, normalize_date


def _month_position(key: str) -> int:
    return MONTH_ABBRS.index(key) if key in MONTH_ABBRS else len(MONTH_ABBRS)


def _year_position(key: str) -> tuple[int, int]:
    try:
        return (0, int(key))
    except (TypeError, ValueError):
        return (1, 0)


def _day_position(key: str) -> tuple[int, date]:
    d = normalize_date(key)
    return (0, d) if d is not None else (1, date.min)


def sort_axis_keys(view_mode: str, totals: Mapping[str, float]) -> list[str]:
    """
    Keys of `totals` in display order for `view_mode`.

    month -> Jan..Dec, year -> ascending number, week -> ascending date.
    Keys that do not parse for the mode keep their relative order at the end.
    """
    keys = [str(k) for k in totals]
    if view_mode == "month":
        return sorted(keys, key=_month_position)
    if view_mode == "year":
        return sorted(keys, key=_year_position)
    return sorted(keys, key=_day_position)
