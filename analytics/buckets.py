"""
analytics/buckets.py
--------------------
Week / month / year bucket keys and their display labels.

Weeks run Monday to Sunday. A week label looks like
``"Oct 20 – Oct 26, 2025"``: Monday and Sunday as short month + day,
joined by an en dash, followed by the year of the Monday.
"""

import re
from datetime import date, timedelta
from typing import Any, Iterable, Optional

from analytics.dates import MONTH_ABBRS, expense_date, month_abbr

WEEK_SEPARATOR = " – "

_WEEK_LABEL_RE = re.compile(
    r"^\s*(?P<mon>[A-Za-z]{3})\s+(?P<day>\d{1,2})\s*[–-]\s*"
    r"[A-Za-z]{3}\s+\d{1,2}\s*,\s*(?P<year>\d{4})\s*$"
)
_MONTH_LABEL_RE = re.compile(r"^\s*(?P<mon>[A-Za-z]{3})\s+(?P<year>\d{4})\s*$")


def week_start(d: date) -> date:
    """Monday of the week containing `d`."""
    # weekday(): Monday=0 ... Sunday=6, so Sunday shifts back six days.
    return d - timedelta(days=d.weekday())


def week_end(d: date) -> Optional[date]:
    """Sunday of the week containing `d`, or None past the last representable day."""
    try:
        return week_start(d) + timedelta(days=6)
    except OverflowError:
        return None


def week_label(d: date) -> Optional[str]:
    """
    Display label (and bucket key) of the week containing `d`.

    None for the final days of year 9999, whose week ends beyond `date.max`.
    """
    start, end = week_start(d), week_end(d)
    if end is None:
        return None
    return (
        f"{month_abbr(start)} {start.day}{WEEK_SEPARATOR}"
        f"{month_abbr(end)} {end.day}, {start.year:04d}"
    )


def month_label(d: date) -> str:
    """Month bucket key and label, e.g. 'Oct 2025'."""
    return f"{month_abbr(d)} {d.year:04d}"


def year_key(d: date) -> str:
    """Four-digit year bucket key."""
    return f"{d.year:04d}"


def period_key(d: date, view_mode: str) -> Optional[str]:
    """The exact-period key a date falls into for `view_mode`."""
    if view_mode == "week":
        return week_label(d)
    if view_mode == "month":
        return month_label(d)
    if view_mode == "year":
        return year_key(d)
    return None


def parse_week_label(label: str) -> Optional[date]:
    """
    Monday encoded in a week label produced by `week_label`.

    Case, spacing and an ASCII hyphen in place of the en dash are tolerated;
    the Sunday part is not checked. Returns None for anything that is not
    a well-formed label.
    """
    if not label:
        return None
    match = _WEEK_LABEL_RE.match(label)
    if not match:
        return None
    month = _month_number(match.group("mon"))
    if month is None:
        return None
    try:
        start = date(int(match.group("year")), month, int(match.group("day")))
    except ValueError:
        return None
    if start.weekday() != 0 or week_end(start) is None:
        return None
    return start


def parse_month_label(label: str) -> Optional[date]:
    """First day of the month named by a 'Mon YYYY' label, or None."""
    if not label:
        return None
    match = _MONTH_LABEL_RE.match(label)
    if not match:
        return None
    month = _month_number(match.group("mon"))
    if month is None:
        return None
    try:
        return date(int(match.group("year")), month, 1)
    except ValueError:
        return None


def previous_week_label(label: str) -> Optional[str]:
    """Label of the week immediately before `label`."""
    start = parse_week_label(label)
    if start is None:
        return None
    try:
        return week_label(start - timedelta(days=7))
    except OverflowError:
        return None


def is_current_week(label: str, today: Optional[date] = None) -> bool:
    return label == week_label(today or date.today())


def _month_number(abbr: str) -> Optional[int]:
    wanted = abbr.capitalize()
    if wanted in MONTH_ABBRS:
        return MONTH_ABBRS.index(wanted) + 1
    return None


# ── Option builders ──────────────────────────────────────


def _dated(records: Iterable[Any]) -> list[date]:
    return [d for d in (expense_date(r) for r in records) if d is not None]


def _labelled(dates: Iterable[date]) -> list[date]:
    # Weeks running past date.max have no label and no bucket.
    return [d for d in dates if week_end(d) is not None]


def available_years(records: Iterable[Any]) -> list[str]:
    """Distinct years present in `records`, ascending."""
    return sorted({year_key(d) for d in _dated(records)}, key=int)


def weeks_by_year(records: Iterable[Any]) -> dict[str, list[str]]:
    """
    Group week labels by the calendar year of the records that produced them.

    Years are ascending; labels inside each year are chronological.
    A week that straddles New Year appears under both years.
    """
    starts: dict[str, set[date]] = {}
    for d in _labelled(_dated(records)):
        starts.setdefault(year_key(d), set()).add(week_start(d))
    return {
        year: [week_label(s) for s in sorted(starts[year])]
        for year in sorted(starts, key=int)
    }


def available_weeks(records: Iterable[Any]) -> list[str]:
    """All week labels present in `records`, chronological, no duplicates."""
    return [week_label(s) for s in sorted({week_start(d) for d in _labelled(_dated(records))})]


def available_months_in_year(records: Iterable[Any], year: str) -> list[str]:
    """Month labels present in `records` for `year`, in calendar order."""
    if not year:
        return []
    months = {d.month for d in _dated(records) if year_key(d) == year}
    return [f"{MONTH_ABBRS[m - 1]} {year}" for m in sorted(months)]
