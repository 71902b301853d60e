"""
analytics/dates.py
------------------
Turns the raw `date` field of a record into a calendar date.

Month and weekday names come from fixed English tables so labels never
depend on the host locale.
"""

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, Optional

from models.expense import IsoString, Missing, NativeTimestamp, classify_raw_date

MONTH_ABBRS: tuple[str, ...] = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)
WEEKDAY_NAMES: tuple[str, ...] = (
    "Monday", "Tuesday", "Wednesday", "Thursday",
    "Friday", "Saturday", "Sunday",
)


def record_field(record: Any, name: str, default: Any = None) -> Any:
    """Read a field from either a mapping (raw store document) or an object."""
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)


def normalize_date(raw: Any) -> Optional[date]:
    """
    Resolve a raw date value to a calendar date.

    Args:
        raw: A `date`/`datetime`, an object exposing a zero-argument
            `to_date()`/`toDate()`/`date()` conversion, or an ISO-8601 string.

    Returns:
        The calendar date, or None when the value cannot be resolved.
        Never raises.
    """
    tagged = classify_raw_date(raw)

    if isinstance(tagged, Missing):
        return None
    if isinstance(tagged, IsoString):
        return _parse_iso(tagged.value)
    if isinstance(tagged, NativeTimestamp):
        return _convert_native(tagged.value)
    return None


def expense_date(record: Any) -> Optional[date]:
    """Calendar date of a record, or None when its date is unusable."""
    return normalize_date(record_field(record, "date"))


def _convert_native(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    for attr in ("to_date", "toDate", "date"):
        convert = getattr(value, attr, None)
        if not callable(convert):
            continue
        try:
            converted = convert()
        except Exception:
            return None
        if isinstance(converted, datetime):
            return converted.date()
        if isinstance(converted, date):
            return converted
        return None
    return None


def _parse_iso(text: str) -> Optional[date]:
    text = text.strip()
    if not text:
        return None
    # Python < 3.11 does not accept the trailing 'Z' in fromisoformat.
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def month_abbr(d: date) -> str:
    """Short English month name, e.g. 'Oct'."""
    return MONTH_ABBRS[d.month - 1]


def weekday_name(d: date) -> str:
    """Full English weekday name, e.g. 'Monday'."""
    return WEEKDAY_NAMES[d.weekday()]
