"""
models/expense.py
-----------------
Domain model for expense records and the raw date shapes they arrive in.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional, Union

# Fixed set offered on the write path. Stored data may still carry other strings.
CATEGORIES: tuple[str, ...] = (
    "Food",
    "Transport",
    "Entertainment",
    "Households",
    "Bills",
    "Shopping",
    "Electronics",
    "Others",
)
UNCATEGORIZED = "Uncategorized"

VIEW_MODES: tuple[str, ...] = ("week", "month", "year")


@dataclass(frozen=True)
class NativeTimestamp:
    """A store-native timestamp: anything with a zero-argument date conversion."""
    value: Any


@dataclass(frozen=True)
class IsoString:
    """A date carried as text, e.g. '2025-10-21' or '2025-10-21T08:30:00'."""
    value: str


@dataclass(frozen=True)
class Missing:
    """Absent field or a shape no normalizer understands."""


RawDate = Union[NativeTimestamp, IsoString, Missing]


def classify_raw_date(raw: Any) -> RawDate:
    """
    Tag a raw `date` field with the shape it arrived in.

    `datetime.date` values are passed through as native timestamps so the
    normalizer can treat them uniformly with driver timestamp objects.
    """
    if raw is None:
        return Missing()
    if isinstance(raw, (date, datetime)):
        return NativeTimestamp(raw)
    if isinstance(raw, str):
        return IsoString(raw)
    for attr in ("to_date", "toDate", "date"):
        if callable(getattr(raw, attr, None)):
            return NativeTimestamp(raw)
    return Missing()


def canonical_category(category: str) -> Optional[str]:
    """Return the canonical spelling of a known category, or None."""
    if not isinstance(category, str):
        return None
    wanted = category.strip().lower()
    for name in CATEGORIES:
        if name.lower() == wanted:
            return name
    return None


@dataclass
class Expense:
    """
    Represents a single expense record.

    Attributes:
        owner_id: Telegram user ID owning the record.
        amount: Non-negative amount. Read paths tolerate anything here.
        category: One of CATEGORIES on write; arbitrary text on read.
        date: Calendar date the expense occurred. Read paths accept any
            raw shape understood by `analytics.dates.normalize_date`.
        description: Optional free-text note.
        id: Store-assigned identifier (None for new records).
        created_at: Creation timestamp, for display ordering only.
    """
    owner_id: int
    amount: Any
    category: Optional[str]
    date: Any = field(default_factory=date.today)
    description: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def __str__(self) -> str:
        desc = f" - {self.description}" if self.description else ""
        return f"#{self.id} | {self.date} | {self.category or UNCATEGORIZED} | {self.amount}{desc}"
