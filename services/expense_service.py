"""
services/expense_service.py
----------------------------
Business logic for recording and listing expenses.
Validates input, persists via the ExpenseRepository and pushes a fresh
snapshot to the live feed after every successful write.
"""

import math
from datetime import date
from typing import Any, Optional

from analytics.buckets import week_end
from analytics.dates import month_abbr, normalize_date
from models.expense import CATEGORIES, Expense, canonical_category
from repositories.expense_repo import ExpenseRepository
from services.live_feed import ExpenseFeed
from utils.logger import get_logger

logger = get_logger(__name__)


class ExpenseValidationError(ValueError):
    """Raised when a write request carries an unusable field."""


def parse_amount(value: Any) -> float:
    """Finite, non-negative amount from user input."""
    try:
        amount = float(value)
    except (TypeError, ValueError, OverflowError):
        raise ExpenseValidationError(f"Amount must be a number, got {value!r}.")
    if isinstance(value, bool) or not math.isfinite(amount):
        raise ExpenseValidationError(f"Amount must be a number, got {value!r}.")
    if amount < 0:
        raise ExpenseValidationError("Amount cannot be negative.")
    return round(amount, 2)


def parse_category(value: Any) -> str:
    """Canonical category name; only the fixed list is accepted on write."""
    category = canonical_category(value)
    if category is None:
        raise ExpenseValidationError(
            f"Unknown category {value!r}. Choose one of: {', '.join(CATEGORIES)}."
        )
    return category


def parse_expense_date(value: Any) -> date:
    """Calendar date from a `date` or an ISO string."""
    resolved = normalize_date(value)
    if resolved is None:
        raise ExpenseValidationError(f"Date must look like YYYY-MM-DD, got {value!r}.")
    if week_end(resolved) is None:
        raise ExpenseValidationError(f"Date {resolved.isoformat()} is too far in the future.")
    return resolved


class ExpenseService:
    """
    Handles all business logic related to expense records.

    Workflow:
        1. Receive parsed arguments from the handler.
        2. Validate amount, category and date.
        3. Persist via the repository.
        4. Publish the owner's full snapshot to the live feed.
    """

    def __init__(self, repo: Optional[ExpenseRepository] = None,
                 feed: Optional[ExpenseFeed] = None):
        self.repo = repo or ExpenseRepository()
        self.feed = feed or ExpenseFeed()

    # ── Write path ────────────────────────────────────────

    def add_expense(self, owner_id: int, amount: Any, category: Any,
                    description: Optional[str] = None,
                    on: Any = None) -> Expense:
        """
        Record a new expense.

        Args:
            owner_id: Telegram user ID.
            amount: Non-negative number (or numeric text).
            category: One of CATEGORIES, any letter case.
            description: Optional note.
            on: Expense date; today when omitted.

        Raises:
            ExpenseValidationError: For an unusable amount, category or date.
        """
        expense = Expense(
            owner_id=owner_id,
            amount=parse_amount(amount),
            category=parse_category(category),
            description=(description or "").strip() or None,
            date=parse_expense_date(on) if on is not None else date.today(),
        )
        saved = self.repo.create(expense)
        self._publish(owner_id)
        return saved

    def edit_expense(self, expense_id: int, owner_id: int,
                     amount: Any = None, category: Any = None,
                     description: Optional[str] = None) -> bool:
        """
        Change amount, category and/or description of an existing record.

        Returns:
            True when a record was updated, False when it does not exist
            or belongs to someone else.

        Raises:
            ExpenseValidationError: When no field is given or a field is invalid.
        """
        changes: dict[str, Any] = {}
        if amount is not None:
            changes["amount"] = parse_amount(amount)
        if category is not None:
            changes["category"] = parse_category(category)
        if description is not None:
            changes["description"] = description.strip() or None

        if not changes:
            raise ExpenseValidationError("Nothing to change. Give an amount, category or description.")

        updated = self.repo.update(expense_id, owner_id, **changes)
        if updated:
            self._publish(owner_id)
        else:
            logger.warning(f"Edit of missing expense #{expense_id} by user {owner_id}")
        return updated

    def delete_expense(self, expense_id: int, owner_id: int) -> bool:
        """Delete a record. Returns False when it does not exist or is not the user's."""
        deleted = self.repo.delete(expense_id, owner_id)
        if deleted:
            self._publish(owner_id)
        return deleted

    # ── Read path ─────────────────────────────────────────

    def snapshot(self, owner_id: int) -> list[Expense]:
        """Every record of the user, oldest first."""
        return self.repo.list_for_owner(owner_id)

    def list_expenses(self, owner_id: int, month: Optional[str] = None,
                      year: Optional[str] = None) -> list[Expense]:
        """
        Records for the expense list, newest first.

        Args:
            month: Optional short month name filter ('Oct').
            year: Optional four-digit year filter.
        """
        records = self.repo.list_for_owner(owner_id, descending=True)
        if not month and not year:
            return records

        wanted_month = month.capitalize() if month else None
        out = []
        for record in records:
            d = normalize_date(record.date)
            if d is None:
                continue
            if wanted_month and month_abbr(d) != wanted_month:
                continue
            if year and str(d.year) != str(year):
                continue
            out.append(record)
        return out

    def _publish(self, owner_id: int) -> None:
        if self.feed.subscriber_count(owner_id) == 0:
            return
        self.feed.publish(owner_id, self.snapshot(owner_id))
