"""Tests for the expense write/read path."""

from datetime import date

import pytest

from services.expense_service import (
    ExpenseService,
    ExpenseValidationError,
    parse_amount,
    parse_category,
    parse_expense_date,
)
from services.live_feed import ExpenseFeed


@pytest.fixture
def feed():
    return ExpenseFeed()


@pytest.fixture
def service(fake_repo, feed):
    return ExpenseService(repo=fake_repo, feed=feed)


class TestValidation:

    def test_amount(self):
        assert parse_amount("12.346") == 12.35
        assert parse_amount(0) == 0
        for bad in ("abc", None, -1, float("nan"), True, 10 ** 400):
            with pytest.raises(ExpenseValidationError):
                parse_amount(bad)

    def test_category_is_canonicalized(self):
        assert parse_category("food") == "Food"
        assert parse_category(" ELECTRONICS ") == "Electronics"
        with pytest.raises(ExpenseValidationError):
            parse_category("Groceries")
        with pytest.raises(ExpenseValidationError):
            parse_category("Uncategorized")

    def test_date(self):
        assert parse_expense_date("2025-10-20") == date(2025, 10, 20)
        with pytest.raises(ExpenseValidationError):
            parse_expense_date("20/10/2025")

    def test_date_must_have_a_representable_week(self):
        assert parse_expense_date("9999-12-26") == date(9999, 12, 26)
        with pytest.raises(ExpenseValidationError):
            parse_expense_date("9999-12-31")

    def test_validation_error_is_value_error(self):
        assert issubclass(ExpenseValidationError, ValueError)


class TestWritePath:

    def test_add_expense(self, service, fake_repo):
        saved = service.add_expense(7, "12.5", "food", " lunch ", on="2025-10-20")
        assert saved.id == 1
        assert saved.category == "Food"
        assert saved.amount == 12.5
        assert saved.description == "lunch"
        assert saved.date == date(2025, 10, 20)
        assert fake_repo.rows[1] is saved

    def test_add_defaults_to_today(self, service):
        assert service.add_expense(7, 1, "Bills").date == date.today()

    def test_invalid_add_writes_nothing(self, service, fake_repo):
        with pytest.raises(ExpenseValidationError):
            service.add_expense(7, -5, "Food")
        assert fake_repo.rows == {}

    def test_date_past_the_last_full_week_is_rejected(self, service, fake_repo):
        with pytest.raises(ExpenseValidationError):
            service.add_expense(7, 5, "Food", on="9999-12-31")
        assert fake_repo.rows == {}

    def test_edit_expense(self, service, fake_repo):
        saved = service.add_expense(7, 10, "Food", on="2025-10-20")
        assert service.edit_expense(saved.id, 7, amount="15", category="bills")
        assert fake_repo.rows[saved.id].amount == 15
        assert fake_repo.rows[saved.id].category == "Bills"

    def test_edit_requires_a_field(self, service):
        saved = service.add_expense(7, 10, "Food")
        with pytest.raises(ExpenseValidationError):
            service.edit_expense(saved.id, 7)

    def test_edit_and_delete_are_owner_scoped(self, service):
        saved = service.add_expense(7, 10, "Food")
        assert service.edit_expense(saved.id, 8, amount=1) is False
        assert service.delete_expense(saved.id, 8) is False
        assert service.delete_expense(saved.id, 7) is True
        assert service.snapshot(7) == []

    def test_every_write_publishes_full_snapshot(self, service, feed):
        snapshots = []
        with feed.subscription(7, snapshots.append):
            first = service.add_expense(7, 10, "Food", on="2025-10-21")
            service.add_expense(7, 5, "Bills", on="2025-10-20")
            service.edit_expense(first.id, 7, description="dinner")
            service.delete_expense(first.id, 7)
        service.add_expense(7, 1, "Food")

        assert [len(s) for s in snapshots] == [1, 2, 2, 1]
        assert [e.amount for e in snapshots[1]] == [5, 10]


class TestReadPath:

    def test_list_newest_first_with_filters(self, service):
        service.add_expense(7, 1, "Food", on="2025-10-01")
        service.add_expense(7, 2, "Food", on="2025-11-01")
        service.add_expense(7, 3, "Food", on="2024-10-05")
        service.add_expense(8, 4, "Food", on="2025-10-02")

        assert [e.amount for e in service.list_expenses(7)] == [2, 1, 3]
        assert [e.amount for e in service.list_expenses(7, month="oct")] == [1, 3]
        assert [e.amount for e in service.list_expenses(7, year="2025")] == [2, 1]
        assert [e.amount for e in service.list_expenses(7, month="Oct", year="2024")] == [3]
