"""Record builders and in-memory fakes shared by the test modules."""

from datetime import date, datetime

from models.expense import Expense


def make_expense(amount, category="Food", on=date(2025, 10, 20), owner_id=1, **kwargs) -> Expense:
    return Expense(owner_id=owner_id, amount=amount, category=category, date=on, **kwargs)


class FakeTimestamp:
    """Mimics a store-native timestamp with a zero-argument conversion."""

    def __init__(self, value: datetime):
        self.value = value

    def to_date(self) -> datetime:
        return self.value


class FakeExpenseRepository:
    """In-memory stand-in for ExpenseRepository."""

    def __init__(self):
        self.rows: dict[int, Expense] = {}
        self._next_id = 1

    def create(self, expense: Expense) -> Expense:
        expense.id = self._next_id
        expense.created_at = datetime(2025, 10, 20, 12, 0, 0)
        self._next_id += 1
        self.rows[expense.id] = expense
        return expense

    def get_by_id(self, expense_id, owner_id):
        row = self.rows.get(expense_id)
        return row if row and row.owner_id == owner_id else None

    def list_for_owner(self, owner_id, descending=False):
        rows = [r for r in self.rows.values() if r.owner_id == owner_id]
        return sorted(rows, key=lambda r: (r.date, r.id), reverse=descending)

    def update(self, expense_id, owner_id, **fields):
        row = self.get_by_id(expense_id, owner_id)
        if row is None:
            return False
        for key, value in fields.items():
            setattr(row, key, value)
        return True

    def delete(self, expense_id, owner_id):
        if self.get_by_id(expense_id, owner_id) is None:
            return False
        del self.rows[expense_id]
        return True
