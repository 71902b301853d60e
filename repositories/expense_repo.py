"""
repositories/expense_repo.py
-----------------------------
Data access layer for expense records.
All SQL touching the `expenses` table lives here; every statement is
scoped to the owning user.
"""

from typing import Any, Optional

from db.connection import transaction
from models.expense import Expense
from utils.logger import get_logger

logger = get_logger(__name__)

_COLUMNS = "id, owner_id, amount, category, description, date, created_at"
_UPDATABLE = ("amount", "category", "description", "date")


class ExpenseRepository:
    """Repository for CRUD operations on the expenses table."""

    # ── CREATE ────────────────────────────────────────────

    def create(self, expense: Expense) -> Expense:
        """
        Insert a new expense record.

        Returns:
            The same Expense with `id` and `created_at` populated.
        """
        sql = """
            INSERT INTO expenses (owner_id, amount, category, description, date)
            VALUES (%s, %s, %s, %s, %s)
            RETURNING id, created_at;
        """
        try:
            with transaction() as conn, conn.cursor() as cur:
                cur.execute(sql, (
                    expense.owner_id, expense.amount, expense.category,
                    expense.description, expense.date,
                ))
                expense.id, expense.created_at = cur.fetchone()
        except Exception as e:
            logger.error(f"Failed to add expense for user {expense.owner_id}: {e}")
            raise
        logger.info(f"Added expense #{expense.id} for user {expense.owner_id}")
        return expense

    # ── READ ──────────────────────────────────────────────

    def get_by_id(self, expense_id: int, owner_id: int) -> Optional[Expense]:
        """Fetch one record by ID, or None if missing or owned by someone else."""
        sql = f"SELECT {_COLUMNS} FROM expenses WHERE id = %s AND owner_id = %s;"
        with transaction() as conn, conn.cursor() as cur:
            cur.execute(sql, (expense_id, owner_id))
            row = cur.fetchone()
        return self._row_to_expense(row) if row else None

    def list_for_owner(self, owner_id: int, descending: bool = False) -> list[Expense]:
        """
        Every record of a user, ordered by expense date (then id).

        Args:
            owner_id: Telegram user ID.
            descending: Newest first when True (the list view).
        """
        direction = "DESC" if descending else "ASC"
        sql = (
            f"SELECT {_COLUMNS} FROM expenses WHERE owner_id = %s "
            f"ORDER BY date {direction}, id {direction};"
        )
        with transaction() as conn, conn.cursor() as cur:
            cur.execute(sql, (owner_id,))
            return [self._row_to_expense(r) for r in cur.fetchall()]

    # ── UPDATE ────────────────────────────────────────────

    def update(self, expense_id: int, owner_id: int, **fields: Any) -> bool:
        """
        Partially update a record.

        Only amount, category, description and date can change.

        Returns:
            True if a row was updated, False otherwise.
        """
        unknown = set(fields) - set(_UPDATABLE)
        if unknown:
            raise ValueError(f"Cannot update field(s): {', '.join(sorted(unknown))}")
        if not fields:
            return False

        columns = [name for name in _UPDATABLE if name in fields]
        assignments = ", ".join(f"{name} = %s" for name in columns)
        sql = f"UPDATE expenses SET {assignments} WHERE id = %s AND owner_id = %s;"
        params = [fields[name] for name in columns] + [expense_id, owner_id]
        try:
            with transaction() as conn, conn.cursor() as cur:
                cur.execute(sql, params)
                updated = cur.rowcount > 0
        except Exception as e:
            logger.error(f"Failed to update expense #{expense_id}: {e}")
            raise
        if updated:
            logger.info(f"Updated expense #{expense_id} ({', '.join(columns)}) for user {owner_id}")
        return updated

    # ── DELETE ────────────────────────────────────────────

    def delete(self, expense_id: int, owner_id: int) -> bool:
        """
        Delete a record by ID, scoped to a user.

        Returns:
            True if a row was deleted, False otherwise.
        """
        sql = "DELETE FROM expenses WHERE id = %s AND owner_id = %s;"
        try:
            with transaction() as conn, conn.cursor() as cur:
                cur.execute(sql, (expense_id, owner_id))
                deleted = cur.rowcount > 0
        except Exception as e:
            logger.error(f"Failed to delete expense #{expense_id}: {e}")
            raise
        if deleted:
            logger.info(f"Deleted expense #{expense_id} for user {owner_id}")
        return deleted

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_expense(row: tuple) -> Expense:
        """Convert a database row tuple to an Expense domain object."""
        return Expense(
            id=row[0],
            owner_id=row[1],
            amount=float(row[2]),
            category=row[3],
            description=row[4],
            date=row[5],
            created_at=row[6],
        )
