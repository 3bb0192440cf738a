"""Data Access Layer for profiles, expenses and monthly budgets.

Responsibilities
----------------
- Provide owner-scoped CRUD helpers; every query filters on ``owner_id`` so
  one account can never read or remove another account's records.
- Key budgets by ``"<owner_id>_<YYYY-MM>"`` which makes (owner, month)
  unique and lets set/add be single upserts.
- Return plain ``dict`` rows; routers convert them to response models and
  the aggregation service does the arithmetic.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
import sqlite3
import uuid
from typing import Any, Dict, Iterator, List, Mapping, Optional
from datetime import date

from pesotrack.db.schema import BASIC_UTC_NOW
from pesotrack.models import ExpenseIn
from pesotrack.models.constants import MAX_AMOUNT
from pesotrack.services.money import ensure_amount
from pesotrack.services.months import parse_month_key


EDITABLE_PROFILE_FIELDS = ("name", "email", "contact_number")


def budget_id(owner_id: str, month: str) -> str:
    return f"{owner_id}_{month}"


class Database:
    def __init__(self, db_path: Path):
        self.db_path = db_path

    # ------------------------------------------------------------------
    # Connection helpers
    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    # ------------------------------------------------------------------
    # Profiles
    def create_profile(
        self, owner_id: str, name: str, email: str, contact_number: str
    ) -> Dict[str, Any]:
        """Create (or overwrite the editable fields of) a profile; streak starts at 0."""
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                f"""
                INSERT INTO users (id, name, email, contact_number, streak, avatar_url)
                VALUES (?, ?, ?, ?, 0, NULL)
                ON CONFLICT(id) DO UPDATE SET
                    name = excluded.name,
                    email = excluded.email,
                    contact_number = excluded.contact_number,
                    updated_at = ({BASIC_UTC_NOW})
                """,
                (owner_id, name, email, contact_number),
            )
            cur.execute("SELECT * FROM users WHERE id = ?", (owner_id,))
            return dict(cur.fetchone())

    def get_profile(self, owner_id: str) -> Optional[Dict[str, Any]]:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT * FROM users WHERE id = ?", (owner_id,))
            row = cur.fetchone()
            return dict(row) if row else None

    def update_profile(self, owner_id: str, changes: Mapping[str, Any]) -> bool:
        """Apply a partial edit; returns False when the profile does not exist."""
        unknown = set(changes) - set(EDITABLE_PROFILE_FIELDS)
        if unknown:
            raise ValueError(f"Non-editable profile fields: {sorted(unknown)}")
        if not changes:
            return self.get_profile(owner_id) is not None
        assignments = ", ".join(f"{field} = ?" for field in changes)
        params: List[Any] = list(changes.values())
        params.append(owner_id)
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                f"UPDATE users SET {assignments}, updated_at = ({BASIC_UTC_NOW}) WHERE id = ?",
                params,
            )
            return cur.rowcount > 0

    def set_avatar(self, owner_id: str, data_url: Optional[str]) -> bool:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                f"UPDATE users SET avatar_url = ?, updated_at = ({BASIC_UTC_NOW}) WHERE id = ?",
                (data_url, owner_id),
            )
            return cur.rowcount > 0

    # ------------------------------------------------------------------
    # Expenses
    def insert_expense(self, owner_id: str, expense: ExpenseIn) -> str:
        amount = ensure_amount(expense.amount)
        expense_id = uuid.uuid4().hex
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO expenses (id, owner_id, description, amount, category, date)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    expense_id,
                    owner_id,
                    expense.description,
                    amount,
                    expense.category,
                    expense.date.isoformat(),
                ),
            )
        return expense_id

    def get_expense(self, owner_id: str, expense_id: str) -> Optional[Dict[str, Any]]:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                "SELECT * FROM expenses WHERE id = ? AND owner_id = ?",
                (expense_id, owner_id),
            )
            row = cur.fetchone()
            return dict(row) if row else None

    def list_expenses(
        self,
        owner_id: str,
        day: Optional[date] = None,
        month: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Owner's expenses, newest first by creation time."""
        clauses = ["owner_id = ?"]
        params: List[Any] = [owner_id]
        if day:
            clauses.append("date = ?")
            params.append(day.isoformat())
        if month:
            parse_month_key(month)
            clauses.append("substr(date, 1, 7) = ?")
            params.append(month)
        if start_date:
            clauses.append("date >= ?")
            params.append(start_date.isoformat())
        if end_date:
            clauses.append("date <= ?")
            params.append(end_date.isoformat())
        if category:
            clauses.append("category = ?")
            params.append(category)
        where = " WHERE " + " AND ".join(clauses)
        sql = f"SELECT * FROM expenses{where} ORDER BY created_at DESC, rowid DESC"
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(sql, params)
            return [dict(r) for r in cur.fetchall()]

    def delete_expense(self, owner_id: str, expense_id: str) -> None:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                "DELETE FROM expenses WHERE id = ? AND owner_id = ?",
                (expense_id, owner_id),
            )
            if cur.rowcount == 0:
                raise ValueError(f"Expense {expense_id} not found")

    # ------------------------------------------------------------------
    # Budgets (one per owner and month)
    def get_budget(self, owner_id: str, month: str) -> Optional[Dict[str, Any]]:
        parse_month_key(month)
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                "SELECT * FROM budgets WHERE id = ?", (budget_id(owner_id, month),)
            )
            row = cur.fetchone()
            return dict(row) if row else None

    def set_budget(self, owner_id: str, month: str, amount: float) -> Dict[str, Any]:
        """Replace the month's amount, creating the record when missing."""
        return self._upsert_budget(owner_id, month, amount, "excluded.amount")

    def add_to_budget(self, owner_id: str, month: str, amount: float) -> Dict[str, Any]:
        """Increment the month's amount, creating the record with ``amount`` when missing."""
        return self._upsert_budget(
            owner_id, month, amount, "budgets.amount + excluded.amount"
        )

    def _upsert_budget(
        self, owner_id: str, month: str, amount: float, amount_expr: str
    ) -> Dict[str, Any]:
        parse_month_key(month)
        value = ensure_amount(amount)
        bid = budget_id(owner_id, month)
        with self._connect() as conn:
            cur = conn.cursor()
            # The WHERE guard leaves the row untouched when the result would exceed the cap.
            cur.execute(
                f"""
                INSERT INTO budgets (id, owner_id, month, amount)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    amount = {amount_expr},
                    updated_at = ({BASIC_UTC_NOW})
                WHERE {amount_expr} <= ?
                """,
                (bid, owner_id, month, value, MAX_AMOUNT),
            )
            if cur.rowcount == 0:
                raise ValueError(f"budget for {month} cannot exceed {MAX_AMOUNT:,.0f}")
            cur.execute("SELECT * FROM budgets WHERE id = ?", (bid,))
            return dict(cur.fetchone())
