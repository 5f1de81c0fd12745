from datetime import date
from typing import Optional
from database.db_manager import DatabaseManager
from models.recurring_expense import RecurringExpense
from utils.date_helpers import parse_date, format_date

TABLE = "recurring_expenses"


class RecurringExpenseDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> RecurringExpense:
        return RecurringExpense(
            id=row["id"],
            title=row["title"],
            amount=row["amount"],
            category=row["category"],
            frequency=row["frequency"],
            next_due_date=parse_date(row["next_due_date"]),
            is_active=bool(row["is_active"]),
            last_paid_date=parse_date(row["last_paid_date"]),
            custom_interval_days=row["custom_interval_days"],
            end_date=parse_date(row["end_date"]),
            note=row["note"],
            created_at=row["created_at"],
        )

    def get_all(self) -> list[RecurringExpense]:
        conn = self._db.get_connection()
        rows = conn.execute(f"SELECT * FROM {TABLE} ORDER BY title, id").fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, expense_id: int) -> Optional[RecurringExpense]:
        conn = self._db.get_connection()
        row = conn.execute(
            f"SELECT * FROM {TABLE} WHERE id = ?", (expense_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def create(
        self,
        title: str,
        amount: float,
        category: str,
        frequency: str,
        next_due_date: date,
        custom_interval_days: int = 1,
        end_date: date | None = None,
        note: str = "",
    ) -> RecurringExpense:
        conn = self._db.get_connection()
        cursor = conn.execute(
            f"""INSERT INTO {TABLE}
               (title, amount, category, frequency, custom_interval_days,
                next_due_date, end_date, note)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                title, amount, category, frequency, custom_interval_days,
                format_date(next_due_date), format_date(end_date), note,
            ),
        )
        conn.commit()
        self._db.notify(TABLE)
        return self.get_by_id(cursor.lastrowid)

    def put(self, expense: RecurringExpense) -> RecurringExpense:
        """Replace every mutable field of an existing row."""
        conn = self._db.get_connection()
        conn.execute(
            f"""UPDATE {TABLE} SET
               title=?, amount=?, category=?, frequency=?, custom_interval_days=?,
               next_due_date=?, end_date=?, is_active=?, last_paid_date=?, note=?
               WHERE id=?""",
            (
                expense.title, expense.amount, expense.category, expense.frequency,
                expense.custom_interval_days, format_date(expense.next_due_date),
                format_date(expense.end_date), 1 if expense.is_active else 0,
                format_date(expense.last_paid_date), expense.note, expense.id,
            ),
        )
        conn.commit()
        self._db.notify(TABLE)
        return self.get_by_id(expense.id)

    def delete(self, expense_id: int):
        conn = self._db.get_connection()
        conn.execute(f"DELETE FROM {TABLE} WHERE id = ?", (expense_id,))
        conn.commit()
        self._db.notify(TABLE)
