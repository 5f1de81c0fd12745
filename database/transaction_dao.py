from datetime import date
from typing import Optional
from database.db_manager import DatabaseManager
from models.transaction import Transaction
from utils.date_helpers import parse_date, format_date

TABLE = "transactions"


class TransactionDAO:
    """Ledger entries recorded when a recurring item is paid or received."""

    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Transaction:
        return Transaction(
            id=row["id"],
            type=row["type"],
            amount=row["amount"],
            category=row["category"],
            description=row["description"],
            date=parse_date(row["date"]),
            recurring_expense_id=row["recurring_expense_id"],
            recurring_income_id=row["recurring_income_id"],
            created_at=row["created_at"],
        )

    def get_all(self) -> list[Transaction]:
        conn = self._db.get_connection()
        rows = conn.execute(f"SELECT * FROM {TABLE} ORDER BY date DESC, id DESC").fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, tx_id: int) -> Optional[Transaction]:
        conn = self._db.get_connection()
        row = conn.execute(f"SELECT * FROM {TABLE} WHERE id = ?", (tx_id,)).fetchone()
        return self._row_to_model(row) if row else None

    def get_for_recurring_expense(self, expense_id: int) -> list[Transaction]:
        conn = self._db.get_connection()
        rows = conn.execute(
            f"SELECT * FROM {TABLE} WHERE recurring_expense_id = ? ORDER BY date, id",
            (expense_id,),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_for_recurring_income(self, income_id: int) -> list[Transaction]:
        conn = self._db.get_connection()
        rows = conn.execute(
            f"SELECT * FROM {TABLE} WHERE recurring_income_id = ? ORDER BY date, id",
            (income_id,),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def create(
        self,
        type_: str,
        amount: float,
        date_: date,
        category: str = "",
        description: str = "",
        recurring_expense_id: int | None = None,
        recurring_income_id: int | None = None,
    ) -> Transaction:
        conn = self._db.get_connection()
        cursor = conn.execute(
            f"""INSERT INTO {TABLE}
               (type, amount, category, description, date,
                recurring_expense_id, recurring_income_id)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (
                type_, amount, category, description, format_date(date_),
                recurring_expense_id, recurring_income_id,
            ),
        )
        conn.commit()
        self._db.notify(TABLE)
        return self.get_by_id(cursor.lastrowid)
