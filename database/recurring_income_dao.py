from datetime import date
from typing import Optional
from database.db_manager import DatabaseManager
from models.goal_allocation import GoalAllocation
from models.recurring_income import RecurringIncome
from services.goal_allocation import recompute_amounts
from utils.date_helpers import parse_date, format_date

TABLE = "recurring_incomes"


class RecurringIncomeDAO:
    """Recurring incomes with their embedded goal allocation lists.

    Allocations are always written as a whole list inside the same
    transaction as the income row.
    """

    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row, allocations: list[GoalAllocation]) -> RecurringIncome:
        return RecurringIncome(
            id=row["id"],
            amount=row["amount"],
            source=row["source"],
            description=row["description"],
            frequency=row["frequency"],
            next_date=parse_date(row["next_date"]),
            is_active=bool(row["is_active"]),
            last_generated_date=parse_date(row["last_generated_date"]),
            # stored amounts are a cache; derive them from the current income amount
            goal_allocations=recompute_amounts(row["amount"], allocations),
            created_at=row["created_at"],
        )

    def _allocations_by_income(self) -> dict[int, list[GoalAllocation]]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM goal_allocations ORDER BY income_id, position"
        ).fetchall()
        result: dict[int, list[GoalAllocation]] = {}
        for r in rows:
            result.setdefault(r["income_id"], []).append(
                GoalAllocation(goal_id=r["goal_id"], percentage=r["percentage"], amount=r["amount"])
            )
        return result

    def get_all(self) -> list[RecurringIncome]:
        conn = self._db.get_connection()
        rows = conn.execute(f"SELECT * FROM {TABLE} ORDER BY next_date, id").fetchall()
        allocations = self._allocations_by_income()
        return [self._row_to_model(r, allocations.get(r["id"], [])) for r in rows]

    def get_by_id(self, income_id: int) -> Optional[RecurringIncome]:
        conn = self._db.get_connection()
        row = conn.execute(
            f"SELECT * FROM {TABLE} WHERE id = ?", (income_id,)
        ).fetchone()
        if not row:
            return None
        alloc_rows = conn.execute(
            "SELECT * FROM goal_allocations WHERE income_id = ? ORDER BY position",
            (income_id,),
        ).fetchall()
        allocations = [
            GoalAllocation(goal_id=r["goal_id"], percentage=r["percentage"], amount=r["amount"])
            for r in alloc_rows
        ]
        return self._row_to_model(row, allocations)

    def _replace_allocations(self, conn, income_id: int, allocations: list[GoalAllocation]):
        conn.execute("DELETE FROM goal_allocations WHERE income_id = ?", (income_id,))
        conn.executemany(
            """INSERT INTO goal_allocations(income_id, goal_id, position, percentage, amount)
               VALUES (?, ?, ?, ?, ?)""",
            [
                (income_id, a.goal_id, pos, a.percentage, a.amount)
                for pos, a in enumerate(allocations)
            ],
        )

    def create(
        self,
        amount: float,
        source: str,
        frequency: str,
        next_date: date,
        description: str | None = None,
        goal_allocations: list[GoalAllocation] | None = None,
    ) -> RecurringIncome:
        conn = self._db.get_connection()
        with conn:
            cursor = conn.execute(
                f"""INSERT INTO {TABLE}(amount, source, description, frequency, next_date)
                   VALUES (?, ?, ?, ?, ?)""",
                (amount, source, description, frequency, format_date(next_date)),
            )
            income_id = cursor.lastrowid
            self._replace_allocations(conn, income_id, goal_allocations or [])
        self._db.notify(TABLE)
        return self.get_by_id(income_id)

    def put(self, income: RecurringIncome) -> RecurringIncome:
        conn = self._db.get_connection()
        with conn:
            conn.execute(
                f"""UPDATE {TABLE} SET
                   amount=?, source=?, description=?, frequency=?, next_date=?,
                   is_active=?, last_generated_date=?
                   WHERE id=?""",
                (
                    income.amount, income.source, income.description, income.frequency,
                    format_date(income.next_date), 1 if income.is_active else 0,
                    format_date(income.last_generated_date), income.id,
                ),
            )
            self._replace_allocations(conn, income.id, income.goal_allocations)
        self._db.notify(TABLE)
        return self.get_by_id(income.id)

    def delete(self, income_id: int):
        conn = self._db.get_connection()
        with conn:
            conn.execute(f"DELETE FROM {TABLE} WHERE id = ?", (income_id,))
        self._db.notify(TABLE)
