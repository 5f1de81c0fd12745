from datetime import date
from typing import Optional
from database.db_manager import DatabaseManager
from models.goal import Goal
from utils.constants import DEFAULT_GOAL_COLOR
from utils.date_helpers import parse_date, format_date

TABLE = "goals"


class GoalDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Goal:
        return Goal(
            id=row["id"],
            name=row["name"],
            target_amount=row["target_amount"],
            current_amount=row["current_amount"],
            color_hex=row["color_hex"],
            deadline=parse_date(row["deadline"]),
            is_completed=bool(row["is_completed"]),
            created_at=row["created_at"],
        )

    def get_all(self) -> list[Goal]:
        """Newest first."""
        conn = self._db.get_connection()
        rows = conn.execute(
            f"SELECT * FROM {TABLE} ORDER BY created_at DESC, id DESC"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, goal_id: int) -> Optional[Goal]:
        conn = self._db.get_connection()
        row = conn.execute(f"SELECT * FROM {TABLE} WHERE id = ?", (goal_id,)).fetchone()
        return self._row_to_model(row) if row else None

    def create(
        self,
        name: str,
        target_amount: float,
        color_hex: str = DEFAULT_GOAL_COLOR,
        deadline: date | None = None,
    ) -> Goal:
        conn = self._db.get_connection()
        cursor = conn.execute(
            f"INSERT INTO {TABLE}(name, target_amount, color_hex, deadline) VALUES (?, ?, ?, ?)",
            (name, target_amount, color_hex, format_date(deadline)),
        )
        conn.commit()
        self._db.notify(TABLE)
        return self.get_by_id(cursor.lastrowid)

    def put(self, goal: Goal) -> Goal:
        conn = self._db.get_connection()
        conn.execute(
            f"""UPDATE {TABLE} SET
               name=?, target_amount=?, current_amount=?, color_hex=?,
               deadline=?, is_completed=?
               WHERE id=?""",
            (
                goal.name, goal.target_amount, goal.current_amount, goal.color_hex,
                format_date(goal.deadline), 1 if goal.is_completed else 0, goal.id,
            ),
        )
        conn.commit()
        self._db.notify(TABLE)
        return self.get_by_id(goal.id)

    def delete(self, goal_id: int):
        conn = self._db.get_connection()
        conn.execute(f"DELETE FROM {TABLE} WHERE id = ?", (goal_id,))
        conn.commit()
        self._db.notify(TABLE)
