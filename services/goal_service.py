import logging
from dataclasses import replace
from datetime import date
from database.goal_dao import GoalDAO
from models.goal import Goal
from utils.constants import DEFAULT_GOAL_COLOR

logger = logging.getLogger(__name__)


class GoalService:
    """Savings goals that recurring income can be allocated to."""

    def __init__(self, goal_dao: GoalDAO):
        self._dao = goal_dao

    def get_all_goals(self) -> list[Goal]:
        return self._dao.get_all()

    def get_active_goals(self) -> list[Goal]:
        return [g for g in self._dao.get_all() if not g.is_completed]

    def get_completed_goals(self) -> list[Goal]:
        return [g for g in self._dao.get_all() if g.is_completed]

    def get_by_id(self, goal_id: int) -> Goal | None:
        return self._dao.get_by_id(goal_id)

    def create(
        self,
        name: str,
        target_amount: float,
        color_hex: str = DEFAULT_GOAL_COLOR,
        deadline: date | None = None,
    ) -> Goal:
        name = name.strip()
        self._validate(name, target_amount)
        goal = self._dao.create(name, target_amount, color_hex, deadline)
        logger.info("Created goal %s (%s)", goal.id, goal.name)
        return goal

    def update(self, goal: Goal) -> Goal:
        self._validate(goal.name.strip(), goal.target_amount)
        return self._dao.put(replace(goal, name=goal.name.strip()))

    def delete(self, goal_id: int):
        self._dao.delete(goal_id)
        logger.info("Deleted goal %s", goal_id)

    def add_contribution(self, goal_id: int, amount: float) -> Goal | None:
        """Add to a goal's saved amount, completing it once the target is reached."""
        goal = self._dao.get_by_id(goal_id)
        if goal is None:
            logger.warning("Contribution to missing goal %s ignored", goal_id)
            return None
        new_amount = goal.current_amount + amount
        completed = goal.is_completed or new_amount >= goal.target_amount
        if completed and not goal.is_completed:
            logger.info("Goal %s (%s) reached its target", goal.id, goal.name)
        return self._dao.put(replace(goal, current_amount=new_amount, is_completed=completed))

    def withdraw_contribution(self, goal_id: int, amount: float) -> Goal | None:
        goal = self._dao.get_by_id(goal_id)
        if goal is None:
            logger.warning("Withdrawal from missing goal %s ignored", goal_id)
            return None
        return self._dao.put(replace(goal, current_amount=max(0.0, goal.current_amount - amount)))

    def mark_completed(self, goal_id: int) -> Goal | None:
        return self._set_completed(goal_id, True)

    def reopen(self, goal_id: int) -> Goal | None:
        return self._set_completed(goal_id, False)

    def _set_completed(self, goal_id: int, completed: bool) -> Goal | None:
        goal = self._dao.get_by_id(goal_id)
        if goal is None:
            return None
        return self._dao.put(replace(goal, is_completed=completed))

    def _validate(self, name: str, target_amount: float):
        if not name:
            raise ValueError("Goal name cannot be empty.")
        if target_amount <= 0:
            raise ValueError("Target amount must be positive.")
