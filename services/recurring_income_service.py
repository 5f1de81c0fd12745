import logging
from dataclasses import replace
from datetime import date, timedelta
from database.recurring_income_dao import RecurringIncomeDAO
from database.transaction_dao import TransactionDAO
from models.goal_allocation import GoalAllocation
from models.recurring_income import RecurringIncome
from models.transaction import Transaction
from services.goal_allocation import recompute_amounts, validate_allocations
from services.goal_service import GoalService
from services.recurrence_clock import advance, monthly_factor, occurrences_through
from utils.constants import FREQUENCIES, INCOME_SOURCES, UPCOMING_REMINDER_DAYS

logger = logging.getLogger(__name__)


class RecurringIncomeService:
    def __init__(
        self,
        income_dao: RecurringIncomeDAO,
        tx_dao: TransactionDAO,
        goal_service: GoalService,
    ):
        self._dao = income_dao
        self._tx_dao = tx_dao
        self._goals = goal_service

    def get_all(self) -> list[RecurringIncome]:
        """All recurring incomes, soonest next date first."""
        return self._dao.get_all()

    def get_active(self) -> list[RecurringIncome]:
        return [i for i in self._dao.get_all() if i.is_active]

    def get_by_id(self, income_id: int) -> RecurringIncome | None:
        return self._dao.get_by_id(income_id)

    def get_due(self, ref: date) -> list[RecurringIncome]:
        return [i for i in self.get_active() if i.next_date <= ref]

    def get_upcoming_count(self, ref: date, days: int = UPCOMING_REMINDER_DAYS) -> int:
        horizon = ref + timedelta(days=days)
        return sum(1 for i in self.get_active() if i.next_date <= horizon)

    def expected_monthly_income(self) -> float:
        """Approximate monthly total of all active recurring incomes."""
        return sum(i.amount * monthly_factor(i.frequency) for i in self.get_active())

    def create(
        self,
        amount: float,
        source: str,
        frequency: str,
        next_date: date,
        description: str | None = None,
        goal_allocations: list[GoalAllocation] | None = None,
    ) -> RecurringIncome:
        allocations = self._prepare(amount, source, frequency, next_date, goal_allocations)
        income = self._dao.create(
            amount=amount, source=source, frequency=frequency, next_date=next_date,
            description=_clean(description), goal_allocations=allocations,
        )
        logger.info("Created recurring income %s (%s)", income.id, income.source_label)
        return income

    def update(
        self,
        income_id: int,
        amount: float,
        source: str,
        frequency: str,
        next_date: date,
        description: str | None = None,
        goal_allocations: list[GoalAllocation] | None = None,
        is_active: bool = True,
    ) -> RecurringIncome | None:
        """Replace every editable field; the allocation list is replaced as a whole."""
        allocations = self._prepare(amount, source, frequency, next_date, goal_allocations)
        existing = self._dao.get_by_id(income_id)
        if existing is None:
            logger.warning("Update of missing recurring income %s ignored", income_id)
            return None
        return self._dao.put(replace(
            existing, amount=amount, source=source, frequency=frequency,
            next_date=next_date, description=_clean(description),
            goal_allocations=allocations, is_active=is_active,
        ))

    def delete(self, income_id: int):
        self._dao.delete(income_id)
        logger.info("Deleted recurring income %s", income_id)

    # ── Transitions ──────────────────────────────────────────────────────────
    def pause(self, income_id: int) -> RecurringIncome | None:
        return self._set_active(income_id, False)

    def resume(self, income_id: int) -> RecurringIncome | None:
        return self._set_active(income_id, True)

    def toggle_active(self, income_id: int) -> RecurringIncome | None:
        income = self._dao.get_by_id(income_id)
        if income is None:
            logger.warning("Toggle of missing recurring income %s ignored", income_id)
            return None
        return self._set_active(income_id, not income.is_active)

    def mark_received(self, income_id: int, ref: date) -> Transaction | None:
        """Record the income dated ``ref``, fund its goals, then advance from ``ref``."""
        income = self._dao.get_by_id(income_id)
        if income is None:
            logger.warning("Mark received on missing recurring income %s ignored", income_id)
            return None
        tx = self._record(income, ref)
        self._dao.put(replace(
            income, next_date=advance(ref, income.frequency), last_generated_date=ref,
        ))
        logger.info("Received recurring income %s on %s", income.id, ref)
        return tx

    def skip(self, income_id: int, ref: date) -> RecurringIncome | None:
        income = self._dao.get_by_id(income_id)
        if income is None:
            logger.warning("Skip on missing recurring income %s ignored", income_id)
            return None
        logger.info("Skipped recurring income %s on %s", income.id, ref)
        return self._dao.put(replace(income, next_date=advance(ref, income.frequency)))

    def generate_due(self, ref: date) -> list[Transaction]:
        """Record every missed occurrence up to ``ref`` for active incomes."""
        generated: list[Transaction] = []
        for income in self.get_due(ref):
            if income.last_generated_date == ref:
                continue
            due_dates = occurrences_through(income.next_date, income.frequency, ref)
            for d in due_dates:
                generated.append(self._record(income, d))
            self._dao.put(replace(
                income,
                next_date=advance(due_dates[-1], income.frequency),
                last_generated_date=ref,
            ))
        if generated:
            logger.info("Generated %d recurring income transaction(s)", len(generated))
        return generated

    def _record(self, income: RecurringIncome, d: date) -> Transaction:
        tx = self._tx_dao.create(
            type_="income",
            amount=income.amount,
            date_=d,
            category=income.source,
            description=income.description or income.source_label,
            recurring_income_id=income.id,
        )
        for allocation in recompute_amounts(income.amount, income.goal_allocations):
            self._goals.add_contribution(allocation.goal_id, allocation.amount)
        return tx

    def _set_active(self, income_id: int, is_active: bool) -> RecurringIncome | None:
        income = self._dao.get_by_id(income_id)
        if income is None:
            logger.warning("Recurring income %s not found", income_id)
            return None
        logger.info("%s recurring income %s", "Resumed" if is_active else "Paused", income_id)
        return self._dao.put(replace(income, is_active=is_active))

    def _prepare(self, amount, source, frequency, next_date, goal_allocations) -> list[GoalAllocation]:
        if amount <= 0:
            raise ValueError("Amount must be positive.")
        if source not in INCOME_SOURCES:
            raise ValueError("Invalid income source.")
        if frequency not in FREQUENCIES:
            raise ValueError("Invalid frequency.")
        if next_date is None:
            raise ValueError("Invalid next date.")
        allocations = list(goal_allocations or [])
        validate_allocations(allocations)
        return recompute_amounts(amount, allocations)


def _clean(description: str | None) -> str | None:
    if description is None:
        return None
    return description.strip() or None
