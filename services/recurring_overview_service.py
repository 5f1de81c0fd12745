from dataclasses import dataclass
from datetime import date
from models.unified_item import UnifiedRecurringItem
from services import unified_view
from services.recurring_expense_service import RecurringExpenseService
from services.recurring_income_service import RecurringIncomeService
from utils.constants import UPCOMING_REMINDER_DAYS


@dataclass
class RecurringSections:
    upcoming: list[UnifiedRecurringItem]
    active: list[UnifiedRecurringItem]
    paused: list[UnifiedRecurringItem]

    @property
    def is_empty(self) -> bool:
        return not (self.upcoming or self.active or self.paused)


class RecurringOverviewService:
    """Combined recurring list, rebuilt from the stores on every call."""

    def __init__(
        self,
        expense_service: RecurringExpenseService,
        income_service: RecurringIncomeService,
    ):
        self._expenses = expense_service
        self._incomes = income_service

    def get_items(self, ref: date) -> list[UnifiedRecurringItem]:
        # Expenses past their end date no longer recur.
        expenses = [e for e in self._expenses.get_all() if not e.has_ended(ref)]
        return unified_view.build(expenses, self._incomes.get_all(), ref)

    def get_upcoming(self, ref: date, days: int = UPCOMING_REMINDER_DAYS) -> list[UnifiedRecurringItem]:
        return unified_view.upcoming(self.get_items(ref), ref, days)

    def get_sections(
        self, ref: date, type_filter: str = "all", days: int = UPCOMING_REMINDER_DAYS,
    ) -> RecurringSections:
        items = unified_view.apply_type_filter(self.get_items(ref), type_filter)
        active, paused = unified_view.partition_active_paused(items)
        return RecurringSections(
            upcoming=unified_view.upcoming(items, ref, days),
            active=active,
            paused=paused,
        )

    def this_week_count(self, ref: date) -> int:
        return len(self.get_upcoming(ref, 7))
