from dataclasses import dataclass
from datetime import date
from models.recurring_expense import RecurringExpense
from models.recurring_income import RecurringIncome
from utils.constants import DUE_SOON_DAYS


@dataclass(frozen=True)
class UnifiedRecurringItem:
    """Read-only view over exactly one recurring expense or recurring income.

    ``source`` is the wrapped record; every shared field dispatches on its
    type. ``days_until_next`` is fixed when the view is built.
    """

    source: RecurringExpense | RecurringIncome
    days_until_next: int

    @property
    def kind(self) -> str:
        return "income" if isinstance(self.source, RecurringIncome) else "expense"

    @property
    def is_income(self) -> bool:
        return isinstance(self.source, RecurringIncome)

    @property
    def is_expense(self) -> bool:
        return isinstance(self.source, RecurringExpense)

    @property
    def key(self) -> tuple[str, int]:
        return (self.kind, self.source.id)

    @property
    def id(self) -> int:
        return self.source.id

    @property
    def title(self) -> str:
        """Income is titled by its source; the free-text description stays separate."""
        src = self.source
        if isinstance(src, RecurringIncome):
            return src.source_label
        return src.title

    @property
    def description(self) -> str | None:
        src = self.source
        if isinstance(src, RecurringIncome):
            return src.description or None
        return src.note or None

    @property
    def amount(self) -> float:
        return self.source.amount

    @property
    def frequency(self) -> str:
        return self.source.frequency

    @property
    def next_date(self) -> date:
        src = self.source
        if isinstance(src, RecurringIncome):
            return src.next_date
        return src.next_due_date

    @property
    def is_active(self) -> bool:
        return self.source.is_active

    @property
    def goal_allocation_count(self) -> int:
        src = self.source
        return len(src.goal_allocations) if isinstance(src, RecurringIncome) else 0

    @property
    def is_due(self) -> bool:
        return self.is_active and self.days_until_next <= 0

    @property
    def is_overdue(self) -> bool:
        return self.is_active and self.days_until_next < 0

    def is_due_soon(self, days: int = DUE_SOON_DAYS) -> bool:
        return self.is_active and self.days_until_next <= days

    @property
    def due_description(self) -> str:
        if not self.is_active:
            return "Paused"
        days = self.days_until_next
        if days == 0:
            return "Due today"
        if days == 1:
            return "Due tomorrow"
        if days > 1:
            return f"Due in {days} days"
        if days == -1:
            return "Overdue by 1 day"
        return f"Overdue by {-days} days"
