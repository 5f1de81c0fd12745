from dataclasses import dataclass, field
from datetime import date
from typing import Optional
from models.goal_allocation import GoalAllocation
from utils.constants import INCOME_SOURCE_LABELS


@dataclass
class RecurringIncome:
    id: int
    amount: float
    source: str                 # see INCOME_SOURCES
    frequency: str
    next_date: date
    description: Optional[str] = None
    is_active: bool = True
    last_generated_date: Optional[date] = None
    goal_allocations: list[GoalAllocation] = field(default_factory=list)
    created_at: str = ""

    @property
    def source_label(self) -> str:
        return INCOME_SOURCE_LABELS.get(self.source, self.source.title())

    @property
    def total_allocated_percentage(self) -> float:
        return sum(a.percentage for a in self.goal_allocations)

    def is_due(self, ref: date) -> bool:
        return self.is_active and self.next_date <= ref
