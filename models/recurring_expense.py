from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass
class RecurringExpense:
    id: int
    title: str
    amount: float
    category: str
    frequency: str              # 'daily' | 'weekly' | 'monthly' | 'yearly' | 'custom'
    next_due_date: date
    is_active: bool = True
    last_paid_date: Optional[date] = None
    custom_interval_days: int = 1
    end_date: Optional[date] = None
    note: str = ""
    created_at: str = ""

    def has_ended(self, ref: date) -> bool:
        return self.end_date is not None and self.end_date < ref

    def is_due(self, ref: date) -> bool:
        return self.is_active and not self.has_ended(ref) and self.next_due_date <= ref
