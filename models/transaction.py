from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass
class Transaction:
    id: int
    type: str               # 'income' | 'expense'
    amount: float
    category: str           # expense category or income source
    description: str
    date: date
    recurring_expense_id: Optional[int] = None
    recurring_income_id: Optional[int] = None
    created_at: str = ""
