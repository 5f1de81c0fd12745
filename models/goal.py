from dataclasses import dataclass
from datetime import date
from typing import Optional
from utils.constants import DEFAULT_GOAL_COLOR


@dataclass
class Goal:
    id: int
    name: str
    target_amount: float
    current_amount: float = 0.0
    color_hex: str = DEFAULT_GOAL_COLOR
    deadline: Optional[date] = None
    is_completed: bool = False
    created_at: str = ""

    @property
    def progress(self) -> float:
        if self.target_amount <= 0:
            return 0.0
        return self.current_amount / self.target_amount

    @property
    def remaining_amount(self) -> float:
        return max(0.0, self.target_amount - self.current_amount)
