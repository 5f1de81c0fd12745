from dataclasses import dataclass


@dataclass(frozen=True)
class GoalAllocation:
    goal_id: int
    percentage: float
    amount: float = 0.0     # cached income.amount * percentage / 100
