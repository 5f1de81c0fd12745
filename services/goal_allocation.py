"""Goal allocation bookkeeping for recurring income.

An income amount can be pre-committed to savings goals as percentages. The
absolute amount of each allocation is always derived from the percentage
and the current income amount; a stored amount is only a cache.
"""
from dataclasses import dataclass
from typing import Iterable, Mapping
from models.goal import Goal
from models.goal_allocation import GoalAllocation
from utils.constants import MAX_ALLOCATION_PERCENTAGE


@dataclass(frozen=True)
class AllocationSummary:
    total_percentage: float
    allocated_amount: float
    remaining_percentage: float
    remaining_amount: float

    @property
    def is_over_allocated(self) -> bool:
        return not is_valid_allocation_set(self.total_percentage)


def calculated_amount(income_amount: float, percentage: float) -> float:
    return income_amount * percentage / 100


def parse_percentage(value) -> float:
    """Form input to a percentage; blank or unparseable input counts as 0."""
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip().rstrip("%"))
    except ValueError:
        return 0.0


def _enabled(allocations: Iterable[GoalAllocation],
             enabled: Mapping[int, bool] | None) -> list[GoalAllocation]:
    if enabled is None:
        return list(allocations)
    return [a for a in allocations if enabled.get(a.goal_id, False)]


def total_allocated_percentage(allocations: Iterable[GoalAllocation],
                               enabled: Mapping[int, bool] | None = None) -> float:
    """Sum of enabled percentages. ``enabled=None`` treats every allocation as enabled."""
    return sum(a.percentage for a in _enabled(allocations, enabled))


def is_valid_allocation_set(total_percentage: float) -> bool:
    return total_percentage <= MAX_ALLOCATION_PERCENTAGE


def remaining_amount(income_amount: float, allocations: Iterable[GoalAllocation],
                     enabled: Mapping[int, bool] | None = None) -> float:
    allocated = sum(
        calculated_amount(income_amount, a.percentage)
        for a in _enabled(allocations, enabled)
    )
    return income_amount - allocated


def build_allocation_list(
    goals: Iterable[Goal],
    enabled_map: Mapping[int, bool],
    percentage_by_goal: Mapping[int, object],
    income_amount: float,
) -> list[GoalAllocation]:
    """Allocations to persist: enabled goals with a positive percentage, in goal order."""
    result = []
    for goal in goals:
        if not enabled_map.get(goal.id, False):
            continue
        pct = parse_percentage(percentage_by_goal.get(goal.id))
        if pct > 0:
            result.append(GoalAllocation(
                goal_id=goal.id,
                percentage=pct,
                amount=calculated_amount(income_amount, pct),
            ))
    return result


def recompute_amounts(income_amount: float,
                      allocations: Iterable[GoalAllocation]) -> list[GoalAllocation]:
    return [
        GoalAllocation(a.goal_id, a.percentage, calculated_amount(income_amount, a.percentage))
        for a in allocations
    ]


def summarize(income_amount: float, allocations: Iterable[GoalAllocation],
              enabled: Mapping[int, bool] | None = None) -> AllocationSummary:
    active = _enabled(allocations, enabled)
    total = total_allocated_percentage(active)
    left = remaining_amount(income_amount, active)
    return AllocationSummary(
        total_percentage=total,
        allocated_amount=income_amount - left,
        remaining_percentage=min(max(MAX_ALLOCATION_PERCENTAGE - total, 0.0), MAX_ALLOCATION_PERCENTAGE),
        remaining_amount=left,
    )


def validate_allocations(allocations: Iterable[GoalAllocation]) -> None:
    """Raise ValueError if the list cannot be saved as one income's allocations."""
    allocations = list(allocations)
    seen = set()
    for a in allocations:
        if a.percentage < 0:
            raise ValueError("Allocation percentage cannot be negative.")
        if a.goal_id in seen:
            raise ValueError("Each goal can only be allocated once.")
        seen.add(a.goal_id)
    if not is_valid_allocation_set(total_allocated_percentage(allocations)):
        raise ValueError("Total allocation cannot exceed 100%.")
