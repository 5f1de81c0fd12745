import pytest

from models.goal import Goal
from models.goal_allocation import GoalAllocation
from services import goal_allocation as ga


def _goals(*ids):
    return [Goal(id=i, name=f"Goal {i}", target_amount=1000.0) for i in ids]


def test_three_forty_percent_allocations_are_invalid():
    allocations = [GoalAllocation(1, 40.0), GoalAllocation(2, 40.0), GoalAllocation(3, 40.0)]
    total = ga.total_allocated_percentage(allocations)
    assert total == 120.0
    assert not ga.is_valid_allocation_set(total)
    with pytest.raises(ValueError, match="cannot exceed 100%"):
        ga.validate_allocations(allocations)


def test_exactly_one_hundred_percent_is_valid():
    allocations = [GoalAllocation(1, 60.0), GoalAllocation(2, 40.0)]
    assert ga.is_valid_allocation_set(ga.total_allocated_percentage(allocations))
    ga.validate_allocations(allocations)


def test_calculated_and_remaining_amount():
    allocations = [GoalAllocation(1, 20.0)]
    assert ga.calculated_amount(5000.0, 20.0) == 1000.0
    assert ga.remaining_amount(5000.0, allocations) == 4000.0


def test_disabled_allocations_contribute_nothing():
    allocations = [GoalAllocation(1, 30.0), GoalAllocation(2, 50.0)]
    enabled = {1: True, 2: False}
    assert ga.total_allocated_percentage(allocations, enabled) == 30.0
    assert ga.remaining_amount(1000.0, allocations, enabled) == 700.0


def test_remaining_amount_can_go_negative_while_editing():
    allocations = [GoalAllocation(1, 80.0), GoalAllocation(2, 40.0)]
    assert ga.remaining_amount(1000.0, allocations) == pytest.approx(-200.0)


def test_build_allocation_list_omits_disabled_and_zero():
    goals = _goals(1, 2, 3, 4)
    enabled = {1: True, 2: False, 3: True, 4: True}
    percentages = {1: "25", 2: "50", 3: "", 4: "10%"}
    result = ga.build_allocation_list(goals, enabled, percentages, 2000.0)
    assert [(a.goal_id, a.percentage, a.amount) for a in result] == [
        (1, 25.0, 500.0),
        (4, 10.0, 200.0),
    ]


def test_parse_percentage():
    assert ga.parse_percentage("12.5") == 12.5
    assert ga.parse_percentage(" 30% ") == 30.0
    assert ga.parse_percentage("") == 0.0
    assert ga.parse_percentage("abc") == 0.0
    assert ga.parse_percentage(None) == 0.0
    assert ga.parse_percentage(7) == 7.0


def test_recompute_amounts_ignores_cached_amount():
    stale = [GoalAllocation(1, 10.0, amount=999.0)]
    (fresh,) = ga.recompute_amounts(3000.0, stale)
    assert fresh.amount == 300.0
    assert fresh.percentage == 10.0


def test_summarize():
    summary = ga.summarize(5000.0, [GoalAllocation(1, 20.0), GoalAllocation(2, 30.0)])
    assert summary.total_percentage == 50.0
    assert summary.allocated_amount == 2500.0
    assert summary.remaining_percentage == 50.0
    assert summary.remaining_amount == 2500.0
    assert not summary.is_over_allocated

    over = ga.summarize(100.0, [GoalAllocation(1, 70.0), GoalAllocation(2, 50.0)])
    assert over.is_over_allocated
    assert over.remaining_percentage == 0.0


def test_validate_rejects_negative_and_duplicate_goals():
    with pytest.raises(ValueError, match="negative"):
        ga.validate_allocations([GoalAllocation(1, -5.0)])
    with pytest.raises(ValueError, match="only be allocated once"):
        ga.validate_allocations([GoalAllocation(1, 10.0), GoalAllocation(1, 20.0)])
