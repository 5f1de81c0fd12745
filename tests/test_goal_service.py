from datetime import date
from dataclasses import replace

import pytest


def test_create_validates(goal_service):
    with pytest.raises(ValueError, match="name"):
        goal_service.create("  ", 100.0)
    with pytest.raises(ValueError, match="Target"):
        goal_service.create("Car", 0)
    assert goal_service.get_all_goals() == []


def test_create_and_update(goal_service):
    goal = goal_service.create(" Car ", 5000.0, deadline=date(2025, 1, 1))
    assert goal.name == "Car"
    assert goal.deadline == date(2025, 1, 1)
    assert goal.progress == 0.0

    updated = goal_service.update(replace(goal, name="New car", target_amount=6000.0))
    assert updated.name == "New car"
    assert updated.target_amount == 6000.0


def test_contributions_complete_and_withdrawals_floor_at_zero(goal_service):
    goal = goal_service.create("Laptop", 1000.0)
    half = goal_service.add_contribution(goal.id, 500.0)
    assert half.progress == 0.5
    assert not half.is_completed

    done = goal_service.add_contribution(goal.id, 600.0)
    assert done.is_completed
    assert done.remaining_amount == 0.0

    drained = goal_service.withdraw_contribution(goal.id, 5000.0)
    assert drained.current_amount == 0.0


def test_active_and_completed_lists(goal_service):
    first = goal_service.create("First", 100.0)
    second = goal_service.create("Second", 100.0)
    goal_service.mark_completed(first.id)

    assert [g.id for g in goal_service.get_active_goals()] == [second.id]
    assert [g.id for g in goal_service.get_completed_goals()] == [first.id]

    goal_service.reopen(first.id)
    assert {g.id for g in goal_service.get_active_goals()} == {first.id, second.id}


def test_missing_goal_is_ignored(goal_service):
    assert goal_service.add_contribution(99, 10.0) is None
    assert goal_service.withdraw_contribution(99, 10.0) is None
    assert goal_service.mark_completed(99) is None
