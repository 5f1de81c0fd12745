from datetime import date

import pytest

from models.goal_allocation import GoalAllocation

TODAY = date(2024, 3, 15)


@pytest.fixture
def goals(goal_service):
    return [
        goal_service.create("Emergency fund", 10000.0),
        goal_service.create("Holiday", 2000.0),
        goal_service.create("Laptop", 1500.0),
    ]


def _create(service, allocations=None, **overrides):
    fields = dict(
        amount=5000.0, source="salary", frequency="monthly",
        next_date=date(2024, 3, 25), description="Acme payroll",
    )
    fields.update(overrides)
    return service.create(goal_allocations=allocations, **fields)


def test_allocations_are_saved_with_derived_amounts(income_service, goals):
    income = _create(income_service, [
        GoalAllocation(goals[0].id, 20.0, amount=1.0),
        GoalAllocation(goals[1].id, 10.0),
    ])
    stored = income_service.get_by_id(income.id)
    assert [(a.goal_id, a.percentage, a.amount) for a in stored.goal_allocations] == [
        (goals[0].id, 20.0, 1000.0),
        (goals[1].id, 10.0, 500.0),
    ]
    assert stored.total_allocated_percentage == 30.0


def test_over_allocation_is_rejected_and_nothing_written(income_service, goals):
    allocations = [GoalAllocation(g.id, 40.0) for g in goals]
    with pytest.raises(ValueError, match="Total allocation cannot exceed 100%."):
        _create(income_service, allocations)
    assert income_service.get_all() == []


def test_rejected_update_keeps_previous_allocations(income_service, goals):
    income = _create(income_service, [GoalAllocation(goals[0].id, 50.0)])
    with pytest.raises(ValueError):
        income_service.update(
            income.id, amount=5000.0, source="salary", frequency="monthly",
            next_date=income.next_date,
            goal_allocations=[GoalAllocation(goals[0].id, 60.0), GoalAllocation(goals[1].id, 60.0)],
        )
    stored = income_service.get_by_id(income.id)
    assert [(a.goal_id, a.percentage) for a in stored.goal_allocations] == [(goals[0].id, 50.0)]


def test_update_replaces_allocation_list_and_rederives_amounts(income_service, goals):
    income = _create(income_service, [GoalAllocation(goals[0].id, 20.0)])
    updated = income_service.update(
        income.id, amount=8000.0, source="salary", frequency="monthly",
        next_date=income.next_date, description="Acme payroll",
        goal_allocations=[GoalAllocation(goals[2].id, 25.0)],
    )
    assert [(a.goal_id, a.amount) for a in updated.goal_allocations] == [(goals[2].id, 2000.0)]


def test_validation(income_service):
    with pytest.raises(ValueError, match="Amount"):
        _create(income_service, amount=0)
    with pytest.raises(ValueError, match="source"):
        _create(income_service, source="lottery")
    with pytest.raises(ValueError, match="frequency"):
        _create(income_service, frequency="hourly")


def test_blank_description_is_stored_as_none(income_service):
    income = _create(income_service, description="   ")
    assert income.description is None


def test_mark_received_credits_goals_and_advances(income_service, goal_service, tx_dao, goals):
    income = _create(
        income_service,
        [GoalAllocation(goals[0].id, 20.0), GoalAllocation(goals[1].id, 50.0)],
        next_date=date(2024, 3, 10),
    )
    tx = income_service.mark_received(income.id, TODAY)

    assert tx.type == "income"
    assert tx.amount == 5000.0
    assert tx.date == TODAY
    assert tx.recurring_income_id == income.id

    assert goal_service.get_by_id(goals[0].id).current_amount == 1000.0
    holiday = goal_service.get_by_id(goals[1].id)
    assert holiday.current_amount == 2500.0
    assert holiday.is_completed

    updated = income_service.get_by_id(income.id)
    assert updated.next_date == date(2024, 4, 15)
    assert updated.last_generated_date == TODAY
    assert len(tx_dao.get_for_recurring_income(income.id)) == 1


def test_skip_does_not_record_or_credit(income_service, goal_service, tx_dao, goals):
    income = _create(income_service, [GoalAllocation(goals[0].id, 20.0)], frequency="weekly")
    skipped = income_service.skip(income.id, TODAY)
    assert skipped.next_date == date(2024, 3, 22)
    assert tx_dao.get_all() == []
    assert goal_service.get_by_id(goals[0].id).current_amount == 0.0


def test_pause_resume_keeps_allocations(income_service, goals):
    income = _create(income_service, [GoalAllocation(goals[0].id, 15.0)])
    assert not income_service.pause(income.id).is_active
    assert income_service.resume(income.id) == income


def test_deleting_income_removes_its_allocations(income_service, db, goals):
    income = _create(income_service, [GoalAllocation(goals[0].id, 15.0)])
    income_service.delete(income.id)
    assert income_service.get_by_id(income.id) is None
    count = db.get_connection().execute("SELECT COUNT(*) FROM goal_allocations").fetchone()[0]
    assert count == 0


def test_due_upcoming_and_expected_monthly(income_service):
    _create(income_service, next_date=date(2024, 3, 1))
    _create(income_service, amount=100.0, frequency="weekly", next_date=date(2024, 3, 20))
    paused = _create(income_service, amount=999.0, next_date=date(2024, 3, 1))
    income_service.pause(paused.id)

    assert len(income_service.get_due(TODAY)) == 1
    assert income_service.get_upcoming_count(TODAY, 7) == 2
    assert income_service.expected_monthly_income() == pytest.approx(5000.0 + 433.0)


def test_generate_due_credits_goals_per_occurrence(income_service, goal_service, goals):
    income = _create(
        income_service, [GoalAllocation(goals[0].id, 10.0)],
        frequency="weekly", next_date=date(2024, 3, 1),
    )
    generated = income_service.generate_due(TODAY)
    assert [tx.date for tx in generated] == [date(2024, 3, 1), date(2024, 3, 8), date(2024, 3, 15)]
    assert goal_service.get_by_id(goals[0].id).current_amount == 1500.0
    assert income_service.get_by_id(income.id).next_date == date(2024, 3, 22)
    assert income_service.generate_due(TODAY) == []


def test_missing_id_is_a_no_op(income_service):
    assert income_service.mark_received(7, TODAY) is None
    assert income_service.skip(7, TODAY) is None
    assert income_service.toggle_active(7) is None
