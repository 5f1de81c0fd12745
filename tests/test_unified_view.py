from datetime import date, timedelta

import pytest

from models.goal_allocation import GoalAllocation
from models.recurring_expense import RecurringExpense
from models.recurring_income import RecurringIncome
from services import unified_view

TODAY = date(2024, 3, 15)


def _expense(id_, title, offset, active=True):
    return RecurringExpense(
        id=id_, title=title, amount=100.0, category="bills",
        frequency="monthly", next_due_date=TODAY + timedelta(days=offset),
        is_active=active,
    )


def _income(id_, offset, description=None, active=True, source="salary"):
    return RecurringIncome(
        id=id_, amount=5000.0, source=source, frequency="monthly",
        next_date=TODAY + timedelta(days=offset), description=description,
        is_active=active,
    )


def test_build_keeps_expenses_before_incomes_unsorted():
    items = unified_view.build(
        [_expense(1, "Rent", 10), _expense(2, "Gym", 2)], [_income(1, 0)], TODAY,
    )
    assert [item.key for item in items] == [("expense", 1), ("expense", 2), ("income", 1)]
    assert [item.days_until_next for item in items] == [10, 2, 0]


def test_build_of_nothing_is_empty():
    assert unified_view.build([], [], TODAY) == []


def test_upcoming_includes_overdue_and_excludes_paused_and_far():
    items = unified_view.build(
        [
            _expense(1, "Overdue", -5),
            _expense(2, "Paused", 1, active=False),
            _expense(3, "Far", 30),
            _expense(4, "Edge", 7),
        ],
        [],
        TODAY,
    )
    result = unified_view.upcoming(items, TODAY, 7)
    assert [item.title for item in result] == ["Overdue", "Edge"]
    assert result[0].days_until_next == -5
    assert result[0].is_overdue
    assert result[0].due_description == "Overdue by 5 days"


def test_upcoming_ties_keep_build_order():
    items = unified_view.build([_expense(1, "Phone", 3)], [_income(9, 3, "Salary")], TODAY)
    result = unified_view.upcoming(items, TODAY)
    assert [item.kind for item in result] == ["expense", "income"]


def test_upcoming_recomputes_days_against_given_date():
    items = unified_view.build([_expense(1, "Rent", 10)], [], TODAY)
    later = TODAY + timedelta(days=5)
    result = unified_view.upcoming(items, later, 7)
    assert len(result) == 1
    assert result[0].days_until_next == 5


def test_partition_sorts_each_side_by_title():
    items = unified_view.build(
        [_expense(1, "b", 1), _expense(2, "A", 1), _expense(3, "c", 1, active=False)],
        [_income(1, 1, "a", active=False)],
        TODAY,
    )
    active, paused = unified_view.partition_active_paused(items)
    # code-point ordering: uppercase before lowercase
    assert [item.title for item in active] == ["A", "b"]
    assert [item.title for item in paused] == ["Salary", "c"]


def test_type_filter():
    items = unified_view.build([_expense(1, "Rent", 1)], [_income(1, 1)], TODAY)
    assert len(unified_view.apply_type_filter(items, "all")) == 2
    assert [i.kind for i in unified_view.apply_type_filter(items, "income")] == ["income"]
    assert [i.kind for i in unified_view.apply_type_filter(items, "expenses")] == ["expense"]
    with pytest.raises(ValueError):
        unified_view.apply_type_filter(items, "transfers")


def test_income_title_is_source_label_and_description_is_separate():
    described, bare, blank = unified_view.build(
        [], [_income(1, 0, "Acme payroll"), _income(2, 0, source="freelance"), _income(3, 0, "")],
        TODAY,
    )
    assert described.title == "Salary"
    assert described.description == "Acme payroll"
    assert bare.title == "Freelance Income"
    assert bare.description is None
    assert blank.title == "Salary"
    assert blank.description is None


def test_partition_sorts_income_by_source_label_not_description():
    items = unified_view.build(
        [_expense(1, "Rent", 1, active=False)],
        [_income(1, 1, "aaa first alphabetically", active=False, source="salary")],
        TODAY,
    )
    _, paused = unified_view.partition_active_paused(items)
    assert [item.title for item in paused] == ["Rent", "Salary"]


def test_item_surface_dispatches_on_source():
    income = _income(4, 1, "Salary")
    income.goal_allocations = [GoalAllocation(1, 10.0), GoalAllocation(2, 5.0)]
    expense_item, income_item = unified_view.build([_expense(4, "Rent", -1)], [income], TODAY)

    assert expense_item.is_expense and not expense_item.is_income
    assert income_item.is_income and not income_item.is_expense
    assert expense_item.next_date == TODAY - timedelta(days=1)
    assert income_item.goal_allocation_count == 2
    assert expense_item.goal_allocation_count == 0
    assert expense_item.key != income_item.key


def test_due_descriptions():
    offsets = {0: "Due today", 1: "Due tomorrow", 4: "Due in 4 days", -1: "Overdue by 1 day"}
    for offset, text in offsets.items():
        (item,) = unified_view.build([_expense(1, "x", offset)], [], TODAY)
        assert item.due_description == text
    (paused,) = unified_view.build([_expense(1, "x", -3, active=False)], [], TODAY)
    assert paused.due_description == "Paused"
    assert not paused.is_overdue
