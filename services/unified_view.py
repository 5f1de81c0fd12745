"""Merged, annotated view over recurring expenses and recurring incomes.

The view is rebuilt from fresh snapshots on every read; nothing here is
persisted or cached.
"""
from datetime import date
from typing import Iterable
from models.recurring_expense import RecurringExpense
from models.recurring_income import RecurringIncome
from models.unified_item import UnifiedRecurringItem
from services.recurrence_clock import days_until
from utils.constants import UPCOMING_REMINDER_DAYS, TYPE_FILTERS


def _next_date(source: RecurringExpense | RecurringIncome) -> date:
    if isinstance(source, RecurringIncome):
        return source.next_date
    return source.next_due_date


def wrap(source: RecurringExpense | RecurringIncome, ref: date) -> UnifiedRecurringItem:
    return UnifiedRecurringItem(source=source, days_until_next=days_until(_next_date(source), ref))


def build(
    expenses: Iterable[RecurringExpense],
    incomes: Iterable[RecurringIncome],
    ref: date,
) -> list[UnifiedRecurringItem]:
    """Expenses first, then incomes, each in input order. Not sorted."""
    items = [wrap(e, ref) for e in expenses]
    items += [wrap(i, ref) for i in incomes]
    return items


def sorted_by_next_date(items: Iterable[UnifiedRecurringItem]) -> list[UnifiedRecurringItem]:
    # sorted() is stable: equal dates keep input order
    return sorted(items, key=lambda item: item.next_date)


def upcoming(
    items: Iterable[UnifiedRecurringItem],
    ref: date,
    within_days: int = UPCOMING_REMINDER_DAYS,
) -> list[UnifiedRecurringItem]:
    """Active items due within ``within_days`` of ``ref``, overdue included."""
    result = []
    for item in items:
        if not item.is_active:
            continue
        current = wrap(item.source, ref)
        if current.days_until_next <= within_days:
            result.append(current)
    return sorted_by_next_date(result)


def partition_active_paused(
    items: Iterable[UnifiedRecurringItem],
) -> tuple[list[UnifiedRecurringItem], list[UnifiedRecurringItem]]:
    active, paused = [], []
    for item in items:
        (active if item.is_active else paused).append(item)
    active.sort(key=lambda item: item.title)
    paused.sort(key=lambda item: item.title)
    return active, paused


def apply_type_filter(
    items: Iterable[UnifiedRecurringItem], type_filter: str = "all",
) -> list[UnifiedRecurringItem]:
    if type_filter not in TYPE_FILTERS:
        raise ValueError(f"Unknown filter: {type_filter!r}")
    if type_filter == "income":
        return [item for item in items if item.is_income]
    if type_filter == "expenses":
        return [item for item in items if item.is_expense]
    return list(items)
