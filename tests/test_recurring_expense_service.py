from datetime import date

import pytest

TODAY = date(2024, 3, 15)


def _create(service, **overrides):
    fields = dict(
        title="Rent", amount=1200.0, category="bills",
        frequency="monthly", next_due_date=date(2024, 3, 31),
    )
    fields.update(overrides)
    return service.create(**fields)


def test_create_and_read_back(expense_service):
    created = _create(expense_service, title="  Internet  ", note=" fibre ")
    stored = expense_service.get_by_id(created.id)
    assert stored.title == "Internet"
    assert stored.note == "fibre"
    assert stored.next_due_date == date(2024, 3, 31)
    assert stored.is_active
    assert stored.last_paid_date is None


@pytest.mark.parametrize("overrides, message", [
    ({"title": "   "}, "Title"),
    ({"amount": 0}, "Amount"),
    ({"category": "rockets"}, "category"),
    ({"frequency": "hourly"}, "frequency"),
    ({"frequency": "custom", "custom_interval_days": 0}, "interval"),
    ({"end_date": date(2024, 3, 1)}, "End date"),
])
def test_create_rejects_invalid_input(expense_service, overrides, message):
    with pytest.raises(ValueError, match=message):
        _create(expense_service, **overrides)
    assert expense_service.get_all() == []


def test_pause_then_resume_only_flips_active(expense_service):
    original = _create(expense_service, next_due_date=date(2024, 3, 1))
    paused = expense_service.pause(original.id)
    assert not paused.is_active
    resumed = expense_service.resume(original.id)
    assert resumed == original


def test_toggle_active(expense_service):
    expense = _create(expense_service)
    assert not expense_service.toggle_active(expense.id).is_active
    assert expense_service.toggle_active(expense.id).is_active


def test_pay_now_records_transaction_and_advances_from_today(expense_service, tx_dao):
    expense = _create(expense_service, next_due_date=date(2024, 3, 1), note="March")
    tx = expense_service.pay_now(expense.id, TODAY)

    assert tx.type == "expense"
    assert tx.amount == 1200.0
    assert tx.date == TODAY
    assert tx.category == "bills"
    assert tx.description == "[Rent] March"
    assert tx.recurring_expense_id == expense.id

    updated = expense_service.get_by_id(expense.id)
    assert updated.next_due_date == date(2024, 4, 15)
    assert updated.last_paid_date == TODAY
    assert len(tx_dao.get_for_recurring_expense(expense.id)) == 1


def test_skip_advances_without_recording(expense_service, tx_dao):
    expense = _create(expense_service, frequency="weekly", next_due_date=date(2024, 3, 10))
    skipped = expense_service.skip(expense.id, TODAY)
    assert skipped.next_due_date == date(2024, 3, 22)
    assert skipped.last_paid_date is None
    assert tx_dao.get_all() == []


def test_missing_id_is_a_no_op(expense_service):
    assert expense_service.pause(42) is None
    assert expense_service.pay_now(42, TODAY) is None
    assert expense_service.skip(42, TODAY) is None
    assert expense_service.update(
        42, title="x", amount=1.0, category="other",
        frequency="daily", next_due_date=TODAY,
    ) is None


def test_update_replaces_fields(expense_service):
    expense = _create(expense_service)
    updated = expense_service.update(
        expense.id, title="Rent (new flat)", amount=1500.0, category="bills",
        frequency="custom", next_due_date=date(2024, 4, 1), custom_interval_days=14,
    )
    assert updated.title == "Rent (new flat)"
    assert updated.amount == 1500.0
    assert updated.custom_interval_days == 14


def test_active_paused_and_ended_lists(expense_service):
    running = _create(expense_service, title="Running")
    paused = _create(expense_service, title="Paused")
    expense_service.pause(paused.id)
    ended = _create(
        expense_service, title="Ended",
        next_due_date=date(2024, 1, 1), end_date=date(2024, 2, 1),
    )
    assert [e.id for e in expense_service.get_active(TODAY)] == [running.id]
    assert [e.id for e in expense_service.get_paused(TODAY)] == [paused.id]
    assert [e.id for e in expense_service.get_ended(TODAY)] == [ended.id]


def test_get_upcoming_includes_overdue(expense_service):
    _create(expense_service, title="Late", next_due_date=date(2024, 3, 10))
    _create(expense_service, title="Soon", next_due_date=date(2024, 3, 20))
    _create(expense_service, title="Later", next_due_date=date(2024, 5, 1))
    assert [e.title for e in expense_service.get_upcoming(TODAY, 7)] == ["Late", "Soon"]


def test_generate_due_catches_up_missed_occurrences(expense_service, tx_dao):
    expense = _create(expense_service, frequency="weekly", next_due_date=date(2024, 2, 27))
    generated = expense_service.generate_due(TODAY)

    assert [tx.date for tx in generated] == [date(2024, 2, 27), date(2024, 3, 5), date(2024, 3, 12)]
    updated = expense_service.get_by_id(expense.id)
    assert updated.next_due_date == date(2024, 3, 19)
    assert updated.last_paid_date == TODAY

    # second run on the same day records nothing
    assert expense_service.generate_due(TODAY) == []
    assert len(tx_dao.get_all()) == 3


def test_generate_due_skips_paused(expense_service):
    expense = _create(expense_service, next_due_date=date(2024, 3, 1))
    expense_service.pause(expense.id)
    assert expense_service.generate_due(TODAY) == []
