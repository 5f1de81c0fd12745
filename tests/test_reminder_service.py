from datetime import date

TODAY = date(2024, 3, 15)


def test_overdue_items_come_first_as_warnings(expense_service, income_service, reminder_service):
    expense_service.create(
        title="Phone", amount=40.0, category="bills",
        frequency="monthly", next_due_date=date(2024, 3, 18),
    )
    late = expense_service.create(
        title="Rent", amount=1200.0, category="bills",
        frequency="monthly", next_due_date=date(2024, 3, 12),
    )
    income_service.create(
        amount=5000.0, source="salary", frequency="monthly", next_date=date(2024, 3, 16),
    )
    expense_service.create(
        title="Insurance", amount=300.0, category="health",
        frequency="yearly", next_due_date=date(2024, 6, 1),
    )

    reminders = reminder_service.get_reminders(TODAY, 7, "$")

    assert [r.severity for r in reminders] == ["warning", "info", "info"]
    overdue = reminders[0]
    assert overdue.type == "overdue_recurring"
    assert overdue.key == f"expense:{late.id}"
    assert overdue.title == "Rent is overdue"
    assert "$1,200.00" in overdue.detail
    assert "Overdue by 3 days" in overdue.detail

    assert [r.title for r in reminders[1:]] == ["Salary due tomorrow", "Phone due in 3 days"]


def test_paused_items_raise_no_reminders(expense_service, reminder_service):
    expense = expense_service.create(
        title="Gym", amount=30.0, category="health",
        frequency="monthly", next_due_date=date(2024, 3, 1),
    )
    expense_service.pause(expense.id)
    assert reminder_service.get_reminders(TODAY) == []
