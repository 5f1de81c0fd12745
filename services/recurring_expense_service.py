import logging
from dataclasses import replace
from datetime import date, timedelta
from database.recurring_expense_dao import RecurringExpenseDAO
from database.transaction_dao import TransactionDAO
from models.recurring_expense import RecurringExpense
from models.transaction import Transaction
from services.recurrence_clock import advance, occurrences_through
from utils.constants import FREQUENCIES, EXPENSE_CATEGORIES, UPCOMING_REMINDER_DAYS

logger = logging.getLogger(__name__)


class RecurringExpenseService:
    def __init__(self, recurring_dao: RecurringExpenseDAO, tx_dao: TransactionDAO):
        self._dao = recurring_dao
        self._tx_dao = tx_dao

    def get_all(self) -> list[RecurringExpense]:
        return self._dao.get_all()

    def get_by_id(self, expense_id: int) -> RecurringExpense | None:
        return self._dao.get_by_id(expense_id)

    def get_active(self, ref: date) -> list[RecurringExpense]:
        return [e for e in self._dao.get_all() if e.is_active and not e.has_ended(ref)]

    def get_paused(self, ref: date) -> list[RecurringExpense]:
        return [e for e in self._dao.get_all() if not e.is_active and not e.has_ended(ref)]

    def get_ended(self, ref: date) -> list[RecurringExpense]:
        return [e for e in self._dao.get_all() if e.has_ended(ref)]

    def get_upcoming(self, ref: date, days: int = UPCOMING_REMINDER_DAYS) -> list[RecurringExpense]:
        """Active expenses due on or before ref + days, overdue included, soonest first."""
        horizon = ref + timedelta(days=days)
        due = [e for e in self.get_active(ref) if e.next_due_date <= horizon]
        return sorted(due, key=lambda e: e.next_due_date)

    def create(
        self,
        title: str,
        amount: float,
        category: str,
        frequency: str,
        next_due_date: date,
        custom_interval_days: int = 1,
        end_date: date | None = None,
        note: str = "",
    ) -> RecurringExpense:
        title = title.strip()
        self._validate(title, amount, category, frequency, custom_interval_days,
                       next_due_date, end_date)
        expense = self._dao.create(
            title=title, amount=amount, category=category, frequency=frequency,
            next_due_date=next_due_date, custom_interval_days=custom_interval_days,
            end_date=end_date, note=note.strip(),
        )
        logger.info("Created recurring expense %s (%s)", expense.id, expense.title)
        return expense

    def update(
        self,
        expense_id: int,
        title: str,
        amount: float,
        category: str,
        frequency: str,
        next_due_date: date,
        custom_interval_days: int = 1,
        end_date: date | None = None,
        note: str = "",
        is_active: bool = True,
    ) -> RecurringExpense | None:
        title = title.strip()
        self._validate(title, amount, category, frequency, custom_interval_days,
                       next_due_date, end_date)
        existing = self._dao.get_by_id(expense_id)
        if existing is None:
            logger.warning("Update of missing recurring expense %s ignored", expense_id)
            return None
        return self._dao.put(replace(
            existing, title=title, amount=amount, category=category,
            frequency=frequency, next_due_date=next_due_date,
            custom_interval_days=custom_interval_days, end_date=end_date,
            note=note.strip(), is_active=is_active,
        ))

    def delete(self, expense_id: int):
        self._dao.delete(expense_id)
        logger.info("Deleted recurring expense %s", expense_id)

    # ── Transitions ──────────────────────────────────────────────────────────
    def pause(self, expense_id: int) -> RecurringExpense | None:
        return self._set_active(expense_id, False)

    def resume(self, expense_id: int) -> RecurringExpense | None:
        return self._set_active(expense_id, True)

    def toggle_active(self, expense_id: int) -> RecurringExpense | None:
        expense = self._dao.get_by_id(expense_id)
        if expense is None:
            logger.warning("Toggle of missing recurring expense %s ignored", expense_id)
            return None
        return self._set_active(expense_id, not expense.is_active)

    def pay_now(self, expense_id: int, ref: date) -> Transaction | None:
        """Record a payment dated ``ref`` and move the next due date on from ``ref``."""
        expense = self._dao.get_by_id(expense_id)
        if expense is None:
            logger.warning("Pay now on missing recurring expense %s ignored", expense_id)
            return None
        tx = self._record(expense, ref)
        self._dao.put(replace(
            expense,
            next_due_date=advance(ref, expense.frequency, expense.custom_interval_days),
            last_paid_date=ref,
        ))
        logger.info("Paid recurring expense %s on %s", expense.id, ref)
        return tx

    def skip(self, expense_id: int, ref: date) -> RecurringExpense | None:
        """Advance the next due date from ``ref`` without recording a payment."""
        expense = self._dao.get_by_id(expense_id)
        if expense is None:
            logger.warning("Skip on missing recurring expense %s ignored", expense_id)
            return None
        logger.info("Skipped recurring expense %s on %s", expense.id, ref)
        return self._dao.put(replace(
            expense,
            next_due_date=advance(ref, expense.frequency, expense.custom_interval_days),
        ))

    def generate_due(self, ref: date) -> list[Transaction]:
        """Record every missed occurrence up to ``ref`` for active expenses.

        Returns the newly created transactions.
        """
        generated: list[Transaction] = []
        for expense in self.get_active(ref):
            if expense.last_paid_date == ref or not expense.is_due(ref):
                continue
            due_dates = occurrences_through(
                expense.next_due_date, expense.frequency, ref,
                expense.custom_interval_days, expense.end_date,
            )
            for d in due_dates:
                generated.append(self._record(expense, d))
            if due_dates:
                self._dao.put(replace(
                    expense,
                    next_due_date=advance(due_dates[-1], expense.frequency,
                                          expense.custom_interval_days),
                    last_paid_date=ref,
                ))
        if generated:
            logger.info("Generated %d recurring expense transaction(s)", len(generated))
        return generated

    def _record(self, expense: RecurringExpense, d: date) -> Transaction:
        description = f"[{expense.title}] {expense.note}" if expense.note else f"[{expense.title}]"
        return self._tx_dao.create(
            type_="expense",
            amount=expense.amount,
            date_=d,
            category=expense.category,
            description=description,
            recurring_expense_id=expense.id,
        )

    def _set_active(self, expense_id: int, is_active: bool) -> RecurringExpense | None:
        expense = self._dao.get_by_id(expense_id)
        if expense is None:
            logger.warning("Recurring expense %s not found", expense_id)
            return None
        logger.info("%s recurring expense %s", "Resumed" if is_active else "Paused", expense_id)
        return self._dao.put(replace(expense, is_active=is_active))

    def _validate(self, title, amount, category, frequency, custom_interval_days,
                  next_due_date, end_date):
        if not title:
            raise ValueError("Title cannot be empty.")
        if amount <= 0:
            raise ValueError("Amount must be positive.")
        if category not in EXPENSE_CATEGORIES:
            raise ValueError("Invalid category.")
        if frequency not in FREQUENCIES:
            raise ValueError("Invalid frequency.")
        if custom_interval_days < 1:
            raise ValueError("Custom interval must be at least 1 day.")
        if next_due_date is None:
            raise ValueError("Invalid next due date.")
        if end_date is not None and end_date < next_due_date:
            raise ValueError("End date cannot be before the next due date.")
