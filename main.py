import logging
import os
import sys
import customtkinter as ctk

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from database.db_manager import DatabaseManager
from database.goal_dao import GoalDAO
from database.recurring_expense_dao import RecurringExpenseDAO
from database.recurring_income_dao import RecurringIncomeDAO
from database.transaction_dao import TransactionDAO

from services.goal_service import GoalService
from services.recurring_expense_service import RecurringExpenseService
from services.recurring_income_service import RecurringIncomeService
from services.recurring_overview_service import RecurringOverviewService
from services.reminder_service import ReminderService

from ui.app_window import AppWindow
from utils.app_config import get_db_folder, get_log_level
from utils.constants import UPCOMING_REMINDER_DAYS
from utils.date_helpers import today

logger = logging.getLogger(__name__)


def _int_setting(db: DatabaseManager, key: str, default: int) -> int:
    try:
        return int(db.get_setting(key, str(default)))
    except ValueError:
        logger.warning("Ignoring non-numeric setting %s", key)
        return default


def main():
    # ── Logging ──────────────────────────────────────────────────────────────
    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # ── Database ─────────────────────────────────────────────────────────────
    db = DatabaseManager.open(db_folder=get_db_folder())

    # ── DAOs ─────────────────────────────────────────────────────────────────
    expense_dao = RecurringExpenseDAO(db)
    income_dao = RecurringIncomeDAO(db)
    goal_dao = GoalDAO(db)
    tx_dao = TransactionDAO(db)

    # ── Services ─────────────────────────────────────────────────────────────
    goal_svc = GoalService(goal_dao)
    expense_svc = RecurringExpenseService(expense_dao, tx_dao)
    income_svc = RecurringIncomeService(income_dao, tx_dao, goal_svc)
    overview_svc = RecurringOverviewService(expense_svc, income_svc)
    reminder_svc = ReminderService(overview_svc)

    ref = today()
    currency = db.get_setting("currency_symbol", "₹")
    upcoming_days = _int_setting(db, "upcoming_days", UPCOMING_REMINDER_DAYS)

    # ── Record missed occurrences (opt-in) ───────────────────────────────────
    new_transactions = []
    if db.get_setting("auto_generate_recurring", "0") == "1":
        new_transactions = expense_svc.generate_due(ref) + income_svc.generate_due(ref)

    reminders = reminder_svc.get_reminders(ref, upcoming_days, currency)

    # ── Appearance ───────────────────────────────────────────────────────────
    ctk.set_appearance_mode(db.get_setting("appearance_mode", "system"))
    ctk.set_default_color_theme("blue")

    # ── Launch UI ────────────────────────────────────────────────────────────
    app = AppWindow(
        db=db,
        overview_service=overview_svc,
        expense_service=expense_svc,
        income_service=income_svc,
        goal_service=goal_svc,
        startup_reminders=reminders,
        startup_transactions=new_transactions,
        date_format=db.get_setting("date_format", "DD/MM/YYYY"),
        currency_symbol=currency,
        upcoming_days=upcoming_days,
    )

    def on_close():
        app.destroy()
        db.close()

    app.protocol("WM_DELETE_WINDOW", on_close)
    app.mainloop()


if __name__ == "__main__":
    main()
