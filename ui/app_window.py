import logging
import customtkinter as ctk
from models.transaction import Transaction
from database.db_manager import DatabaseManager
from services.goal_service import GoalService
from services.recurring_expense_service import RecurringExpenseService
from services.recurring_income_service import RecurringIncomeService
from services.recurring_overview_service import RecurringOverviewService
from services.reminder_service import Reminder
from ui.components.alert_banner import AlertBanner
from ui.tabs.goals_tab import GoalsTab
from ui.tabs.recurring_tab import RecurringTab
from ui.tabs.settings_tab import SettingsTab
from utils.constants import APP_NAME, APP_WIDTH, APP_HEIGHT

logger = logging.getLogger(__name__)

# Which tabs to rebuild when a table changes
_REFRESH_SCOPES: dict[str, set[str]] = {
    "recurring_expenses": {"recurring"},
    "recurring_incomes":  {"recurring"},
    "goal_allocations":   {"recurring"},
    "goals":              {"recurring", "goals"},
    "transactions":       set(),
    "app_settings":       {"settings"},
    "full":               {"recurring", "goals", "settings"},
}

_MAX_REMINDER_BANNERS = 3


class AppWindow(ctk.CTk):
    def __init__(
        self,
        db: DatabaseManager,
        overview_service: RecurringOverviewService,
        expense_service: RecurringExpenseService,
        income_service: RecurringIncomeService,
        goal_service: GoalService,
        startup_reminders: list[Reminder] | None = None,
        startup_transactions: list[Transaction] | None = None,
        date_format: str = "DD/MM/YYYY",
        currency_symbol: str = "₹",
        upcoming_days: int = 7,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._db = db
        self._overview_svc = overview_service
        self._expense_svc = expense_service
        self._income_svc = income_service
        self._goal_svc = goal_service
        self._startup_reminders = startup_reminders or []
        self._startup_transactions = startup_transactions or []
        self._date_format = date_format
        self._symbol = currency_symbol
        self._upcoming_days = upcoming_days
        self._pending_scopes: set[str] = set()

        self.title(APP_NAME)
        self.minsize(APP_WIDTH, APP_HEIGHT)
        self.geometry(f"{APP_WIDTH}x{APP_HEIGHT}")

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        self._build_banner_area()
        self._build_tabs()

        self._db.subscribe(self._on_db_change)

        if self._startup_transactions:
            count = len(self._startup_transactions)
            self.after(300, lambda: self._show_generated_banner(count))
        if self._startup_reminders:
            self.after(200, self._show_reminder_banners)

    def _build_banner_area(self):
        self._banner_frame = ctk.CTkFrame(self, fg_color="transparent", height=0)
        self._banner_frame.grid(row=0, column=0, sticky="ew", padx=8)

    def _build_tabs(self):
        self._tabview = ctk.CTkTabview(self)
        self._tabview.grid(row=1, column=0, sticky="nsew", padx=8, pady=(0, 8))

        for tab_name in ("Recurring", "Goals", "Settings"):
            self._tabview.add(tab_name)
            self._tabview.tab(tab_name).grid_columnconfigure(0, weight=1)
            self._tabview.tab(tab_name).grid_rowconfigure(0, weight=1)

        self._recurring_tab = RecurringTab(
            self._tabview.tab("Recurring"),
            overview_service=self._overview_svc,
            expense_service=self._expense_svc,
            income_service=self._income_svc,
            goal_service=self._goal_svc,
            date_format=self._date_format,
            currency_symbol=self._symbol,
            upcoming_days=self._upcoming_days,
        )
        self._recurring_tab.grid(row=0, column=0, sticky="nsew")

        self._goals_tab = GoalsTab(
            self._tabview.tab("Goals"),
            goal_service=self._goal_svc,
            date_format=self._date_format,
            currency_symbol=self._symbol,
        )
        self._goals_tab.grid(row=0, column=0, sticky="nsew")

        self._settings_tab = SettingsTab(self._tabview.tab("Settings"), db=self._db)
        self._settings_tab.grid(row=0, column=0, sticky="nsew")

    # ── Refresh ──────────────────────────────────────────────────────────────
    def _on_db_change(self, table: str):
        # One write can touch several tables; coalesce into a single redraw.
        if not self._pending_scopes:
            self.after(0, self._flush_refresh)
        self._pending_scopes.add(table)

    def _flush_refresh(self):
        tabs: set[str] = set()
        for table in self._pending_scopes:
            tabs |= _REFRESH_SCOPES.get(table, _REFRESH_SCOPES["full"])
        self._pending_scopes.clear()
        self.notify_tabs_refresh(tabs)

    def notify_tabs_refresh(self, tabs: set[str] | None = None):
        tabs = _REFRESH_SCOPES["full"] if tabs is None else tabs
        logger.debug("Refreshing tabs: %s", sorted(tabs))
        if "recurring" in tabs: self._recurring_tab.refresh()
        if "goals"     in tabs: self._goals_tab.refresh()
        if "settings"  in tabs: self._settings_tab.refresh()

    # ── Banners ──────────────────────────────────────────────────────────────
    def _show_generated_banner(self, count: int):
        banner = AlertBanner(
            self._banner_frame,
            message=f"{count} recurring transaction{'s were' if count != 1 else ' was'} recorded automatically.",
            severity="info",
            action_text="View",
            action_cmd=lambda: self._tabview.set("Recurring"),
        )
        banner.pack(fill="x", pady=2)

    def _show_reminder_banners(self):
        shown = self._startup_reminders[:_MAX_REMINDER_BANNERS]
        for reminder in shown:
            AlertBanner(
                self._banner_frame,
                message=reminder.title,
                detail=reminder.detail,
                severity=reminder.severity,
                action_text="Open",
                action_cmd=lambda: self._tabview.set("Recurring"),
            ).pack(fill="x", pady=2)
        hidden = len(self._startup_reminders) - len(shown)
        if hidden > 0:
            AlertBanner(
                self._banner_frame,
                message=f"{hidden} more recurring item{'s' if hidden != 1 else ''} due soon.",
                severity="info",
                action_text="View",
                action_cmd=lambda: self._tabview.set("Recurring"),
            ).pack(fill="x", pady=2)

    def destroy(self):
        self._db.unsubscribe(self._on_db_change)
        super().destroy()
