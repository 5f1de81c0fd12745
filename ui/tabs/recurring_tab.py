import customtkinter as ctk
from models.unified_item import UnifiedRecurringItem
from services.goal_service import GoalService
from services.recurring_expense_service import RecurringExpenseService
from services.recurring_income_service import RecurringIncomeService
from services.recurring_overview_service import RecurringOverviewService
from ui.components.confirm_dialog import ConfirmDialog
from ui.components.recurring_expense_form import RecurringExpenseForm
from ui.components.recurring_income_form import RecurringIncomeForm
from utils.constants import FREQUENCY_LABELS, TYPE_FILTERS, TYPE_FILTER_LABELS
from utils.currency import format_currency
from utils.date_helpers import today, format_display_date


_INCOME_COLOR = "#4CAF50"
_EXPENSE_COLOR = "#F44336"
_OVERDUE_COLOR = "#FF9800"


class RecurringTab(ctk.CTkFrame):
    """Recurring expenses and incomes in one list: Upcoming, Active and Paused."""

    def __init__(
        self,
        master,
        overview_service: RecurringOverviewService,
        expense_service: RecurringExpenseService,
        income_service: RecurringIncomeService,
        goal_service: GoalService,
        date_format: str = "DD/MM/YYYY",
        currency_symbol: str = "₹",
        upcoming_days: int = 7,
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._overview = overview_service
        self._expense_svc = expense_service
        self._income_svc = income_service
        self._goal_svc = goal_service
        self._date_format = date_format
        self._symbol = currency_symbol
        self._upcoming_days = upcoming_days
        self._filter = "all"

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        self._build_toolbar()
        self._build_list()
        self._load()

    def refresh(self):
        self._load()

    def _build_toolbar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))
        ctk.CTkLabel(
            bar, text="Recurring",
            font=ctk.CTkFont(size=14, weight="bold"),
        ).pack(side="left", padx=12, pady=8)

        self._filter_labels = [TYPE_FILTER_LABELS[f] for f in TYPE_FILTERS]
        self._filter_btn = ctk.CTkSegmentedButton(
            bar, values=self._filter_labels, command=self._on_filter_change,
        )
        self._filter_btn.set(TYPE_FILTER_LABELS[self._filter])
        self._filter_btn.pack(side="left", padx=12)

        self._summary_label = ctk.CTkLabel(bar, text="", text_color="gray60")
        self._summary_label.pack(side="left", padx=8)

        ctk.CTkButton(bar, text="+ Income", width=90, command=self._open_add_income).pack(
            side="right", padx=(4, 8), pady=6
        )
        ctk.CTkButton(bar, text="+ Expense", width=90, command=self._open_add_expense).pack(
            side="right", padx=4, pady=6
        )

    def _build_list(self):
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=1, column=0, sticky="nsew", padx=8, pady=8)
        self._scroll.grid_columnconfigure(0, weight=1)

    def _on_filter_change(self, label: str):
        self._filter = TYPE_FILTERS[self._filter_labels.index(label)]
        self._load()

    def _load(self):
        for w in self._scroll.winfo_children():
            w.destroy()

        ref = today()
        sections = self._overview.get_sections(ref, self._filter, self._upcoming_days)
        self._summary_label.configure(
            text=f"{self._overview.this_week_count(ref)} due this week · "
                 f"{format_currency(self._income_svc.expected_monthly_income(), self._symbol)}"
                 f" expected monthly income"
        )

        if sections.is_empty:
            ctk.CTkLabel(
                self._scroll,
                text="No recurring items yet. Add an expense or an income to get started.",
                text_color="gray60",
            ).grid(row=0, column=0, pady=40)
            return

        row = 0
        for title, items in (
            ("Upcoming", sections.upcoming),
            ("Active", sections.active),
            ("Paused", sections.paused),
        ):
            if not items:
                continue
            ctk.CTkLabel(
                self._scroll, text=f"{title} ({len(items)})", anchor="w",
                font=ctk.CTkFont(size=13, weight="bold"),
            ).grid(row=row, column=0, sticky="ew", padx=4, pady=(10, 2))
            row += 1
            for item in items:
                self._add_row(row, item)
                row += 1

    def _add_row(self, idx, item: UnifiedRecurringItem):
        bg = ("gray92", "gray17") if idx % 2 == 0 else ("gray88", "gray21")
        row = ctk.CTkFrame(self._scroll, fg_color=bg, corner_radius=4)
        row.grid(row=idx, column=0, sticky="ew", pady=1, padx=2)
        row.grid_columnconfigure(1, weight=1)

        kind_color = _INCOME_COLOR if item.is_income else _EXPENSE_COLOR
        ctk.CTkLabel(
            row, text="▲" if item.is_income else "▼", width=20, text_color=kind_color,
        ).grid(row=0, column=0, padx=(6, 2), pady=4)

        title = item.title
        if item.description:
            title += f" · {item.description}"
        if item.goal_allocation_count:
            title += f"  · {item.goal_allocation_count} goal(s)"
        ctk.CTkLabel(row, text=title, anchor="w").grid(row=0, column=1, padx=4, sticky="ew")

        sign = "+" if item.is_income else "-"
        ctk.CTkLabel(
            row, text=f"{sign}{format_currency(item.amount, self._symbol)}",
            width=100, anchor="e", text_color=kind_color,
        ).grid(row=0, column=2, padx=4)
        ctk.CTkLabel(
            row, text=FREQUENCY_LABELS.get(item.frequency, item.frequency), width=70, anchor="w",
        ).grid(row=0, column=3, padx=4)
        ctk.CTkLabel(
            row, text=format_display_date(item.next_date, self._date_format), width=90, anchor="w",
        ).grid(row=0, column=4, padx=4)

        status_color = "gray60"
        if item.is_overdue:
            status_color = _OVERDUE_COLOR
        elif item.is_due_soon():
            status_color = ("gray10", "gray90")
        ctk.CTkLabel(
            row, text=item.due_description, width=120, anchor="w", text_color=status_color,
        ).grid(row=0, column=5, padx=4)

        acts = ctk.CTkFrame(row, fg_color="transparent")
        acts.grid(row=0, column=6, padx=(4, 6))
        ctk.CTkButton(
            acts, text="Edit", width=40, height=24,
            command=lambda i=item: self._open_edit(i),
        ).pack(side="left", padx=2)
        if item.is_active:
            ctk.CTkButton(
                acts, text="Received" if item.is_income else "Pay now", width=70, height=24,
                fg_color=kind_color,
                command=lambda i=item: self._settle(i),
            ).pack(side="left", padx=2)
            ctk.CTkButton(
                acts, text="Skip", width=44, height=24,
                fg_color="transparent", border_width=1,
                text_color=("gray10", "gray90"),
                command=lambda i=item: self._skip(i),
            ).pack(side="left", padx=2)
        ctk.CTkButton(
            acts, text="Pause" if item.is_active else "Resume", width=56, height=24,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=lambda i=item: self._toggle_active(i),
        ).pack(side="left", padx=2)
        ctk.CTkButton(
            acts, text="✕", width=28, height=24,
            fg_color="transparent", text_color=_EXPENSE_COLOR,
            command=lambda i=item: self._delete(i),
        ).pack(side="left", padx=2)

    # ── Actions ──────────────────────────────────────────────────────────────
    # Each service write notifies the DB listeners, which re-render this tab.

    def _open_add_expense(self):
        form = RecurringExpenseForm(
            self.winfo_toplevel(), self._expense_svc, date_format=self._date_format,
        )
        self.wait_window(form)

    def _open_add_income(self):
        form = RecurringIncomeForm(
            self.winfo_toplevel(), self._income_svc, self._goal_svc,
            date_format=self._date_format, currency_symbol=self._symbol,
        )
        self.wait_window(form)

    def _open_edit(self, item: UnifiedRecurringItem):
        if item.is_income:
            income = self._income_svc.get_by_id(item.id)
            if income is None:
                self._load()
                return
            form = RecurringIncomeForm(
                self.winfo_toplevel(), self._income_svc, self._goal_svc,
                income=income, date_format=self._date_format, currency_symbol=self._symbol,
            )
        else:
            expense = self._expense_svc.get_by_id(item.id)
            if expense is None:
                self._load()
                return
            form = RecurringExpenseForm(
                self.winfo_toplevel(), self._expense_svc,
                expense=expense, date_format=self._date_format,
            )
        self.wait_window(form)

    def _settle(self, item: UnifiedRecurringItem):
        if item.is_income:
            self._income_svc.mark_received(item.id, today())
        else:
            self._expense_svc.pay_now(item.id, today())

    def _skip(self, item: UnifiedRecurringItem):
        if item.is_income:
            self._income_svc.skip(item.id, today())
        else:
            self._expense_svc.skip(item.id, today())

    def _toggle_active(self, item: UnifiedRecurringItem):
        svc = self._income_svc if item.is_income else self._expense_svc
        svc.toggle_active(item.id)

    def _delete(self, item: UnifiedRecurringItem):
        dialog = ConfirmDialog(
            self.winfo_toplevel(),
            "Delete Recurring Item",
            f"Delete '{item.title}'? Transactions already recorded are kept.",
        )
        if not dialog.result:
            return
        if item.is_income:
            self._income_svc.delete(item.id)
        else:
            self._expense_svc.delete(item.id)
