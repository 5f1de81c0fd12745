import customtkinter as ctk
from models.recurring_income import RecurringIncome
from services import goal_allocation
from services.goal_service import GoalService
from services.recurring_income_service import RecurringIncomeService
from ui.components.confirm_dialog import ConfirmDialog, center_on_master
from ui.components.date_picker import DatePickerWidget
from utils.constants import FREQUENCIES, INCOME_SOURCES, INCOME_SOURCE_LABELS
from utils.currency import format_currency
from utils.date_helpers import today


class RecurringIncomeForm(ctk.CTkToplevel):
    """Add or edit a recurring income, including its savings goal allocations.

    Unchecking a goal keeps the typed percentage in the entry but drops the
    goal from the totals and from the saved list.
    """

    def __init__(
        self,
        master,
        income_service: RecurringIncomeService,
        goal_service: GoalService,
        income: RecurringIncome | None = None,
        date_format: str = "DD/MM/YYYY",
        currency_symbol: str = "₹",
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._svc = income_service
        self._income = income
        self._symbol = currency_symbol
        self.saved = False

        self.title("Edit Recurring Income" if income else "New Recurring Income")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        self._goals = goal_service.get_active_goals()
        existing = {a.goal_id: a for a in income.goal_allocations} if income else {}

        r = 0
        self._add_label("Amount:", r)
        self._amount_var = ctk.StringVar(value=f"{income.amount:.2f}" if income else "")
        self._amount_var.trace_add("write", self._on_form_changed)
        ctk.CTkEntry(self, textvariable=self._amount_var, width=220).grid(
            row=r, column=1, padx=(0, 16), pady=(16, 4), sticky="ew"
        )
        r += 1

        self._add_label("Source:", r)
        self._source_labels = [INCOME_SOURCE_LABELS[s] for s in INCOME_SOURCES]
        current_source = income.source if income else "salary"
        self._source_var = ctk.StringVar(value=INCOME_SOURCE_LABELS[current_source])
        ctk.CTkComboBox(
            self, values=self._source_labels, variable=self._source_var,
            width=220, state="readonly",
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        self._add_label("Description:", r)
        self._desc_var = ctk.StringVar(value=income.description or "" if income else "")
        ctk.CTkEntry(self, textvariable=self._desc_var, width=220).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        self._add_label("Frequency:", r)
        self._freq_var = ctk.StringVar(value=income.frequency if income else "monthly")
        ctk.CTkComboBox(
            self, values=FREQUENCIES, variable=self._freq_var,
            width=220, state="readonly",
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        self._add_label("Next Date:", r)
        self._date_picker = DatePickerWidget(
            self, initial_date=income.next_date if income else today(),
            date_format=date_format,
        )
        self._date_picker.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        r += 1

        # Goal allocations
        self._enabled_vars: dict[int, ctk.BooleanVar] = {}
        self._pct_vars: dict[int, ctk.StringVar] = {}
        self._amount_labels: dict[int, ctk.CTkLabel] = {}
        if self._goals:
            ctk.CTkLabel(
                self, text="Allocate to goals", font=ctk.CTkFont(weight="bold"),
            ).grid(row=r, column=0, columnspan=2, padx=16, pady=(12, 2), sticky="w")
            r += 1
            alloc_frame = ctk.CTkFrame(self, fg_color=("gray90", "gray20"))
            alloc_frame.grid(row=r, column=0, columnspan=2, padx=16, pady=4, sticky="ew")
            alloc_frame.grid_columnconfigure(0, weight=1)
            for i, goal in enumerate(self._goals):
                self._add_goal_row(alloc_frame, i, goal, existing.get(goal.id))
            r += 1
            self._summary_var = ctk.StringVar()
            self._summary_label = ctk.CTkLabel(self, textvariable=self._summary_var, anchor="w")
            self._summary_label.grid(row=r, column=0, columnspan=2, padx=16, pady=(2, 4), sticky="ew")
            r += 1

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=300, anchor="w",
        ).grid(row=r, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")
        r += 1

        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=r, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")
        ctk.CTkButton(
            btn_frame, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"), command=self.destroy,
        ).pack(side="left")
        if income:
            ctk.CTkButton(
                btn_frame, text="Delete", width=80,
                fg_color="#F44336", hover_color="#D32F2F",
                command=self._on_delete,
            ).pack(side="left", padx=8)
        self._save_btn = ctk.CTkButton(btn_frame, text="Save", width=90, command=self._on_save)
        self._save_btn.pack(side="right")

        self._on_form_changed()
        self.transient(master)
        self.grab_set()
        center_on_master(self)

    def _add_label(self, text, row):
        ctk.CTkLabel(self, text=text).grid(row=row, column=0, padx=(16, 8), pady=4, sticky="e")

    def _add_goal_row(self, parent, row, goal, allocation):
        enabled = allocation is not None and allocation.percentage > 0
        self._enabled_vars[goal.id] = ctk.BooleanVar(value=enabled)
        self._pct_vars[goal.id] = ctk.StringVar(
            value=f"{allocation.percentage:g}" if enabled else ""
        )
        self._pct_vars[goal.id].trace_add("write", self._on_form_changed)

        ctk.CTkCheckBox(
            parent, text=goal.name, variable=self._enabled_vars[goal.id],
            command=self._on_form_changed,
        ).grid(row=row, column=0, padx=8, pady=3, sticky="w")
        ctk.CTkEntry(
            parent, textvariable=self._pct_vars[goal.id], width=60, placeholder_text="%",
        ).grid(row=row, column=1, padx=4, pady=3)
        self._amount_labels[goal.id] = ctk.CTkLabel(parent, text="", width=90, anchor="e")
        self._amount_labels[goal.id].grid(row=row, column=2, padx=(4, 8), pady=3)

    def _income_amount(self) -> float:
        try:
            return float(self._amount_var.get())
        except ValueError:
            return 0.0

    def _enabled_map(self) -> dict[int, bool]:
        return {goal_id: var.get() for goal_id, var in self._enabled_vars.items()}

    def _percentages(self) -> dict[int, str]:
        return {goal_id: var.get() for goal_id, var in self._pct_vars.items()}

    def _draft_allocations(self):
        amount = self._income_amount()
        return goal_allocation.build_allocation_list(
            self._goals, self._enabled_map(), self._percentages(), amount,
        )

    def _on_form_changed(self, *_args):
        if not self._goals:
            return
        amount = self._income_amount()
        for goal_id, label in self._amount_labels.items():
            pct = goal_allocation.parse_percentage(self._pct_vars[goal_id].get())
            shown = goal_allocation.calculated_amount(amount, pct) if self._enabled_vars[goal_id].get() else 0.0
            label.configure(text=format_currency(shown, self._symbol))

        summary = goal_allocation.summarize(amount, self._draft_allocations())
        self._summary_var.set(
            f"Allocated {summary.total_percentage:.0f}% "
            f"({format_currency(summary.allocated_amount, self._symbol)}) · "
            f"Remaining {summary.remaining_percentage:.0f}% "
            f"({format_currency(max(summary.remaining_amount, 0.0), self._symbol)})"
        )
        if summary.is_over_allocated:
            self._summary_label.configure(text_color="#F44336")
            self._save_btn.configure(state="disabled")
        else:
            self._summary_label.configure(text_color=("gray10", "gray90"))
            self._save_btn.configure(state="normal")

    def _on_save(self):
        try:
            amount = float(self._amount_var.get())
        except ValueError:
            self._error_var.set("Invalid amount.")
            return
        next_date = self._date_picker.get()
        if next_date is None:
            self._error_var.set("Invalid next date.")
            return
        source = INCOME_SOURCES[self._source_labels.index(self._source_var.get())]

        fields = dict(
            amount=amount, source=source, frequency=self._freq_var.get(),
            next_date=next_date, description=self._desc_var.get(),
            goal_allocations=self._draft_allocations(),
        )
        try:
            if self._income:
                self._svc.update(self._income.id, is_active=self._income.is_active, **fields)
            else:
                self._svc.create(**fields)
        except ValueError as e:
            self._error_var.set(str(e))
            return
        self.saved = True
        self.destroy()

    def _on_delete(self):
        dialog = ConfirmDialog(
            self, "Delete Recurring Income",
            "Delete this recurring income? Received income and goal progress are kept.",
        )
        if dialog.result:
            self._svc.delete(self._income.id)
            self.saved = True
            self.destroy()
