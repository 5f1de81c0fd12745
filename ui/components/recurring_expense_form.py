import customtkinter as ctk
from models.recurring_expense import RecurringExpense
from services.recurring_expense_service import RecurringExpenseService
from ui.components.confirm_dialog import ConfirmDialog, center_on_master
from ui.components.date_picker import DatePickerWidget
from utils.constants import EXPENSE_CATEGORIES, FREQUENCIES
from utils.date_helpers import today


class RecurringExpenseForm(ctk.CTkToplevel):
    """Add or edit a recurring expense."""

    def __init__(
        self,
        master,
        expense_service: RecurringExpenseService,
        expense: RecurringExpense | None = None,
        date_format: str = "DD/MM/YYYY",
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._svc = expense_service
        self._expense = expense
        self.saved = False

        self.title("Edit Recurring Expense" if expense else "New Recurring Expense")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        r = 0
        self._add_label("Title:", r)
        self._title_var = ctk.StringVar(value=expense.title if expense else "")
        ctk.CTkEntry(self, textvariable=self._title_var, width=220).grid(
            row=r, column=1, padx=(0, 16), pady=(16, 4), sticky="ew"
        )
        r += 1

        self._add_label("Amount:", r)
        self._amount_var = ctk.StringVar(value=f"{expense.amount:.2f}" if expense else "")
        ctk.CTkEntry(self, textvariable=self._amount_var, width=220).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        self._add_label("Category:", r)
        self._cat_var = ctk.StringVar(value=expense.category if expense else EXPENSE_CATEGORIES[0])
        ctk.CTkComboBox(
            self, values=EXPENSE_CATEGORIES, variable=self._cat_var,
            width=220, state="readonly",
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        self._add_label("Frequency:", r)
        self._freq_var = ctk.StringVar(value=expense.frequency if expense else "monthly")
        ctk.CTkComboBox(
            self, values=FREQUENCIES, variable=self._freq_var,
            width=220, state="readonly", command=self._on_freq_change,
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        self._interval_frame = ctk.CTkFrame(self, fg_color="transparent")
        self._interval_frame.grid(row=r, column=0, columnspan=2, padx=16, pady=2, sticky="ew")
        self._interval_var = ctk.StringVar(
            value=str(expense.custom_interval_days) if expense else "1"
        )
        self._on_freq_change()
        r += 1

        self._add_label("Next Due:", r)
        self._due_picker = DatePickerWidget(
            self, initial_date=expense.next_due_date if expense else today(),
            date_format=date_format,
        )
        self._due_picker.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        r += 1

        self._add_label("End Date:", r)
        self._end_picker = DatePickerWidget(
            self, initial_date=expense.end_date if expense else None,
            date_format=date_format,
        )
        self._end_picker.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        r += 1

        self._add_label("Note:", r)
        self._note_var = ctk.StringVar(value=expense.note if expense else "")
        ctk.CTkEntry(self, textvariable=self._note_var, width=220).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=280, anchor="w",
        ).grid(row=r, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")
        r += 1

        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=r, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")
        ctk.CTkButton(
            btn_frame, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"), command=self.destroy,
        ).pack(side="left")
        if expense:
            ctk.CTkButton(
                btn_frame, text="Delete", width=80,
                fg_color="#F44336", hover_color="#D32F2F",
                command=self._on_delete,
            ).pack(side="left", padx=8)
        ctk.CTkButton(btn_frame, text="Save", width=90, command=self._on_save).pack(side="right")

        self.transient(master)
        self.grab_set()
        center_on_master(self)

    def _add_label(self, text, row):
        ctk.CTkLabel(self, text=text).grid(row=row, column=0, padx=(16, 8), pady=4, sticky="e")

    def _on_freq_change(self, value=None):
        for w in self._interval_frame.winfo_children():
            w.destroy()
        if self._freq_var.get() == "custom":
            ctk.CTkLabel(self._interval_frame, text="Every").grid(row=0, column=0, padx=(0, 8))
            ctk.CTkEntry(self._interval_frame, textvariable=self._interval_var, width=60).grid(
                row=0, column=1
            )
            ctk.CTkLabel(self._interval_frame, text="days").grid(row=0, column=2, padx=(8, 0))

    def _on_save(self):
        try:
            amount = float(self._amount_var.get())
        except ValueError:
            self._error_var.set("Invalid amount.")
            return
        interval = 1
        if self._freq_var.get() == "custom":
            try:
                interval = int(self._interval_var.get())
            except ValueError:
                self._error_var.set("Interval must be a whole number of days.")
                return
        next_due = self._due_picker.get()
        if next_due is None:
            self._error_var.set("Invalid next due date.")
            return
        end_date = None
        if not self._end_picker.is_empty():
            end_date = self._end_picker.get()
            if end_date is None:
                self._error_var.set("Invalid end date.")
                return

        fields = dict(
            title=self._title_var.get(), amount=amount, category=self._cat_var.get(),
            frequency=self._freq_var.get(), next_due_date=next_due,
            custom_interval_days=interval, end_date=end_date, note=self._note_var.get(),
        )
        try:
            if self._expense:
                self._svc.update(self._expense.id, is_active=self._expense.is_active, **fields)
            else:
                self._svc.create(**fields)
        except ValueError as e:
            self._error_var.set(str(e))
            return
        self.saved = True
        self.destroy()

    def _on_delete(self):
        dialog = ConfirmDialog(
            self, "Delete Recurring Expense",
            f"Delete '{self._expense.title}'? Past payments are kept.",
        )
        if dialog.result:
            self._svc.delete(self._expense.id)
            self.saved = True
            self.destroy()
