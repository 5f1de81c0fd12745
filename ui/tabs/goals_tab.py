import customtkinter as ctk
from models.goal import Goal
from services.goal_service import GoalService
from ui.components.goal_form import GoalForm
from utils.currency import format_currency
from utils.date_helpers import format_display_date


class GoalsTab(ctk.CTkFrame):
    """Savings goals with their progress; recurring income allocations fund them."""

    def __init__(
        self,
        master,
        goal_service: GoalService,
        date_format: str = "DD/MM/YYYY",
        currency_symbol: str = "₹",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = goal_service
        self._date_format = date_format
        self._symbol = currency_symbol

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))
        ctk.CTkLabel(
            bar, text="Savings Goals",
            font=ctk.CTkFont(size=14, weight="bold"),
        ).pack(side="left", padx=12, pady=8)
        ctk.CTkButton(bar, text="+ Add Goal", command=self._open_add).pack(
            side="right", padx=8, pady=6
        )

        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=1, column=0, sticky="nsew", padx=8, pady=8)
        self._scroll.grid_columnconfigure(0, weight=1)

        self._load()

    def refresh(self):
        self._load()

    def _load(self):
        for w in self._scroll.winfo_children():
            w.destroy()

        active = self._svc.get_active_goals()
        completed = self._svc.get_completed_goals()
        if not active and not completed:
            ctk.CTkLabel(
                self._scroll,
                text="No goals yet. Click '+ Add Goal' to create one.",
                text_color="gray60",
            ).grid(row=0, column=0, pady=40)
            return

        row = 0
        for title, goals in (("In Progress", active), ("Completed", completed)):
            if not goals:
                continue
            ctk.CTkLabel(
                self._scroll, text=title, anchor="w",
                font=ctk.CTkFont(size=13, weight="bold"),
            ).grid(row=row, column=0, sticky="ew", padx=4, pady=(10, 2))
            row += 1
            for goal in goals:
                self._add_card(row, goal)
                row += 1

    def _add_card(self, idx, goal: Goal):
        card = ctk.CTkFrame(self._scroll, corner_radius=6)
        card.grid(row=idx, column=0, sticky="ew", pady=3, padx=2)
        card.grid_columnconfigure(1, weight=1)

        ctk.CTkFrame(card, width=8, fg_color=goal.color_hex, corner_radius=4).grid(
            row=0, column=0, rowspan=2, sticky="ns", padx=(6, 8), pady=6
        )
        ctk.CTkLabel(card, text=goal.name, anchor="w", font=ctk.CTkFont(weight="bold")).grid(
            row=0, column=1, sticky="ew", pady=(6, 0)
        )
        detail = (
            f"{format_currency(goal.current_amount, self._symbol)} of "
            f"{format_currency(goal.target_amount, self._symbol)}"
        )
        if goal.deadline:
            detail += f" · by {format_display_date(goal.deadline, self._date_format)}"
        ctk.CTkLabel(card, text=detail, anchor="e", text_color="gray60").grid(
            row=0, column=2, padx=8, pady=(6, 0)
        )

        bar = ctk.CTkProgressBar(card, progress_color=goal.color_hex)
        bar.set(min(goal.progress, 1.0))
        bar.grid(row=1, column=1, columnspan=2, sticky="ew", padx=(0, 8), pady=(2, 8))

        acts = ctk.CTkFrame(card, fg_color="transparent")
        acts.grid(row=0, column=3, rowspan=2, padx=(4, 8))
        ctk.CTkButton(
            acts, text="Edit", width=44, height=24,
            command=lambda g=goal: self._open_edit(g),
        ).pack(side="left", padx=2)
        ctk.CTkButton(
            acts, text="Reopen" if goal.is_completed else "Complete", width=74, height=24,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=lambda g=goal: self._toggle_completed(g),
        ).pack(side="left", padx=2)

    def _open_add(self):
        form = GoalForm(self.winfo_toplevel(), self._svc, date_format=self._date_format)
        self.wait_window(form)

    def _open_edit(self, goal: Goal):
        form = GoalForm(self.winfo_toplevel(), self._svc, goal=goal, date_format=self._date_format)
        self.wait_window(form)

    def _toggle_completed(self, goal: Goal):
        if goal.is_completed:
            self._svc.reopen(goal.id)
        else:
            self._svc.mark_completed(goal.id)
