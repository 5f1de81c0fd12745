import customtkinter as ctk
from dataclasses import replace
from models.goal import Goal
from services.goal_service import GoalService
from ui.components.confirm_dialog import ConfirmDialog, center_on_master
from ui.components.date_picker import DatePickerWidget
from utils.constants import DEFAULT_GOAL_COLOR

GOAL_COLORS = ["#A8E6CF", "#FFD3B6", "#FFAAA5", "#D4A5FF", "#A0C4FF", "#FDFFB6"]


class GoalForm(ctk.CTkToplevel):
    def __init__(
        self,
        master,
        goal_service: GoalService,
        goal: Goal | None = None,
        date_format: str = "DD/MM/YYYY",
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._svc = goal_service
        self._goal = goal
        self.saved = False

        self.title("Edit Goal" if goal else "New Goal")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        ctk.CTkLabel(self, text="Name:").grid(row=0, column=0, padx=(16, 8), pady=(16, 4), sticky="e")
        self._name_var = ctk.StringVar(value=goal.name if goal else "")
        ctk.CTkEntry(self, textvariable=self._name_var, width=220).grid(
            row=0, column=1, padx=(0, 16), pady=(16, 4), sticky="ew"
        )

        ctk.CTkLabel(self, text="Target:").grid(row=1, column=0, padx=(16, 8), pady=4, sticky="e")
        self._target_var = ctk.StringVar(value=f"{goal.target_amount:.2f}" if goal else "")
        ctk.CTkEntry(self, textvariable=self._target_var, width=220).grid(
            row=1, column=1, padx=(0, 16), pady=4, sticky="ew"
        )

        ctk.CTkLabel(self, text="Color:").grid(row=2, column=0, padx=(16, 8), pady=4, sticky="e")
        self._color_var = ctk.StringVar(value=goal.color_hex if goal else DEFAULT_GOAL_COLOR)
        swatches = ctk.CTkFrame(self, fg_color="transparent")
        swatches.grid(row=2, column=1, padx=(0, 16), pady=4, sticky="w")
        for color in GOAL_COLORS:
            ctk.CTkRadioButton(
                swatches, text="", width=24, variable=self._color_var, value=color,
                fg_color=color, hover_color=color,
            ).pack(side="left", padx=2)

        ctk.CTkLabel(self, text="Deadline:").grid(row=3, column=0, padx=(16, 8), pady=4, sticky="e")
        self._deadline_picker = DatePickerWidget(
            self, initial_date=goal.deadline if goal else None, date_format=date_format,
        )
        self._deadline_picker.grid(row=3, column=1, padx=(0, 16), pady=4, sticky="w")

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var, text_color="#F44336", wraplength=300,
        ).grid(row=4, column=0, columnspan=2, padx=16, pady=(0, 4))

        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=5, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")
        ctk.CTkButton(
            btn_frame, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"), command=self.destroy,
        ).pack(side="left")
        if goal:
            ctk.CTkButton(
                btn_frame, text="Delete", width=80,
                fg_color="#F44336", hover_color="#D32F2F",
                command=self._on_delete,
            ).pack(side="left", padx=8)
        ctk.CTkButton(btn_frame, text="Save", width=90, command=self._on_save).pack(side="right")

        self.transient(master)
        self.grab_set()
        center_on_master(self)

    def _on_save(self):
        try:
            target = float(self._target_var.get())
        except ValueError:
            self._error_var.set("Invalid target amount.")
            return
        if not self._deadline_picker.is_empty() and not self._deadline_picker.is_valid():
            self._error_var.set("Invalid deadline.")
            return
        deadline = self._deadline_picker.get()
        try:
            if self._goal:
                self._svc.update(replace(
                    self._goal, name=self._name_var.get(), target_amount=target,
                    color_hex=self._color_var.get(), deadline=deadline,
                ))
            else:
                self._svc.create(self._name_var.get(), target, self._color_var.get(), deadline)
        except ValueError as e:
            self._error_var.set(str(e))
            return
        self.saved = True
        self.destroy()

    def _on_delete(self):
        dialog = ConfirmDialog(
            self, "Delete Goal",
            f"Delete goal '{self._goal.name}'? Income allocations to it are removed.",
        )
        if dialog.result:
            self._svc.delete(self._goal.id)
            self.saved = True
            self.destroy()
