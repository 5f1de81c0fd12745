import customtkinter as ctk
from utils.constants import SEVERITY_COLORS


class AlertBanner(ctk.CTkFrame):
    """Dismissible banner for reminders and startup notices.

    ``severity`` picks the background from SEVERITY_COLORS; an optional
    ``detail`` is shown as a smaller second line.
    """

    def __init__(self, master, message: str, detail: str = "", severity: str = "info",
                 action_text: str | None = None, action_cmd=None, **kwargs):
        super().__init__(
            master, fg_color=SEVERITY_COLORS.get(severity, SEVERITY_COLORS["info"]),
            corner_radius=6, **kwargs,
        )
        self.severity = severity
        self.grid_columnconfigure(0, weight=1)

        text_frame = ctk.CTkFrame(self, fg_color="transparent")
        text_frame.grid(row=0, column=0, sticky="ew", padx=10, pady=4)
        ctk.CTkLabel(
            text_frame, text=message, text_color="white", anchor="w",
            font=ctk.CTkFont(weight="bold"),
        ).pack(fill="x")
        if detail:
            ctk.CTkLabel(
                text_frame, text=detail, text_color="white", anchor="w",
                font=ctk.CTkFont(size=11),
            ).pack(fill="x")

        if action_text and action_cmd:
            ctk.CTkButton(
                self, text=action_text, width=60, height=24,
                fg_color="transparent", border_width=1, border_color="white",
                text_color="white", command=action_cmd,
            ).grid(row=0, column=1, padx=2)
        ctk.CTkButton(
            self, text="✕", width=28, height=24,
            fg_color="transparent", text_color="white",
            command=self.destroy,
        ).grid(row=0, column=2, padx=(0, 4))
