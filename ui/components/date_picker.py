import tkinter as tk
from datetime import date
from tkinter import ttk
import customtkinter as ctk
from tkcalendar import Calendar
from utils.date_helpers import format_display_date, parse_display_date


class DatePickerWidget(ctk.CTkFrame):
    """Entry in the display format plus a calendar popup.

    .get() returns a ``date`` or None; .set() accepts a ``date`` or None.
    """

    def __init__(self, master, initial_date: date | None = None,
                 date_format: str = "DD/MM/YYYY", **kwargs):
        super().__init__(master, fg_color="transparent", **kwargs)
        self.grid_columnconfigure(0, weight=1)
        self._date_format = date_format
        self._popup: ctk.CTkToplevel | None = None

        self._var = tk.StringVar(value=format_display_date(initial_date, date_format) if initial_date else "")
        self._entry = ctk.CTkEntry(self, textvariable=self._var, width=110)
        self._entry.grid(row=0, column=0, sticky="ew")
        self._entry.bind("<FocusOut>", self._on_focus_out)
        self._entry.bind("<Return>", self._on_focus_out)

        ctk.CTkButton(self, text="📅", width=32, command=self._open_popup).grid(
            row=0, column=1, padx=(4, 0)
        )

    def get(self) -> date | None:
        return parse_display_date(self._var.get().strip(), self._date_format)

    def set(self, value: date | None):
        self._var.set(format_display_date(value, self._date_format) if value else "")
        self._reset_border()

    def is_empty(self) -> bool:
        return not self._var.get().strip()

    def is_valid(self) -> bool:
        return self.get() is not None

    def _on_focus_out(self, _event=None):
        if self.is_empty():
            self._reset_border()
            return
        d = self.get()
        if d:
            self.set(d)
        else:
            self._entry.configure(border_color="#F44336")

    def _reset_border(self):
        self._entry.configure(border_color=("gray65", "gray35"))

    def _open_popup(self):
        if self._popup and self._popup.winfo_exists():
            self._popup.destroy()
            self._popup = None
            return

        popup = ctk.CTkToplevel(self)
        popup.overrideredirect(True)
        popup.resizable(False, False)
        self._popup = popup

        dark = ctk.get_appearance_mode() == "Dark"
        bg, fg = ("#2b2b2b", "#ffffff") if dark else ("#ffffff", "#000000")
        style = ttk.Style(popup)
        style.theme_use("default")

        current = self.get() or date.today()
        cal = Calendar(
            popup,
            selectmode="day",
            year=current.year, month=current.month, day=current.day,
            date_pattern="yyyy-mm-dd",
            background=bg, foreground=fg,
            headersbackground=bg, headersforeground=fg,
            selectbackground="#1f6aa5",
            weekendbackground=bg, weekendforeground=fg,
            othermonthforeground="gray60", bordercolor=bg,
        )
        cal.pack(padx=4, pady=4)
        cal.bind("<<CalendarSelected>>", lambda e: self._on_date_selected(cal, popup))

        self._entry.update_idletasks()
        x = self._entry.winfo_rootx()
        y = self._entry.winfo_rooty() + self._entry.winfo_height() + 2
        popup.geometry(f"+{x}+{y}")

    def _on_date_selected(self, cal: Calendar, popup):
        self.set(cal.selection_get())
        popup.destroy()
        self._popup = None
