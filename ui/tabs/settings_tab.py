import logging
import customtkinter as ctk
from tkinter import filedialog

from database.db_manager import DatabaseManager
from utils.app_config import get_db_folder, set_db_folder
from utils.constants import DB_FILE
from utils.date_helpers import DATE_FORMAT_OPTIONS

logger = logging.getLogger(__name__)

_RESTART_NOTE = "Restart the app for the change to take effect."
_DEFAULT_FOLDER_TEXT = "(default: app folder)"


class SettingsTab(ctk.CTkFrame):
    """Settings tab: DB folder and app preferences."""

    def __init__(self, master, db: DatabaseManager, **kwargs):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._db = db

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)

        scroll = ctk.CTkScrollableFrame(self, fg_color="transparent")
        scroll.grid(row=0, column=0, sticky="nsew")
        scroll.grid_columnconfigure(0, weight=1)

        self._build_db_folder_section(scroll)
        self._build_app_settings_section(scroll)

    def refresh(self):
        """Re-read settings from DB and update displayed values."""
        appearance = self._db.get_setting("appearance_mode", "system")
        self._appearance_var.set(appearance.title())
        self._currency_var.set(self._db.get_setting("currency_symbol", "₹"))
        date_fmt = self._db.get_setting("date_format", "DD/MM/YYYY")
        if date_fmt in DATE_FORMAT_OPTIONS:
            self._date_fmt_var.set(date_fmt)
        self._upcoming_var.set(self._db.get_setting("upcoming_days", "7"))
        self._auto_generate_var.set(self._db.get_setting("auto_generate_recurring", "0") == "1")

    # ── Section 1: DB folder ──────────────────────────────────────────────────

    def _build_db_folder_section(self, parent):
        section = self._make_section(parent, "Database Folder", row=0)

        ctk.CTkLabel(
            section,
            text=f"The database file ({DB_FILE}) is stored in this folder.",
            text_color="gray60",
            font=ctk.CTkFont(size=11),
            anchor="w",
        ).grid(row=0, column=0, columnspan=3, sticky="w", padx=8, pady=(4, 6))

        self._db_folder_var = ctk.StringVar(value=get_db_folder() or _DEFAULT_FOLDER_TEXT)
        ctk.CTkEntry(
            section, textvariable=self._db_folder_var,
            state="readonly", width=340,
        ).grid(row=1, column=0, padx=(8, 4), pady=4, sticky="ew")
        section.grid_columnconfigure(0, weight=1)

        ctk.CTkButton(
            section, text="Browse…", width=90,
            command=self._browse_db_folder,
        ).grid(row=1, column=1, padx=4)

        ctk.CTkButton(
            section, text="Reset to Default", width=120,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self._reset_db_folder,
        ).grid(row=1, column=2, padx=(4, 8))

        self._db_restart_label = ctk.CTkLabel(
            section, text="", text_color="#FF9800",
            font=ctk.CTkFont(size=11), anchor="w",
        )
        self._db_restart_label.grid(row=2, column=0, columnspan=3, sticky="w", padx=8, pady=(0, 6))

    def _browse_db_folder(self):
        path = filedialog.askdirectory(title="Choose DB folder")
        if path:
            self._change_db_folder(path)

    def _reset_db_folder(self):
        self._change_db_folder(None)

    def _change_db_folder(self, path: str | None):
        try:
            set_db_folder(path)
        except OSError as e:
            logger.error("Could not save DB folder: %s", e)
            self._db_restart_label.configure(text=f"Could not save config: {e}", text_color="#F44336")
            return
        self._db_folder_var.set(path or _DEFAULT_FOLDER_TEXT)
        self._db_restart_label.configure(text=_RESTART_NOTE, text_color="#FF9800")

    # ── Section 2: App settings ───────────────────────────────────────────────

    def _build_app_settings_section(self, parent):
        section = self._make_section(parent, "App Settings", row=1)

        self._appearance_var = ctk.StringVar(
            value=self._db.get_setting("appearance_mode", "system").title()
        )
        self._add_row(section, 0, "Appearance:", ctk.CTkComboBox(
            section, values=["System", "Light", "Dark"],
            variable=self._appearance_var, width=180, state="readonly",
        ))

        self._currency_var = ctk.StringVar(value=self._db.get_setting("currency_symbol", "₹"))
        self._add_row(section, 1, "Currency Symbol:", ctk.CTkEntry(
            section, textvariable=self._currency_var, width=60,
        ))

        self._date_fmt_var = ctk.StringVar(value=self._db.get_setting("date_format", "DD/MM/YYYY"))
        self._add_row(section, 2, "Date Format:", ctk.CTkComboBox(
            section, values=DATE_FORMAT_OPTIONS,
            variable=self._date_fmt_var, width=180, state="readonly",
        ))

        self._upcoming_var = ctk.StringVar(value=self._db.get_setting("upcoming_days", "7"))
        self._add_row(section, 3, "Upcoming Window:", ctk.CTkEntry(
            section, textvariable=self._upcoming_var, width=60,
        ))

        self._auto_generate_var = ctk.BooleanVar(
            value=self._db.get_setting("auto_generate_recurring", "0") == "1"
        )
        self._add_row(section, 4, "On Startup:", ctk.CTkCheckBox(
            section, text="Record missed recurring items automatically",
            variable=self._auto_generate_var,
        ))

        ctk.CTkLabel(
            section,
            text="Display changes take effect on next app restart.",
            text_color="gray60",
            font=ctk.CTkFont(size=11),
            anchor="w",
        ).grid(row=5, column=0, columnspan=2, sticky="w", padx=8)

        ctk.CTkButton(
            section, text="Save Settings", width=140,
            command=self._save_settings,
        ).grid(row=6, column=0, columnspan=2, pady=(10, 8))

        self._settings_status_var = ctk.StringVar()
        self._settings_status_label = ctk.CTkLabel(
            section, textvariable=self._settings_status_var,
            text_color="#4CAF50", font=ctk.CTkFont(size=11),
        )
        self._settings_status_label.grid(row=7, column=0, columnspan=2, pady=(0, 8))

    def _save_settings(self):
        try:
            upcoming_days = int(self._upcoming_var.get())
        except ValueError:
            upcoming_days = -1
        if upcoming_days < 0:
            self._settings_status_label.configure(text_color="#F44336")
            self._settings_status_var.set("Upcoming window must be a whole number of days.")
            return

        appearance_key = self._appearance_var.get().lower()
        self._db.set_setting("appearance_mode", appearance_key)
        self._db.set_setting("currency_symbol", self._currency_var.get().strip() or "₹")
        self._db.set_setting("date_format", self._date_fmt_var.get())
        self._db.set_setting("upcoming_days", str(upcoming_days))
        self._db.set_setting("auto_generate_recurring", "1" if self._auto_generate_var.get() else "0")
        ctk.set_appearance_mode(appearance_key)
        self._settings_status_label.configure(text_color="#4CAF50")
        self._settings_status_var.set("Settings saved.")

    # ── Helpers ───────────────────────────────────────────────────────────────

    def _add_row(self, section, row: int, label: str, widget):
        ctk.CTkLabel(section, text=label, anchor="e", width=130).grid(
            row=row, column=0, padx=(8, 4), pady=6, sticky="e"
        )
        widget.grid(row=row, column=1, padx=4, pady=6, sticky="w")

    def _make_section(self, parent, title: str, row: int) -> ctk.CTkFrame:
        """Create a labelled card section and return its inner frame."""
        outer = ctk.CTkFrame(parent, corner_radius=8)
        outer.grid(row=row, column=0, sticky="ew", padx=12, pady=8)
        outer.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(
            outer,
            text=title,
            font=ctk.CTkFont(size=14, weight="bold"),
            anchor="w",
        ).grid(row=0, column=0, sticky="w", padx=12, pady=(10, 4))

        inner = ctk.CTkFrame(outer, fg_color="transparent")
        inner.grid(row=1, column=0, sticky="ew", padx=4, pady=(0, 8))
        inner.grid_columnconfigure(0, weight=1)
        return inner
