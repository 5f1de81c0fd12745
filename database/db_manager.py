import logging
import os
import sqlite3
from typing import Callable
from utils.constants import DB_FILE, UPCOMING_REMINDER_DAYS

logger = logging.getLogger(__name__)

ChangeListener = Callable[[str], None]


class DatabaseManager:
    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or DB_FILE
        self._conn: sqlite3.Connection | None = None
        self._listeners: list[ChangeListener] = []

    def get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA foreign_keys = ON")
            self._conn.execute("PRAGMA journal_mode = WAL")
        return self._conn

    def initialize(self):
        """Create schema and seed defaults."""
        conn = self.get_connection()
        self._create_schema(conn)
        self._seed_defaults(conn)
        conn.commit()

    def _create_schema(self, conn: sqlite3.Connection):
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS recurring_expenses (
                id                   INTEGER PRIMARY KEY AUTOINCREMENT,
                title                TEXT NOT NULL,
                amount               REAL NOT NULL CHECK(amount > 0),
                category             TEXT NOT NULL DEFAULT 'other',
                frequency            TEXT NOT NULL
                    CHECK(frequency IN ('daily','weekly','monthly','yearly','custom')),
                custom_interval_days INTEGER NOT NULL DEFAULT 1 CHECK(custom_interval_days >= 1),
                next_due_date        TEXT NOT NULL,
                end_date             TEXT,
                is_active            INTEGER NOT NULL DEFAULT 1,
                last_paid_date       TEXT,
                note                 TEXT NOT NULL DEFAULT '',
                created_at           TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE TABLE IF NOT EXISTS recurring_incomes (
                id                  INTEGER PRIMARY KEY AUTOINCREMENT,
                amount              REAL NOT NULL CHECK(amount > 0),
                source              TEXT NOT NULL DEFAULT 'other',
                description         TEXT,
                frequency           TEXT NOT NULL
                    CHECK(frequency IN ('daily','weekly','monthly','yearly','custom')),
                next_date           TEXT NOT NULL,
                is_active           INTEGER NOT NULL DEFAULT 1,
                last_generated_date TEXT,
                created_at          TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE TABLE IF NOT EXISTS goals (
                id             INTEGER PRIMARY KEY AUTOINCREMENT,
                name           TEXT NOT NULL,
                target_amount  REAL NOT NULL CHECK(target_amount > 0),
                current_amount REAL NOT NULL DEFAULT 0.0,
                color_hex      TEXT NOT NULL DEFAULT '#A8E6CF',
                deadline       TEXT,
                is_completed   INTEGER NOT NULL DEFAULT 0,
                created_at     TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE TABLE IF NOT EXISTS goal_allocations (
                income_id  INTEGER NOT NULL REFERENCES recurring_incomes(id) ON DELETE CASCADE,
                goal_id    INTEGER NOT NULL REFERENCES goals(id) ON DELETE CASCADE,
                position   INTEGER NOT NULL,
                percentage REAL NOT NULL CHECK(percentage >= 0),
                amount     REAL NOT NULL DEFAULT 0.0,
                PRIMARY KEY (income_id, goal_id)
            );

            CREATE TABLE IF NOT EXISTS transactions (
                id                   INTEGER PRIMARY KEY AUTOINCREMENT,
                type                 TEXT NOT NULL CHECK(type IN ('income','expense')),
                amount               REAL NOT NULL CHECK(amount > 0),
                category             TEXT NOT NULL DEFAULT '',
                description          TEXT NOT NULL DEFAULT '',
                date                 TEXT NOT NULL,
                recurring_expense_id INTEGER REFERENCES recurring_expenses(id) ON DELETE SET NULL,
                recurring_income_id  INTEGER REFERENCES recurring_incomes(id) ON DELETE SET NULL,
                created_at           TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE INDEX IF NOT EXISTS idx_transactions_date       ON transactions(date);
            CREATE INDEX IF NOT EXISTS idx_goal_allocations_income ON goal_allocations(income_id);

            CREATE TABLE IF NOT EXISTS app_settings (
                key   TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );
        """)

    def _seed_defaults(self, conn: sqlite3.Connection):
        defaults = [
            ("appearance_mode", "system"),
            ("currency_symbol", "₹"),
            ("upcoming_days", str(UPCOMING_REMINDER_DAYS)),
            ("date_format", "DD/MM/YYYY"),
            ("auto_generate_recurring", "0"),
        ]
        for key, value in defaults:
            conn.execute(
                "INSERT OR IGNORE INTO app_settings(key, value) VALUES (?, ?)",
                (key, value),
            )

    def get_setting(self, key: str, default: str = "") -> str:
        conn = self.get_connection()
        row = conn.execute(
            "SELECT value FROM app_settings WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else default

    def set_setting(self, key: str, value: str):
        conn = self.get_connection()
        conn.execute(
            "INSERT OR REPLACE INTO app_settings(key, value) VALUES (?, ?)",
            (key, value),
        )
        conn.commit()
        self.notify("app_settings")

    # ── Change notification ───────────────────────────────────────────────────
    def subscribe(self, listener: ChangeListener):
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: ChangeListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def notify(self, table: str):
        """Tell every subscriber that ``table`` changed. Called after commit."""
        logger.debug("change notification: %s", table)
        for listener in list(self._listeners):
            listener(table)

    @staticmethod
    def open(db_folder: str | None = None) -> "DatabaseManager":
        """Startup factory: opens (and creates if needed) the app database.

        db_folder: if provided, the DB file is stored in that directory instead of CWD.
        """
        if db_folder:
            os.makedirs(db_folder, exist_ok=True)
            path = os.path.join(db_folder, DB_FILE)
        else:
            path = DB_FILE
        logger.info("Opening database %s", path)
        db = DatabaseManager(path)
        db.initialize()
        return db

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None
