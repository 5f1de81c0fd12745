APP_NAME = "Ledgerify"
APP_WIDTH = 1100
APP_HEIGHT = 720
DB_FILE = "ledgerify.db"

DATE_FORMAT = "%Y-%m-%d"
UPCOMING_REMINDER_DAYS = 7
DUE_SOON_DAYS = 3
MAX_ALLOCATION_PERCENTAGE = 100.0

FREQUENCIES = ["daily", "weekly", "monthly", "yearly", "custom"]

FREQUENCY_LABELS = {
    "daily":   "Daily",
    "weekly":  "Weekly",
    "monthly": "Monthly",
    "yearly":  "Yearly",
    "custom":  "Custom",
}

# Approximate occurrences per month, used for monthly estimates only
MONTHLY_FACTORS = {
    "daily":   30.0,
    "weekly":  4.33,
    "monthly": 1.0,
    "yearly":  1 / 12,
}

INCOME_SOURCES = ["salary", "freelance", "business", "investment", "gift", "refund", "other"]

INCOME_SOURCE_LABELS = {
    "salary":     "Salary",
    "freelance":  "Freelance Income",
    "business":   "Business Income",
    "investment": "Investment Returns",
    "gift":       "Gift",
    "refund":     "Refund",
    "other":      "Other",
}

EXPENSE_CATEGORIES = [
    "food", "transport", "shopping", "entertainment",
    "bills", "health", "education", "other",
]

TYPE_FILTERS = ["all", "income", "expenses"]

TYPE_FILTER_LABELS = {
    "all":      "All",
    "income":   "Income",
    "expenses": "Expenses",
}

SEVERITY_COLORS = {
    "error":   "#F44336",
    "warning": "#FF9800",
    "info":    "#2196F3",
}

DEFAULT_GOAL_COLOR = "#A8E6CF"
