"""Next-occurrence arithmetic for recurring items.

All functions are pure; callers pass ``today`` explicitly.
"""
from datetime import date, timedelta
from utils.constants import FREQUENCIES, MONTHLY_FACTORS
from utils.date_helpers import add_months, add_years


def advance(d: date, frequency: str, interval_days: int = 1) -> date:
    """Return the occurrence after ``d`` for the given frequency.

    ``interval_days`` only applies to 'custom'; the default of 1 makes an
    unconfigured custom item recur daily.
    """
    if frequency == "daily":
        return d + timedelta(days=1)
    if frequency == "weekly":
        return d + timedelta(days=7)
    if frequency == "monthly":
        return add_months(d, 1)
    if frequency == "yearly":
        return add_years(d, 1)
    if frequency == "custom":
        return d + timedelta(days=max(1, interval_days))
    raise ValueError(f"Unknown frequency: {frequency!r}")


def days_until(target: date, ref: date) -> int:
    """Whole days from ``ref`` to ``target``; negative when overdue."""
    return (target - ref).days


def occurrences_through(start: date, frequency: str, ref: date,
                        interval_days: int = 1, end: date | None = None) -> list[date]:
    """Every occurrence from ``start`` up to and including ``ref`` (and ``end``)."""
    result = []
    current = start
    while current <= ref and (end is None or current <= end):
        result.append(current)
        current = advance(current, frequency, interval_days)
    return result


def monthly_factor(frequency: str, interval_days: int = 1) -> float:
    if frequency == "custom":
        return 30.0 / max(1, interval_days)
    if frequency not in FREQUENCIES:
        raise ValueError(f"Unknown frequency: {frequency!r}")
    return MONTHLY_FACTORS[frequency]
