from datetime import date

import pytest

from services.recurrence_clock import advance, days_until, monthly_factor, occurrences_through


def test_monthly_clamps_to_month_end():
    assert advance(date(2024, 1, 31), "monthly") == date(2024, 2, 29)
    assert advance(date(2023, 1, 31), "monthly") == date(2023, 2, 28)
    assert advance(date(2024, 3, 31), "monthly") == date(2024, 4, 30)


def test_monthly_carries_into_next_year():
    assert advance(date(2024, 12, 15), "monthly") == date(2025, 1, 15)


def test_yearly_leap_day_falls_back_to_feb_28():
    assert advance(date(2024, 2, 29), "yearly") == date(2025, 2, 28)
    assert advance(date(2023, 6, 1), "yearly") == date(2024, 6, 1)


def test_daily_and_weekly_offsets():
    assert advance(date(2024, 2, 28), "daily") == date(2024, 2, 29)
    assert advance(date(2024, 12, 28), "weekly") == date(2025, 1, 4)


def test_custom_uses_interval_and_defaults_to_one_day():
    assert advance(date(2024, 1, 1), "custom") == date(2024, 1, 2)
    assert advance(date(2024, 1, 1), "custom", 10) == date(2024, 1, 11)
    assert advance(date(2024, 1, 1), "custom", 0) == date(2024, 1, 2)


def test_unknown_frequency_raises():
    with pytest.raises(ValueError):
        advance(date(2024, 1, 1), "fortnightly")


def test_days_until_is_negative_when_overdue():
    assert days_until(date(2024, 3, 10), date(2024, 3, 15)) == -5
    assert days_until(date(2024, 3, 15), date(2024, 3, 15)) == 0
    assert days_until(date(2024, 3, 22), date(2024, 3, 15)) == 7


def test_occurrences_through_stops_at_reference_and_end():
    dates = occurrences_through(date(2024, 1, 1), "weekly", date(2024, 1, 22))
    assert dates == [date(2024, 1, 1), date(2024, 1, 8), date(2024, 1, 15), date(2024, 1, 22)]

    capped = occurrences_through(date(2024, 1, 1), "weekly", date(2024, 1, 22), end=date(2024, 1, 10))
    assert capped == [date(2024, 1, 1), date(2024, 1, 8)]

    assert occurrences_through(date(2024, 2, 1), "monthly", date(2024, 1, 31)) == []


def test_monthly_factor():
    assert monthly_factor("monthly") == 1.0
    assert monthly_factor("weekly") == 4.33
    assert monthly_factor("custom", 15) == 2.0
    with pytest.raises(ValueError):
        monthly_factor("hourly")
