# tests/unit/engine/test_dates.py
from datetime import date

import pytest

from engine.dates import add_business_days, add_calendar_days, to_iso


@pytest.mark.parametrize(
    "start, days, expected",
    [
        (date(2024, 1, 2), 2, date(2024, 1, 4)),
        (date(2024, 1, 31), 1, date(2024, 2, 1)),
        (date(2024, 2, 28), 1, date(2024, 2, 29)),  # leap year
        (date(2023, 12, 31), 1, date(2024, 1, 1)),
        (date(2024, 1, 10), -3, date(2024, 1, 7)),
    ],
)
def test_add_calendar_days(start, days, expected):
    assert add_calendar_days(start, days) == expected


@pytest.mark.parametrize(
    "start, days, expected",
    [
        (date(2024, 1, 2), 2, date(2024, 1, 4)),   # Tue -> Thu
        (date(2024, 1, 4), 2, date(2024, 1, 8)),   # Thu -> Mon over the weekend
        (date(2024, 1, 5), 2, date(2024, 1, 9)),   # Fri -> Tue
        (date(2024, 1, 6), 1, date(2024, 1, 8)),   # Sat -> Mon
        (date(2024, 1, 7), 2, date(2024, 1, 9)),   # Sun -> Tue
        (date(2024, 1, 5), 5, date(2024, 1, 12)),  # a full business week
    ],
)
def test_add_business_days_skips_weekends(start, days, expected):
    assert add_business_days(start, days) == expected


@pytest.mark.parametrize("days", [0, -1])
def test_add_business_days_non_positive_offset_is_identity(days):
    saturday = date(2024, 1, 6)
    assert add_business_days(saturday, days) == saturday


def test_add_business_days_ignores_holidays():
    """2024-01-15 is a US market holiday; it still counts as a business day."""
    assert add_business_days(date(2024, 1, 12), 1) == date(2024, 1, 15)


def test_to_iso():
    assert to_iso(date(2024, 3, 5)) == "2024-03-05"
