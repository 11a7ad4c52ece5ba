# engine/dates.py
from datetime import date, timedelta

import pandas as pd


def add_calendar_days(day: date, days: int) -> date:
    """Adds calendar days to a naive date."""
    return day + timedelta(days=days)


def add_business_days(day: date, days: int) -> date:
    """
    Adds business days, skipping Saturdays and Sundays only (no holiday calendar).
    Counting starts on the following day, so a weekend start lands on the
    n-th following weekday. Non-positive offsets return the date unchanged.
    """
    if days <= 0:
        return day
    return (pd.Timestamp(day) + pd.offsets.BDay(days)).date()


def to_iso(day: date) -> str:
    return day.isoformat()
