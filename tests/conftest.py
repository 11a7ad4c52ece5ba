# tests/conftest.py
from datetime import date

import pytest

from engine.schema import DistributionEvent, PricePoint


@pytest.fixture
def scenario_prices():
    """Three closes with a gap over the first week of January 2024."""
    return [
        PricePoint(date(2024, 1, 1), 100.0),
        PricePoint(date(2024, 1, 3), 102.0),
        PricePoint(date(2024, 1, 10), 105.0),
    ]


@pytest.fixture
def scenario_distributions():
    return [DistributionEvent(date(2024, 1, 2), 1.0)]


@pytest.fixture
def weekly_distributions():
    """A weekly payer that skipped four weeks before its two most recent payments."""
    ex_dates = [
        date(2024, 1, 5), date(2024, 1, 12), date(2024, 1, 19), date(2024, 1, 26),
        date(2024, 2, 2), date(2024, 2, 9), date(2024, 2, 16),
        date(2024, 3, 15), date(2024, 3, 22),
    ]
    return [DistributionEvent(d, 0.25) for d in ex_dates]


@pytest.fixture
def happy_path_payload():
    """Provides a standard, valid snake_case payload for the DRIP period endpoint."""
    return {
        "ticker": "TEST",
        "prices": [
            {"date": "2024-01-01", "close": 100.0},
            {"date": "2024-01-03", "close": 102.0},
            {"date": "2024-01-10", "close": 105.0},
        ],
        "distributions": [{"ex_date": "2024-01-02", "amount": 1.0}],
        "start_date": "2024-01-01",
        "end_date": "2024-01-10",
        "options": {"pay_offset_days": 2, "use_business_days": False},
    }
