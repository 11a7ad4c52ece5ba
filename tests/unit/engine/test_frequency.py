# tests/unit/engine/test_frequency.py
from datetime import date, timedelta

import pytest
from common.enums import DistributionFrequency
from engine.config import FrequencyThresholds
from engine.frequency import infer_frequency
from engine.schema import DistributionEvent


def _stream(spacing_days: int, count: int = 5):
    first = date(2023, 1, 6)
    return [DistributionEvent(first + timedelta(days=spacing_days * i), 0.1) for i in range(count)]


@pytest.mark.parametrize(
    "spacing, count, expected",
    [
        (7, 8, DistributionFrequency.WEEKLY),
        (10, 5, DistributionFrequency.WEEKLY),
        (30, 5, DistributionFrequency.MONTHLY),
        (40, 5, DistributionFrequency.MONTHLY),
        (91, 5, DistributionFrequency.QUARTERLY),
        (180, 5, DistributionFrequency.UNKNOWN),
    ],
)
def test_infer_frequency_by_mean_spacing(spacing, count, expected):
    assert infer_frequency(_stream(spacing, count)) == expected


def test_infer_frequency_needs_two_events():
    assert infer_frequency([]) == DistributionFrequency.UNKNOWN
    assert infer_frequency(_stream(7, count=1)) == DistributionFrequency.UNKNOWN


def test_infer_frequency_is_order_independent():
    assert infer_frequency(list(reversed(_stream(30)))) == DistributionFrequency.MONTHLY


def test_infer_frequency_uses_mean_of_irregular_gaps(weekly_distributions):
    # One 28-day gap among 7-day gaps still averages under the weekly bound.
    assert infer_frequency(weekly_distributions) == DistributionFrequency.WEEKLY


def test_infer_frequency_respects_custom_thresholds():
    thresholds = FrequencyThresholds(weekly_max_days=5.0)
    assert infer_frequency(_stream(7), thresholds) == DistributionFrequency.MONTHLY
