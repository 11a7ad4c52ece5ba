# engine/frequency.py
import logging
from typing import Iterable

import numpy as np

from common.enums import DistributionFrequency
from engine.config import FrequencyThresholds
from engine.schema import DistributionEvent

logger = logging.getLogger(__name__)


def infer_frequency(
    distributions: Iterable[DistributionEvent],
    thresholds: FrequencyThresholds = FrequencyThresholds(),
) -> DistributionFrequency:
    """
    Classifies a distribution stream by the mean number of days between
    consecutive ex-dates. Events without an ex-date are ignored; fewer than
    two usable events cannot be classified.
    """
    ex_dates = sorted(d.ex_date for d in distributions if d.ex_date is not None)
    if len(ex_dates) < 2:
        return DistributionFrequency.UNKNOWN

    days = np.array(ex_dates, dtype="datetime64[D]")
    mean_interval = float(np.diff(days).astype(np.int64).mean())
    logger.debug("Mean distribution interval: %.2f days over %d events.", mean_interval, len(ex_dates))

    if mean_interval <= thresholds.weekly_max_days:
        return DistributionFrequency.WEEKLY
    if mean_interval <= thresholds.monthly_max_days:
        return DistributionFrequency.MONTHLY
    if mean_interval <= thresholds.quarterly_max_days:
        return DistributionFrequency.QUARTERLY
    return DistributionFrequency.UNKNOWN
