# engine/periods.py
import logging
from datetime import date, timedelta
from typing import Iterable, List

from common.enums import DistributionFrequency, IncludePolicy
from engine.config import SmartWindowPolicy
from engine.rules import is_in_window
from engine.schema import DistributionEvent, SmartWindow

logger = logging.getLogger(__name__)


def trailing_start_date(end_date: date, lookback_days: int) -> date:
    """Start of a plain trailing window of `lookback_days` calendar days."""
    return end_date - timedelta(days=lookback_days)


def count_distributions_in_window(
    ex_dates: Iterable[date],
    start_date: date,
    end_date: date,
    include_policy: IncludePolicy = IncludePolicy.OPEN_CLOSED,
) -> int:
    return sum(1 for ex_date in ex_dates if is_in_window(ex_date, start_date, end_date, include_policy))


def minimum_distributions_for(
    frequency: DistributionFrequency, policy: SmartWindowPolicy = SmartWindowPolicy()
) -> int:
    """Weekly payers need several events in the short window; everyone else needs one."""
    if frequency == DistributionFrequency.WEEKLY:
        return policy.weekly_minimum
    return policy.default_minimum


def calculate_smart_window(
    distributions: Iterable[DistributionEvent],
    end_date: date,
    target_days: int,
    minimum_required: int,
    policy: SmartWindowPolicy = SmartWindowPolicy(),
    include_policy: IncludePolicy = IncludePolicy.OPEN_CLOSED,
) -> SmartWindow:
    """
    Widens a trailing window in `policy.step_days` increments, up to
    `policy.max_multiplier * target_days`, until it holds at least
    `minimum_required` distributions. When the cap is reached first, the
    original target window is returned unchanged.
    """
    ex_dates: List[date] = [d.ex_date for d in distributions if d.ex_date is not None]
    max_days = target_days * policy.max_multiplier

    days = target_days
    while days <= max_days:
        start_date = trailing_start_date(end_date, days)
        found = count_distributions_in_window(ex_dates, start_date, end_date, include_policy)
        if found >= minimum_required:
            if days != target_days:
                logger.info(
                    "Widened %d-day window to %d days to capture %d distributions (minimum %d).",
                    target_days, days, found, minimum_required,
                )
            return SmartWindow(
                start_date=start_date,
                actual_days=days,
                distributions_in_window=found,
                widened=days != target_days,
            )
        days += policy.step_days

    start_date = trailing_start_date(end_date, target_days)
    return SmartWindow(
        start_date=start_date,
        actual_days=target_days,
        distributions_in_window=count_distributions_in_window(ex_dates, start_date, end_date, include_policy),
        widened=False,
    )
