# engine/compute.py
import logging
from dataclasses import replace
from datetime import date
from typing import Dict, Iterable, Optional, Sequence

from engine.config import DEFAULT_WINDOW_DAYS, DripOptions, FrequencyThresholds, SmartWindowPolicy
from engine.drip import compute_drip_over_period, sort_distributions
from engine.exceptions import EngineCalculationError, InvalidEngineInputError
from engine.frequency import infer_frequency
from engine.periods import (
    calculate_smart_window,
    count_distributions_in_window,
    minimum_distributions_for,
    trailing_start_date,
)
from engine.schema import DistributionEvent, DripResult, DripWindowRequest, PricePoint, WindowMetadata

logger = logging.getLogger(__name__)


def compute_drip_windows(
    prices: Iterable[PricePoint],
    distributions: Iterable[DistributionEvent],
    end_date: date,
    window_days: Sequence[int] = DEFAULT_WINDOW_DAYS,
    starting_shares: float = 1.0,
    options: Optional[DripOptions] = None,
    thresholds: FrequencyThresholds = FrequencyThresholds(),
    smart_window: SmartWindowPolicy = SmartWindowPolicy(),
) -> Dict[int, DripResult]:
    """
    Orchestrates DRIP results for several trailing windows ending at end_date.
    Only the `smart_window.target_days` window may be widened; every window is
    computed independently from the full inputs and annotated with how its
    start date was resolved.
    """
    _validate_window_days(window_days)
    options = options or DripOptions()
    prices = list(prices)
    distributions = sort_distributions(distributions)

    try:
        frequency = infer_frequency(distributions, thresholds)
        minimum_required = minimum_distributions_for(frequency, smart_window)
        ex_dates = [d.ex_date for d in distributions]

        results: Dict[int, DripResult] = {}
        for lookback_days in window_days:
            if lookback_days == smart_window.target_days:
                window = calculate_smart_window(
                    distributions,
                    end_date,
                    lookback_days,
                    minimum_required,
                    policy=smart_window,
                    include_policy=options.include_policy,
                )
                start_date, actual_days = window.start_date, window.actual_days
                found, widened = window.distributions_in_window, window.widened
            else:
                start_date = trailing_start_date(end_date, lookback_days)
                actual_days, widened = lookback_days, False
                found = count_distributions_in_window(ex_dates, start_date, end_date, options.include_policy)

            result = compute_drip_over_period(
                prices, distributions, start_date, end_date, starting_shares, options
            )
            results[lookback_days] = replace(
                result,
                window=WindowMetadata(
                    requested_days=lookback_days,
                    actual_days=actual_days,
                    start_date=start_date,
                    frequency=frequency,
                    distributions_in_window=found,
                    minimum_required=minimum_required if lookback_days == smart_window.target_days else 0,
                    widened=widened,
                ),
            )

    except InvalidEngineInputError:
        raise
    except Exception as e:
        logger.exception("An unexpected error occurred during DRIP window calculations.")
        raise EngineCalculationError(f"DRIP window calculation failed unexpectedly: {e}")

    logger.debug("DRIP windows complete for %s: %s", end_date, sorted(results))
    return results


def _validate_window_days(window_days: Sequence[int]):
    if not window_days:
        raise InvalidEngineInputError("At least one lookback window is required.")
    for days in window_days:
        if isinstance(days, bool) or not isinstance(days, int) or days <= 0:
            raise InvalidEngineInputError(f"Lookback window must be a positive integer of days, got {days!r}.")
    if len(set(window_days)) != len(window_days):
        raise InvalidEngineInputError("Lookback windows must be unique.")


def compute_drip_window(
    prices: Iterable[PricePoint],
    distributions: Iterable[DistributionEvent],
    request: DripWindowRequest,
    options: Optional[DripOptions] = None,
    thresholds: FrequencyThresholds = FrequencyThresholds(),
) -> DripResult:
    """
    A single plain trailing window: `request.lookback_days` calendar days
    ending at `request.end_date`, never widened.
    """
    _validate_window_days((request.lookback_days,))
    options = options or DripOptions()
    distributions = sort_distributions(distributions)
    start_date = trailing_start_date(request.end_date, request.lookback_days)

    result = compute_drip_over_period(
        prices, distributions, start_date, request.end_date, request.starting_shares, options
    )
    return replace(
        result,
        window=WindowMetadata(
            requested_days=request.lookback_days,
            actual_days=request.lookback_days,
            start_date=start_date,
            frequency=infer_frequency(distributions, thresholds),
            distributions_in_window=count_distributions_in_window(
                [d.ex_date for d in distributions], start_date, request.end_date, options.include_policy
            ),
            minimum_required=0,
            widened=False,
        ),
    )
