# engine/drip.py
import logging
from datetime import date
from typing import Iterable, List, Optional

from engine.config import DripOptions
from engine.dates import to_iso
from engine.lookup import PriceSeries
from engine.rules import infer_pay_reference_date, is_in_window, is_reinvestable, is_valid_price, net_amount
from engine.schema import DistributionEvent, DripResult, PricePoint, ReinvestmentFactor

logger = logging.getLogger(__name__)


def sort_distributions(distributions: Iterable[DistributionEvent]) -> List[DistributionEvent]:
    """Orders events by ex-date, dropping any without one."""
    return sorted((d for d in distributions if d.ex_date is not None), key=lambda d: d.ex_date)


def compute_drip_over_period(
    prices: Iterable[PricePoint],
    distributions: Iterable[DistributionEvent],
    start_date: date,
    end_date: date,
    starting_shares: float = 1.0,
    options: Optional[DripOptions] = None,
) -> DripResult:
    """
    Compounds every distribution reinvested between start_date and end_date.

    Each distribution whose ex-date passes the window membership test is
    reinvested at the close of the first trading day on or after its inferred
    pay date. Distributions that cannot be reinvested by end_date are left out.
    Missing start/end prices or a non-positive share count produce an
    insufficient-data result instead of an error.
    """
    options = options or DripOptions()
    series = PriceSeries.from_points(prices)
    events = sort_distributions(distributions)

    start_price = series.close_on_or_before(start_date)
    end_price = series.close_on_or_before(end_date)
    has_start_price = is_valid_price(start_price)
    has_end_price = is_valid_price(end_price)

    if not has_start_price or not has_end_price or not starting_shares > 0:
        logger.debug("Insufficient data for DRIP period %s..%s.", to_iso(start_date), to_iso(end_date))
        return DripResult(
            start_date=start_date,
            end_date=end_date,
            start_price=start_price if has_start_price else float("nan"),
            end_price=end_price if has_end_price else float("nan"),
            start_shares=starting_shares,
            end_shares=starting_shares,
            reinvested_shares=0.0,
            start_value=0.0,
            end_value=0.0,
            reinvested_dollar_value=0.0,
            return_percent=0.0,
            factors=(),
            insufficient_data=True,
        )

    shares = starting_shares
    factors: List[ReinvestmentFactor] = []

    for event in events:
        if not is_in_window(event.ex_date, start_date, end_date, options.include_policy):
            continue

        pay_reference = infer_pay_reference_date(event.ex_date, options)
        idx = series.index_on_or_after(pay_reference)
        if idx < 0:
            continue

        reinvestment_point = series.points[idx]
        # Reinvested after the window closes: not part of this period.
        if reinvestment_point.date > end_date:
            continue

        reinvestment_price = float(reinvestment_point.close)
        net = net_amount(event.amount, options.tax_withhold_rate)
        if not is_reinvestable(net, reinvestment_price):
            continue

        factor = 1.0 + net / reinvestment_price
        shares *= factor
        factors.append(
            ReinvestmentFactor(
                ex_date=event.ex_date,
                inferred_pay_reference_date=pay_reference,
                actual_reinvestment_date=reinvestment_point.date,
                reinvestment_price=reinvestment_price,
                net_amount_per_share=net,
                multiplicative_factor=factor,
            )
        )

    reinvested_shares = shares - starting_shares
    start_value = starting_shares * start_price
    end_value = shares * end_price

    return DripResult(
        start_date=start_date,
        end_date=end_date,
        start_price=start_price,
        end_price=end_price,
        start_shares=starting_shares,
        end_shares=shares,
        reinvested_shares=reinvested_shares,
        start_value=start_value,
        end_value=end_value,
        reinvested_dollar_value=reinvested_shares * end_price,
        return_percent=(end_value / start_value - 1.0) * 100.0,
        factors=tuple(factors),
    )
