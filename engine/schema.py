# engine/schema.py
from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Tuple

from common.enums import DistributionFrequency


@dataclass(frozen=True)
class PricePoint:
    """A single daily close for one ticker."""
    date: date
    close: float


@dataclass(frozen=True)
class DistributionEvent:
    """A per-share distribution for which only the ex-dividend date is known."""
    ex_date: date
    amount: float


@dataclass(frozen=True)
class DripWindowRequest:
    end_date: date
    lookback_days: int
    starting_shares: float = 1.0


@dataclass(frozen=True)
class ReinvestmentFactor:
    """Audit record for one distribution that was actually reinvested."""
    ex_date: date
    inferred_pay_reference_date: date
    actual_reinvestment_date: date
    reinvestment_price: float
    net_amount_per_share: float
    multiplicative_factor: float


@dataclass(frozen=True)
class SmartWindow:
    start_date: date
    actual_days: int
    distributions_in_window: int
    widened: bool


@dataclass(frozen=True)
class WindowMetadata:
    """Describes how the window behind a result was resolved."""
    requested_days: int
    actual_days: int
    start_date: date
    frequency: DistributionFrequency
    distributions_in_window: int
    minimum_required: int
    widened: bool


@dataclass(frozen=True)
class DripResult:
    """
    Outcome of compounding reinvested distributions over one period.
    On the insufficient-data path, unresolved prices are NaN, values are zero
    and `insufficient_data` is True.
    """
    start_date: date
    end_date: date
    start_price: float
    end_price: float
    start_shares: float
    end_shares: float
    reinvested_shares: float
    start_value: float
    end_value: float
    reinvested_dollar_value: float
    return_percent: float
    factors: Tuple[ReinvestmentFactor, ...] = field(default_factory=tuple)
    insufficient_data: bool = False
    window: Optional[WindowMetadata] = None
