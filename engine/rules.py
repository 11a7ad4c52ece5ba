# engine/rules.py
import math
from datetime import date

from common.enums import IncludePolicy
from engine.config import DripOptions
from engine.dates import add_business_days, add_calendar_days


def is_in_window(ex_date: date, start_date: date, end_date: date, include_policy: IncludePolicy) -> bool:
    """Window membership: (start, end] for open-closed, (start, end) for open-open."""
    if include_policy == IncludePolicy.OPEN_OPEN:
        return start_date < ex_date < end_date
    return start_date < ex_date <= end_date


def infer_pay_reference_date(ex_date: date, options: DripOptions) -> date:
    """Nominal pay date: the ex-date shifted by the configured offset."""
    if options.use_business_days:
        return add_business_days(ex_date, options.pay_offset_days)
    return add_calendar_days(ex_date, options.pay_offset_days)


def net_amount(amount: float, tax_withhold_rate: float) -> float:
    return amount * (1.0 - tax_withhold_rate)


def is_reinvestable(net: float, price: float) -> bool:
    """Both the net distribution and the reinvestment price must be finite and positive."""
    return math.isfinite(net) and net > 0 and math.isfinite(price) and price > 0


def is_valid_price(price: float) -> bool:
    return math.isfinite(price) and price > 0
