# engine/config.py
import math
from dataclasses import dataclass
from typing import Tuple, Union

from common.enums import IncludePolicy
from engine.exceptions import InvalidEngineInputError

DEFAULT_WINDOW_DAYS: Tuple[int, ...] = (28, 91, 182, 364)


@dataclass(frozen=True)
class DripOptions:
    """
    Immutable options for a single DRIP computation.
    - include_policy: "open-closed" counts an ex-date equal to the window end, "open-open" does not.
    - pay_offset_days: distance from ex-date to the inferred pay date.
    - use_business_days: apply the offset in business days (weekends skipped) or calendar days.
    - tax_withhold_rate: already-resolved withholding fraction in [0, 1].
    """
    include_policy: Union[IncludePolicy, str] = IncludePolicy.OPEN_CLOSED
    pay_offset_days: int = 2
    use_business_days: bool = True
    tax_withhold_rate: float = 0.0

    def __post_init__(self):
        try:
            policy = IncludePolicy(self.include_policy)
        except ValueError:
            raise InvalidEngineInputError(f"Unsupported include policy: {self.include_policy!r}")
        object.__setattr__(self, "include_policy", policy)

        if isinstance(self.pay_offset_days, bool) or not isinstance(self.pay_offset_days, int):
            raise InvalidEngineInputError("pay_offset_days must be an integer.")
        if self.pay_offset_days < 0:
            raise InvalidEngineInputError("pay_offset_days cannot be negative.")

        rate = float(self.tax_withhold_rate)
        if not math.isfinite(rate) or rate < 0.0 or rate > 1.0:
            raise InvalidEngineInputError("tax_withhold_rate must be between 0 and 1.")
        object.__setattr__(self, "tax_withhold_rate", rate)


@dataclass(frozen=True)
class FrequencyThresholds:
    """Upper bounds (mean days between ex-dates) for each distribution cadence."""
    weekly_max_days: float = 10.0
    monthly_max_days: float = 40.0
    quarterly_max_days: float = 120.0


@dataclass(frozen=True)
class SmartWindowPolicy:
    """Controls how the shortest lookback window is widened for sparse distribution streams."""
    target_days: int = 28
    step_days: int = 7
    max_multiplier: int = 2
    weekly_minimum: int = 4
    default_minimum: int = 1

    def __post_init__(self):
        if self.target_days <= 0 or self.step_days <= 0:
            raise InvalidEngineInputError("Smart window target_days and step_days must be positive.")
        if self.max_multiplier < 1:
            raise InvalidEngineInputError("Smart window max_multiplier must be at least 1.")
