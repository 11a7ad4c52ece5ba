# app/models/drip_requests.py
from datetime import date
from typing import List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from common.enums import IncludePolicy
from engine.config import DEFAULT_WINDOW_DAYS


def _check_window_days(v: List[int]) -> List[int]:
    if not v:
        raise ValueError("window_days list cannot be empty")
    if any(days <= 0 for days in v):
        raise ValueError("window_days must be positive")
    if len(set(v)) != len(v):
        raise ValueError("window_days must be unique")
    return v


class PriceInput(BaseModel):
    date: date
    close: float = Field(..., description="Split-adjusted closing price for the date.")


class DistributionInput(BaseModel):
    ex_date: date = Field(..., description="Ex-dividend date in YYYY-MM-DD format.")
    amount: float = Field(..., description="Split-adjusted distribution amount per share.")


class DripOptionsInput(BaseModel):
    include_policy: IncludePolicy = Field(
        IncludePolicy.OPEN_CLOSED,
        description="'open-closed' counts ex-dates in (start, end]; 'open-open' counts ex-dates in (start, end).",
    )
    pay_offset_days: int = Field(2, ge=0, description="Offset from ex-date to the inferred pay date.")
    use_business_days: bool = Field(True, description="Apply the pay offset in business days (weekends skipped).")
    tax_withhold_rate: Optional[float] = Field(
        None,
        ge=0.0,
        le=1.0,
        description="Withholding fraction applied to each distribution. Overrides tax_profile when provided.",
    )


class TaxProfile(BaseModel):
    """Investor residency and fund domicile, used to resolve a withholding rate."""
    investor_country: str = Field("US", min_length=2, max_length=2, description="ISO country code of the investor.")
    fund_country: str = Field("US", min_length=2, max_length=2, description="ISO country code of the fund's domicile.")


class TickerBundle(BaseModel):
    """Price and distribution history for a single ticker."""
    ticker: str = Field(..., min_length=1, description="Ticker symbol the data belongs to.")
    prices: List[PriceInput] = Field(default_factory=list)
    distributions: List[DistributionInput] = Field(default_factory=list)
    fund_country: Optional[str] = Field(None, min_length=2, max_length=2, description="ISO country code of the fund's domicile.")


class DripPeriodRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    calculation_id: UUID = Field(default_factory=uuid4, description="A unique identifier for the calculation request. If not provided, one will be generated.")
    ticker: Optional[str] = None
    prices: List[PriceInput]
    distributions: List[DistributionInput] = Field(default_factory=list)
    start_date: date = Field(..., description="Start of the measurement period (exclusive for ex-dates).")
    end_date: date = Field(..., description="End of the measurement period.")
    starting_shares: float = Field(1.0, description="Shares held at the start of the period.")
    options: DripOptionsInput = Field(default_factory=DripOptionsInput)
    tax_profile: Optional[TaxProfile] = None

    @field_validator("end_date")
    @classmethod
    def end_date_not_before_start(cls, v, info):
        start = info.data.get("start_date")
        if start is not None and v < start:
            raise ValueError("end_date cannot be before start_date")
        return v


class DripWindowsRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    calculation_id: UUID = Field(default_factory=uuid4, description="A unique identifier for the calculation request. If not provided, one will be generated.")
    ticker: Optional[str] = None
    prices: List[PriceInput]
    distributions: List[DistributionInput] = Field(default_factory=list)
    end_date: date = Field(..., description="Reference date every lookback window ends on.")
    window_days: List[int] = Field(default_factory=lambda: list(DEFAULT_WINDOW_DAYS), description="Lookback windows in calendar days.")
    starting_shares: float = Field(1.0, description="Shares held at the start of each window.")
    options: DripOptionsInput = Field(default_factory=DripOptionsInput)
    tax_profile: Optional[TaxProfile] = None

    @field_validator("window_days")
    @classmethod
    def window_days_must_be_valid(cls, v):
        return _check_window_days(v)


class DripBatchRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    calculation_id: UUID = Field(default_factory=uuid4)
    end_date: date
    bundles: List[TickerBundle]
    window_days: List[int] = Field(default_factory=lambda: list(DEFAULT_WINDOW_DAYS))
    starting_shares: float = 1.0
    options: DripOptionsInput = Field(default_factory=DripOptionsInput)
    investor_country: Optional[str] = Field(None, min_length=2, max_length=2, description="ISO country code of the investor.")

    @field_validator("bundles")
    @classmethod
    def bundles_must_not_be_empty(cls, v):
        if not v:
            raise ValueError("bundles list cannot be empty")
        return v

    @field_validator("window_days")
    @classmethod
    def window_days_must_be_valid(cls, v):
        return _check_window_days(v)
