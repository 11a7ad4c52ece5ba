# app/models/drip_responses.py
from datetime import date
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from common.enums import DistributionFrequency


class Meta(BaseModel):
    calculation_id: UUID
    engine_version: str
    input_fingerprint: Optional[str] = None
    calculation_hash: Optional[str] = None
    cached: bool = False


class ReinvestmentFactorModel(BaseModel):
    ex_date: date
    inferred_pay_reference_date: date
    actual_reinvestment_date: date
    reinvestment_price: float
    net_amount_per_share: float
    multiplicative_factor: float


class WindowMetadataModel(BaseModel):
    requested_days: int
    actual_days: int
    start_date: date
    frequency: DistributionFrequency
    distributions_in_window: int
    minimum_required: int
    widened: bool


class DripResultModel(BaseModel):
    """A single DRIP result. Prices that could not be resolved are null."""
    start_date: date
    end_date: date
    start_price: Optional[float] = None
    end_price: Optional[float] = None
    start_shares: float
    end_shares: float
    reinvested_shares: float
    start_value: float
    end_value: float
    reinvested_dollar_value: float
    return_percent: float
    insufficient_data: bool = False
    factors: List[ReinvestmentFactorModel] = Field(default_factory=list)
    window: Optional[WindowMetadataModel] = None


class DripPeriodResponse(BaseModel):
    ticker: Optional[str] = None
    tax_withhold_rate: float
    result: DripResultModel
    meta: Meta


class DripWindowsResponse(BaseModel):
    ticker: Optional[str] = None
    end_date: date
    tax_withhold_rate: float
    frequency: DistributionFrequency
    results: Dict[int, DripResultModel]
    meta: Meta


class TickerFailure(BaseModel):
    ticker: str
    message: str


class DripBatchResponse(BaseModel):
    end_date: date
    results: Dict[str, Dict[int, DripResultModel]]
    processed: int
    errors: int
    skipped: int
    total: int
    failures: List[TickerFailure] = Field(default_factory=list)
    meta: Meta
