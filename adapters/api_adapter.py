# adapters/api_adapter.py
import logging
import math
from typing import Dict, Iterable, List, Optional

from app.models.drip_requests import DistributionInput, DripOptionsInput, PriceInput
from app.models.drip_responses import DripResultModel, ReinvestmentFactorModel, WindowMetadataModel
from engine.config import DripOptions
from engine.schema import DistributionEvent, DripResult, PricePoint

logger = logging.getLogger(__name__)


def create_price_points(prices: Iterable[PriceInput]) -> List[PricePoint]:
    """Converts API price rows into engine price points."""
    return [PricePoint(date=p.date, close=p.close) for p in prices]


def create_distribution_events(distributions: Iterable[DistributionInput]) -> List[DistributionEvent]:
    """Converts API distribution rows into engine events."""
    return [DistributionEvent(ex_date=d.ex_date, amount=d.amount) for d in distributions]


def create_drip_options(options: DripOptionsInput, tax_withhold_rate: float) -> DripOptions:
    """Creates engine options from the API block and an already-resolved withholding rate."""
    return DripOptions(
        include_policy=options.include_policy,
        pay_offset_days=options.pay_offset_days,
        use_business_days=options.use_business_days,
        tax_withhold_rate=tax_withhold_rate,
    )


def _nan_to_none(value: float) -> Optional[float]:
    return None if value is None or math.isnan(value) else value


def format_drip_result(result: DripResult) -> DripResultModel:
    """
    Takes the engine dataclass and formats it into the Pydantic response model.
    Unresolved (NaN) prices become None so they serialize as null.
    """
    window = None
    if result.window is not None:
        window = WindowMetadataModel(
            requested_days=result.window.requested_days,
            actual_days=result.window.actual_days,
            start_date=result.window.start_date,
            frequency=result.window.frequency,
            distributions_in_window=result.window.distributions_in_window,
            minimum_required=result.window.minimum_required,
            widened=result.window.widened,
        )

    return DripResultModel(
        start_date=result.start_date,
        end_date=result.end_date,
        start_price=_nan_to_none(result.start_price),
        end_price=_nan_to_none(result.end_price),
        start_shares=result.start_shares,
        end_shares=result.end_shares,
        reinvested_shares=result.reinvested_shares,
        start_value=result.start_value,
        end_value=result.end_value,
        reinvested_dollar_value=result.reinvested_dollar_value,
        return_percent=result.return_percent,
        insufficient_data=result.insufficient_data,
        factors=[
            ReinvestmentFactorModel(
                ex_date=f.ex_date,
                inferred_pay_reference_date=f.inferred_pay_reference_date,
                actual_reinvestment_date=f.actual_reinvestment_date,
                reinvestment_price=f.reinvestment_price,
                net_amount_per_share=f.net_amount_per_share,
                multiplicative_factor=f.multiplicative_factor,
            )
            for f in result.factors
        ],
        window=window,
    )


def format_window_results(results: Dict[int, DripResult]) -> Dict[int, DripResultModel]:
    return {days: format_drip_result(result) for days, result in results.items()}
