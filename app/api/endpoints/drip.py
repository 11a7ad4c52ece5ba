# app/api/endpoints/drip.py
import logging

from fastapi import APIRouter, Depends

from adapters.api_adapter import create_distribution_events, create_drip_options, create_price_points, format_window_results
from app.core.config import get_settings
from app.models.drip_requests import DripBatchRequest, DripPeriodRequest, DripWindowsRequest
from app.models.drip_responses import DripBatchResponse, DripPeriodResponse, DripWindowsResponse, Meta, TickerFailure
from app.services.drip_batch import InMemoryDripDataSource, InMemoryDripResultStore, batch_config_from_settings, run_drip_batch
from app.services.drip_service import DripCalculationService, get_drip_service
from core.errors import APIBadRequestError
from core.repro import generate_canonical_hash

logger = logging.getLogger(__name__)
router = APIRouter(tags=["DRIP"])
settings = get_settings()


@router.post("/period", response_model=DripPeriodResponse, summary="Calculate DRIP return over one period")
async def calculate_drip_period_endpoint(
    request: DripPeriodRequest, service: DripCalculationService = Depends(get_drip_service)
):
    """
    Compounds reinvested distributions between start_date and end_date and
    returns the full audit trail of reinvestment factors.
    """
    return service.calculate_period(request)


@router.post("/windows", response_model=DripWindowsResponse, summary="Calculate DRIP returns over trailing windows")
async def calculate_drip_windows_endpoint(
    request: DripWindowsRequest, service: DripCalculationService = Depends(get_drip_service)
):
    """
    Calculates DRIP returns for each requested lookback window ending at end_date.
    The 28-day window may be widened for sparse distribution streams; see
    each result's `window` block.
    """
    return service.calculate_windows(request)


@router.post("/batch", response_model=DripBatchResponse, summary="Calculate DRIP windows for many tickers")
def calculate_drip_batch_endpoint(request: DripBatchRequest):
    """
    Runs the multi-window calculation for every bundle. A ticker that fails is
    reported in `failures` and counted in `errors` without aborting the others.
    """
    tickers = [bundle.ticker for bundle in request.bundles]
    if len(set(tickers)) != len(tickers):
        raise APIBadRequestError("Each ticker may appear only once per batch.")

    input_fingerprint, calculation_hash = generate_canonical_hash(request, settings.APP_VERSION)

    source = InMemoryDripDataSource(
        prices={b.ticker: create_price_points(b.prices) for b in request.bundles},
        distributions={b.ticker: create_distribution_events(b.distributions) for b in request.bundles},
        fund_countries={b.ticker: b.fund_country for b in request.bundles if b.fund_country},
    )
    config = batch_config_from_settings(
        settings,
        window_days=tuple(request.window_days),
        starting_shares=request.starting_shares,
        options=create_drip_options(request.options, 0.0),
        explicit_tax_rate=request.options.tax_withhold_rate,
        investor_country=request.investor_country,
        # Inline bundles are used as supplied.
        price_history_days=None,
        distribution_history_days=None,
    )
    outcome = run_drip_batch(source, InMemoryDripResultStore(), request.end_date, config, tickers=tickers)

    return DripBatchResponse(
        end_date=outcome.end_date,
        results={ticker: format_window_results(results) for ticker, results in outcome.results.items()},
        processed=outcome.processed,
        errors=outcome.errors,
        skipped=outcome.skipped,
        total=outcome.total,
        failures=[TickerFailure(ticker=t, message=m) for t, m in outcome.failures],
        meta=Meta(
            calculation_id=request.calculation_id,
            engine_version=settings.APP_VERSION,
            input_fingerprint=input_fingerprint,
            calculation_hash=calculation_hash,
        ),
    )
