# app/services/drip_service.py
import logging
from functools import lru_cache
from typing import Optional

from adapters.api_adapter import (
    create_distribution_events,
    create_drip_options,
    create_price_points,
    format_drip_result,
    format_window_results,
)
from app.core.config import Settings, get_settings
from app.models.drip_requests import DripOptionsInput, DripPeriodRequest, DripWindowsRequest, TaxProfile
from app.models.drip_responses import DripPeriodResponse, DripWindowsResponse, Meta
from app.services.tax_policy import effective_tax_withhold_rate
from core.cache import TTLCache
from core.repro import generate_canonical_hash
from engine.compute import compute_drip_windows
from engine.drip import compute_drip_over_period
from engine.frequency import infer_frequency

logger = logging.getLogger(__name__)


class DripCalculationService:
    """
    On-demand DRIP calculations for a single ticker's inline history.
    Responses are cached by the canonical hash of the request inputs.
    """

    def __init__(self, cache: TTLCache, settings: Settings):
        self.cache = cache
        self.settings = settings

    def _resolve_rate(self, options: DripOptionsInput, tax_profile: Optional[TaxProfile]) -> float:
        return effective_tax_withhold_rate(
            options.tax_withhold_rate,
            tax_profile.investor_country if tax_profile else None,
            tax_profile.fund_country if tax_profile else None,
            self.settings.DEFAULT_FOREIGN_WITHHOLDING_RATE,
        )

    def _meta(self, request, input_fingerprint: str, calculation_hash: str, cached: bool) -> Meta:
        return Meta(
            calculation_id=request.calculation_id,
            engine_version=self.settings.APP_VERSION,
            input_fingerprint=input_fingerprint,
            calculation_hash=calculation_hash,
            cached=cached,
        )

    def _from_cache(self, request, input_fingerprint: str, calculation_hash: str):
        cached = self.cache.get(calculation_hash)
        if cached is None:
            return None
        logger.info(f"Serving DRIP result for {request.ticker or 'inline request'} from cache")
        return cached.model_copy(update={"meta": self._meta(request, input_fingerprint, calculation_hash, True)})

    def calculate_period(self, request: DripPeriodRequest) -> DripPeriodResponse:
        input_fingerprint, calculation_hash = generate_canonical_hash(request, self.settings.APP_VERSION)
        cached = self._from_cache(request, input_fingerprint, calculation_hash)
        if cached is not None:
            return cached

        rate = self._resolve_rate(request.options, request.tax_profile)
        result = compute_drip_over_period(
            create_price_points(request.prices),
            create_distribution_events(request.distributions),
            request.start_date,
            request.end_date,
            request.starting_shares,
            create_drip_options(request.options, rate),
        )
        response = DripPeriodResponse(
            ticker=request.ticker,
            tax_withhold_rate=rate,
            result=format_drip_result(result),
            meta=self._meta(request, input_fingerprint, calculation_hash, False),
        )
        self.cache.set(calculation_hash, response)
        return response

    def calculate_windows(self, request: DripWindowsRequest) -> DripWindowsResponse:
        input_fingerprint, calculation_hash = generate_canonical_hash(request, self.settings.APP_VERSION)
        cached = self._from_cache(request, input_fingerprint, calculation_hash)
        if cached is not None:
            return cached

        rate = self._resolve_rate(request.options, request.tax_profile)
        distributions = create_distribution_events(request.distributions)
        thresholds = self.settings.frequency_thresholds()
        results = compute_drip_windows(
            create_price_points(request.prices),
            distributions,
            request.end_date,
            window_days=request.window_days,
            starting_shares=request.starting_shares,
            options=create_drip_options(request.options, rate),
            thresholds=thresholds,
        )
        response = DripWindowsResponse(
            ticker=request.ticker,
            end_date=request.end_date,
            tax_withhold_rate=rate,
            frequency=infer_frequency(distributions, thresholds),
            results=format_window_results(results),
            meta=self._meta(request, input_fingerprint, calculation_hash, False),
        )
        self.cache.set(calculation_hash, response)
        return response


@lru_cache()
def get_drip_service() -> DripCalculationService:
    """Builds the service once, with its own cache instance."""
    settings = get_settings()
    return DripCalculationService(cache=TTLCache(settings.DRIP_CACHE_TTL_SECONDS), settings=settings)
