# app/services/drip_batch.py
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from app.core.config import Settings
from app.services.tax_policy import effective_tax_withhold_rate
from engine.compute import compute_drip_windows
from engine.config import DEFAULT_WINDOW_DAYS, DripOptions, FrequencyThresholds
from engine.dates import to_iso
from engine.schema import DistributionEvent, DripResult, PricePoint

logger = logging.getLogger(__name__)


class DripDataSource(Protocol):
    """Read side of the persistence layer the batch job pulls history from."""

    def list_tickers(self) -> List[str]: ...

    def fetch_prices(self, ticker: str, since: date) -> List[PricePoint]: ...

    def fetch_distributions(self, ticker: str, since: date) -> List[DistributionEvent]: ...

    def fund_country(self, ticker: str) -> Optional[str]: ...


class DripResultSink(Protocol):
    """Write side: results are keyed by ticker and lookback period."""

    def store(self, ticker: str, end_date: date, results: Dict[int, DripResult]) -> None: ...


@dataclass
class InMemoryDripDataSource:
    prices: Dict[str, List[PricePoint]] = field(default_factory=dict)
    distributions: Dict[str, List[DistributionEvent]] = field(default_factory=dict)
    fund_countries: Dict[str, str] = field(default_factory=dict)

    def list_tickers(self) -> List[str]:
        return sorted(set(self.prices) | set(self.distributions))

    def fetch_prices(self, ticker: str, since: date) -> List[PricePoint]:
        return [p for p in self.prices.get(ticker, []) if p.date >= since]

    def fetch_distributions(self, ticker: str, since: date) -> List[DistributionEvent]:
        return [d for d in self.distributions.get(ticker, []) if d.ex_date >= since]

    def fund_country(self, ticker: str) -> Optional[str]:
        return self.fund_countries.get(ticker)


class InMemoryDripResultStore:
    def __init__(self):
        self.rows: Dict[Tuple[str, int], Tuple[date, DripResult]] = {}

    def store(self, ticker: str, end_date: date, results: Dict[int, DripResult]) -> None:
        for lookback_days, result in results.items():
            self.rows[(ticker, lookback_days)] = (end_date, result)

    def get(self, ticker: str, lookback_days: int) -> Optional[DripResult]:
        row = self.rows.get((ticker, lookback_days))
        return row[1] if row else None


@dataclass(frozen=True)
class BatchConfig:
    """Settings for one batch run across many tickers."""
    window_days: Sequence[int] = DEFAULT_WINDOW_DAYS
    starting_shares: float = 1.0
    options: DripOptions = field(default_factory=DripOptions)
    explicit_tax_rate: Optional[float] = None
    investor_country: Optional[str] = None
    default_foreign_rate: float = 0.15
    thresholds: FrequencyThresholds = field(default_factory=FrequencyThresholds)
    max_workers: int = 8
    # None fetches the full history
    price_history_days: Optional[int] = 400
    distribution_history_days: Optional[int] = 730


def batch_config_from_settings(settings: Settings, **overrides) -> BatchConfig:
    """Builds the scheduled-job configuration from application settings."""
    config = BatchConfig(
        default_foreign_rate=settings.DEFAULT_FOREIGN_WITHHOLDING_RATE,
        thresholds=settings.frequency_thresholds(),
        max_workers=settings.DRIP_BATCH_MAX_WORKERS,
        price_history_days=settings.PRICE_HISTORY_DAYS,
        distribution_history_days=settings.DISTRIBUTION_HISTORY_DAYS,
    )
    return replace(config, **overrides)


@dataclass
class BatchOutcome:
    end_date: date
    results: Dict[str, Dict[int, DripResult]] = field(default_factory=dict)
    processed: int = 0
    errors: int = 0
    skipped: int = 0
    total: int = 0
    failures: List[Tuple[str, str]] = field(default_factory=list)


def _history_start(end_date: date, history_days: Optional[int]) -> date:
    if history_days is None:
        return date.min
    return end_date - timedelta(days=history_days)


def _process_ticker(
    ticker: str, source: DripDataSource, sink: DripResultSink, end_date: date, config: BatchConfig
) -> Optional[Dict[int, DripResult]]:
    prices = source.fetch_prices(ticker, _history_start(end_date, config.price_history_days))
    if not prices:
        logger.warning(f"{ticker}: no price data, skipping")
        return None
    distributions = source.fetch_distributions(ticker, _history_start(end_date, config.distribution_history_days))

    rate = effective_tax_withhold_rate(
        config.explicit_tax_rate,
        config.investor_country,
        source.fund_country(ticker),
        config.default_foreign_rate,
    )
    options = replace(config.options, tax_withhold_rate=rate)

    results = compute_drip_windows(
        prices,
        distributions,
        end_date,
        window_days=config.window_days,
        starting_shares=config.starting_shares,
        options=options,
        thresholds=config.thresholds,
    )
    sink.store(ticker, end_date, results)
    return results


def run_drip_batch(
    source: DripDataSource,
    sink: DripResultSink,
    end_date: date,
    config: BatchConfig = BatchConfig(),
    tickers: Optional[List[str]] = None,
) -> BatchOutcome:
    """
    Computes DRIP windows for every ticker on a fixed-size worker pool.
    A failing ticker is logged and counted; it never aborts the batch.
    """
    tickers = tickers if tickers is not None else source.list_tickers()
    outcome = BatchOutcome(end_date=end_date, total=len(tickers))
    logger.info(f"Processing {len(tickers)} tickers for DRIP calculation as of {to_iso(end_date)}")

    if not tickers:
        return outcome

    with ThreadPoolExecutor(max_workers=max(1, config.max_workers)) as executor:
        futures = {
            executor.submit(_process_ticker, ticker, source, sink, end_date, config): ticker
            for ticker in tickers
        }
        for future in as_completed(futures):
            ticker = futures[future]
            try:
                results = future.result()
            except Exception as e:
                logger.error(f"Error calculating DRIP for {ticker}: {e}")
                outcome.errors += 1
                outcome.failures.append((ticker, str(e)))
                continue
            if results is None:
                outcome.skipped += 1
                continue
            outcome.results[ticker] = results
            outcome.processed += 1

    outcome.failures.sort()
    logger.info(
        f"DRIP batch complete: {outcome.processed} processed, {outcome.errors} errors, {outcome.skipped} skipped"
    )
    return outcome
