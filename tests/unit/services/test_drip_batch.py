# tests/unit/services/test_drip_batch.py
import logging
from datetime import date, timedelta

import pytest

from app.core.config import Settings
from app.services.drip_batch import (
    BatchConfig,
    InMemoryDripDataSource,
    InMemoryDripResultStore,
    batch_config_from_settings,
    run_drip_batch,
)
from engine.schema import DistributionEvent, PricePoint

END = date(2024, 3, 29)


def _daily_prices(first: date, close: float = 20.0):
    return [PricePoint(first + timedelta(days=i), close) for i in range((END - first).days + 1)]


class FailingSource(InMemoryDripDataSource):
    def fetch_distributions(self, ticker, since):
        if ticker == "BAD":
            raise RuntimeError("distribution feed unavailable")
        return super().fetch_distributions(ticker, since)


@pytest.fixture
def source():
    return FailingSource(
        prices={
            "XUS": _daily_prices(date(2023, 1, 2)),
            "BAD": _daily_prices(date(2023, 1, 2)),
            "EMPTY": [],
        },
        distributions={
            "XUS": [DistributionEvent(date(2024, 3, 15), 1.0)],
            "BAD": [DistributionEvent(date(2024, 3, 15), 1.0)],
        },
        fund_countries={"XUS": "US", "BAD": "US"},
    )


def test_batch_counts_processed_errors_and_skipped(source, caplog):
    sink = InMemoryDripResultStore()
    with caplog.at_level(logging.INFO):
        outcome = run_drip_batch(source, sink, END, BatchConfig(window_days=(28, 91)))

    assert outcome.total == 3
    assert outcome.processed == 1
    assert outcome.errors == 1
    assert outcome.skipped == 1
    assert outcome.failures == [("BAD", "distribution feed unavailable")]
    assert sorted(outcome.results) == ["XUS"]
    assert "Error calculating DRIP for BAD: distribution feed unavailable" in caplog.text
    assert "EMPTY: no price data, skipping" in caplog.text


def test_batch_stores_results_per_ticker_and_window(source):
    sink = InMemoryDripResultStore()
    run_drip_batch(source, sink, END, BatchConfig(window_days=(28, 91)))

    assert set(sink.rows) == {("XUS", 28), ("XUS", 91)}
    stored_end, stored = sink.rows[("XUS", 28)]
    assert stored_end == END
    assert stored is sink.get("XUS", 28)
    assert sink.get("BAD", 28) is None


def test_batch_applies_treaty_withholding(source):
    config = BatchConfig(window_days=(28,), investor_country="CA")
    outcome = run_drip_batch(source, InMemoryDripResultStore(), END, config, tickers=["XUS"])

    factor = outcome.results["XUS"][28].factors[0]
    assert factor.net_amount_per_share == pytest.approx(0.85)


def test_batch_explicit_rate_wins(source):
    config = BatchConfig(window_days=(28,), investor_country="CA", explicit_tax_rate=0.0)
    outcome = run_drip_batch(source, InMemoryDripResultStore(), END, config, tickers=["XUS"])
    assert outcome.results["XUS"][28].factors[0].net_amount_per_share == pytest.approx(1.0)


def test_batch_limits_price_history(source):
    # With only 30 days of prices the 91-day window has no start price.
    config = BatchConfig(window_days=(28, 91), price_history_days=30)
    outcome = run_drip_batch(source, InMemoryDripResultStore(), END, config, tickers=["XUS"])

    assert not outcome.results["XUS"][28].insufficient_data
    assert outcome.results["XUS"][91].insufficient_data


def test_batch_with_no_tickers():
    outcome = run_drip_batch(InMemoryDripDataSource(), InMemoryDripResultStore(), END)
    assert outcome.total == 0
    assert outcome.processed == 0
    assert outcome.results == {}


def test_in_memory_source_lists_union_of_tickers(source):
    assert source.list_tickers() == ["BAD", "EMPTY", "XUS"]


def test_batch_config_from_settings():
    settings = Settings(DRIP_BATCH_MAX_WORKERS=2, PRICE_HISTORY_DAYS=100)
    config = batch_config_from_settings(settings, window_days=(28,))

    assert config.max_workers == 2
    assert config.price_history_days == 100
    assert config.distribution_history_days == 730
    assert config.default_foreign_rate == 0.15
    assert config.window_days == (28,)
