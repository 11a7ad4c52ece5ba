from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

from engine.config import FrequencyThresholds


class Settings(BaseSettings):
    """
    Application settings, loaded from environment variables.
    """
    APP_NAME: str = "ETF DRIP Analytics API"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "API for calculating dividend-reinvestment (DRIP) returns over trailing windows."
    LOG_LEVEL: str = "INFO"

    # On-demand results are reused for this long before being recomputed
    DRIP_CACHE_TTL_SECONDS: int = 3600

    # Batch job
    DRIP_BATCH_MAX_WORKERS: int = 8
    PRICE_HISTORY_DAYS: int = 400
    DISTRIBUTION_HISTORY_DAYS: int = 730

    # Applied to foreign-domiciled funds without a specific treaty rate
    DEFAULT_FOREIGN_WITHHOLDING_RATE: float = 0.15

    # Mean days between ex-dates for each cadence
    FREQUENCY_WEEKLY_MAX_DAYS: float = 10.0
    FREQUENCY_MONTHLY_MAX_DAYS: float = 40.0
    FREQUENCY_QUARTERLY_MAX_DAYS: float = 120.0

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    def frequency_thresholds(self) -> FrequencyThresholds:
        return FrequencyThresholds(
            weekly_max_days=self.FREQUENCY_WEEKLY_MAX_DAYS,
            monthly_max_days=self.FREQUENCY_MONTHLY_MAX_DAYS,
            quarterly_max_days=self.FREQUENCY_QUARTERLY_MAX_DAYS,
        )


@lru_cache()
def get_settings():
    """
    Caches the settings object for efficient access.
    """
    return Settings()
