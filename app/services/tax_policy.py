# app/services/tax_policy.py
import logging
from typing import Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

# (investor country, fund country) -> withholding applied to distributions
TREATY_WITHHOLDING_RATES: Mapping[Tuple[str, str], float] = {
    ("CA", "US"): 0.15,
}


def resolve_tax_withhold_rate(
    investor_country: str,
    fund_country: str,
    default_foreign_rate: float,
    treaty_rates: Mapping[Tuple[str, str], float] = TREATY_WITHHOLDING_RATES,
) -> float:
    """
    Resolves the withholding fraction for an investor holding a fund.
    Domestic holdings are not withheld; a known treaty pair uses its rate;
    any other foreign holding uses `default_foreign_rate`.
    """
    investor = investor_country.strip().upper()
    fund = fund_country.strip().upper()
    if investor == fund:
        return 0.0
    rate = treaty_rates.get((investor, fund))
    if rate is None:
        logger.debug(f"No treaty rate for investor {investor} / fund {fund}; using default {default_foreign_rate}.")
        return default_foreign_rate
    return rate


def effective_tax_withhold_rate(
    explicit_rate: Optional[float],
    investor_country: Optional[str],
    fund_country: Optional[str],
    default_foreign_rate: float,
) -> float:
    """An explicit rate always wins; otherwise resolve from residency and domicile, defaulting to none."""
    if explicit_rate is not None:
        return explicit_rate
    if investor_country is None or fund_country is None:
        return 0.0
    return resolve_tax_withhold_rate(investor_country, fund_country, default_foreign_rate)
