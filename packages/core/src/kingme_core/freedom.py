"""Days-of-freedom calculation.

Days of freedom is how long liquid assets cover the gap between daily
needs (obligations, purchased desires, debt service) and daily passive
income from assets. When passive income covers needs outright the user
is "kinged" and freedom is infinite.

This pipeline is independent of the cash-flow analysis and uses its own,
narrower definition of liquidity (crypto, DeFi and stocks only).
"""

import math
from decimal import Decimal
from typing import Callable, Optional

import structlog

from .models import (
    Asset,
    AssetCategory,
    BusinessMetadata,
    CryptoMetadata,
    Debt,
    Desire,
    DesireImpact,
    FreedomResult,
    FreedomState,
    Obligation,
    OpportunityCost,
    RealEstateMetadata,
    StockMetadata,
    UserProfile,
)
from .models.results import Days

logger = structlog.get_logger()

ZERO = Decimal("0")

DAYS_PER_YEAR = 365
MONTHS_PER_YEAR = 12

# Formatting thresholds (days)
FOREVER_DAYS = 36500  # 100 years
TWO_YEARS_DAYS = 730
ONE_YEAR_DAYS = 365
TWO_MONTHS_DAYS = 60
ONE_MONTH_DAYS = 30
DAYS_PER_FORMATTED_MONTH = 30

# Life-stage thresholds (days); each is the lower bound of the next stage.
FREEDOM_THRESHOLDS = {
    FreedomState.DROWNING: 30,
    FreedomState.STRUGGLING: 180,
    FreedomState.BREAKING: 730,
    FreedomState.RISING: 3650,
}

# Celebration milestones (days)
MILESTONES = (30, 90, 180, 365, 730, 1825, 3650)

# Assumed stablecoin yield for idle holdings
DEFAULT_STABLECOIN_APY = Decimal("0.08")

LIQUID_CATEGORIES = frozenset({
    AssetCategory.CRYPTO,
    AssetCategory.DEFI,
    AssetCategory.STOCKS,
})


# =============================================================================
# ANNUAL ASSET INCOME
# =============================================================================

def _yield_income(asset: Asset) -> Decimal:
    meta = asset.metadata
    if isinstance(meta, CryptoMetadata) and meta.apy is not None:
        return asset.value * meta.apy
    return ZERO


def _rental_income(asset: Asset) -> Decimal:
    meta = asset.metadata
    if not isinstance(meta, RealEstateMetadata):
        return ZERO
    monthly_net = (meta.monthly_rental_income or ZERO) - (meta.monthly_expenses or ZERO)
    return monthly_net * MONTHS_PER_YEAR


def _dividend_income(asset: Asset) -> Decimal:
    meta = asset.metadata
    if isinstance(meta, StockMetadata) and meta.dividend_yield is not None:
        return asset.value * meta.dividend_yield
    return ZERO


def _distribution_income(asset: Asset) -> Decimal:
    meta = asset.metadata
    if isinstance(meta, BusinessMetadata):
        return meta.annual_distributions
    return ZERO


def _manual_income(asset: Asset) -> Decimal:
    return asset.annual_income


_INCOME_RULES: dict[AssetCategory, Callable[[Asset], Decimal]] = {
    AssetCategory.CRYPTO: _yield_income,
    AssetCategory.DEFI: _yield_income,
    AssetCategory.REAL_ESTATE: _rental_income,
    AssetCategory.STOCKS: _dividend_income,
    AssetCategory.BUSINESS: _distribution_income,
    AssetCategory.BANK_ACCOUNT: _manual_income,
    AssetCategory.RETIREMENT: _manual_income,
    AssetCategory.OTHER: _manual_income,
}

_missing_rules = set(AssetCategory) - set(_INCOME_RULES)
if _missing_rules:
    raise RuntimeError(
        f"No annual income rule for asset categories: {sorted(c.value for c in _missing_rules)}"
    )


def compute_annual_income(asset: Asset) -> Decimal:
    """Annual income produced by one asset, by category.

    - crypto/defi: value x APY (zero without an APY)
    - real_estate: 12 x (monthly rent - monthly expenses)
    - stocks: value x dividend yield
    - business: annual distributions
    - bank_account/retirement/other: the manually entered annual income
    """
    return _INCOME_RULES[asset.category](asset)


def calculate_asset_income(assets: list[Asset]) -> Decimal:
    """Total annual income from all assets."""
    return sum((compute_annual_income(a) for a in assets), ZERO)


# =============================================================================
# ANNUAL NEEDS
# =============================================================================

def calculate_annual_obligations(obligations: list[Obligation]) -> Decimal:
    return sum((o.amount * MONTHS_PER_YEAR for o in obligations), ZERO)


def calculate_annual_desires(desires: list[Desire]) -> Decimal:
    """Cost of desires that were purchased and are not yet completed.

    Unpurchased desires are a wish list and never count as spending.
    """
    return sum((d.estimated_cost for d in desires if d.counts_as_spending), ZERO)


def calculate_annual_debt_service(debts: list[Debt]) -> Decimal:
    return sum((d.monthly_payment * MONTHS_PER_YEAR for d in debts), ZERO)


def calculate_liquid_assets(assets: list[Asset]) -> Decimal:
    """Value of what can be sold for cash quickly: crypto, DeFi and stocks.

    Real estate, business stakes, bank holdings and retirement accounts do
    not count. This is narrower than the cash-flow liquidity used by
    ``cashflow.calculate_near_term_liquidity``.
    """
    return sum((a.value for a in assets if a.category in LIQUID_CATEGORIES), ZERO)


# =============================================================================
# FORMATTING AND LIFE STAGE
# =============================================================================

def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'s' if count != 1 else ''}"


def format_freedom_days(days: Days) -> str:
    """Human-readable days of freedom: "Forever", "5 years", "3 months", "12 days"."""
    if math.isinf(days) or days > FOREVER_DAYS:
        return "Forever"
    if days >= TWO_YEARS_DAYS:
        return _plural(int(days // ONE_YEAR_DAYS), "year")
    if days >= ONE_YEAR_DAYS:
        return "1 year"
    if days >= TWO_MONTHS_DAYS:
        return _plural(int(days // DAYS_PER_FORMATTED_MONTH), "month")
    if days >= ONE_MONTH_DAYS:
        return "1 month"
    return _plural(int(days), "day")


def get_freedom_state(days: Days) -> FreedomState:
    """Life stage for a number of days of freedom."""
    if math.isinf(days) or days > FREEDOM_THRESHOLDS[FreedomState.RISING]:
        return FreedomState.ENTHRONED
    if days >= FREEDOM_THRESHOLDS[FreedomState.BREAKING]:
        return FreedomState.RISING
    if days >= FREEDOM_THRESHOLDS[FreedomState.STRUGGLING]:
        return FreedomState.BREAKING
    if days >= FREEDOM_THRESHOLDS[FreedomState.DROWNING]:
        return FreedomState.STRUGGLING
    return FreedomState.DROWNING


def next_milestone(days: Days) -> Optional[int]:
    """The next celebration milestone above ``days``, or None past the last one."""
    if math.isinf(days):
        return None
    for milestone in MILESTONES:
        if days < milestone:
            return milestone
    return None


# =============================================================================
# FREEDOM
# =============================================================================

def calculate_freedom(profile: UserProfile) -> FreedomResult:
    """Calculate days of freedom for a profile snapshot.

    Decision order:
    1. No asset income and no needs: 0 days, not kinged (nothing to measure yet).
    2. Asset income covers needs (and needs > 0): infinite, kinged.
    3. Otherwise liquid assets / (daily needs - daily asset income), floored,
       or 0 when there is nothing liquid to spend down.
    """
    asset_income = calculate_asset_income(profile.assets)
    annual_obligations = calculate_annual_obligations(profile.obligations)
    annual_desires = calculate_annual_desires(profile.desires)
    annual_debt_service = calculate_annual_debt_service(profile.debts)

    annual_needs = annual_obligations + annual_desires + annual_debt_service
    daily_needs = annual_needs / DAYS_PER_YEAR
    daily_asset_income = asset_income / DAYS_PER_YEAR

    days: Days
    is_kinged = False

    if daily_asset_income == 0 and daily_needs == 0:
        days = 0
    elif daily_asset_income >= daily_needs and daily_needs > 0:
        days = math.inf
        is_kinged = True
    else:
        liquid_assets = calculate_liquid_assets(profile.assets)
        annual_burn = annual_needs - asset_income
        if annual_burn <= 0 or liquid_assets <= 0:
            days = 0
        else:
            # liquid / (daily needs - daily income), without rounding the daily figures
            days = math.floor(liquid_assets * DAYS_PER_YEAR / annual_burn)

    result = FreedomResult(
        days=days,
        formatted=format_freedom_days(days),
        state=get_freedom_state(days),
        daily_asset_income=daily_asset_income,
        daily_needs=daily_needs,
        is_kinged=is_kinged,
    )

    logger.info(
        "freedom_calculated",
        days=days,
        state=result.state.value,
        is_kinged=is_kinged,
        annual_asset_income=str(asset_income),
        annual_needs=str(annual_needs),
    )

    return result


def calculate_opportunity_cost(
    assets: list[Asset],
    apy: Optional[Decimal] = None,
) -> OpportunityCost:
    """Income forgone by crypto holdings that earn nothing.

    Args:
        assets: All assets; only crypto without an APY counts as idle.
        apy: Yield assumed for idle holdings (default 8%).
    """
    apy = DEFAULT_STABLECOIN_APY if apy is None else apy

    idle_value = ZERO
    for asset in assets:
        if asset.category != AssetCategory.CRYPTO:
            continue
        meta = asset.metadata
        if not isinstance(meta, CryptoMetadata) or not meta.apy:
            idle_value += asset.value

    potential_income = idle_value * apy

    return OpportunityCost(
        idle_value=idle_value,
        potential_income=potential_income,
        freedom_days_impact=math.floor(potential_income / DAYS_PER_YEAR),
    )


def calculate_desire_impact(
    current: FreedomResult,
    desire_cost: Decimal,
    liquid_assets: Decimal,
) -> DesireImpact:
    """Days of freedom left after paying for a desire out of liquid assets.

    A kinged user stays enthroned: passive income still covers needs.
    """
    if current.is_kinged:
        return DesireImpact(
            new_days=math.inf,
            days_difference=0,
            new_state=FreedomState.ENTHRONED,
        )

    remaining = liquid_assets - desire_cost
    daily_burn = current.daily_needs - current.daily_asset_income

    if daily_burn > 0 and remaining > 0:
        new_days = math.floor(remaining / daily_burn)
    else:
        new_days = 0

    return DesireImpact(
        new_days=new_days,
        days_difference=current.days - new_days,
        new_state=get_freedom_state(new_days),
    )
