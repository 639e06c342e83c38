"""Tests for the days-of-freedom pipeline."""

import math
from datetime import datetime
from decimal import Decimal

import pytest

from kingme_core import freedom
from kingme_core.freedom import (
    FREEDOM_THRESHOLDS,
    calculate_asset_income,
    calculate_desire_impact,
    calculate_freedom,
    calculate_liquid_assets,
    calculate_opportunity_cost,
    compute_annual_income,
    format_freedom_days,
    get_freedom_state,
    next_milestone,
)
from kingme_core.models import (
    Asset,
    AssetCategory,
    BusinessMetadata,
    CryptoMetadata,
    Debt,
    Desire,
    FreedomState,
    Obligation,
    RealEstateMetadata,
    RetirementMetadata,
    StockMetadata,
    UserProfile,
)


def staked_sol(value: str = "100000", apy: str = "0.05") -> Asset:
    return Asset(
        id="sol",
        name="Staked SOL",
        category=AssetCategory.CRYPTO,
        value=Decimal(value),
        metadata=CryptoMetadata(quantity=Decimal("600"), apy=Decimal(apy), is_staked=True),
    )


def rent(amount: str = "2000") -> Obligation:
    return Obligation(id="rent", name="Rent", amount=Decimal(amount), bank_account_id="chk")


# =============================================================================
# ASSET INCOME
# =============================================================================

class TestComputeAnnualIncome:
    """Per-category income rules."""

    def test_crypto_with_apy(self):
        assert compute_annual_income(staked_sol()) == Decimal("5000")

    def test_crypto_without_apy(self):
        asset = Asset(id="btc", category=AssetCategory.CRYPTO, value=Decimal("50000"),
                      metadata=CryptoMetadata(quantity=Decimal("1")))
        assert compute_annual_income(asset) == Decimal("0")

    def test_crypto_apy_counts_even_when_not_staked(self):
        asset = Asset(id="usdc", category=AssetCategory.CRYPTO, value=Decimal("10000"),
                      metadata=CryptoMetadata(apy=Decimal("8")))
        assert compute_annual_income(asset) == Decimal("800")

    def test_defi_uses_apy(self):
        asset = Asset(id="lp", category=AssetCategory.DEFI, value=Decimal("2000"),
                      metadata=CryptoMetadata(type="defi", apy=Decimal("0.25")))
        assert compute_annual_income(asset) == Decimal("500")

    def test_real_estate_net_rent(self):
        asset = Asset(
            id="duplex",
            category=AssetCategory.REAL_ESTATE,
            value=Decimal("300000"),
            metadata=RealEstateMetadata(
                monthly_rental_income=Decimal("2400"),
                monthly_expenses=Decimal("1900"),
            ),
        )
        assert compute_annual_income(asset) == Decimal("6000")

    def test_real_estate_negative_cash_flow(self):
        asset = Asset(
            id="condo",
            category=AssetCategory.REAL_ESTATE,
            value=Decimal("200000"),
            metadata=RealEstateMetadata(monthly_expenses=Decimal("300")),
        )
        assert compute_annual_income(asset) == Decimal("-3600")

    def test_stock_dividends(self):
        asset = Asset(id="schd", category=AssetCategory.STOCKS, value=Decimal("20000"),
                      metadata=StockMetadata(dividend_yield=Decimal("3.5")))
        assert compute_annual_income(asset) == Decimal("700")

    def test_business_distributions(self):
        asset = Asset(id="llc", category=AssetCategory.BUSINESS, value=Decimal("80000"),
                      metadata=BusinessMetadata(annual_distributions=Decimal("12000")))
        assert compute_annual_income(asset) == Decimal("12000")

    @pytest.mark.parametrize(
        "category",
        [AssetCategory.BANK_ACCOUNT, AssetCategory.RETIREMENT, AssetCategory.OTHER],
    )
    def test_manual_income_categories(self, category: AssetCategory):
        asset = Asset(id="x", category=category, value=Decimal("1000"), annual_income=Decimal("45"))
        assert compute_annual_income(asset) == Decimal("45")

    def test_mismatched_metadata_yields_nothing(self):
        asset = Asset(id="odd", category=AssetCategory.STOCKS, value=Decimal("1000"),
                      metadata=CryptoMetadata(apy=Decimal("0.5")))
        assert compute_annual_income(asset) == Decimal("0")

    def test_every_category_has_a_rule(self):
        assert set(freedom._INCOME_RULES) == set(AssetCategory)

    def test_total(self):
        stock = Asset(id="schd", category=AssetCategory.STOCKS, value=Decimal("20000"),
                      metadata=StockMetadata(dividend_yield=Decimal("0.035")))
        assert calculate_asset_income([staked_sol(), stock]) == Decimal("5700")


class TestLiquidAssets:
    def test_only_crypto_defi_and_stocks(self):
        assets = [
            staked_sol("1000"),
            Asset(id="lp", category=AssetCategory.DEFI, value=Decimal("200")),
            Asset(id="vti", category=AssetCategory.STOCKS, value=Decimal("30")),
            Asset(id="house", category=AssetCategory.REAL_ESTATE, value=Decimal("250000")),
            Asset(id="biz", category=AssetCategory.BUSINESS, value=Decimal("9000")),
            Asset(id="401k", category=AssetCategory.RETIREMENT, value=Decimal("5000"),
                  metadata=RetirementMetadata()),
        ]
        assert calculate_liquid_assets(assets) == Decimal("1230")


# =============================================================================
# FORMATTING AND STATES
# =============================================================================

class TestFormatFreedomDays:
    @pytest.mark.parametrize(
        "days, expected",
        [
            (math.inf, "Forever"),
            (36501, "Forever"),
            (36500, "100 years"),
            (1921, "5 years"),
            (730, "2 years"),
            (729, "1 year"),
            (365, "1 year"),
            (364, "12 months"),
            (60, "2 months"),
            (59, "1 month"),
            (30, "1 month"),
            (29, "29 days"),
            (1, "1 day"),
            (0, "0 days"),
        ],
    )
    def test_formatting(self, days, expected: str):
        assert format_freedom_days(days) == expected


class TestFreedomState:
    @pytest.mark.parametrize(
        "days, expected",
        [
            (0, FreedomState.DROWNING),
            (29, FreedomState.DROWNING),
            (30, FreedomState.STRUGGLING),
            (179, FreedomState.STRUGGLING),
            (180, FreedomState.BREAKING),
            (729, FreedomState.BREAKING),
            (730, FreedomState.RISING),
            (3650, FreedomState.RISING),
            (3651, FreedomState.ENTHRONED),
            (math.inf, FreedomState.ENTHRONED),
        ],
    )
    def test_thresholds(self, days, expected: FreedomState):
        assert get_freedom_state(days) == expected

    def test_thresholds_ascending(self):
        values = list(FREEDOM_THRESHOLDS.values())
        assert values == sorted(values)


class TestNextMilestone:
    def test_next(self):
        assert next_milestone(0) == 30
        assert next_milestone(30) == 90
        assert next_milestone(1921) == 3650

    def test_past_last(self):
        assert next_milestone(3650) is None
        assert next_milestone(math.inf) is None


# =============================================================================
# FREEDOM
# =============================================================================

class TestCalculateFreedom:
    """Test suite for calculate_freedom."""

    def test_empty_profile(self):
        """Nothing to measure: zero days, not kinged."""
        result = calculate_freedom(UserProfile())

        assert result.days == 0
        assert result.is_kinged is False
        assert result.state == FreedomState.DROWNING
        assert result.formatted == "0 days"

    def test_staked_crypto_against_rent(self):
        profile = UserProfile(assets=[staked_sol()], obligations=[rent()])

        result = calculate_freedom(profile)

        assert result.daily_asset_income == pytest.approx(Decimal("13.70"), abs=Decimal("0.01"))
        assert result.daily_needs == pytest.approx(Decimal("65.75"), abs=Decimal("0.01"))
        assert result.days == 1921
        assert result.formatted == "5 years"
        assert result.state == FreedomState.RISING
        assert result.is_kinged is False

    def test_kinged(self):
        profile = UserProfile(assets=[staked_sol(apy="0.30")], obligations=[rent()])

        result = calculate_freedom(profile)

        assert result.is_kinged is True
        assert result.days == math.inf
        assert result.formatted == "Forever"
        assert result.state == FreedomState.ENTHRONED

    def test_income_exactly_covers_needs(self):
        # 24000/yr at 0.24 on 100k
        profile = UserProfile(assets=[staked_sol(apy="0.24")], obligations=[rent()])
        assert calculate_freedom(profile).is_kinged

    def test_income_without_needs_is_not_kinged(self):
        result = calculate_freedom(UserProfile(assets=[staked_sol()]))
        assert result.is_kinged is False
        assert result.days == 0

    @pytest.mark.parametrize("apy", ["0", "0.01", "0.05", "0.2", "0.24", "0.5"])
    def test_kinged_iff_infinite(self, apy: str):
        result = calculate_freedom(UserProfile(assets=[staked_sol(apy=apy)], obligations=[rent()]))
        assert result.is_kinged == math.isinf(result.days)

    def test_no_liquid_assets(self):
        house = Asset(
            id="house",
            category=AssetCategory.REAL_ESTATE,
            value=Decimal("400000"),
            metadata=RealEstateMetadata(monthly_rental_income=Decimal("500")),
        )
        result = calculate_freedom(UserProfile(assets=[house], obligations=[rent()]))
        assert result.days == 0

    def test_debts_count_as_needs(self):
        base = UserProfile(assets=[staked_sol()], obligations=[rent()])
        with_debt = UserProfile(
            assets=[staked_sol()],
            obligations=[rent()],
            debts=[Debt(id="car", monthly_payment=Decimal("500"))],
        )
        assert calculate_freedom(with_debt).days < calculate_freedom(base).days

    def test_unpurchased_desires_do_not_change_freedom(self):
        base = UserProfile(assets=[staked_sol()], obligations=[rent()])
        wishful = UserProfile(
            assets=[staked_sol()],
            obligations=[rent()],
            desires=[Desire(id="boat", estimated_cost=Decimal("80000"))],
        )
        assert calculate_freedom(wishful) == calculate_freedom(base)

    def test_purchased_open_desire_counts(self):
        base = UserProfile(assets=[staked_sol()], obligations=[rent()])
        bought = UserProfile(
            assets=[staked_sol()],
            obligations=[rent()],
            desires=[Desire(id="trip", estimated_cost=Decimal("6000"), purchased_at=datetime(2026, 3, 1))],
        )
        assert calculate_freedom(bought).days < calculate_freedom(base).days

    def test_exact_multiples_are_not_rounded_down(self):
        # 36000 liquid against 36000/yr of needs is exactly one year
        profile = UserProfile(
            assets=[Asset(id="vti", category=AssetCategory.STOCKS, value=Decimal("36000"))],
            obligations=[Obligation(id="o", amount=Decimal("3000"))],
        )
        assert calculate_freedom(profile).days == 365


# =============================================================================
# OPPORTUNITY COST AND DESIRE IMPACT
# =============================================================================

class TestOpportunityCost:
    def test_idle_crypto(self):
        assets = [
            staked_sol(),
            Asset(id="btc", category=AssetCategory.CRYPTO, value=Decimal("36500"),
                  metadata=CryptoMetadata(quantity=Decimal("0.5"))),
            Asset(id="eth", category=AssetCategory.CRYPTO, value=Decimal("10000")),
            Asset(id="vti", category=AssetCategory.STOCKS, value=Decimal("99999")),
        ]

        result = calculate_opportunity_cost(assets)

        assert result.idle_value == Decimal("46500")
        assert result.potential_income == Decimal("3720")
        assert result.freedom_days_impact == 10

    def test_custom_apy(self):
        asset = Asset(id="btc", category=AssetCategory.CRYPTO, value=Decimal("10000"))
        assert calculate_opportunity_cost([asset], Decimal("0.05")).potential_income == Decimal("500")

    def test_nothing_idle(self):
        result = calculate_opportunity_cost([staked_sol()])
        assert result.idle_value == Decimal("0")
        assert result.freedom_days_impact == 0


class TestDesireImpact:
    def test_kinged_stays_enthroned(self):
        current = calculate_freedom(UserProfile(assets=[staked_sol(apy="0.5")], obligations=[rent()]))

        impact = calculate_desire_impact(current, Decimal("50000"), Decimal("100000"))

        assert impact.new_days == math.inf
        assert impact.days_difference == 0
        assert impact.new_state == FreedomState.ENTHRONED

    def test_purchase_reduces_days(self):
        profile = UserProfile(assets=[staked_sol()], obligations=[rent()])
        current = calculate_freedom(profile)

        impact = calculate_desire_impact(current, Decimal("10000"), calculate_liquid_assets(profile.assets))

        assert impact.new_days < current.days
        assert impact.days_difference == current.days - impact.new_days
        assert impact.new_state == get_freedom_state(impact.new_days)

    def test_cost_above_liquid_assets(self):
        current = calculate_freedom(UserProfile(assets=[staked_sol("1000")], obligations=[rent()]))

        impact = calculate_desire_impact(current, Decimal("5000"), Decimal("1000"))

        assert impact.new_days == 0
        assert impact.new_state == FreedomState.DROWNING
