"""Derived outputs of the engine.

Every value here is display-only: callers render them and never feed
them back as input records. Day counts are ints, or ``math.inf`` when a
balance or an asset base never runs out.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field

from .records import Account, Obligation

# int day count, or math.inf
Days = Union[int, float]


class AccountStatus(str, Enum):
    """Health of a single bank account."""
    HEALTHY = "healthy"
    TIGHT = "tight"
    DEFICIT = "deficit"


class HealthStatus(str, Enum):
    """Overall financial health, worst to best."""
    CRITICAL = "critical"
    STRUGGLING = "struggling"
    STABLE = "stable"
    BUILDING = "building"
    THRIVING = "thriving"


class FreedomState(str, Enum):
    """Life stage derived from days of freedom."""
    DROWNING = "drowning"
    STRUGGLING = "struggling"
    BREAKING = "breaking"
    RISING = "rising"
    ENTHRONED = "enthroned"


class WaterfallMode(str, Enum):
    """How a paycheck waterfall is built.

    STRUCTURED when any pre-tax, tax or post-tax record exists in the
    profile, LEGACY otherwise.
    """
    STRUCTURED = "structured"
    LEGACY = "legacy"


class WaterfallStage(str, Enum):
    PRE_TAX = "pre_tax"
    TAX = "tax"
    POST_TAX = "post_tax"


class _Result(BaseModel):
    model_config = {"ser_json_inf_nan": "constants"}


class AccountCashFlowAnalysis(_Result):
    """Cash flow of one bank account."""

    account: Account
    monthly_income: Decimal
    monthly_obligations: Decimal
    monthly_debt_payments: Decimal
    monthly_net: Decimal
    current_balance: Decimal
    days_of_runway: Days
    status: AccountStatus
    warnings: list[str] = Field(default_factory=list)


class PreTaxContributions(_Result):
    """Monthly retirement contributions taken out of the paycheck."""

    contributions: Decimal
    employer_match: Decimal


class OverallCashFlow(_Result):
    """Cash flow across every account plus portfolio-wide figures."""

    total_monthly_income: Decimal
    total_monthly_obligations: Decimal
    total_monthly_debt_payments: Decimal
    total_monthly_net: Decimal
    total_balance: Decimal  # bank accounts only
    liquid_assets: Decimal  # bank accounts + non-retirement assets
    total_daily_living: Decimal
    total_pre_tax_deductions: Decimal
    total_employer_match: Decimal
    unassigned_obligations: list[Obligation] = Field(default_factory=list)
    accounts: list[AccountCashFlowAnalysis] = Field(default_factory=list)
    health_status: HealthStatus
    health_message: str
    recommendations: list[str] = Field(default_factory=list)


class WaterfallLine(_Result):
    """One deduction row of a paycheck waterfall, normalized to monthly."""

    name: str
    stage: WaterfallStage
    monthly_amount: Decimal


class PaycheckWaterfall(_Result):
    """Gross-to-net breakdown of one paycheck, all figures monthly.

    In legacy mode only the pre-tax stage is known: ``taxable_income``,
    ``after_tax_income`` and the tax/post-tax lines are left empty and
    ``caption`` explains that the breakdown is incomplete.
    """

    income_source_id: str
    income_source_name: str
    mode: WaterfallMode
    gross_pay: Decimal
    pre_tax_lines: list[WaterfallLine] = Field(default_factory=list)
    pre_tax_total: Decimal
    taxable_income: Optional[Decimal] = None
    tax_lines: list[WaterfallLine] = Field(default_factory=list)
    taxes_total: Decimal = Decimal("0")
    after_tax_income: Optional[Decimal] = None
    post_tax_lines: list[WaterfallLine] = Field(default_factory=list)
    post_tax_total: Decimal = Decimal("0")
    net_pay: Decimal
    employer_match: Decimal = Decimal("0")
    caption: Optional[str] = None


class FreedomResult(_Result):
    """Days of freedom and everything derived from it."""

    days: Days
    formatted: str
    state: FreedomState
    daily_asset_income: Decimal
    daily_needs: Decimal
    is_kinged: bool


class OpportunityCost(_Result):
    """What idle crypto holdings would earn at a default yield."""

    idle_value: Decimal
    potential_income: Decimal
    freedom_days_impact: int


class DesireImpact(_Result):
    """Effect of buying a desire on days of freedom."""

    new_days: Days
    days_difference: Days
    new_state: FreedomState
