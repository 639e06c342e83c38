"""Whole-profile analysis in one pass.

Runs the cash-flow analysis and the freedom calculation over the same
snapshot, picks the paycheck waterfall mode once for the profile and
builds a waterfall for every paycheck income source.
"""

from typing import Optional

import structlog
from pydantic import BaseModel, Field

from .cashflow import analyze_all_accounts
from .config import KingMeSettings
from .freedom import calculate_freedom, calculate_opportunity_cost, next_milestone
from .models import (
    FreedomResult,
    OpportunityCost,
    OverallCashFlow,
    PaycheckWaterfall,
    UserProfile,
    WaterfallMode,
)
from .paycheck import build_paycheck_waterfall, is_paycheck_source, select_waterfall_mode

logger = structlog.get_logger()


class ProfileAnalysis(BaseModel):
    """Everything derived from one profile snapshot."""

    model_config = {"ser_json_inf_nan": "constants"}

    cash_flow: OverallCashFlow
    freedom: FreedomResult
    waterfall_mode: WaterfallMode
    waterfalls: list[PaycheckWaterfall] = Field(default_factory=list)
    opportunity_cost: OpportunityCost
    next_milestone: Optional[int] = None


def analyze_profile(
    profile: UserProfile,
    settings: Optional[KingMeSettings] = None,
) -> ProfileAnalysis:
    """Analyze a full profile snapshot.

    Args:
        profile: Snapshot from the store layer.
        settings: Supplies the idle-asset yield. Defaults are used when omitted.

    Returns:
        ProfileAnalysis
    """
    idle_apy = settings.idle_asset_apy if settings is not None else None

    cash_flow = analyze_all_accounts(
        profile.accounts,
        profile.income_sources,
        profile.obligations,
        profile.debts,
        assets=profile.assets,
        paycheck_deductions=profile.paycheck_deductions,
    )
    freedom = calculate_freedom(profile)

    mode = select_waterfall_mode(
        profile.pre_tax_deductions,
        profile.taxes,
        profile.post_tax_deductions,
    )
    waterfalls = [
        build_paycheck_waterfall(
            source,
            mode,
            pre_tax_deductions=profile.pre_tax_deductions,
            taxes=profile.taxes,
            post_tax_deductions=profile.post_tax_deductions,
            assets=profile.assets,
            paycheck_deductions=profile.paycheck_deductions,
        )
        for source in profile.income_sources
        if is_paycheck_source(source)
    ]

    logger.info(
        "profile_analyzed",
        health_status=cash_flow.health_status.value,
        freedom_state=freedom.state.value,
        waterfall_mode=mode.value,
        waterfalls=len(waterfalls),
    )

    return ProfileAnalysis(
        cash_flow=cash_flow,
        freedom=freedom,
        waterfall_mode=mode,
        waterfalls=waterfalls,
        opportunity_cost=calculate_opportunity_cost(profile.assets, idle_apy),
        next_milestone=next_milestone(freedom.days),
    )
