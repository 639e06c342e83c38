"""Per-account and aggregate cash-flow analysis.

Income and obligations are matched to bank accounts through
``bank_account_id``. Each account gets a runway and a health status;
the aggregate view adds debt service, portfolio liquidity and pre-tax
retirement figures, classifies overall health and produces ranked
recommendations.

All functions are pure: the same snapshot always yields the same result.
"""

import math
from decimal import Decimal
from typing import Optional

import structlog

from .frequency import to_monthly
from .models import (
    Account,
    AccountCashFlowAnalysis,
    AccountStatus,
    Asset,
    AssetCategory,
    Debt,
    HealthStatus,
    IncomeSource,
    Obligation,
    ObligationCategory,
    OverallCashFlow,
    PaycheckDeduction,
    PreTaxContributions,
    RetirementMetadata,
)
from .models.results import Days

logger = structlog.get_logger()

ZERO = Decimal("0")

DAYS_PER_MONTH = 30
LOW_RUNWAY_DAYS = 30
TARGET_RUNWAY_DAYS = 90

# Aggregate health thresholds
STRUGGLING_NET_CEILING = Decimal("500")
STABLE_RUNWAY_MONTHS = 3
BUILDING_RUNWAY_MONTHS = 6


# =============================================================================
# HELPERS
# =============================================================================

def safe_balance(account: Account) -> Decimal:
    """Return the account balance, or zero when it is missing or not finite."""
    balance = account.current_balance
    if balance is None:
        return ZERO
    if not balance.is_finite():
        logger.warning("non_finite_balance", account_id=account.id, balance=str(balance))
        return ZERO
    return balance


def runway_days(balance: Decimal, monthly_outflow: Decimal) -> Days:
    """Days a balance lasts at a 30-day-month burn rate.

    Returns ``math.inf`` when there is no outflow. Never negative.
    """
    if monthly_outflow <= 0:
        return math.inf
    # balance / (outflow / 30), kept as one division so 30-day multiples stay exact
    return max(0, math.floor(balance * DAYS_PER_MONTH / monthly_outflow))


def get_monthly_income_for_account(
    sources: list[IncomeSource],
    bank_account_id: str,
) -> Decimal:
    """Sum the monthly equivalent of every income source paid into an account."""
    return sum(
        (to_monthly(s.amount, s.frequency) for s in sources if s.bank_account_id == bank_account_id),
        ZERO,
    )


def get_monthly_obligations_for_account(
    obligations: list[Obligation],
    bank_account_id: str,
) -> Decimal:
    """Sum the (already monthly) obligations assigned to an account."""
    return sum(
        (o.amount for o in obligations if o.bank_account_id == bank_account_id),
        ZERO,
    )


def get_unassigned_obligations(obligations: list[Obligation]) -> list[Obligation]:
    """Obligations that are not linked to any bank account."""
    return [o for o in obligations if not o.is_assigned]


def get_monthly_pretax_deductions(assets: list[Asset]) -> PreTaxContributions:
    """Sum monthly retirement contributions and employer match.

    Contributions are paycheck reductions: they never pass through a bank
    account and are not obligations. Employer match uses the explicit
    monthly dollar figure when present, otherwise the match percentage
    applied to the monthly contribution.
    """
    contributions = ZERO
    employer_match = ZERO

    for asset in assets:
        meta = asset.metadata
        if asset.category != AssetCategory.RETIREMENT or not isinstance(meta, RetirementMetadata):
            continue

        monthly = to_monthly(meta.contribution_amount, meta.contribution_frequency)
        contributions += monthly

        if meta.employer_match_dollars is not None:
            employer_match += meta.employer_match_dollars
        elif meta.employer_match_percent is not None:
            employer_match += monthly * meta.employer_match_percent

    return PreTaxContributions(contributions=contributions, employer_match=employer_match)


def get_monthly_paycheck_deductions(deductions: list[PaycheckDeduction]) -> Decimal:
    """Monthly total of deprecated flat paycheck deductions."""
    return sum((to_monthly(d.per_pay_period, d.frequency) for d in deductions), ZERO)


def calculate_near_term_liquidity(total_balance: Decimal, assets: list[Asset]) -> Decimal:
    """Bank balances plus the value of every non-retirement asset.

    This is the cash-flow view of liquidity and is deliberately broader
    than ``freedom.calculate_liquid_assets``: real estate, business
    stakes and other holdings count here, only retirement accounts are
    excluded.
    """
    non_retirement = sum((a.value for a in assets if not a.is_retirement), ZERO)
    return total_balance + non_retirement


# =============================================================================
# PER-ACCOUNT ANALYSIS
# =============================================================================

def analyze_account(
    account: Account,
    income_sources: list[IncomeSource],
    obligations: list[Obligation],
    debts: list[Debt],
) -> AccountCashFlowAnalysis:
    """Analyze the cash flow of a single bank account.

    Debts are not linked to accounts, so per-account debt payments are
    always zero; debt service is only counted in the aggregate view.

    Status precedence, first match wins:
    deficit (income does not cover obligations), tight (< 30 days of
    runway), tight (< 90 days), healthy. A savings note is appended when
    the account nets positive with 90+ days of runway.
    """
    balance = safe_balance(account)

    monthly_income = get_monthly_income_for_account(income_sources, account.id)
    monthly_obligations = get_monthly_obligations_for_account(obligations, account.id)
    monthly_debt_payments = ZERO
    monthly_net = monthly_income - monthly_obligations - monthly_debt_payments

    days = runway_days(balance, monthly_obligations + monthly_debt_payments)

    warnings: list[str] = []
    status = AccountStatus.HEALTHY

    if monthly_income > 0 and monthly_income < monthly_obligations:
        shortfall = monthly_obligations - monthly_income
        warnings.append(
            f"Income (${monthly_income:.0f}) doesn't cover obligations "
            f"(${monthly_obligations:.0f}). Losing ${shortfall:.0f}/mo."
        )
        status = AccountStatus.DEFICIT
    elif monthly_income > 0 and days < LOW_RUNWAY_DAYS:
        warnings.append(f"Only {days} days of runway. Balance is low.")
        status = AccountStatus.TIGHT
    elif monthly_income > 0 and days < TARGET_RUNWAY_DAYS:
        warnings.append(f"{days} days of runway. Aim for {TARGET_RUNWAY_DAYS}+ days.")
        status = AccountStatus.TIGHT

    if monthly_net > 0 and days >= TARGET_RUNWAY_DAYS:
        runway_text = "unlimited" if math.isinf(days) else f"{days} days"
        warnings.append(f"Saving ${monthly_net:.0f}/mo with {runway_text} runway.")

    logger.debug(
        "account_analyzed",
        account_id=account.id,
        monthly_income=str(monthly_income),
        monthly_obligations=str(monthly_obligations),
        days_of_runway=days,
        status=status.value,
    )

    return AccountCashFlowAnalysis(
        account=account,
        monthly_income=monthly_income,
        monthly_obligations=monthly_obligations,
        monthly_debt_payments=monthly_debt_payments,
        monthly_net=monthly_net,
        current_balance=balance,
        days_of_runway=days,
        status=status,
        warnings=warnings,
    )


# =============================================================================
# AGGREGATE ANALYSIS
# =============================================================================

def classify_health(
    *,
    total_monthly_income: Decimal,
    total_monthly_net: Decimal,
    total_monthly_outflow: Decimal,
    liquid_assets: Decimal,
    has_income_sources: bool,
) -> tuple[HealthStatus, str, list[str]]:
    """Classify overall health and build the matching recommendations.

    Branches are evaluated top to bottom, first match wins:
    no linked income, negative net, net under $500, then months of
    runway (< 3 stable, < 6 building, otherwise thriving).

    Returns:
        Tuple of (status, message, recommendations)
    """
    if total_monthly_income == 0:
        if not has_income_sources:
            return (
                HealthStatus.CRITICAL,
                "No income recorded yet. Add your salary or trading income to see your cash flow.",
                ["Add a salary or trading income source"],
            )
        return (
            HealthStatus.CRITICAL,
            "Income sources exist but none is linked to a bank account.",
            ["Check that every income source has a destination account"],
        )

    if total_monthly_net < 0:
        return (
            HealthStatus.CRITICAL,
            f"You're spending ${abs(total_monthly_net):.0f}/month more than you earn. "
            "Fix this before anything else.",
            [
                "Increase income or cut obligations",
                "Review recurring expenses for cuts",
                "Get cash flow positive before investing",
            ],
        )

    if total_monthly_net < STRUGGLING_NET_CEILING:
        return (
            HealthStatus.STRUGGLING,
            f"Bills are covered but only ${total_monthly_net:.0f}/month is left over.",
            [
                f"Build an emergency fund (target: {STABLE_RUNWAY_MONTHS} months)",
                "Look for ways to increase income",
                "Hold off on new asset purchases for now",
            ],
        )

    months_of_runway = (
        liquid_assets / total_monthly_outflow if total_monthly_outflow > 0 else math.inf
    )

    if months_of_runway < STABLE_RUNWAY_MONTHS:
        shortfall = total_monthly_outflow * STABLE_RUNWAY_MONTHS - liquid_assets
        return (
            HealthStatus.STABLE,
            f"Saving ${total_monthly_net:.0f}/month. "
            f"Build your emergency fund to {STABLE_RUNWAY_MONTHS} months first.",
            [
                f"Need ${shortfall:.0f} more for a {STABLE_RUNWAY_MONTHS}-month runway",
                "Keep the emergency fund in high-yield savings",
                "Once the runway is solid, invest the surplus",
            ],
        )

    if months_of_runway < BUILDING_RUNWAY_MONTHS:
        return (
            HealthStatus.BUILDING,
            f"{months_of_runway:.1f} months of runway, saving ${total_monthly_net:.0f}/month. "
            "Ready to start investing.",
            [
                "Start moving surplus into income-generating assets",
                "Consider stablecoin lending or staking",
                f"Keep growing the emergency fund toward {BUILDING_RUNWAY_MONTHS} months",
            ],
        )

    runway_text = (
        "Unlimited runway" if math.isinf(months_of_runway)
        else f"{months_of_runway:.1f} months of runway"
    )
    return (
        HealthStatus.THRIVING,
        f"{runway_text}, saving ${total_monthly_net:.0f}/month. Invest aggressively.",
        [
            "Maximize investment in income-generating assets",
            "Diversify across crypto, stocks and real estate",
            f"Goal: grow passive income to ${total_monthly_outflow:.0f}/month",
        ],
    )


def analyze_all_accounts(
    accounts: list[Account],
    income_sources: list[IncomeSource],
    obligations: list[Obligation],
    debts: list[Debt],
    assets: Optional[list[Asset]] = None,
    paycheck_deductions: Optional[list[PaycheckDeduction]] = None,
) -> OverallCashFlow:
    """Full cash-flow analysis across all accounts.

    Args:
        accounts: Bank accounts.
        income_sources: All income sources.
        obligations: All obligations, assigned or not.
        debts: All debts; their payments count only at this level.
        assets: All assets, for liquidity and retirement contributions.
        paycheck_deductions: Deprecated flat pre-tax deductions.

    Returns:
        OverallCashFlow with per-account analyses, health and recommendations
    """
    assets = assets or []
    paycheck_deductions = paycheck_deductions or []

    analyses = [
        analyze_account(account, income_sources, obligations, debts)
        for account in accounts
    ]

    total_income = sum((a.monthly_income for a in analyses), ZERO)
    total_obligations = sum((a.monthly_obligations for a in analyses), ZERO)
    total_debt_payments = sum((d.monthly_payment for d in debts), ZERO)
    total_net = total_income - total_obligations - total_debt_payments
    total_balance = sum((a.current_balance for a in analyses), ZERO)

    liquid_assets = calculate_near_term_liquidity(total_balance, assets)

    total_daily_living = sum(
        (o.amount for o in obligations if o.category == ObligationCategory.DAILY_LIVING),
        ZERO,
    )

    retirement = get_monthly_pretax_deductions(assets)
    total_pre_tax = retirement.contributions + get_monthly_paycheck_deductions(paycheck_deductions)

    unassigned = get_unassigned_obligations(obligations)

    health_status, health_message, recommendations = classify_health(
        total_monthly_income=total_income,
        total_monthly_net=total_net,
        total_monthly_outflow=total_obligations + total_debt_payments,
        liquid_assets=liquid_assets,
        has_income_sources=len(income_sources) > 0,
    )

    if unassigned:
        recommendations.insert(
            0, f"{len(unassigned)} obligation(s) not assigned to an account"
        )

    logger.info(
        "cash_flow_analyzed",
        accounts=len(analyses),
        total_monthly_income=str(total_income),
        total_monthly_net=str(total_net),
        liquid_assets=str(liquid_assets),
        unassigned_obligations=len(unassigned),
        health_status=health_status.value,
    )

    return OverallCashFlow(
        total_monthly_income=total_income,
        total_monthly_obligations=total_obligations,
        total_monthly_debt_payments=total_debt_payments,
        total_monthly_net=total_net,
        total_balance=total_balance,
        liquid_assets=liquid_assets,
        total_daily_living=total_daily_living,
        total_pre_tax_deductions=total_pre_tax,
        total_employer_match=retirement.employer_match,
        unassigned_obligations=unassigned,
        accounts=analyses,
        health_status=health_status,
        health_message=health_message,
        recommendations=recommendations,
    )
