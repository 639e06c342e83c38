"""Paycheck deduction waterfall.

An income source records take-home pay. The waterfall rebuilds the
gross-to-net path for display:

    gross pay
      - pre-tax deductions  = taxable income
      - taxes               = after-tax income
      - post-tax deductions = net pay (the income source amount)

Employer match is shown next to net pay, never netted into it.

Profiles that predate structured deductions only know their retirement
contributions and flat paycheck deductions. For those the waterfall falls
back to a legacy estimate with a pre-tax stage only. The mode is chosen
once per profile, not per income source.
"""

from decimal import Decimal
from typing import Optional, Sequence, Union

import structlog

from .cashflow import get_monthly_pretax_deductions
from .frequency import to_monthly
from .models import (
    Asset,
    IncomeCategory,
    IncomeSource,
    PaycheckDeduction,
    PaycheckWaterfall,
    PostTaxDeduction,
    PreTaxDeduction,
    Tax,
    WaterfallLine,
    WaterfallMode,
    WaterfallStage,
)

logger = structlog.get_logger()

ZERO = Decimal("0")

# Income categories that arrive as a paycheck with deductions.
PAYCHECK_CATEGORIES = frozenset({
    IncomeCategory.SALARY,
    IncomeCategory.FREELANCE,
    IncomeCategory.BUSINESS,
})

LEGACY_CAPTION = (
    "Estimated breakdown. Add your taxes and post-tax deductions "
    "to see the complete paycheck."
)


def is_paycheck_source(source: IncomeSource) -> bool:
    return source.category in PAYCHECK_CATEGORIES


def select_waterfall_mode(
    pre_tax_deductions: list[PreTaxDeduction],
    taxes: list[Tax],
    post_tax_deductions: list[PostTaxDeduction],
) -> WaterfallMode:
    """Structured as soon as any structured deduction exists anywhere."""
    if pre_tax_deductions or taxes or post_tax_deductions:
        return WaterfallMode.STRUCTURED
    return WaterfallMode.LEGACY


def _lines(
    records: Sequence[Union[PreTaxDeduction, Tax, PostTaxDeduction, PaycheckDeduction]],
    stage: WaterfallStage,
) -> list[WaterfallLine]:
    return [
        WaterfallLine(
            name=r.name,
            stage=stage,
            monthly_amount=to_monthly(r.per_pay_period, r.frequency),
        )
        for r in records
    ]


def _total(lines: list[WaterfallLine]) -> Decimal:
    return sum((line.monthly_amount for line in lines), ZERO)


def _legacy_pre_tax_lines(
    assets: list[Asset],
    paycheck_deductions: list[PaycheckDeduction],
) -> list[WaterfallLine]:
    """Retirement contributions (one line per account) plus flat deductions."""
    lines = []
    for asset in assets:
        contribution = get_monthly_pretax_deductions([asset]).contributions
        if contribution > 0:
            lines.append(WaterfallLine(
                name=asset.name,
                stage=WaterfallStage.PRE_TAX,
                monthly_amount=contribution,
            ))
    lines.extend(_lines(paycheck_deductions, WaterfallStage.PRE_TAX))
    return lines


def build_paycheck_waterfall(
    source: IncomeSource,
    mode: WaterfallMode,
    *,
    pre_tax_deductions: Optional[list[PreTaxDeduction]] = None,
    taxes: Optional[list[Tax]] = None,
    post_tax_deductions: Optional[list[PostTaxDeduction]] = None,
    assets: Optional[list[Asset]] = None,
    paycheck_deductions: Optional[list[PaycheckDeduction]] = None,
) -> PaycheckWaterfall:
    """Build the monthly gross-to-net waterfall for one income source.

    Args:
        source: Income source; its amount is take-home pay.
        mode: Result of ``select_waterfall_mode`` for the whole profile.
        pre_tax_deductions: Structured pre-tax deductions.
        taxes: Structured tax withholdings.
        post_tax_deductions: Structured post-tax deductions.
        assets: Assets, for retirement contributions and employer match.
        paycheck_deductions: Deprecated flat deductions (legacy mode).

    Returns:
        PaycheckWaterfall whose net pay equals the source's monthly amount
    """
    assets = assets or []
    net_monthly = to_monthly(source.amount, source.frequency)
    employer_match = get_monthly_pretax_deductions(assets).employer_match

    if mode == WaterfallMode.LEGACY:
        pre_lines = _legacy_pre_tax_lines(assets, paycheck_deductions or [])
        pre_total = _total(pre_lines)

        logger.debug(
            "paycheck_waterfall_built",
            income_source_id=source.id,
            mode=mode.value,
            gross_estimate=str(net_monthly + pre_total),
        )

        return PaycheckWaterfall(
            income_source_id=source.id,
            income_source_name=source.name,
            mode=mode,
            gross_pay=net_monthly + pre_total,
            pre_tax_lines=pre_lines,
            pre_tax_total=pre_total,
            net_pay=net_monthly,
            employer_match=employer_match,
            caption=LEGACY_CAPTION,
        )

    pre_lines = _lines(pre_tax_deductions or [], WaterfallStage.PRE_TAX)
    tax_lines = _lines(taxes or [], WaterfallStage.TAX)
    post_lines = _lines(post_tax_deductions or [], WaterfallStage.POST_TAX)

    pre_total = _total(pre_lines)
    taxes_total = _total(tax_lines)
    post_total = _total(post_lines)

    gross_pay = net_monthly + pre_total + taxes_total + post_total
    taxable_income = gross_pay - pre_total
    after_tax_income = taxable_income - taxes_total
    net_pay = after_tax_income - post_total

    logger.debug(
        "paycheck_waterfall_built",
        income_source_id=source.id,
        mode=mode.value,
        gross_pay=str(gross_pay),
        net_pay=str(net_pay),
    )

    return PaycheckWaterfall(
        income_source_id=source.id,
        income_source_name=source.name,
        mode=mode,
        gross_pay=gross_pay,
        pre_tax_lines=pre_lines,
        pre_tax_total=pre_total,
        taxable_income=taxable_income,
        tax_lines=tax_lines,
        taxes_total=taxes_total,
        after_tax_income=after_tax_income,
        post_tax_lines=post_lines,
        post_tax_total=post_total,
        net_pay=net_pay,
        employer_match=employer_match,
    )
