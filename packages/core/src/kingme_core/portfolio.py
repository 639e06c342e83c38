"""Portfolio breakdown by display category.

Groups assets into the sections the asset screen shows. Bank accounts are
folded in as cash holdings. Business stakes and "other" assets that are
not commodities have no section of their own and are left out.

The APY attached to a folded-in bank account is display metadata only.
Bank-account income follows the manual-income rule of
``freedom.compute_annual_income``, so the nominal rate never changes
section income or any freedom figure.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .cashflow import safe_balance
from .freedom import compute_annual_income
from .models import (
    Account,
    AccountType,
    Asset,
    AssetCategory,
    BankAccountMetadata,
)

ZERO = Decimal("0")

# Nominal yields shown for bank holdings; display only
BANK_ACCOUNT_APYS = {
    AccountType.SAVINGS: Decimal("0.045"),
    AccountType.CHECKING: Decimal("0.005"),
    AccountType.INVESTMENT: ZERO,
}

COMMODITY_KEYWORDS = ("gold",)


class PortfolioCategory(str, Enum):
    """Sections of the portfolio view."""
    BROKERAGE = "brokerage"
    CASH = "cash"
    REAL_ESTATE = "real_estate"
    COMMODITIES = "commodities"
    CRYPTO = "crypto"
    RETIREMENT = "retirement"


CATEGORY_LABELS = {
    PortfolioCategory.BROKERAGE: "Brokerage",
    PortfolioCategory.CASH: "Cash",
    PortfolioCategory.REAL_ESTATE: "Real Estate",
    PortfolioCategory.COMMODITIES: "Commodities",
    PortfolioCategory.CRYPTO: "Crypto",
    PortfolioCategory.RETIREMENT: "Retirement",
}


class CategorySummary(BaseModel):
    """Assets in one portfolio section with their totals."""

    category: PortfolioCategory
    label: str
    assets: list[Asset] = Field(default_factory=list)
    total_value: Decimal = ZERO
    annual_income: Decimal = ZERO


class PortfolioBreakdown(BaseModel):
    """All portfolio sections, in display order."""

    categories: list[CategorySummary]
    total_value: Decimal
    total_annual_income: Decimal

    def get(self, category: PortfolioCategory) -> Optional[CategorySummary]:
        for summary in self.categories:
            if summary.category == category:
                return summary
        return None


def bank_account_to_asset(account: Account) -> Asset:
    """Represent a bank account as a cash holding."""
    return Asset(
        id=f"bank_{account.id}",
        name=account.name,
        category=AssetCategory.BANK_ACCOUNT,
        value=safe_balance(account),
        metadata=BankAccountMetadata(
            account_type=account.account_type,
            institution=account.institution,
            apy=BANK_ACCOUNT_APYS[account.account_type],
        ),
    )


def _is_commodity(asset: Asset) -> bool:
    name = asset.name.lower()
    return asset.category == AssetCategory.OTHER and any(k in name for k in COMMODITY_KEYWORDS)


def _portfolio_category(asset: Asset) -> Optional[PortfolioCategory]:
    if asset.category == AssetCategory.STOCKS:
        return PortfolioCategory.BROKERAGE
    if asset.category == AssetCategory.BANK_ACCOUNT:
        return PortfolioCategory.CASH
    if asset.category == AssetCategory.REAL_ESTATE:
        return PortfolioCategory.REAL_ESTATE
    if asset.category in (AssetCategory.CRYPTO, AssetCategory.DEFI):
        return PortfolioCategory.CRYPTO
    if asset.category == AssetCategory.RETIREMENT:
        return PortfolioCategory.RETIREMENT
    if _is_commodity(asset):
        return PortfolioCategory.COMMODITIES
    return None


def categorize_assets(assets: list[Asset], accounts: list[Account]) -> PortfolioBreakdown:
    """Group assets and bank accounts into portfolio sections.

    Bank accounts always land in the cash section; manually entered
    bank-account assets join them there.
    """
    grouped: dict[PortfolioCategory, list[Asset]] = {c: [] for c in PortfolioCategory}

    grouped[PortfolioCategory.CASH].extend(bank_account_to_asset(a) for a in accounts)
    for asset in assets:
        category = _portfolio_category(asset)
        if category is not None:
            grouped[category].append(asset)

    summaries = [
        CategorySummary(
            category=category,
            label=CATEGORY_LABELS[category],
            assets=members,
            total_value=sum((a.value for a in members), ZERO),
            annual_income=sum((compute_annual_income(a) for a in members), ZERO),
        )
        for category, members in grouped.items()
    ]

    return PortfolioBreakdown(
        categories=summaries,
        total_value=sum((s.total_value for s in summaries), ZERO),
        total_annual_income=sum((s.annual_income for s in summaries), ZERO),
    )
