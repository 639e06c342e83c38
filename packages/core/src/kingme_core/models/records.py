"""Input records for the cash-flow and freedom engine.

These are the immutable value records a profile snapshot is made of:
bank accounts, income sources, obligations, debts, assets, desires and
the three paycheck-deduction stages. Field names are snake_case; the
camelCase keys of the app's persisted profile are accepted as aliases,
so a stored snapshot validates without a mapping step.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, BeforeValidator, Field, field_validator
from pydantic.alias_generators import to_camel

from ..frequency import PayFrequency

ZERO = Decimal("0")


def _zero_if_missing(value):
    return ZERO if value is None else value


def _frequency_label(value):
    """Keep any frequency label; non-string values become their string form."""
    if value is None or isinstance(value, (PayFrequency, str)):
        return value
    return str(value)


# Money amount where a null in persisted state means zero.
Amount = Annotated[Decimal, BeforeValidator(_zero_if_missing)]

# Labels outside PayFrequency are kept verbatim and a missing label stays
# None; the normalizer degrades both to monthly.
_FrequencyLabel = Annotated[Union[PayFrequency, str], Field(union_mode="left_to_right")]
Frequency = Annotated[Optional[_FrequencyLabel], BeforeValidator(_frequency_label)]


def normalize_rate(value: Optional[Decimal]) -> Optional[Decimal]:
    """Normalize a rate to a decimal fraction.

    Rates above 1 are whole-number percentages (7 means 7%) and are
    divided by 100. Values at or below 1 are already fractions.
    """
    if value is None:
        return None
    if value > 1:
        return value / 100
    return value


# =============================================================================
# ENUMERATIONS
# =============================================================================

class AccountType(str, Enum):
    """Kind of bank account."""
    CHECKING = "checking"
    SAVINGS = "savings"
    INVESTMENT = "investment"


class IncomeCategory(str, Enum):
    """Where an income source comes from."""
    SALARY = "salary"
    FREELANCE = "freelance"
    BUSINESS = "business"
    TRADING = "trading"
    OTHER = "other"


class ObligationCategory(str, Enum):
    """Obligation tags."""
    HOUSING = "housing"
    UTILITIES = "utilities"
    INSURANCE = "insurance"
    DEBT_SERVICE = "debt_service"
    DAILY_LIVING = "daily_living"
    OTHER = "other"


class AssetCategory(str, Enum):
    """Asset categories. Each one has an annual-income rule in freedom.py."""
    CRYPTO = "crypto"
    DEFI = "defi"
    REAL_ESTATE = "real_estate"
    STOCKS = "stocks"
    BUSINESS = "business"
    BANK_ACCOUNT = "bank_account"
    RETIREMENT = "retirement"
    OTHER = "other"


class DesirePriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class PreTaxDeductionType(str, Enum):
    MEDICAL_COVERAGE = "medical_coverage"
    VISION_COVERAGE = "vision_coverage"
    DENTAL_COVERAGE = "dental_coverage"
    LIFE_INSURANCE = "life_insurance"
    ADD_INSURANCE = "add_insurance"
    CONTRIBUTION_401K = "401k_contribution"
    OTHER_PRETAX = "other_pretax"


class TaxType(str, Enum):
    FEDERAL_WITHHOLDING = "federal_withholding"
    SOCIAL_SECURITY = "social_security"
    MEDICARE = "medicare"
    STATE_WITHHOLDING = "state_withholding"


class PostTaxDeductionType(str, Enum):
    LOAN_401K = "401k_loan"
    ENHANCED_LTD = "enhanced_ltd"
    OTHER_POSTTAX = "other_posttax"


# =============================================================================
# BASE RECORD
# =============================================================================

class Record(BaseModel):
    """Base class for snapshot records: frozen, camelCase aliases accepted."""

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "alias_generator": to_camel,
        "extra": "ignore",
    }


# =============================================================================
# ACCOUNTS, INCOME, OBLIGATIONS, DEBTS
# =============================================================================

class Account(Record):
    """A bank account.

    ``current_balance`` may be missing or NaN in malformed persisted state.
    The record keeps whatever arrived; analyzers treat non-finite values
    as zero.
    """

    id: str
    name: str = ""
    institution: str = "Unknown"
    account_type: AccountType = Field(default=AccountType.CHECKING, alias="type")
    current_balance: Optional[Decimal] = Field(default=None, allow_inf_nan=True)

    @field_validator("current_balance", mode="before")
    @classmethod
    def coerce_balance(cls, v):
        """Keep unparsable balances as None instead of rejecting the account."""
        if v is None or isinstance(v, (Decimal, int, float)) and not isinstance(v, bool):
            return v
        if isinstance(v, str):
            try:
                return Decimal(v.strip())
            except InvalidOperation:
                return None
        return None


class IncomeSource(Record):
    """A recurring income stream paid into one bank account."""

    id: str
    name: str = ""
    category: IncomeCategory = Field(
        default=IncomeCategory.SALARY,
        validation_alias=AliasChoices("category", "source"),
    )
    amount: Amount = ZERO
    frequency: Frequency = PayFrequency.MONTHLY
    bank_account_id: Optional[str] = None
    # Pay days for twice_monthly sources, e.g. the 1st and the 15th.
    day_of_month1: Optional[int] = None
    day_of_month2: Optional[int] = None

    @field_validator("day_of_month1", "day_of_month2", mode="before")
    @classmethod
    def drop_invalid_pay_day(cls, v):
        """A pay day outside 1-31 is dropped; the source itself is kept."""
        if isinstance(v, str) and v.strip().isdigit():
            v = int(v)
        if isinstance(v, int) and not isinstance(v, bool) and 1 <= v <= 31:
            return v
        return None


class Obligation(Record):
    """A recurring monthly expense.

    Obligations without ``bank_account_id`` are unassigned: they are left
    out of every per-account analysis and reported separately.
    """

    id: str
    name: str = ""
    amount: Amount = ZERO  # monthly
    category: ObligationCategory = ObligationCategory.OTHER
    bank_account_id: Optional[str] = None
    is_recurring: bool = True

    @property
    def is_assigned(self) -> bool:
        return bool(self.bank_account_id)


class Debt(Record):
    """A debt with a fixed monthly payment."""

    id: str
    name: str = ""
    principal: Amount = ZERO
    interest_rate: Amount = ZERO  # decimal fraction, 0.07 for 7%
    monthly_payment: Amount = ZERO
    minimum_payment: Optional[Decimal] = None

    @field_validator("interest_rate")
    @classmethod
    def normalize_interest_rate(cls, v: Decimal) -> Decimal:
        """Accept whole-number percentages (24.99) as well as fractions."""
        return normalize_rate(v)


# =============================================================================
# ASSET METADATA (discriminated on ``type``)
# =============================================================================

class CryptoMetadata(Record):
    """Token holdings, staked or not. Used by crypto and DeFi assets."""
    type: Literal["crypto", "defi"] = "crypto"
    quantity: Amount = ZERO
    apy: Optional[Decimal] = None
    is_staked: bool = False
    token_mint: Optional[str] = None
    protocol: Optional[str] = None
    wallet_address: Optional[str] = None

    @field_validator("apy")
    @classmethod
    def normalize_apy(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return normalize_rate(v)


class RealEstateMetadata(Record):
    type: Literal["real_estate"] = "real_estate"
    address: str = ""
    purchase_price: Amount = ZERO
    current_value: Amount = ZERO
    monthly_rental_income: Optional[Decimal] = None
    monthly_expenses: Optional[Decimal] = None  # mortgage, taxes, insurance, upkeep


class StockMetadata(Record):
    type: Literal["stocks"] = "stocks"
    ticker: Optional[str] = None
    shares: Amount = ZERO
    current_price: Amount = ZERO
    dividend_yield: Optional[Decimal] = None

    @field_validator("dividend_yield")
    @classmethod
    def normalize_yield(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return normalize_rate(v)


class BusinessMetadata(Record):
    type: Literal["business"] = "business"
    equity_percent: Amount = ZERO
    valuation: Amount = ZERO
    annual_distributions: Amount = ZERO


class RetirementMetadata(Record):
    """A 401k/IRA-style account funded by pre-tax paycheck contributions.

    Contributions come out of the paycheck before it reaches any bank
    account, so they are never obligations and never touch a balance.
    """
    type: Literal["retirement"] = "retirement"
    contribution_amount: Amount = ZERO  # per pay period
    contribution_frequency: Frequency = PayFrequency.BIWEEKLY
    employer_match_percent: Optional[Decimal] = None  # fraction of contribution
    employer_match_dollars: Optional[Decimal] = None  # monthly dollars

    @field_validator("employer_match_percent")
    @classmethod
    def normalize_match(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return normalize_rate(v)


class BankAccountMetadata(Record):
    type: Literal["bank_account"] = "bank_account"
    account_type: AccountType = AccountType.CHECKING
    institution: str = ""
    apy: Optional[Decimal] = None


class OtherMetadata(Record):
    type: Literal["other"] = "other"
    description: str = ""


AssetMetadata = Annotated[
    Union[
        CryptoMetadata,
        RealEstateMetadata,
        StockMetadata,
        BusinessMetadata,
        RetirementMetadata,
        BankAccountMetadata,
        OtherMetadata,
    ],
    Field(discriminator="type"),
]


class Asset(Record):
    """Anything that holds value and may produce income."""

    id: str
    name: str = ""
    category: AssetCategory = Field(alias="type")
    value: Amount = ZERO
    annual_income: Amount = ZERO  # manual entry, used by categories without a rule
    metadata: Optional[AssetMetadata] = None

    @property
    def is_retirement(self) -> bool:
        return isinstance(self.metadata, RetirementMetadata)


# =============================================================================
# PAYCHECK DEDUCTIONS
# =============================================================================

class _PayPeriodAmount(Record):
    id: str
    name: str = ""
    per_pay_period: Amount = ZERO
    frequency: Frequency = PayFrequency.BIWEEKLY


class PreTaxDeduction(_PayPeriodAmount):
    """Comes out of gross pay before taxes (medical, dental, 401k, ...)."""
    type: PreTaxDeductionType = PreTaxDeductionType.OTHER_PRETAX


class Tax(_PayPeriodAmount):
    type: TaxType = TaxType.FEDERAL_WITHHOLDING


class PostTaxDeduction(_PayPeriodAmount):
    """Comes out after taxes (401k loan repayment, LTD, ...)."""
    type: PostTaxDeductionType = PostTaxDeductionType.OTHER_POSTTAX


class PaycheckDeduction(_PayPeriodAmount):
    """Deprecated flat pre-tax deduction, kept for older snapshots."""


# =============================================================================
# DESIRES AND PROFILE
# =============================================================================

class Desire(Record):
    """A wish-list item. Only counts toward spending once purchased."""

    id: str
    name: str = ""
    estimated_cost: Amount = ZERO
    priority: DesirePriority = DesirePriority.MEDIUM
    created_at: Optional[datetime] = None
    purchased_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @property
    def counts_as_spending(self) -> bool:
        return self.purchased_at is not None and self.completed_at is None


class UserProfile(Record):
    """Full snapshot handed to the engine by the store layer."""

    accounts: list[Account] = Field(
        default_factory=list,
        validation_alias=AliasChoices("accounts", "bankAccounts", "bank_accounts"),
    )
    income_sources: list[IncomeSource] = Field(default_factory=list)
    obligations: list[Obligation] = Field(default_factory=list)
    debts: list[Debt] = Field(default_factory=list)
    assets: list[Asset] = Field(default_factory=list)
    desires: list[Desire] = Field(default_factory=list)
    pre_tax_deductions: list[PreTaxDeduction] = Field(default_factory=list)
    taxes: list[Tax] = Field(default_factory=list)
    post_tax_deductions: list[PostTaxDeduction] = Field(default_factory=list)
    paycheck_deductions: list[PaycheckDeduction] = Field(default_factory=list)
