"""Data models for kingme-core.

- Input snapshot records (records.py)
- Derived analysis results (results.py)
"""

from kingme_core.models.records import (
    # Enumerations
    AccountType,
    IncomeCategory,
    ObligationCategory,
    AssetCategory,
    DesirePriority,
    PreTaxDeductionType,
    TaxType,
    PostTaxDeductionType,
    # Helpers
    normalize_rate,
    # Records
    Account,
    IncomeSource,
    Obligation,
    Debt,
    Asset,
    Desire,
    UserProfile,
    # Asset metadata
    AssetMetadata,
    CryptoMetadata,
    RealEstateMetadata,
    StockMetadata,
    BusinessMetadata,
    RetirementMetadata,
    BankAccountMetadata,
    OtherMetadata,
    # Paycheck deductions
    PreTaxDeduction,
    Tax,
    PostTaxDeduction,
    PaycheckDeduction,
)

from kingme_core.models.results import (
    AccountStatus,
    HealthStatus,
    FreedomState,
    WaterfallMode,
    WaterfallStage,
    AccountCashFlowAnalysis,
    PreTaxContributions,
    OverallCashFlow,
    WaterfallLine,
    PaycheckWaterfall,
    FreedomResult,
    OpportunityCost,
    DesireImpact,
)

__all__ = [
    # Enumerations
    "AccountType",
    "IncomeCategory",
    "ObligationCategory",
    "AssetCategory",
    "DesirePriority",
    "PreTaxDeductionType",
    "TaxType",
    "PostTaxDeductionType",
    "AccountStatus",
    "HealthStatus",
    "FreedomState",
    "WaterfallMode",
    "WaterfallStage",
    # Helpers
    "normalize_rate",
    # Records
    "Account",
    "IncomeSource",
    "Obligation",
    "Debt",
    "Asset",
    "Desire",
    "UserProfile",
    "AssetMetadata",
    "CryptoMetadata",
    "RealEstateMetadata",
    "StockMetadata",
    "BusinessMetadata",
    "RetirementMetadata",
    "BankAccountMetadata",
    "OtherMetadata",
    "PreTaxDeduction",
    "Tax",
    "PostTaxDeduction",
    "PaycheckDeduction",
    # Results
    "AccountCashFlowAnalysis",
    "PreTaxContributions",
    "OverallCashFlow",
    "WaterfallLine",
    "PaycheckWaterfall",
    "FreedomResult",
    "OpportunityCost",
    "DesireImpact",
]
