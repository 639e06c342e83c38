"""KingMe Core - Cash-flow and days-of-freedom calculations."""

__version__ = "0.1.0"

from .analysis import ProfileAnalysis, analyze_profile
from .cashflow import analyze_account, analyze_all_accounts, get_monthly_pretax_deductions
from .exceptions import ConfigurationError, KingMeError, SnapshotError
from .freedom import (
    calculate_desire_impact,
    calculate_freedom,
    calculate_opportunity_cost,
    compute_annual_income,
    format_freedom_days,
    get_freedom_state,
)
from .frequency import PayFrequency, to_annual, to_monthly
from .paycheck import build_paycheck_waterfall, select_waterfall_mode
from .snapshot import load_profile

__all__ = [
    "ProfileAnalysis",
    "analyze_profile",
    "analyze_account",
    "analyze_all_accounts",
    "get_monthly_pretax_deductions",
    "ConfigurationError",
    "KingMeError",
    "SnapshotError",
    "calculate_desire_impact",
    "calculate_freedom",
    "calculate_opportunity_cost",
    "compute_annual_income",
    "format_freedom_days",
    "get_freedom_state",
    "PayFrequency",
    "to_annual",
    "to_monthly",
    "build_paycheck_waterfall",
    "select_waterfall_mode",
    "load_profile",
]
