"""Pay-frequency normalization.

Every periodic amount in a profile (paychecks, deductions, retirement
contributions) is converted to a monthly equivalent through the single
conversion table below before it is summed anywhere.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional, Union

import structlog

logger = structlog.get_logger()


class PayFrequency(str, Enum):
    """Recognised pay-period labels."""
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    TWICE_MONTHLY = "twice_monthly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"


# Frequency -> (numerator, denominator) of the monthly factor.
# Applied as (amount * numerator) / denominator.
MONTHLY_FACTORS: dict[PayFrequency, tuple[int, int]] = {
    PayFrequency.WEEKLY: (52, 12),
    PayFrequency.BIWEEKLY: (26, 12),
    PayFrequency.TWICE_MONTHLY: (2, 1),
    PayFrequency.MONTHLY: (1, 1),
    PayFrequency.QUARTERLY: (1, 3),
}

MONTHS_PER_YEAR = 12

FrequencyLabel = Union[PayFrequency, str]

AmountLike = Union[Decimal, int, float, str]


def as_decimal(value: Optional[AmountLike]) -> Decimal:
    """Coerce a numeric value to Decimal, treating None as zero."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def is_known_frequency(frequency: Optional[FrequencyLabel]) -> bool:
    """True when the label (enum member or raw string) has a conversion factor."""
    return frequency is not None and frequency in MONTHLY_FACTORS


def monthly_factor(frequency: Optional[FrequencyLabel]) -> tuple[int, int]:
    """Look up the monthly factor for a frequency label.

    Unrecognised labels degrade to (1, 1), i.e. the amount is treated as
    already monthly, so one bad record cannot abort a whole analysis.
    """
    if not is_known_frequency(frequency):
        logger.warning("unknown_frequency", frequency=frequency, fallback="monthly")
        return (1, 1)
    return MONTHLY_FACTORS[frequency]


def to_monthly(amount: Optional[AmountLike], frequency: Optional[FrequencyLabel]) -> Decimal:
    """Convert a per-period amount to its monthly equivalent.

    Args:
        amount: Amount paid per period.
        frequency: Pay-period label (enum member or raw string).

    Returns:
        Monthly equivalent as a Decimal.
    """
    numerator, denominator = monthly_factor(frequency)
    return (as_decimal(amount) * numerator) / denominator


def to_annual(amount: Optional[AmountLike], frequency: Optional[FrequencyLabel]) -> Decimal:
    """Convert a per-period amount to its annual equivalent."""
    return to_monthly(amount, frequency) * MONTHS_PER_YEAR
