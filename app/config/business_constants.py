"""
Business logic constants for task submissions.

Central location for business rules and constants used across the application.
This module can be imported by services and repositories without circular dependencies.
"""

from decimal import Decimal


class UserLevel:
    """User tier constants."""
    STANDARD = 1
    PREMIUM = 2


USER_LEVELS = (UserLevel.STANDARD, UserLevel.PREMIUM)


# Task caps per level; any level not listed uses DEFAULT_TASK_LIMIT
TASK_LIMITS = {
    UserLevel.STANDARD: 33,
}
DEFAULT_TASK_LIMIT = 38

# Profit rate per level, applied as a percentage of the current balance:
# profit = balance * (rate / 100). Level 1 earns 0.75%, others 1%.
# Rates are stored as percent values, hence the divisor.
PROFIT_RATES = {
    UserLevel.STANDARD: Decimal("0.75"),
}
DEFAULT_PROFIT_RATE = Decimal("1")
PROFIT_RATE_DIVISOR = Decimal("100")

# Balance required before the very first task
MINIMUM_FIRST_TASK_BALANCE = Decimal("50")

# Share of the submitter's profit credited to each direct referral
REFERRAL_BONUS_RATE = Decimal("0.25")

# Referral code format: uppercase hex
REFERRAL_CODE_LENGTH = 7


def get_task_limit(level: int) -> int:
    """
    Get maximum completed tasks allowed for a level.

    Args:
        level: User level

    Returns:
        Task cap for the level
    """
    return TASK_LIMITS.get(level, DEFAULT_TASK_LIMIT)


def get_profit_rate(level: int) -> Decimal:
    """
    Get profit rate (percent of balance) for a level.

    Args:
        level: User level

    Returns:
        Profit rate as a percentage value
    """
    return PROFIT_RATES.get(level, DEFAULT_PROFIT_RATE)
