"""
Pure calculation logic for task submissions.

No database or ORM access: takes Decimals and models already loaded,
returns Decimals.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from app.config.business_constants import (
    PROFIT_RATE_DIVISOR,
    REFERRAL_BONUS_RATE,
    get_profit_rate,
)

if TYPE_CHECKING:
    from app.models.product import Product
    from app.models.user_task_override import UserTaskOverride


@dataclass(frozen=True)
class SubmissionAmounts:
    """Amounts produced by one task submission."""

    profit_earned: Decimal
    amount_debited: Decimal
    new_balance: Decimal
    referral_bonus: Decimal

    @property
    def balance_delta(self) -> Decimal:
        """Net change applied to the submitter's balance."""
        return self.profit_earned - self.amount_debited


def resolve_debit_amount(
    product: "Product", override: "UserTaskOverride | None"
) -> Decimal:
    """
    Pick the amount debited for a submission.

    An existing override always wins, including an override of zero.

    Args:
        product: Claimed product
        override: User's override for this product, if any

    Returns:
        Effective negative amount
    """
    if override is not None:
        return override.negative_amount
    return product.negative_amount


def calculate_profit(balance: Decimal, level: int) -> Decimal:
    """
    Calculate profit for a submission.

    Formula: balance * (profit_rate / 100)

    Args:
        balance: Balance before the submission
        level: User level

    Returns:
        Profit earned

    Example:
        >>> calculate_profit(Decimal("100"), 1)
        Decimal('0.7500')
    """
    return balance * (get_profit_rate(level) / PROFIT_RATE_DIVISOR)


def calculate_referral_bonus(profit_earned: Decimal) -> Decimal:
    """
    Calculate the bonus credited to each direct referral.

    Args:
        profit_earned: Submitter's profit

    Returns:
        Bonus per referred user
    """
    return profit_earned * REFERRAL_BONUS_RATE


def calculate_submission_amounts(
    balance: Decimal, level: int, debit_amount: Decimal
) -> SubmissionAmounts:
    """
    Calculate every amount a submission produces.

    Args:
        balance: Balance before the submission
        level: User level
        debit_amount: Effective negative amount

    Returns:
        SubmissionAmounts
    """
    profit = calculate_profit(balance, level)
    return SubmissionAmounts(
        profit_earned=profit,
        amount_debited=debit_amount,
        new_balance=balance + profit - debit_amount,
        referral_bonus=calculate_referral_bonus(profit),
    )
