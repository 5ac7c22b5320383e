"""
Exception handling utilities.

Defines categorized business errors. Each carries a stable code and a
stable message so callers can branch on the failure reason.
"""

from typing import Any


# Stable user-facing messages
USER_NOT_FOUND = "User not found"
PRODUCT_NOT_FOUND = "Product not found"
DEPOSIT_NOT_FOUND = "Deposit not found"
WITHDRAWAL_NOT_FOUND = "Withdrawal not found"
NEGATIVE_BALANCE = "Cannot submit task with negative balance"
TASK_ALREADY_COMPLETED = "Product task already completed"
PRODUCT_UNAVAILABLE = "Product is not available"
MINIMUM_BALANCE_REQUIRED = "Minimum balance of $50 required for first task"
UPGRADE_OR_WITHDRAW = "Upgrade to premium to continue or withdraw first"
WITHDRAW_FIRST = "Maximum tasks reached. Please withdraw first"
INSUFFICIENT_TASK_BALANCE = "Insufficient balance for this task"
INSUFFICIENT_BALANCE = "Insufficient balance"
USER_ALREADY_EXISTS = "User already exists"
REQUEST_ALREADY_PROCESSED = "Request already processed"


class AppError(Exception):
    """Base class for business errors surfaced to callers."""

    code = "APP_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class NotFoundError(AppError):
    """Referenced entity does not exist."""

    code = "NOT_FOUND"


class InvalidStateError(AppError):
    """Entity is in a state that forbids the operation."""

    code = "INVALID_STATE"


class ConflictError(AppError):
    """Operation would duplicate an existing record."""

    code = "CONFLICT"


class LimitReachedError(AppError):
    """Level task cap reached."""

    code = "LIMIT_REACHED"


class InsufficientFundsError(AppError):
    """Balance is below the amount required."""

    code = "INSUFFICIENT_FUNDS"


class ValidationError(AppError):
    """Malformed input (amounts, emails, usernames)."""

    code = "VALIDATION_ERROR"
