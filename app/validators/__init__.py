"""
Validators package.

Provides common validation functions for user input.
"""

from app.validators.common import (
    validate_amount,
    validate_email,
    validate_phone,
    validate_username,
)


__all__ = [
    "validate_amount",
    "validate_email",
    "validate_phone",
    "validate_username",
]
