"""
Common validators for user input.

Each validator returns a tuple of (is_valid, parsed_value, error_message).
"""

import re
from decimal import Decimal, InvalidOperation

# Money columns are DECIMAL(18, 8)
MAX_AMOUNT_DECIMALS = 8
MAX_AMOUNT = Decimal("9999999999.99999999")

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.]{3,50}$")
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def validate_amount(
    value: Decimal | str | int,
    min_amount: Decimal = Decimal("0"),
    allow_zero: bool = False,
) -> tuple[bool, Decimal | None, str | None]:
    """
    Validate a money amount.

    Args:
        value: Amount as Decimal, int or string
        min_amount: Minimum allowed amount
        allow_zero: Accept 0 even when min_amount is 0

    Returns:
        Tuple of (is_valid, parsed_amount, error_message)

    Examples:
        >>> validate_amount("100.50")
        (True, Decimal('100.50'), None)
        >>> validate_amount("abc")
        (False, None, 'Invalid amount format')
        >>> validate_amount("0")
        (False, None, 'Amount must be greater than 0')
    """
    if isinstance(value, float):
        return False, None, "Amount must not be a float"

    if isinstance(value, str):
        value = value.strip().replace(",", ".")
        if not value:
            return False, None, "Amount is empty"

    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return False, None, "Invalid amount format"

    if not amount.is_finite():
        return False, None, "Amount must be a finite number"

    if amount < min_amount:
        return False, None, f"Amount must be >= {min_amount}"

    if amount == 0 and not allow_zero:
        return False, None, "Amount must be greater than 0"

    if amount > MAX_AMOUNT:
        return False, None, f"Amount must be <= {MAX_AMOUNT}"

    if amount.as_tuple().exponent < -MAX_AMOUNT_DECIMALS:
        return False, None, "Amount has too many decimal places (maximum 8)"

    return True, amount, None


def validate_email(value: str) -> tuple[bool, str | None, str | None]:
    """
    Validate email address.

    Args:
        value: Email address

    Returns:
        Tuple of (is_valid, normalized_email, error_message)
    """
    if not value or not isinstance(value, str):
        return False, None, "Email is empty"

    email = value.strip()
    if len(email) > 255:
        return False, None, "Email is too long (maximum 255 characters)"

    if not EMAIL_PATTERN.match(email):
        return False, None, "Invalid email format"

    return True, email.lower(), None


def validate_phone(value: str) -> tuple[bool, str | None, str | None]:
    """
    Validate phone number.

    Args:
        value: Phone number, formatting characters allowed

    Returns:
        Tuple of (is_valid, cleaned_phone, error_message)
    """
    if not value or not isinstance(value, str):
        return False, None, "Phone is empty"

    phone = value.strip()
    if len(phone) > 50:
        return False, None, "Phone is too long (maximum 50 characters)"

    digits = re.sub(r"\D", "", phone)
    if len(digits) < 10 or len(digits) > 15:
        return False, None, "Phone must be 10-15 digits"

    prefix = "+" if phone.startswith("+") else ""
    return True, prefix + digits, None


def validate_username(value: str) -> tuple[bool, str | None, str | None]:
    """
    Validate username.

    Args:
        value: Username

    Returns:
        Tuple of (is_valid, username, error_message)
    """
    if not value or not isinstance(value, str):
        return False, None, "Username is empty"

    username = value.strip()
    if not USERNAME_PATTERN.match(username):
        return False, None, (
            "Username must be 3-50 characters: letters, digits, '_' or '.'"
        )

    return True, username, None
