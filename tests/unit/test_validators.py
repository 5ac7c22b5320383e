"""
Unit tests for input validators.

Each validator returns (is_valid, value, error).
"""

from decimal import Decimal

import pytest

from app.validators import (
    validate_amount,
    validate_email,
    validate_phone,
    validate_username,
)


class TestValidateAmount:
    """Test money amount validation."""

    def test_valid_string(self):
        assert validate_amount("100.50") == (True, Decimal("100.50"), None)

    def test_comma_decimal_separator(self):
        is_valid, amount, _ = validate_amount("12,5")
        assert is_valid is True
        assert amount == Decimal("12.5")

    def test_integer(self):
        assert validate_amount(5) == (True, Decimal("5"), None)

    def test_zero_rejected_by_default(self):
        is_valid, amount, error = validate_amount("0")
        assert is_valid is False
        assert amount is None
        assert error == "Amount must be greater than 0"

    def test_zero_allowed(self):
        assert validate_amount("0", allow_zero=True)[0] is True

    def test_negative_rejected(self):
        is_valid, _, error = validate_amount("-1")
        assert is_valid is False
        assert "must be >=" in error

    def test_negative_allowed_with_lower_minimum(self):
        is_valid, amount, _ = validate_amount("-10", min_amount=Decimal("-100"))
        assert is_valid is True
        assert amount == Decimal("-10")

    def test_float_rejected(self):
        assert validate_amount(1.5)[0] is False

    @pytest.mark.parametrize("value", ["abc", "", "   ", "NaN", "Infinity"])
    def test_malformed(self, value):
        assert validate_amount(value)[0] is False

    def test_too_many_decimals(self):
        is_valid, _, error = validate_amount("0.123456789")
        assert is_valid is False
        assert "decimal places" in error

    def test_eight_decimals_accepted(self):
        assert validate_amount("0.12345678")[0] is True

    def test_above_column_range(self):
        assert validate_amount("10000000000")[0] is False


class TestValidateEmail:
    """Test email validation."""

    def test_valid_is_lowercased(self):
        assert validate_email(" Alice@Example.COM ") == (
            True,
            "alice@example.com",
            None,
        )

    @pytest.mark.parametrize("value", ["", "alice", "alice@", "@example.com"])
    def test_invalid(self, value):
        is_valid, email, error = validate_email(value)
        assert is_valid is False
        assert email is None
        assert error


class TestValidatePhone:
    """Test phone validation."""

    def test_strips_formatting(self):
        is_valid, phone, _ = validate_phone("+1 (555) 123-4567")
        assert is_valid is True
        assert phone == "+15551234567"

    def test_too_short(self):
        assert validate_phone("123")[0] is False

    def test_letters_rejected(self):
        assert validate_phone("555-CALL-NOW")[0] is False


class TestValidateUsername:
    """Test username validation."""

    @pytest.mark.parametrize("value", ["alice", "bob_99", "j.doe"])
    def test_valid(self, value):
        assert validate_username(value) == (True, value, None)

    @pytest.mark.parametrize("value", ["ab", "with space", "x" * 51, "dash-name"])
    def test_invalid(self, value):
        assert validate_username(value)[0] is False
