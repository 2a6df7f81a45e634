# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""Tests for the decimal arithmetic helpers and the error taxonomy."""

import decimal
from decimal import Decimal

import pytest
from pydantic import TypeAdapter, ValidationError

from campusplan.exceptions import (
    ConvergenceWarning,
    ProjectionArithmeticError,
    ProjectionValidationError,
)
from campusplan.utils import (
    decimal_sum,
    percent_to_rate,
    power,
    quantize_money,
    safe_divide,
    safe_divide_or_zero,
    to_decimal,
)
from campusplan.utils.types import NonNegativeInt, PositiveInt


class TestToDecimal:
    """Test conversion of plain values to Decimal."""

    def test_none_defaults_to_zero(self):
        assert to_decimal(None) == Decimal(0)

    def test_float_uses_shortest_repr(self):
        assert to_decimal(0.1) == Decimal("0.1")
        assert to_decimal(0.1) + to_decimal(0.2) == Decimal("0.3")

    def test_strings_and_ints(self):
        assert to_decimal("1,234.50") == Decimal("1234.50")
        assert to_decimal(" 42 ") == Decimal(42)
        assert to_decimal(7) == Decimal(7)
        assert to_decimal("") == Decimal(0)

    def test_decimal_passthrough(self):
        value = Decimal("12.345")
        assert to_decimal(value) is value

    def test_rejects_invalid_input(self):
        with pytest.raises(TypeError, match="Boolean"):
            to_decimal(True)
        with pytest.raises(ValueError, match="Cannot convert"):
            to_decimal("abc")
        with pytest.raises(ValueError, match="non-finite"):
            to_decimal(float("nan"))
        with pytest.raises(ValueError, match="finite"):
            to_decimal(Decimal("Infinity"))
        with pytest.raises(TypeError, match="Unsupported"):
            to_decimal([1])


class TestDecimalArithmetic:
    """Test exact summation, rounding and division."""

    def test_summing_cents_is_exact(self):
        total = decimal_sum(Decimal("0.01") for _ in range(1000))
        assert total == Decimal("10.00")
        assert str(total) == "10.00"

    def test_summing_float_cents_is_exact(self):
        assert decimal_sum(0.01 for _ in range(1000)) == Decimal("10.00")

    def test_empty_sum_is_zero(self):
        assert decimal_sum([]) == Decimal(0)

    def test_quantize_rounds_half_up(self):
        assert quantize_money(Decimal("2.345")) == Decimal("2.35")
        assert quantize_money("2.344") == Decimal("2.34")
        assert quantize_money(Decimal("-2.345")) == Decimal("-2.35")
        assert quantize_money(Decimal("0.125")) == Decimal("0.13")

    def test_division_by_zero_raises(self):
        with pytest.raises(decimal.DivisionByZero):
            safe_divide(1, 0)
        with pytest.raises(ZeroDivisionError):
            safe_divide(Decimal("5.5"), Decimal("0.00"))

    def test_division_keeps_at_least_twenty_digits(self):
        third = safe_divide(1, 3)
        assert len(third.as_tuple().digits) >= 20

    def test_ratio_division_falls_back_to_zero(self):
        assert safe_divide_or_zero(5, 0) == Decimal(0)
        assert safe_divide_or_zero(5, 2) == Decimal("2.5")

    def test_power(self):
        assert power(Decimal("1.04"), 2) == Decimal("1.0816")
        assert power(2, -1) == Decimal("0.5")
        assert power(Decimal("1.03"), 0) == Decimal(1)
        with pytest.raises(TypeError, match="integer"):
            power(2, 1.5)

    def test_percent_to_rate(self):
        assert percent_to_rate(15) == Decimal("0.15")
        assert percent_to_rate(None) == Decimal(0)


class TestErrorTaxonomy:
    """Test projection error classes."""

    def test_validation_error_is_value_error_with_context(self):
        error = ProjectionValidationError("bad input", year=2030, component="rent")
        assert isinstance(error, ValueError)
        assert "component=rent" in str(error)
        assert "year=2030" in str(error)
        assert error.to_dict() == {
            "error_type": "ValidationError",
            "message": "bad input",
            "year": 2030,
            "component": "rent",
        }

    def test_arithmetic_error_is_arithmetic_error(self):
        error = ProjectionArithmeticError("division by zero")
        assert isinstance(error, ArithmeticError)
        assert str(error) == "division by zero"
        assert error.to_dict()["year"] is None

    def test_convergence_warning_is_user_warning(self):
        assert issubclass(ConvergenceWarning, UserWarning)


class TestConstrainedInts:
    """Test the integer field types."""

    def test_non_negative_int_accepts_zero(self):
        assert TypeAdapter(NonNegativeInt).validate_python(0) == 0
        with pytest.raises(ValidationError):
            TypeAdapter(NonNegativeInt).validate_python(-1)

    def test_positive_int_rejects_zero(self):
        assert TypeAdapter(PositiveInt).validate_python(1) == 1
        with pytest.raises(ValidationError):
            TypeAdapter(PositiveInt).validate_python(0)
