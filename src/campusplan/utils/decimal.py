# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Decimal arithmetic helpers for monetary quantities.

All monetary values in the engine are `decimal.Decimal`. Floats are converted
through their shortest string representation so binary floating-point error
never enters a stored figure. Intermediate results keep full context
precision; only values finalized for output are quantized to cents.
"""

from __future__ import annotations

import decimal
import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Union

DecimalLike = Union[Decimal, int, float, str, None]

MONEY_PRECISION = 28
CENTS = Decimal("0.01")
ZERO = Decimal(0)
ONE = Decimal(1)
HUNDRED = Decimal(100)

# Process-wide arithmetic context; read-only after import.
DECIMAL_CONTEXT = decimal.Context(
    prec=MONEY_PRECISION,
    rounding=ROUND_HALF_UP,
    traps=[decimal.DivisionByZero, decimal.InvalidOperation, decimal.Overflow],
)


def decimal_context():
    """Return a context manager running a block under `DECIMAL_CONTEXT`."""
    return decimal.localcontext(DECIMAL_CONTEXT)


def to_decimal(value: DecimalLike) -> Decimal:
    """
    Convert a plain number, numeric string or Decimal to a Decimal.

    Args:
        value: Number, numeric string, Decimal, or None (treated as zero)

    Returns:
        Decimal representation of the value

    Raises:
        TypeError: If the value is a bool or an unsupported type
        ValueError: If the value is not a finite number
    """
    if value is None:
        return ZERO
    if isinstance(value, bool):
        raise TypeError("Boolean values cannot be converted to Decimal")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Cannot convert non-finite float {value!r} to Decimal")
        result = Decimal(repr(value))
    elif isinstance(value, str):
        text = value.strip().replace(",", "")
        if not text:
            return ZERO
        try:
            result = Decimal(text)
        except decimal.InvalidOperation as exc:
            raise ValueError(f"Cannot convert {value!r} to Decimal") from exc
    else:
        raise TypeError(f"Unsupported type for Decimal conversion: {type(value).__name__}")

    if not result.is_finite():
        raise ValueError(f"Decimal value must be finite, got {value!r}")
    return result


def quantize_money(value: DecimalLike, places: Decimal = CENTS) -> Decimal:
    """Round a value for output using round-half-up (2 decimal places by default)."""
    return to_decimal(value).quantize(places, rounding=ROUND_HALF_UP)


def safe_divide(numerator: DecimalLike, denominator: DecimalLike) -> Decimal:
    """
    Divide two values, signalling `decimal.DivisionByZero` on a zero divisor.

    The check is explicit so the condition is raised even when the caller's
    active decimal context does not trap it.
    """
    num = to_decimal(numerator)
    den = to_decimal(denominator)
    if den == ZERO:
        raise decimal.DivisionByZero(f"Division of {num} by zero")
    return DECIMAL_CONTEXT.divide(num, den)


def safe_divide_or_zero(numerator: DecimalLike, denominator: DecimalLike) -> Decimal:
    """Divide, returning zero when the divisor is zero. Only for ratio outputs."""
    den = to_decimal(denominator)
    if den == ZERO:
        return ZERO
    return safe_divide(numerator, den)


def power(base: DecimalLike, exponent: int) -> Decimal:
    """Raise a decimal to an integer power under `DECIMAL_CONTEXT`."""
    if isinstance(exponent, bool) or not isinstance(exponent, int):
        raise TypeError(f"Exponent must be an integer, got {type(exponent).__name__}")
    return DECIMAL_CONTEXT.power(to_decimal(base), Decimal(exponent))


def growth_factor(rate: DecimalLike, periods: int) -> Decimal:
    """Compound factor `(1 + rate) ** periods`."""
    return power(ONE + to_decimal(rate), periods)


def decimal_sum(values: Iterable[DecimalLike]) -> Decimal:
    """Sum values exactly; an empty iterable sums to zero."""
    total = ZERO
    for value in values:
        total = DECIMAL_CONTEXT.add(total, to_decimal(value))
    return total


def percent_to_rate(percent: Optional[DecimalLike]) -> Decimal:
    """Convert a whole-number percentage (e.g. 15) to a rate (0.15)."""
    return safe_divide(to_decimal(percent), HUNDRED)


def rate_to_percent(rate: DecimalLike) -> Decimal:
    return to_decimal(rate) * HUNDRED
