# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from .decimal import (
    CENTS,
    DECIMAL_CONTEXT,
    ZERO,
    decimal_context,
    decimal_sum,
    growth_factor,
    percent_to_rate,
    power,
    quantize_money,
    rate_to_percent,
    safe_divide,
    safe_divide_or_zero,
    to_decimal,
)

__all__ = [
    "CENTS",
    "DECIMAL_CONTEXT",
    "ZERO",
    "decimal_context",
    "decimal_sum",
    "growth_factor",
    "percent_to_rate",
    "power",
    "quantize_money",
    "rate_to_percent",
    "safe_divide",
    "safe_divide_or_zero",
    "to_decimal",
]
