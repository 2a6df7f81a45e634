# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Cost Projection

Staff cost (forward compounding and backward deflation), operating expenses
by sub-account, and the capital expenditure scheduler.
"""

from .capex import (
    CapexItem,
    CapexRule,
    capex_by_year,
    generate_capex_items,
    regenerate_capex_items,
)
from .opex import OpexLine, OpexResult, OpexSubAccount, calculate_opex
from .staff import (
    StaffCostProjector,
    StaffingRatios,
    calculate_staff_cost,
    deflate_backward,
)

__all__ = [
    "CapexItem",
    "CapexRule",
    "OpexLine",
    "OpexResult",
    "OpexSubAccount",
    "StaffCostProjector",
    "StaffingRatios",
    "calculate_opex",
    "calculate_staff_cost",
    "capex_by_year",
    "deflate_backward",
    "generate_capex_items",
    "regenerate_capex_items",
]
