# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Staff cost projection.

Forward years compound the staff cost base with CPI at the configured
frequency. Transition years without an administrative record are deflated
backward from the anchor year one year at a time, each year derived from the
following one.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict

from pydantic import Field

from ..core.primitives import Model
from ..utils.decimal import HUNDRED, ONE, ZERO, growth_factor, safe_divide, to_decimal
from ..utils.types import NonNegativeDecimal

logger = logging.getLogger(__name__)

MONTHS_PER_YEAR = 12


class StaffingRatios(Model):
    """
    Staffing assumptions used to derive a staff cost base from enrollment.

    Ratios are staff per student. Values above 1 are read as percentages
    (e.g. 7 means 0.07).
    """

    teacher_ratio: NonNegativeDecimal
    teacher_monthly_salary: NonNegativeDecimal
    non_teacher_ratio: NonNegativeDecimal = Decimal(0)
    non_teacher_monthly_salary: NonNegativeDecimal = Decimal(0)

    @staticmethod
    def _normalize_ratio(ratio: Decimal) -> Decimal:
        return ratio / HUNDRED if ratio > ONE else ratio

    def staff_cost_base(self, students: int) -> Decimal:
        """Annual staff cost for a student head count."""
        if students < 0:
            raise ValueError("Student count cannot be negative")
        teachers = students * self._normalize_ratio(self.teacher_ratio)
        non_teachers = students * self._normalize_ratio(self.non_teacher_ratio)
        return (
            teachers * self.teacher_monthly_salary
            + non_teachers * self.non_teacher_monthly_salary
        ) * MONTHS_PER_YEAR


def calculate_staff_cost(
    staff_cost_base, cpi_rate, year: int, base_year: int, frequency: int = 1
) -> Decimal:
    """
    Forward staff cost for a year at or after the base year.

    `staff_cost_base * (1 + cpi) ** floor((year - base_year) / frequency)`

    Raises:
        ValueError: Negative base or rate, invalid frequency, or year before base year
    """
    base = to_decimal(staff_cost_base)
    cpi_rate = to_decimal(cpi_rate)
    if base < ZERO:
        raise ValueError("Staff cost base cannot be negative")
    if cpi_rate < ZERO:
        raise ValueError("CPI rate cannot be negative")
    if frequency < 1:
        raise ValueError(f"CPI frequency must be at least 1 (got {frequency})")
    if year < base_year:
        raise ValueError(
            f"Year {year} is before staff cost base year {base_year}; deflate backward instead"
        )
    return base * growth_factor(cpi_rate, (year - base_year) // frequency)


def deflate_backward(
    anchor_amount, anchor_year: int, first_year: int, cpi_rate
) -> Dict[int, Decimal]:
    """
    Deflate an anchor-year amount back to `first_year`, one year at a time.

    Each year is the following year's amount divided by `(1 + cpi)`, so the
    sequence rises strictly toward the anchor under a positive rate.

    Args:
        anchor_amount: Amount in the anchor year
        anchor_year: Year the amount applies to (excluded from the result)
        first_year: Earliest year to produce
        cpi_rate: Annual deflation rate (>= 0)

    Returns:
        Mapping of year -> deflated amount for `first_year .. anchor_year - 1`
    """
    cpi_rate = to_decimal(cpi_rate)
    if cpi_rate < ZERO:
        raise ValueError("CPI rate cannot be negative")
    divisor = ONE + cpi_rate
    amount = to_decimal(anchor_amount)
    schedule: Dict[int, Decimal] = {}
    for year in range(anchor_year - 1, first_year - 1, -1):
        amount = safe_divide(amount, divisor)
        schedule[year] = amount
    logger.debug(
        f"Deflated staff cost from {anchor_year} back to {first_year}: {len(schedule)} years"
    )
    return schedule


class StaffCostProjector(Model):
    """Staff cost base and growth assumptions of a projection."""

    staff_cost_base: NonNegativeDecimal
    cpi_rate: NonNegativeDecimal
    base_year: int
    frequency: int = Field(default=1, ge=1, le=3)

    def forward(self, year: int) -> Decimal:
        return calculate_staff_cost(
            self.staff_cost_base, self.cpi_rate, year, self.base_year, self.frequency
        )

    def backward_from(self, anchor_year: int, first_year: int) -> Dict[int, Decimal]:
        """Deflated schedule for the years before `anchor_year`."""
        return deflate_backward(self.forward(anchor_year), anchor_year, first_year, self.cpi_rate)
