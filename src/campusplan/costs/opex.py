# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional, Sequence, Tuple

from pydantic import Field, model_validator

from ..core.primitives import Model, ValidationMixin
from ..utils.decimal import ZERO, decimal_sum, growth_factor, percent_to_rate, to_decimal
from ..utils.types import DecimalValue, NonNegativeDecimal

logger = logging.getLogger(__name__)


class OpexSubAccount(ValidationMixin, Model):
    """
    A named operating expense account.

    Fixed accounts charge `fixed_amount` (optionally CPI-escalated from the
    escalation base year); variable accounts charge `percent_of_revenue`,
    a whole-number percentage, of the year's total revenue.
    """

    name: str = Field(..., min_length=1)
    is_fixed: bool
    fixed_amount: Optional[NonNegativeDecimal] = None
    percent_of_revenue: Optional[NonNegativeDecimal] = Field(default=None, le=100)
    escalate_with_cpi: bool = False

    @model_validator(mode="after")
    def check_amount_definition(self) -> "OpexSubAccount":
        self.validate_conditional_requirement(
            self, "is_fixed", True, "fixed_amount",
            f"OpEx account '{self.name}' is fixed but has no fixed_amount",
        )
        self.validate_conditional_requirement(
            self, "is_fixed", False, "percent_of_revenue",
            f"OpEx account '{self.name}' is variable but has no percent_of_revenue",
        )
        return self

    def amount(
        self,
        year: int,
        revenue,
        cpi_rate=ZERO,
        escalation_base_year: Optional[int] = None,
    ) -> Decimal:
        if self.is_fixed:
            if self.escalate_with_cpi and escalation_base_year is not None:
                periods = max(0, year - escalation_base_year)
                return self.fixed_amount * growth_factor(cpi_rate, periods)
            return self.fixed_amount
        return percent_to_rate(self.percent_of_revenue) * to_decimal(revenue)


class OpexLine(Model):
    name: str
    is_fixed: bool
    amount: DecimalValue


class OpexResult(Model):
    """Operating expenses of one year, by sub-account."""

    year: int
    lines: Tuple[OpexLine, ...] = ()

    @property
    def fixed_total(self) -> Decimal:
        return decimal_sum(line.amount for line in self.lines if line.is_fixed)

    @property
    def variable_total(self) -> Decimal:
        return decimal_sum(line.amount for line in self.lines if not line.is_fixed)

    @property
    def total(self) -> Decimal:
        return decimal_sum(line.amount for line in self.lines)

    def by_account(self) -> dict:
        return {line.name: line.amount for line in self.lines}


def calculate_opex(
    accounts: Sequence[OpexSubAccount],
    year: int,
    revenue,
    cpi_rate=ZERO,
    escalation_base_year: Optional[int] = None,
) -> OpexResult:
    """
    Operating expenses for a year from its total revenue.

    Capital expenditure is never part of this total.

    Raises:
        ValueError: If revenue is negative
    """
    revenue = to_decimal(revenue)
    if revenue < ZERO:
        raise ValueError(f"Revenue cannot be negative (year {year})")
    lines = tuple(
        OpexLine(
            name=account.name,
            is_fixed=account.is_fixed,
            amount=account.amount(year, revenue, cpi_rate, escalation_base_year),
        )
        for account in accounts
    )
    return OpexResult(year=year, lines=lines)
