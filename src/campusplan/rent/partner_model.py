# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from decimal import Decimal
from typing import ClassVar, Literal, Optional

from pydantic import Field

from ..core.primitives import RentModelEnum
from ..utils.decimal import ZERO, growth_factor
from ..utils.types import DecimalValue, NonNegativeDecimal, PositiveDecimal, PositiveInt, Year
from .base import RentModelBase


class PartnerModelRent(RentModelBase):
    """
    Rent derived from the partner's investment in land and construction.

    The partner's outlay `land_size * land_price_per_sqm + bua_size *
    construction_cost_per_sqm` is converted into a first-year rent through the
    yield. From then on the rent grows by `growth_rate` once every `frequency`
    years; without a positive growth rate it stays at the base rent.

    `frequency` has no default: when the first escalation happens depends
    entirely on it.
    """

    rent_model: ClassVar[RentModelEnum] = RentModelEnum.PARTNER_MODEL

    kind: Literal["PARTNER_MODEL"] = "PARTNER_MODEL"
    land_size: PositiveDecimal = Field(..., description="Land area in sqm.")
    land_price_per_sqm: PositiveDecimal
    bua_size: PositiveDecimal = Field(..., description="Built-up area in sqm.")
    construction_cost_per_sqm: PositiveDecimal
    yield_base: DecimalValue = Field(..., gt=0, le=1, description="Yield on investment.")
    growth_rate: Optional[NonNegativeDecimal] = None
    frequency: PositiveInt
    start_year: Year

    @property
    def investment(self) -> Decimal:
        return (
            self.land_size * self.land_price_per_sqm
            + self.bua_size * self.construction_cost_per_sqm
        )

    @property
    def base_rent(self) -> Decimal:
        return self.investment * self.yield_base

    def compute(self, year: int, revenue: Optional[Decimal] = None) -> Decimal:
        escalations = self.escalation_count(year, self.start_year, self.frequency)
        growth = self.growth_rate or ZERO
        if escalations > 0 and growth > ZERO:
            return self.base_rent * growth_factor(growth, escalations)
        return self.base_rent


def calculate_partner_rent(
    land_size,
    land_price_per_sqm,
    bua_size,
    construction_cost_per_sqm,
    yield_base,
    start_year: int,
    frequency: int,
    year: int,
    growth_rate=None,
) -> Decimal:
    """Functional form of `PartnerModelRent.compute`; validates the parameters."""
    return PartnerModelRent(
        land_size=land_size,
        land_price_per_sqm=land_price_per_sqm,
        bua_size=bua_size,
        construction_cost_per_sqm=construction_cost_per_sqm,
        yield_base=yield_base,
        growth_rate=growth_rate,
        frequency=frequency,
        start_year=start_year,
    ).compute(year)
