# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from decimal import Decimal
from typing import ClassVar, Literal, Optional

from pydantic import Field

from ..core.primitives import RentModelEnum
from ..utils.decimal import ZERO, to_decimal
from ..utils.types import DecimalBetween0And1
from .base import RentModelBase


class RevenueShareRent(RentModelBase):
    """
    Rent as a share of the same year's total revenue.

    The assembler must compute revenue before rent for this model.
    """

    rent_model: ClassVar[RentModelEnum] = RentModelEnum.REVENUE_SHARE
    requires_revenue: ClassVar[bool] = True

    kind: Literal["REVENUE_SHARE"] = "REVENUE_SHARE"
    share_percentage: DecimalBetween0And1 = Field(
        ..., description="Share of revenue as a decimal (0.08 == 8%)."
    )

    def compute(self, year: int, revenue: Optional[Decimal] = None) -> Decimal:
        if revenue is None:
            raise ValueError(f"Revenue share rent requires the revenue of {year}")
        revenue = to_decimal(revenue)
        if revenue < ZERO:
            raise ValueError(f"Revenue cannot be negative (got {revenue} for {year})")
        return revenue * self.share_percentage


def calculate_revenue_share_rent(revenue, share_percentage) -> Decimal:
    """Functional form of `RevenueShareRent.compute`."""
    return RevenueShareRent(share_percentage=share_percentage).compute(0, revenue)
