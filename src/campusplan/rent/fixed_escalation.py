# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from decimal import Decimal
from typing import ClassVar, Literal, Optional

from pydantic import Field

from ..core.primitives import RentModelEnum
from ..utils.decimal import growth_factor
from ..utils.types import NonNegativeDecimal, PositiveDecimal, PositiveInt, Year
from .base import RentModelBase


class FixedEscalationRent(RentModelBase):
    """
    Base rent stepped up by a fixed rate every `frequency` years.

    `rent(year) = base_rent * (1 + escalation_rate) ** floor((year - start_year) / frequency)`

    The start year and the following `frequency - 1` years pay the base rent
    unchanged. A zero escalation rate gives a flat rent.

    Example:
        ```python
        rent = FixedEscalationRent(
            base_rent=1_000_000, escalation_rate="0.04", start_year=2028
        )
        rent.compute(2030)  # == Decimal('1081600')
        ```
    """

    rent_model: ClassVar[RentModelEnum] = RentModelEnum.FIXED_ESCALATION

    kind: Literal["FIXED_ESCALATION"] = "FIXED_ESCALATION"
    base_rent: PositiveDecimal = Field(..., description="Rent of the start year.")
    escalation_rate: NonNegativeDecimal = Field(
        default=Decimal(0), description="Rate applied at each escalation step."
    )
    frequency: PositiveInt = Field(default=1, description="Years between escalations.")
    start_year: Year

    def compute(self, year: int, revenue: Optional[Decimal] = None) -> Decimal:
        escalations = self.escalation_count(year, self.start_year, self.frequency)
        return self.base_rent * growth_factor(self.escalation_rate, escalations)


def calculate_fixed_escalation_rent(
    base_rent, escalation_rate, start_year: int, year: int, frequency: int = 1
) -> Decimal:
    """Functional form of `FixedEscalationRent.compute`; validates the parameters."""
    return FixedEscalationRent(
        base_rent=base_rent,
        escalation_rate=escalation_rate,
        start_year=start_year,
        frequency=frequency,
    ).compute(year)
