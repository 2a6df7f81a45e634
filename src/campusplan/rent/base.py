# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import ClassVar, Optional

from ..core.primitives import Model, RentModelEnum


class RentModelBase(Model, ABC):
    """
    Base class for rent calculation strategies.

    A rent model is a pure function of the year and its static parameters.
    Parameters are validated when the model is constructed, so a malformed
    configuration never reaches the calculation.
    """

    rent_model: ClassVar[RentModelEnum]
    requires_revenue: ClassVar[bool] = False

    @abstractmethod
    def compute(self, year: int, revenue: Optional[Decimal] = None) -> Decimal:
        """
        Compute the rent for a year.

        Args:
            year: Calendar year
            revenue: Total revenue of the year (only used by revenue-linked models)

        Returns:
            Rent at full precision
        """
        pass

    @staticmethod
    def escalation_count(year: int, start_year: int, frequency: int) -> int:
        """Number of completed escalation steps between `start_year` and `year`."""
        if year < start_year:
            raise ValueError(f"Year {year} is before rent start year {start_year}")
        return (year - start_year) // frequency
