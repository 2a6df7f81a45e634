# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Projection metrics.

Pure functions for EBITDA, NPV and horizon summaries. Other modules delegate
to these so each metric has a single definition.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Mapping, Optional, Sequence

from ..core.primitives import PeriodEnum
from ..utils.decimal import (
    HUNDRED,
    ONE,
    ZERO,
    decimal_sum,
    power,
    quantize_money,
    safe_divide,
    safe_divide_or_zero,
    to_decimal,
)
from .results import ProjectionSummary, ProjectionYearResult


class ProjectionMetrics:
    """
    Static methods for projection metrics.

    Example:
        ```python
        npv = ProjectionMetrics.calculate_npv(
            {2028: 100, 2029: 100}, discount_rate="0.08", base_year=2027
        )
        ```
    """

    @staticmethod
    def calculate_ebitda(revenue, staff_cost, rent, opex) -> Decimal:
        """EBITDA = revenue - staff cost - rent - opex. Capex is excluded."""
        return (
            to_decimal(revenue)
            - to_decimal(staff_cost)
            - to_decimal(rent)
            - to_decimal(opex)
        )

    @staticmethod
    def ebitda_margin(ebitda, revenue) -> Decimal:
        """EBITDA as a percentage of revenue; zero when there is no revenue."""
        return safe_divide_or_zero(ebitda, revenue) * HUNDRED

    @staticmethod
    def calculate_npv(
        amounts: Mapping[int, Decimal],
        discount_rate,
        base_year: int,
        start_year: Optional[int] = None,
        end_year: Optional[int] = None,
    ) -> Decimal:
        """
        Net present value of a yearly stream.

        `sum(amount / (1 + d) ** (year - base_year))` over the years in
        `[start_year, end_year]` that have an amount.

        Args:
            amounts: Mapping of year -> amount
            discount_rate: Decimal rate in [0, 1]
            base_year: Year discounted with exponent 0
            start_year: First year included (defaults to all)
            end_year: Last year included (defaults to all)

        Returns:
            NPV at full precision

        Raises:
            ValueError: If the discount rate is outside [0, 1]
        """
        rate = to_decimal(discount_rate)
        if rate < ZERO or rate > ONE:
            raise ValueError(f"Discount rate must be between 0 and 1 (got {rate})")
        factor = ONE + rate
        present_values = []
        for year in sorted(amounts):
            if start_year is not None and year < start_year:
                continue
            if end_year is not None and year > end_year:
                continue
            present_values.append(
                safe_divide(to_decimal(amounts[year]), power(factor, year - base_year))
            )
        return decimal_sum(present_values)

    @staticmethod
    def average(values: Iterable[Decimal]) -> Decimal:
        values = list(values)
        if not values:
            return ZERO
        return safe_divide(decimal_sum(values), len(values))

    @classmethod
    def summarize(
        cls,
        years: Sequence[ProjectionYearResult],
        discount_rate,
        npv_base_year: int,
        npv_start_year: int,
        npv_end_year: int,
    ) -> ProjectionSummary:
        """
        Aggregate year results over the horizon.

        NPVs cover `[npv_start_year, npv_end_year]` (the dynamic period clipped
        to the horizon). The average EBITDA margin spans every year; the
        average rent load spans dynamic years only. Pass unrounded year
        results; only the aggregates are rounded to cents.
        """

        def total(field: str) -> Decimal:
            return quantize_money(decimal_sum(getattr(year, field) for year in years))

        rent = {year.year: year.rent for year in years}
        cash_flow = {year.year: year.cash_flow for year in years}
        npv_args = dict(
            discount_rate=discount_rate,
            base_year=npv_base_year,
            start_year=npv_start_year,
            end_year=npv_end_year,
        )
        dynamic = [year for year in years if year.period == PeriodEnum.DYNAMIC]

        return ProjectionSummary(
            total_revenue=total("revenue"),
            total_staff_cost=total("staff_cost"),
            total_rent=total("rent"),
            total_opex=total("opex"),
            total_ebitda=total("ebitda"),
            total_capex=total("capex"),
            total_interest_income=total("interest_income"),
            total_interest_expense=total("interest_expense"),
            total_taxes=total("taxes"),
            total_cash_flow=total("cash_flow"),
            npv_rent=quantize_money(cls.calculate_npv(rent, **npv_args)),
            npv_cash_flow=quantize_money(cls.calculate_npv(cash_flow, **npv_args)),
            average_ebitda_margin=quantize_money(cls.average(y.ebitda_margin for y in years)),
            average_rent_load=quantize_money(cls.average(y.rent_load for y in dynamic)),
            non_converged_years=tuple(year.year for year in years if not year.converged),
        )
