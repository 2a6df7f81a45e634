# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Projection result structures.

Results are created once by the assembler and never mutated. Monetary values
are Decimals rounded half-up to cents; `to_dict()` serializes them as decimal
strings so no precision is lost across a service boundary.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd
from pydantic import computed_field

from ..core.primitives import Model, PeriodEnum
from ..utils.decimal import quantize_money
from ..utils.types import DecimalValue, NonNegativeInt

MONETARY_COLUMNS = [
    "revenue",
    "staff_cost",
    "rent",
    "opex",
    "ebitda",
    "capex",
    "depreciation",
    "interest_income",
    "interest_expense",
    "taxes",
    "net_result",
    "cash_flow",
    "cash_balance",
    "debt_balance",
]
PERCENT_COLUMNS = ["ebitda_margin", "rent_load"]


class ProjectionYearResult(Model):
    """
    Computed figures of one calendar year.

    `ebitda_margin` and `rent_load` are percentages (12.5 == 12.5%).
    A year whose circular solve did not converge keeps its best estimate,
    with `converged=False` and the warning message in `warnings`.
    """

    year: int
    period: PeriodEnum
    students: NonNegativeInt = 0
    revenue: DecimalValue
    staff_cost: DecimalValue
    rent: DecimalValue
    opex: DecimalValue
    ebitda: DecimalValue
    ebitda_margin: DecimalValue
    capex: DecimalValue
    depreciation: DecimalValue
    interest_income: DecimalValue
    interest_expense: DecimalValue
    taxes: DecimalValue
    net_result: DecimalValue
    cash_flow: DecimalValue
    rent_load: DecimalValue
    cash_balance: DecimalValue
    debt_balance: DecimalValue
    converged: bool = True
    solver_iterations: NonNegativeInt = 0
    warnings: Tuple[str, ...] = ()

    def rounded(self) -> "ProjectionYearResult":
        """Copy with monetary and percentage fields rounded half-up to cents."""
        return self.model_copy(
            update={
                field: quantize_money(getattr(self, field))
                for field in MONETARY_COLUMNS + PERCENT_COLUMNS
            }
        )


class ProjectionSummary(Model):
    """Aggregates over the projection horizon."""

    total_revenue: DecimalValue
    total_staff_cost: DecimalValue
    total_rent: DecimalValue
    total_opex: DecimalValue
    total_ebitda: DecimalValue
    total_capex: DecimalValue
    total_interest_income: DecimalValue
    total_interest_expense: DecimalValue
    total_taxes: DecimalValue
    total_cash_flow: DecimalValue
    npv_rent: DecimalValue
    npv_cash_flow: DecimalValue
    average_ebitda_margin: DecimalValue
    average_rent_load: DecimalValue
    non_converged_years: Tuple[int, ...] = ()


class ProjectionResult(Model):
    """Year-by-year results and their summary."""

    years: Tuple[ProjectionYearResult, ...]
    summary: ProjectionSummary

    @computed_field
    @property
    def converged(self) -> bool:
        return not self.summary.non_converged_years

    def year(self, year: int) -> ProjectionYearResult:
        """
        Look up the result of a calendar year.

        Raises:
            KeyError: If the year is outside the horizon
        """
        for result in self.years:
            if result.year == year:
                return result
        raise KeyError(f"Year {year} is not in the projection horizon")

    def series(self, field: str) -> Dict[int, Decimal]:
        """One field of every year keyed by year."""
        return {result.year: getattr(result, field) for result in self.years}

    def to_dataframe(self) -> pd.DataFrame:
        """
        Year results as a DataFrame indexed by year.

        Monetary columns hold Decimal objects; convert explicitly if float
        arithmetic is acceptable downstream.
        """
        rows = [result.model_dump() for result in self.years]
        df = pd.DataFrame(rows).set_index("year")
        df["period"] = df["period"].map(lambda period: period.value)
        return df

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready form; Decimals become strings."""
        return self.model_dump(mode="json")


class ProjectionResponse(Model):
    """Outcome of `run_projection`: a result or a structured failure."""

    success: bool
    result: Optional[ProjectionResult] = None
    error: Optional[Dict[str, Any]] = None
    warnings: Tuple[str, ...] = ()

    @classmethod
    def ok(cls, result: ProjectionResult) -> "ProjectionResponse":
        messages: List[str] = [message for year in result.years for message in year.warnings]
        return cls(success=True, result=result, warnings=tuple(messages))

    @classmethod
    def failure(cls, error: Dict[str, Any]) -> "ProjectionResponse":
        return cls(success=False, error=error)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")
