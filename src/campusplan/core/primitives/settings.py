# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from decimal import Decimal
from typing import Dict, Optional, Tuple

from pydantic import Field, model_validator

from ...utils.types import (
    DecimalBetween0And1,
    DecimalValue,
    NonNegativeDecimal,
    NonNegativeInt,
    PositiveInt,
    Year,
)
from .enums import CurriculumTypeEnum, InflationIndexEnum, ZakatMethodEnum
from .model import Model


class WorkingCapitalSettings(Model):
    """Timing assumptions used to derive working-capital balances."""

    collection_days: NonNegativeDecimal = Field(
        default=Decimal(30),
        le=365,
        description="Days of revenue outstanding as accounts receivable.",
    )
    payment_days: NonNegativeDecimal = Field(
        default=Decimal(45),
        le=365,
        description="Days of staff cost outstanding as accounts payable.",
    )
    deferral_factor: DecimalBetween0And1 = Field(
        default=Decimal(0),
        description="Share of revenue collected in advance (deferred revenue).",
    )
    accrual_days: NonNegativeDecimal = Field(
        default=Decimal(0),
        le=365,
        description="Days of staff cost accrued but not yet paid.",
    )


class AdminSettings(Model):
    """
    Administrative default rates supplied once per projection call.

    All rates are decimals (0.05 == 5%). The engine treats this object as
    immutable input and passes it explicitly to every sub-calculator.

    Usage Examples:
        # Defaults
        settings = AdminSettings()

        # Higher financing cost, asset-based zakat
        settings = AdminSettings(
            debt_interest_rate="0.07",
            zakat_method=ZakatMethodEnum.ASSET_BASED,
        )
    """

    cpi_rate: NonNegativeDecimal = Field(
        default=Decimal("0.03"), le=1, description="Annual CPI growth rate."
    )
    discount_rate: DecimalBetween0And1 = Field(
        default=Decimal("0.08"), description="Discount rate used for NPV."
    )
    zakat_rate: NonNegativeDecimal = Field(
        default=Decimal("0.025"), le=Decimal("0.10"), description="Zakat/tax rate (0-10%)."
    )
    zakat_method: ZakatMethodEnum = ZakatMethodEnum.INCOME_BASED
    nisab_threshold: NonNegativeDecimal = Field(
        default=Decimal(21250),
        description="Minimum zakatable assets for asset-based zakat.",
    )
    debt_interest_rate: NonNegativeDecimal = Field(
        default=Decimal("0.05"), le=Decimal("0.30"), description="Interest on debt (0-30%)."
    )
    deposit_interest_rate: NonNegativeDecimal = Field(
        default=Decimal("0.02"),
        le=Decimal("0.20"),
        description="Interest earned on positive cash (0-20%).",
    )
    minimum_cash_balance: NonNegativeDecimal = Field(
        default=Decimal(1_000_000),
        description="Cash floor; shortfalls below it are financed with debt.",
    )
    working_capital: WorkingCapitalSettings = Field(default_factory=WorkingCapitalSettings)
    inflation_rates: Dict[InflationIndexEnum, DecimalValue] = Field(
        default_factory=dict,
        description="Annual rates per named index. CPI falls back to cpi_rate.",
    )

    def inflation_rate(self, index: Optional[InflationIndexEnum]) -> Decimal:
        """
        Resolve the annual rate of a named inflation index.

        Raises:
            KeyError: If a non-CPI index has no configured rate
        """
        if index is None:
            return Decimal(0)
        if index in self.inflation_rates:
            return self.inflation_rates[index]
        if index == InflationIndexEnum.CPI:
            return self.cpi_rate
        raise KeyError(f"No rate configured for inflation index '{index.value}'")


class PeriodSettings(Model):
    """Cutover years separating the HISTORICAL, TRANSITION and DYNAMIC regimes."""

    historical_start_year: Year = 2023
    transition_start_year: Year = 2025
    dynamic_start_year: Year = 2028
    horizon_end_year: Year = 2052

    @model_validator(mode="after")
    def check_ordering(self) -> "PeriodSettings":
        if not (
            self.historical_start_year
            <= self.transition_start_year
            <= self.dynamic_start_year
            <= self.horizon_end_year
        ):
            raise ValueError(
                "Cutover years must be ordered: historical_start_year <= "
                "transition_start_year <= dynamic_start_year <= horizon_end_year"
            )
        return self

    @property
    def transition_years(self) -> Tuple[int, ...]:
        return tuple(range(self.transition_start_year, self.dynamic_start_year))

    @property
    def last_historical_year(self) -> int:
        return self.transition_start_year - 1


class SolverSettings(Model):
    """Convergence limits and opening balances for the circular solver."""

    tolerance: DecimalValue = Field(
        default=Decimal("0.01"),
        gt=0,
        description="Absolute difference between successive balance estimates.",
    )
    max_iterations: PositiveInt = 100
    depreciation_rate: DecimalBetween0And1 = Decimal("0.10")
    starting_cash: DecimalValue = Decimal(5_000_000)
    opening_equity: DecimalValue = Decimal(55_000_000)
    opening_debt: NonNegativeDecimal = Decimal(0)
    fixed_assets_opening: NonNegativeDecimal = Decimal(0)


class ProjectionSettings(Model):
    """
    Engine configuration for a projection run.

    Bundles the period cutovers, solver limits and the few business
    constants that are not administrative rates.
    """

    periods: PeriodSettings = Field(default_factory=PeriodSettings)
    solver: SolverSettings = Field(default_factory=SolverSettings)
    transition_capacity: NonNegativeInt = Field(
        default=1850,
        description="Maximum total students during transition when no record exists.",
    )
    npv_base_year: Optional[Year] = Field(
        default=None,
        description="Year discounted with exponent 0. Defaults to dynamic_start_year - 1.",
    )
    required_tracks: Tuple[CurriculumTypeEnum, ...] = (CurriculumTypeEnum.TRACK_A,)

    @property
    def effective_npv_base_year(self) -> int:
        if self.npv_base_year is not None:
            return self.npv_base_year
        return self.periods.dynamic_start_year - 1
