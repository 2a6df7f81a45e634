# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Projection request.

A single immutable structure holding everything a projection run needs.
Field-level and intra-request rules are enforced by pydantic when the request
is built; rules that depend on the period settings (e.g. actuals present for
every historical year) are checked by the assembler before any year is
computed.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, Optional, Tuple

from pydantic import Field, field_validator, model_validator

from ..core.primitives import (
    AdminSettings,
    CurriculumTypeEnum,
    Model,
    ProjectionSettings,
    StaffCostBaseModeEnum,
    ValidationMixin,
    validate_unique_keys,
)
from ..costs import CapexItem, CapexRule, OpexSubAccount, StaffingRatios
from ..rent import RentPlan
from ..revenue import CurriculumTrack, TransitionYearRecord
from ..utils.types import CpiFrequency, DecimalValue, NonNegativeDecimal, Year


class HistoricalActualsRecord(Model):
    """Realized figures of a historical year, used verbatim."""

    year: Year
    revenue: NonNegativeDecimal
    staff_cost: NonNegativeDecimal
    rent: NonNegativeDecimal
    opex: NonNegativeDecimal
    capex: DecimalValue = Field(
        default=Decimal(0), description="Additions to fixed assets; sign is ignored."
    )

    @field_validator("capex")
    @classmethod
    def _absolute_capex(cls, value: Decimal) -> Decimal:
        return abs(value)


class ProjectionRequest(ValidationMixin, Model):
    """
    Inputs of one projection run.

    Exactly one of `staff_cost_base` or `staffing` defines the staff cost
    base; with `staffing` the base is derived from the enrollment of the
    staff cost base year.
    """

    start_year: Year
    end_year: Year
    tracks: Tuple[CurriculumTrack, ...]
    rent_plan: Optional[RentPlan] = None
    staff_cost_base: Optional[NonNegativeDecimal] = None
    staffing: Optional[StaffingRatios] = None
    staff_cost_cpi_frequency: CpiFrequency = 1
    staff_cost_base_mode: StaffCostBaseModeEnum = StaffCostBaseModeEnum.RELOCATION
    other_revenue_by_year: Dict[int, NonNegativeDecimal] = Field(default_factory=dict)
    capex_rules: Tuple[CapexRule, ...] = ()
    capex_items: Tuple[CapexItem, ...] = ()
    opex_accounts: Tuple[OpexSubAccount, ...] = ()
    admin_settings: AdminSettings = Field(default_factory=AdminSettings)
    transition_records: Tuple[TransitionYearRecord, ...] = ()
    historical_actuals: Tuple[HistoricalActualsRecord, ...] = ()
    settings: ProjectionSettings = Field(default_factory=ProjectionSettings)

    @model_validator(mode="after")
    def check_request(self) -> "ProjectionRequest":
        self.validate_year_ordering(self, "start_year", "end_year")
        if self.staff_cost_base is None and self.staffing is None:
            raise ValueError("Either staff_cost_base or staffing must be provided")
        if self.staff_cost_base is not None and self.staffing is not None:
            raise ValueError("Cannot provide both staff_cost_base and staffing")
        validate_unique_keys(self.tracks, lambda track: track.track.value, "curriculum track")
        validate_unique_keys(self.transition_records, lambda rec: rec.year, "transition record year")
        validate_unique_keys(self.historical_actuals, lambda rec: rec.year, "historical actuals year")
        validate_unique_keys(self.opex_accounts, lambda account: account.name, "opex account")
        return self

    @property
    def years(self) -> range:
        return range(self.start_year, self.end_year + 1)

    @property
    def track_types(self) -> Tuple[CurriculumTypeEnum, ...]:
        return tuple(track.track for track in self.tracks)

    def transition_record(self, year: int) -> Optional[TransitionYearRecord]:
        return next((rec for rec in self.transition_records if rec.year == year), None)

    def actuals(self, year: int) -> Optional[HistoricalActualsRecord]:
        return next((rec for rec in self.historical_actuals if rec.year == year), None)

    @property
    def staff_cost_base_year(self) -> int:
        periods = self.settings.periods
        if self.staff_cost_base_mode == StaffCostBaseModeEnum.HISTORICAL_BASELINE:
            return periods.historical_start_year
        return periods.dynamic_start_year
