# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Test utilities and fixtures for CampusPlan testing.

Factories build small but complete inputs so tests only spell out the
fields they care about.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional

import pytest

from campusplan.core.primitives import AdminSettings, CurriculumTypeEnum
from campusplan.costs import OpexSubAccount
from campusplan.projection import HistoricalActualsRecord, ProjectionRequest
from campusplan.rent import FixedEscalationRent, RentPlan
from campusplan.revenue import CurriculumTrack, TransitionYearRecord


def create_track_a(**overrides: Any) -> CurriculumTrack:
    """National-programme track with a flat 900-student plan for 2023-2035."""
    data: Dict[str, Any] = dict(
        track=CurriculumTypeEnum.TRACK_A,
        capacity=1200,
        tuition_base=Decimal(40000),
        cpi_frequency_years=1,
        enrollment_by_year={year: 900 for year in range(2023, 2036)},
    )
    data.update(overrides)
    return CurriculumTrack(**data)


def create_track_b(**overrides: Any) -> CurriculumTrack:
    """International track with a flat 300-student plan for 2023-2035."""
    data: Dict[str, Any] = dict(
        track=CurriculumTypeEnum.TRACK_B,
        capacity=600,
        tuition_base=Decimal(55000),
        cpi_frequency_years=2,
        enrollment_by_year={year: 300 for year in range(2023, 2036)},
    )
    data.update(overrides)
    return CurriculumTrack(**data)


def create_rent_plan(
    base_rent: str = "1000000", escalation_rate: str = "0.04", start_year: int = 2028
) -> RentPlan:
    return RentPlan(
        parameters=FixedEscalationRent(
            base_rent=base_rent, escalation_rate=escalation_rate, start_year=start_year
        )
    )


def create_actuals(year: int, **overrides: Any) -> HistoricalActualsRecord:
    data: Dict[str, Any] = dict(
        year=year,
        revenue=Decimal(50_000_000),
        staff_cost=Decimal(25_000_000),
        rent=Decimal(8_000_000),
        opex=Decimal(5_000_000),
        capex=Decimal(1_000_000),
    )
    data.update(overrides)
    return HistoricalActualsRecord(**data)


def create_transition_record(year: int = 2025, **overrides: Any) -> TransitionYearRecord:
    data: Dict[str, Any] = dict(
        year=year,
        target_enrollment=1800,
        staff_cost_base=Decimal(28_000_000),
        average_tuition_per_student=Decimal(50000),
        other_revenue=Decimal(2_000_000),
    )
    data.update(overrides)
    return TransitionYearRecord(**data)


def create_projection_request(
    start_year: int = 2023,
    end_year: int = 2030,
    admin_settings: Optional[AdminSettings] = None,
    **overrides: Any,
) -> ProjectionRequest:
    """
    A request covering every period with the default cutovers.

    Historical actuals are supplied for 2023 and 2024; 2025 has a transition
    record while 2026 and 2027 fall back to the formula-driven rules.
    """
    data: Dict[str, Any] = dict(
        start_year=start_year,
        end_year=end_year,
        tracks=(create_track_a(), create_track_b()),
        rent_plan=create_rent_plan(),
        staff_cost_base=Decimal(30_000_000),
        opex_accounts=(
            OpexSubAccount(name="Utilities", is_fixed=True, fixed_amount=Decimal(2_000_000)),
            OpexSubAccount(name="Marketing", is_fixed=False, percent_of_revenue=Decimal(5)),
        ),
        admin_settings=admin_settings or AdminSettings(),
        transition_records=(create_transition_record(2025),),
        historical_actuals=(create_actuals(2023), create_actuals(2024)),
    )
    data.update(overrides)
    return ProjectionRequest(**data)


@pytest.fixture
def admin_settings():
    """Default administrative rates."""
    return AdminSettings()


@pytest.fixture
def projection_request():
    """A 2023-2030 request touching every period."""
    return create_projection_request()
