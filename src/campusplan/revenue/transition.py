# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Transition-period revenue, staff cost and rent.

Transition years are governed by administratively entered records. When a
year has a record, its target enrollment is spread over the tracks in
proportion to their planned share and revenue follows the record's average
tuition. Without a record the planned enrollment is capped at the interim
campus capacity.

Allocation and capping both round each track down to whole students.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, Mapping, Optional, Sequence

from pydantic import Field

from ..core.primitives import CurriculumTypeEnum, Model, PeriodEnum
from ..utils.decimal import ONE, ZERO, decimal_sum, percent_to_rate, to_decimal
from ..utils.types import GrowthPercent, NonNegativeDecimal, NonNegativeInt, Year
from .curriculum import CurriculumTrack
from .tuition import RevenueBreakdown, track_revenue

logger = logging.getLogger(__name__)


class TransitionYearRecord(Model):
    """Administrative parameters of one transition year. Read-only to the engine."""

    year: Year
    target_enrollment: NonNegativeInt
    staff_cost_base: NonNegativeDecimal
    average_tuition_per_student: Optional[NonNegativeDecimal] = None
    other_revenue: Optional[NonNegativeDecimal] = None
    staff_cost_growth_percent: Optional[GrowthPercent] = Field(
        default=None, description="Growth over the last historical staff cost, in percent."
    )
    rent_growth_percent: Optional[GrowthPercent] = Field(
        default=None, description="Growth over the last historical rent, in percent."
    )
    rent: Optional[NonNegativeDecimal] = Field(
        default=None, description="Rent override used when no growth percent is set."
    )


def allocate_enrollment(
    target_enrollment: int, projected: Mapping[CurriculumTypeEnum, int]
) -> Dict[CurriculumTypeEnum, int]:
    """
    Spread a target head count across tracks by their projected share.

    Each track gets `floor(target * track_projected / total_projected)`;
    every track gets zero when nothing was projected.
    """
    total = sum(projected.values())
    if total == 0:
        return {track: 0 for track in projected}
    return {track: (target_enrollment * students) // total for track, students in projected.items()}


def cap_enrollment(
    projected: Mapping[CurriculumTypeEnum, int], capacity: int
) -> Dict[CurriculumTypeEnum, int]:
    """Scale tracks down proportionally when their total exceeds `capacity`."""
    total = sum(projected.values())
    if total <= capacity:
        return dict(projected)
    return {track: (students * capacity) // total for track, students in projected.items()}


def project_transition_revenue(
    tracks: Sequence[CurriculumTrack],
    year: int,
    cpi_rate,
    default_base_year: int,
    record: Optional[TransitionYearRecord],
    capacity: int,
    other_revenue=None,
) -> RevenueBreakdown:
    """
    Revenue of a transition year.

    Args:
        tracks: Curriculum tracks with their planned enrollment
        year: Transition year
        cpi_rate: CPI rate for tuition growth
        default_base_year: Tuition base year for tracks without their own
        record: Administrative record of the year, if one exists
        capacity: Interim campus capacity used when there is no record
        other_revenue: Other revenue of the year when the record has none

    Returns:
        RevenueBreakdown tagged with the TRANSITION period
    """
    projected = {track.track: track.students(year) for track in tracks}

    if record is not None:
        students = allocate_enrollment(record.target_enrollment, projected)
    else:
        students = cap_enrollment(projected, capacity)
        if students != projected:
            logger.debug(
                f"Transition {year}: enrollment {sum(projected.values())} capped at {capacity}"
            )

    lines = tuple(
        track_revenue(track, year, cpi_rate, default_base_year, students[track.track])
        for track in tracks
    )

    if record is not None and record.average_tuition_per_student is not None:
        tuition_revenue = record.average_tuition_per_student * record.target_enrollment
    else:
        tuition_revenue = decimal_sum(line.revenue for line in lines)

    if record is not None and record.other_revenue is not None:
        other = record.other_revenue
    else:
        other = to_decimal(other_revenue)
    if other < ZERO:
        raise ValueError(f"Other revenue cannot be negative (year {year})")

    return RevenueBreakdown(
        year=year,
        period=PeriodEnum.TRANSITION,
        tracks=lines,
        tuition_revenue=tuition_revenue,
        other_revenue=other,
    )


def _apply_growth_percent(baseline: Decimal, percent: Decimal) -> Decimal:
    return baseline * (ONE + percent_to_rate(percent))


def transition_staff_cost(
    record: Optional[TransitionYearRecord], baseline: Optional[Decimal]
) -> Optional[Decimal]:
    """
    Staff cost set administratively for a transition year.

    A growth percent applies to `baseline` (the last historical staff cost);
    otherwise the record's staff cost base is used verbatim. Returns None
    when there is no record, leaving the caller to deflate from the anchor.
    """
    if record is None:
        return None
    if record.staff_cost_growth_percent is not None:
        if baseline is not None:
            return _apply_growth_percent(baseline, record.staff_cost_growth_percent)
        logger.warning(
            f"Transition {record.year}: staff cost growth percent set but no historical "
            f"baseline available, using the record's staff cost base"
        )
    return record.staff_cost_base


def transition_rent(
    record: Optional[TransitionYearRecord],
    baseline: Optional[Decimal],
    plan_transition_rent: Optional[Decimal] = None,
) -> Decimal:
    """
    Rent of a transition year.

    Precedence: growth percent over `baseline` (the last historical rent),
    then the record's rent (a zero rent counts as unset), then the rent
    plan's transition rent, else zero.
    """
    if record is not None:
        if record.rent_growth_percent is not None:
            if baseline is not None:
                return _apply_growth_percent(baseline, record.rent_growth_percent)
            logger.warning(
                f"Transition {record.year}: rent growth percent set but no historical "
                f"baseline available, ignoring it"
            )
        if record.rent:
            return record.rent
    if plan_transition_rent is not None:
        return plan_transition_rent
    return ZERO
