# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Tuition growth and dynamic-period revenue.

Tuition grows with CPI once every `cpi_frequency_years`:

    tuition(year) = tuition_base * (1 + cpi) ** floor((year - base_year) / frequency)

Years before the base year floor toward negative exponents, i.e. they are
deflated by the same step rule.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, Optional, Sequence, Tuple

from ..core.primitives import CurriculumTypeEnum, Model, PeriodEnum
from ..utils.decimal import ZERO, decimal_sum, growth_factor, to_decimal
from ..utils.types import DecimalValue, NonNegativeInt
from .curriculum import CurriculumTrack

logger = logging.getLogger(__name__)

VALID_CPI_FREQUENCIES = (1, 2, 3)


class TrackRevenue(Model):
    """Students, tuition and tuition revenue of one track in one year."""

    track: CurriculumTypeEnum
    students: NonNegativeInt
    tuition: DecimalValue
    revenue: DecimalValue


class RevenueBreakdown(Model):
    """Revenue of one year split into tuition and other revenue."""

    year: int
    period: PeriodEnum
    tracks: Tuple[TrackRevenue, ...] = ()
    tuition_revenue: DecimalValue
    other_revenue: DecimalValue = Decimal(0)

    @property
    def total_revenue(self) -> Decimal:
        return self.tuition_revenue + self.other_revenue

    @property
    def total_students(self) -> int:
        return sum(line.students for line in self.tracks)


def calculate_tuition(
    tuition_base, cpi_rate, year: int, base_year: int, frequency: int = 1
) -> Decimal:
    """
    Tuition per student for a year.

    Args:
        tuition_base: Tuition in the base year (> 0)
        cpi_rate: Annual CPI rate as a decimal (>= 0)
        year: Calendar year
        base_year: Year in which `tuition_base` applies
        frequency: Years between increases (1, 2 or 3)

    Returns:
        Tuition at full precision

    Raises:
        ValueError: If any parameter is out of range
    """
    tuition_base = to_decimal(tuition_base)
    cpi_rate = to_decimal(cpi_rate)
    if tuition_base <= ZERO:
        raise ValueError("Tuition base must be positive")
    if cpi_rate < ZERO:
        raise ValueError("CPI rate cannot be negative")
    if frequency not in VALID_CPI_FREQUENCIES:
        raise ValueError(f"CPI frequency must be 1, 2 or 3 (got {frequency})")
    return tuition_base * growth_factor(cpi_rate, (year - base_year) // frequency)


def track_revenue(
    track: CurriculumTrack,
    year: int,
    cpi_rate,
    default_base_year: int,
    students: Optional[int] = None,
) -> TrackRevenue:
    """
    Tuition revenue of a track.

    `students` overrides the track's planned enrollment (used when transition
    allocation or capacity capping changed the head count).
    """
    if students is None:
        students = track.students(year)
    if students < 0:
        raise ValueError(f"Student count cannot be negative ({track.track.value}, {year})")
    tuition = calculate_tuition(
        track.tuition_base,
        cpi_rate,
        year,
        track.tuition_base_year or default_base_year,
        track.cpi_frequency_years,
    )
    return TrackRevenue(
        track=track.track, students=students, tuition=tuition, revenue=tuition * students
    )


def project_dynamic_revenue(
    tracks: Sequence[CurriculumTrack],
    year: int,
    cpi_rate,
    default_base_year: int,
    other_revenue=None,
    students_by_track: Optional[Dict[CurriculumTypeEnum, int]] = None,
) -> RevenueBreakdown:
    """
    Revenue of a dynamic-period year: planned students times grown tuition,
    summed across tracks, plus other revenue.
    """
    other = to_decimal(other_revenue)
    if other < ZERO:
        raise ValueError(f"Other revenue cannot be negative (year {year})")
    students_by_track = students_by_track or {}
    lines = tuple(
        track_revenue(
            track, year, cpi_rate, default_base_year, students_by_track.get(track.track)
        )
        for track in tracks
    )
    breakdown = RevenueBreakdown(
        year=year,
        period=PeriodEnum.DYNAMIC,
        tracks=lines,
        tuition_revenue=decimal_sum(line.revenue for line in lines),
        other_revenue=other,
    )
    logger.debug(
        f"Revenue {year}: {breakdown.total_students} students, total {breakdown.total_revenue}"
    )
    return breakdown
