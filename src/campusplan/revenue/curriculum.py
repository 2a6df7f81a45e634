# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import Any, List, Optional, Tuple

from pydantic import Field, field_validator

from ..core.primitives import CurriculumTypeEnum, Model
from ..utils.types import CpiFrequency, PositiveDecimal, NonNegativeInt, Year


class CurriculumTrack(Model):
    """
    A curriculum track with its capacity, tuition and enrollment plan.

    `enrollment_by_year` accepts either a list of `(year, students)` pairs or
    a `{year: students}` mapping and is stored as pairs sorted by year.
    Enrollment above capacity is allowed here; callers decide whether to
    flag it (see `over_capacity_years`).
    """

    track: CurriculumTypeEnum
    capacity: NonNegativeInt
    tuition_base: PositiveDecimal = Field(..., description="Annual tuition in the base year.")
    cpi_frequency_years: CpiFrequency = Field(
        default=1, description="Years between tuition CPI increases (1, 2 or 3)."
    )
    tuition_base_year: Optional[Year] = Field(
        default=None,
        description="Year the tuition base applies to. Defaults to the first dynamic year.",
    )
    enrollment_by_year: Tuple[Tuple[int, int], ...] = ()

    @field_validator("enrollment_by_year", mode="before")
    @classmethod
    def _normalize_enrollment(cls, value: Any) -> Any:
        if isinstance(value, dict):
            value = list(value.items())
        return value

    @field_validator("enrollment_by_year")
    @classmethod
    def _check_enrollment(cls, value: Tuple[Tuple[int, int], ...]) -> Tuple[Tuple[int, int], ...]:
        years = [year for year, _ in value]
        if len(set(years)) != len(years):
            raise ValueError("enrollment_by_year contains duplicate years")
        for year, students in value:
            if students < 0:
                raise ValueError(f"Student count cannot be negative (year {year})")
        return tuple(sorted(value))

    def students(self, year: int) -> int:
        """Planned students for a year; zero when the year is not planned."""
        for planned_year, students in self.enrollment_by_year:
            if planned_year == year:
                return students
        return 0

    def over_capacity_years(self) -> List[int]:
        return [year for year, students in self.enrollment_by_year if students > self.capacity]
