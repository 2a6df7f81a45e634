# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Period detection.

A year's calculation regime is a pure function of the year and the cutover
years in `PeriodSettings`; nothing else influences the dispatch.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from .enums import PeriodEnum
from .settings import PeriodSettings

_DEFAULT_PERIODS = PeriodSettings()


def get_period(year: int, periods: Optional[PeriodSettings] = None) -> PeriodEnum:
    """
    Determine the calculation regime of a year.

    Years before the transition cutover are HISTORICAL, years before the
    dynamic cutover are TRANSITION, and every later year is DYNAMIC.

    Args:
        year: Calendar year
        periods: Cutover configuration (defaults to 2025 / 2028)

    Returns:
        PeriodEnum for the year
    """
    periods = periods or _DEFAULT_PERIODS
    if year < periods.transition_start_year:
        return PeriodEnum.HISTORICAL
    if year < periods.dynamic_start_year:
        return PeriodEnum.TRANSITION
    return PeriodEnum.DYNAMIC


def years_in_period(
    period: PeriodEnum,
    start_year: int,
    end_year: int,
    periods: Optional[PeriodSettings] = None,
) -> List[int]:
    """Years of `[start_year, end_year]` that fall in the given period."""
    return [
        year
        for year in range(start_year, end_year + 1)
        if get_period(year, periods) == period
    ]


def period_map(
    start_year: int, end_year: int, periods: Optional[PeriodSettings] = None
) -> Dict[int, PeriodEnum]:
    return {year: get_period(year, periods) for year in range(start_year, end_year + 1)}
