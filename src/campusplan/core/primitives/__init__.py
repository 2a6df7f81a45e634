# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
CampusPlan Core Primitives

Building blocks shared by every calculator: the immutable model base,
enumerations, settings and period detection.
"""

from .enums import (
    CapexCategoryEnum,
    CurriculumTypeEnum,
    InflationIndexEnum,
    PeriodEnum,
    RentModelEnum,
    SolverStatusEnum,
    StaffCostBaseModeEnum,
    ZakatMethodEnum,
)
from .model import Model
from .periods import get_period, period_map, years_in_period
from .settings import (
    AdminSettings,
    PeriodSettings,
    ProjectionSettings,
    SolverSettings,
    WorkingCapitalSettings,
)
from .validation import ValidationMixin, validate_unique_keys, validate_year_in_range

__all__ = [
    "AdminSettings",
    "CapexCategoryEnum",
    "CurriculumTypeEnum",
    "InflationIndexEnum",
    "Model",
    "PeriodEnum",
    "PeriodSettings",
    "ProjectionSettings",
    "RentModelEnum",
    "SolverSettings",
    "SolverStatusEnum",
    "StaffCostBaseModeEnum",
    "ValidationMixin",
    "WorkingCapitalSettings",
    "ZakatMethodEnum",
    "get_period",
    "period_map",
    "validate_unique_keys",
    "validate_year_in_range",
    "years_in_period",
]
