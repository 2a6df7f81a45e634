# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from enum import Enum


class PeriodEnum(str, Enum):
    """
    Calculation regime of a projection year.

    - HISTORICAL: realized actuals are used verbatim
    - TRANSITION: administrative interim overrides apply
    - DYNAMIC: curriculum, capacity and growth assumptions drive the figures
    """

    HISTORICAL = "HISTORICAL"
    TRANSITION = "TRANSITION"
    DYNAMIC = "DYNAMIC"


class CurriculumTypeEnum(str, Enum):
    """Curriculum tracks offered by the school."""

    TRACK_A = "TRACK_A"  # national (French) programme
    TRACK_B = "TRACK_B"  # international (IB) programme


class RentModelEnum(str, Enum):
    """Rent calculation strategies."""

    FIXED_ESCALATION = "FIXED_ESCALATION"
    REVENUE_SHARE = "REVENUE_SHARE"
    PARTNER_MODEL = "PARTNER_MODEL"


class CapexCategoryEnum(str, Enum):
    """Capital expenditure categories."""

    BUILDING = "BUILDING"
    EQUIPMENT = "EQUIPMENT"
    FURNITURE = "FURNITURE"
    OTHER = "OTHER"
    TECHNOLOGY = "TECHNOLOGY"
    VEHICLES = "VEHICLES"


class InflationIndexEnum(str, Enum):
    """Named indices a capex rule may compound with."""

    CPI = "CPI"
    CONSTRUCTION = "CONSTRUCTION"
    TECHNOLOGY = "TECHNOLOGY"


class SolverStatusEnum(str, Enum):
    """States of the circular reference solver."""

    INIT = "INIT"
    ITERATING = "ITERATING"
    CONVERGED = "CONVERGED"
    MAX_ITERATIONS_EXCEEDED = "MAX_ITERATIONS_EXCEEDED"


class ZakatMethodEnum(str, Enum):
    """How the annual zakat (tax) charge is assessed."""

    INCOME_BASED = "INCOME_BASED"  # rate applied to positive net result
    ASSET_BASED = "ASSET_BASED"  # rate applied to zakatable assets above nisab


class StaffCostBaseModeEnum(str, Enum):
    """Which year the staff cost base is expressed in."""

    RELOCATION = "RELOCATION"  # base is the first dynamic year (2028)
    HISTORICAL_BASELINE = "HISTORICAL_BASELINE"  # base is the first historical year
