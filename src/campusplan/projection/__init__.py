# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Projection

Request model, year-by-year assembler, metrics and result structures.
"""

from .api import project, run_projection
from .assembler import ProjectionAssembler, component_context
from .inputs import HistoricalActualsRecord, ProjectionRequest
from .metrics import ProjectionMetrics
from .results import (
    ProjectionResponse,
    ProjectionResult,
    ProjectionSummary,
    ProjectionYearResult,
)

__all__ = [
    "HistoricalActualsRecord",
    "ProjectionAssembler",
    "ProjectionMetrics",
    "ProjectionRequest",
    "ProjectionResponse",
    "ProjectionResult",
    "ProjectionSummary",
    "ProjectionYearResult",
    "component_context",
    "project",
    "run_projection",
]
