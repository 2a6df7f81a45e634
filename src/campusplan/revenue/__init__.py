# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Enrollment and Revenue

Curriculum tracks, CPI-driven tuition growth, and transition-year
allocation of students and revenue.
"""

from .curriculum import CurriculumTrack
from .transition import (
    TransitionYearRecord,
    allocate_enrollment,
    cap_enrollment,
    project_transition_revenue,
    transition_rent,
    transition_staff_cost,
)
from .tuition import (
    RevenueBreakdown,
    TrackRevenue,
    calculate_tuition,
    project_dynamic_revenue,
    track_revenue,
)

__all__ = [
    "CurriculumTrack",
    "RevenueBreakdown",
    "TrackRevenue",
    "TransitionYearRecord",
    "allocate_enrollment",
    "calculate_tuition",
    "cap_enrollment",
    "project_dynamic_revenue",
    "project_transition_revenue",
    "track_revenue",
    "transition_rent",
    "transition_staff_cost",
]
