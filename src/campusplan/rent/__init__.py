# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Rent Models

Three interchangeable strategies for a year's facility rent:
fixed escalation, revenue share and the partner (yield on investment) model.
"""

from .base import RentModelBase
from .fixed_escalation import FixedEscalationRent, calculate_fixed_escalation_rent
from .partner_model import PartnerModelRent, calculate_partner_rent
from .plan import (
    RENT_MODELS,
    AnyRentModel,
    RentPlan,
    build_rent_model,
    compute_rent,
    rent_load,
    rent_schedule,
)
from .revenue_share import RevenueShareRent, calculate_revenue_share_rent

__all__ = [
    "AnyRentModel",
    "FixedEscalationRent",
    "PartnerModelRent",
    "RENT_MODELS",
    "RentModelBase",
    "RentPlan",
    "RevenueShareRent",
    "build_rent_model",
    "calculate_fixed_escalation_rent",
    "calculate_partner_rent",
    "calculate_revenue_share_rent",
    "compute_rent",
    "rent_load",
    "rent_schedule",
]
