# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Rent plan and rent model dispatch.

A projection uses exactly one active rent model. `RentPlan` carries the
validated parameters of that model as a tagged union; `compute_rent` is the
stateless entry point that accepts either a model instance or raw parameters.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Annotated, Any, Dict, Iterable, Mapping, Optional, Type, Union

from pydantic import Field

from ..core.primitives import Model, RentModelEnum
from ..utils.decimal import HUNDRED, ZERO, safe_divide_or_zero, to_decimal
from ..utils.types import NonNegativeDecimal
from .base import RentModelBase
from .fixed_escalation import FixedEscalationRent
from .partner_model import PartnerModelRent
from .revenue_share import RevenueShareRent

logger = logging.getLogger(__name__)

AnyRentModel = Annotated[
    Union[FixedEscalationRent, RevenueShareRent, PartnerModelRent],
    Field(discriminator="kind"),
]

RENT_MODELS: Dict[RentModelEnum, Type[RentModelBase]] = {
    RentModelEnum.FIXED_ESCALATION: FixedEscalationRent,
    RentModelEnum.REVENUE_SHARE: RevenueShareRent,
    RentModelEnum.PARTNER_MODEL: PartnerModelRent,
}


class RentPlan(Model):
    """
    The active rent model of a projection.

    Attributes:
        parameters: Validated parameters of the chosen model
        transition_rent: Administrative rent for transition years that have
            neither a growth override nor a rent on their transition record
    """

    parameters: AnyRentModel
    transition_rent: Optional[NonNegativeDecimal] = None

    @property
    def model(self) -> RentModelEnum:
        return self.parameters.rent_model

    @property
    def requires_revenue(self) -> bool:
        return self.parameters.requires_revenue

    def compute(self, year: int, revenue: Optional[Decimal] = None) -> Decimal:
        return self.parameters.compute(year, revenue)


def build_rent_model(
    model: Union[RentModelEnum, str], parameters: Union[RentModelBase, Mapping[str, Any]]
) -> RentModelBase:
    """
    Resolve a rent model instance from a model tag and its parameters.

    Raises:
        ValueError: Unknown model, mismatched instance, or invalid parameters
            (pydantic's ValidationError is a ValueError)
    """
    model = RentModelEnum(model)
    model_cls = RENT_MODELS[model]
    if isinstance(parameters, RentModelBase):
        if not isinstance(parameters, model_cls):
            raise ValueError(
                f"Parameters of type {type(parameters).__name__} do not match rent model {model.value}"
            )
        return parameters
    return model_cls.model_validate(dict(parameters))


def compute_rent(
    model: Union[RentModelEnum, str],
    parameters: Union[RentModelBase, Mapping[str, Any]],
    year: int,
    revenue: Optional[Decimal] = None,
) -> Decimal:
    """
    Compute one year's rent with the given model.

    Args:
        model: Rent model tag
        parameters: Model instance or raw parameter mapping
        year: Calendar year
        revenue: Revenue of the year (required for REVENUE_SHARE)

    Returns:
        Rent at full precision
    """
    return build_rent_model(model, parameters).compute(year, revenue)


def rent_schedule(
    plan: RentPlan,
    years: Iterable[int],
    revenue_by_year: Optional[Mapping[int, Decimal]] = None,
) -> Dict[int, Decimal]:
    """Rent for each year, using `revenue_by_year` for revenue-linked models."""
    revenue_by_year = revenue_by_year or {}
    schedule = {}
    for year in years:
        schedule[year] = plan.compute(year, revenue_by_year.get(year))
    logger.debug(f"Rent schedule ({plan.model.value}) computed for {len(schedule)} years")
    return schedule


def rent_load(rent, revenue) -> Decimal:
    """Rent as a percentage of revenue; zero when there is no revenue."""
    revenue = to_decimal(revenue)
    if revenue <= ZERO:
        return ZERO
    return safe_divide_or_zero(to_decimal(rent), revenue) * HUNDRED
