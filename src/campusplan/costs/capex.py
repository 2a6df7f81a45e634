# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Capital expenditure scheduling.

Recurring rules expand into concrete yearly items at `starting_year`,
`starting_year + cycle_years`, ... up to the rule's end year (or the horizon
end). Amounts compound with the rule's inflation index over the years elapsed
since the starting year. Manually entered items carry no rule id and are
never touched when rules are regenerated.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence

from pydantic import Field, model_validator

from ..core.primitives import (
    AdminSettings,
    CapexCategoryEnum,
    InflationIndexEnum,
    Model,
    ValidationMixin,
    validate_unique_keys,
    validate_year_in_range,
)
from ..utils.decimal import growth_factor
from ..utils.types import NonNegativeDecimal, PositiveDecimal, Year

logger = logging.getLogger(__name__)


class CapexRule(ValidationMixin, Model):
    """A recurring capital expenditure (e.g. replace IT equipment every 4 years)."""

    rule_id: str = Field(..., min_length=1)
    category: CapexCategoryEnum
    cycle_years: int = Field(..., ge=1, le=50)
    base_cost: PositiveDecimal
    starting_year: Year
    inflation_index: Optional[InflationIndexEnum] = None
    end_year: Optional[Year] = None

    @model_validator(mode="after")
    def check_years(self) -> "CapexRule":
        return self.validate_year_ordering(
            self, "starting_year", "end_year", "end_year must not be before starting_year"
        )

    def occurrence_years(self, horizon_end: int) -> List[int]:
        last = min(self.end_year, horizon_end) if self.end_year is not None else horizon_end
        return list(range(self.starting_year, last + 1, self.cycle_years))


class CapexItem(Model):
    """A concrete capital expenditure in one year; manual when `rule_id` is None."""

    year: Year
    category: CapexCategoryEnum
    amount: NonNegativeDecimal
    rule_id: Optional[str] = None
    description: Optional[str] = None

    @property
    def is_manual(self) -> bool:
        return self.rule_id is None


def _sort_items(items: Iterable[CapexItem]) -> List[CapexItem]:
    return sorted(items, key=lambda item: (item.year, item.category.value))


def generate_capex_items(
    rules: Sequence[CapexRule],
    start_year: int,
    end_year: int,
    settings: Optional[AdminSettings] = None,
) -> List[CapexItem]:
    """
    Expand rules into items within `[start_year, end_year]`.

    Args:
        rules: Capex rules
        start_year: First year of the horizon
        end_year: Last year of the horizon
        settings: Source of inflation index rates (defaults used when omitted)

    Returns:
        Items sorted by year then category

    Raises:
        ValueError: Duplicate rule ids, a starting year outside the horizon,
            or an inflation index without a configured rate
    """
    settings = settings or AdminSettings()
    validate_unique_keys(rules, lambda rule: rule.rule_id, "capex rule id")

    items = []
    for rule in rules:
        validate_year_in_range(
            rule.starting_year, start_year, end_year, f"Capex rule '{rule.rule_id}' starting year"
        )
        rate = settings.inflation_rate(rule.inflation_index)
        for year in rule.occurrence_years(end_year):
            items.append(
                CapexItem(
                    year=year,
                    category=rule.category,
                    amount=rule.base_cost * growth_factor(rate, year - rule.starting_year),
                    rule_id=rule.rule_id,
                )
            )
    logger.debug(f"Generated {len(items)} capex items from {len(rules)} rules")
    return _sort_items(items)


def regenerate_capex_items(
    existing: Sequence[CapexItem],
    rules: Sequence[CapexRule],
    start_year: int,
    end_year: int,
    settings: Optional[AdminSettings] = None,
) -> List[CapexItem]:
    """
    Replace previously rule-generated items with a fresh expansion.

    Manual items are kept verbatim.
    """
    manual = [item for item in existing if item.is_manual]
    return _sort_items(manual + generate_capex_items(rules, start_year, end_year, settings))


def capex_by_year(items: Iterable[CapexItem]) -> Dict[int, Decimal]:
    """Total capex per year."""
    totals: Dict[int, Decimal] = defaultdict(lambda: Decimal(0))
    for item in items:
        totals[item.year] += item.amount
    return dict(totals)
