# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""Tests for staff cost, opex and the capex scheduler."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from campusplan.core.primitives import AdminSettings, CapexCategoryEnum, InflationIndexEnum
from campusplan.costs import (
    CapexItem,
    CapexRule,
    OpexSubAccount,
    StaffCostProjector,
    StaffingRatios,
    calculate_opex,
    calculate_staff_cost,
    capex_by_year,
    deflate_backward,
    generate_capex_items,
    regenerate_capex_items,
)
from campusplan.utils import safe_divide


class TestStaffCost:
    """Test forward staff cost projection."""

    def test_forward_compounding(self):
        assert calculate_staff_cost(30_000_000, "0.03", 2028, 2028) == Decimal(30_000_000)
        assert calculate_staff_cost(30_000_000, "0.03", 2029, 2028) == Decimal(30_900_000)

    def test_frequency(self):
        assert calculate_staff_cost(30_000_000, "0.03", 2029, 2028, 2) == Decimal(30_000_000)
        assert calculate_staff_cost(30_000_000, "0.03", 2030, 2028, 2) == Decimal(30_900_000)

    def test_year_before_base_is_rejected(self):
        with pytest.raises(ValueError, match="deflate backward"):
            calculate_staff_cost(30_000_000, "0.03", 2027, 2028)

    def test_negative_inputs(self):
        with pytest.raises(ValueError):
            calculate_staff_cost(-1, "0.03", 2029, 2028)
        with pytest.raises(ValueError):
            calculate_staff_cost(1, "-0.03", 2029, 2028)


class TestBackwardDeflation:
    """Test year-by-year deflation from the anchor."""

    def test_each_year_derives_from_the_next(self):
        schedule = deflate_backward(1_000_000, 2028, 2025, "0.10")
        assert sorted(schedule) == [2025, 2026, 2027]
        assert schedule[2027] == safe_divide(Decimal(1_000_000), Decimal("1.10"))
        assert schedule[2026] == safe_divide(schedule[2027], Decimal("1.10"))
        assert schedule[2025] == safe_divide(schedule[2026], Decimal("1.10"))

    def test_strictly_increasing_toward_anchor(self):
        schedule = deflate_backward(30_000_000, 2028, 2025, "0.03")
        assert schedule[2025] < schedule[2026] < schedule[2027] < Decimal(30_000_000)

    def test_zero_rate_is_flat(self):
        schedule = deflate_backward(500, 2028, 2026, 0)
        assert set(schedule.values()) == {Decimal(500)}

    def test_projector_anchors_on_forward_value(self):
        projector = StaffCostProjector(
            staff_cost_base=30_000_000, cpi_rate="0.03", base_year=2023
        )
        schedule = projector.backward_from(2028, 2025)
        assert schedule[2027] == safe_divide(projector.forward(2028), Decimal("1.03"))


class TestStaffingRatios:
    """Test staff cost base derived from curriculum staffing."""

    def test_cost_from_ratios(self):
        ratios = StaffingRatios(teacher_ratio="0.1", teacher_monthly_salary=10000)
        assert ratios.staff_cost_base(100) == Decimal(1_200_000)

    def test_percentage_ratios_are_normalized(self):
        ratios = StaffingRatios(
            teacher_ratio=10,
            teacher_monthly_salary=10000,
            non_teacher_ratio=5,
            non_teacher_monthly_salary=6000,
        )
        # 10 teachers * 10,000 * 12 + 5 others * 6,000 * 12
        assert ratios.staff_cost_base(100) == Decimal(1_560_000)


class TestOpex:
    """Test operating expense sub-accounts."""

    def test_fixed_and_variable_accounts(self):
        accounts = [
            OpexSubAccount(name="Utilities", is_fixed=True, fixed_amount=2_000_000),
            OpexSubAccount(name="Marketing", is_fixed=False, percent_of_revenue=5),
        ]
        result = calculate_opex(accounts, 2028, Decimal(40_000_000))
        assert result.fixed_total == Decimal(2_000_000)
        assert result.variable_total == Decimal(2_000_000)
        assert result.total == Decimal(4_000_000)
        assert result.by_account() == {
            "Utilities": Decimal(2_000_000),
            "Marketing": Decimal(2_000_000),
        }

    def test_cpi_escalated_fixed_amount(self):
        account = OpexSubAccount(
            name="Insurance", is_fixed=True, fixed_amount=1_000_000, escalate_with_cpi=True
        )
        assert account.amount(2030, 0, Decimal("0.03"), 2028) == Decimal(1_060_900)
        assert account.amount(2026, 0, Decimal("0.03"), 2028) == Decimal(1_000_000)

    def test_no_accounts_is_zero(self):
        assert calculate_opex([], 2028, Decimal(1)).total == Decimal(0)

    def test_account_definition(self):
        with pytest.raises(ValidationError, match="no fixed_amount"):
            OpexSubAccount(name="Utilities", is_fixed=True)
        with pytest.raises(ValidationError, match="no percent_of_revenue"):
            OpexSubAccount(name="Marketing", is_fixed=False)
        with pytest.raises(ValidationError):
            OpexSubAccount(name="Marketing", is_fixed=False, percent_of_revenue=120)

    def test_negative_revenue(self):
        with pytest.raises(ValueError, match="negative"):
            calculate_opex([], 2028, Decimal(-1))


class TestCapexScheduler:
    """Test capex rule expansion and regeneration."""

    def test_occurrences_with_cpi(self):
        rule = CapexRule(
            rule_id="it",
            category=CapexCategoryEnum.TECHNOLOGY,
            cycle_years=4,
            base_cost=1_000_000,
            starting_year=2028,
            inflation_index=InflationIndexEnum.CPI,
        )
        items = generate_capex_items([rule], 2023, 2040, AdminSettings(cpi_rate="0.03"))
        assert [item.year for item in items] == [2028, 2032, 2036, 2040]
        assert items[0].amount == Decimal(1_000_000)
        assert items[1].amount == Decimal("1125508.81")
        assert all(item.rule_id == "it" for item in items)

    def test_without_index_is_flat_and_respects_end_year(self):
        rule = CapexRule(
            rule_id="bus",
            category=CapexCategoryEnum.VEHICLES,
            cycle_years=4,
            base_cost=300_000,
            starting_year=2028,
            end_year=2035,
        )
        items = generate_capex_items([rule], 2023, 2052)
        assert [(item.year, item.amount) for item in items] == [
            (2028, Decimal(300_000)),
            (2032, Decimal(300_000)),
        ]

    def test_named_index_rate(self):
        rule = CapexRule(
            rule_id="roof",
            category=CapexCategoryEnum.BUILDING,
            cycle_years=10,
            base_cost=1_000_000,
            starting_year=2028,
            inflation_index=InflationIndexEnum.CONSTRUCTION,
        )
        settings = AdminSettings(inflation_rates={InflationIndexEnum.CONSTRUCTION: "0.05"})
        items = generate_capex_items([rule], 2023, 2030, settings)
        assert [item.year for item in items] == [2028]
        with pytest.raises(KeyError, match="CONSTRUCTION"):
            generate_capex_items([rule], 2023, 2030, AdminSettings())

    def test_rule_validation(self):
        with pytest.raises(ValidationError):
            CapexRule(rule_id="x", category="OTHER", cycle_years=0, base_cost=1, starting_year=2028)
        with pytest.raises(ValidationError):
            CapexRule(rule_id="x", category="OTHER", cycle_years=51, base_cost=1, starting_year=2028)
        with pytest.raises(ValidationError):
            CapexRule(rule_id="x", category="OTHER", cycle_years=5, base_cost=0, starting_year=2028)
        with pytest.raises(ValidationError, match="end_year"):
            CapexRule(
                rule_id="x",
                category="OTHER",
                cycle_years=5,
                base_cost=1,
                starting_year=2030,
                end_year=2029,
            )

    def test_starting_year_outside_horizon(self):
        rule = CapexRule(
            rule_id="x", category="OTHER", cycle_years=5, base_cost=1, starting_year=2060
        )
        with pytest.raises(ValueError, match="outside"):
            generate_capex_items([rule], 2023, 2052)

    def test_duplicate_rule_ids(self):
        rule = CapexRule(rule_id="x", category="OTHER", cycle_years=5, base_cost=1, starting_year=2028)
        with pytest.raises(ValueError, match="Duplicate"):
            generate_capex_items([rule, rule], 2023, 2052)

    def test_regeneration_keeps_manual_items(self):
        manual = CapexItem(year=2030, category=CapexCategoryEnum.FURNITURE, amount=500_000)
        stale = CapexItem(
            year=2029, category=CapexCategoryEnum.TECHNOLOGY, amount=1, rule_id="it"
        )
        rule = CapexRule(
            rule_id="it",
            category=CapexCategoryEnum.TECHNOLOGY,
            cycle_years=2,
            base_cost=100_000,
            starting_year=2028,
        )
        items = regenerate_capex_items([manual, stale], [rule], 2028, 2030)
        assert stale not in items
        assert manual in items
        assert [(item.year, item.category) for item in items] == [
            (2028, CapexCategoryEnum.TECHNOLOGY),
            (2030, CapexCategoryEnum.FURNITURE),
            (2030, CapexCategoryEnum.TECHNOLOGY),
        ]

    def test_capex_by_year(self):
        items = [
            CapexItem(year=2030, category="FURNITURE", amount=500_000),
            CapexItem(year=2030, category="TECHNOLOGY", amount=100_000, rule_id="it"),
            CapexItem(year=2031, category="OTHER", amount=1),
        ]
        assert capex_by_year(items) == {2030: Decimal(600_000), 2031: Decimal(1)}
