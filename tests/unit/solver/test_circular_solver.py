# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""Tests for the circular interest/cash solver."""

from decimal import Decimal

import pandas as pd
import pytest

from campusplan.core.primitives import (
    AdminSettings,
    SolverSettings,
    SolverStatusEnum,
    ZakatMethodEnum,
)
from campusplan.exceptions import ConvergenceWarning
from campusplan.solver import BalanceState, CircularSolver, SolverYearInput


def assert_close(actual, expected, tolerance=Decimal("0.000001")):
    assert abs(actual - expected) < tolerance


def create_input(year: int = 2028, **overrides) -> SolverYearInput:
    data = dict(
        year=year,
        revenue=Decimal(50_000_000),
        staff_cost=Decimal(20_000_000),
        ebitda=Decimal(10_000_000),
        capex=Decimal(0),
    )
    data.update(overrides)
    return SolverYearInput(**data)


class TestSolverConvergence:
    """Test the fixed-point iteration."""

    def test_converges(self):
        solver = CircularSolver()
        result = solver.solve_year(create_input(), BalanceState(cash=5_000_000))
        assert result.status == SolverStatusEnum.CONVERGED
        assert result.converged
        assert result.warning is None
        assert 1 <= result.iterations < 100

    def test_rerun_from_converged_output_is_idempotent(self):
        solver = CircularSolver()
        opening = BalanceState(cash=5_000_000, debt=2_000_000)
        first = solver.solve_year(create_input(), opening)
        second = solver.solve_year(
            create_input(), opening, first.closing.cash, first.closing.debt
        )
        assert second.iterations == 1
        assert second.converged
        assert abs(second.closing.cash - first.closing.cash) < Decimal("0.01")
        assert abs(second.closing.debt - first.closing.debt) < Decimal("0.01")

    def test_iteration_cap_returns_last_estimate(self):
        solver = CircularSolver(settings=SolverSettings(max_iterations=1))
        with pytest.warns(ConvergenceWarning, match="did not converge"):
            result = solver.solve_year(create_input(), BalanceState(cash=5_000_000))
        assert result.status == SolverStatusEnum.MAX_ITERATIONS_EXCEEDED
        assert not result.converged
        assert result.iterations == 1
        assert "did not converge" in result.warning
        assert result.closing.cash > Decimal(0)

    def test_rejects_zero_iteration_cap(self):
        settings = SolverSettings.model_construct(max_iterations=0)
        with pytest.raises(ValueError, match="at least 1"):
            CircularSolver(settings=settings).solve_year(create_input(), BalanceState())

    def test_interest_on_average_balances(self):
        admin = AdminSettings(deposit_interest_rate="0.02", zakat_rate=0)
        solver = CircularSolver(admin_settings=admin)
        result = solver.solve_year(create_input(), BalanceState(cash=5_000_000))
        average_cash = (Decimal(5_000_000) + result.closing.cash) / 2
        assert abs(result.interest_income - average_cash * Decimal("0.02")) < Decimal("0.01")


class TestSolverBalancing:
    """Test minimum cash, borrowing and repayment."""

    def test_shortfall_is_borrowed(self):
        solver = CircularSolver()
        result = solver.solve_year(
            create_input(ebitda=Decimal(-20_000_000)), BalanceState(cash=5_000_000)
        )
        assert result.closing.cash == Decimal(1_000_000)
        assert result.closing.debt > Decimal(0)
        assert result.financing_cash_flow == result.closing.debt
        assert result.interest_expense > Decimal(0)

    def test_surplus_repays_debt(self):
        solver = CircularSolver()
        result = solver.solve_year(
            create_input(ebitda=Decimal(20_000_000)), BalanceState(cash=5_000_000, debt=3_000_000)
        )
        assert result.closing.debt == Decimal(0)
        assert result.financing_cash_flow == Decimal(-3_000_000)

    def test_partial_repayment_keeps_minimum_cash(self):
        admin = AdminSettings(working_capital={"collection_days": 0, "payment_days": 0})
        solver = CircularSolver(admin_settings=admin)
        result = solver.solve_year(
            create_input(ebitda=Decimal(0)), BalanceState(cash=3_000_000, debt=5_000_000)
        )
        assert result.closing.cash == Decimal(1_000_000)
        assert Decimal(0) < result.closing.debt < Decimal(5_000_000)

    def test_net_cash_flow_reconciles_cash(self):
        solver = CircularSolver()
        opening = BalanceState(cash=5_000_000)
        result = solver.solve_year(create_input(capex=Decimal(2_000_000)), opening)
        assert_close(result.net_cash_flow, result.closing.cash - opening.cash)
        assert result.investing_cash_flow == Decimal(-2_000_000)


class TestSolverStatements:
    """Test depreciation, zakat, working capital and equity."""

    def test_depreciation_and_fixed_assets(self):
        solver = CircularSolver()
        result = solver.solve_year(
            create_input(capex=Decimal(2_000_000)),
            BalanceState(cash=5_000_000, fixed_assets=10_000_000),
        )
        assert result.depreciation == Decimal(1_000_000)
        assert result.closing.fixed_assets == Decimal(11_000_000)

    def test_income_zakat_is_zero_on_loss(self):
        solver = CircularSolver()
        result = solver.solve_year(
            create_input(ebitda=Decimal(-5_000_000)), BalanceState(cash=50_000_000)
        )
        assert result.zakat == Decimal(0)
        assert result.net_result == result.net_result_before_zakat

    def test_income_zakat_rate(self):
        solver = CircularSolver()
        result = solver.solve_year(create_input(), BalanceState(cash=5_000_000))
        assert_close(result.zakat, result.net_result_before_zakat * Decimal("0.025"))

    def test_asset_zakat_below_nisab(self):
        admin = AdminSettings(zakat_method=ZakatMethodEnum.ASSET_BASED, nisab_threshold=10**12)
        result = CircularSolver(admin).solve_year(create_input(), BalanceState(cash=5_000_000))
        assert result.zakat == Decimal(0)

    def test_asset_zakat_above_nisab(self):
        admin = AdminSettings(zakat_method=ZakatMethodEnum.ASSET_BASED)
        result = CircularSolver(admin).solve_year(create_input(), BalanceState(cash=5_000_000))
        assert result.zakat > Decimal(0)

    def test_working_capital_balances(self):
        solver = CircularSolver()
        result = solver.solve_year(
            create_input(revenue=Decimal(36_500_000), staff_cost=Decimal(3_650_000)),
            BalanceState(cash=5_000_000),
        )
        assert result.closing.accounts_receivable == Decimal(3_000_000)
        assert result.closing.accounts_payable == Decimal(450_000)
        assert result.working_capital_change == Decimal(2_550_000)

    def test_equity_accumulates_retained_earnings(self):
        solver = CircularSolver(settings=SolverSettings(opening_equity=1_000_000))
        result = solver.solve_year(create_input(), BalanceState(cash=5_000_000))
        assert result.closing.retained_earnings == result.net_result
        assert_close(result.equity, Decimal(1_000_000) + result.net_result)
        assert result.total_assets > result.total_liabilities


class TestSolverHorizon:
    """Test solving consecutive years."""

    def test_years_are_chained(self):
        solver = CircularSolver()
        inputs = [create_input(year) for year in (2030, 2028, 2029)]
        result = solver.solve(inputs)
        assert [year.year for year in result.years] == [2028, 2029, 2030]
        assert result.converged
        assert result.non_converged_years == []
        first, second = result.years[0], result.years[1]
        assert_close(second.net_cash_flow, second.closing.cash - first.closing.cash)
        assert_close(
            second.closing.retained_earnings,
            first.closing.retained_earnings + second.net_result,
        )

    def test_first_year_opens_with_settings(self):
        solver = CircularSolver(settings=SolverSettings(starting_cash=7_000_000))
        result = solver.solve([create_input(2028)])
        first = result.years[0]
        assert_close(first.net_cash_flow, first.closing.cash - Decimal(7_000_000))

    def test_dataframe_export(self):
        result = CircularSolver().solve([create_input(2028), create_input(2029)])
        df = result.to_dataframe()
        assert isinstance(df, pd.DataFrame)
        assert list(df.index) == [2028, 2029]
        assert "closing_cash" in df.columns
        assert "net_cash_flow" in df.columns
