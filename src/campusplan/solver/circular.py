# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Circular reference solver for interest, zakat and cash balances.

Interest income and expense are charged on the average of the opening and
closing balances, while the closing balances depend on the net result that
includes that interest. Each year is closed by fixed-point iteration:

1. Start from a trial closing cash and debt balance.
2. Compute depreciation, interest, zakat and the net result.
3. Derive working capital, operating and investing cash flows.
4. Balance against the minimum cash floor (repay debt from surplus cash,
   borrow to cover a shortfall) to get new closing balances.
5. Stop once the new balances are within `tolerance` of the trial values,
   otherwise use them as the next trial.

A year that reaches `max_iterations` keeps its last estimate and is flagged
as not converged; a `ConvergenceWarning` is issued for it. Years are solved
in order, each seeded with the previous year's closing balances.
"""

from __future__ import annotations

import logging
import warnings
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

import pandas as pd
from pydantic import computed_field

from ..core.primitives import (
    AdminSettings,
    Model,
    SolverSettings,
    SolverStatusEnum,
    ZakatMethodEnum,
)
from ..exceptions import ConvergenceWarning
from ..utils.decimal import ZERO, decimal_context, safe_divide, to_decimal
from ..utils.types import DecimalValue, NonNegativeDecimal, NonNegativeInt

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = Decimal(365)
TWO = Decimal(2)


class SolverYearInput(Model):
    """Operating figures of a year, already final before the circular step."""

    year: int
    revenue: NonNegativeDecimal
    staff_cost: NonNegativeDecimal
    ebitda: DecimalValue
    capex: NonNegativeDecimal = Decimal(0)


class BalanceState(Model):
    """Closing balances of a year; the opening balances of the next."""

    cash: DecimalValue = Decimal(0)
    debt: NonNegativeDecimal = Decimal(0)
    fixed_assets: NonNegativeDecimal = Decimal(0)
    accounts_receivable: NonNegativeDecimal = Decimal(0)
    accounts_payable: NonNegativeDecimal = Decimal(0)
    deferred_revenue: NonNegativeDecimal = Decimal(0)
    accrued_expenses: NonNegativeDecimal = Decimal(0)
    retained_earnings: DecimalValue = Decimal(0)

    @classmethod
    def opening(cls, settings: SolverSettings) -> "BalanceState":
        return cls(
            cash=settings.starting_cash,
            debt=settings.opening_debt,
            fixed_assets=settings.fixed_assets_opening,
        )


class SolverYearResult(Model):
    """Income statement tail, cash flow and balance sheet of a solved year."""

    year: int
    status: SolverStatusEnum
    iterations: NonNegativeInt
    depreciation: DecimalValue
    interest_income: DecimalValue
    interest_expense: DecimalValue
    net_result_before_zakat: DecimalValue
    zakat: DecimalValue
    net_result: DecimalValue
    working_capital_change: DecimalValue
    operating_cash_flow: DecimalValue
    investing_cash_flow: DecimalValue
    financing_cash_flow: DecimalValue
    closing: BalanceState
    equity: DecimalValue
    warning: Optional[str] = None

    @computed_field
    @property
    def converged(self) -> bool:
        return self.status == SolverStatusEnum.CONVERGED

    @computed_field
    @property
    def net_cash_flow(self) -> Decimal:
        return self.operating_cash_flow + self.investing_cash_flow + self.financing_cash_flow

    @property
    def total_assets(self) -> Decimal:
        return self.closing.cash + self.closing.accounts_receivable + self.closing.fixed_assets

    @property
    def total_liabilities(self) -> Decimal:
        return (
            self.closing.debt
            + self.closing.accounts_payable
            + self.closing.deferred_revenue
            + self.closing.accrued_expenses
        )


class SolverResult(Model):
    """All solved years of a horizon, in year order."""

    years: Tuple[SolverYearResult, ...]

    @property
    def non_converged_years(self) -> List[int]:
        return [year.year for year in self.years if not year.converged]

    @property
    def converged(self) -> bool:
        return not self.non_converged_years

    def to_dataframe(self) -> pd.DataFrame:
        """One row per year; Decimal values are kept as objects."""
        rows = []
        for year in self.years:
            row = year.model_dump(exclude={"closing", "warning"})
            row.update({f"closing_{key}": value for key, value in year.closing.model_dump().items()})
            rows.append(row)
        return pd.DataFrame(rows).set_index("year")


class CircularSolver:
    """
    Closes each projection year by fixed-point iteration.

    Rates come from `AdminSettings`; convergence limits, depreciation and
    opening balances from `SolverSettings`. The solver holds no state between
    calls.
    """

    def __init__(
        self,
        admin_settings: Optional[AdminSettings] = None,
        settings: Optional[SolverSettings] = None,
    ):
        self.admin = admin_settings or AdminSettings()
        self.settings = settings or SolverSettings()

    def solve(
        self,
        inputs: Sequence[SolverYearInput],
        opening: Optional[BalanceState] = None,
    ) -> SolverResult:
        """
        Solve consecutive years in order.

        The first year's trial balances are zero; each later year starts from
        the previous year's closing balances.
        """
        state = opening or BalanceState.opening(self.settings)
        results = []
        trial_cash, trial_debt = ZERO, ZERO
        for year_input in sorted(inputs, key=lambda item: item.year):
            result = self.solve_year(year_input, state, trial_cash, trial_debt)
            results.append(result)
            state = result.closing
            trial_cash, trial_debt = state.cash, state.debt
        return SolverResult(years=tuple(results))

    def solve_year(
        self,
        year_input: SolverYearInput,
        opening: BalanceState,
        trial_cash=None,
        trial_debt=None,
    ) -> SolverYearResult:
        """
        Iterate one year to convergence.

        Args:
            year_input: Revenue, staff cost, EBITDA and capex of the year
            opening: Opening balances (previous year's closing)
            trial_cash: Initial closing cash estimate (defaults to zero)
            trial_debt: Initial closing debt estimate (defaults to zero)

        Returns:
            SolverYearResult with status CONVERGED or MAX_ITERATIONS_EXCEEDED
        """
        trial_cash = to_decimal(trial_cash)
        trial_debt = to_decimal(trial_debt)
        tolerance = self.settings.tolerance
        if self.settings.max_iterations < 1:
            raise ValueError(
                f"max_iterations must be at least 1 (got {self.settings.max_iterations})"
            )
        status = SolverStatusEnum.INIT
        result = None
        difference = None

        with decimal_context():
            for iteration in range(1, self.settings.max_iterations + 1):
                status = SolverStatusEnum.ITERATING
                result = self._close_year(year_input, opening, trial_cash, trial_debt, iteration)
                difference = max(
                    abs(result.closing.cash - trial_cash),
                    abs(result.closing.debt - trial_debt),
                )
                logger.debug(
                    f"Solver {year_input.year} iteration {iteration}: "
                    f"cash={result.closing.cash} debt={result.closing.debt} diff={difference}"
                )
                if difference < tolerance:
                    status = SolverStatusEnum.CONVERGED
                    break
                trial_cash, trial_debt = result.closing.cash, result.closing.debt
            else:
                status = SolverStatusEnum.MAX_ITERATIONS_EXCEEDED

        if status == SolverStatusEnum.MAX_ITERATIONS_EXCEEDED:
            message = (
                f"Circular solve for {year_input.year} did not converge within "
                f"{self.settings.max_iterations} iterations (last difference {difference})"
            )
            logger.warning(message)
            warnings.warn(message, ConvergenceWarning, stacklevel=2)
            return result.model_copy(update={"status": status, "warning": message})
        return result.model_copy(update={"status": status})

    def _close_year(
        self,
        year_input: SolverYearInput,
        opening: BalanceState,
        trial_cash: Decimal,
        trial_debt: Decimal,
        iteration: int,
    ) -> SolverYearResult:
        admin = self.admin
        wc = admin.working_capital

        depreciation = opening.fixed_assets * self.settings.depreciation_rate
        interest_income = max(ZERO, (opening.cash + trial_cash) / TWO) * admin.deposit_interest_rate
        interest_expense = ((opening.debt + trial_debt) / TWO) * admin.debt_interest_rate
        net_before_zakat = year_input.ebitda - depreciation - interest_expense + interest_income

        receivables = safe_divide(year_input.revenue, DAYS_PER_YEAR) * wc.collection_days
        payables = safe_divide(year_input.staff_cost, DAYS_PER_YEAR) * wc.payment_days
        deferred = year_input.revenue * wc.deferral_factor
        accrued = safe_divide(year_input.staff_cost, DAYS_PER_YEAR) * wc.accrual_days

        zakat = self._zakat(net_before_zakat, trial_cash, receivables)
        net_result = net_before_zakat - zakat

        working_capital_change = (
            (receivables - opening.accounts_receivable)
            - (payables - opening.accounts_payable)
            - (deferred - opening.deferred_revenue)
            - (accrued - opening.accrued_expenses)
        )
        operating = net_result + depreciation - working_capital_change
        investing = -year_input.capex
        cash, debt, financing = self._balance(opening, opening.cash + operating + investing)

        closing = BalanceState(
            cash=cash,
            debt=debt,
            fixed_assets=max(ZERO, opening.fixed_assets + year_input.capex - depreciation),
            accounts_receivable=receivables,
            accounts_payable=payables,
            deferred_revenue=deferred,
            accrued_expenses=accrued,
            retained_earnings=opening.retained_earnings + net_result,
        )
        return SolverYearResult(
            year=year_input.year,
            status=SolverStatusEnum.ITERATING,
            iterations=iteration,
            depreciation=depreciation,
            interest_income=interest_income,
            interest_expense=interest_expense,
            net_result_before_zakat=net_before_zakat,
            zakat=zakat,
            net_result=net_result,
            working_capital_change=working_capital_change,
            operating_cash_flow=operating,
            investing_cash_flow=investing,
            financing_cash_flow=financing,
            closing=closing,
            equity=self.settings.opening_equity + closing.retained_earnings,
        )

    def _zakat(self, net_before_zakat: Decimal, cash: Decimal, receivables: Decimal) -> Decimal:
        admin = self.admin
        if admin.zakat_method == ZakatMethodEnum.ASSET_BASED:
            zakatable = max(ZERO, cash) + receivables
            if zakatable < admin.nisab_threshold:
                return ZERO
            return zakatable * admin.zakat_rate
        return max(ZERO, net_before_zakat) * admin.zakat_rate

    def _balance(
        self, opening: BalanceState, theoretical_cash: Decimal
    ) -> Tuple[Decimal, Decimal, Decimal]:
        """
        Hold cash at or above the minimum balance.

        Surplus above the floor repays debt; a shortfall is borrowed.

        Returns:
            (closing cash, closing debt, financing cash flow)
        """
        floor = self.admin.minimum_cash_balance
        if theoretical_cash < floor:
            borrowing = floor - theoretical_cash
            return floor, opening.debt + borrowing, borrowing
        repayment = min(opening.debt, theoretical_cash - floor)
        return theoretical_cash - repayment, opening.debt - repayment, -repayment
