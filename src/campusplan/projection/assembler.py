# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Full projection assembler.

Walks the horizon year by year. For each year it:

1. Determines the period (HISTORICAL / TRANSITION / DYNAMIC) from the cutover years.
2. Computes revenue, staff cost and rent with the period's sub-calculators
   (revenue first, because revenue-share rent and opex depend on it).
3. Computes opex from the year's revenue and takes capex from the schedule.
4. Closes interest, zakat and cash balances with the circular solver.
5. Assembles an immutable `ProjectionYearResult`.

Request-level problems (no rent plan, missing required tracks, missing
historical actuals) are reported before any year is computed. Exceptions
raised by a sub-calculator are re-raised with the year and component
attached; a year that fails to converge only carries a warning.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from decimal import Decimal
from typing import Dict, Iterator, List, NamedTuple, Optional

from ..core.primitives import PeriodEnum, RentModelEnum, get_period
from ..costs import (
    StaffCostProjector,
    calculate_opex,
    capex_by_year,
    regenerate_capex_items,
)
from ..exceptions import (
    ProjectionArithmeticError,
    ProjectionError,
    ProjectionValidationError,
)
from ..rent import rent_load
from ..revenue import (
    RevenueBreakdown,
    project_dynamic_revenue,
    project_transition_revenue,
    transition_rent,
    transition_staff_cost,
)
from ..solver import BalanceState, CircularSolver, SolverYearInput, SolverYearResult
from ..utils.decimal import ZERO, decimal_context, to_decimal
from .inputs import ProjectionRequest
from .metrics import ProjectionMetrics
from .results import ProjectionResult, ProjectionYearResult

logger = logging.getLogger(__name__)


class _OperatingYear(NamedTuple):
    """Pre-solver figures of a year."""

    period: PeriodEnum
    students: int
    revenue: Decimal
    staff_cost: Decimal
    rent: Decimal
    opex: Decimal
    capex: Decimal


@contextmanager
def component_context(component: str, year: Optional[int] = None) -> Iterator[None]:
    """
    Re-raise sub-calculator failures as projection errors with context.

    Errors that already are projection errors pass through unchanged.
    """
    try:
        yield
    except ProjectionError:
        raise
    except ArithmeticError as exc:
        raise ProjectionArithmeticError(str(exc), year=year, component=component) from exc
    except (ValueError, TypeError, KeyError) as exc:
        message = exc.args[0] if isinstance(exc, KeyError) and exc.args else str(exc)
        raise ProjectionValidationError(str(message), year=year, component=component) from exc


class ProjectionAssembler:
    """
    Orchestrates one projection run.

    The assembler holds only the immutable request and values derived from
    it; independent runs share nothing.
    """

    def __init__(self, request: ProjectionRequest):
        self.request = request
        self.settings = request.settings
        self.periods = request.settings.periods
        self.admin = request.admin_settings

    def run(self) -> ProjectionResult:
        """
        Compute every year of the horizon and the summary.

        Raises:
            ProjectionValidationError: Missing or malformed input
            ProjectionArithmeticError: Division by zero or invalid operation
        """
        request = self.request
        logger.info(
            f"Starting projection {request.start_year}-{request.end_year} "
            f"({len(request.years)} years, rent model "
            f"{request.rent_plan.model.value if request.rent_plan else 'none'})"
        )
        with decimal_context():
            self.validate()
            staff = self._staff_projector()
            deflated_staff = self._deflated_staff_costs(staff)
            capex = self._capex_schedule()

            solver = CircularSolver(self.admin, self.settings.solver)
            state = BalanceState.opening(self.settings.solver)
            trial_cash, trial_debt = ZERO, ZERO

            # Summary metrics use the unrounded figures; output rows are rounded.
            exact_years: List[ProjectionYearResult] = []
            for year in request.years:
                operating = self._operating_year(year, staff, deflated_staff, capex)
                ebitda = ProjectionMetrics.calculate_ebitda(
                    operating.revenue, operating.staff_cost, operating.rent, operating.opex
                )
                with component_context("solver", year):
                    solved = solver.solve_year(
                        SolverYearInput(
                            year=year,
                            revenue=operating.revenue,
                            staff_cost=operating.staff_cost,
                            ebitda=ebitda,
                            capex=operating.capex,
                        ),
                        state,
                        trial_cash,
                        trial_debt,
                    )
                state = solved.closing
                trial_cash, trial_debt = state.cash, state.debt
                exact_years.append(self._year_result(year, operating, ebitda, solved))

            with component_context("summary"):
                summary = ProjectionMetrics.summarize(
                    exact_years,
                    discount_rate=self.admin.discount_rate,
                    npv_base_year=self.settings.effective_npv_base_year,
                    npv_start_year=max(self.periods.dynamic_start_year, request.start_year),
                    npv_end_year=min(self.periods.horizon_end_year, request.end_year),
                )
            years = [year.rounded() for year in exact_years]

        logger.info(
            f"Projection complete: {len(years)} years, "
            f"{len(summary.non_converged_years)} not converged"
        )
        return ProjectionResult(years=tuple(years), summary=summary)

    def validate(self) -> None:
        """
        Whole-request checks that depend on the period settings.

        Raises:
            ProjectionValidationError: On the first failed check
        """
        request = self.request
        if request.rent_plan is None:
            raise ProjectionValidationError("A rent plan is required", component="request")

        missing = [t.value for t in self.settings.required_tracks if t not in request.track_types]
        if not request.tracks or missing:
            raise ProjectionValidationError(
                f"Missing required curriculum tracks: {', '.join(missing) or 'none provided'}",
                component="request",
            )

        for year in request.years:
            if get_period(year, self.periods) == PeriodEnum.HISTORICAL and request.actuals(year) is None:
                raise ProjectionValidationError(
                    "Historical actuals are required for every historical year",
                    year=year,
                    component="request",
                )

        transition_years = set(self.periods.transition_years)
        for record in request.transition_records:
            if record.year not in transition_years:
                raise ProjectionValidationError(
                    f"Transition record year must be one of {sorted(transition_years)}",
                    year=record.year,
                    component="request",
                )

        if request.rent_plan.model != RentModelEnum.REVENUE_SHARE:
            start_year = request.rent_plan.parameters.start_year
            first_dynamic = max(self.periods.dynamic_start_year, request.start_year)
            if first_dynamic <= request.end_year and start_year > first_dynamic:
                raise ProjectionValidationError(
                    f"Rent start year {start_year} is after the first dynamic year {first_dynamic}",
                    component="rent",
                )

    def _staff_projector(self) -> StaffCostProjector:
        request = self.request
        base_year = request.staff_cost_base_year
        with component_context("staff_cost"):
            if request.staff_cost_base is not None:
                base = request.staff_cost_base
            else:
                students = sum(track.students(base_year) for track in request.tracks)
                base = request.staffing.staff_cost_base(students)
                logger.debug(f"Staff cost base {base} derived from {students} students in {base_year}")
            return StaffCostProjector(
                staff_cost_base=base,
                cpi_rate=self.admin.cpi_rate,
                base_year=base_year,
                frequency=request.staff_cost_cpi_frequency,
            )

    def _deflated_staff_costs(self, staff: StaffCostProjector) -> Dict[int, Decimal]:
        """Backward-deflated staff cost for transition years without a record."""
        periods = self.periods
        transition_years = [year for year in periods.transition_years if year in self.request.years]
        if not transition_years:
            return {}
        with component_context("staff_cost"):
            anchor_year = periods.dynamic_start_year
            if staff.base_year > anchor_year:
                raise ValueError(
                    f"Staff cost base year {staff.base_year} is after anchor year {anchor_year}"
                )
            return staff.backward_from(anchor_year, min(transition_years))

    def _capex_schedule(self) -> Dict[int, Decimal]:
        request = self.request
        with component_context("capex"):
            items = regenerate_capex_items(
                request.capex_items,
                request.capex_rules,
                request.start_year,
                request.end_year,
                self.admin,
            )
            return capex_by_year(items)

    def _historical_baseline(self, field: str) -> Optional[Decimal]:
        record = self.request.actuals(self.periods.last_historical_year)
        return getattr(record, field) if record is not None else None

    def _operating_year(
        self,
        year: int,
        staff: StaffCostProjector,
        deflated_staff: Dict[int, Decimal],
        capex: Dict[int, Decimal],
    ) -> _OperatingYear:
        period = get_period(year, self.periods)
        logger.debug(f"Year {year}: period {period.value}")
        if period == PeriodEnum.HISTORICAL:
            return self._historical_year(year)
        if period == PeriodEnum.TRANSITION:
            return self._transition_year(year, deflated_staff, capex)
        return self._dynamic_year(year, staff, capex)

    def _historical_year(self, year: int) -> _OperatingYear:
        actuals = self.request.actuals(year)
        return _OperatingYear(
            period=PeriodEnum.HISTORICAL,
            students=0,
            revenue=actuals.revenue,
            staff_cost=actuals.staff_cost,
            rent=actuals.rent,
            opex=actuals.opex,
            capex=actuals.capex,
        )

    def _transition_year(
        self, year: int, deflated_staff: Dict[int, Decimal], capex: Dict[int, Decimal]
    ) -> _OperatingYear:
        request = self.request
        record = request.transition_record(year)

        with component_context("revenue", year):
            revenue = project_transition_revenue(
                request.tracks,
                year,
                self.admin.cpi_rate,
                self.periods.dynamic_start_year,
                record,
                self.settings.transition_capacity,
                request.other_revenue_by_year.get(year),
            )
        with component_context("staff_cost", year):
            staff_cost = transition_staff_cost(record, self._historical_baseline("staff_cost"))
            if staff_cost is None:
                staff_cost = deflated_staff[year]
        with component_context("rent", year):
            rent = transition_rent(
                record, self._historical_baseline("rent"), request.rent_plan.transition_rent
            )
        return self._with_costs(year, revenue, staff_cost, rent, capex)

    def _dynamic_year(
        self, year: int, staff: StaffCostProjector, capex: Dict[int, Decimal]
    ) -> _OperatingYear:
        request = self.request
        with component_context("revenue", year):
            revenue = project_dynamic_revenue(
                request.tracks,
                year,
                self.admin.cpi_rate,
                self.periods.dynamic_start_year,
                request.other_revenue_by_year.get(year),
            )
        with component_context("staff_cost", year):
            staff_cost = staff.forward(year)
        with component_context("rent", year):
            rent = request.rent_plan.compute(year, revenue.total_revenue)
        return self._with_costs(year, revenue, staff_cost, rent, capex)

    def _with_costs(
        self,
        year: int,
        revenue: RevenueBreakdown,
        staff_cost: Decimal,
        rent: Decimal,
        capex: Dict[int, Decimal],
    ) -> _OperatingYear:
        with component_context("opex", year):
            opex = calculate_opex(
                self.request.opex_accounts,
                year,
                revenue.total_revenue,
                self.admin.cpi_rate,
                self.periods.dynamic_start_year,
            )
        return _OperatingYear(
            period=revenue.period,
            students=revenue.total_students,
            revenue=revenue.total_revenue,
            staff_cost=to_decimal(staff_cost),
            rent=to_decimal(rent),
            opex=opex.total,
            capex=capex.get(year, ZERO),
        )

    def _year_result(
        self, year: int, operating: _OperatingYear, ebitda: Decimal, solved: SolverYearResult
    ) -> ProjectionYearResult:
        return ProjectionYearResult(
            year=year,
            period=operating.period,
            students=operating.students,
            revenue=operating.revenue,
            staff_cost=operating.staff_cost,
            rent=operating.rent,
            opex=operating.opex,
            ebitda=ebitda,
            ebitda_margin=ProjectionMetrics.ebitda_margin(ebitda, operating.revenue),
            capex=operating.capex,
            depreciation=solved.depreciation,
            interest_income=solved.interest_income,
            interest_expense=solved.interest_expense,
            taxes=solved.zakat,
            net_result=solved.net_result,
            cash_flow=solved.net_cash_flow,
            rent_load=rent_load(operating.rent, operating.revenue),
            cash_balance=solved.closing.cash,
            debt_balance=solved.closing.debt,
            converged=solved.converged,
            solver_iterations=solved.iterations,
            warnings=(solved.warning,) if solved.warning else (),
        )
