# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Error taxonomy for projection runs.

Fatal conditions (bad input, arithmetic failure) are exceptions carrying the
year and component where they surfaced. Slow convergence is not fatal: it is
reported as a `ConvergenceWarning` and attached to the affected year.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class ProjectionError(Exception):
    """Base class for fatal projection failures."""

    error_type = "ProjectionError"

    def __init__(
        self,
        message: str,
        *,
        year: Optional[int] = None,
        component: Optional[str] = None,
    ):
        self.message = message
        self.year = year
        self.component = component
        super().__init__(self._format())

    def _format(self) -> str:
        context = []
        if self.component:
            context.append(f"component={self.component}")
        if self.year is not None:
            context.append(f"year={self.year}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"

    def to_dict(self) -> Dict[str, Any]:
        """Structured form used in failure responses."""
        return {
            "error_type": self.error_type,
            "message": self.message,
            "year": self.year,
            "component": self.component,
        }


class ProjectionValidationError(ProjectionError, ValueError):
    """Malformed or missing input; aborts the whole run."""

    error_type = "ValidationError"


class ProjectionArithmeticError(ProjectionError, ArithmeticError):
    """Division by zero or an invalid decimal operation; aborts the whole run."""

    error_type = "ArithmeticError"


class ConvergenceWarning(UserWarning):
    """A year's circular solve hit the iteration cap without converging."""
