# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from .circular import (
    BalanceState,
    CircularSolver,
    SolverResult,
    SolverYearInput,
    SolverYearResult,
)

__all__ = [
    "BalanceState",
    "CircularSolver",
    "SolverResult",
    "SolverYearInput",
    "SolverYearResult",
]
