# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
CampusPlan - Financial Projection Engine for School Relocation Planning

Builds 30-year financial projections for a school operator across three
calculation regimes: HISTORICAL years backed by recorded actuals, TRANSITION
years driven by administrative overrides, and DYNAMIC years driven by
curriculum, capacity and growth assumptions.

Key Entry Points:
- campusplan.projection.run_projection() - Structured success/failure response
- campusplan.projection.project() - Raising variant returning ProjectionResult
- campusplan.rent.* - Fixed escalation, revenue share and partner rent models
- campusplan.solver.* - Circular interest/cash solver

Example Usage:
    ```python
    from campusplan.projection import ProjectionRequest, run_projection

    response = run_projection(request)
    if response.success:
        print(response.result.summary.npv_rent)
    ```
"""

import importlib
import logging

# Libraries leave handler configuration to the application.
logging.getLogger(__name__).addHandler(logging.NullHandler())


# Public API surface (lazy-loaded on first attribute access)
__all__ = [  # noqa: F822 - lazy loading
    "core",
    "costs",
    "exceptions",
    "projection",
    "rent",
    "revenue",
    "solver",
    "utils",
]


_LAZY_MODULES = {
    "core": "campusplan.core",
    "costs": "campusplan.costs",
    "exceptions": "campusplan.exceptions",
    "projection": "campusplan.projection",
    "rent": "campusplan.rent",
    "revenue": "campusplan.revenue",
    "solver": "campusplan.solver",
    "utils": "campusplan.utils",
}


def __getattr__(name: str):
    module_path = _LAZY_MODULES.get(name)
    if module_path is None:
        raise AttributeError(f"module 'campusplan' has no attribute '{name}'")
    module = importlib.import_module(module_path)
    globals()[name] = module
    return module
