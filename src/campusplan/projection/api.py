# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Public API for projection runs.

`project()` returns a `ProjectionResult` and raises on fatal errors;
`run_projection()` never raises for bad input or arithmetic failures and
returns a `ProjectionResponse` that is either a success or a structured
failure.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Union

from pydantic import ValidationError

from ..exceptions import ProjectionError, ProjectionValidationError
from .assembler import ProjectionAssembler
from .inputs import ProjectionRequest
from .results import ProjectionResponse, ProjectionResult

logger = logging.getLogger(__name__)


def _coerce_request(request: Union[ProjectionRequest, Mapping[str, Any]]) -> ProjectionRequest:
    if isinstance(request, ProjectionRequest):
        return request
    try:
        return ProjectionRequest.model_validate(request)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "request"
        raise ProjectionValidationError(
            f"Invalid request at '{location}': {first['msg']}", component="request"
        ) from exc


def project(request: Union[ProjectionRequest, Mapping[str, Any]]) -> ProjectionResult:
    """
    Run a full projection.

    Args:
        request: A `ProjectionRequest` or a plain mapping validated into one

    Returns:
        ProjectionResult with one row per year and the summary

    Raises:
        ProjectionValidationError: Missing or malformed input
        ProjectionArithmeticError: Division by zero or invalid decimal operation

    Example:
        ```python
        result = project(request)
        df = result.to_dataframe()
        print(result.summary.npv_rent)
        ```
    """
    return ProjectionAssembler(_coerce_request(request)).run()


def run_projection(request: Union[ProjectionRequest, Mapping[str, Any]]) -> ProjectionResponse:
    """
    Run a projection and report the outcome as data.

    Fatal errors become `ProjectionResponse(success=False, error=...)` with
    the error type, message, year and component. Non-converged years still
    produce a successful response; their warnings are collected on it.
    """
    try:
        result = project(request)
    except ProjectionError as exc:
        logger.error(f"Projection failed: {exc}", exc_info=True)
        return ProjectionResponse.failure(exc.to_dict())
    return ProjectionResponse.ok(result)
