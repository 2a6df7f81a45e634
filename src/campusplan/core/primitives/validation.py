# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Reusable validation utilities for common patterns across the codebase.

This module provides standardized validators for:
- Conditional requirements (if flag is set then field is required)
- Year ordering and range membership
- Uniqueness of keyed records (one record per year or per track)
"""

from __future__ import annotations

from typing import Any, Callable, Hashable, Iterable, Optional, TypeVar

T = TypeVar("T")


class ValidationMixin:
    """
    Mixin class providing reusable validation methods for Pydantic models.

    Inherit alongside `Model` and call from `model_validator` hooks.
    """

    @classmethod
    def validate_conditional_requirement(
        cls,
        instance: Any,
        condition_field: str,
        condition_value: Any,
        required_field: str,
        error_message: Optional[str] = None,
    ) -> Any:
        """
        Validate that a field is set when another field has a given value.

        Args:
            instance: Model instance (mode="after")
            condition_field: Field whose value triggers the requirement
            condition_value: Value that triggers the requirement
            required_field: Field that becomes required
            error_message: Custom error message

        Returns:
            The instance

        Raises:
            ValueError: If the required field is missing when the condition is met
        """
        if (
            getattr(instance, condition_field) == condition_value
            and getattr(instance, required_field) is None
        ):
            msg = error_message or (
                f"{required_field} is required when {condition_field} is {condition_value}"
            )
            raise ValueError(msg)
        return instance

    @classmethod
    def validate_year_ordering(
        cls,
        instance: Any,
        start_field: str,
        end_field: str,
        error_message: Optional[str] = None,
    ) -> Any:
        """
        Validate that an end year is not before a start year.

        Raises:
            ValueError: If end year < start year
        """
        start_year = getattr(instance, start_field)
        end_year = getattr(instance, end_field)
        if start_year is not None and end_year is not None and end_year < start_year:
            msg = error_message or f"{end_field} must not be before {start_field}"
            raise ValueError(msg)
        return instance


def validate_unique_keys(
    items: Iterable[T], key: Callable[[T], Hashable], label: str
) -> None:
    """
    Ensure no two items share a key.

    Raises:
        ValueError: Naming the first duplicated key
    """
    seen = set()
    for item in items:
        item_key = key(item)
        if item_key in seen:
            raise ValueError(f"Duplicate {label}: {item_key}")
        seen.add(item_key)


def validate_year_in_range(year: int, start_year: int, end_year: int, label: str) -> None:
    """Raise ValueError if `year` lies outside `[start_year, end_year]`."""
    if year < start_year or year > end_year:
        raise ValueError(f"{label} {year} is outside {start_year}-{end_year}")
