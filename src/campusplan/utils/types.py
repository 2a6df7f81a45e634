# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from decimal import Decimal
from typing import Annotated

from pydantic import BeforeValidator, Field, PlainSerializer

from .decimal import to_decimal

# decimal fields accept numbers and numeric strings; serialized as strings
DecimalValue = Annotated[
    Decimal,
    BeforeValidator(to_decimal),
    PlainSerializer(lambda v: str(v), return_type=str, when_used="json"),
]
NonNegativeDecimal = Annotated[DecimalValue, Field(ge=0)]
PositiveDecimal = Annotated[DecimalValue, Field(gt=0)]
DecimalBetween0And1 = Annotated[DecimalValue, Field(ge=0, le=1)]
GrowthPercent = Annotated[DecimalValue, Field(ge=-50, le=200)]

# constrained ints
NonNegativeInt = Annotated[int, Field(strict=True, ge=0)]
PositiveInt = Annotated[int, Field(strict=True, ge=1)]
Year = Annotated[int, Field(strict=True, ge=1900, le=2200)]
CpiFrequency = Annotated[int, Field(strict=True, ge=1, le=3)]
