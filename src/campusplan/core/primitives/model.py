# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Base Pydantic model shared by every input and result structure.

    Instances are immutable snapshots: a projection run never mutates its
    inputs, and results are never changed after the assembler creates them.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,
        extra="forbid",  # unknown keys from callers fail loudly
        validate_default=True,
    )
