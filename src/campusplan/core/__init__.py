# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""Core primitives shared across the projection engine."""

from .primitives import *  # noqa: F401,F403
from .primitives import __all__  # noqa: F401
