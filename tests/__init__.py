# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
CampusPlan test suite.

Unit tests mirror the package layout under tests/unit.
"""
