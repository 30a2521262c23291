# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# errors.py
# -----------------------------------------------------------------------------
# Purpose:
#   Exception types raised by the bank counter simulator.
#
# Usage:
#   from bank_sim.errors import ConfigurationError
# -----------------------------------------------------------------------------

from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when a configuration or distribution parameter is structurally invalid."""
