# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# distributions.py
# -----------------------------------------------------------------------------
# Purpose:
#   Variate generators: exponential inter-arrival gaps and triangular
#   service durations, both drawn by inverse-CDF from a uniform stream.
#
# Design notes:
#   - Every sampler takes an optional `rng` (anything with .random()); the
#     module-level `random` is used when none is given, so unseeded runs draw
#     from system randomness.
#   - Invalid parameters raise ConfigurationError; no NaN is ever returned.
#
# Usage:
#   from bank_sim.distributions import exponential, triangular
# -----------------------------------------------------------------------------

from __future__ import annotations
import math
import random

from .errors import ConfigurationError


def check_exponential(rate: float):
    if not rate > 0:
        raise ConfigurationError(f"Exponential rate must be positive, got {rate!r}.")


def check_triangular(minimum: float, maximum: float, mode: float):
    if not minimum < maximum:
        raise ConfigurationError(
            f"Triangular distribution requires min < max, got min={minimum!r}, max={maximum!r}."
        )
    if not minimum <= mode <= maximum:
        raise ConfigurationError(
            f"Triangular mode {mode!r} must lie within [{minimum!r}, {maximum!r}]."
        )


def exponential(rate: float, rng=None) -> float:
    """Draw an exponential variate with the given rate (events per unit time).

    Uses -ln(1 - u) / rate with u in [0, 1), so the log argument is never 0.
    """
    check_exponential(rate)
    u = (rng or random).random()
    return -math.log(1.0 - u) / rate


def triangular(minimum: float, maximum: float, mode: float, rng=None) -> float:
    """Draw a triangular variate on [minimum, maximum] peaking at mode.

    The inverse CDF is split at F = (mode - min) / (max - min).
    """
    check_triangular(minimum, maximum, mode)
    u = (rng or random).random()
    span = maximum - minimum
    split = (mode - minimum) / span
    if u < split:
        return minimum + math.sqrt(u * span * (mode - minimum))
    return maximum - math.sqrt((1.0 - u) * span * (maximum - mode))
