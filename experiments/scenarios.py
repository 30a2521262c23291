"""
experiments/scenarios.py

Holds scenario definitions (decision variables) to sweep during experiments.
Add staffing levels, reservation uptake, and load levels here.
"""

from __future__ import annotations

BASELINE = {
    "name": "baseline",
    "overrides": {},  # override config keys here per scenario
}

EXTRA_HIGH_COUNTER = {
    "name": "extra_high_counter",
    "overrides": {
        "lines": {
            "high_counter": {"count": 4},
        },
    },
}

RESERVED_HEAVY = {
    "name": "reserved_heavy",
    "overrides": {
        "arrivals": {
            "percent_reserved": 60,
        },
    },
}

PEAK_LOAD = {
    "name": "peak_load",
    "overrides": {
        "arrivals": {
            "rate_per_hour": 80,
        },
        "lines": {
            "high_counter": {"count": 4},
            "low_counter": {"count": 3},
        },
    },
}

SCENARIOS = [BASELINE, EXTRA_HIGH_COUNTER, RESERVED_HEAVY, PEAK_LOAD]
