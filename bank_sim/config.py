# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# config.py
# -----------------------------------------------------------------------------
# Purpose:
#   Immutable simulation configuration: horizon, arrival process, class mix,
#   and the server pool + triangular service time of each counter line.
#
# Design notes:
#   - YAML documents are nested dicts (sim / arrivals / lines); from_dict
#     flattens them into frozen dataclasses so a run can never mutate them.
#   - All structural checks run in __post_init__, i.e. before any customer
#     is generated.
#
# Usage:
#   cfg = load_config("config/baseline.yaml")
#   cfg = SimulationConfig.from_dict(yaml.safe_load(text))
# -----------------------------------------------------------------------------

from __future__ import annotations
import logging
import math
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import yaml

from .distributions import check_triangular
from .entities import ServiceType
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_CONFIG_PATH = os.path.join(ROOT, "config", "baseline.yaml")


@dataclass(frozen=True)
class LineConfig:
    """Server pool size and triangular service time (minutes) for one line."""
    count: int
    service_min: float
    service_mode: float
    service_max: float

    def __post_init__(self):
        if isinstance(self.count, bool) or not isinstance(self.count, int):
            raise ConfigurationError(f"Server count must be an integer, got {self.count!r}.")
        if self.count < 0:
            raise ConfigurationError(f"Server count cannot be negative, got {self.count}.")
        if not self.service_min > 0:
            raise ConfigurationError(f"service_min must be positive, got {self.service_min!r}.")
        check_triangular(self.service_min, self.service_max, self.service_mode)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], defaults: "LineConfig") -> "LineConfig":
        return cls(
            count=data.get("count", defaults.count),
            service_min=float(data.get("service_min", defaults.service_min)),
            service_mode=float(data.get("service_mode", defaults.service_mode)),
            service_max=float(data.get("service_max", defaults.service_max)),
        )


DEFAULT_HIGH_COUNTER = LineConfig(count=3, service_min=2.0, service_mode=4.0, service_max=8.0)
DEFAULT_LOW_COUNTER = LineConfig(count=2, service_min=10.0, service_mode=15.0, service_max=25.0)


@dataclass(frozen=True)
class SimulationConfig:
    duration_minutes: float = 480.0
    arrival_rate_per_hour: float = 60.0
    percent_reserved: float = 20.0
    percent_high_counter: float = 60.0
    high_counter: LineConfig = field(default_factory=lambda: DEFAULT_HIGH_COUNTER)
    low_counter: LineConfig = field(default_factory=lambda: DEFAULT_LOW_COUNTER)
    queue_sample_minutes: float = 1.0
    seed: Optional[int] = None

    def __post_init__(self):
        if not (self.duration_minutes > 0 and math.isfinite(self.duration_minutes)):
            raise ConfigurationError(
                f"duration_minutes must be positive and finite, got {self.duration_minutes!r}."
            )
        if not (self.arrival_rate_per_hour >= 0 and math.isfinite(self.arrival_rate_per_hour)):
            raise ConfigurationError(
                f"arrival_rate_per_hour must be finite and non-negative, got {self.arrival_rate_per_hour!r}."
            )
        for name in ("percent_reserved", "percent_high_counter"):
            value = getattr(self, name)
            if not 0.0 <= value <= 100.0:
                raise ConfigurationError(f"{name} must be within [0, 100], got {value!r}.")
        if not (self.queue_sample_minutes > 0 and math.isfinite(self.queue_sample_minutes)):
            raise ConfigurationError(
                f"queue_sample_minutes must be positive and finite, got {self.queue_sample_minutes!r}."
            )
        # A line that can receive traffic needs at least one server.
        for service_type in ServiceType:
            if self.line(service_type).count < 1 and self.traffic_share(service_type) > 0:
                raise ConfigurationError(
                    f"{service_type.value} has no servers but receives "
                    f"{self.traffic_share(service_type):.0%} of arrivals."
                )

    def line(self, service_type: ServiceType) -> LineConfig:
        if service_type is ServiceType.HIGH_COUNTER:
            return self.high_counter
        return self.low_counter

    def traffic_share(self, service_type: ServiceType) -> float:
        """Fraction of arrivals routed to a line (0 when there are no arrivals)."""
        if self.arrival_rate_per_hour == 0:
            return 0.0
        if service_type is ServiceType.HIGH_COUNTER:
            return self.percent_high_counter / 100.0
        return 1.0 - self.percent_high_counter / 100.0

    @property
    def arrival_rate_per_minute(self) -> float:
        return self.arrival_rate_per_hour / 60.0

    @classmethod
    def from_dict(cls, cfg: Dict[str, Any]) -> "SimulationConfig":
        """Build a config from the nested YAML layout; missing keys keep defaults."""
        sim = cfg.get("sim", {}) or {}
        arrivals = cfg.get("arrivals", {}) or {}
        lines = cfg.get("lines", {}) or {}
        defaults = cls.__dataclass_fields__
        return cls(
            duration_minutes=float(sim.get("duration_minutes", defaults["duration_minutes"].default)),
            arrival_rate_per_hour=float(arrivals.get("rate_per_hour", defaults["arrival_rate_per_hour"].default)),
            percent_reserved=float(arrivals.get("percent_reserved", defaults["percent_reserved"].default)),
            percent_high_counter=float(arrivals.get("percent_high_counter", defaults["percent_high_counter"].default)),
            high_counter=LineConfig.from_dict(lines.get("high_counter", {}) or {}, DEFAULT_HIGH_COUNTER),
            low_counter=LineConfig.from_dict(lines.get("low_counter", {}) or {}, DEFAULT_LOW_COUNTER),
            queue_sample_minutes=float(sim.get("queue_sample_minutes", defaults["queue_sample_minutes"].default)),
            seed=sim.get("seed"),
        )

    def as_dict(self) -> Dict[str, Any]:
        """Inverse of from_dict; used to echo the configuration in summaries."""
        def _line(lc: LineConfig) -> Dict[str, Any]:
            return {
                "count": lc.count,
                "service_min": lc.service_min,
                "service_mode": lc.service_mode,
                "service_max": lc.service_max,
            }
        return {
            "sim": {
                "duration_minutes": self.duration_minutes,
                "queue_sample_minutes": self.queue_sample_minutes,
                "seed": self.seed,
            },
            "arrivals": {
                "rate_per_hour": self.arrival_rate_per_hour,
                "percent_reserved": self.percent_reserved,
                "percent_high_counter": self.percent_high_counter,
            },
            "lines": {
                "high_counter": _line(self.high_counter),
                "low_counter": _line(self.low_counter),
            },
        }


def load_config(path: str = DEFAULT_CONFIG_PATH) -> SimulationConfig:
    with open(path, "r") as f:
        raw = yaml.safe_load(f) or {}
    logger.debug("Loaded configuration from %s", path)
    return SimulationConfig.from_dict(raw)
