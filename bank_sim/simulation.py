# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# simulation.py
# -----------------------------------------------------------------------------
# Purpose:
#   Simulate a single replication: generate arrivals, run each counter line
#   independently, merge the logs, compute metrics, and return the result.
#
# Design notes:
#   - The two lines share no state; they run one after the other here and
#     only their logs are merged (sorted by time, stable).
#   - A result is frozen once built, customers included (they are sealed
#     after metrics are computed); snapshots are pure reads of it.
#
# Usage:
#   from bank_sim.simulation import run_simulation
#   result = run_simulation(cfg)
#   result.snapshot(120.0)
# -----------------------------------------------------------------------------

from __future__ import annotations
import logging
import random
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

from .arrivals import arrival_events, generate_customers
from .config import SimulationConfig
from .entities import Customer, ServiceType, SimulationEvent
from .metrics import Metrics, compute_metrics
from .queues import ServiceLine
from .snapshot import Snapshot, snapshot_at

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationResult:
    """Outcome of one replication.

    Customer records are sealed; writing any of their attributes raises
    dataclasses.FrozenInstanceError.
    """
    customers: Tuple[Customer, ...]
    events: Tuple[SimulationEvent, ...]
    config: SimulationConfig
    metrics: Metrics

    def snapshot(self, t: float) -> Snapshot:
        return snapshot_at(self, t)

    def line_customers(self, service_type: ServiceType) -> Tuple[Customer, ...]:
        return tuple(c for c in self.customers if c.service_type is service_type)

    def summary(self) -> Dict[str, Any]:
        out = self.metrics.as_dict()
        out["customers"] = len(self.customers)
        out["config"] = self.config.as_dict()
        return out


def run_simulation(cfg: SimulationConfig, customers: Optional[Sequence[Customer]] = None,
                   rng: Optional[random.Random] = None) -> SimulationResult:
    """
    Run one replication over the configured horizon.

    Parameters
    cfg: SimulationConfig
        Validated configuration.
    customers: sequence of Customer, optional
        Pre-built, unassigned population to serve instead of sampling one.
        These records are filled in place and sealed.
    rng: random.Random, optional
        Uniform source for sampling. Defaults to Random(cfg.seed) when a seed
        is configured, otherwise to system randomness.

    Returns
    SimulationResult
    """
    if rng is None and cfg.seed is not None:
        rng = random.Random(cfg.seed)
    if customers is None:
        arena = generate_customers(cfg, rng)
    else:
        arena = list(customers)

    log = arrival_events(arena)
    for service_type in ServiceType:
        indices = [i for i, c in enumerate(arena) if c.service_type is service_type]
        line = ServiceLine(service_type, cfg.line(service_type).count)
        log.extend(line.run(arena, indices))
    log.sort(key=lambda ev: ev.time)

    metrics = compute_metrics(arena, cfg)
    for customer in arena:
        customer.seal()
    logger.debug(
        "Run finished: %d customers, throughput %d, avg wait %.2f min",
        len(arena), metrics.throughput, metrics.avg_wait_time,
    )
    return SimulationResult(
        customers=tuple(arena),
        events=tuple(log),
        config=cfg,
        metrics=metrics,
    )
