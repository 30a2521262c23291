# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# arrivals.py
# -----------------------------------------------------------------------------
# Purpose:
#   Generate the whole customer population up front: Poisson arrivals over
#   the horizon, each with an independently drawn class, task line, and
#   triangular service duration.
#
# Design notes:
#   - "Generate then schedule": the engine only ever sees this finished
#     list, already ordered by arrival time.
#   - Ids start at 1 and increase with arrival order.
#
# Usage:
#   customers = generate_customers(cfg, rng)
#   log = arrival_events(customers)
# -----------------------------------------------------------------------------

from __future__ import annotations
import logging
import random
from typing import List, Sequence

from .config import SimulationConfig
from .distributions import exponential, triangular
from .entities import Customer, CustomerType, EventKind, ServiceType, SimulationEvent

logger = logging.getLogger(__name__)


def _draw_customer_type(cfg: SimulationConfig, rng) -> CustomerType:
    if rng.random() * 100.0 < cfg.percent_reserved:
        return CustomerType.RESERVED
    return CustomerType.WALK_IN


def _draw_service_type(cfg: SimulationConfig, rng) -> ServiceType:
    if rng.random() * 100.0 < cfg.percent_high_counter:
        return ServiceType.HIGH_COUNTER
    return ServiceType.LOW_COUNTER


def generate_customers(cfg: SimulationConfig, rng=None) -> List[Customer]:
    """
    Accumulate exponential inter-arrival gaps from t=0 and emit one customer
    per arrival that falls within the horizon.

    Parameters
    cfg: SimulationConfig
        Validated configuration (arrival rate per hour, class mix, lines).
    rng: random.Random, optional
        Uniform source; defaults to the module-level `random`.

    Returns
    list[Customer]
        Customers ordered by arrival time, all still unassigned.
    """
    rng = rng or random
    customers: List[Customer] = []
    if cfg.arrival_rate_per_hour == 0:
        return customers
    rate = cfg.arrival_rate_per_minute
    t = 0.0
    while True:
        t += exponential(rate, rng)
        if t > cfg.duration_minutes:
            break
        customer_type = _draw_customer_type(cfg, rng)
        service_type = _draw_service_type(cfg, rng)
        line = cfg.line(service_type)
        duration = triangular(line.service_min, line.service_max, line.service_mode, rng)
        customers.append(Customer(
            cid=len(customers) + 1,
            customer_type=customer_type,
            service_type=service_type,
            arrival_time=t,
            service_time=duration,
        ))
    logger.debug("Generated %d arrivals over %.1f minutes", len(customers), cfg.duration_minutes)
    return customers


def arrival_events(customers: Sequence[Customer]) -> List[SimulationEvent]:
    """One ARRIVAL log entry per customer, in arrival order."""
    return [
        SimulationEvent(c.arrival_time, EventKind.ARRIVAL, c.cid)
        for c in sorted(customers, key=lambda c: c.arrival_time)
    ]
