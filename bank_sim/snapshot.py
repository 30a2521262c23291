# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# snapshot.py
# -----------------------------------------------------------------------------
# Purpose:
#   Reconstruct the facility at an arbitrary time t from a finished run:
#   who is waiting on each line, who occupies each server, how many are done.
#
# Design notes:
#   - Pure read over the customer records; no caching, no call-order
#     dependence, linear in the number of customers.
#   - Waiting lists are sorted by arrival for display only; the engine
#     serves by class priority.
#
# Usage:
#   snap = snapshot_at(result, 12.5)
#   snap.waiting(ServiceType.HIGH_COUNTER)
# -----------------------------------------------------------------------------

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence, Tuple

from .entities import Customer, ServiceType

if TYPE_CHECKING:
    from .simulation import SimulationResult


@dataclass(frozen=True)
class Snapshot:
    time: float
    queue_high: Tuple[Customer, ...]
    queue_low: Tuple[Customer, ...]
    at_server_high: Tuple[Optional[Customer], ...]   # index == server id
    at_server_low: Tuple[Optional[Customer], ...]
    finished_count: int

    def waiting(self, service_type: ServiceType) -> Tuple[Customer, ...]:
        if service_type is ServiceType.HIGH_COUNTER:
            return self.queue_high
        return self.queue_low

    def at_servers(self, service_type: ServiceType) -> Tuple[Optional[Customer], ...]:
        if service_type is ServiceType.HIGH_COUNTER:
            return self.at_server_high
        return self.at_server_low


def is_waiting(c: Customer, t: float) -> bool:
    return c.arrival_time <= t and (c.service_start is None or c.service_start > t)


def is_in_service(c: Customer, t: float) -> bool:
    # An unset end counts as still ongoing.
    if c.service_start is None or c.service_start > t:
        return False
    return c.service_end is None or c.service_end > t


def waiting_customers(customers: Iterable[Customer], service_type: ServiceType, t: float) -> List[Customer]:
    """Customers of one line that have arrived by t and not yet started service."""
    waiting = [c for c in customers if c.service_type is service_type and is_waiting(c, t)]
    waiting.sort(key=lambda c: c.arrival_time)
    return waiting


def occupied_servers(customers: Iterable[Customer], service_type: ServiceType, count: int,
                     t: float) -> List[Optional[Customer]]:
    slots: List[Optional[Customer]] = [None] * count
    for c in customers:
        if c.service_type is not service_type or not is_in_service(c, t):
            continue
        if c.server_id is not None and 0 <= c.server_id < count:
            slots[c.server_id] = c
    return slots


def finished_by(customers: Iterable[Customer], t: float) -> int:
    return sum(1 for c in customers if c.service_end is not None and c.service_end <= t)


def project(customers: Sequence[Customer], high_count: int, low_count: int, t: float) -> Snapshot:
    return Snapshot(
        time=t,
        queue_high=tuple(waiting_customers(customers, ServiceType.HIGH_COUNTER, t)),
        queue_low=tuple(waiting_customers(customers, ServiceType.LOW_COUNTER, t)),
        at_server_high=tuple(occupied_servers(customers, ServiceType.HIGH_COUNTER, high_count, t)),
        at_server_low=tuple(occupied_servers(customers, ServiceType.LOW_COUNTER, low_count, t)),
        finished_count=finished_by(customers, t),
    )


def snapshot_at(result: "SimulationResult", t: float) -> Snapshot:
    """State of the facility at time t, derived from a completed result."""
    cfg = result.config
    return project(result.customers, cfg.high_counter.count, cfg.low_counter.count, t)
