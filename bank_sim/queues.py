# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# queues.py
# -----------------------------------------------------------------------------
# Purpose:
#   Discrete-event engine for one counter line: Arrival / ServerFree events,
#   a heap-backed Future Event List, and a ServiceLine with c parallel
#   servers and a two-class (reserved, walk-in) waiting room.
#
# Design notes:
#   - The FEL is keyed by (time, rank, seq). ServerFree has rank 0 and
#     Arrival rank 1, so a server released at t is seen as free by an
#     arrival at the same t. seq keeps equal keys in insertion order.
#   - Arrivals take the lowest-indexed free server (first fit), never the
#     "soonest free" one; server 0 therefore carries the most load.
#   - Arrivals sharing a timestamp are admitted as one batch before any of
#     them is seated, so class priority also holds between them.
#   - A released server serves the head of the reserved queue first, then
#     the head of the walk-in queue.
#   - Lines share nothing; each ServiceLine only touches its own customers
#     (by arena index) and its own free-at vector.
#
# Usage:
#   line = ServiceLine(ServiceType.HIGH_COUNTER, c=3)
#   log = line.run(customers, indices)
# -----------------------------------------------------------------------------

from __future__ import annotations
import heapq
import itertools
import logging
from collections import deque
from dataclasses import dataclass
from typing import ClassVar, Deque, List, Sequence, Tuple, Union

from .entities import Customer, CustomerType, EventKind, ServiceType, SimulationEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Arrival:
    t: float
    index: int          # position of the customer in the arena
    RANK: ClassVar[int] = 1


@dataclass(frozen=True)
class ServerFree:
    t: float
    server: int
    RANK: ClassVar[int] = 0


LineEvent = Union[Arrival, ServerFree]


class FutureEventList:
    """Min-heap of pending line events ordered by (time, rank, insertion)."""

    def __init__(self):
        self._heap: List[Tuple[float, int, int, LineEvent]] = []
        self._seq = itertools.count()

    def schedule(self, ev: LineEvent):
        heapq.heappush(self._heap, (ev.t, ev.RANK, next(self._seq), ev))

    def pop(self) -> LineEvent:
        return heapq.heappop(self._heap)[-1]

    def peek(self) -> LineEvent:
        return self._heap[0][-1]

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)


class ServiceLine:
    """One counter line with c identical servers and a priority waiting room.

    Parameters
    ----------
    service_type : ServiceType
        Which line this is; only used for labels and sanity checks.
    c : int
        Number of parallel servers (may be 0 only if no customer is routed here).

    Attributes
    ----------
    free_at : list[float]
        Time each server next becomes free; non-decreasing per server.
    reserved, walk_in : deque[int]
        FIFO sub-queues of waiting customers (arena indices).
    """

    def __init__(self, service_type: ServiceType, c: int):
        self.service_type = service_type
        self.c = c
        self.free_at: List[float] = [0.0] * c
        self.reserved: Deque[int] = deque()
        self.walk_in: Deque[int] = deque()
        self.fel = FutureEventList()
        self.log: List[SimulationEvent] = []

    def server_label(self, server: int) -> str:
        return f"{self.service_type.label} {server + 1}"

    @property
    def queue_length(self) -> int:
        return len(self.reserved) + len(self.walk_in)

    def run(self, customers: Sequence[Customer], indices: Sequence[int]) -> List[SimulationEvent]:
        """Serve the given arena indices to completion and return this line's log.

        Customers are mutated in place (start, end, server, wait, sentiment).
        The loop ends when the FEL is empty, so every customer is assigned.
        """
        if indices and self.c < 1:
            raise ValueError(f"{self.service_type.value} has customers but no servers")
        for idx in sorted(indices, key=lambda i: customers[i].arrival_time):
            if customers[idx].service_type is not self.service_type:
                raise ValueError(
                    f"customer {customers[idx].cid} belongs to {customers[idx].service_type.value}, "
                    f"not {self.service_type.value}"
                )
            if not customers[idx].service_time > 0:
                raise ValueError(
                    f"customer {customers[idx].cid} has non-positive service time {customers[idx].service_time!r}"
                )
            self.fel.schedule(Arrival(customers[idx].arrival_time, idx))

        while self.fel:
            ev = self.fel.pop()
            if isinstance(ev, Arrival):
                batch = [ev]
                while self.fel and isinstance(self.fel.peek(), Arrival) and self.fel.peek().t == ev.t:
                    batch.append(self.fel.pop())
                self.on_arrivals(customers, ev.t, batch)
            elif isinstance(ev, ServerFree):
                self.on_server_free(customers, ev)
            else:
                raise TypeError(f"unknown line event {ev!r}")

        logger.debug(
            "%s served %d customers on %d servers",
            self.service_type.value, len(indices), self.c,
        )
        return self.log

    def on_arrivals(self, customers: Sequence[Customer], t: float, batch: Sequence[Arrival]):
        """Admit every arrival stamped t, then fill free servers by priority.

        With a single arrival this is plain first fit: the lowest-indexed
        server whose free-at <= t takes the customer. Simultaneous arrivals
        are admitted together so a reserved customer arriving at the same
        instant as a walk-in is served first.
        """
        for ev in batch:
            self.enqueue(customers, ev.index)
        while self.queue_length:
            server = self.first_free_server(t)
            if server is None:
                break
            self.assign(customers, self.next_waiting(), server, t)

    def first_free_server(self, t: float):
        for server, free_at in enumerate(self.free_at):
            if free_at <= t:
                return server
        return None

    def on_server_free(self, customers: Sequence[Customer], ev: ServerFree):
        if self.free_at[ev.server] != ev.t:
            raise RuntimeError(
                f"{self.server_label(ev.server)} released at {ev.t} but free-at is {self.free_at[ev.server]}"
            )
        idx = self.next_waiting()
        if idx is not None:
            self.assign(customers, idx, ev.server, ev.t)

    def enqueue(self, customers: Sequence[Customer], idx: int):
        customer_type = customers[idx].customer_type
        if customer_type is CustomerType.RESERVED:
            self.reserved.append(idx)
        elif customer_type is CustomerType.WALK_IN:
            self.walk_in.append(idx)
        else:
            raise TypeError(f"unknown customer type {customer_type!r}")

    def next_waiting(self):
        """Strict class priority: reserved head, else walk-in head, else None."""
        if self.reserved:
            return self.reserved.popleft()
        if self.walk_in:
            return self.walk_in.popleft()
        return None

    def assign(self, customers: Sequence[Customer], idx: int, server: int, t: float):
        customer = customers[idx]
        customer.assign(server, t)
        self.free_at[server] = customer.service_end
        self.log.append(SimulationEvent(
            customer.service_start, EventKind.SERVICE_START, customer.cid, self.server_label(server),
        ))
        self.log.append(SimulationEvent(customer.service_end, EventKind.SERVICE_END, customer.cid))
        self.fel.schedule(ServerFree(customer.service_end, server))
