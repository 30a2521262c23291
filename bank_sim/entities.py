# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# entities.py
# -----------------------------------------------------------------------------
# Purpose:
#   Entity definitions for the bank counter DES: Customer and the log entry
#   (SimulationEvent), plus the class enums they carry.
#
# Design notes:
#   - A Customer is created once by the arrival generator and filled in
#     exactly once by its line's ServiceLine when a server is assigned.
#   - Customers live in a single arena (list); the engine addresses them by
#     index and never holds references across lines.
#   - Once a run is complete its customers are sealed; any later attribute
#     write raises FrozenInstanceError like a frozen dataclass.
#
# Usage:
#   from bank_sim.entities import Customer, CustomerType, ServiceType
# -----------------------------------------------------------------------------

from __future__ import annotations
from dataclasses import FrozenInstanceError, dataclass, field
from enum import Enum
from typing import Optional

HAPPY_MAX_WAIT = 5.0      # minutes
NEUTRAL_MAX_WAIT = 15.0   # minutes


class CustomerType(Enum):
    WALK_IN = "Walk-in"
    RESERVED = "Reserved"


class ServiceType(Enum):
    HIGH_COUNTER = "High Counter (Short)"
    LOW_COUNTER = "Low Counter (Long)"

    @property
    def label(self) -> str:
        """Short prefix used for server labels ("High 1", "Low 2")."""
        if self is ServiceType.HIGH_COUNTER:
            return "High"
        return "Low"


class Sentiment(Enum):
    HAPPY = "Happy"
    NEUTRAL = "Neutral"
    ANGRY = "Angry"


class EventKind(Enum):
    ARRIVAL = "ARRIVAL"
    SERVICE_START = "SERVICE_START"
    SERVICE_END = "SERVICE_END"


def classify_wait(wait: float) -> Sentiment:
    """Map a wait (minutes) onto the three-level sentiment scale."""
    if wait <= HAPPY_MAX_WAIT:
        return Sentiment.HAPPY
    if wait <= NEUTRAL_MAX_WAIT:
        return Sentiment.NEUTRAL
    return Sentiment.ANGRY


@dataclass
class Customer:
    cid: int
    customer_type: CustomerType
    service_type: ServiceType
    arrival_time: float
    service_time: float                      # sampled at creation, minutes
    service_start: Optional[float] = None
    service_end: Optional[float] = None
    server_id: Optional[int] = None          # index within its line's pool
    wait_time: Optional[float] = None
    sentiment: Optional[Sentiment] = None
    _sealed: bool = field(default=False, init=False, repr=False, compare=False)

    def __setattr__(self, name, value):
        if getattr(self, "_sealed", False):
            raise FrozenInstanceError(f"cannot assign to field {name!r} of sealed customer {self.cid}")
        super().__setattr__(name, value)

    def seal(self) -> None:
        self._sealed = True

    @property
    def is_assigned(self) -> bool:
        return self.service_start is not None

    @property
    def is_finished(self) -> bool:
        return self.service_end is not None

    def assign(self, server_id: int, start: float) -> None:
        """Record the one and only server assignment for this customer."""
        if self.is_assigned:
            raise RuntimeError(f"customer {self.cid} already assigned to server {self.server_id}")
        self.service_start = start
        self.service_end = start + self.service_time
        self.server_id = server_id
        self.wait_time = start - self.arrival_time
        self.sentiment = classify_wait(self.wait_time)


@dataclass(frozen=True)
class SimulationEvent:
    """Observational log entry; the engine never reads these back."""
    time: float
    kind: EventKind
    customer_id: int
    details: Optional[str] = None
