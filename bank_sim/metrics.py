# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# metrics.py
# -----------------------------------------------------------------------------
# Purpose:
#   Reduce the finished customer population into KPIs: waits (overall and
#   per class), sentiment tally, per-server utilization, throughput, and
#   sampled queue lengths.
#
# Design notes:
#   - "Finished" means a service end time is set; anything else is ignored.
#   - Empty populations yield 0 for every average/maximum, never an error.
#   - Queue lengths are sampled from the snapshot projection every
#     `queue_sample_minutes` over [0, horizon].
#   - as_dict() returns JSON-serializable dicts for easy tabulation.
#
# Usage:
#   M = compute_metrics(customers, cfg); M.as_dict()
# -----------------------------------------------------------------------------

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple

from .config import SimulationConfig
from .entities import Customer, CustomerType, Sentiment, ServiceType
from .snapshot import waiting_customers


@dataclass(frozen=True)
class ServerStats:
    server_id: int
    label: str
    served_count: int
    busy_time: float
    idle_time: float
    utilization: float


@dataclass(frozen=True)
class SentimentStats:
    happy: int = 0
    neutral: int = 0
    angry: int = 0


@dataclass(frozen=True)
class Metrics:
    avg_wait_time: float
    max_wait_time: float
    avg_wait_time_walk_in: float
    avg_wait_time_reserved: float
    max_wait_time_walk_in: float
    max_wait_time_reserved: float
    avg_queue_length_high: float
    avg_queue_length_low: float
    max_queue_length_high: int
    max_queue_length_low: int
    throughput: int
    server_stats_high: Tuple[ServerStats, ...]
    server_stats_low: Tuple[ServerStats, ...]
    sentiment: SentimentStats

    @property
    def reserved_benefit(self) -> float:
        """Minutes a reserved customer saves on average versus a walk-in."""
        return self.avg_wait_time_walk_in - self.avg_wait_time_reserved

    def server_stats(self, service_type: ServiceType) -> Tuple[ServerStats, ...]:
        if service_type is ServiceType.HIGH_COUNTER:
            return self.server_stats_high
        return self.server_stats_low

    def as_dict(self) -> Dict[str, Any]:
        def _rows(rows):
            return [dict(vars(r)) for r in rows]
        return {
            "avg_wait_minutes": self.avg_wait_time,
            "max_wait_minutes": self.max_wait_time,
            "avg_wait_minutes_by_class": {
                CustomerType.WALK_IN.value: self.avg_wait_time_walk_in,
                CustomerType.RESERVED.value: self.avg_wait_time_reserved,
            },
            "max_wait_minutes_by_class": {
                CustomerType.WALK_IN.value: self.max_wait_time_walk_in,
                CustomerType.RESERVED.value: self.max_wait_time_reserved,
            },
            "reserved_benefit_minutes": self.reserved_benefit,
            "avg_queue_length": {"high": self.avg_queue_length_high, "low": self.avg_queue_length_low},
            "max_queue_length": {"high": self.max_queue_length_high, "low": self.max_queue_length_low},
            "throughput": self.throughput,
            "server_stats": {"high": _rows(self.server_stats_high), "low": _rows(self.server_stats_low)},
            "sentiment": dict(vars(self.sentiment)),
        }


def _avg(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _max(values: Sequence[float]) -> float:
    return max(values) if values else 0.0


def server_stats(finished: Sequence[Customer], service_type: ServiceType, count: int,
                 horizon: float) -> Tuple[ServerStats, ...]:
    rows = []
    for server in range(count):
        mine = [c for c in finished if c.service_type is service_type and c.server_id == server]
        busy = sum(c.service_time for c in mine)
        rows.append(ServerStats(
            server_id=server,
            label=f"{service_type.label} {server + 1}",
            served_count=len(mine),
            busy_time=busy,
            idle_time=max(0.0, horizon - busy),
            utilization=min(1.0, busy / horizon),
        ))
    return tuple(rows)


def sentiment_stats(finished: Sequence[Customer]) -> SentimentStats:
    tally = {s: 0 for s in Sentiment}
    for c in finished:
        tally[c.sentiment] += 1
    return SentimentStats(
        happy=tally[Sentiment.HAPPY],
        neutral=tally[Sentiment.NEUTRAL],
        angry=tally[Sentiment.ANGRY],
    )


def sample_times(horizon: float, step: float) -> List[float]:
    n = int(horizon // step)
    return [i * step for i in range(n + 1)]


def sample_queue_lengths(customers: Sequence[Customer], service_type: ServiceType,
                         horizon: float, step: float) -> List[int]:
    """Waiting-line length of one line at t = 0, step, 2*step, ... <= horizon."""
    own = [c for c in customers if c.service_type is service_type]
    return [len(waiting_customers(own, service_type, t)) for t in sample_times(horizon, step)]


def compute_metrics(customers: Sequence[Customer], cfg: SimulationConfig) -> Metrics:
    finished = [c for c in customers if c.is_finished]
    waits = [c.wait_time for c in finished]
    walk_in = [c.wait_time for c in finished if c.customer_type is CustomerType.WALK_IN]
    reserved = [c.wait_time for c in finished if c.customer_type is CustomerType.RESERVED]
    horizon = cfg.duration_minutes
    queue_high = sample_queue_lengths(customers, ServiceType.HIGH_COUNTER, horizon, cfg.queue_sample_minutes)
    queue_low = sample_queue_lengths(customers, ServiceType.LOW_COUNTER, horizon, cfg.queue_sample_minutes)
    return Metrics(
        avg_wait_time=_avg(waits),
        max_wait_time=_max(waits),
        avg_wait_time_walk_in=_avg(walk_in),
        avg_wait_time_reserved=_avg(reserved),
        max_wait_time_walk_in=_max(walk_in),
        max_wait_time_reserved=_max(reserved),
        avg_queue_length_high=_avg(queue_high),
        avg_queue_length_low=_avg(queue_low),
        max_queue_length_high=int(_max(queue_high)),
        max_queue_length_low=int(_max(queue_low)),
        throughput=len(finished),
        server_stats_high=server_stats(finished, ServiceType.HIGH_COUNTER, cfg.high_counter.count, horizon),
        server_stats_low=server_stats(finished, ServiceType.LOW_COUNTER, cfg.low_counter.count, horizon),
        sentiment=sentiment_stats(finished),
    )
