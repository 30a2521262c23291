"""
bank_sim package initializer.

This package contains the discrete-event engine, variate generators,
arrival generation, metric aggregation, and snapshot projection used by the
two-line (high-counter / low-counter) bank service model.
"""
import logging

from .config import LineConfig, SimulationConfig, load_config
from .entities import Customer, CustomerType, EventKind, Sentiment, ServiceType, SimulationEvent
from .errors import ConfigurationError
from .logging_config import configure_from_env, disable_logging, enable_console_logging, set_level
from .metrics import Metrics, ServerStats, SentimentStats
from .simulation import SimulationResult, run_simulation
from .snapshot import Snapshot, snapshot_at

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ConfigurationError",
    "Customer",
    "CustomerType",
    "EventKind",
    "LineConfig",
    "Metrics",
    "Sentiment",
    "SentimentStats",
    "ServerStats",
    "ServiceType",
    "SimulationConfig",
    "SimulationEvent",
    "SimulationResult",
    "Snapshot",
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
    "load_config",
    "run_simulation",
    "set_level",
    "snapshot_at",
]
