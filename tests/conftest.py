"""
Shared pytest fixtures for bank_sim tests.
"""

import pytest

from bank_sim import Customer, CustomerType, LineConfig, ServiceType, SimulationConfig


class FixedUniform:
    """Stand-in for random.Random that replays the given uniforms (last one repeats)."""

    def __init__(self, *values):
        self.values = list(values)

    def random(self):
        if len(self.values) > 1:
            return self.values.pop(0)
        return self.values[0]


@pytest.fixture
def fixed_uniform():
    return FixedUniform


@pytest.fixture
def make_customer():
    """
    Factory for hand-built, unassigned customers.

    Example usage:
        def test_something(make_customer):
            c = make_customer(1, arrival=10.0, service_time=5.0)
    """
    def _make(cid, arrival, service_time, customer_type=CustomerType.WALK_IN,
              service_type=ServiceType.HIGH_COUNTER):
        return Customer(
            cid=cid,
            customer_type=customer_type,
            service_type=service_type,
            arrival_time=arrival,
            service_time=service_time,
        )
    return _make


@pytest.fixture
def quiet_config():
    """One-hour horizon with no random arrivals and one server per line."""
    return SimulationConfig(
        duration_minutes=60.0,
        arrival_rate_per_hour=0.0,
        percent_reserved=0.0,
        percent_high_counter=100.0,
        high_counter=LineConfig(count=1, service_min=1.0, service_mode=2.0, service_max=3.0),
        low_counter=LineConfig(count=1, service_min=5.0, service_mode=6.0, service_max=7.0),
    )


@pytest.fixture
def baseline_config():
    return SimulationConfig()
