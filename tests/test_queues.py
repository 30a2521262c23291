import random

import pytest

from bank_sim import CustomerType, EventKind, Sentiment, ServiceType, SimulationConfig
from bank_sim.arrivals import generate_customers
from bank_sim.queues import Arrival, FutureEventList, ServerFree, ServiceLine

HIGH = ServiceType.HIGH_COUNTER
LOW = ServiceType.LOW_COUNTER
WALK_IN = CustomerType.WALK_IN
RESERVED = CustomerType.RESERVED


def run_line(customers, c, service_type=HIGH):
    line = ServiceLine(service_type, c)
    log = line.run(customers, list(range(len(customers))))
    return line, log


def test_fel_orders_by_time_then_server_free_first():
    fel = FutureEventList()
    fel.schedule(Arrival(5.0, 0))
    fel.schedule(ServerFree(5.0, 1))
    fel.schedule(Arrival(2.0, 2))
    fel.schedule(ServerFree(7.0, 0))
    assert len(fel) == 4
    assert fel.peek() == Arrival(2.0, 2)
    popped = [fel.pop() for _ in range(4)]
    assert popped == [Arrival(2.0, 2), ServerFree(5.0, 1), Arrival(5.0, 0), ServerFree(7.0, 0)]
    assert not fel


def test_fel_keeps_insertion_order_for_equal_keys():
    fel = FutureEventList()
    for idx in range(5):
        fel.schedule(Arrival(1.0, idx))
    assert [fel.pop().index for _ in range(5)] == [0, 1, 2, 3, 4]


def test_single_customer_served_on_arrival(make_customer):
    customers = [make_customer(1, arrival=10.0, service_time=5.0)]
    line, log = run_line(customers, 1)
    c = customers[0]
    assert (c.service_start, c.service_end, c.server_id, c.wait_time) == (10.0, 15.0, 0, 0.0)
    assert c.sentiment is Sentiment.HAPPY
    assert line.free_at == [15.0]
    assert [(ev.time, ev.kind) for ev in log] == [
        (10.0, EventKind.SERVICE_START),
        (15.0, EventKind.SERVICE_END),
    ]
    assert log[0].details == "High 1"


def test_first_fit_prefers_lowest_index(make_customer):
    # Both servers are idle at every arrival, yet server 0 takes everyone.
    customers = [make_customer(i + 1, arrival=10.0 * i, service_time=2.0) for i in range(4)]
    line, _ = run_line(customers, 2)
    assert [c.server_id for c in customers] == [0, 0, 0, 0]
    assert line.free_at == [32.0, 0.0]


def test_busy_server_zero_pushes_to_next_free(make_customer):
    customers = [
        make_customer(1, arrival=0.0, service_time=10.0),
        make_customer(2, arrival=1.0, service_time=10.0),
        make_customer(3, arrival=2.0, service_time=10.0),
    ]
    line, _ = run_line(customers, 2)
    assert [c.server_id for c in customers] == [0, 1, 0]
    assert customers[2].service_start == 10.0
    assert customers[2].wait_time == 8.0
    assert customers[2].sentiment is Sentiment.NEUTRAL


def test_reserved_jumps_walk_in_queue(make_customer):
    customers = [
        make_customer(1, arrival=0.0, service_time=10.0),
        make_customer(2, arrival=1.0, service_time=10.0, customer_type=WALK_IN),
        make_customer(3, arrival=2.0, service_time=10.0, customer_type=WALK_IN),
        make_customer(4, arrival=3.0, service_time=10.0, customer_type=RESERVED),
    ]
    run_line(customers, 1)
    starts = {c.cid: c.service_start for c in customers}
    assert starts == {1: 0.0, 4: 10.0, 2: 20.0, 3: 30.0}
    assert customers[2].wait_time == 28.0
    assert customers[2].sentiment is Sentiment.ANGRY


def test_fifo_within_reserved_class(make_customer):
    customers = [
        make_customer(1, arrival=0.0, service_time=5.0),
        make_customer(2, arrival=1.0, service_time=5.0, customer_type=RESERVED),
        make_customer(3, arrival=2.0, service_time=5.0, customer_type=RESERVED),
    ]
    run_line(customers, 1)
    assert [c.service_start for c in customers] == [0.0, 5.0, 10.0]


def test_simultaneous_arrivals_serve_reserved_first(make_customer):
    customers = [
        make_customer(1, arrival=0.0, service_time=10.0, customer_type=WALK_IN),
        make_customer(2, arrival=0.0, service_time=10.0, customer_type=RESERVED),
    ]
    run_line(customers, 1)
    walk_in, reserved = customers
    assert reserved.service_start == 0.0
    assert reserved.sentiment is Sentiment.HAPPY
    assert walk_in.service_start == 10.0
    assert walk_in.wait_time == 10.0
    assert walk_in.sentiment is Sentiment.NEUTRAL


def test_server_free_processed_before_same_time_arrival(make_customer):
    customers = [
        make_customer(1, arrival=0.0, service_time=5.0),
        make_customer(2, arrival=5.0, service_time=5.0),
    ]
    run_line(customers, 1)
    assert customers[1].service_start == 5.0
    assert customers[1].wait_time == 0.0


def test_waiting_customer_takes_server_released_at_arrival_instant(make_customer):
    # Server frees at 5 while a walk-in is waiting and a reserved customer
    # arrives at exactly 5; the release is handled first.
    customers = [
        make_customer(1, arrival=0.0, service_time=5.0),
        make_customer(2, arrival=1.0, service_time=5.0, customer_type=WALK_IN),
        make_customer(3, arrival=5.0, service_time=5.0, customer_type=RESERVED),
    ]
    run_line(customers, 1)
    assert customers[1].service_start == 5.0
    assert customers[2].service_start == 10.0


def test_server_intervals_never_overlap(make_customer):
    customers = [
        make_customer(i + 1, arrival=0.7 * i, service_time=3.0 + (i % 4),
                      customer_type=RESERVED if i % 3 == 0 else WALK_IN)
        for i in range(60)
    ]
    line, _ = run_line(customers, 3)
    for server in range(3):
        spans = sorted((c.service_start, c.service_end) for c in customers if c.server_id == server)
        for (s1, e1), (s2, e2) in zip(spans, spans[1:]):
            assert e1 <= s2
        if spans:
            assert line.free_at[server] == spans[-1][1]
    assert all(c.is_finished for c in customers)


def test_line_rejects_foreign_customers(make_customer):
    customers = [make_customer(1, arrival=0.0, service_time=1.0, service_type=LOW)]
    with pytest.raises(ValueError):
        run_line(customers, 1, HIGH)


def test_line_without_servers_rejects_customers(make_customer):
    customers = [make_customer(1, arrival=0.0, service_time=1.0)]
    with pytest.raises(ValueError):
        run_line(customers, 0)
    line, log = run_line([], 0)
    assert log == []


def test_customer_is_assigned_only_once(make_customer):
    c = make_customer(1, arrival=0.0, service_time=1.0)
    c.assign(0, 0.0)
    with pytest.raises(RuntimeError):
        c.assign(1, 2.0)


class RecordingLine(ServiceLine):
    """ServiceLine that keeps every free-at value each server has held."""

    def __init__(self, service_type, c):
        super().__init__(service_type, c)
        self.history = [[0.0] for _ in range(c)]

    def assign(self, customers, idx, server, t):
        assert t >= self.free_at[server]
        super().assign(customers, idx, server, t)
        self.history[server].append(self.free_at[server])


def test_free_at_never_decreases(make_customer):
    customers = [
        make_customer(i + 1, arrival=0.5 * (i // 3), service_time=1.0 + (i * 7) % 5,
                      customer_type=RESERVED if i % 4 == 0 else WALK_IN)
        for i in range(90)
    ]
    line = RecordingLine(HIGH, 3)
    line.run(customers, list(range(len(customers))))
    assert sum(len(h) - 1 for h in line.history) == len(customers)
    for history in line.history:
        assert history == sorted(history)
    assert [h[-1] for h in line.history] == line.free_at


def test_free_at_never_decreases_on_generated_population():
    cfg = SimulationConfig(arrival_rate_per_hour=120.0, percent_reserved=40.0, seed=3)
    customers = generate_customers(cfg, random.Random(cfg.seed))
    for service_type in ServiceType:
        indices = [i for i, c in enumerate(customers) if c.service_type is service_type]
        line = RecordingLine(service_type, cfg.line(service_type).count)
        line.run(customers, indices)
        for history in line.history:
            assert history == sorted(history)


def test_release_out_of_step_with_free_at_is_an_error():
    line = ServiceLine(HIGH, 1)
    line.free_at = [10.0]
    with pytest.raises(RuntimeError):
        line.on_server_free([], ServerFree(5.0, 0))


@pytest.mark.parametrize("service_time", [0.0, -1.0])
def test_line_rejects_non_positive_service_time(make_customer, service_time):
    customers = [make_customer(1, arrival=0.0, service_time=service_time)]
    with pytest.raises(ValueError):
        run_line(customers, 1)
