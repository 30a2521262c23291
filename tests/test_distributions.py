import math
import random

import pytest

from bank_sim.distributions import exponential, triangular
from bank_sim.errors import ConfigurationError


def test_exponential_inverse_cdf(fixed_uniform):
    assert exponential(2.0, fixed_uniform(0.5)) == pytest.approx(math.log(2.0) / 2.0)
    assert exponential(1.0, fixed_uniform(0.0)) == 0.0


def test_exponential_sample_mean_matches_rate():
    rng = random.Random(7)
    draws = [exponential(0.5, rng) for _ in range(20000)]
    assert all(d >= 0 for d in draws)
    assert sum(draws) / len(draws) == pytest.approx(2.0, rel=0.05)


@pytest.mark.parametrize("rate", [0.0, -1.0, float("nan")])
def test_exponential_rejects_non_positive_rate(rate):
    with pytest.raises(ConfigurationError):
        exponential(rate)


@pytest.mark.parametrize("u, expected", [
    (0.0, 2.0),
    (0.25, 2.0 + math.sqrt(3.0)),
    (1.0 / 3.0, 4.0),
    (0.5, 8.0 - math.sqrt(12.0)),
])
def test_triangular_inverse_cdf(fixed_uniform, u, expected):
    assert triangular(2.0, 8.0, 4.0, fixed_uniform(u)) == pytest.approx(expected)


def test_triangular_mode_at_bounds(fixed_uniform):
    # mode == min: always the upper branch
    assert triangular(1.0, 3.0, 1.0, fixed_uniform(0.0)) == pytest.approx(1.0)
    # mode == max: always the lower branch
    assert triangular(1.0, 3.0, 3.0, fixed_uniform(0.99)) == pytest.approx(1.0 + math.sqrt(0.99 * 4.0))


def test_triangular_stays_within_bounds():
    rng = random.Random(3)
    draws = [triangular(10.0, 25.0, 15.0, rng) for _ in range(5000)]
    assert min(draws) >= 10.0
    assert max(draws) <= 25.0
    assert sum(draws) / len(draws) == pytest.approx((10.0 + 25.0 + 15.0) / 3.0, rel=0.03)


@pytest.mark.parametrize("lo, hi, mode", [
    (5.0, 5.0, 5.0),
    (6.0, 5.0, 5.5),
    (1.0, 3.0, 0.5),
    (1.0, 3.0, 3.5),
])
def test_triangular_rejects_bad_parameters(lo, hi, mode):
    with pytest.raises(ConfigurationError):
        triangular(lo, hi, mode)
