"""Unit tests for the sampling gate."""

import random

import pytest

from evalpulse.engine.sampling import SamplingDecider


class FixedRng(random.Random):
    def __init__(self, value: float):
        super().__init__()
        self.value = value

    def random(self) -> float:
        return self.value


def test_zero_rate_never_accepts():
    decider = SamplingDecider(random.Random(7))
    assert not any(decider.decide(0) for _ in range(1000))


def test_full_rate_always_accepts():
    # Largest possible draw still lands below 100
    assert SamplingDecider(FixedRng(0.9999999999)).decide(100)
    decider = SamplingDecider(random.Random(7))
    assert all(decider.decide(100) for _ in range(1000))


def test_draw_must_be_strictly_below_rate():
    assert SamplingDecider(FixedRng(0.4999)).decide(50)
    assert not SamplingDecider(FixedRng(0.5)).decide(50)


def test_seeded_rng_is_reproducible():
    a = SamplingDecider(random.Random(42))
    b = SamplingDecider(random.Random(42))
    assert [a.decide(30) for _ in range(100)] == [b.decide(30) for _ in range(100)]


def test_rate_roughly_respected():
    decider = SamplingDecider(random.Random(2024))
    accepted = sum(decider.decide(25) for _ in range(10000))
    assert 2200 < accepted < 2800


@pytest.mark.parametrize("rate", [-1, 101])
def test_out_of_range_rate(rate):
    with pytest.raises(ValueError):
        SamplingDecider().decide(rate)
