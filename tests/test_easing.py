import pytest

from chernobyl.easing import (
    clamp,
    clamp01,
    ease,
    ease_in,
    ease_out,
    inv_lerp,
    lerp,
)

FRACTIONS = [0.1, 0.25, 0.5, 0.75, 0.9]


def test_lerp_endpoints_and_clamping():
    assert lerp(2.0, 10.0, 0) == 2.0
    assert lerp(2.0, 10.0, 1) == 10.0
    assert lerp(2.0, 10.0, -3) == 2.0
    assert lerp(2.0, 10.0, 7) == 10.0


@pytest.mark.parametrize("t", FRACTIONS)
def test_lerp_stays_between_endpoints(t):
    value = lerp(-4.0, 12.0, t)
    assert -4.0 < value < 12.0


@pytest.mark.parametrize("t", FRACTIONS)
def test_inv_lerp_round_trip(t):
    assert inv_lerp(3.0, 11.0, lerp(3.0, 11.0, t)) == pytest.approx(t)
    assert inv_lerp(11.0, 3.0, lerp(11.0, 3.0, t)) == pytest.approx(t)


def test_inv_lerp_clamps_outside_range():
    assert inv_lerp(0.0, 10.0, -5.0) == 0
    assert inv_lerp(0.0, 10.0, 15.0) == 1
    assert inv_lerp(10.0, 0.0, -5.0) == 0
    assert inv_lerp(10.0, 0.0, 20.0) == 1


def test_ease_midpoint_and_limits():
    assert ease(0.5) == pytest.approx(0.5)
    assert ease(-1) == 0
    assert ease(2) == 1


@pytest.mark.parametrize("t", FRACTIONS)
def test_ease_is_symmetric(t):
    assert ease(t) + ease(1 - t) == pytest.approx(1.0)


def test_ease_is_monotonic():
    samples = [ease(i / 20) for i in range(21)]
    assert samples == sorted(samples)


@pytest.mark.parametrize("t", FRACTIONS)
def test_ease_in_below_and_ease_out_above_identity(t):
    assert ease_in(t) < t < ease_out(t)


@pytest.mark.parametrize("t", FRACTIONS)
def test_ease_out_mirrors_ease_in(t):
    assert ease_out(t) == pytest.approx(1 - ease_in(1 - t))


def test_ease_in_out_limits():
    assert ease_in(-0.5) == 0 and ease_in(1.5) == 1
    assert ease_out(-0.5) == 0 and ease_out(1.5) == 1


def test_clamp():
    assert clamp(5.0, 1.0, 3.0) == 3.0
    assert clamp(-5.0, 1.0, 3.0) == 1.0
    assert clamp(2.5, 1.0, 3.0) == 2.5


def test_clamp01():
    assert clamp01(-0.2) == 0
    assert clamp01(1.7) == 1
    assert clamp01(0.3) == 0.3