"""Interpolation, easing and clamping helpers for animation timing."""

from __future__ import annotations


def lerp(a: float, b: float, t: float) -> float:
    """Interpolate from ``a`` to ``b``; ``t`` is clamped to [0, 1]."""
    if t <= 0:
        return a
    if t >= 1:
        return b
    return a + (b - a) * t


def inv_lerp(a: float, b: float, t: float) -> float:
    """Return where ``t`` lies between ``a`` and ``b`` as a fraction in [0, 1]."""
    if b > a:
        if t <= a:
            return 0.0
        if t >= b:
            return 1.0
    else:
        if t <= b:
            return 0.0
        if t >= a:
            return 1.0
    return (t - a) / (b - a)


def ease(t: float) -> float:
    """Smoothstep easing on [0, 1]."""
    if t <= 0:
        return 0.0
    if t >= 1:
        return 1.0
    return (3 - 2 * t) * t * t


def ease_in(t: float) -> float:
    """Quadratic ease-in on [0, 1]."""
    if t <= 0:
        return 0.0
    if t >= 1:
        return 1.0
    return t * t


def ease_out(t: float) -> float:
    """Quadratic ease-out on [0, 1]."""
    if t <= 0:
        return 0.0
    if t >= 1:
        return 1.0
    return (2 - t) * t


def clamp(t: float, a: float, b: float) -> float:
    """Limit ``t`` to the range [a, b]."""
    if t <= a:
        return a
    if t >= b:
        return b
    return t


def clamp01(t: float) -> float:
    """Limit ``t`` to the range [0, 1]."""
    if t <= 0:
        return 0.0
    if t >= 1:
        return 1.0
    return t