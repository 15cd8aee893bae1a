"""Keyed cyclic interpolation curve.

An ``Interpolation`` holds time-ordered keys over one loop of length
``duration``. Each key's type controls the segment that starts at it:

- ``STEP`` holds the key's value until the next key.
- ``LINEAR`` blends straight to the next key.
- ``SPLINE`` fits a monotone cubic through the neighbouring keys. A
  neighbour is only used when it is itself a spline key (a step key closes
  the curve on that side) and its time is strictly ordered.

Keys may carry times outside ``[0, duration)`` when the caller pads the loop
seam (see ``padding.pad_cyclic``).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np

from inbetween.core.curves.monotone import (
    first_monospline,
    last_monospline,
    linear,
    monospline,
)


class KeyType(str, Enum):
    """How the segment starting at a key is interpolated."""

    STEP = "step"
    LINEAR = "linear"
    SPLINE = "spline"


@dataclass
class CurveKey:
    """One key of the curve: a value array at a time."""

    value: np.ndarray
    time: float
    type: KeyType = KeyType.SPLINE


@dataclass(frozen=True)
class TimeResult:
    """Location of a time inside the key list.

    Attributes:
        index: Key the segment starts at.
        internal_time: Time elapsed since that key.
        section_time: Length of the segment.
    """

    index: int
    internal_time: float
    section_time: float


class Interpolation:
    """Cyclic keyed curve over ``duration``.

    Example:
        >>> curve = Interpolation(
        ...     [CurveKey(np.array([0.0]), 0.0), CurveKey(np.array([1.0]), 2.0)],
        ...     duration=4.0,
        ... )
        >>> curve.value_at(1.0)
        array([0.5])
    """

    def __init__(self, keys: list[CurveKey], duration: float, is_loop: bool = True) -> None:
        self.keys = sorted(keys, key=lambda k: k.time)
        self.duration = float(duration)
        self.is_loop = is_loop

    def time_result(self, time: float) -> TimeResult | None:
        """Find the segment containing ``time``.

        Returns None when the curve is empty or ``time`` is past the loop end.
        """
        if not self.keys or time > self.duration:
            return None
        next_time = self.duration
        for i in range(len(self.keys) - 1, -1, -1):
            key_time = self.keys[i].time
            if time >= key_time:
                return TimeResult(i, time - key_time, next_time - key_time)
            next_time = key_time
        first = self.keys[0].time
        return TimeResult(0, time - first, next_time - first)

    def value_at(self, time: float) -> np.ndarray | None:
        """Evaluate the curve at ``time``."""
        result = self.time_result(time)
        if result is None:
            return None
        return self.value(result)

    def value(self, result: TimeResult) -> np.ndarray:
        keys = self.keys
        count = len(keys)
        i1 = result.index
        k1 = keys[i1]
        if k1.type == KeyType.STEP or count == 1 or result.section_time <= 0:
            return k1.value.copy()
        if not self.is_loop and i1 + 1 >= count:
            return k1.value.copy()

        t = result.internal_time / result.section_time
        x1 = k1.time
        x2 = x1 + result.section_time
        k2 = keys[(i1 + 1) % count]
        f1 = k1.value
        f2 = _conform(k2.value, f1, f1)
        if k1.type == KeyType.LINEAR:
            return linear(f1, f2, t)

        k0, x0 = self._neighbour(i1 - 1)
        k3, x3 = self._neighbour(i1 + 2)
        use_k0 = k0 is not None and k0.type == KeyType.SPLINE and x0 < x1
        use_k3 = k2.type == KeyType.SPLINE and k3 is not None and x3 > x2

        if use_k0 and use_k3:
            f0 = _conform(k0.value, f1, f1)
            f3 = _conform(k3.value, f1, f2)
            return monospline(f0, f1, f2, f3, x0, x1, x2, x3, t)
        if use_k3:
            f3 = _conform(k3.value, f1, f2)
            return first_monospline(f1, f2, f3, x1, x2, x3, t)
        if use_k0:
            f0 = _conform(k0.value, f1, f1)
            return last_monospline(f0, f1, f2, x0, x1, x2, t)
        return linear(f1, f2, t)

    def _neighbour(self, i: int) -> tuple[CurveKey | None, float]:
        """Key at position ``i`` with its time shifted across the loop seam."""
        count = len(self.keys)
        if 0 <= i < count:
            return self.keys[i], self.keys[i].time
        if not self.is_loop:
            return None, 0.0
        key = self.keys[i % count]
        shift = self.duration if i >= count else -self.duration
        return key, key.time + shift


def _conform(values: np.ndarray, like: np.ndarray, fallback: np.ndarray) -> np.ndarray:
    """Shape ``values`` like ``like``: truncate, or fill missing rows from ``fallback``."""
    n = len(like)
    if len(values) >= n:
        return values[:n]
    return np.concatenate([values, fallback[len(values) : n]], axis=0)
