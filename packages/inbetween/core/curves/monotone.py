"""Monotone cubic Hermite segment evaluation.

Tangents are limited so that an interpolated coordinate never overshoots
either neighbouring key value (Fritsch-Carlson style limiter weighted by the
neighbouring interval widths). All functions work element-wise on numpy
arrays, so a whole polyline (``(n, 3)`` array) is evaluated in one call.

Naming follows the segment being evaluated, between keys 1 and 2:

- ``f0..f3``: values of the previous key, segment start, segment end, next key
- ``x0..x3``: their times
- ``t``: normalized position inside the segment, in [0, 1]
"""

from __future__ import annotations

import numpy as np


def linear(f1: np.ndarray, f2: np.ndarray, t: float) -> np.ndarray:
    """Straight blend between two values."""
    return f1 * (1.0 - t) + f2 * t


def _limited_slope(
    s_a: np.ndarray, s_b: np.ndarray, h_a: float, h_b: float
) -> np.ndarray:
    """Tangent at the key shared by two intervals with secant slopes s_a, s_b."""
    weighted = 0.5 * np.abs((h_b * s_a + h_a * s_b) / (h_a + h_b))
    bound = np.minimum(np.minimum(np.abs(s_a), np.abs(s_b)), weighted)
    return (np.sign(s_a) + np.sign(s_b)) * bound


def _hermite(
    f1: np.ndarray,
    f2: np.ndarray,
    s1: np.ndarray,
    d1: np.ndarray,
    d2: np.ndarray,
    h1: float,
    t: float,
) -> np.ndarray:
    x = h1 * t
    a = (d1 + d2 - 2.0 * s1) / (h1 * h1)
    b = (3.0 * s1 - 2.0 * d1 - d2) / h1
    result = a * x**3 + b * x**2 + d1 * x + f1
    # Flat coordinates stay exactly flat.
    return np.where(f1 == f2, f1, result)


def monospline(
    f0: np.ndarray,
    f1: np.ndarray,
    f2: np.ndarray,
    f3: np.ndarray,
    x0: float,
    x1: float,
    x2: float,
    x3: float,
    t: float,
) -> np.ndarray:
    """Segment with a neighbour on both sides."""
    if x1 == x2:
        return f1.copy()
    if x0 == x1 and x2 == x3:
        return linear(f1, f2, t)
    if x0 == x1:
        return first_monospline(f1, f2, f3, x1, x2, x3, t)
    if x2 == x3:
        return last_monospline(f0, f1, f2, x0, x1, x2, t)
    h0, h1, h2 = x1 - x0, x2 - x1, x3 - x2
    s0 = (f1 - f0) / h0
    s1 = (f2 - f1) / h1
    s2 = (f3 - f2) / h2
    d1 = _limited_slope(s0, s1, h0, h1)
    d2 = _limited_slope(s1, s2, h1, h2)
    return _hermite(f1, f2, s1, d1, d2, h1, t)


def first_monospline(
    f1: np.ndarray,
    f2: np.ndarray,
    f3: np.ndarray,
    x1: float,
    x2: float,
    x3: float,
    t: float,
) -> np.ndarray:
    """Segment that starts a curve: no usable key before it."""
    if x1 == x2:
        return f1.copy()
    if x2 == x3:
        return linear(f1, f2, t)
    h1, h2 = x2 - x1, x3 - x2
    s1 = (f2 - f1) / h1
    s2 = (f3 - f2) / h2
    d2 = _limited_slope(s1, s2, h1, h2)
    return _hermite(f1, f2, s1, s1, d2, h1, t)


def last_monospline(
    f0: np.ndarray,
    f1: np.ndarray,
    f2: np.ndarray,
    x0: float,
    x1: float,
    x2: float,
    t: float,
) -> np.ndarray:
    """Segment that ends a curve: no usable key after it."""
    if x1 == x2:
        return f1.copy()
    if x0 == x1:
        return linear(f1, f2, t)
    h0, h1 = x1 - x0, x2 - x1
    s0 = (f1 - f0) / h0
    s1 = (f2 - f1) / h1
    d1 = _limited_slope(s0, s1, h0, h1)
    return _hermite(f1, f2, s1, d1, s1, h1, t)
