"""Polyline conditioning before curve fitting.

Two consecutive keys of the same line may be drawn in opposite directions
or with different point counts. Blending them point-by-point would flip or
tear the line, so control values are first de-crossed against their
predecessor and then subdivided to a shared point count. Only the copies
handed to the curve are changed; authored samples are left alone.
"""

from __future__ import annotations

import numpy as np


def endpoint_cost(line: np.ndarray, other: np.ndarray) -> tuple[float, float]:
    """Endpoint travel distance for same-direction and reversed pairing.

    Returns:
        ``(forward, reversed)`` summed xy distances between matched endpoints.
    """
    a0, a1 = line[0, :2], line[-1, :2]
    b0, b1 = other[0, :2], other[-1, :2]
    forward = float(np.linalg.norm(a0 - b0) + np.linalg.norm(a1 - b1))
    backward = float(np.linalg.norm(a0 - b1) + np.linalg.norm(a1 - b0))
    return forward, backward


def decross(line: np.ndarray, previous: np.ndarray) -> np.ndarray:
    """Orient ``line`` to run the same way as ``previous``.

    The line is reversed when pairing its endpoints the other way round moves
    them strictly less. Lines with fewer than two points are returned as-is.

    Example:
        >>> prev = np.array([[0, 0, 1], [10, 0, 1]], dtype=float)
        >>> line = np.array([[10, 1, 1], [0, 1, 1]], dtype=float)
        >>> float(decross(line, prev)[0, 0])
        0.0
    """
    if len(line) < 2 or len(previous) < 2:
        return line
    forward, backward = endpoint_cost(line, previous)
    if backward < forward:
        return line[::-1].copy()
    return line


def subdivide(line: np.ndarray, count: int) -> np.ndarray:
    """Grow ``line`` to ``count`` points without moving existing ones.

    The longest segment (xy length, earliest on ties) is split at its
    midpoint until the count is reached. A single point is repeated.
    Lines already at or above ``count`` are returned unchanged.
    """
    n = len(line)
    if n >= count or n == 0:
        return line
    if n == 1:
        return np.repeat(line, count, axis=0)
    points = [row for row in line]
    while len(points) < count:
        lengths = [
            float(np.linalg.norm(points[i + 1][:2] - points[i][:2]))
            for i in range(len(points) - 1)
        ]
        i = int(np.argmax(lengths))
        points.insert(i + 1, (points[i] + points[i + 1]) / 2.0)
    return np.array(points, dtype=float)


def conform_point_counts(lines: list[np.ndarray]) -> list[np.ndarray]:
    """Subdivide every line to the largest point count among them."""
    if not lines:
        return []
    target = max(len(line) for line in lines)
    return [subdivide(line, target) for line in lines]
