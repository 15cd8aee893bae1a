"""Curve fitting for cyclic keyframe interpolation."""

from inbetween.core.curves.interpolation import CurveKey, Interpolation, KeyType, TimeResult
from inbetween.core.curves.padding import PaddedKeys, TimedKey, pad_cyclic
from inbetween.core.curves.polyline import conform_point_counts, decross, subdivide

__all__ = [
    "CurveKey",
    "Interpolation",
    "KeyType",
    "PaddedKeys",
    "TimeResult",
    "TimedKey",
    "conform_point_counts",
    "decross",
    "pad_cyclic",
    "subdivide",
]
