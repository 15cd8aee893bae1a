"""Inbetween - keyframe timeline indexing and cyclic interpolation."""

__version__ = "0.1.0"
