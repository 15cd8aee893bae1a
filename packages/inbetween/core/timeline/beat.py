"""Exact rational beat arithmetic.

Beats are ``fractions.Fraction`` values. Loop arithmetic on floats drifts
over long cyclic playback, so every timeline position stays rational and
floats only appear once a beat is handed to the curve evaluator.
"""

from __future__ import annotations

from decimal import Decimal
from fractions import Fraction
from typing import Annotated

from pydantic import PlainSerializer, PlainValidator

Beat = Fraction

BeatLike = int | str | Fraction | Decimal | float


def to_beat(value: BeatLike) -> Fraction:
    """Coerce a value into an exact beat.

    Floats are read through their shortest decimal repr so that ``0.25``
    becomes ``1/4`` rather than the binary expansion.

    Args:
        value: int, str ("3/4", "0.5"), Fraction, Decimal, or float.

    Returns:
        Exact Fraction.

    Raises:
        ValueError: If the value cannot be read as a rational number.

    Example:
        >>> to_beat("3/4")
        Fraction(3, 4)
        >>> to_beat(0.25)
        Fraction(1, 4)
    """
    if isinstance(value, bool):
        raise ValueError(f"cannot interpret {value!r} as a beat")
    if isinstance(value, Fraction):
        return value
    if isinstance(value, float):
        return Fraction(repr(value))
    if isinstance(value, (int, Decimal)):
        return Fraction(value)
    if isinstance(value, str):
        try:
            return Fraction(value.strip())
        except (ValueError, ZeroDivisionError) as e:
            raise ValueError(f"cannot interpret {value!r} as a beat") from e
    raise ValueError(f"cannot interpret {value!r} as a beat")


def loop_beat(beat: Fraction, length: Fraction) -> Fraction:
    """Wrap a beat into ``[0, length)``.

    Negative beats wrap from the end of the loop.

    Example:
        >>> loop_beat(Fraction(-1, 2), Fraction(4))
        Fraction(7, 2)
    """
    if length <= 0:
        raise ValueError(f"loop length must be > 0, got {length}")
    return beat % length


def loop_count(beat: Fraction, length: Fraction) -> int:
    """Number of whole loops elapsed before ``beat`` (floor division)."""
    if length <= 0:
        raise ValueError(f"loop length must be > 0, got {length}")
    return int(beat // length)


def beat_to_float(beat: Fraction) -> float:
    """Convert a beat to float for curve evaluation."""
    return float(beat)


BeatField = Annotated[
    Fraction,
    PlainValidator(to_beat),
    PlainSerializer(lambda b: str(b), return_type=str),
]
"""Pydantic field type for exact beats (serialized as ``"n/d"`` strings)."""
