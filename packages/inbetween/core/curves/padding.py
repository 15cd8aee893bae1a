"""Loop-seam padding for cyclic key lists.

A spline segment near the seam needs neighbours on both sides, but the
authored keys of a cyclic timeline only cover one loop. ``pad_cyclic``
duplicates keys from the opposite end, shifted by one loop length, so the
result is strictly time-ordered and can be handed to any spline evaluator.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from fractions import Fraction
from typing import Any

from inbetween.core.curves.interpolation import KeyType


@dataclass(frozen=True)
class TimedKey:
    """Key sample at an exact beat.

    Attributes:
        keyframe_index: Keyframe the key was read from.
        time: Beat of the key; padded copies lie outside ``[0, loop)``.
        value: Payload carried through padding untouched.
        type: Segment type of the key.
    """

    keyframe_index: int
    time: Fraction
    value: Any
    type: KeyType = KeyType.SPLINE


@dataclass(frozen=True)
class PaddedKeys:
    """Result of seam padding.

    Attributes:
        keys: Padded, time-ordered keys.
        leading: Number of copies prepended; original key ``i`` sits at
            ``keys[i + leading]``.
    """

    keys: list[TimedKey]
    leading: int


def pad_cyclic(
    keys: list[TimedKey], loop_length: Fraction, before: int, after: int
) -> PaddedKeys:
    """Duplicate keys across the loop seam.

    The last ``before`` keys are prepended shifted by ``-loop_length`` and the
    first ``after`` keys appended shifted by ``+loop_length``. Counts are
    clamped to the number of keys.

    Args:
        keys: Time-ordered keys within one loop.
        loop_length: Loop duration in beats (> 0).
        before: Copies to prepend.
        after: Copies to append.

    Returns:
        PaddedKeys with strictly increasing times when the input is strictly
        increasing and lies in ``[0, loop_length)``.

    Raises:
        ValueError: If ``loop_length`` is not positive or a count is negative.

    Example:
        >>> keys = [TimedKey(0, Fraction(0), "a"), TimedKey(2, Fraction(2), "b")]
        >>> [k.time for k in pad_cyclic(keys, Fraction(4), 1, 1).keys]
        [Fraction(-2, 1), Fraction(0, 1), Fraction(2, 1), Fraction(4, 1)]
    """
    if loop_length <= 0:
        raise ValueError(f"loop_length must be > 0, got {loop_length}")
    if before < 0 or after < 0:
        raise ValueError("padding counts must be >= 0")

    before = min(before, len(keys))
    after = min(after, len(keys))
    head = [replace(k, time=k.time - loop_length) for k in keys[len(keys) - before :]]
    tail = [replace(k, time=k.time + loop_length) for k in keys[:after]]
    return PaddedKeys(keys=[*head, *keys, *tail], leading=before)
