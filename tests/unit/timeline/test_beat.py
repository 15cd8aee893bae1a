"""Tests for exact beat arithmetic."""

from __future__ import annotations

from decimal import Decimal
from fractions import Fraction

import pytest

from inbetween.core.timeline.beat import beat_to_float, loop_beat, loop_count, to_beat


class TestToBeat:
    """Tests for beat coercion."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (3, Fraction(3)),
            ("3/4", Fraction(3, 4)),
            (" 0.5 ", Fraction(1, 2)),
            (0.25, Fraction(1, 4)),
            (0.1, Fraction(1, 10)),
            (Decimal("1.25"), Fraction(5, 4)),
            (Fraction(7, 3), Fraction(7, 3)),
        ],
    )
    def test_coerces_supported_types(self, value, expected) -> None:
        """Ints, strings, floats, decimals and fractions become exact beats."""
        assert to_beat(value) == expected

    @pytest.mark.parametrize("value", ["abc", "1/0", True, None, [1]])
    def test_rejects_invalid_values(self, value) -> None:
        """Non-numeric values raise ValueError."""
        with pytest.raises(ValueError, match="cannot interpret"):
            to_beat(value)


class TestLoopArithmetic:
    """Tests for wrapping beats into a loop."""

    def test_loop_beat_wraps_negative(self) -> None:
        """Negative beats wrap from the end of the loop."""
        assert loop_beat(Fraction(-1, 2), Fraction(4)) == Fraction(7, 2)

    def test_loop_beat_stays_exact_over_many_loops(self) -> None:
        """Rational wrapping does not drift after many loops."""
        beat = Fraction(1, 3) + 1000 * Fraction(10, 3)
        assert loop_beat(beat, Fraction(10, 3)) == Fraction(1, 3)

    def test_loop_count_floors(self) -> None:
        """Loop count uses floor division."""
        assert loop_count(Fraction(9), Fraction(4)) == 2
        assert loop_count(Fraction(-1), Fraction(4)) == -1

    @pytest.mark.parametrize("length", [Fraction(0), Fraction(-1)])
    def test_non_positive_length_raises(self, length) -> None:
        """Wrapping requires a positive loop length."""
        with pytest.raises(ValueError, match="loop length"):
            loop_beat(Fraction(1), length)
        with pytest.raises(ValueError, match="loop length"):
            loop_count(Fraction(1), length)

    def test_beat_to_float(self) -> None:
        """Beats convert to floats for curve evaluation."""
        assert beat_to_float(Fraction(3, 4)) == 0.75
