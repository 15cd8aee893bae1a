"""Tests for the keyed cyclic interpolation curve."""

from __future__ import annotations

import numpy as np
import pytest

from inbetween.core.curves.interpolation import CurveKey, Interpolation, KeyType


def _key(value: float, time: float, key_type: KeyType = KeyType.SPLINE) -> CurveKey:
    return CurveKey(value=np.array([value]), time=time, type=key_type)


class TestTimeResult:
    """Tests for segment lookup."""

    def test_segment_lookup(self) -> None:
        curve = Interpolation([_key(0, 0), _key(1, 2)], duration=4)
        result = curve.time_result(3.0)
        assert result is not None
        assert (result.index, result.internal_time, result.section_time) == (1, 1.0, 2.0)

    def test_time_past_duration(self) -> None:
        curve = Interpolation([_key(0, 0), _key(1, 2)], duration=4)
        assert curve.time_result(4.5) is None
        assert curve.value_at(4.5) is None

    def test_empty_curve(self) -> None:
        curve = Interpolation([], duration=4)
        assert curve.time_result(1.0) is None
        assert curve.value_at(1.0) is None

    def test_keys_are_sorted(self) -> None:
        curve = Interpolation([_key(1, 2), _key(0, 0)], duration=4)
        assert [k.time for k in curve.keys] == [0, 2]


class TestSegmentTypes:
    """Tests for step, linear and spline segments."""

    def test_step_holds(self) -> None:
        curve = Interpolation([_key(3, 0, KeyType.STEP), _key(9, 2)], duration=4)
        assert curve.value_at(1.5)[0] == 3

    def test_linear_blends(self) -> None:
        curve = Interpolation([_key(0, 0, KeyType.LINEAR), _key(10, 2)], duration=4)
        assert curve.value_at(0.5)[0] == pytest.approx(2.5)

    def test_spline_wraps_the_seam(self) -> None:
        """The last segment blends back to the first key one loop later."""
        curve = Interpolation([_key(0, 0), _key(4, 2)], duration=4)
        assert curve.value_at(1.0)[0] == pytest.approx(2.0)
        assert curve.value_at(3.0)[0] == pytest.approx(2.0)

    def test_step_neighbour_closes_the_curve(self) -> None:
        """A step neighbour is not used as a spline support point."""
        curve = Interpolation(
            [_key(0, 0, KeyType.STEP), _key(0, 1), _key(10, 2, KeyType.STEP)],
            duration=3,
        )
        assert curve.value_at(1.5)[0] == pytest.approx(5.0)

    def test_non_loop_last_key_holds(self) -> None:
        curve = Interpolation([_key(0, 0), _key(4, 2)], duration=4, is_loop=False)
        assert curve.value_at(3.0)[0] == 4

    def test_padded_keys_outside_loop(self) -> None:
        """Keys outside [0, duration) act as in-list neighbours."""
        keys = [_key(4, -2), _key(0, 0), _key(4, 2), _key(0, 4)]
        curve = Interpolation(keys, duration=4)
        assert curve.value_at(1.0)[0] == pytest.approx(2.0)

    def test_row_count_mismatch_is_conformed(self) -> None:
        """A shorter next value is filled from the current value."""
        a = CurveKey(value=np.array([[0.0], [0.0]]), time=0, type=KeyType.LINEAR)
        b = CurveKey(value=np.array([[2.0]]), time=2)
        curve = Interpolation([a, b], duration=4)
        assert curve.value_at(1.0).tolist() == [[1.0], [0.0]]
