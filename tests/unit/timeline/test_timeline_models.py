"""Tests for timeline data models."""

from __future__ import annotations

from fractions import Fraction

import numpy as np
from pydantic import ValidationError
import pytest

from inbetween.core.timeline.models import (
    ControlPoint,
    DrawableSample,
    Keyframe,
    Polyline,
    SampleKind,
    Timeline,
)


class TestPolyline:
    """Tests for Polyline geometry."""

    def test_array_round_trip_keeps_pressure(self) -> None:
        """to_array and from_array preserve x, y and pressure."""
        line = Polyline(points=(ControlPoint(x=1, y=2, pressure=0.5), ControlPoint(x=3, y=4)))
        arr = line.to_array()
        assert arr.shape == (2, 3)
        assert Polyline.from_array(arr) == line

    def test_empty_polyline_array_shape(self) -> None:
        """An empty polyline is a (0, 3) array."""
        assert Polyline().to_array().shape == (0, 3)
        assert Polyline().is_empty

    def test_from_array_clamps_negative_pressure(self) -> None:
        """Pressure never goes below zero."""
        line = Polyline.from_array(np.array([[0.0, 0.0, -0.2]]))
        assert line.points[0].pressure == 0.0

    def test_is_close_exact_and_tolerant(self) -> None:
        """Zero tolerance compares exactly; a tolerance allows small drift."""
        a = Polyline.from_xy([(0, 0), (10, 0)])
        b = Polyline.from_xy([(0, 0), (10, 0.01)])
        assert a.is_close(a)
        assert not a.is_close(b)
        assert a.is_close(b, tolerance=0.1)

    def test_is_close_requires_same_point_count(self) -> None:
        a = Polyline.from_xy([(0, 0), (10, 0)])
        b = Polyline.from_xy([(0, 0), (5, 0), (10, 0)])
        assert not a.is_close(b, tolerance=1.0)


class TestDrawableSample:
    """Tests for DrawableSample."""

    def test_default_kind_is_key(self) -> None:
        sample = DrawableSample(id="L1")
        assert sample.is_key
        assert not sample.is_interpolated

    def test_with_kind_returns_copy(self) -> None:
        """Samples are immutable; with_kind returns a new sample."""
        sample = DrawableSample(id="L1")
        copy = sample.with_kind(SampleKind.INTERPOLATED)
        assert copy.is_interpolated
        assert sample.is_key

    def test_empty_id_rejected(self) -> None:
        with pytest.raises(ValidationError):
            DrawableSample(id="")

    def test_sample_is_frozen(self) -> None:
        sample = DrawableSample(id="L1")
        with pytest.raises(ValidationError):
            sample.id = "L2"  # type: ignore[misc]


class TestKeyframe:
    """Tests for Keyframe queries."""

    def test_empty_keyframe_is_key(self) -> None:
        """An empty keyframe counts as a key keyframe."""
        assert Keyframe().is_key

    def test_only_interpolated_is_not_key(self, sample) -> None:
        kf = Keyframe(samples=(sample("L1", kind=SampleKind.INTERPOLATED),))
        assert not kf.is_key

    def test_slot_queries(self, sample) -> None:
        """Slot lookups find the first match; key_slot skips interpolated samples."""
        kf = Keyframe(
            samples=(
                sample("A"),
                sample("L1", kind=SampleKind.INTERPOLATED),
                sample("L1"),
            )
        )
        assert kf.sample_ids() == ["A", "L1", "L1"]
        assert kf.slot_of("L1") == 1
        assert kf.slots_of("L1") == [1, 2]
        assert kf.key_slot("L1") == 2
        assert kf.contains_key("L1")
        assert kf.slot_of("missing") is None
        assert not kf.contains_sample("missing")

    def test_beat_accepts_strings(self) -> None:
        assert Keyframe(beat="3/2").beat == Fraction(3, 2)


class TestTimeline:
    """Tests for Timeline validation."""

    def test_valid_timeline(self, uneven_timeline: Timeline) -> None:
        assert uneven_timeline.keyframe_count == 3
        assert uneven_timeline.loop_length == 3

    def test_first_keyframe_must_be_at_zero(self) -> None:
        with pytest.raises(ValidationError, match="beat 0"):
            Timeline(keyframes=(Keyframe(beat=1),), loop_length=2)

    def test_beats_must_strictly_increase(self) -> None:
        with pytest.raises(ValidationError, match="strictly increase"):
            Timeline(keyframes=(Keyframe(beat=0), Keyframe(beat=0)), loop_length=2)

    def test_loop_must_cover_last_keyframe(self) -> None:
        with pytest.raises(ValidationError, match="shorter than"):
            Timeline(keyframes=(Keyframe(beat=0), Keyframe(beat=3)), loop_length=2)

    def test_negative_loop_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Timeline(keyframes=(), loop_length=-1)

    def test_empty_timeline_is_representable(self, empty_timeline: Timeline) -> None:
        assert empty_timeline.is_empty

    def test_keyframe_duration(self, uneven_timeline: Timeline) -> None:
        """Durations run to the next keyframe, the last one to the loop end."""
        assert uneven_timeline.keyframe_duration(0) == Fraction(1, 2)
        assert uneven_timeline.keyframe_duration(1) == Fraction(3, 2)
        assert uneven_timeline.keyframe_duration(2) == Fraction(1)

    def test_json_round_trip_keeps_exact_beats(self, uneven_timeline: Timeline) -> None:
        """Beats serialize as fraction strings and read back exactly."""
        data = uneven_timeline.model_dump(mode="json")
        assert data["keyframes"][1]["beat"] == "1/2"
        assert Timeline.model_validate(data) == uneven_timeline

    def test_with_keyframes_revalidates(self, uneven_timeline: Timeline) -> None:
        with pytest.raises(ValidationError):
            uneven_timeline.with_keyframes(list(reversed(uneven_timeline.keyframes)))
