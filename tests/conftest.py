"""Shared pytest fixtures for inbetween tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from inbetween.core.config.loader import clear_app_config_cache
from inbetween.core.timeline.models import (
    DrawableSample,
    Keyframe,
    Polyline,
    SampleKind,
    Timeline,
)

SampleFactory = Callable[..., DrawableSample]

# ============================================================================
# Geometry
# ============================================================================

DEFAULT_COORDS = [(0.0, 0.0), (10.0, 0.0)]


@pytest.fixture
def sample() -> SampleFactory:
    """Factory for drawable samples: ``sample("L1", [(0, 0), (10, 0)], kind=...)``."""

    def make(
        sample_id: str,
        coords: list[tuple[float, float]] | None = None,
        kind: SampleKind = SampleKind.KEY,
    ) -> DrawableSample:
        return DrawableSample(
            id=sample_id,
            geometry=Polyline.from_xy(coords if coords is not None else DEFAULT_COORDS),
            kind=kind,
        )

    return make


# ============================================================================
# Timelines
# ============================================================================


def _make_timeline(frames: list[list[DrawableSample]], loop_length: int | None = None) -> Timeline:
    """Keyframes at beats 0, 1, 2, ... holding ``frames``."""
    return Timeline(
        keyframes=tuple(Keyframe(beat=i, samples=tuple(s)) for i, s in enumerate(frames)),
        loop_length=loop_length if loop_length is not None else len(frames),
    )


@pytest.fixture
def timeline_of() -> Callable[..., Timeline]:
    """Factory: ``timeline_of([[samples of kf 0], [samples of kf 1], ...])``."""
    return _make_timeline


@pytest.fixture
def empty_timeline() -> Timeline:
    return Timeline(keyframes=(), loop_length=4)


@pytest.fixture
def four_beat_timeline() -> Timeline:
    """Four empty keyframes at beats 0..3, loop length 4."""
    return _make_timeline([[], [], [], []])


@pytest.fixture
def uneven_timeline() -> Timeline:
    """Keyframes at beats 0, 1/2, 2 with loop length 3."""
    return Timeline(
        keyframes=(Keyframe(beat=0), Keyframe(beat="1/2"), Keyframe(beat=2)),
        loop_length=3,
    )


# ============================================================================
# Config
# ============================================================================


@pytest.fixture(autouse=True)
def _reset_config_cache():
    clear_app_config_cache()
    yield
    clear_app_config_cache()
