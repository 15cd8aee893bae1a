"""Timeline data model.

Keyframes hold identified drawable samples. Each sample is either authored
(``key``) or synthesized by the interpolation engine (``interpolated``).
All models are frozen: a ``Timeline`` value is itself an immutable snapshot.
"""

from __future__ import annotations

from enum import Enum
from fractions import Fraction

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_validator

from inbetween.core.timeline.beat import BeatField


class SampleKind(str, Enum):
    """Two-state tag carried on every drawable sample.

    Only the authoring layer moves a sample into ``KEY``. The engine writes
    ``INTERPOLATED`` samples and removes them, never the reverse.
    """

    KEY = "key"
    INTERPOLATED = "interpolated"


class ControlPoint(BaseModel):
    """One control point of a polyline."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    pressure: float = Field(default=1.0, ge=0.0)


class Polyline(BaseModel):
    """Ordered control points of a drawn line.

    Example:
        >>> line = Polyline.from_xy([(0, 0), (10, 0)])
        >>> line.point_count
        2
    """

    model_config = ConfigDict(frozen=True)

    points: tuple[ControlPoint, ...] = Field(default=())

    @classmethod
    def from_xy(cls, coords: list[tuple[float, float]]) -> Polyline:
        """Build a polyline from (x, y) pairs with full pressure."""
        return cls(points=tuple(ControlPoint(x=x, y=y) for x, y in coords))

    @classmethod
    def from_array(cls, values: np.ndarray) -> Polyline:
        """Build a polyline from an ``(n, 3)`` array of x, y, pressure."""
        values = np.asarray(values, dtype=float).reshape(-1, 3)
        return cls(
            points=tuple(
                ControlPoint(x=float(x), y=float(y), pressure=max(0.0, float(p)))
                for x, y, p in values
            )
        )

    def to_array(self) -> np.ndarray:
        """Return control points as an ``(n, 3)`` float array."""
        if not self.points:
            return np.zeros((0, 3), dtype=float)
        return np.array([(p.x, p.y, p.pressure) for p in self.points], dtype=float)

    @property
    def point_count(self) -> int:
        return len(self.points)

    @property
    def is_empty(self) -> bool:
        return not self.points

    def is_close(self, other: Polyline, tolerance: float = 0.0) -> bool:
        """Compare geometry within an absolute tolerance (0 = exact)."""
        if tolerance <= 0.0:
            return self == other
        if self.point_count != other.point_count:
            return False
        return bool(np.allclose(self.to_array(), other.to_array(), rtol=0.0, atol=tolerance))


class DrawableSample(BaseModel):
    """An identified polyline inside one keyframe.

    Attributes:
        id: Stable identifier shared by every sample of the same object
            across keyframes.
        geometry: Control points.
        kind: ``key`` when authored, ``interpolated`` when synthesized.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    geometry: Polyline = Field(default_factory=Polyline)
    kind: SampleKind = SampleKind.KEY

    @property
    def is_key(self) -> bool:
        return self.kind == SampleKind.KEY

    @property
    def is_interpolated(self) -> bool:
        return self.kind == SampleKind.INTERPOLATED

    def with_kind(self, kind: SampleKind) -> DrawableSample:
        return self.model_copy(update={"kind": kind})


class Keyframe(BaseModel):
    """A keyframe: an offset within the loop plus its ordered samples.

    Sample order is stacking order, bottom first. At most one sample per id
    is expected; duplicates are tolerated here and reported by the engine.
    """

    model_config = ConfigDict(frozen=True)

    beat: BeatField = Fraction(0)
    samples: tuple[DrawableSample, ...] = Field(default=())

    @property
    def is_key(self) -> bool:
        """True when any sample is authored, or the keyframe is empty."""
        return not self.samples or any(s.is_key for s in self.samples)

    @property
    def is_empty(self) -> bool:
        return not self.samples

    def sample_ids(self) -> list[str]:
        return [s.id for s in self.samples]

    def slot_of(self, sample_id: str) -> int | None:
        """Index of the first sample with ``sample_id``, or None."""
        for i, sample in enumerate(self.samples):
            if sample.id == sample_id:
                return i
        return None

    def slots_of(self, sample_id: str) -> list[int]:
        """Indices of every sample with ``sample_id``."""
        return [i for i, s in enumerate(self.samples) if s.id == sample_id]

    def key_slot(self, sample_id: str) -> int | None:
        """Index of the first ``key`` sample with ``sample_id``, or None."""
        for i, sample in enumerate(self.samples):
            if sample.id == sample_id and sample.is_key:
                return i
        return None

    def contains_sample(self, sample_id: str) -> bool:
        return self.slot_of(sample_id) is not None

    def contains_key(self, sample_id: str) -> bool:
        return self.key_slot(sample_id) is not None

    def with_samples(self, samples: list[DrawableSample] | tuple[DrawableSample, ...]) -> Keyframe:
        return self.model_copy(update={"samples": tuple(samples)})


class Timeline(BaseModel):
    """Cyclic sequence of keyframes.

    Invariants checked at construction: the first keyframe sits at beat 0,
    beats strictly increase, and the loop is at least as long as the last
    keyframe's beat. An empty keyframe list is representable but every index
    query on it fails.

    Example:
        >>> tl = Timeline(
        ...     keyframes=(Keyframe(beat=0), Keyframe(beat=1)),
        ...     loop_length=2,
        ... )
        >>> tl.keyframe_count
        2
    """

    model_config = ConfigDict(frozen=True)

    keyframes: tuple[Keyframe, ...] = Field(default=())
    loop_length: BeatField = Fraction(1)

    @model_validator(mode="after")
    def _validate_ordering(self) -> Timeline:
        if self.loop_length < 0:
            raise ValueError(f"loop_length must be >= 0, got {self.loop_length}")
        if not self.keyframes:
            return self
        if self.keyframes[0].beat != 0:
            raise ValueError(f"first keyframe must be at beat 0, got {self.keyframes[0].beat}")
        for previous, current in zip(self.keyframes, self.keyframes[1:]):
            if current.beat <= previous.beat:
                raise ValueError(
                    f"keyframe beats must strictly increase: {previous.beat} then {current.beat}"
                )
        if self.loop_length < self.keyframes[-1].beat:
            raise ValueError(
                f"loop_length {self.loop_length} shorter than last keyframe beat "
                f"{self.keyframes[-1].beat}"
            )
        return self

    @property
    def keyframe_count(self) -> int:
        return len(self.keyframes)

    @property
    def is_empty(self) -> bool:
        return not self.keyframes

    def keyframe_duration(self, index: int) -> Fraction:
        """Beats from keyframe ``index`` to the next one (or to the loop end)."""
        if index + 1 < len(self.keyframes):
            return self.keyframes[index + 1].beat - self.keyframes[index].beat
        return max(self.loop_length - self.keyframes[index].beat, Fraction(0))

    def with_keyframes(self, keyframes: list[Keyframe] | tuple[Keyframe, ...]) -> Timeline:
        # Rebuild through the constructor so ordering is re-validated.
        return Timeline(keyframes=tuple(keyframes), loop_length=self.loop_length)
