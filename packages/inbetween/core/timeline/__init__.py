"""Timeline data model, cyclic index arithmetic and the keyframe store."""

from inbetween.core.timeline.beat import (
    Beat,
    BeatField,
    BeatLike,
    beat_to_float,
    loop_beat,
    loop_count,
    to_beat,
)
from inbetween.core.timeline.index import TimelineIndex
from inbetween.core.timeline.models import (
    ControlPoint,
    DrawableSample,
    Keyframe,
    Polyline,
    SampleKind,
    Timeline,
)
from inbetween.core.timeline.store import KeyframeStore

__all__ = [
    "Beat",
    "BeatField",
    "BeatLike",
    "ControlPoint",
    "DrawableSample",
    "Keyframe",
    "KeyframeStore",
    "Polyline",
    "SampleKind",
    "Timeline",
    "TimelineIndex",
    "beat_to_float",
    "loop_beat",
    "loop_count",
    "to_beat",
]
