"""Error taxonomy for timeline indexing and interpolation.

Timeline preconditions fail fast with exceptions. Malformed sample sets are
reported as ``SampleInconsistency`` diagnostics instead, so one bad keyframe
never aborts a rebuild spanning the rest of the timeline.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TimelineError(ValueError):
    """Base class for hard timeline precondition failures."""


class EmptyTimelineError(TimelineError):
    """Raised when index arithmetic is requested on a timeline with no keyframes."""

    def __init__(self, message: str = "timeline has no keyframes") -> None:
        super().__init__(message)


class InvalidLoopLengthError(TimelineError):
    """Raised when the loop length is zero or negative."""


class KeyframeIndexError(IndexError):
    """Raised when a keyframe index is outside the store's bounds."""

    def __init__(self, index: int, count: int) -> None:
        super().__init__(f"keyframe index {index} out of range for {count} keyframes")
        self.index = index
        self.count = count


class InconsistencyKind(str, Enum):
    """Kind of structural problem found in a keyframe's sample list."""

    DUPLICATE_ID = "duplicate_id"  # same id appears more than once
    SHADOWED_KEY = "shadowed_key"  # an interpolated sample precedes the key for its id


class SampleInconsistency(BaseModel):
    """Diagnostic describing an inconsistent sample set.

    The engine resolves the inconsistency locally (first match wins) and
    returns this record alongside the edit plan.

    Attributes:
        kind: What went wrong.
        keyframe_index: Keyframe holding the malformed sample list.
        sample_id: Identifier the inconsistency concerns.
        slots: In-keyframe indices of every sample involved.
    """

    model_config = ConfigDict(frozen=True)

    kind: InconsistencyKind
    keyframe_index: int = Field(ge=0)
    sample_id: str
    slots: tuple[int, ...] = Field(default=())

    def describe(self) -> str:
        """Human-readable one-line summary."""
        return (
            f"{self.kind.value}: id={self.sample_id} keyframe={self.keyframe_index} "
            f"slots={list(self.slots)}"
        )
