"""Edit plan models produced by the interpolation engine.

Every edit addresses one keyframe by index and one slot inside its sample
list. ``position`` is always the slot in the unedited keyframe; ``index`` is
the slot at which the edit is applied when a keyframe's edits are replayed
in order: replacements, then insertions, then removals.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from inbetween.core.errors import SampleInconsistency
from inbetween.core.timeline.models import DrawableSample


class ScrubDirection(str, Enum):
    """Direction the playhead moved before the rebuild was requested."""

    FORWARD = "forward"
    BACKWARD = "backward"
    NONE = "none"

    @classmethod
    def from_root_indices(cls, old_root_index: int, new_root_index: int) -> ScrubDirection:
        """Derive the direction from a playhead move."""
        if old_root_index < new_root_index:
            return cls.FORWARD
        if old_root_index > new_root_index:
            return cls.BACKWARD
        return cls.NONE


class ReplaceEdit(BaseModel):
    """Overwrite the sample at slot ``index``."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    sample: DrawableSample


class InsertEdit(BaseModel):
    """Insert a sample.

    Attributes:
        position: Slot in the unedited keyframe the sample goes in front of.
        index: Slot used when the keyframe's insertions are applied in order.
        rank: Slot of the sample in its z-order reference keyframe; orders
            inserts from different plans that share a position.
        sample: Sample to insert.
    """

    model_config = ConfigDict(frozen=True)

    position: int = Field(ge=0)
    index: int = Field(ge=0)
    rank: int = Field(default=0, ge=0)
    sample: DrawableSample


class RemoveEdit(BaseModel):
    """Remove a sample.

    Attributes:
        position: Slot in the unedited keyframe.
        index: Slot after the keyframe's insertions have been applied.
        sample_id: Identifier expected at that slot.
    """

    model_config = ConfigDict(frozen=True)

    position: int = Field(ge=0)
    index: int = Field(ge=0)
    sample_id: str


class EditPlan(BaseModel):
    """Edits needed to rebuild one identifier, keyed by keyframe index.

    Lists inside each keyframe are sorted by slot. Diagnostics report
    inconsistent sample sets that were resolved locally.
    """

    sample_id: str
    replacements: dict[int, list[ReplaceEdit]] = Field(default_factory=dict)
    insertions: dict[int, list[InsertEdit]] = Field(default_factory=dict)
    removals: dict[int, list[RemoveEdit]] = Field(default_factory=dict)
    diagnostics: list[SampleInconsistency] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when the plan changes nothing."""
        return not (self.replacements or self.insertions or self.removals)

    @property
    def touched_keyframes(self) -> list[int]:
        return sorted(set(self.replacements) | set(self.insertions) | set(self.removals))

    @property
    def edit_count(self) -> int:
        return (
            sum(len(v) for v in self.replacements.values())
            + sum(len(v) for v in self.insertions.values())
            + sum(len(v) for v in self.removals.values())
        )
