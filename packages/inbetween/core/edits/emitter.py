"""Merge per-identifier edit plans into one undoable batch.

Several identifiers are usually rebuilt together (every sample touched by a
user edit). Each ``EditPlan`` addresses the same unedited timeline, so the
emitter re-derives the replay indices of the combined batch:

- replacements: one per slot, the last plan to touch a slot wins;
- insertions: sorted by unedited position, then by stacking rank, and
  re-indexed ``index = position + i`` for the i-th insert in that order;
- removals: shifted past the insertions before them, applied high to low.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, Field

from inbetween.core.errors import SampleInconsistency
from inbetween.core.interpolation.models import EditPlan, InsertEdit, RemoveEdit, ReplaceEdit

logger = logging.getLogger(__name__)


class EditBatch(BaseModel):
    """Edits for many identifiers, ready to apply in one undo group.

    Per keyframe, apply ``replacements`` (any order), then ``insertions`` in
    list order, then ``removals`` in list order (descending index).
    """

    model_config = ConfigDict(frozen=True)

    replacements: dict[int, list[ReplaceEdit]] = Field(default_factory=dict)
    insertions: dict[int, list[InsertEdit]] = Field(default_factory=dict)
    removals: dict[int, list[RemoveEdit]] = Field(default_factory=dict)
    diagnostics: list[SampleInconsistency] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.replacements or self.insertions or self.removals)

    @property
    def touched_keyframes(self) -> list[int]:
        return sorted(set(self.replacements) | set(self.insertions) | set(self.removals))


class EditBatchEmitter:
    """Collects plans and emits a consistent ``EditBatch``.

    Example:
        >>> emitter = EditBatchEmitter()
        >>> for sample_id in ("L1", "L2"):
        ...     emitter.add(engine.rebuild(sample_id, set(), timeline, 0))
        >>> batch = emitter.finalize()
    """

    def __init__(self) -> None:
        self._replacements: dict[int, dict[int, ReplaceEdit]] = {}
        self._insertions: dict[int, list[InsertEdit]] = {}
        self._removals: dict[int, dict[int, RemoveEdit]] = {}
        self._diagnostics: list[SampleInconsistency] = []
        self._plan_count = 0

    @property
    def diagnostics(self) -> list[SampleInconsistency]:
        return list(self._diagnostics)

    @property
    def plan_count(self) -> int:
        return self._plan_count

    def add(self, plan: EditPlan) -> None:
        """Merge ``plan`` into the pending batch."""
        for ki, edits in plan.replacements.items():
            slots = self._replacements.setdefault(ki, {})
            for edit in edits:
                if edit.index in slots:
                    logger.debug(f"Slot {edit.index} of keyframe {ki} replaced again by {plan.sample_id}")
                slots[edit.index] = edit
        for ki, inserts in plan.insertions.items():
            self._insertions.setdefault(ki, []).extend(inserts)
        for ki, removes in plan.removals.items():
            slots = self._removals.setdefault(ki, {})
            for edit in removes:
                slots.setdefault(edit.position, edit)
        self._diagnostics.extend(plan.diagnostics)
        self._plan_count += 1

    def finalize(self) -> EditBatch:
        """Build the batch from every plan added so far."""
        replacements = {
            ki: [slots[i] for i in sorted(slots)]
            for ki, slots in sorted(self._replacements.items())
            if slots
        }

        insertions: dict[int, list[InsertEdit]] = {}
        for ki, inserts in sorted(self._insertions.items()):
            ordered = sorted(inserts, key=lambda e: (e.position, e.rank))
            insertions[ki] = [
                edit.model_copy(update={"index": edit.position + i})
                for i, edit in enumerate(ordered)
            ]

        removals: dict[int, list[RemoveEdit]] = {}
        for ki, slots in sorted(self._removals.items()):
            replaced = self._replacements.get(ki, {})
            positions = [e.position for e in insertions.get(ki, [])]
            edits = []
            for position, edit in slots.items():
                if position in replaced:
                    logger.debug(
                        f"Dropping removal of slot {position} in keyframe {ki}: slot is replaced"
                    )
                    continue
                shift = sum(1 for p in positions if p <= position)
                edits.append(edit.model_copy(update={"index": position + shift}))
            if edits:
                removals[ki] = sorted(edits, key=lambda e: e.index, reverse=True)

        return EditBatch(
            replacements=replacements,
            insertions=insertions,
            removals=removals,
            diagnostics=list(self._diagnostics),
        )

    def clear(self) -> None:
        self._replacements.clear()
        self._insertions.clear()
        self._removals.clear()
        self._diagnostics.clear()
        self._plan_count = 0
