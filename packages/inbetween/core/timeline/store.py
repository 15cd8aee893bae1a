"""Mutable keyframe store.

``Timeline`` snapshots are immutable; the store owns the current snapshot
and swaps it on every change. Batches are validated against the current
snapshot before anything is swapped, so a failed apply leaves the store
untouched.
"""

from __future__ import annotations

from fractions import Fraction
import logging
from typing import TYPE_CHECKING

from inbetween.core.errors import KeyframeIndexError
from inbetween.core.timeline.beat import BeatLike, to_beat
from inbetween.core.timeline.index import TimelineIndex
from inbetween.core.timeline.models import DrawableSample, Keyframe, Timeline

if TYPE_CHECKING:
    from inbetween.core.edits.emitter import EditBatch

logger = logging.getLogger(__name__)


class KeyframeStore:
    """Holds the current timeline and applies edits to it."""

    def __init__(self, timeline: Timeline | None = None) -> None:
        self._timeline = timeline or Timeline()

    @property
    def timeline(self) -> Timeline:
        return self._timeline

    @property
    def index(self) -> TimelineIndex:
        return TimelineIndex(self._timeline)

    def snapshot(self) -> Timeline:
        """Current timeline; safe to keep, snapshots never change."""
        return self._timeline

    def restore(self, timeline: Timeline) -> None:
        self._timeline = timeline

    def keyframe(self, index: int) -> Keyframe:
        """Keyframe at ``index``.

        Raises:
            KeyframeIndexError: If ``index`` is outside ``[0, count)``.
        """
        self._check_index(index)
        return self._timeline.keyframes[index]

    def keyframe_at_root(self, root_index: int) -> Keyframe:
        return self._timeline.keyframes[self.index.index_at_root(root_index)]

    def insert_keyframe(
        self, beat: BeatLike, samples: list[DrawableSample] | None = None
    ) -> int:
        """Insert an empty (or pre-filled) keyframe at ``beat``.

        Returns:
            Index of the new keyframe.

        Raises:
            ValueError: If a keyframe already sits at ``beat`` or the beat is
                outside the loop.
        """
        beat = to_beat(beat)
        keyframes = list(self._timeline.keyframes)
        position = sum(1 for kf in keyframes if kf.beat < beat)
        keyframes.insert(position, Keyframe(beat=beat, samples=tuple(samples or ())))
        self._timeline = self._timeline.with_keyframes(keyframes)
        logger.debug(f"Inserted keyframe {position} at beat {beat}")
        return position

    def remove_keyframe(self, index: int) -> Keyframe:
        """Remove keyframe ``index`` and return it.

        Raises:
            KeyframeIndexError: If ``index`` is out of range.
            ValueError: If removing keyframe 0 would leave no keyframe at beat 0.
        """
        self._check_index(index)
        keyframes = list(self._timeline.keyframes)
        removed = keyframes.pop(index)
        self._timeline = self._timeline.with_keyframes(keyframes)
        logger.debug(f"Removed keyframe {index}")
        return removed

    def replace_samples(self, index: int, samples: list[DrawableSample]) -> None:
        self._check_index(index)
        keyframes = list(self._timeline.keyframes)
        keyframes[index] = keyframes[index].with_samples(samples)
        self._timeline = self._timeline.with_keyframes(keyframes)

    def set_loop_length(self, loop_length: BeatLike) -> None:
        self._timeline = Timeline(keyframes=self._timeline.keyframes, loop_length=to_beat(loop_length))

    def apply(self, batch: EditBatch) -> None:
        """Apply ``batch`` atomically.

        Raises:
            KeyframeIndexError: If the batch addresses a missing keyframe.
            ValueError: If a slot is out of range or a removal does not find
                the identifier it expects.
        """
        keyframes = list(self._timeline.keyframes)
        for ki in batch.touched_keyframes:
            self._check_index(ki)
            samples = list(keyframes[ki].samples)

            for edit in batch.replacements.get(ki, []):
                if not 0 <= edit.index < len(samples):
                    raise ValueError(f"replacement slot {edit.index} out of range in keyframe {ki}")
                samples[edit.index] = edit.sample
            for edit in batch.insertions.get(ki, []):
                if not 0 <= edit.index <= len(samples):
                    raise ValueError(f"insertion slot {edit.index} out of range in keyframe {ki}")
                samples.insert(edit.index, edit.sample)
            for edit in batch.removals.get(ki, []):
                if not 0 <= edit.index < len(samples) or samples[edit.index].id != edit.sample_id:
                    raise ValueError(
                        f"stale removal in keyframe {ki}: expected {edit.sample_id!r} at slot {edit.index}"
                    )
                del samples[edit.index]

            keyframes[ki] = keyframes[ki].with_samples(samples)

        self._timeline = self._timeline.with_keyframes(keyframes)
        logger.debug(f"Applied batch to keyframes {batch.touched_keyframes}")

    def _check_index(self, index: int) -> None:
        count = self._timeline.keyframe_count
        if not 0 <= index < count:
            raise KeyframeIndexError(index, count)
