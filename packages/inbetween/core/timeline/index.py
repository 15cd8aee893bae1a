"""Timeline index model.

Maps an unbounded, loop-aware playback position ("root" index or beat) onto
the finite keyframe array, and back. Root indices count keyframes across
repeated loops: ``root = loop_count * keyframe_count + index``.

Inter indices address only the keyframes a scrub should snap to (keyframe 0
and every key keyframe); they drive the drag preview.
"""

from __future__ import annotations

from bisect import bisect_right
from fractions import Fraction
import logging

from inbetween.core.errors import EmptyTimelineError, InvalidLoopLengthError
from inbetween.core.timeline.beat import BeatLike, loop_beat, loop_count, to_beat
from inbetween.core.timeline.models import Keyframe, Timeline

logger = logging.getLogger(__name__)


class TimelineIndex:
    """Cyclic index arithmetic over one timeline snapshot.

    Every query fails fast with ``EmptyTimelineError`` on an empty timeline;
    beat-based queries additionally require a positive loop length.

    Example:
        >>> index = TimelineIndex(timeline)  # 4 keyframes
        >>> index.index_at_root(-1)
        3
        >>> index.loop_count(-1)
        -1
    """

    def __init__(self, timeline: Timeline) -> None:
        self.timeline = timeline
        self._beats = [kf.beat for kf in timeline.keyframes]

    @property
    def keyframes(self) -> tuple[Keyframe, ...]:
        return self.timeline.keyframes

    @property
    def keyframe_count(self) -> int:
        self._require_keyframes()
        return len(self._beats)

    @property
    def loop_length(self) -> Fraction:
        return self.timeline.loop_length

    # ------------------------------------------------------------------
    # Root index <-> keyframe index
    # ------------------------------------------------------------------

    def index_at_root(self, root_index: int) -> int:
        """Keyframe index for a root index, normalized into ``[0, count)``."""
        return root_index % self.keyframe_count

    def loop_count(self, root_index: int) -> int:
        """Whole loops elapsed at a root index (floor division)."""
        return root_index // self.keyframe_count

    def root_index(self, index: int, loops: int = 0) -> int:
        """Root index of keyframe ``index`` in loop ``loops``."""
        return loops * self.keyframe_count + index

    # ------------------------------------------------------------------
    # Beats
    # ------------------------------------------------------------------

    def index_at_beat(self, beat: BeatLike) -> int:
        """Keyframe whose span contains ``beat`` (wrapped into the loop)."""
        local = self._local_beat(to_beat(beat))
        return max(bisect_right(self._beats, local) - 1, 0)

    def root_index_at_beat(self, root_beat: BeatLike) -> int:
        """Root index of the keyframe whose span contains ``root_beat``."""
        root_beat = to_beat(root_beat)
        local = self._local_beat(root_beat)
        loops = loop_count(root_beat, self.loop_length)
        return self.root_index(self.index_at_beat(local), loops)

    def nearest_root_index(self, root_beat: BeatLike) -> int:
        """Root index of the keyframe start nearest to ``root_beat``.

        Positions past the midpoint of a keyframe snap to the next keyframe;
        an exact midpoint snaps to the earlier one. The result never
        decreases as ``root_beat`` increases.
        """
        root_beat = to_beat(root_beat)
        local = self._local_beat(root_beat)
        index = self.index_at_beat(local)
        root_i = self.root_index(index, loop_count(root_beat, self.loop_length))
        offset = local - self._beats[index]
        half = self.timeline.keyframe_duration(index) / 2
        return root_i + 1 if offset > half else root_i

    def root_beat_at_root(self, root_index: int) -> Fraction:
        """Beat at which keyframe ``root_index`` starts, counting loops."""
        self._require_loop()
        index = self.index_at_root(root_index)
        return self.loop_count(root_index) * self.loop_length + self._beats[index]

    def internal_beat(self, root_beat: BeatLike) -> Fraction:
        """Offset of ``root_beat`` from the start of its keyframe."""
        local = self._local_beat(to_beat(root_beat))
        return local - self._beats[self.index_at_beat(local)]

    def keyframe_duration(self, index: int) -> Fraction:
        self._require_keyframes()
        return self.timeline.keyframe_duration(index)

    # ------------------------------------------------------------------
    # Inter indices (scrub snapping)
    # ------------------------------------------------------------------

    @property
    def inter_indexes(self) -> list[int]:
        """Keyframe indices a scrub snaps to: keyframe 0 and every key keyframe."""
        self._require_keyframes()
        return [i for i, kf in enumerate(self.keyframes) if i == 0 or kf.is_key]

    def inter_index_at(self, index: int) -> int:
        """Inter index of the snap point at or before keyframe ``index``."""
        return bisect_right(self.inter_indexes, index) - 1

    def index_at_inter(self, inter_index: int) -> int:
        """Keyframe index addressed by an inter index (wrapped)."""
        inters = self.inter_indexes
        return inters[inter_index % len(inters)]

    def root_index_at_root_inter(self, root_inter_index: int) -> int:
        """Root index of the snap keyframe addressed by a root inter index."""
        inters = self.inter_indexes
        loops, inter_index = divmod(root_inter_index, len(inters))
        return self.root_index(inters[inter_index], loops)

    def root_inter_index_at_root(self, root_index: int) -> int:
        """Root inter index of the snap point at or before ``root_index``."""
        inters = self.inter_indexes
        index = self.index_at_root(root_index)
        return self.loop_count(root_index) * len(inters) + self.inter_index_at(index)

    def next_key_root_index(self, root_index: int) -> int | None:
        """Next root index landing on a key keyframe, or None if there is none."""
        start = self.index_at_root(root_index)
        candidate = root_index + 1
        while self.index_at_root(candidate) != start:
            if self.keyframes[self.index_at_root(candidate)].is_key:
                return candidate
            candidate += 1
        return None

    def previous_key_root_index(self, root_index: int) -> int | None:
        """Previous root index landing on a key keyframe, or None if there is none."""
        start = self.index_at_root(root_index)
        candidate = root_index - 1
        while self.index_at_root(candidate) != start:
            if self.keyframes[self.index_at_root(candidate)].is_key:
                return candidate
            candidate -= 1
        return None

    # ------------------------------------------------------------------

    def _local_beat(self, beat: Fraction) -> Fraction:
        self._require_loop()
        return loop_beat(beat, self.loop_length)

    def _require_keyframes(self) -> None:
        if not self._beats:
            raise EmptyTimelineError()

    def _require_loop(self) -> None:
        self._require_keyframes()
        if self.loop_length <= 0:
            raise InvalidLoopLengthError(f"loop length must be > 0, got {self.loop_length}")
