"""Per-object interpolation engine.

Rebuilds every synthesized (``interpolated``) sample of one identifier from
the keyframes where that identifier is authored (``key``):

1. Collect the key samples of the identifier, in keyframe order.
2. No keys: the identifier is extinct, its stray interpolated samples go.
   One key: every other keyframe receives a constant copy.
3. Two or more keys: find the authored run around the reference keyframe,
   pad the key list across the loop seam, type each segment (spline or
   step), condition the lines, fit one cyclic curve and evaluate it at every
   keyframe of the run that has no key.
4. Compare with what the keyframes already hold and emit only the edits
   that change something.

The engine never mutates the timeline; it returns an ``EditPlan``.
"""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np

from inbetween.core.config.models import InterpolationConfig
from inbetween.core.curves.interpolation import CurveKey, Interpolation, KeyType
from inbetween.core.curves.padding import PaddedKeys, TimedKey, pad_cyclic
from inbetween.core.curves.polyline import conform_point_counts, decross
from inbetween.core.errors import (
    InconsistencyKind,
    InvalidLoopLengthError,
    SampleInconsistency,
)
from inbetween.core.interpolation.models import (
    EditPlan,
    InsertEdit,
    RemoveEdit,
    ReplaceEdit,
    ScrubDirection,
)
from inbetween.core.timeline.beat import beat_to_float
from inbetween.core.timeline.index import TimelineIndex
from inbetween.core.timeline.models import (
    DrawableSample,
    Keyframe,
    Polyline,
    SampleKind,
    Timeline,
)
from inbetween.core.utils.logging import get_logger, log_performance


class _PlanBuilder:
    """Accumulates the edits of one rebuild against an unedited timeline."""

    def __init__(
        self,
        sample_id: str,
        replacement_ids: frozenset[str],
        timeline: Timeline,
        tolerance: float,
    ) -> None:
        self.sample_id = sample_id
        self.replacement_ids = replacement_ids
        self.timeline = timeline
        self.tolerance = tolerance
        self.log = get_logger(__name__, sample_id=sample_id)
        self.replacements: dict[int, list[ReplaceEdit]] = {}
        self.insertions: dict[int, list[InsertEdit]] = {}
        self.removals: dict[int, list[RemoveEdit]] = {}
        self.diagnostics: list[SampleInconsistency] = []

    def write(self, ki: int, sample: DrawableSample, stacking: tuple[set[str], int]) -> None:
        """Put ``sample`` into keyframe ``ki``: replace its slot or insert it.

        ``stacking`` is the set of ids drawn above the sample and its slot in
        the z-order reference keyframe; an insert goes in front of the first
        of those ids and carries the slot as its rank.
        """
        keyframe = self.timeline.keyframes[ki]
        slot = keyframe.slot_of(self.sample_id)
        if slot is None:
            slot = next(
                (i for i, s in enumerate(keyframe.samples) if s.id in self.replacement_ids),
                None,
            )
        if slot is not None:
            if not self._same(keyframe.samples[slot], sample):
                self.replacements.setdefault(ki, []).append(ReplaceEdit(index=slot, sample=sample))
            self.remove_duplicates(ki, keep=slot)
            return

        upper_ids, rank = stacking
        position = next(
            (i for i, s in enumerate(keyframe.samples) if s.id in upper_ids),
            len(keyframe.samples),
        )
        pending = self.insertions.setdefault(ki, [])
        pending.append(
            InsertEdit(position=position, index=position + len(pending), rank=rank, sample=sample)
        )

    def remove_duplicates(self, ki: int, keep: int | None) -> None:
        """Remove interpolated samples of the id other than slot ``keep``."""
        keyframe = self.timeline.keyframes[ki]
        for slot in keyframe.slots_of(self.sample_id):
            if slot != keep and keyframe.samples[slot].is_interpolated:
                self.removals.setdefault(ki, []).append(
                    RemoveEdit(position=slot, index=slot, sample_id=self.sample_id)
                )

    def report(self, kind: InconsistencyKind, ki: int, slots: list[int]) -> None:
        diagnostic = SampleInconsistency(
            kind=kind, keyframe_index=ki, sample_id=self.sample_id, slots=tuple(slots)
        )
        self.log.warning(
            f"Inconsistent sample set resolved locally: {diagnostic.describe()}",
            extra={"keyframe_index": ki, "inconsistency": kind.value},
        )
        self.diagnostics.append(diagnostic)

    def build(self) -> EditPlan:
        return EditPlan(
            sample_id=self.sample_id,
            replacements={
                ki: sorted(edits, key=lambda e: e.index)
                for ki, edits in sorted(self.replacements.items())
            },
            insertions={ki: edits for ki, edits in sorted(self.insertions.items())},
            removals={
                ki: sorted(edits, key=lambda e: e.index)
                for ki, edits in sorted(self.removals.items())
            },
            diagnostics=list(self.diagnostics),
        )

    def _same(self, old: DrawableSample, new: DrawableSample) -> bool:
        return (
            old.id == new.id
            and old.kind == new.kind
            and old.geometry.is_close(new.geometry, self.tolerance)
        )


class InterpolationEngine:
    """Rebuilds interpolated samples for one identifier at a time.

    Args:
        config: Curve construction tuning. Defaults to ``InterpolationConfig()``.

    Example:
        >>> engine = InterpolationEngine()
        >>> plan = engine.rebuild("L1", set(), timeline, reference_root_index=0)
        >>> plan.is_empty
        False
    """

    def __init__(self, config: InterpolationConfig | None = None) -> None:
        self.config = config or InterpolationConfig()

    @log_performance
    def rebuild(
        self,
        sample_id: str,
        replacement_ids: Iterable[str],
        timeline: Timeline,
        reference_root_index: int,
        scrub_direction: ScrubDirection = ScrubDirection.NONE,
    ) -> EditPlan:
        """Compute the edits that resynthesize ``sample_id`` across the timeline.

        Args:
            sample_id: Identifier to rebuild.
            replacement_ids: Identifiers whose slot may be taken over by
                ``sample_id`` in keyframes that do not hold it yet.
            timeline: Snapshot to read; never mutated.
            reference_root_index: Current playhead position (root index).
            scrub_direction: Direction the playhead moved before the edit.

        Returns:
            EditPlan with replacements, insertions, removals and diagnostics.

        Raises:
            EmptyTimelineError: If the timeline has no keyframes.
            InvalidLoopLengthError: If the loop length is not positive.
        """
        index = TimelineIndex(timeline)
        count = index.keyframe_count
        if timeline.loop_length <= 0:
            raise InvalidLoopLengthError(f"loop length must be > 0, got {timeline.loop_length}")
        reference = index.index_at_root(reference_root_index)

        builder = _PlanBuilder(
            sample_id,
            frozenset(replacement_ids),
            timeline,
            self.config.equality_tolerance,
        )
        keys = self._collect_keys(builder)

        if not keys:
            builder.log.debug(f"No key samples for {sample_id}; removing interpolated samples")
            for ki, keyframe in enumerate(timeline.keyframes):
                for slot in keyframe.slots_of(sample_id):
                    builder.removals.setdefault(ki, []).append(
                        RemoveEdit(position=slot, index=slot, sample_id=sample_id)
                    )
        elif len(keys) == 1:
            self._rebuild_constant(builder, keys[0], reference)
        else:
            self._rebuild_curve(builder, keys, reference, scrub_direction, count)

        plan = builder.build()
        builder.log.debug(
            f"Rebuilt {sample_id}: keys={len(keys)} edits={plan.edit_count} "
            f"keyframes={plan.touched_keyframes}"
        )
        return plan

    # ------------------------------------------------------------------
    # Key collection
    # ------------------------------------------------------------------

    def _collect_keys(self, builder: _PlanBuilder) -> list[TimedKey]:
        """Key samples of the id in keyframe order; first key per keyframe wins."""
        keys: list[TimedKey] = []
        for ki, keyframe in enumerate(builder.timeline.keyframes):
            slots = keyframe.slots_of(builder.sample_id)
            if len(slots) > 1:
                builder.report(InconsistencyKind.DUPLICATE_ID, ki, slots)
            key_slot = keyframe.key_slot(builder.sample_id)
            if key_slot is None:
                continue
            if slots[0] != key_slot:
                builder.report(InconsistencyKind.SHADOWED_KEY, ki, slots)
            keys.append(TimedKey(ki, keyframe.beat, keyframe.samples[key_slot]))
        return keys

    # ------------------------------------------------------------------
    # One key: constant hold
    # ------------------------------------------------------------------

    def _rebuild_constant(self, builder: _PlanBuilder, key: TimedKey, reference: int) -> None:
        keyframes = builder.timeline.keyframes
        sample = key.value.with_kind(SampleKind.INTERPOLATED)
        anchor = reference if keyframes[reference].contains_sample(builder.sample_id) else key.keyframe_index
        stacking = _stacking(keyframes[anchor], builder.sample_id)

        for ki in range(len(keyframes)):
            if ki == key.keyframe_index:
                builder.remove_duplicates(ki, keep=None)
                continue
            builder.write(ki, sample, stacking)

    # ------------------------------------------------------------------
    # Two or more keys: cyclic curve
    # ------------------------------------------------------------------

    def _rebuild_curve(
        self,
        builder: _PlanBuilder,
        keys: list[TimedKey],
        reference: int,
        direction: ScrubDirection,
        count: int,
    ) -> None:
        keyframes = builder.timeline.keyframes
        sample_id = builder.sample_id
        n = len(keys)
        key_pos = {k.keyframe_index: j for j, k in enumerate(keys)}

        # Last key at or before the reference keyframe, cyclically.
        fki = next((j for j in range(n - 1, -1, -1) if keys[j].keyframe_index <= reference), n - 1)
        if direction == ScrubDirection.BACKWARD:
            loop_i = keys[(fki + 1) % n].keyframe_index
            first_i = keys[fki].keyframe_index
        elif direction == ScrubDirection.FORWARD:
            loop_i = keys[fki].keyframe_index
            first_i = keys[(fki - 1) % n].keyframe_index
        else:
            loop_i = first_i = keys[fki].keyframe_index

        j = (first_i - 1) % count
        while j != loop_i:
            if not keyframes[j].contains_sample(sample_id):
                break
            if keyframes[j].contains_key(sample_id):
                first_i = j
            j = (j - 1) % count
        full_wrap = j == loop_i

        last_i: int | None = None
        if full_wrap:
            padding = self.config.wrap_padding
            padded = pad_cyclic(keys, builder.timeline.loop_length, padding, padding)
            ranges = [range(count)]
        else:
            last_i = loop_i
            j = (loop_i + 1) % count
            while j != loop_i:
                if not keyframes[j].contains_sample(sample_id):
                    break
                if keyframes[j].contains_key(sample_id):
                    last_i = j
                j = (j + 1) % count

            if last_i < first_i:
                # Run straddles the array seam: pad with the run's own keys only.
                before = min(self.config.run_padding, n - key_pos[first_i])
                after = min(self.config.run_padding, key_pos[last_i] + 1)
                padded = pad_cyclic(keys, builder.timeline.loop_length, before, after)
                ranges = [range(last_i + 1), range(first_i, count)]
            else:
                padded = pad_cyclic(keys, builder.timeline.loop_length, 0, 0)
                ranges = [range(first_i, last_i + 1)]

        types = self._segment_types(padded, count, last_i)
        curve = self._fit(padded, types, builder.timeline)
        builder.log.debug(
            f"Curve for {sample_id}: run={first_i}..{last_i if last_i is not None else 'wrap'} "
            f"padded={len(padded.keys)} leading={padded.leading} "
            f"types={[t.value for t in types]}"
        )

        stacking = _stacking(keyframes[first_i], sample_id)
        for keyframe_range in ranges:
            for ki in keyframe_range:
                if ki in key_pos:
                    builder.remove_duplicates(ki, keep=None)
                    continue
                value = curve.value_at(beat_to_float(keyframes[ki].beat))
                if value is None:
                    continue
                builder.write(ki, _interpolated(sample_id, Polyline.from_array(value)), stacking)

    def _segment_types(
        self, padded: PaddedKeys, count: int, last_i: int | None
    ) -> list[KeyType]:
        """Spline when 1..max_blend_gap keyframes separate a key from the next."""
        keys = padded.keys
        types: list[KeyType] = []
        for i, key in enumerate(keys):
            following = keys[(i + 1) % len(keys)]
            gap = (following.keyframe_index - key.keyframe_index) % count
            intervening = gap - 1 if gap > 0 else count - 1
            if key.keyframe_index == last_i:
                types.append(KeyType.STEP)
            elif 1 <= intervening <= self.config.max_blend_gap:
                types.append(KeyType.SPLINE)
            else:
                types.append(KeyType.STEP)
        return types

    def _fit(self, padded: PaddedKeys, types: list[KeyType], timeline: Timeline) -> Interpolation:
        values = [key.value.geometry.to_array() for key in padded.keys]
        if self.config.decross and values:
            previous = values[-1]
            for i, line in enumerate(values):
                values[i] = previous = decross(line, previous)
        if self.config.resample:
            values = conform_point_counts(values)
        curve_keys = [
            CurveKey(
                value=np.asarray(value, dtype=float),
                time=beat_to_float(key.time),
                type=key_type,
            )
            for key, value, key_type in zip(padded.keys, values, types)
        ]
        return Interpolation(curve_keys, duration=beat_to_float(timeline.loop_length))


def _interpolated(sample_id: str, geometry: Polyline) -> DrawableSample:
    return DrawableSample(id=sample_id, geometry=geometry, kind=SampleKind.INTERPOLATED)


def _stacking(keyframe: Keyframe, sample_id: str) -> tuple[set[str], int]:
    """Ids stacked above ``sample_id`` in ``keyframe``, and its slot there."""
    slot = keyframe.slot_of(sample_id)
    if slot is None:
        return set(), len(keyframe.samples)
    return {s.id for s in keyframe.samples[slot + 1 :]} - {sample_id}, slot


_default_engine = InterpolationEngine()


def rebuild(
    sample_id: str,
    replacement_ids: Iterable[str],
    timeline: Timeline,
    reference_root_index: int,
    scrub_direction: ScrubDirection = ScrubDirection.NONE,
) -> EditPlan:
    """Rebuild with the default engine configuration."""
    return _default_engine.rebuild(
        sample_id, replacement_ids, timeline, reference_root_index, scrub_direction
    )
