"""Tests for undo integration."""

from __future__ import annotations

import pytest

from inbetween.core.edits.emitter import EditBatch
from inbetween.core.edits.protocols import InMemoryUndoLog, UndoLog, commit_batch
from inbetween.core.interpolation.models import InsertEdit, RemoveEdit
from inbetween.core.timeline.models import Timeline
from inbetween.core.timeline.store import KeyframeStore


def _insert_batch(sample) -> EditBatch:
    return EditBatch(insertions={1: [InsertEdit(position=0, index=0, sample=sample("L1"))]})


class TestCommitBatch:
    """Tests for commit_batch."""

    def test_empty_batch_opens_no_group(self, four_beat_timeline: Timeline) -> None:
        undo_log = InMemoryUndoLog(KeyframeStore(four_beat_timeline))
        assert commit_batch(EditBatch(), undo_log) is False
        assert undo_log.labels == []
        assert not undo_log.can_undo

    def test_batch_applied_in_one_group(self, four_beat_timeline: Timeline, sample) -> None:
        store = KeyframeStore(four_beat_timeline)
        undo_log = InMemoryUndoLog(store)
        assert commit_batch(_insert_batch(sample), undo_log, label="Draw") is True
        assert undo_log.labels == ["Draw"]
        assert store.keyframe(1).sample_ids() == ["L1"]


class TestInMemoryUndoLog:
    """Tests for the snapshot undo log."""

    def test_undo_restores_snapshot(self, four_beat_timeline: Timeline, sample) -> None:
        store = KeyframeStore(four_beat_timeline)
        undo_log = InMemoryUndoLog(store)
        commit_batch(_insert_batch(sample), undo_log)

        assert undo_log.undo() == "Interpolate"
        assert store.timeline == four_beat_timeline
        assert undo_log.undo() is None

    def test_failed_apply_closes_group(self, four_beat_timeline: Timeline, sample) -> None:
        """A batch that fails to apply leaves no group open for the next apply."""
        store = KeyframeStore(four_beat_timeline)
        undo_log = InMemoryUndoLog(store)
        stale = EditBatch(removals={1: [RemoveEdit(position=0, index=0, sample_id="Gone")]})
        with pytest.raises(ValueError, match="stale removal"):
            commit_batch(stale, undo_log, label="Stale")
        assert store.timeline == four_beat_timeline

        undo_log.apply(_insert_batch(sample))
        assert store.keyframe(1).sample_ids() == ["L1"]
        assert undo_log.labels == []

    def test_satisfies_protocol(self, four_beat_timeline: Timeline) -> None:
        assert isinstance(InMemoryUndoLog(KeyframeStore(four_beat_timeline)), UndoLog)
