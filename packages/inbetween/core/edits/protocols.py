"""Undo integration for edit batches."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from inbetween.core.edits.emitter import EditBatch
from inbetween.core.timeline.models import Timeline
from inbetween.core.timeline.store import KeyframeStore

logger = logging.getLogger(__name__)


@runtime_checkable
class UndoLog(Protocol):
    """Host undo system. One group per committed batch."""

    def begin_group(self, label: str) -> None: ...

    def apply(self, batch: EditBatch) -> None: ...


class InMemoryUndoLog:
    """Snapshot-based undo log over a ``KeyframeStore``.

    Each group records the timeline before its first apply; ``undo`` restores
    the most recent one.
    """

    def __init__(self, store: KeyframeStore) -> None:
        self.store = store
        self._groups: list[tuple[str, Timeline]] = []
        self._open: str | None = None

    @property
    def labels(self) -> list[str]:
        return [label for label, _ in self._groups]

    @property
    def can_undo(self) -> bool:
        return bool(self._groups)

    def begin_group(self, label: str) -> None:
        self._open = label

    def apply(self, batch: EditBatch) -> None:
        """Apply ``batch``; the open group, if any, closes even when it fails."""
        label, self._open = self._open, None
        before = self.store.snapshot()
        self.store.apply(batch)
        if label is not None:
            self._groups.append((label, before))

    def undo(self) -> str | None:
        """Restore the timeline before the last group; returns its label."""
        if not self._groups:
            return None
        label, before = self._groups.pop()
        self.store.restore(before)
        logger.debug(f"Undid {label!r}")
        return label


def commit_batch(batch: EditBatch, undo_log: UndoLog, label: str = "Interpolate") -> bool:
    """Apply ``batch`` inside one undo group.

    Returns:
        False without opening a group when the batch is empty.
    """
    if batch.is_empty:
        return False
    undo_log.begin_group(label)
    undo_log.apply(batch)
    return True
