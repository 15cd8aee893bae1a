"""Interpolation session coordinator.

The session wires the pieces an editor needs after a user edit:

- the keyframe store holding the current timeline,
- the interpolation engine (configured from ``AppConfig``),
- the batch emitter merging per-identifier plans,
- the undo log that commits each non-empty batch as one group.
"""

from __future__ import annotations

from collections.abc import Iterable
import logging
from pathlib import Path

from inbetween.core.config.models import AppConfig
from inbetween.core.edits.emitter import EditBatch, EditBatchEmitter
from inbetween.core.edits.protocols import InMemoryUndoLog, UndoLog, commit_batch
from inbetween.core.errors import EmptyTimelineError
from inbetween.core.interpolation.engine import InterpolationEngine
from inbetween.core.interpolation.models import ScrubDirection
from inbetween.core.timeline.models import Timeline
from inbetween.core.timeline.store import KeyframeStore

logger = logging.getLogger(__name__)


class InterpolationSession:
    """Rebuilds interpolated samples for batches of identifiers."""

    def __init__(
        self,
        timeline: Timeline | KeyframeStore | None = None,
        *,
        app_config: AppConfig | Path | str | None = None,
        undo_log: UndoLog | None = None,
    ):
        """Initialize session.

        Args:
            timeline: Initial timeline, or an existing store to operate on.
            app_config: AppConfig instance, path, or None (uses default path).
            undo_log: Host undo log. Defaults to an in-memory snapshot log.

        Raises:
            TypeError: If ``app_config`` is of the wrong type.
            FileNotFoundError: If an explicit config path does not exist.
            ValidationError: If the config is invalid.
        """
        self.app_config = self._resolve_config(app_config)
        self.store = timeline if isinstance(timeline, KeyframeStore) else KeyframeStore(timeline)
        self.engine = InterpolationEngine(self.app_config.interpolation)
        self.emitter = EditBatchEmitter()
        self.undo_log: UndoLog = undo_log or InMemoryUndoLog(self.store)

        logger.debug(f"Session initialized: keyframes={self.store.timeline.keyframe_count}")

    @property
    def timeline(self) -> Timeline:
        return self.store.timeline

    def plan(
        self,
        ids: Iterable[tuple[str, Iterable[str]]],
        reference_root_index: int,
        scrub_direction: ScrubDirection = ScrubDirection.NONE,
    ) -> EditBatch:
        """Rebuild every ``(id, replacement_ids)`` pair without committing.

        Raises:
            EmptyTimelineError: If the timeline has no keyframes.
            InvalidLoopLengthError: If the loop length is not positive.
        """
        snapshot = self.store.snapshot()
        self.emitter.clear()
        for sample_id, replacement_ids in ids:
            self.emitter.add(
                self.engine.rebuild(
                    sample_id, replacement_ids, snapshot, reference_root_index, scrub_direction
                )
            )
        batch = self.emitter.finalize()
        self.emitter.clear()
        return batch

    def interpolate(
        self,
        ids: Iterable[tuple[str, Iterable[str]]],
        reference_root_index: int,
        scrub_direction: ScrubDirection = ScrubDirection.NONE,
        label: str = "Interpolate",
    ) -> EditBatch:
        """Rebuild and commit in one undo group.

        Returns the committed batch; an empty timeline yields an empty batch.
        """
        try:
            batch = self.plan(ids, reference_root_index, scrub_direction)
        except EmptyTimelineError:
            logger.warning("Timeline has no keyframes; nothing to interpolate")
            return EditBatch()

        if commit_batch(batch, self.undo_log, label):
            logger.info(
                f"Committed {label!r}: keyframes={batch.touched_keyframes} "
                f"diagnostics={len(batch.diagnostics)}"
            )
        return batch

    def interpolate_move(
        self,
        ids: Iterable[tuple[str, Iterable[str]]],
        old_root_index: int,
        new_root_index: int,
        label: str = "Interpolate",
    ) -> EditBatch:
        """Interpolate at ``new_root_index`` after a playhead move."""
        direction = ScrubDirection.from_root_indices(old_root_index, new_root_index)
        return self.interpolate(ids, new_root_index, direction, label)

    @staticmethod
    def _resolve_config(value: AppConfig | Path | str | None) -> AppConfig:
        if value is None:
            return AppConfig.load_or_default()
        elif isinstance(value, (Path, str)):
            return AppConfig.load_or_default(Path(value))
        elif isinstance(value, AppConfig):
            return value
        else:
            raise TypeError(f"Expected AppConfig, Path, str, or None; got {type(value).__name__}")
