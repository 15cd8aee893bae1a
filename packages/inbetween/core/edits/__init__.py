"""Edit batch assembly and undo integration."""

from inbetween.core.edits.emitter import EditBatch, EditBatchEmitter
from inbetween.core.edits.protocols import InMemoryUndoLog, UndoLog, commit_batch

__all__ = [
    "EditBatch",
    "EditBatchEmitter",
    "InMemoryUndoLog",
    "UndoLog",
    "commit_batch",
]
