"""Batch models, regenerate-or-preserve lifecycle rules and the persistence port.

:class:`~chronohatch.batches.manager.BatchManager` lives in ``chronohatch.batches.manager``; it
depends on the status and evaluation layers, which themselves import these models.
"""

from .lifecycle import (
    TimelineFields,
    apply_batch_edit,
    create_batch,
    relabel_tasks,
    should_regenerate,
    timeline_key,
)
from .models import MAX_EGGS, MAX_NOTES_LENGTH, Batch, BatchFields, CandlingResult
from .store import (
    STORE_SCHEMA_VERSION,
    BatchDocument,
    BatchStore,
    InMemoryBatchStore,
    JsonFileBatchStore,
)

__all__ = [
    "Batch",
    "BatchFields",
    "CandlingResult",
    "MAX_EGGS",
    "MAX_NOTES_LENGTH",
    "TimelineFields",
    "apply_batch_edit",
    "create_batch",
    "relabel_tasks",
    "should_regenerate",
    "timeline_key",
    "BatchDocument",
    "BatchStore",
    "InMemoryBatchStore",
    "JsonFileBatchStore",
    "STORE_SCHEMA_VERSION",
]
