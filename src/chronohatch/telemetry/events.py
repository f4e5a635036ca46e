"""Lifecycle event records for batch mutations."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from uuid import uuid4

from .jsonl import append_jsonl

BATCH_CREATED = "batch_created"
TASKS_REGENERATED = "tasks_regenerated"
TASKS_PRESERVED = "tasks_preserved"
BATCH_DELETED = "batch_deleted"
TASK_UPDATED = "task_updated"
CANDLING_ADDED = "candling_added"
CANDLING_DELETED = "candling_deleted"
HATCHED_SET = "hatched_set"


def _iso_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


@dataclass(slots=True)
class LifecycleEventLog:
    """Append one JSONL record per batch lifecycle decision.

    Parameters
    ----------
    log_path:
        JSONL file receiving the records. ``None`` disables logging entirely.
    source:
        Free-form label of the emitting surface (``"cli"``, ``"api"``...).
    """

    log_path: Path | None = None
    source: str = "library"
    schema_version: str = "1.0"
    session_id: str = field(default_factory=lambda: uuid4().hex, init=False)
    events_written: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        if self.log_path is not None:
            self.log_path = Path(self.log_path)

    @property
    def enabled(self) -> bool:
        return self.log_path is not None

    def emit(self, event: str, batch_id: str, **details: Any) -> None:
        """Write an ``event`` record for ``batch_id`` with extra ``details``."""
        if self.log_path is None:
            return
        record = {
            "record_type": "event",
            "schema_version": self.schema_version,
            "event_id": uuid4().hex,
            "session_id": self.session_id,
            "source": self.source,
            "timestamp": _iso_now(),
            "event": event,
            "batch_id": batch_id,
            **details,
        }
        append_jsonl(self.log_path, record)
        self.events_written += 1


__all__ = [
    "LifecycleEventLog",
    "BATCH_CREATED",
    "TASKS_REGENERATED",
    "TASKS_PRESERVED",
    "BATCH_DELETED",
    "TASK_UPDATED",
    "CANDLING_ADDED",
    "CANDLING_DELETED",
    "HATCHED_SET",
]
