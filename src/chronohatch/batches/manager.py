"""Batch lifecycle orchestration over an injected :class:`BatchStore`.

``BatchManager`` owns the "one batch, one generated schedule" invariant at the persistence seam:

* creation always generates a schedule and stores it in the same write as the batch;
* edits go through :func:`~chronohatch.batches.lifecycle.apply_batch_edit` and are written with a
  single ``replace`` so regenerated tasks and the timeline fields behind them never diverge;
* task toggles, candling results and hatch counts are single-field patches.

Example
-------
>>> from datetime import date
>>> from chronohatch.batches import BatchFields, InMemoryBatchStore
>>> from chronohatch.batches.manager import BatchManager
>>> from chronohatch.core import FixedClock
>>> manager = BatchManager(InMemoryBatchStore(), clock=FixedClock(date(2024, 1, 5)))
>>> batch = manager.add_batch(
...     BatchFields(name="Spring", species_id="chicken", start_date=date(2024, 1, 1), number_of_eggs=12)
... )
>>> manager.status(batch.id).label
'Inc. Day: 4'
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from chronohatch.core.clock import Clock, SystemClock
from chronohatch.core.errors import BatchNotFoundError, ChronoHatchValueError
from chronohatch.evaluation.hatch_stats import HatchSummary, summarize_batch
from chronohatch.scheduling import Task, parse_calendar_date
from chronohatch.scheduling.timeline import CalendarDate
from chronohatch.species import Species, SpeciesTable, default_species_table
from chronohatch.status import BatchStatus, IncubationPhase, classify_status
from chronohatch.telemetry.events import (
    BATCH_CREATED,
    BATCH_DELETED,
    CANDLING_ADDED,
    CANDLING_DELETED,
    HATCHED_SET,
    TASK_UPDATED,
    TASKS_PRESERVED,
    TASKS_REGENERATED,
    LifecycleEventLog,
)
from chronohatch.validation import (
    require_species,
    validate_candling_result,
    validate_custom_candling_days,
    validate_hatched_eggs,
)

from .lifecycle import apply_batch_edit, create_batch, relabel_tasks
from .models import Batch, BatchFields, CandlingResult
from .store import BatchStore, Unsubscribe


def _dump_tasks(tasks: list[Task]) -> list[dict[str, Any]]:
    return [task.model_dump(mode="json") for task in tasks]


class BatchManager:
    """High-level batch operations used by the CLI and embedding applications.

    Parameters
    ----------
    store:
        Persistence adapter implementing :class:`~chronohatch.batches.store.BatchStore`.
    species_table:
        Species lookup; defaults to the built-in table.
    clock:
        Source of "today" for status, agenda and history queries; defaults to the system date.
    events:
        Optional lifecycle event log receiving one record per mutation.
    """

    def __init__(
        self,
        store: BatchStore,
        *,
        species_table: SpeciesTable | None = None,
        clock: Clock | None = None,
        events: LifecycleEventLog | None = None,
    ) -> None:
        self.store = store
        self.species_table = species_table or default_species_table()
        self.clock = clock or SystemClock()
        self.events = events or LifecycleEventLog()

    # ------------------------------------------------------------------ reads

    def get_batch(self, batch_id: str) -> Batch | None:
        document = self.store.get(batch_id)
        return Batch.model_validate(document) if document is not None else None

    def require_batch(self, batch_id: str) -> Batch:
        batch = self.get_batch(batch_id)
        if batch is None:
            raise BatchNotFoundError(batch_id)
        return batch

    def list_batches(self) -> list[Batch]:
        """All batches ordered by set date."""
        return [Batch.model_validate(document) for document in self.store.documents()]

    def subscribe(self, listener: Callable[[list[Batch]], None]) -> Unsubscribe:
        """Forward store change notifications as validated :class:`Batch` lists."""

        def _forward(documents: list[dict[str, Any]]) -> None:
            listener([Batch.model_validate(document) for document in documents])

        return self.store.subscribe(_forward)

    def species_for(self, batch: Batch) -> Species | None:
        return self.species_table.get(batch.species_id)

    def all_tasks(self) -> list[Task]:
        """Every task of every batch, labelled with the batch's current name."""
        tasks: list[Task] = []
        for batch in self.list_batches():
            tasks.extend(relabel_tasks(batch.tasks, batch.name))
        return tasks

    def tasks_for_date(self, day: CalendarDate | None = None, *, pending_only: bool = False) -> list[Task]:
        """Agenda for ``day`` (default today) sorted by batch name then description."""
        target = parse_calendar_date(day) if day is not None else self.clock.now()
        tasks = [
            task
            for task in self.all_tasks()
            if task.date == target and not (pending_only and task.completed)
        ]
        return sorted(tasks, key=lambda t: ((t.batch_name or "").casefold(), t.description))

    def pending_tasks(self, batch_id: str, day: CalendarDate | None = None) -> list[Task]:
        """Uncompleted tasks of one batch due on ``day`` (default today)."""
        self.require_batch(batch_id)
        return [
            task
            for task in self.tasks_for_date(day, pending_only=True)
            if task.batch_id == batch_id
        ]

    def status(self, batch_id: str, today: CalendarDate | None = None) -> BatchStatus:
        batch = self.require_batch(batch_id)
        return classify_status(today or self.clock.now(), batch, self.species_for(batch))

    def statuses(self, today: CalendarDate | None = None) -> list[tuple[Batch, BatchStatus]]:
        now = today or self.clock.now()
        return [
            (batch, classify_status(now, batch, self.species_for(batch)))
            for batch in self.list_batches()
        ]

    def history(self, today: CalendarDate | None = None) -> list[HatchSummary]:
        """Summaries of batches whose hatch window has closed."""
        summaries: list[HatchSummary] = []
        for batch, status in self.statuses(today):
            species = self.species_for(batch)
            if species is not None and status.phase is IncubationPhase.COMPLETED:
                summaries.append(summarize_batch(batch, species))
        return summaries

    # ----------------------------------------------------------------- writes

    def _validate_fields(
        self, fields: BatchFields, current_species_id: str | None = None
    ) -> None:
        """Check species and custom days; an unchanged legacy species is tolerated."""
        if current_species_id is not None and fields.species_id == current_species_id:
            species = self.species_table.get(fields.species_id)
        else:
            species = require_species(fields.species_id, self.species_table)
        if species is not None:
            validate_custom_candling_days(fields.custom_candling_days, species)

    def add_batch(self, fields: BatchFields) -> Batch:
        """Create a batch and persist its freshly generated schedule."""
        self._validate_fields(fields)
        batch = create_batch(self.store.reserve_id(), fields, self.species_table)
        self.store.create(batch.model_dump(mode="json"))
        self.events.emit(
            BATCH_CREATED,
            batch.id,
            species_id=batch.species_id,
            start_date=batch.start_date.isoformat(),
            task_count=len(batch.tasks),
        )
        return batch

    def update_batch(self, batch_id: str, fields: BatchFields) -> Batch:
        """Apply an edit form, regenerating the schedule only when the timeline changed."""
        existing = self.require_batch(batch_id)
        self._validate_fields(fields, existing.species_id)
        recorded = [result.fertile for result in existing.candling_results]
        if existing.hatched_eggs is not None:
            recorded.append(existing.hatched_eggs)
        if recorded and fields.number_of_eggs < max(recorded):
            raise ChronoHatchValueError(
                f"number_of_eggs={fields.number_of_eggs} is below recorded counts ({max(recorded)})"
            )

        edited, regenerated = apply_batch_edit(existing, fields, self.species_table)
        self.store.replace(batch_id, edited.model_dump(mode="json"))
        if regenerated:
            self.events.emit(
                TASKS_REGENERATED,
                batch_id,
                previous_task_count=len(existing.tasks),
                task_count=len(edited.tasks),
                start_date=edited.start_date.isoformat(),
                species_id=edited.species_id,
            )
        else:
            self.events.emit(
                TASKS_PRESERVED,
                batch_id,
                completed_tasks=sum(task.completed for task in edited.tasks),
            )
        return edited

    def delete_batch(self, batch_id: str) -> None:
        """Remove a batch; its tasks and candling results go with the document."""
        self.store.delete(batch_id)
        self.events.emit(BATCH_DELETED, batch_id)

    def set_task_completed(
        self,
        batch_id: str,
        task_id: str,
        completed: bool | None = None,
        *,
        notes: str | None = None,
    ) -> Task:
        """Set (or toggle, when ``completed`` is ``None``) a task's completion flag."""
        batch = self.require_batch(batch_id)
        current = batch.task(task_id)
        if current is None:
            raise ChronoHatchValueError(f"Task '{task_id}' not found in batch '{batch_id}'")
        update: dict[str, Any] = {
            "completed": (not current.completed) if completed is None else completed,
            "batch_name": batch.name,
        }
        if notes is not None:
            update["notes"] = notes
        updated = current.model_copy(update=update)
        tasks = [updated if task.id == task_id else task for task in batch.tasks]
        self.store.patch_field(batch_id, "tasks", _dump_tasks(tasks))
        self.events.emit(TASK_UPDATED, batch_id, task_id=task_id, completed=updated.completed)
        return updated

    def add_candling_result(
        self,
        batch_id: str,
        day: int,
        fertile: int,
        notes: str = "",
    ) -> CandlingResult:
        batch = self.require_batch(batch_id)
        validate_candling_result(
            day=day,
            fertile=fertile,
            number_of_eggs=batch.number_of_eggs,
            species=self.species_for(batch),
        )
        result = CandlingResult(day=day, fertile=fertile, notes=notes or "")
        results = sorted([*batch.candling_results, result], key=lambda r: r.day)
        self.store.patch_field(
            batch_id, "candling_results", [r.model_dump(mode="json") for r in results]
        )
        self.events.emit(CANDLING_ADDED, batch_id, result_id=result.id, day=day, fertile=fertile)
        return result

    def delete_candling_result(self, batch_id: str, result_id: str) -> None:
        batch = self.require_batch(batch_id)
        remaining = [r for r in batch.candling_results if r.id != result_id]
        if len(remaining) == len(batch.candling_results):
            raise ChronoHatchValueError(
                f"Candling result '{result_id}' not found in batch '{batch_id}'"
            )
        self.store.patch_field(
            batch_id, "candling_results", [r.model_dump(mode="json") for r in remaining]
        )
        self.events.emit(CANDLING_DELETED, batch_id, result_id=result_id)

    def set_hatched_eggs(self, batch_id: str, count: int) -> None:
        batch = self.require_batch(batch_id)
        validate_hatched_eggs(count, batch.number_of_eggs)
        self.store.patch_field(batch_id, "hatched_eggs", count)
        self.events.emit(HATCHED_SET, batch_id, hatched_eggs=count)


__all__ = ["BatchManager"]
