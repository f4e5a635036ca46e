"""Regenerate-or-preserve rules for batch task schedules.

A batch's ``tasks`` must always match what :func:`~chronohatch.scheduling.generate_tasks` would
produce from its four timeline-defining fields (set date, species, incubator type, custom candling
days). Edits that touch one of those fields discard the old schedule and every completion flag;
any other edit (name, notes, egg count) keeps the schedule exactly as the user left it, apart from
the cosmetic ``batch_name`` label on each task.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable
from typing import Protocol

from chronohatch.scheduling import (
    IncubatorType,
    Task,
    generate_tasks,
    normalise_candling_days,
    parse_calendar_date,
)
from chronohatch.species import SpeciesTable

from .models import Batch, BatchFields


class TimelineFields(Protocol):
    """Anything carrying the four fields that define a schedule (``Batch``, ``BatchFields``)."""

    start_date: dt.date
    species_id: str
    incubator_type: IncubatorType
    custom_candling_days: tuple[int, ...]


def timeline_key(fields: TimelineFields) -> tuple[dt.date, str, IncubatorType, tuple[int, ...]]:
    """Normalised comparison key for the timeline-defining fields."""
    return (
        parse_calendar_date(fields.start_date),
        fields.species_id,
        IncubatorType(fields.incubator_type),
        normalise_candling_days(fields.custom_candling_days),
    )


def should_regenerate(old: TimelineFields, new: TimelineFields) -> bool:
    """True when any timeline-defining field differs between ``old`` and ``new``."""
    return timeline_key(old) != timeline_key(new)


def relabel_tasks(tasks: Iterable[Task], batch_name: str) -> list[Task]:
    """Copy ``tasks`` with the display label set to ``batch_name``; nothing else changes."""
    return [task.model_copy(update={"batch_name": batch_name}) for task in tasks]


def create_batch(
    batch_id: str,
    fields: BatchFields,
    species_table: SpeciesTable | None = None,
) -> Batch:
    """Build a new batch with a freshly generated schedule."""
    batch = Batch(id=batch_id, **fields.model_dump())
    batch.tasks = generate_tasks(batch.timeline(), species_table)
    return batch


def apply_batch_edit(
    existing: Batch,
    fields: BatchFields,
    species_table: SpeciesTable | None = None,
) -> tuple[Batch, bool]:
    """Apply an edit form to ``existing``.

    Returns
    -------
    tuple[Batch, bool]
        The edited batch and whether its schedule was regenerated. Candling results and the hatch
        count are carried over untouched either way.
    """

    regenerate = should_regenerate(existing, fields)
    edited = existing.model_copy(update=fields.model_dump(), deep=True)
    if regenerate:
        edited.tasks = generate_tasks(edited.timeline(), species_table)
    else:
        edited.tasks = relabel_tasks(existing.tasks, edited.name)
    return edited, regenerate


__all__ = [
    "TimelineFields",
    "timeline_key",
    "should_regenerate",
    "relabel_tasks",
    "create_batch",
    "apply_batch_edit",
]
