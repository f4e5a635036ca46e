"""Care-task generation for an incubation batch.

``generate_tasks`` is the single authoritative mapping from a batch's timeline fields to its
complete schedule. It is stateless: the same inputs always yield the same task ids, dates and
types, which is what lets the lifecycle layer regenerate a schedule wholesale without duplicates.

Example
-------
>>> from datetime import date
>>> from chronohatch.scheduling import BatchTimeline, generate_tasks
>>> timeline = BatchTimeline(
...     id="b1", start_date=date(2024, 1, 1), species_id="pekin_duck", incubator_type="auto"
... )
>>> sorted({task.type.value for task in generate_tasks(timeline)})
['candle', 'hatch_check', 'lockdown', 'mist']
"""

from __future__ import annotations

from collections.abc import Iterable

from chronohatch.species import Species, SpeciesTable, default_species_table

from .models import TASK_TYPE_ORDER, BatchTimeline, IncubatorType, Task, TaskType
from .timeline import date_for_incubation_day


def _task(
    timeline: BatchTimeline,
    day: int,
    task_type: TaskType,
    description: str,
    qualifier: str | None = None,
) -> Task:
    parts = [timeline.id, task_type.value]
    if qualifier:
        parts.append(qualifier)
    parts.append(str(day))
    return Task(
        id="-".join(parts),
        batch_id=timeline.id,
        batch_name=timeline.name or None,
        date=date_for_incubation_day(timeline.start_date, day),
        day_of_incubation=day,
        type=task_type,
        description=description,
    )


def tasks_for_day(timeline: BatchTimeline, species: Species, day: int) -> list[Task]:
    """Return every task scheduled on incubation ``day``."""
    tasks: list[Task] = []
    before_lockdown = day < species.lockdown_day

    if timeline.incubator_type == IncubatorType.MANUAL and before_lockdown:
        tasks.append(_task(timeline, day, TaskType.TURN, "Turn eggs"))

    if species.misting_start_day <= day and before_lockdown:
        tasks.append(_task(timeline, day, TaskType.MIST, "Mist eggs"))

    if day in species.default_candling_days:
        tasks.append(
            _task(timeline, day, TaskType.CANDLE, f"Default candling (Day {day})", "default")
        )
    if day in timeline.custom_candling_days:
        tasks.append(
            _task(timeline, day, TaskType.CANDLE, f"Custom candling (Day {day})", "custom")
        )

    if day == species.lockdown_day:
        tasks.append(_task(timeline, day, TaskType.LOCKDOWN, "Lockdown procedures"))
        tasks.append(
            _task(
                timeline,
                day,
                TaskType.CANDLE,
                f"Final candling before lockdown (Day {day})",
                "lockdown",
            )
        )

    if species.incubation_days <= day <= species.hatch_window_end:
        tasks.append(_task(timeline, day, TaskType.HATCH_CHECK, f"Check for hatching (Day {day})"))

    return tasks


def generate_tasks(
    timeline: BatchTimeline,
    species_table: SpeciesTable | None = None,
) -> list[Task]:
    """Generate the full schedule for ``timeline``.

    Parameters
    ----------
    timeline:
        Batch id, display name, set date, species, incubator type and custom candling days.
    species_table:
        Lookup used to resolve ``timeline.species_id``. Defaults to the built-in table.

    Returns
    -------
    list[Task]
        Tasks for incubation days ``1..incubation_days + 2``, all ``completed=False``. An unknown
        species yields an empty list rather than an error.
    """

    table = species_table or default_species_table()
    species = table.get(timeline.species_id)
    if species is None:
        return []

    tasks: list[Task] = []
    for day in range(1, species.hatch_window_end + 1):
        tasks.extend(tasks_for_day(timeline, species, day))
    return tasks


def sort_tasks(tasks: Iterable[Task]) -> list[Task]:
    """Display order: date, incubation day, then task type."""
    return sorted(
        tasks,
        key=lambda task: (task.date, task.day_of_incubation, TASK_TYPE_ORDER.get(task.type, 99)),
    )


__all__ = ["generate_tasks", "tasks_for_day", "sort_tasks"]
