"""Fertility and hatch-rate statistics plus tabular exports.

Rates are percentages. A zero denominator yields ``0.0`` (never ``NaN``); a rate whose numerator
has not been recorded yet (no candling result, no hatch count) is ``None``.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable, Sequence
from dataclasses import asdict, dataclass

import pandas as pd

from chronohatch.batches.models import Batch
from chronohatch.scheduling import Task, estimated_hatch_date, sort_tasks
from chronohatch.species import Species


def percentage(numerator: int | float, denominator: int | float) -> float:
    """``numerator / denominator * 100`` with a zero denominator mapped to 0."""
    if not denominator:
        return 0.0
    return numerator / denominator * 100.0


def fertile_count(batch: Batch) -> int | None:
    """Fertile eggs at the most recent candling, ``None`` when never candled."""
    last = batch.last_candling()
    return last.fertile if last is not None else None


def fertility_rate(batch: Batch) -> float | None:
    fertile = fertile_count(batch)
    if fertile is None:
        return None
    return percentage(fertile, batch.number_of_eggs)


def hatch_rate_of_total(batch: Batch) -> float | None:
    if batch.hatched_eggs is None:
        return None
    return percentage(batch.hatched_eggs, batch.number_of_eggs)


def hatch_rate_of_fertile(batch: Batch) -> float | None:
    """Hatch rate relative to fertile eggs; every egg counts as fertile when never candled."""
    if batch.hatched_eggs is None:
        return None
    fertile = fertile_count(batch)
    return percentage(batch.hatched_eggs, batch.number_of_eggs if fertile is None else fertile)


@dataclass(slots=True)
class HatchSummary:
    """History row for one batch.

    Attributes
    ----------
    batch_id / batch_name / species_id / species_name:
        Identification columns.
    start_date / estimated_hatch_date:
        Set date and ``set date + incubation_days``.
    number_of_eggs / fertile_eggs / hatched_eggs:
        Counts; ``fertile_eggs`` falls back to ``number_of_eggs`` once a hatch count exists but no
        candling was recorded.
    fertility_rate / hatch_rate_of_total / hatch_rate_of_fertile:
        Percentages (``None`` when not yet measurable).
    """

    batch_id: str
    batch_name: str
    species_id: str
    species_name: str
    start_date: dt.date
    estimated_hatch_date: dt.date
    number_of_eggs: int
    fertile_eggs: int | None
    hatched_eggs: int | None
    fertility_rate: float | None
    hatch_rate_of_total: float | None
    hatch_rate_of_fertile: float | None


def summarize_batch(batch: Batch, species: Species) -> HatchSummary:
    fertile = fertile_count(batch)
    if fertile is None and batch.hatched_eggs is not None:
        fertile = batch.number_of_eggs
    return HatchSummary(
        batch_id=batch.id,
        batch_name=batch.name,
        species_id=species.id,
        species_name=species.name,
        start_date=batch.start_date,
        estimated_hatch_date=estimated_hatch_date(batch.start_date, species.incubation_days),
        number_of_eggs=batch.number_of_eggs,
        fertile_eggs=fertile,
        hatched_eggs=batch.hatched_eggs,
        fertility_rate=fertility_rate(batch),
        hatch_rate_of_total=hatch_rate_of_total(batch),
        hatch_rate_of_fertile=hatch_rate_of_fertile(batch),
    )


HISTORY_COLUMNS = [
    "batch_id",
    "batch_name",
    "species_id",
    "species_name",
    "start_date",
    "estimated_hatch_date",
    "number_of_eggs",
    "fertile_eggs",
    "hatched_eggs",
    "fertility_rate",
    "hatch_rate_of_total",
    "hatch_rate_of_fertile",
]

TASK_COLUMNS = [
    "batch_id",
    "batch_name",
    "date",
    "day_of_incubation",
    "type",
    "description",
    "completed",
    "id",
]


def history_dataframe(summaries: Sequence[HatchSummary]) -> pd.DataFrame:
    """Return history rows as a DataFrame (columns fixed even when empty)."""
    return pd.DataFrame([asdict(summary) for summary in summaries], columns=HISTORY_COLUMNS)


def tasks_dataframe(tasks: Iterable[Task]) -> pd.DataFrame:
    """Return tasks in display order with ISO dates and plain-string types."""
    rows = []
    for task in sort_tasks(tasks):
        row = task.model_dump(mode="json")
        rows.append({column: row.get(column) for column in TASK_COLUMNS})
    return pd.DataFrame(rows, columns=TASK_COLUMNS)


__all__ = [
    "HatchSummary",
    "HISTORY_COLUMNS",
    "TASK_COLUMNS",
    "percentage",
    "fertile_count",
    "fertility_rate",
    "hatch_rate_of_total",
    "hatch_rate_of_fertile",
    "summarize_batch",
    "history_dataframe",
    "tasks_dataframe",
]
