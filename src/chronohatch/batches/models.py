"""Pydantic models describing incubation batches."""

from __future__ import annotations

import datetime as dt
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator, model_validator

from chronohatch.scheduling.models import (
    BatchTimeline,
    IncubatorType,
    Task,
    normalise_candling_days,
)

MAX_EGGS = 1000
MAX_NOTES_LENGTH = 500


def _candling_result_id() -> str:
    return f"candling-{uuid4().hex[:12]}"


class CandlingResult(BaseModel):
    """Outcome of one candling session.

    Attributes
    ----------
    id:
        Unique identifier (generated when omitted, e.g. for legacy documents).
    day:
        One-indexed incubation day the eggs were candled.
    fertile:
        Number of eggs judged fertile; never more than the batch's ``number_of_eggs``.
    notes:
        Free-text remarks ("strong veins, 2 clears").
    """

    id: str = Field(default_factory=_candling_result_id)
    day: int
    fertile: int
    notes: str = ""

    @field_validator("day")
    @classmethod
    def _day_positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("CandlingResult.day must be >= 1")
        return value

    @field_validator("fertile")
    @classmethod
    def _fertile_non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("CandlingResult.fertile must be non-negative")
        return value


class BatchFields(BaseModel):
    """User-editable batch fields as submitted by the create/edit form.

    Range checks that need the species table (custom candling days within the incubation span)
    happen in :func:`chronohatch.validation.validate_custom_candling_days`.
    """

    name: str
    species_id: str
    start_date: dt.date
    number_of_eggs: int
    incubator_type: IncubatorType = IncubatorType.MANUAL
    custom_candling_days: tuple[int, ...] = ()
    notes: str = ""

    @field_validator("name")
    @classmethod
    def _name_length(cls, value: str) -> str:
        value = value.strip()
        if not 2 <= len(value) <= 50:
            raise ValueError("Batch name must be between 2 and 50 characters")
        return value

    @field_validator("number_of_eggs")
    @classmethod
    def _eggs_in_range(cls, value: int) -> int:
        if not 1 <= value <= MAX_EGGS:
            raise ValueError(f"number_of_eggs must be between 1 and {MAX_EGGS}")
        return value

    @field_validator("custom_candling_days", mode="before")
    @classmethod
    def _normalise_custom_days(cls, value: object) -> tuple[int, ...]:
        days = normalise_candling_days(value)
        if days and days[0] < 1:
            raise ValueError("custom_candling_days must be >= 1 (day 1 is the day after set)")
        return days

    @field_validator("notes", mode="before")
    @classmethod
    def _notes_length(cls, value: str | None) -> str:
        value = value or ""
        if len(value) > MAX_NOTES_LENGTH:
            raise ValueError(f"Notes cannot exceed {MAX_NOTES_LENGTH} characters")
        return value


class Batch(BaseModel):
    """A stored incubation batch together with its generated schedule.

    Attributes
    ----------
    id:
        Opaque identifier assigned by the batch store.
    name / species_id / start_date / number_of_eggs / incubator_type / custom_candling_days / notes:
        Mirror :class:`BatchFields`.
    candling_results:
        Candling outcomes, kept ordered by day.
    hatched_eggs:
        Recorded hatch count, ``None`` until the user enters one.
    tasks:
        Generated care schedule (see :func:`chronohatch.scheduling.generate_tasks`).
    """

    id: str
    name: str
    species_id: str
    start_date: dt.date
    number_of_eggs: int
    incubator_type: IncubatorType = IncubatorType.MANUAL
    custom_candling_days: tuple[int, ...] = ()
    notes: str = ""
    candling_results: list[CandlingResult] = Field(default_factory=list)
    hatched_eggs: int | None = None
    tasks: list[Task] = Field(default_factory=list)

    @field_validator("custom_candling_days", mode="before")
    @classmethod
    def _normalise_custom_days(cls, value: object) -> tuple[int, ...]:
        return normalise_candling_days(value)

    @field_validator("notes", mode="before")
    @classmethod
    def _notes_default(cls, value: str | None) -> str:
        return value or ""

    @model_validator(mode="after")
    def _sort_candling_results(self) -> Batch:
        self.candling_results.sort(key=lambda result: result.day)
        return self

    def timeline(self) -> BatchTimeline:
        """Return the fields the task generator reads."""
        return BatchTimeline(
            id=self.id,
            name=self.name,
            start_date=self.start_date,
            species_id=self.species_id,
            incubator_type=self.incubator_type,
            custom_candling_days=self.custom_candling_days,
        )

    def editable_fields(self) -> BatchFields:
        return BatchFields(
            name=self.name,
            species_id=self.species_id,
            start_date=self.start_date,
            number_of_eggs=self.number_of_eggs,
            incubator_type=self.incubator_type,
            custom_candling_days=self.custom_candling_days,
            notes=self.notes,
        )

    def task(self, task_id: str) -> Task | None:
        return next((task for task in self.tasks if task.id == task_id), None)

    def last_candling(self) -> CandlingResult | None:
        return self.candling_results[-1] if self.candling_results else None


__all__ = ["CandlingResult", "BatchFields", "Batch", "MAX_EGGS", "MAX_NOTES_LENGTH"]
