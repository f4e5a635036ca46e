"""Pydantic models for generated care tasks and the fields that define a batch timeline."""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable
from enum import Enum

from pydantic import BaseModel, field_validator

from chronohatch.core.errors import ChronoHatchValueError

Day = int  # 1-indexed incubation day; 0 is the set date


class IncubatorType(str, Enum):
    MANUAL = "manual"
    AUTO = "auto"


class TaskType(str, Enum):
    TURN = "turn"
    MIST = "mist"
    CANDLE = "candle"
    LOCKDOWN = "lockdown"
    HATCH_CHECK = "hatch_check"
    CUSTOM = "custom"


# display order for tasks falling on the same day
TASK_TYPE_ORDER: dict[TaskType, int] = {
    TaskType.CANDLE: 1,
    TaskType.TURN: 2,
    TaskType.MIST: 3,
    TaskType.LOCKDOWN: 4,
    TaskType.HATCH_CHECK: 5,
    TaskType.CUSTOM: 6,
}


def normalise_candling_days(days: object) -> tuple[int, ...]:
    """Sorted, deduplicated tuple of whole-number days (``None`` -> empty).

    Strings and non-integer entries are rejected rather than coerced, so ``"14"`` never becomes
    days 1 and 4 and ``7.9`` never becomes day 7.
    """
    if days is None:
        return ()
    if isinstance(days, (str, bytes)) or not isinstance(days, Iterable):
        raise ChronoHatchValueError(f"Candling days must be a list of day numbers, got {days!r}")
    normalised: set[int] = set()
    for day in days:
        if isinstance(day, bool) or not isinstance(day, int):
            raise ChronoHatchValueError(f"Candling day {day!r} is not a whole day number")
        normalised.add(day)
    return tuple(sorted(normalised))


class Task(BaseModel):
    """One scheduled activity on one incubation day.

    Attributes
    ----------
    id:
        Deterministic identifier ``{batch_id}-{type}[-{qualifier}]-{day}``; regenerating a schedule
        reproduces the same ids.
    batch_id:
        Owning batch.
    batch_name:
        Display label copied from the batch. Never used for scheduling.
    date:
        Calendar date the task falls on (``YYYY-MM-DD`` when serialised).
    day_of_incubation:
        One-indexed incubation day.
    type:
        :class:`TaskType` of the activity.
    description:
        Human-readable text; does not contain the batch name.
    completed:
        Whether the user checked the task off.
    notes:
        Optional free-text remarks attached by the user.
    """

    id: str
    batch_id: str
    batch_name: str | None = None
    date: dt.date
    day_of_incubation: Day
    type: TaskType
    description: str
    completed: bool = False
    notes: str | None = None


class BatchTimeline(BaseModel):
    """The subset of batch fields the task generator reads."""

    id: str
    name: str = ""
    start_date: dt.date
    species_id: str
    incubator_type: IncubatorType = IncubatorType.MANUAL
    custom_candling_days: tuple[int, ...] = ()

    @field_validator("custom_candling_days", mode="before")
    @classmethod
    def _normalise_custom_days(cls, value: object) -> tuple[int, ...]:
        return normalise_candling_days(value)


__all__ = [
    "Day",
    "IncubatorType",
    "TaskType",
    "TASK_TYPE_ORDER",
    "Task",
    "BatchTimeline",
    "normalise_candling_days",
]
