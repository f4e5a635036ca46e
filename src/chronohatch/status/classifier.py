"""Dashboard status derived from a batch's set date and today's date.

Nothing here is persisted: the phase is recomputed from ``today`` on every read, so calling
``classify_status`` twice with the same inputs always yields the same :class:`BatchStatus`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from chronohatch.batches.models import Batch
from chronohatch.scheduling.timeline import (
    CalendarDate,
    current_incubation_day,
    days_until_lockdown,
    progress_percentage,
)
from chronohatch.species import Species

LOCKDOWN_WARNING_DAYS = 2


class IncubationPhase(str, Enum):
    UPCOMING = "upcoming"
    SET_DAY = "set_day"
    ACTIVE = "active"
    LOCKDOWN_APPROACHING = "lockdown_approaching"
    LOCKDOWN_DAY = "lockdown_day"
    HATCHING_WINDOW = "hatching_window"
    COMPLETED = "completed"
    UNKNOWN = "unknown"


def classify_day(current_day: int, species: Species) -> IncubationPhase:
    """Map an incubation day to its phase (first matching rule wins)."""
    if current_day < 0:
        return IncubationPhase.UPCOMING
    if current_day == 0:
        return IncubationPhase.SET_DAY
    if current_day > species.hatch_window_end:
        return IncubationPhase.COMPLETED
    if current_day == species.lockdown_day:
        return IncubationPhase.LOCKDOWN_DAY
    if species.lockdown_day <= current_day:
        return IncubationPhase.HATCHING_WINDOW
    if 0 < species.lockdown_day - current_day <= LOCKDOWN_WARNING_DAYS:
        return IncubationPhase.LOCKDOWN_APPROACHING
    return IncubationPhase.ACTIVE


@dataclass(frozen=True, slots=True)
class BatchStatus:
    """Computed status of one batch on one day.

    Attributes
    ----------
    phase:
        :class:`IncubationPhase` for the day.
    current_day:
        Calendar days since the set date (negative before the batch starts).
    incubation_days:
        Species incubation length, ``None`` when the species is unknown.
    progress:
        Percentage in ``[0, 100]``.
    days_until_lockdown:
        Days left before lockdown while running, otherwise ``None``.
    hatched_eggs:
        Recorded hatch count, surfaced in the completed label.
    """

    phase: IncubationPhase
    current_day: int
    incubation_days: int | None
    progress: float
    days_until_lockdown: int | None = None
    hatched_eggs: int | None = None

    @property
    def days_until_start(self) -> int | None:
        return -self.current_day if self.current_day < 0 else None

    @property
    def label(self) -> str:
        phase = self.phase
        if phase is IncubationPhase.UPCOMING:
            days = -self.current_day
            return f"Starts in {days} day{'' if days == 1 else 's'}"
        if phase is IncubationPhase.SET_DAY:
            return "Set Day"
        if phase is IncubationPhase.COMPLETED:
            return f"Hatched: {self.hatched_eggs}" if self.hatched_eggs is not None else "Completed"
        if phase is IncubationPhase.LOCKDOWN_DAY:
            return "Lockdown Day!"
        if phase is IncubationPhase.HATCHING_WINDOW:
            return "Hatching Window!"
        if phase is IncubationPhase.LOCKDOWN_APPROACHING:
            days = self.days_until_lockdown
            return f"Lockdown in {days} day{'' if days == 1 else 's'}"
        if phase is IncubationPhase.ACTIVE:
            return f"Inc. Day: {self.current_day}"
        return "Status Unknown"

    @property
    def progress_label(self) -> str | None:
        if self.phase is IncubationPhase.SET_DAY:
            return "Incubation begins tomorrow"
        if self.phase in (
            IncubationPhase.ACTIVE,
            IncubationPhase.LOCKDOWN_APPROACHING,
            IncubationPhase.LOCKDOWN_DAY,
            IncubationPhase.HATCHING_WINDOW,
        ):
            return f"Day {self.current_day} of {self.incubation_days}"
        return None

    @property
    def in_incubation(self) -> bool:
        """True between day 1 and the expected hatch day inclusive."""
        return (
            self.incubation_days is not None and 0 < self.current_day <= self.incubation_days
        )


def classify_status(today: CalendarDate, batch: Batch, species: Species | None) -> BatchStatus:
    """Compute the dashboard status of ``batch`` on ``today``.

    An unresolved species yields ``IncubationPhase.UNKNOWN`` instead of raising so a batch with
    legacy species data can still be listed.
    """

    current_day = current_incubation_day(today, batch.start_date)
    if species is None:
        return BatchStatus(
            phase=IncubationPhase.UNKNOWN,
            current_day=current_day,
            incubation_days=None,
            progress=0.0,
            hatched_eggs=batch.hatched_eggs,
        )
    return BatchStatus(
        phase=classify_day(current_day, species),
        current_day=current_day,
        incubation_days=species.incubation_days,
        progress=progress_percentage(current_day, species.incubation_days),
        days_until_lockdown=days_until_lockdown(current_day, species.lockdown_day),
        hatched_eggs=batch.hatched_eggs,
    )


__all__ = [
    "IncubationPhase",
    "BatchStatus",
    "LOCKDOWN_WARNING_DAYS",
    "classify_day",
    "classify_status",
]
