"""Pydantic model describing per-species incubation parameters."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

NO_MISTING_DAY = 999
CUSTOM_SPECIES_ID = "custom"


class Species(BaseModel):
    """Biological constants that drive a batch's care schedule.

    Attributes
    ----------
    id:
        Stable identifier referenced by ``Batch.species_id`` (e.g. ``"pekin_duck"``).
    name:
        Display name.
    incubation_days:
        Total incubation length. Days are numbered ``1..incubation_days``; day 1 is the calendar
        day after the set date.
    default_candling_days:
        One-indexed days on which a candling task is generated automatically.
    misting_start_day:
        First day of misting. Misting runs until the day before lockdown; ``999`` disables it.
    lockdown_day:
        Day on which turning and misting stop and lockdown tasks fire.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    incubation_days: int
    default_candling_days: tuple[int, ...] = ()
    misting_start_day: int = NO_MISTING_DAY
    lockdown_day: int

    @field_validator("incubation_days")
    @classmethod
    def _incubation_positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("Species.incubation_days must be >= 1")
        return value

    @field_validator("default_candling_days")
    @classmethod
    def _normalise_candling(cls, value: tuple[int, ...]) -> tuple[int, ...]:
        return tuple(sorted(set(value)))

    @model_validator(mode="after")
    def _days_within_incubation(self) -> Species:
        if not 1 <= self.lockdown_day <= self.incubation_days:
            raise ValueError(
                f"Species {self.id}: lockdown_day={self.lockdown_day} outside "
                f"[1, {self.incubation_days}]"
            )
        for day in self.default_candling_days:
            if not 1 <= day <= self.incubation_days:
                raise ValueError(
                    f"Species {self.id}: candling day {day} outside [1, {self.incubation_days}]"
                )
        return self

    @property
    def mists(self) -> bool:
        """Whether any misting task can be generated for this species."""
        return self.misting_start_day < self.lockdown_day

    @property
    def hatch_window_end(self) -> int:
        """Last day of the three-day hatch window."""
        return self.incubation_days + 2


__all__ = ["Species", "NO_MISTING_DAY", "CUSTOM_SPECIES_ID"]
