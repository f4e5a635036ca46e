"""Input-boundary checks for batch forms, candling results and hatch counts.

The task generator trusts its inputs; everything that could put an out-of-range day or count into
a stored batch is rejected (or, for free-text day lists, filtered) here first.
"""

from __future__ import annotations

from collections.abc import Iterable

from chronohatch.core.errors import ChronoHatchValueError
from chronohatch.scheduling.models import normalise_candling_days
from chronohatch.species import Species, SpeciesTable

# upper bound for free-text day lists when the species is not yet known
FALLBACK_MAX_DAY = 100


def parse_custom_candling_days(text: str | None, incubation_days: int | None = None) -> tuple[int, ...]:
    """Parse a comma-separated day list the way the batch form does.

    Non-numeric entries, days below 1 and days past ``incubation_days`` are dropped silently; the
    result is sorted and deduplicated.
    """

    if not text:
        return ()
    max_day = incubation_days or FALLBACK_MAX_DAY
    days: set[int] = set()
    for chunk in text.split(","):
        try:
            day = int(chunk.strip())
        except ValueError:
            continue
        if 1 <= day <= max_day:
            days.add(day)
    return tuple(sorted(days))


def require_species(species_id: str, table: SpeciesTable) -> Species:
    species = table.get(species_id)
    if species is None:
        available = ", ".join(table.ids())
        raise ChronoHatchValueError(
            f"Unknown species '{species_id}'. Available: {available}"
        )
    return species


def validate_custom_candling_days(days: Iterable[int] | None, species: Species) -> tuple[int, ...]:
    """Return ``days`` normalised, raising when any falls outside ``[1, incubation_days]``."""
    normalised = normalise_candling_days(days)
    invalid = [day for day in normalised if not 1 <= day <= species.incubation_days]
    if invalid:
        raise ChronoHatchValueError(
            f"Custom candling days {invalid} outside [1, {species.incubation_days}] "
            f"for {species.name}"
        )
    return normalised


def validate_candling_result(
    *,
    day: int,
    fertile: int,
    number_of_eggs: int,
    species: Species | None,
) -> None:
    max_day = species.incubation_days if species is not None else None
    if day < 1 or (max_day is not None and day > max_day):
        raise ChronoHatchValueError(
            f"Candling day {day} outside [1, {max_day if max_day is not None else '...'}]"
        )
    if fertile < 0:
        raise ChronoHatchValueError("Fertile egg count must be non-negative")
    if fertile > number_of_eggs:
        raise ChronoHatchValueError(
            f"Fertile egg count {fertile} cannot exceed total eggs in batch ({number_of_eggs})"
        )


def validate_hatched_eggs(count: int, number_of_eggs: int) -> None:
    if not 0 <= count <= number_of_eggs:
        raise ChronoHatchValueError(
            f"Hatched egg count {count} outside [0, {number_of_eggs}]"
        )


__all__ = [
    "FALLBACK_MAX_DAY",
    "parse_custom_candling_days",
    "require_species",
    "validate_custom_candling_days",
    "validate_candling_result",
    "validate_hatched_eggs",
]
