"""Species parameter table (built-in YAML data plus optional user overrides)."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import TypeAdapter

from chronohatch.core.errors import ChronoHatchValueError

from .models import CUSTOM_SPECIES_ID, Species

_DATA_PATH = Path(__file__).resolve().parent / "data" / "species.yaml"
_SPECIES_LIST = TypeAdapter(list[Species])


class SpeciesTable:
    """Read-only lookup of :class:`Species` keyed by id.

    ``get`` is total: unknown ids return ``None`` so schedule generation can fail soft for
    batches that reference legacy or corrupted species data.
    """

    def __init__(self, species: Iterable[Species]) -> None:
        entries: dict[str, Species] = {}
        for entry in species:
            if entry.id in entries:
                raise ChronoHatchValueError(f"Duplicate species id '{entry.id}'")
            entries[entry.id] = entry
        self._entries: Mapping[str, Species] = entries

    def get(self, species_id: str | None) -> Species | None:
        if species_id is None:
            return None
        return self._entries.get(species_id)

    def __contains__(self, species_id: object) -> bool:
        return species_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def ids(self) -> list[str]:
        return list(self._entries)

    def all(self) -> list[Species]:
        """Return species sorted by display name with the custom placeholder last."""
        return sorted(
            self._entries.values(),
            key=lambda s: (s.id == CUSTOM_SPECIES_ID, s.name.casefold()),
        )

    def with_overrides(self, overrides: Iterable[Species]) -> SpeciesTable:
        """Return a new table where ``overrides`` replace or extend the current entries."""
        merged = dict(self._entries)
        for entry in overrides:
            merged[entry.id] = entry
        return SpeciesTable(merged.values())


def load_species_file(path: str | Path) -> list[Species]:
    """Load a ``species:`` YAML list and validate every entry."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)
    with path.open("r", encoding="utf-8") as handle:
        payload = yaml.safe_load(handle) or {}
    if not isinstance(payload, dict) or not isinstance(payload.get("species"), list):
        raise ChronoHatchValueError(f"{path} must contain a top-level 'species' list")
    return _SPECIES_LIST.validate_python(payload["species"])


@lru_cache(maxsize=1)
def default_species_table() -> SpeciesTable:
    """Return the built-in species table (loaded once)."""
    return SpeciesTable(load_species_file(_DATA_PATH))


def load_species_table(override_path: str | Path | None = None) -> SpeciesTable:
    """Built-in table, optionally extended with entries from ``override_path``."""
    table = default_species_table()
    if override_path is None:
        return table
    return table.with_overrides(load_species_file(override_path))


__all__ = [
    "SpeciesTable",
    "default_species_table",
    "load_species_file",
    "load_species_table",
]
