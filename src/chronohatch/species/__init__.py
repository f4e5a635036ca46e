"""Species parameter table (incubation length, candling, misting and lockdown days)."""

from .models import CUSTOM_SPECIES_ID, NO_MISTING_DAY, Species
from .table import SpeciesTable, default_species_table, load_species_file, load_species_table

__all__ = [
    "Species",
    "SpeciesTable",
    "CUSTOM_SPECIES_ID",
    "NO_MISTING_DAY",
    "default_species_table",
    "load_species_file",
    "load_species_table",
]
