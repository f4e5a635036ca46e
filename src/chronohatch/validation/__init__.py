"""Input validation helpers (form parsing and range checks)."""

from .inputs import (
    FALLBACK_MAX_DAY,
    parse_custom_candling_days,
    require_species,
    validate_candling_result,
    validate_custom_candling_days,
    validate_hatched_eggs,
)

__all__ = [
    "FALLBACK_MAX_DAY",
    "parse_custom_candling_days",
    "require_species",
    "validate_candling_result",
    "validate_custom_candling_days",
    "validate_hatched_eggs",
]
