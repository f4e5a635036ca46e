"""Status/phase classification for dashboards and batch listings."""

from .classifier import (
    LOCKDOWN_WARNING_DAYS,
    BatchStatus,
    IncubationPhase,
    classify_day,
    classify_status,
)

__all__ = [
    "LOCKDOWN_WARNING_DAYS",
    "BatchStatus",
    "IncubationPhase",
    "classify_day",
    "classify_status",
]
