"""Core utilities shared across ChronoHatch modules."""

from .clock import Clock, FixedClock, SystemClock
from .errors import BatchNotFoundError, ChronoHatchValueError

__all__ = [
    "BatchNotFoundError",
    "ChronoHatchValueError",
    "Clock",
    "FixedClock",
    "SystemClock",
]
