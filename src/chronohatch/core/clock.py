"""Injectable calendar clocks.

Timeline and status helpers never read the system date themselves; callers obtain "today" from a
``Clock`` so tests and replays can pin it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Protocol


class Clock(Protocol):
    """Source of the current local calendar date."""

    def now(self) -> date:  # pragma: no cover - interface only
        ...


class SystemClock:
    """Clock backed by the local system date."""

    def now(self) -> date:
        return date.today()


@dataclass(slots=True)
class FixedClock:
    """Clock pinned to a specific day (tests, ``--today`` overrides)."""

    today: date

    def now(self) -> date:
        return self.today


__all__ = ["Clock", "SystemClock", "FixedClock"]
