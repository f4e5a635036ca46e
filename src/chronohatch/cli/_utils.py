"""CLI helper utilities for ChronoHatch."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date

import typer

from chronohatch.batches.manager import BatchManager
from chronohatch.config import AppConfig
from chronohatch.core.errors import BatchNotFoundError
from chronohatch.scheduling import parse_calendar_date
from chronohatch.species import SpeciesTable
from chronohatch.validation import parse_custom_candling_days


@dataclass(slots=True)
class CliState:
    """Objects shared by every sub-command (stored on ``ctx.obj``)."""

    config: AppConfig
    manager: BatchManager

    @property
    def species_table(self) -> SpeciesTable:
        return self.manager.species_table

    @property
    def today(self) -> date:
        return self.manager.clock.now()


def get_state(ctx: typer.Context) -> CliState:
    state = ctx.obj
    if not isinstance(state, CliState):  # pragma: no cover - only when invoked outside the app
        raise typer.BadParameter("ChronoHatch CLI state is not initialised")
    return state


@contextmanager
def domain_errors() -> Iterator[None]:
    """Surface invalid input and missing batches as typer usage errors."""
    try:
        yield
    except (ValueError, BatchNotFoundError) as exc:
        raise typer.BadParameter(str(exc)) from exc


def parse_date_option(value: str | None, default: date) -> date:
    if value is None:
        return default
    with domain_errors():
        return parse_calendar_date(value)


def parse_days_option(
    value: str | None, species_id: str, table: SpeciesTable
) -> tuple[int, ...]:
    """Parse ``--candling-days 7,14`` bounded by the species' incubation length."""
    species = table.get(species_id)
    return parse_custom_candling_days(value, species.incubation_days if species else None)


def format_days(days: Iterable[int]) -> str:
    return ", ".join(str(day) for day in days) or "-"


def format_rate(value: float | None) -> str:
    return "-" if value is None else f"{value:.1f}%"


__all__ = [
    "CliState",
    "get_state",
    "domain_errors",
    "parse_date_option",
    "parse_days_option",
    "format_days",
    "format_rate",
]
