"""Species table inspection commands."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from chronohatch.species import NO_MISTING_DAY, Species

from ._utils import format_days, get_state

console = Console()
species_app = typer.Typer(
    add_completion=False, no_args_is_help=True, help="Inspect incubation parameters per species."
)


def _misting(species: Species) -> str:
    if species.misting_start_day >= NO_MISTING_DAY:
        return "-"
    return f"{species.misting_start_day}-{species.lockdown_day - 1}"


@species_app.command("list")
def list_species(ctx: typer.Context) -> None:
    """List the built-in (and overridden) species."""
    state = get_state(ctx)
    table = Table(title="Species")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Days", justify="right")
    table.add_column("Candling")
    table.add_column("Misting")
    table.add_column("Lockdown", justify="right")
    for species in state.species_table.all():
        table.add_row(
            species.id,
            species.name,
            str(species.incubation_days),
            format_days(species.default_candling_days),
            _misting(species),
            str(species.lockdown_day),
        )
    console.print(table)


@species_app.command("show")
def show_species(
    ctx: typer.Context,
    species_id: str = typer.Argument(..., help="Species identifier (e.g. pekin_duck)."),
) -> None:
    """Show the parameters of one species."""
    species = get_state(ctx).species_table.get(species_id)
    if species is None:
        raise typer.BadParameter(f"Unknown species '{species_id}'", param_hint="SPECIES_ID")
    console.print(f"[bold]{species.name}[/] ({species.id})")
    console.print(f"Incubation days: {species.incubation_days}")
    console.print(f"Default candling days: {format_days(species.default_candling_days)}")
    console.print(f"Misting days: {_misting(species)}")
    console.print(f"Lockdown day: {species.lockdown_day}")
    console.print(f"Hatch window: days {species.incubation_days}-{species.hatch_window_end}")


__all__ = ["species_app"]
