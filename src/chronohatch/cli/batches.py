"""Batch and candling commands backed by :class:`~chronohatch.batches.manager.BatchManager`."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from chronohatch.batches import BatchFields, should_regenerate
from chronohatch.evaluation import summarize_batch
from chronohatch.scheduling import IncubatorType

from ._utils import (
    domain_errors,
    format_days,
    format_rate,
    get_state,
    parse_date_option,
    parse_days_option,
)

console = Console()
batch_app = typer.Typer(add_completion=False, no_args_is_help=True, help="Manage incubation batches.")
candle_app = typer.Typer(add_completion=False, no_args_is_help=True, help="Record candling results.")

BatchIdArg = Annotated[str, typer.Argument(help="Batch identifier.")]


@batch_app.command("create")
def create_batch(
    ctx: typer.Context,
    name: Annotated[str, typer.Option("--name", "-n", help="Display name (2-50 characters).")],
    species_id: Annotated[str, typer.Option("--species", "-s", help="Species identifier.")],
    eggs: Annotated[int, typer.Option("--eggs", "-e", help="Number of eggs set.")],
    start: Annotated[
        str | None, typer.Option("--start", help="Set date (YYYY-MM-DD, defaults to today).")
    ] = None,
    incubator: Annotated[
        IncubatorType, typer.Option("--incubator", help="Incubator turning mode.")
    ] = IncubatorType.MANUAL,
    candling_days: Annotated[
        str | None,
        typer.Option("--candling-days", help="Extra candling days, comma separated (e.g. 5,12)."),
    ] = None,
    notes: Annotated[str, typer.Option("--notes", help="Free-text notes.")] = "",
) -> None:
    """Create a batch and generate its care schedule."""
    state = get_state(ctx)
    start_date = parse_date_option(start, state.today)
    with domain_errors():
        fields = BatchFields(
            name=name,
            species_id=species_id,
            start_date=start_date,
            number_of_eggs=eggs,
            incubator_type=incubator,
            custom_candling_days=parse_days_option(candling_days, species_id, state.species_table),
            notes=notes,
        )
        batch = state.manager.add_batch(fields)
    console.print(f"[bold green]Created batch[/] {batch.id}")
    console.print(f"Generated {len(batch.tasks)} task(s) starting {batch.start_date.isoformat()}")


@batch_app.command("edit")
def edit_batch(
    ctx: typer.Context,
    batch_id: BatchIdArg,
    name: Annotated[str | None, typer.Option("--name", "-n", help="New display name.")] = None,
    species_id: Annotated[str | None, typer.Option("--species", "-s", help="New species.")] = None,
    eggs: Annotated[int | None, typer.Option("--eggs", "-e", help="New egg count.")] = None,
    start: Annotated[str | None, typer.Option("--start", help="New set date (YYYY-MM-DD).")] = None,
    incubator: Annotated[
        IncubatorType | None, typer.Option("--incubator", help="New incubator turning mode.")
    ] = None,
    candling_days: Annotated[
        str | None,
        typer.Option("--candling-days", help="Replace custom candling days ('' clears them)."),
    ] = None,
    notes: Annotated[str | None, typer.Option("--notes", help="Replace notes.")] = None,
) -> None:
    """Edit a batch; the schedule is regenerated only when its timeline changes."""
    state = get_state(ctx)
    with domain_errors():
        existing = state.manager.require_batch(batch_id)
        current = existing.editable_fields().model_dump()
        target_species = species_id or existing.species_id
        update = {
            "name": name,
            "species_id": species_id,
            "number_of_eggs": eggs,
            "start_date": parse_date_option(start, existing.start_date) if start else None,
            "incubator_type": incubator,
            "custom_candling_days": (
                parse_days_option(candling_days, target_species, state.species_table)
                if candling_days is not None
                else None
            ),
            "notes": notes,
        }
        current.update({key: value for key, value in update.items() if value is not None})
        fields = BatchFields.model_validate(current)
        regenerate = should_regenerate(existing, fields)
        batch = state.manager.update_batch(batch_id, fields)
    console.print(f"[bold green]Updated batch[/] {batch.id}")
    if regenerate:
        console.print(f"Schedule regenerated: {len(batch.tasks)} task(s), progress reset")
    else:
        console.print("Schedule preserved")


@batch_app.command("list")
def list_batches(ctx: typer.Context) -> None:
    """List batches ordered by set date with their current status."""
    state = get_state(ctx)
    rows = state.manager.statuses()
    if not rows:
        console.print("No batches yet.")
        return
    table = Table(title=f"Batches ({state.today.isoformat()})")
    table.add_column("ID", style="cyan", overflow="fold")
    table.add_column("Name")
    table.add_column("Species")
    table.add_column("Set")
    table.add_column("Eggs", justify="right")
    table.add_column("Status")
    table.add_column("Progress", justify="right")
    for batch, status in rows:
        table.add_row(
            batch.id,
            escape(batch.name),
            batch.species_id,
            batch.start_date.isoformat(),
            str(batch.number_of_eggs),
            status.label,
            f"{status.progress:.0f}%",
        )
    console.print(table)


@batch_app.command("show")
def show_batch(ctx: typer.Context, batch_id: BatchIdArg) -> None:
    """Show one batch: status, candling results and hatch statistics."""
    state = get_state(ctx)
    with domain_errors():
        batch = state.manager.require_batch(batch_id)
        status = state.manager.status(batch_id)
    species = state.manager.species_for(batch)
    console.print(f"[bold]{escape(batch.name)}[/] ({batch.id})")
    console.print(f"Species: {species.name if species else batch.species_id}")
    console.print(f"Set date: {batch.start_date.isoformat()}")
    console.print(f"Eggs: {batch.number_of_eggs}")
    console.print(f"Incubator: {batch.incubator_type.value}")
    console.print(f"Custom candling days: {format_days(batch.custom_candling_days)}")
    console.print(f"Status: {status.label}")
    if status.progress_label:
        console.print(f"Progress: {status.progress_label} ({status.progress:.0f}%)")
    done = sum(task.completed for task in batch.tasks)
    console.print(f"Tasks: {done}/{len(batch.tasks)} completed")
    if batch.notes:
        console.print(f"Notes: {escape(batch.notes)}")

    if batch.candling_results:
        table = Table(title="Candling results")
        table.add_column("ID", overflow="fold")
        table.add_column("Day", justify="right")
        table.add_column("Fertile", justify="right")
        table.add_column("Notes")
        for result in batch.candling_results:
            table.add_row(result.id, str(result.day), str(result.fertile), escape(result.notes))
        console.print(table)

    if species is not None:
        summary = summarize_batch(batch, species)
        console.print(f"Estimated hatch: {summary.estimated_hatch_date.isoformat()}")
        console.print(f"Fertility: {format_rate(summary.fertility_rate)}")
        console.print(f"Hatch rate (total): {format_rate(summary.hatch_rate_of_total)}")
        console.print(f"Hatch rate (fertile): {format_rate(summary.hatch_rate_of_fertile)}")


@batch_app.command("delete")
def delete_batch(
    ctx: typer.Context,
    batch_id: BatchIdArg,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip the confirmation prompt.")] = False,
) -> None:
    """Delete a batch together with its tasks and candling results."""
    state = get_state(ctx)
    with domain_errors():
        batch = state.manager.require_batch(batch_id)
    if not yes:
        typer.confirm(f"Delete batch '{batch.name}'?", abort=True)
    with domain_errors():
        state.manager.delete_batch(batch_id)
    console.print(f"Deleted batch {batch_id}")


@batch_app.command("hatched")
def set_hatched(
    ctx: typer.Context,
    batch_id: BatchIdArg,
    count: Annotated[int, typer.Argument(help="Number of chicks hatched.")],
) -> None:
    """Record how many eggs hatched."""
    state = get_state(ctx)
    with domain_errors():
        state.manager.set_hatched_eggs(batch_id, count)
    console.print(f"Recorded {count} hatched egg(s) for {batch_id}")


@candle_app.command("add")
def add_candling(
    ctx: typer.Context,
    batch_id: BatchIdArg,
    day: Annotated[int, typer.Option("--day", "-d", help="Incubation day candled.")],
    fertile: Annotated[int, typer.Option("--fertile", "-f", help="Fertile egg count.")],
    notes: Annotated[str, typer.Option("--notes", help="Observations.")] = "",
) -> None:
    """Add a candling result to a batch."""
    state = get_state(ctx)
    with domain_errors():
        result = state.manager.add_candling_result(batch_id, day, fertile, notes)
    console.print(f"Added candling result {result.id} (day {result.day}, {result.fertile} fertile)")


@candle_app.command("remove")
def remove_candling(
    ctx: typer.Context,
    batch_id: BatchIdArg,
    result_id: Annotated[str, typer.Argument(help="Candling result identifier.")],
) -> None:
    """Delete a candling result."""
    state = get_state(ctx)
    with domain_errors():
        state.manager.delete_candling_result(batch_id, result_id)
    console.print(f"Removed candling result {result_id}")


__all__ = ["batch_app", "candle_app"]
