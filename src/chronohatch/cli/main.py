"""ChronoHatch command-line entry point."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from chronohatch.batches import JsonFileBatchStore
from chronohatch.batches.manager import BatchManager
from chronohatch.config import load_config
from chronohatch.core import FixedClock, SystemClock
from chronohatch.evaluation import history_dataframe, tasks_dataframe
from chronohatch.scheduling import BatchTimeline, IncubatorType, generate_tasks, sort_tasks
from chronohatch.species import load_species_table
from chronohatch.telemetry import LifecycleEventLog

from ._utils import (
    CliState,
    domain_errors,
    format_rate,
    get_state,
    parse_date_option,
    parse_days_option,
)
from .batches import batch_app, candle_app
from .species import species_app
from .tasks import render_tasks, task_app

app = typer.Typer(add_completion=False, no_args_is_help=True)
app.add_typer(species_app, name="species")
app.add_typer(batch_app, name="batch")
app.add_typer(task_app, name="task")
app.add_typer(candle_app, name="candle")
console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    store: Annotated[
        Path | None,
        typer.Option("--store", envvar="CHRONOHATCH_STORE", help="Batch store JSON file."),
    ] = None,
    species_file: Annotated[
        Path | None,
        typer.Option("--species-file", help="YAML file adding or overriding species entries."),
    ] = None,
    event_log: Annotated[
        Path | None,
        typer.Option("--event-log", help="Append lifecycle events to this JSONL file."),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option("--config", envvar="CHRONOHATCH_CONFIG", help="YAML configuration file."),
    ] = None,
    today: Annotated[
        str | None,
        typer.Option("--today", help="Pretend today is this date (YYYY-MM-DD)."),
    ] = None,
) -> None:
    """Track egg-incubation batches and their daily care schedule."""
    with domain_errors():
        try:
            settings = load_config(config).with_overrides(
                store_path=store, species_file=species_file, event_log=event_log
            )
            species_table = load_species_table(settings.species_file)
        except FileNotFoundError as exc:
            raise typer.BadParameter(f"File not found: {exc}") from exc
        batch_store = JsonFileBatchStore(settings.store_path)
    clock = FixedClock(parse_date_option(today, SystemClock().now())) if today else SystemClock()
    manager = BatchManager(
        batch_store,
        species_table=species_table,
        clock=clock,
        events=LifecycleEventLog(settings.event_log, source="cli"),
    )
    ctx.obj = CliState(config=settings, manager=manager)


@app.command("schedule")
def schedule(
    ctx: typer.Context,
    species_id: Annotated[str, typer.Option("--species", "-s", help="Species identifier.")],
    start: Annotated[
        str | None, typer.Option("--start", help="Set date (YYYY-MM-DD, defaults to today).")
    ] = None,
    incubator: Annotated[
        IncubatorType, typer.Option("--incubator", help="Incubator turning mode.")
    ] = IncubatorType.MANUAL,
    candling_days: Annotated[
        str | None, typer.Option("--candling-days", help="Extra candling days, comma separated.")
    ] = None,
    out_csv: Annotated[
        Path | None, typer.Option("--out-csv", help="Write the schedule to CSV.")
    ] = None,
) -> None:
    """Preview the care schedule a new batch would get, without saving anything."""
    state = get_state(ctx)
    if species_id not in state.species_table:
        raise typer.BadParameter(f"Unknown species '{species_id}'", param_hint="--species")
    timeline = BatchTimeline(
        id="preview",
        start_date=parse_date_option(start, state.today),
        species_id=species_id,
        incubator_type=incubator,
        custom_candling_days=parse_days_option(candling_days, species_id, state.species_table),
    )
    tasks = sort_tasks(generate_tasks(timeline, state.species_table))
    render_tasks(tasks, f"Schedule preview: {species_id}", show_batch=False)
    console.print(f"{len(tasks)} task(s)")
    if out_csv:
        out_csv.parent.mkdir(parents=True, exist_ok=True)
        tasks_dataframe(tasks).to_csv(out_csv, index=False)
        console.print(f"Wrote schedule to {out_csv}")


@app.command("history")
def history(
    ctx: typer.Context,
    out_csv: Annotated[
        Path | None, typer.Option("--out-csv", help="Write the history table to CSV.")
    ] = None,
) -> None:
    """Summaries of batches whose hatch window has closed."""
    state = get_state(ctx)
    summaries = state.manager.history()
    if not summaries:
        console.print("No completed batches yet.")
    else:
        table = Table(title="Hatch history")
        table.add_column("Batch")
        table.add_column("Species")
        table.add_column("Set")
        table.add_column("Hatch est.")
        table.add_column("Eggs", justify="right")
        table.add_column("Fertile", justify="right")
        table.add_column("Hatched", justify="right")
        table.add_column("Hatch %", justify="right")
        for summary in summaries:
            table.add_row(
                escape(summary.batch_name),
                summary.species_name,
                summary.start_date.isoformat(),
                summary.estimated_hatch_date.isoformat(),
                str(summary.number_of_eggs),
                "-" if summary.fertile_eggs is None else str(summary.fertile_eggs),
                "-" if summary.hatched_eggs is None else str(summary.hatched_eggs),
                format_rate(summary.hatch_rate_of_total),
            )
        console.print(table)
    if out_csv:
        out_csv.parent.mkdir(parents=True, exist_ok=True)
        history_dataframe(summaries).to_csv(out_csv, index=False)
        console.print(f"Wrote history to {out_csv}")


__all__ = ["app"]


if __name__ == "__main__":
    app()
