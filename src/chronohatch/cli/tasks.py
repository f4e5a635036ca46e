"""Task agenda and completion commands."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from chronohatch.scheduling import Task, sort_tasks

from ._utils import domain_errors, get_state, parse_date_option

console = Console()
task_app = typer.Typer(add_completion=False, no_args_is_help=True, help="Daily care tasks.")


def render_tasks(tasks: Sequence[Task], title: str, *, show_batch: bool = True) -> None:
    table = Table(title=title)
    table.add_column("Done", justify="center")
    table.add_column("Date")
    table.add_column("Day", justify="right")
    if show_batch:
        table.add_column("Batch")
    table.add_column("Task")
    table.add_column("ID", style="dim", overflow="fold")
    for task in tasks:
        row = ["x" if task.completed else "", task.date.isoformat(), str(task.day_of_incubation)]
        if show_batch:
            row.append(escape(task.batch_name or task.batch_id))
        row.extend([task.description, task.id])
        table.add_row(*row)
    console.print(table)


@task_app.command("list")
def list_tasks(
    ctx: typer.Context,
    batch_id: Annotated[
        str | None, typer.Option("--batch", "-b", help="Only tasks of this batch.")
    ] = None,
    day: Annotated[
        str | None,
        typer.Option("--date", help="Agenda date (YYYY-MM-DD). Defaults to today."),
    ] = None,
    pending: Annotated[bool, typer.Option("--pending", help="Hide completed tasks.")] = False,
    full: Annotated[
        bool, typer.Option("--all", help="Whole schedule of --batch instead of one day.")
    ] = False,
) -> None:
    """Show the agenda for a day, or a batch's full schedule with ``--batch ID --all``."""
    state = get_state(ctx)
    if full:
        if batch_id is None:
            raise typer.BadParameter("--all requires --batch", param_hint="--all")
        with domain_errors():
            batch = state.manager.require_batch(batch_id)
        tasks = [task for task in sort_tasks(batch.tasks) if not (pending and task.completed)]
        render_tasks(tasks, f"Schedule for {escape(batch.name)}", show_batch=False)
        return

    target = parse_date_option(day, state.today)
    with domain_errors():
        if batch_id is not None:
            state.manager.require_batch(batch_id)
        tasks = state.manager.tasks_for_date(target, pending_only=pending)
    if batch_id is not None:
        tasks = [task for task in tasks if task.batch_id == batch_id]
    if not tasks:
        console.print(f"No tasks for {target.isoformat()}.")
        return
    render_tasks(tasks, f"Tasks for {target.isoformat()}")


@task_app.command("toggle")
def toggle_task(
    ctx: typer.Context,
    batch_id: Annotated[str, typer.Argument(help="Batch identifier.")],
    task_id: Annotated[str, typer.Argument(help="Task identifier.")],
    done: Annotated[
        bool | None,
        typer.Option("--done/--undone", help="Set explicitly instead of toggling."),
    ] = None,
    notes: Annotated[str | None, typer.Option("--notes", help="Attach a note.")] = None,
) -> None:
    """Toggle (or set) a task's completion flag."""
    state = get_state(ctx)
    with domain_errors():
        task = state.manager.set_task_completed(batch_id, task_id, done, notes=notes)
    marker = "completed" if task.completed else "pending"
    console.print(f"{task.description} (Day {task.day_of_incubation}) marked {marker}")


__all__ = ["task_app", "render_tasks"]
