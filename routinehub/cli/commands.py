"""CLI commands for routinehub.

The CLI is the only place that samples the wall clock: each command takes
``--at`` to pin the reference instant and defaults to ``datetime.now()``.
"""

from datetime import date, datetime
from typing import NoReturn

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from routinehub import __logo__, __version__

app = typer.Typer(
    name="routinehub",
    help=f"{__logo__} routinehub - Daily Routine & Reminder Hub",
    no_args_is_help=True,
)

console = Console()

_PRESETS = {
    "everyday": list(range(7)),
    "weekdays": [1, 2, 3, 4, 5],
    "weekends": [0, 6],
}
_STATUS_STYLE = {
    "done": "green",
    "missed": "red",
    "due_now": "bold yellow",
    "starting_soon": "yellow",
    "scheduled": "dim",
}


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} routinehub v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
):
    """routinehub - Daily Routine & Reminder Hub."""
    pass


# ============================================================================
# Helpers
# ============================================================================


def _reference(at: str | None) -> datetime:
    """Reference instant for a command: --at if given, else the current time."""
    if not at:
        return datetime.now()
    from routinehub.routine.utils import parse_datetime

    try:
        return parse_datetime(at)
    except ValueError:
        raise typer.BadParameter(f"--at must be an ISO datetime, got {at!r}")


def _parse_days(value: str) -> list[int]:
    """Parse "1,3,5", "mon,wed,fri" or a preset (everyday, weekdays, weekends)."""
    from routinehub.routine.utils import DAY_LABELS

    value = value.strip().lower()
    if value in _PRESETS:
        return list(_PRESETS[value])

    names = {label[:3].lower(): i for i, label in enumerate(DAY_LABELS)}
    days = []
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        if part.isdigit():
            days.append(int(part))
        elif part[:3] in names:
            days.append(names[part[:3]])
        else:
            raise typer.BadParameter(f"Unknown day {part!r}")
    return days


def _fail(message: str) -> NoReturn:
    console.print(f"[red]Error: {message}[/red]")
    raise typer.Exit(1)


def _make_manager():
    from routinehub.config.loader import load_config
    from routinehub.routine.manager import RoutineManager
    from routinehub.routine.storage import JsonStorageBackend
    from routinehub.utils.helpers import get_workspace_path

    config = load_config()
    workspace = get_workspace_path(config.workspace)
    return RoutineManager(JsonStorageBackend(workspace), config.routine)


# ============================================================================
# Onboard / Setup
# ============================================================================


@app.command()
def onboard():
    """Initialize routinehub configuration and workspace."""
    from routinehub.config.loader import get_config_path, save_config
    from routinehub.config.schema import Config
    from routinehub.routine.storage import JsonStorageBackend
    from routinehub.utils.helpers import get_workspace_path

    config_path = get_config_path()

    if config_path.exists():
        console.print(f"[yellow]Config already exists at {config_path}[/yellow]")
        if not typer.confirm("Overwrite?"):
            raise typer.Exit()

    config = Config()
    save_config(config)
    console.print(f"[green]✓[/green] Created config at {config_path}")

    workspace = get_workspace_path(config.workspace)
    backend = JsonStorageBackend(workspace)
    if not (backend.routines_dir / "tasks.json").exists():
        backend.save_tasks(backend.load_tasks())
    if not (backend.routines_dir / "completions.json").exists():
        backend.save_completions(backend.load_completions())
    console.print(f"[green]✓[/green] Created workspace at {workspace}")

    console.print(f"\n{__logo__} routinehub is ready!")
    console.print("\nNext steps:")
    console.print('  1. Add a routine: [cyan]routinehub add "Hydrate" --time 08:00 --days everyday[/cyan]')
    console.print("  2. See today: [cyan]routinehub today[/cyan]")


# ============================================================================
# Tasks
# ============================================================================


@app.command()
def add(
    title: str = typer.Argument(..., help="Routine title"),
    time: str = typer.Option("08:00", "--time", "-t", help="Reminder time (HH:MM)"),
    duration: int = typer.Option(30, "--duration", "-d", help="Duration in minutes"),
    priority: str = typer.Option("medium", "--priority", "-p", help="low, medium or high"),
    days: str = typer.Option(
        "weekdays", "--days", help="Days: '1,3,5', 'mon,wed', everyday, weekdays, weekends"
    ),
    description: str = typer.Option("", "--description", help="Optional notes"),
    at: str = typer.Option(None, "--at", help="Reference instant (ISO), defaults to now"),
):
    """Plan a new recurring routine."""
    from routinehub.routine.schema import TaskDraft

    now = _reference(at)
    try:
        draft = TaskDraft(
            title=title,
            description=description,
            time=time,
            duration_minutes=duration,
            priority=priority,
            days_of_week=_parse_days(days),
        )
    except ValidationError as e:
        _fail(f"invalid routine: {e.errors()[0]['msg']}")

    task_id = _make_manager().add_task(draft, now)
    console.print(f"[green]✓[/green] Created {task_id}: {draft.title}")


@app.command()
def remove(task_id: str = typer.Argument(..., help="Task ID")):
    """Remove a routine (its completion history is kept)."""
    if not _make_manager().delete_task(task_id):
        _fail(f"Task {task_id} not found")
    console.print(f"[green]✓[/green] Removed {task_id}")


@app.command()
def done(
    task_id: str = typer.Argument(..., help="Task ID"),
    on: str = typer.Option(None, "--date", help="Day to toggle (YYYY-MM-DD), defaults to today"),
    at: str = typer.Option(None, "--at", help="Reference instant (ISO), defaults to now"),
):
    """Toggle a routine's completion for a day."""
    from routinehub.routine.utils import normalize_iso_date

    day: date = _reference(at).date()
    if on:
        normalized = normalize_iso_date(on)
        if normalized is None:
            raise typer.BadParameter(f"--date must be YYYY-MM-DD, got {on!r}")
        day = date.fromisoformat(normalized)

    manager = _make_manager()
    if manager.get_task(task_id) is None:
        console.print(f"[yellow]Note: {task_id} is not a current routine[/yellow]")
    completed = manager.toggle_completion(task_id, day)
    state = "done" if completed else "not done"
    console.print(f"[green]✓[/green] {task_id} marked {state} for {day.isoformat()}")


# ============================================================================
# Views
# ============================================================================


@app.command()
def today(
    at: str = typer.Option(None, "--at", help="Reference instant (ISO), defaults to now"),
    plain: bool = typer.Option(False, "--plain", help="Plain text instead of a table"),
):
    """Show today's routines, statuses and streak."""
    from routinehub.routine.helper import describe_status, get_today_summary
    from routinehub.routine.utils import format_time_of_day

    view = _make_manager().today(_reference(at))

    if plain:
        console.print(get_today_summary(view), markup=False, highlight=False)
        return

    summary = view.summary
    console.print(f"{__logo__} [bold]{view.day.strftime('%A, %B')} {view.day.day}[/bold]")
    console.print(
        f"Done today: {summary.completed}/{summary.total} "
        f"({summary.ratio}%)  Day streak: {view.streak}"
    )

    if not view.entries:
        console.print("[dim]No routines scheduled today. Add one to get started.[/dim]")
        return

    table = Table(title="Today's focus")
    table.add_column("ID", style="cyan")
    table.add_column("Time")
    table.add_column("Title")
    table.add_column("Priority")
    table.add_column("Status")
    for entry in view.entries:
        style = _STATUS_STYLE[entry.status.value]
        table.add_row(
            entry.task.id,
            format_time_of_day(entry.scheduled.time()),
            entry.task.title,
            entry.task.priority.upper(),
            f"[{style}]{describe_status(entry)}[/{style}]",
        )
    console.print(table)


@app.command()
def upcoming(
    window: int = typer.Option(None, "--window", "-w", help="Lookahead in minutes"),
    at: str = typer.Option(None, "--at", help="Reference instant (ISO), defaults to now"),
):
    """Show routines starting within the lookahead window."""
    from routinehub.routine.utils import InvalidArgumentError, format_time_of_day

    try:
        items = _make_manager().upcoming(_reference(at), window)
    except InvalidArgumentError as e:
        _fail(str(e))

    if not items:
        console.print("Nothing urgent approaching. You're on track.")
        return
    for item in items:
        console.print(
            f"[cyan]{item.task.id}[/cyan] {format_time_of_day(item.scheduled.time())} "
            f"{item.task.title} - due in {item.minutes_until} minutes"
        )


@app.command()
def week(
    day: int = typer.Option(None, "--day", help="Weekday index, 0=Sunday ... 6=Saturday"),
    at: str = typer.Option(None, "--at", help="Reference instant (ISO), defaults to now"),
):
    """Weekly planner: routines per weekday, and the lineup of one day."""
    from routinehub.routine.utils import (
        DAY_LABELS,
        InvalidArgumentError,
        format_days,
        reference_date_for_day,
        weekday_index,
    )

    now = _reference(at)
    selected = weekday_index(now) if day is None else day
    manager = _make_manager()
    state = manager.load_state()

    try:
        target = reference_date_for_day(selected, now)
        agenda = state.list_agenda(selected, target)
    except InvalidArgumentError as e:
        _fail(str(e))

    counts = state.tasks_per_day()
    console.print(
        "  ".join(
            f"[bold]{label[:3]}[/bold] {counts[i]}" if i == selected else f"{label[:3]} {counts[i]}"
            for i, label in enumerate(DAY_LABELS)
        )
    )

    if not agenda:
        console.print(f"[dim]No routines planned for {DAY_LABELS[selected]}.[/dim]")
        return

    table = Table(title=f"{DAY_LABELS[selected]} {target.isoformat()}")
    table.add_column("ID", style="cyan")
    table.add_column("Time")
    table.add_column("Title")
    table.add_column("Minutes")
    table.add_column("Repeats")
    table.add_column("Today")
    for task, scheduled in agenda:
        table.add_row(
            task.id,
            scheduled.strftime("%H:%M"),
            task.title,
            str(task.duration_minutes),
            format_days(task.days_of_week),
            "done" if state.is_completed(task.id, now) else "-",
        )
    console.print(table)


@app.command()
def streak(
    lookback: int = typer.Option(None, "--lookback", help="Max days to look back"),
    at: str = typer.Option(None, "--at", help="Reference instant (ISO), defaults to now"),
):
    """Show the current streak of days with at least one completion."""
    from routinehub.routine.utils import InvalidArgumentError

    try:
        value = _make_manager().current_streak(_reference(at), lookback)
    except InvalidArgumentError as e:
        _fail(str(e))
    console.print(f"Day streak: {value}")


# ============================================================================
# Status
# ============================================================================


@app.command()
def status():
    """Check routinehub status and configuration."""
    from routinehub.config.loader import get_config_path, load_config

    config_path = get_config_path()
    if not config_path.exists():
        console.print("[red]Error: routinehub is not initialized.[/red]")
        console.print("Run [cyan]routinehub onboard[/cyan] first.")
        raise typer.Exit(1)

    config = load_config()

    console.print(f"{__logo__} [bold]routinehub status[/bold]")
    console.print(f"Version: {__version__}")
    console.print(f"Config: {config_path}")
    console.print(f"Workspace: {config.workspace_path}")

    table = Table(title="Configuration Summary")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Lookahead window", f"{config.routine.lookahead_minutes} min")
    table.add_row("Starting-soon window", f"{config.routine.imminent_minutes} min")
    table.add_row("Streak lookback", f"{config.routine.streak_lookback_days} days")
    table.add_row("Routines", str(len(_make_manager().tasks())))
    console.print(table)


if __name__ == "__main__":
    app()
