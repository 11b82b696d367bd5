"""Heat sheet CLI application.

Usage:
    heatsheet classify "Girls 9-10 50m Freestyle"
    heatsheet import-entries entries.csv --meet-id m1 --dry-run
    heatsheet show-event <event-id>
    heatsheet list-entries --meet-id m1 --team WCC

Every store-backed command reads Supabase by default. Pass --data with a
JSON snapshot file to work offline; successful imports are written back
to the same file.
"""

import os
import sys
from pathlib import Path

import typer
from dotenv import load_dotenv

# Load .env file for Supabase credentials
load_dotenv()
from rich.console import Console  # noqa: E402
from rich.table import Table  # noqa: E402

from heatsheet import bind_context, clear_context, configure_logging  # noqa: E402
from heatsheet.dao.memory import load_snapshot, save_snapshot  # noqa: E402
from heatsheet.models import EventState  # noqa: E402
from heatsheet.services.eligibility import classify as classify_name  # noqa: E402
from heatsheet.services.entry_errors import EntryError, PersistenceError  # noqa: E402
from heatsheet.services.entry_service import list_entries as list_all_entries  # noqa: E402
from heatsheet.services.import_schemas import parse_entries_csv  # noqa: E402
from heatsheet.services.reconciliation import ReconciliationEngine  # noqa: E402

console = Console()
app = typer.Typer(
    name="heatsheet",
    help="Swim meet heat and lane assignment",
    no_args_is_help=True,
)

DataOption = typer.Option(None, "--data", "-d", help="JSON snapshot to use instead of Supabase")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs")):
    """Swim meet heat and lane assignment."""
    level = "DEBUG" if verbose else os.environ.get("LOG_LEVEL", "WARNING")
    configure_logging(level=level, stream=sys.stderr)


# =============================================================================
# HELPERS
# =============================================================================


def _open_stores(data: Path | None):
    """Return (meets, rosters, events) from a snapshot file or Supabase."""
    if data is not None:
        if not data.exists():
            console.print(f"[red]File not found: {data}[/red]")
            raise typer.Exit(1)
        return load_snapshot(data)

    from heatsheet.dao import EventDAO, MeetDAO, RosterDAO

    try:
        return MeetDAO(), RosterDAO(), EventDAO()
    except RuntimeError as e:
        console.print(f"[red]Error: {e}[/red]")
        console.print("[dim]Set SUPABASE_URL and SUPABASE_KEY, or pass --data[/dim]")
        raise typer.Exit(1) from None


def _print_errors(errors: list[EntryError], title: str = "Errors") -> None:
    table = Table(title=title)
    table.add_column("Line", style="dim", justify="right")
    table.add_column("Kind", style="red")
    table.add_column("Message")

    for error in errors:
        line = str(error.row_number) if error.row_number is not None else "-"
        table.add_row(line, error.kind.value, error.message)

    console.print(table)


def _print_event(event: EventState) -> None:
    table = Table(title=str(event))
    table.add_column("Heat", style="cyan", justify="right")
    table.add_column("Lane", style="cyan", justify="right")
    table.add_column("Swimmer")
    table.add_column("Team")
    table.add_column("Seed", justify="right")

    for heat_number, lane_number, swimmer in event.entries():
        table.add_row(
            str(heat_number),
            str(lane_number),
            swimmer.full_name,
            swimmer.team or "-",
            swimmer.seed_time,
        )

    console.print(table)


# =============================================================================
# COMMANDS
# =============================================================================


@app.command("classify")
def classify(name: str = typer.Argument(..., help="Event name, e.g. 'Boys 6 & Under 25m Back'")):
    """Show the age band and gender class parsed from an event name."""
    eligibility = classify_name(name)

    table = Table(title=name)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    table.add_row("Min age", str(eligibility.min_age))
    table.add_row("Max age", str(eligibility.max_age))
    table.add_row("Gender", eligibility.gender_class.value)

    console.print(table)


@app.command("import-entries")
def import_entries(
    csv_path: Path = typer.Argument(..., help="Entries CSV file"),
    meet_id: str = typer.Option(..., "--meet-id", "-m", help="Meet to enter"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Check without saving"),
    data: Path | None = DataOption,
):
    """Import entries from a CSV. All rows are applied, or none are."""
    if not csv_path.exists():
        console.print(f"[red]File not found: {csv_path}[/red]")
        raise typer.Exit(1)

    meets, rosters, events = _open_stores(data)
    try:
        meet = meets.get_meet(meet_id)
    except PersistenceError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None
    if meet is None:
        console.print(f"[red]Meet not found: {meet_id}[/red]")
        raise typer.Exit(1)

    rows, row_errors = parse_entries_csv(csv_path)
    console.print(f"[cyan]Read {len(rows) + len(row_errors)} rows from[/cyan] {csv_path}")

    bind_context(meet_id=meet_id)
    try:
        result = ReconciliationEngine(rosters, events).import_entries(
            meet, rows, dry_run=dry_run, row_errors=row_errors
        )
    finally:
        clear_context()

    if result.warnings:
        _print_errors(result.warnings, title="Warnings")

    if not result.success:
        _print_errors(result.errors)
        console.print(f"[red]Import rejected: {len(result.errors)} errors, nothing saved[/red]")
        raise typer.Exit(1)

    table = Table(title="Placements")
    table.add_column("Line", style="dim", justify="right")
    table.add_column("Event", justify="right")
    table.add_column("Heat", justify="right")
    table.add_column("Lane", justify="right")
    table.add_column("Swimmer")
    table.add_column("Mode", style="dim")

    for placement in result.placements:
        table.add_row(
            str(placement.row_number),
            str(placement.event_number),
            str(placement.heat_number),
            str(placement.lane_number),
            placement.swimmer_id,
            placement.mode.value,
        )
    console.print(table)

    if dry_run:
        console.print("[yellow]Dry run: nothing saved[/yellow]")
        return

    if data is not None:
        save_snapshot(data, meets, rosters, events)
    console.print(f"[green]Imported {len(result.placements)} entries[/green]")


@app.command("show-event")
def show_event(
    event_id: str = typer.Argument(..., help="Event id"),
    data: Path | None = DataOption,
):
    """Print an event's heat sheet."""
    _, _, events = _open_stores(data)
    try:
        event = events.load_event(event_id)
    except PersistenceError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None

    if event is None:
        console.print(f"[red]Event not found: {event_id}[/red]")
        raise typer.Exit(1)

    if not event.heats:
        console.print(f"[yellow]{event} has no entries[/yellow]")
        return
    _print_event(event)


@app.command("list-entries")
def list_entries(
    meet_id: str = typer.Option(..., "--meet-id", "-m", help="Meet to list"),
    team: str | None = typer.Option(None, "--team", "-t", help="Only this team"),
    data: Path | None = DataOption,
):
    """List every entry of a meet by event, then swimmer."""
    _, _, events = _open_stores(data)
    try:
        meet_events = events.list_events(meet_id)
    except PersistenceError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None

    listings = list_all_entries(meet_events, team=team)
    if not listings:
        console.print("[yellow]No entries[/yellow]")
        return

    table = Table(title=f"Entries ({len(listings)})")
    table.add_column("Event", justify="right")
    table.add_column("Name")
    table.add_column("Swimmer")
    table.add_column("Team")
    table.add_column("Heat", justify="right")
    table.add_column("Lane", justify="right")

    for entry in listings:
        table.add_row(
            str(entry.event_number),
            entry.event_name,
            entry.swimmer_name,
            entry.team or "-",
            str(entry.heat_number),
            str(entry.lane_number),
        )
    console.print(table)


if __name__ == "__main__":
    app()
