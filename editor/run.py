# -*- coding: utf-8 -*-
import asyncio
import functools
import json
import logging
import shlex
import typing as t

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from editor.render import (
    courses_table,
    dashboard_view,
    grid_table,
    instructors_table,
    rooms_table,
    timetables_table,
)
from editor.utils import parse_address, parse_roster
from timetable_client.api import TimetableServiceClient, TimetableServiceError, timetable_to_json
from timetable_core.availability import filter_instructors, free_rooms
from timetable_core.grid import GridConfig, count_filled, diagnose, filter_grid, list_instructors, project_grid
from timetable_core.models import Timetable
from timetable_core.session import EditSession


console = Console()
logger = logging.getLogger(__name__)

EDIT_HELP = """\
[bold]pick[/bold] DAY LABEL PERIOD      select a class, pick another to swap them
[bold]move[/bold] DAY LABEL PERIOD DAY LABEL PERIOD   drag a class onto another slot
[bold]swap[/bold] DAY LABEL PERIOD DAY LABEL PERIOD   swap two classes directly
[bold]undo[/bold]                       revert the last change
[bold]show[/bold]                       redraw the grid
[bold]teacher[/bold] [NAME]             highlight a teacher's classes (no name clears)
[bold]rename[/bold] NAME                save a new timetable name to the service
[bold]export[/bold] PATH                write the edited timetable as JSON
[bold]quit[/bold]                       leave the editor"""


def _fail(message: str) -> t.NoReturn:
    console.print(f"[red]Error:[/red] {message}")
    raise SystemExit(1)


def handles_service_errors(func: t.Callable) -> t.Callable:
    """Report service failures as a one-line error instead of a traceback."""
    @functools.wraps(func)
    def wrapper(*args: t.Any, **kwargs: t.Any) -> t.Any:
        try:
            return func(*args, **kwargs)
        except TimetableServiceError as e:
            _fail(str(e))
    return wrapper


def _client(ctx: click.Context) -> TimetableServiceClient:
    return ctx.obj["client"]


def _config(ctx: click.Context) -> GridConfig:
    return ctx.obj["config"]


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--api-url", envvar="TIMETABLE_API_URL", default=None,
              help="Root URL of the timetable API (default http://localhost:3001/api).")
@click.option("--roster", default=None, help="Comma-separated class labels to show, in row order.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.pass_context
def main(ctx: click.Context, api_url: t.Optional[str], roster: t.Optional[str], verbose: bool) -> None:
    """Browse and edit timetables served by the timetable service."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )
    ctx.ensure_object(dict)
    ctx.obj.setdefault("client", TimetableServiceClient(base_url=api_url))
    ctx.obj.setdefault("config", GridConfig(roster=parse_roster(roster)))
    logger.debug("Using timetable API at %s", ctx.obj["client"].base_url)


@main.command("list")
@click.pass_context
@handles_service_errors
def list_command(ctx: click.Context) -> None:
    """List all timetables."""
    summaries = _client(ctx).list_timetables()
    if not summaries:
        console.print("📅 No timetables found.")
        return
    console.print(timetables_table(summaries))


@main.command()
@click.argument("timetable_id")
@click.option("--teacher", default="", help="Highlight this instructor's classes.")
@click.option("--filter", "filter_mode", is_flag=True, help="Only show the highlighted instructor's classes.")
@click.option("--diagnose", "show_diagnostics", is_flag=True, help="Report overlapping or dropped classes.")
@click.pass_context
@handles_service_errors
def show(ctx: click.Context, timetable_id: str, teacher: str, filter_mode: bool, show_diagnostics: bool) -> None:
    """Show a timetable as a class-by-day grid.

    TIMETABLE_ID: ID of the timetable to show.
    """
    config = _config(ctx)
    timetable = _client(ctx).get_timetable(timetable_id)
    if teacher and teacher not in list_instructors(timetable):
        console.print(f"[yellow]Warning:[/yellow] '{teacher}' teaches no class in this timetable.")

    grid = project_grid(timetable, config)
    if filter_mode and teacher:
        grid = filter_grid(grid, teacher)
    console.print(grid_table(grid, config, title=timetable.name or timetable_id, teacher=teacher))
    total = len(config.roster) * len(config.days) * config.slots_per_day
    console.print(f"[dim]{count_filled(grid)} of {total} slots filled[/dim]")

    if show_diagnostics:
        _print_diagnostics(timetable, config)


def _print_diagnostics(timetable: Timetable, config: GridConfig) -> None:
    report = diagnose(timetable, config)
    if report.is_clean:
        console.print("[green]✓ Every class has a cell of its own.[/green]")
        return
    for collision in report.collisions:
        console.print(
            f"[yellow]Overlap[/yellow] at {collision.address}: "
            f"{collision.winner.subject} hides {collision.overwritten.subject}"
        )
    for day, target, entry in report.unknown_targets:
        console.print(f"[yellow]Unknown class[/yellow] {target} for {entry.subject} on {day}")
    for day, entry in report.out_of_range:
        console.print(f"[yellow]No slot[/yellow] for {entry.subject} on {day} at period {entry.period.period}")


@main.command()
@click.argument("name")
@click.pass_context
@handles_service_errors
def create(ctx: click.Context, name: str) -> None:
    """Create an empty timetable called NAME."""
    summary = _client(ctx).create_timetable(name)
    console.print(f"[green]✓[/green] Created timetable [bold]{summary.name}[/bold] ({summary.id})")


@main.command()
@click.argument("timetable_id")
@click.argument("name")
@click.pass_context
@handles_service_errors
def rename(ctx: click.Context, timetable_id: str, name: str) -> None:
    """Rename a timetable."""
    _client(ctx).rename_timetable(timetable_id, name)
    console.print(f"[green]✓[/green] Renamed {timetable_id} to [bold]{name}[/bold]")


@main.command()
@click.argument("timetable_id", required=False)
@click.option("--all", "delete_all", is_flag=True, help="Delete every timetable.")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
@handles_service_errors
def delete(ctx: click.Context, timetable_id: t.Optional[str], delete_all: bool, yes: bool) -> None:
    """Delete one timetable, or all of them with --all."""
    if not delete_all and not timetable_id:
        raise click.UsageError("Give a TIMETABLE_ID or --all.")

    target = "ALL timetables" if delete_all else f"timetable {timetable_id}"
    if not yes and not click.confirm(f"Delete {target}?"):
        console.print("Cancelled.")
        return

    if delete_all:
        _client(ctx).delete_all_timetables()
    else:
        _client(ctx).delete_timetable(timetable_id)
    console.print(f"[green]✓[/green] Deleted {target}")


@main.command()
@click.argument("timetable_id")
@click.pass_context
@handles_service_errors
def edit(ctx: click.Context, timetable_id: str) -> None:
    """Edit class placements of a timetable interactively.

    Placement changes stay local: the service only stores timetable names,
    so use `export` to keep an edited layout.
    """
    config = _config(ctx)
    client = _client(ctx)
    session = EditSession(client.get_timetable(timetable_id), config)
    teacher = ""

    console.print(
        Panel.fit(
            f"[bold blue]🗓  Editing {session.timetable.name or timetable_id}[/bold blue]\n"
            f"Type [bold]help[/bold] for commands",
            border_style="blue",
        )
    )
    console.print(grid_table(session.grid(), config))

    while True:
        line = click.prompt("edit", default="", show_default=False, prompt_suffix="> ")
        try:
            words = shlex.split(line)
        except ValueError as e:
            console.print(f"[red]Error:[/red] {e}")
            continue
        if not words:
            continue
        command, args = words[0].lower(), words[1:]

        if command in ("quit", "exit", "q"):
            if session.dirty:
                console.print("[yellow]Placement changes were not saved to the service.[/yellow]")
            break
        if command == "help":
            console.print(EDIT_HELP)
            continue

        try:
            changed = _run_edit_command(session, client, command, args)
        except click.BadParameter as e:
            console.print(f"[red]Error:[/red] {e.format_message()}")
            continue
        except (TimetableServiceError, OSError) as e:
            console.print(f"[red]Error:[/red] {escape(str(e))}")
            continue

        if command == "teacher":
            teacher = args[0] if args else ""
        if changed or command in ("show", "teacher", "pick"):
            console.print(grid_table(session.grid(), config, teacher=teacher, selected=session.selection))


def _run_edit_command(session: EditSession, client: TimetableServiceClient, command: str, args: list[str]) -> bool:
    """Apply one editor command.

    :return: True when the timetable changed.
    """
    config = session.config
    if command == "pick":
        address = parse_address(args, config)
        previous = session.selection
        changed = session.double_click(address)
        if changed:
            console.print("[green]✓ Swapped.[/green]")
        elif session.selection is not None:
            console.print(f"Selected {session.selection}. Pick another class to swap.")
        elif previous == address:
            console.print("Selection cleared.")
        else:
            console.print("[yellow]Nothing changed.[/yellow]")
        return changed
    if command in ("move", "swap"):
        if len(args) != 6:
            raise click.BadParameter(f"{command} takes two addresses: DAY LABEL PERIOD DAY LABEL PERIOD.")
        first, second = parse_address(args[:3], config), parse_address(args[3:], config)
        changed = session.move(first, second) if command == "move" else session.swap(first, second)
        if not changed:
            console.print("[yellow]Nothing changed.[/yellow]")
        return changed
    if command == "undo":
        if not session.undo():
            console.print("[yellow]Nothing to undo.[/yellow]")
            return False
        return True
    if command == "rename":
        if not args:
            raise click.BadParameter("rename takes the new name.")
        name = " ".join(args)
        client.rename_timetable(session.timetable.id, name)
        session.rename(name)
        console.print(f"[green]✓[/green] Renamed to [bold]{name}[/bold]")
        return False
    if command == "export":
        if len(args) != 1:
            raise click.BadParameter("export takes one file path.")
        with open(args[0], "w", encoding="utf-8") as f:
            json.dump(timetable_to_json(session.timetable), f, ensure_ascii=False, indent=2)
        console.print(f"[green]✓[/green] Wrote {args[0]}")
        return False
    if command in ("show", "teacher"):
        return False
    raise click.BadParameter(f"Unknown command '{command}'. Type help for commands.")


@main.command("free-staff")
@click.argument("timetable_id")
@click.option("--search", default="", help="Only instructors whose name contains this text.")
@click.option("--employment", type=click.Choice(["all", "full-time", "part-time"]), default="all",
              show_default=True, help="Filter by employment type.")
@click.option("--rooms", "show_rooms", is_flag=True, help="Also list rooms available this period.")
@click.pass_context
@handles_service_errors
def free_staff(ctx: click.Context, timetable_id: str, search: str, employment: str, show_rooms: bool) -> None:
    """Show who is teaching right now and which instructors are free.

    TIMETABLE_ID: ID of the timetable in use.
    """
    client = _client(ctx)
    with console.status("[bold green]Fetching current period..."):
        data = asyncio.run(client.fetch_dashboard(timetable_id))

    instructors = filter_instructors(data.free_instructors, search=search, employment=employment)
    console.print(dashboard_view(data, instructors))

    if show_rooms and not data.current.is_special:
        try:
            rooms = client.available_rooms(data.current.day, int(data.current.period))
        except TimetableServiceError as e:
            if e.status_code != 404:
                raise
            # Backend without the availability endpoint
            logger.info("Available rooms endpoint missing, using rooms not in use now")
            rooms = free_rooms(client.list_rooms(), data.teaching)
        console.print(rooms_table(rooms, title="Available rooms"))

    stats_text = Text()
    stats_text.append("Teaching now: ", style="white")
    stats_text.append(f"{len(data.teaching)}", style="bold green")
    stats_text.append("\n")
    stats_text.append("Free instructors: ", style="white")
    stats_text.append(f"{len(instructors)}", style="bold green")
    console.print(Panel(stats_text, title="📊 Statistics", border_style="green"))


@main.command()
@click.pass_context
@handles_service_errors
def courses(ctx: click.Context) -> None:
    """List all courses."""
    console.print(courses_table(_client(ctx).list_courses()))


@main.command()
@click.pass_context
@handles_service_errors
def instructors(ctx: click.Context) -> None:
    """List all instructors."""
    console.print(instructors_table(_client(ctx).list_instructors()))


@main.command()
@click.pass_context
@handles_service_errors
def rooms(ctx: click.Context) -> None:
    """List all rooms."""
    console.print(rooms_table(_client(ctx).list_rooms()))


if __name__ == "__main__":
    main()
