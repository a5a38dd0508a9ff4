"""Rich renderables for timetables, grids and the free-staff dashboard."""
from __future__ import annotations

import typing as t

from rich.console import Group
from rich.table import Table
from rich.text import Text

from timetable_client.api import DashboardData
from timetable_core.availability import WEEKDAYS
from timetable_core.grid import Grid, GridConfig, is_highlighted
from timetable_core.models import ClassEntry, Course, Instructor, Room, SlotAddress, TimetableSummary


def truncate_title(title: str, max_length: int = 18) -> str:
    """Truncate title to max_length characters, adding ellipsis if needed."""
    if len(title) <= max_length:
        return title
    return title[:max_length-3] + "..."


def format_entry(entry: t.Optional[ClassEntry]) -> str:
    if entry is None:
        return "---"
    parts = [truncate_title(entry.subject)]
    if entry.rooms:
        parts.append(", ".join(entry.rooms))
    if entry.instructors:
        parts.append(", ".join(entry.instructors))
    return " / ".join(parts)


def _cell(
        slots: list[t.Optional[ClassEntry]],
        address: SlotAddress,
        teacher: str,
        selected: t.Optional[SlotAddress],
) -> Text:
    text = Text()
    for index, entry in enumerate(slots):
        if index:
            text.append("\n")
        style = "dim" if entry is None else "white"
        if is_highlighted(entry, teacher):
            style = "bold yellow"
        if selected == SlotAddress(address.day, address.label, index):
            style = "reverse " + style
        text.append(f"{index} ", style="cyan")
        text.append(format_entry(entry), style=style)
    return text


def grid_table(
        grid: Grid,
        config: GridConfig,
        title: str = "",
        teacher: str = "",
        selected: t.Optional[SlotAddress] = None,
) -> Table:
    """Lay the grid out as one row per class label and one column per day.

    :param grid: The projected grid.
    :param config: The grid's roster and days, which fix row/column order.
    :param title: Table title.
    :param teacher: Instructor whose classes are highlighted.
    :param selected: Slot shown as selected.
    :return: A rich Table.
    """
    table = Table(title=title or None, show_header=True, header_style="bold magenta", show_lines=True)
    table.add_column("Class", style="bold", justify="center")
    for day in config.days:
        table.add_column(day)

    for label in config.roster:
        row = [label]
        for day in config.days:
            row.append(_cell(grid[label][day], SlotAddress(day, label, None), teacher, selected))
        table.add_row(*row)
    return table


def timetables_table(summaries: list[TimetableSummary]) -> Table:
    table = Table(title="📅 Timetables", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="white")
    table.add_column("File", style="dim")
    for summary in summaries:
        table.add_row(summary.id, summary.name, summary.file or "—")
    return table


def courses_table(courses: list[Course]) -> Table:
    table = Table(title="📚 Courses", show_header=True, header_style="bold magenta")
    table.add_column("Name", style="white")
    table.add_column("Instructors", style="yellow")
    table.add_column("Targets", style="cyan")
    table.add_column("Rooms")
    for course in courses:
        table.add_row(course.name, ", ".join(course.instructors), ", ".join(course.targets), ", ".join(course.rooms))
    return table


def instructors_table(instructors: list[Instructor], title: str = "👩‍🏫 Instructors") -> Table:
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="white")
    table.add_column("Employment", style="yellow")
    for instructor in instructors:
        table.add_row(instructor.id, instructor.name, "full-time" if instructor.is_full_time else "part-time")
    return table


def rooms_table(rooms: list[Room], title: str = "🏫 Rooms") -> Table:
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Name", style="white")
    table.add_column("Unavailable", style="dim")
    for room in rooms:
        slots = ", ".join(f"{WEEKDAYS[slot.day][:3]} {slot.period}" for slot in room.unavailable
                          if 0 <= slot.day < len(WEEKDAYS))
        table.add_row(room.name, slots or "—")
    return table


def dashboard_view(data: DashboardData, instructors: list[Instructor]) -> Group:
    """The "who is free now" view.

    :param data: Dashboard data fetched from the service.
    :param instructors: The free instructors after search/employment filters.
    """
    current = data.current
    day = WEEKDAYS[current.day] if 0 <= current.day < len(WEEKDAYS) else "?"
    header = Text()
    header.append(f"{day}, ", style="bold")
    if current.is_special:
        header.append("special period", style="bold yellow")
    else:
        header.append(f"period {current.period}", style="bold")
    if data.is_break_time:
        header.append("  (break time)", style="green")

    teaching = Table(title="Teaching now", show_header=True, header_style="bold magenta")
    teaching.add_column("Subject", style="white")
    teaching.add_column("Instructors", style="yellow")
    teaching.add_column("Rooms")
    teaching.add_column("Classes", style="cyan")
    for entry in data.teaching:
        teaching.add_row(entry.subject, ", ".join(entry.instructors), ", ".join(entry.rooms), ", ".join(entry.targets))

    return Group(header, teaching, instructors_table(instructors, title="Free instructors"))
