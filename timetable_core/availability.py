"""Who and what is free right now.

Read-only filters over a timetable and the backend's instructor and room
lists, driven by the current period the backend reports.
"""
from __future__ import annotations

import logging
import typing as t

from timetable_core.models import ClassEntry, CurrentPeriod, Instructor, Room, Timetable

logger = logging.getLogger(__name__)

WEEKDAYS: tuple[str, ...] = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

Employment = t.Literal["all", "full-time", "part-time"]


def teaching_classes(timetable: Timetable, current: CurrentPeriod) -> list[ClassEntry]:
    """Classes running during the current period.

    The backend counts periods from 1 while class entries count from 0.
    A "special" period, an unknown weekday or a day without classes all
    mean nobody is teaching.
    """
    if current.is_special or not 0 <= current.day < len(WEEKDAYS):
        return []

    day = timetable.day(WEEKDAYS[current.day])
    if day is None or not day.classes:
        logger.debug("No classes on %s", WEEKDAYS[current.day])
        return []

    index = int(current.period) - 1
    return [entry for entry in day.classes if not entry.is_empty and entry.period.period == index]


def is_break_time(timetable: Timetable, current: CurrentPeriod) -> bool:
    return not teaching_classes(timetable, current)


def teaching_instructors(classes: t.Iterable[ClassEntry]) -> list[str]:
    """Names of everyone teaching one of ``classes``, without duplicates."""
    names: dict[str, None] = {}
    for entry in classes:
        for name in entry.instructors:
            names.setdefault(name, None)
    return list(names)


def free_instructors(instructors: list[Instructor], teaching: t.Collection[str]) -> list[Instructor]:
    """Instructors not teaching right now, in their original order."""
    if not teaching:
        return list(instructors)
    return [instructor for instructor in instructors if instructor.name not in teaching]


def filter_instructors(
        instructors: list[Instructor],
        search: str = "",
        employment: Employment = "all",
) -> list[Instructor]:
    """Narrow an instructor list by name and employment type.

    :param instructors: Instructors to filter.
    :param search: Case-insensitive substring of the name.
    :param employment: "all", "full-time" or "part-time".
    :return: The matching instructors in their original order.
    """
    if employment not in ("all", "full-time", "part-time"):
        raise ValueError(f"Unknown employment filter: {employment}")

    query = search.lower()
    matches = []
    for instructor in instructors:
        if query not in instructor.name.lower():
            continue
        if employment == "full-time" and not instructor.is_full_time:
            continue
        if employment == "part-time" and instructor.is_full_time:
            continue
        matches.append(instructor)
    return matches


def occupied_rooms(classes: t.Iterable[ClassEntry]) -> set[str]:
    return {room for entry in classes for room in entry.rooms}


def free_rooms(rooms: list[Room], classes: t.Iterable[ClassEntry]) -> list[Room]:
    """Rooms no running class is using."""
    occupied = occupied_rooms(classes)
    return [room for room in rooms if room.name not in occupied]
