"""
Data models for timetables and the records the editor works with.

This module contains all the dataclasses used to represent a timetable
(days, class entries, periods), the slot addresses used by the editor,
and the course/instructor/room records served by the timetable backend.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import typing as t


@dataclass
class Period:
    """The home slot of a class entry within its day."""
    period: int = 0  # 0-based index into the day's slots
    length: int = 1


@dataclass
class ClassEntry:
    """One scheduled class, taught to one or more target classes at once."""
    subject: str = ""
    instructors: list[str] = field(default_factory=list)
    rooms: list[str] = field(default_factory=list)
    period: Period = field(default_factory=Period)
    targets: list[str] = field(default_factory=list)

    @classmethod
    def empty(cls) -> ClassEntry:
        """Build the placeholder left behind when a class is dragged away."""
        return cls(period=Period(period=0, length=2))

    @property
    def is_empty(self) -> bool:
        return not self.subject and not self.targets


@dataclass
class TimetableDay:
    """All class entries scheduled on one weekday, across all target classes."""
    day: str
    classes: list[ClassEntry] = field(default_factory=list)


@dataclass
class Timetable:
    """A full week of class entries, identified by the backend's id and name."""
    days: list[TimetableDay] = field(default_factory=list)
    id: str = ""
    name: str = ""

    def day(self, label: str) -> t.Optional[TimetableDay]:
        for day in self.days:
            if day.day == label:
                return day
        return None


@dataclass(frozen=True)
class SlotAddress:
    """A (day, class label, period) cell of the grid.

    ``period`` is None when the cell lies outside any valid slot.
    """
    day: str
    label: str
    period: t.Optional[int]

    def __str__(self) -> str:
        period = "-" if self.period is None else str(self.period)
        return f"{self.day}/{self.label}/{period}"


@dataclass
class TimetableSummary:
    """A timetable as listed by the backend, without its contents."""
    id: str
    name: str
    file: str = ""


@dataclass
class WeeklySlot:
    """A (weekday, period) pair used by courses, instructors and rooms."""
    day: int
    period: int


@dataclass
class Course:
    """A course definition the backend schedules from."""
    name: str
    instructors: list[str] = field(default_factory=list)
    targets: list[str] = field(default_factory=list)
    rooms: list[str] = field(default_factory=list)
    periods: list[WeeklySlot] = field(default_factory=list)
    id: t.Optional[str] = None


@dataclass
class Instructor:
    """An instructor and the slots they are available for."""
    id: str
    name: str
    is_full_time: bool = True
    periods: list[WeeklySlot] = field(default_factory=list)


@dataclass
class Room:
    """A room and the slots it cannot be used in."""
    name: str
    unavailable: list[WeeklySlot] = field(default_factory=list)
    id: t.Optional[str] = None


@dataclass
class CurrentPeriod:
    """What the backend reports as "now".

    ``day`` counts from Sunday (0) to Saturday (6). ``period`` is 1-based,
    or the string ``"special"`` outside the regular period timetable.
    """
    day: int
    period: t.Union[int, str]

    @property
    def is_special(self) -> bool:
        return not isinstance(self.period, int)
