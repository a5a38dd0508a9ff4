"""Tests for the current-period lookups behind the free-staff view."""
import pytest

from timetable_core.availability import (
    filter_instructors,
    free_instructors,
    free_rooms,
    is_break_time,
    occupied_rooms,
    teaching_classes,
    teaching_instructors,
)
from timetable_core.models import ClassEntry, CurrentPeriod, Instructor, Room, Timetable


@pytest.fixture
def staff() -> list[Instructor]:
    return [
        Instructor(id="1", name="Tanaka", is_full_time=True),
        Instructor(id="2", name="Yamada", is_full_time=True),
        Instructor(id="3", name="Suzuki", is_full_time=False),
        Instructor(id="4", name="Sato", is_full_time=False),
    ]


def test_teaching_classes_uses_one_based_period(timetable: Timetable) -> None:
    """Test that backend period 1 means slot 0 on the reported weekday."""
    classes = teaching_classes(timetable, CurrentPeriod(day=1, period=1))

    assert [entry.subject for entry in classes] == ["Math", "English"]


def test_special_period_is_break_time(timetable: Timetable) -> None:
    """Test that a special period means nobody is teaching."""
    current = CurrentPeriod(day=1, period="special")

    assert current.is_special
    assert teaching_classes(timetable, current) == []
    assert is_break_time(timetable, current)


@pytest.mark.parametrize("day", [0, 3, 7, -1])
def test_days_without_classes(timetable: Timetable, day: int) -> None:
    """Test weekend, empty and invalid weekdays."""
    assert teaching_classes(timetable, CurrentPeriod(day=day, period=1)) == []


def test_placeholders_are_not_teaching(timetable: Timetable) -> None:
    """Test that placeholders left by drags are skipped."""
    timetable.days[0].classes.append(ClassEntry.empty())

    classes = teaching_classes(timetable, CurrentPeriod(day=1, period=1))

    assert all(not entry.is_empty for entry in classes)


def test_free_instructors_excludes_teaching(timetable: Timetable, staff: list[Instructor]) -> None:
    """Test the free list for Monday's first period."""
    teaching = teaching_instructors(teaching_classes(timetable, CurrentPeriod(day=1, period=1)))

    free = free_instructors(staff, teaching)

    assert teaching == ["Tanaka", "Suzuki"]
    assert [instructor.name for instructor in free] == ["Yamada", "Sato"]


def test_everyone_is_free_when_nobody_teaches(staff: list[Instructor]) -> None:
    assert free_instructors(staff, []) == staff
    assert free_instructors([], ["Tanaka"]) == []


def test_teaching_instructors_deduplicates() -> None:
    """Test that a teacher of two running classes is listed once."""
    classes = [
        ClassEntry(subject="A", instructors=["Sato", "Tanaka"]),
        ClassEntry(subject="B", instructors=["Tanaka"]),
    ]

    assert teaching_instructors(classes) == ["Sato", "Tanaka"]


def test_filter_instructors(staff: list[Instructor]) -> None:
    """Test search and employment filters alone and combined."""
    assert [i.name for i in filter_instructors(staff, search="SA")] == ["Sato"]
    assert [i.name for i in filter_instructors(staff, search="a")] == ["Tanaka", "Yamada", "Sato"]
    assert [i.name for i in filter_instructors(staff, employment="full-time")] == ["Tanaka", "Yamada"]
    assert [i.name for i in filter_instructors(staff, search="u", employment="part-time")] == ["Suzuki"]
    assert filter_instructors(staff) == staff


def test_filter_instructors_rejects_unknown_employment(staff: list[Instructor]) -> None:
    with pytest.raises(ValueError, match="Unknown employment filter"):
        filter_instructors(staff, employment="contract")


def test_free_rooms(timetable: Timetable) -> None:
    """Test rooms not used by the classes running now."""
    classes = teaching_classes(timetable, CurrentPeriod(day=1, period=1))
    rooms = [Room(name="R101"), Room(name="R102"), Room(name="R201"), Room(name="Lab1")]

    assert occupied_rooms(classes) == {"R101", "R201"}
    assert [room.name for room in free_rooms(rooms, classes)] == ["R102", "Lab1"]
