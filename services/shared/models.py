"""
Shared Pydantic models for the timetable backend's REST API.

This module mirrors the JSON the backend sends and accepts, field names
included (``Subject``, ``Targets``, ``isFullTime`` ...). The editor works on
the dataclass equivalents in timetable_core.models; these models only
validate and serialize at the HTTP boundary.
"""
from __future__ import annotations

import typing as t
from pydantic import BaseModel, ConfigDict, Field


class WireModel(BaseModel):
    """Base for models whose JSON names differ from their Python names."""
    model_config = ConfigDict(populate_by_name=True)


# Timetable Models
class Period(WireModel):
    """Home slot of a class entry, 0-based."""
    period: int
    length: int = 1


class ClassEntry(WireModel):
    """One scheduled class as stored by the backend."""
    subject: str = Field(default="", alias="Subject")
    instructors: list[str] = Field(default_factory=list, alias="Instructors")
    rooms: list[str] = Field(default_factory=list, alias="Rooms")
    periods: Period
    targets: list[str] = Field(default_factory=list, alias="Targets")


class TimetableDay(WireModel):
    """All classes of one weekday."""
    day: str = Field(alias="Day")
    classes: list[ClassEntry] = Field(default_factory=list, alias="Classes")


class Timetable(WireModel):
    """A full timetable as returned by GET /timetable/get/{id}."""
    id: str = ""
    name: str = ""
    days: list[TimetableDay] = Field(default_factory=list, alias="Days")


class TimetableSummary(WireModel):
    """One row of GET /timetable/getAll."""
    id: str
    name: str
    file: str = ""


class CurrentPeriod(WireModel):
    """Response of GET /timetable/current-period.

    ``day`` counts from Sunday (0). ``period`` is 1-based or "special".
    """
    day: int
    period: t.Union[int, str]


# Course / Instructor / Room Models
class WeeklySlot(WireModel):
    """A (weekday, period) pair."""
    day: int
    period: int


class Course(WireModel):
    """A course definition."""
    id: t.Optional[str] = None
    name: str
    instructors: list[str] = Field(default_factory=list)
    targets: list[str] = Field(default_factory=list)
    rooms: list[str] = Field(default_factory=list)
    periods: list[WeeklySlot] = Field(default_factory=list)


class Instructor(WireModel):
    """An instructor with the slots they can teach."""
    id: str
    name: str
    is_full_time: bool = Field(default=True, alias="isFullTime")
    periods: list[WeeklySlot] = Field(default_factory=list)


class Room(WireModel):
    """A room with the slots it is unavailable."""
    id: t.Optional[str] = None
    name: str
    unavailable: list[WeeklySlot] = Field(default_factory=list)


# Request/Response Models for API endpoints
class RenameTimetableRequest(WireModel):
    """Body of PUT /timetable/update/{id}; only the name is sent."""
    name: str


class AvailableRoomsRequest(WireModel):
    """Body of POST /rooms/available."""
    day: int
    period: int


class UpdateCourseResponse(WireModel):
    """Response of PUT /courses/update/{id}."""
    updated_course: Course = Field(alias="updatedCourse")


class UpdateInstructorResponse(WireModel):
    """Response of PUT /instructors/update/{id}."""
    updated_instructor: Instructor = Field(alias="updatedInstructor")


class UpdateRoomResponse(WireModel):
    """Response of PUT /rooms/update/{id}.

    The backend names the field ``updateRoom``.
    """
    updated_room: Room = Field(alias="updateRoom")


class MessageResponse(WireModel):
    """Plain acknowledgement returned by delete and update endpoints."""
    message: str = ""
