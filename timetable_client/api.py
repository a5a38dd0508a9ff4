"""
HTTP client for the timetable backend.

This module makes the HTTP calls to the timetable service and converts
between the Pydantic wire models and the dataclass models the editor works
on. Every failure at this boundary (timeout, HTTP status, transport error,
malformed body) is raised as a TimetableServiceError.
"""
from __future__ import annotations

import asyncio
import os
import typing as t
from dataclasses import dataclass, field
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

# Import dataclass models used by the editor
from timetable_core.availability import free_instructors, teaching_classes, teaching_instructors
from timetable_core.models import (
    ClassEntry,
    Course,
    CurrentPeriod,
    Instructor,
    Period,
    Room,
    Timetable,
    TimetableDay,
    TimetableSummary,
    WeeklySlot,
)
# Import Pydantic models for HTTP serialization
from services.shared import models as wire


# Service URL - configurable via environment variable
TIMETABLE_API_URL = os.getenv("TIMETABLE_API_URL", "http://localhost:3001/api")
TIMETABLE_API_TOKEN = os.getenv("TIMETABLE_API_TOKEN")

# Timeout settings (in seconds)
STANDARD_TIMEOUT = 30.0  # 30 seconds for standard CRUD operations

ModelT = t.TypeVar("ModelT", bound=BaseModel)


class TimetableServiceError(RuntimeError):
    """A call to the timetable service failed."""

    def __init__(self, message: str, status_code: t.Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass
class DashboardData:
    """Everything the "who is free now" view shows."""
    current: CurrentPeriod
    timetable: Timetable
    teaching: list[ClassEntry] = field(default_factory=list)
    free_instructors: list[Instructor] = field(default_factory=list)

    @property
    def is_break_time(self) -> bool:
        return not self.teaching


class TimetableServiceClient:
    """Client for the timetable, course, instructor and room endpoints.

    :param base_url: API root, e.g. ``http://localhost:3001/api``.
    :param timeout: Seconds before a request times out.
    :param token: Optional bearer token sent with every request.
    :param client: Optional pre-configured httpx.Client to send requests
        through instead of opening one per call.
    :param async_transport: Optional transport for the async client.
    """

    def __init__(
            self,
            base_url: t.Optional[str] = None,
            timeout: float = STANDARD_TIMEOUT,
            token: t.Optional[str] = None,
            client: t.Optional[httpx.Client] = None,
            async_transport: t.Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or TIMETABLE_API_URL).rstrip("/")
        self.timeout = timeout
        self.token = token if token is not None else TIMETABLE_API_TOKEN
        self._client = client
        self._async_transport = async_transport

    def _headers(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _request(self, method: str, path: str, action: str, **kwargs: t.Any) -> t.Any:
        """Send one request and return its decoded JSON body (None when empty)."""
        try:
            if self._client is not None:
                response = self._client.request(method, self._url(path), headers=self._headers(), **kwargs)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.request(method, self._url(path), headers=self._headers(), **kwargs)
            response.raise_for_status()
            return response.json() if response.content else None

        except httpx.TimeoutException as e:
            raise TimetableServiceError(f"{action} timed out after {self.timeout} seconds") from e
        except httpx.HTTPStatusError as e:
            raise TimetableServiceError(
                f"HTTP error from timetable service: {e.response.status_code} {e.response.text}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise TimetableServiceError(f"Error calling timetable service: {str(e)}") from e
        except ValueError as e:
            raise TimetableServiceError(f"{action} returned a body that is not JSON") from e

    # Timetables
    def list_timetables(self) -> list[TimetableSummary]:
        data = self._request("GET", "/timetable/getAll", "Listing timetables")
        return [_summary_from_wire(item) for item in _parse_list(wire.TimetableSummary, data, "Listing timetables")]

    def get_timetable(self, timetable_id: str) -> Timetable:
        """Fetch one timetable with all of its days and classes."""
        data = self._request("GET", f"/timetable/get/{quote(timetable_id, safe='')}", "Fetching timetable")
        timetable = timetable_from_wire(_parse(wire.Timetable, data, "Fetching timetable"))
        if not timetable.id:
            timetable.id = timetable_id
        return timetable

    def create_timetable(self, name: str) -> TimetableSummary:
        data = self._request("POST", f"/timetable/create/{quote(name, safe='')}", "Creating timetable")
        return _summary_from_wire(_parse(wire.TimetableSummary, data, "Creating timetable"))

    def rename_timetable(self, timetable_id: str, name: str) -> None:
        """Persist a new display name.

        The backend's update endpoint takes the name only; class placements
        edited locally are not sent.
        """
        request = wire.RenameTimetableRequest(name=name)
        self._request(
            "PUT",
            f"/timetable/update/{quote(timetable_id, safe='')}",
            "Renaming timetable",
            json=request.model_dump(),
        )

    def delete_timetable(self, timetable_id: str) -> None:
        self._request("DELETE", f"/timetable/delete/{quote(timetable_id, safe='')}", "Deleting timetable")

    def delete_all_timetables(self) -> None:
        self._request("DELETE", "/timetable/deleteAll", "Deleting all timetables")

    def current_period(self) -> CurrentPeriod:
        data = self._request("GET", "/timetable/current-period", "Fetching current period")
        return current_period_from_wire(_parse(wire.CurrentPeriod, data, "Fetching current period"))

    # Courses
    def list_courses(self) -> list[Course]:
        data = self._request("GET", "/courses/getAll", "Listing courses")
        return [_course_from_wire(item) for item in _parse_list(wire.Course, data, "Listing courses")]

    def create_course(self, course: Course) -> Course:
        data = self._request(
            "POST", "/courses/create", "Creating course",
            json=[_course_to_wire(course).model_dump(by_alias=True, exclude_none=True)],
        )
        return _course_from_wire(_parse(wire.Course, _first(data), "Creating course"))

    def update_course(self, course_id: str, course: Course) -> Course:
        data = self._request(
            "PUT", f"/courses/update/{quote(course_id, safe='')}", "Updating course",
            json=_course_to_wire(course).model_dump(by_alias=True, exclude_none=True),
        )
        return _course_from_wire(_parse(wire.UpdateCourseResponse, data, "Updating course").updated_course)

    def delete_course(self, course_id: str) -> None:
        self._request("DELETE", f"/courses/delete/{quote(course_id, safe='')}", "Deleting course")

    # Instructors
    def list_instructors(self) -> list[Instructor]:
        data = self._request("GET", "/instructors/getAll", "Listing instructors")
        return [_instructor_from_wire(item) for item in _parse_list(wire.Instructor, data, "Listing instructors")]

    def create_instructor(self, instructor: Instructor) -> Instructor:
        data = self._request(
            "POST", "/instructors/create", "Creating instructor",
            json=[_instructor_to_wire(instructor).model_dump(by_alias=True)],
        )
        return _instructor_from_wire(_parse(wire.Instructor, _first(data), "Creating instructor"))

    def update_instructor(self, instructor_id: str, instructor: Instructor) -> Instructor:
        data = self._request(
            "PUT", f"/instructors/update/{quote(instructor_id, safe='')}", "Updating instructor",
            json=_instructor_to_wire(instructor).model_dump(by_alias=True),
        )
        response = _parse(wire.UpdateInstructorResponse, data, "Updating instructor")
        return _instructor_from_wire(response.updated_instructor)

    def delete_instructor(self, instructor_id: str) -> None:
        self._request("DELETE", f"/instructors/delete/{quote(instructor_id, safe='')}", "Deleting instructor")

    # Rooms
    def list_rooms(self) -> list[Room]:
        data = self._request("GET", "/rooms/getAll", "Listing rooms")
        return [_room_from_wire(item) for item in _parse_list(wire.Room, data, "Listing rooms")]

    def create_room(self, room: Room) -> Room:
        data = self._request(
            "POST", "/rooms/create", "Creating room",
            json=[_room_to_wire(room).model_dump(by_alias=True, exclude_none=True)],
        )
        return _room_from_wire(_parse(wire.Room, _first(data), "Creating room"))

    def update_room(self, room_id: str, room: Room) -> Room:
        data = self._request(
            "PUT", f"/rooms/update/{quote(room_id, safe='')}", "Updating room",
            json=_room_to_wire(room).model_dump(by_alias=True, exclude_none=True),
        )
        return _room_from_wire(_parse(wire.UpdateRoomResponse, data, "Updating room").updated_room)

    def delete_room(self, room_id: str) -> None:
        self._request("DELETE", f"/rooms/delete/{quote(room_id, safe='')}", "Deleting room")

    def available_rooms(self, day: int, period: int) -> list[Room]:
        """Rooms the backend reports as free at (day, period)."""
        request = wire.AvailableRoomsRequest(day=day, period=period)
        data = self._request("POST", "/rooms/available", "Fetching available rooms", json=request.model_dump())
        if not isinstance(data, list):
            raise TimetableServiceError("Fetching available rooms returned an unexpected body")
        # Older backends answer with bare room names
        return [
            Room(name=item) if isinstance(item, str)
            else _room_from_wire(_parse(wire.Room, item, "Fetching available rooms"))
            for item in data
        ]

    # Dashboard
    async def _get_json(self, client: httpx.AsyncClient, path: str, action: str) -> t.Any:
        try:
            response = await client.get(self._url(path), headers=self._headers())
            response.raise_for_status()
            return response.json()
        except httpx.TimeoutException as e:
            raise TimetableServiceError(f"{action} timed out after {self.timeout} seconds") from e
        except httpx.HTTPStatusError as e:
            raise TimetableServiceError(
                f"HTTP error from timetable service: {e.response.status_code} {e.response.text}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise TimetableServiceError(f"Error calling timetable service: {str(e)}") from e
        except ValueError as e:
            raise TimetableServiceError(f"{action} returned a body that is not JSON") from e

    async def fetch_dashboard(self, timetable_id: str) -> DashboardData:
        """Fetch the current period, instructors and timetable in parallel.

        :param timetable_id: The timetable in use.
        :return: Who is teaching now and who is free.
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._async_transport) as client:
            current_data, instructors_data, timetable_data = await asyncio.gather(
                self._get_json(client, "/timetable/current-period", "Fetching current period"),
                self._get_json(client, "/instructors/getAll", "Listing instructors"),
                self._get_json(client, f"/timetable/get/{quote(timetable_id, safe='')}", "Fetching timetable"),
            )

        current = current_period_from_wire(_parse(wire.CurrentPeriod, current_data, "Fetching current period"))
        instructors = [
            _instructor_from_wire(item)
            for item in _parse_list(wire.Instructor, instructors_data, "Listing instructors")
        ]
        timetable = timetable_from_wire(_parse(wire.Timetable, timetable_data, "Fetching timetable"))

        teaching = teaching_classes(timetable, current)
        return DashboardData(
            current=current,
            timetable=timetable,
            teaching=teaching,
            free_instructors=free_instructors(instructors, teaching_instructors(teaching)),
        )


def _parse(model: type[ModelT], data: t.Any, action: str) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise TimetableServiceError(f"{action} returned malformed data: {e}") from e


def _parse_list(model: type[ModelT], data: t.Any, action: str) -> list[ModelT]:
    if not isinstance(data, list):
        raise TimetableServiceError(f"{action} returned {type(data).__name__}, expected a list")
    return [_parse(model, item, action) for item in data]


def _first(data: t.Any) -> t.Any:
    """Create endpoints take a one-element array and may answer with one too."""
    if isinstance(data, list):
        return data[0] if data else None
    return data


def timetable_from_wire(timetable: wire.Timetable) -> Timetable:
    """Convert Pydantic Timetable to dataclass Timetable."""
    return Timetable(
        id=timetable.id,
        name=timetable.name,
        days=[
            TimetableDay(
                day=day.day,
                classes=[
                    ClassEntry(
                        subject=entry.subject,
                        instructors=list(entry.instructors),
                        rooms=list(entry.rooms),
                        period=Period(period=entry.periods.period, length=entry.periods.length),
                        targets=list(entry.targets),
                    )
                    for entry in day.classes
                ],
            )
            for day in timetable.days
        ],
    )


def timetable_to_wire(timetable: Timetable) -> wire.Timetable:
    """Convert dataclass Timetable to Pydantic Timetable."""
    return wire.Timetable(
        id=timetable.id,
        name=timetable.name,
        days=[
            wire.TimetableDay(
                day=day.day,
                classes=[
                    wire.ClassEntry(
                        subject=entry.subject,
                        instructors=list(entry.instructors),
                        rooms=list(entry.rooms),
                        periods=wire.Period(period=entry.period.period, length=entry.period.length),
                        targets=list(entry.targets),
                    )
                    for entry in day.classes
                ],
            )
            for day in timetable.days
        ],
    )


def timetable_to_json(timetable: Timetable) -> dict[str, t.Any]:
    """Serialize a timetable in the backend's own JSON shape."""
    return timetable_to_wire(timetable).model_dump(by_alias=True)


def current_period_from_wire(current: wire.CurrentPeriod) -> CurrentPeriod:
    period = current.period
    if isinstance(period, str) and period.strip().isdigit():
        period = int(period)
    return CurrentPeriod(day=current.day, period=period)


def _summary_from_wire(summary: wire.TimetableSummary) -> TimetableSummary:
    return TimetableSummary(id=summary.id, name=summary.name, file=summary.file)


def _slots_from_wire(slots: list[wire.WeeklySlot]) -> list[WeeklySlot]:
    return [WeeklySlot(day=slot.day, period=slot.period) for slot in slots]


def _slots_to_wire(slots: list[WeeklySlot]) -> list[wire.WeeklySlot]:
    return [wire.WeeklySlot(day=slot.day, period=slot.period) for slot in slots]


def _course_from_wire(course: wire.Course) -> Course:
    """Convert Pydantic Course to dataclass Course."""
    return Course(
        id=course.id,
        name=course.name,
        instructors=list(course.instructors),
        targets=list(course.targets),
        rooms=list(course.rooms),
        periods=_slots_from_wire(course.periods),
    )


def _course_to_wire(course: Course) -> wire.Course:
    return wire.Course(
        id=course.id,
        name=course.name,
        instructors=list(course.instructors),
        targets=list(course.targets),
        rooms=list(course.rooms),
        periods=_slots_to_wire(course.periods),
    )


def _instructor_from_wire(instructor: wire.Instructor) -> Instructor:
    """Convert Pydantic Instructor to dataclass Instructor."""
    return Instructor(
        id=instructor.id,
        name=instructor.name,
        is_full_time=instructor.is_full_time,
        periods=_slots_from_wire(instructor.periods),
    )


def _instructor_to_wire(instructor: Instructor) -> wire.Instructor:
    return wire.Instructor(
        id=instructor.id,
        name=instructor.name,
        is_full_time=instructor.is_full_time,
        periods=_slots_to_wire(instructor.periods),
    )


def _room_from_wire(room: wire.Room) -> Room:
    """Convert Pydantic Room to dataclass Room."""
    return Room(id=room.id, name=room.name, unavailable=_slots_from_wire(room.unavailable))


def _room_to_wire(room: Room) -> wire.Room:
    return wire.Room(id=room.id, name=room.name, unavailable=_slots_to_wire(room.unavailable))
