"""
Mock timetable service for developing and testing the editor offline.

This is a stand-in for the real timetable backend. It serves the same
endpoints from an in-memory store seeded with a small demo timetable, so the
editor's HTTP client and command line can be exercised without the real
service. Nothing is persisted.
"""
from __future__ import annotations

import itertools
import typing as t
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, HTTPException

from services.shared.models import (
    AvailableRoomsRequest,
    ClassEntry,
    Course,
    CurrentPeriod,
    Instructor,
    MessageResponse,
    Period,
    RenameTimetableRequest,
    Room,
    Timetable,
    TimetableDay,
    TimetableSummary,
    UpdateCourseResponse,
    UpdateInstructorResponse,
    UpdateRoomResponse,
    WeeklySlot,
)

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]


class MockStore:
    """In-memory records served by the mock service."""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        """Drop every change and reload the demo data."""
        self._ids = itertools.count(1)
        self.timetables: dict[str, Timetable] = {}
        self.files: dict[str, str] = {}
        self.courses: list[Course] = []
        self.instructors: list[Instructor] = []
        self.rooms: list[Room] = []
        self.current_period = CurrentPeriod(day=1, period=1)
        _seed(self)

    def next_id(self, prefix: str) -> str:
        return f"{prefix}-{next(self._ids)}"


def _seed(store: MockStore) -> None:
    demo = Timetable(
        id="demo",
        name="Demo timetable",
        days=[
            TimetableDay(day="Monday", classes=[
                ClassEntry(subject="Mathematics", instructors=["Tanaka"], rooms=["R101"],
                           periods=Period(period=0, length=1), targets=["ME1", "IE1"]),
                ClassEntry(subject="Physics", instructors=["Yamada"], rooms=["R102"],
                           periods=Period(period=1, length=1), targets=["ME1"]),
                ClassEntry(subject="English", instructors=["Suzuki"], rooms=["R201"],
                           periods=Period(period=0, length=1), targets=["CA1"]),
            ]),
            TimetableDay(day="Tuesday", classes=[
                ClassEntry(subject="Programming", instructors=["Sato", "Tanaka"], rooms=["Lab1"],
                           periods=Period(period=2, length=2), targets=["CA1"]),
            ]),
        ],
    )
    store.timetables[demo.id] = demo
    store.files[demo.id] = "demo.json"
    store.instructors = [
        Instructor(id="i-tanaka", name="Tanaka", is_full_time=True),
        Instructor(id="i-yamada", name="Yamada", is_full_time=True),
        Instructor(id="i-suzuki", name="Suzuki", is_full_time=False),
        Instructor(id="i-sato", name="Sato", is_full_time=False),
    ]
    store.rooms = [
        Room(id="r-101", name="R101"),
        Room(id="r-102", name="R102", unavailable=[WeeklySlot(day=1, period=1)]),
        Room(id="r-201", name="R201"),
        Room(id="r-lab1", name="Lab1"),
    ]
    store.courses = [
        Course(id="c-math", name="Mathematics", instructors=["Tanaka"], targets=["ME1", "IE1"],
               rooms=["R101"], periods=[WeeklySlot(day=1, period=0)]),
    ]


store = MockStore()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Mock lifespan - nothing to connect to."""
    print("🧪 Mock Timetable Service starting - data lives in memory only")
    yield
    print("🧪 Mock Timetable Service shutting down")


app = FastAPI(
    title="Mock Timetable Service",
    description="In-memory stand-in for the timetable backend REST API",
    version="1.0.0-mock",
    lifespan=lifespan,
)
api = APIRouter(prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint for container orchestration."""
    return {"status": "healthy", "service": "mock-timetable-service", "mode": "test"}


def _get_or_404(timetable_id: str) -> Timetable:
    timetable = store.timetables.get(timetable_id)
    if timetable is None:
        raise HTTPException(status_code=404, detail=f"Timetable not found: {timetable_id}")
    return timetable


def _summary(timetable: Timetable) -> TimetableSummary:
    return TimetableSummary(id=timetable.id, name=timetable.name, file=store.files.get(timetable.id, ""))


# Timetable endpoints
@api.get("/timetable/getAll", response_model=list[TimetableSummary])
async def list_timetables() -> list[TimetableSummary]:
    return [_summary(timetable) for timetable in store.timetables.values()]


@api.get("/timetable/current-period", response_model=CurrentPeriod)
async def current_period() -> CurrentPeriod:
    """Report the configured "now" instead of reading the clock."""
    return store.current_period


@api.get("/timetable/get/{timetable_id}", response_model=Timetable)
async def get_timetable(timetable_id: str) -> Timetable:
    return _get_or_404(timetable_id)


@api.post("/timetable/create/{name}", response_model=TimetableSummary)
async def create_timetable(name: str) -> TimetableSummary:
    """Create an empty timetable with one day per weekday."""
    timetable = Timetable(
        id=store.next_id("tt"),
        name=name,
        days=[TimetableDay(day=day) for day in WEEKDAYS],
    )
    store.timetables[timetable.id] = timetable
    store.files[timetable.id] = f"{timetable.id}.json"
    return _summary(timetable)


@api.put("/timetable/update/{timetable_id}", response_model=MessageResponse)
async def rename_timetable(timetable_id: str, request: RenameTimetableRequest) -> MessageResponse:
    timetable = _get_or_404(timetable_id)
    timetable.name = request.name
    return MessageResponse(message="Timetable updated")


@api.delete("/timetable/delete/{timetable_id}", response_model=MessageResponse)
async def delete_timetable(timetable_id: str) -> MessageResponse:
    _get_or_404(timetable_id)
    del store.timetables[timetable_id]
    store.files.pop(timetable_id, None)
    return MessageResponse(message="Timetable deleted")


@api.delete("/timetable/deleteAll", response_model=MessageResponse)
async def delete_all_timetables() -> MessageResponse:
    store.timetables.clear()
    store.files.clear()
    return MessageResponse(message="All timetables deleted")


def _index_of(records: list[t.Any], record_id: str) -> int:
    """Records are addressed by id, or by name when they have none."""
    for index, record in enumerate(records):
        if record.id == record_id or record.name == record_id:
            return index
    raise HTTPException(status_code=404, detail=f"Not found: {record_id}")


# Course endpoints
@api.get("/courses/getAll", response_model=list[Course])
async def list_courses() -> list[Course]:
    return store.courses


@api.post("/courses/create", response_model=Course)
async def create_course(request: list[Course]) -> Course:
    if not request:
        raise HTTPException(status_code=400, detail="No course given")
    course = request[0].model_copy(update={"id": request[0].id or store.next_id("c")})
    store.courses.append(course)
    return course


@api.put("/courses/update/{course_id}", response_model=UpdateCourseResponse)
async def update_course(course_id: str, request: Course) -> UpdateCourseResponse:
    index = _index_of(store.courses, course_id)
    course = request.model_copy(update={"id": store.courses[index].id})
    store.courses[index] = course
    return UpdateCourseResponse(updated_course=course)


@api.delete("/courses/delete/{course_id}", response_model=MessageResponse)
async def delete_course(course_id: str) -> MessageResponse:
    del store.courses[_index_of(store.courses, course_id)]
    return MessageResponse(message="Course deleted")


# Instructor endpoints
@api.get("/instructors/getAll", response_model=list[Instructor])
async def list_instructors() -> list[Instructor]:
    return store.instructors


@api.post("/instructors/create", response_model=Instructor)
async def create_instructor(request: list[Instructor]) -> Instructor:
    if not request:
        raise HTTPException(status_code=400, detail="No instructor given")
    instructor = request[0].model_copy(update={"id": request[0].id or store.next_id("i")})
    store.instructors.append(instructor)
    return instructor


@api.put("/instructors/update/{instructor_id}", response_model=UpdateInstructorResponse)
async def update_instructor(instructor_id: str, request: Instructor) -> UpdateInstructorResponse:
    index = _index_of(store.instructors, instructor_id)
    instructor = request.model_copy(update={"id": store.instructors[index].id})
    store.instructors[index] = instructor
    return UpdateInstructorResponse(updated_instructor=instructor)


@api.delete("/instructors/delete/{instructor_id}", response_model=MessageResponse)
async def delete_instructor(instructor_id: str) -> MessageResponse:
    del store.instructors[_index_of(store.instructors, instructor_id)]
    return MessageResponse(message="Instructor deleted")


# Room endpoints
@api.get("/rooms/getAll", response_model=list[Room])
async def list_rooms() -> list[Room]:
    return store.rooms


@api.post("/rooms/create", response_model=Room)
async def create_room(request: list[Room]) -> Room:
    if not request:
        raise HTTPException(status_code=400, detail="No room given")
    room = request[0].model_copy(update={"id": request[0].id or store.next_id("r")})
    store.rooms.append(room)
    return room


@api.put("/rooms/update/{room_id}", response_model=UpdateRoomResponse)
async def update_room(room_id: str, request: Room) -> UpdateRoomResponse:
    index = _index_of(store.rooms, room_id)
    room = request.model_copy(update={"id": store.rooms[index].id})
    store.rooms[index] = room
    return UpdateRoomResponse(updated_room=room)


@api.delete("/rooms/delete/{room_id}", response_model=MessageResponse)
async def delete_room(room_id: str) -> MessageResponse:
    del store.rooms[_index_of(store.rooms, room_id)]
    return MessageResponse(message="Room deleted")


@api.post("/rooms/available", response_model=list[Room])
async def available_rooms(request: AvailableRoomsRequest) -> list[Room]:
    """Rooms not marked unavailable at the requested slot."""
    slot = WeeklySlot(day=request.day, period=request.period)
    return [room for room in store.rooms if slot not in room.unavailable]


app.include_router(api)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=3001)
