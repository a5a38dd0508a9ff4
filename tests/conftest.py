"""Shared fixtures for the timetable editor tests."""
import typing as t

import pytest
from fastapi.testclient import TestClient

from services.timetable_service import mock_app
from timetable_client.api import TimetableServiceClient
from timetable_core.models import ClassEntry, Period, Timetable, TimetableDay

TEST_API_URL = "http://testserver/api"


def make_entry(
        subject: str,
        period: int,
        targets: list[str],
        instructors: t.Optional[list[str]] = None,
        rooms: t.Optional[list[str]] = None,
) -> ClassEntry:
    """Build a class entry with sensible defaults."""
    return ClassEntry(
        subject=subject,
        instructors=instructors if instructors is not None else [],
        rooms=rooms if rooms is not None else [],
        period=Period(period=period, length=1),
        targets=targets,
    )


@pytest.fixture
def timetable() -> Timetable:
    """A small timetable with a combined ME1/IE1 class on Monday morning."""
    return Timetable(
        id="tt-1",
        name="Spring",
        days=[
            TimetableDay(day="Monday", classes=[
                make_entry("Math", 0, ["ME1", "IE1"], ["Tanaka"], ["R101"]),
                make_entry("Physics", 1, ["ME1"], ["Yamada"], ["R102"]),
                make_entry("English", 0, ["CA1"], ["Suzuki"], ["R201"]),
            ]),
            TimetableDay(day="Tuesday", classes=[
                make_entry("Programming", 2, ["CA1"], ["Sato", "Tanaka"], ["Lab1"]),
            ]),
        ],
    )


@pytest.fixture(autouse=True)
def reset_mock_store() -> t.Iterator[None]:
    """Give every test a fresh copy of the mock service's demo data."""
    mock_app.store.reset()
    yield
    mock_app.store.reset()


@pytest.fixture
def service_client() -> t.Iterator[TimetableServiceClient]:
    """A client talking to the mock service in-process."""
    with TestClient(mock_app.app) as http_client:
        yield TimetableServiceClient(base_url=TEST_API_URL, token="", client=http_client)
