"""Shared pytest fixtures for school data store tests.

Provides:
- ``seed``: Small hand-built SeedData (students, classes, grades, attendance)
- ``school``: Fresh SchoolDataStore over ``seed`` with zero latency
- ``client``: httpx AsyncClient against the FastAPI app, backed by ``school``
"""

from __future__ import annotations

import datetime as dt

import pytest
from httpx import ASGITransport, AsyncClient

from models.school import Assignment, Attendance, Event, Grade, SchoolClass, Student
from services.fixtures import SeedData
from services.latency import LatencyProfile, SimulatedLatency
from services.school_store import SchoolDataStore, set_school_store


def make_seed() -> SeedData:
    return SeedData(
        students=[
            Student(id=1, first_name="Emma", last_name="Johnson",
                    email="emma.johnson@school.edu", grade="10", status="active"),
            Student(id=2, first_name="Liam", last_name="Martinez",
                    email="liam.martinez@school.edu", grade="11", status="active"),
            Student(id=3, first_name="Olivia", last_name="Chen",
                    email="olivia.chen@school.edu", grade="9", status="inactive"),
        ],
        classes=[
            SchoolClass(
                id=1, name="Algebra II", subject="Mathematics", period="1st", room="204",
                student_ids=[1, 2],
                assignments=[
                    Assignment(id=1, class_id=1, title="Quiz 1", due_date=dt.date(2024, 9, 20)),
                    Assignment(id=2, class_id=1, title="Problem Set", due_date=dt.date(2024, 10, 4)),
                ],
                events=[
                    Event(id=1, class_id=1, title="Unit Exam",
                          start_date=dt.date(2024, 10, 15), end_date=dt.date(2024, 10, 15)),
                ],
            ),
            SchoolClass(
                id=2, name="Biology", subject="Science", period="3rd", room="Lab 2",
                student_ids=[1, 3],
                assignments=[
                    Assignment(id=3, class_id=2, title="Lab Report", due_date=dt.date(2024, 9, 25)),
                ],
                events=[
                    Event(id=2, class_id=2, title="Science Fair Week",
                          start_date=dt.date(2024, 10, 21), end_date=dt.date(2024, 10, 25)),
                ],
            ),
        ],
        grades=[
            Grade(id=1, student_id=1, class_id=1, assignment_name="Quiz 1",
                  score=45, max_score=50, date=dt.date(2024, 9, 20)),
            Grade(id=2, student_id=1, class_id=2, assignment_name="Lab Report",
                  score=18, max_score=20, date=dt.date(2024, 9, 25)),
            Grade(id=3, student_id=2, class_id=1, assignment_name="Quiz 1",
                  score=35, max_score=50, date=dt.date(2024, 9, 20)),
        ],
        attendance=[
            Attendance(id=1, student_id=1, class_id=1, date=dt.date(2024, 9, 16), status="present"),
            Attendance(id=2, student_id=1, class_id=1, date=dt.date(2024, 9, 17), status="present"),
            Attendance(id=3, student_id=1, class_id=2, date=dt.date(2024, 9, 16), status="absent"),
            Attendance(id=4, student_id=1, class_id=2, date=dt.date(2024, 9, 17), status="late"),
            Attendance(id=5, student_id=2, class_id=1, date=dt.date(2024, 9, 16), status="excused"),
        ],
    )


@pytest.fixture
def seed() -> SeedData:
    return make_seed()


@pytest.fixture
def school(seed: SeedData) -> SchoolDataStore:
    """Fresh store over the hand-built seed — isolated per test."""
    return SchoolDataStore(seed=seed, latency=SimulatedLatency(LatencyProfile.instant()))


@pytest.fixture
async def client(school: SchoolDataStore):
    """API client whose process-wide store is the per-test ``school``."""
    from main import app

    set_school_store(school)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    set_school_store(None)
