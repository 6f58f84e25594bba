"""School entities — the records held by the in-memory stores.

Every entity serializes with camelCase field names and an ``Id`` identifier,
matching the JSON fixtures in ``data/mock/``.  Each entity has a companion
``*Patch`` model whose fields are all optional; stores apply only the fields
a caller explicitly set.

The store does not validate business rules (score <= maxScore, email shape,
required names or foreign keys), so every field a record can be created
without has a default.  Field types are still enforced by pydantic.
"""

from __future__ import annotations

import datetime as dt
from typing import Literal

from pydantic import Field, field_validator

from models.base import CamelModel, PatchModel

StudentStatus = Literal["active", "inactive", "graduated", "transferred"]
AttendanceStatus = Literal["present", "absent", "late", "excused"]
GradeLevel = Literal["9", "10", "11", "12"]

ATTENDANCE_STATUSES: tuple[str, ...] = ("present", "absent", "late", "excused")


# ---------------------------------------------------------------------------
# Students
# ---------------------------------------------------------------------------


class Student(CamelModel):
    id: int = Field(alias="Id")
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    grade: GradeLevel = "9"
    enrollment_date: dt.date | None = None
    parent_contact: str = ""
    status: StudentStatus = "active"
    photo_url: str | None = None
    hobbies: str | None = None
    interests: str | None = None
    bio: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class StudentPatch(PatchModel):
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    grade: GradeLevel | None = None
    enrollment_date: dt.date | None = None
    parent_contact: str | None = None
    status: StudentStatus | None = None
    photo_url: str | None = None
    hobbies: str | None = None
    interests: str | None = None
    bio: str | None = None


# ---------------------------------------------------------------------------
# Embedded class items: assignments and calendar events
# ---------------------------------------------------------------------------


class Assignment(CamelModel):
    """An assignment embedded in a class; ``Id`` is unique across all classes."""

    id: int = Field(alias="Id")
    class_id: int
    title: str = ""
    description: str = ""
    due_date: dt.date | None = None
    type: str = "homework"


class AssignmentPatch(PatchModel):
    class_id: int | None = None
    title: str | None = None
    description: str | None = None
    due_date: dt.date | None = None
    type: str | None = None


class AssignmentView(Assignment):
    """Flattened projection row — an assignment plus its class labels."""

    class_name: str | None = None
    class_subject: str | None = None


class Event(CamelModel):
    """A calendar event embedded in a class; ``Id`` is unique across all classes."""

    id: int = Field(alias="Id")
    class_id: int
    title: str = ""
    description: str = ""
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    type: str = "event"


class EventPatch(PatchModel):
    class_id: int | None = None
    title: str | None = None
    description: str | None = None
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    type: str | None = None


class EventView(Event):
    """Flattened projection row — an event plus its class labels."""

    class_name: str | None = None
    class_subject: str | None = None


# ---------------------------------------------------------------------------
# Classes
# ---------------------------------------------------------------------------


class SchoolClass(CamelModel):
    id: int = Field(alias="Id")
    name: str = ""
    subject: str = ""
    period: str = ""
    room: str = ""
    student_ids: list[int] = Field(default_factory=list)
    assignments: list[Assignment] = Field(default_factory=list)
    events: list[Event] = Field(default_factory=list)

    @field_validator("student_ids")
    @classmethod
    def _drop_duplicate_students(cls, value: list[int]) -> list[int]:
        return list(dict.fromkeys(value))


class ClassPatch(PatchModel):
    """Class fields a caller may set directly.

    Assignments and events are managed through the embedded item operations
    so their global ids stay unique.  The roster changes only through
    enroll/unenroll, which check that a student exists when it is added; a
    ``studentIds`` key in a patch is ignored.
    """

    name: str | None = None
    subject: str | None = None
    period: str | None = None
    room: str | None = None


# ---------------------------------------------------------------------------
# Grades
# ---------------------------------------------------------------------------


class Grade(CamelModel):
    id: int = Field(alias="Id")
    student_id: int | None = None
    class_id: int | None = None
    assignment_name: str = ""
    score: float = 0
    max_score: float = 100
    date: dt.date | None = None


class GradePatch(PatchModel):
    student_id: int | None = None
    class_id: int | None = None
    assignment_name: str | None = None
    score: float | None = None
    max_score: float | None = None
    date: dt.date | None = None


# ---------------------------------------------------------------------------
# Attendance
# ---------------------------------------------------------------------------


class Attendance(CamelModel):
    id: int = Field(alias="Id")
    student_id: int | None = None
    class_id: int | None = None
    date: dt.date | None = None
    status: AttendanceStatus = "present"
    notes: str = ""


class AttendancePatch(PatchModel):
    student_id: int | None = None
    class_id: int | None = None
    date: dt.date | None = None
    status: AttendanceStatus | None = None
    notes: str | None = None


class AttendanceUpsert(CamelModel):
    """One row of a bulk attendance submission, keyed by (student, class, date)."""

    student_id: int
    class_id: int
    date: dt.date
    status: AttendanceStatus
    notes: str = ""

    @property
    def key(self) -> tuple[int, int, dt.date]:
        return (self.student_id, self.class_id, self.date)
