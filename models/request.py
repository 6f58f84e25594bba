"""API request / response models.

The stores accept whatever they are given; validation of required fields
and numeric ranges happens here, at the HTTP edge.
"""

from __future__ import annotations

import datetime as dt
from typing import Any

from pydantic import EmailStr, Field, model_validator

from models.base import CamelModel
from models.school import AttendanceStatus, GradeLevel, StudentStatus


class StudentCreate(CamelModel):
    """POST /api/students — request body."""

    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: EmailStr
    grade: GradeLevel
    enrollment_date: dt.date | None = None
    parent_contact: str = ""
    status: StudentStatus = "active"
    photo_url: str | None = None
    hobbies: str | None = None
    interests: str | None = None
    bio: str | None = None


class ClassCreate(CamelModel):
    """POST /api/classes — request body."""

    name: str = Field(min_length=1)
    subject: str = Field(min_length=1)
    period: str = ""
    room: str = ""


class AssignmentCreate(CamelModel):
    """POST /api/assignments — request body."""

    class_id: int
    title: str = Field(min_length=1)
    description: str = ""
    due_date: dt.date
    type: str = "homework"


class EventCreate(CamelModel):
    """POST /api/events — request body."""

    class_id: int
    title: str = Field(min_length=1)
    description: str = ""
    start_date: dt.date
    end_date: dt.date | None = None
    type: str = "event"

    @model_validator(mode="after")
    def _end_not_before_start(self) -> EventCreate:
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


class GradeCreate(CamelModel):
    """POST /api/grades — request body."""

    student_id: int
    class_id: int
    assignment_name: str = Field(min_length=1)
    score: float = Field(ge=0)
    max_score: float = Field(gt=0)
    date: dt.date | None = None

    @model_validator(mode="after")
    def _score_within_max(self) -> GradeCreate:
        if self.score > self.max_score:
            raise ValueError("score must not exceed maxScore")
        return self


class AttendanceCreate(CamelModel):
    """POST /api/attendance — request body."""

    student_id: int
    class_id: int
    date: dt.date
    status: AttendanceStatus
    notes: str = ""


class AttendanceBulkRequest(CamelModel):
    """POST /api/attendance/bulk — request body.

    Rows stay raw here so the store can validate them one at a time and skip
    a bad row without rejecting the whole sheet.
    """

    records: list[dict[str, Any]]


class EventUpdate(CamelModel):
    """PATCH /api/events/{id} — request body.

    Only a body carrying both dates is checked here; the handler checks a
    single changed date against the stored event.
    """

    class_id: int | None = None
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    type: str | None = None

    @model_validator(mode="after")
    def _end_not_before_start(self) -> EventUpdate:
        if (
            self.start_date is not None
            and self.end_date is not None
            and self.end_date < self.start_date
        ):
            raise ValueError("endDate must not be before startDate")
        return self


class GradeUpdate(CamelModel):
    """PATCH /api/grades/{id} — request body.

    ``score <= maxScore`` is checked by the handler against the merged record.
    """

    student_id: int | None = None
    class_id: int | None = None
    assignment_name: str | None = Field(default=None, min_length=1)
    score: float | None = Field(default=None, ge=0)
    max_score: float | None = Field(default=None, gt=0)
    date: dt.date | None = None
