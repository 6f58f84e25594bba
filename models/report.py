"""Report and dashboard output models (camelCase on the wire)."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import Field

from models.base import CamelModel
from models.school import Student

T = TypeVar("T")

UNKNOWN_STUDENT = "Unknown Student"
UNKNOWN_CLASS = "Unknown Class"
UNKNOWN_SUBJECT = "Unknown Subject"


# ---------------------------------------------------------------------------
# Join results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Found(Generic[T]):
    value: T


@dataclass(frozen=True)
class Missing:
    """A foreign key whose target record does not exist."""

    key: int | None


Lookup = Found[T] | Missing


# ---------------------------------------------------------------------------
# Report sections
# ---------------------------------------------------------------------------


class ReportWindow(CamelModel):
    start: dt.date | None = None
    end: dt.date | None = None


class OverviewReport(CamelModel):
    total_students: int = 0
    active_students: int = 0
    total_classes: int = 0
    total_grades: int = 0
    average_grade: int = 0
    attendance_rate: int = 100
    grade_distribution: dict[str, int] = Field(default_factory=dict)


class StudentReportRow(CamelModel):
    student: Student
    average_grade: int = 0
    attendance_rate: int = 100
    total_assignments: int = 0
    total_attendance_records: int = 0


class ClassReportRow(CamelModel):
    class_id: int
    name: str
    subject: str = ""
    period: str = ""
    room: str = ""
    enrolled_count: int = 0
    average_grade: int = 0
    attendance_rate: int = 100
    total_assignments: int = 0
    total_attendance_records: int = 0


class StudentPerformance(CamelModel):
    student_id: int
    name: str
    average_grade: int = 0
    total_grades: int = 0


class SubjectPerformance(CamelModel):
    average: int = 0
    total_grades: int = 0


class PerformanceReport(CamelModel):
    top_students: list[StudentPerformance] = Field(default_factory=list)
    subject_performance: dict[str, SubjectPerformance] = Field(default_factory=dict)


class StudentAttendanceRanking(CamelModel):
    student_id: int
    name: str
    attendance_rate: int = 100
    total_records: int = 0
    present_days: int = 0
    absent_days: int = 0
    late_days: int = 0
    excused_days: int = 0


class ClassAttendanceRanking(CamelModel):
    class_id: int
    name: str
    attendance_rate: int = 100
    total_records: int = 0


class AttendanceReport(CamelModel):
    student_rankings: list[StudentAttendanceRanking] = Field(default_factory=list)
    class_rankings: list[ClassAttendanceRanking] = Field(default_factory=list)


class SchoolReport(CamelModel):
    """Every report section, computed over one date window."""

    window: ReportWindow
    overview: OverviewReport
    students: list[StudentReportRow] = Field(default_factory=list)
    classes: list[ClassReportRow] = Field(default_factory=list)
    performance: PerformanceReport
    attendance: AttendanceReport


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------


class GradeActivity(CamelModel):
    """One recent grade, with its student and class resolved to labels."""

    grade_id: int
    student: str
    class_name: str
    subject: str
    assignment_name: str
    score: float
    max_score: float
    percentage: int
    letter: str
    date: dt.date | None = None


class DashboardStats(CamelModel):
    total_students: int = 0
    total_classes: int = 0
    active_students: int = 0
    attendance_rate: int = 100
    present_today: int = 0
    average_grade: int = 0
    recent_activity: list[GradeActivity] = Field(default_factory=list)


class DailyAttendanceSummary(CamelModel):
    date: dt.date
    total_students: int = 0
    total_records: int = 0
    present_count: int = 0
    absent_count: int = 0
    late_count: int = 0
    excused_count: int = 0
    attendance_rate: int = 100
