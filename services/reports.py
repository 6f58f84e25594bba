"""Report composition — joins students, classes, grades and attendance.

The ``compose_*`` functions are pure: they take already-fetched collections
and return report models.  :class:`ReportService` fetches the collections
concurrently (one fan-out, one fan-in) and hands them to the composers.

Foreign keys are resolved through :func:`lookup`, which returns ``Found`` or
``Missing``.  A missing student or class never fails a report; it shows up
under the ``Unknown ...`` labels instead.
"""

from __future__ import annotations

import asyncio
import datetime as dt
import logging
from collections import defaultdict
from collections.abc import Mapping, Sequence
from typing import TypeVar

from models.report import (
    UNKNOWN_CLASS,
    UNKNOWN_STUDENT,
    UNKNOWN_SUBJECT,
    AttendanceReport,
    ClassAttendanceRanking,
    ClassReportRow,
    DailyAttendanceSummary,
    DashboardStats,
    Found,
    GradeActivity,
    Lookup,
    Missing,
    OverviewReport,
    PerformanceReport,
    ReportWindow,
    SchoolReport,
    StudentAttendanceRanking,
    StudentPerformance,
    StudentReportRow,
    SubjectPerformance,
)
from models.school import Attendance, Grade, SchoolClass, Student
from services.aggregation import (
    attendance_rate,
    grade_average,
    grade_distribution,
    grade_percentage,
    letter_grade,
    status_counts,
)
from services.class_store import ClassStore
from services.date_ranges import DateRange
from services.stores import AttendanceStore, GradeStore, StudentStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


def lookup(index: Mapping[int, T], key: int | None) -> Lookup[T]:
    if key in index:
        return Found(index[key])
    return Missing(key)


def student_label(result: Lookup[Student]) -> str:
    if isinstance(result, Found):
        return result.value.full_name
    return UNKNOWN_STUDENT


def class_label(result: Lookup[SchoolClass]) -> str:
    if isinstance(result, Found):
        return result.value.name
    return UNKNOWN_CLASS


def subject_label(result: Lookup[SchoolClass]) -> str:
    if isinstance(result, Found):
        return result.value.subject
    return UNKNOWN_SUBJECT


def _group(records: Sequence[Grade] | Sequence[Attendance], attr: str) -> dict[int, list]:
    groups: dict[int, list] = defaultdict(list)
    for record in records:
        groups[getattr(record, attr)].append(record)
    return groups


# ── Composers ────────────────────────────────────────────────


def compose_overview(
    students: Sequence[Student],
    classes: Sequence[SchoolClass],
    grades: Sequence[Grade],
    attendance: Sequence[Attendance],
) -> OverviewReport:
    return OverviewReport(
        total_students=len(students),
        active_students=sum(1 for s in students if s.status == "active"),
        total_classes=len(classes),
        total_grades=len(grades),
        average_grade=grade_average(grades),
        attendance_rate=attendance_rate(attendance),
        grade_distribution=grade_distribution(grades),
    )


def compose_student_rows(
    students: Sequence[Student],
    grades: Sequence[Grade],
    attendance: Sequence[Attendance],
) -> list[StudentReportRow]:
    grades_by_student = _group(grades, "student_id")
    attendance_by_student = _group(attendance, "student_id")
    rows = []
    for student in students:
        student_grades = grades_by_student.get(student.id, [])
        records = attendance_by_student.get(student.id, [])
        rows.append(StudentReportRow(
            student=student,
            average_grade=grade_average(student_grades),
            attendance_rate=attendance_rate(records),
            total_assignments=len(student_grades),
            total_attendance_records=len(records),
        ))
    return rows


def compose_class_rows(
    classes: Sequence[SchoolClass],
    students: Sequence[Student],
    grades: Sequence[Grade],
    attendance: Sequence[Attendance],
) -> list[ClassReportRow]:
    """Per-class summary; ``enrolledCount`` counts only roster ids that still exist."""
    student_ids = {s.id for s in students}
    grades_by_class = _group(grades, "class_id")
    attendance_by_class = _group(attendance, "class_id")
    rows = []
    for school_class in classes:
        class_grades = grades_by_class.get(school_class.id, [])
        records = attendance_by_class.get(school_class.id, [])
        rows.append(ClassReportRow(
            class_id=school_class.id,
            name=school_class.name,
            subject=school_class.subject,
            period=school_class.period,
            room=school_class.room,
            enrolled_count=sum(1 for sid in school_class.student_ids if sid in student_ids),
            average_grade=grade_average(class_grades),
            attendance_rate=attendance_rate(records),
            total_assignments=len(class_grades),
            total_attendance_records=len(records),
        ))
    return rows


def compose_performance(
    students: Sequence[Student],
    classes: Sequence[SchoolClass],
    grades: Sequence[Grade],
    top_n: int = 10,
) -> PerformanceReport:
    """Top students by average grade, and average grade per subject.

    Ties keep roster order.  A subject taught by several classes is averaged
    over all of their grades; grades of a missing class fall under
    ``Unknown Subject``.
    """
    grades_by_student = _group(grades, "student_id")
    ranked = sorted(
        (
            StudentPerformance(
                student_id=student.id,
                name=student.full_name,
                average_grade=grade_average(grades_by_student.get(student.id, [])),
                total_grades=len(grades_by_student.get(student.id, [])),
            )
            for student in students
        ),
        key=lambda row: row.average_grade,
        reverse=True,
    )

    classes_by_id = {c.id: c for c in classes}
    grades_by_subject: dict[str, list[Grade]] = defaultdict(list)
    for grade in grades:
        grades_by_subject[subject_label(lookup(classes_by_id, grade.class_id))].append(grade)

    return PerformanceReport(
        top_students=ranked[:top_n],
        subject_performance={
            subject: SubjectPerformance(average=grade_average(items), total_grades=len(items))
            for subject, items in grades_by_subject.items()
        },
    )


def compose_attendance(
    students: Sequence[Student],
    classes: Sequence[SchoolClass],
    attendance: Sequence[Attendance],
) -> AttendanceReport:
    by_student = _group(attendance, "student_id")
    by_class = _group(attendance, "class_id")

    student_rankings = []
    for student in students:
        records = by_student.get(student.id, [])
        counts = status_counts(records)
        student_rankings.append(StudentAttendanceRanking(
            student_id=student.id,
            name=student.full_name,
            attendance_rate=attendance_rate(records),
            total_records=len(records),
            present_days=counts["present"],
            absent_days=counts["absent"],
            late_days=counts["late"],
            excused_days=counts["excused"],
        ))

    class_rankings = [
        ClassAttendanceRanking(
            class_id=school_class.id,
            name=school_class.name,
            attendance_rate=attendance_rate(by_class.get(school_class.id, [])),
            total_records=len(by_class.get(school_class.id, [])),
        )
        for school_class in classes
    ]

    return AttendanceReport(
        student_rankings=sorted(student_rankings, key=lambda r: r.attendance_rate, reverse=True),
        class_rankings=sorted(class_rankings, key=lambda r: r.attendance_rate, reverse=True),
    )


def compose_recent_activity(
    grades: Sequence[Grade],
    students: Sequence[Student],
    classes: Sequence[SchoolClass],
    limit: int = 5,
) -> list[GradeActivity]:
    """Newest grades first (undated grades last), joined to display labels."""
    students_by_id = {s.id: s for s in students}
    classes_by_id = {c.id: c for c in classes}
    newest = sorted(grades, key=lambda g: g.date or dt.date.min, reverse=True)[:limit]
    activity = []
    for grade in newest:
        owner = lookup(classes_by_id, grade.class_id)
        percentage = grade_percentage(grade)
        activity.append(GradeActivity(
            grade_id=grade.id,
            student=student_label(lookup(students_by_id, grade.student_id)),
            class_name=class_label(owner),
            subject=subject_label(owner),
            assignment_name=grade.assignment_name,
            score=grade.score,
            max_score=grade.max_score,
            percentage=percentage,
            letter=letter_grade(percentage),
            date=grade.date,
        ))
    return activity


# ── Service ──────────────────────────────────────────────────


class ReportService:
    """Reads every store it needs in parallel, then composes report views."""

    def __init__(
        self,
        students: StudentStore,
        classes: ClassStore,
        grades: GradeStore,
        attendance: AttendanceStore,
        top_students_limit: int = 10,
        recent_activity_limit: int = 5,
    ) -> None:
        self._students = students
        self._classes = classes
        self._grades = grades
        self._attendance = attendance
        self._top_students_limit = top_students_limit
        self._recent_activity_limit = recent_activity_limit

    async def _fetch_all(self):
        return await asyncio.gather(
            self._students.get_all(),
            self._classes.get_all(),
            self._grades.get_all(),
            self._attendance.get_all(),
        )

    async def build_report(self, window: DateRange | None = None) -> SchoolReport:
        """All report sections over *window* (grades and attendance are filtered; people are not)."""
        window = window or DateRange()
        students, classes, grades, attendance = await self._fetch_all()
        grades = [g for g in grades if window.contains(g.date)]
        attendance = [a for a in attendance if window.contains(a.date)]
        logger.info(
            "Building report for %s..%s: %d grades, %d attendance records",
            window.start, window.end, len(grades), len(attendance),
        )
        return SchoolReport(
            window=ReportWindow(start=window.start, end=window.end),
            overview=compose_overview(students, classes, grades, attendance),
            students=compose_student_rows(students, grades, attendance),
            classes=compose_class_rows(classes, students, grades, attendance),
            performance=compose_performance(
                students, classes, grades, top_n=self._top_students_limit
            ),
            attendance=compose_attendance(students, classes, attendance),
        )

    async def dashboard(self, today: dt.date | None = None) -> DashboardStats:
        today = today or dt.date.today()
        students, classes, grades, attendance = await self._fetch_all()
        todays = [a for a in attendance if a.date == today]
        return DashboardStats(
            total_students=len(students),
            total_classes=len(classes),
            active_students=sum(1 for s in students if s.status == "active"),
            attendance_rate=attendance_rate(todays),
            present_today=status_counts(todays)["present"],
            average_grade=grade_average(grades),
            recent_activity=compose_recent_activity(
                grades, students, classes, limit=self._recent_activity_limit
            ),
        )

    async def daily_attendance_summary(self, day: dt.date) -> DailyAttendanceSummary:
        records, students = await asyncio.gather(
            self._attendance.get_by_date(day),
            self._students.get_all(),
        )
        counts = status_counts(records)
        return DailyAttendanceSummary(
            date=day,
            total_students=len(students),
            total_records=len(records),
            present_count=counts["present"],
            absent_count=counts["absent"],
            late_count=counts["late"],
            excused_count=counts["excused"],
            attendance_rate=attendance_rate(records),
        )
