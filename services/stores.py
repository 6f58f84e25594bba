"""Entity stores for students, grades and attendance.

Each store is an :class:`EntityStore` plus the lookups the dashboard
screens need.  Lookups are plain linear scans; collections hold a few
hundred records at most.
"""

from __future__ import annotations

import datetime as dt
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from models.school import (
    Attendance,
    AttendancePatch,
    AttendanceUpsert,
    Grade,
    GradePatch,
    Student,
    StudentPatch,
)
from services.aggregation import attendance_rate, grade_average
from services.date_ranges import DateRange
from services.entity_store import EntityStore
from services.latency import LatencyKind

logger = logging.getLogger(__name__)


class StudentStore(EntityStore[Student, StudentPatch]):
    model = Student
    patch_model = StudentPatch
    entity_label = "Student"

    async def search(self, query: str) -> list[Student]:
        """Case-insensitive substring match on first name, last name or email."""
        await self._latency.pause(LatencyKind.READ)
        term = query.lower()
        return self._select(
            lambda s: term in s.first_name.lower()
            or term in s.last_name.lower()
            or term in s.email.lower()
        )

    async def get_by_grade_level(self, grade: str) -> list[Student]:
        await self._latency.pause(LatencyKind.READ)
        return self._select(lambda s: s.grade == grade)

    async def get_by_status(self, status: str) -> list[Student]:
        await self._latency.pause(LatencyKind.READ)
        return self._select(lambda s: s.status == status)


class GradeStore(EntityStore[Grade, GradePatch]):
    model = Grade
    patch_model = GradePatch
    entity_label = "Grade"

    async def get_by_student(self, student_id: int) -> list[Grade]:
        await self._latency.pause(LatencyKind.READ)
        return self._select(lambda g: g.student_id == student_id)

    async def get_by_class(self, class_id: int) -> list[Grade]:
        await self._latency.pause(LatencyKind.READ)
        return self._select(lambda g: g.class_id == class_id)

    async def get_in_range(self, window: DateRange) -> list[Grade]:
        await self._latency.pause(LatencyKind.READ)
        return self._select(lambda g: window.contains(g.date))

    async def calculate_average(self, student_id: int, class_id: int | None = None) -> int:
        """Mean percentage of a student's grades, optionally within one class; 0 if none."""
        await self._latency.pause(LatencyKind.READ)
        grades = self._select(
            lambda g: g.student_id == student_id
            and (class_id is None or g.class_id == class_id)
        )
        return grade_average(grades)

    def _defaults(self) -> dict[str, Any]:
        return {"date": dt.date.today()}


class AttendanceStore(EntityStore[Attendance, AttendancePatch]):
    model = Attendance
    patch_model = AttendancePatch
    entity_label = "Attendance record"

    async def get_by_student(self, student_id: int) -> list[Attendance]:
        await self._latency.pause(LatencyKind.READ)
        return self._select(lambda a: a.student_id == student_id)

    async def get_by_class(self, class_id: int) -> list[Attendance]:
        await self._latency.pause(LatencyKind.READ)
        return self._select(lambda a: a.class_id == class_id)

    async def get_by_date(self, day: dt.date) -> list[Attendance]:
        await self._latency.pause(LatencyKind.READ)
        return self._select(lambda a: a.date == day)

    async def get_in_range(self, window: DateRange) -> list[Attendance]:
        await self._latency.pause(LatencyKind.READ)
        return self._select(lambda a: window.contains(a.date))

    async def bulk_update(
        self, records: Iterable[AttendanceUpsert | Mapping[str, Any]]
    ) -> list[Attendance]:
        """Upsert rows keyed by (student, class, date).

        A row matching an existing record is merged onto it, keeping any field
        the row leaves out (such as ``notes``); any other row is appended with
        a fresh id.  Rows are applied one at a time in order, so
        a key repeated within one call ends with the last row's values.

        Rows are independent: a row that fails validation is logged and
        skipped, and never undoes the rows applied before or after it.  The
        returned list holds one record per applied row.
        """
        await self._latency.pause(LatencyKind.BULK)
        results: list[Attendance] = []
        inserted = skipped = 0
        with self._lock:
            for position, raw in enumerate(records):
                try:
                    row = raw if isinstance(raw, AttendanceUpsert) else AttendanceUpsert.model_validate(raw)
                except ValidationError as exc:
                    skipped += 1
                    logger.warning("Skipping attendance row %d: %s", position, exc.errors())
                    continue
                index = self._find_key(row)
                if index is None:
                    record = self._build(self._next_id(), row.model_dump())
                    self._records.append(record)
                    inserted += 1
                else:
                    record = self._merge(
                        self._records[index], row.model_dump(exclude_unset=True)
                    )
                    self._records[index] = record
                results.append(record.model_copy(deep=True))
        logger.info(
            "Attendance bulk update: %d inserted, %d updated, %d skipped",
            inserted, len(results) - inserted, skipped,
        )
        return results

    async def get_attendance_rate(
        self,
        student_id: int,
        class_id: int | None = None,
        window: DateRange | None = None,
    ) -> int:
        """Present share of a student's records, optionally scoped; 100 if none."""
        await self._latency.pause(LatencyKind.READ)
        window = window or DateRange()
        records = self._select(
            lambda a: a.student_id == student_id
            and (class_id is None or a.class_id == class_id)
            and window.contains(a.date)
        )
        return attendance_rate(records)

    def _find_key(self, row: AttendanceUpsert) -> int | None:
        for index, record in enumerate(self._records):
            if (record.student_id, record.class_id, record.date) == row.key:
                return index
        return None
