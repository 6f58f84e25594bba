"""Attendance CRUD, bulk upsert, rate and daily summary endpoints."""

from __future__ import annotations

import datetime as dt

from fastapi import APIRouter, Query

from models.report import DailyAttendanceSummary
from models.request import AttendanceBulkRequest, AttendanceCreate
from models.school import Attendance, AttendancePatch
from services.date_ranges import DateRange
from services.school_store import get_school_store

router = APIRouter(prefix="/api/attendance", tags=["attendance"])


@router.get("")
async def list_attendance(
    student_id: int | None = Query(None, alias="studentId"),
    class_id: int | None = Query(None, alias="classId"),
    date: dt.date | None = None,
) -> list[Attendance]:
    """All records, narrowed by any combination of student, class and date."""
    store = get_school_store().attendance
    if date is not None:
        records = await store.get_by_date(date)
    elif student_id is not None:
        records = await store.get_by_student(student_id)
    elif class_id is not None:
        records = await store.get_by_class(class_id)
    else:
        records = await store.get_all()
    if student_id is not None:
        records = [r for r in records if r.student_id == student_id]
    if class_id is not None:
        records = [r for r in records if r.class_id == class_id]
    return records


@router.post("/bulk")
async def bulk_update_attendance(body: AttendanceBulkRequest) -> list[Attendance]:
    """Upsert a whole attendance sheet keyed by (student, class, date)."""
    return await get_school_store().attendance.bulk_update(body.records)


@router.get("/rate")
async def attendance_rate(
    student_id: int = Query(alias="studentId"),
    class_id: int | None = Query(None, alias="classId"),
    start: dt.date | None = None,
    end: dt.date | None = None,
):
    """Present share of a student's records (100 when there are none)."""
    rate = await get_school_store().attendance.get_attendance_rate(
        student_id, class_id, DateRange(start, end)
    )
    return {"studentId": student_id, "classId": class_id, "attendanceRate": rate}


@router.get("/summary")
async def daily_summary(date: dt.date | None = None) -> DailyAttendanceSummary:
    """Status counts and rate for one day (today by default)."""
    return await get_school_store().reports.daily_attendance_summary(date or dt.date.today())


@router.get("/{record_id}")
async def get_attendance(record_id: int) -> Attendance:
    return await get_school_store().attendance.get_by_id(record_id)


@router.post("", status_code=201)
async def create_attendance(body: AttendanceCreate) -> Attendance:
    return await get_school_store().attendance.create(body.model_dump())


@router.patch("/{record_id}")
async def update_attendance(record_id: int, body: AttendancePatch) -> Attendance:
    return await get_school_store().attendance.update(record_id, body)


@router.delete("/{record_id}")
async def delete_attendance(record_id: int) -> Attendance:
    return await get_school_store().attendance.delete(record_id)
