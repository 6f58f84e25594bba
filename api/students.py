"""Student CRUD endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter

from models.request import StudentCreate
from models.school import GradeLevel, Student, StudentPatch, StudentStatus
from services.school_store import get_school_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/students", tags=["students"])


@router.get("")
async def list_students(
    q: str | None = None,
    grade: GradeLevel | None = None,
    status: StudentStatus | None = None,
) -> list[Student]:
    """List students, optionally narrowed by search text, grade level and status.

    Filters combine: the search runs first, then grade and status are applied
    to its result.
    """
    store = get_school_store().students
    if q:
        students = await store.search(q)
    elif grade is not None:
        students = await store.get_by_grade_level(grade)
    elif status is not None:
        students = await store.get_by_status(status)
    else:
        students = await store.get_all()
    if grade is not None:
        students = [s for s in students if s.grade == grade]
    if status is not None:
        students = [s for s in students if s.status == status]
    return students


@router.get("/{student_id}")
async def get_student(student_id: int) -> Student:
    return await get_school_store().students.get_by_id(student_id)


@router.post("", status_code=201)
async def create_student(body: StudentCreate) -> Student:
    student = await get_school_store().students.create(body.model_dump(exclude_none=True))
    logger.info("Created student %d (%s)", student.id, student.full_name)
    return student


@router.patch("/{student_id}")
async def update_student(student_id: int, body: StudentPatch) -> Student:
    return await get_school_store().students.update(student_id, body)


@router.delete("/{student_id}")
async def delete_student(student_id: int) -> Student:
    student = await get_school_store().students.delete(student_id)
    logger.info("Deleted student %d", student_id)
    return student
