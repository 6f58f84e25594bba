"""Grade CRUD and grade-average endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query

from models.request import GradeCreate, GradeUpdate
from models.school import Grade
from services.aggregation import letter_grade
from services.school_store import get_school_store

router = APIRouter(prefix="/api/grades", tags=["grades"])


@router.get("")
async def list_grades(
    student_id: int | None = Query(None, alias="studentId"),
    class_id: int | None = Query(None, alias="classId"),
) -> list[Grade]:
    store = get_school_store().grades
    if student_id is not None:
        grades = await store.get_by_student(student_id)
        if class_id is not None:
            grades = [g for g in grades if g.class_id == class_id]
        return grades
    if class_id is not None:
        return await store.get_by_class(class_id)
    return await store.get_all()


@router.get("/average")
async def grade_average(
    student_id: int = Query(alias="studentId"),
    class_id: int | None = Query(None, alias="classId"),
):
    """Mean percentage of a student's grades (0 when there are none)."""
    average = await get_school_store().grades.calculate_average(student_id, class_id)
    return {
        "studentId": student_id,
        "classId": class_id,
        "average": average,
        "letter": letter_grade(average),
    }


@router.get("/{grade_id}")
async def get_grade(grade_id: int) -> Grade:
    return await get_school_store().grades.get_by_id(grade_id)


@router.post("", status_code=201)
async def create_grade(body: GradeCreate) -> Grade:
    return await get_school_store().grades.create(body.model_dump(exclude_none=True))


@router.patch("/{grade_id}")
async def update_grade(grade_id: int, body: GradeUpdate) -> Grade:
    """Partial update; the merged score may not exceed the merged maxScore."""
    store = get_school_store().grades
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    if "score" in changes or "max_score" in changes:
        current = await store.get_by_id(grade_id)
        score = changes.get("score", current.score)
        max_score = changes.get("max_score", current.max_score)
        if score > max_score:
            raise HTTPException(status_code=422, detail="score must not exceed maxScore")
    return await store.update(grade_id, changes)


@router.delete("/{grade_id}")
async def delete_grade(grade_id: int) -> Grade:
    return await get_school_store().grades.delete(grade_id)
