"""Class CRUD and roster endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter

from models.request import ClassCreate
from models.school import AssignmentView, ClassPatch, EventView, SchoolClass, Student
from services.school_store import get_school_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/classes", tags=["classes"])


@router.get("")
async def list_classes() -> list[SchoolClass]:
    return await get_school_store().classes.get_all()


@router.get("/{class_id}")
async def get_class(class_id: int) -> SchoolClass:
    return await get_school_store().classes.get_by_id(class_id)


@router.post("", status_code=201)
async def create_class(body: ClassCreate) -> SchoolClass:
    school_class = await get_school_store().classes.create(body.model_dump())
    logger.info("Created class %d (%s)", school_class.id, school_class.name)
    return school_class


@router.patch("/{class_id}")
async def update_class(class_id: int, body: ClassPatch) -> SchoolClass:
    return await get_school_store().classes.update(class_id, body)


@router.delete("/{class_id}")
async def delete_class(class_id: int) -> SchoolClass:
    return await get_school_store().classes.delete(class_id)


# ── Roster ───────────────────────────────────────────────────


@router.get("/{class_id}/students")
async def get_roster(class_id: int) -> list[Student]:
    return await get_school_store().roster.get_roster(class_id)


@router.put("/{class_id}/students/{student_id}")
async def add_student(class_id: int, student_id: int) -> SchoolClass:
    """Enroll a student; enrolling twice is a no-op."""
    return await get_school_store().roster.add_student_to_class(class_id, student_id)


@router.delete("/{class_id}/students/{student_id}")
async def remove_student(class_id: int, student_id: int) -> SchoolClass:
    """Unenroll a student; removing a student who is not enrolled is a no-op."""
    return await get_school_store().roster.remove_student_from_class(class_id, student_id)


# ── Embedded items ───────────────────────────────────────────


@router.get("/{class_id}/assignments")
async def list_class_assignments(class_id: int) -> list[AssignmentView]:
    store = get_school_store()
    store.classes.require(class_id)
    return await store.assignments.get_by_class(class_id)


@router.get("/{class_id}/events")
async def list_class_events(class_id: int) -> list[EventView]:
    store = get_school_store()
    store.classes.require(class_id)
    return await store.events.get_by_class(class_id)
