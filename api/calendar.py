"""Assignment and event endpoints — the flattened calendar views."""

from __future__ import annotations

import datetime as dt

from fastapi import APIRouter, HTTPException, Query

from models.request import AssignmentCreate, EventCreate, EventUpdate
from models.school import AssignmentPatch, AssignmentView, EventView
from services.date_ranges import DateRange
from services.school_store import get_school_store

router = APIRouter(prefix="/api", tags=["calendar"])


# ── Assignments ──────────────────────────────────────────────


@router.get("/assignments")
async def list_assignments(
    class_id: int | None = Query(None, alias="classId"),
) -> list[AssignmentView]:
    service = get_school_store().assignments
    if class_id is not None:
        return await service.get_by_class(class_id)
    return await service.get_all()


@router.get("/assignments/{assignment_id}")
async def get_assignment(assignment_id: int) -> AssignmentView:
    return await get_school_store().assignments.get_by_id(assignment_id)


@router.post("/assignments", status_code=201)
async def create_assignment(body: AssignmentCreate) -> AssignmentView:
    return await get_school_store().assignments.create(body.model_dump())


@router.patch("/assignments/{assignment_id}")
async def update_assignment(assignment_id: int, body: AssignmentPatch) -> AssignmentView:
    return await get_school_store().assignments.update(assignment_id, body)


@router.delete("/assignments/{assignment_id}")
async def delete_assignment(assignment_id: int) -> AssignmentView:
    return await get_school_store().assignments.delete(assignment_id)


# ── Events ───────────────────────────────────────────────────


@router.get("/events")
async def list_events(
    class_id: int | None = Query(None, alias="classId"),
    start: dt.date | None = None,
    end: dt.date | None = None,
) -> list[EventView]:
    """All events, or those of one class, or those overlapping ``[start, end]``."""
    service = get_school_store().events
    if start is not None or end is not None:
        events = await service.get_in_range(DateRange(start, end))
        if class_id is not None:
            events = [e for e in events if e.class_id == class_id]
        return events
    if class_id is not None:
        return await service.get_by_class(class_id)
    return await service.get_all()


@router.get("/events/{event_id}")
async def get_event(event_id: int) -> EventView:
    return await get_school_store().events.get_by_id(event_id)


@router.post("/events", status_code=201)
async def create_event(body: EventCreate) -> EventView:
    return await get_school_store().events.create(body.model_dump(exclude_none=True))


@router.patch("/events/{event_id}")
async def update_event(event_id: int, body: EventUpdate) -> EventView:
    """Partial update; the merged endDate may not fall before the merged startDate."""
    service = get_school_store().events
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    if "start_date" in changes or "end_date" in changes:
        current = await service.get_by_id(event_id)
        start = changes.get("start_date", current.start_date)
        end = changes.get("end_date", current.end_date)
        if start is not None and end is not None and end < start:
            raise HTTPException(status_code=422, detail="endDate must not be before startDate")
    return await service.update(event_id, changes)


@router.delete("/events/{event_id}")
async def delete_event(event_id: int) -> EventView:
    return await get_school_store().events.delete(event_id)
