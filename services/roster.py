"""Class roster maintenance — the many-to-many Class ↔ Student link."""

from __future__ import annotations

import asyncio

from models.school import SchoolClass, Student
from services.class_store import ClassStore
from services.latency import LatencyKind, SimulatedLatency
from services.stores import StudentStore


class RosterService:
    """Enroll and unenroll students, keeping ``studentIds`` duplicate-free.

    A student must exist when it is added.  Deleting a student later does not
    touch any roster, so rosters may hold dangling ids; :meth:`get_roster`
    skips them.
    """

    def __init__(
        self,
        classes: ClassStore,
        students: StudentStore,
        latency: SimulatedLatency | None = None,
    ) -> None:
        self._classes = classes
        self._students = students
        self._latency = latency or SimulatedLatency()

    async def add_student_to_class(self, class_id: int, student_id: int) -> SchoolClass:
        """Idempotent: adding an enrolled student leaves the roster unchanged."""
        await self._latency.pause(LatencyKind.WRITE)
        self._classes.require(class_id)
        self._students.require(student_id)
        return self._classes.enroll(class_id, student_id)

    async def remove_student_from_class(self, class_id: int, student_id: int) -> SchoolClass:
        await self._latency.pause(LatencyKind.WRITE)
        return self._classes.unenroll(class_id, student_id)

    async def get_roster(self, class_id: int) -> list[Student]:
        """Enrolled students in roster order."""
        school_class, students = await asyncio.gather(
            self._classes.get_by_id(class_id),
            self._students.get_all(),
        )
        by_id = {s.id: s for s in students}
        return [by_id[sid] for sid in school_class.student_ids if sid in by_id]
