"""Tests for the generic entity store — CRUD, id assignment, copies, latency."""

from __future__ import annotations

import asyncio
import datetime as dt

import pytest

from errors import EntityNotFoundError
from models.school import GradePatch, StudentPatch
from services.latency import LatencyKind, LatencyProfile, SimulatedLatency
from services.stores import StudentStore


class RecordingSleep:
    """Stands in for asyncio.sleep and remembers every requested delay."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        await asyncio.sleep(0)


# ── Round trips per entity ───────────────────────────────────


class TestCreateAndFetch:
    @pytest.mark.asyncio
    async def test_student_round_trip(self, school):
        created = await school.students.create({
            "firstName": "Ava", "lastName": "Patel",
            "email": "ava.patel@school.edu", "grade": "12",
        })
        assert created.id == 4
        assert await school.students.get_by_id(created.id) == created

    @pytest.mark.asyncio
    async def test_class_round_trip_starts_with_empty_roster(self, school):
        created = await school.classes.create({"name": "Chemistry", "subject": "Science"})
        assert created.student_ids == []
        assert created.assignments == []
        assert await school.classes.get_by_id(created.id) == created

    @pytest.mark.asyncio
    async def test_grade_round_trip_defaults_date_to_today(self, school):
        created = await school.grades.create(
            GradePatch(student_id=2, class_id=1, assignment_name="Quiz 2", score=40, max_score=50)
        )
        assert created.date == dt.date.today()
        assert await school.grades.get_by_id(created.id) == created

    @pytest.mark.asyncio
    async def test_grade_keeps_explicit_date(self, school):
        created = await school.grades.create(
            {"studentId": 2, "classId": 1, "score": 1, "maxScore": 2, "date": "2024-01-05"}
        )
        assert created.date == dt.date(2024, 1, 5)

    @pytest.mark.asyncio
    async def test_attendance_round_trip(self, school):
        created = await school.attendance.create(
            {"studentId": 3, "classId": 2, "date": "2024-09-18", "status": "late", "notes": "Bus"}
        )
        assert created.id == 6
        assert await school.attendance.get_by_id(created.id) == created

    @pytest.mark.asyncio
    async def test_create_with_partial_data(self, school):
        grade = await school.grades.create({"assignmentName": "Draft"})
        assert (grade.id, grade.student_id, grade.class_id) == (4, None, None)
        record = await school.attendance.create({"status": "late"})
        assert (record.id, record.student_id, record.date) == (6, None, None)

    @pytest.mark.asyncio
    async def test_create_ignores_supplied_id(self, school):
        created = await school.students.create({"Id": 1, "firstName": "Dup"})
        assert created.id == 4
        assert (await school.students.get_by_id(1)).first_name == "Emma"


# ── Update ───────────────────────────────────────────────────


class TestUpdate:
    @pytest.mark.asyncio
    async def test_partial_update_preserves_other_fields(self, school):
        updated = await school.students.update(1, StudentPatch(status="graduated"))
        assert updated.status == "graduated"
        assert updated.first_name == "Emma"
        assert updated.email == "emma.johnson@school.edu"

    @pytest.mark.asyncio
    async def test_update_never_changes_id(self, school):
        before_other = await school.students.get_by_id(2)
        updated = await school.students.update(1, {"Id": 2, "id": 2, "lastName": "Smith"})
        assert updated.id == 1
        assert (await school.students.get_by_id(1)).last_name == "Smith"
        assert await school.students.get_by_id(2) == before_other

    @pytest.mark.asyncio
    async def test_update_missing_raises(self, school):
        with pytest.raises(EntityNotFoundError, match="Student not found"):
            await school.students.update(99, StudentPatch(bio="x"))

    @pytest.mark.asyncio
    async def test_store_accepts_score_above_max(self, school):
        updated = await school.grades.update(1, GradePatch(score=60))
        assert updated.score == 60
        assert updated.max_score == 50


# ── Delete ───────────────────────────────────────────────────


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_returns_removed_record(self, school):
        removed = await school.grades.delete(2)
        assert removed.assignment_name == "Lab Report"
        assert school.grades.size == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("store_name,label", [
        ("students", "Student"),
        ("classes", "Class"),
        ("grades", "Grade"),
        ("attendance", "Attendance record"),
    ])
    async def test_deleted_id_is_gone_everywhere(self, school, store_name, label):
        store = getattr(school, store_name)
        await store.delete(1)
        with pytest.raises(EntityNotFoundError, match=f"{label} not found"):
            await store.get_by_id(1)
        with pytest.raises(EntityNotFoundError):
            await store.update(1, {})
        with pytest.raises(EntityNotFoundError):
            await store.delete(1)

    @pytest.mark.asyncio
    async def test_ids_not_reused_after_deleting_highest(self, school):
        await school.students.delete(3)
        created = await school.students.create({"firstName": "New"})
        assert created.id == 4

    @pytest.mark.asyncio
    async def test_first_id_in_empty_store_is_one(self):
        store = StudentStore(latency=SimulatedLatency(LatencyProfile.instant()))
        created = await store.create({"firstName": "Solo"})
        assert created.id == 1


# ── Independent copies ───────────────────────────────────────


class TestCopies:
    @pytest.mark.asyncio
    async def test_get_all_returns_copies(self, school):
        students = await school.students.get_all()
        students[0].first_name = "Mutated"
        students.clear()
        assert (await school.students.get_by_id(1)).first_name == "Emma"
        assert school.students.size == 3

    @pytest.mark.asyncio
    async def test_nested_lists_are_copied(self, school):
        school_class = await school.classes.get_by_id(1)
        school_class.student_ids.append(3)
        school_class.assignments.clear()
        fresh = await school.classes.get_by_id(1)
        assert fresh.student_ids == [1, 2]
        assert len(fresh.assignments) == 2

    @pytest.mark.asyncio
    async def test_seed_records_are_copied_on_construction(self, seed):
        store = StudentStore(seed.students, SimulatedLatency(LatencyProfile.instant()))
        seed.students[0].first_name = "Changed"
        assert (await store.get_by_id(1)).first_name == "Emma"


# ── Simulated latency ────────────────────────────────────────


class TestLatency:
    @pytest.mark.asyncio
    async def test_operation_classes_charge_their_delay(self, seed):
        sleep = RecordingSleep()
        store = StudentStore(seed.students, SimulatedLatency(LatencyProfile(), sleep=sleep))
        await store.get_by_id(1)
        await store.get_all()
        await store.create({"firstName": "X"})
        await store.search("em")
        assert sleep.calls == [0.2, 0.3, 0.4, 0.2]

    @pytest.mark.asyncio
    async def test_not_resolved_synchronously(self, seed):
        profile = LatencyProfile(read_ms=20, list_ms=20, write_ms=20, bulk_ms=20)
        store = StudentStore(seed.students, SimulatedLatency(profile))
        task = asyncio.create_task(store.get_by_id(1))
        await asyncio.sleep(0)
        assert not task.done()
        assert (await task).id == 1

    @pytest.mark.asyncio
    async def test_not_found_raised_after_delay(self, seed):
        sleep = RecordingSleep()
        store = StudentStore(seed.students, SimulatedLatency(LatencyProfile(), sleep=sleep))
        with pytest.raises(EntityNotFoundError):
            await store.get_by_id(42)
        assert sleep.calls == [0.2]

    def test_instant_profile_is_zero(self):
        profile = LatencyProfile.instant()
        assert all(profile.seconds(kind) == 0 for kind in LatencyKind)

    def test_profile_from_settings(self):
        from config.settings import Settings

        settings = Settings(read_delay_ms=10, list_delay_ms=20, write_delay_ms=30, bulk_delay_ms=40)
        profile = LatencyProfile.from_settings(settings)
        assert profile.seconds(LatencyKind.BULK) == 0.04
        disabled = LatencyProfile.from_settings(Settings(simulate_latency=False))
        assert disabled == LatencyProfile.instant()


# ── Query / filter ───────────────────────────────────────────


class TestStudentQueries:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("query,expected", [
        ("emma", [1]),
        ("MARTINEZ", [2]),
        ("school.edu", [1, 2, 3]),
        ("li", [2, 3]),  # Liam, Olivia
        ("zzz", []),
    ])
    async def test_search(self, school, query, expected):
        assert [s.id for s in await school.students.search(query)] == expected

    @pytest.mark.asyncio
    async def test_filter_by_grade_level_and_status(self, school):
        assert [s.id for s in await school.students.get_by_grade_level("11")] == [2]
        assert [s.id for s in await school.students.get_by_status("inactive")] == [3]

    @pytest.mark.asyncio
    async def test_grade_foreign_key_lookups(self, school):
        assert [g.id for g in await school.grades.get_by_student(1)] == [1, 2]
        assert [g.id for g in await school.grades.get_by_class(1)] == [1, 3]
        assert await school.grades.get_by_student(99) == []
