"""School data store — the one object that owns every collection.

Constructed once per process from the JSON fixtures (see
:func:`get_school_store`) and passed to API handlers.  Tests build their own
instances from in-memory :class:`SeedData` with an instant latency profile,
so no state leaks between tests.
"""

from __future__ import annotations

import logging

from config.settings import Settings, get_settings
from services.class_store import ClassStore
from services.fixtures import SeedData, load_seed_data
from services.latency import LatencyProfile, SimulatedLatency
from services.projections import AssignmentService, EventService
from services.reports import ReportService
from services.roster import RosterService
from services.stores import AttendanceStore, GradeStore, StudentStore

logger = logging.getLogger(__name__)


class SchoolDataStore:
    """Stores, relational helpers and reports wired over one shared latency."""

    def __init__(
        self,
        seed: SeedData | None = None,
        latency: SimulatedLatency | None = None,
        top_students_limit: int = 10,
        recent_activity_limit: int = 5,
    ) -> None:
        seed = seed or SeedData()
        self.latency = latency or SimulatedLatency()

        self.students = StudentStore(seed.students, self.latency)
        self.classes = ClassStore(seed.classes, self.latency)
        self.grades = GradeStore(seed.grades, self.latency)
        self.attendance = AttendanceStore(seed.attendance, self.latency)

        self.roster = RosterService(self.classes, self.students, self.latency)
        self.assignments = AssignmentService(self.classes, self.latency)
        self.events = EventService(self.classes, self.latency)
        self.reports = ReportService(
            self.students,
            self.classes,
            self.grades,
            self.attendance,
            top_students_limit=top_students_limit,
            recent_activity_limit=recent_activity_limit,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> SchoolDataStore:
        """Seed from ``settings.fixture_dir`` with the configured latency."""
        store = cls(
            seed=load_seed_data(settings.fixture_dir),
            latency=SimulatedLatency(LatencyProfile.from_settings(settings)),
            top_students_limit=settings.top_students_limit,
            recent_activity_limit=settings.recent_activity_limit,
        )
        logger.info("Initialized SchoolDataStore: %s", store.sizes())
        return store

    def sizes(self) -> dict[str, int]:
        """Current record count per top-level collection."""
        return {
            "students": self.students.size,
            "classes": self.classes.size,
            "grades": self.grades.size,
            "attendance": self.attendance.size,
        }


# ── Module-level Singleton ───────────────────────────────────

_store: SchoolDataStore | None = None


def get_school_store() -> SchoolDataStore:
    """Get the process-wide store, seeding it from fixtures on first use."""
    global _store
    if _store is None:
        _store = SchoolDataStore.from_settings(get_settings())
    return _store


def set_school_store(store: SchoolDataStore | None) -> None:
    """Replace (or clear, with ``None``) the process-wide store."""
    global _store
    _store = store
