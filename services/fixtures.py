"""Static JSON fixtures that seed the in-memory stores.

One file per entity type, each an ordered array of flat camelCase records
with an ``Id`` field.  Fixtures are read once at startup and never written.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TypeVar

from pydantic import TypeAdapter

from models.base import CamelModel
from models.school import Attendance, Grade, SchoolClass, Student

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=CamelModel)

FIXTURE_FILES = {
    "students": "students.json",
    "classes": "classes.json",
    "grades": "grades.json",
    "attendance": "attendance.json",
}


@dataclass
class SeedData:
    """Initial contents of every store."""

    students: list[Student] = field(default_factory=list)
    classes: list[SchoolClass] = field(default_factory=list)
    grades: list[Grade] = field(default_factory=list)
    attendance: list[Attendance] = field(default_factory=list)


def _load_file(path: Path, model: type[ModelT]) -> list[ModelT]:
    if not path.exists():
        logger.warning("Fixture not found, starting empty: %s", path)
        return []
    records = TypeAdapter(list[model]).validate_python(
        json.loads(path.read_text(encoding="utf-8"))
    )
    logger.info("Loaded %d records from %s", len(records), path.name)
    return records


def load_seed_data(fixture_dir: Path) -> SeedData:
    """Read all fixtures from *fixture_dir*; a missing file seeds an empty collection."""
    fixture_dir = Path(fixture_dir)
    return SeedData(
        students=_load_file(fixture_dir / FIXTURE_FILES["students"], Student),
        classes=_load_file(fixture_dir / FIXTURE_FILES["classes"], SchoolClass),
        grades=_load_file(fixture_dir / FIXTURE_FILES["grades"], Grade),
        attendance=_load_file(fixture_dir / FIXTURE_FILES["attendance"], Attendance),
    )
