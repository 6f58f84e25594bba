"""Class store — classes, their rosters and their embedded assignments/events.

A class record owns two embedded sub-collections, ``assignments`` and
``events``.  They are the single source of truth for those items: the
flattened views in :mod:`services.projections` read and write through the
synchronous helpers here rather than keeping copies of their own.

Embedded item ids are unique across *all* classes, so an assignment or event
can be addressed by id alone.  Like top-level ids, they are never reused.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from errors import EntityNotFoundError
from models.base import CamelModel, PatchModel
from models.school import (
    Assignment,
    AssignmentPatch,
    ClassPatch,
    Event,
    EventPatch,
    SchoolClass,
)
from services.entity_store import EntityStore
from services.latency import SimulatedLatency

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmbeddedCollection:
    """Describes one embedded list on :class:`SchoolClass`."""

    field: str
    model: type[CamelModel]
    patch_model: type[PatchModel]
    label: str


ASSIGNMENTS = EmbeddedCollection("assignments", Assignment, AssignmentPatch, "Assignment")
EVENTS = EmbeddedCollection("events", Event, EventPatch, "Event")


class ClassStore(EntityStore[SchoolClass, ClassPatch]):
    model = SchoolClass
    patch_model = ClassPatch
    entity_label = "Class"

    def __init__(
        self,
        records: Iterable[SchoolClass] = (),
        latency: SimulatedLatency | None = None,
    ) -> None:
        super().__init__(records, latency)
        self._last_item_ids = {
            collection.field: max(
                (item.id for _, item in self._iter_items(collection)), default=0
            )
            for collection in (ASSIGNMENTS, EVENTS)
        }

    # ── Roster ───────────────────────────────────────────────

    def enroll(self, class_id: int, student_id: int) -> SchoolClass:
        """Add *student_id* to the roster unless it is already there."""
        with self._lock:
            school_class = self._records[self._index_of(class_id)]
            if student_id not in school_class.student_ids:
                school_class.student_ids.append(student_id)
                logger.debug("Enrolled student %d in class %d", student_id, class_id)
            return school_class.model_copy(deep=True)

    def unenroll(self, class_id: int, student_id: int) -> SchoolClass:
        """Drop *student_id* from the roster; absent ids are not an error."""
        with self._lock:
            school_class = self._records[self._index_of(class_id)]
            school_class.student_ids = [
                sid for sid in school_class.student_ids if sid != student_id
            ]
            return school_class.model_copy(deep=True)

    # ── Embedded items ───────────────────────────────────────

    def select_items(
        self,
        collection: EmbeddedCollection,
        predicate: Callable[[Any], bool] = lambda _: True,
    ) -> list[tuple[SchoolClass, Any]]:
        """(owning class, item) pairs in class order, then item order."""
        with self._lock:
            return [
                (school_class.model_copy(deep=True), item.model_copy(deep=True))
                for school_class, item in self._iter_items(collection)
                if predicate(item)
            ]

    def find_item(self, collection: EmbeddedCollection, item_id: int) -> tuple[SchoolClass, Any]:
        with self._lock:
            school_class, item = self._locate_item(collection, item_id)
            return school_class.model_copy(deep=True), item.model_copy(deep=True)

    def insert_item(
        self, collection: EmbeddedCollection, changes: Mapping[str, Any]
    ) -> tuple[SchoolClass, Any]:
        """Append a new item to the class named by ``changes["class_id"]``."""
        with self._lock:
            owner = self._records[self._index_of(changes.get("class_id"))]
            item = collection.model.model_validate(
                {**changes, "id": self._next_item_id(collection)}
            )
            getattr(owner, collection.field).append(item)
            logger.debug("Created %s %d in class %d", collection.label, item.id, owner.id)
            return owner.model_copy(deep=True), item.model_copy(deep=True)

    def replace_item(
        self, collection: EmbeddedCollection, item_id: int, changes: Mapping[str, Any]
    ) -> tuple[SchoolClass, Any]:
        """Merge *changes* onto an item, moving it when ``class_id`` changes."""
        with self._lock:
            owner, item = self._locate_item(collection, item_id)
            merged = collection.model.model_validate(
                {**item.model_dump(), **changes, "id": item.id}
            )
            items = getattr(owner, collection.field)
            if merged.class_id == owner.id:
                items[items.index(item)] = merged
                return owner.model_copy(deep=True), merged.model_copy(deep=True)

            target = self._records[self._index_of(merged.class_id)]
            items.remove(item)
            getattr(target, collection.field).append(merged)
            logger.debug(
                "Moved %s %d from class %d to class %d",
                collection.label, item_id, owner.id, target.id,
            )
            return target.model_copy(deep=True), merged.model_copy(deep=True)

    def remove_item(self, collection: EmbeddedCollection, item_id: int) -> tuple[SchoolClass, Any]:
        with self._lock:
            owner, item = self._locate_item(collection, item_id)
            getattr(owner, collection.field).remove(item)
            return owner.model_copy(deep=True), item

    def _iter_items(self, collection: EmbeddedCollection):
        for school_class in self._records:
            for item in getattr(school_class, collection.field):
                yield school_class, item

    def _locate_item(self, collection: EmbeddedCollection, item_id: int) -> tuple[SchoolClass, Any]:
        for school_class, item in self._iter_items(collection):
            if item.id == item_id:
                return school_class, item
        raise EntityNotFoundError(collection.label, item_id)

    def _next_item_id(self, collection: EmbeddedCollection) -> int:
        current = max(
            (item.id for _, item in self._iter_items(collection)), default=0
        )
        next_id = max(current, self._last_item_ids[collection.field]) + 1
        self._last_item_ids[collection.field] = next_id
        return next_id
