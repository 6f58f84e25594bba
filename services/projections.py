"""Flattened assignment and event views over the classes' embedded lists.

The calendar needs every class's assignments (or events) as one list,
addressable by id.  These services compute that list on each read and route
each write into the owning class through :class:`ClassStore`, so the
flattened view and the embedded copies can never diverge.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar, Generic, TypeVar

from models.base import CamelModel, PatchModel
from models.school import AssignmentView, EventView, SchoolClass
from services.class_store import ASSIGNMENTS, EVENTS, ClassStore, EmbeddedCollection
from services.date_ranges import DateRange
from services.latency import LatencyKind, SimulatedLatency


ViewT = TypeVar("ViewT", bound=CamelModel)


class EmbeddedItemService(Generic[ViewT]):
    """CRUD over one embedded collection, presented flat.

    Every row carries ``className``/``classSubject`` from its owning class.
    Creating an item, or moving one via a ``classId`` change, into a class
    that does not exist raises ``Class not found``.
    """

    collection: ClassVar[EmbeddedCollection]
    view_model: ClassVar[type[CamelModel]]

    def __init__(self, classes: ClassStore, latency: SimulatedLatency | None = None) -> None:
        self._classes = classes
        self._latency = latency or SimulatedLatency()

    async def get_all(self) -> list[ViewT]:
        await self._latency.pause(LatencyKind.LIST)
        return [self._view(c, item) for c, item in self._classes.select_items(self.collection)]

    async def get_by_id(self, item_id: int) -> ViewT:
        await self._latency.pause(LatencyKind.READ)
        return self._view(*self._classes.find_item(self.collection, item_id))

    async def get_by_class(self, class_id: int) -> list[ViewT]:
        await self._latency.pause(LatencyKind.READ)
        pairs = self._classes.select_items(self.collection, lambda item: item.class_id == class_id)
        return [self._view(c, item) for c, item in pairs]

    async def create(self, data: PatchModel | Mapping[str, Any]) -> ViewT:
        await self._latency.pause(LatencyKind.WRITE)
        changes = self._coerce_patch(data).changes()
        return self._view(*self._classes.insert_item(self.collection, changes))

    async def update(self, item_id: int, data: PatchModel | Mapping[str, Any]) -> ViewT:
        await self._latency.pause(LatencyKind.WRITE)
        changes = self._coerce_patch(data).changes()
        return self._view(*self._classes.replace_item(self.collection, item_id, changes))

    async def delete(self, item_id: int) -> ViewT:
        await self._latency.pause(LatencyKind.WRITE)
        return self._view(*self._classes.remove_item(self.collection, item_id))

    def _coerce_patch(self, data: PatchModel | Mapping[str, Any]) -> PatchModel:
        if isinstance(data, PatchModel):
            return data
        return self.collection.patch_model.model_validate(dict(data))

    def _view(self, school_class: SchoolClass, item: CamelModel) -> ViewT:
        return self.view_model.model_validate({
            **item.model_dump(),
            "class_name": school_class.name,
            "class_subject": school_class.subject,
        })


class AssignmentService(EmbeddedItemService[AssignmentView]):
    collection = ASSIGNMENTS
    view_model = AssignmentView


class EventService(EmbeddedItemService[EventView]):
    collection = EVENTS
    view_model = EventView

    async def get_in_range(self, window: DateRange) -> list[EventView]:
        """Events overlapping *window*; a missing end date means a one-day event."""
        await self._latency.pause(LatencyKind.READ)

        def overlaps(event: Any) -> bool:
            if window.is_unbounded:
                return True
            if event.start_date is None:
                return False
            end = event.end_date or event.start_date
            if window.start is not None and end < window.start:
                return False
            if window.end is not None and event.start_date > window.end:
                return False
            return True

        pairs = self._classes.select_items(self.collection, overlaps)
        return [self._view(c, item) for c, item in pairs]
