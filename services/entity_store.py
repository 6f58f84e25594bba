"""Generic in-memory entity store with simulated latency.

One :class:`EntityStore` owns the ordered collection for one record type.
Reads and writes go through an async facade that first pauses for the
configured delay and then operates on the collection under a lock, so two
mutations never interleave.  Every record handed to a caller is an
independent deep copy; mutating it never changes store state.

Ids are assigned as ``max(existing ids, 0) + 1``.  The store remembers the
highest id it has ever held, so deleting the newest record does not free its
id for reuse.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Mapping
from typing import Any, ClassVar, Generic, TypeVar

from errors import EntityNotFoundError
from models.base import CamelModel, PatchModel
from services.latency import LatencyKind, SimulatedLatency

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", bound=CamelModel)
PatchT = TypeVar("PatchT", bound=PatchModel)


class EntityStore(Generic[EntityT, PatchT]):
    """CRUD over one in-memory collection.

    Subclasses set ``model``, ``patch_model`` and ``entity_label`` (used in
    the ``"<label> not found"`` error message) and add their own queries on
    top of :meth:`_select`.
    """

    model: ClassVar[type[CamelModel]]
    patch_model: ClassVar[type[PatchModel]]
    entity_label: ClassVar[str] = "Record"

    def __init__(
        self,
        records: Iterable[EntityT] = (),
        latency: SimulatedLatency | None = None,
    ) -> None:
        self._lock = threading.RLock()
        self._records: list[EntityT] = [r.model_copy(deep=True) for r in records]
        self._latency = latency or SimulatedLatency()
        self._last_id = max((r.id for r in self._records), default=0)

    # ── Async facade ─────────────────────────────────────────

    async def get_all(self) -> list[EntityT]:
        await self._latency.pause(LatencyKind.LIST)
        return self._select(lambda _: True)

    async def get_by_id(self, entity_id: int) -> EntityT:
        await self._latency.pause(LatencyKind.READ)
        with self._lock:
            return self._records[self._index_of(entity_id)].model_copy(deep=True)

    async def create(self, data: PatchT | Mapping[str, Any]) -> EntityT:
        """Append a new record built from *data*; any id in *data* is ignored."""
        await self._latency.pause(LatencyKind.WRITE)
        changes = self._coerce_patch(data).changes()
        with self._lock:
            record = self._build(self._next_id(), changes)
            self._records.append(record)
            logger.debug("Created %s %d", self.entity_label, record.id)
            return record.model_copy(deep=True)

    async def update(self, entity_id: int, data: PatchT | Mapping[str, Any]) -> EntityT:
        """Shallow-merge the fields set in *data*; the id never changes."""
        await self._latency.pause(LatencyKind.WRITE)
        changes = self._coerce_patch(data).changes()
        with self._lock:
            index = self._index_of(entity_id)
            self._records[index] = self._merge(self._records[index], changes)
            logger.debug("Updated %s %d: %s", self.entity_label, entity_id, sorted(changes))
            return self._records[index].model_copy(deep=True)

    async def delete(self, entity_id: int) -> EntityT:
        await self._latency.pause(LatencyKind.WRITE)
        with self._lock:
            removed = self._records.pop(self._index_of(entity_id))
            logger.debug("Deleted %s %d", self.entity_label, entity_id)
            return removed

    # ── Internals ────────────────────────────────────────────

    @property
    def size(self) -> int:
        """Number of records currently stored."""
        return len(self._records)

    def require(self, entity_id: int) -> None:
        """Raise :class:`EntityNotFoundError` unless *entity_id* is stored.

        Synchronous and delay-free, for checks made inside another operation.
        """
        with self._lock:
            self._index_of(entity_id)

    def _select(self, predicate: Callable[[EntityT], bool]) -> list[EntityT]:
        """Linear scan returning deep copies of matching records, in order."""
        with self._lock:
            return [r.model_copy(deep=True) for r in self._records if predicate(r)]

    def _index_of(self, entity_id: int) -> int:
        for index, record in enumerate(self._records):
            if record.id == entity_id:
                return index
        raise EntityNotFoundError(self.entity_label, entity_id)

    def _next_id(self) -> int:
        self._last_id = max(self._last_id, *(r.id for r in self._records), 0) + 1
        return self._last_id

    def _coerce_patch(self, data: PatchT | Mapping[str, Any]) -> PatchModel:
        if isinstance(data, PatchModel):
            return data
        return self.patch_model.model_validate(dict(data))

    def _defaults(self) -> dict[str, Any]:
        """Field values applied on create before the caller's fields."""
        return {}

    def _build(self, entity_id: int, changes: Mapping[str, Any]) -> EntityT:
        return self.model.model_validate({**self._defaults(), **changes, "id": entity_id})

    def _merge(self, record: EntityT, changes: Mapping[str, Any]) -> EntityT:
        return self.model.model_validate({**record.model_dump(), **changes, "id": record.id})
