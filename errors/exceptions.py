"""Domain-specific exceptions for the school data store.

The store layer produces exactly one failure kind: a record that is absent
from its collection.  API layers translate it into an HTTP 404.
"""

from __future__ import annotations


class StoreError(Exception):
    """Base class for data store errors."""


class EntityNotFoundError(StoreError):
    """A referenced entity (student, class, grade, ...) does not exist.

    The message names only the entity type (``"Student not found"``) so it
    can be shown to end users verbatim.  The missing id is kept on the
    instance for logging.
    """

    def __init__(self, entity_type: str, entity_id: int | None = None) -> None:
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} not found")
