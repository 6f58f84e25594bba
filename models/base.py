"""Base models with camelCase serialization for fixtures and API output."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for every wire model; fields are camelCase in JSON, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class PatchModel(CamelModel):
    """Partial entity: every field is optional and only fields explicitly set apply.

    Identifiers are never part of a patch.  An ``Id`` key in incoming data is
    dropped during validation (unknown keys are ignored) and :meth:`changes`
    strips it again for patches built from arbitrary mappings.
    """

    def changes(self) -> dict[str, Any]:
        data = self.model_dump(exclude_unset=True)
        data.pop("id", None)
        return data
