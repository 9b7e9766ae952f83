"""Common DTOs shared by the entity request models."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class EntityPayload(BaseModel):
    """Request body whose undeclared keys are kept, not dropped.

    The integrity layer decides which keys are valid, so unknown or immutable
    fields come back as constraint violations naming the field.
    """

    model_config = ConfigDict(extra="allow")

    def to_fields(self) -> dict[str, Any]:
        """Explicitly sent fields, declared or not."""
        fields = self.model_dump(exclude_unset=True)
        fields.update(self.model_extra or {})
        return fields
