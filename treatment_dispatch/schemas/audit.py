"""Schémas Historique / Audit history schemas."""

import json
from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator

AuditEntity = Literal["ticket", "truck", "material", "user", "auth"]


class AuditEntryRead(BaseModel):
    """Entrée d'historique, changements décodés / History entry with decoded changes."""
    model_config = ConfigDict(from_attributes=True)
    id: int
    entity_type: str
    entity_id: int
    action: str
    changes: dict | None = None
    user: str | None
    timestamp: str

    @field_validator("changes", mode="before")
    @classmethod
    def _decode(cls, value):
        if isinstance(value, str):
            return json.loads(value)
        return value
