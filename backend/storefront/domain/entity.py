"""
Entity base class

Entities carry identity: two instances are the same entity when their ids
match, whatever the rest of their state says.
"""
import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Entity(BaseModel):
    """Base entity class with auto-generated UUID identifier."""

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        description="Unique identifier for the entity",
        min_length=1,
    )
    created_at: datetime = Field(default_factory=utcnow, description="Creation timestamp")
    updated_at: datetime = Field(default_factory=utcnow, description="Last update timestamp")

    # Invariants are re-checked on every attribute write, not only in __init__
    model_config = ConfigDict(validate_assignment=True, from_attributes=True)

    def touch(self) -> None:
        """Bump updated_at after a state change"""
        self.updated_at = utcnow()

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Entity) or type(self) is not type(other):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.id))
