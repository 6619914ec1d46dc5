"""Item Schemas — shopping item request/response models.

Design Decisions:
    - tags is an opaque string (a serialized collection, "[]" by default); never parsed here
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from shoplist.core.entities import ShoppingItem


class ItemCreate(BaseModel):
    name: str
    tags: str | None = None


class ItemUpdate(BaseModel):
    name: str
    tags: str | None = None


class ItemResponse(BaseModel):
    id: UUID
    list_id: UUID
    name: str
    completed: bool
    tags: str
    created_at: datetime

    @classmethod
    def from_entity(cls, item: ShoppingItem) -> "ItemResponse":
        return cls(
            id=item.id,
            list_id=item.list_id,
            name=item.name,
            completed=item.completed,
            tags=item.tags,
            created_at=item.created_at,
        )
