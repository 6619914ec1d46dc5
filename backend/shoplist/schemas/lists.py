"""List Schemas — list and membership request/response models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from shoplist.core.entities import ListMember, ShoppingList, User


class ListCreate(BaseModel):
    name: str


class ListUpdate(BaseModel):
    name: str


class ListResponse(BaseModel):
    id: UUID
    name: str
    owner_id: UUID
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, shopping_list: ShoppingList) -> "ListResponse":
        return cls(
            id=shopping_list.id,
            name=shopping_list.name,
            owner_id=shopping_list.owner_id,
            created_at=shopping_list.created_at,
            updated_at=shopping_list.updated_at,
        )


class MemberResponse(BaseModel):
    list_id: UUID
    user_id: UUID
    email: str
    role: str
    joined_at: datetime

    @classmethod
    def from_entity(cls, member: ListMember, user: User) -> "MemberResponse":
        return cls(
            list_id=member.list_id,
            user_id=member.user_id,
            email=user.email,
            role=member.role.value,
            joined_at=member.joined_at,
        )
