"""List Repositories — SQLAlchemy implementations for lists, memberships and items.

Invariants:
    - Every public method returns core entities, never ORM rows
    - create_with_owner and delete_cascade are single transactions
    - Items and memberships are always scoped by list_id
"""

from datetime import datetime

from sqlalchemy import select, delete, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from shoplist.core import entities
from shoplist.core.domain_types import ItemId, ListId, MemberRole, UserId
from shoplist.core.errors import AlreadyMemberError
from shoplist.infrastructure.repositories_auth import (
    as_utc, list_row, member_row, to_user,
)
from shoplist.models.invitation import Invitation
from shoplist.models.list_member import ListMember
from shoplist.models.shopping_item import ShoppingItem
from shoplist.models.shopping_list import ShoppingList
from shoplist.models.user import User


def to_list(row: ShoppingList) -> entities.ShoppingList:
    return entities.ShoppingList(
        id=ListId(row.id),
        name=row.name,
        owner_id=UserId(row.owner_id),
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    )


def to_member(row: ListMember) -> entities.ListMember:
    return entities.ListMember(
        list_id=ListId(row.list_id),
        user_id=UserId(row.user_id),
        role=MemberRole(row.role),
        joined_at=as_utc(row.joined_at),
    )


def to_item(row: ShoppingItem) -> entities.ShoppingItem:
    return entities.ShoppingItem(
        id=ItemId(row.id),
        list_id=ListId(row.list_id),
        name=row.name,
        completed=row.completed,
        tags=row.tags,
        created_at=as_utc(row.created_at),
    )


# ─── Lists ───────────────────────────────────────────────────────

class SqlListRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, list_id: ListId) -> entities.ShoppingList | None:
        row = await self.db.get(ShoppingList, list_id)
        return to_list(row) if row else None

    async def get_for_member(
        self, list_id: ListId, user_id: UserId,
    ) -> entities.ShoppingList | None:
        result = await self.db.execute(
            select(ShoppingList)
            .join(ListMember, ListMember.list_id == ShoppingList.id)
            .where(ShoppingList.id == list_id)
            .where(ListMember.user_id == user_id)
        )
        row = result.scalar_one_or_none()
        return to_list(row) if row else None

    async def list_for_member(self, user_id: UserId) -> list[entities.ShoppingList]:
        result = await self.db.execute(
            select(ShoppingList)
            .join(ListMember, ListMember.list_id == ShoppingList.id)
            .where(ListMember.user_id == user_id)
            .order_by(ShoppingList.created_at.desc())
        )
        return [to_list(row) for row in result.scalars().all()]

    async def create_with_owner(
        self, shopping_list: entities.ShoppingList, owner: entities.ListMember,
    ) -> entities.ShoppingList:
        self.db.add(list_row(shopping_list))
        await self.db.flush()
        self.db.add(member_row(owner))
        await self.db.commit()
        return shopping_list

    async def rename(
        self, list_id: ListId, name: str, updated_at: datetime,
    ) -> entities.ShoppingList | None:
        row = await self.db.get(ShoppingList, list_id)
        if row is None:
            return None
        row.name = name
        row.updated_at = updated_at
        await self.db.commit()
        return to_list(row)

    async def delete_cascade(self, list_id: ListId) -> bool:
        """Members, items, invitations, then the list itself — one commit."""
        await self.db.execute(delete(ListMember).where(ListMember.list_id == list_id))
        await self.db.execute(delete(ShoppingItem).where(ShoppingItem.list_id == list_id))
        await self.db.execute(delete(Invitation).where(Invitation.list_id == list_id))
        result = await self.db.execute(
            delete(ShoppingList).where(ShoppingList.id == list_id),
        )
        await self.db.commit()
        return result.rowcount > 0


# ─── Members ─────────────────────────────────────────────────────

class SqlMemberRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(
        self, list_id: ListId, user_id: UserId,
    ) -> entities.ListMember | None:
        row = await self.db.get(ListMember, (list_id, user_id))
        return to_member(row) if row else None

    async def add(self, member: entities.ListMember) -> entities.ListMember:
        self.db.add(member_row(member))
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise AlreadyMemberError()
        return member

    async def remove(self, list_id: ListId, user_id: UserId) -> bool:
        result = await self.db.execute(
            delete(ListMember)
            .where(ListMember.list_id == list_id)
            .where(ListMember.user_id == user_id)
        )
        await self.db.commit()
        return result.rowcount > 0

    async def count_owners(self, list_id: ListId) -> int:
        result = await self.db.execute(
            select(func.count())
            .select_from(ListMember)
            .where(ListMember.list_id == list_id)
            .where(ListMember.role == MemberRole.OWNER.value)
        )
        return result.scalar_one()

    async def list_with_users(
        self, list_id: ListId,
    ) -> list[tuple[entities.ListMember, entities.User]]:
        result = await self.db.execute(
            select(ListMember, User)
            .join(User, User.id == ListMember.user_id)
            .where(ListMember.list_id == list_id)
            .order_by(ListMember.joined_at)
        )
        return [(to_member(member), to_user(user)) for member, user in result.all()]


# ─── Items ───────────────────────────────────────────────────────

class SqlItemRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_list(self, list_id: ListId) -> list[entities.ShoppingItem]:
        result = await self.db.execute(
            select(ShoppingItem)
            .where(ShoppingItem.list_id == list_id)
            .order_by(ShoppingItem.created_at.desc())
        )
        return [to_item(row) for row in result.scalars().all()]

    async def get(
        self, list_id: ListId, item_id: ItemId,
    ) -> entities.ShoppingItem | None:
        result = await self.db.execute(
            select(ShoppingItem)
            .where(ShoppingItem.id == item_id)
            .where(ShoppingItem.list_id == list_id)
        )
        row = result.scalar_one_or_none()
        return to_item(row) if row else None

    async def add(self, item: entities.ShoppingItem) -> entities.ShoppingItem:
        self.db.add(ShoppingItem(
            id=item.id, list_id=item.list_id, name=item.name,
            completed=item.completed, tags=item.tags, created_at=item.created_at,
        ))
        await self.db.commit()
        return item

    async def save(self, item: entities.ShoppingItem) -> entities.ShoppingItem:
        row = await self.db.get(ShoppingItem, item.id)
        row.name = item.name
        row.completed = item.completed
        row.tags = item.tags
        await self.db.commit()
        return item

    async def delete(self, list_id: ListId, item_id: ItemId) -> bool:
        result = await self.db.execute(
            delete(ShoppingItem)
            .where(ShoppingItem.id == item_id)
            .where(ShoppingItem.list_id == list_id)
        )
        await self.db.commit()
        return result.rowcount > 0
