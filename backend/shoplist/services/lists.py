"""List & Membership Manager — list CRUD, roles and access predicates.

Invariants:
    - Creating a list also creates the creator's owner membership (one transaction)
    - Read access requires any membership; rename, delete and add-member require role=owner
    - No operation leaves a list without an owner
    - has_access / is_owner are side-effect free

Design Decisions:
    - Missing list and missing membership both read as ListNotFoundOrAccessDenied on reads,
      and as NotOwner on owner-only writes
"""

import logging
import uuid
from collections.abc import Callable
from datetime import datetime

from shoplist.core.domain_types import (
    DEFAULT_LIST_NAME, ListId, MemberRole, UserId, utc_now,
)
from shoplist.core.entities import ListMember, ShoppingList, User
from shoplist.core.enforce_membership import (
    check_member_removal, require_name, require_not_member, require_owner,
)
from shoplist.core.errors import (
    InputValidationError, ListNotFoundOrAccessDeniedError, MemberNotFoundError,
    PermissionDeniedError, ResourceNotFoundError,
)
from shoplist.core.repository_protocols import (
    ListRepository, MemberRepository, UserRepository,
)

logger = logging.getLogger(__name__)


class ListManager:
    def __init__(
        self,
        lists: ListRepository,
        members: MemberRepository,
        users: UserRepository,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.lists = lists
        self.members = members
        self.users = users
        self.clock = clock

    # ─── Lists ───────────────────────────────────────────────────

    async def create_list(self, user_id: UserId | None, name: str) -> ShoppingList:
        if user_id is None:
            raise InputValidationError("user ID cannot be empty", "user_id")
        name = require_name(name)
        if await self.users.get_by_id(user_id) is None:
            raise ResourceNotFoundError("User", str(user_id))

        now = self.clock()
        shopping_list = ShoppingList(
            id=ListId(uuid.uuid4()), name=name, owner_id=user_id,
            created_at=now, updated_at=now,
        )
        owner = ListMember(
            list_id=shopping_list.id, user_id=user_id,
            role=MemberRole.OWNER, joined_at=now,
        )
        await self.lists.create_with_owner(shopping_list, owner)
        logger.info(
            f"List '{name}' created",
            extra={"user_id": user_id, "list_id": shopping_list.id},
        )
        return shopping_list

    async def create_default_list(self, user_id: UserId) -> ShoppingList:
        return await self.create_list(user_id, DEFAULT_LIST_NAME)

    async def get_user_lists(self, user_id: UserId) -> list[ShoppingList]:
        return await self.lists.list_for_member(user_id)

    async def get_list(self, list_id: ListId, user_id: UserId) -> ShoppingList:
        shopping_list = await self.lists.get_for_member(list_id, user_id)
        if shopping_list is None:
            raise ListNotFoundOrAccessDeniedError(str(list_id))
        return shopping_list

    async def update_list(
        self, list_id: ListId, user_id: UserId, name: str,
    ) -> ShoppingList:
        require_owner(await self.members.get(list_id, user_id), "update lists")
        name = require_name(name)
        updated = await self.lists.rename(list_id, name, self.clock())
        if updated is None:
            raise ResourceNotFoundError("ShoppingList", str(list_id))
        return updated

    async def delete_list(self, list_id: ListId, user_id: UserId) -> None:
        require_owner(await self.members.get(list_id, user_id), "delete lists")
        if not await self.lists.delete_cascade(list_id):
            raise ResourceNotFoundError("ShoppingList", str(list_id))
        logger.info("List deleted", extra={"user_id": user_id, "list_id": list_id})

    # ─── Membership ──────────────────────────────────────────────

    async def get_list_members(
        self, list_id: ListId, user_id: UserId,
    ) -> list[tuple[ListMember, User]]:
        if not await self.has_access(list_id, user_id):
            raise PermissionDeniedError()
        return await self.members.list_with_users(list_id)

    async def add_member(
        self, list_id: ListId, user_id: UserId, new_member_id: UserId,
    ) -> ListMember:
        require_owner(await self.members.get(list_id, user_id), "add members")
        require_not_member(await self.members.get(list_id, new_member_id))
        member = await self.members.add(ListMember(
            list_id=list_id, user_id=new_member_id,
            role=MemberRole.MEMBER, joined_at=self.clock(),
        ))
        logger.info(
            f"User {new_member_id} joined list",
            extra={"user_id": user_id, "list_id": list_id},
        )
        return member

    async def remove_member(
        self, list_id: ListId, user_id: UserId, member_id: UserId,
    ) -> None:
        actor = await self.members.get(list_id, user_id)
        owner_count = await self.members.count_owners(list_id)
        check_member_removal(user_id, member_id, actor, owner_count)
        if not await self.members.remove(list_id, member_id):
            raise MemberNotFoundError(str(member_id))
        logger.info(
            f"User {member_id} removed from list",
            extra={"user_id": user_id, "list_id": list_id},
        )

    # ─── Predicates ──────────────────────────────────────────────

    async def has_access(self, list_id: ListId, user_id: UserId) -> bool:
        return await self.members.get(list_id, user_id) is not None

    async def is_owner(self, list_id: ListId, user_id: UserId) -> bool:
        membership = await self.members.get(list_id, user_id)
        return membership is not None and membership.is_owner
