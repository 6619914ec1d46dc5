"""Item Service — item CRUD for list members.

Invariants:
    - Every operation requires membership of the list (owner or member)
    - Items are always addressed by (list_id, item_id); an item of another list is "not found"
    - tags are stored verbatim; missing tags default to "[]" on create and are kept on update
"""

import logging
import uuid
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime

from shoplist.core.domain_types import EMPTY_TAGS, ItemId, ListId, UserId, utc_now
from shoplist.core.entities import ShoppingItem
from shoplist.core.enforce_membership import require_name
from shoplist.core.errors import ItemNotFoundError, PermissionDeniedError
from shoplist.core.repository_protocols import ItemRepository
from shoplist.services.lists import ListManager

logger = logging.getLogger(__name__)


class ItemService:
    def __init__(
        self,
        items: ItemRepository,
        lists: ListManager,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.items = items
        self.lists = lists
        self.clock = clock

    async def list_items(self, list_id: ListId, user_id: UserId) -> list[ShoppingItem]:
        await self._require_access(list_id, user_id)
        return await self.items.list_for_list(list_id)

    async def create_item(
        self, list_id: ListId, user_id: UserId, name: str, tags: str | None = None,
    ) -> ShoppingItem:
        await self._require_access(list_id, user_id)
        item = ShoppingItem(
            id=ItemId(uuid.uuid4()),
            list_id=list_id,
            name=require_name(name),
            completed=False,
            tags=tags or EMPTY_TAGS,
            created_at=self.clock(),
        )
        return await self.items.add(item)

    async def update_item(
        self,
        list_id: ListId,
        user_id: UserId,
        item_id: ItemId,
        name: str,
        tags: str | None = None,
    ) -> ShoppingItem:
        item = await self._get_item(list_id, user_id, item_id)
        updated = replace(item, name=require_name(name), tags=tags or item.tags)
        return await self.items.save(updated)

    async def toggle_item(
        self, list_id: ListId, user_id: UserId, item_id: ItemId,
    ) -> ShoppingItem:
        item = await self._get_item(list_id, user_id, item_id)
        return await self.items.save(replace(item, completed=not item.completed))

    async def delete_item(
        self, list_id: ListId, user_id: UserId, item_id: ItemId,
    ) -> None:
        await self._require_access(list_id, user_id)
        if not await self.items.delete(list_id, item_id):
            raise ItemNotFoundError(str(item_id))

    async def _require_access(self, list_id: ListId, user_id: UserId) -> None:
        if not await self.lists.has_access(list_id, user_id):
            logger.warning(
                "Item access denied", extra={"user_id": user_id, "list_id": list_id},
            )
            raise PermissionDeniedError()

    async def _get_item(
        self, list_id: ListId, user_id: UserId, item_id: ItemId,
    ) -> ShoppingItem:
        await self._require_access(list_id, user_id)
        item = await self.items.get(list_id, item_id)
        if item is None:
            raise ItemNotFoundError(str(item_id))
        return item
