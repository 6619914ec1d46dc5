"""Item Routes — items of a list, for any member of that list.

Invariants:
    - Non-members get 403 on every item route
    - Items are addressed through their list; another list's item id is a 404
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from shoplist.api.dependencies import get_current_claims, get_item_service
from shoplist.core.domain_types import ItemId, ListId
from shoplist.core.entities import TokenClaims
from shoplist.schemas.items import ItemCreate, ItemResponse, ItemUpdate
from shoplist.services.items import ItemService

router = APIRouter(prefix="/api/v1/lists/{list_id}/items", tags=["items"])


@router.get("", response_model=list[ItemResponse])
async def get_items(
    list_id: UUID,
    claims: TokenClaims = Depends(get_current_claims),
    items: ItemService = Depends(get_item_service),
):
    return [
        ItemResponse.from_entity(item)
        for item in await items.list_items(ListId(list_id), claims.user_id)
    ]


@router.post("", response_model=ItemResponse, status_code=status.HTTP_201_CREATED)
async def create_item(
    list_id: UUID,
    body: ItemCreate,
    claims: TokenClaims = Depends(get_current_claims),
    items: ItemService = Depends(get_item_service),
):
    item = await items.create_item(ListId(list_id), claims.user_id, body.name, body.tags)
    return ItemResponse.from_entity(item)


@router.put("/{item_id}", response_model=ItemResponse)
async def update_item(
    list_id: UUID,
    item_id: UUID,
    body: ItemUpdate,
    claims: TokenClaims = Depends(get_current_claims),
    items: ItemService = Depends(get_item_service),
):
    item = await items.update_item(
        ListId(list_id), claims.user_id, ItemId(item_id), body.name, body.tags,
    )
    return ItemResponse.from_entity(item)


@router.post("/{item_id}/toggle", response_model=ItemResponse)
async def toggle_item(
    list_id: UUID,
    item_id: UUID,
    claims: TokenClaims = Depends(get_current_claims),
    items: ItemService = Depends(get_item_service),
):
    """Flip the completed flag."""
    item = await items.toggle_item(ListId(list_id), claims.user_id, ItemId(item_id))
    return ItemResponse.from_entity(item)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    list_id: UUID,
    item_id: UUID,
    claims: TokenClaims = Depends(get_current_claims),
    items: ItemService = Depends(get_item_service),
):
    await items.delete_item(ListId(list_id), claims.user_id, ItemId(item_id))
