"""List Routes — CRUD over the caller's shopping lists.

Invariants:
    - Every route requires a valid bearer token
    - Only lists the caller is a member of are visible
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from shoplist.api.dependencies import get_current_claims, get_list_manager
from shoplist.core.domain_types import ListId
from shoplist.core.entities import TokenClaims
from shoplist.schemas.lists import ListCreate, ListResponse, ListUpdate
from shoplist.services.lists import ListManager

router = APIRouter(prefix="/api/v1/lists", tags=["lists"])


@router.get("", response_model=list[ListResponse])
async def get_lists(
    claims: TokenClaims = Depends(get_current_claims),
    lists: ListManager = Depends(get_list_manager),
):
    """Lists the caller belongs to, newest first."""
    return [
        ListResponse.from_entity(shopping_list)
        for shopping_list in await lists.get_user_lists(claims.user_id)
    ]


@router.post("", response_model=ListResponse, status_code=status.HTTP_201_CREATED)
async def create_list(
    body: ListCreate,
    claims: TokenClaims = Depends(get_current_claims),
    lists: ListManager = Depends(get_list_manager),
):
    shopping_list = await lists.create_list(claims.user_id, body.name)
    return ListResponse.from_entity(shopping_list)


@router.get("/{list_id}", response_model=ListResponse)
async def get_list(
    list_id: UUID,
    claims: TokenClaims = Depends(get_current_claims),
    lists: ListManager = Depends(get_list_manager),
):
    return ListResponse.from_entity(await lists.get_list(ListId(list_id), claims.user_id))


@router.put("/{list_id}", response_model=ListResponse)
async def update_list(
    list_id: UUID,
    body: ListUpdate,
    claims: TokenClaims = Depends(get_current_claims),
    lists: ListManager = Depends(get_list_manager),
):
    """Rename a list (owners only)."""
    shopping_list = await lists.update_list(ListId(list_id), claims.user_id, body.name)
    return ListResponse.from_entity(shopping_list)


@router.delete("/{list_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_list(
    list_id: UUID,
    claims: TokenClaims = Depends(get_current_claims),
    lists: ListManager = Depends(get_list_manager),
):
    """Delete a list with its members, items and invitations (owners only)."""
    await lists.delete_list(ListId(list_id), claims.user_id)
