"""Member Routes — list membership inspection and removal.

Invariants:
    - Any member may read the member list; removal follows owner / self-removal rules
    - The last owner of a list cannot remove themself (409)
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from shoplist.api.dependencies import get_current_claims, get_list_manager
from shoplist.core.domain_types import ListId, UserId
from shoplist.core.entities import TokenClaims
from shoplist.schemas.lists import MemberResponse
from shoplist.services.lists import ListManager

router = APIRouter(prefix="/api/v1/lists/{list_id}/members", tags=["members"])


@router.get("", response_model=list[MemberResponse])
async def get_members(
    list_id: UUID,
    claims: TokenClaims = Depends(get_current_claims),
    lists: ListManager = Depends(get_list_manager),
):
    members = await lists.get_list_members(ListId(list_id), claims.user_id)
    return [MemberResponse.from_entity(member, user) for member, user in members]


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_member(
    list_id: UUID,
    user_id: UUID,
    claims: TokenClaims = Depends(get_current_claims),
    lists: ListManager = Depends(get_list_manager),
):
    await lists.remove_member(ListId(list_id), claims.user_id, UserId(user_id))
