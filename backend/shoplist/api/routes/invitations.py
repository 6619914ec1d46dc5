"""Invitation Routes — create, list, accept and revoke invitations.

Invariants:
    - Invitations are always created on behalf of the token's user
    - Listing and revocation only ever touch the caller's own invitations
    - Acceptance is bound to the caller's email
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from shoplist.api.dependencies import (
    get_current_claims, get_current_user, get_invitation_manager, get_sign_in_flow,
)
from shoplist.core.domain_types import InvitationId, ListId
from shoplist.core.entities import TokenClaims, User
from shoplist.schemas.invitations import (
    AcceptInvitationRequest, InvitationCreate, InvitationResponse,
)
from shoplist.services.invitations import InvitationManager
from shoplist.services.sign_in import SignInFlow

router = APIRouter(prefix="/api/v1/invitations", tags=["invitations"])


@router.post("", response_model=InvitationResponse, status_code=status.HTTP_201_CREATED)
async def create_invitation(
    body: InvitationCreate,
    claims: TokenClaims = Depends(get_current_claims),
    invitations: InvitationManager = Depends(get_invitation_manager),
):
    invitation = await invitations.create_invitation(
        claims.user_id,
        body.email,
        body.type,
        ListId(body.list_id) if body.list_id else None,
    )
    return InvitationResponse.from_entity(invitation)


@router.get("", response_model=list[InvitationResponse])
async def get_invitations(
    claims: TokenClaims = Depends(get_current_claims),
    invitations: InvitationManager = Depends(get_invitation_manager),
):
    """Invitations created by the caller, newest first."""
    return [
        InvitationResponse.from_entity(invitation)
        for invitation in await invitations.list_invitations(claims.user_id)
    ]


@router.post("/accept", response_model=InvitationResponse)
async def accept_invitation(
    body: AcceptInvitationRequest,
    user: User = Depends(get_current_user),
    flow: SignInFlow = Depends(get_sign_in_flow),
):
    """Consume an invitation addressed to the caller's email."""
    invitation = await flow.accept_for_user(user, body.code)
    return InvitationResponse.from_entity(invitation)


@router.delete("/{invitation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def revoke_invitation(
    invitation_id: UUID,
    claims: TokenClaims = Depends(get_current_claims),
    invitations: InvitationManager = Depends(get_invitation_manager),
):
    await invitations.revoke_invitation(InvitationId(invitation_id), claims.user_id)
