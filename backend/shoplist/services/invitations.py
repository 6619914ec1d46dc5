"""Invitation Manager — create, mail, list, revoke and consume invitations.

Invariants:
    - At most one unused invitation per email, whatever its kind
    - List invitations are only created by an owner of that list
    - Server invitations are only created for unregistered emails
    - An invitation is consumed at most once; revocation only touches unused ones
    - A failed invitation email never fails the creation (logged as a warning)

Design Decisions:
    - Admission rules live in core/enforce_invitations.py; this class gathers the facts
    - Revocation collapses "not found", "not yours" and "already used" into one error
"""

import logging
import uuid
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime

from shoplist.core.codes import generate_invitation_code, normalize_invitation_code
from shoplist.core.domain_types import (
    INVITATION_TTL, InvitationId, InvitationKind, ListId, UserId, utc_now,
)
from shoplist.core.entities import Invitation
from shoplist.core.enforce_invitations import (
    check_invitee, check_inviter, check_list_target, check_no_pending, parse_kind,
)
from shoplist.core.errors import (
    InvalidOrExpiredInvitationError, InvitationNotFoundOrUsedError, ShoppingListError,
)
from shoplist.core.format_emails import format_invitation_email
from shoplist.core.repository_protocols import (
    InvitationRepository, ListRepository, Mailer, MemberRepository, UserRepository,
)

logger = logging.getLogger(__name__)


class InvitationManager:
    def __init__(
        self,
        invitations: InvitationRepository,
        users: UserRepository,
        lists: ListRepository,
        members: MemberRepository,
        mailer: Mailer,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.invitations = invitations
        self.users = users
        self.lists = lists
        self.members = members
        self.mailer = mailer
        self.clock = clock

    async def create_invitation(
        self,
        inviter_id: UserId,
        email: str,
        kind: str | InvitationKind,
        list_id: ListId | None = None,
    ) -> Invitation:
        invitation_kind = parse_kind(kind)
        check_list_target(invitation_kind, list_id)
        if invitation_kind is InvitationKind.SERVER:
            list_id = None

        if invitation_kind is InvitationKind.LIST:
            check_inviter(invitation_kind, await self.members.get(list_id, inviter_id))

        existing_user = await self.users.get_by_email(email)
        existing_membership = None
        if existing_user is not None and invitation_kind is InvitationKind.LIST:
            existing_membership = await self.members.get(list_id, existing_user.id)
        check_invitee(invitation_kind, existing_user, existing_membership)

        check_no_pending(await self.invitations.find_unused(email, invitation_kind))

        now = self.clock()
        invitation = await self.invitations.replace_unused_for_email(Invitation(
            id=InvitationId(uuid.uuid4()),
            code=generate_invitation_code(),
            email=email,
            kind=invitation_kind,
            list_id=list_id,
            invited_by=inviter_id,
            expires_at=now + INVITATION_TTL,
            used=False,
            created_at=now,
        ))
        logger.info(
            f"{invitation_kind.value} invitation created for {email}",
            extra={"user_id": inviter_id, "invitation_id": invitation.id},
        )
        await self._notify(invitation)
        return invitation

    async def accept_invitation(self, email: str, code: str) -> Invitation:
        invitation = await self.invitations.find_pending_by_code(
            email, normalize_invitation_code(code), self.clock(),
        )
        if invitation is None or not await self.invitations.mark_used(invitation.id):
            raise InvalidOrExpiredInvitationError()
        logger.info(
            f"Invitation accepted by {email}",
            extra={"invitation_id": invitation.id},
        )
        return replace(invitation, used=True)

    async def list_invitations(self, inviter_id: UserId) -> list[Invitation]:
        return await self.invitations.list_by_inviter(inviter_id)

    async def revoke_invitation(
        self, invitation_id: InvitationId, inviter_id: UserId,
    ) -> None:
        if not await self.invitations.delete_unused(invitation_id, inviter_id):
            raise InvitationNotFoundOrUsedError(str(invitation_id))
        logger.info(
            "Invitation revoked",
            extra={"user_id": inviter_id, "invitation_id": invitation_id},
        )

    async def _notify(self, invitation: Invitation) -> None:
        """Best-effort invitation email."""
        inviter = await self.users.get_by_id(invitation.invited_by)
        inviter_email = inviter.email if inviter else "a member"
        list_name = None
        if invitation.list_id is not None:
            shopping_list = await self.lists.get(invitation.list_id)
            list_name = shopping_list.name if shopping_list else None
        try:
            await self.mailer.send(
                format_invitation_email(invitation, inviter_email, list_name),
            )
        except ShoppingListError as e:
            logger.warning(
                f"Failed to send invitation email: {e.message}",
                extra={"invitation_id": invitation.id, "error_code": e.code},
            )
