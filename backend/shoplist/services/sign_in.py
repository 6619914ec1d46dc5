"""Sign-In Flow — orchestrates code verification, invitation application and token issue.

Invariants:
    - A token is only issued after the code verified and any returned invitation was consumed
    - Server invitation → the new user gets a default list they own
    - List invitation → the user joins the target list as member (inviter acts as owner)
    - Joining a list the user is already in is not an error at sign-in

Design Decisions:
    - Separate from MagicLinkAuthenticator: verification stays free of list logic,
      and explicit acceptance (/invitations/accept) reuses apply_invitation
"""

import logging

from shoplist.core.domain_types import InvitationKind
from shoplist.core.entities import Invitation, User
from shoplist.core.errors import AlreadyMemberError
from shoplist.services.invitations import InvitationManager
from shoplist.services.lists import ListManager
from shoplist.services.magic_link import MagicLinkAuthenticator
from shoplist.services.tokens import TokenIssuer

logger = logging.getLogger(__name__)


class SignInFlow:
    def __init__(
        self,
        authenticator: MagicLinkAuthenticator,
        invitations: InvitationManager,
        lists: ListManager,
        tokens: TokenIssuer,
    ):
        self.authenticator = authenticator
        self.invitations = invitations
        self.lists = lists
        self.tokens = tokens

    async def request_login(self, email: str) -> None:
        await self.authenticator.request_code(email)

    async def complete_login(self, email: str, code: str) -> tuple[str, User]:
        user, invitation = await self.authenticator.verify_code(email, code)
        if invitation is not None:
            accepted = await self.invitations.accept_invitation(email, invitation.code)
            await self.apply_invitation(user, accepted)

        token = self.tokens.issue(user)
        logger.info(f"User {email} signed in", extra={"user_id": user.id})
        return token, user

    async def apply_invitation(self, user: User, invitation: Invitation) -> None:
        if invitation.kind is InvitationKind.SERVER:
            await self.lists.create_default_list(user.id)
            return

        try:
            await self.lists.add_member(
                invitation.list_id, invitation.invited_by, user.id,
            )
        except AlreadyMemberError:
            logger.info(
                f"User {user.email} already a member, invitation ignored",
                extra={"user_id": user.id, "list_id": invitation.list_id},
            )

    async def accept_for_user(self, user: User, code: str) -> Invitation:
        """Explicit acceptance by a signed-in user."""
        invitation = await self.invitations.accept_invitation(user.email, code)
        if invitation.kind is InvitationKind.LIST:
            await self.apply_invitation(user, invitation)
        return invitation
