"""Magic-Link Authenticator — issues emailed one-time codes and verifies them.

Invariants:
    - At most one code per email: issuing a code deletes every earlier code for that email
    - A code verifies at most once and only before expires_at (15 minutes);
      concurrent verifications race on a conditional update and one loses
    - A new User is never created without a pending invitation backing it
    - Existing users only get list invitations handed back (server invitations are for newcomers)

Design Decisions:
    - Verification and invitation lookup form one step: the caller decides how to apply
      the invitation (default list vs. list membership) without querying again
    - Clock injected: expiry is testable without sleeping
"""

import logging
import uuid
from collections.abc import Callable
from datetime import datetime

from shoplist.core.codes import generate_login_code
from shoplist.core.domain_types import (
    LOGIN_CODE_ATTEMPTS, LOGIN_CODE_TTL, InvitationKind, UserId, utc_now,
)
from shoplist.core.entities import Invitation, LoginCode, User
from shoplist.core.errors import (
    DatabaseError, InvalidOrExpiredCodeError, InvitationRequiredError,
)
from shoplist.core.format_emails import format_login_code_email
from shoplist.core.repository_protocols import (
    InvitationRepository, LoginCodeRepository, Mailer, UserRepository,
)

logger = logging.getLogger(__name__)


class MagicLinkAuthenticator:
    """Passwordless login: request a code by email, verify it, resolve the user."""

    def __init__(
        self,
        users: UserRepository,
        codes: LoginCodeRepository,
        invitations: InvitationRepository,
        mailer: Mailer,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.users = users
        self.codes = codes
        self.invitations = invitations
        self.mailer = mailer
        self.clock = clock

    async def request_code(self, email: str) -> str:
        """Issue a fresh code for email, invalidating earlier ones, and mail it."""
        for _ in range(LOGIN_CODE_ATTEMPTS):
            code = generate_login_code()
            stored = await self.codes.replace_for_email(LoginCode(
                code=code, email=email, expires_at=self.clock() + LOGIN_CODE_TTL,
            ))
            if stored:
                break
            logger.debug("Login code collided with another email's code, regenerating")
        else:
            raise DatabaseError("no free login code", "insert")
        logger.info(f"Login code issued for {email}")
        await self.mailer.send(format_login_code_email(email, code))
        return code

    async def verify_code(
        self, email: str, code: str,
    ) -> tuple[User, Invitation | None]:
        """Consume the code and resolve the user plus any invitation to apply."""
        now = self.clock()
        login_code = await self.codes.find_active(email, code.strip(), now)
        if login_code is None or not await self.codes.mark_used(email, login_code.code):
            logger.warning(f"Rejected login code for {email}")
            raise InvalidOrExpiredCodeError()

        user = await self.users.get_by_email(email)
        if user is not None:
            invitation = await self.invitations.find_pending(
                email, now, kind=InvitationKind.LIST,
            )
            return user, invitation

        invitation = await self.invitations.find_pending(email, now)
        if invitation is None:
            raise InvitationRequiredError()

        user = await self.users.add(User(
            id=UserId(uuid.uuid4()),
            email=email,
            invited_by=invitation.invited_by,
            joined_at=now,
            created_at=now,
        ))
        logger.info(
            f"User {email} created from {invitation.kind.value} invitation",
            extra={"user_id": user.id, "invitation_id": invitation.id},
        )
        return user, invitation
