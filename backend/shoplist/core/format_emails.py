"""Email Formatting — subject and plain-text body for every outbound message.

Invariants:
    - Pure string building; delivery belongs to the Mailer implementation
    - Lifetimes quoted in the text come from domain_types, never literals
"""

from dataclasses import dataclass

from shoplist.core.domain_types import INVITATION_TTL, LOGIN_CODE_TTL, InvitationKind
from shoplist.core.entities import Invitation


@dataclass(frozen=True)
class EmailMessage:
    to: str
    subject: str
    body: str


def format_login_code_email(email: str, code: str) -> EmailMessage:
    minutes = int(LOGIN_CODE_TTL.total_seconds() // 60)
    body = (
        f"Your login code is: {code}\n\n"
        f"This code will expire in {minutes} minutes.\n\n"
        "If you didn't request this, please ignore this email.\n"
    )
    return EmailMessage(email, "Your Shopping List Login Code", body)


def format_invitation_email(
    invitation: Invitation, inviter_email: str, list_name: str | None = None,
) -> EmailMessage:
    days = INVITATION_TTL.days
    if invitation.kind is InvitationKind.SERVER:
        subject = "Invitation to Shopping List Server"
        intro = f"You've been invited to join the Shopping List Server by {inviter_email}."
        outro = "To accept this invitation, use the code when logging in for the first time."
    else:
        subject = f"Invitation to shopping list: {list_name}"
        intro = (
            f'You\'ve been invited to join the shopping list "{list_name}" '
            f"by {inviter_email}."
        )
        outro = "To accept this invitation, use the code when logging in."
    body = (
        f"{intro}\n\n"
        f"Your invitation code is: {invitation.code}\n\n"
        f"This invitation will expire in {days} days.\n\n"
        f"{outro}\n"
    )
    return EmailMessage(invitation.email, subject, body)
