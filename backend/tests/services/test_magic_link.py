"""Magic-Link Authenticator — tests for code issue, verification and user resolution.

Tests cover:
    - request_code stores one 6-digit code per email and mails it
    - a new code invalidates earlier ones
    - verify_code: wrong, reused and expired codes are rejected
    - unknown email without invitation → InvitationRequired, with invitation → new user
    - existing users get back only pending list invitations
    - mail failure surfaces as MailDeliveryError
"""

import re
from datetime import timedelta

import pytest

from shoplist.core.domain_types import InvitationKind
from shoplist.core.errors import (
    InvalidOrExpiredCodeError, InvitationRequiredError, MailDeliveryError,
)
from shoplist.infrastructure.repositories_auth import SqlLoginCodeRepository


async def test_request_code_mails_six_digit_code(authenticator, mailer, test_db):
    code = await authenticator.request_code("alice@example.com")

    assert re.fullmatch(r"\d{6}", code)
    assert mailer.last_login_code("alice@example.com") == code
    stored = await SqlLoginCodeRepository(test_db).list_for_email("alice@example.com")
    assert [c.code for c in stored] == [code]


async def test_new_code_replaces_previous(authenticator, admin, test_db):
    first = await authenticator.request_code(admin.email)
    second = await authenticator.request_code(admin.email)

    stored = await SqlLoginCodeRepository(test_db).list_for_email(admin.email)
    assert [c.code for c in stored] == [second]
    if first != second:
        with pytest.raises(InvalidOrExpiredCodeError):
            await authenticator.verify_code(admin.email, first)


async def test_verify_existing_user(authenticator, admin):
    code = await authenticator.request_code(admin.email)

    user, invitation = await authenticator.verify_code(admin.email, code)

    assert user.id == admin.id
    assert invitation is None


async def test_code_cannot_be_reused(authenticator, admin):
    code = await authenticator.request_code(admin.email)
    await authenticator.verify_code(admin.email, code)

    with pytest.raises(InvalidOrExpiredCodeError):
        await authenticator.verify_code(admin.email, code)


async def test_wrong_code_rejected(authenticator, admin):
    code = await authenticator.request_code(admin.email)
    wrong = "000000" if code != "000000" else "111111"

    with pytest.raises(InvalidOrExpiredCodeError):
        await authenticator.verify_code(admin.email, wrong)


async def test_code_bound_to_email(authenticator, admin):
    code = await authenticator.request_code(admin.email)

    with pytest.raises(InvalidOrExpiredCodeError):
        await authenticator.verify_code("other@example.com", code)


async def test_expired_code_rejected(authenticator, admin, clock):
    code = await authenticator.request_code(admin.email)
    clock.advance(timedelta(minutes=15, seconds=1))

    with pytest.raises(InvalidOrExpiredCodeError):
        await authenticator.verify_code(admin.email, code)


async def test_code_valid_just_before_expiry(authenticator, admin, clock):
    code = await authenticator.request_code(admin.email)
    clock.advance(timedelta(minutes=14, seconds=59))

    user, _ = await authenticator.verify_code(admin.email, code)
    assert user.id == admin.id


async def test_unknown_email_without_invitation(authenticator):
    code = await authenticator.request_code("stranger@example.com")

    with pytest.raises(InvitationRequiredError):
        await authenticator.verify_code("stranger@example.com", code)


async def test_unknown_email_with_invitation_creates_user(
    authenticator, invitation_manager, admin,
):
    invitation = await invitation_manager.create_invitation(
        admin.id, "new@example.com", "server",
    )
    code = await authenticator.request_code("new@example.com")

    user, found = await authenticator.verify_code("new@example.com", code)

    assert user.email == "new@example.com"
    assert user.invited_by == admin.id
    assert found.id == invitation.id


async def test_existing_user_gets_pending_list_invitation(
    authenticator, invitation_manager, admin, admin_list, invited_user,
):
    await invitation_manager.create_invitation(
        admin.id, invited_user.email, "list", admin_list.id,
    )
    code = await authenticator.request_code(invited_user.email)

    user, invitation = await authenticator.verify_code(invited_user.email, code)

    assert user.id == invited_user.id
    assert invitation.kind is InvitationKind.LIST
    assert invitation.list_id == admin_list.id


async def test_mail_failure_raises(authenticator, mailer):
    mailer.fail = True

    with pytest.raises(MailDeliveryError):
        await authenticator.request_code("alice@example.com")
