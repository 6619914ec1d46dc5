"""Sign-In Flow — tests for invitation application and token issue after login.

Tests cover:
    - a server-invited newcomer gets a token and a default list they own
    - a list-invited newcomer joins the list as member (and gets no default list)
    - a list invitation for an existing user is applied at their next login
    - invitations are consumed by login
    - explicit acceptance: list invitation joins, server invitation creates nothing
"""

import pytest

from shoplist.core.domain_types import InvitationKind, MemberRole
from shoplist.core.errors import InvalidOrExpiredInvitationError, InvitationRequiredError


async def test_server_invitation_login(
    sign_in, invitation_manager, list_manager, token_issuer, admin,
):
    invitation = await invitation_manager.create_invitation(
        admin.id, "new@example.com", "server",
    )

    token, user = await sign_in("new@example.com")

    assert token_issuer.validate(token).user_id == user.id
    lists = await list_manager.get_user_lists(user.id)
    assert [sl.name for sl in lists] == ["My Shopping List"]
    assert await list_manager.is_owner(lists[0].id, user.id)
    with pytest.raises(InvalidOrExpiredInvitationError):
        await invitation_manager.accept_invitation("new@example.com", invitation.code)


async def test_list_invitation_login_for_newcomer(
    sign_in, invitation_manager, list_manager, admin, admin_list,
):
    await invitation_manager.create_invitation(
        admin.id, "new@example.com", "list", admin_list.id,
    )

    _, user = await sign_in("new@example.com")

    lists = await list_manager.get_user_lists(user.id)
    assert [sl.id for sl in lists] == [admin_list.id]
    members = await list_manager.get_list_members(admin_list.id, user.id)
    roles = {u.id: m.role for m, u in members}
    assert roles[user.id] is MemberRole.MEMBER


async def test_list_invitation_applied_at_next_login(
    sign_in, invitation_manager, list_manager, admin, admin_list, invited_user,
):
    await invitation_manager.create_invitation(
        admin.id, invited_user.email, "list", admin_list.id,
    )

    await sign_in(invited_user.email)

    assert await list_manager.has_access(admin_list.id, invited_user.id)


async def test_login_without_invitation(sign_in):
    with pytest.raises(InvitationRequiredError):
        await sign_in("stranger@example.com")


async def test_plain_login_for_existing_user(sign_in, admin, list_manager):
    _, user = await sign_in(admin.email)

    assert user.id == admin.id
    assert len(await list_manager.get_user_lists(admin.id)) == 1


async def test_accept_for_user_list_invitation(
    sign_in_flow, invitation_manager, list_manager, admin, admin_list, invited_user,
):
    invitation = await invitation_manager.create_invitation(
        admin.id, invited_user.email, "list", admin_list.id,
    )

    accepted = await sign_in_flow.accept_for_user(invited_user, invitation.code.lower())

    assert accepted.kind is InvitationKind.LIST
    assert accepted.used
    assert await list_manager.has_access(admin_list.id, invited_user.id)


async def test_accept_for_user_already_member_is_not_an_error(
    sign_in_flow, invitation_manager, list_manager, admin, admin_list, invited_user,
):
    invitation = await invitation_manager.create_invitation(
        admin.id, invited_user.email, "list", admin_list.id,
    )
    await list_manager.add_member(admin_list.id, admin.id, invited_user.id)

    accepted = await sign_in_flow.accept_for_user(invited_user, invitation.code)

    assert accepted.used


async def test_accept_for_user_wrong_code(sign_in_flow, invited_user):
    with pytest.raises(InvalidOrExpiredInvitationError):
        await sign_in_flow.accept_for_user(invited_user, "DEADBEEF")
