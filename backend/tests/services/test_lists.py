"""List & Membership Manager — tests for list CRUD, roles and last-owner protection.

Tests cover:
    - create_list creates the owner membership; names are stripped and validated
    - lists are visible to members only, newest first
    - rename and delete are owner-only; delete cascades to members, items, invitations
    - add/remove member rules incl. self-removal and last-owner protection
    - has_access / is_owner predicates
"""

from datetime import timedelta
from uuid import uuid4

import pytest

from shoplist.core.domain_types import InvitationKind, MemberRole, UserId
from shoplist.core.entities import ListMember
from shoplist.core.errors import (
    AlreadyMemberError, InputValidationError, LastOwnerProtectionError,
    ListNotFoundOrAccessDeniedError, MemberNotFoundError, NotOwnerError,
    PermissionDeniedError, ResourceNotFoundError,
)
from shoplist.infrastructure.repositories_auth import SqlInvitationRepository
from shoplist.infrastructure.repositories_lists import (
    SqlItemRepository, SqlMemberRepository,
)


@pytest.fixture
async def shared_list(admin, admin_list, invited_user, list_manager):
    """admin_list with invited_user added as a plain member."""
    await list_manager.add_member(admin_list.id, admin.id, invited_user.id)
    return admin_list


# ─── create / read ───────────────────────────────────────────────

async def test_create_list_makes_creator_owner(list_manager, admin):
    shopping_list = await list_manager.create_list(admin.id, "  Hardware store ")

    assert shopping_list.name == "Hardware store"
    assert shopping_list.owner_id == admin.id
    assert await list_manager.is_owner(shopping_list.id, admin.id)


async def test_create_list_rejects_blank_name(list_manager, admin):
    with pytest.raises(InputValidationError):
        await list_manager.create_list(admin.id, "   ")


async def test_create_list_rejects_missing_user(list_manager):
    with pytest.raises(InputValidationError):
        await list_manager.create_list(None, "Groceries")


async def test_create_list_for_unknown_user(list_manager, admin):
    with pytest.raises(ResourceNotFoundError):
        await list_manager.create_list(UserId(uuid4()), "Groceries")


async def test_setup_gives_admin_default_list(admin_list, admin):
    assert admin_list.name == "My Shopping List"
    assert admin_list.owner_id == admin.id


async def test_user_lists_newest_first(list_manager, admin, admin_list, clock):
    clock.advance(timedelta(minutes=1))
    newer = await list_manager.create_list(admin.id, "Pharmacy")

    lists = await list_manager.get_user_lists(admin.id)

    assert [sl.id for sl in lists] == [newer.id, admin_list.id]


async def test_get_list_without_membership(list_manager, admin_list, invited_user):
    with pytest.raises(ListNotFoundOrAccessDeniedError):
        await list_manager.get_list(admin_list.id, invited_user.id)


async def test_member_sees_shared_list(list_manager, shared_list, invited_user):
    found = await list_manager.get_list(shared_list.id, invited_user.id)
    assert found.id == shared_list.id
    assert shared_list.id in [sl.id for sl in await list_manager.get_user_lists(invited_user.id)]


# ─── update / delete ─────────────────────────────────────────────

async def test_owner_renames_list(list_manager, admin, admin_list, clock):
    clock.advance(timedelta(minutes=5))

    renamed = await list_manager.update_list(admin_list.id, admin.id, " Party ")

    assert renamed.name == "Party"
    assert renamed.updated_at == clock.now


async def test_member_cannot_rename(list_manager, shared_list, invited_user):
    with pytest.raises(NotOwnerError):
        await list_manager.update_list(shared_list.id, invited_user.id, "Mine now")


async def test_rename_rejects_blank(list_manager, admin, admin_list):
    with pytest.raises(InputValidationError):
        await list_manager.update_list(admin_list.id, admin.id, "")


async def test_member_cannot_delete(list_manager, shared_list, invited_user):
    with pytest.raises(NotOwnerError):
        await list_manager.delete_list(shared_list.id, invited_user.id)


async def test_delete_cascades(
    list_manager, item_service, invitation_manager, shared_list, admin,
    invited_user, test_db,
):
    item = await item_service.create_item(shared_list.id, admin.id, "Milk")
    await invitation_manager.create_invitation(
        admin.id, "carol@example.com", "list", shared_list.id,
    )

    await list_manager.delete_list(shared_list.id, admin.id)

    assert not await list_manager.has_access(shared_list.id, admin.id)
    assert not await list_manager.has_access(shared_list.id, invited_user.id)
    assert await SqlItemRepository(test_db).get(shared_list.id, item.id) is None
    pending = await SqlInvitationRepository(test_db).find_unused(
        "carol@example.com", InvitationKind.LIST,
    )
    assert pending is None




# ─── members ─────────────────────────────────────────────────────

async def test_get_members_with_roles(list_manager, shared_list, admin, invited_user):
    members = await list_manager.get_list_members(shared_list.id, invited_user.id)

    roles = {user.email: member.role for member, user in members}
    assert roles == {admin.email: MemberRole.OWNER, invited_user.email: MemberRole.MEMBER}


async def test_get_members_without_access(list_manager, admin_list, invited_user):
    with pytest.raises(PermissionDeniedError):
        await list_manager.get_list_members(admin_list.id, invited_user.id)


async def test_add_member_twice(list_manager, shared_list, admin, invited_user):
    with pytest.raises(AlreadyMemberError):
        await list_manager.add_member(shared_list.id, admin.id, invited_user.id)


async def test_member_cannot_add_members(list_manager, shared_list, invited_user, admin):
    with pytest.raises(NotOwnerError):
        await list_manager.add_member(shared_list.id, invited_user.id, admin.id)


async def test_owner_removes_member(list_manager, shared_list, admin, invited_user):
    await list_manager.remove_member(shared_list.id, admin.id, invited_user.id)
    assert not await list_manager.has_access(shared_list.id, invited_user.id)


async def test_member_leaves(list_manager, shared_list, invited_user):
    await list_manager.remove_member(shared_list.id, invited_user.id, invited_user.id)
    assert not await list_manager.has_access(shared_list.id, invited_user.id)


async def test_member_cannot_remove_owner(list_manager, shared_list, admin, invited_user):
    with pytest.raises(PermissionDeniedError):
        await list_manager.remove_member(shared_list.id, invited_user.id, admin.id)


async def test_last_owner_cannot_leave(list_manager, shared_list, admin):
    with pytest.raises(LastOwnerProtectionError):
        await list_manager.remove_member(shared_list.id, admin.id, admin.id)
    assert await list_manager.is_owner(shared_list.id, admin.id)


async def test_remove_unknown_member(list_manager, admin_list, admin):
    with pytest.raises(MemberNotFoundError):
        await list_manager.remove_member(admin_list.id, admin.id, UserId(uuid4()))


async def test_predicates(list_manager, shared_list, admin, invited_user):
    assert await list_manager.has_access(shared_list.id, invited_user.id)
    assert not await list_manager.is_owner(shared_list.id, invited_user.id)
    assert await list_manager.is_owner(shared_list.id, admin.id)
    assert not await list_manager.has_access(shared_list.id, UserId(uuid4()))


async def test_owner_may_leave_once_second_owner_exists(
    list_manager, shared_list, admin, invited_user, test_db, clock,
):
    members = SqlMemberRepository(test_db)
    await members.remove(shared_list.id, invited_user.id)
    await members.add(ListMember(shared_list.id, invited_user.id, MemberRole.OWNER, clock.now))

    await list_manager.remove_member(shared_list.id, admin.id, admin.id)

    assert not await list_manager.has_access(shared_list.id, admin.id)
    assert await list_manager.is_owner(shared_list.id, invited_user.id)
