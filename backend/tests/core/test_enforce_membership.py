"""Membership Enforcement — tests for pure ownership, removal and naming rules.

Tests cover:
    - require_name strips, rejects blank and overlong names
    - require_owner accepts owners only
    - check_member_removal: owner removes anyone, member removes self only,
      sole owner cannot remove themself
"""

from datetime import datetime, timezone
from uuid import uuid4

import pytest

from shoplist.core.domain_types import ListId, MemberRole, UserId
from shoplist.core.entities import ListMember
from shoplist.core.enforce_membership import (
    MAX_NAME_LENGTH, check_member_removal, require_name, require_not_member,
    require_owner,
)
from shoplist.core.errors import (
    AlreadyMemberError, InputValidationError, LastOwnerProtectionError,
    NotOwnerError, PermissionDeniedError,
)

LIST_ID = ListId(uuid4())
OWNER = UserId(uuid4())
MEMBER = UserId(uuid4())


def _membership(user_id: UserId, role: MemberRole) -> ListMember:
    return ListMember(LIST_ID, user_id, role, datetime.now(timezone.utc))


# ─── require_name ────────────────────────────────────────────────

def test_require_name_strips():
    assert require_name("  Groceries ") == "Groceries"


@pytest.mark.parametrize("name", ["", "   ", None])
def test_require_name_rejects_blank(name):
    with pytest.raises(InputValidationError) as exc:
        require_name(name)
    assert exc.value.field == "name"


def test_require_name_rejects_overlong():
    with pytest.raises(InputValidationError):
        require_name("x" * (MAX_NAME_LENGTH + 1))


# ─── require_owner / require_not_member ──────────────────────────

def test_require_owner_accepts_owner():
    owner = _membership(OWNER, MemberRole.OWNER)
    assert require_owner(owner, "delete lists") is owner


def test_require_owner_rejects_member_and_stranger():
    with pytest.raises(NotOwnerError, match="Only list owners can delete lists"):
        require_owner(_membership(MEMBER, MemberRole.MEMBER), "delete lists")
    with pytest.raises(NotOwnerError):
        require_owner(None, "delete lists")


def test_require_not_member():
    require_not_member(None)
    with pytest.raises(AlreadyMemberError):
        require_not_member(_membership(MEMBER, MemberRole.MEMBER))


# ─── check_member_removal ────────────────────────────────────────

def test_owner_may_remove_member():
    check_member_removal(OWNER, MEMBER, _membership(OWNER, MemberRole.OWNER), 1)


def test_member_may_remove_self():
    check_member_removal(MEMBER, MEMBER, _membership(MEMBER, MemberRole.MEMBER), 1)


def test_member_may_not_remove_others():
    with pytest.raises(PermissionDeniedError):
        check_member_removal(MEMBER, OWNER, _membership(MEMBER, MemberRole.MEMBER), 1)


def test_stranger_may_not_remove_anyone():
    with pytest.raises(PermissionDeniedError):
        check_member_removal(UserId(uuid4()), MEMBER, None, 1)


def test_sole_owner_may_not_remove_self():
    with pytest.raises(LastOwnerProtectionError):
        check_member_removal(OWNER, OWNER, _membership(OWNER, MemberRole.OWNER), 1)


def test_owner_may_leave_when_another_owner_remains():
    check_member_removal(OWNER, OWNER, _membership(OWNER, MemberRole.OWNER), 2)
