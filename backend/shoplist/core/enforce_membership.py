"""Membership Enforcement — pure rules for list ownership, membership and naming.

Invariants:
    - Functions never perform IO: the shell passes the facts (roles, counts) it looked up
    - Every list keeps at least one owner: no rule here lets the owner count reach zero
    - Violations raise typed errors from core/errors.py; success returns the checked value

Design Decisions:
    - Self-removal is allowed for every member; a sole owner leaving is rejected,
      deleting the list is the way out for them
"""

from shoplist.core.domain_types import UserId
from shoplist.core.entities import ListMember
from shoplist.core.errors import (
    AlreadyMemberError, InputValidationError, LastOwnerProtectionError,
    NotOwnerError, PermissionDeniedError,
)

MAX_NAME_LENGTH = 200


def require_name(name: str | None, field: str = "name") -> str:
    """Return the stripped name or raise for blank input."""
    cleaned = (name or "").strip()
    if not cleaned:
        raise InputValidationError(f"{field} cannot be empty", field)
    if len(cleaned) > MAX_NAME_LENGTH:
        raise InputValidationError(
            f"{field} must be at most {MAX_NAME_LENGTH} characters", field,
        )
    return cleaned


def require_owner(membership: ListMember | None, action: str) -> ListMember:
    if membership is None or not membership.is_owner:
        raise NotOwnerError(action)
    return membership


def require_not_member(existing: ListMember | None) -> None:
    if existing is not None:
        raise AlreadyMemberError()


def check_member_removal(
    actor_id: UserId,
    member_id: UserId,
    actor_membership: ListMember | None,
    owner_count: int,
) -> None:
    """Owners may remove anyone; members may remove themselves.

    An owner removing themself is refused while they are the only owner.
    """
    actor_is_owner = actor_membership is not None and actor_membership.is_owner
    if not actor_is_owner and actor_id != member_id:
        raise PermissionDeniedError()
    if actor_id == member_id and actor_is_owner and owner_count <= 1:
        raise LastOwnerProtectionError()
