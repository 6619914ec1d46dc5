"""Invitation Enforcement — pure admission rules for creating and matching invitations.

Invariants:
    - Rules run in a fixed order (kind and list_id shape, inviter ownership, target state,
      pending duplicates); the first violation wins
    - A list invitation always carries a list_id; a server invitation never needs one
    - Functions never perform IO
"""

from shoplist.core.domain_types import InvitationKind, ListId
from shoplist.core.entities import Invitation, ListMember, User
from shoplist.core.errors import (
    AlreadyInvitedError, AlreadyMemberError, InputValidationError,
    NotListOwnerError, UserAlreadyExistsError,
)


def parse_kind(kind: str | InvitationKind) -> InvitationKind:
    try:
        return InvitationKind(kind)
    except ValueError:
        raise InputValidationError("invalid invitation type", "type") from None


def check_list_target(kind: InvitationKind, list_id: ListId | None) -> None:
    if kind is InvitationKind.LIST and list_id is None:
        raise InputValidationError("list_id required for list invitations", "list_id")


def check_inviter(kind: InvitationKind, inviter_membership: ListMember | None) -> None:
    """List invitations require the inviter to own the list."""
    if kind is not InvitationKind.LIST:
        return
    if inviter_membership is None or not inviter_membership.is_owner:
        raise NotListOwnerError()


def check_invitee(
    kind: InvitationKind,
    existing_user: User | None,
    existing_membership: ListMember | None,
) -> None:
    """Server invitations are for unknown emails; list invitations for non-members."""
    if existing_user is None:
        return
    if kind is InvitationKind.SERVER:
        raise UserAlreadyExistsError()
    if existing_membership is not None:
        raise AlreadyMemberError()


def check_no_pending(pending_same_kind: Invitation | None) -> None:
    if pending_same_kind is not None:
        raise AlreadyInvitedError()
