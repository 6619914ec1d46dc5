"""Domain Entities — plain data records exchanged between repositories and services.

Invariants:
    - Frozen: services never mutate an entity in place, repositories persist changes
    - All datetimes are timezone-aware UTC
    - User.invited_by is None only for the bootstrap admin

Design Decisions:
    - Dataclasses over ORM rows: core logic never depends on session state or lazy loading
"""

from dataclasses import dataclass
from datetime import datetime

from shoplist.core.domain_types import (
    InvitationId, InvitationKind, ItemId, ListId, MemberRole, UserId,
)


@dataclass(frozen=True)
class User:
    id: UserId
    email: str
    invited_by: UserId | None
    joined_at: datetime
    created_at: datetime


@dataclass(frozen=True)
class LoginCode:
    """One-time numeric code proving control of an email address."""
    code: str
    email: str
    expires_at: datetime
    used: bool = False


@dataclass(frozen=True)
class Invitation:
    id: InvitationId
    code: str
    email: str
    kind: InvitationKind
    list_id: ListId | None
    invited_by: UserId
    expires_at: datetime
    used: bool
    created_at: datetime


@dataclass(frozen=True)
class ShoppingList:
    id: ListId
    name: str
    owner_id: UserId
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class ListMember:
    list_id: ListId
    user_id: UserId
    role: MemberRole
    joined_at: datetime

    @property
    def is_owner(self) -> bool:
        return self.role is MemberRole.OWNER


@dataclass(frozen=True)
class ShoppingItem:
    id: ItemId
    list_id: ListId
    name: str
    completed: bool
    tags: str
    created_at: datetime


@dataclass(frozen=True)
class SystemSettings:
    id: str
    is_setup: bool
    setup_at: datetime | None
    initial_admin: UserId | None


@dataclass(frozen=True)
class TokenClaims:
    """Verified contents of a session token."""
    user_id: UserId
    email: str
    issued_at: datetime
    expires_at: datetime
