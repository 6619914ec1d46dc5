"""Domain Types — identity types, closed enumerations and lifetime constants.

Invariants:
    - UserId, ListId, ItemId, InvitationId wrap UUIDs — never bare UUID in domain logic
    - Roles and invitation kinds are Enums — no raw string matching
    - Lifetimes below are the single source of truth for expiry windows

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and to VARCHAR columns without custom encoders
"""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
ListId = NewType("ListId", UUID)
ItemId = NewType("ItemId", UUID)
InvitationId = NewType("InvitationId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class MemberRole(str, Enum):
    """Role of a user on a shopping list. Owners rename, delete and manage members."""
    OWNER = "owner"
    MEMBER = "member"


class InvitationKind(str, Enum):
    """Server invitations admit a new user; list invitations add someone to one list."""
    SERVER = "server"
    LIST = "list"


# ─── Lifetimes & Defaults ────────────────────────────────────────

LOGIN_CODE_TTL = timedelta(minutes=15)
INVITATION_TTL = timedelta(days=7)
LOGIN_CODE_ATTEMPTS = 5
DEFAULT_TOKEN_TTL = timedelta(days=30)

DEFAULT_LIST_NAME = "My Shopping List"
EMPTY_TAGS = "[]"
SYSTEM_SETTINGS_ID = "system"


def utc_now() -> datetime:
    """Default clock injected into services."""
    return datetime.now(timezone.utc)
