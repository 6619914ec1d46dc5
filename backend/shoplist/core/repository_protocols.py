"""Boundary Protocols — contracts between core services and the persistence/mail shell.

Invariants:
    - Services depend only on these Protocols, never on SQLAlchemy or smtplib
    - Methods that must be atomic (create list + owner, cascade delete, replace code,
      replace invitation, bootstrap) are single methods that commit once
    - Implementations return frozen entities from core/entities.py

Design Decisions:
    - Protocol over ABC: structural subtyping, fakes in tests need no inheritance
    - Async in Protocol: every implementation does IO
"""

from datetime import datetime
from typing import Protocol

from shoplist.core.domain_types import (
    InvitationId, InvitationKind, ItemId, ListId, UserId,
)
from shoplist.core.entities import (
    Invitation, ListMember, LoginCode, ShoppingItem, ShoppingList,
    SystemSettings, User,
)
from shoplist.core.format_emails import EmailMessage


class UserRepository(Protocol):
    async def get_by_id(self, user_id: UserId) -> User | None: ...
    async def get_by_email(self, email: str) -> User | None: ...
    async def add(self, user: User) -> User: ...
    async def list_all(self) -> list[User]: ...


class LoginCodeRepository(Protocol):
    async def replace_for_email(self, login_code: LoginCode) -> bool: ...
    async def find_active(
        self, email: str, code: str, now: datetime,
    ) -> LoginCode | None: ...
    async def mark_used(self, email: str, code: str) -> bool: ...
    async def list_for_email(self, email: str) -> list[LoginCode]: ...


class InvitationRepository(Protocol):
    async def find_pending(
        self, email: str, now: datetime, kind: InvitationKind | None = None,
    ) -> Invitation | None: ...
    async def find_unused(
        self, email: str, kind: InvitationKind,
    ) -> Invitation | None: ...
    async def find_pending_by_code(
        self, email: str, code: str, now: datetime,
    ) -> Invitation | None: ...
    async def replace_unused_for_email(self, invitation: Invitation) -> Invitation: ...
    async def mark_used(self, invitation_id: InvitationId) -> bool: ...
    async def list_by_inviter(self, inviter_id: UserId) -> list[Invitation]: ...
    async def delete_unused(
        self, invitation_id: InvitationId, inviter_id: UserId,
    ) -> bool: ...


class ListRepository(Protocol):
    async def get(self, list_id: ListId) -> ShoppingList | None: ...
    async def get_for_member(
        self, list_id: ListId, user_id: UserId,
    ) -> ShoppingList | None: ...
    async def list_for_member(self, user_id: UserId) -> list[ShoppingList]: ...
    async def create_with_owner(
        self, shopping_list: ShoppingList, owner: ListMember,
    ) -> ShoppingList: ...
    async def rename(
        self, list_id: ListId, name: str, updated_at: datetime,
    ) -> ShoppingList | None: ...
    async def delete_cascade(self, list_id: ListId) -> bool: ...


class MemberRepository(Protocol):
    async def get(self, list_id: ListId, user_id: UserId) -> ListMember | None: ...
    async def add(self, member: ListMember) -> ListMember: ...
    async def remove(self, list_id: ListId, user_id: UserId) -> bool: ...
    async def count_owners(self, list_id: ListId) -> int: ...
    async def list_with_users(
        self, list_id: ListId,
    ) -> list[tuple[ListMember, User]]: ...


class ItemRepository(Protocol):
    async def list_for_list(self, list_id: ListId) -> list[ShoppingItem]: ...
    async def get(self, list_id: ListId, item_id: ItemId) -> ShoppingItem | None: ...
    async def add(self, item: ShoppingItem) -> ShoppingItem: ...
    async def save(self, item: ShoppingItem) -> ShoppingItem: ...
    async def delete(self, list_id: ListId, item_id: ItemId) -> bool: ...


class SettingsRepository(Protocol):
    async def get(self) -> SystemSettings | None: ...
    async def bootstrap(
        self,
        admin: User,
        default_list: ShoppingList,
        owner: ListMember,
        settings: SystemSettings,
    ) -> None: ...
    async def adopt(
        self,
        lists: list[tuple[ShoppingList, ListMember]],
        settings: SystemSettings,
    ) -> None: ...


class Mailer(Protocol):
    """Outbound email capability — raises MailDeliveryError on failure."""
    async def send(self, message: EmailMessage) -> None: ...
