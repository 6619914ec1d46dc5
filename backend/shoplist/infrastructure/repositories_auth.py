"""Auth Repositories — SQLAlchemy implementations for users, login codes, invitations, settings.

Invariants:
    - Every public method returns core entities, never ORM rows
    - Each write method commits exactly once; multi-row writes share that commit
    - Unique-constraint violations surface as the matching ConflictError
    - Datetimes read back from SQLite (naive) are tagged UTC before leaving the repository
"""

from datetime import datetime, timezone

from sqlalchemy import select, delete, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from shoplist.core import entities
from shoplist.core.domain_types import (
    InvitationId, InvitationKind, ListId, SYSTEM_SETTINGS_ID, UserId,
)
from shoplist.core.errors import AlreadyInvitedError, UserAlreadyExistsError
from shoplist.models.invitation import Invitation
from shoplist.models.list_member import ListMember
from shoplist.models.login_code import LoginCode
from shoplist.models.shopping_list import ShoppingList
from shoplist.models.system_settings import SystemSettings
from shoplist.models.user import User


def as_utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


# ─── Row ⇄ Entity ────────────────────────────────────────────────

def to_user(row: User) -> entities.User:
    return entities.User(
        id=UserId(row.id),
        email=row.email,
        invited_by=UserId(row.invited_by) if row.invited_by else None,
        joined_at=as_utc(row.joined_at),
        created_at=as_utc(row.created_at),
    )


def to_login_code(row: LoginCode) -> entities.LoginCode:
    return entities.LoginCode(
        code=row.code, email=row.email,
        expires_at=as_utc(row.expires_at), used=row.used,
    )


def to_invitation(row: Invitation) -> entities.Invitation:
    return entities.Invitation(
        id=InvitationId(row.id),
        code=row.code,
        email=row.email,
        kind=InvitationKind(row.kind),
        list_id=ListId(row.list_id) if row.list_id else None,
        invited_by=UserId(row.invited_by),
        expires_at=as_utc(row.expires_at),
        used=row.used,
        created_at=as_utc(row.created_at),
    )


def to_settings(row: SystemSettings) -> entities.SystemSettings:
    return entities.SystemSettings(
        id=row.id,
        is_setup=row.is_setup,
        setup_at=as_utc(row.setup_at),
        initial_admin=UserId(row.initial_admin) if row.initial_admin else None,
    )


def user_row(user: entities.User) -> User:
    return User(
        id=user.id, email=user.email, invited_by=user.invited_by,
        joined_at=user.joined_at, created_at=user.created_at,
    )


def list_row(shopping_list: entities.ShoppingList) -> ShoppingList:
    return ShoppingList(
        id=shopping_list.id, name=shopping_list.name,
        owner_id=shopping_list.owner_id,
        created_at=shopping_list.created_at, updated_at=shopping_list.updated_at,
    )


def member_row(member: entities.ListMember) -> ListMember:
    return ListMember(
        list_id=member.list_id, user_id=member.user_id,
        role=member.role.value, joined_at=member.joined_at,
    )


# ─── Users ───────────────────────────────────────────────────────

class SqlUserRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, user_id: UserId) -> entities.User | None:
        row = await self.db.get(User, user_id)
        return to_user(row) if row else None

    async def get_by_email(self, email: str) -> entities.User | None:
        result = await self.db.execute(select(User).where(User.email == email))
        row = result.scalar_one_or_none()
        return to_user(row) if row else None

    async def add(self, user: entities.User) -> entities.User:
        self.db.add(user_row(user))
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise UserAlreadyExistsError()
        return user

    async def list_all(self) -> list[entities.User]:
        result = await self.db.execute(select(User).order_by(User.created_at))
        return [to_user(row) for row in result.scalars().all()]


# ─── Login Codes ─────────────────────────────────────────────────

class SqlLoginCodeRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def replace_for_email(self, login_code: entities.LoginCode) -> bool:
        """Drop every code for the email, then store the new one (one commit).

        Returns False, with nothing changed, when another email holds the same code.
        """
        await self.db.execute(
            delete(LoginCode).where(LoginCode.email == login_code.email),
        )
        self.db.add(LoginCode(
            code=login_code.code, email=login_code.email,
            expires_at=login_code.expires_at, used=login_code.used,
        ))
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            return False
        return True

    async def find_active(
        self, email: str, code: str, now: datetime,
    ) -> entities.LoginCode | None:
        result = await self.db.execute(
            select(LoginCode)
            .where(LoginCode.code == code)
            .where(LoginCode.email == email)
            .where(LoginCode.used.is_(False))
            .where(LoginCode.expires_at > now)
        )
        row = result.scalar_one_or_none()
        return to_login_code(row) if row else None

    async def mark_used(self, email: str, code: str) -> bool:
        """Consume an unused code; False when a concurrent request got there first."""
        result = await self.db.execute(
            update(LoginCode)
            .where(LoginCode.code == code)
            .where(LoginCode.email == email)
            .where(LoginCode.used.is_(False))
            .values(used=True)
        )
        await self.db.commit()
        return result.rowcount > 0

    async def list_for_email(self, email: str) -> list[entities.LoginCode]:
        result = await self.db.execute(
            select(LoginCode).where(LoginCode.email == email),
        )
        return [to_login_code(row) for row in result.scalars().all()]


# ─── Invitations ─────────────────────────────────────────────────

class SqlInvitationRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_pending(
        self, email: str, now: datetime, kind: InvitationKind | None = None,
    ) -> entities.Invitation | None:
        query = (
            select(Invitation)
            .where(Invitation.email == email)
            .where(Invitation.used.is_(False))
            .where(Invitation.expires_at > now)
        )
        if kind is not None:
            query = query.where(Invitation.kind == kind.value)
        result = await self.db.execute(
            query.order_by(Invitation.created_at.desc()).limit(1),
        )
        row = result.scalar_one_or_none()
        return to_invitation(row) if row else None

    async def find_unused(
        self, email: str, kind: InvitationKind,
    ) -> entities.Invitation | None:
        result = await self.db.execute(
            select(Invitation)
            .where(Invitation.email == email)
            .where(Invitation.used.is_(False))
            .where(Invitation.kind == kind.value)
            .limit(1)
        )
        row = result.scalar_one_or_none()
        return to_invitation(row) if row else None

    async def find_pending_by_code(
        self, email: str, code: str, now: datetime,
    ) -> entities.Invitation | None:
        result = await self.db.execute(
            select(Invitation)
            .where(Invitation.email == email)
            .where(Invitation.code == code)
            .where(Invitation.used.is_(False))
            .where(Invitation.expires_at > now)
        )
        row = result.scalar_one_or_none()
        return to_invitation(row) if row else None

    async def replace_unused_for_email(
        self, invitation: entities.Invitation,
    ) -> entities.Invitation:
        """Drop unused invitations of any kind for the email, then store the new one."""
        await self.db.execute(
            delete(Invitation)
            .where(Invitation.email == invitation.email)
            .where(Invitation.used.is_(False))
        )
        self.db.add(Invitation(
            id=invitation.id,
            code=invitation.code,
            email=invitation.email,
            kind=invitation.kind.value,
            list_id=invitation.list_id,
            invited_by=invitation.invited_by,
            expires_at=invitation.expires_at,
            used=invitation.used,
            created_at=invitation.created_at,
        ))
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise AlreadyInvitedError()
        return invitation

    async def mark_used(self, invitation_id: InvitationId) -> bool:
        result = await self.db.execute(
            update(Invitation)
            .where(Invitation.id == invitation_id)
            .where(Invitation.used.is_(False))
            .values(used=True)
        )
        await self.db.commit()
        return result.rowcount > 0

    async def list_by_inviter(self, inviter_id: UserId) -> list[entities.Invitation]:
        result = await self.db.execute(
            select(Invitation)
            .where(Invitation.invited_by == inviter_id)
            .order_by(Invitation.created_at.desc())
        )
        return [to_invitation(row) for row in result.scalars().all()]

    async def delete_unused(
        self, invitation_id: InvitationId, inviter_id: UserId,
    ) -> bool:
        result = await self.db.execute(
            delete(Invitation)
            .where(Invitation.id == invitation_id)
            .where(Invitation.invited_by == inviter_id)
            .where(Invitation.used.is_(False))
        )
        await self.db.commit()
        return result.rowcount > 0


# ─── System Settings ─────────────────────────────────────────────

class SqlSettingsRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self) -> entities.SystemSettings | None:
        row = await self.db.get(SystemSettings, SYSTEM_SETTINGS_ID)
        return to_settings(row) if row else None

    async def bootstrap(
        self,
        admin: entities.User,
        default_list: entities.ShoppingList,
        owner: entities.ListMember,
        settings: entities.SystemSettings,
    ) -> None:
        """Admin user, default list, owner membership and settings row in one commit."""
        self.db.add(user_row(admin))
        await self.db.flush()
        self.db.add(list_row(default_list))
        await self.db.flush()
        self.db.add(member_row(owner))
        self.db.add(self._settings_row(settings))
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise UserAlreadyExistsError()

    async def adopt(
        self,
        lists: list[tuple[entities.ShoppingList, entities.ListMember]],
        settings: entities.SystemSettings,
    ) -> None:
        for shopping_list, _ in lists:
            self.db.add(list_row(shopping_list))
        await self.db.flush()
        for _, owner in lists:
            self.db.add(member_row(owner))
        self.db.add(self._settings_row(settings))
        await self.db.commit()

    @staticmethod
    def _settings_row(settings: entities.SystemSettings) -> SystemSettings:
        return SystemSettings(
            id=settings.id,
            is_setup=settings.is_setup,
            setup_at=settings.setup_at,
            initial_admin=settings.initial_admin,
        )
