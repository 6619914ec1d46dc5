"""System Setup — first-run bootstrap of the admin account.

Invariants:
    - Setup happens once: a second attempt raises SystemAlreadySetupError
    - The admin is the only User ever created without an inviter
    - Admin, default list, owner membership and settings row are written in one commit
    - Adoption is a no-op when settings exist or there are no users yet
"""

import logging
import uuid
from collections.abc import Callable
from datetime import datetime

from shoplist.core.domain_types import (
    DEFAULT_LIST_NAME, ListId, MemberRole, SYSTEM_SETTINGS_ID, UserId, utc_now,
)
from shoplist.core.entities import ListMember, ShoppingList, SystemSettings, User
from shoplist.core.errors import SystemAlreadySetupError
from shoplist.core.repository_protocols import SettingsRepository, UserRepository

logger = logging.getLogger(__name__)


def default_list_for(user_id: UserId, now: datetime) -> tuple[ShoppingList, ListMember]:
    shopping_list = ShoppingList(
        id=ListId(uuid.uuid4()), name=DEFAULT_LIST_NAME, owner_id=user_id,
        created_at=now, updated_at=now,
    )
    owner = ListMember(
        list_id=shopping_list.id, user_id=user_id,
        role=MemberRole.OWNER, joined_at=now,
    )
    return shopping_list, owner


class SetupService:
    def __init__(
        self,
        settings: SettingsRepository,
        users: UserRepository,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.settings = settings
        self.users = users
        self.clock = clock

    async def is_system_setup(self) -> bool:
        current = await self.settings.get()
        return current is not None and current.is_setup

    async def setup_system(self, email: str) -> User:
        if await self.is_system_setup():
            raise SystemAlreadySetupError()

        now = self.clock()
        admin = User(
            id=UserId(uuid.uuid4()), email=email, invited_by=None,
            joined_at=now, created_at=now,
        )
        shopping_list, owner = default_list_for(admin.id, now)
        await self.settings.bootstrap(
            admin, shopping_list, owner,
            SystemSettings(
                id=SYSTEM_SETTINGS_ID, is_setup=True,
                setup_at=now, initial_admin=admin.id,
            ),
        )
        logger.info(f"System set up with admin {email}", extra={"user_id": admin.id})
        return admin

    async def adopt_existing_users(self) -> bool:
        """Mark a pre-populated database as set up. Returns True when it did."""
        if await self.settings.get() is not None:
            return False
        users = await self.users.list_all()
        if not users:
            return False

        now = self.clock()
        await self.settings.adopt(
            [default_list_for(user.id, now) for user in users],
            SystemSettings(
                id=SYSTEM_SETTINGS_ID, is_setup=True,
                setup_at=now, initial_admin=users[0].id,
            ),
        )
        logger.info(f"Adopted {len(users)} existing users, system marked as set up")
        return True
