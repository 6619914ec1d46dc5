"""Service test fixtures — async DB, fake mailer and clock, services and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database with foreign keys enforced
    - get_db, get_mailer and get_clock dependencies overridden for route tests
    - db_manager patched so the readiness probe sees the test engine
    - Mail never leaves the process: FakeMailer records every message

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for service and route tests
    - FakeClock is mutable: expiry is tested by advancing time, never by sleeping
"""

import re
from datetime import datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

import shoplist.models  # noqa: F401  (populates Base.metadata)
from shoplist.api.dependencies import get_clock, get_mailer
from shoplist.config import get_settings
from shoplist.core.domain_types import utc_now
from shoplist.core.entities import ShoppingList, User
from shoplist.core.errors import MailDeliveryError
from shoplist.core.format_emails import EmailMessage
from shoplist.db.base import Base
from shoplist.infrastructure.database import (
    DatabaseSessionManager, enable_sqlite_foreign_keys, get_db,
)
from shoplist.infrastructure.repositories_auth import (
    SqlInvitationRepository, SqlLoginCodeRepository, SqlSettingsRepository,
    SqlUserRepository,
)
from shoplist.infrastructure.repositories_lists import (
    SqlItemRepository, SqlListRepository, SqlMemberRepository,
)
from shoplist.services.invitations import InvitationManager
from shoplist.services.items import ItemService
from shoplist.services.lists import ListManager
from shoplist.services.magic_link import MagicLinkAuthenticator
from shoplist.services.sign_in import SignInFlow
from shoplist.services.system_setup import SetupService
from shoplist.services.tokens import TokenIssuer
import shoplist.infrastructure.database as db_module
from shoplist.main import app

ADMIN_EMAIL = "admin@example.com"


# ─── Fakes ───────────────────────────────────────────────────────

class FakeMailer:
    """Records messages; raises MailDeliveryError while `fail` is set."""

    def __init__(self):
        self.sent: list[EmailMessage] = []
        self.fail = False

    async def send(self, message: EmailMessage) -> None:
        if self.fail:
            raise MailDeliveryError(message.to, "connection refused")
        self.sent.append(message)

    def last_to(self, email: str) -> EmailMessage:
        return [m for m in self.sent if m.to == email][-1]

    def last_login_code(self, email: str) -> str:
        match = re.search(r"login code is: (\d{6})", self.last_to(email).body)
        assert match, "no login code in message"
        return match.group(1)


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


# ─── Database ────────────────────────────────────────────────────

@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def clock():
    return FakeClock(utc_now())


# ─── Services ────────────────────────────────────────────────────

@pytest.fixture
def token_issuer():
    return TokenIssuer(get_settings().jwt_secret)


@pytest.fixture
def authenticator(test_db, mailer, clock):
    return MagicLinkAuthenticator(
        SqlUserRepository(test_db),
        SqlLoginCodeRepository(test_db),
        SqlInvitationRepository(test_db),
        mailer,
        clock,
    )


@pytest.fixture
def list_manager(test_db, clock):
    return ListManager(
        SqlListRepository(test_db),
        SqlMemberRepository(test_db),
        SqlUserRepository(test_db),
        clock,
    )


@pytest.fixture
def item_service(test_db, list_manager, clock):
    return ItemService(SqlItemRepository(test_db), list_manager, clock)


@pytest.fixture
def invitation_manager(test_db, mailer, clock):
    return InvitationManager(
        SqlInvitationRepository(test_db),
        SqlUserRepository(test_db),
        SqlListRepository(test_db),
        SqlMemberRepository(test_db),
        mailer,
        clock,
    )


@pytest.fixture
def sign_in_flow(authenticator, invitation_manager, list_manager, token_issuer):
    return SignInFlow(authenticator, invitation_manager, list_manager, token_issuer)


@pytest.fixture
def setup_service(test_db, clock):
    return SetupService(SqlSettingsRepository(test_db), SqlUserRepository(test_db), clock)


# ─── Seed Data ───────────────────────────────────────────────────

@pytest.fixture
async def admin(setup_service) -> User:
    """Bootstrap admin, created by system setup with a default list."""
    return await setup_service.setup_system(ADMIN_EMAIL)


@pytest.fixture
async def admin_list(admin, list_manager) -> ShoppingList:
    lists = await list_manager.get_user_lists(admin.id)
    return lists[0]


@pytest.fixture
def sign_in(sign_in_flow, mailer):
    """Run the full code round-trip for an email; returns (token, user)."""

    async def _sign_in(email: str) -> tuple[str, User]:
        await sign_in_flow.request_login(email)
        return await sign_in_flow.complete_login(email, mailer.last_login_code(email))

    return _sign_in


@pytest.fixture
async def invited_user(admin, invitation_manager, sign_in) -> User:
    """A second user admitted by a server invitation from the admin."""
    await invitation_manager.create_invitation(admin.id, "bob@example.com", "server")
    _, user = await sign_in("bob@example.com")
    return user


@pytest.fixture
def auth_headers(token_issuer):
    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {token_issuer.issue(user)}"}

    return _headers


# ─── HTTP Client ─────────────────────────────────────────────────

@pytest.fixture
async def client(test_engine, test_session_factory, mailer, clock):
    """FastAPI test client with DB, mailer and clock dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mailer] = lambda: mailer
    app.dependency_overrides[get_clock] = lambda: clock

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
