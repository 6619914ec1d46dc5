"""Request Dependencies — per-request service wiring and bearer-token authentication.

Invariants:
    - Every service receives the request's AsyncSession through its repositories
    - Protected routes depend on get_current_claims: missing or invalid token → 401
    - Mailer, clock and token issuer are dependencies so tests override them

Design Decisions:
    - HTTPBearer(auto_error=False): a missing header raises InvalidTokenError (401 envelope)
      instead of FastAPI's default 403
"""

from collections.abc import Callable
from datetime import datetime, timedelta

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from shoplist.config import Settings, get_settings
from shoplist.core.domain_types import utc_now
from shoplist.core.entities import TokenClaims, User
from shoplist.core.errors import InvalidTokenError
from shoplist.core.repository_protocols import Mailer
from shoplist.infrastructure.database import get_db
from shoplist.infrastructure.mailer import build_mailer
from shoplist.infrastructure.repositories_auth import (
    SqlInvitationRepository, SqlLoginCodeRepository, SqlUserRepository,
)
from shoplist.infrastructure.repositories_lists import (
    SqlItemRepository, SqlListRepository, SqlMemberRepository,
)
from shoplist.services.invitations import InvitationManager
from shoplist.services.items import ItemService
from shoplist.services.lists import ListManager
from shoplist.services.magic_link import MagicLinkAuthenticator
from shoplist.services.sign_in import SignInFlow
from shoplist.services.tokens import TokenIssuer

bearer_scheme = HTTPBearer(auto_error=False)


# ─── Infrastructure ──────────────────────────────────────────────

def get_mailer(settings: Settings = Depends(get_settings)) -> Mailer:
    return build_mailer(settings)


def get_clock() -> Callable[[], datetime]:
    return utc_now


def get_token_issuer(settings: Settings = Depends(get_settings)) -> TokenIssuer:
    return TokenIssuer(settings.jwt_secret, ttl=timedelta(days=settings.token_ttl_days))


# ─── Services ────────────────────────────────────────────────────

def get_list_manager(
    db: AsyncSession = Depends(get_db),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> ListManager:
    return ListManager(
        SqlListRepository(db), SqlMemberRepository(db), SqlUserRepository(db), clock,
    )


def get_item_service(
    db: AsyncSession = Depends(get_db),
    lists: ListManager = Depends(get_list_manager),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> ItemService:
    return ItemService(SqlItemRepository(db), lists, clock)


def get_invitation_manager(
    db: AsyncSession = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> InvitationManager:
    return InvitationManager(
        SqlInvitationRepository(db),
        SqlUserRepository(db),
        SqlListRepository(db),
        SqlMemberRepository(db),
        mailer,
        clock,
    )


def get_sign_in_flow(
    db: AsyncSession = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
    clock: Callable[[], datetime] = Depends(get_clock),
    invitations: InvitationManager = Depends(get_invitation_manager),
    lists: ListManager = Depends(get_list_manager),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> SignInFlow:
    authenticator = MagicLinkAuthenticator(
        SqlUserRepository(db),
        SqlLoginCodeRepository(db),
        SqlInvitationRepository(db),
        mailer,
        clock,
    )
    return SignInFlow(authenticator, invitations, lists, tokens)


# ─── Authentication ──────────────────────────────────────────────

def get_current_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> TokenClaims:
    if credentials is None:
        raise InvalidTokenError("Authorization header required")
    return tokens.validate(credentials.credentials)


async def get_current_user(
    claims: TokenClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
) -> User:
    user = await SqlUserRepository(db).get_by_id(claims.user_id)
    if user is None:
        raise InvalidTokenError("Unknown user")
    return user
