"""Token Issuer — HS256 session tokens carrying user identity and expiry.

Invariants:
    - Tokens carry user_id, email, iat and exp; exp = iat + ttl (30 days by default)
    - validate() raises InvalidTokenError for bad signatures, malformed tokens,
      missing claims and expiry alike
    - No revocation list: logout is the client discarding its token

Design Decisions:
    - python-jose for encode/decode; expiry checked by jose against the wall clock
    - The secret is read once from settings; rotating it invalidates every token
"""

import uuid
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt

from shoplist.core.domain_types import DEFAULT_TOKEN_TTL, UserId, utc_now
from shoplist.core.entities import TokenClaims, User
from shoplist.core.errors import InvalidTokenError

ALGORITHM = "HS256"


class TokenIssuer:
    def __init__(
        self,
        secret: str,
        ttl: timedelta = DEFAULT_TOKEN_TTL,
        clock: Callable[[], datetime] = utc_now,
    ):
        if not secret:
            raise ValueError("token signing secret must not be empty")
        self._secret = secret
        self.ttl = ttl
        self.clock = clock

    def issue(self, user: User) -> str:
        issued_at = self.clock()
        claims = {
            "user_id": str(user.id),
            "email": user.email,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self.ttl).timestamp()),
        }
        return jwt.encode(claims, self._secret, algorithm=ALGORITHM)

    def validate(self, token: str) -> TokenClaims:
        try:
            payload = jwt.decode(
                token, self._secret, algorithms=[ALGORITHM],
                options={"require_exp": True, "require_iat": True},
            )
        except ExpiredSignatureError:
            raise InvalidTokenError("Token expired")
        except JWTError:
            raise InvalidTokenError()

        try:
            return TokenClaims(
                user_id=UserId(uuid.UUID(payload["user_id"])),
                email=payload["email"],
                issued_at=datetime.fromtimestamp(payload["iat"], timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], timezone.utc),
            )
        except (KeyError, TypeError, ValueError):
            raise InvalidTokenError()
