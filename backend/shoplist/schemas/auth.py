"""Auth Schemas — magic-link login, verification and setup payloads.

Invariants:
    - Emails are validated with EmailStr before reaching any service
    - Login codes are 6 digits after stripping whitespace
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from shoplist.core.entities import TokenClaims, User


class LoginRequest(BaseModel):
    email: EmailStr


class VerifyRequest(BaseModel):
    email: EmailStr
    code: str = Field(min_length=1, max_length=12)

    @field_validator("code")
    @classmethod
    def strip_code(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("code cannot be empty or whitespace")
        return v


class SetupRequest(BaseModel):
    """Admin email for first-run setup (CLI)."""
    email: EmailStr


class LoginResponse(BaseModel):
    message: str


class UserResponse(BaseModel):
    id: UUID
    email: str
    invited_by: UUID | None
    joined_at: datetime
    created_at: datetime

    @classmethod
    def from_entity(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id, email=user.email, invited_by=user.invited_by,
            joined_at=user.joined_at, created_at=user.created_at,
        )


class VerifyResponse(BaseModel):
    token: str
    user: UserResponse


class ClaimsResponse(BaseModel):
    """Identity carried by the caller's token."""
    user_id: UUID
    email: str
    issued_at: datetime
    expires_at: datetime

    @classmethod
    def from_claims(cls, claims: TokenClaims) -> "ClaimsResponse":
        return cls(
            user_id=claims.user_id, email=claims.email,
            issued_at=claims.issued_at, expires_at=claims.expires_at,
        )
