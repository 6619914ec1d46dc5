"""Invitation Schemas — create, accept and list invitations.

Invariants:
    - type is "server" or "list"; list_id is required when type == "list"
    - Accept codes are stripped and uppercased before lookup

Design Decisions:
    - Literal type over str enum: Pydantic rejects unknown kinds with a 400 natively
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, EmailStr, field_validator, model_validator

from shoplist.core.codes import normalize_invitation_code
from shoplist.core.entities import Invitation


class InvitationCreate(BaseModel):
    email: EmailStr
    type: Literal["server", "list"]
    list_id: UUID | None = None

    @model_validator(mode="after")
    def validate_list_target(self):
        if self.type == "list" and self.list_id is None:
            raise ValueError("list invitation requires list_id")
        return self


class AcceptInvitationRequest(BaseModel):
    code: str

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        v = normalize_invitation_code(v)
        if not v:
            raise ValueError("code cannot be empty or whitespace")
        return v


class InvitationResponse(BaseModel):
    id: UUID
    code: str
    email: str
    type: str
    list_id: UUID | None
    invited_by: UUID
    expires_at: datetime
    used: bool
    created_at: datetime

    @classmethod
    def from_entity(cls, invitation: Invitation) -> "InvitationResponse":
        return cls(
            id=invitation.id,
            code=invitation.code,
            email=invitation.email,
            type=invitation.kind.value,
            list_id=invitation.list_id,
            invited_by=invitation.invited_by,
            expires_at=invitation.expires_at,
            used=invitation.used,
            created_at=invitation.created_at,
        )
