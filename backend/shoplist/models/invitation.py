"""Invitation ORM — pre-authorization to join the server or a specific list.

Invariants:
    - code is unique (8 uppercase hex chars)
    - list_id is set iff kind == "list" (CHECK constraint)
    - at most one unused invitation per email (partial unique index)

Design Decisions:
    - Partial unique index over application-only checks: concurrent creates for the same
      email fail at commit and surface as AlreadyInvitedError
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    String, DateTime, Boolean, ForeignKey, Index, CheckConstraint, text,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from shoplist.db.base import Base


class Invitation(Base):
    __tablename__ = "invitations"
    __table_args__ = (
        CheckConstraint(
            "(kind = 'list' AND list_id IS NOT NULL) OR "
            "(kind = 'server' AND list_id IS NULL)",
            name="ck_invitations_kind_list_id",
        ),
        Index(
            "uq_invitations_unused_email", "email",
            unique=True,
            sqlite_where=text("used = 0"),
            postgresql_where=text("used = false"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    code: Mapped[str] = mapped_column(String(8), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    kind: Mapped[str] = mapped_column(String(10), nullable=False)
    list_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("shopping_lists.id"), nullable=True,
    )
    invited_by: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True,
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    used: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
