"""ListMember ORM — membership of a user in a list, with a role.

Invariants:
    - Composite primary key (list_id, user_id): one row per user per list
    - role is "owner" or "member" (CHECK constraint mirrors MemberRole)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from shoplist.db.base import Base


class ListMember(Base):
    __tablename__ = "list_members"
    __table_args__ = (
        CheckConstraint("role IN ('owner', 'member')", name="ck_list_members_role"),
    )

    list_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("shopping_lists.id"), primary_key=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), primary_key=True, index=True,
    )
    role: Mapped[str] = mapped_column(String(10), nullable=False, default="member")
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
