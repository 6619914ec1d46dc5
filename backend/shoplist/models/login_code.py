"""LoginCode ORM — emailed one-time code, keyed by the code value itself.

Invariants:
    - At most one row per email (older rows deleted when a new code is issued)
    - used flips to true exactly once, on the first successful verification
"""

from datetime import datetime

from sqlalchemy import String, DateTime, Boolean
from sqlalchemy.orm import Mapped, mapped_column

from shoplist.db.base import Base


class LoginCode(Base):
    __tablename__ = "login_codes"

    code: Mapped[str] = mapped_column(String(6), primary_key=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    used: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
