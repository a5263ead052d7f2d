"""User model for authentication."""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from dailyledger.core.db import Base
from dailyledger.utils.datetime import now_utc


class User(Base):
    """Shop operator allowed to log in. Display name is the audit trail actor."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    username: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
        index=True,
    )

    hashed_password: Mapped[str] = mapped_column(String, nullable=False)

    display_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")

    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        default=now_utc,
    )

    @property
    def actor_name(self) -> str:
        """Name recorded in the audit trail (display name or username fallback)."""
        return self.display_name.strip() or self.username

    def __repr__(self) -> str:
        return f"<User(username={self.username}, is_active={self.is_active})>"
