"""Audit log model for daily record changes."""

import uuid
from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, String, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from dailyledger.core.db import Base
from dailyledger.utils.datetime import now_utc


class AuditLogEntry(Base):
    """Append-only audit trail. Rows only disappear when the database cascades a record delete."""

    __tablename__ = "audit_log"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    record_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("daily_records.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # WHO
    actor: Mapped[str] = mapped_column(String(100), nullable=False)

    # WHAT
    action: Mapped[str] = mapped_column(String(20), nullable=False)  # CREATE, UPDATE, DELETE

    # CREATE: snapshot of inputs; UPDATE: {field: {old, new}}; DELETE: deleted record summary
    changes: Mapped[dict] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=dict,
    )

    # WHEN
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        default=now_utc,
        index=True,
    )

    def __repr__(self) -> str:
        return (
            f"<AuditLogEntry(record_id={self.record_id}, action={self.action}, "
            f"actor={self.actor})>"
        )
