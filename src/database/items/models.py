"""SQLAlchemy ORM model for user items."""

import uuid as uuid_module
from datetime import UTC, datetime
from enum import StrEnum

from sqlalchemy import Boolean, DateTime, Index, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from src.database.core import Base

# Maximum length of content to show in repr
REPR_CONTENT_MAX_LENGTH = 50


class ItemKind(StrEnum):
    """Kind of a user item."""

    INBOX = "INBOX"
    TASK = "TASK"
    MEMORY = "MEMORY"
    LOCATION = "LOCATION"


class ItemStatus(StrEnum):
    """Lifecycle status of a user item."""

    OPEN = "OPEN"
    COMPLETED = "COMPLETED"
    ARCHIVED = "ARCHIVED"  # Soft-deleted


class Item(Base):
    """ORM model for user items.

    Items are created and edited by the web UI. The reminder engine only reads
    them and writes the two reminder fields (reminder_sent, last_reminded_at).
    """

    __tablename__ = "items"

    id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid_module.uuid4,
    )
    user_id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    kind: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ItemKind.INBOX.value,
    )
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ItemStatus.OPEN.value,
    )
    due_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    notify_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    reminder_sent: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )
    last_reminded_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    __table_args__ = (
        Index("idx_items_kind_status_reminder", "kind", "status", "reminder_sent"),
        Index("idx_items_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        """Return string representation of the item."""
        if len(self.content) > REPR_CONTENT_MAX_LENGTH:
            content_preview = self.content[:REPR_CONTENT_MAX_LENGTH] + "..."
        else:
            content_preview = self.content
        return (
            f"<Item(id={self.id}, kind={self.kind}, status={self.status}, "
            f"content={content_preview!r})>"
        )
