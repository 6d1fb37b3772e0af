"""SQLAlchemy ORM model for Web Push subscriptions."""

import uuid as uuid_module
from datetime import UTC, datetime
from urllib.parse import urlparse

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from src.database.core import Base


class PushSubscription(Base):
    """ORM model for a browser push endpoint.

    One row per device. A user may own many subscriptions; a subscription is
    never tied to a specific item.
    """

    __tablename__ = "push_subscriptions"

    id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid_module.uuid4,
    )
    user_id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        nullable=False,
    )
    endpoint: Mapped[str] = mapped_column(
        Text,
        unique=True,
        nullable=False,
    )
    p256dh: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    auth: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
    )

    __table_args__ = (Index("idx_push_subscriptions_user_id", "user_id"),)

    def __repr__(self) -> str:
        """Return string representation of the subscription."""
        host = urlparse(self.endpoint).netloc
        return f"<PushSubscription(id={self.id}, user_id={self.user_id}, host={host!r})>"
