"""SQLAlchemy ORM model for the reminder pass lease."""

from datetime import UTC, datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from src.database.core import Base


class PassLease(Base):
    """ORM model for a named, expiring lease.

    Holding the lease means a pass is in flight. A lease whose expires_at has
    passed is free to take, so a crashed holder never blocks forever.
    """

    __tablename__ = "reminder_pass_leases"

    name: Mapped[str] = mapped_column(
        String(100),
        primary_key=True,
    )
    holder: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    acquired_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    def __repr__(self) -> str:
        """Return string representation of the lease."""
        return f"<PassLease(name={self.name!r}, holder={self.holder!r}, expires={self.expires_at})>"
