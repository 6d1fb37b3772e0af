"""Database operations for the reminder pass lease."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.orm import Session

from src.database.pass_leases.models import PassLease

logger = logging.getLogger(__name__)


def acquire_lease(
    session: Session,
    name: str,
    holder: str,
    ttl: timedelta,
    now: datetime,
) -> bool:
    """Try to take a named lease.

    Uses a single INSERT ... ON CONFLICT DO UPDATE that only overwrites an
    expired lease, so two concurrent callers can never both succeed.

    :param session: Database session.
    :param name: Lease name.
    :param holder: Identifier of the caller.
    :param ttl: How long the lease is held if never released.
    :param now: Current time (must be timezone-aware).
    :returns: True if the caller now holds the lease.
    :raises ValueError: If now is not timezone-aware.
    """
    if now.tzinfo is None:
        raise ValueError("Lease time must be timezone-aware")

    stmt = insert(PassLease).values(
        name=name,
        holder=holder,
        acquired_at=now,
        expires_at=now + ttl,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[PassLease.name],
        set_={
            "holder": stmt.excluded.holder,
            "acquired_at": stmt.excluded.acquired_at,
            "expires_at": stmt.excluded.expires_at,
        },
        where=PassLease.expires_at <= now,
    ).returning(PassLease.holder)

    acquired_by = session.execute(stmt).scalar_one_or_none()
    session.flush()

    if acquired_by == holder:
        logger.info(f"Acquired lease {name!r}: holder={holder}, expires={now + ttl}")
        return True

    logger.info(f"Lease {name!r} is held by another pass")
    return False


def release_lease(
    session: Session,
    name: str,
    holder: str,
) -> bool:
    """Release a lease if the caller still holds it.

    :param session: Database session.
    :param name: Lease name.
    :param holder: Identifier the lease was acquired with.
    :returns: True if a lease row was removed.
    """
    deleted = (
        session.query(PassLease)
        .filter(PassLease.name == name, PassLease.holder == holder)
        .delete(synchronize_session=False)
    )
    session.flush()
    if deleted:
        logger.info(f"Released lease {name!r}: holder={holder}")
    else:
        logger.warning(f"Lease {name!r} was no longer held by {holder}")
    return bool(deleted)
