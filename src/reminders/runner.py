"""Run one guarded reminder pass against the database."""

import logging
import os
import socket
import uuid
from datetime import UTC, datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.database.connection import get_session
from src.database.pass_leases import acquire_lease, release_lease
from src.reminders.config import ReminderSettings, get_reminder_settings
from src.reminders.models import PassReport
from src.reminders.push import WebPushTransport
from src.reminders.service import ReminderEngine
from src.reminders.stores import SqlItemStore, SqlSubscriptionStore

logger = logging.getLogger(__name__)

# Name of the lease row that marks a pass as in flight
PASS_LEASE_NAME = "reminder-pass"


def _holder_id() -> str:
    return f"{socket.gethostname()}:{os.getpid()}:{uuid.uuid4().hex[:8]}"


def build_engine(session: Session, settings: ReminderSettings) -> ReminderEngine:
    """Wire a reminder engine to the database and Web Push.

    :param session: Database session used by both stores.
    :param settings: Reminder settings.
    :returns: Configured engine.
    """
    return ReminderEngine(
        SqlItemStore(session),
        SqlSubscriptionStore(session),
        WebPushTransport.from_settings(settings),
        icon=settings.icon,
        endpoint_concurrency=settings.endpoint_concurrency,
        candidate_concurrency=settings.candidate_concurrency,
    )


def _release(session: Session, holder: str) -> None:
    """Release the pass lease; an unreleased lease simply expires."""
    try:
        session.rollback()
        release_lease(session, PASS_LEASE_NAME, holder)
        session.commit()
    except SQLAlchemyError:
        logger.exception(f"Failed to release pass lease for {holder}, it will expire")


def run_reminder_pass(
    now: datetime | None = None,
    *,
    guard: bool = True,
    settings: ReminderSettings | None = None,
) -> PassReport:
    """Run one reminder pass, unless another pass is already in flight.

    :param now: Pass time (defaults to now).
    :param guard: Take the in-flight lease first. Disable only for manual runs.
    :param settings: Reminder settings (defaults to environment).
    :returns: Report of the pass; skipped=True if the lease was held elsewhere.
    """
    settings = settings or get_reminder_settings()
    if now is None:
        now = datetime.now(UTC)

    holder = _holder_id()

    with get_session() as session:
        if guard:
            acquired = acquire_lease(
                session,
                PASS_LEASE_NAME,
                holder,
                timedelta(seconds=settings.pass_lease_seconds),
                now,
            )
            session.commit()
            if not acquired:
                logger.warning("Reminder pass skipped: another pass is in flight")
                return PassReport(started_at=now, finished_at=datetime.now(UTC), skipped=True)

        try:
            return build_engine(session, settings).run_pass(now)
        finally:
            if guard:
                _release(session, holder)
