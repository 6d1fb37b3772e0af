"""Database operations used by the reminder engine on user items."""

from __future__ import annotations

import logging
import uuid as uuid_module
from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import and_, case, func, or_
from sqlalchemy.orm import Session

from src.database.items.models import Item, ItemKind, ItemStatus

logger = logging.getLogger(__name__)


def get_item_by_id(
    session: Session,
    item_id: uuid_module.UUID,
) -> Item | None:
    """Get an item by ID.

    :param session: Database session.
    :param item_id: Item ID.
    :returns: The item or None if not found.
    """
    return session.query(Item).filter(Item.id == item_id).first()


def get_open_tasks_with_due(
    session: Session,
    now: datetime,
) -> list[Item]:
    """Get open dated tasks whose notification moment has passed.

    The notification moment is notify_at when set, otherwise due_at. Tasks
    that already had their one-off reminder are excluded.

    :param session: Database session.
    :param now: Current time.
    :returns: Matching tasks ordered by notification moment.
    """
    return (
        session.query(Item)
        .filter(
            Item.kind == ItemKind.TASK.value,
            Item.status == ItemStatus.OPEN.value,
            Item.due_at.is_not(None),
            Item.reminder_sent.is_(False),
            or_(
                and_(Item.notify_at.is_not(None), Item.notify_at <= now),
                and_(Item.notify_at.is_(None), Item.due_at <= now),
            ),
        )
        .order_by(func.coalesce(Item.notify_at, Item.due_at), Item.id)
        .all()
    )


def get_open_undated_tasks(session: Session) -> list[Item]:
    """Get all open tasks without a due date.

    :param session: Database session.
    :returns: Undated tasks ordered by creation time.
    """
    return (
        session.query(Item)
        .filter(
            Item.kind == ItemKind.TASK.value,
            Item.status == ItemStatus.OPEN.value,
            Item.due_at.is_(None),
        )
        .order_by(Item.created_at, Item.id)
        .all()
    )


def get_stale_inbox_items(
    session: Session,
    threshold: datetime,
) -> list[Item]:
    """Get open inbox items created at or before a threshold.

    :param session: Database session.
    :param threshold: Items created at or before this moment are stale.
    :returns: Stale inbox items ordered by owner then creation time.
    """
    return (
        session.query(Item)
        .filter(
            Item.kind == ItemKind.INBOX.value,
            Item.status == ItemStatus.OPEN.value,
            Item.created_at <= threshold,
        )
        .order_by(Item.user_id, Item.created_at, Item.id)
        .all()
    )


def update_reminder_state(
    session: Session,
    item_ids: Sequence[uuid_module.UUID],
    sent_flag: bool,
    timestamp: datetime,
) -> int:
    """Record that a reminder fired for a set of items.

    last_reminded_at only ever moves forward: if the stored value is later
    than timestamp (another writer with a faster clock), it is kept.

    :param session: Database session.
    :param item_ids: IDs of the items to update.
    :param sent_flag: New value for reminder_sent.
    :param timestamp: When the reminder fired.
    :returns: Number of rows updated.
    """
    if not item_ids:
        return 0

    updated = (
        session.query(Item)
        .filter(Item.id.in_(list(item_ids)))
        .update(
            {
                Item.reminder_sent: sent_flag,
                Item.last_reminded_at: case(
                    (
                        or_(
                            Item.last_reminded_at.is_(None),
                            Item.last_reminded_at < timestamp,
                        ),
                        timestamp,
                    ),
                    else_=Item.last_reminded_at,
                ),
            },
            synchronize_session=False,
        )
    )
    session.flush()
    logger.info(
        f"Updated reminder state: items={len(item_ids)}, rows={updated}, "
        f"sent={sent_flag}, at={timestamp}"
    )
    return updated
