"""Database operations for Web Push subscriptions."""

import logging
import uuid as uuid_module

from sqlalchemy.orm import Session

from src.database.subscriptions.models import PushSubscription

logger = logging.getLogger(__name__)


def get_subscriptions_for_user(
    session: Session,
    user_id: uuid_module.UUID,
) -> list[PushSubscription]:
    """Get every push subscription registered by a user.

    :param session: Database session.
    :param user_id: Owner of the subscriptions.
    :returns: List of subscriptions, oldest first.
    """
    subscriptions = (
        session.query(PushSubscription)
        .filter(PushSubscription.user_id == user_id)
        .order_by(PushSubscription.created_at)
        .all()
    )
    logger.debug(f"Found {len(subscriptions)} push subscriptions for user {user_id}")
    return subscriptions
