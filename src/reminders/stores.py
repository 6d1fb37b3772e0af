"""SQLAlchemy-backed implementations of the item and subscription stores."""

import logging
from collections.abc import Callable, Sequence
from datetime import datetime
from typing import TypeVar
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.database.items import (
    get_open_tasks_with_due,
    get_open_undated_tasks,
    get_stale_inbox_items,
    update_reminder_state,
)
from src.database.subscriptions import get_subscriptions_for_user
from src.reminders.base import ItemStore, SubscriptionStore
from src.reminders.errors import TransientStoreError
from src.reminders.models import ItemSnapshot, SubscriptionInfo

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _read(session: Session, operation: str, query: Callable[[], T]) -> T:
    """Run a read inside a savepoint so a failure does not poison the session.

    :param session: Database session.
    :param operation: Operation name for error reporting.
    :param query: Callable performing the read.
    :returns: The query result.
    :raises TransientStoreError: If the read fails.
    """
    try:
        with session.begin_nested():
            return query()
    except SQLAlchemyError as e:
        logger.exception(f"Store read failed: {operation}")
        raise TransientStoreError(operation, str(e)) from e


class SqlItemStore(ItemStore):
    """Item store backed by the items table."""

    def __init__(self, session: Session) -> None:
        """Initialise the store.

        :param session: Database session owned by the caller.
        """
        self._session = session

    def query_open_tasks_with_due(self, now: datetime) -> list[ItemSnapshot]:
        """Open tasks with a due_at whose notification moment has passed."""
        items = _read(
            self._session,
            "query_open_tasks_with_due",
            lambda: get_open_tasks_with_due(self._session, now),
        )
        return [ItemSnapshot.model_validate(item) for item in items]

    def query_open_undated_tasks(self) -> list[ItemSnapshot]:
        """Open tasks without a due_at."""
        items = _read(
            self._session,
            "query_open_undated_tasks",
            lambda: get_open_undated_tasks(self._session),
        )
        return [ItemSnapshot.model_validate(item) for item in items]

    def query_stale_inbox_items(self, threshold: datetime) -> list[ItemSnapshot]:
        """Open inbox items created at or before threshold."""
        items = _read(
            self._session,
            "query_stale_inbox_items",
            lambda: get_stale_inbox_items(self._session, threshold),
        )
        return [ItemSnapshot.model_validate(item) for item in items]

    def update_reminder_state(
        self,
        item_ids: Sequence[UUID],
        sent_flag: bool,
        timestamp: datetime,
    ) -> None:
        """Write and commit the reminder fields for the given items.

        Each call commits on its own so finished candidates stay committed if
        the pass is interrupted later.

        :raises TransientStoreError: If the write or commit fails.
        """
        try:
            update_reminder_state(self._session, item_ids, sent_flag, timestamp)
            self._session.commit()
        except SQLAlchemyError as e:
            self._session.rollback()
            logger.exception(f"Store write failed for items {list(item_ids)}")
            raise TransientStoreError("update_reminder_state", str(e)) from e


class SqlSubscriptionStore(SubscriptionStore):
    """Subscription store backed by the push_subscriptions table."""

    def __init__(self, session: Session) -> None:
        """Initialise the store.

        :param session: Database session owned by the caller.
        """
        self._session = session

    def get_subscriptions(self, user_id: UUID) -> list[SubscriptionInfo]:
        """All push endpoints registered by a user."""
        subscriptions = _read(
            self._session,
            "get_subscriptions",
            lambda: get_subscriptions_for_user(self._session, user_id),
        )
        return [SubscriptionInfo.model_validate(sub) for sub in subscriptions]
