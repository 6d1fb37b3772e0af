"""State commit: record that a reminder fired so it is not re-selected too soon."""

import logging
from datetime import datetime

from src.reminders.base import ItemStore
from src.reminders.models import ReminderWorkItem

logger = logging.getLogger(__name__)


def commit(store: ItemStore, work_item: ReminderWorkItem, now: datetime) -> None:
    """Mark every item in a work item as reminded at now.

    Called once dispatch has been attempted, whatever the delivery tally. A
    failure leaves the items eligible again on the next pass.

    :param store: Item store to write to.
    :param work_item: Task or inbox aggregate that was dispatched.
    :param now: Pass time recorded as last_reminded_at.
    :raises TransientStoreError: If the write fails.
    """
    store.update_reminder_state(work_item.item_ids, True, now)
    logger.debug(
        f"Committed reminder state for {len(work_item.items)} items "
        f"({work_item.policy.value}, user {work_item.user_id})"
    )
