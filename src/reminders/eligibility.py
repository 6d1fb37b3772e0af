"""Reminder eligibility rules.

Pure functions over item snapshots. Every threshold is inclusive: an item is
due when now is equal to or later than its threshold.
"""

from datetime import UTC, datetime, timedelta

from src.database.items.models import ItemKind, ItemStatus
from src.enums import ReminderPolicy
from src.reminders.models import ItemSnapshot

# Undated tasks are re-sent at most once per day
UNDATED_TASK_INTERVAL = timedelta(hours=24)

# Inbox items become stale after this age, and are re-nudged at this interval
STALE_INBOX_AGE = timedelta(hours=2)
STALE_INBOX_INTERVAL = timedelta(hours=2)


def _as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _interval_elapsed(last: datetime | None, now: datetime, interval: timedelta) -> bool:
    return last is None or now - _as_utc(last) >= interval


def stale_inbox_threshold(now: datetime) -> datetime:
    """Return the creation time at or before which an inbox item is stale.

    :param now: Current time.
    :returns: now minus the stale inbox age.
    """
    return now - STALE_INBOX_AGE


def policy_for(item: ItemSnapshot) -> ReminderPolicy | None:
    """Pick the policy that governs an item.

    :param item: The item snapshot.
    :returns: The governing policy, or None if the item never gets reminders.
    """
    if item.status != ItemStatus.OPEN:
        return None
    if item.kind == ItemKind.TASK:
        return ReminderPolicy.DATED_TASK if item.due_at is not None else ReminderPolicy.UNDATED_TASK
    if item.kind == ItemKind.INBOX:
        return ReminderPolicy.STALE_INBOX
    return None


def explain_eligibility(
    item: ItemSnapshot,
    policy: ReminderPolicy,
    now: datetime,
) -> str | None:
    """Explain why an item is not eligible under a policy.

    :param item: The item snapshot.
    :param policy: The policy to evaluate.
    :param now: Current time.
    :returns: A short reason, or None if the item is eligible.
    """
    now = _as_utc(now)

    if item.status != ItemStatus.OPEN:
        return f"status is {item.status.value}"

    match policy:
        case ReminderPolicy.DATED_TASK:
            if item.kind != ItemKind.TASK:
                return f"kind is {item.kind.value}, not TASK"
            if item.due_at is None:
                return "no due_at"
            if item.reminder_sent:
                return "already reminded"
            if item.notify_at is not None:
                if now < _as_utc(item.notify_at):
                    return "notify_at is in the future"
            elif now < _as_utc(item.due_at):
                return "notify_at is unset and due_at is in the future"
            return None

        case ReminderPolicy.UNDATED_TASK:
            if item.kind != ItemKind.TASK:
                return f"kind is {item.kind.value}, not TASK"
            if item.due_at is not None:
                return "has a due_at"
            if not _interval_elapsed(item.last_reminded_at, now, UNDATED_TASK_INTERVAL):
                return "reminded less than 24h ago"
            return None

        case ReminderPolicy.STALE_INBOX:
            if item.kind != ItemKind.INBOX:
                return f"kind is {item.kind.value}, not INBOX"
            if now - _as_utc(item.created_at) < STALE_INBOX_AGE:
                return "created less than 2h ago"
            if not _interval_elapsed(item.last_reminded_at, now, STALE_INBOX_INTERVAL):
                return "reminded less than 2h ago"
            return None

    return f"unknown policy {policy}"


def is_eligible(item: ItemSnapshot, policy: ReminderPolicy, now: datetime) -> bool:
    """Decide whether a reminder should fire for an item in this pass.

    :param item: The item snapshot.
    :param policy: The policy to evaluate.
    :param now: Current time.
    :returns: True if the policy's fire window contains now.
    """
    return explain_eligibility(item, policy, now) is None
