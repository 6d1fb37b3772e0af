"""Central enum definitions for the project."""

from enum import StrEnum


class ReminderPolicy(StrEnum):
    """Reminder policies, listed in priority order.

    When an item matches more than one policy in a pass, the first listed wins.
    """

    DATED_TASK = "dated_task"  # One-off, at notify_at or due_at
    UNDATED_TASK = "undated_task"  # Every 24 hours
    STALE_INBOX = "stale_inbox"  # Every 2 hours, aggregated per user


class CandidateType(StrEnum):
    """Shape of a unit of delivery work."""

    TASK = "task"
    INBOX_NUDGE = "inbox_nudge"
