"""Candidate selection: three scoped reads merged into one ordered work list."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from src.enums import ReminderPolicy
from src.reminders.base import ItemStore
from src.reminders.eligibility import explain_eligibility, stale_inbox_threshold
from src.reminders.errors import TransientStoreError
from src.reminders.models import ItemSnapshot, ReminderWorkItem

logger = logging.getLogger(__name__)


@dataclass
class SelectionResult:
    """Work items for one pass plus any query failures."""

    work_items: list[ReminderWorkItem] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def _run_query(
    policy: ReminderPolicy,
    query: Callable[[], list[ItemSnapshot]],
    errors: list[str],
) -> list[ItemSnapshot]:
    """Run one scoped read, turning a store failure into an error message.

    :param policy: Policy the read serves, for logging.
    :param query: The store read.
    :param errors: List to append the failure message to.
    :returns: The items read, or an empty list if the read failed.
    """
    try:
        items = query()
    except TransientStoreError as e:
        error_msg = f"Candidate query for {policy.value} failed: {e}"
        logger.error(error_msg)
        errors.append(error_msg)
        return []

    logger.info(f"Query for {policy.value} returned {len(items)} items")
    return items


def _filter_eligible(
    items: list[ItemSnapshot],
    policy: ReminderPolicy,
    now: datetime,
    seen: set[UUID],
) -> list[ItemSnapshot]:
    """Keep items eligible under a policy and not already claimed by a stronger one.

    :param items: Items from the policy's scoped read.
    :param policy: The policy to evaluate.
    :param now: Current time.
    :param seen: IDs claimed so far this pass; updated in place.
    :returns: Eligible, unclaimed items in input order.
    """
    eligible = []
    for item in items:
        if item.id in seen:
            logger.warning(f"Item {item.id} already selected this pass, skipping for {policy.value}")
            continue

        reason = explain_eligibility(item, policy, now)
        if reason is not None:
            logger.debug(f"Item {item.id} not eligible for {policy.value}: {reason}")
            continue

        seen.add(item.id)
        eligible.append(item)
    return eligible


def _group_by_user(items: list[ItemSnapshot]) -> dict[UUID, list[ItemSnapshot]]:
    grouped: dict[UUID, list[ItemSnapshot]] = {}
    for item in items:
        grouped.setdefault(item.user_id, []).append(item)
    return grouped


def select_candidates(store: ItemStore, now: datetime) -> SelectionResult:
    """Build the ordered work list for a pass.

    Dated tasks come first, then undated tasks, then one inbox nudge per user.
    Each item appears at most once; when it matches several policies the
    earlier policy wins. A failed read drops only that read's candidates.

    :param store: Item store to read from.
    :param now: Current time.
    :returns: Work items and any query failures.
    """
    result = SelectionResult()
    seen: set[UUID] = set()

    dated = _run_query(
        ReminderPolicy.DATED_TASK,
        lambda: store.query_open_tasks_with_due(now),
        result.errors,
    )
    undated = _run_query(
        ReminderPolicy.UNDATED_TASK,
        store.query_open_undated_tasks,
        result.errors,
    )
    inbox = _run_query(
        ReminderPolicy.STALE_INBOX,
        lambda: store.query_stale_inbox_items(stale_inbox_threshold(now)),
        result.errors,
    )

    for policy, items in (
        (ReminderPolicy.DATED_TASK, dated),
        (ReminderPolicy.UNDATED_TASK, undated),
    ):
        for item in _filter_eligible(items, policy, now, seen):
            result.work_items.append(
                ReminderWorkItem(policy=policy, user_id=item.user_id, items=(item,))
            )

    stale = _filter_eligible(inbox, ReminderPolicy.STALE_INBOX, now, seen)
    for user_id, user_items in _group_by_user(stale).items():
        result.work_items.append(
            ReminderWorkItem(
                policy=ReminderPolicy.STALE_INBOX,
                user_id=user_id,
                items=tuple(user_items),
            )
        )

    logger.info(
        f"Selected {len(result.work_items)} candidates "
        f"(dated={len(dated)}, undated={len(undated)}, inbox={len(inbox)} read; "
        f"errors={len(result.errors)})"
    )
    return result
