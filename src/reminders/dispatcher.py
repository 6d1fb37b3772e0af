"""Delivery dispatch: fan a notification out to every endpoint a user owns."""

import concurrent.futures
import logging

from src.enums import CandidateType
from src.reminders.base import PushTransport
from src.reminders.errors import DeliveryError
from src.reminders.models import (
    DeliveryOutcome,
    EndpointResult,
    NotificationPayload,
    ReminderWorkItem,
    SubscriptionInfo,
)

logger = logging.getLogger(__name__)

TASK_TITLE = "Task Reminder ⏰"
INBOX_TITLE = "Inbox Cleanup 🧹"
DEFAULT_ICON = "/icon.svg"

# Web Push payloads are capped at about 4 KB after encryption
MAX_CONTENT_LENGTH = 200


def truncate_content(content: str, limit: int = MAX_CONTENT_LENGTH) -> str:
    """Shorten item content for a notification body.

    :param content: Item text.
    :param limit: Maximum number of characters kept.
    :returns: The content, cut to limit characters plus an ellipsis if longer.
    """
    if len(content) <= limit:
        return content
    return content[:limit].rstrip() + "…"


def format_inbox_body(count: int) -> str:
    """Format the aggregate inbox message body.

    :param count: Number of waiting items.
    :returns: Body text, singular for one item.
    """
    noun = "item" if count == 1 else "items"
    return f"You have {count} {noun} waiting for action."


def build_payload(work_item: ReminderWorkItem, icon: str = DEFAULT_ICON) -> NotificationPayload:
    """Build the notification for a work item.

    :param work_item: Task or inbox aggregate to notify about.
    :param icon: Icon reference.
    :returns: The notification payload.
    """
    if work_item.candidate_type == CandidateType.INBOX_NUDGE:
        return NotificationPayload(
            title=INBOX_TITLE,
            body=format_inbox_body(len(work_item.items)),
            icon=icon,
        )

    return NotificationPayload(
        title=TASK_TITLE,
        body=f'Don\'t forget: "{truncate_content(work_item.items[0].content)}"',
        icon=icon,
    )


class DeliveryDispatcher:
    """Sends one payload to all of a user's endpoints in parallel.

    Sends are joined before returning. A failing endpoint never stops the
    others; failures are only counted.
    """

    def __init__(
        self,
        transport: PushTransport,
        *,
        icon: str = DEFAULT_ICON,
        max_workers: int = 8,
    ) -> None:
        """Initialise the dispatcher.

        :param transport: Push transport used for every send.
        :param icon: Icon reference for payloads.
        :param max_workers: Maximum parallel sends per work item.
        """
        self._transport = transport
        self._icon = icon
        self._max_workers = max_workers

    def _send_one(
        self,
        subscription: SubscriptionInfo,
        payload: NotificationPayload,
    ) -> EndpointResult:
        try:
            self._transport.send(subscription, payload)
        except DeliveryError as e:
            logger.warning(f"Push failed for {subscription.endpoint_host}: {e}")
            return EndpointResult(
                endpoint_host=subscription.endpoint_host,
                success=False,
                error=f"{type(e).__name__}: {e}",
            )
        except Exception as e:
            logger.exception(f"Unexpected push error for {subscription.endpoint_host}")
            return EndpointResult(
                endpoint_host=subscription.endpoint_host,
                success=False,
                error=f"{type(e).__name__}: {e}",
            )
        return EndpointResult(endpoint_host=subscription.endpoint_host, success=True)

    def fan_out(
        self,
        payload: NotificationPayload,
        subscriptions: list[SubscriptionInfo],
    ) -> DeliveryOutcome:
        """Send a payload to every subscription and join the sends.

        :param payload: Notification to deliver.
        :param subscriptions: Target endpoints.
        :returns: Per-endpoint tally, in subscription order.
        """
        if not subscriptions:
            return DeliveryOutcome(subscriptions=0)

        workers = min(self._max_workers, len(subscriptions))
        with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(lambda sub: self._send_one(sub, payload), subscriptions))

        return DeliveryOutcome(subscriptions=len(subscriptions), results=results)

    def dispatch(
        self,
        work_item: ReminderWorkItem,
        subscriptions: list[SubscriptionInfo],
    ) -> DeliveryOutcome:
        """Send a work item's notification to every subscription.

        :param work_item: Task or inbox aggregate to notify about.
        :param subscriptions: The owning user's endpoints.
        :returns: Per-endpoint tally. Empty when the user has no endpoints.
        """
        if not subscriptions:
            logger.info(f"User {work_item.user_id} has no push subscriptions, skipping send")
            return DeliveryOutcome(subscriptions=0)

        outcome = self.fan_out(build_payload(work_item, self._icon), subscriptions)
        logger.info(
            f"Dispatched {work_item.candidate_type.value} for user {work_item.user_id}: "
            f"{outcome.succeeded} succeeded, {outcome.failed} failed"
        )
        return outcome
