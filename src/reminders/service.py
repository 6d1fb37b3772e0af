"""Reminder engine: select, dispatch and commit in one pass."""

import concurrent.futures
import logging
from datetime import UTC, datetime
from uuid import UUID

from src.reminders.base import ItemStore, PushTransport, SubscriptionStore
from src.reminders.committer import commit
from src.reminders.dispatcher import DEFAULT_ICON, DeliveryDispatcher
from src.reminders.errors import ConfigurationError, TransientStoreError
from src.reminders.models import (
    CandidateResult,
    DeliveryOutcome,
    NotificationPayload,
    PassReport,
    ReminderWorkItem,
    SubscriptionInfo,
)
from src.reminders.selector import select_candidates

logger = logging.getLogger(__name__)

TEST_PAYLOAD_TITLE = "Test notification"
TEST_PAYLOAD_BODY = "This is a test message from the server!"


def _candidate_result(
    work_item: ReminderWorkItem,
    outcome: DeliveryOutcome | None = None,
    *,
    committed: bool = False,
    error: str | None = None,
    commit_error: str | None = None,
) -> CandidateResult:
    outcome = outcome or DeliveryOutcome()
    return CandidateResult(
        type=work_item.candidate_type,
        policy=work_item.policy,
        user_id=work_item.user_id,
        item_ids=work_item.item_ids,
        count=len(work_item.items),
        subscriptions=outcome.subscriptions,
        succeeded=outcome.succeeded,
        failed=outcome.failed,
        committed=committed,
        error=error,
        commit_error=commit_error,
    )


class ReminderEngine:
    """Runs reminder passes against a set of collaborators.

    Holds no state between passes; everything a pass needs to know about
    earlier reminders is read from the item store.
    """

    def __init__(
        self,
        item_store: ItemStore,
        subscription_store: SubscriptionStore,
        transport: PushTransport,
        *,
        icon: str = DEFAULT_ICON,
        endpoint_concurrency: int = 8,
        candidate_concurrency: int = 4,
    ) -> None:
        """Initialise the engine.

        :param item_store: Source of candidates and target of commits.
        :param subscription_store: Source of push endpoints.
        :param transport: Push transport.
        :param icon: Icon reference for payloads.
        :param endpoint_concurrency: Maximum parallel sends per candidate.
        :param candidate_concurrency: Maximum candidates dispatched in parallel.
        """
        self._items = item_store
        self._subscriptions = subscription_store
        self._transport = transport
        self._dispatcher = DeliveryDispatcher(
            transport,
            icon=icon,
            max_workers=endpoint_concurrency,
        )
        self._candidate_concurrency = candidate_concurrency

    def run_pass(self, now: datetime | None = None) -> PassReport:
        """Run one complete select, dispatch and commit pass.

        Subscription reads and commits run on the calling thread; only the
        push sends run on worker threads. Each candidate is committed as soon
        as its dispatch finishes.

        :param now: Pass time (defaults to now). Must be timezone-aware.
        :returns: Report of the pass.
        :raises ValueError: If now is not timezone-aware.
        """
        if now is None:
            now = datetime.now(UTC)
        if now.tzinfo is None:
            raise ValueError("Pass time must be timezone-aware")

        logger.info(f"Starting reminder pass at {now.isoformat()}")
        report = PassReport(started_at=now)

        try:
            self._transport.check_configuration()
        except ConfigurationError as e:
            logger.error(f"Reminder pass aborted: {e}")
            report.fatal_error = str(e)
            report.finished_at = datetime.now(UTC)
            return report

        selection = select_candidates(self._items, now)
        report.errors.extend(selection.errors)
        report.candidates_considered = len(selection.work_items)

        results: dict[int, CandidateResult] = {}
        pending: list[tuple[int, ReminderWorkItem, list[SubscriptionInfo]]] = []

        for index, work_item in enumerate(selection.work_items):
            try:
                subscriptions = self._subscriptions.get_subscriptions(work_item.user_id)
            except TransientStoreError as e:
                logger.error(f"Skipping candidate for user {work_item.user_id}: {e}")
                results[index] = _candidate_result(work_item, error=str(e))
                continue
            pending.append((index, work_item, subscriptions))

        if pending:
            workers = min(self._candidate_concurrency, len(pending))
            with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
                futures = {
                    executor.submit(self._dispatcher.dispatch, work_item, subscriptions): (
                        index,
                        work_item,
                        subscriptions,
                    )
                    for index, work_item, subscriptions in pending
                }
                for future in concurrent.futures.as_completed(futures):
                    index, work_item, subscriptions = futures[future]
                    results[index] = self._finish_candidate(future, work_item, subscriptions, now)

        for index in sorted(results):
            report.record(results[index])

        report.finished_at = datetime.now(UTC)
        logger.info(
            f"Reminder pass complete: "
            f"candidates={report.candidates_considered}, "
            f"delivered={report.delivered}, "
            f"no_subscriptions={report.skipped_no_subscriptions}, "
            f"partial={report.partial_failures}, "
            f"failed={report.total_failures}, "
            f"commit_failures={report.commit_failures}, "
            f"errors={len(report.errors)}"
        )
        return report

    def _finish_candidate(
        self,
        future: concurrent.futures.Future[DeliveryOutcome],
        work_item: ReminderWorkItem,
        subscriptions: list[SubscriptionInfo],
        now: datetime,
    ) -> CandidateResult:
        """Collect a candidate's dispatch outcome and commit its state.

        :param future: The finished dispatch.
        :param work_item: The dispatched work item.
        :param subscriptions: Endpoints the dispatch targeted.
        :param now: Pass time.
        :returns: The candidate's report line.
        """
        error = None
        try:
            outcome = future.result()
        except Exception as e:
            logger.exception(f"Dispatch failed for user {work_item.user_id}")
            error = f"Dispatch failed: {e}"
            outcome = DeliveryOutcome(subscriptions=len(subscriptions))

        try:
            commit(self._items, work_item, now)
        except TransientStoreError as e:
            logger.error(f"Commit failed for items {work_item.item_ids}: {e}")
            return _candidate_result(work_item, outcome, error=error, commit_error=str(e))
        except Exception as e:
            logger.exception(f"Unexpected commit error for items {work_item.item_ids}")
            return _candidate_result(
                work_item,
                outcome,
                error=error,
                commit_error=f"{type(e).__name__}: {e}",
            )

        return _candidate_result(work_item, outcome, committed=True, error=error)


def send_test_notification(
    subscription_store: SubscriptionStore,
    transport: PushTransport,
    user_id: UUID,
    icon: str = DEFAULT_ICON,
) -> DeliveryOutcome:
    """Send a fixed test message to every endpoint a user owns.

    No reminder state is read or written.

    :param subscription_store: Source of push endpoints.
    :param transport: Push transport.
    :param user_id: Target user.
    :param icon: Icon reference.
    :returns: Per-endpoint tally; empty when the user has no endpoints.
    :raises ConfigurationError: If the transport is not configured.
    :raises TransientStoreError: If the subscriptions cannot be read.
    """
    transport.check_configuration()
    subscriptions = subscription_store.get_subscriptions(user_id)
    if not subscriptions:
        logger.info(f"No push subscriptions for user {user_id}")
        return DeliveryOutcome(subscriptions=0)

    payload = NotificationPayload(title=TEST_PAYLOAD_TITLE, body=TEST_PAYLOAD_BODY, icon=icon)
    outcome = DeliveryDispatcher(transport, icon=icon).fan_out(payload, subscriptions)
    logger.info(
        f"Test notification for user {user_id}: "
        f"{outcome.succeeded} succeeded, {outcome.failed} failed"
    )
    return outcome
