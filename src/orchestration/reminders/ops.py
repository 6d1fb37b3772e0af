"""Dagster ops for processing reminders."""

import logging

from dagster import Backoff, Failure, Jitter, OpExecutionContext, RetryPolicy, op

from src.reminders.models import PassReport
from src.reminders.runner import run_reminder_pass

logger = logging.getLogger(__name__)

# Maximum number of error messages to include in the log summary
MAX_ERRORS_IN_SUMMARY = 5

# Retry policy for reminder ops. A retried pass is safe: it takes the
# in-flight lease and only re-selects items that were not committed.
REMINDER_RETRY_POLICY = RetryPolicy(
    max_retries=1,
    delay=30,
    backoff=Backoff.EXPONENTIAL,
    jitter=Jitter.FULL,
)


def _log_errors(context: OpExecutionContext, report: PassReport) -> None:
    """Log a summary of pass-level and per-candidate errors.

    :param context: Dagster execution context.
    :param report: The pass report.
    """
    errors = list(report.errors)
    errors.extend(
        f"{detail.user_id}: {detail.error or detail.commit_error}"
        for detail in report.details
        if detail.error or detail.commit_error
    )
    if not errors:
        return

    summary = "\n".join(f"- {err}" for err in errors[:MAX_ERRORS_IN_SUMMARY])
    if len(errors) > MAX_ERRORS_IN_SUMMARY:
        summary += f"\n... and {len(errors) - MAX_ERRORS_IN_SUMMARY} more"
    context.log.warning(f"Reminder pass finished with {len(errors)} errors:\n{summary}")


@op(
    name="process_reminders",
    retry_policy=REMINDER_RETRY_POLICY,
    description="Select due reminders, send push notifications and record them.",
)
def process_reminders_op(context: OpExecutionContext) -> PassReport:
    """Run one reminder pass.

    :param context: Dagster execution context.
    :returns: The pass report.
    :raises Failure: If the push transport is not configured.
    """
    context.log.info("Starting reminder processing")
    report = run_reminder_pass()

    if report.fatal_error:
        context.log.error(f"Reminder pass aborted: {report.fatal_error}")
        raise Failure(
            description=f"Reminder pass aborted: {report.fatal_error}",
            allow_retries=False,
        )

    if report.skipped:
        context.log.info("Reminder pass skipped: another pass is in flight")
        return report

    context.log.info(
        f"Reminder processing complete: "
        f"processed={report.processed}, "
        f"delivered={report.delivered}, "
        f"no_subscriptions={report.skipped_no_subscriptions}, "
        f"partial={report.partial_failures}, "
        f"failed={report.total_failures}, "
        f"commit_failures={report.commit_failures}"
    )
    _log_errors(context, report)

    return report
