"""Dagster jobs for processing reminders."""

from dagster import job

from src.orchestration.reminders.ops import process_reminders_op


@job(
    name="process_reminders_job",
    description="Send due task and inbox reminders (runs every minute).",
)
def process_reminders_job() -> None:
    """Process reminders job.

    Selects dated tasks, undated tasks and stale inbox items that are due,
    pushes notifications to every subscribed device and records the reminder.
    """
    process_reminders_op()
