"""Dagster schedules for processing reminders."""

from dagster import ScheduleDefinition

from src.orchestration.reminders.jobs import process_reminders_job

# Process reminders every minute
process_reminders_schedule = ScheduleDefinition(
    job=process_reminders_job,
    cron_schedule="* * * * *",
    execution_timezone="UTC",
)
