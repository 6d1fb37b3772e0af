"""Dagster job and schedule that drive reminder passes."""

from src.orchestration.reminders.definitions import defs
from src.orchestration.reminders.jobs import process_reminders_job
from src.orchestration.reminders.ops import process_reminders_op
from src.orchestration.reminders.schedules import process_reminders_schedule

__all__ = [
    "defs",
    "process_reminders_job",
    "process_reminders_op",
    "process_reminders_schedule",
]
