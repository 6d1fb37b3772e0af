"""Combine all dagster definitions."""

from src.orchestration.reminders.definitions import defs as reminders_defs

defs = reminders_defs
