"""Trigger endpoint for reminder passes."""

from src.api.cron.endpoints import router

__all__ = ["router"]
