"""API module for the reminder engine."""

from src.api.app import app

__all__ = ["app"]
