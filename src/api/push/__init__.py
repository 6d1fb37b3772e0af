"""Push notification API."""

from src.api.push.endpoints import router

__all__ = ["router"]
