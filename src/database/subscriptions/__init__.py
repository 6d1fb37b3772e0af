"""Database models and operations for push subscriptions."""

from src.database.subscriptions.models import PushSubscription
from src.database.subscriptions.operations import get_subscriptions_for_user

__all__ = [
    "PushSubscription",
    "get_subscriptions_for_user",
]
