"""Reminder scheduling and push notification delivery."""

from src.reminders.base import ItemStore, PushTransport, SubscriptionStore
from src.reminders.committer import commit
from src.reminders.dispatcher import DeliveryDispatcher, build_payload
from src.reminders.eligibility import explain_eligibility, is_eligible, policy_for
from src.reminders.errors import (
    ConfigurationError,
    DeliveryError,
    ExpiredSubscriptionError,
    MalformedSubscriptionError,
    PushNetworkError,
    ReminderEngineError,
    TransientStoreError,
)
from src.reminders.models import (
    CandidateResult,
    DeliveryOutcome,
    EndpointResult,
    ItemSnapshot,
    NotificationPayload,
    PassReport,
    ReminderWorkItem,
    SubscriptionInfo,
)
from src.reminders.selector import SelectionResult, select_candidates
from src.reminders.service import ReminderEngine, send_test_notification

__all__ = [
    # Interfaces
    "ItemStore",
    "PushTransport",
    "SubscriptionStore",
    # Models
    "CandidateResult",
    "DeliveryOutcome",
    "EndpointResult",
    "ItemSnapshot",
    "NotificationPayload",
    "PassReport",
    "ReminderWorkItem",
    "SelectionResult",
    "SubscriptionInfo",
    # Errors
    "ConfigurationError",
    "DeliveryError",
    "ExpiredSubscriptionError",
    "MalformedSubscriptionError",
    "PushNetworkError",
    "ReminderEngineError",
    "TransientStoreError",
    # Engine
    "DeliveryDispatcher",
    "ReminderEngine",
    "build_payload",
    "commit",
    "explain_eligibility",
    "is_eligible",
    "policy_for",
    "select_candidates",
    "send_test_notification",
]
