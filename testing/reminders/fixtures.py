"""In-memory collaborators and factories for reminder engine tests."""

import threading
from collections.abc import Sequence
from datetime import UTC, datetime
from uuid import UUID, uuid4

from src.database.items.models import ItemKind, ItemStatus
from src.reminders.base import ItemStore, PushTransport, SubscriptionStore
from src.reminders.errors import ConfigurationError, PushNetworkError, TransientStoreError
from src.reminders.models import ItemSnapshot, NotificationPayload, SubscriptionInfo

NOW = datetime(2025, 3, 10, 12, 0, 0, tzinfo=UTC)


def make_item(**overrides: object) -> ItemSnapshot:
    """Build an open task snapshot, overriding any field."""
    fields: dict[str, object] = {
        "id": uuid4(),
        "user_id": uuid4(),
        "content": "Buy milk",
        "kind": ItemKind.TASK,
        "status": ItemStatus.OPEN,
        "due_at": None,
        "notify_at": None,
        "created_at": NOW,
        "reminder_sent": False,
        "last_reminded_at": None,
    }
    fields.update(overrides)
    return ItemSnapshot(**fields)


def make_subscription(name: str = "device") -> SubscriptionInfo:
    """Build a subscription whose endpoint host contains name."""
    return SubscriptionInfo(
        endpoint=f"https://{name}.push.example.com/send/{uuid4().hex}",
        p256dh="BNcRdreALRFXTkOOUHK1EtK2wtaz5Ry4YfYCA_0QTpQtUbVlUls0VJXg7A8u-Ts1XbjhazAkj7I99e8QcYP7DkM",
        auth="tBHItJI5svbpez7KI4CCXg",
    )


class FakeItemStore(ItemStore):
    """Item store over a dict, filtering the way the SQL queries do."""

    def __init__(self, items: Sequence[ItemSnapshot] = ()) -> None:
        self.items: dict[UUID, ItemSnapshot] = {item.id: item for item in items}
        self.failing_operations: set[str] = set()
        self.failing_update_ids: set[UUID] = set()
        self.updates: list[tuple[list[UUID], bool, datetime]] = []
        self.undated_override: list[ItemSnapshot] | None = None

    def add(self, item: ItemSnapshot) -> ItemSnapshot:
        self.items[item.id] = item
        return item

    def _check(self, operation: str) -> None:
        if operation in self.failing_operations:
            raise TransientStoreError(operation, "connection reset")

    def query_open_tasks_with_due(self, now: datetime) -> list[ItemSnapshot]:
        self._check("query_open_tasks_with_due")
        return [
            item
            for item in self.items.values()
            if item.kind == ItemKind.TASK
            and item.status == ItemStatus.OPEN
            and item.due_at is not None
            and not item.reminder_sent
            and (item.notify_at or item.due_at) <= now
        ]

    def query_open_undated_tasks(self) -> list[ItemSnapshot]:
        self._check("query_open_undated_tasks")
        if self.undated_override is not None:
            return list(self.undated_override)
        return [
            item
            for item in self.items.values()
            if item.kind == ItemKind.TASK and item.status == ItemStatus.OPEN and item.due_at is None
        ]

    def query_stale_inbox_items(self, threshold: datetime) -> list[ItemSnapshot]:
        self._check("query_stale_inbox_items")
        return [
            item
            for item in self.items.values()
            if item.kind == ItemKind.INBOX
            and item.status == ItemStatus.OPEN
            and item.created_at <= threshold
        ]

    def update_reminder_state(
        self,
        item_ids: Sequence[UUID],
        sent_flag: bool,
        timestamp: datetime,
    ) -> None:
        self._check("update_reminder_state")
        if self.failing_update_ids.intersection(item_ids):
            raise TransientStoreError("update_reminder_state", "deadlock detected")

        self.updates.append((list(item_ids), sent_flag, timestamp))
        for item_id in item_ids:
            item = self.items[item_id]
            last = item.last_reminded_at
            self.items[item_id] = item.model_copy(
                update={
                    "reminder_sent": sent_flag,
                    "last_reminded_at": timestamp if last is None or last < timestamp else last,
                }
            )


class FakeSubscriptionStore(SubscriptionStore):
    """Subscription store over a dict keyed by user."""

    def __init__(self, subscriptions: dict[UUID, list[SubscriptionInfo]] | None = None) -> None:
        self.subscriptions = subscriptions or {}
        self.failing_users: set[UUID] = set()

    def get_subscriptions(self, user_id: UUID) -> list[SubscriptionInfo]:
        if user_id in self.failing_users:
            raise TransientStoreError("get_subscriptions", "connection reset")
        return list(self.subscriptions.get(user_id, []))


class FakeTransport(PushTransport):
    """Transport that records sends and fails for chosen endpoints."""

    def __init__(self, failing_endpoints: set[str] | None = None, configured: bool = True) -> None:
        self.failing_endpoints = failing_endpoints or set()
        self.configured = configured
        self.sent: list[tuple[SubscriptionInfo, NotificationPayload]] = []
        self._lock = threading.Lock()

    def check_configuration(self) -> None:
        if not self.configured:
            raise ConfigurationError("VAPID private key not configured")

    def send(self, subscription: SubscriptionInfo, payload: NotificationPayload) -> None:
        if subscription.endpoint in self.failing_endpoints:
            raise PushNetworkError(subscription.endpoint, "connection refused")
        with self._lock:
            self.sent.append((subscription, payload))
