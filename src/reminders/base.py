"""Abstract interfaces for the collaborators the reminder engine talks to.

The engine only depends on these, so the SQL stores and the Web Push
transport can be swapped for in-memory fakes in tests.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime
from uuid import UUID

from src.reminders.models import ItemSnapshot, NotificationPayload, SubscriptionInfo


class ItemStore(ABC):
    """Read and write access to user items.

    Implementations raise TransientStoreError on any read or write failure.
    """

    @abstractmethod
    def query_open_tasks_with_due(self, now: datetime) -> list[ItemSnapshot]:
        """Open tasks with a due_at whose notification moment has passed."""
        ...

    @abstractmethod
    def query_open_undated_tasks(self) -> list[ItemSnapshot]:
        """Open tasks without a due_at."""
        ...

    @abstractmethod
    def query_stale_inbox_items(self, threshold: datetime) -> list[ItemSnapshot]:
        """Open inbox items created at or before threshold."""
        ...

    @abstractmethod
    def update_reminder_state(
        self,
        item_ids: Sequence[UUID],
        sent_flag: bool,
        timestamp: datetime,
    ) -> None:
        """Durably record that a reminder fired for the given items."""
        ...


class SubscriptionStore(ABC):
    """Read access to push subscriptions."""

    @abstractmethod
    def get_subscriptions(self, user_id: UUID) -> list[SubscriptionInfo]:
        """All push endpoints registered by a user."""
        ...


class PushTransport(ABC):
    """Outbound push delivery to a single endpoint."""

    def check_configuration(self) -> None:
        """Raise ConfigurationError if the transport cannot send at all."""
        return

    @abstractmethod
    def send(self, subscription: SubscriptionInfo, payload: NotificationPayload) -> None:
        """Send one payload to one endpoint.

        :raises DeliveryError: If the endpoint does not accept the payload.
        """
        ...
