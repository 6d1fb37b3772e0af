"""Pydantic models for reminder selection, delivery and reporting."""

from datetime import datetime
from urllib.parse import urlparse
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, computed_field

from src.database.items.models import ItemKind, ItemStatus
from src.enums import CandidateType, ReminderPolicy


class ItemSnapshot(BaseModel):
    """Immutable view of an item as read at the start of a pass."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: UUID = Field(..., description="Item ID")
    user_id: UUID = Field(..., description="Owner ID")
    content: str = Field(..., description="Item text")
    kind: ItemKind = Field(..., description="Item kind")
    status: ItemStatus = Field(..., description="Item status")
    due_at: datetime | None = Field(None, description="When the item is due")
    notify_at: datetime | None = Field(None, description="Explicit notification time")
    created_at: datetime = Field(..., description="When the item was created")
    reminder_sent: bool = Field(False, description="Whether a reminder has fired")
    last_reminded_at: datetime | None = Field(None, description="Most recent reminder")


class SubscriptionInfo(BaseModel):
    """Immutable view of a push subscription."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    endpoint: str = Field(..., description="Push service endpoint URL")
    p256dh: str = Field(..., description="Client public key")
    auth: str = Field(..., description="Client auth secret")

    @property
    def endpoint_host(self) -> str:
        """Host part of the endpoint, safe to log."""
        return urlparse(self.endpoint).netloc or self.endpoint

    def to_webpush(self) -> dict[str, object]:
        """Build the subscription_info mapping expected by pywebpush."""
        return {
            "endpoint": self.endpoint,
            "keys": {"p256dh": self.p256dh, "auth": self.auth},
        }


class ReminderWorkItem(BaseModel):
    """One unit of delivery work: a single task, or a user's stale inbox items."""

    model_config = ConfigDict(frozen=True)

    policy: ReminderPolicy = Field(..., description="Policy that selected the work")
    user_id: UUID = Field(..., description="Owner of every item in the work item")
    items: tuple[ItemSnapshot, ...] = Field(..., min_length=1, description="Selected items")

    @property
    def candidate_type(self) -> CandidateType:
        """Whether this is a single task or an inbox aggregate."""
        if self.policy == ReminderPolicy.STALE_INBOX:
            return CandidateType.INBOX_NUDGE
        return CandidateType.TASK

    @property
    def item_ids(self) -> list[UUID]:
        """IDs of the items covered by this work item."""
        return [item.id for item in self.items]


class NotificationPayload(BaseModel):
    """JSON body delivered to the service worker."""

    title: str = Field(..., description="Notification title")
    body: str = Field(..., description="Notification body")
    icon: str = Field(..., description="Icon reference")


class EndpointResult(BaseModel):
    """Outcome of sending to one subscription endpoint."""

    endpoint_host: str = Field(..., description="Host of the endpoint")
    success: bool = Field(..., description="Whether the push service accepted the payload")
    error: str | None = Field(None, description="Failure description")


class DeliveryOutcome(BaseModel):
    """Per-endpoint tally for one work item. Informational only."""

    subscriptions: int = Field(0, description="Number of endpoints targeted")
    results: list[EndpointResult] = Field(default_factory=list, description="Per-endpoint results")

    @property
    def succeeded(self) -> int:
        """Number of endpoints that accepted the payload."""
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        """Number of endpoints that failed."""
        return sum(1 for r in self.results if not r.success)

    @property
    def delivered(self) -> bool:
        """At least one endpoint accepted the payload."""
        return self.succeeded > 0

    @property
    def skipped(self) -> bool:
        """The user has no subscriptions, so nothing was sent."""
        return self.subscriptions == 0


class CandidateResult(BaseModel):
    """Report line for one work item."""

    type: CandidateType = Field(..., description="Task or inbox nudge")
    policy: ReminderPolicy = Field(..., description="Policy that selected the work")
    user_id: UUID = Field(..., description="Owner ID")
    item_ids: list[UUID] = Field(default_factory=list, description="Items covered")
    count: int = Field(..., description="Number of items covered")
    subscriptions: int = Field(0, description="Endpoints targeted")
    succeeded: int = Field(0, description="Endpoints that accepted the payload")
    failed: int = Field(0, description="Endpoints that failed")
    committed: bool = Field(False, description="Whether reminder state was written")
    error: str | None = Field(None, description="Lookup or dispatch error, if any")
    commit_error: str | None = Field(None, description="State write error, if any")


class PassReport(BaseModel):
    """Summary of one pass, returned by the trigger surface."""

    started_at: datetime = Field(..., description="When the pass started")
    finished_at: datetime | None = Field(None, description="When the pass finished")
    skipped: bool = Field(False, description="Another pass held the guard")
    fatal_error: str | None = Field(None, description="Error that aborted the pass")
    candidates_considered: int = Field(0, description="Work items selected")
    delivered: int = Field(0, description="Work items accepted by >=1 endpoint")
    skipped_no_subscriptions: int = Field(0, description="Work items for users without endpoints")
    partial_failures: int = Field(0, description="Work items where some endpoints failed")
    total_failures: int = Field(0, description="Work items that reached no endpoint successfully")
    commit_failures: int = Field(0, description="Work items whose state write failed")
    endpoint_successes: int = Field(0, description="Endpoint sends accepted")
    endpoint_failures: int = Field(0, description="Endpoint sends failed")
    errors: list[str] = Field(default_factory=list, description="Pass-level error messages")
    details: list[CandidateResult] = Field(default_factory=list, description="Per-candidate lines")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def processed(self) -> int:
        """Number of candidates handled in this pass."""
        return len(self.details)

    def record(self, result: CandidateResult) -> None:
        """Fold one candidate result into the totals.

        :param result: The candidate's report line.
        """
        self.details.append(result)
        self.endpoint_successes += result.succeeded
        self.endpoint_failures += result.failed

        if result.succeeded > 0:
            self.delivered += 1
            if result.failed > 0:
                self.partial_failures += 1
        elif result.failed > 0 or result.error is not None:
            # Lookup and dispatch errors reach no endpoint at all
            self.total_failures += 1
        elif result.subscriptions == 0:
            self.skipped_no_subscriptions += 1

        if result.commit_error is not None:
            self.commit_failures += 1
