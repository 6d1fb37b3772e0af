"""Pydantic models for push API endpoints."""

from uuid import UUID

from pydantic import BaseModel, Field

from src.reminders.models import EndpointResult


class PushTestRequest(BaseModel):
    """Request model for sending a test notification."""

    user_id: UUID = Field(..., description="User whose devices receive the test")


class PushTestResponse(BaseModel):
    """Response model for a test notification."""

    subscriptions: int = Field(..., description="Number of endpoints targeted")
    succeeded: int = Field(..., description="Endpoints that accepted the payload")
    results: list[EndpointResult] = Field(default_factory=list, description="Per-endpoint results")
