"""API endpoints for push notifications."""

import logging

from fastapi import APIRouter, HTTPException, status

from src.api.push.models import PushTestRequest, PushTestResponse
from src.database.connection import get_session
from src.reminders.config import get_reminder_settings
from src.reminders.errors import ConfigurationError, TransientStoreError
from src.reminders.push import WebPushTransport
from src.reminders.service import send_test_notification
from src.reminders.stores import SqlSubscriptionStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/push", tags=["Push"])


@router.post(
    "/test",
    response_model=PushTestResponse,
    summary="Send a test notification",
)
def send_test_push(request: PushTestRequest) -> PushTestResponse:
    """Send a test notification to every device a user has subscribed."""
    settings = get_reminder_settings()
    transport = WebPushTransport.from_settings(settings)

    try:
        with get_session() as session:
            outcome = send_test_notification(
                SqlSubscriptionStore(session),
                transport,
                request.user_id,
                icon=settings.icon,
            )
    except ConfigurationError as e:
        logger.error(f"Test push failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        ) from e
    except TransientStoreError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e),
        ) from e

    if outcome.skipped:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No subscriptions found",
        )

    return PushTestResponse(
        subscriptions=outcome.subscriptions,
        succeeded=outcome.succeeded,
        results=outcome.results,
    )
