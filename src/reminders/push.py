"""Web Push transport using VAPID-signed requests."""

import logging

from pywebpush import WebPushException, webpush
from requests.exceptions import RequestException

from src.reminders.base import PushTransport
from src.reminders.config import ReminderSettings
from src.reminders.errors import (
    ConfigurationError,
    ExpiredSubscriptionError,
    MalformedSubscriptionError,
    PushNetworkError,
)
from src.reminders.models import NotificationPayload, SubscriptionInfo

logger = logging.getLogger(__name__)

# Push services answer these when a subscription no longer exists
GONE_STATUS_CODES = frozenset({404, 410})


class WebPushTransport(PushTransport):
    """Sends encrypted notifications to browser push services."""

    def __init__(
        self,
        *,
        vapid_private_key: str | None,
        vapid_subject: str,
        ttl_seconds: int = 86400,
        timeout_seconds: int = 10,
    ) -> None:
        """Initialise the transport.

        :param vapid_private_key: VAPID private key. Sending fails without it.
        :param vapid_subject: Contact URI for the VAPID "sub" claim.
        :param ttl_seconds: How long the push service may queue the message.
        :param timeout_seconds: HTTP timeout per send.
        """
        self._vapid_private_key = vapid_private_key
        self._vapid_subject = vapid_subject
        self._ttl_seconds = ttl_seconds
        self._timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(cls, settings: ReminderSettings) -> "WebPushTransport":
        """Build a transport from reminder settings.

        :param settings: Reminder settings.
        :returns: Configured transport.
        """
        return cls(
            vapid_private_key=settings.vapid_private_key,
            vapid_subject=settings.vapid_subject,
            ttl_seconds=settings.push_ttl_seconds,
            timeout_seconds=settings.push_timeout_seconds,
        )

    def check_configuration(self) -> None:
        """Ensure VAPID credentials are present.

        :raises ConfigurationError: If the private key or subject is missing.
        """
        if not self._vapid_private_key:
            raise ConfigurationError(
                "VAPID private key not configured. Set REMINDER_VAPID_PRIVATE_KEY."
            )
        if not self._vapid_subject:
            raise ConfigurationError("VAPID subject not configured. Set REMINDER_VAPID_SUBJECT.")

    def send(self, subscription: SubscriptionInfo, payload: NotificationPayload) -> None:
        """Send one payload to one endpoint.

        :param subscription: Target endpoint and keys.
        :param payload: Notification to deliver.
        :raises ExpiredSubscriptionError: If the push service reports 404/410.
        :raises MalformedSubscriptionError: If the keys cannot be used.
        :raises PushNetworkError: On connection failures or other HTTP errors.
        """
        self.check_configuration()

        try:
            webpush(
                subscription_info=subscription.to_webpush(),
                data=payload.model_dump_json(),
                vapid_private_key=self._vapid_private_key,
                # pywebpush adds aud/exp to the claims dict, so pass a fresh one
                vapid_claims={"sub": self._vapid_subject},
                ttl=self._ttl_seconds,
                timeout=self._timeout_seconds,
            )
        except WebPushException as e:
            status_code = e.response.status_code if e.response is not None else None
            if status_code in GONE_STATUS_CODES:
                raise ExpiredSubscriptionError(
                    subscription.endpoint, "subscription expired", status_code
                ) from e
            if status_code is None:
                raise MalformedSubscriptionError(subscription.endpoint, str(e)) from e
            raise PushNetworkError(
                subscription.endpoint, f"push service returned {status_code}", status_code
            ) from e
        except RequestException as e:
            raise PushNetworkError(subscription.endpoint, str(e)) from e
        except (ValueError, TypeError) as e:
            raise MalformedSubscriptionError(subscription.endpoint, str(e)) from e

        logger.debug(f"Push accepted by {subscription.endpoint_host}")
