"""Tests for the Web Push transport."""

import json
import unittest
from unittest.mock import MagicMock, patch

from pywebpush import WebPushException
from requests.exceptions import ConnectionError as RequestsConnectionError

from src.reminders.config import ReminderSettings
from src.reminders.errors import (
    ConfigurationError,
    ExpiredSubscriptionError,
    MalformedSubscriptionError,
    PushNetworkError,
)
from src.reminders.models import NotificationPayload
from src.reminders.push import WebPushTransport
from testing.reminders.fixtures import make_subscription


def _response(status_code: int) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    return response


class TestWebPushTransport(unittest.TestCase):
    """Tests for WebPushTransport class."""

    def setUp(self) -> None:
        """Set up a configured transport."""
        self.transport = WebPushTransport(
            vapid_private_key="test-private-key",
            vapid_subject="mailto:test@example.com",
            ttl_seconds=3600,
            timeout_seconds=5,
        )
        self.subscription = make_subscription("fcm")
        self.payload = NotificationPayload(title="Hi", body="There", icon="/icon.svg")

    @patch("src.reminders.push.webpush")
    def test_send_calls_webpush(self, mock_webpush: MagicMock) -> None:
        """Test that send passes keys, claims and payload to pywebpush."""
        self.transport.send(self.subscription, self.payload)

        kwargs = mock_webpush.call_args.kwargs
        self.assertEqual(
            kwargs["subscription_info"],
            {
                "endpoint": self.subscription.endpoint,
                "keys": {"p256dh": self.subscription.p256dh, "auth": self.subscription.auth},
            },
        )
        self.assertEqual(
            json.loads(kwargs["data"]), {"title": "Hi", "body": "There", "icon": "/icon.svg"}
        )
        self.assertEqual(kwargs["vapid_private_key"], "test-private-key")
        self.assertEqual(kwargs["vapid_claims"], {"sub": "mailto:test@example.com"})
        self.assertEqual(kwargs["ttl"], 3600)
        self.assertEqual(kwargs["timeout"], 5)

    @patch("src.reminders.push.webpush")
    def test_each_send_gets_fresh_claims(self, mock_webpush: MagicMock) -> None:
        """Test that claims mutated by one send do not leak into the next."""

        def mutate_claims(**kwargs: object) -> None:
            kwargs["vapid_claims"]["aud"] = "https://fcm.push.example.com"

        mock_webpush.side_effect = mutate_claims

        self.transport.send(self.subscription, self.payload)
        self.transport.send(self.subscription, self.payload)

        self.assertEqual(
            mock_webpush.call_args.kwargs["vapid_claims"]["sub"], "mailto:test@example.com"
        )
        self.assertIsNot(
            mock_webpush.call_args_list[0].kwargs["vapid_claims"],
            mock_webpush.call_args_list[1].kwargs["vapid_claims"],
        )

    @patch("src.reminders.push.webpush")
    def test_gone_maps_to_expired(self, mock_webpush: MagicMock) -> None:
        """Test that 404 and 410 become ExpiredSubscriptionError."""
        for status_code in (404, 410):
            mock_webpush.side_effect = WebPushException("gone", response=_response(status_code))

            with self.assertRaises(ExpiredSubscriptionError) as context:
                self.transport.send(self.subscription, self.payload)

            self.assertEqual(context.exception.status_code, status_code)
            self.assertEqual(context.exception.endpoint_host, self.subscription.endpoint_host)

    @patch("src.reminders.push.webpush")
    def test_other_status_maps_to_network_error(self, mock_webpush: MagicMock) -> None:
        """Test that other push service errors become PushNetworkError."""
        mock_webpush.side_effect = WebPushException("throttled", response=_response(429))

        with self.assertRaises(PushNetworkError) as context:
            self.transport.send(self.subscription, self.payload)

        self.assertEqual(context.exception.status_code, 429)

    @patch("src.reminders.push.webpush")
    def test_exception_without_response_maps_to_malformed(self, mock_webpush: MagicMock) -> None:
        """Test that pywebpush errors raised before sending are malformed subscriptions."""
        mock_webpush.side_effect = WebPushException("bad key")

        with self.assertRaises(MalformedSubscriptionError):
            self.transport.send(self.subscription, self.payload)

    @patch("src.reminders.push.webpush")
    def test_connection_error_maps_to_network_error(self, mock_webpush: MagicMock) -> None:
        """Test that connection failures become PushNetworkError."""
        mock_webpush.side_effect = RequestsConnectionError("connection refused")

        with self.assertRaises(PushNetworkError) as context:
            self.transport.send(self.subscription, self.payload)

        self.assertIsNone(context.exception.status_code)

    @patch("src.reminders.push.webpush")
    def test_value_error_maps_to_malformed(self, mock_webpush: MagicMock) -> None:
        """Test that undecodable keys become MalformedSubscriptionError."""
        mock_webpush.side_effect = ValueError("Could not deserialize key data")

        with self.assertRaises(MalformedSubscriptionError):
            self.transport.send(self.subscription, self.payload)

    @patch("src.reminders.push.webpush")
    def test_missing_private_key_raises_configuration_error(
        self, mock_webpush: MagicMock
    ) -> None:
        """Test that sending without a key fails before any request."""
        transport = WebPushTransport(vapid_private_key=None, vapid_subject="mailto:a@b.c")

        with self.assertRaises(ConfigurationError):
            transport.send(self.subscription, self.payload)

        mock_webpush.assert_not_called()

    def test_check_configuration_requires_subject(self) -> None:
        """Test that an empty subject is a configuration error."""
        transport = WebPushTransport(vapid_private_key="key", vapid_subject="")

        with self.assertRaises(ConfigurationError):
            transport.check_configuration()

    def test_from_settings(self) -> None:
        """Test building the transport from settings."""
        settings = ReminderSettings(
            vapid_private_key="key",
            vapid_subject="mailto:ops@example.com",
            push_ttl_seconds=60,
            push_timeout_seconds=3,
        )

        transport = WebPushTransport.from_settings(settings)

        transport.check_configuration()
        self.assertEqual(transport._ttl_seconds, 60)
        self.assertEqual(transport._timeout_seconds, 3)


if __name__ == "__main__":
    unittest.main()
