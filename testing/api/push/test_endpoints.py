"""Tests for push notification endpoints."""

import os
import unittest
from unittest.mock import MagicMock, patch
from uuid import uuid4

from fastapi.testclient import TestClient

from src.api.app import app
from src.reminders.errors import ConfigurationError, TransientStoreError
from src.reminders.models import DeliveryOutcome, EndpointResult

AUTH = {"Authorization": "Bearer test-cron-secret"}


@patch.dict(os.environ, {"CRON_SECRET": "test-cron-secret"})
class TestSendTestPush(unittest.TestCase):
    """Tests for POST /push/test endpoint."""

    def setUp(self) -> None:
        """Set up test client and a mocked session."""
        self.client = TestClient(app)
        self.session_patcher = patch("src.api.push.endpoints.get_session")
        mock_get_session = self.session_patcher.start()
        mock_get_session.return_value.__enter__ = MagicMock(return_value=MagicMock())
        mock_get_session.return_value.__exit__ = MagicMock(return_value=False)

    def tearDown(self) -> None:
        """Stop patches."""
        self.session_patcher.stop()

    @patch("src.api.push.endpoints.send_test_notification")
    def test_returns_per_endpoint_results(self, mock_send: MagicMock) -> None:
        """Test that the fan-out tally is returned."""
        mock_send.return_value = DeliveryOutcome(
            subscriptions=2,
            results=[
                EndpointResult(endpoint_host="fcm.googleapis.com", success=True),
                EndpointResult(
                    endpoint_host="updates.push.services.mozilla.com",
                    success=False,
                    error="ExpiredSubscriptionError: subscription expired",
                ),
            ],
        )

        response = self.client.post("/push/test", json={"user_id": str(uuid4())}, headers=AUTH)

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["subscriptions"], 2)
        self.assertEqual(data["succeeded"], 1)
        self.assertEqual(len(data["results"]), 2)

    @patch("src.api.push.endpoints.send_test_notification")
    def test_no_subscriptions_returns_404(self, mock_send: MagicMock) -> None:
        """Test that a user without devices gets 404."""
        mock_send.return_value = DeliveryOutcome(subscriptions=0)

        response = self.client.post("/push/test", json={"user_id": str(uuid4())}, headers=AUTH)

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["detail"], "No subscriptions found")

    @patch("src.api.push.endpoints.send_test_notification")
    def test_configuration_error_returns_500(self, mock_send: MagicMock) -> None:
        """Test that missing VAPID keys are reported as a server error."""
        mock_send.side_effect = ConfigurationError("VAPID private key not configured")

        response = self.client.post("/push/test", json={"user_id": str(uuid4())}, headers=AUTH)

        self.assertEqual(response.status_code, 500)

    @patch("src.api.push.endpoints.send_test_notification")
    def test_store_error_returns_503(self, mock_send: MagicMock) -> None:
        """Test that a subscription lookup failure returns 503."""
        mock_send.side_effect = TransientStoreError("get_subscriptions", "connection reset")

        response = self.client.post("/push/test", json={"user_id": str(uuid4())}, headers=AUTH)

        self.assertEqual(response.status_code, 503)

    def test_invalid_user_id_returns_422(self) -> None:
        """Test that a malformed user id is rejected."""
        response = self.client.post("/push/test", json={"user_id": "not-a-uuid"}, headers=AUTH)

        self.assertEqual(response.status_code, 422)


if __name__ == "__main__":
    unittest.main()
