"""Tests for push subscription database operations."""

import unittest
from unittest.mock import MagicMock
from uuid import uuid4

from src.database.subscriptions.models import PushSubscription
from src.database.subscriptions.operations import get_subscriptions_for_user


class TestGetSubscriptionsForUser(unittest.TestCase):
    """Tests for get_subscriptions_for_user operation."""

    def test_returns_user_subscriptions(self) -> None:
        """Test that a user's subscriptions are returned."""
        mock_session = MagicMock()
        subscriptions = [MagicMock(spec=PushSubscription), MagicMock(spec=PushSubscription)]
        mock_session.query.return_value.filter.return_value.order_by.return_value.all.return_value = (
            subscriptions
        )

        result = get_subscriptions_for_user(mock_session, uuid4())

        self.assertEqual(result, subscriptions)
        mock_session.query.assert_called_once_with(PushSubscription)

    def test_returns_empty_list_for_unknown_user(self) -> None:
        """Test that a user without devices gets an empty list."""
        mock_session = MagicMock()
        mock_session.query.return_value.filter.return_value.order_by.return_value.all.return_value = []

        self.assertEqual(get_subscriptions_for_user(mock_session, uuid4()), [])


if __name__ == "__main__":
    unittest.main()
