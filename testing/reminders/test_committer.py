"""Tests for reminder state commits."""

import unittest
from datetime import timedelta
from uuid import uuid4

from src.database.items.models import ItemKind
from src.enums import ReminderPolicy
from src.reminders.committer import commit
from src.reminders.errors import TransientStoreError
from src.reminders.models import ReminderWorkItem
from testing.reminders.fixtures import NOW, FakeItemStore, make_item


class TestCommit(unittest.TestCase):
    """Tests for commit function."""

    def test_marks_every_item(self) -> None:
        """Test that all items in an inbox nudge are marked together."""
        user_id = uuid4()
        items = tuple(
            make_item(user_id=user_id, kind=ItemKind.INBOX, created_at=NOW - timedelta(hours=3))
            for _ in range(2)
        )
        store = FakeItemStore(items)
        work_item = ReminderWorkItem(
            policy=ReminderPolicy.STALE_INBOX, user_id=user_id, items=items
        )

        commit(store, work_item, NOW)

        self.assertEqual(store.updates, [([i.id for i in items], True, NOW)])
        for item in items:
            self.assertTrue(store.items[item.id].reminder_sent)
            self.assertEqual(store.items[item.id].last_reminded_at, NOW)

    def test_last_reminded_at_never_moves_backwards(self) -> None:
        """Test that an older pass time does not overwrite a newer one."""
        later = NOW + timedelta(minutes=5)
        item = make_item(last_reminded_at=later)
        store = FakeItemStore([item])
        work_item = ReminderWorkItem(
            policy=ReminderPolicy.UNDATED_TASK, user_id=item.user_id, items=(item,)
        )

        commit(store, work_item, NOW)

        self.assertEqual(store.items[item.id].last_reminded_at, later)

    def test_failure_propagates(self) -> None:
        """Test that a store failure is raised to the caller."""
        item = make_item()
        store = FakeItemStore([item])
        store.failing_update_ids.add(item.id)
        work_item = ReminderWorkItem(
            policy=ReminderPolicy.UNDATED_TASK, user_id=item.user_id, items=(item,)
        )

        with self.assertRaises(TransientStoreError):
            commit(store, work_item, NOW)

        self.assertIsNone(store.items[item.id].last_reminded_at)


if __name__ == "__main__":
    unittest.main()
