"""Tests for the interval reminder scheduler."""

import threading
import unittest
from unittest.mock import MagicMock

from src.reminders.models import PassReport
from src.reminders.scheduler import ReminderScheduler
from testing.reminders.fixtures import NOW


class TestReminderScheduler(unittest.TestCase):
    """Tests for ReminderScheduler class."""

    def test_run_once_returns_report(self) -> None:
        """Test that a successful pass is returned."""
        report = PassReport(started_at=NOW)
        scheduler = ReminderScheduler(interval_seconds=60, run_pass=MagicMock(return_value=report))

        self.assertIs(scheduler.run_once(), report)
        self.assertEqual(scheduler.passes_run, 1)

    def test_run_once_swallows_pass_errors(self) -> None:
        """Test that a crashing pass is logged and the loop can continue."""
        run_pass = MagicMock(side_effect=RuntimeError("database down"))
        scheduler = ReminderScheduler(interval_seconds=60, run_pass=run_pass)

        with self.assertLogs("src.reminders.scheduler", level="ERROR"):
            result = scheduler.run_once()

        self.assertIsNone(result)
        self.assertEqual(scheduler.passes_run, 1)

    def test_run_forever_stops(self) -> None:
        """Test that stop() ends the loop after the current pass."""
        scheduler: ReminderScheduler

        def run_pass() -> PassReport:
            scheduler.stop()
            return PassReport(started_at=NOW, skipped=True)

        scheduler = ReminderScheduler(interval_seconds=60, run_pass=run_pass)
        # Run off the main thread so no signal handlers are installed
        thread = threading.Thread(target=scheduler.run_forever)
        thread.start()
        thread.join(timeout=5)

        self.assertFalse(thread.is_alive())
        self.assertEqual(scheduler.passes_run, 1)

    def test_passes_repeat_until_stopped(self) -> None:
        """Test that passes run back to back on the interval."""
        scheduler: ReminderScheduler
        calls = []

        def run_pass() -> PassReport:
            calls.append(1)
            if len(calls) == 3:
                scheduler.stop()
            return PassReport(started_at=NOW)

        scheduler = ReminderScheduler(interval_seconds=0, run_pass=run_pass)
        thread = threading.Thread(target=scheduler.run_forever)
        thread.start()
        thread.join(timeout=5)

        self.assertFalse(thread.is_alive())
        self.assertEqual(len(calls), 3)


if __name__ == "__main__":
    unittest.main()
