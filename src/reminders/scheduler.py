"""Interval driver that runs reminder passes until stopped."""

import logging
import signal
import sys
import threading
from collections.abc import Callable

from dotenv import load_dotenv

from src.observability.sentry import init_sentry
from src.paths import PROJECT_ROOT
from src.reminders.config import get_reminder_settings
from src.reminders.models import PassReport
from src.reminders.runner import run_reminder_pass
from src.utils.logging import configure_logging

logger = logging.getLogger(__name__)


class ReminderScheduler:
    """Runs a reminder pass on a fixed interval.

    Passes run back to back on one thread, so this driver never overlaps
    its own passes. The database lease still guards against other drivers.
    """

    def __init__(
        self,
        interval_seconds: float,
        run_pass: Callable[[], PassReport] = run_reminder_pass,
    ) -> None:
        """Initialise the scheduler.

        :param interval_seconds: Wait between the end of one pass and the next.
        :param run_pass: Callable running one pass.
        """
        self._interval_seconds = interval_seconds
        self._run_pass = run_pass
        self._stop_event = threading.Event()
        self.passes_run = 0

    def run_once(self) -> PassReport | None:
        """Run a single pass, logging rather than raising on failure.

        :returns: The pass report, or None if the pass raised.
        """
        try:
            report = self._run_pass()
        except Exception:
            logger.exception("Reminder pass failed")
            return None
        finally:
            self.passes_run += 1

        if report.skipped:
            logger.info("Pass skipped, another pass is in flight")
        elif report.processed:
            logger.info(f"Processed {report.processed} reminders: {report.delivered} delivered")
        else:
            logger.info("No pending reminders")
        return report

    def run_forever(self) -> None:
        """Run passes until stop() is called or a shutdown signal arrives."""
        self._setup_signal_handlers()
        logger.info(f"Starting reminder scheduler: interval={self._interval_seconds}s")

        while not self._stop_event.is_set():
            self.run_once()
            self._stop_event.wait(self._interval_seconds)

        logger.info("Reminder scheduler stopped")

    def stop(self) -> None:
        """Signal the loop to stop after the current pass."""
        logger.info("Stopping reminder scheduler...")
        self._stop_event.set()

    def _setup_signal_handlers(self) -> None:
        """Stop on SIGINT/SIGTERM when running on the main thread."""
        if threading.current_thread() is not threading.main_thread():
            logger.warning("Signal handlers not installed (not on main thread)")
            return

        def signal_handler(signum: int, frame: object) -> None:
            logger.info(f"Received shutdown signal {signum}")
            self.stop()

        signals = [signal.SIGINT]
        if sys.platform != "win32":
            signals.append(signal.SIGTERM)
        for sig in signals:
            signal.signal(sig, signal_handler)


def main() -> None:
    """Entry point for running the reminder scheduler."""
    load_dotenv(PROJECT_ROOT / ".env")
    configure_logging()
    init_sentry()
    settings = get_reminder_settings()
    ReminderScheduler(interval_seconds=settings.interval_seconds).run_forever()


if __name__ == "__main__":
    main()
