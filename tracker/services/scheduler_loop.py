"""
Scheduling loop - the background thread that drives both schedulers.

Every wake-up runs the reminder tick and then the summary tick, one after
the other. A failure in either is logged and ends only that step. Ticks never
overlap: a tick that overruns the interval delays the next wake-up.
"""
import logging
import threading
import time
from datetime import datetime
from typing import Callable, Optional

from tracker.services.reminder_scheduler import ReminderScheduler
from tracker.services.summary_scheduler import SummaryScheduler

logger = logging.getLogger(__name__)


class SchedulingLoop:
    """Runs ReminderScheduler.tick then SummaryScheduler.tick every interval."""

    def __init__(
        self,
        reminder_scheduler: ReminderScheduler,
        summary_scheduler: SummaryScheduler,
        interval: float = 60.0,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.reminder_scheduler = reminder_scheduler
        self.summary_scheduler = summary_scheduler
        self.interval = interval
        self.clock = clock
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_once(self, now: Optional[datetime] = None) -> None:
        """One wake-up: reminders first, then summaries."""
        now = now or self.clock()

        try:
            self.reminder_scheduler.tick(now)
        except Exception as e:
            logger.error(f"Reminder tick failed: {type(e).__name__}: {e}")

        try:
            self.summary_scheduler.tick(now)
        except Exception as e:
            logger.error(f"Summary tick failed: {type(e).__name__}: {e}")

    def run(self, stop_event: Optional[threading.Event] = None) -> None:
        """Block, ticking every interval, until ``stop_event`` is set."""
        stop_event = stop_event or self._stop_event
        logger.info(f"Scheduling loop started (interval {self.interval}s)")

        while not stop_event.is_set():
            started = time.monotonic()
            self.run_once()
            elapsed = time.monotonic() - started
            if elapsed > self.interval:
                logger.warning(f"Tick took {elapsed:.1f}s, longer than the {self.interval}s interval")
            stop_event.wait(max(0.0, self.interval - elapsed))

        logger.info("Scheduling loop stopped")

    def start(self) -> None:
        """Run the loop in a daemon thread."""
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self.run, name="tracker-scheduler", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        """Signal the loop to stop and wait for the current tick to finish."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
