"""
Reminder scheduler - delivers event reminders from a fixed-interval tick.

Each reminder moves Pending -> Delivered exactly once. A tick looks back one
interval, ``(now - interval, now]``. A tick that runs a little late extends
its window back to the previous tick, so consecutive windows always join;
only a gap longer than one interval (a real stall) drops reminders. Delivery is at most once: the event is
claimed (marked triggered) before the sink is called and is never retried,
whether or not delivery succeeds.
"""
import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Tuple

from tracker.services.errors import DeliveryFailed
from tracker.services.event_store import EventStore, ReminderableEvent
from tracker.services.notifications import NotificationSink

logger = logging.getLogger(__name__)


class ReminderScheduler:
    """Finds due, untriggered reminders and delivers them."""

    def __init__(
        self,
        event_store: EventStore,
        sink: NotificationSink,
        interval: timedelta = timedelta(seconds=60),
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.event_store = event_store
        self.sink = sink
        self.interval = interval
        self.clock = clock
        self._last_tick: Optional[datetime] = None

    def tick(self, now: Optional[datetime] = None) -> List[int]:
        """
        Run one reminder pass and return the ids of the events handled.

        Store failures propagate (StoreUnavailable) and end this tick; whatever
        was already committed stays committed.
        """
        now = now or self.clock()
        window_start = self._window_start(now)

        due = self.event_store.fetch_due_reminders(window_start, now)
        self._last_tick = now

        handled = []
        for event in due:
            if not self.event_store.mark_triggered(event.id):
                logger.debug(f"Reminder for event {event.id} already handled, skipping")
                continue
            handled.append(event.id)
            self._deliver(event)

        if handled:
            logger.info(f"Handled {len(handled)} reminder(s) in window {window_start} - {now}")
        return handled

    def compose(self, event: ReminderableEvent) -> Tuple[str, str]:
        """Notification title and body for an event."""
        title = f"Event reminder: {event.title}"
        lines = []

        project_name = self.event_store.get_project_name(event.project_id)
        if project_name:
            lines.append(f"Project: {project_name}")

        contact_names = self.event_store.get_contact_names(event.id)
        if contact_names:
            lines.append(f"Contacts: {', '.join(contact_names)}")

        return title, "\n".join(lines)

    def _deliver(self, event: ReminderableEvent) -> None:
        title, body = self.compose(event)
        try:
            delivered = self.sink.deliver(title, body)
        except DeliveryFailed as e:
            logger.warning(f"Reminder delivery failed for event {event.id}: {e}")
            return
        except Exception as e:
            # A misbehaving sink must not undo the claim or stop the tick
            logger.exception(f"Notification sink raised for event {event.id}: {e}")
            return

        if delivered:
            logger.info(f"Sent reminder: {event.title}")
        else:
            logger.warning(f"Reminder delivery failed for event {event.id}: sink reported failure")

    def _window_start(self, now: datetime) -> datetime:
        """
        Start of this tick's window.

        Normally ``now - interval``, pulled back to the previous tick when that
        is at most one interval further back. A longer gap is a stall: the
        reminders that fell in it are dropped, not delivered late, and logged.
        They stay untriggered.
        """
        window_start = now - self.interval
        if self._last_tick is None or self._last_tick >= window_start:
            return window_start
        if window_start - self._last_tick <= self.interval:
            return self._last_tick
        self._report_skipped(window_start)
        return window_start

    def _report_skipped(self, window_start: datetime) -> None:
        skipped = self.event_store.fetch_due_reminders(self._last_tick, window_start)
        gap = window_start - self._last_tick
        if skipped:
            logger.warning(
                f"Scheduler stalled for {gap}; skipped reminders for events "
                f"{sorted(e.id for e in skipped)}"
            )
        else:
            logger.warning(f"Scheduler stalled for {gap}; no reminders were missed")
