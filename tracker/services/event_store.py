"""Reminder-related reads and writes against the events table."""
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import List, Optional

from tracker.database import Database
from tracker.models.domain import Contact, Event, Project, events_contacts


@dataclass(frozen=True)
class ReminderableEvent:
    """The slice of an Event the reminder scheduler needs."""
    id: int
    title: str
    reminder_time: Optional[datetime]
    triggered: bool
    project_id: Optional[int] = None


def _to_reminderable(event: Event) -> ReminderableEvent:
    return ReminderableEvent(
        id=event.id,
        title=event.title,
        reminder_time=event.reminder_time,
        triggered=bool(event.reminder_triggered),
        project_id=event.project_id,
    )


class EventStore:
    """Due-reminder lookup and trigger bookkeeping for scheduled events."""

    def __init__(self, database: Database):
        self.database = database

    def fetch_due_reminders(self, window_start: datetime, window_end: datetime) -> List[ReminderableEvent]:
        """
        Untriggered events whose reminder falls in (window_start, window_end].

        No ordering is defined for the result.
        """
        with self.database.session() as db:
            events = db.query(Event).filter(
                Event.reminder_time.isnot(None),
                Event.reminder_time > window_start,
                Event.reminder_time <= window_end,
                Event.reminder_triggered.is_(False),
            ).all()
            return [_to_reminderable(e) for e in events]

    def mark_triggered(self, event_id: int) -> bool:
        """
        Flip an untriggered event to triggered.

        Returns False when the event does not exist or was already triggered,
        so two callers can never both claim the same reminder.
        """
        with self.database.session() as db:
            updated = db.query(Event).filter(
                Event.id == event_id,
                Event.reminder_triggered.is_(False),
            ).update({Event.reminder_triggered: True}, synchronize_session=False)
            return updated == 1

    def set_reminder(self, event_id: int, reminder_time: Optional[datetime]) -> bool:
        """
        Set or clear an event's reminder.

        A changed schedule is a new reminder obligation, so triggered is reset.
        Returns False for an unknown event.
        """
        with self.database.session() as db:
            updated = db.query(Event).filter(Event.id == event_id).update(
                {Event.reminder_time: reminder_time, Event.reminder_triggered: False},
                synchronize_session=False,
            )
            return updated == 1

    def get_project_name(self, project_id: Optional[int]) -> Optional[str]:
        if project_id is None:
            return None
        with self.database.session() as db:
            project = db.query(Project).filter(Project.id == project_id).first()
            return project.name if project else None

    def get_contact_names(self, event_id: int) -> List[str]:
        with self.database.session() as db:
            rows = (
                db.query(Contact.name)
                .join(events_contacts, events_contacts.c.contact_id == Contact.id)
                .filter(events_contacts.c.event_id == event_id)
                .order_by(Contact.name.asc())
                .all()
            )
            return [name for (name,) in rows]

    def today_reminder_event_ids(self, today: date) -> List[int]:
        """Ids of events with a reminder on ``today``, triggered or not."""
        day_start = datetime.combine(today, time.min)
        day_end = datetime.combine(today, time.max)
        with self.database.session() as db:
            rows = db.query(Event.id).filter(
                Event.reminder_time.isnot(None),
                Event.reminder_time >= day_start,
                Event.reminder_time <= day_end,
            ).order_by(Event.reminder_time.asc(), Event.id.asc()).all()
            return [event_id for (event_id,) in rows]
