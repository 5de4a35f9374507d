"""Wiring of the automation core: one store, passed to every component."""
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from tracker.config import Settings
from tracker.database import Database
from tracker.services.audit_log import AuditLog
from tracker.services.event_store import EventStore
from tracker.services.notifications import NotificationSink, build_notification_sink
from tracker.services.reminder_scheduler import ReminderScheduler
from tracker.services.scheduler_loop import SchedulingLoop
from tracker.services.summary_generator import SummaryGenerator
from tracker.services.summary_scheduler import SummaryScheduler, default_rules
from tracker.services.summary_store import SummaryStore


@dataclass
class AutomationCore:
    database: Database
    audit_log: AuditLog
    event_store: EventStore
    summary_store: SummaryStore
    generator: SummaryGenerator
    reminder_scheduler: ReminderScheduler
    summary_scheduler: SummaryScheduler
    loop: SchedulingLoop


def build_core(
    settings: Settings,
    database: Optional[Database] = None,
    sink: Optional[NotificationSink] = None,
) -> AutomationCore:
    """Construct every component around a single Database."""
    if database is None:
        database = Database.from_url(settings.DATABASE_URL, lock_timeout=settings.STORE_LOCK_TIMEOUT_SECONDS)
    database.create_all()

    audit_log = AuditLog(database)
    event_store = EventStore(database)
    summary_store = SummaryStore(database)
    generator = SummaryGenerator(audit_log)

    reminder_scheduler = ReminderScheduler(
        event_store,
        sink or build_notification_sink(settings),
        interval=timedelta(seconds=settings.TICK_INTERVAL_SECONDS),
    )
    summary_scheduler = SummaryScheduler(
        generator,
        summary_store,
        check_time=settings.summary_check_time,
        rules=default_rules(settings.WEEKLY_SUMMARY_WEEKDAY),
    )
    loop = SchedulingLoop(reminder_scheduler, summary_scheduler, interval=settings.TICK_INTERVAL_SECONDS)

    return AutomationCore(
        database=database,
        audit_log=audit_log,
        event_store=event_store,
        summary_store=summary_store,
        generator=generator,
        reminder_scheduler=reminder_scheduler,
        summary_scheduler=summary_scheduler,
        loop=loop,
    )
