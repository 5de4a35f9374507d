"""Pytest configuration and shared fixtures."""
from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from tracker.database import Database
from tracker.models.audit import AuditLogEntry
from tracker.models.domain import Contact, Event, Project
from tracker.services.audit_log import AuditLog
from tracker.services.event_store import EventStore
from tracker.services.summary_generator import SummaryGenerator
from tracker.services.summary_scheduler import SummaryScheduler
from tracker.services.summary_store import SummaryStore

GENERATED_AT = datetime(2024, 6, 1, 0, 10)


class RecordingSink:
    """Notification sink that remembers what it was asked to deliver."""

    def __init__(self, result=True, error=None):
        self.result = result
        self.error = error
        self.delivered = []

    def deliver(self, title, body):
        self.delivered.append((title, body))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def database():
    """Create a fresh in-memory database for each test."""
    # One shared connection so every session sees the same in-memory data
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    db = Database(engine, lock_timeout=1.0)
    db.create_all()

    yield db

    engine.dispose()


@pytest.fixture
def audit_log(database):
    return AuditLog(database)


@pytest.fixture
def event_store(database):
    return EventStore(database)


@pytest.fixture
def summary_store(database):
    return SummaryStore(database)


@pytest.fixture
def generator(audit_log):
    return SummaryGenerator(audit_log, clock=lambda: GENERATED_AT)


@pytest.fixture
def summary_scheduler(generator, summary_store):
    return SummaryScheduler(generator, summary_store, clock=lambda: GENERATED_AT)


@pytest.fixture
def make_sink():
    return RecordingSink


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def log_entry(audit_log):
    """Append an operation log entry; returns its id."""
    def _log(created_at, description, operation_type="create", entity_type="event", entity_id=1, entity_name=None):
        entry = AuditLogEntry(
            operation_type=operation_type,
            entity_type=entity_type,
            entity_id=entity_id,
            entity_name=entity_name or description,
            description=description,
            created_at=created_at,
        )
        return audit_log.append(entry)
    return _log


@pytest.fixture
def make_event(database):
    """Create an event, optionally with a project and contacts; returns its id."""
    def _make(title="Site visit", reminder_time=None, triggered=False, project_name=None, contact_names=()):
        with database.session() as db:
            project = Project(name=project_name) if project_name else None
            contacts = [Contact(name=name) for name in contact_names]
            event = Event(
                title=title,
                event_date=reminder_time or datetime(2024, 1, 1, 9, 0),
                reminder_time=reminder_time,
                reminder_triggered=triggered,
                project=project,
                contacts=contacts,
            )
            db.add(event)
            db.flush()
            return event.id
    return _make


@pytest.fixture
def event_triggered(database):
    """Read an event's triggered flag straight from the store."""
    def _triggered(event_id):
        with database.session() as db:
            return db.get(Event, event_id).reminder_triggered
    return _triggered
