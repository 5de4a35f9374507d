"""Domain models the reminder scheduler reads: projects, contacts and events.

Creating and editing these belongs to the rest of the application; only the
columns the automation core relies on are mapped here.
"""
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, Boolean, ForeignKey, Table, Text
from sqlalchemy.orm import relationship
from tracker.database import Base


events_contacts = Table(
    "events_contacts",
    Base.metadata,
    Column("event_id", Integer, ForeignKey("events.id", ondelete="CASCADE"), primary_key=True),
    Column("contact_id", Integer, ForeignKey("contacts.id", ondelete="CASCADE"), primary_key=True),
    Column("created_at", DateTime, nullable=False, default=datetime.now),
)


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    events = relationship("Event", back_populates="project")


class Contact(Base):
    __tablename__ = "contacts"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String, nullable=False)
    title = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    events = relationship("Event", secondary=events_contacts, back_populates="contacts")


class Event(Base):
    """
    A dated event, optionally carrying a reminder.

    Invariants:
    - reminder_triggered flips false -> true at most once per reminder_time value
    - Setting a new reminder_time resets reminder_triggered to false
      (handled by EventStore.set_reminder)
    """
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    event_date = Column(DateTime, nullable=False)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="SET NULL"), nullable=True)
    event_type = Column(String, nullable=True)

    # Reminder
    reminder_time = Column(DateTime, nullable=True, index=True)
    reminder_triggered = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    # Relationships
    project = relationship("Project", back_populates="events")
    contacts = relationship("Contact", secondary=events_contacts, back_populates="events")
