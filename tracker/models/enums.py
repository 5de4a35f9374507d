"""Enums for the tracker - these define the valid values recorded in the audit log and summaries."""
from enum import Enum


class OperationType(str, Enum):
    """What happened to an entity."""
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class EntityType(str, Enum):
    """Kinds of domain entity that appear in the audit log."""
    PROJECT = "project"
    CONTACT = "contact"
    EVENT = "event"
    ACTIVITY = "activity"
    FILE = "file"


class SummaryType(str, Enum):
    """Period a summary covers."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"
