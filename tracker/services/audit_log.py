"""Append-only access to the operation log."""
from datetime import datetime
from typing import List

from tracker.database import Database
from tracker.models.audit import AuditLogEntry


class AuditLog:
    """
    Append and range-query the operation log.

    No update or delete operations exist; the model refuses both.
    """

    def __init__(self, database: Database):
        self.database = database

    def append(self, entry: AuditLogEntry) -> int:
        """Persist a new entry and return its store-assigned id."""
        if entry.id is not None:
            raise ValueError("Audit entries are append-only; entry already has an id")
        with self.database.session() as db:
            db.add(entry)
            db.flush()
            return entry.id

    def query_range(self, start: datetime, end: datetime) -> List[AuditLogEntry]:
        """
        Entries with start <= created_at <= end, oldest first.

        Entries sharing a timestamp come back in insertion order.
        """
        if start > end:
            return []
        with self.database.session() as db:
            return (
                db.query(AuditLogEntry)
                .filter(AuditLogEntry.created_at >= start, AuditLogEntry.created_at <= end)
                .order_by(AuditLogEntry.created_at.asc(), AuditLogEntry.id.asc())
                .all()
            )
