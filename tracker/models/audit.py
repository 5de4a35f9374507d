"""
Operation log model - the append-only record every summary is derived from.

Entries are written whenever a project, contact, event, activity or file is
created, updated or deleted elsewhere in the application. The automation core
only ever reads them.
"""
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, Text, Index, event
from tracker.database import Base
from tracker.services.errors import AuditLogImmutable


class AuditLogEntry(Base):
    """
    Immutable record of one operation against a domain entity.

    Invariants:
    - Once written, never edited or deleted
    - Append-only; ids are strictly increasing
    - Totally ordered by created_at, ties broken by id (insertion order)
    """
    __tablename__ = "operation_logs"
    __table_args__ = (
        Index("idx_logs_entity", "entity_type", "entity_id"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    operation_type = Column(String, nullable=False)  # create, update, delete
    entity_type = Column(String, nullable=False)  # project, contact, event, activity, file
    entity_id = Column(Integer, nullable=False)
    entity_name = Column(String, nullable=False)
    old_value = Column(Text, nullable=True)
    new_value = Column(Text, nullable=True)
    related_entities = Column(Text, nullable=True)  # e.g. contact names on an event
    project_id = Column(Integer, nullable=True)
    project_name = Column(String, nullable=True)
    description = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now, index=True)

    def __repr__(self) -> str:
        return (
            f"<AuditLogEntry {self.id} {self.operation_type} "
            f"{self.entity_type}:{self.entity_id} at {self.created_at}>"
        )


@event.listens_for(AuditLogEntry, "before_update")
def _refuse_update(mapper, connection, target):
    raise AuditLogImmutable(
        f"IMMUTABILITY VIOLATION: audit entry {target.id} cannot be modified"
    )


@event.listens_for(AuditLogEntry, "before_delete")
def _refuse_delete(mapper, connection, target):
    raise AuditLogImmutable(
        f"IMMUTABILITY VIOLATION: audit entry {target.id} cannot be deleted"
    )
