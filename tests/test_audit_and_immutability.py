"""
Tests for the operation log.

These tests prove:
- Entries are appended with strictly increasing ids
- Range queries are closed on both ends and ordered oldest first
- Entries are immutable once written
"""
from datetime import datetime

import pytest

from tracker.models.audit import AuditLogEntry
from tracker.services.errors import AuditLogImmutable


class TestAppend:
    """Appending entries."""

    def test_ids_strictly_increase(self, log_entry):
        first = log_entry(datetime(2024, 1, 1, 9), "Created project Alpha")
        second = log_entry(datetime(2024, 1, 1, 8), "Created contact Bo")
        third = log_entry(datetime(2024, 1, 2, 8), "Created event Kickoff")

        assert first < second < third

    def test_cannot_append_persisted_entry_twice(self, audit_log):
        entry = AuditLogEntry(
            operation_type="create",
            entity_type="project",
            entity_id=1,
            entity_name="Alpha",
            description="Created project Alpha",
        )
        audit_log.append(entry)

        with pytest.raises(ValueError):
            audit_log.append(entry)

    def test_created_at_defaults_to_now(self, audit_log):
        before = datetime.now()
        entry = AuditLogEntry(
            operation_type="create",
            entity_type="contact",
            entity_id=7,
            entity_name="Bo",
            description="Created contact Bo",
        )
        audit_log.append(entry)

        assert entry.created_at >= before


class TestQueryRange:
    """Range queries."""

    def test_results_are_sorted_by_creation_time(self, audit_log, log_entry):
        log_entry(datetime(2024, 1, 1, 15), "afternoon")
        log_entry(datetime(2024, 1, 1, 9), "morning")
        log_entry(datetime(2024, 1, 1, 12), "noon")

        entries = audit_log.query_range(datetime(2024, 1, 1), datetime(2024, 1, 1, 23, 59, 59))

        assert [e.description for e in entries] == ["morning", "noon", "afternoon"]

    def test_ties_are_broken_by_insertion_order(self, audit_log, log_entry):
        moment = datetime(2024, 1, 1, 10)
        log_entry(moment, "first")
        log_entry(moment, "second")
        log_entry(moment, "third")

        entries = audit_log.query_range(moment, moment)

        assert [e.description for e in entries] == ["first", "second", "third"]

    def test_range_is_closed_on_both_ends(self, audit_log, log_entry):
        start = datetime(2024, 1, 1, 0, 0, 0)
        end = datetime(2024, 1, 1, 23, 59, 59)
        log_entry(datetime(2023, 12, 31, 23, 59, 59), "before")
        log_entry(start, "at start")
        log_entry(end, "at end")
        log_entry(datetime(2024, 1, 2, 0, 0, 0), "after")

        entries = audit_log.query_range(start, end)

        assert [e.description for e in entries] == ["at start", "at end"]

    def test_inverted_range_is_empty(self, audit_log, log_entry):
        log_entry(datetime(2024, 1, 1, 10), "something")

        assert audit_log.query_range(datetime(2024, 1, 2), datetime(2024, 1, 1)) == []


class TestAuditImmutability:
    """Entries cannot be changed or removed once written."""

    def test_update_is_refused(self, database, log_entry):
        entry_id = log_entry(datetime(2024, 1, 1, 10), "original")

        with pytest.raises(AuditLogImmutable) as exc_info:
            with database.session() as db:
                entry = db.get(AuditLogEntry, entry_id)
                entry.description = "rewritten"

        assert "IMMUTABILITY VIOLATION" in str(exc_info.value)
        with database.session() as db:
            assert db.get(AuditLogEntry, entry_id).description == "original"

    def test_delete_is_refused(self, database, log_entry):
        entry_id = log_entry(datetime(2024, 1, 1, 10), "keep me")

        with pytest.raises(AuditLogImmutable):
            with database.session() as db:
                db.delete(db.get(AuditLogEntry, entry_id))

        with database.session() as db:
            assert db.get(AuditLogEntry, entry_id) is not None

    def test_audit_log_has_no_mutating_operations(self, audit_log):
        assert not hasattr(audit_log, "update")
        assert not hasattr(audit_log, "delete")

    def test_entries_accumulate(self, audit_log, log_entry):
        for hour in range(5):
            log_entry(datetime(2024, 1, 1, hour), f"op {hour}")

        assert len(audit_log.query_range(datetime(2024, 1, 1), datetime(2024, 1, 2))) == 5
