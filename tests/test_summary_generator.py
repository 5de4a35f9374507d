"""Tests for summary content and statistics."""
from datetime import date, datetime

import pytest

from tracker.services.summary_generator import SummaryGenerator, compute_statistics


@pytest.fixture
def new_years_day(log_entry):
    """Three creations on 2024-01-01, logged out of chronological order."""
    log_entry(datetime(2024, 1, 1, 16, 0), "Created event Retro", entity_type="event")
    log_entry(datetime(2024, 1, 1, 9, 0), "Created project Bridge", entity_type="project")
    log_entry(datetime(2024, 1, 1, 11, 30), "Created event Kickoff", entity_type="event")


class TestStatistics:

    def test_counts_creations_by_entity_kind(self, generator, new_years_day):
        summary = generator.generate("daily", date(2024, 1, 1), date(2024, 1, 1))

        assert summary.statistics == {
            "total_operations": 3,
            "new_events": 2,
            "new_projects": 1,
            "new_contacts": 0,
            "new_activities": 0,
        }

    def test_updates_and_deletes_count_only_towards_total(self, generator, log_entry):
        log_entry(datetime(2024, 1, 1, 9), "Created contact Ann", entity_type="contact")
        log_entry(datetime(2024, 1, 1, 10), "Updated contact Ann", operation_type="update", entity_type="contact")
        log_entry(datetime(2024, 1, 1, 11), "Deleted event X", operation_type="delete", entity_type="event")
        log_entry(datetime(2024, 1, 1, 12), "Uploaded file plan.pdf", entity_type="file")
        log_entry(datetime(2024, 1, 1, 13), "Created activity Survey", entity_type="activity")

        stats = generator.generate("daily", date(2024, 1, 1), date(2024, 1, 1)).statistics

        assert stats == {
            "total_operations": 5,
            "new_projects": 0,
            "new_contacts": 1,
            "new_events": 0,
            "new_activities": 1,
        }

    def test_empty_input(self):
        assert compute_statistics([]) == {
            "total_operations": 0,
            "new_projects": 0,
            "new_contacts": 0,
            "new_events": 0,
            "new_activities": 0,
        }


class TestContent:

    def test_descriptions_listed_in_chronological_order(self, generator, new_years_day):
        content = generator.generate("daily", date(2024, 1, 1), date(2024, 1, 1)).content

        bullets = [line for line in content.splitlines() if line.startswith("- Created")]
        assert bullets == [
            "- Created project Bridge",
            "- Created event Kickoff",
            "- Created event Retro",
        ]

    def test_header_generation_time_and_statistics_lines(self, generator, new_years_day):
        content = generator.generate("daily", date(2024, 1, 1), date(2024, 1, 1)).content

        assert content.startswith("# Activity summary: 2024-01-01 to 2024-01-01\n")
        assert "Generated at: 2024-06-01 00:10:00" in content
        assert "- Total operations: 3" in content
        assert "- New events: 2" in content
        assert "- New projects: 1" in content
        assert "No activity" not in content

    def test_empty_period_says_so(self, generator):
        summary = generator.generate("weekly", date(2024, 2, 5), date(2024, 2, 11))

        assert "No activity was recorded in this period." in summary.content
        assert "## Operations" not in summary.content
        assert summary.statistics["total_operations"] == 0

    def test_range_covers_whole_end_day(self, generator, log_entry):
        log_entry(datetime(2023, 12, 31, 23, 59, 59), "too early")
        log_entry(datetime(2024, 1, 1, 0, 0, 0), "first second")
        log_entry(datetime(2024, 1, 7, 23, 59, 59), "last second")
        log_entry(datetime(2024, 1, 8, 0, 0, 0), "too late")

        content = generator.generate("weekly", date(2024, 1, 1), date(2024, 1, 7)).content

        assert "- first second" in content
        assert "- last second" in content
        assert "too early" not in content
        assert "too late" not in content

    def test_reproducible_apart_from_generation_time(self, audit_log, new_years_day):
        ticks = iter([datetime(2024, 6, 1, 0, 10), datetime(2024, 6, 2, 8, 45)])
        generator = SummaryGenerator(audit_log, clock=lambda: next(ticks))

        first = generator.generate("daily", date(2024, 1, 1), date(2024, 1, 1))
        second = generator.generate("daily", date(2024, 1, 1), date(2024, 1, 1))

        def without_timestamp(content):
            return [line for line in content.splitlines() if not line.startswith("Generated at:")]

        assert first.content != second.content
        assert without_timestamp(first.content) == without_timestamp(second.content)
        assert first.statistics == second.statistics


class TestSummaryValue:

    def test_unsaved_summary_fields(self, generator, new_years_day):
        summary = generator.generate("daily", date(2024, 1, 1), date(2024, 1, 1), auto_generated=True)

        assert summary.id is None
        assert summary.created_at is None
        assert summary.summary_type == "daily"
        assert summary.start_date == date(2024, 1, 1)
        assert summary.end_date == date(2024, 1, 1)
        assert summary.auto_generated is True
        assert summary.title == "Daily summary 2024-01-01"

    def test_multi_day_title(self, generator):
        summary = generator.generate("custom", date(2024, 1, 3), date(2024, 1, 9))

        assert summary.title == "Custom summary 2024-01-03 to 2024-01-09"

    def test_rejects_inverted_period(self, generator):
        with pytest.raises(ValueError):
            generator.generate("custom", date(2024, 1, 9), date(2024, 1, 3))

    def test_rejects_unknown_type(self, generator):
        with pytest.raises(ValueError):
            generator.generate("yearly", date(2024, 1, 1), date(2024, 1, 1))
