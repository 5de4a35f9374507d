"""
Summary generation: turns a slice of the operation log into a Summary.

The generator has no state of its own. For a fixed log range the enumerated
descriptions and the statistics are deterministic; only the "Generated at"
line depends on the clock.
"""
from datetime import date, datetime, time
from typing import Callable, Dict, List, Sequence

from tracker.models.audit import AuditLogEntry
from tracker.models.enums import EntityType, OperationType, SummaryType
from tracker.models.summary import Summary
from tracker.services.audit_log import AuditLog

# Statistics key for each entity kind counted on creation
CREATED_ENTITY_KEYS = {
    EntityType.PROJECT.value: "new_projects",
    EntityType.CONTACT.value: "new_contacts",
    EntityType.EVENT.value: "new_events",
    EntityType.ACTIVITY.value: "new_activities",
}

STATISTICS_LABELS = [
    ("total_operations", "Total operations"),
    ("new_projects", "New projects"),
    ("new_contacts", "New contacts"),
    ("new_events", "New events"),
    ("new_activities", "New activities"),
]


def compute_statistics(entries: Sequence[AuditLogEntry]) -> Dict[str, int]:
    """
    Count created projects, contacts, events and activities, plus the total
    number of operations in the period.
    """
    statistics = {"total_operations": len(entries)}
    for key in CREATED_ENTITY_KEYS.values():
        statistics[key] = 0

    for entry in entries:
        if entry.operation_type != OperationType.CREATE.value:
            continue
        key = CREATED_ENTITY_KEYS.get(entry.entity_type)
        if key is not None:
            statistics[key] += 1

    return statistics


def summary_title(summary_type: str, start_date: date, end_date: date) -> str:
    label = f"{summary_type.capitalize()} summary"
    if start_date == end_date:
        return f"{label} {start_date.isoformat()}"
    return f"{label} {start_date.isoformat()} to {end_date.isoformat()}"


def render_content(
    start_date: date,
    end_date: date,
    entries: Sequence[AuditLogEntry],
    statistics: Dict[str, int],
    generated_at: datetime,
) -> str:
    lines: List[str] = [
        f"# Activity summary: {start_date.isoformat()} to {end_date.isoformat()}",
        "",
        f"Generated at: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}",
        "",
        "---",
        "",
    ]

    if not entries:
        lines.append("No activity was recorded in this period.")
    else:
        lines.append("## Operations")
        lines.append("")
        lines.extend(f"- {entry.description}" for entry in entries)

    lines.extend(["", "## Statistics", ""])
    lines.extend(f"- {label}: {statistics[key]}" for key, label in STATISTICS_LABELS)

    return "\n".join(lines) + "\n"


class SummaryGenerator:
    """Builds unsaved Summary values from the operation log."""

    def __init__(self, audit_log: AuditLog, clock: Callable[[], datetime] = datetime.now):
        self.audit_log = audit_log
        self.clock = clock

    def generate(
        self,
        summary_type: str,
        start_date: date,
        end_date: date,
        auto_generated: bool = False,
    ) -> Summary:
        """
        Summarize every entry logged from start_date 00:00:00 through the
        end of end_date.

        The returned Summary has no id or created_at yet; those are assigned
        when SummaryStore persists it.
        """
        summary_type = SummaryType(summary_type).value
        if start_date > end_date:
            raise ValueError(
                f"Start date {start_date.isoformat()} is after end date {end_date.isoformat()}"
            )

        entries = self.audit_log.query_range(
            datetime.combine(start_date, time.min),
            datetime.combine(end_date, time.max),
        )
        statistics = compute_statistics(entries)
        content = render_content(start_date, end_date, entries, statistics, self.clock())

        return Summary(
            title=summary_title(summary_type, start_date, end_date),
            summary_type=summary_type,
            start_date=start_date,
            end_date=end_date,
            content=content,
            statistics=statistics,
            auto_generated=auto_generated,
        )
