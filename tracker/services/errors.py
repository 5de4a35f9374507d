"""Errors raised by the automation core."""
from datetime import date


class TrackerError(Exception):
    """Base class for automation core errors."""


class StoreUnavailable(TrackerError):
    """
    The persistent store cannot be reached or its lock cannot be acquired.

    Raised to the immediate caller. The scheduling loop catches it at the
    tick boundary and carries on with the next tick.
    """


class DeliveryFailed(TrackerError):
    """A notification sink could not deliver a notification."""


class GenerationFailed(TrackerError):
    """Producing or persisting one periodic summary failed."""

    def __init__(self, summary_type: str, start_date: date, end_date: date, reason: str):
        self.summary_type = summary_type
        self.start_date = start_date
        self.end_date = end_date
        self.reason = reason
        super().__init__(
            f"Could not generate {summary_type} summary for "
            f"{start_date.isoformat()}..{end_date.isoformat()}: {reason}"
        )


class PeriodAlreadySummarized(TrackerError):
    """The store already holds an automatic summary for this (type, start date)."""

    def __init__(self, summary_type: str, start_date: date):
        self.summary_type = summary_type
        self.start_date = start_date
        super().__init__(
            f"A {summary_type} summary starting {start_date.isoformat()} already exists"
        )


class AuditLogImmutable(TrackerError):
    """Audit entries are append-only; updates and deletes are refused."""
