"""
Summary scheduler - produces daily, weekly and monthly summaries automatically.

Rules:
- Daily: every day, summarizes yesterday
- Weekly: on the configured weekday (Monday by default), summarizes the seven
  days ending yesterday
- Monthly: on the first of the month, summarizes the previous calendar month

Each rule is checked once a day at the configured time of day. Instead of
matching the wall clock to the minute, every rule keeps its next run time.
A tick that finds a rule past due evaluates it for the day it was due and
advances the run time by one period from that due time, so after a busy or
suspended stretch each following tick back-fills one missed day until the
rule is current again.

Every rule is idempotent per (type, start date): it is skipped when a summary
for the period exists, and the store's unique index rejects a duplicate
automatic summary that slips past the check.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from tracker.models.enums import SummaryType
from tracker.models.summary import Summary
from tracker.services.errors import (
    GenerationFailed,
    PeriodAlreadySummarized,
    StoreUnavailable,
    TrackerError,
)
from tracker.services.summary_generator import SummaryGenerator
from tracker.services.summary_store import SummaryStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SummaryRule:
    """When a periodic summary is due and which period it covers."""
    summary_type: SummaryType
    is_eligible: Callable[[date], bool]
    period: Callable[[date], Tuple[date, date]]

    def next_run_after(self, moment: datetime, check_time: time) -> datetime:
        """First check_time strictly after ``moment`` on a day this rule is eligible."""
        day = moment.date()
        if datetime.combine(day, check_time) <= moment:
            day += timedelta(days=1)
        # An eligible day always comes within a month
        for _ in range(32):
            if self.is_eligible(day):
                return datetime.combine(day, check_time)
            day += timedelta(days=1)
        raise ValueError(f"{self.summary_type.value} rule is never eligible")


def _yesterday(today: date) -> Tuple[date, date]:
    yesterday = today - timedelta(days=1)
    return yesterday, yesterday


def _last_seven_days(today: date) -> Tuple[date, date]:
    return today - timedelta(days=7), today - timedelta(days=1)


def _previous_month(today: date) -> Tuple[date, date]:
    last_day = today.replace(day=1) - timedelta(days=1)
    return last_day.replace(day=1), last_day


def default_rules(weekly_weekday: int = 0) -> List[SummaryRule]:
    """The daily, weekly and monthly rules, in evaluation order."""
    return [
        SummaryRule(SummaryType.DAILY, lambda today: True, _yesterday),
        SummaryRule(SummaryType.WEEKLY, lambda today: today.weekday() == weekly_weekday, _last_seven_days),
        SummaryRule(SummaryType.MONTHLY, lambda today: today.day == 1, _previous_month),
    ]


class SummaryScheduler:
    """Evaluates the periodic summary rules on each tick."""

    def __init__(
        self,
        generator: SummaryGenerator,
        summary_store: SummaryStore,
        check_time: time = time(0, 10),
        rules: Optional[Sequence[SummaryRule]] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.generator = generator
        self.summary_store = summary_store
        self.check_time = check_time
        self.rules = list(rules) if rules is not None else default_rules()
        self.clock = clock
        # None means due now: the first tick after startup checks every rule
        self._next_run: Dict[SummaryType, Optional[datetime]] = {
            rule.summary_type: None for rule in self.rules
        }

    def next_run(self, summary_type: SummaryType) -> Optional[datetime]:
        return self._next_run.get(summary_type)

    def tick(self, now: Optional[datetime] = None) -> List[Summary]:
        """Run every rule that is past due; return the summaries created."""
        now = now or self.clock()
        generated = []

        for rule in self.rules:
            next_run = self._next_run[rule.summary_type]
            if next_run is not None and now < next_run:
                continue

            due_day = now.date() if next_run is None else next_run.date()
            if rule.is_eligible(due_day):
                summary = self._evaluate(rule, due_day)
                if summary is not None:
                    generated.append(summary)

            self._next_run[rule.summary_type] = rule.next_run_after(next_run or now, self.check_time)

        return generated

    def check_and_generate(self, today: Optional[date] = None) -> List[Summary]:
        """
        Evaluate every rule eligible on ``today`` regardless of time of day.

        Safe to call repeatedly: a period that already has a summary is skipped.
        """
        today = today or self.clock().date()
        generated = []
        for rule in self.rules:
            if not rule.is_eligible(today):
                continue
            summary = self._evaluate(rule, today)
            if summary is not None:
                generated.append(summary)
        return generated

    def generate_now(self, summary_type: str, start_date: date, end_date: date) -> Summary:
        """
        Generate and store a summary on request.

        Eligibility rules and the existence check do not apply; the result is
        marked as not auto-generated. Errors propagate to the caller.
        """
        logger.info(f"Generating {summary_type} summary ({start_date} - {end_date}) on request")
        summary = self.generator.generate(summary_type, start_date, end_date, auto_generated=False)
        self.summary_store.insert(summary)
        return summary

    def _evaluate(self, rule: SummaryRule, today: date) -> Optional[Summary]:
        """Generate one rule's summary unless its period is covered. Never raises."""
        start_date, end_date = rule.period(today)
        summary_type = rule.summary_type.value
        try:
            return self._generate_once(summary_type, start_date, end_date)
        except GenerationFailed as e:
            logger.error(str(e))
        except StoreUnavailable as e:
            logger.error(f"Skipping {summary_type} summary for {start_date}: store unavailable: {e}")
        return None

    def _generate_once(self, summary_type: str, start_date: date, end_date: date) -> Optional[Summary]:
        try:
            if self.summary_store.exists_for_period(summary_type, start_date):
                logger.debug(f"{summary_type} summary for {start_date} already exists, skipping")
                return None
            summary = self.generator.generate(summary_type, start_date, end_date, auto_generated=True)
            self.summary_store.insert(summary)
        except PeriodAlreadySummarized:
            logger.info(f"{summary_type} summary for {start_date} was stored concurrently, skipping")
            return None
        except StoreUnavailable:
            raise
        except (TrackerError, ValueError) as e:
            raise GenerationFailed(summary_type, start_date, end_date, str(e)) from e
        except Exception as e:
            logger.exception(f"Unexpected error generating {summary_type} summary")
            raise GenerationFailed(summary_type, start_date, end_date, repr(e)) from e

        logger.info(f"Auto-generated summary: {summary.title}")
        return summary
