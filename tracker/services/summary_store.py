"""Persistence of generated summaries."""
import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from tracker.database import Database
from tracker.models.summary import Summary
from tracker.services.errors import PeriodAlreadySummarized

logger = logging.getLogger(__name__)


class SummaryStore:
    """Insert, look up and delete summaries; answer per-period existence checks."""

    def __init__(self, database: Database):
        self.database = database

    def exists_for_period(self, summary_type: str, start_date: date) -> bool:
        """Whether any summary of this type starts on ``start_date``."""
        with self.database.session() as db:
            return db.query(Summary.id).filter(
                Summary.summary_type == summary_type,
                Summary.start_date == start_date,
            ).first() is not None

    def insert(self, summary: Summary) -> int:
        """
        Persist a generated summary and return its id.

        Raises PeriodAlreadySummarized when an automatic summary for the same
        (type, start date) is already stored. The check is made by the
        database's unique index, not by a prior read.
        """
        try:
            with self.database.session() as db:
                db.add(summary)
                db.flush()
                return summary.id
        except IntegrityError as e:
            if summary.auto_generated:
                raise PeriodAlreadySummarized(summary.summary_type, summary.start_date) from e
            raise

    def list(self) -> List[Summary]:
        """All summaries, newest first."""
        with self.database.session() as db:
            return db.query(Summary).order_by(Summary.created_at.desc(), Summary.id.desc()).all()

    def get_by_id(self, summary_id: int) -> Optional[Summary]:
        with self.database.session() as db:
            return db.query(Summary).filter(Summary.id == summary_id).first()

    def delete(self, summary_id: int) -> bool:
        """Delete a summary, freeing its period for regeneration. False if absent."""
        with self.database.session() as db:
            deleted = db.query(Summary).filter(Summary.id == summary_id).delete(
                synchronize_session=False
            )
        if deleted:
            logger.info(f"Deleted summary {summary_id}")
        return deleted == 1
