"""Generated activity summaries."""
from datetime import datetime
from sqlalchemy import Column, String, Integer, Date, DateTime, Boolean, Text, JSON, Index, text
from tracker.database import Base


class Summary(Base):
    """
    A human-readable digest of the operation log over one period.

    Invariants:
    - At most one automatic summary per (summary_type, start_date), enforced by
      a partial unique index so concurrent generators cannot both insert
    - Manual summaries (auto_generated = False) may cover an already-summarized period
    - Deleting a summary frees its (summary_type, start_date) slot
    """
    __tablename__ = "summaries"
    __table_args__ = (
        Index("idx_summaries_date", "start_date", "end_date"),
        Index(
            "uq_summaries_auto_period",
            "summary_type",
            "start_date",
            unique=True,
            sqlite_where=text("auto_generated = 1"),
            postgresql_where=text("auto_generated"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    title = Column(String, nullable=False)
    summary_type = Column(String, nullable=False, index=True)  # daily, weekly, monthly, custom
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    content = Column(Text, nullable=False)
    statistics = Column(JSON, nullable=True)
    auto_generated = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    def __repr__(self) -> str:
        return f"<Summary {self.id} {self.summary_type} {self.start_date}..{self.end_date}>"
