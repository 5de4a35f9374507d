"""Database configuration and session management."""
import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from tracker.services.errors import StoreUnavailable

logger = logging.getLogger(__name__)

Base = declarative_base()


def create_store_engine(url: str) -> Engine:
    """Create an engine configured for the database type behind ``url``."""
    if url.startswith("sqlite"):
        # SQLite-specific config
        return create_engine(url, connect_args={"check_same_thread": False})
    # PostgreSQL config (production)
    return create_engine(
        url,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=5,
        max_overflow=10,
    )


class Database:
    """
    The single persistent store shared by the audit log, event store and
    summary store.

    Every read and write goes through ``session()``, which holds one exclusive
    lock for the duration of the unit of work. Waiting for the lock is bounded
    by ``lock_timeout``; running out of time raises StoreUnavailable instead of
    blocking the caller.
    """

    def __init__(self, engine: Engine, lock_timeout: float = 5.0):
        self.engine = engine
        self.lock_timeout = lock_timeout
        self._lock = threading.RLock()
        self.SessionLocal = sessionmaker(
            bind=engine, autocommit=False, autoflush=False, expire_on_commit=False
        )

    @classmethod
    def from_url(cls, url: str, lock_timeout: float = 5.0) -> "Database":
        return cls(create_store_engine(url), lock_timeout=lock_timeout)

    def create_all(self) -> None:
        """Create all tables registered on Base."""
        # Import models to register them with SQLAlchemy Base
        from tracker.models import audit, domain, summary  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Exclusive unit of work: commit on success, roll back on error."""
        if not self._lock.acquire(timeout=self.lock_timeout):
            raise StoreUnavailable(
                f"Timed out after {self.lock_timeout}s waiting for the store lock"
            )
        try:
            db = self.SessionLocal()
            try:
                yield db
                db.commit()
            except OperationalError as e:
                db.rollback()
                logger.error(f"Store operation failed: {e}")
                raise StoreUnavailable(str(e)) from e
            except Exception:
                db.rollback()
                raise
            finally:
                db.close()
        finally:
            self._lock.release()
