"""
Database-backed progress tracking for resumable crawls.

Every write appends a row to scraper_state; the row with the highest id is
the current state. A write is committed before it returns, so the engine
never fetches a page beyond a durable checkpoint.
"""

from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session

from movie_scraper.db_models import Base, ScraperState
from movie_scraper.errors import PersistenceFailure
from movie_scraper.logger import get_logger
from movie_scraper.models import ProgressState

logger = get_logger(__name__)


class ProgressStore:
    """Durable record of crawl progress. Assumes a single writer."""

    def __init__(self, engine: Engine):
        self._engine = engine
        Base.metadata.create_all(self._engine, tables=[ScraperState.__table__])
        self._Session = sessionmaker(bind=self._engine)

    def _get_session(self) -> Session:
        return self._Session()

    @staticmethod
    def _to_state(row: ScraperState) -> ProgressState:
        return ProgressState(
            cursor=row.last_page or 1,
            watermark=row.last_movie_name,
            completed=bool(row.completed),
            boundary=row.boundary_name,
        )

    def read(self) -> ProgressState:
        """Return the current state, creating the initial one if none exists."""
        session = self._get_session()
        try:
            row = session.query(ScraperState).order_by(ScraperState.id.desc()).first()
            if row:
                return self._to_state(row)
        finally:
            session.close()

        logger.info("No scraper state found, starting at page 1")
        return self.write(1)

    def write(
        self,
        cursor: int,
        watermark: Optional[str] = None,
        completed: bool = False,
        boundary: Optional[str] = None,
    ) -> ProgressState:
        """
        Persist a new current state.

        Raises:
            ValueError: If cursor is below 1
            PersistenceFailure: If the row could not be committed
        """
        if cursor < 1:
            raise ValueError(f"cursor must be >= 1, got {cursor}")

        session = self._get_session()
        try:
            row = ScraperState(
                last_page=cursor,
                last_movie_name=watermark,
                boundary_name=boundary,
                completed=completed,
            )
            session.add(row)
            session.commit()
            logger.debug("Saved scraper state: page=%d watermark=%r completed=%s", cursor, watermark, completed)
            return self._to_state(row)
        except SQLAlchemyError as e:
            session.rollback()
            raise PersistenceFailure(f"Could not save scraper state at page {cursor}: {e}") from e
        finally:
            session.close()

    def reset(self, boundary: Optional[str] = None) -> ProgressState:
        """Start a new cycle at page 1."""
        return self.write(1, None, False, boundary)

    def clear(self):
        """Remove all progress state."""
        session = self._get_session()
        try:
            deleted = session.query(ScraperState).delete()
            session.commit()
            logger.info("Cleared scraper state (%d rows)", deleted)
        except SQLAlchemyError as e:
            session.rollback()
            raise PersistenceFailure(f"Could not clear scraper state: {e}") from e
        finally:
            session.close()

    def close(self):
        """Close database connection."""
        if self._engine:
            self._engine.dispose()
