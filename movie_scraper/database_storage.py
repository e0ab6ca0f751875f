"""
Database storage for scraped movies.

Inserts movies with their download links and normalizes genres and tags into
shared, name-unique rows. Each movie is written in its own transaction so a
bad record is skipped without aborting the batch.
"""

from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session

from movie_scraper.db_models import Base, Movie, DownloadLink, Genre, Tag
from movie_scraper.errors import PerRecordInsertFailure, StoreWriteConflict
from movie_scraper.logger import get_logger
from movie_scraper.models import MovieRecord
from movie_scraper.revalidation import RevalidationNotifier

logger = get_logger(__name__)


class DatabaseStorage:
    """Destination store for movies and their taxonomy."""

    def __init__(self, engine: Engine, notifier: Optional[RevalidationNotifier] = None):
        """
        Initialize database storage.

        Args:
            engine: SQLAlchemy engine for the destination database
            notifier: Called after every committed movie; optional
        """
        self._engine = engine
        self.notifier = notifier
        Base.metadata.create_all(self._engine)
        self._Session = sessionmaker(bind=self._engine)

    @property
    def engine(self) -> Engine:
        return self._engine

    def _get_session(self) -> Session:
        """Get a new database session."""
        return self._Session()

    def _parse_date(self, date_str: str) -> Optional[datetime]:
        """Parse various date formats to datetime."""
        if not date_str:
            return None

        # Try ISO format first, stored as naive UTC
        try:
            parsed = datetime.fromisoformat(date_str.replace('Z', '+00:00'))
            if parsed.tzinfo:
                parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
            return parsed
        except ValueError:
            pass

        formats = [
            '%Y-%m-%d',
            '%d %b %Y',
            '%d %B %Y',
            '%B %d, %Y',
            '%b %d, %Y',
        ]

        for fmt in formats:
            try:
                return datetime.strptime(date_str, fmt)
            except ValueError:
                continue

        return None

    def _get_or_create_genre(self, session: Session, name: str) -> Genre:
        """Get existing genre or create new one."""
        with session.no_autoflush:
            genre = session.query(Genre).filter(Genre.name == name).first()
        if not genre:
            genre = Genre(name=name)
            session.add(genre)
        return genre

    def _get_or_create_tag(self, session: Session, name: str) -> Tag:
        """Get existing tag or create new one."""
        with session.no_autoflush:
            tag = session.query(Tag).filter(Tag.name == name).first()
        if not tag:
            tag = Tag(name=name)
            session.add(tag)
        return tag

    def close(self):
        """Close the notifier session and database connection."""
        if self.notifier:
            self.notifier.close()
        if self._engine:
            self._engine.dispose()

    def get_last_movie_name(self) -> Optional[str]:
        """Name of the most recently inserted movie, or None if the table is empty."""
        session = self._get_session()
        try:
            row = session.query(Movie.name).order_by(Movie.id.desc()).first()
            return row[0] if row else None
        finally:
            session.close()

    def insert_all(self, records: Sequence[MovieRecord]) -> List[str]:
        """
        Insert movies in the given order (callers pass them oldest first).

        Args:
            records: Movies to insert

        Returns:
            Names of the movies actually inserted, in insertion order
        """
        inserted = []
        for record in records:
            try:
                self.insert_movie(record)
            except PerRecordInsertFailure as e:
                logger.error(str(e))
                continue

            inserted.append(record.name)
            logger.info("Inserted: %s", record.name)
            self._notify(record.name)

        return inserted

    def insert_movie(self, record: MovieRecord) -> int:
        """
        Insert one movie with its download links, genres and tags.

        Returns:
            The new movie id

        Raises:
            StoreWriteConflict: If a movie with the same name exists
            PerRecordInsertFailure: If the record is invalid or the write fails
        """
        name = (record.name or '').strip()
        if not name:
            raise PerRecordInsertFailure('<unnamed>', "missing name")
        links = []
        for link in record.download_links:
            if link.url:
                links.append(link)
            else:
                logger.warning("Skipping download link %r of %s: no url", link.label, name)
        if not links:
            raise PerRecordInsertFailure(name, "no download links")

        session = self._get_session()
        try:
            if session.query(Movie.id).filter(Movie.name == name).first() is not None:
                raise StoreWriteConflict(name)

            movie = Movie(
                name=name,
                description=record.description,
                duration=record.duration,
                quality=record.quality,
                rating=record.rating,
                release_date=self._parse_date(record.release_date),
                language=record.language,
                iframe_src=record.iframe_src,
                poster=record.poster,
                poster_alt=record.poster_alt,
                url=record.url,
                year=record.year,
                backdrop_path=record.backdrop_path,
            )

            for link in links:
                movie.download_links.append(DownloadLink(label=link.label, url=link.url))

            for genre_name in _unique_names(record.genres):
                movie.genres.append(self._get_or_create_genre(session, genre_name))

            for tag_name in _unique_names(record.tags):
                movie.tags.append(self._get_or_create_tag(session, tag_name))

            session.add(movie)
            session.commit()
            return movie.id

        except PerRecordInsertFailure:
            session.rollback()
            raise
        except (SQLAlchemyError, ValueError, TypeError) as e:
            session.rollback()
            raise PerRecordInsertFailure(name, str(e)) from e
        finally:
            session.close()

    def _notify(self, name: str):
        if not self.notifier:
            return
        try:
            self.notifier.notify()
        except Exception as e:
            logger.warning("Revalidation after %s failed: %s", name, e)

    def get_stats(self) -> dict:
        """Row counts for movies, genres and tags."""
        session = self._get_session()
        try:
            return {
                'total_movies': session.query(func.count(Movie.id)).scalar() or 0,
                'genres_count': session.query(func.count(Genre.id)).scalar() or 0,
                'tags_count': session.query(func.count(Tag.id)).scalar() or 0,
                'latest_movie': self.get_last_movie_name(),
            }
        finally:
            session.close()


def _unique_names(names: Iterable[str]) -> List[str]:
    """Strip, drop blanks and de-duplicate case-insensitively, keeping the first spelling."""
    seen = set()
    result = []
    for raw in names:
        name = (raw or '').strip()
        if name and name.casefold() not in seen:
            seen.add(name.casefold())
            result.append(name)
    return result
