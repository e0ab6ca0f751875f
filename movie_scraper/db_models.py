"""
SQLAlchemy database models for the movie catalog and scraper state.
Supports MySQL (production) and SQLite (local runs and tests).
"""

from datetime import datetime, timezone
from pathlib import Path

from sqlalchemy import (
    Boolean, Column, String, Text, DateTime, Integer, Table, ForeignKey, Index,
    create_engine, event
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import relationship, declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


# Many-to-many association tables
movie_genres = Table(
    'movie_genres', Base.metadata,
    Column('movie_id', Integer, ForeignKey('movies.id', ondelete='CASCADE'), primary_key=True),
    Column('genre_id', Integer, ForeignKey('genres.id', ondelete='CASCADE'), primary_key=True)
)

movie_tags = Table(
    'movie_tags', Base.metadata,
    Column('movie_id', Integer, ForeignKey('movies.id', ondelete='CASCADE'), primary_key=True),
    Column('tag_id', Integer, ForeignKey('tags.id', ondelete='CASCADE'), primary_key=True)
)


class Movie(Base):
    """Movie row. Insertion order (id) follows publication order."""
    __tablename__ = 'movies'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), unique=True, nullable=False)
    description = Column(Text)
    duration = Column(String(50))
    quality = Column(String(50))
    rating = Column(String(20))
    release_date = Column(DateTime)
    language = Column(String(100))
    iframe_src = Column(String(500))
    poster = Column(String(500))
    poster_alt = Column(String(500))
    url = Column(String(500))
    year = Column(String(10))
    backdrop_path = Column(String(500))
    created_at = Column(DateTime, default=utcnow)

    download_links = relationship(
        "DownloadLink", back_populates="movie", cascade="all, delete-orphan"
    )
    genres = relationship("Genre", secondary=movie_genres, back_populates="movies")
    tags = relationship("Tag", secondary=movie_tags, back_populates="movies")


class DownloadLink(Base):
    """One download variant of a movie."""
    __tablename__ = 'download_links'

    id = Column(Integer, primary_key=True, autoincrement=True)
    movie_id = Column(Integer, ForeignKey('movies.id', ondelete='CASCADE'), nullable=False)
    label = Column(String(255))
    url = Column(String(1000), nullable=False)

    movie = relationship("Movie", back_populates="download_links")

    __table_args__ = (
        Index('idx_download_link_movie', 'movie_id'),
    )


class Genre(Base):
    """Genre shared by many movies. Unique on name so get-or-create cannot duplicate it."""
    __tablename__ = 'genres'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)

    movies = relationship("Movie", secondary=movie_genres, back_populates="genres")


class Tag(Base):
    """Free-form tag shared by many movies."""
    __tablename__ = 'tags'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), unique=True, nullable=False)

    movies = relationship("Movie", secondary=movie_tags, back_populates="tags")


class ScraperState(Base):
    """Append-only crawl progress. The row with the highest id is the current state."""
    __tablename__ = 'scraper_state'

    id = Column(Integer, primary_key=True, autoincrement=True)
    last_page = Column(Integer, nullable=False, default=1)
    last_movie_name = Column(String(255))
    boundary_name = Column(String(255))  # destination watermark when the cycle started
    completed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


def enable_sqlite_foreign_keys(dbapi_conn, connection_record):
    """Enable foreign key support for SQLite."""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_database(connection_string: str = None, database_path: str = "database/movies.db") -> Engine:
    """
    Create database engine and any missing tables.

    Args:
        connection_string: SQLAlchemy connection string (MySQL in production)
        database_path: Path for SQLite database (used if connection_string is None)

    Returns:
        SQLAlchemy engine
    """
    if not connection_string:
        Path(database_path).parent.mkdir(parents=True, exist_ok=True)
        connection_string = f"sqlite:///{database_path}"

    if connection_string.startswith("sqlite"):
        engine = create_engine(connection_string, echo=False)
        event.listen(engine, "connect", enable_sqlite_foreign_keys)
    else:
        engine = create_engine(connection_string, echo=False, pool_pre_ping=True)

    Base.metadata.create_all(engine)

    return engine
