from __future__ import annotations

from pathlib import Path

import pytest

from movie_scraper.database_storage import DatabaseStorage
from movie_scraper.db_models import create_database
from movie_scraper.progress_store import ProgressStore
from tests.fakes import FakeNotifier


@pytest.fixture()
def engine(tmp_path: Path):
    engine = create_database(f"sqlite:///{tmp_path / 'movies.db'}")
    yield engine
    engine.dispose()


@pytest.fixture()
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture()
def storage(engine, notifier) -> DatabaseStorage:
    return DatabaseStorage(engine, notifier=notifier)


@pytest.fixture()
def progress(engine) -> ProgressStore:
    return ProgressStore(engine)
