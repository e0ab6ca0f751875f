from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError

from movie_scraper.errors import PersistenceFailure
from movie_scraper.models import ProgressState
from movie_scraper.progress_store import ProgressStore


def test_read_initializes_state(progress: ProgressStore) -> None:
    state = progress.read()

    assert state == ProgressState(cursor=1, watermark=None, completed=False, boundary=None)
    # Persisted, not just returned
    assert progress.read() == state


def test_write_then_read_latest(progress: ProgressStore) -> None:
    progress.write(2, "M9", False, "M5")
    progress.write(3, "M7", False, "M5")

    state = progress.read()

    assert state.cursor == 3
    assert state.watermark == "M7"
    assert state.completed is False
    assert state.boundary == "M5"


def test_state_survives_new_store_instance(engine, progress: ProgressStore) -> None:
    progress.write(4, "M2", True)

    reopened = ProgressStore(engine)

    assert reopened.read() == ProgressState(cursor=4, watermark="M2", completed=True)


def test_clear_then_read_starts_over(progress: ProgressStore) -> None:
    progress.write(5, "M1", True)

    progress.clear()

    assert progress.read().cursor == 1


def test_reset_keeps_boundary(progress: ProgressStore) -> None:
    progress.write(3, "M8", True)

    state = progress.reset(boundary="M8")

    assert state == ProgressState(cursor=1, watermark=None, completed=False, boundary="M8")


def test_write_rejects_cursor_below_one(progress: ProgressStore) -> None:
    with pytest.raises(ValueError):
        progress.write(0)


def test_write_failure_raises_persistence_failure(progress: ProgressStore, monkeypatch) -> None:
    def broken_commit(self):
        raise OperationalError("INSERT", {}, Exception("disk I/O error"))

    monkeypatch.setattr("sqlalchemy.orm.Session.commit", broken_commit)

    with pytest.raises(PersistenceFailure):
        progress.write(2, "M1")
