from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from backend.app.api.deps import get_controller_factory
from backend.app.main import app
from movie_scraper.models import RunReport, RunStats


class StubController:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.runs = 0
        self.closed = False

    def run(self) -> RunReport:
        self.runs += 1
        if self.error:
            raise self.error
        return RunReport(
            success=True,
            completed=False,
            next_page=3,
            message="In progress: Processed 2 pages, inserted 4 new movies, will continue from page 3 next run",
            stats=RunStats(processed_pages=2, movies_found=5, movies_inserted=4),
            inserted=["M6", "M7", "M8", "M9"],
            stop_reason="upstream-error",
        )

    def close(self):
        self.closed = True


@pytest.fixture()
def controller():
    stub = StubController()
    app.dependency_overrides[get_controller_factory] = lambda: (lambda: stub)
    yield stub
    app.dependency_overrides.clear()


@pytest.fixture()
def client():
    return TestClient(app)


def test_get_runs_scraper(client, controller) -> None:
    response = client.get("/api/scrape")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["completed"] is False
    assert body["nextPage"] == 3
    assert body["stats"] == {"processedPages": 2, "moviesFound": 5, "moviesInserted": 4}
    assert controller.runs == 1
    assert controller.closed is True


def test_post_is_rejected(client, controller) -> None:
    response = client.post("/api/scrape")

    assert response.status_code == 405
    assert response.json() == {"error": "Method not allowed"}
    assert controller.runs == 0


def test_cron_header_allows_other_methods(client, controller) -> None:
    response = client.post("/api/scrape", headers={"x-vercel-cron": "1"})

    assert response.status_code == 200
    assert controller.runs == 1


def test_scraper_exception_is_500(client) -> None:
    stub = StubController(error=RuntimeError("database unreachable"))
    app.dependency_overrides[get_controller_factory] = lambda: (lambda: stub)
    try:
        response = client.get("/api/scrape")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"error": "Scraper failed", "message": "database unreachable"}
    assert stub.closed is True


def test_health(client) -> None:
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_factory_failure_is_500(client) -> None:
    def failing_factory():
        raise ValueError("SCRAPER_API_TOKEN environment variable must be set.")

    app.dependency_overrides[get_controller_factory] = lambda: failing_factory
    try:
        response = client.get("/api/scrape")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json()["error"] == "Scraper failed"
