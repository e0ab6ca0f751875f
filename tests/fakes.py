from __future__ import annotations

from movie_scraper.errors import TransportError
from movie_scraper.models import DownloadLinkRecord, MovieRecord
from movie_scraper.upstream_client import UpstreamPage


def make_movie(name: str, genres=None, tags=None, links=None) -> MovieRecord:
    if links is None:
        links = [DownloadLinkRecord(label="720p", url=f"https://dl.example/{name}/720")]
    return MovieRecord(
        name=name,
        description=f"{name} description",
        duration="2h 5m",
        quality="HD",
        release_date="2024-03-01",
        genres=list(genres or []),
        tags=list(tags or []),
        download_links=links,
    )


def transport_error(page: int) -> TransportError:
    return TransportError(page, "Service Unavailable", status=503)


class FakeUpstream:
    """Serves pages from a dict; a page mapped to an exception raises it."""

    def __init__(self, pages: dict | None = None):
        self.pages = pages or {}
        self.requested: list[int] = []
        self.closed = False

    def fetch_page(self, page: int) -> UpstreamPage:
        self.requested.append(page)
        value = self.pages.get(page, [])
        if isinstance(value, Exception):
            raise value
        records = [make_movie(n) if isinstance(n, str) else n for n in value]
        return UpstreamPage(page=page, records=records)

    def close(self):
        self.closed = True


class FakeNotifier:
    def __init__(self, fail: bool = False):
        self.calls = 0
        self.fail = fail
        self.closed = False

    def notify(self) -> bool:
        self.calls += 1
        if self.fail:
            raise RuntimeError("webhook down")
        return True

    def close(self):
        self.closed = True
