from __future__ import annotations

import pytest
import requests

from movie_scraper.errors import MalformedUpstreamPayload, TransportError
from movie_scraper.upstream_client import UpstreamClient

API_URL = "https://catalog.example/api/movies"


class FakeResponse:
    def __init__(self, status_code: int = 200, payload=None, text: str | None = None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else ""
        self.reason = "OK" if status_code < 400 else "Error"

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    def __init__(self, response=None, error: Exception | None = None):
        self.response = response
        self.error = error
        self.calls: list[dict] = []

    def post(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        if self.error:
            raise self.error
        return self.response

    def close(self):
        pass


def make_client(session: FakeSession) -> UpstreamClient:
    return UpstreamClient(API_URL, "secret-token", timeout=5, session=session)


def test_fetch_page_parses_movies() -> None:
    payload = {
        "movies": [
            {
                "name": "Newest",
                "duration": "Duration: 1h 40m",
                "genre": ["Action"],
                "tags": ["sequel"],
                "download_links": [{"label": "720p", "url": "https://dl.example/1"}],
            },
            {"name": "Older", "download_links": []},
        ]
    }
    session = FakeSession(FakeResponse(payload=payload))

    page = make_client(session).fetch_page(3)

    assert [m.name for m in page.records] == ["Newest", "Older"]
    assert page.records[0].duration == "1h 40m"
    assert page.records[0].genres == ["Action"]
    assert page.records[0].download_links[0].url == "https://dl.example/1"
    assert page.records[1].download_links == []
    assert not page.is_empty

    call = session.calls[0]
    assert call["url"] == API_URL
    assert call["json"] == {"page": 3}
    assert call["headers"]["Authorization"] == "Bearer secret-token"
    assert call["timeout"] == 5


@pytest.mark.parametrize("payload", [{}, {"movies": []}, {"movies": None}, {"movies": "nope"}])
def test_missing_or_empty_movies_is_empty_page(payload) -> None:
    page = make_client(FakeSession(FakeResponse(payload=payload))).fetch_page(1)

    assert page.is_empty


def test_non_success_status_is_transport_error() -> None:
    client = make_client(FakeSession(FakeResponse(status_code=502)))

    with pytest.raises(TransportError) as excinfo:
        client.fetch_page(2)

    assert excinfo.value.status == 502
    assert excinfo.value.page == 2


def test_redirect_status_is_transport_error() -> None:
    client = make_client(FakeSession(FakeResponse(status_code=302, payload={"movies": []})))

    with pytest.raises(TransportError) as excinfo:
        client.fetch_page(1)

    assert excinfo.value.status == 302


@pytest.mark.parametrize("error", [
    requests.exceptions.Timeout("slow"),
    requests.exceptions.ConnectionError("refused"),
])
def test_network_failure_is_transport_error(error) -> None:
    with pytest.raises(TransportError):
        make_client(FakeSession(error=error)).fetch_page(1)


def test_non_json_body_is_malformed() -> None:
    with pytest.raises(MalformedUpstreamPayload):
        make_client(FakeSession(FakeResponse(payload=None))).fetch_page(1)


def test_non_object_body_is_malformed() -> None:
    with pytest.raises(MalformedUpstreamPayload):
        make_client(FakeSession(FakeResponse(payload=["a", "b"]))).fetch_page(1)


def test_non_object_movie_is_malformed() -> None:
    with pytest.raises(MalformedUpstreamPayload):
        make_client(FakeSession(FakeResponse(payload={"movies": ["just a name"]}))).fetch_page(1)


def test_page_must_be_positive() -> None:
    session = FakeSession(FakeResponse(payload={"movies": []}))

    with pytest.raises(ValueError):
        make_client(session).fetch_page(0)

    assert session.calls == []
