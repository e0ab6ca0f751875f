"""
HTTP client for the upstream movie catalog.

The catalog is paginated newest-first. One call fetches one page; retries
are left to the next scheduled invocation.
"""

from dataclasses import dataclass, field
from typing import List, Optional

import requests

from movie_scraper.errors import MalformedUpstreamPayload, TransportError
from movie_scraper.logger import get_logger
from movie_scraper.models import MovieRecord

logger = get_logger(__name__)


@dataclass
class UpstreamPage:
    """One page of the catalog. An empty page means the catalog is exhausted."""
    page: int
    records: List[MovieRecord] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.records


class UpstreamClient:
    """Fetches catalog pages with a static bearer token."""

    def __init__(
        self,
        api_url: str,
        api_token: str,
        timeout: float = 15.0,
        session: Optional[requests.Session] = None
    ):
        """
        Args:
            api_url: Catalog endpoint accepting POST {"page": n}
            api_token: Bearer credential
            timeout: Per-request timeout in seconds
            session: Optional requests session (a new one is created if omitted)
        """
        self.api_url = api_url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {
            'Content-Type': 'application/json',
            'Authorization': f'Bearer {api_token}',
        }

    def fetch_page(self, page: int) -> UpstreamPage:
        """
        Fetch one page of movies.

        Raises:
            ValueError: If page is below 1
            TransportError: On network failure, timeout or non-2xx status
            MalformedUpstreamPayload: If the body is not a JSON object of movies
        """
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")

        try:
            response = self.session.post(
                self.api_url,
                headers=self.headers,
                json={'page': page},
                timeout=self.timeout
            )
        except requests.exceptions.Timeout:
            raise TransportError(page, "request timeout")
        except requests.exceptions.RequestException as e:
            raise TransportError(page, f"network error - {e}")

        if not 200 <= response.status_code < 300:
            raise TransportError(page, response.reason or "HTTP error", status=response.status_code)

        try:
            data = response.json()
        except ValueError:
            raise MalformedUpstreamPayload(page, "response body is not JSON")

        if not isinstance(data, dict):
            raise MalformedUpstreamPayload(page, f"expected a JSON object, got {type(data).__name__}")

        movies = data.get('movies')
        if not isinstance(movies, list) or not movies:
            logger.info("Page %d returned no movies", page)
            return UpstreamPage(page=page)

        records = []
        for index, item in enumerate(movies):
            if not isinstance(item, dict):
                raise MalformedUpstreamPayload(page, f"movie #{index} is not an object")
            records.append(MovieRecord.from_payload(item))

        logger.info("Fetched page %d: %d movies", page, len(records))
        return UpstreamPage(page=page, records=records)

    def close(self):
        self.session.close()
