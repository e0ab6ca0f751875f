"""
Cache invalidation webhook, called after each inserted movie.
"""

from typing import Optional

import requests

from movie_scraper.logger import get_logger

logger = get_logger(__name__)


class RevalidationNotifier:
    """Best-effort GET to the frontend's revalidate endpoint."""

    def __init__(
        self,
        url: str,
        secret: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None
    ):
        self.url = url
        self.secret = secret
        self.timeout = timeout
        self.session = session or requests.Session()

    def notify(self) -> bool:
        """Trigger revalidation. Returns False on failure, never raises."""
        if not self.url:
            return False

        try:
            response = self.session.get(
                self.url,
                params={'secret': self.secret},
                timeout=self.timeout
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.warning("Failed to revalidate: %s", e)
            return False

        logger.info("Revalidation triggered: %s", response.text[:200])
        return True

    def close(self):
        self.session.close()
