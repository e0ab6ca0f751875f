"""
Exception types raised by the scraper components.
"""

from typing import Optional


class ScraperError(Exception):
    """Base class for scraper errors."""


class UpstreamError(ScraperError):
    """The upstream catalog could not supply a page. Stops paging for the run."""


class TransportError(UpstreamError):
    """Upstream unreachable, timed out or answered with a non-2xx status."""

    def __init__(self, page: int, reason: str, status: Optional[int] = None):
        self.page = page
        self.reason = reason
        self.status = status
        detail = f"HTTP {status}" if status is not None else reason
        super().__init__(f"Failed to fetch page {page}: {detail}")


class MalformedUpstreamPayload(UpstreamError):
    """Upstream answered 2xx with a body of the wrong shape."""

    def __init__(self, page: int, reason: str):
        self.page = page
        self.reason = reason
        super().__init__(f"Malformed payload for page {page}: {reason}")


class PerRecordInsertFailure(ScraperError):
    """Persisting one movie (or its attachments) failed."""

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f'Failed to insert movie "{name}": {reason}')


class StoreWriteConflict(PerRecordInsertFailure):
    """A movie with the same name already exists."""

    def __init__(self, name: str):
        super().__init__(name, "a movie with this name already exists")


class PersistenceFailure(ScraperError):
    """Progress state could not be written. Fatal to the invocation."""
