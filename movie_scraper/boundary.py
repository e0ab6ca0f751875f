"""
Boundary detection between newly published and already ingested movies.
"""

from typing import Optional, Sequence

from movie_scraper.models import MovieRecord, PageSplit


def split_page(records: Sequence[MovieRecord], destination_watermark: Optional[str]) -> PageSplit:
    """
    Keep the newest-first prefix of a page that precedes the watermark.

    Args:
        records: One upstream page, newest first
        destination_watermark: Name of the latest ingested movie, or None for an empty store

    Returns:
        PageSplit with the new records and whether the watermark was reached
    """
    if destination_watermark is None:
        return PageSplit(keep=list(records), boundary_hit=False)

    for index, record in enumerate(records):
        if record.name == destination_watermark:
            return PageSplit(keep=list(records[:index]), boundary_hit=True)

    return PageSplit(keep=list(records), boundary_hit=False)
