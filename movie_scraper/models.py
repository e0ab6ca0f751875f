"""
Data models for the incremental movie scraper.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass
class DownloadLinkRecord:
    """One download variant of a movie."""
    label: str
    url: str


@dataclass
class MovieRecord:
    """A movie as delivered by the upstream catalog."""
    name: str
    description: str = ''
    duration: str = ''
    quality: str = ''
    rating: Optional[str] = None
    release_date: str = ''
    language: str = ''
    iframe_src: str = ''
    poster: str = ''
    poster_alt: str = ''
    url: str = ''
    year: Optional[str] = None
    backdrop_path: str = ''
    genres: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    download_links: List[DownloadLinkRecord] = field(default_factory=list)

    @classmethod
    def from_payload(cls, data: dict) -> 'MovieRecord':
        """Build a record from one upstream JSON object, tolerating missing keys."""
        links = []
        for link in data.get('download_links') or []:
            if isinstance(link, dict):
                links.append(DownloadLinkRecord(
                    label=str(link.get('label') or ''),
                    url=str(link.get('url') or ''),
                ))

        return cls(
            name=str(data.get('name') or '').strip(),
            description=data.get('description') or '',
            duration=normalize_duration(data.get('duration')),
            quality=data.get('quality') or '',
            rating=_optional_str(data.get('rating')),
            release_date=str(data.get('release_date') or ''),
            language=data.get('language') or '',
            iframe_src=data.get('iframe_src') or '',
            poster=data.get('poster') or '',
            poster_alt=data.get('poster_alt') or '',
            url=data.get('url') or '',
            year=_optional_str(data.get('year')),
            backdrop_path=data.get('backdrop_path') or '',
            genres=_string_list(data.get('genre')),
            tags=_string_list(data.get('tags')),
            download_links=links,
        )


def normalize_duration(value: Any) -> str:
    """Strip the "Duration:" prefix some upstream entries carry."""
    if not value:
        return ''
    text = str(value)
    if text.startswith('Duration:'):
        return text[len('Duration:'):].lstrip()
    return text


def _optional_str(value: Any) -> Optional[str]:
    if value is None or value == '':
        return None
    return str(value)


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None]


@dataclass
class ProgressState:
    """Crawl progress: next page to fetch and the boundary of the current cycle."""
    cursor: int = 1
    watermark: Optional[str] = None
    completed: bool = False
    boundary: Optional[str] = None


@dataclass
class PageSplit:
    """Result of checking one page against the destination watermark."""
    keep: List[MovieRecord]
    boundary_hit: bool


@dataclass
class RunStats:
    processed_pages: int = 0
    movies_found: int = 0
    movies_inserted: int = 0


@dataclass
class RunReport:
    """Summary of one engine invocation."""
    success: bool
    completed: bool
    next_page: int
    message: str
    stats: RunStats = field(default_factory=RunStats)
    inserted: List[str] = field(default_factory=list)
    stop_reason: str = ''

    def to_dict(self) -> dict:
        return {
            'success': self.success,
            'stats': {
                'processedPages': self.stats.processed_pages,
                'moviesFound': self.stats.movies_found,
                'moviesInserted': self.stats.movies_inserted,
            },
            'completed': self.completed,
            'nextPage': self.next_page,
            'message': self.message,
            'stopReason': self.stop_reason,
            'inserted': list(self.inserted),
        }
