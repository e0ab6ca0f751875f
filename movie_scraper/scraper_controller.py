"""
Main orchestrator for incremental scraping.

One call to run() fetches at most a budgeted number of catalog pages, stops
at the first movie already present in the destination store, checkpoints
progress after every page and inserts the new movies oldest first. A cycle
that cannot finish within one invocation resumes from the saved page on the
next one.
"""

import time
from typing import Callable, List, Optional

from movie_scraper.boundary import split_page
from movie_scraper.config import ScraperConfig
from movie_scraper.database_storage import DatabaseStorage
from movie_scraper.errors import PersistenceFailure, UpstreamError
from movie_scraper.logger import get_logger
from movie_scraper.models import MovieRecord, ProgressState, RunReport, RunStats
from movie_scraper.progress_store import ProgressStore
from movie_scraper.upstream_client import UpstreamClient

logger = get_logger(__name__)

# Why paging stopped
STOP_BOUNDARY = 'boundary'
STOP_EXHAUSTED = 'exhausted'
STOP_EMPTY_FIRST_PAGE = 'empty-first-page'
STOP_UPSTREAM_ERROR = 'upstream-error'
STOP_PAGE_BUDGET = 'page-budget'
STOP_TIME_BUDGET = 'time-budget'


class ScraperController:
    """Resumption engine: Idle -> Paging -> Flushing -> Completed | Suspended."""

    def __init__(
        self,
        client: UpstreamClient,
        storage: DatabaseStorage,
        progress: ProgressStore,
        config: Optional[ScraperConfig] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Initialize controller with its collaborators.

        Args:
            client: Upstream catalog client
            storage: Destination store and writer
            progress: Durable progress store
            config: Budgets, uses defaults if None
            clock: Monotonic clock used for the wall-clock budget
        """
        self.client = client
        self.storage = storage
        self.progress = progress
        self.config = config or ScraperConfig()
        self._clock = clock

    def close(self):
        """Release the upstream session, the notifier session and the database engine."""
        for component in (self.client, self.storage, self.progress):
            close = getattr(component, "close", None)
            if close is not None:
                close()

    def run(self) -> RunReport:
        """
        Run one invocation.

        Returns:
            RunReport with page/movie counts and the page to resume from

        Raises:
            PersistenceFailure: If progress could not be checkpointed
        """
        started = self._clock()
        stats = RunStats()

        # Idle
        destination_watermark = self.storage.get_last_movie_name()
        state = self.progress.read()
        if state.completed:
            logger.info("Previous cycle completed, starting a new one at page 1")
            state = self.progress.reset(boundary=destination_watermark)

        boundary = self._resolve_boundary(state, destination_watermark)

        # Paging
        page = state.cursor
        watermark = state.watermark
        new_movies: List[MovieRecord] = []
        stop_reason = STOP_PAGE_BUDGET

        try:
            for _ in range(self.config.max_pages_per_run):
                elapsed = self._clock() - started
                if elapsed >= self.config.max_run_seconds:
                    logger.warning("Time budget exhausted after %.1fs, stopping before page %d", elapsed, page)
                    stop_reason = STOP_TIME_BUDGET
                    break

                logger.info("Processing page %d...", page)
                try:
                    result = self.client.fetch_page(page)
                except UpstreamError as e:
                    logger.error("%s", e)
                    stop_reason = STOP_UPSTREAM_ERROR
                    break

                if result.is_empty:
                    if page == 1 and not self.config.trust_empty_first_page:
                        logger.warning("Page 1 returned no movies; not treating it as end of catalog")
                        stop_reason = STOP_EMPTY_FIRST_PAGE
                        break
                    self.progress.write(page, watermark, True, boundary)
                    stop_reason = STOP_EXHAUSTED
                    break

                stats.processed_pages += 1
                stats.movies_found += len(result.records)

                split = split_page(result.records, boundary)
                new_movies.extend(split.keep)
                if split.keep:
                    watermark = split.keep[0].name

                if split.boundary_hit:
                    logger.info("Reached last known movie %r on page %d", boundary, page)
                    self.progress.write(page, watermark, True, boundary)
                    stop_reason = STOP_BOUNDARY
                    break

                self.progress.write(page + 1, watermark, False, boundary)
                page += 1
        except Exception:
            self._checkpoint(page, watermark, boundary)
            raise

        # Flushing
        inserted: List[str] = []
        if new_movies:
            inserted = self.storage.insert_all(list(reversed(new_movies)))
        stats.movies_inserted = len(inserted)

        completed = stop_reason in (STOP_BOUNDARY, STOP_EXHAUSTED)
        if completed:
            self.progress.clear()
            message = (
                f"Completed: Found and processed {stats.movies_inserted} new movies. "
                f"Cleared scraper state."
            )
        else:
            message = (
                f"In progress: Processed {stats.processed_pages} pages, "
                f"inserted {stats.movies_inserted} new movies, "
                f"will continue from page {page} next run"
            )
        logger.info(message)

        return RunReport(
            success=True,
            completed=completed,
            next_page=page,
            message=message,
            stats=stats,
            inserted=inserted,
            stop_reason=stop_reason,
        )

    def _resolve_boundary(self, state: ProgressState, destination_watermark: Optional[str]) -> Optional[str]:
        """
        Pick the name paging stops at.

        A fresh cycle stops at the latest movie in the store. A resumed cycle
        keeps the boundary it started with, because earlier runs of the same
        cycle have already inserted newer movies.
        """
        if state.cursor == 1:
            return destination_watermark

        if state.boundary != destination_watermark:
            logger.info(
                "Resuming cycle at page %d with boundary %r (store latest is %r)",
                state.cursor, state.boundary, destination_watermark
            )
        return state.boundary

    def _checkpoint(self, page: int, watermark: Optional[str], boundary: Optional[str]):
        """Best-effort save before an unexpected error propagates."""
        try:
            self.progress.write(page, watermark, False, boundary)
            logger.info("Saved progress at page %d after error", page)
        except (PersistenceFailure, ValueError) as e:
            logger.error("Could not checkpoint progress at page %d: %s", page, e)
