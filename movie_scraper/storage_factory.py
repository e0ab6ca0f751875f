"""
Builds the scraper components from Settings.
All components share one SQLAlchemy engine for the destination database.
"""

from typing import Optional

from movie_scraper.config import Settings
from movie_scraper.database_storage import DatabaseStorage
from movie_scraper.db_models import create_database
from movie_scraper.logger import get_logger
from movie_scraper.progress_store import ProgressStore
from movie_scraper.revalidation import RevalidationNotifier
from movie_scraper.scraper_controller import ScraperController
from movie_scraper.upstream_client import UpstreamClient

logger = get_logger(__name__)


def create_storage(settings: Settings, engine=None) -> DatabaseStorage:
    """
    Create database storage with its revalidation notifier.

    Args:
        settings: Application settings
        engine: Existing engine to reuse; created from settings if None
    """
    engine = engine or create_database(settings.connection_string)
    notifier = None
    if settings.revalidate_url:
        notifier = RevalidationNotifier(
            settings.revalidate_url,
            settings.revalidate_secret,
            timeout=settings.request_timeout
        )
    else:
        logger.info("REVALIDATE_URL not set, cache revalidation disabled")
    return DatabaseStorage(engine, notifier=notifier)


def create_progress_tracker(settings: Settings, engine=None) -> ProgressStore:
    engine = engine or create_database(settings.connection_string)
    return ProgressStore(engine)


def create_controller(settings: Optional[Settings] = None) -> ScraperController:
    """
    Create a fully wired controller.

    Raises:
        ValueError: If SCRAPER_API_TOKEN is not set
    """
    settings = settings or Settings()
    if not settings.scraper_api_token:
        raise ValueError(
            "SCRAPER_API_TOKEN environment variable must be set. "
            "Check your deployment secrets or .env file."
        )

    engine = create_database(settings.connection_string)
    client = UpstreamClient(
        settings.scraper_api_url,
        settings.scraper_api_token,
        timeout=settings.request_timeout
    )
    return ScraperController(
        client=client,
        storage=create_storage(settings, engine),
        progress=create_progress_tracker(settings, engine),
        config=settings.scraper_config()
    )
