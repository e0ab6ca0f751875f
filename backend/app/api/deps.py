"""API dependencies."""
from typing import Callable

from movie_scraper.scraper_controller import ScraperController
from movie_scraper.storage_factory import create_controller

from backend.app.core.config import settings

__all__ = ["get_controller_factory", "settings"]


def get_controller_factory() -> Callable[[], ScraperController]:
    """Return a factory so a controller is only built for accepted requests."""
    return create_controller
