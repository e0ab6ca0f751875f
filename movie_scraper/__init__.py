"""
Incremental movie catalog scraper.
"""

from movie_scraper.config import ScraperConfig, Settings
from movie_scraper.models import MovieRecord, ProgressState, RunReport
from movie_scraper.scraper_controller import ScraperController

__all__ = [
    'ScraperConfig',
    'Settings',
    'MovieRecord',
    'ProgressState',
    'RunReport',
    'ScraperController',
]
