"""
Configuration for the incremental movie scraper.

Settings are read from environment variables (or a .env file) and handed to
each component explicitly; nothing reads module-level globals.
"""

from dataclasses import dataclass
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


DEFAULT_API_URL = "https://mkvking-scraper.vercel.app/api/movies"


@dataclass
class ScraperConfig:
    """Per-invocation budgets for the resumption engine."""
    max_pages_per_run: int = 4
    max_run_seconds: float = 50.0
    trust_empty_first_page: bool = False


class Settings(BaseSettings):
    """Environment-backed settings."""

    model_config = SettingsConfigDict(
        env_file=Path(__file__).parent.parent / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Destination store
    db_host: str = "localhost"
    db_port: int = 3306
    db_user: str = ""
    db_password: str = ""
    db_name: str = ""
    database_url: str = ""  # Overrides the db_* fields, e.g. sqlite:///movies.db

    # Upstream catalog
    scraper_api_url: str = DEFAULT_API_URL
    scraper_api_token: str = ""

    # Cache invalidation webhook
    revalidate_url: str = ""
    revalidate_secret: str = ""

    # Budgets
    max_pages_per_run: int = 4
    max_run_seconds: float = 50.0
    request_timeout: float = 15.0
    trust_empty_first_page: bool = False

    log_level: str = "INFO"
    log_file_path: str = ""

    @property
    def connection_string(self) -> str:
        """SQLAlchemy URL for the destination store."""
        if self.database_url:
            return self.database_url
        url = URL.create(
            "mysql+pymysql",
            username=self.db_user or None,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name or None,
        )
        return url.render_as_string(hide_password=False)

    def scraper_config(self) -> ScraperConfig:
        return ScraperConfig(
            max_pages_per_run=self.max_pages_per_run,
            max_run_seconds=self.max_run_seconds,
            trust_empty_first_page=self.trust_empty_first_page,
        )
