"""Pydantic schemas."""
from backend.app.schemas.scrape import (
    ScrapeStats,
    ScrapeResponse,
    ErrorResponse,
)

__all__ = [
    "ScrapeStats",
    "ScrapeResponse",
    "ErrorResponse",
]
