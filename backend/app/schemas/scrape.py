"""Scrape run schemas."""
from typing import List

from pydantic import BaseModel


class ScrapeStats(BaseModel):
    processedPages: int = 0
    moviesFound: int = 0
    moviesInserted: int = 0


class ScrapeResponse(BaseModel):
    """Run report returned by the scrape trigger."""
    success: bool
    stats: ScrapeStats
    completed: bool
    nextPage: int
    message: str
    stopReason: str = ""
    inserted: List[str] = []


class ErrorResponse(BaseModel):
    error: str
    message: str = ""
