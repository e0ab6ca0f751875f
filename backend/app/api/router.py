"""Main API router - aggregates all route modules."""
from fastapi import APIRouter

from backend.app.api.routes import scrape

api_router = APIRouter(prefix="/api")

api_router.include_router(scrape.router)


@api_router.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
