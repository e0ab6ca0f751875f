"""FastAPI application entry point."""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from movie_scraper.config import Settings as ScraperSettings
from movie_scraper.logger import configure_logging, get_logger

from backend.app.api.router import api_router
from backend.app.core.config import settings

logger = get_logger(__name__)

app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler to log all errors."""
    logger.error("ERROR: %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc), "type": type(exc).__name__}
    )


app.include_router(api_router)


@app.on_event("startup")
async def startup_event():
    """Run on application startup."""
    scraper_settings = ScraperSettings()
    configure_logging(
        "DEBUG" if settings.debug else scraper_settings.log_level,
        scraper_settings.log_file_path or None,
    )
    logger.info("%s v%s", settings.app_name, settings.api_version)
    logger.info("Scrape trigger: http://%s:%s/api/scrape", settings.host, settings.port)
