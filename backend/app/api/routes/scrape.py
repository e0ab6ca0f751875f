"""Scrape trigger route."""
from typing import Callable

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from movie_scraper.logger import get_logger
from movie_scraper.scraper_controller import ScraperController

from backend.app.api.deps import get_controller_factory, settings
from backend.app.schemas import ErrorResponse, ScrapeResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/scrape", tags=["scrape"])


@router.api_route(
    "",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    response_model=ScrapeResponse,
    responses={405: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def run_scrape(
    request: Request,
    controller_factory: Callable[[], ScraperController] = Depends(get_controller_factory),
):
    """Run one incremental scrape. Only GET and scheduler (cron) calls are accepted."""
    if request.method != "GET" and not request.headers.get(settings.cron_header):
        return JSONResponse(status_code=405, content={"error": "Method not allowed"})

    controller = None
    try:
        controller = controller_factory()
        report = controller.run()
    except Exception as e:
        logger.exception("Scraper error")
        return JSONResponse(
            status_code=500,
            content={"error": "Scraper failed", "message": str(e)},
        )
    finally:
        if controller is not None:
            controller.close()

    return report.to_dict()
