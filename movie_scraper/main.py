"""
Command-line entry point for the incremental movie scraper.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv
from sqlalchemy.exc import SQLAlchemyError

from movie_scraper.config import Settings
from movie_scraper.db_models import create_database
from movie_scraper.errors import ScraperError
from movie_scraper.logger import configure_logging, get_logger
from movie_scraper.storage_factory import create_controller, create_progress_tracker, create_storage

logger = get_logger(__name__)


def run_once(settings: Settings) -> int:
    """Run one invocation and print its report."""
    try:
        controller = create_controller(settings)
    except ValueError as e:
        logger.error("%s", e)
        return 2
    except SQLAlchemyError as e:
        logger.error("Database unavailable: %s", e)
        return 1

    try:
        report = controller.run()
    except (ScraperError, SQLAlchemyError) as e:
        logger.error("Scraper failed: %s", e)
        return 1
    finally:
        controller.close()

    print("\n" + "=" * 60)
    print("SCRAPE COMPLETE" if report.completed else "SCRAPE SUSPENDED")
    print("=" * 60)
    print(f"Pages:       {report.stats.processed_pages}")
    print(f"Found:       {report.stats.movies_found}")
    print(f"Inserted:    {report.stats.movies_inserted}")
    print(f"Next page:   {report.next_page}")
    print(f"Stopped by:  {report.stop_reason}")
    print(report.message)
    return 0


def show_status(settings: Settings) -> int:
    """Print the saved progress state and store counts."""
    storage = None
    try:
        storage = create_storage(settings)
        state = create_progress_tracker(settings, storage.engine).read()
        stats = storage.get_stats()
    except (ScraperError, SQLAlchemyError) as e:
        logger.error("Could not read scraper status: %s", e)
        return 1
    finally:
        if storage is not None:
            storage.close()

    print(f"Next page:      {state.cursor}")
    print(f"Last movie:     {state.watermark or '-'}")
    print(f"Cycle boundary: {state.boundary or '-'}")
    print(f"Completed:      {state.completed}")
    print(f"Movies:         {stats['total_movies']}")
    print(f"Genres:         {stats['genres_count']}")
    print(f"Tags:           {stats['tags_count']}")
    print(f"Latest movie:   {stats['latest_movie'] or '-'}")
    return 0


def reset_state(settings: Settings) -> int:
    """Clear saved progress so the next run starts a new cycle."""
    engine = None
    try:
        engine = create_database(settings.connection_string)
        create_progress_tracker(settings, engine).clear()
    except (ScraperError, SQLAlchemyError) as e:
        logger.error("Could not clear scraper state: %s", e)
        return 1
    finally:
        if engine is not None:
            engine.dispose()
    print("✓ Scraper state cleared")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Incremental movie catalog scraper',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run one invocation (resumes from saved state)
  movie-scraper

  # Fetch at most 2 pages in 30 seconds
  movie-scraper --max-pages 2 --max-seconds 30

  # Show saved progress
  movie-scraper --status

  # Forget saved progress
  movie-scraper --reset
"""
    )
    parser.add_argument(
        '--status',
        action='store_true',
        help='Show saved progress state and store counts'
    )
    parser.add_argument(
        '--reset',
        action='store_true',
        help='Clear saved progress state'
    )
    parser.add_argument(
        '--max-pages',
        type=int,
        help='Pages to fetch in this run (default: MAX_PAGES_PER_RUN or 4)'
    )
    parser.add_argument(
        '--max-seconds',
        type=float,
        help='Wall-clock budget in seconds (default: MAX_RUN_SECONDS or 50)'
    )
    parser.add_argument(
        '--env-file',
        type=Path,
        default=Path('.env'),
        help='Environment file to load (default: .env)'
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.env_file.exists():
        load_dotenv(args.env_file)

    settings = Settings()
    configure_logging(settings.log_level, settings.log_file_path or None)

    if args.max_pages is not None:
        settings.max_pages_per_run = args.max_pages
    if args.max_seconds is not None:
        settings.max_run_seconds = args.max_seconds

    if args.status:
        return show_status(settings)
    if args.reset:
        return reset_state(settings)
    return run_once(settings)


if __name__ == '__main__':
    sys.exit(main())
