"""
Logging setup shared by the CLI and the API.

Modules only call get_logger(); the entry points call configure_logging()
once with values from Settings.
"""

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

_configured = False


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Install the rich console handler, plus a file handler when log_file is set."""
    global _configured
    root = logging.getLogger()
    root.setLevel(level.upper())
    if _configured:
        return

    console = Console(stderr=True)
    root.addHandler(RichHandler(console=console, show_path=False, markup=False))
    if log_file:
        root.addHandler(_file_handler(log_file))
    _configured = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name)


def _file_handler(log_file: str) -> logging.Handler:
    path = Path(log_file).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    return handler
