"""Logging configuration and utilities."""

import logging
import time
from contextlib import contextmanager
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Generator

from rich.console import Console
from rich.logging import RichHandler

console = Console(stderr=True)


def setup_logging(
    verbose: bool = False,
    log_to_file: bool = False,
    log_dir: Path | None = None,
) -> None:
    """
    Configure logging for the application.

    Args:
        verbose: Enable verbose (DEBUG) logging
        log_to_file: Enable logging to file with rotation
        log_dir: Directory for log files (required when log_to_file is set)
    """
    log_level = logging.DEBUG if verbose else logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = []  # Clear existing handlers

    # Console handler with Rich formatting
    console_handler = RichHandler(
        rich_tracebacks=True,
        console=console,
        show_time=verbose,
        show_path=verbose,
        markup=False,
    )
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    if log_to_file and log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_dir / f"resize_cache_{timestamp}.log"

        # Rotating file handler (max 10MB, keep 5 backups)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)  # Always DEBUG in file
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(file_handler)

        logging.getLogger(__name__).info(f"Logging to file: {log_file}")

    # Pillow logs every plugin import at DEBUG
    logging.getLogger("PIL").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    mode = "VERBOSE" if verbose else "SIMPLE"
    logger.debug(f"Logging initialized - Mode: {mode}, Level: {logging.getLevelName(log_level)}")


@contextmanager
def log_performance(operation: str, logger: logging.Logger | None = None) -> Generator[None, None, None]:
    """
    Context manager to log operation performance.

    Args:
        operation: Name of the operation being measured
        logger: Logger instance (uses this module's logger if None)

    Usage:
        with log_performance("Produce abc_800x800.jpg", logger):
            producer(...)
    """
    logger = logger or logging.getLogger(__name__)
    start_time = time.time()

    logger.debug(f"[{operation}] Starting...")

    try:
        yield
    finally:
        elapsed = time.time() - start_time
        logger.debug(f"[{operation}] Completed in {elapsed:.2f}s")


def cleanup_old_logs(log_dir: Path, max_age_days: int = 7) -> None:
    """
    Clean up log files older than max_age_days.

    Args:
        log_dir: Directory holding resize_cache_*.log files
        max_age_days: Maximum age of log files to keep
    """
    logger = logging.getLogger(__name__)
    log_dir = Path(log_dir)

    if not log_dir.exists():
        return

    cutoff_time = time.time() - (max_age_days * 24 * 60 * 60)
    deleted_count = 0

    for log_file in log_dir.glob("resize_cache_*.log*"):
        if log_file.stat().st_mtime < cutoff_time:
            log_file.unlink()
            deleted_count += 1

    if deleted_count > 0:
        logger.debug(f"Cleaned up {deleted_count} old log files (>{max_age_days} days)")
