"""
PanLoadMonitor - Logging Configuration

Console output follows the run mode: cron runs stay quiet unless something
goes wrong, interactive runs show progress and debug runs show everything.
The rotating log file always captures debug detail.
"""

import logging
import logging.handlers
import sys
from pathlib import Path


LOG_FILE_NAME = "panloadmonitor.log"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"

# Libraries whose INFO chatter would drown the report progress
QUIET_LIBRARIES = ("aiohttp", "asyncio")


def console_level_for(debug: bool, interactive: bool) -> int:
    """Return the console level for a run mode (WARNING for cron runs)."""
    if debug:
        return logging.DEBUG
    if interactive:
        return logging.INFO
    return logging.WARNING


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _file_handler(log_path: Path) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8"
    )
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(
    debug: bool = False,
    interactive: bool = False,
    log_dir: Path = Path("data/logs")
) -> Path:
    """
    Configure application-wide logging for one run.

    Replaces any handlers already on the root logger, so calling it twice
    does not duplicate output.

    Args:
        debug: Log debug traces for the application and print them
        interactive: Print progress messages, not only warnings and errors
        log_dir: Directory for the rotating log file (created if missing)

    Returns:
        Path of the log file
    """
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / LOG_FILE_NAME

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()
    root_logger.addHandler(_console_handler(console_level_for(debug, interactive)))
    root_logger.addHandler(_file_handler(log_path))

    logging.getLogger("panloadmonitor").setLevel(logging.DEBUG if debug else logging.INFO)
    for library in QUIET_LIBRARIES:
        logging.getLogger(library).setLevel(logging.WARNING)

    return log_path
