"""
Centralized Logging Configuration for ExamGuard

Console output by default; with log_to_file the service also keeps a
daily rotating log and a separate errors-only log under LOG_DIR.
"""
import logging
import logging.handlers
import sys
from pathlib import Path
from datetime import datetime
from typing import Optional

# Log format
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

MB = 1024 * 1024


def _rotating_handler(
    path: Path,
    max_mb: int,
    backups: int,
    level: int,
    formatter: logging.Formatter
) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=max_mb * MB,
        backupCount=backups,
        encoding="utf-8"
    )
    handler.setFormatter(formatter)
    handler.setLevel(level)
    return handler


def setup_logging(
    service_name: str = "examguard",
    level: str = "INFO",
    log_to_file: bool = False,
    log_to_console: bool = True,
    log_dir: Optional[str] = None
) -> logging.Logger:
    """
    Configure the root logger for the proctoring service.

    Replaces any handlers already installed, so calling it twice does
    not duplicate output.

    Args:
        service_name: Prefix for log filenames and the startup logger
        level: Root log level name (DEBUG, INFO, WARNING, ERROR)
        log_to_file: Also write rotating files under log_dir
        log_to_console: Write to stdout
        log_dir: Directory for log files (defaults to ./logs)

    Returns:
        Logger named after the service
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers = []

    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    log_file = None
    if log_to_file:
        directory = Path(log_dir or "logs")
        directory.mkdir(parents=True, exist_ok=True)

        log_file = directory / f"{service_name}_{datetime.now():%Y-%m-%d}.log"
        root_logger.addHandler(_rotating_handler(log_file, 10, 5, logging.DEBUG, formatter))
        root_logger.addHandler(_rotating_handler(
            directory / f"{service_name}_errors.log", 5, 3, logging.ERROR, formatter
        ))

    logger = logging.getLogger(service_name)
    logger.info(f"=== {service_name.upper()} STARTED === level={level}")
    if log_file is not None:
        logger.info(f"Writing logs to {log_file}")

    return logger
