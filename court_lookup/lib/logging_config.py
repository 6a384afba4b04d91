"""Logging configuration for the court case lookup engine."""

import os
import sys
from pathlib import Path
from typing import Any, Optional

from loguru import logger


def rotate_numbered_logs(directory: Path, base_name: str, extension: str, max_index: int = 9) -> Path:
    """Rotate existing numbered logs and return the path for the new log (base-1.ext).

    This shifts base-(i-1).ext -> base-i.ext for i from max_index down to 2,
    then ensures base-1.ext is available for the new log file.
    """
    # Move from highest to lowest to avoid clobbering
    for i in range(max_index, 1, -1):
        src = directory / f"{base_name}-{i-1}{extension}"
        dst = directory / f"{base_name}-{i}{extension}"
        if src.exists():
            try:
                src.replace(dst)
            except OSError:
                logger.debug("Could not rotate {} -> {}", src, dst)

    new_log = directory / f"{base_name}-1{extension}"
    if new_log.exists():
        try:
            new_log.unlink()
        except OSError:
            logger.debug("Could not remove stale {}", new_log)
    return new_log


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    max_index: Optional[int] = None,
) -> None:
    """Setup logging configuration for the lookup engine.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file path; existing numbered logs are rotated
        max_index: How many numbered log files to keep (default 9, or LOG_MAX_INDEX)
    """
    # Remove default handler
    logger.remove()

    logger.add(
        sys.stderr,
        level=log_level,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        colorize=True,
    )

    if log_file:
        log_path = Path(log_file)
        log_dir = log_path.parent
        log_dir.mkdir(parents=True, exist_ok=True)
        try:
            max_idx = int(max_index or os.getenv("LOG_MAX_INDEX") or 9)
        except ValueError:
            max_idx = 9

        numbered_log = rotate_numbered_logs(log_dir, log_path.stem, log_path.suffix or ".log", max_idx)
        logger.add(
            numbered_log,
            level=log_level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            encoding="utf-8",
        )

    logger.info("Logging initialized with level: {}", log_level)


def get_logger() -> Any:
    """Get the configured logger instance.

    Returns:
        Logger: Configured loguru logger
    """
    return logger
