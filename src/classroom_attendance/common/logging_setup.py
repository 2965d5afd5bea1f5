"""Logging setup shared by the API server and the capture client."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """Install console (and optional file) handlers on the package logger.

    Calling it twice replaces the handlers instead of duplicating them.
    """

    logger = logging.getLogger("classroom_attendance")
    logger.handlers.clear()

    log_level = getattr(logging, str(level).upper(), logging.INFO)
    logger.setLevel(log_level)

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)
    logger.addHandler(console_handler)

    if log_file:
        try:
            path = Path(log_file)
            path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(path, encoding="utf-8")
            file_handler.setFormatter(formatter)
            file_handler.setLevel(log_level)
            logger.addHandler(file_handler)
        except OSError as e:
            logger.warning("Could not setup file logging: %s", e)

    logger.propagate = False
    return logger
