"""Logging setup shared by the engine, scripts and tests."""

import logging
import sys
from typing import Optional

from loguru import logger

from .settings import config

LOG_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level}</level> | <cyan>{name}</cyan> | {message}"


class PropagateHandler(logging.Handler):
    """Forwards loguru records to the standard logging hierarchy."""

    def emit(self, record: logging.LogRecord) -> None:
        logging.getLogger(record.name).handle(record)


def setup_logging(level: Optional[str] = None):
    """Configure logging using loguru or fall back to standard logging.

    Importing fuzzyrank disables the fuzzyrank and config loggers; this
    re-enables both.
    """
    level = level or config.LOG_LEVEL
    logger.remove()  # Remove default handler
    logger.enable("fuzzyrank")
    logger.enable("config")

    if config.USE_LOGURU:
        logger.add(sys.stderr, format=LOG_FORMAT, level=level, colorize=True)
        return logger

    std_logger = logging.getLogger("fuzzyrank")
    std_logger.setLevel(getattr(logging, level))
    if not std_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        ))
        std_logger.addHandler(handler)

    logger.add(PropagateHandler(), format="{message}", level=level)
    return std_logger
