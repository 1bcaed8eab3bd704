"""Module to create a logger instance."""

import logging
import sys
from logging import Formatter, Logger, StreamHandler
from typing import TextIO

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


class LevelRangeFilter(logging.Filter):
    """Accept only the records with a level between low and high (included)."""

    def __init__(self, *, low: int = logging.NOTSET, high: int = logging.CRITICAL):
        super().__init__()
        self.low = low
        self.high = high

    def filter(self, record):
        return self.low <= record.levelno <= self.high


def _stream_handler(stream: TextIO, level_filter: LevelRangeFilter) -> StreamHandler:
    handler = StreamHandler(stream)
    handler.setFormatter(Formatter(LOG_FORMAT))
    handler.addFilter(level_filter)
    return handler


def create_logger(name: str, level: str | int | None = None) -> Logger:
    """Create a logger with 2 stream handlers.

    Records up to WARNING go to stdout, ERROR and CRITICAL ones go to stderr.
    Handlers are attached only the first time a name is seen, so repeated boot
    requests reuse the same logger.
    """
    logger = logging.getLogger(name)
    error_msg = None
    if level is not None:
        try:
            logger.setLevel(level)
        except (TypeError, ValueError):
            error_msg = f"Invalid log level: {level}"

    if not logger.handlers:
        logger.addHandler(
            _stream_handler(sys.stdout, LevelRangeFilter(high=logging.WARNING))
        )
        logger.addHandler(
            _stream_handler(sys.stderr, LevelRangeFilter(low=logging.ERROR))
        )

    if error_msg is not None:
        logger.error(error_msg)

    return logger
