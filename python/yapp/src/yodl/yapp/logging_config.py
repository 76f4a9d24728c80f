"""
Logging configuration for yapp guests
"""

import logging
import sys
from typing import TextIO

LOG_FORMAT = "%(asctime)s - %(levelname)-8s %(name)s %(filename)s:%(lineno)d %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Parent logger of every SDK module
SDK_LOGGER = "yodl.yapp"


def setup_logging(
    level: int = logging.INFO,
    sdk_level: int | None = None,
    stream: TextIO | None = None,
) -> None:
    """
    Route all records to a single console handler

    Args:
        level: Root logging level (default: INFO)
        sdk_level: Separate level for yodl.yapp loggers, e.g. DEBUG to trace
            dropped messages without raising the application's verbosity
        stream: Output stream (default: stdout)
    """
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))

    root_logger = logging.getLogger()
    # Repeated calls must not duplicate output
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    logging.getLogger(SDK_LOGGER).setLevel(sdk_level if sdk_level is not None else logging.NOTSET)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
