#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
k8s-ecstask logger. Conversion results go to stdout, so only DEBUG/INFO records share it,
warnings and errors go to stderr.
"""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = "k8s-ecstask"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
RECORD_FORMAT = "%(asctime)s [%(levelname)8s] %(message)s"
DEBUG_RECORD_FORMAT = (
    "%(asctime)s [%(levelname)8s] %(name)s %(module)s.%(funcName)s:%(lineno)d %(message)s"
)


class LevelFormatter(logging.Formatter):
    """Adds the code location to DEBUG records"""

    def __init__(self):
        super().__init__(RECORD_FORMAT, DATE_FORMAT)
        self.debug_formatter = logging.Formatter(DEBUG_RECORD_FORMAT, DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno <= logging.DEBUG:
            return self.debug_formatter.format(record)
        return super().format(record)


class MaxLevelFilter(logging.Filter):
    def __init__(self, max_level: int):
        super().__init__()
        self.max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno <= self.max_level


def stream_handler(stream, level: int, max_level: int = None) -> logging.Handler:
    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    handler.setFormatter(LevelFormatter())
    if max_level is not None:
        handler.addFilter(MaxLevelFilter(max_level))
    return handler


def setup_logging() -> logging.Logger:
    """
    Sets the k8s-ecstask logger. The stdout handler comes first, ``--loglevel`` changes its level.
    Calling it again replaces the handlers.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.addHandler(stream_handler(sys.stdout, logging.INFO, max_level=logging.INFO))
    logger.addHandler(stream_handler(sys.stderr, logging.WARNING))
    logger.setLevel(logging.INFO)
    return logger


LOG = setup_logging()
