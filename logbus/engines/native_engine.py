"""
Native debug channel logger engine

Forwards rendered messages to the stdlib logging module, the platform's
own debug channel for Python processes.
"""

import logging

from logbus.core.log_level import MessageType
from logbus.engines.base_engine import LoggerEngine

NATIVE_LOGGER_NAME = "logbus.native"

# Below logging.DEBUG, as used by most trace level conventions
TRACE_LEVEL = 5

STDLIB_LEVELS = {
    MessageType.INFO: logging.INFO,
    MessageType.WARNING: logging.WARNING,
    MessageType.ERROR: logging.ERROR,
    MessageType.FATAL: logging.CRITICAL,
    MessageType.DEBUG: logging.DEBUG,
    MessageType.TRACE: TRACE_LEVEL,
}


class NativeLoggerEngine(LoggerEngine):
    """Write messages to the ``logbus.native`` stdlib logger."""

    NAME = "Native Debug"

    def __init__(self, logger: logging.Logger = None):
        super().__init__(self.NAME)
        self._logger = logger or logging.getLogger(NATIVE_LOGGER_NAME)

    def log_message(self, text: str, level: MessageType) -> None:
        self._logger.log(STDLIB_LEVELS.get(level, logging.INFO), text)
