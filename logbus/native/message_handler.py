"""
Native debug channel interception

Routes records emitted through the stdlib logging module into the Logger,
the same way messages from any other part of the process arrive there.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from logbus.core.log_level import MessageType

InterceptCallback = Callable[[MessageType, str], None]

# Records from the framework's own loggers are never routed back in.
OWN_LOGGER_PREFIX = "logbus"

_guard = threading.local()


def level_from_stdlib(levelno: int) -> MessageType:
    """Map a stdlib logging level number to a MessageType."""
    if levelno >= logging.CRITICAL:
        return MessageType.FATAL
    if levelno >= logging.ERROR:
        return MessageType.ERROR
    if levelno >= logging.WARNING:
        return MessageType.WARNING
    if levelno >= logging.INFO:
        return MessageType.INFO
    if levelno >= logging.DEBUG:
        return MessageType.DEBUG
    return MessageType.TRACE


class OwnRecordFilter(logging.Filter):
    """
    Reject records the interceptor must not route back into the Logger.

    Drops records from the framework's own loggers and records produced on
    a thread that is already inside the intercept callback. Handler filters
    run before the handler lock is taken, so a sink writing to stdlib
    logging never waits on the lock of a thread blocked in the Logger.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == OWN_LOGGER_PREFIX or record.name.startswith(OWN_LOGGER_PREFIX + "."):
            return False
        return not getattr(_guard, "active", False)


class InterceptingHandler(logging.Handler):
    """logging.Handler that hands every accepted record to a callback."""

    def __init__(self, callback: InterceptCallback, level: int = logging.NOTSET):
        super().__init__(level)
        self._callback = callback
        self.addFilter(OwnRecordFilter())

    def emit(self, record: logging.LogRecord) -> None:
        _guard.active = True
        try:
            self._callback(level_from_stdlib(record.levelno), self.format(record))
        except Exception:
            self.handleError(record)
        finally:
            _guard.active = False


class LoggingInterceptor:
    """
    Install/uninstall capability for the global debug message interceptor.

    By default the handler goes on the root logger so that every
    propagating stdlib logger is captured.
    """

    def __init__(self, target: Optional[logging.Logger] = None):
        """
        Initialize interceptor.

        Args:
            target: Logger to attach to (default: root logger)
        """
        self._target = target or logging.getLogger()
        self._handler: Optional[InterceptingHandler] = None
        self._lock = threading.Lock()

    def install(self, callback: InterceptCallback) -> None:
        """Route intercepted records to callback, replacing any previous one."""
        with self._lock:
            if self._handler is not None:
                self._target.removeHandler(self._handler)
            self._handler = InterceptingHandler(callback)
            self._target.addHandler(self._handler)

    def uninstall(self) -> None:
        with self._lock:
            if self._handler is not None:
                self._target.removeHandler(self._handler)
                self._handler = None

    def is_installed(self) -> bool:
        with self._lock:
            return self._handler is not None

    def __repr__(self) -> str:
        return f"LoggingInterceptor(target={self._target.name!r}, installed={self.is_installed()})"
