"""
Error types for the logging framework

Factory misuse raises immediately. Session failures are raised inside the
codec and converted by the Logger into a SessionResult for the caller.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Failure categories reported by session save/load."""

    ENGINE_INIT_FAILED = "engine_init_failed"
    FORMAT_VERSION_MISMATCH = "format_version_mismatch"
    CONFIG_CORRUPT = "config_corrupt"
    IO_ERROR = "io_error"


class LoggerError(Exception):
    """Base class for all logging framework errors."""


class UnknownFactoryTagError(LoggerError, KeyError):
    """An engine factory was asked for a tag nobody registered."""

    def __init__(self, tag: str):
        super().__init__(tag)
        self.tag = tag

    def __str__(self) -> str:
        return f"No logger engine factory registered for tag '{self.tag}'"


class SessionError(LoggerError):
    """Base class for session configuration failures."""

    kind: ErrorKind = ErrorKind.CONFIG_CORRUPT


class FormatVersionMismatchError(SessionError):
    """The file was written by an incompatible binary format version."""

    kind = ErrorKind.FORMAT_VERSION_MISMATCH

    def __init__(self, found: int, expected: int):
        super().__init__(
            f"Found binary export format version {found}, expected {expected}"
        )
        self.found = found
        self.expected = expected


class ConfigCorruptError(SessionError):
    """A marker did not match or the data ended early."""

    kind = ErrorKind.CONFIG_CORRUPT


class EngineImportError(ConfigCorruptError):
    """An engine failed to restore itself from its exported bytes."""


class EngineInitError(SessionError):
    """A reconstructed engine failed to initialize."""

    kind = ErrorKind.ENGINE_INIT_FAILED


class SessionIOError(SessionError):
    """The session file could not be opened, read or written."""

    kind = ErrorKind.IO_ERROR


class EngineExportError(SessionIOError):
    """An engine failed to write its exported state."""


@dataclass(frozen=True)
class SessionResult:
    """
    Outcome of a session save or load.

    Truthy on success. ``message`` is always a human readable diagnostic.
    """

    success: bool
    message: str
    error: Optional[ErrorKind] = None

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def ok(cls, message: str) -> "SessionResult":
        return cls(success=True, message=message)

    @classmethod
    def failed(cls, exc: SessionError) -> "SessionResult":
        return cls(success=False, message=str(exc), error=exc.kind)
