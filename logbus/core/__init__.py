"""
Core module for logbus

This module contains the fundamental classes:
- Logger: Message router and engine coordinator
- LogMessage: Message record passed to engines
- MessageType: Verbosity rank enumeration
- LoggerConfig: Configuration management
- Signal: Subscription channels exposed by the Logger
"""

from logbus.core.log_level import MessageType
from logbus.core.log_message import LogMessage, MAX_MESSAGE_PARTS
from logbus.core.errors import (
    ErrorKind,
    LoggerError,
    UnknownFactoryTagError,
    SessionError,
    FormatVersionMismatchError,
    ConfigCorruptError,
    EngineImportError,
    EngineExportError,
    EngineInitError,
    SessionIOError,
    SessionResult,
)
from logbus.core.signals import EngineChange, Signal
from logbus.core.logger_config import LoggerConfig
from logbus.core.logger import Logger, SOURCE_ALL

__all__ = [
    "Logger",
    "SOURCE_ALL",
    "LogMessage",
    "MAX_MESSAGE_PARTS",
    "MessageType",
    "LoggerConfig",
    "EngineChange",
    "Signal",
    "ErrorKind",
    "LoggerError",
    "UnknownFactoryTagError",
    "SessionError",
    "FormatVersionMismatchError",
    "ConfigCorruptError",
    "EngineImportError",
    "EngineExportError",
    "EngineInitError",
    "SessionIOError",
    "SessionResult",
]
