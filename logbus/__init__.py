"""
logbus - Pluggable multi-sink logging engine

A process-wide message router that filters leveled messages against a
global log level, renders them through interchangeable formatting engines
and fans them out to any number of attached logger engines. The engine
configuration can be saved to and restored from a versioned binary file.
"""

__version__ = "1.0.0"

from logbus.core.logger import Logger, SOURCE_ALL
from logbus.core.log_message import LogMessage
from logbus.core.log_level import MessageType
from logbus.core.logger_config import LoggerConfig
from logbus.core.errors import ErrorKind, SessionResult
from logbus.core.signals import EngineChange

# Import submodules (not all classes by default)
from logbus import engines
from logbus import formatters
from logbus import session
from logbus import settings

__all__ = [
    "Logger",
    "SOURCE_ALL",
    "LogMessage",
    "MessageType",
    "LoggerConfig",
    "ErrorKind",
    "SessionResult",
    "EngineChange",
    "engines",
    "formatters",
    "session",
    "settings",
]
