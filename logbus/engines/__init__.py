"""Engines module - Logger engine (sink) implementations"""

from logbus.engines.base_engine import LoggerEngine, Exportable, is_exportable
from logbus.engines.console_engine import ConsoleLoggerEngine
from logbus.engines.file_engine import FileLoggerEngine
from logbus.engines.native_engine import NativeLoggerEngine
from logbus.engines.factory import EngineFactory

__all__ = [
    "LoggerEngine",
    "Exportable",
    "is_exportable",
    "ConsoleLoggerEngine",
    "FileLoggerEngine",
    "NativeLoggerEngine",
    "EngineFactory",
]
