"""
Logger engine (sink) interface

Equivalent capability contract for every destination the Logger fans
messages out to.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional, TYPE_CHECKING

from logbus.core.log_level import MessageType
from logbus.core.log_message import LogMessage

if TYPE_CHECKING:
    from logbus.formatters.base_formatter import FormattingEngine
    from logbus.session.binary_stream import BinaryReader, BinaryWriter


class LoggerEngine(ABC):
    """
    Abstract base class for logger engines.

    An engine stays subscribed to the Logger's broadcast for as long as it
    is attached. The active flag only gates output: inactive engines still
    receive every message and drop it in new_message().

    With synchronous dispatch new_message() can run on several submitting
    threads at once; engines that write to a shared resource serialize
    their own output.
    """

    def __init__(self, name: str = ""):
        """
        Initialize logger engine.

        Args:
            name: Unique engine name (uniqueness is up to the caller)
        """
        self._name = name
        self._active = False
        self._initialized = False
        self._formatting_engine: Optional["FormattingEngine"] = None

    def name(self) -> str:
        return self._name

    def set_name(self, name: str) -> None:
        self._name = name

    def is_active(self) -> bool:
        return self._active

    def set_active(self, active: bool) -> None:
        self._active = bool(active)

    def is_initialized(self) -> bool:
        return self._initialized

    def install_formatting_engine(self, engine: Optional["FormattingEngine"]) -> None:
        """Install the formatting engine used to render messages."""
        self._formatting_engine = engine

    def formatting_engine(self) -> Optional["FormattingEngine"]:
        return self._formatting_engine

    def formatting_engine_name(self) -> str:
        """Name of the installed formatting engine, empty if none."""
        if self._formatting_engine is None:
            return ""
        return self._formatting_engine.name()

    def initialize(self) -> bool:
        """
        Prepare the engine for output.

        Returns:
            True on success. On failure the Logger discards the engine.
        """
        self._initialized = True
        return True

    def finalize(self) -> None:
        """Release resources. Safe to call more than once."""
        self._initialized = False

    def flush(self) -> None:
        """Flush buffered output, if any."""

    def format(self, message: LogMessage) -> str:
        """Render a message with the installed formatting engine."""
        if self._formatting_engine is None:
            return str(message)
        return self._formatting_engine.format_message(
            message.level, message.parts, message.timestamp
        )

    def new_message(self, message: LogMessage) -> None:
        """Broadcast slot: render and output the message if active."""
        if not self._active:
            return
        self.log_message(self.format(message), message.level)

    @abstractmethod
    def log_message(self, text: str, level: MessageType) -> None:
        """
        Perform the sink specific output.

        Args:
            text: Rendered message
            level: Message type of the original message
        """
        pass

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(name={self._name!r}, active={self._active}, "
            f"formatting={self.formatting_engine_name()!r})"
        )


class Exportable(ABC):
    """
    Persistence capability for logger engines.

    Only engines with this capability are written to, and recreated from,
    a session configuration file.
    """

    @abstractmethod
    def factory_tag(self) -> str:
        """Tag the engine factory knows this engine type under."""
        pass

    @abstractmethod
    def export_binary(self, writer: "BinaryWriter") -> bool:
        """
        Write engine specific state.

        Returns:
            True on success
        """
        pass

    @abstractmethod
    def import_binary(self, reader: "BinaryReader") -> bool:
        """
        Restore engine specific state written by export_binary().

        Returns:
            True on success
        """
        pass


def is_exportable(engine: LoggerEngine) -> bool:
    return isinstance(engine, Exportable)
