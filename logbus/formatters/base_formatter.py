"""
Base formatting engine interface

A formatting engine turns (message type, content parts) into one string.
Engines are stateless and shared by every logger engine that installs them.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional, Sequence

from logbus.core.log_level import MessageType


class FormattingEngine(ABC):
    """
    Abstract base class for formatting engines.

    Subclasses set NAME and, when they map to a file type, FILE_EXTENSION.
    """

    NAME: str = ""
    FILE_EXTENSION: str = ""

    def name(self) -> str:
        """Unique name the engine is registered and persisted under."""
        return self.NAME

    def file_extension(self) -> str:
        """File extension associated with this format (may be empty)."""
        return self.FILE_EXTENSION

    @property
    def end_of_line(self) -> str:
        return "\n"

    def initialize_string(self) -> str:
        """Text written once at the start of a document (file sinks)."""
        return ""

    def finalize_string(self) -> str:
        """Text written once at the end of a document (file sinks)."""
        return ""

    @abstractmethod
    def format_message(
        self,
        level: MessageType,
        parts: Sequence[Any],
        timestamp: Optional[datetime] = None,
    ) -> str:
        """
        Render a message.

        Args:
            level: Message type
            parts: Ordered content parts, first one always present
            timestamp: Time of submission, defaults to now

        Returns:
            Rendered string, without trailing end-of-line
        """
        pass

    @staticmethod
    def join_parts(parts: Sequence[Any]) -> str:
        """Plain text of all content parts separated by spaces."""
        return " ".join(str(p) for p in parts)

    def __call__(self, level: MessageType, parts: Sequence[Any], timestamp: Optional[datetime] = None) -> str:
        """Allow formatting engines to be callable."""
        return self.format_message(level, parts, timestamp)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name()!r})"
