"""
Log message record passed from the Logger to every attached engine
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Tuple

from logbus.core.log_level import MessageType

# First part is mandatory, nine more are optional.
MAX_MESSAGE_PARTS = 10


@dataclass(frozen=True)
class LogMessage:
    """
    A single submitted message.

    Immutable once created. ``parts`` holds the content parts in the order
    they were given, with omitted (None) parts already removed.
    """

    source: str
    level: MessageType
    parts: Tuple[Any, ...]
    timestamp: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        """Validate message after initialization."""
        if not isinstance(self.level, MessageType):
            raise TypeError("level must be MessageType enum")
        if not self.parts:
            raise ValueError("a message needs at least one content part")
        if len(self.parts) > MAX_MESSAGE_PARTS:
            raise ValueError(
                f"a message holds at most {MAX_MESSAGE_PARTS} content parts"
            )

    @classmethod
    def assemble(cls, source: str, level: MessageType, message: Any, *parts: Any) -> "LogMessage":
        """
        Build a message, skipping omitted optional parts.

        Args:
            source: Logical source-engine label
            level: Message type
            message: First (mandatory) content part
            parts: Up to nine optional parts; None entries are dropped

        Returns:
            New LogMessage instance
        """
        if len(parts) > MAX_MESSAGE_PARTS - 1:
            raise ValueError(
                f"a message holds at most {MAX_MESSAGE_PARTS} content parts"
            )
        contents = (message,) + tuple(p for p in parts if p is not None)
        return cls(source=source, level=level, parts=contents)

    @property
    def text(self) -> str:
        """Plain text form of the first content part."""
        return str(self.parts[0])

    def __str__(self) -> str:
        """String representation."""
        return " ".join(str(p) for p in self.parts)
