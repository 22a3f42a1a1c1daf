"""
Message type (verbosity rank) enumeration

Position in the enumeration is the rank used for threshold filtering.
"""

from enum import IntEnum
from typing import Dict, List


class MessageType(IntEnum):
    """
    Verbosity rank of a log message.

    NONE and ALL_LOG_LEVELS are control values used for thresholds only;
    a message carrying either of them is never dispatched.
    """

    NONE = 0
    INFO = 1
    WARNING = 2
    ERROR = 3
    FATAL = 4
    DEBUG = 5
    TRACE = 6
    ALL_LOG_LEVELS = 7

    def __str__(self) -> str:
        """String representation of message type."""
        return self.name

    @property
    def is_sentinel(self) -> bool:
        """True for the control values that never accompany a message."""
        return self in (MessageType.NONE, MessageType.ALL_LOG_LEVELS)

    @classmethod
    def from_string(cls, level_str: str) -> "MessageType":
        """
        Convert an enum member name to MessageType.

        Args:
            level_str: Member name (case-insensitive)

        Returns:
            MessageType enum value

        Raises:
            ValueError: If level_str is not valid
        """
        level_str = level_str.upper().replace(" ", "_")
        if level_str in cls.__members__:
            return cls[level_str]
        raise ValueError(f"Invalid message type: {level_str}")

    def to_display(self) -> str:
        """Human readable name, as shown in level selectors."""
        return DISPLAY_NAMES[self]

    @classmethod
    def from_display(cls, text: str) -> "MessageType":
        """Inverse of to_display(); unknown text maps to NONE."""
        return LEVEL_FROM_DISPLAY.get(text, cls.NONE)

    @classmethod
    def all_display_strings(cls, release_mode: bool = False) -> List[str]:
        """
        Display strings of every level, in rank order.

        Debug and Trace are left out in release mode since they can never
        be dispatched there.
        """
        return [
            DISPLAY_NAMES[level]
            for level in cls
            if not (release_mode and level in (cls.DEBUG, cls.TRACE))
        ]

    @property
    def color_code(self) -> str:
        """
        Get ANSI color code for this level.

        Returns:
            ANSI escape sequence
        """
        colors = {
            MessageType.INFO: "\033[32m",     # Green
            MessageType.WARNING: "\033[33m",  # Yellow
            MessageType.ERROR: "\033[31m",    # Red
            MessageType.FATAL: "\033[35m",    # Magenta
            MessageType.DEBUG: "\033[36m",    # Cyan
            MessageType.TRACE: "\033[37m",    # White
        }
        return colors.get(self, "\033[0m")

    @property
    def reset_code(self) -> str:
        """ANSI reset code."""
        return "\033[0m"


DISPLAY_NAMES: Dict[MessageType, str] = {
    MessageType.NONE: "None",
    MessageType.INFO: "Information",
    MessageType.WARNING: "Warning",
    MessageType.ERROR: "Error",
    MessageType.FATAL: "Fatal",
    MessageType.DEBUG: "Debug",
    MessageType.TRACE: "Trace",
    MessageType.ALL_LOG_LEVELS: "All Log Levels",
}

# Reverse mapping
LEVEL_FROM_DISPLAY: Dict[str, MessageType] = {v: k for k, v in DISPLAY_NAMES.items()}
