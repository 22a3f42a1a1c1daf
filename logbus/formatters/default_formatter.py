"""
Default plain text formatting engine

Formats messages using a template string with placeholders
"""

from datetime import datetime
from typing import Any, Optional, Sequence

from logbus.core.log_level import MessageType
from logbus.formatters.base_formatter import FormattingEngine


class DefaultFormatter(FormattingEngine):
    """
    Format messages using a customizable template.

    Used for console output and ``.txt`` log files.
    """

    NAME = "Default"
    FILE_EXTENSION = "txt"
    DEFAULT_TEMPLATE = "[{timestamp}] {level}: {message}"

    def __init__(self, template: str = None, timestamp_format: str = "%Y-%m-%d %H:%M:%S.%f"):
        """
        Initialize default formatter.

        Args:
            template: Format template with placeholders.
                     Available placeholders:
                     - {timestamp}: Timestamp
                     - {level}: Message type display name
                     - {message}: All content parts joined by spaces
                     - {first}: First content part only
            timestamp_format: strftime format for timestamps

        Example:
            formatter = DefaultFormatter("{level} - {message}")
        """
        self.template = template or self.DEFAULT_TEMPLATE
        self.timestamp_format = timestamp_format

    def format_message(
        self,
        level: MessageType,
        parts: Sequence[Any],
        timestamp: Optional[datetime] = None,
    ) -> str:
        timestamp = timestamp or datetime.now()
        timestamp_str = timestamp.strftime(self.timestamp_format)
        if self.timestamp_format.endswith("%f"):
            timestamp_str = timestamp_str[:-3]  # Milliseconds only

        format_dict = {
            "timestamp": timestamp_str,
            "level": level.to_display(),
            "message": self.join_parts(parts),
            "first": str(parts[0]),
        }

        try:
            return self.template.format(**format_dict)
        except KeyError as e:
            # Fallback if template has unknown placeholder
            return f"[FORMAT ERROR: {e}] {format_dict['message']}"

    def __repr__(self) -> str:
        """String representation."""
        return f"DefaultFormatter(template='{self.template}')"
