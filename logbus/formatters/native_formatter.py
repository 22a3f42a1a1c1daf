"""
Formatting engine for the native debug channel

The stdlib logging handlers add their own timestamps, so only the
message type and content are rendered.
"""

from datetime import datetime
from typing import Any, Optional, Sequence

from logbus.core.log_level import MessageType
from logbus.formatters.base_formatter import FormattingEngine


class NativeMessageFormatter(FormattingEngine):
    """Render "Type: content" lines for the native debug channel."""

    NAME = "Native Message Format"

    def format_message(
        self,
        level: MessageType,
        parts: Sequence[Any],
        timestamp: Optional[datetime] = None,
    ) -> str:
        return f"{level.to_display()}: {self.join_parts(parts)}"
