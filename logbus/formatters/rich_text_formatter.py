"""
Rich text formatting engine

Produces colored HTML fragments for display widgets
"""

from datetime import datetime
from html import escape
from typing import Any, Optional, Sequence

from logbus.core.log_level import MessageType
from logbus.formatters.base_formatter import FormattingEngine


class RichTextFormatter(FormattingEngine):
    """Format messages as a colored rich text line."""

    NAME = "Rich Text"

    COLORS = {
        MessageType.INFO: "black",
        MessageType.WARNING: "orange",
        MessageType.ERROR: "red",
        MessageType.FATAL: "purple",
        MessageType.DEBUG: "gray",
        MessageType.TRACE: "gray",
    }

    @property
    def end_of_line(self) -> str:
        return "<br>\n"

    def format_message(
        self,
        level: MessageType,
        parts: Sequence[Any],
        timestamp: Optional[datetime] = None,
    ) -> str:
        timestamp = timestamp or datetime.now()
        color = self.COLORS.get(level, "black")
        text = escape(self.join_parts(parts))
        if level >= MessageType.ERROR and level <= MessageType.FATAL:
            text = f"<b>{text}</b>"
        return (
            f"<font color='{color}'>[{timestamp.strftime('%H:%M:%S')}] "
            f"{level.to_display()}: {text}</font>"
        )
