"""
XML formatting engine

Each message becomes one <Message> element inside a <Log> document.
"""

from datetime import datetime
from typing import Any, Optional, Sequence
from xml.sax.saxutils import escape, quoteattr

from logbus.core.log_level import MessageType
from logbus.formatters.base_formatter import FormattingEngine


class XMLFormatter(FormattingEngine):
    """Format messages as XML elements."""

    NAME = "XML"
    FILE_EXTENSION = "xml"

    def initialize_string(self) -> str:
        return '<?xml version="1.0" encoding="UTF-8"?>\n<Log>'

    def finalize_string(self) -> str:
        return "</Log>"

    def format_message(
        self,
        level: MessageType,
        parts: Sequence[Any],
        timestamp: Optional[datetime] = None,
    ) -> str:
        timestamp = timestamp or datetime.now()
        lines = [
            f"  <Message Type={quoteattr(level.to_display())} "
            f"Timestamp={quoteattr(timestamp.isoformat())}>"
        ]
        for index, part in enumerate(parts):
            lines.append(f'    <Part Index="{index}">{escape(str(part))}</Part>')
        lines.append("  </Message>")
        return "\n".join(lines)
