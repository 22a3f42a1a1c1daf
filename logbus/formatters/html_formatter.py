"""
HTML formatting engine

Writes a standalone HTML document with one table row per message.
"""

from datetime import datetime
from html import escape
from typing import Any, Optional, Sequence

from logbus.core.log_level import MessageType
from logbus.formatters.base_formatter import FormattingEngine


class HTMLFormatter(FormattingEngine):
    """Format messages as HTML table rows."""

    NAME = "HTML"
    FILE_EXTENSION = "html"

    ROW_CLASSES = {
        MessageType.WARNING: "warning",
        MessageType.ERROR: "error",
        MessageType.FATAL: "fatal",
    }

    def initialize_string(self) -> str:
        return (
            "<html>\n<head>\n<title>Log</title>\n"
            "<style>tr.warning{color:orange} tr.error{color:red} "
            "tr.fatal{color:purple;font-weight:bold}</style>\n"
            "</head>\n<body>\n<table>\n"
            "<tr><th>Time</th><th>Type</th><th>Message</th></tr>"
        )

    def finalize_string(self) -> str:
        return "</table>\n</body>\n</html>"

    def format_message(
        self,
        level: MessageType,
        parts: Sequence[Any],
        timestamp: Optional[datetime] = None,
    ) -> str:
        timestamp = timestamp or datetime.now()
        row_class = self.ROW_CLASSES.get(level, "info")
        return (
            f'<tr class="{row_class}">'
            f"<td>{timestamp.strftime('%Y-%m-%d %H:%M:%S')}</td>"
            f"<td>{level.to_display()}</td>"
            f"<td>{escape(self.join_parts(parts))}</td></tr>"
        )
