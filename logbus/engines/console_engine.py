"""Console logger engine with ANSI colors"""

import sys
import threading

from logbus.core.log_level import MessageType
from logbus.engines.base_engine import LoggerEngine


class ConsoleLoggerEngine(LoggerEngine):
    """Write messages to a console stream with optional colors."""

    NAME = "Console"

    def __init__(self, colored: bool = True, stream=None):
        """
        Initialize console engine.

        Args:
            colored: Use ANSI color codes
            stream: Output stream (default: sys.stderr)
        """
        super().__init__(self.NAME)
        self.colored = colored
        self.stream = stream or sys.stderr
        self._lock = threading.Lock()

    def log_message(self, text: str, level: MessageType) -> None:
        """Write rendered message to the console."""
        if self.colored:
            text = f"{level.color_code}{text}{level.reset_code}"

        with self._lock:
            self.stream.write(text + "\n")
            self.stream.flush()

    def flush(self) -> None:
        """Flush stream."""
        self.stream.flush()
