"""File logger engine"""

from pathlib import Path
import threading

from logbus.core.log_level import MessageType
from logbus.engines.base_engine import Exportable, LoggerEngine
from logbus.session.binary_stream import BinaryReader, BinaryWriter


class FileLoggerEngine(LoggerEngine, Exportable):
    """
    Append messages to a file.

    The installed formatting engine's document header is written when a new
    (empty) file is opened and its footer when the engine is finalized.
    """

    FACTORY_TAG = "File"

    def __init__(
        self,
        name: str = "",
        file_name: str = "",
        mode: str = "a",
        encoding: str = "utf-8",
    ):
        """
        Initialize file engine.

        Args:
            name: Engine name (default: the factory tag)
            file_name: Path to log file
            mode: File open mode (default: 'a' for append)
            encoding: File encoding (default: 'utf-8')
        """
        super().__init__(name or self.FACTORY_TAG)
        self._file_name = str(file_name) if file_name else ""
        self.mode = mode
        self.encoding = encoding
        self._file = None
        self._lock = threading.Lock()

    @classmethod
    def factory(cls) -> "FileLoggerEngine":
        """Constructor registered with the engine factory."""
        return cls()

    def file_name(self) -> str:
        return self._file_name

    def set_file_name(self, file_name: str) -> None:
        self._file_name = str(file_name) if file_name else ""

    def initialize(self) -> bool:
        """Open the log file; fails on an empty or unopenable path."""
        if not self._file_name:
            return False
        if self._file is not None:
            return True

        filepath = Path(self._file_name)
        try:
            filepath.parent.mkdir(parents=True, exist_ok=True)
            self._file = open(filepath, self.mode, encoding=self.encoding)
        except OSError:
            self._file = None
            return False

        header = self._header()
        if header and self._file.tell() == 0:
            self._file.write(header + "\n")
        return super().initialize()

    def finalize(self) -> None:
        """Write the document footer and close the file."""
        with self._lock:
            if self._file:
                footer = self._footer()
                if footer:
                    self._file.write(footer + "\n")
                self._file.close()
                self._file = None
        super().finalize()

    def log_message(self, text: str, level: MessageType) -> None:
        """Write rendered message to file."""
        with self._lock:
            if self._file:
                self._file.write(text + self._end_of_line())

    def flush(self) -> None:
        """Flush file buffer."""
        with self._lock:
            if self._file:
                self._file.flush()

    def _header(self) -> str:
        engine = self.formatting_engine()
        return engine.initialize_string() if engine else ""

    def _footer(self) -> str:
        engine = self.formatting_engine()
        return engine.finalize_string() if engine else ""

    def _end_of_line(self) -> str:
        engine = self.formatting_engine()
        return engine.end_of_line if engine else "\n"

    # Exportable

    def factory_tag(self) -> str:
        return self.FACTORY_TAG

    def export_binary(self, writer: BinaryWriter) -> bool:
        writer.write_string(self.name())
        writer.write_string(self._file_name)
        return True

    def import_binary(self, reader: BinaryReader) -> bool:
        name = reader.read_string()
        file_name = reader.read_string()
        if not file_name:
            return False
        self.set_name(name or self.FACTORY_TAG)
        self.set_file_name(file_name)
        return True
