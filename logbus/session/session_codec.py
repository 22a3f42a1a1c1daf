"""
Session configuration codec

Binary layout, written in this order:

    u32     format version
    u32     marker
    u32     global log level
    u32     exportable engine count
            repeated: string factory tag, engine specific exported bytes
    u32     attached engine count
            repeated: string name, string formatting engine name, bool active
    u32     marker (trailing integrity check)

Reading parses and validates the whole stream, including the trailing
marker, before anything is handed back to the caller.
"""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, List, Sequence, TYPE_CHECKING, Union

from logbus.core.errors import (
    ConfigCorruptError,
    EngineExportError,
    EngineImportError,
    EngineInitError,
    FormatVersionMismatchError,
    SessionIOError,
)
from logbus.core.log_level import MessageType
from logbus.engines.base_engine import LoggerEngine, is_exportable
from logbus.session.binary_stream import BinaryReader, BinaryWriter

if TYPE_CHECKING:
    from logbus.engines.factory import EngineFactory

FORMAT_VERSION = 1
MARKER_LOGGER_CONFIG_TAG = 0xFAC0000F


@dataclass(frozen=True)
class EngineProperties:
    """Per-engine state restored by name after a load."""

    name: str
    formatting_engine_name: str
    active: bool


@dataclass
class SessionSnapshot:
    """
    Fully parsed session file.

    ``engines`` are new, unattached instances; whoever receives the
    snapshot owns them and must either attach them or call discard().
    """

    global_level: MessageType
    engines: List[LoggerEngine] = field(default_factory=list)
    properties: List[EngineProperties] = field(default_factory=list)

    def initialize_engines(self) -> None:
        """
        Initialize every reconstructed engine.

        Raises:
            EngineInitError: If any engine fails; all engines are discarded
        """
        for engine in self.engines:
            if not engine.initialize():
                name = engine.name()
                self.discard()
                raise EngineInitError(
                    f"Reconstructed logger engine '{name}' failed during initialization"
                )

    def discard(self) -> None:
        """Destroy every reconstructed engine."""
        for engine in self.engines:
            engine.finalize()
        self.engines.clear()


class SessionCodec:
    """Write and read session configuration files."""

    def __init__(
        self,
        factory: "EngineFactory",
        version: int = FORMAT_VERSION,
        marker: int = MARKER_LOGGER_CONFIG_TAG,
    ):
        """
        Initialize session codec.

        Args:
            factory: Engine factory used to reconstruct exported engines
            version: Binary format version written and expected
            marker: Marker written before the payload and after it
        """
        self._factory = factory
        self.version = version
        self.marker = marker

    # Writing

    def save(
        self,
        path: Union[str, Path],
        global_level: MessageType,
        engines: Sequence[LoggerEngine],
    ) -> int:
        """
        Write a session file.

        Args:
            path: Destination file
            global_level: Global log level to store
            engines: All attached engines, in order

        Returns:
            Number of exported engines

        Raises:
            SessionIOError: If the file cannot be opened or written
            EngineExportError: If an engine fails to export itself
        """
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            stream = open(path, "wb")
        except OSError as e:
            raise SessionIOError(f"Could not open {path} for writing: {e}") from e

        with stream:
            try:
                return self.write(stream, global_level, engines)
            except OSError as e:
                raise SessionIOError(f"Could not write {path}: {e}") from e

    def write(
        self,
        stream: BinaryIO,
        global_level: MessageType,
        engines: Sequence[LoggerEngine],
    ) -> int:
        """Serialize to an open binary stream. See save()."""
        export_list = [engine for engine in engines if is_exportable(engine)]
        writer = BinaryWriter(stream)

        writer.write_u32(self.version)
        writer.write_u32(self.marker)
        writer.write_u32(int(global_level))
        writer.write_u32(len(export_list))

        for engine in export_list:
            writer.write_string(engine.factory_tag())
            if not engine.export_binary(writer):
                # Trailing marker is never written, the file reads as corrupt.
                raise EngineExportError(
                    f"Logger engine '{engine.name()}' failed to export its state"
                )

        writer.write_u32(len(engines))
        for engine in engines:
            writer.write_string(engine.name())
            writer.write_string(engine.formatting_engine_name())
            writer.write_bool(engine.is_active())

        writer.write_u32(self.marker)
        return len(export_list)

    # Reading

    def load(self, path: Union[str, Path]) -> SessionSnapshot:
        """
        Read a session file.

        Raises:
            SessionIOError: If the file cannot be read
            FormatVersionMismatchError: If the version does not match
            ConfigCorruptError: If a marker is wrong or data is missing
            EngineImportError: If an engine cannot be reconstructed
        """
        path = Path(path)
        try:
            with open(path, "rb") as f:
                data = f.read()
        except OSError as e:
            raise SessionIOError(f"Could not read {path}: {e}") from e

        return self.read(io.BytesIO(data))

    def read(self, stream: BinaryIO) -> SessionSnapshot:
        """Parse an open binary stream. See load()."""
        reader = BinaryReader(stream)

        version = reader.read_u32()
        if version != self.version:
            raise FormatVersionMismatchError(version, self.version)
        if reader.read_u32() != self.marker:
            raise ConfigCorruptError("Leading marker mismatch, the file contains invalid data")

        raw_level = reader.read_u32()
        try:
            global_level = MessageType(raw_level)
        except ValueError as e:
            raise ConfigCorruptError(f"Invalid global log level {raw_level}") from e

        snapshot = SessionSnapshot(global_level=global_level)
        try:
            for _ in range(reader.read_u32()):
                snapshot.engines.append(self._read_engine(reader))

            for _ in range(reader.read_u32()):
                snapshot.properties.append(
                    EngineProperties(
                        name=reader.read_string(),
                        formatting_engine_name=reader.read_string(),
                        active=reader.read_bool(),
                    )
                )

            if reader.read_u32() != self.marker:
                raise ConfigCorruptError("Trailing marker mismatch, the file is incomplete")
        except BaseException:
            snapshot.discard()
            raise

        return snapshot

    def _read_engine(self, reader: BinaryReader) -> LoggerEngine:
        tag = reader.read_string()
        if not self._factory.has_tag(tag):
            raise EngineImportError(f"No logger engine factory registered for tag '{tag}'")

        engine = self._factory.create(tag)
        try:
            if not is_exportable(engine):
                raise EngineImportError(f"Logger engines created for tag '{tag}' are not exportable")
            if not engine.import_binary(reader):
                raise EngineImportError(f"Logger engine with tag '{tag}' failed to import its state")
        except BaseException:
            engine.finalize()
            raise
        return engine
