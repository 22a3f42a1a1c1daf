"""
Fixed-width binary stream helpers

Layout conventions:
- u32: 4 bytes, big-endian
- bool: 1 byte (0 or 1)
- string: u32 byte length followed by UTF-8 bytes
"""

from __future__ import annotations

import struct
from typing import BinaryIO

from logbus.core.errors import ConfigCorruptError

U32 = struct.Struct(">I")
BOOL = struct.Struct(">?")


class BinaryWriter:
    """Write fixed-width values to a binary stream."""

    def __init__(self, stream: BinaryIO):
        self._stream = stream

    def write_u32(self, value: int) -> None:
        self._stream.write(U32.pack(int(value)))

    def write_bool(self, value: bool) -> None:
        self._stream.write(BOOL.pack(bool(value)))

    def write_string(self, value: str) -> None:
        data = (value or "").encode("utf-8")
        self.write_u32(len(data))
        self._stream.write(data)


class BinaryReader:
    """
    Read fixed-width values from a binary stream.

    Any short read raises ConfigCorruptError, since a truncated file is
    how an interrupted save shows up.
    """

    def __init__(self, stream: BinaryIO):
        self._stream = stream

    def _read_exact(self, size: int) -> bytes:
        data = self._stream.read(size)
        if len(data) != size:
            raise ConfigCorruptError(
                f"Unexpected end of data: wanted {size} bytes, got {len(data)}"
            )
        return data

    def read_u32(self) -> int:
        return U32.unpack(self._read_exact(U32.size))[0]

    def read_bool(self) -> bool:
        raw = self._read_exact(BOOL.size)
        if raw not in (b"\x00", b"\x01"):
            raise ConfigCorruptError(f"Invalid boolean byte {raw!r}")
        return raw == b"\x01"

    def read_string(self) -> str:
        length = self.read_u32()
        try:
            return self._read_exact(length).decode("utf-8")
        except UnicodeDecodeError as e:
            raise ConfigCorruptError(f"Invalid UTF-8 string: {e}") from e

    def at_end(self) -> bool:
        """True when no bytes remain (only for seekable streams)."""
        position = self._stream.tell()
        remaining = self._stream.read(1)
        self._stream.seek(position)
        return not remaining
