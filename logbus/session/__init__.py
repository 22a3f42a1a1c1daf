"""Session module - Binary save/restore of the engine configuration"""

from logbus.session.binary_stream import BinaryReader, BinaryWriter
from logbus.session.session_codec import (
    FORMAT_VERSION,
    MARKER_LOGGER_CONFIG_TAG,
    EngineProperties,
    SessionCodec,
    SessionSnapshot,
)

__all__ = [
    "BinaryReader",
    "BinaryWriter",
    "FORMAT_VERSION",
    "MARKER_LOGGER_CONFIG_TAG",
    "EngineProperties",
    "SessionCodec",
    "SessionSnapshot",
]
