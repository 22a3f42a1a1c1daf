"""Logger engines used across the test modules"""

import threading
from typing import List

from logbus.core.log_level import MessageType
from logbus.core.log_message import LogMessage
from logbus.engines.base_engine import Exportable, LoggerEngine


class RecordingEngine(LoggerEngine):
    """Engine that keeps everything it receives in memory."""

    def __init__(self, name: str = "recording"):
        super().__init__(name)
        self.received: List[LogMessage] = []
        self.outputs: List[str] = []
        self.levels: List[MessageType] = []
        self.finalized = False
        self._record_lock = threading.RLock()

    def new_message(self, message: LogMessage) -> None:
        with self._record_lock:
            self.received.append(message)
            super().new_message(message)

    def log_message(self, text: str, level: MessageType) -> None:
        self.outputs.append(text)
        self.levels.append(level)

    def finalize(self) -> None:
        self.finalized = True
        super().finalize()


class FailingInitEngine(RecordingEngine):
    """Engine whose initialize() always fails."""

    def initialize(self) -> bool:
        return False


class ExplodingEngine(RecordingEngine):
    """Engine whose output always raises."""

    def log_message(self, text: str, level: MessageType) -> None:
        raise RuntimeError("sink exploded")


class ExportableRecordingEngine(RecordingEngine, Exportable):
    """
    Exportable engine storing its name and a payload string.

    A payload of "fail-init" makes initialize() fail, "fail-import" makes
    import_binary() fail and "fail-export" makes export_binary() fail.
    """

    TAG = "Recording"
    instances: List["ExportableRecordingEngine"] = []

    def __init__(self, name: str = "", payload: str = "data"):
        super().__init__(name or self.TAG)
        self.payload = payload
        ExportableRecordingEngine.instances.append(self)

    def initialize(self) -> bool:
        if self.payload == "fail-init":
            return False
        return super().initialize()

    def factory_tag(self) -> str:
        return self.TAG

    def export_binary(self, writer) -> bool:
        if self.payload == "fail-export":
            return False
        writer.write_string(self.name())
        writer.write_string(self.payload)
        return True

    def import_binary(self, reader) -> bool:
        self.set_name(reader.read_string())
        self.payload = reader.read_string()
        return self.payload != "fail-import"
