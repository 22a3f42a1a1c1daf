"""
Key-value settings collaborators

The Logger remembers its global log level, native handler state and
session preference across runs through one of these stores.
"""

from __future__ import annotations

import json
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional, Union

SETTINGS_GROUP = "session_log/general"
KEY_GLOBAL_LOG_LEVEL = f"{SETTINGS_GROUP}/global_log_level"
KEY_IS_NATIVE_MESSAGE_HANDLER = f"{SETTINGS_GROUP}/is_native_message_handler"
KEY_REMEMBER_SESSION_CONFIG = f"{SETTINGS_GROUP}/remember_session_config"


class SettingsStore(ABC):
    """Abstract key-value settings store."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a stored value.

        Args:
            key: Settings key
            default: Returned when the key was never set

        Returns:
            Stored value or default
        """
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store a value."""
        pass


class MemorySettings(SettingsStore):
    """Settings held in memory for the lifetime of the process."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._values: Dict[str, Any] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._values[key] = value

    def to_dict(self) -> Dict[str, Any]:
        with self._lock:
            return dict(self._values)


class JsonFileSettings(SettingsStore):
    """
    Settings persisted to a JSON file.

    The file is read once on construction and rewritten on every set().
    A missing or unreadable file starts out empty.
    """

    def __init__(self, path: Union[str, Path], encoding: str = "utf-8"):
        self.path = Path(path)
        self.encoding = encoding
        self._lock = threading.Lock()
        self._values: Dict[str, Any] = self._read()

    def _read(self) -> Dict[str, Any]:
        try:
            with open(self.path, "r", encoding=self.encoding) as f:
                data = json.load(f)
        except (OSError, ValueError):
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding=self.encoding) as f:
            json.dump(self._values, f, indent=2, sort_keys=True)

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._values[key] = value
            self._write()

    def __repr__(self) -> str:
        return f"JsonFileSettings(path='{self.path}')"
