"""Settings module - Preference stores used by the Logger"""

from logbus.settings.settings_store import (
    KEY_GLOBAL_LOG_LEVEL,
    KEY_IS_NATIVE_MESSAGE_HANDLER,
    KEY_REMEMBER_SESSION_CONFIG,
    JsonFileSettings,
    MemorySettings,
    SettingsStore,
)

__all__ = [
    "SettingsStore",
    "MemorySettings",
    "JsonFileSettings",
    "KEY_GLOBAL_LOG_LEVEL",
    "KEY_IS_NATIVE_MESSAGE_HANDLER",
    "KEY_REMEMBER_SESSION_CONFIG",
]
