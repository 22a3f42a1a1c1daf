"""Tests for persisted preferences and native message interception"""

import logging

import pytest

from logbus import MessageType, SOURCE_ALL
from logbus.native import InterceptingHandler, level_from_stdlib
from logbus.settings import (
    KEY_GLOBAL_LOG_LEVEL,
    KEY_IS_NATIVE_MESSAGE_HANDLER,
    KEY_REMEMBER_SESSION_CONFIG,
    JsonFileSettings,
    MemorySettings,
)

from helpers import RecordingEngine


def attach_active(logger, name="sink"):
    engine = RecordingEngine(name)
    engine.set_active(True)
    logger.attach_logger_engine(engine)
    return engine


class TestStoredSettings:
    """Test reading and writing the preference store."""

    def test_stored_level_read_on_initialize(self, make_logger):
        settings = MemorySettings({KEY_GLOBAL_LOG_LEVEL: int(MessageType.DEBUG)})
        logger = make_logger(settings=settings)
        assert logger.global_log_level() == MessageType.DEBUG

    def test_invalid_stored_level_ignored(self, make_logger, caplog):
        settings = MemorySettings({KEY_GLOBAL_LOG_LEVEL: 42})

        with caplog.at_level(logging.WARNING, logger="logbus.bootstrap"):
            logger = make_logger(level=MessageType.ERROR, settings=settings)

        assert logger.global_log_level() == MessageType.ERROR
        assert "42" in caplog.text

    def test_level_change_written(self, make_logger):
        settings = MemorySettings()
        logger = make_logger(settings=settings)

        logger.set_global_log_level(MessageType.ERROR)

        assert settings.to_dict() == {
            KEY_GLOBAL_LOG_LEVEL: int(MessageType.ERROR),
            KEY_IS_NATIVE_MESSAGE_HANDLER: False,
            KEY_REMEMBER_SESSION_CONFIG: False,
        }

    def test_json_settings_persist_level(self, make_logger, tmp_path):
        path = tmp_path / "prefs" / "logbus.json"
        logger = make_logger(settings=JsonFileSettings(path))
        logger.set_global_log_level(MessageType.TRACE)

        restarted = make_logger(settings=JsonFileSettings(path))

        assert restarted.global_log_level() == MessageType.TRACE


class TestJsonFileSettings:
    """Test the JSON backed store."""

    def test_roundtrip(self, tmp_path):
        path = tmp_path / "settings.json"
        JsonFileSettings(path).set("answer", 42)
        assert JsonFileSettings(path).get("answer") == 42

    def test_unreadable_file_starts_empty(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{not json", encoding="utf-8")

        settings = JsonFileSettings(path)

        assert settings.get("answer", "default") == "default"


class TestRememberSession:
    """Test automatic session save/restore."""

    def test_saved_on_finalize_restored_on_initialize(self, make_logger, tmp_path):
        settings = MemorySettings()
        first = make_logger(settings=settings)
        first.set_remember_session_config(True)
        assert first.new_file_engine("file", str(tmp_path / "app.txt"), "XML")
        first.set_global_log_level(MessageType.WARNING)
        first.finalize()

        second = make_logger(settings=settings)

        assert second.remember_session_config()
        assert second.global_log_level() == MessageType.WARNING
        engine = second.logger_engine_reference("file")
        assert engine is not None
        assert engine.formatting_engine_name() == "XML"
        assert engine.is_active()

    def test_not_remembered_by_default(self, make_logger, tmp_path):
        settings = MemorySettings()
        first = make_logger(settings=settings)
        assert first.new_file_engine("file", str(tmp_path / "app.txt"))
        first.finalize()

        second = make_logger(settings=settings)

        assert second.logger_engine_reference("file") is None
        assert not (tmp_path / "session" / "last.lbs").exists()


class TestNativeMessageHandler:
    """Test capturing stdlib logging records."""

    def test_install_captures_records(self, make_logger):
        settings = MemorySettings()
        logger = make_logger(settings=settings)
        engine = attach_active(logger)

        logger.install_as_native_message_handler()
        logging.getLogger("tests.intercepted").warning("captured %s", "value")

        assert logger.is_native_message_handler()
        assert settings.get(KEY_IS_NATIVE_MESSAGE_HANDLER) is True
        captured = [m for m in engine.received if m.text == "captured value"]
        assert len(captured) == 1
        assert captured[0].source == SOURCE_ALL
        assert captured[0].level == MessageType.WARNING

    def test_uninstall_stops_capturing(self, make_logger):
        logger = make_logger()
        engine = attach_active(logger)
        logger.set_is_native_message_handler(True)
        logger.set_is_native_message_handler(False)

        logging.getLogger("tests.intercepted").error("not captured")

        assert not logger.is_native_message_handler()
        assert "not captured" not in [m.text for m in engine.received]

    def test_installed_on_initialize_from_settings(self, make_logger):
        settings = MemorySettings({KEY_IS_NATIVE_MESSAGE_HANDLER: True})
        logger = make_logger(settings=settings)
        engine = attach_active(logger)

        logging.getLogger("tests.intercepted").error("early")

        assert logger.is_native_message_handler()
        assert [m.text for m in engine.received] == ["early"]

    def test_finalize_uninstalls(self, make_logger):
        logger = make_logger()
        logger.install_as_native_message_handler()
        logger.finalize()
        assert not logger.is_native_message_handler()


class TestInterceptingHandler:
    """Test the stdlib logging handler directly."""

    def test_own_records_ignored(self):
        calls = []
        handler = InterceptingHandler(lambda level, text: calls.append(text))

        for name in ("logbus", "logbus.native", "logbusy"):
            handler.handle(logging.makeLogRecord({"name": name, "levelno": logging.ERROR, "msg": name}))

        assert calls == ["logbusy"]

    def test_reentrant_records_dropped(self):
        target = logging.getLogger("tests.reentrant")
        target.propagate = False
        calls = []

        def callback(level, text):
            calls.append(text)
            target.warning("from inside the callback")

        handler = InterceptingHandler(callback)
        target.addHandler(handler)
        try:
            target.warning("outer")
        finally:
            target.removeHandler(handler)
            target.propagate = True

        assert calls == ["outer"]

    @pytest.mark.parametrize(
        "levelno,expected",
        [
            (logging.CRITICAL, MessageType.FATAL),
            (logging.ERROR, MessageType.ERROR),
            (logging.WARNING, MessageType.WARNING),
            (logging.INFO, MessageType.INFO),
            (logging.DEBUG, MessageType.DEBUG),
            (5, MessageType.TRACE),
        ],
    )
    def test_level_from_stdlib(self, levelno, expected):
        assert level_from_stdlib(levelno) == expected
