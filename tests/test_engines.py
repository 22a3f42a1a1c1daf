"""Tests for logger engines, the engine factory and engine management"""

import io
import logging

import pytest

from logbus import EngineChange, MessageType
from logbus.core.errors import UnknownFactoryTagError
from logbus.engines import ConsoleLoggerEngine, EngineFactory, FileLoggerEngine, NativeLoggerEngine
from logbus.formatters import DefaultFormatter, NativeMessageFormatter

from helpers import FailingInitEngine, RecordingEngine


class TestEngineFactory:
    """Test tag based engine construction."""

    def test_create_registered(self):
        factory = EngineFactory()
        factory.register_constructor("Recording", RecordingEngine)

        engine = factory.create("Recording")

        assert isinstance(engine, RecordingEngine)
        assert factory.has_tag("Recording")
        assert factory.available_tags() == ["Recording"]

    def test_unknown_tag(self):
        factory = EngineFactory()
        with pytest.raises(UnknownFactoryTagError) as excinfo:
            factory.create("Nope")
        assert excinfo.value.tag == "Nope"
        assert "Nope" in str(excinfo.value)

    def test_unknown_tag_is_key_error(self):
        with pytest.raises(KeyError):
            EngineFactory().create("Nope")

    def test_duplicate_registration(self):
        factory = EngineFactory()
        factory.register_constructor("Recording", RecordingEngine)
        with pytest.raises(ValueError):
            factory.register_constructor("Recording", RecordingEngine)

    def test_constructor_must_be_callable(self):
        with pytest.raises(TypeError):
            EngineFactory().register_constructor("Bad", "not callable")

    def test_logger_new_logger_engine(self, logger):
        engine = logger.new_logger_engine("File", "XML")

        assert isinstance(engine, FileLoggerEngine)
        assert engine.name() == "File"
        assert engine.formatting_engine_name() == "XML"
        assert engine.name() not in logger.attached_logger_engine_names()

    def test_logger_unknown_tag_raises(self, logger):
        with pytest.raises(UnknownFactoryTagError):
            logger.new_logger_engine("Database")


class TestAttachDetach:
    """Test the attached engine set."""

    def test_attach_emits_added(self, logger):
        events = []
        logger.engine_count_changed.connect(lambda engine, change: events.append((engine.name(), change)))

        engine = RecordingEngine("sink")
        assert logger.attach_logger_engine(engine)

        assert events == [("sink", EngineChange.ADDED)]
        assert engine.is_initialized()
        assert logger.message_received.is_connected(engine.new_message)
        assert logger.attached_logger_engine_names()[-1] == "sink"

    def test_init_failure_discards_engine(self, logger):
        events = []
        logger.engine_count_changed.connect(lambda engine, change: events.append(change))
        engine = FailingInitEngine("broken")

        assert not logger.attach_logger_engine(engine)

        assert "broken" not in logger.attached_logger_engine_names()
        assert engine.finalized
        assert events == []

    def test_attach_without_initialization(self, logger):
        engine = FailingInitEngine("restored")
        assert logger.attach_logger_engine(engine, initialize_engine=False)
        assert "restored" in logger.attached_logger_engine_names()

    def test_unregistered_formatting_engine_rejected(self, logger):
        engine = RecordingEngine("sink")
        engine.install_formatting_engine(DefaultFormatter())

        assert not logger.attach_logger_engine(engine)
        assert "sink" not in logger.attached_logger_engine_names()

    def test_detach_emits_removed_and_finalizes(self, logger):
        engine = RecordingEngine("sink")
        logger.attach_logger_engine(engine)
        events = []
        logger.engine_count_changed.connect(lambda e, change: events.append((e, change)))

        assert logger.detach_logger_engine(engine)

        assert events == [(engine, EngineChange.REMOVED)]
        assert engine.finalized
        assert not logger.message_received.is_connected(engine.new_message)
        logger.error("after detach")
        assert engine.received == []

    def test_detach_unknown_engine(self, logger):
        before = logger.attached_logger_engine_names()
        assert not logger.detach_logger_engine(RecordingEngine("stranger"))
        assert not logger.delete_engine("stranger")
        assert logger.attached_logger_engine_names() == before

    def test_permanent_engines_cannot_be_detached(self, logger):
        assert not logger.detach_logger_engine(logger.console_engine())
        assert not logger.delete_engine(NativeLoggerEngine.NAME)
        assert logger.attached_logger_engine_count() == 2

    def test_delete_all_keeps_permanent_engines(self, logger):
        for name in ("a", "b", "c"):
            logger.attach_logger_engine(RecordingEngine(name))

        assert logger.delete_all_logger_engines() == 3
        assert logger.attached_logger_engine_names() == [
            NativeLoggerEngine.NAME,
            ConsoleLoggerEngine.NAME,
        ]

    def test_references(self, logger):
        engine = RecordingEngine("sink")
        logger.attach_logger_engine(engine)

        assert logger.logger_engine_reference("sink") is engine
        assert logger.logger_engine_reference("missing") is None
        assert logger.logger_engine_reference_at(2) is engine
        assert logger.logger_engine_reference_at(3) is None
        assert logger.logger_engine_reference_at(-1) is None


class TestEngineActivity:
    """Test enabling and disabling engines."""

    def test_enable_disable_by_name(self, logger):
        engine = RecordingEngine("sink")
        logger.attach_logger_engine(engine)
        assert not engine.is_active()

        assert logger.enable_engine("sink")
        assert engine.is_active()
        assert logger.disable_engine("sink")
        assert not engine.is_active()
        assert not logger.enable_engine("missing")

    def test_enable_and_disable_all(self, logger):
        first, second = RecordingEngine("first"), RecordingEngine("second")
        logger.attach_logger_engine(first)
        logger.attach_logger_engine(second)

        logger.enable_all_logger_engines()
        assert first.is_active() and second.is_active()
        assert logger.console_engine().is_active()

        logger.disable_all_logger_engines()
        assert not first.is_active() and not second.is_active()


class TestFileEngine:
    """Test the file logger engine."""

    def test_new_file_engine_by_extension(self, logger, tmp_path):
        path = tmp_path / "logs" / "app.txt"

        assert logger.new_file_engine("app", str(path))
        engine = logger.logger_engine_reference("app")
        assert engine.is_active()
        assert engine.formatting_engine_name() == DefaultFormatter.NAME

        logger.error("written", "to file")
        logger.flush()

        assert "Error: written to file" in path.read_text(encoding="utf-8")

    def test_unknown_extension_needs_formatting_name(self, logger, tmp_path):
        path = str(tmp_path / "app.log")

        assert not logger.new_file_engine("app", path)
        assert logger.logger_engine_reference("app") is None

        assert logger.new_file_engine("app", path, "Default")
        assert logger.logger_engine_reference("app").formatting_engine_name() == "Default"

    def test_empty_file_name_rejected(self, logger):
        assert not logger.new_file_engine("app", "")

        engine = FileLoggerEngine("app")
        assert not engine.initialize()
        assert not logger.attach_logger_engine(engine)

    def test_xml_document_framing(self, logger, tmp_path):
        path = tmp_path / "app.xml"
        assert logger.new_file_engine("xml", str(path))

        logger.error("a < b")
        logger.delete_engine("xml")

        content = path.read_text(encoding="utf-8")
        assert content.startswith('<?xml version="1.0" encoding="UTF-8"?>\n<Log>\n')
        assert content.endswith("</Log>\n")
        assert "a &lt; b" in content

    def test_append_does_not_repeat_header(self, logger, tmp_path):
        path = tmp_path / "app.html"
        assert logger.new_file_engine("first", str(path))
        logger.delete_engine("first")
        assert logger.new_file_engine("second", str(path))
        logger.delete_engine("second")

        assert path.read_text(encoding="utf-8").count("<html>") == 1


class TestConsoleEngine:
    """Test the console logger engine."""

    def test_plain_output(self, logger):
        stream = io.StringIO()
        engine = ConsoleLoggerEngine(colored=False, stream=stream)
        engine.set_name("stream console")
        engine.install_formatting_engine(logger.formatting_engine_reference(NativeMessageFormatter.NAME))
        engine.set_active(True)
        logger.attach_logger_engine(engine)

        logger.warning("careful")

        assert stream.getvalue() == "Warning: careful\n"

    def test_colored_output(self):
        stream = io.StringIO()
        engine = ConsoleLoggerEngine(colored=True, stream=stream)

        engine.log_message("boom", MessageType.ERROR)

        assert stream.getvalue() == f"{MessageType.ERROR.color_code}boom{MessageType.ERROR.reset_code}\n"


class TestNativeEngine:
    """Test forwarding to the stdlib logging module."""

    def test_forwards_to_native_logger(self, logger, caplog):
        logger.toggle_native_engine(True)

        with caplog.at_level(logging.DEBUG, logger="logbus.native"):
            logger.error("native", "output")

        records = [r for r in caplog.records if r.name == "logbus.native"]
        assert [r.getMessage() for r in records] == ["Error: native output"]
        assert records[0].levelno == logging.ERROR

    def test_fatal_maps_to_critical(self, caplog):
        engine = NativeLoggerEngine()

        with caplog.at_level(logging.DEBUG, logger="logbus.native"):
            engine.log_message("gone", MessageType.FATAL)

        assert caplog.records[-1].levelno == logging.CRITICAL
