"""Shared fixtures"""

import logging

import pytest

from logbus import Logger, LoggerConfig, MessageType
from logbus.native.message_handler import LoggingInterceptor
from logbus.settings.settings_store import MemorySettings

from helpers import ExportableRecordingEngine


@pytest.fixture
def make_logger(tmp_path):
    """Factory for initialized loggers; all of them are finalized on teardown."""
    created = []

    def _make(level=MessageType.FATAL, settings=None, interceptor=None, **config_kwargs):
        config_kwargs.setdefault("session_path", tmp_path / "session" / "last.lbs")
        config_kwargs.setdefault("console_colored", False)
        logger = Logger(
            LoggerConfig(default_level=level, **config_kwargs),
            settings=settings if settings is not None else MemorySettings(),
            interceptor=interceptor or LoggingInterceptor(logging.getLogger("tests.intercepted")),
        )
        logger.initialize()
        created.append(logger)
        return logger

    yield _make

    for logger in created:
        logger.finalize()


@pytest.fixture
def logger(make_logger):
    return make_logger()


@pytest.fixture(autouse=True)
def reset_export_instances():
    ExportableRecordingEngine.instances.clear()
    yield
    ExportableRecordingEngine.instances.clear()
