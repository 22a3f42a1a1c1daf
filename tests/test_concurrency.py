"""Tests for dispatch running concurrently with engine changes"""

import logging
import threading

from logbus import MessageType
from logbus.native import InterceptingHandler, LoggingInterceptor

from helpers import ExportableRecordingEngine, RecordingEngine

JOIN_TIMEOUT = 10.0


def attach_active(logger, name):
    engine = RecordingEngine(name)
    engine.set_active(True)
    assert logger.attach_logger_engine(engine)
    return engine


def run_threads(*targets):
    """Run targets on daemon threads; return (still alive flags, errors)."""
    errors = []

    def wrap(target):
        def run():
            try:
                target()
            except Exception as e:
                errors.append(e)
        return run

    threads = [threading.Thread(target=wrap(t), daemon=True) for t in targets]
    for t in threads:
        t.start()
    for t in threads:
        t.join(JOIN_TIMEOUT)
    return [t.is_alive() for t in threads], errors


def submitted_indices(engine, prefix="msg "):
    return [int(m.text[len(prefix):]) for m in engine.received if m.text.startswith(prefix)]


class TestNativeInterception:
    """Test the native debug channel under concurrent use."""

    def test_native_engine_and_interceptor_do_not_deadlock(self, make_logger):
        logger = make_logger(level=MessageType.TRACE, interceptor=LoggingInterceptor())
        engine = attach_active(logger, "sink")
        logger.toggle_native_engine(True)
        logger.install_as_native_message_handler()
        third_party = logging.getLogger("tests.third_party")
        count = 500

        def submit():
            for i in range(count):
                logger.info(f"msg {i}")

        def log_natively():
            for i in range(count):
                third_party.warning("native %d", i)

        alive, errors = run_threads(submit, log_natively)

        assert alive == [False, False]
        assert errors == []
        assert submitted_indices(engine) == list(range(count))
        assert submitted_indices(engine, prefix="native ") == list(range(count))

    def test_own_records_rejected_before_handler_lock(self):
        calls = []
        handler = InterceptingHandler(lambda level, text: calls.append(text))
        record = logging.makeLogRecord({"name": "logbus.native", "levelno": logging.INFO, "msg": "x"})
        holding = threading.Event()
        release = threading.Event()

        def hold_lock():
            handler.acquire()
            holding.set()
            release.wait(JOIN_TIMEOUT)
            handler.release()

        holder = threading.Thread(target=hold_lock, daemon=True)
        holder.start()
        holding.wait(JOIN_TIMEOUT)
        try:
            alive, errors = run_threads(lambda: handler.handle(record))
        finally:
            release.set()
            holder.join(JOIN_TIMEOUT)

        assert alive == [False]
        assert errors == []
        assert calls == []


class TestDispatchDuringChanges:
    """Test that a message sees a whole engine set."""

    def test_dispatch_while_attaching_and_detaching(self, make_logger, capsys):
        logger = make_logger(level=MessageType.TRACE)
        stable = attach_active(logger, "stable")
        churned = []
        done = threading.Event()
        count = 1000

        def submit():
            try:
                for i in range(count):
                    logger.info(f"msg {i}")
            finally:
                done.set()

        def churn():
            k = 0
            while not done.is_set():
                engine = attach_active(logger, f"churn-{k}")
                churned.append(engine)
                assert logger.detach_logger_engine(engine)
                k += 1

        alive, errors = run_threads(submit, churn)

        assert alive == [False, False]
        assert errors == []
        assert submitted_indices(stable) == list(range(count))
        assert stable.outputs == [f"msg {i}" for i in range(count)]
        for engine in churned:
            indices = submitted_indices(engine)
            assert indices == sorted(set(indices))
        assert "Logger engine error" not in capsys.readouterr().err
        assert logger.attached_logger_engine_names()[-1] == "stable"

    def test_load_while_dispatching(self, make_logger, tmp_path):
        logger = make_logger(level=MessageType.TRACE)
        logger.register_logger_engine_factory(ExportableRecordingEngine.TAG, ExportableRecordingEngine)
        for name in ("alpha", "beta"):
            engine = ExportableRecordingEngine(name)
            engine.set_active(True)
            assert logger.attach_logger_engine(engine)
        session = tmp_path / "concurrent.lbs"
        assert logger.save_session_config(session)

        results = []
        done = threading.Event()
        count = 500

        def submit():
            try:
                for i in range(count):
                    logger.info(f"msg {i}")
            finally:
                done.set()

        def reload():
            while True:
                results.append(logger.load_session_config(session))
                if done.is_set():
                    break

        alive, errors = run_threads(submit, reload)

        assert alive == [False, False]
        assert errors == []
        assert results and all(results)
        for name in ("alpha", "beta"):
            instances = [e for e in ExportableRecordingEngine.instances if e.name() == name]
            delivered = []
            for engine in instances:
                indices = submitted_indices(engine)
                assert indices == sorted(indices)
                delivered.extend(indices)
            # Every message reached exactly one instance of each engine
            assert sorted(delivered) == list(range(count))
