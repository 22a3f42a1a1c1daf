"""
Logger - process-wide message router

Accepts leveled messages, filters them against the global log level and
fans them out to every attached logger engine.
"""

from __future__ import annotations
from pathlib import Path
from typing import Any, List, Optional, Union
import atexit
import logging
import queue
import sys
import threading

from logbus.core.errors import SessionError, SessionResult
from logbus.core.log_level import MessageType
from logbus.core.log_message import LogMessage
from logbus.core.logger_config import LoggerConfig
from logbus.core.signals import EngineChange, Signal
from logbus.engines.base_engine import LoggerEngine, is_exportable
from logbus.engines.console_engine import ConsoleLoggerEngine
from logbus.engines.factory import EngineConstructor, EngineFactory
from logbus.engines.file_engine import FileLoggerEngine
from logbus.engines.native_engine import NativeLoggerEngine
from logbus.formatters import builtin_formatting_engines
from logbus.formatters.base_formatter import FormattingEngine
from logbus.formatters.default_formatter import DefaultFormatter
from logbus.formatters.native_formatter import NativeMessageFormatter
from logbus.formatters.registry import FormattingRegistry
from logbus.native.message_handler import LoggingInterceptor
from logbus.session.session_codec import EngineProperties, SessionCodec
from logbus.settings.settings_store import (
    KEY_GLOBAL_LOG_LEVEL,
    KEY_IS_NATIVE_MESSAGE_HANDLER,
    KEY_REMEMBER_SESSION_CONFIG,
    MemorySettings,
    SettingsStore,
)

# Source label used for the Logger's own messages and intercepted ones
SOURCE_ALL = "All"
FORMATTING_ENGINE_UNINITIALIZED = "Uninitialized"

# No logger engines exist during initialize(), so bootstrap diagnostics go
# straight to the stdlib logging module.
_bootstrap_log = logging.getLogger("logbus.bootstrap")


def _report_engine_error(slot, error: Exception) -> None:
    engine = getattr(slot, "__self__", slot)
    print(f"Logger engine error ({engine!r}): {error}", file=sys.stderr)


class Logger:
    """
    Message router with pluggable logger engines.

    One Logger normally serves the whole process: construct it at the entry
    point and pass it to the code that logs, or use Logger.instance().

    Thread Safety:
        The attached engine list and the global log level are guarded by a
        single re-entrant lock. Dispatch takes a snapshot of the subscribed
        engines under that lock and calls them after releasing it, so a
        message is delivered to either the engine set before an
        attach/detach/load or the one after it, never a mix. Engines may
        therefore be called from several threads at once and serialize
        their own output; set async_dispatch in the config to deliver from
        a single worker thread instead.
    """

    _instance: Optional["Logger"] = None
    _instance_lock = threading.Lock()

    @classmethod
    def instance(cls) -> "Logger":
        """Process-wide Logger, created on first access."""
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    cls._instance = cls()
                    atexit.register(cls._instance.finalize)
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Finalize and drop the process-wide Logger."""
        with cls._instance_lock:
            if cls._instance is not None:
                cls._instance.finalize()
                cls._instance = None

    def __init__(
        self,
        config: Optional[LoggerConfig] = None,
        settings: Optional[SettingsStore] = None,
        interceptor: Optional[LoggingInterceptor] = None,
    ):
        """
        Initialize logger. Call initialize() before use.

        Args:
            config: Logger configuration (default: LoggerConfig.default())
            settings: Preference store (default: in-memory)
            interceptor: Native debug channel interceptor
        """
        self._config = config or LoggerConfig.default()
        self._settings = settings or MemorySettings()
        self._interceptor = interceptor or LoggingInterceptor()
        self._lock = threading.RLock()

        self._formatting_registry = FormattingRegistry()
        self._factory = EngineFactory()
        self._codec = SessionCodec(self._factory)
        self._engines: List[LoggerEngine] = []
        self._console_engine: Optional[ConsoleLoggerEngine] = None
        self._native_engine: Optional[NativeLoggerEngine] = None

        self._global_level = self._config.default_level
        self._default_formatting_engine = FORMATTING_ENGINE_UNINITIALIZED
        self._priority_formatting_engine: Optional[FormattingEngine] = None
        self._remember_session_config = self._config.remember_session_config
        self._is_native_message_handler = False
        self._builtins_registered = False
        self._initialized = False

        self._running = False
        self._log_queue: Optional[queue.Queue] = None
        self._worker_thread: Optional[threading.Thread] = None
        self._metrics = {"logged": 0, "dropped": 0, "processed": 0, "rejected": 0}

        # (LogMessage)
        self.message_received = Signal("message_received", on_error=_report_engine_error)
        # (MessageType, str)
        self.priority_message = Signal("priority_message")
        # (LoggerEngine, EngineChange)
        self.engine_count_changed = Signal("engine_count_changed")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self) -> None:
        """
        Register built-in formatting engines and factories, attach the
        console and native engines (inactive) and restore settings.
        """
        with self._lock:
            if self._initialized:
                return

            _bootstrap_log.debug("Logging framework initialization started...")
            if not self._builtins_registered:
                self._register_builtins()
            self._default_formatting_engine = DefaultFormatter.NAME

            _bootstrap_log.debug(
                "> Number of formatting engines available: %d",
                self._formatting_registry.count(),
            )
            _bootstrap_log.debug(
                "> Number of logger engine factories available: %d",
                len(self._factory.available_tags()),
            )

            self._attach_permanent(
                self._native_engine,
                self._formatting_registry.lookup_by_name(NativeMessageFormatter.NAME),
            )
            self._attach_permanent(
                self._console_engine,
                self._formatting_registry.lookup_by_name(DefaultFormatter.NAME),
            )

            self._read_settings()

            if self._config.async_dispatch:
                self._start_async_worker()
            self._initialized = True

        if self._remember_session_config:
            self.load_session_config()

        _bootstrap_log.debug("Logging framework initialization finished successfully...")

    def finalize(self) -> None:
        """Save the session if remembered, then destroy all non-permanent engines."""
        if not self._initialized:
            return

        if self._remember_session_config:
            self.save_session_config()

        self.flush()
        self._stop_async_worker()

        _bootstrap_log.debug("Logging framework clearing started...")
        removed = self.delete_all_logger_engines()
        _bootstrap_log.debug("> Deleted %d logger engines", removed)

        if self._interceptor.is_installed():
            self._interceptor.uninstall()
        self._is_native_message_handler = False

        with self._lock:
            self._initialized = False

    def is_initialized(self) -> bool:
        return self._initialized

    def _register_builtins(self) -> None:
        for engine in builtin_formatting_engines():
            self._formatting_registry.register(engine)
        self._factory.register_constructor(FileLoggerEngine.FACTORY_TAG, FileLoggerEngine.factory)
        self._console_engine = ConsoleLoggerEngine(colored=self._config.console_colored)
        self._native_engine = NativeLoggerEngine()
        self._builtins_registered = True

    def _attach_permanent(self, engine: LoggerEngine, formatting: Optional[FormattingEngine]) -> None:
        if any(e is engine for e in self._engines):
            return
        engine.install_formatting_engine(formatting)
        self.attach_logger_engine(engine, True)
        engine.set_active(False)

    def _is_permanent(self, engine: LoggerEngine) -> bool:
        return engine is self._console_engine or engine is self._native_engine

    # ------------------------------------------------------------------
    # Message dispatch
    # ------------------------------------------------------------------

    def _accepts(self, level: MessageType) -> bool:
        if self._config.release_mode and level in (MessageType.DEBUG, MessageType.TRACE):
            return False
        if level.is_sentinel:
            return False
        with self._lock:
            return level <= self._global_level

    def _submit(self, source: str, level: MessageType, message: Any, parts: tuple) -> Optional[LogMessage]:
        level = MessageType(level)
        if not self._accepts(level):
            with self._lock:
                self._metrics["rejected"] += 1
            return None

        entry = LogMessage.assemble(source, level, message, *parts)

        log_queue = self._log_queue
        if log_queue is not None:
            try:
                log_queue.put_nowait(entry)
            except queue.Full:
                with self._lock:
                    self._metrics["dropped"] += 1
                return entry
        else:
            self._broadcast(entry)

        with self._lock:
            self._metrics["logged"] += 1
        return entry

    def _broadcast(self, entry: LogMessage) -> None:
        """Deliver to every attached engine, active or not."""
        # Snapshot under the lock so a message sees either the whole old or
        # the whole new engine set. Sinks run without it.
        with self._lock:
            slots = self.message_received.receivers()
        self.message_received.deliver(slots, entry)
        with self._lock:
            self._metrics["processed"] += 1

    def log_message(self, source: str, level: MessageType, message: Any, *parts: Any) -> bool:
        """
        Submit a message to all attached engines.

        Args:
            source: Logical source-engine label
            level: Message type; NONE and ALL_LOG_LEVELS are always rejected
            message: First content part
            parts: Up to nine optional parts, None entries are skipped

        Returns:
            True if the message passed the level filter
        """
        return self._submit(source, level, message, parts) is not None

    def log_priority_message(self, source: str, level: MessageType, message: Any, *parts: Any) -> bool:
        """
        Submit a message and additionally emit it on the priority channel.

        The priority text is rendered with the priority formatting engine,
        or is the plain text of the first part when none is installed.
        """
        entry = self._submit(source, level, message, parts)
        if entry is None:
            return False

        with self._lock:
            formatting = self._priority_formatting_engine
        if formatting is not None:
            text = formatting.format_message(entry.level, entry.parts, entry.timestamp)
        else:
            text = entry.text

        self.priority_message.emit(entry.level, text)
        return True

    def info(self, message: Any, *parts: Any, source: str = SOURCE_ALL) -> bool:
        """Log info message."""
        return self.log_message(source, MessageType.INFO, message, *parts)

    def warning(self, message: Any, *parts: Any, source: str = SOURCE_ALL) -> bool:
        """Log warning message."""
        return self.log_message(source, MessageType.WARNING, message, *parts)

    def error(self, message: Any, *parts: Any, source: str = SOURCE_ALL) -> bool:
        """Log error message."""
        return self.log_message(source, MessageType.ERROR, message, *parts)

    def fatal(self, message: Any, *parts: Any, source: str = SOURCE_ALL) -> bool:
        """Log fatal message."""
        return self.log_message(source, MessageType.FATAL, message, *parts)

    def debug(self, message: Any, *parts: Any, source: str = SOURCE_ALL) -> bool:
        """Log debug message."""
        return self.log_message(source, MessageType.DEBUG, message, *parts)

    def trace(self, message: Any, *parts: Any, source: str = SOURCE_ALL) -> bool:
        """Log trace message."""
        return self.log_message(source, MessageType.TRACE, message, *parts)

    # ------------------------------------------------------------------
    # Async dispatch
    # ------------------------------------------------------------------

    def _start_async_worker(self) -> None:
        """Start the dispatch worker thread."""
        self._log_queue = queue.Queue(maxsize=self._config.queue_size)
        self._running = True
        self._worker_thread = threading.Thread(
            target=self._process_queue,
            name=f"{self._config.name}-dispatch",
            daemon=True,
        )
        self._worker_thread.start()

    def _process_queue(self) -> None:
        """Broadcast queued messages in submission order (worker thread)."""
        log_queue = self._log_queue
        while self._running or not log_queue.empty():
            try:
                entry = log_queue.get(timeout=0.1)
            except queue.Empty:
                continue

            try:
                self._broadcast(entry)
            finally:
                # Always mark task as done to prevent queue.join() deadlock
                log_queue.task_done()

    def _stop_async_worker(self) -> None:
        if not self._running:
            return

        self._running = False
        if self._worker_thread:
            self._worker_thread.join(timeout=5.0)
        self._worker_thread = None
        self._log_queue = None

    def flush(self) -> None:
        """Wait for queued messages to be delivered, then flush every engine."""
        log_queue = self._log_queue
        if log_queue is not None:
            log_queue.join()

        with self._lock:
            engines = list(self._engines)
        for engine in engines:
            engine.flush()

    def get_metrics(self) -> dict:
        """Get dispatch metrics."""
        with self._lock:
            return self._metrics.copy()

    # ------------------------------------------------------------------
    # Formatting engines
    # ------------------------------------------------------------------

    def formatting_registry(self) -> FormattingRegistry:
        return self._formatting_registry

    def register_formatting_engine(self, engine: FormattingEngine) -> None:
        """Register an additional formatting engine."""
        self._formatting_registry.register(engine)

    def available_formatting_engines(self) -> List[str]:
        return self._formatting_registry.names()

    def formatting_engine_reference(self, name: str) -> Optional[FormattingEngine]:
        return self._formatting_registry.lookup_by_name(name)

    def formatting_engine_reference_from_extension(self, file_extension: str) -> Optional[FormattingEngine]:
        return self._formatting_registry.lookup_by_extension(file_extension)

    def formatting_engine_reference_at(self, index: int) -> Optional[FormattingEngine]:
        return self._formatting_registry.reference_at(index)

    def attached_formatting_engine_count(self) -> int:
        return self._formatting_registry.count()

    def default_formatting_engine(self) -> str:
        return self._default_formatting_engine

    def set_priority_formatting_engine(self, engine: Union[str, FormattingEngine, None]) -> bool:
        """
        Set the engine used to render priority messages.

        Args:
            engine: Registered engine name or an engine instance

        Returns:
            False if a name is given that is not registered, or engine is None
        """
        if isinstance(engine, str):
            engine = self._formatting_registry.lookup_by_name(engine)
        if engine is None:
            return False

        with self._lock:
            self._priority_formatting_engine = engine
        return True

    def priority_formatting_engine(self) -> Optional[FormattingEngine]:
        with self._lock:
            return self._priority_formatting_engine

    # ------------------------------------------------------------------
    # Engine factories
    # ------------------------------------------------------------------

    def new_logger_engine(
        self,
        tag: str,
        formatting_engine: Union[str, FormattingEngine, None] = None,
    ) -> LoggerEngine:
        """
        Create (but do not attach) an engine through its factory.

        Raises:
            UnknownFactoryTagError: If tag was never registered
        """
        engine = self._factory.create(tag)
        engine.set_name(tag)

        if isinstance(formatting_engine, str):
            formatting_engine = self._formatting_registry.lookup_by_name(formatting_engine)
        if formatting_engine is not None:
            engine.install_formatting_engine(formatting_engine)
        return engine

    def register_logger_engine_factory(self, tag: str, constructor: EngineConstructor) -> None:
        self._factory.register_constructor(tag, constructor)

    def available_logger_engines(self) -> List[str]:
        """Registered factory tags."""
        return self._factory.available_tags()

    def new_file_engine(self, engine_name: str, file_name: str, formatting_engine: str = "") -> bool:
        """
        Create, attach and activate a file engine.

        The formatting engine is looked up by name, falling back to the
        engine associated with the file's extension.

        Returns:
            False if no formatting engine resolves or the file cannot be opened
        """
        if not file_name:
            return False

        formatting = None
        if formatting_engine:
            formatting = self._formatting_registry.lookup_by_name(formatting_engine)
        if formatting is None:
            formatting = self._formatting_registry.lookup_by_extension(Path(file_name).suffix)
        if formatting is None:
            return False

        engine = self._factory.create(FileLoggerEngine.FACTORY_TAG)
        engine.set_name(engine_name)
        engine.set_file_name(file_name)
        engine.install_formatting_engine(formatting)

        if not self.attach_logger_engine(engine, True):
            return False
        engine.set_active(True)
        return True

    # ------------------------------------------------------------------
    # Attached engines
    # ------------------------------------------------------------------

    def attach_logger_engine(self, engine: LoggerEngine, initialize_engine: bool = True) -> bool:
        """
        Attach an engine so it receives every dispatched message.

        Args:
            engine: Engine to attach
            initialize_engine: Run engine.initialize() first; on failure the
                              engine is finalized and never attached

        Returns:
            True if the engine was attached
        """
        if engine is None:
            return False

        formatting = engine.formatting_engine()
        if formatting is not None and not self._formatting_registry.contains(formatting):
            self.error(
                f"Logger engine '{engine.name()}' could not be added, its formatting engine "
                f"'{formatting.name()}' is not registered."
            )
            return False

        if initialize_engine and not engine.initialize():
            name = engine.name()
            engine.finalize()
            self.error(f"Logger engine '{name}' could not be added, it failed during initialization.")
            return False

        with self._lock:
            self._engines.append(engine)
            self.message_received.connect(engine.new_message)
        self.engine_count_changed.emit(engine, EngineChange.ADDED)
        return True

    def detach_logger_engine(self, engine: LoggerEngine) -> bool:
        """
        Detach and destroy an engine.

        Returns:
            False if the engine is not attached or is one of the permanent
            console/native engines
        """
        if engine is None or self._is_permanent(engine):
            return False

        with self._lock:
            for index, attached in enumerate(self._engines):
                if attached is engine:
                    break
            else:
                return False

            del self._engines[index]
            self.message_received.disconnect(engine.new_message)

        self.engine_count_changed.emit(engine, EngineChange.REMOVED)
        engine.finalize()
        return True

    def delete_engine(self, engine_name: str) -> bool:
        """Detach and destroy the first engine with this name."""
        return self.detach_logger_engine(self.logger_engine_reference(engine_name))

    def delete_all_logger_engines(self) -> int:
        """
        Detach and destroy every engine except the permanent ones.

        Returns:
            Number of engines removed
        """
        with self._lock:
            doomed = [e for e in self._engines if not self._is_permanent(e)]
            removed = 0
            for engine in doomed:
                if self.detach_logger_engine(engine):
                    removed += 1
        return removed

    def enable_engine(self, engine_name: str) -> bool:
        engine = self.logger_engine_reference(engine_name)
        if engine is None:
            return False
        engine.set_active(True)
        return True

    def disable_engine(self, engine_name: str) -> bool:
        engine = self.logger_engine_reference(engine_name)
        if engine is None:
            return False
        engine.set_active(False)
        return True

    def enable_all_logger_engines(self) -> None:
        with self._lock:
            for engine in self._engines:
                engine.set_active(True)

    def disable_all_logger_engines(self) -> None:
        with self._lock:
            for engine in self._engines:
                engine.set_active(False)

    def attached_logger_engine_names(self) -> List[str]:
        with self._lock:
            return [engine.name() for engine in self._engines]

    def attached_logger_engine_count(self) -> int:
        with self._lock:
            return len(self._engines)

    def logger_engine_reference(self, engine_name: str) -> Optional[LoggerEngine]:
        with self._lock:
            for engine in self._engines:
                if engine.name() == engine_name:
                    return engine
            return None

    def logger_engine_reference_at(self, index: int) -> Optional[LoggerEngine]:
        with self._lock:
            if index < 0 or index >= len(self._engines):
                return None
            return self._engines[index]

    def console_engine(self) -> Optional[ConsoleLoggerEngine]:
        return self._console_engine

    def native_engine(self) -> Optional[NativeLoggerEngine]:
        return self._native_engine

    def toggle_console_engine(self, toggle: bool) -> None:
        with self._lock:
            if any(e is self._console_engine for e in self._engines):
                self._console_engine.set_active(toggle)

    def toggle_native_engine(self, toggle: bool) -> None:
        with self._lock:
            if any(e is self._native_engine for e in self._engines):
                self._native_engine.set_active(toggle)

    # ------------------------------------------------------------------
    # Global log level
    # ------------------------------------------------------------------

    def set_global_log_level(self, level: MessageType) -> None:
        level = MessageType(level)
        with self._lock:
            if self._global_level == level:
                return
            self._global_level = level

        self._write_settings()
        self.info(f"Global log level changed to {level.to_display()}")

    def global_log_level(self) -> MessageType:
        with self._lock:
            return self._global_level

    def log_level_to_string(self, level: MessageType) -> str:
        return MessageType(level).to_display()

    def string_to_log_level(self, text: str) -> MessageType:
        return MessageType.from_display(text)

    def all_log_level_strings(self) -> List[str]:
        return MessageType.all_display_strings(self._config.release_mode)

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def _read_settings(self) -> None:
        raw_level = self._settings.get(KEY_GLOBAL_LOG_LEVEL, int(self._config.default_level))
        try:
            self._global_level = MessageType(int(raw_level))
        except (TypeError, ValueError):
            _bootstrap_log.warning("Ignoring invalid stored global log level %r", raw_level)

        if self._settings.get(KEY_IS_NATIVE_MESSAGE_HANDLER, False):
            self.install_as_native_message_handler(update_stored_settings=False)

        self._remember_session_config = bool(
            self._settings.get(KEY_REMEMBER_SESSION_CONFIG, self._config.remember_session_config)
        )

    def _write_settings(self) -> None:
        with self._lock:
            self._settings.set(KEY_GLOBAL_LOG_LEVEL, int(self._global_level))
            self._settings.set(KEY_IS_NATIVE_MESSAGE_HANDLER, self._is_native_message_handler)
            self._settings.set(KEY_REMEMBER_SESSION_CONFIG, self._remember_session_config)

    def set_remember_session_config(self, remember: bool) -> None:
        remember = bool(remember)
        with self._lock:
            if self._remember_session_config == remember:
                return
            self._remember_session_config = remember
        self._write_settings()

    def remember_session_config(self) -> bool:
        return self._remember_session_config

    # ------------------------------------------------------------------
    # Native message handler
    # ------------------------------------------------------------------

    def _intercept(self, level: MessageType, text: str) -> None:
        self.log_message(SOURCE_ALL, level, text)

    def install_as_native_message_handler(self, update_stored_settings: bool = True) -> None:
        """Route stdlib logging records through this Logger."""
        self._interceptor.install(self._intercept)
        self._is_native_message_handler = True
        if update_stored_settings:
            self._write_settings()

        self.info("Capturing of native debug messages is now enabled.")

    def uninstall_as_native_message_handler(self) -> None:
        self._interceptor.uninstall()
        self._is_native_message_handler = False
        self._write_settings()

        self.info("Capturing of native debug messages is now disabled.")

    def is_native_message_handler(self) -> bool:
        return self._is_native_message_handler

    def set_is_native_message_handler(self, toggle: bool) -> None:
        if toggle:
            self.install_as_native_message_handler()
        else:
            self.uninstall_as_native_message_handler()

    # ------------------------------------------------------------------
    # Session configuration
    # ------------------------------------------------------------------

    def save_session_config(self, path: Union[str, Path, None] = None) -> SessionResult:
        """
        Save the global log level and engine configuration.

        Args:
            path: Destination file (default: config.session_path)

        Returns:
            SessionResult, truthy on success
        """
        path = Path(path) if path else self._config.session_path
        self.debug(f"Logging configuration export started to {path}")

        try:
            with self._lock:
                exported = self._codec.save(path, self._global_level, list(self._engines))
        except SessionError as e:
            self.warning(f"Logging configuration export failed to {path}: {e}")
            return SessionResult.failed(e)

        message = f"Logging configuration successfully exported to {path} ({exported} exportable engines)"
        self.info(message)
        return SessionResult.ok(message)

    def load_session_config(self, path: Union[str, Path, None] = None) -> SessionResult:
        """
        Replace exportable engines with the ones stored in a session file.

        The file is parsed and every stored engine reconstructed and
        initialized before any live state changes. On failure the current
        configuration is left untouched.

        Args:
            path: Source file (default: config.session_path)

        Returns:
            SessionResult, truthy on success
        """
        path = Path(path) if path else self._config.session_path
        self.debug(f"Logging configuration import started from {path}")

        try:
            snapshot = self._codec.load(path)
            snapshot.initialize_engines()
        except SessionError as e:
            self.warning(f"Logging configuration import failed from {path}: {e}")
            return SessionResult.failed(e)

        with self._lock:
            current = [e for e in self._engines if is_exportable(e)]
            for engine in current:
                self.detach_logger_engine(engine)
            for engine in snapshot.engines:
                self.attach_logger_engine(engine, False)
            self._restore_properties(snapshot.properties)

        self.set_global_log_level(snapshot.global_level)

        message = f"Logging configuration successfully imported from {path}"
        self.info(message)
        return SessionResult.ok(message)

    def _restore_properties(self, properties: List[EngineProperties]) -> None:
        for props in properties:
            engine = self.logger_engine_reference(props.name)
            if engine is None:
                continue
            formatting = self._formatting_registry.lookup_by_name(props.formatting_engine_name)
            if formatting is not None:
                engine.install_formatting_engine(formatting)
            engine.set_active(props.active)

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"Logger(level={self.global_log_level().name}, "
            f"engines={self.attached_logger_engine_names()})"
        )
