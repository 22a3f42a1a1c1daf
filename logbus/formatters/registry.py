"""
Formatting engine registry

Populated once at Logger initialization; lookups never raise.
"""

from __future__ import annotations
import threading
from typing import List, Optional

from logbus.formatters.base_formatter import FormattingEngine


class FormattingRegistry:
    """
    Ordered collection of named formatting engines.

    Thread Safety:
        All methods are thread-safe for concurrent access.
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._engines: List[FormattingEngine] = []
        self._lock = threading.RLock()

    def register(self, engine: FormattingEngine) -> None:
        """
        Register a formatting engine.

        Args:
            engine: Formatting engine with a unique name

        Raises:
            ValueError: If an engine with the same name is registered
        """
        with self._lock:
            if self.lookup_by_name(engine.name()) is not None:
                raise ValueError(f"Formatting engine '{engine.name()}' is already registered")
            self._engines.append(engine)

    def lookup_by_name(self, name: str) -> Optional[FormattingEngine]:
        """
        Get a formatting engine by name.

        Returns:
            Formatting engine or None if not found
        """
        with self._lock:
            for engine in self._engines:
                if engine.name() == name:
                    return engine
            return None

    def lookup_by_extension(self, file_extension: str) -> Optional[FormattingEngine]:
        """
        Get the first formatting engine associated with a file extension.

        Args:
            file_extension: Extension without the leading dot

        Returns:
            Formatting engine or None if not found
        """
        file_extension = file_extension.lstrip(".").lower()
        if not file_extension:
            return None
        with self._lock:
            for engine in self._engines:
                if engine.file_extension().lower() == file_extension:
                    return engine
            return None

    def reference_at(self, index: int) -> Optional[FormattingEngine]:
        with self._lock:
            if index < 0 or index >= len(self._engines):
                return None
            return self._engines[index]

    def contains(self, engine: FormattingEngine) -> bool:
        with self._lock:
            return any(e is engine for e in self._engines)

    def names(self) -> List[str]:
        """Names of all registered engines in registration order."""
        with self._lock:
            return [engine.name() for engine in self._engines]

    def count(self) -> int:
        with self._lock:
            return len(self._engines)

    def __len__(self) -> int:
        return self.count()

    def __repr__(self) -> str:
        """String representation."""
        return f"FormattingRegistry(engines={self.names()})"
