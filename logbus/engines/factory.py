"""
Logger engine factory

The only place that maps factory tags to concrete engine types.
"""

from __future__ import annotations
import threading
from typing import Callable, Dict, List

from logbus.core.errors import UnknownFactoryTagError
from logbus.engines.base_engine import LoggerEngine

EngineConstructor = Callable[[], LoggerEngine]


class EngineFactory:
    """
    Construct logger engines from factory tags.

    The factory does not keep track of the instances it creates.
    """

    def __init__(self):
        self._constructors: Dict[str, EngineConstructor] = {}
        self._lock = threading.Lock()

    def register_constructor(self, tag: str, constructor: EngineConstructor) -> None:
        """
        Register a constructor for a tag.

        Args:
            tag: Factory tag, also written into session files
            constructor: Zero-argument callable returning a new engine

        Raises:
            ValueError: If tag is already registered
            TypeError: If constructor is not callable
        """
        if not callable(constructor):
            raise TypeError("constructor must be callable")
        with self._lock:
            if tag in self._constructors:
                raise ValueError(f"Logger engine factory '{tag}' is already registered")
            self._constructors[tag] = constructor

    def create(self, tag: str) -> LoggerEngine:
        """
        Create a new engine instance.

        Raises:
            UnknownFactoryTagError: If tag was never registered
        """
        with self._lock:
            constructor = self._constructors.get(tag)
        if constructor is None:
            raise UnknownFactoryTagError(tag)
        return constructor()

    def has_tag(self, tag: str) -> bool:
        with self._lock:
            return tag in self._constructors

    def available_tags(self) -> List[str]:
        """Registered tags in registration order."""
        with self._lock:
            return list(self._constructors.keys())

    def __repr__(self) -> str:
        return f"EngineFactory(tags={self.available_tags()})"
