"""
Minimal synchronous publish/subscribe channel

The Logger exposes one Signal per notification kind so that subscribers
can listen to bulk messages, priority messages and engine count changes
independently of each other.
"""

from __future__ import annotations
import threading
from enum import Enum
from typing import Callable, List, Optional

ErrorCallback = Callable[[Callable[..., None], Exception], None]


class EngineChange(Enum):
    """Kind of change reported on the engine_count_changed channel."""

    ADDED = "added"
    REMOVED = "removed"


class Signal:
    """
    Ordered list of callbacks invoked synchronously on emit().

    Thread Safety:
        connect/disconnect may run concurrently with emit(); emit() works
        on a snapshot of the subscribers taken when it starts. Callers that
        need the snapshot to agree with their own state take it with
        receivers() under their lock and call deliver() outside it.
    """

    def __init__(self, name: str = "", on_error: Optional[ErrorCallback] = None):
        """
        Initialize signal.

        Args:
            name: Name used in diagnostics
            on_error: When given, exceptions raised by a subscriber are
                     passed here and the remaining subscribers still run.
                     Otherwise they propagate to the emitter.
        """
        self.name = name
        self._on_error = on_error
        self._slots: List[Callable[..., None]] = []
        self._lock = threading.Lock()

    def connect(self, slot: Callable[..., None]) -> None:
        """
        Subscribe a callback.

        Args:
            slot: Callable receiving the emitted arguments

        Raises:
            TypeError: If slot is not callable
        """
        if not callable(slot):
            raise TypeError("slot must be callable")
        with self._lock:
            self._slots.append(slot)

    def disconnect(self, slot: Callable[..., None]) -> bool:
        """
        Unsubscribe a callback.

        Returns:
            True if the callback was connected
        """
        with self._lock:
            try:
                self._slots.remove(slot)
            except ValueError:
                return False
            return True

    def is_connected(self, slot: Callable[..., None]) -> bool:
        with self._lock:
            return slot in self._slots

    def receiver_count(self) -> int:
        with self._lock:
            return len(self._slots)

    def receivers(self) -> List[Callable[..., None]]:
        """Snapshot of the subscribers in connection order."""
        with self._lock:
            return list(self._slots)

    def emit(self, *args) -> None:
        """Call every subscriber in connection order."""
        self.deliver(self.receivers(), *args)

    def deliver(self, slots: List[Callable[..., None]], *args) -> None:
        """Call the given subscribers, as returned by receivers()."""
        for slot in slots:
            if self._on_error is None:
                slot(*args)
                continue
            try:
                slot(*args)
            except Exception as e:
                self._on_error(slot, e)

    def __repr__(self) -> str:
        return f"Signal(name={self.name!r}, receivers={self.receiver_count()})"
