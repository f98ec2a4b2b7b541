"""Thread-safe feed of game events exposed to the presentation layer."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class GameEvent:
    """A single entry in the event feed."""

    time: float          # scheduler clock, in simulated seconds
    category: str        # e.g. "notification", "quest", "raid"
    message: str


class EventLog:
    """Bounded event log. Writers append; readers snapshot a slice.

    Oldest events fall off once ``maxlen`` is reached.
    """

    __slots__ = ("_buffer", "_lock")

    def __init__(self, maxlen: int = 500) -> None:
        self._buffer: deque[GameEvent] = deque(maxlen=maxlen)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)

    def append(self, event: GameEvent) -> None:
        with self._lock:
            self._buffer.append(event)

    def since(self, time: float) -> list[GameEvent]:
        """Return all events with ``event.time >= time``."""
        with self._lock:
            return [e for e in self._buffer if e.time >= time]

    def latest(self, count: int = 50) -> list[GameEvent]:
        """Return the *count* most recent events."""
        with self._lock:
            items = list(self._buffer)
        return items[-count:]

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()
