"""Central timer scheduler on a virtual clock.

Every periodic or one-shot activity (combat tick, dungeon countdowns, the raid
timer and damage tick, skill cooldowns, buffs, the notification window) is a
keyed :class:`TimerHandle` owned here. Teardown is one ``cancel_all()``.

Time only moves through :meth:`Scheduler.advance`; callbacks fire in due-time
order (ties in scheduling order), each running to completion before the next.
"""

from __future__ import annotations

import heapq
import logging
from typing import Callable

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class TimerHandle:
    """A single scheduled callback. ``interval`` is None for one-shots."""

    __slots__ = ("key", "due", "interval", "callback", "cancelled")

    def __init__(self, key: str, due: float, interval: float | None, callback: Callback) -> None:
        self.key = key
        self.due = due
        self.interval = interval
        self.callback = callback
        self.cancelled = False

    @property
    def repeating(self) -> bool:
        return self.interval is not None

    def cancel(self) -> None:
        self.cancelled = True

    def __repr__(self) -> str:
        return f"TimerHandle({self.key!r}, due={self.due}, interval={self.interval})"


class Scheduler:
    """Keyed timers over a min-heap of ``(due, seq, handle)``.

    Cancelled handles stay in the heap and are skipped when popped.
    """

    __slots__ = ("_now", "_seq", "_heap", "_handles")

    def __init__(self) -> None:
        self._now: float = 0.0
        self._seq: int = 0
        self._heap: list[tuple[float, int, TimerHandle]] = []
        self._handles: dict[str, TimerHandle] = {}

    @property
    def now(self) -> float:
        return self._now

    # -- scheduling --

    def call_every(self, key: str, interval: float, callback: Callback) -> TimerHandle:
        """Fire *callback* every *interval* seconds, first after one interval."""
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        return self._schedule(key, interval, interval, callback)

    def call_later(self, key: str, delay: float, callback: Callback) -> TimerHandle:
        """Fire *callback* once after *delay* seconds."""
        if delay < 0:
            raise ValueError(f"delay must be non-negative, got {delay}")
        return self._schedule(key, delay, None, callback)

    def _schedule(self, key: str, delay: float, interval: float | None, callback: Callback) -> TimerHandle:
        # Re-using a key restarts the timer.
        self.cancel(key)
        handle = TimerHandle(key, self._now + delay, interval, callback)
        self._handles[key] = handle
        self._push(handle)
        return handle

    def _push(self, handle: TimerHandle) -> None:
        self._seq += 1
        heapq.heappush(self._heap, (handle.due, self._seq, handle))

    # -- cancellation --

    def cancel(self, key: str) -> bool:
        handle = self._handles.pop(key, None)
        if handle is None:
            return False
        handle.cancel()
        return True

    def cancel_all(self) -> int:
        count = len(self._handles)
        for handle in self._handles.values():
            handle.cancel()
        self._handles.clear()
        self._heap.clear()
        if count:
            logger.debug("Cancelled %d timers", count)
        return count

    # -- queries --

    def is_active(self, key: str) -> bool:
        return key in self._handles

    @property
    def active_keys(self) -> list[str]:
        return sorted(self._handles)

    def remaining(self, key: str) -> float | None:
        handle = self._handles.get(key)
        if handle is None:
            return None
        return max(0.0, handle.due - self._now)

    # -- time --

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing every callback that falls due.

        Returns the number of callbacks fired.
        """
        if seconds < 0:
            raise ValueError(f"cannot advance by a negative amount: {seconds}")
        target = self._now + seconds
        fired = 0
        while self._heap and self._heap[0][0] <= target:
            due, _, handle = heapq.heappop(self._heap)
            if handle.cancelled:
                continue
            self._now = due
            if handle.repeating:
                handle.due = due + handle.interval
                self._push(handle)
            else:
                self._handles.pop(handle.key, None)
            handle.callback()
            fired += 1
        self._now = target
        return fired
