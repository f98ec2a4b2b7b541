"""EngineManager — runs a GameSession's clock on a background thread.

The API reads from an atomically-swapped immutable GameSnapshot. Every
scheduler advance and every player action runs under one session lock, so
callbacks and actions are strictly interleaved, never concurrent.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING, Callable, TypeVar

from ascendant.core.snapshot import GameSnapshot
from ascendant.engine.session import GameSession
from ascendant.utils.event_log import EventLog

if TYPE_CHECKING:
    from ascendant.config import GameConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")

MIN_TIME_SCALE = 0.1
MAX_TIME_SCALE = 3600.0


class EngineManager:
    """Manages the session lifecycle on a background thread.

    Provides thread-safe access to:
      - latest snapshot (atomic reference swap)
      - event log (lock-guarded ring buffer)
      - player actions (serialised with the clock)
      - control commands (start / pause / resume / step / reset / speed)
    """

    def __init__(self, config: GameConfig) -> None:
        self._config = config
        self.config = config
        self._tick_rate: float = 0.1          # wall seconds between clock advances
        self._time_scale: float = config.time_scale

        self._session: GameSession | None = None
        self._session_lock = threading.Lock()

        self._snapshot_lock = threading.Lock()
        self._latest_snapshot: GameSnapshot | None = None
        self._event_log = EventLog()

        self._thread: threading.Thread | None = None
        self._running = threading.Event()
        self._paused = threading.Event()
        self._step_requested = threading.Event()
        self._step_ticks = 1
        self._stop_requested = threading.Event()

        self._build()

    # -- public properties --

    @property
    def running(self) -> bool:
        return self._running.is_set()

    @property
    def paused(self) -> bool:
        return self._paused.is_set()

    @property
    def tick_rate(self) -> float:
        return self._tick_rate

    @property
    def time_scale(self) -> float:
        return self._time_scale

    @time_scale.setter
    def time_scale(self, value: float) -> None:
        self._time_scale = max(MIN_TIME_SCALE, min(value, MAX_TIME_SCALE))

    @property
    def event_log(self) -> EventLog:
        return self._event_log

    # -- snapshot access --

    def get_snapshot(self) -> GameSnapshot | None:
        with self._snapshot_lock:
            return self._latest_snapshot

    # -- actions --

    def perform(self, action: Callable[[GameSession], T]) -> T:
        """Run *action* against the session under the lock, then republish."""
        with self._session_lock:
            result = action(self._session)
            self._publish_snapshot()
        return result

    # -- lifecycle --

    def start(self, paused: bool = False) -> None:
        """Start the clock thread; with *paused* no game time passes until resume or step."""
        if self._running.is_set():
            return
        self._stop_requested.clear()
        if paused:
            self._paused.set()
        else:
            self._paused.clear()
        self._running.set()
        self._thread = threading.Thread(target=self._run_loop, name="engine-loop", daemon=True)
        self._thread.start()
        logger.info("EngineManager started (tick_rate=%.3fs, time_scale=%.1fx%s)",
                    self._tick_rate, self._time_scale, ", paused" if paused else "")

    def pause(self) -> None:
        self._paused.set()
        logger.info("EngineManager paused at t=%.1fs", self._current_time())

    def resume(self) -> None:
        self._paused.clear()
        logger.info("EngineManager resumed at t=%.1fs", self._current_time())

    def step(self, ticks: int = 1) -> None:
        """Advance *ticks* combat ticks of game time, then stay paused."""
        if not self._paused.is_set():
            self.pause()
        self._step_ticks = max(1, ticks)
        self._step_requested.set()

    def stop(self) -> None:
        self._stop_requested.set()
        self._paused.clear()
        self._running.clear()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)
        logger.info("EngineManager stopped.")

    def reset(self) -> None:
        """Stop, tear down, rebuild a fresh session and leave it ready to start."""
        self.stop()
        with self._session_lock:
            if self._session is not None:
                self._session.teardown()
        self._event_log.clear()
        self._build()
        logger.info("EngineManager reset.")

    # -- internals --

    def _build(self) -> None:
        with self._session_lock:
            self._session = GameSession(self._config, self._event_log)
            self._session.start()
            self._publish_snapshot()

    def _run_loop(self) -> None:
        """Background thread main loop."""
        logger.info("Engine thread started.")
        while not self._stop_requested.is_set():
            if self._paused.is_set() and not self._step_requested.is_set():
                time.sleep(0.01)
                continue

            single_step = self._step_requested.is_set()
            if single_step:
                self._step_requested.clear()
                seconds = self._config.combat_tick_seconds * self._step_ticks
            else:
                seconds = self._tick_rate * self._time_scale

            with self._session_lock:
                self._session.advance(seconds)
                self._publish_snapshot()

            if not single_step:
                time.sleep(self._tick_rate)

        self._running.clear()
        logger.info("Engine thread exited.")

    def _publish_snapshot(self) -> None:
        """Swap in a fresh snapshot. Caller holds the session lock."""
        snap = GameSnapshot.from_session(self._session)
        with self._snapshot_lock:
            self._latest_snapshot = snap

    def _current_time(self) -> float:
        snap = self.get_snapshot()
        return snap.time if snap else 0.0
