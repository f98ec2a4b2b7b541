"""Single-slot notification channel.

A new message replaces the current one and restarts its display window; there
is no queue. Every message is also logged and appended to the event feed.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ascendant.utils.event_log import GameEvent

if TYPE_CHECKING:
    from ascendant.systems.scheduler import Scheduler
    from ascendant.utils.event_log import EventLog

logger = logging.getLogger(__name__)

NOTIFICATION_KEY = "notification"


class Notifier:
    __slots__ = ("_scheduler", "_event_log", "window", "current")

    def __init__(self, scheduler: Scheduler, event_log: EventLog, window: float = 3.0) -> None:
        self._scheduler = scheduler
        self._event_log = event_log
        self.window = window
        self.current: str | None = None

    def show(self, text: str, category: str = "notice") -> None:
        self.current = text
        logger.info("%s", text)
        self._event_log.append(GameEvent(self._scheduler.now, category, text))
        self._scheduler.call_later(NOTIFICATION_KEY, self.window, self._clear)

    def _clear(self) -> None:
        self.current = None
