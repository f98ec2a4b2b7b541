"""POST /api/v1/control/{action} and /api/v1/speed — game clock controls.

Every answer carries the clock state after the command, so a client never
has to poll /state just to refresh its play/pause button.
"""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Depends, Query

from ascendant.api.dependencies import get_engine_manager
from ascendant.api.engine_manager import MAX_TIME_SCALE, MIN_TIME_SCALE, EngineManager
from ascendant.api.schemas import ControlResponse

router = APIRouter()


class ControlAction(str, Enum):
    start = "start"
    pause = "pause"
    resume = "resume"
    step = "step"
    reset = "reset"


def _reply(manager: EngineManager, status: str, message: str) -> ControlResponse:
    snapshot = manager.get_snapshot()
    return ControlResponse(
        status=status,
        message=message,
        time=snapshot.time if snapshot else 0.0,
        running=manager.running,
        paused=manager.paused,
        time_scale=manager.time_scale,
    )


@router.post("/control/{action}", response_model=ControlResponse)
def control(
    action: ControlAction,
    ticks: int = Query(1, ge=1, le=1000, description="Combat ticks to advance (step only)"),
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    if action == ControlAction.start:
        if manager.running:
            return _reply(manager, "noop", "Clock already running.")
        manager.start()
        return _reply(manager, "ok", "Clock started.")

    if action == ControlAction.reset:
        manager.reset()
        return _reply(manager, "ok", "Session reset; start the clock to play.")

    if action == ControlAction.step:
        # A stopped clock starts paused so only the requested ticks elapse.
        if not manager.running:
            manager.start(paused=True)
        manager.step(ticks)
        return _reply(manager, "ok", f"Stepping {ticks} combat tick(s).")

    if not manager.running:
        return _reply(manager, "error", "Clock is not running.")
    if action == ControlAction.pause:
        manager.pause()
        return _reply(manager, "ok", "Clock paused.")
    manager.resume()
    return _reply(manager, "ok", "Clock resumed.")


@router.post("/speed", response_model=ControlResponse)
def set_speed(
    scale: float = Query(1.0, ge=MIN_TIME_SCALE, le=MAX_TIME_SCALE,
                         description="Simulated seconds per wall-clock second"),
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    manager.time_scale = scale
    return _reply(manager, "ok", f"Time scale set to {scale:.1f}x.")
