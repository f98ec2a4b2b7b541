"""FastAPI dependency injection — hands routes the live EngineManager."""

from __future__ import annotations

from fastapi import HTTPException

from ascendant.api.engine_manager import EngineManager

_engine_manager: EngineManager | None = None


def set_engine_manager(manager: EngineManager | None) -> None:
    """Install the manager for the app's lifetime; ``None`` on shutdown."""
    global _engine_manager
    _engine_manager = manager


def get_engine_manager() -> EngineManager:
    if _engine_manager is None:
        raise HTTPException(status_code=503, detail="Game engine is not running.")
    return _engine_manager
