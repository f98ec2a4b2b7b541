"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ascendant.api.dependencies import set_engine_manager
from ascendant.api.engine_manager import EngineManager
from ascendant.api.routes import api_router
from ascendant.config import GameConfig
from ascendant.utils.logging import setup_logging

logger = logging.getLogger(__name__)

DESCRIPTION = (
    "Idle RPG simulation core: live state, player actions and clock control.\n\n"
    "## API Groups\n\n"
    "- **State**: full game snapshot and the notification feed\n"
    "- **Actions**: dungeons, raid, quests, skills, artifacts, gates, ascension\n"
    "- **Control**: start, pause, resume, step, reset and time scale\n"
    "- **Config**: the active game configuration\n"
)

TAGS_METADATA = [
    {"name": "State", "description": "Snapshot of every game entity, polled by the client."},
    {"name": "Actions", "description": "Mutating entry points. Rejected actions answer status 'noop'."},
    {"name": "Control", "description": "Background clock controls and time scaling."},
    {"name": "Config", "description": "Read-only game configuration parameters."},
]


def create_app(config: GameConfig | None = None) -> FastAPI:
    """Build the application; the game clock runs only while the app is live."""
    game_config = config or GameConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(game_config.log_level)
        manager = EngineManager(game_config)
        set_engine_manager(manager)
        manager.start()
        logger.info("API ready (seed=%d, time_scale=%.1fx)", game_config.seed, manager.time_scale)
        try:
            yield
        finally:
            manager.stop()
            set_engine_manager(None)
            logger.info("API shut down at t=%.1fs", manager.get_snapshot().time)

    app = FastAPI(
        title="Ascendant Idle",
        description=DESCRIPTION,
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=TAGS_METADATA,
    )

    # CORS: allow any origin in dev
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(api_router)
    return app
