"""GET /api/v1/config — expose the game configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ascendant.api.dependencies import get_engine_manager
from ascendant.api.engine_manager import EngineManager
from ascendant.api.schemas import GameConfigResponse

router = APIRouter()


@router.get("/config", response_model=GameConfigResponse)
def get_config(
    manager: EngineManager = Depends(get_engine_manager),
) -> GameConfigResponse:
    cfg = manager.config
    return GameConfigResponse(
        seed=cfg.seed,
        combat_tick_seconds=cfg.combat_tick_seconds,
        activity_tick_seconds=cfg.activity_tick_seconds,
        notification_seconds=cfg.notification_seconds,
        start_zone=cfg.start_zone,
        start_wave=cfg.start_wave,
        min_zone_for_ascension=cfg.min_zone_for_ascension,
        ascension_mana_bonus=cfg.ascension_mana_bonus,
        monarch_unlock_ascensions=cfg.monarch_unlock_ascensions,
        max_equipped_artifacts=cfg.max_equipped_artifacts,
        raid_boss_hp=cfg.raid_boss_hp,
        raid_duration_seconds=cfg.raid_duration_seconds,
        tick_rate=manager.tick_rate,
        time_scale=manager.time_scale,
    )
