"""POST /api/v1/actions/... — player actions against the running session.

A rejected action answers ``{"status": "noop"}``; an unknown entity id is a 404.
"""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ascendant.api.dependencies import get_engine_manager
from ascendant.api.engine_manager import EngineManager
from ascendant.api.routes.state import serialize_event_result, serialize_gate, serialize_run_result
from ascendant.api.schemas import ActionResponse
from ascendant.core.enums import Biome, MonarchType
from ascendant.core.quests import QUEST_DEFS
from ascendant.core.skills import SKILL_DEFS
from ascendant.engine.activities import DUNGEON_DEFS

router = APIRouter(prefix="/actions")

_DUNGEON_IDS = frozenset(d.dungeon_id for d in DUNGEON_DEFS)
_QUEST_IDS = frozenset(d.quest_id for d in QUEST_DEFS)


class BiomeName(str, Enum):
    shadow_crypt = "shadow_crypt"
    frost_cave = "frost_cave"


class MonarchName(str, Enum):
    shadow = "shadow"
    beast = "beast"
    ice = "ice"
    destruction = "destruction"
    light = "light"


class GenerateGateRequest(BaseModel):
    biome: BiomeName
    depth: int = Field(5, ge=1, le=50)


def _respond(ok: bool, message: str, data: dict | None = None) -> ActionResponse:
    return ActionResponse(status="ok" if ok else "noop", message=message, data=data)


def _require(known: bool, what: str) -> None:
    if not known:
        raise HTTPException(status_code=404, detail=f"Unknown {what}.")


# --- Progression ---

@router.post("/click", response_model=ActionResponse)
def click(manager: EngineManager = Depends(get_engine_manager)) -> ActionResponse:
    gained = manager.perform(lambda s: s.click_for_mana())
    return _respond(True, f"+{gained} mana.", {"mana": gained})


@router.post("/ascend", response_model=ActionResponse)
def ascend(manager: EngineManager = Depends(get_engine_manager)) -> ActionResponse:
    reward = manager.perform(lambda s: s.ascend())
    if reward is None:
        return _respond(False, "Not ready to ascend.")
    return _respond(True, "Ascended.", {"essence": reward.essence, "points": reward.points})


# --- Army, trees, artifacts ---

@router.post("/units/{unit_name}/upgrades/{upgrade_name}", response_model=ActionResponse)
def purchase_upgrade(
    unit_name: str,
    upgrade_name: str,
    manager: EngineManager = Depends(get_engine_manager),
) -> ActionResponse:
    snap = manager.get_snapshot()
    unit = next((u for u in snap.units if u.name == unit_name), None) if snap else None
    _require(unit is not None and unit.find_upgrade(upgrade_name) is not None, "unit or upgrade")
    ok = manager.perform(lambda s: s.purchase_upgrade(unit_name, upgrade_name))
    return _respond(ok, "Upgrade purchased." if ok else "Upgrade unavailable.")


@router.post("/skill-tree/{node_id}", response_model=ActionResponse)
def purchase_skill_node(node_id: str, manager: EngineManager = Depends(get_engine_manager)) -> ActionResponse:
    snap = manager.get_snapshot()
    _require(snap is not None and any(t.find(node_id) for t in snap.skill_trees), "skill node")
    ok = manager.perform(lambda s: s.purchase_skill_node(node_id))
    return _respond(ok, "Skill improved." if ok else "Cannot improve skill.")


@router.post("/monarch-tree/{node_id}", response_model=ActionResponse)
def purchase_monarch_node(node_id: str, manager: EngineManager = Depends(get_engine_manager)) -> ActionResponse:
    snap = manager.get_snapshot()
    known = snap is not None and any(
        n.node_id == node_id for nodes in snap.monarch_trees.values() for n in nodes
    )
    _require(known, "monarch node")
    ok = manager.perform(lambda s: s.purchase_monarch_node(node_id))
    return _respond(ok, "Monarch talent learned." if ok else "Cannot learn talent.")


@router.post("/artifacts/{artifact_id}/toggle", response_model=ActionResponse)
def toggle_artifact(artifact_id: int, manager: EngineManager = Depends(get_engine_manager)) -> ActionResponse:
    snap = manager.get_snapshot()
    _require(snap is not None and any(a.artifact_id == artifact_id for a in snap.artifacts), "artifact")
    ok = manager.perform(lambda s: s.toggle_artifact(artifact_id))
    return _respond(ok, "Artifact toggled." if ok else "Artifact slots full.")


@router.post("/skills/{skill_id}/activate", response_model=ActionResponse)
def activate_skill(skill_id: str, manager: EngineManager = Depends(get_engine_manager)) -> ActionResponse:
    _require(skill_id in SKILL_DEFS, "skill")
    ok = manager.perform(lambda s: s.activate_skill(skill_id))
    return _respond(ok, "Skill activated." if ok else "Skill not ready.")


@router.post("/monarchs/{monarch}/select", response_model=ActionResponse)
def select_monarch(monarch: MonarchName, manager: EngineManager = Depends(get_engine_manager)) -> ActionResponse:
    choice = MonarchType[monarch.name.upper()]
    ok = manager.perform(lambda s: s.select_monarch(choice))
    return _respond(ok, "Allegiance sworn." if ok else "Monarch unavailable.")


# --- Dungeons & raid ---

@router.post("/dungeons/{dungeon_id}/start", response_model=ActionResponse)
def start_dungeon(dungeon_id: str, manager: EngineManager = Depends(get_engine_manager)) -> ActionResponse:
    _require(dungeon_id in _DUNGEON_IDS, "dungeon")
    ok = manager.perform(lambda s: s.start_dungeon(dungeon_id))
    return _respond(ok, "Dungeon started." if ok else "Dungeon busy.")


@router.post("/dungeons/{dungeon_id}/claim", response_model=ActionResponse)
def claim_dungeon(dungeon_id: str, manager: EngineManager = Depends(get_engine_manager)) -> ActionResponse:
    _require(dungeon_id in _DUNGEON_IDS, "dungeon")
    ok = manager.perform(lambda s: s.claim_dungeon(dungeon_id))
    return _respond(ok, "Rewards claimed." if ok else "Nothing to claim.")


@router.post("/raid/toggle", response_model=ActionResponse)
def toggle_raid(manager: EngineManager = Depends(get_engine_manager)) -> ActionResponse:
    participating = manager.perform(lambda s: s.toggle_raid())
    return _respond(True, "Joined the raid." if participating else "Left the raid.",
                    {"participating": participating})


@router.post("/raid/claim", response_model=ActionResponse)
def claim_raid(manager: EngineManager = Depends(get_engine_manager)) -> ActionResponse:
    reward = manager.perform(lambda s: s.claim_raid_rewards())
    if reward is None:
        return _respond(False, "No raid rewards to claim.")
    return _respond(True, f"Rank {reward.rank} rewards claimed.",
                    {"rank": reward.rank, "essence": reward.essence, "gems": reward.gems})


# --- Quests ---

@router.post("/quests/{quest_id}/start", response_model=ActionResponse)
def start_quest(quest_id: str, manager: EngineManager = Depends(get_engine_manager)) -> ActionResponse:
    _require(quest_id in _QUEST_IDS, "quest")
    ok = manager.perform(lambda s: s.start_quest(quest_id))
    return _respond(ok, "Quest started." if ok else "Quest not available.")


@router.post("/quests/{quest_id}/claim", response_model=ActionResponse)
def claim_quest(quest_id: str, manager: EngineManager = Depends(get_engine_manager)) -> ActionResponse:
    _require(quest_id in _QUEST_IDS, "quest")
    ok = manager.perform(lambda s: s.claim_quest(quest_id))
    return _respond(ok, "Quest rewards claimed." if ok else "Quest not complete.")


@router.post("/quests/{quest_id}/refine", response_model=ActionResponse)
def refine_shards(quest_id: str, manager: EngineManager = Depends(get_engine_manager)) -> ActionResponse:
    _require(quest_id in _QUEST_IDS, "quest")
    ok = manager.perform(lambda s: s.refine_quest_shards(quest_id))
    return _respond(ok, "Shards refined." if ok else "Cannot refine shards.")


# --- Procedural gates ---

@router.post("/gates/generate", response_model=ActionResponse)
def generate_gate(body: GenerateGateRequest, manager: EngineManager = Depends(get_engine_manager)) -> ActionResponse:
    biome = Biome[body.biome.name.upper()]

    def _generate(session):
        # Serialised under the session lock; the live run mutates on later actions.
        gate = session.generate_gate(biome, body.depth)
        return serialize_gate(gate) if gate is not None else None

    gate = manager.perform(_generate)
    if gate is None:
        return _respond(False, "A gate run is already active.")
    return _respond(True, f"Entered {gate.name}.", gate.model_dump())


@router.post("/gates/advance", response_model=ActionResponse)
def advance_gate(manager: EngineManager = Depends(get_engine_manager)) -> ActionResponse:
    ok = manager.perform(lambda s: s.advance_gate_floor())
    return _respond(ok, "Advanced." if ok else "Cannot advance now.")


@router.post("/gates/event/{option_id}", response_model=ActionResponse)
def resolve_gate_event(option_id: str, manager: EngineManager = Depends(get_engine_manager)) -> ActionResponse:
    result = manager.perform(lambda s: s.resolve_gate_event(option_id))
    if result is None:
        return _respond(False, "No event to resolve.")
    return _respond(True, result.outcome, serialize_event_result(result).model_dump())


@router.post("/gates/escape", response_model=ActionResponse)
def escape_gate(manager: EngineManager = Depends(get_engine_manager)) -> ActionResponse:
    result = manager.perform(lambda s: s.escape_gate())
    if result is None:
        return _respond(False, "No active gate.")
    return _respond(True, "Escaped the gate.", serialize_run_result(result).model_dump())
