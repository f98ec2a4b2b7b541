"""GET /api/v1/state and /api/v1/events — live game state (polled by UI)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from ascendant.api.dependencies import get_engine_manager
from ascendant.api.engine_manager import EngineManager
from ascendant.api.schemas import (
    ActiveSkillSchema,
    ArtifactSchema,
    AscensionSchema,
    DungeonSchema,
    EventOptionSchema,
    EventResultSchema,
    EventSchema,
    EventsResponse,
    FloorSchema,
    GameStateResponse,
    GateSchema,
    ItemSchema,
    LeaderboardEntrySchema,
    MonarchSchema,
    ObjectiveSchema,
    PlayerSchema,
    QuestSchema,
    RaidBossSchema,
    RaidSchema,
    RunResultSchema,
    SkillTreeSchema,
    TreeNodeSchema,
    UnitSchema,
    UpgradeSchema,
)
from ascendant.core.magnitude import format_magnitude
from ascendant.core.skills import MONARCH_DEFS

router = APIRouter()


def _name(enum_value) -> str:
    return enum_value.name.lower()


def _serialize_unit(u) -> UnitSchema:
    return UnitSchema(
        name=u.name, rank=u.rank.name, level=u.level,
        experience=u.experience, experience_to_next=u.experience_to_next,
        stats=u.formatted_stats(),
        upgrades=[
            UpgradeSchema(name=up.name, cost=up.cost, bonus=up.bonus_text,
                          level_requirement=up.level_requirement, purchased=up.purchased)
            for up in u.upgrades
        ],
    )


def _serialize_quest(q) -> QuestSchema:
    d = q.definition
    return QuestSchema(
        quest_id=d.quest_id, title=d.title, category=_name(d.category),
        level_requirement=d.level_requirement, status=_name(q.status), synopsis=d.synopsis,
        objectives=[
            ObjectiveSchema(objective_id=o.objective_id, description=o.description,
                            target=o.target, progress=o.progress, complete=o.is_complete)
            for o in q.objectives
        ],
    )


def _serialize_node(n) -> TreeNodeSchema:
    return TreeNodeSchema(node_id=n.node_id, name=n.name, description=n.description,
                          level=n.level, max_level=n.max_level, tier=n.tier, cost=n.cost)


def _serialize_raid(snap) -> RaidSchema:
    boss = snap.raid_boss
    return RaidSchema(
        boss=RaidBossSchema(
            name=boss.name, total_hp=boss.total_hp, current_hp=boss.current_hp,
            phase=boss.phase, status=_name(boss.status), remaining=boss.remaining,
        ) if boss is not None else None,
        leaderboard=[
            LeaderboardEntrySchema(rank=e.rank, name=e.name, damage=e.damage, is_player=e.is_player)
            for e in snap.leaderboard
        ],
        participating=snap.raid_participating,
        claimed=snap.raid_claimed,
        player_rank=snap.raid_rank,
    )


def serialize_event_result(r) -> EventResultSchema:
    return EventResultSchema(outcome=r.outcome, mana=r.mana, gems=r.gems, stamina=r.stamina)


def serialize_run_result(r) -> RunResultSchema:
    return RunResultSchema(run_id=r.run_id, status=_name(r.status), mana=r.mana,
                           gems=r.gems, floors_cleared=r.floors_cleared)


def serialize_gate(g) -> GateSchema:
    return GateSchema(
        run_id=g.run_id, name=g.name, biome=_name(g.biome), depth=g.depth,
        current_floor=g.current_floor, stamina=g.stamina, max_stamina=g.max_stamina,
        status=_name(g.status), mana=g.rewards.mana, gems=g.rewards.gems,
        floors=[
            FloorSchema(
                index=f.index, floor_type=_name(f.floor_type), difficulty=f.difficulty,
                encounter_text=f.encounter_text, cleared=f.cleared,
                event_id=f.event.event_id if f.event else None,
                options=[EventOptionSchema(option_id=o.option_id, text=o.text)
                         for o in (f.event.options if f.event else ())],
            )
            for f in g.floors
        ],
        last_event_result=serialize_event_result(g.last_event_result) if g.last_event_result else None,
    )


@router.get("/state", response_model=GameStateResponse)
def get_state(
    manager: EngineManager = Depends(get_engine_manager),
) -> GameStateResponse:
    snap = manager.get_snapshot()
    if snap is None:
        raise HTTPException(status_code=503, detail="No snapshot available yet.")

    p = snap.player
    return GameStateResponse(
        time=snap.time,
        running=manager.running,
        paused=manager.paused,
        zone=snap.zone,
        wave=snap.wave,
        balances={_name(c): v for c, v in snap.balances.items()},
        formatted_balances={_name(c): format_magnitude(v) for c, v in snap.balances.items()},
        mana_gain_bonus=snap.mana_gain_bonus,
        permanent_mana_bonus=snap.permanent_mana_bonus,
        mana_multiplier=snap.mana_multiplier,
        click_multiplier=snap.click_multiplier,
        player=PlayerSchema(
            level=p.level, experience=p.experience, experience_to_next=p.experience_to_next,
            skill_points=p.skill_points, rank=p.rank, hp=p.hp, attack=p.attack, defense=p.defense,
        ),
        units=[_serialize_unit(u) for u in snap.units],
        total_attack=snap.total_attack,
        artifacts=[
            ArtifactSchema(artifact_id=a.artifact_id, name=a.name, bonus_type=_name(a.bonus_type),
                           bonus=a.definition.bonus_text, equipped=a.equipped)
            for a in snap.artifacts
        ],
        items=[
            ItemSchema(item_id=i.item_id, name=i.name, description=i.description, quantity=i.quantity)
            for i in snap.items
        ],
        quests=[_serialize_quest(q) for q in snap.quests],
        dungeons=[
            DungeonSchema(
                dungeon_id=d.dungeon_id, name=d.definition.name, description=d.definition.description,
                status=_name(d.status), duration=d.definition.duration, remaining=d.remaining,
                reward_type=_name(d.definition.reward_type), reward_amount=d.definition.reward_amount,
            )
            for d in snap.dungeons
        ],
        raid=_serialize_raid(snap),
        skills=[
            ActiveSkillSchema(
                skill_id=s.skill_id, name=s.name, description=s.definition.description,
                cooldown=s.definition.cooldown, on_cooldown=s.on_cooldown, cooldown_timer=s.cooldown_timer,
            )
            for s in snap.skills
        ],
        skill_trees=[
            SkillTreeSchema(name=t.name, nodes=[_serialize_node(n) for n in t.nodes])
            for t in snap.skill_trees
        ],
        monarchs=[
            MonarchSchema(
                monarch=_name(m), name=d.name, description=d.description,
                unique_unit=d.unique_unit, ultimate_skill_id=d.ultimate_skill_id,
                chosen=snap.chosen_monarch == m,
                tree=[_serialize_node(n) for n in snap.monarch_trees[m]],
            )
            for m, d in MONARCH_DEFS.items()
        ],
        ascension=AscensionSchema(
            count=snap.ascension_count, can_ascend=snap.can_ascend,
            essence_preview=snap.essence_preview, points_preview=snap.points_preview,
            monarchs_unlocked=snap.monarchs_unlocked,
            chosen_monarch=_name(snap.chosen_monarch) if snap.chosen_monarch is not None else None,
        ),
        active_gate=serialize_gate(snap.active_gate) if snap.active_gate else None,
        last_gate_result=serialize_run_result(snap.last_gate_result) if snap.last_gate_result else None,
        notification=snap.notification,
    )


@router.get("/events", response_model=EventsResponse)
def get_events(
    since: float = Query(0.0, ge=0.0, description="Only return events at or after this game time"),
    limit: int = Query(50, ge=1, le=500),
    manager: EngineManager = Depends(get_engine_manager),
) -> EventsResponse:
    events = manager.event_log.since(since)[-limit:]
    return EventsResponse(events=[
        EventSchema(time=e.time, category=e.category, message=e.message) for e in events
    ])
