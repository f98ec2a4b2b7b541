"""Pydantic response models for the REST API."""

from __future__ import annotations

from pydantic import BaseModel, Field


# --- Player & army ---

class PlayerSchema(BaseModel):
    level: int
    experience: int
    experience_to_next: int
    skill_points: int
    rank: str
    hp: int
    attack: int
    defense: int


class UpgradeSchema(BaseModel):
    name: str
    cost: int
    bonus: str
    level_requirement: int
    purchased: bool = False


class UnitSchema(BaseModel):
    name: str
    rank: str
    level: int
    experience: int
    experience_to_next: int
    stats: dict[str, str] = Field(default_factory=dict)
    upgrades: list[UpgradeSchema] = Field(default_factory=list)


# --- Inventory ---

class ArtifactSchema(BaseModel):
    artifact_id: int
    name: str
    bonus_type: str
    bonus: str
    equipped: bool = False


class ItemSchema(BaseModel):
    item_id: int
    name: str
    description: str = ""
    quantity: int = 0


# --- Quests ---

class ObjectiveSchema(BaseModel):
    objective_id: str
    description: str
    target: int
    progress: int = 0
    complete: bool = False


class QuestSchema(BaseModel):
    quest_id: str
    title: str
    category: str
    level_requirement: int
    status: str
    synopsis: str = ""
    objectives: list[ObjectiveSchema] = Field(default_factory=list)


# --- Timed activities ---

class DungeonSchema(BaseModel):
    dungeon_id: str
    name: str
    description: str = ""
    status: str
    duration: int
    remaining: int
    reward_type: str
    reward_amount: int


class RaidBossSchema(BaseModel):
    name: str
    total_hp: int
    current_hp: int
    phase: int
    status: str
    remaining: int


class LeaderboardEntrySchema(BaseModel):
    rank: int
    name: str
    damage: int
    is_player: bool = False


class RaidSchema(BaseModel):
    boss: RaidBossSchema | None = None
    leaderboard: list[LeaderboardEntrySchema] = Field(default_factory=list)
    participating: bool = False
    claimed: bool = False
    player_rank: int = 0


# --- Skills & monarchs ---

class ActiveSkillSchema(BaseModel):
    skill_id: str
    name: str
    description: str = ""
    cooldown: int
    on_cooldown: bool = False
    cooldown_timer: int = 0


class TreeNodeSchema(BaseModel):
    node_id: str
    name: str
    description: str = ""
    level: int = 0
    max_level: int = 1
    tier: int = 1
    cost: int = 1


class SkillTreeSchema(BaseModel):
    name: str
    nodes: list[TreeNodeSchema] = Field(default_factory=list)


class MonarchSchema(BaseModel):
    monarch: str
    name: str
    description: str = ""
    unique_unit: str
    ultimate_skill_id: str
    chosen: bool = False
    tree: list[TreeNodeSchema] = Field(default_factory=list)


class AscensionSchema(BaseModel):
    count: int
    can_ascend: bool
    essence_preview: int
    points_preview: int
    monarchs_unlocked: bool = False
    chosen_monarch: str | None = None


# --- Procedural gates ---

class EventOptionSchema(BaseModel):
    option_id: str
    text: str


class EventResultSchema(BaseModel):
    outcome: str
    mana: int = 0
    gems: int = 0
    stamina: int = 0


class FloorSchema(BaseModel):
    index: int
    floor_type: str
    difficulty: float
    encounter_text: str = ""
    cleared: bool = False
    event_id: str | None = None
    options: list[EventOptionSchema] = Field(default_factory=list)


class GateSchema(BaseModel):
    run_id: int
    name: str
    biome: str
    depth: int
    current_floor: int
    stamina: int
    max_stamina: int
    status: str
    mana: int = 0
    gems: int = 0
    floors: list[FloorSchema] = Field(default_factory=list)
    last_event_result: EventResultSchema | None = None


class RunResultSchema(BaseModel):
    run_id: int
    status: str
    mana: int
    gems: int
    floors_cleared: int


# --- Top-level responses ---

class GameStateResponse(BaseModel):
    time: float
    running: bool
    paused: bool
    zone: int
    wave: int
    balances: dict[str, int] = Field(default_factory=dict)
    formatted_balances: dict[str, str] = Field(default_factory=dict)
    mana_gain_bonus: float = 0.0
    permanent_mana_bonus: float = 0.0
    mana_multiplier: float = 1.0
    click_multiplier: int = 1
    player: PlayerSchema
    units: list[UnitSchema] = Field(default_factory=list)
    total_attack: int = 0
    artifacts: list[ArtifactSchema] = Field(default_factory=list)
    items: list[ItemSchema] = Field(default_factory=list)
    quests: list[QuestSchema] = Field(default_factory=list)
    dungeons: list[DungeonSchema] = Field(default_factory=list)
    raid: RaidSchema
    skills: list[ActiveSkillSchema] = Field(default_factory=list)
    skill_trees: list[SkillTreeSchema] = Field(default_factory=list)
    monarchs: list[MonarchSchema] = Field(default_factory=list)
    ascension: AscensionSchema
    active_gate: GateSchema | None = None
    last_gate_result: RunResultSchema | None = None
    notification: str | None = None


class EventSchema(BaseModel):
    time: float
    category: str
    message: str


class EventsResponse(BaseModel):
    events: list[EventSchema] = Field(default_factory=list)


class ControlResponse(BaseModel):
    status: str
    message: str
    time: float = 0.0
    running: bool = False
    paused: bool = False
    time_scale: float = 1.0


class ActionResponse(BaseModel):
    status: str          # "ok" or "noop"
    message: str
    data: dict | None = None


class GameConfigResponse(BaseModel):
    seed: int
    combat_tick_seconds: float
    activity_tick_seconds: float
    notification_seconds: float
    start_zone: int
    start_wave: int
    min_zone_for_ascension: int
    ascension_mana_bonus: float
    monarch_unlock_ascensions: int
    max_equipped_artifacts: int
    raid_boss_hp: int
    raid_duration_seconds: int
    tick_rate: float
    time_scale: float
