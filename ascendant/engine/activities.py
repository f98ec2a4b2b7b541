"""Timed activities — fixed-duration dungeons, the world raid and skill cooldowns.

Every activity owns one scheduler key while active and releases it at the
exact transition that ends the activity:

    dungeon:<id>   countdown, cancelled on completion
    raid:timer     raid countdown, cancelled on expiry or defeat
    raid:damage    damage tick, cancelled when participation stops
    skill:<id>     cooldown countdown, cancelled when ready again
    buff:click     Frenzy click multiplier
    buff:overload  Mana Overload flat multiplier
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from ascendant.core.enums import DungeonStatus, RaidStatus, RewardType, SkillEffect
from ascendant.core.magnitude import format_magnitude
from ascendant.core.skills import SKILL_DEFS, ActiveSkill

if TYPE_CHECKING:
    from ascendant.core.ledger import ResourceLedger
    from ascendant.systems.scheduler import Scheduler

logger = logging.getLogger(__name__)

Notify = Callable[[str], None]
Emit = Callable[[str], None]


def _noop(_: str) -> None:
    return None


# ---------------------------------------------------------------------------
# Fixed-duration dungeons
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class DungeonDef:
    dungeon_id: str
    name: str
    description: str
    duration: int                 # countdown steps (seconds)
    reward_type: RewardType
    reward_amount: int


DUNGEON_DEFS: tuple[DungeonDef, ...] = (
    DungeonDef("gold", "Gold Dungeon", "Yields a massive amount of Mana.", 3600, RewardType.MANA, 5_000_000),
    DungeonDef("xp", "XP Dungeon", "Grants a huge boost of experience.", 7200, RewardType.XP, 100_000),
    DungeonDef("artifact", "Artifact Dungeon", "A chance to find precious Gems.", 14400, RewardType.GEMS, 500),
    DungeonDef("elite", "Elite Dungeon", "High-tier Mana expedition.", 28800, RewardType.MANA, 25_000_000),
    DungeonDef("boss", "Boss Dungeon", "Defeat a boss for a large Gem bounty.", 43200, RewardType.GEMS, 2000),
    DungeonDef("dragon", "Dragon's Lair", "The ultimate challenge for immense XP.", 86400, RewardType.XP, 1_000_000),
)

# Quest progress events fired on claim, beyond the universal "complete_dungeon".
DUNGEON_QUEST_EVENTS: dict[str, tuple[str, ...]] = {
    "gold": ("run_gold_dungeon", "collect_shards", "complete_gold_dungeon_puzzle"),
    "xp": ("complete_xp_dungeon", "complete_xp_dungeon_puzzle"),
    "elite": ("complete_elite_dungeon", "complete_elite_dungeon_puzzle"),
    "dragon": ("complete_dragons_lair", "complete_dragons_lair_twice"),
}


def dungeon_quest_events(dungeon_id: str) -> tuple[str, ...]:
    return ("complete_dungeon",) + DUNGEON_QUEST_EVENTS.get(dungeon_id, ())


@dataclass(slots=True)
class Dungeon:
    definition: DungeonDef
    status: DungeonStatus = DungeonStatus.IDLE
    remaining: int = 0

    @property
    def dungeon_id(self) -> str:
        return self.definition.dungeon_id

    def copy(self) -> Dungeon:
        return Dungeon(self.definition, self.status, self.remaining)


class DungeonBoard:
    """All fixed-duration dungeons and their countdowns."""

    __slots__ = ("_scheduler", "_step", "_notify", "dungeons")

    def __init__(self, scheduler: Scheduler, step_seconds: float = 1.0, notify: Notify = _noop) -> None:
        self._scheduler = scheduler
        self._step = step_seconds
        self._notify = notify
        self.dungeons: dict[str, Dungeon] = {
            d.dungeon_id: Dungeon(d, DungeonStatus.IDLE, d.duration) for d in DUNGEON_DEFS
        }

    def get(self, dungeon_id: str) -> Dungeon | None:
        return self.dungeons.get(dungeon_id)

    @staticmethod
    def timer_key(dungeon_id: str) -> str:
        return f"dungeon:{dungeon_id}"

    def start(self, dungeon_id: str) -> bool:
        dungeon = self.dungeons.get(dungeon_id)
        if dungeon is None or dungeon.status != DungeonStatus.IDLE:
            return False
        dungeon.status = DungeonStatus.IN_PROGRESS
        dungeon.remaining = dungeon.definition.duration
        self._scheduler.call_every(self.timer_key(dungeon_id), self._step, lambda: self._countdown(dungeon))
        logger.info("Dungeon started: %s (%ds)", dungeon.definition.name, dungeon.remaining)
        return True

    def _countdown(self, dungeon: Dungeon) -> None:
        dungeon.remaining -= 1
        if dungeon.remaining <= 0:
            dungeon.remaining = 0
            dungeon.status = DungeonStatus.COMPLETED
            self._scheduler.cancel(self.timer_key(dungeon.dungeon_id))
            self._notify(f"{dungeon.definition.name} complete!")

    def claim(self, dungeon_id: str) -> DungeonDef | None:
        """Reset a COMPLETED dungeon to IDLE and return its definition
        (the caller credits the reward). None if not claimable."""
        dungeon = self.dungeons.get(dungeon_id)
        if dungeon is None or dungeon.status != DungeonStatus.COMPLETED:
            return None
        dungeon.status = DungeonStatus.IDLE
        dungeon.remaining = dungeon.definition.duration
        logger.info("Dungeon claimed: %s", dungeon.definition.name)
        return dungeon.definition

    def soonest(self) -> Dungeon | None:
        running = [d for d in self.dungeons.values() if d.status == DungeonStatus.IN_PROGRESS]
        return min(running, key=lambda d: d.remaining) if running else None

    def abandon_running(self) -> int:
        """Return every IN_PROGRESS dungeon to IDLE; their countdowns are gone after a teardown."""
        abandoned = 0
        for dungeon in self.dungeons.values():
            if dungeon.status == DungeonStatus.IN_PROGRESS:
                self._scheduler.cancel(self.timer_key(dungeon.dungeon_id))
                dungeon.status = DungeonStatus.IDLE
                dungeon.remaining = dungeon.definition.duration
                abandoned += 1
        return abandoned


# ---------------------------------------------------------------------------
# World raid
# ---------------------------------------------------------------------------

PHASE_THRESHOLDS: tuple[tuple[float, int], ...] = ((0.33, 3), (0.66, 2))

# Rival damage as a multiple of the player's total army attack at raid start.
RIVALS: tuple[tuple[str, int], ...] = (
    ("Zephyr", 15000),
    ("SovereignX", 12000),
    ("Luna", 8000),
    ("Goliath", 5000),
)
PLAYER_NAME = "You"

# (max rank, essence, gems); the first bracket the rank fits wins.
RAID_REWARD_BRACKETS: tuple[tuple[int, int, int], ...] = (
    (1, 50_000, 5_000),
    (3, 25_000, 2_500),
    (5, 10_000, 1_000),
)
RAID_CONSOLATION = (5_000, 500)


def raid_reward(rank: int) -> tuple[int, int]:
    """(essence, gems) for a final leaderboard rank."""
    for max_rank, essence, gems in RAID_REWARD_BRACKETS:
        if rank <= max_rank:
            return essence, gems
    return RAID_CONSOLATION


@dataclass(slots=True)
class RaidBoss:
    boss_id: str
    name: str
    total_hp: int
    current_hp: int
    remaining: int
    phase: int = 1
    status: RaidStatus = RaidStatus.IN_PROGRESS

    @property
    def hp_fraction(self) -> float:
        return self.current_hp / self.total_hp if self.total_hp else 0.0

    def copy(self) -> RaidBoss:
        return RaidBoss(self.boss_id, self.name, self.total_hp, self.current_hp,
                        self.remaining, self.phase, self.status)


@dataclass(slots=True)
class LeaderboardEntry:
    rank: int
    name: str
    damage: int = 0
    is_player: bool = False

    def copy(self) -> LeaderboardEntry:
        return LeaderboardEntry(self.rank, self.name, self.damage, self.is_player)


@dataclass(slots=True)
class RaidReward:
    rank: int
    essence: int
    gems: int


class RaidController:
    """One raid cycle: boss, countdown, opt-in damage tick and rank rewards."""

    TIMER_KEY = "raid:timer"
    DAMAGE_KEY = "raid:damage"

    __slots__ = ("_scheduler", "_step", "_notify", "_emit", "_attack",
                 "boss", "leaderboard", "participating", "claimed")

    def __init__(
        self,
        scheduler: Scheduler,
        attack_source: Callable[[], int],
        step_seconds: float = 1.0,
        notify: Notify = _noop,
        emit: Emit = _noop,
    ) -> None:
        self._scheduler = scheduler
        self._attack = attack_source
        self._step = step_seconds
        self._notify = notify
        self._emit = emit
        self.boss: RaidBoss | None = None
        self.leaderboard: list[LeaderboardEntry] = []
        self.participating = False
        self.claimed = False

    def begin(self, boss_hp: int, duration: int) -> None:
        """Open a new raid cycle with a fresh boss and leaderboard."""
        self.boss = RaidBoss("weekly_boss_1", "Kamish, the Void Dragon", boss_hp, boss_hp, duration)
        army_attack = self._attack()
        self.leaderboard = [LeaderboardEntry(0, name, army_attack * mult) for name, mult in RIVALS]
        self.leaderboard.append(LeaderboardEntry(0, PLAYER_NAME, 0, is_player=True))
        self._rerank()
        self.participating = False
        self.claimed = False
        self._scheduler.call_every(self.TIMER_KEY, self._step, self._countdown)
        logger.info("Raid opened: %s (%s HP)", self.boss.name, format_magnitude(boss_hp))

    @property
    def player_entry(self) -> LeaderboardEntry | None:
        for entry in self.leaderboard:
            if entry.is_player:
                return entry
        return None

    @property
    def player_rank(self) -> int:
        entry = self.player_entry
        return entry.rank if entry else len(self.leaderboard) + 1

    def _rerank(self) -> None:
        self.leaderboard.sort(key=lambda e: e.damage, reverse=True)
        for index, entry in enumerate(self.leaderboard):
            entry.rank = index + 1

    def _countdown(self) -> None:
        boss = self.boss
        if boss is None:
            return
        boss.remaining -= 1
        if boss.remaining <= 0:
            boss.remaining = 0
            boss.status = RaidStatus.EXPIRED
            self._scheduler.cancel(self.TIMER_KEY)
            self._stop_participation()
            self._notify("The Raid has ended!")

    # -- participation --

    def toggle(self) -> bool:
        """Flip participation. Returns the new participation state."""
        if self.participating:
            self._stop_participation()
            return False
        if self.boss is None or self.boss.status != RaidStatus.IN_PROGRESS:
            return False
        self.participating = True
        self._scheduler.call_every(self.DAMAGE_KEY, self._step, self._damage_tick)
        return True

    def _stop_participation(self) -> None:
        self.participating = False
        self._scheduler.cancel(self.DAMAGE_KEY)

    def _damage_tick(self) -> None:
        boss = self.boss
        if boss is None or boss.status != RaidStatus.IN_PROGRESS:
            self._stop_participation()
            return
        damage = self._attack()
        boss.current_hp = max(0, boss.current_hp - damage)
        entry = self.player_entry
        if entry is not None:
            entry.damage += damage
        self._rerank()

        fraction = boss.hp_fraction
        for threshold, phase in PHASE_THRESHOLDS:
            if fraction < threshold and phase > boss.phase:
                boss.phase = phase
                self._notify(f"{boss.name} has entered Phase {phase}!")
                break

        if boss.current_hp <= 0:
            boss.status = RaidStatus.DEFEATED
            self._stop_participation()
            self._scheduler.cancel(self.TIMER_KEY)
            self._notify(f"{boss.name} has been defeated!")
            self._emit("defeat_gatekeeper")

    # -- rewards --

    def claim_rewards(self) -> RaidReward | None:
        """Rank-bracket reward, once per cycle, after the boss left IN_PROGRESS."""
        if self.boss is None or self.boss.status == RaidStatus.IN_PROGRESS or self.claimed:
            return None
        rank = self.player_rank
        essence, gems = raid_reward(rank)
        self.claimed = True
        return RaidReward(rank, essence, gems)


# ---------------------------------------------------------------------------
# Active skills
# ---------------------------------------------------------------------------

class SkillBar:
    """Learned active skills, their cooldowns and the timed buffs they apply.

    Buff effects (click frenzy, mana overload) are applied to the ledger here.
    Instant effects (rush, ultimates) are left to the caller.
    """

    CLICK_BUFF_KEY = "buff:click"
    OVERLOAD_BUFF_KEY = "buff:overload"

    __slots__ = ("_scheduler", "_ledger", "_step", "skills")

    def __init__(
        self,
        scheduler: Scheduler,
        ledger: ResourceLedger,
        skills: list[ActiveSkill] | None = None,
        step_seconds: float = 1.0,
    ) -> None:
        self._scheduler = scheduler
        self._ledger = ledger
        self._step = step_seconds
        self.skills: list[ActiveSkill] = list(skills or [])

    def get(self, skill_id: str) -> ActiveSkill | None:
        for skill in self.skills:
            if skill.skill_id == skill_id:
                return skill
        return None

    def learn(self, skill_id: str) -> bool:
        definition = SKILL_DEFS.get(skill_id)
        if definition is None or self.get(skill_id) is not None:
            return False
        self.skills.append(ActiveSkill.learn(definition))
        logger.info("Learned skill: %s", definition.name)
        return True

    def activate(self, skill_id: str) -> ActiveSkill | None:
        """Put a ready skill on cooldown and apply its buff. None if rejected."""
        skill = self.get(skill_id)
        if skill is None or skill.on_cooldown:
            return None
        self._apply_buff(skill)
        skill.on_cooldown = True
        skill.cooldown_timer = skill.definition.cooldown
        self._scheduler.call_every(f"skill:{skill_id}", self._step, lambda: self._cooldown(skill))
        return skill

    def _cooldown(self, skill: ActiveSkill) -> None:
        skill.cooldown_timer -= 1
        if skill.cooldown_timer <= 0:
            self._scheduler.cancel(f"skill:{skill.skill_id}")
            skill.on_cooldown = False
            skill.cooldown_timer = skill.definition.cooldown

    def _apply_buff(self, skill: ActiveSkill) -> None:
        definition = skill.definition
        if definition.effect == SkillEffect.CLICK_FRENZY:
            self._ledger.click_multiplier = int(definition.magnitude)
            self._scheduler.call_later(self.CLICK_BUFF_KEY, definition.duration, self._end_click_buff)
        elif definition.effect == SkillEffect.MANA_OVERLOAD:
            self._ledger.flat_multiplier = definition.magnitude
            self._scheduler.call_later(self.OVERLOAD_BUFF_KEY, definition.duration, self._end_overload)

    def _end_click_buff(self) -> None:
        self._ledger.click_multiplier = 1

    def _end_overload(self) -> None:
        self._ledger.flat_multiplier = 1.0

    def clear_buffs(self) -> None:
        self._scheduler.cancel(self.CLICK_BUFF_KEY)
        self._scheduler.cancel(self.OVERLOAD_BUFF_KEY)
        self._end_click_buff()
        self._end_overload()

    def reset_cooldowns(self) -> None:
        for skill in self.skills:
            self._scheduler.cancel(f"skill:{skill.skill_id}")
            skill.on_cooldown = False
            skill.cooldown_timer = skill.definition.cooldown
