"""Immutable snapshot of a game session for the presentation layer."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping

from ascendant.core.army import Unit
from ascendant.core.enums import Currency, MonarchType
from ascendant.core.gates import GeneratedDungeon, RunResult
from ascendant.core.items import Artifact, InventoryItem
from ascendant.core.player import Player
from ascendant.core.quests import Quest
from ascendant.core.skills import ActiveSkill, SkillTree, TreeNode
from ascendant.engine.activities import Dungeon, LeaderboardEntry, RaidBoss

if TYPE_CHECKING:
    from ascendant.engine.session import GameSession


@dataclass(frozen=True, slots=True)
class GameSnapshot:
    """Read-only view of a session, safe to share across threads.

    Every mutable entity is copied; mappings are wrapped in MappingProxyType.
    """

    time: float
    seed: int
    running: bool
    zone: int
    wave: int

    balances: Mapping[Currency, int]
    mana_gain_bonus: float
    permanent_mana_bonus: float
    mana_multiplier: float
    click_multiplier: int
    ascension_count: int

    player: Player
    units: tuple[Unit, ...]
    total_attack: int
    artifacts: tuple[Artifact, ...]
    items: tuple[InventoryItem, ...]

    quests: tuple[Quest, ...]
    dungeons: tuple[Dungeon, ...]
    raid_boss: RaidBoss | None
    leaderboard: tuple[LeaderboardEntry, ...]
    raid_participating: bool
    raid_claimed: bool
    raid_rank: int

    skills: tuple[ActiveSkill, ...]
    skill_trees: tuple[SkillTree, ...]
    chosen_monarch: MonarchType | None
    monarchs_unlocked: bool
    monarch_trees: Mapping[MonarchType, tuple[TreeNode, ...]]

    can_ascend: bool
    essence_preview: int
    points_preview: int

    active_gate: GeneratedDungeon | None
    last_gate_result: RunResult | None
    notification: str | None

    @classmethod
    def from_session(cls, session: GameSession) -> GameSnapshot:
        ledger = session.ledger
        raid = session.raid
        preview = session.ascension_preview()
        gate = session.gates.active
        return cls(
            time=session.now,
            seed=session.config.seed,
            running=session.running,
            zone=session.zone,
            wave=session.wave,
            balances=MappingProxyType(ledger.balances),
            mana_gain_bonus=ledger.mana_gain_bonus,
            permanent_mana_bonus=ledger.permanent_mana_bonus,
            mana_multiplier=ledger.mana_multiplier,
            click_multiplier=ledger.click_multiplier,
            ascension_count=ledger.ascension_count,
            player=session.player.copy(),
            units=tuple(u.copy() for u in session.roster),
            total_attack=session.roster.total_attack(),
            artifacts=tuple(a.copy() for a in ledger.artifacts),
            items=tuple(i.copy() for i in ledger.items.values()),
            quests=tuple(q.copy() for q in session.quests.quests.values()),
            dungeons=tuple(d.copy() for d in session.dungeons.dungeons.values()),
            raid_boss=raid.boss.copy() if raid.boss is not None else None,
            leaderboard=tuple(e.copy() for e in raid.leaderboard),
            raid_participating=raid.participating,
            raid_claimed=raid.claimed,
            raid_rank=raid.player_rank,
            skills=tuple(s.copy() for s in session.skills.skills),
            skill_trees=tuple(t.copy() for t in session.skill_trees),
            chosen_monarch=session.chosen_monarch,
            monarchs_unlocked=session.monarchs_unlocked,
            monarch_trees=MappingProxyType({
                m: tuple(n.copy() for n in nodes) for m, nodes in session.monarch_trees.items()
            }),
            can_ascend=session.can_ascend,
            essence_preview=preview.essence,
            points_preview=preview.points,
            active_gate=gate.copy() if gate is not None else None,
            last_gate_result=session.gates.last_result,
            notification=session.notifier.current,
        )
