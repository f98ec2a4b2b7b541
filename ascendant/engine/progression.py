"""Progression loop — the periodic combat tick.

Each tick resolves exactly one wave:

1. Sync ``reach_zone`` watermark objectives to the current zone.
2. Classify the encounter: wave 10 is a boss, wave 10 of a zone divisible by
   10 is a zone boss.
3. Grant mana through the gain formula and raw experience to the player and
   every unit, then run both leveling loops.
4. Emit the tier's quest progress events.
5. Advance the wave; past wave 10 the zone increments.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ascendant.core.enums import Currency, EncounterTier

if TYPE_CHECKING:
    from ascendant.core.army import ArmyRoster
    from ascendant.core.ledger import ResourceLedger
    from ascendant.core.player import Player
    from ascendant.core.quests import Quest, QuestBook

logger = logging.getLogger(__name__)

WAVES_PER_ZONE = 10
CORRUPTION_MIN_ZONE = 50
CLICK_MANA_PER_ZONE = 10

# Per-zone base rewards: (mana, xp)
ENCOUNTER_REWARDS: dict[EncounterTier, tuple[int, int]] = {
    EncounterTier.NORMAL: (100, 50),
    EncounterTier.BOSS: (500, 250),
    EncounterTier.ZONE_BOSS: (2000, 1000),
}

ENCOUNTER_EVENTS: dict[EncounterTier, tuple[str, ...]] = {
    EncounterTier.ZONE_BOSS: (
        "close_rift", "rescue_brother", "defeat_monarch_shadow", "purify_source",
        "defeat_juvenile_dragon", "defeat_dungeon_guardian", "defeat_dark_self",
        "defeat_7_shadows",
    ),
    EncounterTier.BOSS: (
        "defeat_racketteurs", "defeat_corrupted_knight", "survive_waves", "defeat_golem",
    ),
    EncounterTier.NORMAL: (
        "explore_sewers", "extract_remains", "collect_ore", "find_lost_shadows",
    ),
}


def encounter_tier(zone: int, wave: int) -> EncounterTier:
    if wave == WAVES_PER_ZONE:
        return EncounterTier.ZONE_BOSS if zone % 10 == 0 else EncounterTier.BOSS
    return EncounterTier.NORMAL


@dataclass(slots=True)
class TickResult:
    """What one wave produced, for notifications and tests."""

    zone: int
    wave: int
    tier: EncounterTier
    mana: int = 0
    experience: int = 0
    player_levels: list[int] = field(default_factory=list)
    unit_levels: int = 0
    unlocked_quests: list[Quest] = field(default_factory=list)
    completed_quests: list[Quest] = field(default_factory=list)


class ProgressionLoop:
    """Owns the zone/wave counter and performs the wave mutation."""

    __slots__ = ("ledger", "roster", "player", "quests", "zone", "wave")

    def __init__(
        self,
        ledger: ResourceLedger,
        roster: ArmyRoster,
        player: Player,
        quests: QuestBook,
        zone: int = 1,
        wave: int = 1,
    ) -> None:
        self.ledger = ledger
        self.roster = roster
        self.player = player
        self.quests = quests
        self.zone = zone
        self.wave = wave

    def reset(self) -> None:
        self.zone = 1
        self.wave = 1

    def tick(self) -> TickResult:
        completed = self.quests.sync_watermarks(self.zone)

        tier = encounter_tier(self.zone, self.wave)
        result = TickResult(zone=self.zone, wave=self.wave, tier=tier)
        mana_base, xp_base = ENCOUNTER_REWARDS[tier]

        result.mana = self.ledger.gain(mana_base * self.zone)
        self.ledger.credit(Currency.MANA, result.mana)

        result.experience = xp_base * self.zone
        result.unit_levels = self.roster.grant_experience(result.experience)
        result.player_levels = self.player.gain_experience(result.experience)
        if result.player_levels:
            logger.info("Player reached level %d", self.player.level)
            result.unlocked_quests = self.quests.refresh_unlocks(self.player.level)

        for objective_id in self.quest_events(tier):
            completed.extend(self.quests.update_progress(objective_id, 1))
        result.completed_quests = completed

        self.wave += 1
        if self.wave > WAVES_PER_ZONE:
            self.wave = 1
            self.zone += 1
            logger.debug("Entered zone %d", self.zone)

        logger.debug("Tick z%d w%d %s: +%d mana +%d xp",
                     result.zone, result.wave, tier.name, result.mana, result.experience)
        return result

    def quest_events(self, tier: EncounterTier) -> tuple[str, ...]:
        events = ENCOUNTER_EVENTS[tier]
        if tier == EncounterTier.NORMAL and self.zone >= CORRUPTION_MIN_ZONE:
            events = events + ("defeat_corrupted",)
        return events

    def click_for_mana(self) -> int:
        """Manual gain: ``10 * zone * click_multiplier``, credited raw."""
        amount = CLICK_MANA_PER_ZONE * self.zone * self.ledger.click_multiplier
        self.ledger.credit(Currency.MANA, amount)
        return amount
