"""Enumerations used throughout the game core."""

from __future__ import annotations

from enum import IntEnum, unique


@unique
class Currency(IntEnum):
    """Balances held by the resource ledger."""

    MANA = 0
    GEMS = 1
    ESSENCE = 2            # shadow essence, earned by ascending
    SOVEREIGN_POINTS = 3   # spent in monarch trees


@unique
class BonusType(IntEnum):
    """What an artifact bonus applies to."""

    MANA = 0
    XP = 1
    ATTACK = 2
    HP = 3
    DEFENSE = 4
    CRIT = 5
    ESSENCE = 6


@unique
class UnitRank(IntEnum):
    """Army unit rank, ordered A < S < SS < SSS."""

    A = 1
    S = 2
    SS = 3
    SSS = 4


@unique
class QuestStatus(IntEnum):
    """Quest lifecycle. Transitions only move to a higher value."""

    LOCKED = 0
    AVAILABLE = 1
    IN_PROGRESS = 2
    COMPLETED = 3
    CLAIMED = 4


@unique
class QuestCategory(IntEnum):
    COMBAT = 0
    INVESTIGATION = 1
    ENDURANCE = 2
    EXTRACTION = 3
    SOCIAL = 4
    EXPLORATION = 5


@unique
class EncounterTier(IntEnum):
    """Which kind of wave the combat tick resolved."""

    NORMAL = 0
    BOSS = 1        # wave 10
    ZONE_BOSS = 2   # wave 10 of a zone divisible by 10


@unique
class DungeonStatus(IntEnum):
    IDLE = 0
    IN_PROGRESS = 1
    COMPLETED = 2


@unique
class RewardType(IntEnum):
    """Single typed reward of a timed dungeon."""

    MANA = 0
    XP = 1
    GEMS = 2


@unique
class RaidStatus(IntEnum):
    IN_PROGRESS = 0
    DEFEATED = 1
    EXPIRED = 2


@unique
class SkillEffect(IntEnum):
    """What an active skill does when activated."""

    CLICK_FRENZY = 0     # temporary click multiplier
    RUSH_WAVE = 1        # resolve the current wave immediately
    MANA_OVERLOAD = 2    # temporary flat multiplier in the gain formula
    ULTIMATE = 3         # monarch ultimate, announcement only


@unique
class MonarchType(IntEnum):
    SHADOW = 0
    BEAST = 1
    ICE = 2
    DESTRUCTION = 3
    LIGHT = 4


@unique
class Biome(IntEnum):
    SHADOW_CRYPT = 0
    FROST_CAVE = 1


@unique
class FloorType(IntEnum):
    COMBAT = 0
    TREASURE = 1
    EVENT = 2
    BOSS = 3


@unique
class RunStatus(IntEnum):
    """Procedural dungeon run state."""

    EXPLORING = 0
    EVENT = 1
    BOSS = 2
    COMPLETED = 3
    FAILED = 4


@unique
class Domain(IntEnum):
    """RNG domains for deterministic randomness isolation."""

    FLOOR_TYPE = 0
    FLOOR_EVENT = 1
    FLOOR_ENEMY = 2
    EVENT_OUTCOME = 3
