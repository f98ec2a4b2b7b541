"""Game configuration with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GameConfig:
    """Immutable configuration for one game session."""

    # Randomness
    seed: int = 42

    # Timing (simulated seconds)
    combat_tick_seconds: float = 2.0
    activity_tick_seconds: float = 1.0     # dungeon / raid / cooldown countdowns
    notification_seconds: float = 3.0

    # Starting state
    start_zone: int = 123
    start_wave: int = 4
    start_mana: int = 5_000_000
    start_gems: int = 25_000
    start_player_level: int = 50
    start_player_xp: int = 15_000
    start_player_xp_to_next: int = 25_000
    start_skill_points: int = 10
    veteran_army: bool = True              # level-50 roster instead of the level-1 one

    # Ascension
    min_zone_for_ascension: int = 100
    ascension_mana_bonus: float = 0.10     # permanent mana bonus per ascension
    monarch_unlock_ascensions: int = 10
    reset_mana: int = 1000
    reset_player_xp_to_next: int = 250

    # Inventory
    max_equipped_artifacts: int = 3

    # Raid
    raid_boss_hp: int = 1_000_000_000_000
    raid_duration_seconds: int = 604_800   # 7 days

    # Presentation adapter
    time_scale: float = 1.0                # simulated seconds per wall-clock second
    log_level: str = "INFO"
