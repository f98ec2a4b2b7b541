"""Gate generator — builds the floor sequence of a procedural run."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ascendant.core.enums import Biome, Domain, FloorType
from ascendant.core.gates import (
    BIOME_CONFIG, DUNGEON_EVENTS, DungeonFloor, GeneratedDungeon, status_for_floor,
)

if TYPE_CHECKING:
    from ascendant.systems.rng import DeterministicRNG


# Cumulative floor-type table for non-final floors: (upper bound, type).
_FLOOR_TABLE: tuple[tuple[float, FloorType], ...] = (
    (0.1, FloorType.TREASURE),
    (0.3, FloorType.EVENT),
    (1.0, FloorType.COMBAT),
)

STAMINA_PER_FLOOR = 2


class GateGenerator:
    """Deterministic floor builder. Run *N* with seed *S* is always the same run."""

    __slots__ = ("_rng",)

    def __init__(self, rng: DeterministicRNG) -> None:
        self._rng = rng

    def generate(self, biome: Biome, depth: int, run_id: int) -> GeneratedDungeon:
        if depth < 1:
            raise ValueError(f"depth must be at least 1, got {depth}")
        config = BIOME_CONFIG[biome]
        floors = [self._build_floor(biome, depth, run_id, i) for i in range(depth)]
        stamina = STAMINA_PER_FLOOR * depth
        return GeneratedDungeon(
            run_id=run_id,
            name=f"{config.name} (Depth {depth})",
            biome=biome,
            depth=depth,
            floors=floors,
            stamina=stamina,
            max_stamina=stamina,
            current_floor=0,
            status=status_for_floor(floors[0]),
        )

    def _build_floor(self, biome: Biome, depth: int, run_id: int, index: int) -> DungeonFloor:
        config = BIOME_CONFIG[biome]
        difficulty = (10 + index) / 10      # one rounding, so repr is the decimal

        if index == depth - 1:
            return DungeonFloor(index, FloorType.BOSS, difficulty,
                                f"The air grows heavy. The dungeon's master, the {config.boss}, awaits!")

        floor_type = self.roll_floor_type(run_id, index)
        if floor_type == FloorType.TREASURE:
            return DungeonFloor(index, FloorType.TREASURE, difficulty,
                                "A glimmer of light reveals a hidden treasure trove!")
        if floor_type == FloorType.EVENT:
            event_id = self._rng.choice(Domain.FLOOR_EVENT, run_id, index, config.event_pool)
            event = DUNGEON_EVENTS[event_id]
            return DungeonFloor(index, FloorType.EVENT, difficulty, event.description, event=event)
        enemy = self._rng.choice(Domain.FLOOR_ENEMY, run_id, index, config.enemy_pool)
        return DungeonFloor(index, FloorType.COMBAT, difficulty,
                            f"You encounter a group of hostile {enemy}.")

    def roll_floor_type(self, run_id: int, index: int) -> FloorType:
        roll = self._rng.next_float(Domain.FLOOR_TYPE, run_id, index)
        for bound, floor_type in _FLOOR_TABLE:
            if roll < bound:
                return floor_type
        return FloorType.COMBAT

    def roll_event(self, run_id: int, index: int) -> float:
        """The outcome roll for the event on floor *index* of run *run_id*."""
        return self._rng.next_float(Domain.EVENT_OUTCOME, run_id, index)
