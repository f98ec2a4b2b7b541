"""Procedural gate runs — floors, biome tables and branching floor events.

A gate run is a linear list of floors. Every event option is a resolver
function ``(EventContext) -> EventResult``; randomness reaches it as a single
pre-drawn ``roll`` in [0, 1) so outcomes are reproducible.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from ascendant.core.enums import Biome, Currency, FloorType, RunStatus

if TYPE_CHECKING:
    from ascendant.core.ledger import ResourceLedger


# ---------------------------------------------------------------------------
# Event model
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class EventResult:
    outcome: str
    mana: int = 0
    gems: int = 0
    stamina: int = 0


@dataclass(slots=True)
class EventContext:
    """What a resolver may read (and, for costs, debit)."""

    zone: int
    ledger: ResourceLedger
    roll: float


Resolver = Callable[[EventContext], EventResult]


@dataclass(frozen=True, slots=True)
class EventOption:
    option_id: str
    text: str
    resolve: Resolver


@dataclass(frozen=True, slots=True)
class DungeonEvent:
    event_id: str
    description: str
    options: tuple[EventOption, ...]

    def find_option(self, option_id: str) -> EventOption | None:
        for option in self.options:
            if option.option_id == option_id:
                return option
        return None


# -- resolvers --

def _tomb_open(ctx: EventContext) -> EventResult:
    if ctx.roll > 0.4:
        return EventResult("The tomb grants you its power! You find a trove of mana.",
                           mana=5000 * ctx.zone)
    return EventResult("A curse strikes you! Your energy is drained.", stamina=-5)


def _tomb_leave(ctx: EventContext) -> EventResult:
    return EventResult("You respectfully leave the tomb untouched.")


def _altar_offer(ctx: EventContext) -> EventResult:
    if not ctx.ledger.debit(Currency.MANA, 1000 * ctx.zone):
        return EventResult("The altar rejects your meagre offering.")
    return EventResult("The altar accepts your offering, restoring some of your stamina.", stamina=10)


def _altar_destroy(ctx: EventContext) -> EventResult:
    if ctx.roll > 0.6:
        return EventResult("The altar shatters, releasing a burst of gems!", gems=100 + ctx.zone)
    return EventResult("The altar lashes out as it breaks, draining you.", stamina=-8)


def _fountain_thaw(ctx: EventContext) -> EventResult:
    return EventResult("Your efforts restore the fountain, and it revitalizes you.", stamina=15)


def _fountain_smash(ctx: EventContext) -> EventResult:
    return EventResult("You retrieve the gem!", gems=250 + ctx.zone)


def _script_decipher(ctx: EventContext) -> EventResult:
    return EventResult("The runes tell of a hidden stash of mana nearby!",
                       mana=8000 * ctx.zone, stamina=-2)


def _script_ignore(ctx: EventContext) -> EventResult:
    return EventResult("You press on, ignoring the cryptic message.")


DUNGEON_EVENTS: dict[str, DungeonEvent] = {}


def _reg(event: DungeonEvent) -> DungeonEvent:
    DUNGEON_EVENTS[event.event_id] = event
    return event


_reg(DungeonEvent(
    "tomb", "You find the tomb of a forgotten knight. The air is heavy with dormant power.",
    (EventOption("open", "Pry it open", _tomb_open),
     EventOption("leave", "Leave it", _tomb_leave)),
))
_reg(DungeonEvent(
    "shadow_altar", "A dark altar pulses with faint energy. It seems to demand a sacrifice.",
    (EventOption("offer", "Offer Mana", _altar_offer),
     EventOption("destroy", "Destroy it", _altar_destroy)),
))
_reg(DungeonEvent(
    "frozen_fountain", "You discover a fountain, frozen solid, with a glowing gem at its center.",
    (EventOption("thaw", "Thaw it carefully", _fountain_thaw),
     EventOption("smash", "Smash the ice", _fountain_smash)),
))
_reg(DungeonEvent(
    "ice_script", "Ancient runes are carved into a wall of ice. They are difficult to read.",
    (EventOption("decipher", "Spend time deciphering", _script_decipher),
     EventOption("ignore", "Ignore them", _script_ignore)),
))


# ---------------------------------------------------------------------------
# Biomes
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class BiomeDef:
    biome: Biome
    name: str
    description: str
    enemy_pool: tuple[str, ...]
    event_pool: tuple[str, ...]
    boss: str


BIOME_CONFIG: dict[Biome, BiomeDef] = {
    Biome.SHADOW_CRYPT: BiomeDef(
        Biome.SHADOW_CRYPT, "Shadow Crypt", "A dark, eerie place filled with the restless dead.",
        ("Skeletal Soldiers", "Ghouls", "Wraiths"), ("tomb", "shadow_altar"), "Lich Lord",
    ),
    Biome.FROST_CAVE: BiomeDef(
        Biome.FROST_CAVE, "Frost Cave", "A cavern of eternal ice, home to frigid beasts.",
        ("Ice Sprites", "Frost Wolves", "Yetis"), ("frozen_fountain", "ice_script"), "Ancient Ice Golem",
    ),
}


# ---------------------------------------------------------------------------
# Run state
# ---------------------------------------------------------------------------

# Per-zone base mana and flat gems per floor type, both scaled by difficulty.
FLOOR_REWARDS: dict[FloorType, tuple[int, int]] = {
    FloorType.COMBAT: (50, 0),
    FloorType.TREASURE: (250, 25),
    FloorType.EVENT: (0, 0),
    FloorType.BOSS: (1000, 100),
}

FAILURE_KEEP = 0.5


@dataclass(slots=True)
class DungeonFloor:
    index: int
    floor_type: FloorType
    difficulty: float
    encounter_text: str
    event: DungeonEvent | None = None
    cleared: bool = False

    def copy(self) -> DungeonFloor:
        return DungeonFloor(self.index, self.floor_type, self.difficulty,
                            self.encounter_text, self.event, self.cleared)


@dataclass(slots=True)
class AccumulatedRewards:
    mana: int = 0
    gems: int = 0

    def add(self, mana: int = 0, gems: int = 0) -> None:
        self.mana += mana
        self.gems += gems

    def halve(self) -> None:
        self.mana = math.floor(self.mana * FAILURE_KEEP)
        self.gems = math.floor(self.gems * FAILURE_KEEP)

    def copy(self) -> AccumulatedRewards:
        return AccumulatedRewards(self.mana, self.gems)


@dataclass(slots=True)
class GeneratedDungeon:
    run_id: int
    name: str
    biome: Biome
    depth: int
    floors: list[DungeonFloor]
    stamina: int
    max_stamina: int
    current_floor: int = 0
    status: RunStatus = RunStatus.EXPLORING
    rewards: AccumulatedRewards = field(default_factory=AccumulatedRewards)
    last_event_result: EventResult | None = None

    @property
    def floor(self) -> DungeonFloor:
        return self.floors[self.current_floor]

    @property
    def on_last_floor(self) -> bool:
        return self.current_floor >= self.depth - 1

    def copy(self) -> GeneratedDungeon:
        return GeneratedDungeon(
            run_id=self.run_id,
            name=self.name,
            biome=self.biome,
            depth=self.depth,
            floors=[f.copy() for f in self.floors],
            stamina=self.stamina,
            max_stamina=self.max_stamina,
            current_floor=self.current_floor,
            status=self.status,
            rewards=self.rewards.copy(),
            last_event_result=self.last_event_result,
        )


def status_for_floor(floor: DungeonFloor) -> RunStatus:
    if floor.floor_type == FloorType.EVENT:
        return RunStatus.EVENT
    if floor.floor_type == FloorType.BOSS:
        return RunStatus.BOSS
    return RunStatus.EXPLORING


@dataclass(frozen=True, slots=True)
class RunResult:
    """Terminal record of a finished run."""

    run_id: int
    status: RunStatus          # COMPLETED or FAILED
    mana: int
    gems: int
    floors_cleared: int
