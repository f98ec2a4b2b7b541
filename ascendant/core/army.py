"""Army roster — unit definitions, leveling and one-time upgrades.

Unit stats are held as whole numbers that are always representable in the
compact magnitude form (see :mod:`ascendant.core.magnitude`). Every change
goes parse -> scale -> floor -> format, so values drift exactly as the
string form dictates.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ascendant.core.enums import Currency, UnitRank
from ascendant.core.magnitude import exact, format_magnitude, parse_magnitude, quantize

if TYPE_CHECKING:
    from ascendant.core.ledger import ResourceLedger

logger = logging.getLogger(__name__)

# Scaled stats; speed is a label and never scales.
STAT_KEYS: tuple[str, ...] = ("hp", "attack", "defense")

UNIT_XP_GROWTH = 1.2
UNIT_STAT_GROWTH = 1.10

_STAT_LABELS = {"hp": "HP", "attack": "Attack", "defense": "Defense"}


# ---------------------------------------------------------------------------
# Upgrade
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class Upgrade:
    """A one-time purchasable boost.

    ``bonuses`` is an ordered list of (stat_key, percentage) clauses applied
    one after another, each floored on its own.
    """

    name: str
    cost: int
    bonuses: tuple[tuple[str, float], ...]
    level_requirement: int
    purchased: bool = False

    @property
    def bonus_text(self) -> str:
        return " & ".join(f"+{pct:g}% {_STAT_LABELS.get(key, key)}" for key, pct in self.bonuses)

    def copy(self) -> Upgrade:
        return Upgrade(self.name, self.cost, self.bonuses, self.level_requirement, self.purchased)


# ---------------------------------------------------------------------------
# Unit
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class Unit:
    name: str                  # identity key within the roster
    rank: UnitRank
    level: int = 1
    experience: int = 0
    experience_to_next: int = 100
    stats: dict[str, int] = field(default_factory=dict)
    speed: str = "Medium"
    upgrades: list[Upgrade] = field(default_factory=list)

    @property
    def attack(self) -> int:
        return self.stats.get("attack", 0)

    def formatted_stats(self) -> dict[str, str]:
        out = {key: format_magnitude(self.stats.get(key, 0)) for key in STAT_KEYS}
        out["speed"] = self.speed
        return out

    def find_upgrade(self, name: str) -> Upgrade | None:
        for upgrade in self.upgrades:
            if upgrade.name == name:
                return upgrade
        return None

    def copy(self) -> Unit:
        return Unit(
            name=self.name,
            rank=self.rank,
            level=self.level,
            experience=self.experience,
            experience_to_next=self.experience_to_next,
            stats=dict(self.stats),
            speed=self.speed,
            upgrades=[u.copy() for u in self.upgrades],
        )


def make_unit(
    name: str,
    rank: UnitRank,
    stats: dict[str, str],
    experience_to_next: int,
    upgrades: list[Upgrade] | None = None,
) -> Unit:
    """Build a unit from display-form stats, e.g. ``{"hp": "1.2K", "speed": "Low"}``."""
    return Unit(
        name=name,
        rank=rank,
        experience_to_next=experience_to_next,
        stats={key: quantize(parse_magnitude(stats.get(key, "0"))) for key in STAT_KEYS},
        speed=stats.get("speed", "Medium"),
        upgrades=list(upgrades or []),
    )


# ---------------------------------------------------------------------------
# Leveling and upgrades
# ---------------------------------------------------------------------------

def level_up(unit: Unit) -> int:
    """Consume experience into levels. Returns the number of levels gained.

    Loops so one large grant can cross several thresholds in one call.
    """
    gained = 0
    while unit.experience >= unit.experience_to_next:
        unit.experience -= unit.experience_to_next
        unit.level += 1
        unit.experience_to_next = math.floor(unit.experience_to_next * exact(UNIT_XP_GROWTH))
        for key in STAT_KEYS:
            unit.stats[key] = quantize(unit.stats.get(key, 0) * exact(UNIT_STAT_GROWTH))
        gained += 1
    return gained


def apply_upgrade(unit: Unit, upgrade: Upgrade, ledger: ResourceLedger) -> bool:
    """Purchase *upgrade* for *unit*. No-op (False) when already bought,
    unaffordable, or the unit's level is below the requirement."""
    if upgrade.purchased or unit.level < upgrade.level_requirement:
        return False
    if not ledger.debit(Currency.MANA, upgrade.cost):
        return False
    upgrade.purchased = True
    # Clause order matters: each clause floors before the next one reads the stat.
    for key, pct in upgrade.bonuses:
        if key in unit.stats:
            unit.stats[key] = quantize(unit.stats[key] * (1 + exact(pct) / 100))
    logger.info("%s purchased %s (%s)", unit.name, upgrade.name, upgrade.bonus_text)
    return True


# ---------------------------------------------------------------------------
# Roster
# ---------------------------------------------------------------------------

class ArmyRoster:
    """Ordered collection of units keyed by name."""

    __slots__ = ("units",)

    def __init__(self, units: list[Unit] | None = None) -> None:
        self.units: list[Unit] = list(units or [])

    def __len__(self) -> int:
        return len(self.units)

    def __iter__(self):
        return iter(self.units)

    def get(self, name: str) -> Unit | None:
        for unit in self.units:
            if unit.name == name:
                return unit
        return None

    def add(self, unit: Unit) -> bool:
        """Add a unit unless one with the same name already serves."""
        if self.get(unit.name) is not None:
            return False
        self.units.append(unit)
        return True

    def replace_all(self, units: list[Unit]) -> None:
        self.units = list(units)

    def grant_experience(self, amount: int) -> int:
        """Give every unit *amount* experience and level them. Returns total levels gained."""
        gained = 0
        for unit in self.units:
            unit.experience += amount
            gained += level_up(unit)
        return gained

    def purchase_upgrade(self, unit_name: str, upgrade_name: str, ledger: ResourceLedger) -> bool:
        unit = self.get(unit_name)
        if unit is None:
            return False
        upgrade = unit.find_upgrade(upgrade_name)
        if upgrade is None:
            return False
        return apply_upgrade(unit, upgrade, ledger)

    def total_attack(self) -> int:
        return sum(unit.attack for unit in self.units)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

def initial_roster() -> list[Unit]:
    """The level-1 roster every ascension resets to."""
    return [
        make_unit("Infantry", UnitRank.SSS, {"hp": "1.2K", "attack": "50", "defense": "150", "speed": "Low"}, 100, [
            Upgrade("Rank D Evolution", 100_000, (("hp", 10),), 10),
            Upgrade("Rank C Evolution", 500_000, (("defense", 20),), 25),
            Upgrade("Rank B: Provocation", 1_000_000, (("defense", 30),), 50),
            Upgrade("Rank A Evolution", 2_500_000, (("hp", 30),), 75),
            Upgrade("Rank S: AoE Shadow Shield", 5_000_000, (("hp", 25), ("defense", 25)), 100),
        ]),
        make_unit("Assassin", UnitRank.SSS, {"hp": "450", "attack": "210", "defense": "30", "speed": "Very High"}, 120, [
            Upgrade("Phantom Strike", 2_000_000, (("attack", 5),), 95),
        ]),
        make_unit("Mage", UnitRank.SS, {"hp": "600", "attack": "180", "defense": "45", "speed": "Medium"}, 110, [
            Upgrade("Void Explosion", 1_800_000, (("attack", 5),), 90),
        ]),
        make_unit("Archer", UnitRank.S, {"hp": "550", "attack": "190", "defense": "40", "speed": "High"}, 90, [
            Upgrade("Shadow Arrow", 1_600_000, (("attack", 5),), 85),
        ]),
        make_unit("Knight", UnitRank.S, {"hp": "900", "attack": "110", "defense": "120", "speed": "Medium"}, 95, [
            Upgrade("Dark Charge", 1_700_000, (("hp", 5),), 85),
        ]),
        make_unit("Dragon", UnitRank.A, {"hp": "2.5K", "attack": "350", "defense": "200", "speed": "Medium"}, 200, [
            Upgrade("Void Breath", 5_000_000, (("attack", 10),), 75),
        ]),
    ]


def veteran_roster() -> list[Unit]:
    """The roster a fresh session starts with: every unit already at level 50."""
    units = initial_roster()
    for unit in units:
        unit.level = 50
        unit.experience = 15_000
        unit.experience_to_next = 25_000
        unit.stats = {"hp": 1_200_000, "attack": 50_000, "defense": 150_000}
        unit.speed = "Low"
    return units
