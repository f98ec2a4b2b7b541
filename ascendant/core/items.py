"""Artifacts and inventory items.

Artifacts are equippable trinkets carrying one percentage bonus; inventory
items are stackable consumables referenced by numeric id. Both live in the
resource ledger once owned.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from ascendant.core.enums import BonusType


# ---------------------------------------------------------------------------
# Artifact
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ArtifactDef:
    """Immutable artifact blueprint, as granted by a quest reward."""

    artifact_id: int
    name: str
    bonus_type: BonusType
    bonus_value: float          # 0.10 == +10%

    @property
    def bonus_text(self) -> str:
        return f"+{self.bonus_value * 100:g}% {_BONUS_LABELS[self.bonus_type]}"


@dataclass(slots=True)
class Artifact:
    """An owned artifact."""

    definition: ArtifactDef
    equipped: bool = False

    @property
    def artifact_id(self) -> int:
        return self.definition.artifact_id

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def bonus_type(self) -> BonusType:
        return self.definition.bonus_type

    @property
    def bonus_value(self) -> float:
        return self.definition.bonus_value

    def copy(self) -> Artifact:
        return Artifact(definition=self.definition, equipped=self.equipped)


_BONUS_LABELS: dict[BonusType, str] = {
    BonusType.MANA: "Mana Gain",
    BonusType.XP: "XP Gain",
    BonusType.ATTACK: "Army Attack",
    BonusType.HP: "Army HP",
    BonusType.DEFENSE: "Army Defense",
    BonusType.CRIT: "Critical Chance",
    BonusType.ESSENCE: "Shadow Essence Gain",
}


# ---------------------------------------------------------------------------
# Inventory item
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class InventoryItem:
    item_id: int
    name: str
    description: str
    quantity: int = 0

    def copy(self) -> InventoryItem:
        return replace(self)


# ---------------------------------------------------------------------------
# Starting catalog
# ---------------------------------------------------------------------------

STARTING_ARTIFACTS: tuple[tuple[ArtifactDef, bool], ...] = (
    (ArtifactDef(1, "Crown of the Void", BonusType.MANA, 0.10), True),
    (ArtifactDef(2, "Sovereign's Eye", BonusType.MANA, 0.05), False),
    (ArtifactDef(3, "Shadow Heart", BonusType.MANA, 0.15), False),
)

STARTING_ITEMS: tuple[InventoryItem, ...] = (
    InventoryItem(1, "Dungeon Key", "Unlocks a special dungeon.", 5),
    InventoryItem(2, "Raid Ticket", "Allows entry to a raid.", 2),
)


def starting_artifacts() -> list[Artifact]:
    return [Artifact(definition=d, equipped=eq) for d, eq in STARTING_ARTIFACTS]


def starting_items() -> dict[int, InventoryItem]:
    return {item.item_id: item.copy() for item in STARTING_ITEMS}
