"""Resource ledger — currency balances and the bonuses that scale gains.

All mana gains go through :meth:`ResourceLedger.gain`::

    floor(base * (1 + sum(percentage bonuses)) * flat_multiplier)

Percentage bonuses are summed, never compounded: every equipped artifact of
the matching type plus the permanent per-ascension bonus. The flat
multiplier is a transient skill buff (1 when inactive).

Balances never go negative. Debits check affordability before mutating and
report failure through their return value.
"""

from __future__ import annotations

import logging
import math
from fractions import Fraction
from typing import Iterable, Mapping

from ascendant.core.enums import BonusType, Currency
from ascendant.core.items import Artifact, ArtifactDef, InventoryItem
from ascendant.core.magnitude import exact

logger = logging.getLogger(__name__)


class ResourceLedger:
    """Shared mutable store of currencies, artifacts and items."""

    __slots__ = (
        "_balances",
        "artifacts",
        "items",
        "max_equipped_artifacts",
        "ascension_count",
        "ascension_mana_bonus",
        "flat_multiplier",
        "click_multiplier",
    )

    def __init__(
        self,
        balances: Mapping[Currency, int] | None = None,
        artifacts: Iterable[Artifact] = (),
        items: Mapping[int, InventoryItem] | None = None,
        max_equipped_artifacts: int = 3,
        ascension_mana_bonus: float = 0.10,
    ) -> None:
        self._balances: dict[Currency, int] = {c: 0 for c in Currency}
        for currency, amount in (balances or {}).items():
            self._balances[currency] = max(0, int(amount))
        self.artifacts: list[Artifact] = list(artifacts)
        self.items: dict[int, InventoryItem] = dict(items or {})
        self.max_equipped_artifacts = max_equipped_artifacts
        self.ascension_count: int = 0
        self.ascension_mana_bonus = ascension_mana_bonus
        self.flat_multiplier: float = 1.0
        self.click_multiplier: int = 1

    # -- balances --

    def balance(self, currency: Currency) -> int:
        return self._balances[currency]

    @property
    def balances(self) -> dict[Currency, int]:
        return dict(self._balances)

    def set_balance(self, currency: Currency, amount: int) -> None:
        """Overwrite a balance (used by resets, never by gameplay)."""
        self._balances[currency] = max(0, int(amount))

    def credit(self, currency: Currency, amount: int) -> int:
        """Add *amount* to *currency*; non-positive amounts are ignored."""
        if amount > 0:
            self._balances[currency] += int(amount)
        return self._balances[currency]

    def can_afford(self, currency: Currency, amount: int) -> bool:
        return self._balances[currency] >= amount

    def debit(self, currency: Currency, amount: int) -> bool:
        """Remove *amount* from *currency*. Returns False (and changes nothing) if unaffordable."""
        if amount < 0 or not self.can_afford(currency, amount):
            return False
        self._balances[currency] -= int(amount)
        return True

    # -- bonuses --

    @property
    def equipped_artifacts(self) -> list[Artifact]:
        return [a for a in self.artifacts if a.equipped]

    def bonus(self, bonus_type: BonusType) -> float:
        """Sum of equipped artifact bonuses of *bonus_type*."""
        return float(self.exact_bonus(bonus_type))

    @property
    def mana_gain_bonus(self) -> float:
        return self.bonus(BonusType.MANA)

    @property
    def permanent_mana_bonus(self) -> float:
        return float(self.ascension_count * exact(self.ascension_mana_bonus))

    def exact_bonus(self, bonus_type: BonusType) -> Fraction:
        """Like :meth:`bonus`, summed as exact decimals."""
        return sum(
            (exact(a.bonus_value) for a in self.artifacts if a.equipped and a.bonus_type == bonus_type),
            Fraction(0),
        )

    @property
    def mana_multiplier(self) -> float:
        return float(self._exact_multiplier())

    def _exact_multiplier(self) -> Fraction:
        percent = self.exact_bonus(BonusType.MANA) + self.ascension_count * exact(self.ascension_mana_bonus)
        return (1 + percent) * exact(self.flat_multiplier)

    def gain(self, base: float | Fraction) -> int:
        """Apply the gain formula to a base mana amount.

        Summed in exact decimals so a bonus total of 35% really is 1.35.
        """
        return math.floor(exact(base) * self._exact_multiplier())

    # -- artifacts --

    def find_artifact(self, artifact_id: int) -> Artifact | None:
        for artifact in self.artifacts:
            if artifact.artifact_id == artifact_id:
                return artifact
        return None

    def add_artifact(self, definition: ArtifactDef) -> Artifact:
        """Grant an artifact, always unequipped."""
        artifact = Artifact(definition=definition, equipped=False)
        self.artifacts.append(artifact)
        return artifact

    def toggle_artifact(self, artifact_id: int) -> bool:
        """Equip or unequip. Equipping past the cap is rejected."""
        artifact = self.find_artifact(artifact_id)
        if artifact is None:
            return False
        if artifact.equipped:
            artifact.equipped = False
            return True
        if len(self.equipped_artifacts) >= self.max_equipped_artifacts:
            return False
        artifact.equipped = True
        return True

    # -- items --

    def add_item(self, item_id: int, quantity: int) -> bool:
        """Increase an item stack. Items missing from the inventory are rejected."""
        item = self.items.get(item_id)
        if item is None:
            logger.warning("Reward references unknown item id %d; skipped", item_id)
            return False
        item.quantity += quantity
        return True

    def item_name(self, item_id: int) -> str:
        item = self.items.get(item_id)
        return item.name if item else "Unknown Item"
