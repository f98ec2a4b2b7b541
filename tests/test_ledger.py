"""Tests for the resource ledger — balances, gain formula, artifacts, items."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from ascendant.core.enums import BonusType, Currency
from ascendant.core.items import ArtifactDef, starting_artifacts, starting_items
from ascendant.core.ledger import ResourceLedger


def _make_ledger(mana: int = 0, with_catalog: bool = True) -> ResourceLedger:
    return ResourceLedger(
        balances={Currency.MANA: mana},
        artifacts=starting_artifacts() if with_catalog else (),
        items=starting_items() if with_catalog else None,
    )


# ---------------------------------------------------------------------------
# Balances
# ---------------------------------------------------------------------------

class TestBalances:
    def test_credit_and_debit(self):
        ledger = _make_ledger(mana=100)
        ledger.credit(Currency.MANA, 50)
        assert ledger.balance(Currency.MANA) == 150
        assert ledger.debit(Currency.MANA, 120)
        assert ledger.balance(Currency.MANA) == 30

    def test_insufficient_debit_changes_nothing(self):
        ledger = _make_ledger(mana=10)
        assert not ledger.debit(Currency.MANA, 11)
        assert ledger.balance(Currency.MANA) == 10

    def test_negative_amounts_rejected(self):
        ledger = _make_ledger(mana=10)
        assert not ledger.debit(Currency.MANA, -5)
        ledger.credit(Currency.MANA, -5)
        assert ledger.balance(Currency.MANA) == 10

    def test_unset_currencies_start_at_zero(self):
        ledger = _make_ledger()
        assert ledger.balance(Currency.ESSENCE) == 0
        assert ledger.balance(Currency.SOVEREIGN_POINTS) == 0

    def test_set_balance_clamps_at_zero(self):
        ledger = _make_ledger(mana=10)
        ledger.set_balance(Currency.MANA, -3)
        assert ledger.balance(Currency.MANA) == 0


# ---------------------------------------------------------------------------
# Gain formula
# ---------------------------------------------------------------------------

class TestGain:
    def test_no_bonuses(self):
        ledger = _make_ledger(with_catalog=False)
        assert ledger.gain(1_000) == 1_000

    def test_equipped_artifact_bonus(self):
        # Crown of the Void (+10%) starts equipped
        ledger = _make_ledger()
        assert ledger.mana_gain_bonus == 0.10
        assert ledger.gain(1_000) == 1_100

    def test_unequipped_artifacts_ignored(self):
        ledger = _make_ledger()
        ledger.toggle_artifact(1)
        assert ledger.gain(1_000) == 1_000

    def test_bonuses_sum_not_compound(self):
        ledger = _make_ledger()
        ledger.toggle_artifact(2)   # +5%
        ledger.ascension_count = 2  # +20%
        assert ledger.gain(1_000) == 1_350

    def test_decimal_bonuses_do_not_drift_below_total(self):
        # 10% + 5% + 20% must scale by exactly 1.35
        ledger = _make_ledger()
        ledger.toggle_artifact(2)
        ledger.ascension_count = 2
        assert ledger.mana_multiplier == 1.35
        assert ledger.gain(20) == 27
        assert ledger.gain(1_000_000) == 1_350_000

    def test_flat_multiplier_applies_last(self):
        ledger = _make_ledger()
        ledger.flat_multiplier = 2.0
        assert ledger.gain(1_000) == 2_200

    def test_result_is_floored(self):
        ledger = _make_ledger()
        assert ledger.gain(5) == 5

    def test_bonus_by_type(self):
        ledger = _make_ledger(with_catalog=False)
        ledger.add_artifact(ArtifactDef(12, "Soul Lantern", BonusType.ESSENCE, 0.25))
        ledger.toggle_artifact(12)
        assert ledger.bonus(BonusType.ESSENCE) == 0.25
        assert ledger.mana_gain_bonus == 0


# ---------------------------------------------------------------------------
# Artifacts and items
# ---------------------------------------------------------------------------

class TestArtifacts:
    def test_equip_up_to_cap(self):
        ledger = _make_ledger()
        assert ledger.toggle_artifact(2)
        assert ledger.toggle_artifact(3)
        assert len(ledger.equipped_artifacts) == 3

        ledger.add_artifact(ArtifactDef(9, "Spare Ring", BonusType.MANA, 0.01))
        assert not ledger.toggle_artifact(9)
        assert not ledger.find_artifact(9).equipped

    def test_unequip_always_allowed(self):
        ledger = _make_ledger()
        assert ledger.toggle_artifact(1)
        assert not ledger.find_artifact(1).equipped

    def test_unknown_artifact(self):
        ledger = _make_ledger()
        assert not ledger.toggle_artifact(404)

    def test_granted_artifacts_start_unequipped(self):
        ledger = _make_ledger()
        artifact = ledger.add_artifact(ArtifactDef(5, "Hunter's Badge", BonusType.XP, 0.05))
        assert not artifact.equipped

    def test_bonus_text(self):
        assert ArtifactDef(1, "Crown", BonusType.MANA, 0.10).bonus_text == "+10% Mana Gain"


class TestItems:
    def test_add_known_item(self):
        ledger = _make_ledger()
        assert ledger.add_item(2, 1)
        assert ledger.items[2].quantity == 3

    def test_unknown_item_rejected(self):
        ledger = _make_ledger()
        assert not ledger.add_item(99, 1)
        assert 99 not in ledger.items
        assert ledger.item_name(99) == "Unknown Item"
