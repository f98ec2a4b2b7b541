"""Tests for ascension rewards and the prestige reset."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from ascendant.config import GameConfig
from ascendant.core.enums import Currency, MonarchType, QuestStatus
from ascendant.engine import ascension
from ascendant.engine.session import GameSession


def _make_session(zone: int = 150, **overrides) -> GameSession:
    session = GameSession(GameConfig(start_zone=zone, start_wave=1, **overrides))
    session.start()
    return session


class TestRewardFormulas:
    def test_zone_150(self):
        assert ascension.essence_gain(150) == 464
        assert ascension.points_gain(150) == 3

    def test_bonus_multiplies_floored_base(self):
        assert ascension.essence_gain(150, 0.10) == 510

    def test_threshold(self):
        assert ascension.essence_gain(100) == 31
        assert ascension.points_gain(100) == 1
        assert ascension.points_gain(124) == 1
        assert ascension.points_gain(125) == 2

    def test_configured_threshold_shifts_both_formulas(self):
        assert ascension.essence_gain(60, min_zone=50) == 89      # floor(20 ** 1.5)
        assert ascension.points_gain(60, min_zone=50) == 1
        assert ascension.points_gain(75, min_zone=50) == 2
        assert ascension.preview(49, min_zone=50) == ascension.AscensionReward(0, 0)
        assert ascension.preview(60, 0.10, min_zone=50) == ascension.AscensionReward(97, 1)

    def test_below_threshold(self):
        assert not ascension.can_ascend(99)
        assert ascension.preview(99) == ascension.AscensionReward(0, 0)


class TestAscend:
    def test_rejected_below_zone_100(self):
        session = _make_session(zone=99)
        assert session.ascend() is None
        assert session.zone == 99
        assert session.notifier.current == "You are not ready to ascend yet."

    def test_configured_threshold_pays_out(self):
        session = _make_session(zone=60, min_zone_for_ascension=50)
        reward = session.ascend()
        assert (reward.essence, reward.points) == (89, 1)
        assert session.ledger.balance(Currency.ESSENCE) == 89
        assert session.ledger.balance(Currency.SOVEREIGN_POINTS) == 1

    def test_configured_threshold_still_gates(self):
        session = _make_session(zone=49, min_zone_for_ascension=50)
        assert session.ascension_preview() == ascension.AscensionReward(0, 0)
        assert session.ascend() is None

    def test_resets_run_state(self):
        session = _make_session()
        gems = session.ledger.balance(Currency.GEMS)

        reward = session.ascend()
        assert (reward.essence, reward.points) == (464, 3)
        assert (session.zone, session.wave) == (1, 1)
        assert session.ledger.balance(Currency.MANA) == 1_000
        assert session.ledger.balance(Currency.ESSENCE) == 464
        assert session.ledger.balance(Currency.SOVEREIGN_POINTS) == 3
        assert session.ledger.ascension_count == 1
        assert session.player.level == 1
        assert session.player.experience_to_next == 250
        assert all(u.level == 1 for u in session.roster)
        assert all(n.level == 0 for t in session.skill_trees for n in t.nodes)
        assert session.ledger.balance(Currency.GEMS) == gems

    def test_permanent_bonus_grows(self):
        session = _make_session()
        before = session.ledger.gain(1_000)
        session.ascend()
        assert session.ledger.permanent_mana_bonus == 0.10
        assert session.ledger.gain(1_000) == before + 100

    def test_quests_survive(self):
        session = _make_session()
        session.start_quest("q1_shadow_echo")
        session.ascend()
        assert session.quests.get("q1_shadow_echo").status == QuestStatus.IN_PROGRESS

    def test_monarch_unit_returns_after_reset(self):
        session = _make_session()
        session.ledger.ascension_count = 10
        assert session.select_monarch(MonarchType.BEAST)
        session.ascend()
        assert session.roster.get("Giant Wolf") is not None
        assert len(session.roster) == 7

    def test_monarch_essence_bonus(self):
        session = _make_session()
        session.ledger.ascension_count = 10
        session.select_monarch(MonarchType.SHADOW)
        assert session.essence_bonus == 0.10
        assert session.ascend().essence == 510
