"""E2E tests for GameSession — wiring, notifications, teardown and the entry points."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tests.helpers.session_harness import SessionHarness
from ascendant.core.enums import (
    Biome, BonusType, Currency, DungeonStatus, MonarchType, QuestStatus, RunStatus,
)
from ascendant.core.items import ArtifactDef


# ---------------------------------------------------------------------------
# Clock and lifecycle
# ---------------------------------------------------------------------------

class TestLifecycle:
    def test_combat_tick_every_two_seconds(self):
        h = SessionHarness()
        start_mana = h.balance(Currency.MANA)
        h.run_seconds(2.0)
        assert (h.session.zone, h.session.wave) == (123, 5)
        assert h.balance(Currency.MANA) == start_mana + 13_530

    def test_start_is_idempotent(self):
        h = SessionHarness()
        assert not h.session.start()

    def test_teardown_freezes_everything(self):
        h = SessionHarness()
        h.session.start_dungeon("gold")
        h.session.toggle_raid()
        h.session.activate_skill("frenzy")
        h.session.teardown()

        state = (h.session.zone, h.session.wave, h.balance(Currency.MANA))
        assert h.run_seconds(10_000) == 0
        assert (h.session.zone, h.session.wave, h.balance(Currency.MANA)) == state
        assert h.session.scheduler.active_keys == []
        assert h.session.ledger.click_multiplier == 1
        assert not h.session.raid.participating
        assert not h.session.running

    def test_restart_after_teardown_recovers_countdowns(self):
        h = SessionHarness()
        h.session.start_dungeon("gold")
        h.session.activate_skill("frenzy")
        h.run_seconds(100)
        h.session.teardown()

        gold = h.session.dungeons.get("gold")
        frenzy = h.session.skills.get("frenzy")
        assert (gold.status, gold.remaining) == (DungeonStatus.IDLE, 3_600)
        assert not frenzy.on_cooldown
        assert frenzy.cooldown_timer == 60

        assert h.session.start()
        assert h.session.start_dungeon("gold")
        h.run_seconds(3_600)
        assert gold.status == DungeonStatus.COMPLETED
        assert h.session.claim_dungeon("gold")
        assert h.session.activate_skill("frenzy")

    def test_notification_expires(self):
        h = SessionHarness()
        h.session.notify("hello")
        h.run_seconds(2.9)
        assert h.notification == "hello"
        h.run_seconds(0.1)
        assert h.notification is None

    def test_new_notification_replaces_and_restarts(self):
        h = SessionHarness(start=False)
        h.session.notify("first")
        h.run_seconds(2.0)
        h.session.notify("second")
        h.run_seconds(2.0)
        assert h.notification == "second"
        assert h.messages() == ["first", "second"]


# ---------------------------------------------------------------------------
# Skills and artifacts
# ---------------------------------------------------------------------------

class TestSkills:
    def test_shadow_rush_resolves_a_wave(self):
        h = SessionHarness()
        assert h.session.activate_skill("shadow_rush")
        assert h.session.wave == 5
        assert h.messages_containing("Rushed wave 4!")
        assert h.notification == "Shadow Rush activated!"
        assert not h.session.activate_skill("shadow_rush")

    def test_frenzy_boosts_clicks(self):
        h = SessionHarness()
        assert h.session.click_for_mana() == 1_230
        h.session.activate_skill("frenzy")
        assert h.session.click_for_mana() == 6_150

    def test_frenzy_wears_off(self):
        h = SessionHarness(start=False)
        h.session.activate_skill("frenzy")
        assert h.run_until(lambda hh: hh.session.ledger.click_multiplier == 1, max_seconds=30)
        assert h.session.now == 10.0
        assert h.session.skills.get("frenzy").on_cooldown

    def test_artifact_cap_notifies(self):
        h = SessionHarness()
        assert h.session.toggle_artifact(2)
        assert h.session.toggle_artifact(3)
        h.session.ledger.add_artifact(ArtifactDef(9, "Spare", BonusType.MANA, 0.01))
        assert not h.session.toggle_artifact(9)
        assert h.notification == "Max artifacts equipped (3)"

    def test_skill_tree_spends_points(self):
        h = SessionHarness()
        assert h.session.purchase_skill_node("w1")
        assert h.session.player.skill_points == 9
        assert h.session.skill_trees[0].find("w1").level == 1
        assert not h.session.purchase_skill_node("zz")

    def test_skill_node_max_level(self):
        h = SessionHarness()
        for _ in range(5):
            assert h.session.purchase_skill_node("w3")
        assert not h.session.purchase_skill_node("w3")
        assert h.session.player.skill_points == 5


# ---------------------------------------------------------------------------
# Dungeons and raid
# ---------------------------------------------------------------------------

class TestDungeons:
    def test_claim_gems_and_progress(self):
        h = SessionHarness()
        h.session.start_quest("q7_cleaner")
        gems = h.balance(Currency.GEMS)
        h.session.start_dungeon("artifact")
        h.run_seconds(14_400)
        assert h.session.dungeons.get("artifact").status == DungeonStatus.COMPLETED
        assert h.session.claim_dungeon("artifact")
        assert h.balance(Currency.GEMS) == gems + 500
        objective = h.session.quests.get("q7_cleaner").find_objective("complete_dungeon")
        assert objective.progress == 1
        assert not h.session.claim_dungeon("artifact")

    def test_xp_dungeon_levels_player(self):
        h = SessionHarness(start=False)
        h.session.start_dungeon("xp")
        h.run_seconds(7_200)
        level = h.session.player.level
        assert h.session.claim_dungeon("xp")
        assert h.session.player.level > level
        assert h.messages_containing("You reached Level")


class TestRaid:
    def test_raid_opens_on_start(self):
        h = SessionHarness()
        assert h.session.raid.boss is not None
        assert h.session.scheduler.is_active("raid:timer")

    def test_participation_deals_army_attack(self):
        h = SessionHarness()
        assert h.session.toggle_raid()
        h.run_seconds(3.0)
        assert h.session.raid.player_entry.damage == 3 * h.session.roster.total_attack()


# ---------------------------------------------------------------------------
# Quests
# ---------------------------------------------------------------------------

class TestQuests:
    def test_refine_needs_mana(self):
        h = SessionHarness(mana=100)
        h.session.start_quest("q3_crystal_shards")
        assert not h.session.refine_quest_shards("q3_crystal_shards")
        assert h.notification == "Not enough Mana to refine shards!"
        assert h.balance(Currency.MANA) == 100

    def test_refine_then_claim(self):
        h = SessionHarness(start=False)
        s = h.session
        s.start_quest("q3_crystal_shards")
        s.quests.update_progress("collect_shards", 3)
        mana = h.balance(Currency.MANA)

        assert s.refine_quest_shards("q3_crystal_shards")
        assert h.balance(Currency.MANA) == mana - 500_000
        assert s.quests.get("q3_crystal_shards").status == QuestStatus.COMPLETED
        assert h.notification == "Quest Complete: Crystal Shards"
        assert not s.refine_quest_shards("q3_crystal_shards")

        gems = h.balance(Currency.GEMS)
        assert s.claim_quest("q3_crystal_shards")
        assert h.balance(Currency.GEMS) == gems + 250
        assert s.ledger.items[2].quantity == 3
        assert h.notification.startswith("Quest Claimed! Rewards: 250 Gems")
        assert not s.claim_quest("q3_crystal_shards")

    def test_skill_reward_is_learned_ready(self):
        h = SessionHarness(start=False)
        s = h.session
        s.start_quest("q2_wave_breaker")
        s.quests.update_progress("survive_waves", 5)
        s.quests.update_progress("defeat_corrupted_knight", 1)
        assert s.claim_quest("q2_wave_breaker")
        skill = s.skills.get("mana_overload")
        assert skill is not None and not skill.on_cooldown

    def test_artifact_reward_arrives_unequipped(self):
        h = SessionHarness(start=False)
        s = h.session
        s.start_quest("q6_missing_brother")
        s.quests.sync_watermarks(20)
        s.quests.update_progress("rescue_brother", 1)
        assert s.claim_quest("q6_missing_brother")
        artifact = s.ledger.find_artifact(5)
        assert artifact is not None and not artifact.equipped

    def test_start_notifies(self):
        h = SessionHarness()
        assert h.session.start_quest("q1_shadow_echo")
        assert h.notification == "Quest Started: Shadow Echo"
        assert not h.session.start_quest("q1_shadow_echo")


# ---------------------------------------------------------------------------
# Monarchs
# ---------------------------------------------------------------------------

class TestMonarchs:
    def test_locked_until_ten_ascensions(self):
        h = SessionHarness()
        assert not h.session.select_monarch(MonarchType.SHADOW)

    def test_select_once(self):
        h = SessionHarness()
        s = h.session
        s.ledger.ascension_count = 10
        assert s.select_monarch(MonarchType.SHADOW)
        assert s.roster.get("Shadow General") is not None
        assert s.skills.get("march_of_shadows") is not None
        assert not s.select_monarch(MonarchType.ICE)

    def test_monarch_tree_tiers(self):
        h = SessionHarness()
        s = h.session
        s.ledger.ascension_count = 10
        s.select_monarch(MonarchType.SHADOW)
        s.ledger.credit(Currency.SOVEREIGN_POINTS, 5)
        assert not s.purchase_monarch_node("ms2_1")
        assert s.purchase_monarch_node("ms1_1")
        assert s.purchase_monarch_node("ms2_1")
        assert not s.purchase_monarch_node("ms1_1")
        assert h.balance(Currency.SOVEREIGN_POINTS) == 2

    def test_ultimate_announces(self):
        h = SessionHarness()
        s = h.session
        s.ledger.ascension_count = 10
        s.select_monarch(MonarchType.DESTRUCTION)
        assert s.activate_skill("void_assault")
        assert h.messages_containing("Ultimate: Void Assault!")


# ---------------------------------------------------------------------------
# Gates
# ---------------------------------------------------------------------------

class TestGates:
    def test_run_to_completion(self):
        h = SessionHarness(start=False)
        s = h.session
        gate = s.generate_gate(Biome.SHADOW_CRYPT, 3)
        assert gate is not None
        assert s.generate_gate(Biome.FROST_CAVE, 3) is None

        while s.gates.active is not None:
            active = s.gates.active
            if active.status == RunStatus.EVENT:
                assert s.resolve_gate_event(active.floor.event.options[-1].option_id) is not None
            else:
                assert s.advance_gate_floor()

        assert s.gates.last_result is not None
        assert h.messages_containing("Gate ")

    def test_escape(self):
        h = SessionHarness(start=False)
        s = h.session
        s.generate_gate(Biome.FROST_CAVE, 4)
        result = s.escape_gate()
        assert result.status == RunStatus.COMPLETED
        assert h.notification == "Gate completed: +0 Mana, +0 Gems"
        assert s.escape_gate() is None
