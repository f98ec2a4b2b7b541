"""GameSession — owns every component and exposes the mutating entry points.

All mutation happens either inside a scheduler callback or inside one of the
entry points below. Nothing here blocks or raises on a rejected action: each
entry point returns a falsy value and changes nothing.
"""

from __future__ import annotations

import logging
from fractions import Fraction

from ascendant.config import GameConfig
from ascendant.core.army import ArmyRoster, initial_roster, veteran_roster
from ascendant.core.enums import Biome, BonusType, Currency, MonarchType, RewardType, SkillEffect
from ascendant.core.gates import EventResult, GeneratedDungeon, RunResult
from ascendant.core.items import starting_artifacts, starting_items
from ascendant.core.ledger import ResourceLedger
from ascendant.core.magnitude import exact, format_magnitude
from ascendant.core.player import Player
from ascendant.core.quests import QUEST_DEFS, REFINE_OBJECTIVE, Quest, QuestBook
from ascendant.core.skills import (
    MONARCH_DEFS, SkillTree, TreeNode, find_tree_node, initial_skill_trees,
    monarch_unit, starting_skills, tier_unlocked,
)
from ascendant.engine import ascension
from ascendant.engine.activities import DungeonBoard, RaidController, RaidReward, SkillBar, dungeon_quest_events
from ascendant.engine.gate_run import GateRunController
from ascendant.engine.notifications import Notifier
from ascendant.engine.progression import ProgressionLoop, TickResult
from ascendant.systems.gate_generator import GateGenerator
from ascendant.systems.rng import DeterministicRNG
from ascendant.systems.scheduler import Scheduler
from ascendant.utils.event_log import EventLog

logger = logging.getLogger(__name__)

COMBAT_KEY = "combat"


class GameSession:
    """One running game: the shared ledger plus every component around it."""

    def __init__(self, config: GameConfig | None = None, event_log: EventLog | None = None) -> None:
        self.config = config or GameConfig()
        cfg = self.config
        self.scheduler = Scheduler()
        self.event_log = event_log if event_log is not None else EventLog()
        self.rng = DeterministicRNG(cfg.seed)
        self.notifier = Notifier(self.scheduler, self.event_log, cfg.notification_seconds)

        self.ledger = ResourceLedger(
            balances={Currency.MANA: cfg.start_mana, Currency.GEMS: cfg.start_gems},
            artifacts=starting_artifacts(),
            items=starting_items(),
            max_equipped_artifacts=cfg.max_equipped_artifacts,
            ascension_mana_bonus=cfg.ascension_mana_bonus,
        )
        self.roster = ArmyRoster(veteran_roster() if cfg.veteran_army else initial_roster())
        self.player = Player(
            level=cfg.start_player_level,
            experience=cfg.start_player_xp,
            experience_to_next=cfg.start_player_xp_to_next,
            skill_points=cfg.start_skill_points,
        )
        self.quests = QuestBook(QUEST_DEFS, self.player.level)
        self.progression = ProgressionLoop(
            self.ledger, self.roster, self.player, self.quests,
            zone=cfg.start_zone, wave=cfg.start_wave,
        )

        step = cfg.activity_tick_seconds
        self.dungeons = DungeonBoard(self.scheduler, step, notify=self.notify)
        self.raid = RaidController(
            self.scheduler, self.roster.total_attack, step,
            notify=self.notify, emit=self._progress,
        )
        self.skills = SkillBar(self.scheduler, self.ledger, starting_skills(), step)
        self.skill_trees: list[SkillTree] = initial_skill_trees()

        self.chosen_monarch: MonarchType | None = None
        self.monarch_trees: dict[MonarchType, list[TreeNode]] = {
            m: d.build_tree() for m, d in MONARCH_DEFS.items()
        }

        self.gates = GateRunController(GateGenerator(self.rng), self.ledger, lambda: self.progression.zone)
        self.running = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> bool:
        """Start the combat loop and open the first raid cycle."""
        if self.running:
            return False
        self.running = True
        self.scheduler.call_every(COMBAT_KEY, self.config.combat_tick_seconds, self._combat_tick)
        self.raid.begin(self.config.raid_boss_hp, self.config.raid_duration_seconds)
        logger.info("Session started: zone %d wave %d", self.zone, self.wave)
        return True

    def advance(self, seconds: float) -> int:
        """Move simulated time forward; returns the number of callbacks fired."""
        return self.scheduler.advance(seconds)

    def teardown(self) -> int:
        """Cancel every timer. Afterwards, advancing time mutates nothing.

        Countdowns that lost their timer are reset too: running dungeons go
        back to IDLE and cooldowns clear, so a later start() can use them.
        """
        cancelled = self.scheduler.cancel_all()
        self.dungeons.abandon_running()
        self.raid.participating = False
        self.skills.clear_buffs()
        self.skills.reset_cooldowns()
        self.notifier.current = None
        self.running = False
        logger.info("Session torn down (%d timers cancelled)", cancelled)
        return cancelled

    @property
    def now(self) -> float:
        return self.scheduler.now

    @property
    def zone(self) -> int:
        return self.progression.zone

    @property
    def wave(self) -> int:
        return self.progression.wave

    # ------------------------------------------------------------------
    # Notifications and quest plumbing
    # ------------------------------------------------------------------

    def notify(self, text: str) -> None:
        self.notifier.show(text)

    def _announce_completed(self, completed: list[Quest]) -> None:
        for quest in completed:
            self.notify(f"Quest Complete: {quest.title}")

    def _progress(self, objective_id: str, delta: int = 1) -> None:
        self._announce_completed(self.quests.update_progress(objective_id, delta))

    def _player_leveled(self, levels: list[int]) -> None:
        for level in levels:
            self.notify(f"You reached Level {level}!")
        if levels:
            for quest in self.quests.refresh_unlocks(self.player.level):
                self.notify(f"New Quest Available: {quest.title}")

    # ------------------------------------------------------------------
    # Progression
    # ------------------------------------------------------------------

    def _combat_tick(self) -> None:
        self.wave_tick()

    def wave_tick(self, rush: bool = False) -> TickResult:
        result = self.progression.tick()
        for level in result.player_levels:
            self.notify(f"You reached Level {level}!")
        for quest in result.unlocked_quests:
            self.notify(f"New Quest Available: {quest.title}")
        self._announce_completed(result.completed_quests)
        if rush:
            self.notify(f"Rushed wave {result.wave}!")
        return result

    def click_for_mana(self) -> int:
        return self.progression.click_for_mana()

    # ------------------------------------------------------------------
    # Army, trees and artifacts
    # ------------------------------------------------------------------

    def purchase_upgrade(self, unit_name: str, upgrade_name: str) -> bool:
        return self.roster.purchase_upgrade(unit_name, upgrade_name, self.ledger)

    def purchase_skill_node(self, node_id: str) -> bool:
        node = find_tree_node(self.skill_trees, node_id)
        if node is None or self.player.skill_points <= 0 or node.level >= node.max_level:
            return False
        self.player.skill_points -= 1
        node.level += 1
        return True

    def toggle_artifact(self, artifact_id: int) -> bool:
        if self.ledger.toggle_artifact(artifact_id):
            return True
        if self.ledger.find_artifact(artifact_id) is not None:
            self.notify(f"Max artifacts equipped ({self.ledger.max_equipped_artifacts})")
        return False

    # ------------------------------------------------------------------
    # Skills
    # ------------------------------------------------------------------

    def activate_skill(self, skill_id: str) -> bool:
        skill = self.skills.activate(skill_id)
        if skill is None:
            return False
        effect = skill.definition.effect
        if effect == SkillEffect.RUSH_WAVE:
            self.wave_tick(rush=True)
        elif effect == SkillEffect.ULTIMATE:
            self.notify(f"Ultimate: {skill.name}!")
        self.notify(f"{skill.name} activated!")
        return True

    # ------------------------------------------------------------------
    # Fixed-duration dungeons
    # ------------------------------------------------------------------

    def start_dungeon(self, dungeon_id: str) -> bool:
        return self.dungeons.start(dungeon_id)

    def claim_dungeon(self, dungeon_id: str) -> bool:
        definition = self.dungeons.claim(dungeon_id)
        if definition is None:
            return False
        amount = definition.reward_amount
        if definition.reward_type == RewardType.MANA:
            self.ledger.credit(Currency.MANA, amount)
            self.notify(f"Claimed {format_magnitude(amount)} Mana!")
        elif definition.reward_type == RewardType.GEMS:
            self.ledger.credit(Currency.GEMS, amount)
            self.notify(f"Claimed {format_magnitude(amount)} Gems!")
        else:
            self.notify(f"Claimed {format_magnitude(amount)} XP!")
            self._player_leveled(self.player.gain_experience(amount))
        for objective_id in dungeon_quest_events(dungeon_id):
            self._progress(objective_id)
        return True

    # ------------------------------------------------------------------
    # Raid
    # ------------------------------------------------------------------

    def toggle_raid(self) -> bool:
        """Flip raid participation; returns the new state."""
        return self.raid.toggle()

    def claim_raid_rewards(self) -> RaidReward | None:
        reward = self.raid.claim_rewards()
        if reward is None:
            return None
        self.ledger.credit(Currency.ESSENCE, reward.essence)
        self.ledger.credit(Currency.GEMS, reward.gems)
        self.notify(f"Claimed Rank {reward.rank} rewards: {format_magnitude(reward.essence)} "
                    f"Essence and {format_magnitude(reward.gems)} Gems!")
        return reward

    # ------------------------------------------------------------------
    # Quests
    # ------------------------------------------------------------------

    def start_quest(self, quest_id: str) -> bool:
        if not self.quests.start(quest_id):
            return False
        self.notify(f"Quest Started: {self.quests.get(quest_id).title}")
        return True

    def claim_quest(self, quest_id: str) -> bool:
        reward = self.quests.claim(quest_id)
        if reward is None:
            return False
        parts: list[str] = []
        if reward.mana:
            self.ledger.credit(Currency.MANA, reward.mana)
            parts.append(f"{format_magnitude(reward.mana)} Mana")
        if reward.gems:
            self.ledger.credit(Currency.GEMS, reward.gems)
            parts.append(f"{reward.gems} Gems")
        if reward.essence:
            self.ledger.credit(Currency.ESSENCE, reward.essence)
            parts.append(f"{reward.essence} Essence")
        for item_id, quantity in reward.items:
            if self.ledger.add_item(item_id, quantity):
                parts.append(f"{quantity}x {self.ledger.item_name(item_id)}")
        if reward.artifact is not None:
            self.ledger.add_artifact(reward.artifact)
            parts.append(reward.artifact.name)
        if reward.skill_id is not None and self.skills.learn(reward.skill_id):
            parts.append(f"New Skill: {self.skills.get(reward.skill_id).name}")
        self.notify("Quest Claimed! Rewards: " + ", ".join(parts))
        return True

    def refine_quest_shards(self, quest_id: str) -> bool:
        quest = self.quests.get(quest_id)
        objective = quest.find_objective(REFINE_OBJECTIVE) if quest is not None else None
        if objective is None or objective.is_complete:
            return False
        if not self.ledger.debit(Currency.MANA, objective.target):
            self.notify("Not enough Mana to refine shards!")
            return False
        completed = self.quests.fill_objective(quest_id, REFINE_OBJECTIVE)
        self.notify("Crystal shards refined!")
        self._announce_completed(completed)
        return True

    # ------------------------------------------------------------------
    # Ascension and monarchs
    # ------------------------------------------------------------------

    @property
    def essence_bonus(self) -> float:
        return float(self._exact_essence_bonus())

    def _exact_essence_bonus(self) -> Fraction:
        base = MONARCH_DEFS[self.chosen_monarch].essence_bonus if self.chosen_monarch is not None else 0.0
        return exact(base) + self.ledger.exact_bonus(BonusType.ESSENCE)

    @property
    def can_ascend(self) -> bool:
        return ascension.can_ascend(self.zone, self.config.min_zone_for_ascension)

    def ascension_preview(self) -> ascension.AscensionReward:
        return ascension.preview(self.zone, self._exact_essence_bonus(), self.config.min_zone_for_ascension)

    def ascend(self) -> ascension.AscensionReward | None:
        if not self.can_ascend:
            self.notify("You are not ready to ascend yet.")
            return None
        reward = self.ascension_preview()
        self.ledger.credit(Currency.ESSENCE, reward.essence)
        self.ledger.credit(Currency.SOVEREIGN_POINTS, reward.points)
        self.ledger.ascension_count += 1

        self.progression.reset()
        self.ledger.set_balance(Currency.MANA, self.config.reset_mana)
        self.player.reset(self.config.reset_player_xp_to_next)
        self.skill_trees = initial_skill_trees()
        self.roster.replace_all(initial_roster())
        if self.chosen_monarch is not None:
            unit = monarch_unit(MONARCH_DEFS[self.chosen_monarch].unique_unit)
            if unit is not None:
                self.roster.add(unit)

        logger.info("Ascension #%d: +%d essence +%d points",
                    self.ledger.ascension_count, reward.essence, reward.points)
        self.notify(f"Ascended! Gained {reward.essence} Shadow Essence.")
        return reward

    @property
    def monarchs_unlocked(self) -> bool:
        return self.ledger.ascension_count >= self.config.monarch_unlock_ascensions

    def select_monarch(self, monarch: MonarchType) -> bool:
        if self.chosen_monarch is not None or not self.monarchs_unlocked:
            return False
        definition = MONARCH_DEFS[monarch]
        self.chosen_monarch = monarch
        unit = monarch_unit(definition.unique_unit)
        if unit is not None:
            self.roster.add(unit)
        self.skills.learn(definition.ultimate_skill_id)
        self.notify(f"You have sworn allegiance to the {definition.name}!")
        return True

    def purchase_monarch_node(self, node_id: str) -> bool:
        if self.chosen_monarch is None:
            return False
        nodes = self.monarch_trees[self.chosen_monarch]
        node = next((n for n in nodes if n.node_id == node_id), None)
        if node is None or node.level >= node.max_level or not tier_unlocked(nodes, node.tier):
            return False
        if not self.ledger.debit(Currency.SOVEREIGN_POINTS, node.cost):
            return False
        node.level += 1
        return True

    # ------------------------------------------------------------------
    # Procedural gates
    # ------------------------------------------------------------------

    def generate_gate(self, biome: Biome, depth: int) -> GeneratedDungeon | None:
        return self.gates.generate(biome, depth)

    def advance_gate_floor(self) -> bool:
        if not self.gates.advance_floor():
            return False
        self._announce_run_end()
        return True

    def resolve_gate_event(self, option_id: str) -> EventResult | None:
        result = self.gates.resolve_event(option_id)
        if result is not None:
            self._announce_run_end()
        return result

    def escape_gate(self) -> RunResult | None:
        result = self.gates.escape()
        if result is not None:
            self._announce_run_end()
        return result

    def _announce_run_end(self) -> None:
        result = self.gates.last_result
        if self.gates.active is None and result is not None:
            self.notify(f"Gate {result.status.name.lower()}: +{format_magnitude(result.mana)} Mana, "
                        f"+{result.gems} Gems")
