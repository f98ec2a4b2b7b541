"""Quest system — catalog, objective tracking and the quest lifecycle.

Lifecycle (forward only)::

    LOCKED -> AVAILABLE -> IN_PROGRESS -> COMPLETED -> CLAIMED

  - LOCKED -> AVAILABLE when the player's level meets the requirement.
  - AVAILABLE -> IN_PROGRESS on an explicit start.
  - IN_PROGRESS -> COMPLETED automatically once every objective is met.
  - COMPLETED -> CLAIMED on an explicit claim, which hands back the reward once.

Objectives advance through named progress events. Objectives whose id starts
with ``reach_zone`` are watermarks: they are set to the current zone each
tick instead of being incremented.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ascendant.core.enums import BonusType, QuestCategory, QuestStatus
from ascendant.core.items import ArtifactDef

logger = logging.getLogger(__name__)

WATERMARK_PREFIX = "reach_zone"
REFINE_OBJECTIVE = "refine_shards"


# ---------------------------------------------------------------------------
# Objective
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class Objective:
    objective_id: str
    description: str
    target: int
    progress: int = 0

    @property
    def is_complete(self) -> bool:
        return self.progress >= self.target

    @property
    def is_watermark(self) -> bool:
        return self.objective_id.startswith(WATERMARK_PREFIX)

    def advance(self, amount: int) -> bool:
        """Add progress, clamped to target. Returns True if progress changed."""
        if amount <= 0:
            return False
        new = min(self.progress + amount, self.target)
        changed = new != self.progress
        self.progress = max(self.progress, new)
        return changed

    def raise_to(self, value: int) -> bool:
        """Raise progress to ``min(value, target)``; never lowers it."""
        new = min(value, self.target)
        if new <= self.progress:
            return False
        self.progress = new
        return True

    def copy(self) -> Objective:
        return Objective(self.objective_id, self.description, self.target, self.progress)


# ---------------------------------------------------------------------------
# Definitions
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class QuestReward:
    mana: int = 0
    gems: int = 0
    essence: int = 0
    items: tuple[tuple[int, int], ...] = ()      # (item_id, quantity)
    artifact: ArtifactDef | None = None
    skill_id: str | None = None


@dataclass(frozen=True, slots=True)
class QuestDef:
    quest_id: str
    title: str
    category: QuestCategory
    level_requirement: int
    synopsis: str
    objectives: tuple[tuple[str, str, int], ...]   # (objective_id, description, target)
    reward: QuestReward
    narrative_impact: str = ""
    gameplay_impact: str = ""


@dataclass(slots=True)
class Quest:
    """Live quest state built from a :class:`QuestDef`."""

    definition: QuestDef
    objectives: list[Objective] = field(default_factory=list)
    status: QuestStatus = QuestStatus.LOCKED

    @classmethod
    def from_def(cls, definition: QuestDef, player_level: int) -> Quest:
        status = (QuestStatus.AVAILABLE if player_level >= definition.level_requirement
                  else QuestStatus.LOCKED)
        return cls(
            definition=definition,
            objectives=[Objective(oid, desc, target) for oid, desc, target in definition.objectives],
            status=status,
        )

    @property
    def quest_id(self) -> str:
        return self.definition.quest_id

    @property
    def title(self) -> str:
        return self.definition.title

    @property
    def all_objectives_met(self) -> bool:
        return all(o.is_complete for o in self.objectives)

    def find_objective(self, objective_id: str) -> Objective | None:
        for objective in self.objectives:
            if objective.objective_id == objective_id:
                return objective
        return None

    def _advance_to(self, status: QuestStatus) -> bool:
        if status <= self.status:
            return False
        self.status = status
        return True

    def copy(self) -> Quest:
        return Quest(self.definition, [o.copy() for o in self.objectives], self.status)


# ---------------------------------------------------------------------------
# Quest book (the state machine over all quests)
# ---------------------------------------------------------------------------

class QuestBook:
    """Owns every quest and applies lifecycle transitions.

    Mutators return the quests that changed so the caller can notify.
    """

    __slots__ = ("quests",)

    def __init__(self, definitions: tuple[QuestDef, ...] | list[QuestDef], player_level: int) -> None:
        self.quests: dict[str, Quest] = {
            d.quest_id: Quest.from_def(d, player_level) for d in definitions
        }

    def get(self, quest_id: str) -> Quest | None:
        return self.quests.get(quest_id)

    def with_status(self, *statuses: QuestStatus) -> list[Quest]:
        return [q for q in self.quests.values() if q.status in statuses]

    @property
    def in_progress(self) -> list[Quest]:
        return self.with_status(QuestStatus.IN_PROGRESS)

    # -- transitions --

    def refresh_unlocks(self, player_level: int) -> list[Quest]:
        """Promote LOCKED quests whose requirement *player_level* meets."""
        unlocked = []
        for quest in self.with_status(QuestStatus.LOCKED):
            if player_level >= quest.definition.level_requirement:
                quest._advance_to(QuestStatus.AVAILABLE)
                unlocked.append(quest)
        return unlocked

    def start(self, quest_id: str) -> bool:
        quest = self.quests.get(quest_id)
        if quest is None or quest.status != QuestStatus.AVAILABLE:
            return False
        quest._advance_to(QuestStatus.IN_PROGRESS)
        logger.info("Quest started: %s", quest.title)
        return True

    def claim(self, quest_id: str) -> QuestReward | None:
        """Mark a COMPLETED quest CLAIMED and return its reward, else None."""
        quest = self.quests.get(quest_id)
        if quest is None or quest.status != QuestStatus.COMPLETED:
            return None
        quest._advance_to(QuestStatus.CLAIMED)
        logger.info("Quest claimed: %s", quest.title)
        return quest.definition.reward

    def check_completion(self, quest: Quest) -> bool:
        """IN_PROGRESS -> COMPLETED once every objective is met."""
        if quest.status == QuestStatus.IN_PROGRESS and quest.all_objectives_met:
            quest._advance_to(QuestStatus.COMPLETED)
            logger.info("Quest complete: %s", quest.title)
            return True
        return False

    # -- progress --

    def update_progress(self, objective_id: str, delta: int = 1) -> list[Quest]:
        """Advance every in-progress objective named *objective_id*.

        Unknown ids are a no-op. Returns quests that completed as a result.
        """
        completed = []
        for quest in self.in_progress:
            for objective in quest.objectives:
                if objective.objective_id == objective_id:
                    objective.advance(delta)
            if self.check_completion(quest):
                completed.append(quest)
        return completed

    def sync_watermarks(self, zone: int) -> list[Quest]:
        """Set every in-progress ``reach_zone*`` objective to ``min(zone, target)``."""
        completed = []
        for quest in self.in_progress:
            for objective in quest.objectives:
                if objective.is_watermark:
                    objective.raise_to(zone)
            if self.check_completion(quest):
                completed.append(quest)
        return completed

    def fill_objective(self, quest_id: str, objective_id: str) -> list[Quest]:
        """Set one objective straight to its target (one-off actions).

        Returns ``[quest]`` if that completed the quest, else ``[]``.
        """
        quest = self.quests.get(quest_id)
        objective = quest.find_objective(objective_id) if quest is not None else None
        if objective is None:
            return []
        objective.raise_to(objective.target)
        return [quest] if self.check_completion(quest) else []


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

QUEST_DEFS: tuple[QuestDef, ...] = (
    # Prologue
    QuestDef(
        "q1_shadow_echo", "Shadow Echo", QuestCategory.COMBAT, 1,
        "Hunters past the fiftieth zone have been turned by a shadow that mimics your own.",
        (("defeat_corrupted", "Defeat corrupted hunters (zone 50+)", 25),),
        QuestReward(mana=5_000, gems=50),
        "The echo fades. Whatever copied your power is still out there.",
        "Introduces zone-gated objectives.",
    ),
    QuestDef(
        "q2_wave_breaker", "The Wave Breaker", QuestCategory.ENDURANCE, 1,
        "A corrupted knight leads wave after wave against the outer wall. Hold the line.",
        (("survive_waves", "Survive boss waves", 5),
         ("defeat_corrupted_knight", "Defeat the corrupted knight", 1)),
        QuestReward(mana=20_000, skill_id="mana_overload"),
        "The wall holds, and the knight's overflowing mana is now yours to command.",
        "Unlocks the Mana Overload skill.",
    ),
    QuestDef(
        "q3_crystal_shards", "Crystal Shards", QuestCategory.EXTRACTION, 3,
        "The Gold Dungeon seeps raw crystal. Gather shards and refine them with mana.",
        (("collect_shards", "Collect crystal shards in the Gold Dungeon", 3),
         (REFINE_OBJECTIVE, "Refine the shards (costs mana)", 500_000)),
        QuestReward(gems=250, items=((2, 1),)),
        "Refined crystal hums with stored power.",
        "Teaches the refine action.",
    ),
    # Chapter 1
    QuestDef(
        "q4_price_of_bread", "The Price of Bread", QuestCategory.SOCIAL, 5,
        "A baker is being extorted by low-rank hunters. Teach them some manners.",
        (("defeat_racketteurs", "Drive off the racketeers", 3),),
        QuestReward(mana=10_000, items=((1, 1),)),
        "The baker is grateful. Your reputation grows in the district.",
        "Unlocks town discounts or a future ally.",
    ),
    QuestDef(
        "q5_dungeon_rat", "The Dungeon Rat", QuestCategory.EXPLORATION, 5,
        "An unstable mini-gate opened in the sewers, spitting out creatures. Clear the area and seal the rift.",
        (("explore_sewers", "Eliminate the sewer creatures", 50),
         ("close_rift", "Seal the unstable rift", 1)),
        QuestReward(mana=15_000, essence=100),
        "Your quick response prevented a larger breach.",
        "Introduces gate anomalies.",
    ),
    QuestDef(
        "q6_missing_brother", "The Missing Brother", QuestCategory.INVESTIGATION, 10,
        "A young boy is sick with worry. His older brother, a new hunter, vanished in a D-rank dungeon.",
        (("reach_zone_20", "Push forward to find clues", 20),
         ("rescue_brother", "Rescue the brother", 1)),
        QuestReward(mana=25_000, artifact=ArtifactDef(5, "Brotherhood Charm", BonusType.HP, 0.02)),
        "The brother is saved. You have earned a family's loyalty.",
        "The rescued brother may become a merchant or informant later.",
    ),
    QuestDef(
        "q7_cleaner", "The Cleaner", QuestCategory.COMBAT, 15,
        "A hunter team botched its job and left a dungeon 'almost' empty. Finish the sweep.",
        (("complete_dungeon", "Finish clearing the dungeon", 1),
         ("extract_remains", "Extract shadow essence", 100)),
        QuestReward(mana=50_000, essence=500),
        "Clean work. You are becoming known for efficiency.",
        "Encourages both active combat and dungeon expeditions.",
    ),
    # Chapter 2
    QuestDef(
        "q8_ghost_guild", "The Ghost Guild", QuestCategory.INVESTIGATION, 20,
        "An entire guild vanished without a trace in a C-rank dungeon. Find out what happened.",
        (("reach_zone_30", "Explore the dungeon to its end", 30),
         ("defeat_monarch_shadow", "Face the lesser monarch", 1)),
        QuestReward(mana=100_000, artifact=ArtifactDef(6, "Monarch's Fragment", BonusType.ATTACK, 0.05)),
        "You found traces of a dark power far beyond anything you have faced.",
        "First hints about the Monarchs.",
    ),
    QuestDef(
        "q9_jinho_contract", "Jin-ho's Contract", QuestCategory.SOCIAL, 25,
        "Your friend Jin-ho needs help on a guild raid to prove his worth.",
        (("complete_xp_dungeon", "Escort Jin-ho through a dungeon", 1),),
        QuestReward(mana=50_000, artifact=ArtifactDef(7, "Jin-ho's Charm", BonusType.XP, 0.05)),
        "Your friendship with Jin-ho is stronger than ever.",
        "May unlock exclusive Jin-ho quests later.",
    ),
    QuestDef(
        "q10_iron_tears", "Iron Tears", QuestCategory.COMBAT, 25,
        "A legendary smith needs rare ore guarded by stone golems in the middle zones.",
        (("collect_ore", "Collect iron ore", 100),
         ("defeat_golem", "Defeat a guardian golem", 5)),
        QuestReward(mana=250_000, gems=100),
        "The smith is impressed and offers his services.",
        "Unlocks advanced crafting in a later update.",
    ),
    QuestDef(
        "q11_blind_huntress", "The Blind Huntress", QuestCategory.INVESTIGATION, 30,
        "A renowned huntress lost her sight to a dungeon curse. Find its source.",
        (("reach_zone_40", "Trace the curse to its origin", 40),
         ("purify_source", "Purify the source of the curse", 1)),
        QuestReward(artifact=ArtifactDef(8, "Eye of Insight", BonusType.CRIT, 0.02)),
        "You absorbed part of the curse, sharpening your own senses.",
        "A moral choice with future narrative consequences.",
    ),
    QuestDef(
        "q12_black_market", "The Black Market", QuestCategory.EXPLORATION, 35,
        "An underground market for illegal dungeon goods operates in the city. Infiltrate it.",
        (("complete_elite_dungeon", "Infiltrate the Black Market", 1),),
        QuestReward(mana=500_000, gems=500),
        "You now have access to a network few hunters know about.",
        "Unlocks a Black Market shop in a later update.",
    ),
    # Chapter 3
    QuestDef(
        "q13_dragon_song", "The Dragon's Song", QuestCategory.COMBAT, 40,
        "An unstable dragon egg threatens to burst, releasing waves of raw mana. Find it and neutralise it.",
        (("reach_zone_50", "Explore the cave", 50),
         ("defeat_juvenile_dragon", "Face a juvenile dragon", 1)),
        QuestReward(artifact=ArtifactDef(9, "Draconic Shadow Essence", BonusType.MANA, 0.10)),
        "Dragon essence seeps into your shadow.",
        "Shapes the future Kamish storyline.",
    ),
    QuestDef(
        "q14_lost_shadows", "The Lost Shadows", QuestCategory.INVESTIGATION, 45,
        "Some of your oldest shadow soldiers show signs of insubordination, corrupted by an outside influence.",
        (("find_lost_shadows", "Find the corrupted soldiers", 250),
         ("reach_zone_60", "Understand the source of the corruption", 60)),
        QuestReward(artifact=ArtifactDef(10, "Sovereign's Command", BonusType.HP, 0.05)),
        "You better understand the bond between a monarch and their shadows.",
        "Expands the lore of the System.",
    ),
    QuestDef(
        "q15_blade_dance", "The Blade Dance", QuestCategory.COMBAT, 50,
        "S-rank huntress Cha Hae-in has heard of your power and wants to test you in a friendly duel.",
        (("complete_dragons_lair", "Duel Cha Hae-in", 1),),
        QuestReward(artifact=ArtifactDef(11, "Cha Hae-in's Scarf", BonusType.DEFENSE, 0.05)),
        "You earned the respect of one of the greatest hunters.",
        "Unlocks a future alliance.",
    ),
    QuestDef(
        "q16_dungeon_heart", "The Dungeon Heart", QuestCategory.EXPLORATION, 55,
        "A unique dungeon has a heart that regulates its mana. It has become unstable and threatens a Dungeon Break.",
        (("complete_gold_dungeon_puzzle", "Solve the mana puzzle", 1),
         ("complete_xp_dungeon_puzzle", "Solve the experience puzzle", 1),
         ("complete_elite_dungeon_puzzle", "Solve the combat puzzle", 1),
         ("reach_zone_70", "Stabilise the heart", 70),
         ("defeat_dungeon_guardian", "Face the heart's guardian", 1)),
        QuestReward(artifact=ArtifactDef(12, "Dungeon Core Fragment", BonusType.ESSENCE, 0.25)),
        "Your control over dungeon mana has grown.",
        "Unlocks custom special dungeons in a later update.",
    ),
    # Chapter 4
    QuestDef(
        "q17_shadow_of_the_past", "Shadow of the Past", QuestCategory.COMBAT, 60,
        "You face a shadow version of yourself in a mirror dimension to overcome your limits.",
        (("reach_zone_80", "Explore the mirror dimension", 80),
         ("defeat_dark_self", "Face your Dark Self", 1)),
        QuestReward(artifact=ArtifactDef(13, "Echo of the Self", BonusType.ATTACK, 0.10)),
        "By accepting your shadow, you understand your own destiny.",
        "Raises the base power of your army.",
    ),
    QuestDef(
        "q18_sovereign_pact", "The Sovereign's Pact", QuestCategory.SOCIAL, 65,
        "An enigmatic Sovereign offers an alliance: immense power in exchange for loyalty.",
        (("complete_dragons_lair_twice", "Survive the consequences", 2),),
        QuestReward(artifact=ArtifactDef(14, "Sovereign's Pact", BonusType.MANA, 0.15)),
        "Your decision echoes across the coming war.",
        "Provides a permanent resource buff.",
    ),
    QuestDef(
        "q19_seven_shadows", "The Seven Shadows", QuestCategory.COMBAT, 70,
        "Seven shadows of terrifying power, once sealed, have been released. Hunt them down.",
        (("defeat_7_shadows", "Face the seven shadows", 7),),
        QuestReward(artifact=ArtifactDef(15, "Seal of the Seven", BonusType.HP, 0.10)),
        "By defeating these legendary shadows, you prove yourself a true Shadow Monarch.",
        "Greatly increases the power and resilience of your army.",
    ),
)
