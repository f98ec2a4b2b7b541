"""Skills — active player skills, passive skill trees and monarch trees.

Active skills:
  - Have a base cooldown (seconds). Activating one flips ``on_cooldown``
    and the timed-activity scheduler counts ``cooldown_timer`` down.
  - Their effect is one of :class:`SkillEffect`; the session decides what
    each effect does to the game.

Skill trees:
  - Warrior / Sovereign nodes bought with player skill points; reset on ascension.
  - Monarch nodes bought with sovereign points, gated by tier; permanent.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from ascendant.core.enums import MonarchType, SkillEffect, UnitRank
from ascendant.core.army import Unit, make_unit


# ---------------------------------------------------------------------------
# Active skills
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ActiveSkillDef:
    """Immutable active skill definition."""

    skill_id: str
    name: str
    description: str
    cooldown: int                 # seconds
    effect: SkillEffect
    magnitude: float = 1.0        # multiplier for buff effects
    duration: int = 0             # buff duration in seconds


@dataclass(slots=True)
class ActiveSkill:
    """A learned active skill with its live cooldown."""

    definition: ActiveSkillDef
    on_cooldown: bool = False
    cooldown_timer: int = 0

    @property
    def skill_id(self) -> str:
        return self.definition.skill_id

    @property
    def name(self) -> str:
        return self.definition.name

    @classmethod
    def learn(cls, definition: ActiveSkillDef) -> ActiveSkill:
        return cls(definition=definition, on_cooldown=False, cooldown_timer=definition.cooldown)

    def copy(self) -> ActiveSkill:
        return replace(self)


SKILL_DEFS: dict[str, ActiveSkillDef] = {}


def _reg(d: ActiveSkillDef) -> ActiveSkillDef:
    SKILL_DEFS[d.skill_id] = d
    return d


FRENZY = _reg(ActiveSkillDef(
    "frenzy", "Frenzy", "Boosts mana-per-click for 10s.",
    cooldown=60, effect=SkillEffect.CLICK_FRENZY, magnitude=5, duration=10,
))
SHADOW_RUSH = _reg(ActiveSkillDef(
    "shadow_rush", "Shadow Rush", "Instantly completes the current wave.",
    cooldown=120, effect=SkillEffect.RUSH_WAVE,
))
MANA_OVERLOAD = _reg(ActiveSkillDef(
    "mana_overload", "Mana Overload", "Doubles all mana gains for 10s.",
    cooldown=300, effect=SkillEffect.MANA_OVERLOAD, magnitude=2, duration=10,
))

# Monarch ultimates
_reg(ActiveSkillDef("march_of_shadows", "March of Shadows",
                    "For 15s, your army damage is increased by 100%.", 3600, SkillEffect.ULTIMATE))
_reg(ActiveSkillDef("primordial_roar", "Primordial Roar",
                    "Instantly deals 1000% of your total army attack as damage.", 3600, SkillEffect.ULTIMATE))
_reg(ActiveSkillDef("eternal_winter", "Eternal Winter",
                    "Freezes the current enemy for 10 seconds.", 3600, SkillEffect.ULTIMATE))
_reg(ActiveSkillDef("void_assault", "Void Assault",
                    "+200% damage for 10s every 60s.", 60, SkillEffect.ULTIMATE))
_reg(ActiveSkillDef("monarchs_crown", "Monarch's Crown",
                    "Grants +100% global stats for 30 seconds after defeating a boss.", 3600, SkillEffect.ULTIMATE))

STARTING_SKILLS: tuple[str, ...] = ("frenzy", "shadow_rush")


def starting_skills() -> list[ActiveSkill]:
    return [ActiveSkill.learn(SKILL_DEFS[sid]) for sid in STARTING_SKILLS]


# ---------------------------------------------------------------------------
# Skill trees (skill points)
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class TreeNode:
    node_id: str
    name: str
    description: str
    max_level: int
    level: int = 0
    tier: int = 1                 # only meaningful in monarch trees
    cost: int = 1

    def copy(self) -> TreeNode:
        return replace(self)


@dataclass(slots=True)
class SkillTree:
    name: str
    nodes: list[TreeNode] = field(default_factory=list)

    def find(self, node_id: str) -> TreeNode | None:
        for node in self.nodes:
            if node.node_id == node_id:
                return node
        return None

    def copy(self) -> SkillTree:
        return SkillTree(self.name, [n.copy() for n in self.nodes])


def initial_skill_trees() -> list[SkillTree]:
    return [
        SkillTree("Warrior", [
            TreeNode("w1", "Army Attack", "+2% Total Attack Power", 10),
            TreeNode("w2", "Army Vigor", "+2% Total HP", 10),
            TreeNode("w3", "Critical Strike", "+1% Critical Chance", 5),
        ]),
        SkillTree("Sovereign", [
            TreeNode("s1", "Mana Affinity", "+5% Mana from monsters", 10),
            TreeNode("s2", "Accelerated Growth", "+5% XP from monsters", 10),
            TreeNode("s3", "Click Proficiency", "+10% Mana from clicks", 5),
        ]),
    ]


def find_tree_node(trees: list[SkillTree], node_id: str) -> TreeNode | None:
    for tree in trees:
        node = tree.find(node_id)
        if node is not None:
            return node
    return None


def tier_unlocked(nodes: list[TreeNode], tier: int) -> bool:
    """Tier 1 is always open; tier N needs some tier N-1 node with a level."""
    if tier <= 1:
        return True
    return any(n.tier == tier - 1 and n.level > 0 for n in nodes)


# ---------------------------------------------------------------------------
# Monarchs
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class MonarchDef:
    monarch: MonarchType
    name: str
    description: str
    unique_unit: str
    passive_bonuses: tuple[str, ...]
    ultimate_skill_id: str
    essence_bonus: float = 0.0
    # (node_id, name, description, tier, cost)
    tree: tuple[tuple[str, str, str, int, int], ...] = ()

    def build_tree(self) -> list[TreeNode]:
        return [TreeNode(nid, name, desc, max_level=1, tier=tier, cost=cost)
                for nid, name, desc, tier, cost in self.tree]


MONARCH_DEFS: dict[MonarchType, MonarchDef] = {
    MonarchType.SHADOW: MonarchDef(
        MonarchType.SHADOW, "Monarch of Shadows",
        "Control the battlefield with an ever-growing army and drain your foes.",
        "Shadow General",
        ("+10% Shadow Essence from all sources.", "+20% HP for all Infantry units."),
        "march_of_shadows", essence_bonus=0.10,
        tree=(
            ("ms1_1", "Army Damage", "+10% Army Damage", 1, 1),
            ("ms1_2", "Army HP", "+10% Army HP", 1, 1),
            ("ms2_1", "Attack Speed", "+20% Attack Speed", 2, 2),
            ("ms2_2", "Progression Speed", "+20% Progression Speed", 2, 2),
            ("ms3_1", "Critical Damage", "+15% Critical Damage", 3, 3),
            ("ms3_2", "Critical Chance", "+15% Critical Chance", 3, 3),
            ("ms4_1", "Max Elite Unit", "+1 Max Elite Unit", 4, 5),
            ("ms4_2", "Auto Extraction", "+10% Auto Extraction", 4, 5),
            ("ms5_1", "Permanent Shadow Army", "+50% Global Stats", 5, 10),
        ),
    ),
    MonarchType.BEAST: MonarchDef(
        MonarchType.BEAST, "Monarch of Beasts",
        "Overwhelm your enemies with ferocious power and critical strikes.",
        "Giant Wolf",
        ("+10% Damage for Dragon units.", "+5% global critical hit chance."),
        "primordial_roar",
        tree=(
            ("mb1_1", "Savage Power", "+10% Beast & Dragon Damage", 1, 1),
            ("mb1_2", "Tough Hide", "+10% Beast & Dragon HP", 1, 1),
            ("mb2_1", "Frenzy", "+20% Attack Speed for Beasts", 2, 2),
            ("mb2_2", "Swift Wings", "+20% Progression Speed", 2, 2),
            ("mb3_1", "Deep Wounds", "+25% Critical Damage", 3, 3),
            ("mb4_1", "Boss Hunter", "+50% Damage to Bosses", 4, 5),
            ("mb5_1", "Primal Rage", "+50% Beast & Dragon Global Stats", 5, 10),
        ),
    ),
    MonarchType.ICE: MonarchDef(
        MonarchType.ICE, "Monarch of Frost",
        "Freeze the battlefield, controlling your enemies and fortifying your army.",
        "Ice Golem",
        ("All attacks have a 5% chance to briefly slow enemies.", "+15% global army defense."),
        "eternal_winter",
        tree=(
            ("mi1_1", "Glacial Armor", "+20% Army Defense", 1, 1),
            ("mi1_2", "Frozen Core", "+15% Army HP", 1, 1),
            ("mi2_1", "Chilling Aura", "+10% Slow Chance", 2, 2),
            ("mi3_1", "Permafrost", "Slowed enemies take 20% more damage", 3, 3),
            ("mi4_1", "Unbreakable", "+100% Army Defense", 4, 5),
            ("mi5_1", "Ice Age", "+50% Global Defensive Stats & Slow Effect", 5, 10),
        ),
    ),
    MonarchType.DESTRUCTION: MonarchDef(
        MonarchType.DESTRUCTION, "Monarch of Destruction",
        "Annihilate everything with pure, chaotic power and accelerate your progression.",
        "Chaos Knight",
        ("+10% global attack power.", "+20% idle speed."),
        "void_assault",
        tree=(
            ("md1_1", "Boss Slayer", "+10% Damage vs Bosses", 1, 1),
            ("md1_2", "Elite Hunter", "+10% Damage vs Elites", 1, 1),
            ("md2_1", "Idle Speed", "+20% Idle Speed", 2, 2),
            ("md2_2", "Idle Loot", "+20% Idle Loot", 2, 2),
            ("md3_1", "Zone Multiplier", "+15% Zone Multiplier", 3, 3),
            ("md3_2", "AoE Damage", "+15% AoE Damage", 3, 3),
            ("md4_1", "Active Skill Slot", "+1 Active Skill Slot", 4, 5),
            ("md4_2", "Cooldown Reduction", "-20% Skill Cooldowns", 4, 5),
            ("md5_1", "Void Assault", "+200% damage for 10s every 60s", 5, 10),
        ),
    ),
    MonarchType.LIGHT: MonarchDef(
        MonarchType.LIGHT, "Monarch of Light",
        "Lead your forces with unmatched strategy, enhancing their power and "
        "accelerating your path to supremacy.",
        "Light Sentinel",
        ("+10% Global Army Stats.", "+10% Shadow Essence gain from Ascension."),
        "monarchs_crown",
        tree=(
            ("ml1_1", "Soldier HP", "+10% Soldier HP", 1, 1),
            ("ml1_2", "Soldier Speed", "+10% Soldier Speed", 1, 1),
            ("ml2_1", "Army Damage", "+20% Army Damage", 2, 2),
            ("ml2_2", "Army Defense", "+20% Army Defense", 2, 2),
            ("ml3_1", "Legendary Capacity", "+1 Max Legendary Soldier", 3, 3),
            ("ml3_2", "Soul Harvest", "+10% Rare Soul Drop Chance", 3, 3),
            ("ml4_1", "Ascension Pact", "+20% Ascension Bonus", 4, 5),
            ("ml4_2", "Essence Collector", "+20% Shadow Essence", 4, 5),
            ("ml5_1", "Monarch's Crown", "+100% global stats for 30s after each boss", 5, 10),
        ),
    ),
}


def monarch_unit(name: str) -> Unit | None:
    """Fresh copy of a monarch's unique unit, or None for an unknown name."""
    stats = _MONARCH_UNITS.get(name)
    if stats is None:
        return None
    return make_unit(name, UnitRank.SSS, stats, 500)


_MONARCH_UNITS: dict[str, dict[str, str]] = {
    "Shadow General": {"hp": "5M", "attack": "150K", "defense": "500K", "speed": "Medium"},
    "Giant Wolf": {"hp": "3M", "attack": "450K", "defense": "150K", "speed": "High"},
    "Ice Golem": {"hp": "8M", "attack": "100K", "defense": "400K", "speed": "Low"},
    "Chaos Knight": {"hp": "4M", "attack": "400K", "defense": "200K", "speed": "Medium"},
    "Light Sentinel": {"hp": "10M", "attack": "80K", "defense": "350K", "speed": "Low"},
}
