"""Player avatar — level, experience, skill points and derived combat stats."""

from __future__ import annotations

import math
from dataclasses import dataclass

PLAYER_XP_GROWTH = 1.5

# (minimum level, rank label); the highest breakpoint reached wins.
RANK_BREAKPOINTS: tuple[tuple[int, str], ...] = (
    (100, "SSS"),
    (75, "SS"),
    (50, "S"),
    (40, "A"),
    (30, "B"),
    (20, "C"),
    (10, "D"),
)


def rank_for_level(level: int) -> str:
    for threshold, label in RANK_BREAKPOINTS:
        if level >= threshold:
            return label
    return "E"


@dataclass(slots=True)
class Player:
    level: int = 1
    experience: int = 0
    experience_to_next: int = 250
    skill_points: int = 0

    @property
    def rank(self) -> str:
        return rank_for_level(self.level)

    @property
    def hp(self) -> int:
        return self.level * 150

    @property
    def attack(self) -> int:
        return self.level * 10

    @property
    def defense(self) -> int:
        return self.level * 5

    def gain_experience(self, amount: int) -> list[int]:
        """Add experience and level up as often as it allows.

        Each level grants one skill point and grows the threshold by x1.5.
        Returns the list of levels reached, in order.
        """
        self.experience += amount
        reached: list[int] = []
        while self.experience >= self.experience_to_next:
            self.experience -= self.experience_to_next
            self.level += 1
            self.experience_to_next = math.floor(self.experience_to_next * PLAYER_XP_GROWTH)
            self.skill_points += 1
            reached.append(self.level)
        return reached

    def reset(self, experience_to_next: int) -> None:
        self.level = 1
        self.experience = 0
        self.experience_to_next = experience_to_next
        self.skill_points = 0

    def copy(self) -> Player:
        return Player(self.level, self.experience, self.experience_to_next, self.skill_points)
