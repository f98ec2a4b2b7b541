"""Ascension rewards.

Essence: ``floor(floor((zone - min_zone + 10) ** 1.5) * (1 + essence_bonus))``
Points:  ``(zone - min_zone) // 25 + 1``

``min_zone`` is the configured ascension threshold (100 by default); both
rewards are zero below it. The reset itself is performed by the session,
which owns every component that returns to its initial configuration.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from fractions import Fraction

from ascendant.core.magnitude import exact

ASCENSION_BASE_ZONE = 100
ESSENCE_ZONE_OFFSET = 10
ZONES_PER_POINT = 25


@dataclass(frozen=True, slots=True)
class AscensionReward:
    essence: int
    points: int


def can_ascend(zone: int, min_zone: int = ASCENSION_BASE_ZONE) -> bool:
    return zone >= min_zone


def essence_gain(zone: int, essence_bonus: float | Fraction = 0.0,
                 min_zone: int = ASCENSION_BASE_ZONE) -> int:
    if zone < min_zone:
        return 0
    # floor(n ** 1.5) == isqrt(n ** 3), without a float power in between
    base = math.isqrt((zone - min_zone + ESSENCE_ZONE_OFFSET) ** 3)
    return math.floor(base * (1 + exact(essence_bonus)))


def points_gain(zone: int, min_zone: int = ASCENSION_BASE_ZONE) -> int:
    if zone < min_zone:
        return 0
    return (zone - min_zone) // ZONES_PER_POINT + 1


def preview(zone: int, essence_bonus: float | Fraction = 0.0,
            min_zone: int = ASCENSION_BASE_ZONE) -> AscensionReward:
    return AscensionReward(essence_gain(zone, essence_bonus, min_zone), points_gain(zone, min_zone))
