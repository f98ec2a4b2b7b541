"""Compact magnitude strings: ``"1.20M"`` <-> ``1_200_000``.

Each suffix tier keeps two decimal digits and the sub-1000 tier is
integral, so a round trip through the string form is lossy. Stats are held
as numbers and passed through :func:`quantize` after every change so the
stored value is always one the string form can represent exactly.
"""

from __future__ import annotations

import math
from fractions import Fraction

# Largest first: format picks the first tier the value reaches.
SUFFIXES: tuple[tuple[str, float], ...] = (
    ("T", 1e12),
    ("B", 1e9),
    ("M", 1e6),
    ("K", 1e3),
)
_SCALE = {suffix: scale for suffix, scale in SUFFIXES}


def parse_magnitude(text: str) -> float:
    """Parse ``"1.2M"``, ``"450"`` or ``"2.50k"`` into a number.

    Returns 0.0 for text with no leading number (e.g. a ``"Low"`` speed label).
    """
    text = text.strip()
    if not text:
        return 0.0
    suffix = text[-1].upper()
    scale = _SCALE.get(suffix)
    number = text[:-1] if scale is not None else text
    try:
        value = float(number)
    except ValueError:
        return 0.0
    return value * scale if scale is not None else value


def format_magnitude(value: float) -> str:
    """Format a number with the largest suffix it reaches.

    A value that rounds up to ``1000.00`` of a tier is shown in the next
    tier instead (``999_999`` is ``"1.00M"``), so formatting the parse of
    any output gives the same string back.
    """
    larger: tuple[str, float] | None = None
    for suffix, scale in SUFFIXES:
        if value >= scale:
            text = f"{value / scale:.2f}"
            if larger is not None and float(text) >= 1000:
                suffix, scale = larger
                text = f"{value / scale:.2f}"
            return f"{text}{suffix}"
        larger = (suffix, scale)
    return str(int(value))


def quantize(value: float) -> int:
    """Floor *value*, then snap it to what its string form can represent.

    Every representable value is a whole number, so the parsed result is
    rounded to absorb float noise such as ``1149.9999999999998``.
    """
    return round(parse_magnitude(format_magnitude(math.floor(value))))


def exact(value: float | Fraction) -> Fraction:
    """The decimal a number was written as, as an exact fraction.

    Tunables such as ``0.10`` or ``1.3`` are decimals, and flooring their
    binary float sums loses whole units (``1 + 0.10 + 0.05 + 0.20`` lands
    just under 1.35, so a 1000 base floors to 1349).
    Floats go through their shortest repr, so ``exact(0.1) == Fraction(1, 10)``.
    """
    if isinstance(value, float):
        return Fraction(repr(value))
    return Fraction(value)
