"""Domain-separated deterministic RNG using xxhash.

A procedural run is fully reproducible: every roll is a pure function of
(seed, domain, run_id, step), so regenerating run N with the same seed
yields the same floors and the same event outcomes regardless of what else
happened in the session.
"""

from __future__ import annotations

import struct
from typing import Sequence, TypeVar

import xxhash

from ascendant.core.enums import Domain

T = TypeVar("T")


class DeterministicRNG:
    """Stateless domain-separated pseudo-random number generator."""

    __slots__ = ("_seed",)

    _MAX_UINT64 = (1 << 64) - 1

    def __init__(self, seed: int) -> None:
        self._seed = seed

    @property
    def seed(self) -> int:
        return self._seed

    def _hash(self, domain: Domain, entity_id: int, step: int) -> int:
        payload = struct.pack("<qiqq", self._seed, domain.value, entity_id, step)
        return xxhash.xxh64(payload).intdigest()

    def next_float(self, domain: Domain, entity_id: int, step: int) -> float:
        """Return a deterministic float in [0.0, 1.0)."""
        return self._hash(domain, entity_id, step) / (self._MAX_UINT64 + 1)

    def next_int(self, domain: Domain, entity_id: int, step: int, low: int, high: int) -> int:
        """Return a deterministic integer in [low, high] inclusive."""
        f = self.next_float(domain, entity_id, step)
        return low + int(f * (high - low + 1))

    def choice(self, domain: Domain, entity_id: int, step: int, options: Sequence[T]) -> T:
        """Pick one element of *options* uniformly."""
        if not options:
            raise ValueError("choice() needs at least one option")
        return options[self.next_int(domain, entity_id, step, 0, len(options) - 1)]
