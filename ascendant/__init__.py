"""Ascendant Idle: a deterministic idle RPG simulation core."""
