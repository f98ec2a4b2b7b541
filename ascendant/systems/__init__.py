"""Engine systems: RNG, timer scheduling, procedural gate generation."""

from ascendant.systems.rng import DeterministicRNG
from ascendant.systems.scheduler import Scheduler, TimerHandle
from ascendant.systems.gate_generator import GateGenerator

__all__ = ["DeterministicRNG", "GateGenerator", "Scheduler", "TimerHandle"]
