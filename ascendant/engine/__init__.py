"""Engine layer: session wiring, wave progression, timed activities, gate runs."""

from ascendant.engine.session import GameSession

__all__ = ["GameSession"]
