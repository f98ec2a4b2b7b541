"""Core game models: currencies, army, player, quests, skills and gates."""

from ascendant.core.army import ArmyRoster, Unit, Upgrade
from ascendant.core.enums import Currency, MonarchType, QuestStatus
from ascendant.core.ledger import ResourceLedger
from ascendant.core.player import Player

__all__ = [
    "ArmyRoster",
    "Currency",
    "MonarchType",
    "Player",
    "QuestStatus",
    "ResourceLedger",
    "Unit",
    "Upgrade",
]
