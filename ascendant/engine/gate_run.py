"""Gate run controller — the floor-by-floor state machine of a procedural run.

States: EXPLORING / BOSS (ready to advance), EVENT (waiting for an option),
then COMPLETED or FAILED as terminal results. At most one run is active; the
run object is dropped the moment it ends and a :class:`RunResult` remains.

Stamina drops by one per floor advanced and moves with event outcomes. At
zero or below the run fails and keeps half of its accumulated rewards.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Callable

from ascendant.core.enums import Biome, Currency, RunStatus
from ascendant.core.gates import (
    FLOOR_REWARDS, EventContext, EventResult, GeneratedDungeon, RunResult, status_for_floor,
)
from ascendant.core.magnitude import exact

if TYPE_CHECKING:
    from ascendant.core.ledger import ResourceLedger
    from ascendant.systems.gate_generator import GateGenerator

logger = logging.getLogger(__name__)


class GateRunController:
    __slots__ = ("_generator", "_ledger", "_zone", "_next_run_id", "active", "last_result")

    def __init__(self, generator: GateGenerator, ledger: ResourceLedger, zone_source: Callable[[], int]) -> None:
        self._generator = generator
        self._ledger = ledger
        self._zone = zone_source
        self._next_run_id = 1
        self.active: GeneratedDungeon | None = None
        self.last_result: RunResult | None = None

    def generate(self, biome: Biome, depth: int) -> GeneratedDungeon | None:
        """Open a new run. Rejected while another run is active or for depth < 1."""
        if self.active is not None or depth < 1:
            return None
        run_id = self._next_run_id
        self._next_run_id += 1
        self.active = self._generator.generate(biome, depth, run_id)
        self.last_result = None
        logger.info("Gate opened: %s (run %d)", self.active.name, run_id)
        return self.active

    def advance_floor(self) -> bool:
        run = self.active
        if run is None or run.status == RunStatus.EVENT:
            return False

        floor = run.floor
        mana_base, gems_base = FLOOR_REWARDS[floor.floor_type]
        difficulty = exact(floor.difficulty)
        mana = self._ledger.gain(mana_base * self._zone() * difficulty) if mana_base else 0
        gems = math.floor(gems_base * difficulty)
        run.rewards.add(mana=mana, gems=gems)
        floor.cleared = True
        run.stamina -= 1

        if run.stamina <= 0:
            self._finish(success=False)
        elif run.on_last_floor:
            self._finish(success=True)
        else:
            run.current_floor += 1
            run.status = status_for_floor(run.floor)
            run.last_event_result = None
        return True

    def resolve_event(self, option_id: str) -> EventResult | None:
        run = self.active
        if run is None or run.status != RunStatus.EVENT or run.floor.event is None:
            return None
        option = run.floor.event.find_option(option_id)
        if option is None:
            return None

        roll = self._generator.roll_event(run.run_id, run.current_floor)
        result = option.resolve(EventContext(zone=self._zone(), ledger=self._ledger, roll=roll))
        run.stamina += result.stamina
        run.rewards.add(mana=result.mana, gems=result.gems)
        logger.debug("Run %d floor %d: %s", run.run_id, run.current_floor, result.outcome)

        if run.stamina <= 0:
            self._finish(success=False)
        else:
            run.status = RunStatus.EXPLORING
            run.last_event_result = result
        return result

    def escape(self) -> RunResult | None:
        """Leave voluntarily, keeping everything gathered so far."""
        if self.active is None:
            return None
        return self._finish(success=True)

    def _finish(self, success: bool) -> RunResult:
        run = self.active
        if not success:
            run.rewards.halve()
        self._ledger.credit(Currency.MANA, run.rewards.mana)
        self._ledger.credit(Currency.GEMS, run.rewards.gems)
        result = RunResult(
            run_id=run.run_id,
            status=RunStatus.COMPLETED if success else RunStatus.FAILED,
            mana=run.rewards.mana,
            gems=run.rewards.gems,
            floors_cleared=sum(1 for f in run.floors if f.cleared),
        )
        self.active = None
        self.last_result = result
        logger.info("Gate run %d %s: +%d mana +%d gems",
                    result.run_id, result.status.name.lower(), result.mana, result.gems)
        return result
