"""Tests for procedural gates — generation, floor advance, events, failure."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from ascendant.core.enums import Biome, Currency, FloorType, RunStatus
from ascendant.core.gates import (
    BIOME_CONFIG, DUNGEON_EVENTS, DungeonFloor, EventContext, GeneratedDungeon, status_for_floor,
)
from ascendant.core.ledger import ResourceLedger
from ascendant.engine.gate_run import GateRunController
from ascendant.systems.gate_generator import GateGenerator
from ascendant.systems.rng import DeterministicRNG

ZONE = 10


class _FakeGenerator:
    """Hands out a prebuilt run and a fixed event roll."""

    def __init__(self, floors: list[DungeonFloor], stamina: int, roll: float = 0.5):
        self.floors = floors
        self.stamina = stamina
        self.roll = roll

    def generate(self, biome, depth, run_id):
        floors = [f.copy() for f in self.floors]
        return GeneratedDungeon(
            run_id=run_id, name="Test Gate", biome=biome, depth=len(floors), floors=floors,
            stamina=self.stamina, max_stamina=self.stamina, status=status_for_floor(floors[0]),
        )

    def roll_event(self, run_id, index):
        return self.roll


def _floor(index: int, floor_type: FloorType, difficulty: float = 1.0, event_id: str | None = None):
    event = DUNGEON_EVENTS[event_id] if event_id else None
    return DungeonFloor(index, floor_type, difficulty, "", event=event)


def _make_controller(floors, stamina: int, roll: float = 0.5, mana: int = 0, zone: int = ZONE):
    ledger = ResourceLedger(balances={Currency.MANA: mana})
    controller = GateRunController(_FakeGenerator(floors, stamina, roll), ledger, lambda: zone)
    return controller, ledger


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------

class TestGenerator:
    def test_depth_five(self):
        run = GateGenerator(DeterministicRNG(42)).generate(Biome.SHADOW_CRYPT, 5, run_id=1)
        assert len(run.floors) == 5
        assert run.floors[4].floor_type == FloorType.BOSS
        assert run.stamina == run.max_stamina == 10
        assert [f.difficulty for f in run.floors] == pytest.approx([1.0, 1.1, 1.2, 1.3, 1.4])
        assert run.status == status_for_floor(run.floors[0])

    def test_difficulty_is_the_written_decimal(self):
        run = GateGenerator(DeterministicRNG(3)).generate(Biome.SHADOW_CRYPT, 14, run_id=1)
        assert run.floors[4].difficulty == 1.4
        assert run.floors[13].difficulty == 2.3

    def test_only_last_floor_is_boss(self):
        run = GateGenerator(DeterministicRNG(7)).generate(Biome.FROST_CAVE, 30, run_id=3)
        assert [f.index for f in run.floors if f.floor_type == FloorType.BOSS] == [29]

    def test_events_come_from_biome_pool(self):
        for biome in Biome:
            run = GateGenerator(DeterministicRNG(1)).generate(biome, 40, run_id=1)
            for floor in run.floors:
                if floor.floor_type == FloorType.EVENT:
                    assert floor.event.event_id in BIOME_CONFIG[biome].event_pool
                else:
                    assert floor.event is None

    def test_depth_one_is_just_the_boss(self):
        run = GateGenerator(DeterministicRNG(1)).generate(Biome.SHADOW_CRYPT, 1, run_id=1)
        assert [f.floor_type for f in run.floors] == [FloorType.BOSS]
        assert run.status == RunStatus.BOSS

    def test_rejects_zero_depth(self):
        with pytest.raises(ValueError):
            GateGenerator(DeterministicRNG(1)).generate(Biome.SHADOW_CRYPT, 0, run_id=1)


# ---------------------------------------------------------------------------
# Advancing floors
# ---------------------------------------------------------------------------

class TestAdvance:
    def test_completed_run_credits_everything(self):
        floors = [_floor(0, FloorType.COMBAT, 1.0), _floor(1, FloorType.TREASURE, 1.5),
                  _floor(2, FloorType.BOSS, 2.0)]
        controller, ledger = _make_controller(floors, stamina=6)
        run = controller.generate(Biome.SHADOW_CRYPT, 3)

        assert controller.advance_floor()
        assert controller.advance_floor()
        assert run.status == RunStatus.BOSS
        assert controller.advance_floor()

        result = controller.last_result
        assert controller.active is None
        assert result.status == RunStatus.COMPLETED
        # 50*10*1.0 + 250*10*1.5 + 1000*10*2.0
        assert result.mana == 24_250
        assert result.gems == 37 + 200
        assert result.floors_cleared == 3
        assert ledger.balance(Currency.MANA) == 24_250
        assert ledger.balance(Currency.GEMS) == 237

    def test_difficulty_scaling_is_exact(self):
        # 50*7*1.4 and 100*2.3 both land a hair under the integer in binary floats
        floors = [_floor(0, FloorType.COMBAT, 1.4), _floor(1, FloorType.BOSS, 2.3)]
        controller, ledger = _make_controller(floors, stamina=4, zone=7)
        controller.generate(Biome.SHADOW_CRYPT, 2)
        controller.advance_floor()
        assert controller.active.rewards.mana == 490
        controller.advance_floor()

        result = controller.last_result
        assert result.mana == 490 + 16_100
        assert result.gems == 230
        assert ledger.balance(Currency.GEMS) == 230

    def test_stamina_exhaustion_halves_rewards(self):
        floors = [_floor(i, FloorType.COMBAT) for i in range(3)] + [_floor(3, FloorType.BOSS)]
        controller, ledger = _make_controller(floors, stamina=2)
        controller.generate(Biome.SHADOW_CRYPT, 4)

        controller.advance_floor()
        controller.advance_floor()

        result = controller.last_result
        assert result.status == RunStatus.FAILED
        assert result.mana == 500
        assert result.floors_cleared == 2
        assert ledger.balance(Currency.MANA) == 500
        assert not controller.advance_floor()

    def test_one_active_run(self):
        controller, _ = _make_controller([_floor(0, FloorType.BOSS)], stamina=2)
        assert controller.generate(Biome.FROST_CAVE, 1) is not None
        assert controller.generate(Biome.FROST_CAVE, 1) is None

    def test_escape_keeps_full_rewards(self):
        floors = [_floor(0, FloorType.COMBAT), _floor(1, FloorType.BOSS)]
        controller, ledger = _make_controller(floors, stamina=4)
        controller.generate(Biome.SHADOW_CRYPT, 2)
        controller.advance_floor()
        result = controller.escape()
        assert result.status == RunStatus.COMPLETED
        assert result.mana == 500
        assert controller.escape() is None


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

class TestEvents:
    def test_advance_blocked_until_resolved(self):
        floors = [_floor(0, FloorType.EVENT, event_id="tomb"), _floor(1, FloorType.BOSS)]
        controller, _ = _make_controller(floors, stamina=4, roll=0.9)
        run = controller.generate(Biome.SHADOW_CRYPT, 2)
        assert run.status == RunStatus.EVENT
        assert not controller.advance_floor()

        result = controller.resolve_event("open")
        assert result.mana == 5_000 * ZONE
        assert run.status == RunStatus.EXPLORING
        assert run.last_event_result is result
        assert run.rewards.mana == 50_000

        assert controller.resolve_event("open") is None
        assert controller.advance_floor()
        assert run.last_event_result is None

    def test_unknown_option(self):
        floors = [_floor(0, FloorType.EVENT, event_id="tomb"), _floor(1, FloorType.BOSS)]
        controller, _ = _make_controller(floors, stamina=4)
        run = controller.generate(Biome.SHADOW_CRYPT, 2)
        assert controller.resolve_event("dance") is None
        assert run.status == RunStatus.EVENT

    def test_curse_can_fail_the_run(self):
        floors = [_floor(0, FloorType.EVENT, event_id="tomb"), _floor(1, FloorType.BOSS)]
        controller, _ = _make_controller(floors, stamina=4, roll=0.1)
        controller.generate(Biome.SHADOW_CRYPT, 2)
        result = controller.resolve_event("open")
        assert result.stamina == -5
        assert controller.active is None
        assert controller.last_result.status == RunStatus.FAILED

    def test_altar_offer_needs_mana(self):
        ctx = EventContext(zone=ZONE, ledger=ResourceLedger(), roll=0.5)
        result = DUNGEON_EVENTS["shadow_altar"].find_option("offer").resolve(ctx)
        assert result.stamina == 0
        assert "rejects" in result.outcome

        ledger = ResourceLedger(balances={Currency.MANA: 10_000})
        ctx = EventContext(zone=ZONE, ledger=ledger, roll=0.5)
        result = DUNGEON_EVENTS["shadow_altar"].find_option("offer").resolve(ctx)
        assert result.stamina == 10
        assert ledger.balance(Currency.MANA) == 0

    def test_fixed_outcomes(self):
        ctx = EventContext(zone=ZONE, ledger=ResourceLedger(), roll=0.0)
        assert DUNGEON_EVENTS["frozen_fountain"].find_option("thaw").resolve(ctx).stamina == 15
        assert DUNGEON_EVENTS["frozen_fountain"].find_option("smash").resolve(ctx).gems == 260
        decipher = DUNGEON_EVENTS["ice_script"].find_option("decipher").resolve(ctx)
        assert (decipher.mana, decipher.stamina) == (80_000, -2)
