"""Tests for the REST layer — EngineManager and the /api/v1 routes."""

import sys
import os
import time
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from fastapi.testclient import TestClient

from ascendant.api.app import create_app
from ascendant.api.dependencies import set_engine_manager
from ascendant.api.engine_manager import MAX_TIME_SCALE, EngineManager
from ascendant.config import GameConfig
from ascendant.core.enums import Currency


def _build_manager() -> EngineManager:
    return EngineManager(GameConfig())


def _wait_for_time(mgr: EngineManager, timeout: float = 2.0) -> float:
    """Poll until the published clock leaves zero; returns the time seen."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        now = mgr.get_snapshot().time
        if now > 0:
            return now
        time.sleep(0.01)
    return mgr.get_snapshot().time


class TestEngineManager(unittest.TestCase):
    """Manager behaviour driven directly, without the HTTP layer."""

    def test_snapshot_published_on_build(self):
        mgr = _build_manager()
        snap = mgr.get_snapshot()
        self.assertIsNotNone(snap)
        self.assertEqual((snap.zone, snap.wave), (123, 4))
        self.assertFalse(mgr.running)

    def test_perform_republishes(self):
        mgr = _build_manager()
        before = mgr.get_snapshot().balances[Currency.MANA]
        gained = mgr.perform(lambda s: s.click_for_mana())
        self.assertEqual(mgr.get_snapshot().balances[Currency.MANA], before + gained)

    def test_reset_rebuilds_session(self):
        mgr = _build_manager()
        mgr.perform(lambda s: s.start_quest("q1_shadow_echo"))
        self.assertTrue(mgr.event_log.latest(10))
        mgr.reset()
        self.assertEqual(mgr.event_log.latest(10), [])
        self.assertEqual(mgr.get_snapshot().time, 0.0)

    def test_time_scale_is_clamped(self):
        mgr = _build_manager()
        mgr.time_scale = 1e9
        self.assertEqual(mgr.time_scale, MAX_TIME_SCALE)

    def test_start_paused_keeps_clock_still(self):
        mgr = _build_manager()
        mgr.start(paused=True)
        try:
            self.assertTrue(mgr.running)
            self.assertTrue(mgr.paused)
            time.sleep(0.1)
            self.assertEqual(mgr.get_snapshot().time, 0.0)
        finally:
            mgr.stop()

    def test_step_from_paused_start_advances_exactly(self):
        mgr = _build_manager()
        mgr.start(paused=True)
        try:
            mgr.step(3)
            self.assertEqual(_wait_for_time(mgr), 6.0)     # 3 ticks of 2s
            self.assertTrue(mgr.paused)
        finally:
            mgr.stop()


class TestStepStoppedClock(unittest.TestCase):
    """Stepping through the route before the clock was ever started."""

    def setUp(self):
        self.manager = _build_manager()
        set_engine_manager(self.manager)
        # no context manager: the lifespan never starts the clock
        self.client = TestClient(create_app(GameConfig()))

    def tearDown(self):
        self.manager.stop()
        set_engine_manager(None)

    def test_step_starts_paused(self):
        self.assertFalse(self.manager.running)
        resp = self.client.post("/api/v1/control/step", params={"ticks": 2})
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertTrue(resp.json()["paused"])
        self.assertEqual(_wait_for_time(self.manager), 4.0)
        self.assertTrue(self.manager.running)
        self.assertTrue(self.manager.paused)


class TestRoutes(unittest.TestCase):
    """One live app shared by every route test; the lifespan runs the clock."""

    @classmethod
    def setUpClass(cls):
        cls._ctx = TestClient(create_app(GameConfig()))
        cls.client = cls._ctx.__enter__()

    @classmethod
    def tearDownClass(cls):
        cls._ctx.__exit__(None, None, None)

    def _post(self, path: str, **kwargs) -> dict:
        resp = self.client.post(f"/api/v1{path}", **kwargs)
        self.assertEqual(resp.status_code, 200, resp.text)
        return resp.json()

    def test_state(self):
        resp = self.client.get("/api/v1/state")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertTrue(body["running"])
        self.assertIn("mana", body["balances"])
        self.assertEqual(len(body["units"]), 6)
        self.assertEqual(len(body["monarchs"]), 5)
        self.assertIsNotNone(body["raid"]["boss"])

    def test_click(self):
        body = self._post("/actions/click")
        self.assertEqual(body["status"], "ok")
        self.assertGreater(body["data"]["mana"], 0)

    def test_unknown_ids_are_404(self):
        self.assertEqual(self.client.post("/api/v1/actions/dungeons/nope/start").status_code, 404)
        self.assertEqual(self.client.post("/api/v1/actions/quests/nope/claim").status_code, 404)
        self.assertEqual(self.client.post("/api/v1/actions/skills/nope/activate").status_code, 404)

    def test_dungeon_runs_once(self):
        self.assertEqual(self._post("/actions/dungeons/gold/start")["status"], "ok")
        self.assertEqual(self._post("/actions/dungeons/gold/start")["status"], "noop")

    def test_quest_start_reaches_event_feed(self):
        self.assertEqual(self._post("/actions/quests/q1_shadow_echo/start")["status"], "ok")
        events = self.client.get("/api/v1/events", params={"limit": 500}).json()["events"]
        self.assertIn("Quest Started: Shadow Echo", [e["message"] for e in events])

    def test_gate_generate_and_escape(self):
        body = self._post("/actions/gates/generate", json={"biome": "shadow_crypt", "depth": 3})
        self.assertEqual(body["status"], "ok")
        self.assertEqual(body["data"]["depth"], 3)
        self.assertEqual(len(body["data"]["floors"]), 3)
        self.assertEqual(self._post("/actions/gates/generate", json={"biome": "frost_cave"})["status"], "noop")

        body = self._post("/actions/gates/escape")
        self.assertEqual(body["status"], "ok")
        self.assertEqual(body["data"]["status"], "completed")
        self.assertEqual(self._post("/actions/gates/escape")["status"], "noop")

    def test_gate_depth_is_validated(self):
        resp = self.client.post("/api/v1/actions/gates/generate", json={"biome": "shadow_crypt", "depth": 0})
        self.assertEqual(resp.status_code, 422)

    def test_pause_step_resume(self):
        body = self._post("/control/pause")
        self.assertEqual(body["status"], "ok")
        self.assertTrue(body["paused"])
        body = self._post("/control/step", params={"ticks": 3})
        self.assertEqual(body["status"], "ok")
        self.assertTrue(body["paused"])
        body = self._post("/control/resume")
        self.assertEqual(body["status"], "ok")
        self.assertFalse(body["paused"])
        self.assertTrue(body["running"])

    def test_speed_shows_in_config(self):
        self.assertEqual(self._post("/speed", params={"scale": 10})["status"], "ok")
        cfg = self.client.get("/api/v1/config").json()
        self.assertEqual(cfg["time_scale"], 10.0)
        self.assertEqual(cfg["max_equipped_artifacts"], 3)

    def test_locked_monarch_is_noop(self):
        body = self._post("/actions/monarchs/shadow/select")
        self.assertEqual(body["status"], "noop")
