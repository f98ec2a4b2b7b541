"""Tests for the virtual-clock scheduler — ordering, rekeying and teardown."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from ascendant.systems.scheduler import Scheduler


class _Recorder:
    """Collects (label, time) pairs as callbacks fire."""

    def __init__(self, scheduler: Scheduler):
        self.scheduler = scheduler
        self.calls: list[tuple[str, float]] = []

    def cb(self, label: str):
        return lambda: self.calls.append((label, self.scheduler.now))


class TestRepeating:
    def test_fires_every_interval(self):
        s = Scheduler()
        rec = _Recorder(s)
        s.call_every("tick", 2.0, rec.cb("tick"))
        assert s.advance(5.0) == 2
        assert rec.calls == [("tick", 2.0), ("tick", 4.0)]
        assert s.now == 5.0
        assert s.remaining("tick") == 1.0

    def test_callback_can_cancel_itself(self):
        s = Scheduler()
        count = []

        def once_then_stop():
            count.append(1)
            s.cancel("self")

        s.call_every("self", 1.0, once_then_stop)
        s.advance(10.0)
        assert len(count) == 1
        assert not s.is_active("self")

    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            Scheduler().call_every("bad", 0, lambda: None)


class TestOneShot:
    def test_fires_once_and_releases_key(self):
        s = Scheduler()
        rec = _Recorder(s)
        s.call_later("once", 3.0, rec.cb("once"))
        s.advance(10.0)
        assert rec.calls == [("once", 3.0)]
        assert not s.is_active("once")
        assert s.remaining("once") is None

    def test_rekey_restarts(self):
        s = Scheduler()
        rec = _Recorder(s)
        s.call_later("note", 5.0, rec.cb("first"))
        s.advance(3.0)
        s.call_later("note", 5.0, rec.cb("second"))
        s.advance(3.0)
        assert rec.calls == []
        s.advance(2.0)
        assert rec.calls == [("second", 8.0)]

    def test_rejects_negative_delay(self):
        with pytest.raises(ValueError):
            Scheduler().call_later("bad", -1, lambda: None)


class TestOrdering:
    def test_due_time_order(self):
        s = Scheduler()
        rec = _Recorder(s)
        s.call_later("b", 2.0, rec.cb("b"))
        s.call_later("a", 1.0, rec.cb("a"))
        s.advance(3.0)
        assert [label for label, _ in rec.calls] == ["a", "b"]

    def test_ties_fire_in_scheduling_order(self):
        s = Scheduler()
        rec = _Recorder(s)
        for label in ("x", "y", "z"):
            s.call_later(label, 1.0, rec.cb(label))
        s.advance(1.0)
        assert [label for label, _ in rec.calls] == ["x", "y", "z"]

    def test_callbacks_scheduled_mid_advance_fire_in_same_advance(self):
        s = Scheduler()
        rec = _Recorder(s)
        s.call_later("first", 1.0, lambda: s.call_later("second", 1.0, rec.cb("second")))
        s.advance(5.0)
        assert rec.calls == [("second", 2.0)]

    def test_negative_advance_rejected(self):
        with pytest.raises(ValueError):
            Scheduler().advance(-0.5)


class TestTeardown:
    def test_cancel_all_stops_everything(self):
        s = Scheduler()
        rec = _Recorder(s)
        s.call_every("a", 1.0, rec.cb("a"))
        s.call_later("b", 2.0, rec.cb("b"))
        assert s.cancel_all() == 2
        assert s.advance(100.0) == 0
        assert rec.calls == []
        assert s.active_keys == []

    def test_cancel_unknown_key(self):
        assert not Scheduler().cancel("nothing")

    def test_active_keys_sorted(self):
        s = Scheduler()
        s.call_every("raid:timer", 1.0, lambda: None)
        s.call_every("combat", 2.0, lambda: None)
        assert s.active_keys == ["combat", "raid:timer"]
