"""Tests for the player avatar — leveling, ranks and derived stats."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from ascendant.core.player import Player, rank_for_level


class TestPlayerLeveling:
    def test_single_level(self):
        player = Player()
        assert player.gain_experience(250) == [2]
        assert player.experience == 0
        assert player.experience_to_next == 375
        assert player.skill_points == 1

    def test_multiple_levels_in_one_grant(self):
        player = Player()
        assert player.gain_experience(1_000) == [2, 3]
        assert player.experience == 375
        assert player.experience_to_next == 562
        assert player.skill_points == 2

    def test_huge_grant_leaves_remainder_below_threshold(self):
        for amount in (10**12, 10**15 + 7):
            player = Player()
            reached = player.gain_experience(amount)
            assert 0 <= player.experience < player.experience_to_next
            assert reached == list(range(2, player.level + 1))
            assert player.skill_points == len(reached)

    def test_no_level(self):
        player = Player()
        assert player.gain_experience(249) == []
        assert player.level == 1

    def test_reset(self):
        player = Player(level=50, experience=15_000, experience_to_next=25_000, skill_points=10)
        player.reset(250)
        assert (player.level, player.experience, player.experience_to_next, player.skill_points) == (1, 0, 250, 0)


class TestDerivedStats:
    def test_stats_scale_with_level(self):
        player = Player(level=50)
        assert (player.hp, player.attack, player.defense) == (7_500, 500, 250)

    def test_rank_breakpoints(self):
        assert rank_for_level(1) == "E"
        assert rank_for_level(10) == "D"
        assert rank_for_level(50) == "S"
        assert rank_for_level(99) == "SS"
        assert rank_for_level(100) == "SSS"

    def test_copy_is_independent(self):
        player = Player(level=5)
        clone = player.copy()
        clone.level = 6
        assert player.level == 5
