"""Quest rewards and level curve."""

import pytest

from dotlife.quests.levels import DIFFICULTY_REWARDS, MAX_LEVEL, compute_level, rewards_for, xp_for_level


class TestLevelCurve:
    def test_level_1_at_zero_xp(self):
        assert compute_level(0) == {"level": 1, "current_xp": 0, "xp_to_next_level": 100}

    def test_boundary_99_xp(self):
        assert compute_level(99)["level"] == 1

    def test_level_2_at_100_xp(self):
        result = compute_level(100)
        assert result["level"] == 2
        assert result["current_xp"] == 0
        assert result["xp_to_next_level"] == 250

    def test_level_3_at_350_xp(self):
        assert compute_level(350)["level"] == 3

    def test_xp_into_level(self):
        assert compute_level(120)["current_xp"] == 20

    def test_curve_values(self):
        assert [xp_for_level(n) for n in (1, 2, 3, 4)] == [100, 250, 400, 550]

    def test_capped_at_max_level(self):
        assert compute_level(10**9)["level"] == MAX_LEVEL

    def test_negative_xp_treated_as_zero(self):
        assert compute_level(-5)["level"] == 1


class TestRewards:
    @pytest.mark.parametrize("difficulty,xp,bricks", [("easy", 10, 1), ("medium", 20, 2), ("hard", 30, 3)])
    def test_table(self, difficulty, xp, bricks):
        assert rewards_for(difficulty) == {"xp": xp, "bricks": bricks}

    def test_unknown_difficulty(self):
        with pytest.raises(ValueError, match="Unknown difficulty"):
            rewards_for("legendary")

    def test_table_has_three_tiers(self):
        assert set(DIFFICULTY_REWARDS) == {"easy", "medium", "hard"}
