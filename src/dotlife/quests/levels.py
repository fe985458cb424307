"""Quest rewards and level computation.

XP needed to advance from level n to n+1 is ``n * 100 + (n - 1) * 50``:
100, 250, 400, 550, ...
"""

from __future__ import annotations

DIFFICULTY_REWARDS: dict[str, dict[str, int]] = {
    "easy": {"xp": 10, "bricks": 1},
    "medium": {"xp": 20, "bricks": 2},
    "hard": {"xp": 30, "bricks": 3},
}

MAX_LEVEL = 100


def xp_for_level(level: int) -> int:
    """XP required to go from ``level`` to ``level + 1``."""
    return level * 100 + (level - 1) * 50


def compute_level(total_xp: int) -> dict:
    """Compute level info from total XP."""
    level = 1
    remaining = max(total_xp, 0)
    while level < MAX_LEVEL and remaining >= xp_for_level(level):
        remaining -= xp_for_level(level)
        level += 1

    return {
        "level": level,
        "current_xp": remaining,
        "xp_to_next_level": xp_for_level(level),
    }


def rewards_for(difficulty: str) -> dict[str, int]:
    """Return {"xp": ..., "bricks": ...} for a difficulty name."""
    try:
        return DIFFICULTY_REWARDS[difficulty]
    except KeyError:
        msg = f"Unknown difficulty: {difficulty}"
        raise ValueError(msg) from None
