"""In-memory tower grid: occupancy, support rules and brick budget.

Coordinates follow the canvas: ``x`` grows to the right, ``y`` grows downward,
so the ground row is ``y == height - 1``. The grid is rebuilt per request
from the profile's persisted blocks and never shared between requests.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from dotlife.errors import EmptyBatchError, InsufficientBricksError, InvalidPlacementError
from dotlife.leaderboards.periods import utc_today

GRID_WIDTH = 120
GRID_HEIGHT = 80

PRESET_COLORS: tuple[str, ...] = (
    "#e2e8f0", "#cbd5e1", "#94a3b8", "#64748b", "#f1f5f9",
    "#fecaca", "#fde68a", "#bbf7d0", "#bfdbfe", "#ddd6fe",
    "#f87171", "#fbbf24", "#34d399", "#60a5fa", "#a78bfa",
    "#1e293b", "#881337", "#854d0e", "#14532d", "#1e3a8a",
)

HEX_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")

# up, down, left, right; diagonals never support a block
_NEIGHBOURS = ((0, -1), (0, 1), (-1, 0), (1, 0))


class PlacementMode(str, Enum):
    TOWER = "tower"
    FREE = "free"


@dataclass(frozen=True)
class Block:
    x: int
    y: int
    color: str
    build_date: date
    confirmed: bool = False


@dataclass
class TowerGrid:
    """Occupancy map plus the brick budget available for new drafts."""

    width: int = GRID_WIDTH
    height: int = GRID_HEIGHT
    mode: PlacementMode = PlacementMode.TOWER
    available_bricks: int = 0
    cells: dict[tuple[int, int], Block] = field(default_factory=dict)
    drafts: list[Block] = field(default_factory=list)

    @classmethod
    def from_blocks(
        cls,
        blocks: list[Block],
        *,
        available_bricks: int,
        width: int = GRID_WIDTH,
        height: int = GRID_HEIGHT,
        mode: PlacementMode = PlacementMode.TOWER,
    ) -> TowerGrid:
        """Load already persisted blocks without touching the budget."""
        grid = cls(width=width, height=height, mode=mode, available_bricks=available_bricks)
        for block in blocks:
            grid.cells[(block.x, block.y)] = block
        return grid

    @property
    def ground_row(self) -> int:
        return self.height - 1

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_occupied(self, x: int, y: int) -> bool:
        return (x, y) in self.cells

    def has_support(self, x: int, y: int) -> bool:
        if y == self.ground_row:
            return True
        return any((x + dx, y + dy) in self.cells for dx, dy in _NEIGHBOURS)

    def placement_error(self, x: int, y: int) -> str | None:
        """Return why (x, y) cannot take a block, or None if it can."""
        if not self.in_bounds(x, y):
            return "out of bounds"
        if self.is_occupied(x, y):
            return "cell is occupied"
        if self.mode is PlacementMode.TOWER and not self.has_support(x, y):
            return "no supporting block or ground"
        return None

    def can_place(self, x: int, y: int) -> bool:
        return self.placement_error(x, y) is None

    def place(self, x: int, y: int, color: str, build_date: date | None = None) -> bool:
        """Add a draft block if the cell is legal and a brick is available.

        Returns False (and changes nothing) when the placement is refused.
        """
        if self.available_bricks <= 0 or not self.can_place(x, y):
            return False
        block = Block(x=x, y=y, color=color, build_date=build_date or utc_today())
        self.cells[(x, y)] = block
        self.drafts.append(block)
        self.available_bricks -= 1
        return True

    def place_or_raise(self, x: int, y: int, color: str, build_date: date | None = None) -> Block:
        """Like place(), but reports the reason for a refusal."""
        if self.available_bricks <= 0:
            # the budget this batch started with was exactly len(drafts)
            raise InsufficientBricksError(needed=len(self.drafts) + 1, available=len(self.drafts))
        reason = self.placement_error(x, y)
        if reason is not None:
            raise InvalidPlacementError(x, y, reason)
        self.place(x, y, color, build_date)
        return self.drafts[-1]

    def place_batch(self, blocks: list[tuple[int, int, str, date | None]]) -> list[Block]:
        """Place a whole drawing, in whatever order lets each block find support.

        Blocks are retried until a pass places nothing new, so a drawing does
        not have to be submitted bottom-up. Nothing is rolled back on error;
        callers discard the grid.
        """
        if len(blocks) > self.available_bricks:
            raise InsufficientBricksError(needed=len(blocks), available=self.available_bricks)
        pending = list(blocks)
        while pending:
            stuck = [b for b in pending if not self.place(*b)]
            if len(stuck) == len(pending):
                x, y, _color, _day = stuck[0]
                raise InvalidPlacementError(x, y, self.placement_error(x, y) or "cannot place")
            pending = stuck
        return list(self.drafts)

    def undo(self) -> Block | None:
        """Remove the most recent draft and refund its brick."""
        if not self.drafts:
            return None
        block = self.drafts.pop()
        del self.cells[(block.x, block.y)]
        self.available_bricks += 1
        return block

    def confirmed_blocks(self) -> list[Block]:
        return [b for b in self.cells.values() if b.confirmed]


def is_valid_color(color: str) -> bool:
    return bool(HEX_COLOR_RE.match(color))


def confirm_batch(drafts: list[Block], available_bricks: int) -> tuple[list[Block], int]:
    """Mark a draft batch confirmed and charge one brick per block.

    Returns the confirmed blocks and the remaining budget. The batch is
    rejected whole if it is empty or larger than the budget.
    """
    if not drafts:
        raise EmptyBatchError()
    if len(drafts) > available_bricks:
        raise InsufficientBricksError(needed=len(drafts), available=available_bricks)
    confirmed = [
        Block(x=b.x, y=b.y, color=b.color, build_date=b.build_date, confirmed=True)
        for b in drafts
    ]
    return confirmed, available_bricks - len(drafts)


def tower_dimensions(blocks: list[Block]) -> tuple[int, int]:
    """Return (height, width) of the bounding box around the blocks."""
    if not blocks:
        return 0, 0
    ys = [b.y for b in blocks]
    xs = [b.x for b in blocks]
    return max(ys) - min(ys) + 1, max(xs) - min(xs) + 1
