"""
Move legality on a doubled-resolution floor grid.

A step between two adjacent rooms crosses exactly one seam cell. The seam
decides whether the step is free, blocked, or needs a key of a given color.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .maze_state import CellCode, ItemColor, Position, room_size


class Direction(Enum):
    """Unit steps, in the order the search evaluates them.

    The host's y axis grows "up", so UP increases the row index.
    """
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def delta(self) -> tuple[int, int]:
        """Get (dx, dy) for this direction."""
        deltas = {
            Direction.UP: (0, 1),
            Direction.DOWN: (0, -1),
            Direction.LEFT: (-1, 0),
            Direction.RIGHT: (1, 0),
        }
        return deltas[self]


DIRECTIONS = [Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT]


class MoveResult(Enum):
    """Outcome of trying to step from one room to the next."""
    BLOCKED = "blocked"
    FREE = "free"
    REQUIRES_KEY_A = "requires_key_a"
    REQUIRES_KEY_B = "requires_key_b"

    @property
    def required_color(self) -> Optional[ItemColor]:
        """Key color needed to cross, None when no key is involved."""
        if self is MoveResult.REQUIRES_KEY_A:
            return ItemColor.A
        if self is MoveResult.REQUIRES_KEY_B:
            return ItemColor.B
        return None


@dataclass(frozen=True)
class ActionStep:
    """One tick of agent input. The zero step means "do nothing"."""
    dx: int
    dy: int

    @property
    def delta(self) -> tuple[int, int]:
        return self.dx, self.dy

    @property
    def is_zero(self) -> bool:
        return self.dx == 0 and self.dy == 0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"dx": self.dx, "dy": self.dy}


NO_ACTION = ActionStep(0, 0)


def seam_position(position: Position, delta: tuple[int, int]) -> tuple[int, int]:
    """Cell-grid (column, row) of the seam crossed by stepping delta from position."""
    dx, dy = delta
    if dx != 0:
        return (position.x + (1 if dx == 1 else 0)) * 2, position.y * 2 + 1
    return position.x * 2 + 1, (position.y + (1 if dy == 1 else 0)) * 2


def seam_value(grid: list[list[int]], position: Position, delta: tuple[int, int]) -> int:
    """Code stored on the seam crossed by stepping delta from position."""
    col, row = seam_position(position, delta)
    return grid[row][col]


def room_value(grid: list[list[int]], position: Position) -> int:
    """Code of a room cell; anything outside the floor reads as clear."""
    size = room_size(grid)
    if not (0 <= position.x < size and 0 <= position.y < size):
        return CellCode.CLEAR
    return grid[position.y * 2 + 1][position.x * 2 + 1]


def classify_move(
    grid: list[list[int]],
    position: Position,
    delta: tuple[int, int],
) -> MoveResult:
    """
    Classify a single step.

    Args:
        grid: Doubled-resolution floor grid.
        position: Room the step starts from.
        delta: (dx, dy) of the step; only the four unit vectors are legal.

    Returns:
        BLOCKED for walls, illegal deltas and steps off the floor, FREE for a
        clear seam, REQUIRES_KEY_A/B for a door of that color.
    """
    dx, dy = delta
    if abs(dx) + abs(dy) != 1:
        return MoveResult.BLOCKED

    size = room_size(grid)
    nx, ny = position.x + dx, position.y + dy
    if not (0 <= nx < size and 0 <= ny < size):
        return MoveResult.BLOCKED

    value = seam_value(grid, position, delta)
    if value == CellCode.CLEAR:
        return MoveResult.FREE
    if value == CellCode.DOOR_A:
        return MoveResult.REQUIRES_KEY_A
    if value == CellCode.DOOR_B:
        return MoveResult.REQUIRES_KEY_B
    return MoveResult.BLOCKED
