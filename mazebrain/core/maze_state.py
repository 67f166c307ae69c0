"""
MazeBrain world model.

In-memory snapshot of a multi-floor key/door maze as handed over by the host
once per decision tick.

Grid layout:
    Each floor is a square matrix of integer cell codes at doubled resolution.
    An N x N room grid is stored in a (2N+1) x (2N+1) matrix; room (x, y) lives
    at cell (2x+1, 2y+1), and the even-index "seams" between adjacent rooms hold
    walls, clear passages or doors. Rows are indexed by y, columns by x.

Cell codes:
    0 = Clear       4 = Key A
    1 = Wall        5 = Key B
    2 = Door A      6 = Start
    3 = Door B      7 = End (exit)
"""

import copy
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional


class MalformedSnapshotError(ValueError):
    """Exception raised when a snapshot cannot be searched."""

    pass


class CellCode(IntEnum):
    """Integer codes stored in the floor grid."""
    CLEAR = 0
    WALL = 1
    DOOR_A = 2
    DOOR_B = 3
    KEY_A = 4
    KEY_B = 5
    START = 6
    END = 7

    @classmethod
    def from_char(cls, char: str) -> "CellCode":
        """Convert a text map character to a CellCode."""
        mapping = {
            ".": cls.CLEAR,
            " ": cls.CLEAR,
            "X": cls.WALL,
            "A": cls.DOOR_A,
            "B": cls.DOOR_B,
            "a": cls.KEY_A,
            "b": cls.KEY_B,
            "S": cls.START,
            "E": cls.END,
        }
        if char not in mapping:
            raise ValueError(f"No cell code for character {char!r}")
        return mapping[char]

    @property
    def char(self) -> str:
        """Text map character for this code."""
        return ".XABabSE"[self.value]

    @property
    def is_door(self) -> bool:
        return self in (CellCode.DOOR_A, CellCode.DOOR_B)

    @property
    def is_key(self) -> bool:
        return self in (CellCode.KEY_A, CellCode.KEY_B)


class ItemColor(Enum):
    """Key and door colors. A key only opens doors of its own color."""
    A = 0
    B = 1

    @property
    def level(self) -> int:
        """Door level as reported by the host (0 for A, 1 for B)."""
        return self.value

    @property
    def door_code(self) -> CellCode:
        return CellCode(CellCode.DOOR_A + self.value)

    @property
    def key_code(self) -> CellCode:
        return CellCode(CellCode.KEY_A + self.value)

    @property
    def item_name(self) -> str:
        """Name of the carried consumable for this color."""
        return f"key_{self.name.lower()}"

    @classmethod
    def from_code(cls, code: int) -> Optional["ItemColor"]:
        """Color of a door or key code, None for anything else."""
        mapping = {
            CellCode.DOOR_A: cls.A,
            CellCode.DOOR_B: cls.B,
            CellCode.KEY_A: cls.A,
            CellCode.KEY_B: cls.B,
        }
        return mapping.get(code)


@dataclass(frozen=True)
class Position:
    """Room-grid position."""
    x: int
    y: int

    def offset(self, dx: int, dy: int) -> "Position":
        """Return the position shifted by (dx, dy)."""
        return Position(self.x + dx, self.y + dy)

    def delta_to(self, other: "Position") -> tuple[int, int]:
        """(dx, dy) needed to get from this position to other."""
        return other.x - self.x, other.y - self.y

    def to_cell(self) -> tuple[int, int]:
        """Cell-grid (column, row) of this room."""
        return self.x * 2 + 1, self.y * 2 + 1

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"x": self.x, "y": self.y}


# Separates the sub-path ending on a key from the sub-path resumed after
# the matching door was unlocked.
TRANSITION = Position(-1, -1)


@dataclass
class KeyItem:
    """A key lying on a room cell."""
    code: int
    x: int
    y: int
    available: bool = True

    @property
    def color(self) -> Optional[ItemColor]:
        return ItemColor.from_code(self.code)

    @property
    def position(self) -> Position:
        return Position(self.x, self.y)


@dataclass
class Door:
    """A door on a seam cell, addressed in cell-grid coordinates."""
    cell_x: int
    cell_y: int
    level: int
    locked: bool = True

    @property
    def code(self) -> CellCode:
        return CellCode(CellCode.DOOR_A + self.level)

    @property
    def color(self) -> ItemColor:
        return ItemColor(self.level)


@dataclass
class AgentState:
    """Agent position and the consumables it already carries."""
    x: int
    y: int
    consumable_items: dict[str, int] = field(default_factory=dict)

    @property
    def position(self) -> Position:
        return Position(self.x, self.y)

    def carried_keys(self) -> dict[ItemColor, int]:
        """Carried key counts per color."""
        return {
            color: self.consumable_items.get(color.item_name, 0)
            for color in ItemColor
        }


@dataclass
class FloorState:
    """One floor: the grid plus its doors and keys."""
    grid: list[list[int]]
    doors: list[Door] = field(default_factory=list)
    items: list[KeyItem] = field(default_factory=list)

    @property
    def room_size(self) -> int:
        """Number of rooms along one side."""
        return (len(self.grid) - 1) // 2

    def clone(self) -> "FloorState":
        """Deep copy for speculative mutation."""
        return FloorState(
            grid=[list(row) for row in self.grid],
            doors=[copy.copy(door) for door in self.doors],
            items=[copy.copy(item) for item in self.items],
        )


@dataclass
class MazeSnapshot:
    """Everything one solve call gets to see."""
    floors: list[FloorState]
    current_floor: int
    agent: AgentState
    is_won: bool = False

    @property
    def floor(self) -> FloorState:
        """The floor the agent is on."""
        return self.floors[self.current_floor]

    def clone(self) -> "MazeSnapshot":
        """Deep copy; the solver only ever mutates clones."""
        return MazeSnapshot(
            floors=[floor.clone() for floor in self.floors],
            current_floor=self.current_floor,
            agent=AgentState(
                x=self.agent.x,
                y=self.agent.y,
                consumable_items=dict(self.agent.consumable_items),
            ),
            is_won=self.is_won,
        )


def room_size(grid: list[list[int]]) -> int:
    """Number of rooms along one side of a doubled grid."""
    return (len(grid) - 1) // 2


def is_in_bounds(grid: list[list[int]], position: Position) -> bool:
    """Check that a room position lies inside the floor."""
    size = room_size(grid)
    return 0 <= position.x < size and 0 <= position.y < size


def find_exit(grid: list[list[int]]) -> Position:
    """
    Locate the exit room, scanning rows first.

    Raises:
        MalformedSnapshotError: If the floor has no exit.
    """
    size = room_size(grid)
    for y in range(size):
        for x in range(size):
            if grid[y * 2 + 1][x * 2 + 1] == CellCode.END:
                return Position(x, y)
    raise MalformedSnapshotError("Floor has no exit cell")


def validate_snapshot(snapshot: MazeSnapshot) -> Position:
    """
    Check that the current floor can be searched.

    Returns:
        The exit position on the current floor.

    Raises:
        MalformedSnapshotError: If the floor index, grid shape, agent position
            or exit are invalid.
    """
    if not 0 <= snapshot.current_floor < len(snapshot.floors):
        raise MalformedSnapshotError(
            f"Floor index {snapshot.current_floor} out of range "
            f"(snapshot has {len(snapshot.floors)} floors)"
        )

    grid = snapshot.floor.grid
    height = len(grid)
    if height < 3 or height % 2 == 0:
        raise MalformedSnapshotError(
            f"Grid must have an odd size of at least 3, got {height}"
        )
    for y, row in enumerate(grid):
        if len(row) != height:
            raise MalformedSnapshotError(
                f"Grid must be square: row {y} has {len(row)} cells, expected {height}"
            )

    if not is_in_bounds(grid, snapshot.agent.position):
        raise MalformedSnapshotError(
            f"Agent position ({snapshot.agent.x}, {snapshot.agent.y}) is outside "
            f"the {room_size(grid)}x{room_size(grid)} floor"
        )

    for door in snapshot.floor.doors:
        if not (0 <= door.cell_x < height and 0 <= door.cell_y < height):
            raise MalformedSnapshotError(
                f"Door at cell ({door.cell_x}, {door.cell_y}) is outside the grid"
            )
    for item in snapshot.floor.items:
        if not is_in_bounds(grid, item.position):
            raise MalformedSnapshotError(
                f"Key at room ({item.x}, {item.y}) is outside the floor"
            )

    return find_exit(grid)
