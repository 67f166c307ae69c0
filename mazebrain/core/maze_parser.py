"""
Text maps for MazeBrain floors.

Builds FloorState objects from ASCII art of the doubled-resolution grid, and
renders them back for debugging.

Map Format:
    Each line is one grid row; row 0 is the first line. A floor with N x N
    rooms has 2N+1 lines of 2N+1 characters. Rooms sit at odd/odd indices,
    seams between them at the remaining odd/even indices.

    X = Wall            A = Door A (seam only)
    . = Clear           B = Door B (seam only)
    S = Start (room)    a = Key A (room only)
    E = Exit (room)     b = Key B (room only)
"""

from dataclasses import dataclass
from typing import Optional

from .maze_state import (
    AgentState,
    CellCode,
    Door,
    FloorState,
    KeyItem,
    MazeSnapshot,
    Position,
)


class MazeParseError(Exception):
    """Exception raised when map parsing fails."""

    pass


class MazeValidationError(Exception):
    """Exception raised when map validation fails."""

    pass


@dataclass
class ParsedFloor:
    """A parsed floor plus the rooms marked as start and exit."""

    floor: FloorState
    exit: Position
    start: Optional[Position] = None


VALID_CHARS = {"X", ".", " ", "A", "B", "a", "b", "S", "E"}
ROOM_ONLY_CHARS = {"a", "b", "S", "E"}
SEAM_ONLY_CHARS = {"A", "B"}


def parse_floor_text(floor_text: str) -> ParsedFloor:
    """
    Parse a floor map.

    Args:
        floor_text: Multi-line string of the doubled-resolution grid.

    Returns:
        ParsedFloor with doors and keys listed in row-major order, doors
        locked and keys available.

    Raises:
        MazeParseError: If the map is empty or not a square of odd size.
        MazeValidationError: If characters are invalid or misplaced, or the
            exit is missing or repeated.
    """
    if not floor_text or not floor_text.strip():
        raise MazeParseError("Map text is empty")

    lines = floor_text.strip().split("\n")
    size = len(lines)

    if size < 3 or size % 2 == 0:
        raise MazeParseError(f"Map must have an odd number of rows (at least 3), got {size}")

    for y, line in enumerate(lines):
        if len(line) != size:
            raise MazeParseError(
                f"Map must be square: row {y} has {len(line)} columns, expected {size}"
            )

    grid: list[list[int]] = []
    doors: list[Door] = []
    items: list[KeyItem] = []
    start_pos: Optional[Position] = None
    exit_pos: Optional[Position] = None

    for y, line in enumerate(lines):
        row = []
        for x, char in enumerate(line):
            if char not in VALID_CHARS:
                raise MazeValidationError(
                    f"Invalid character '{char}' at ({x}, {y}). "
                    f"Valid characters: {', '.join(sorted(VALID_CHARS - {' '}))}"
                )

            is_room = x % 2 == 1 and y % 2 == 1
            is_seam = (x % 2) != (y % 2)
            if char in ROOM_ONLY_CHARS and not is_room:
                raise MazeValidationError(f"'{char}' at ({x}, {y}) must be on a room cell")
            if char in SEAM_ONLY_CHARS and not is_seam:
                raise MazeValidationError(f"Door '{char}' at ({x}, {y}) must be on a seam cell")

            code = CellCode.from_char(char)
            row.append(int(code))

            if code.is_door:
                doors.append(Door(cell_x=x, cell_y=y, level=code - CellCode.DOOR_A))
            elif code.is_key:
                items.append(KeyItem(code=int(code), x=x // 2, y=y // 2))
            elif code == CellCode.START:
                if start_pos is not None:
                    raise MazeValidationError(
                        f"Multiple start positions found: "
                        f"first at {start_pos.to_dict()}, second at room ({x // 2}, {y // 2})"
                    )
                start_pos = Position(x // 2, y // 2)
            elif code == CellCode.END:
                if exit_pos is not None:
                    raise MazeValidationError(
                        f"Multiple exit positions found: "
                        f"first at {exit_pos.to_dict()}, second at room ({x // 2}, {y // 2})"
                    )
                exit_pos = Position(x // 2, y // 2)

        grid.append(row)

    if exit_pos is None:
        raise MazeValidationError("Map must have an exit position (E)")

    return ParsedFloor(
        floor=FloorState(grid=grid, doors=doors, items=items),
        exit=exit_pos,
        start=start_pos,
    )


def snapshot_from_text(
    *floor_texts: str,
    current_floor: int = 0,
    agent: Optional[Position] = None,
    carried: Optional[dict[str, int]] = None,
) -> MazeSnapshot:
    """
    Build a snapshot from one or more floor maps.

    Args:
        floor_texts: One map per floor.
        current_floor: Index of the floor the agent is on.
        agent: Agent room; defaults to the current floor's start (S).
        carried: Consumables the agent holds, e.g. {"key_a": 1}.

    Raises:
        MazeValidationError: If no agent position is given and the current
            floor has no start.
    """
    parsed = [parse_floor_text(text) for text in floor_texts]
    if agent is None:
        agent = parsed[current_floor].start
        if agent is None:
            raise MazeValidationError(
                "Map must have a start position (S) when no agent position is given"
            )

    return MazeSnapshot(
        floors=[p.floor for p in parsed],
        current_floor=current_floor,
        agent=AgentState(x=agent.x, y=agent.y, consumable_items=dict(carried or {})),
    )


def render_floor(floor: FloorState, agent: Optional[Position] = None) -> str:
    """
    Render a floor back to map text.

    Args:
        floor: Floor to render.
        agent: If provided, marks the agent's room with '@'.
    """
    agent_cell = agent.to_cell() if agent is not None else None
    lines = []
    for y, row in enumerate(floor.grid):
        line = ""
        for x, code in enumerate(row):
            if agent_cell == (x, y):
                line += "@"
            else:
                line += CellCode(code).char
        lines.append(line)

    return "\n".join(lines)


def validate_floor_text(floor_text: str) -> tuple[bool, Optional[str]]:
    """
    Validate a floor map without raising exceptions.

    Returns:
        Tuple of (is_valid, error_message).
        error_message is None if valid.
    """
    try:
        parse_floor_text(floor_text)
        return True, None
    except (MazeParseError, MazeValidationError) as e:
        return False, str(e)
