"""
Flood-fill distance and key-requirement analysis.

Floods a floor from one room (usually the exit) and records, for every room
reached, how far it is and how many keys of each color a route through it
needs. Doors count as passable but add one key of their color to the tally,
unless the fill is told to stop at doors.

This does not move the agent; it answers questions like "how many keys do
I still need" and "which key should be fetched first".
"""

from collections import Counter, deque
from dataclasses import dataclass, field
from typing import Iterable, Optional

from .maze_state import (
    CellCode,
    FloorState,
    ItemColor,
    KeyItem,
    MazeSnapshot,
    Position,
    validate_snapshot,
)
from .moves import DIRECTIONS, ActionStep, MoveResult, classify_move, room_value


@dataclass
class CellInfo:
    """Best route found so far through one room."""
    distance: int
    required_keys: Counter = field(default_factory=Counter)
    previous: Optional[Position] = None


@dataclass(frozen=True)
class KeyPosition:
    """A key found by the flood, by color and room."""
    color: ItemColor
    position: Position

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"color": self.color.name, **self.position.to_dict()}


@dataclass
class FloodFillInfo:
    """Result of a flood fill."""
    source: Position
    cells: dict[Position, CellInfo]
    key_positions: list[KeyPosition] = field(default_factory=list)


@dataclass
class Analysis:
    """What the agent needs to reach the exit from where it stands."""
    reachable: bool
    distance: Optional[int] = None
    required_keys: dict[ItemColor, int] = field(default_factory=dict)
    missing_keys: dict[ItemColor, int] = field(default_factory=dict)
    keys_to_fetch: list[KeyPosition] = field(default_factory=list)
    next_step: Optional[ActionStep] = None


def flood_fill(
    floor: FloorState,
    source: Position,
    blocked_by_doors: bool = False,
) -> FloodFillInfo:
    """
    Flood the floor from source.

    Args:
        floor: Floor to analyze; it is only read.
        source: Room the flood starts from.
        blocked_by_doors: Treat doors as walls instead of key requirements.

    Returns:
        FloodFillInfo mapping every reached room to its CellInfo.
    """
    grid = floor.grid
    cells: dict[Position, CellInfo] = {source: CellInfo(distance=0)}
    keys: dict[KeyPosition, None] = {}
    queue = deque([(source, cells[source])])

    while queue:
        current, current_info = queue.popleft()
        for direction in DIRECTIONS:
            delta = direction.delta
            move = classify_move(grid, current, delta)
            if move is MoveResult.BLOCKED:
                continue

            neighbor = current.offset(*delta)
            info = CellInfo(
                distance=current_info.distance + 1,
                required_keys=Counter(current_info.required_keys),
                previous=current,
            )

            color = move.required_color
            if color is not None:
                if blocked_by_doors:
                    continue
                info.required_keys[color] += 1
            else:
                code = room_value(grid, neighbor)
                if code in (CellCode.KEY_A, CellCode.KEY_B):
                    keys.setdefault(KeyPosition(ItemColor.from_code(code), neighbor))

            best = cells.get(neighbor)
            if best is None or info.distance < best.distance:
                cells[neighbor] = info
                queue.append((neighbor, info))

    return FloodFillInfo(source=source, cells=cells, key_positions=list(keys))


def trace_path(info: FloodFillInfo, start: Position) -> list[Position]:
    """
    Follow previous links from start back to the flood source.

    Raises:
        ValueError: If start was never reached by the flood.
    """
    if start not in info.cells:
        raise ValueError(f"Room {start.to_dict()} was not reached by the flood fill")

    path = [start]
    position = start
    while info.cells[position].previous is not None:
        position = info.cells[position].previous
        path.append(position)
    return path


def required_key_requests(
    required: dict[ItemColor, int],
    items: Iterable[KeyItem],
) -> list[KeyPosition]:
    """Pick available keys, first found per color, to cover required."""
    available = [item for item in items if item.available and item.color is not None]
    result = []
    for color, quantity in required.items():
        if quantity <= 0:
            continue
        for item in available:
            if item.color is not color:
                continue
            result.append(KeyPosition(color, item.position))
            quantity -= 1
            if quantity <= 0:
                break
    return result


def analyze(snapshot: MazeSnapshot) -> Analysis:
    """
    Work out how the agent stands relative to the exit on its current floor.

    Raises:
        MalformedSnapshotError: If the snapshot cannot be searched.
    """
    exit_position = validate_snapshot(snapshot)
    floor = snapshot.floor
    agent = snapshot.agent.position

    info = flood_fill(floor, exit_position)
    entry = info.cells.get(agent)
    if entry is None:
        return Analysis(reachable=False)

    carried = snapshot.agent.carried_keys()
    required = {color: count for color, count in entry.required_keys.items() if count > 0}
    missing = {
        color: count - carried.get(color, 0)
        for color, count in required.items()
        if count > carried.get(color, 0)
    }

    next_step = None
    if not missing and entry.previous is not None:
        next_step = ActionStep(*agent.delta_to(entry.previous))

    return Analysis(
        reachable=True,
        distance=entry.distance,
        required_keys=required,
        missing_keys=missing,
        keys_to_fetch=required_key_requests(missing, floor.items),
        next_step=next_step,
    )
