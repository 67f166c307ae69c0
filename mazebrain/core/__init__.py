# Core module
from .maze_state import (
    TRANSITION,
    AgentState,
    CellCode,
    Door,
    FloorState,
    ItemColor,
    KeyItem,
    MalformedSnapshotError,
    MazeSnapshot,
    Position,
    find_exit,
    validate_snapshot,
)
from .moves import (
    NO_ACTION,
    ActionStep,
    Direction,
    MoveResult,
    classify_move,
    room_value,
)
from .path_search import PathSearch, SearchDepthExceeded, SearchLimits, SearchResult, find_path
from .flood_fill import Analysis, FloodFillInfo, analyze, flood_fill
from .actions import convert_path_to_actions
from .maze_parser import (
    MazeParseError,
    MazeValidationError,
    ParsedFloor,
    parse_floor_text,
    render_floor,
    snapshot_from_text,
    validate_floor_text,
)

__all__ = [
    "TRANSITION",
    "AgentState",
    "CellCode",
    "Door",
    "FloorState",
    "ItemColor",
    "KeyItem",
    "MalformedSnapshotError",
    "MazeSnapshot",
    "Position",
    "find_exit",
    "validate_snapshot",
    "NO_ACTION",
    "ActionStep",
    "Direction",
    "MoveResult",
    "classify_move",
    "room_value",
    "PathSearch",
    "SearchDepthExceeded",
    "SearchLimits",
    "SearchResult",
    "find_path",
    "Analysis",
    "FloodFillInfo",
    "analyze",
    "flood_fill",
    "convert_path_to_actions",
    "MazeParseError",
    "MazeValidationError",
    "ParsedFloor",
    "parse_floor_text",
    "render_floor",
    "snapshot_from_text",
    "validate_floor_text",
]
