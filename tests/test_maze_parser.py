"""Tests for the floor map parser."""

import pytest

from mazebrain.core.maze_parser import (
    MazeParseError,
    MazeValidationError,
    ParsedFloor,
    parse_floor_text,
    render_floor,
    snapshot_from_text,
    validate_floor_text,
)
from mazebrain.core.maze_state import CellCode, Door, ItemColor, KeyItem, Position


KEY_MAZE = """XXXXXXX
XS..AEX
X.XXXXX
X.X.X.X
X.XXXXX
XaX.X.X
XXXXXXX"""

SMALL_MAZE = """XXXXX
XSBEX
X.X.X
XbXaX
XXXXX"""


class TestParseFloorText:
    """Tests for parse_floor_text."""

    def test_parse_key_maze(self):
        result = parse_floor_text(KEY_MAZE)

        assert isinstance(result, ParsedFloor)
        assert result.start == Position(0, 0)
        assert result.exit == Position(2, 0)
        assert result.floor.room_size == 3
        assert result.floor.doors == [Door(cell_x=4, cell_y=1, level=0, locked=True)]
        assert result.floor.items == [KeyItem(code=CellCode.KEY_A, x=0, y=2, available=True)]

    def test_grid_codes(self):
        grid = parse_floor_text(KEY_MAZE).floor.grid
        assert len(grid) == 7
        assert grid[1] == [1, 6, 0, 0, 2, 7, 1]
        assert grid[5][1] == CellCode.KEY_A

    def test_door_and_key_colors(self):
        floor = parse_floor_text(SMALL_MAZE).floor
        assert [door.color for door in floor.doors] == [ItemColor.B]
        assert [item.color for item in floor.items] == [ItemColor.B, ItemColor.A]
        assert [item.position for item in floor.items] == [Position(0, 1), Position(1, 1)]

    def test_start_is_optional(self):
        result = parse_floor_text(KEY_MAZE.replace("S", "."))
        assert result.start is None

    def test_empty_map_raises_error(self):
        with pytest.raises(MazeParseError, match="empty"):
            parse_floor_text("   \n  ")

    def test_even_size_raises_error(self):
        with pytest.raises(MazeParseError, match="odd number of rows"):
            parse_floor_text("XXXX\nXSEX\nX..X\nXXXX")

    def test_non_square_raises_error(self):
        with pytest.raises(MazeParseError, match="square"):
            parse_floor_text("XXXXX\nXSEX\nX...X\nX...X\nXXXXX")

    def test_invalid_char_raises_error(self):
        with pytest.raises(MazeValidationError, match="Invalid character"):
            parse_floor_text(KEY_MAZE.replace("XaX", "X?X"))

    def test_door_on_room_raises_error(self):
        with pytest.raises(MazeValidationError, match="seam"):
            parse_floor_text(KEY_MAZE.replace("XaX", "XAX"))

    def test_key_on_seam_raises_error(self):
        with pytest.raises(MazeValidationError, match="room"):
            parse_floor_text(KEY_MAZE.replace("XS..AEX", "XSa.AEX"))

    def test_missing_exit_raises_error(self):
        with pytest.raises(MazeValidationError, match="exit position"):
            parse_floor_text(KEY_MAZE.replace("E", "."))

    def test_multiple_exits_raise_error(self):
        with pytest.raises(MazeValidationError, match="Multiple exit"):
            parse_floor_text(KEY_MAZE.replace("XaX", "XEX"))

    def test_multiple_starts_raise_error(self):
        with pytest.raises(MazeValidationError, match="Multiple start"):
            parse_floor_text(KEY_MAZE.replace("XaX", "XSX"))


class TestSnapshotFromText:
    """Tests for snapshot_from_text."""

    def test_agent_defaults_to_start(self):
        snapshot = snapshot_from_text(KEY_MAZE)
        assert snapshot.agent.position == Position(0, 0)
        assert snapshot.current_floor == 0
        assert len(snapshot.floors) == 1

    def test_explicit_agent_and_carried_keys(self):
        snapshot = snapshot_from_text(
            KEY_MAZE, SMALL_MAZE,
            current_floor=1,
            agent=Position(1, 1),
            carried={"key_b": 2},
        )
        assert snapshot.floor.room_size == 2
        assert snapshot.agent.position == Position(1, 1)
        assert snapshot.agent.carried_keys() == {ItemColor.A: 0, ItemColor.B: 2}

    def test_no_start_and_no_agent_raises_error(self):
        with pytest.raises(MazeValidationError, match="start position"):
            snapshot_from_text(KEY_MAZE.replace("S", "."))


class TestRenderFloor:
    """Tests for render_floor."""

    def test_render_matches_source(self):
        assert render_floor(parse_floor_text(KEY_MAZE).floor) == KEY_MAZE

    def test_render_marks_agent(self):
        text = render_floor(parse_floor_text(KEY_MAZE).floor, agent=Position(1, 0))
        assert text.split("\n")[1] == "XS.@AEX"


class TestValidateFloorText:
    """Tests for the validation helper."""

    def test_valid_map(self):
        assert validate_floor_text(KEY_MAZE) == (True, None)

    def test_invalid_map(self):
        is_valid, error = validate_floor_text(KEY_MAZE.replace("E", "."))
        assert is_valid is False
        assert "exit position" in error
