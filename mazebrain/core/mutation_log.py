"""Checkpoint/restore journal for speculative grid edits."""

import operator
from typing import Any, Callable


class MutationLog:
    """
    Records every speculative write so it can be undone in LIFO order.

    Example usage:
        log = MutationLog()
        mark = log.mark()
        log.set_cell(grid, col, row, CellCode.CLEAR)
        log.set_attr(door, "locked", False)
        log.rewind(mark)  # grid and door are back to their old values
    """

    def __init__(self):
        self._entries: list[tuple[Callable[[Any, Any, Any], None], Any, Any, Any]] = []

    def __len__(self) -> int:
        return len(self._entries)

    def mark(self) -> int:
        """Return a checkpoint that rewind() can return to."""
        return len(self._entries)

    def set_cell(self, grid: list[list[int]], col: int, row: int, code: int) -> None:
        """Write a grid cell, remembering its previous code."""
        cells = grid[row]
        self._entries.append((operator.setitem, cells, col, cells[col]))
        cells[col] = code

    def set_attr(self, target: Any, name: str, value: Any) -> None:
        """Set an attribute, remembering its previous value."""
        self._entries.append((setattr, target, name, getattr(target, name)))
        setattr(target, name, value)

    def rewind(self, mark: int = 0) -> int:
        """
        Undo every write recorded after mark.

        Returns:
            Number of writes undone.
        """
        undone = 0
        while len(self._entries) > mark:
            restore, target, key, old_value = self._entries.pop()
            restore(target, key, old_value)
            undone += 1
        return undone
