"""
Breadth-first path search with key/door backtracking.

The search walks free seams breadth-first. Whenever it stands on a key it
tries that key on every locked door of the same color: the key is picked up,
the door opened, and a fresh search is started from the key cell. The first
trial that reaches the destination wins; failed trials are rewound through a
MutationLog so the floor is exactly as it was before the trial.

Doors crossed with a key the agent already carries are opened for good within
the branch that crossed them.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Optional

from .maze_state import TRANSITION, CellCode, Door, FloorState, ItemColor, Position
from .moves import DIRECTIONS, MoveResult, classify_move, room_value, seam_position
from .mutation_log import MutationLog

logger = logging.getLogger(__name__)


class SearchDepthExceeded(RuntimeError):
    """Exception raised when a search branch runs past its limits."""

    pass


@dataclass(frozen=True)
class SearchLimits:
    """Bounds that keep a single search from running away."""
    max_depth: int = 64  # nested key trials
    max_expansions: int = 250_000  # rooms dequeued, summed over all branches


@dataclass
class SearchResult:
    """Outcome of one PathSearch.find_path call."""
    path: list[Position]
    remaining_keys: dict[ItemColor, int] = field(default_factory=dict)
    inconclusive: bool = False
    expansions: int = 0
    trials: int = 0

    @property
    def found(self) -> bool:
        return bool(self.path)


class PathSearch:
    """
    Path search over one floor.

    The floor passed in is mutated while searching and must be a clone the
    caller owns. On failure it is rewound to its original state; on success
    it keeps the doors and keys used by the winning branch.

    Example usage:
        search = PathSearch(snapshot.clone().floor)
        result = search.find_path(source, exit_position, carried_keys)
        if result.found:
            steps = convert_path_to_actions(snapshot.floor.grid, result.path)
    """

    def __init__(
        self,
        floor: FloorState,
        limits: Optional[SearchLimits] = None,
        log: Optional[MutationLog] = None,
    ):
        self.floor = floor
        self.limits = limits or SearchLimits()
        self.log = log or MutationLog()
        self.expansions = 0
        self.trials = 0
        self.inconclusive = False
        self._doors: dict[tuple[int, int], Door] = {
            (door.cell_x, door.cell_y): door for door in floor.doors
        }

    def find_path(
        self,
        source: Position,
        destination: Position,
        carried: Optional[dict[ItemColor, int]] = None,
    ) -> SearchResult:
        """
        Find a path from source to destination.

        Args:
            source: Room to start from.
            destination: Room to reach.
            carried: Keys already held, per color.

        Returns:
            SearchResult. An empty path means no route was found; when it is
            also inconclusive, a limit cut the search short.
        """
        self.expansions = 0
        self.trials = 0
        self.inconclusive = False

        keys = {color: 0 for color in ItemColor}
        if carried:
            keys.update(carried)

        mark = self.log.mark()
        try:
            path, remaining = self._search(source, destination, dict(keys), depth=0)
        except SearchDepthExceeded as e:
            logger.warning(f"Search from {source.to_dict()} abandoned: {e}")
            self.inconclusive = True
            path, remaining = [], keys
        except RecursionError:
            logger.warning(
                f"Search from {source.to_dict()} abandoned: key trials nested "
                f"deeper than the interpreter stack allows"
            )
            self.inconclusive = True
            path, remaining = [], keys

        if path:
            # Only an empty result is inconclusive
            self.inconclusive = False
        else:
            self.log.rewind(mark)
            remaining = keys

        logger.debug(
            f"Search {source.to_dict()} -> {destination.to_dict()}: "
            f"{'found' if path else 'no path'} after {self.expansions} expansions, "
            f"{self.trials} key trials"
        )
        return SearchResult(
            path=path,
            remaining_keys=remaining,
            inconclusive=self.inconclusive,
            expansions=self.expansions,
            trials=self.trials,
        )

    def _search(
        self,
        source: Position,
        destination: Position,
        keys: dict[ItemColor, int],
        depth: int,
    ) -> tuple[list[Position], dict[ItemColor, int]]:
        if depth > self.limits.max_depth:
            raise SearchDepthExceeded(
                f"key trial depth {depth} exceeds limit {self.limits.max_depth}"
            )

        grid = self.floor.grid
        frontier = deque([source])
        visited: set[Position] = set()
        predecessor: dict[Position, Position] = {}

        while frontier:
            current = frontier.popleft()
            if current == destination:
                return self._trace(predecessor, source, current), keys

            self.expansions += 1
            if self.expansions > self.limits.max_expansions:
                raise SearchDepthExceeded(
                    f"expanded more than {self.limits.max_expansions} rooms"
                )
            visited.add(current)

            found = self._try_key(current, destination, keys, depth)
            if found is not None:
                sub_path, sub_keys = found
                return self._trace(predecessor, source, current) + [TRANSITION] + sub_path, sub_keys

            for direction in DIRECTIONS:
                delta = direction.delta
                neighbor = current.offset(*delta)
                if neighbor in visited or neighbor in predecessor:
                    continue

                move = classify_move(grid, current, delta)
                if move is MoveResult.BLOCKED:
                    continue

                color = move.required_color
                if color is not None:
                    if keys[color] <= 0:
                        continue
                    keys[color] -= 1
                    self._open_seam(current, delta)

                predecessor[neighbor] = current
                frontier.append(neighbor)

        return [], keys

    def _try_key(
        self,
        position: Position,
        destination: Position,
        keys: dict[ItemColor, int],
        depth: int,
    ) -> Optional[tuple[list[Position], dict[ItemColor, int]]]:
        """Try the key lying at position on every locked door of its color."""
        grid = self.floor.grid
        code = room_value(grid, position)
        if code not in (CellCode.KEY_A, CellCode.KEY_B):
            return None

        key = next(
            (
                item for item in self.floor.items
                if item.available and item.code == code and item.position == position
            ),
            None,
        )
        if key is None:
            logger.debug(f"Key cell at {position.to_dict()} has no matching item")
            return None

        color = key.color
        key_col, key_row = position.to_cell()
        for door in self.floor.doors:
            if not door.locked or door.color is not color:
                continue

            self.trials += 1
            mark = self.log.mark()
            self.log.set_attr(key, "available", False)
            self.log.set_attr(door, "locked", False)
            self.log.set_cell(grid, key_col, key_row, CellCode.CLEAR)
            self.log.set_cell(grid, door.cell_x, door.cell_y, CellCode.CLEAR)
            logger.debug(
                f"Trying key {color.name} at {position.to_dict()} on door "
                f"({door.cell_x}, {door.cell_y}), depth {depth + 1}"
            )

            try:
                sub_path, sub_keys = self._search(position, destination, dict(keys), depth + 1)
            except SearchDepthExceeded as e:
                logger.warning(f"Key trial at {position.to_dict()} inconclusive: {e}")
                self.inconclusive = True
                sub_path, sub_keys = [], keys

            if sub_path:
                return sub_path, sub_keys
            self.log.rewind(mark)

        return None

    def _open_seam(self, position: Position, delta: tuple[int, int]) -> None:
        """Spend a carried key on the door crossed by stepping delta."""
        col, row = seam_position(position, delta)
        self.log.set_cell(self.floor.grid, col, row, CellCode.CLEAR)
        door = self._doors.get((col, row))
        if door is not None and door.locked:
            self.log.set_attr(door, "locked", False)

    @staticmethod
    def _trace(
        predecessor: dict[Position, Position],
        source: Position,
        target: Position,
    ) -> list[Position]:
        """Walk predecessors back from target to source."""
        path = [target]
        position = target
        while position != source:
            position = predecessor[position]
            path.append(position)
        path.reverse()
        return path


def find_path(
    floor: FloorState,
    source: Position,
    destination: Position,
    carried: Optional[dict[ItemColor, int]] = None,
    limits: Optional[SearchLimits] = None,
) -> SearchResult:
    """Run a PathSearch on floor (which is mutated; pass a clone)."""
    return PathSearch(floor, limits=limits).find_path(source, destination, carried)
