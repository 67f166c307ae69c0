"""Per-agent solver sessions that serve a cached plan one step per tick."""

import logging
import threading
from dataclasses import dataclass
from typing import Optional

from mazebrain.core.actions import convert_path_to_actions
from mazebrain.core.maze_state import MazeSnapshot, Position, validate_snapshot
from mazebrain.core.moves import NO_ACTION, ActionStep
from mazebrain.core.path_search import PathSearch, SearchLimits, SearchResult

logger = logging.getLogger(__name__)


@dataclass
class Plan:
    """A computed route and the steps that walk it."""

    floor: int
    path: list[Position]
    steps: list[ActionStep]
    inconclusive: bool = False


class SolverSession:
    """
    Caches the step sequence for the agent's current floor.

    The cache is dropped when the floor changes, when every step has been
    served, and when the host reports that a human took over.

    Example usage:
        session = SolverSession()
        step = session.solve(snapshot)      # computes and returns step 0
        step = session.solve(snapshot)      # returns step 1 from the cache
        session.on_user_override()          # next solve recomputes
    """

    def __init__(self, limits: Optional[SearchLimits] = None):
        self.limits = limits or SearchLimits()
        # Held by hosts that call solve from worker threads
        self.lock = threading.Lock()
        self.recompute_count = 0
        self.last_result: Optional[SearchResult] = None
        self._floor: Optional[int] = None
        self._steps: list[ActionStep] = []
        self._cursor = 0

    @property
    def is_cached(self) -> bool:
        """Whether a plan is held, even if fully served."""
        return self._floor is not None

    @property
    def remaining_steps(self) -> int:
        return len(self._steps) - self._cursor if self.is_cached else 0

    def has_cached_step(self, floor: int) -> bool:
        """Whether the next solve on floor is served from the cache."""
        return self._floor == floor and self._cursor < len(self._steps)

    def solve(self, snapshot: MazeSnapshot) -> ActionStep:
        """
        Return the agent's next step.

        Args:
            snapshot: World state for this tick; it is never modified.

        Returns:
            The next ActionStep, or NO_ACTION when no route exists.

        Raises:
            MalformedSnapshotError: If the snapshot cannot be searched.
        """
        if self.has_cached_step(snapshot.current_floor):
            step = self._steps[self._cursor]
            self._cursor += 1
            return step

        plan = self.plan(snapshot)
        if not plan.steps:
            self.invalidate_cache()
            return NO_ACTION

        self._floor = plan.floor
        self._steps = plan.steps
        self._cursor = 1
        return plan.steps[0]

    def plan(self, snapshot: MazeSnapshot) -> Plan:
        """Compute a fresh plan for the snapshot without touching the cache."""
        destination = validate_snapshot(snapshot)
        self.recompute_count += 1

        working = snapshot.clone()
        search = PathSearch(working.floor, limits=self.limits)
        result = search.find_path(
            working.agent.position,
            destination,
            working.agent.carried_keys(),
        )
        self.last_result = result

        # Doors read from the untouched floor, so crossings still count as doors.
        steps = convert_path_to_actions(snapshot.floor.grid, result.path)

        logger.info(
            f"Planned floor {snapshot.current_floor} from {snapshot.agent.position.to_dict()}: "
            f"{len(steps)} steps, {result.trials} key trials"
            + (" (inconclusive)" if result.inconclusive else "")
        )
        return Plan(
            floor=snapshot.current_floor,
            path=result.path,
            steps=steps,
            inconclusive=result.inconclusive,
        )

    def invalidate_cache(self) -> None:
        """Drop the cached plan."""
        self._floor = None
        self._steps = []
        self._cursor = 0

    def on_user_override(self) -> None:
        """Host callback: a human took control of the agent."""
        logger.info("User override reported, dropping cached plan")
        self.invalidate_cache()

    def poll(self, override_active: bool) -> bool:
        """
        Per-tick hook for hosts that poll instead of calling back.

        Returns:
            True if the cache was invalidated.
        """
        if override_active and self.is_cached:
            self.on_user_override()
            return True
        return False


class SessionRegistry:
    """Owns one SolverSession per agent id."""

    def __init__(self, limits: Optional[SearchLimits] = None):
        self.limits = limits or SearchLimits()
        self._sessions: dict[str, SolverSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, agent_id: str) -> bool:
        return agent_id in self._sessions

    def get(self, agent_id: str) -> Optional[SolverSession]:
        """Get a session by agent id."""
        return self._sessions.get(agent_id)

    def get_or_create(self, agent_id: str) -> SolverSession:
        """Get the agent's session, creating it on first use."""
        session = self._sessions.get(agent_id)
        if session is None:
            session = SolverSession(limits=self.limits)
            self._sessions[agent_id] = session
            logger.info(f"Created solver session for agent {agent_id}")
        return session

    def remove(self, agent_id: str) -> bool:
        """End and remove a session."""
        if agent_id in self._sessions:
            del self._sessions[agent_id]
            return True
        return False

    def clear(self) -> None:
        self._sessions.clear()


if __name__ == "__main__":
    from mazebrain.core.maze_parser import render_floor, snapshot_from_text

    # Quick test
    demo = snapshot_from_text(
        """
XXXXXXX
XS..AEX
X.XXXXX
X.X.X.X
X.XXXXX
XaX.X.X
XXXXXXX
""".strip()
    )
    print("Floor:")
    print(render_floor(demo.floor, agent=demo.agent.position))

    session = SolverSession()
    plan = session.plan(demo)
    print(f"\nPath: {[p.to_dict() for p in plan.path]}")
    print(f"Steps: {[s.to_dict() for s in plan.steps]}")
