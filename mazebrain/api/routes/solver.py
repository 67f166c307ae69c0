"""Solver routes: one step per tick, override, and analysis.

Searches are CPU-bound, so they run in the threadpool. Each agent's session
lock keeps its cached plan consistent when requests for the same agent
overlap.
"""

import logging

from fastapi import APIRouter, HTTPException, status
from fastapi.concurrency import run_in_threadpool

from mazebrain.api.deps import Registry
from mazebrain.core.flood_fill import analyze
from mazebrain.core.maze_state import MalformedSnapshotError, MazeSnapshot
from mazebrain.core.moves import ActionStep
from mazebrain.schemas.snapshot import (
    AnalysisResponse,
    OverrideResponse,
    SnapshotPayload,
    StepResponse,
)
from mazebrain.services.solver_session import SolverSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/solver", tags=["Solver"])


def _take_step(session: SolverSession, snapshot: MazeSnapshot) -> tuple[ActionStep, bool, int]:
    """Solve under the session lock; returns (step, cached, remaining)."""
    with session.lock:
        cached = session.has_cached_step(snapshot.current_floor)
        step = session.solve(snapshot)
        return step, cached, session.remaining_steps


def _override(session: SolverSession) -> bool:
    with session.lock:
        invalidated = session.is_cached
        session.on_user_override()
        return invalidated


@router.post("/analyze", response_model=AnalysisResponse)
async def analyze_snapshot(request: SnapshotPayload) -> AnalysisResponse:
    """Flood-fill the current floor from the exit.

    Reports the agent's distance to the exit, the keys a route needs, which
    keys to fetch, and the next step when no keys are missing.
    """
    try:
        analysis = await run_in_threadpool(analyze, request.to_snapshot())
    except MalformedSnapshotError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )

    return AnalysisResponse.from_analysis(analysis)


@router.post("/{agent_id}/step", response_model=StepResponse)
async def next_step(
    agent_id: str,
    request: SnapshotPayload,
    registry: Registry,
) -> StepResponse:
    """Get the agent's next step.

    Served from the agent's cached plan when the floor is unchanged;
    otherwise a new plan is computed. A zero step means "do nothing".
    """
    session = registry.get_or_create(agent_id)
    snapshot = request.to_snapshot()

    try:
        step, cached, remaining = await run_in_threadpool(_take_step, session, snapshot)
    except MalformedSnapshotError as e:
        logger.warning(f"Rejected snapshot for agent {agent_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )

    return StepResponse(
        dx=step.dx,
        dy=step.dy,
        cached=cached,
        floor=snapshot.current_floor,
        remaining=remaining,
    )


@router.post("/{agent_id}/override", response_model=OverrideResponse)
async def report_override(agent_id: str, registry: Registry) -> OverrideResponse:
    """Report that a human took control; the next step is recomputed."""
    session = registry.get(agent_id)
    if session is None:
        return OverrideResponse(agent_id=agent_id, invalidated=False)

    invalidated = await run_in_threadpool(_override, session)
    return OverrideResponse(agent_id=agent_id, invalidated=invalidated)


@router.delete("/{agent_id}", status_code=status.HTTP_204_NO_CONTENT)
async def end_session(agent_id: str, registry: Registry) -> None:
    """Drop the agent's solver session."""
    if not registry.remove(agent_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No solver session for agent: {agent_id}",
        )
